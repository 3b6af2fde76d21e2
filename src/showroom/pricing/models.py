"""Data models for the vehicle margin calculator."""

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from showroom.pricing.vat import coerce_amount


class AdditionalCostMode(str, Enum):
    """How an additional cost item is priced."""

    FIXED_EUR = "fixed_eur"
    PERCENT_OF_NET_PLUS_FINANCING = "percent_of_net_plus_financing"


class FixedEurCost(BaseModel):
    """Flat net EUR amount per vehicle (e.g. registration, detailing)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    mode: Literal["fixed_eur"] = "fixed_eur"
    description: str
    value_eur_net: float = Field(0.0, ge=0, alias="valueEurNet")


class PercentOfBaseCost(BaseModel):
    """Percentage of (net purchase EUR + financing EUR)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    mode: Literal["percent_of_net_plus_financing"] = "percent_of_net_plus_financing"
    description: str
    percent_value: float = Field(0.0, ge=0, alias="percentValue")


AdditionalCostItem = Annotated[
    Union[FixedEurCost, PercentOfBaseCost],
    Field(discriminator="mode"),
]


class VehicleMarginInput(BaseModel):
    """Inputs for one vehicle's margin breakdown.

    Accepts snake_case names or the camelCase names used by stored partner
    configuration and the admin frontend. ``additional_costs_eur`` takes
    precedence over ``additional_cost_items`` when both are given.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    purchase_gross_pln: float = Field(0.0, description="Purchase price incl. 23% VAT (PLN)")
    exchange_rate_pln_per_eur: float = Field(0.0, description="PLN per 1 EUR")
    financing_cost_percent: float = Field(0.0, description="Financing surcharge on net EUR")
    additional_cost_items: list[Any] | None = Field(
        None, description="Raw partner cost items, normalized before use"
    )
    additional_costs_eur: float | None = Field(
        None, description="Precomputed additional costs (EUR), skips the items"
    )
    transport_cost_eur: float = Field(0.0, description="Per-vehicle transport cost (EUR)")
    sale_gross_eur: float = Field(0.0, description="Sale price incl. 18% VAT (EUR)")

    @field_validator(
        "purchase_gross_pln",
        "exchange_rate_pln_per_eur",
        "financing_cost_percent",
        "transport_cost_eur",
        "sale_gross_eur",
        mode="before",
    )
    @classmethod
    def missing_amount_as_zero(cls, v: Any) -> float:
        # Half-filled forms send null or "" while editing
        return coerce_amount(v)

    @field_validator("additional_costs_eur", mode="before")
    @classmethod
    def optional_amount(cls, v: Any) -> float | None:
        if v is None:
            return None
        return coerce_amount(v)

    @field_validator("additional_cost_items", mode="before")
    @classmethod
    def cost_items_list(cls, v: Any) -> list[Any] | None:
        if isinstance(v, (list, tuple)):
            return list(v)
        return None


class VehicleMarginBreakdown(BaseModel):
    """Audit-ready cost and margin breakdown for one vehicle."""

    model_config = ConfigDict(frozen=True)

    purchase_net_pln: float
    vat_pln: float
    purchase_net_eur: float
    financing_cost_eur: float
    additional_costs_eur: float
    transport_cost_eur: float
    total_cost_eur: float
    sale_gross_eur: float
    sale_net_eur: float
    margin_eur: float
    margin_percent: float
