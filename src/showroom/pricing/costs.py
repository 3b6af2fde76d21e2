"""Partner-configured additional costs per vehicle."""

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel

from showroom.pricing.models import (
    AdditionalCostItem,
    AdditionalCostMode,
    FixedEurCost,
    PercentOfBaseCost,
)
from showroom.pricing.vat import coerce_amount, round_money


def normalize_additional_cost_items(items: Iterable[Any] | None = None) -> list[AdditionalCostItem]:
    """Clean up a partner's additional cost list.

    Accepts the stored JSON shape (``valueEurNet`` / ``percentValue``),
    snake_case dicts, or item models. Items without a description are
    dropped, unknown modes fall back to ``fixed_eur`` and negative amounts
    are clamped to 0.

    Args:
        items: Raw cost items, or None

    Returns:
        List of FixedEurCost / PercentOfBaseCost
    """
    if not items or isinstance(items, (str, bytes, dict)):
        return []

    normalized: list[AdditionalCostItem] = []
    for item in items:
        if isinstance(item, BaseModel):
            raw = item.model_dump(by_alias=True)
        elif isinstance(item, dict):
            raw = item
        else:
            continue

        description = str(raw.get("description") or "").strip()
        if not description:
            continue

        if raw.get("mode") == AdditionalCostMode.PERCENT_OF_NET_PLUS_FINANCING.value:
            percent = raw.get("percentValue", raw.get("percent_value"))
            normalized.append(
                PercentOfBaseCost(
                    description=description,
                    percent_value=max(0.0, coerce_amount(percent)),
                )
            )
        else:
            value = raw.get("valueEurNet", raw.get("value_eur_net"))
            normalized.append(
                FixedEurCost(
                    description=description,
                    value_eur_net=max(0.0, coerce_amount(value)),
                )
            )

    return normalized


def serialize_additional_cost_items(items: Iterable[Any] | None) -> list[dict[str, Any]]:
    """Stored JSON shape for cost items, the unused amount field set to 0."""
    serialized = []
    for item in normalize_additional_cost_items(items):
        if isinstance(item, PercentOfBaseCost):
            value_eur_net, percent_value = 0.0, item.percent_value
        else:
            value_eur_net, percent_value = item.value_eur_net, 0.0
        serialized.append(
            {
                "description": item.description,
                "mode": item.mode,
                "valueEurNet": value_eur_net,
                "percentValue": percent_value,
            }
        )
    return serialized


def calculate_additional_costs_total_eur(
    items: Iterable[Any] | None,
    base_eur: float,
) -> float:
    """Sum additional costs for one vehicle.

    Fixed items add their EUR amount; percentage items add a share of
    ``base_eur`` (net purchase EUR + financing EUR). A non-positive base
    makes percentage items contribute nothing.

    Args:
        items: Raw or normalized cost items
        base_eur: Base for percentage items

    Returns:
        Total in EUR, rounded to 2 decimals
    """
    base = max(0.0, base_eur)
    total = 0.0
    for item in normalize_additional_cost_items(items):
        if isinstance(item, PercentOfBaseCost):
            total += item.percent_value / 100 * base
        else:
            total += item.value_eur_net
    return round_money(total)
