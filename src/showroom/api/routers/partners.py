"""Partner admin endpoints.

Endpoints:
- GET/POST /partners - list and create partners
- GET/PATCH/DELETE /partners/{id} - manage one partner
- GET/POST /partners/{id}/filters, DELETE /partners/{id}/filters/{filter_id}
- GET /partners/{id}/offers - offers with partner prices
- GET /partners/{id}/offers/arbitrage - offers ranked by flat margin
- PUT /partners/{id}/offers/{offer_id} - custom price / visibility
- POST /partners/{id}/offers/bulk - same update (or margin) for many offers
- POST /partners/{id}/calculator - cost-basis margins for selected offers
"""

import logging
import re
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from showroom.db import CarOffer, Partner, PartnerFilter, get_db
from showroom.pricing import (
    VehicleMarginBreakdown,
    normalize_transport_tiers,
    serialize_additional_cost_items,
)
from showroom.services import (
    ArbitrageSort,
    PartnerOfferRow,
    bulk_margin_custom_price,
    calculate_selection_margins,
    get_exchange_rate,
    get_partner,
    get_partner_filters,
    load_partner_offer_rows,
    pricing_config_for_partner,
    search_offer_rows,
    sort_arbitrage_rows,
    upsert_partner_offer,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/partners", tags=["partners"])

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")

# Columns that keep their value when an update sends null
REQUIRED_PARTNER_FIELDS = {
    "company_name",
    "default_margin_percent",
    "financing_cost_percent",
    "additional_cost_items",
    "transport_cost_tiers_eur",
    "show_net_prices",
    "show_secondary_currency",
    "is_active",
}


# --- Schemas ---


class PartnerBase(BaseModel):
    """Fields shared by partner create/update."""

    company_address: str | None = None
    vat_number: str | None = None
    contact_person: str | None = None
    phone: str | None = None
    email: EmailStr | None = None
    website: str | None = None
    default_margin_percent: float = Field(0, ge=0, description="Markup on catalogue price")
    financing_cost_percent: float = Field(0, ge=0, description="Financing surcharge on net EUR")
    additional_cost_items: list[dict[str, Any]] = Field(
        default_factory=list,
        description="[{description, mode, valueEurNet, percentValue}]",
    )
    transport_cost_tiers_eur: dict[str, float] = Field(
        default_factory=dict,
        description="Transport EUR per bundle of 1, 2, 4, 8 and 9+ cars",
    )
    show_net_prices: bool = False
    show_secondary_currency: bool = False
    is_active: bool = True
    notes: str | None = None


class PartnerCreate(PartnerBase):
    """Partner creation schema."""

    slug: str = Field(..., min_length=1, max_length=100)
    company_name: str = Field(..., min_length=1)


class PartnerUpdate(BaseModel):
    """Partner update schema (all fields optional)."""

    company_name: str | None = Field(None, min_length=1)
    company_address: str | None = None
    vat_number: str | None = None
    contact_person: str | None = None
    phone: str | None = None
    email: EmailStr | None = None
    website: str | None = None
    default_margin_percent: float | None = Field(None, ge=0)
    financing_cost_percent: float | None = Field(None, ge=0)
    additional_cost_items: list[dict[str, Any]] | None = None
    transport_cost_tiers_eur: dict[str, float] | None = None
    show_net_prices: bool | None = None
    show_secondary_currency: bool | None = None
    is_active: bool | None = None
    notes: str | None = None


class PartnerResponse(BaseModel):
    """Partner response schema."""

    id: UUID
    slug: str
    company_name: str
    company_address: str | None
    vat_number: str | None
    contact_person: str | None
    phone: str | None
    email: str | None
    website: str | None
    default_margin_percent: float
    financing_cost_percent: float
    additional_cost_items: list[dict[str, Any]]
    transport_cost_tiers_eur: dict[str, float]
    show_net_prices: bool
    show_secondary_currency: bool
    is_active: bool
    notes: str | None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class PartnerFilterCreate(BaseModel):
    """Brand filter, optionally narrowed to one model."""

    brand_name: str = Field(..., min_length=1)
    model_name: str | None = None


class PartnerFilterResponse(BaseModel):
    """Partner filter response schema."""

    id: int
    partner_id: UUID
    brand_name: str
    model_name: str | None
    is_active: bool

    class Config:
        from_attributes = True


class OfferSummary(BaseModel):
    """Catalogue fields shown next to partner prices."""

    id: UUID
    brand: str
    model: str
    model_version: str | None
    year: int | None
    mileage: int | None
    price: float
    fuel_type: str | None
    engine_power: str | None
    transmission: str | None
    main_photo_url: str | None

    class Config:
        from_attributes = True


class PartnerOfferResponse(BaseModel):
    """Offer as priced and shown by a partner."""

    id: int | None = Field(None, description="Partner override id, None if never edited")
    partner_id: UUID
    offer_id: UUID
    custom_price: float | None
    is_visible: bool
    notes: str | None
    offer: OfferSummary
    calculated_price: float
    calculated_price_net: int
    margin_percent: float
    show_net_prices: bool


class ArbitrageItem(BaseModel):
    """Row of the arbitrage list (flat margin over catalogue price)."""

    rank: int
    offer_id: UUID
    brand: str
    model: str
    base_price: float
    partner_price: float
    margin_amount_pln: float
    margin_percent: float
    is_visible: bool


class PartnerOfferUpdate(BaseModel):
    """Update for a partner's override of one offer.

    Send ``custom_price: null`` to go back to the default margin.
    """

    custom_price: float | None = Field(None, ge=0)
    is_visible: bool | None = None
    notes: str | None = None


class BulkOfferUpdate(PartnerOfferUpdate):
    """Same update for many offers, or a margin turned into custom prices."""

    offer_ids: list[UUID] = Field(..., min_length=1)
    margin_percent: float | None = Field(
        None, description="Sets custom price = catalogue price × (1 + margin/100)"
    )


class BulkUpdateResponse(BaseModel):
    """Result of a bulk update."""

    updated: int


class CalculatorRequest(BaseModel):
    """Selected offers and their planned gross EUR sale prices."""

    offer_ids: list[UUID] = Field(..., min_length=1)
    sale_gross_eur: dict[UUID, float] = Field(
        default_factory=dict, description="Gross EUR sale price keyed by offer id"
    )
    exchange_rate_pln_per_eur: float | None = Field(
        None, description="Override the global rate for what-if calculations"
    )


class CalculatorItem(BaseModel):
    """Breakdown for one selected offer."""

    offer_id: UUID
    brand: str
    model: str
    breakdown: VehicleMarginBreakdown


class CalculatorResponse(BaseModel):
    """Cost-basis margins for vehicles shipped together."""

    vehicle_count: int
    exchange_rate_pln_per_eur: float
    exchange_rate_missing: bool
    transport_bundles: list[int]
    transport_cost_total_eur: float
    transport_cost_per_car_eur: float
    items: list[CalculatorItem]


# --- Helpers ---


def _storable_pricing_fields(data: dict[str, Any]) -> dict[str, Any]:
    """Normalize cost items and tier table before they hit the database."""
    if data.get("additional_cost_items") is not None:
        data["additional_cost_items"] = serialize_additional_cost_items(
            data["additional_cost_items"]
        )
    if data.get("transport_cost_tiers_eur") is not None:
        tiers = normalize_transport_tiers(data["transport_cost_tiers_eur"])
        data["transport_cost_tiers_eur"] = {str(tier): price for tier, price in tiers.items()}
    for key in ("default_margin_percent", "financing_cost_percent"):
        if data.get(key) is not None:
            data[key] = Decimal(str(data[key]))
    return data


def _partner_offer_response(partner_id: UUID, row: PartnerOfferRow) -> PartnerOfferResponse:
    return PartnerOfferResponse(
        id=row.partner_offer_id,
        partner_id=partner_id,
        offer_id=row.offer_id,
        custom_price=row.custom_price,
        is_visible=row.is_visible,
        notes=row.notes,
        offer=OfferSummary.model_validate(row.offer),
        calculated_price=row.calculated_price,
        calculated_price_net=row.calculated_price_net,
        margin_percent=row.margin_percent,
        show_net_prices=row.show_net_prices,
    )


async def _get_partner_or_404(db: AsyncSession, partner_id: UUID) -> Partner:
    partner = await get_partner(db, partner_id)
    if not partner:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Partner not found",
        )
    return partner


# --- Partners ---


@router.get("", response_model=list[PartnerResponse])
async def list_partners(
    db: AsyncSession = Depends(get_db),
) -> list[Partner]:
    """List all partners, newest first."""
    result = await db.execute(select(Partner).order_by(Partner.created_at.desc()))
    return list(result.scalars().all())


@router.post("", response_model=PartnerResponse, status_code=status.HTTP_201_CREATED)
async def create_partner(
    partner_data: PartnerCreate,
    db: AsyncSession = Depends(get_db),
) -> Partner:
    """Create a new partner."""
    if not SLUG_PATTERN.match(partner_data.slug):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Slug can only contain lowercase letters, numbers, and hyphens",
        )

    result = await db.execute(select(Partner).where(Partner.slug == partner_data.slug))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Partner with this slug already exists",
        )

    data = _storable_pricing_fields(partner_data.model_dump())
    if data["email"] is not None:
        data["email"] = str(data["email"])

    partner = Partner(**data)
    db.add(partner)
    try:
        await db.flush()
    except IntegrityError as e:
        logger.error(f"Failed to create partner {partner_data.slug}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Partner with this slug already exists",
        ) from e
    await db.refresh(partner)

    logger.info(f"Created partner {partner.slug}")
    return partner


@router.get("/{partner_id}", response_model=PartnerResponse)
async def get_partner_detail(
    partner_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> Partner:
    """Get a partner by ID."""
    return await _get_partner_or_404(db, partner_id)


@router.patch("/{partner_id}", response_model=PartnerResponse)
async def update_partner(
    partner_id: UUID,
    partner_data: PartnerUpdate,
    db: AsyncSession = Depends(get_db),
) -> Partner:
    """Update a partner. Only provided fields change."""
    partner = await _get_partner_or_404(db, partner_id)

    updates = _storable_pricing_fields(partner_data.model_dump(exclude_unset=True))
    for field, value in updates.items():
        if value is None and field in REQUIRED_PARTNER_FIELDS:
            continue
        if field == "email" and value is not None:
            value = str(value)
        setattr(partner, field, value)

    await db.flush()
    await db.refresh(partner)

    logger.info(f"Updated partner {partner.slug}: {sorted(updates)}")
    return partner


@router.delete("/{partner_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_partner(
    partner_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Delete a partner with its filters and offer overrides."""
    partner = await _get_partner_or_404(db, partner_id)
    await db.delete(partner)
    await db.flush()
    logger.info(f"Deleted partner {partner.slug}")


# --- Filters ---


@router.get("/{partner_id}/filters", response_model=list[PartnerFilterResponse])
async def list_partner_filters(
    partner_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> list[PartnerFilter]:
    """List a partner's active brand/model filters."""
    await _get_partner_or_404(db, partner_id)
    return await get_partner_filters(db, partner_id)


@router.post(
    "/{partner_id}/filters",
    response_model=PartnerFilterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_partner_filter(
    partner_id: UUID,
    filter_data: PartnerFilterCreate,
    db: AsyncSession = Depends(get_db),
) -> PartnerFilter:
    """Add a brand (or brand + model) to the partner's selection."""
    await _get_partner_or_404(db, partner_id)

    partner_filter = PartnerFilter(
        partner_id=partner_id,
        brand_name=filter_data.brand_name.strip(),
        model_name=(filter_data.model_name or "").strip() or None,
        is_active=True,
    )
    db.add(partner_filter)
    await db.flush()
    await db.refresh(partner_filter)
    return partner_filter


@router.delete("/{partner_id}/filters/{filter_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_partner_filter(
    partner_id: UUID,
    filter_id: int,
    db: AsyncSession = Depends(get_db),
) -> None:
    """Remove a filter."""
    partner_filter = await db.get(PartnerFilter, filter_id)
    if not partner_filter or partner_filter.partner_id != partner_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Filter not found",
        )
    await db.delete(partner_filter)
    await db.flush()


# --- Partner offers ---


@router.get("/{partner_id}/offers", response_model=list[PartnerOfferResponse])
async def list_partner_offers(
    partner_id: UUID,
    q: str | None = Query(None, description="Search brand, model or version"),
    db: AsyncSession = Depends(get_db),
) -> list[PartnerOfferResponse]:
    """Offers matching the partner's filters, with partner prices."""
    partner = await _get_partner_or_404(db, partner_id)
    rows = search_offer_rows(await load_partner_offer_rows(db, partner), q)
    return [_partner_offer_response(partner.id, row) for row in rows]


@router.get("/{partner_id}/offers/arbitrage", response_model=list[ArbitrageItem])
async def list_arbitrage(
    partner_id: UUID,
    sort: ArbitrageSort = Query(ArbitrageSort.MARGIN_PCT_DESC),
    q: str | None = Query(None, description="Search brand, model or version"),
    db: AsyncSession = Depends(get_db),
) -> list[ArbitrageItem]:
    """Partner offers ranked by flat margin over the catalogue price."""
    partner = await _get_partner_or_404(db, partner_id)
    rows = search_offer_rows(await load_partner_offer_rows(db, partner), q)

    return [
        ArbitrageItem(
            rank=index,
            offer_id=row.offer_id,
            brand=row.offer.brand,
            model=row.offer.model,
            base_price=row.base_price,
            partner_price=row.calculated_price,
            margin_amount_pln=row.margin_amount_pln,
            margin_percent=row.margin_percent_flat,
            is_visible=row.is_visible,
        )
        for index, row in enumerate(sort_arbitrage_rows(rows, sort), start=1)
    ]


@router.put("/{partner_id}/offers/{offer_id}", response_model=PartnerOfferResponse)
async def update_partner_offer(
    partner_id: UUID,
    offer_id: UUID,
    update: PartnerOfferUpdate,
    db: AsyncSession = Depends(get_db),
) -> PartnerOfferResponse:
    """Set a custom price, visibility or notes for one offer."""
    partner = await _get_partner_or_404(db, partner_id)
    if not await db.get(CarOffer, offer_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Offer not found",
        )

    updates = update.model_dump(exclude_unset=True)
    if updates.get("custom_price") is not None:
        updates["custom_price"] = Decimal(str(updates["custom_price"]))
    await upsert_partner_offer(db, partner.id, offer_id, updates)

    rows = await load_partner_offer_rows(db, partner)
    row = next((r for r in rows if r.offer_id == offer_id), None)
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Offer is outside the partner's filters",
        )
    return _partner_offer_response(partner.id, row)


@router.post("/{partner_id}/offers/bulk", response_model=BulkUpdateResponse)
async def bulk_update_partner_offers(
    partner_id: UUID,
    update: BulkOfferUpdate,
    db: AsyncSession = Depends(get_db),
) -> BulkUpdateResponse:
    """Apply one update to many offers.

    With ``margin_percent`` each offer gets its own custom price derived from
    its catalogue price; the other fields apply as given.
    """
    partner = await _get_partner_or_404(db, partner_id)
    base_updates = update.model_dump(exclude_unset=True, exclude={"offer_ids", "margin_percent"})

    updated = 0
    for offer_id in update.offer_ids:
        offer = await db.get(CarOffer, offer_id)
        if not offer:
            logger.warning(f"Bulk update for partner {partner.slug}: offer {offer_id} not found")
            continue

        updates = dict(base_updates)
        if update.margin_percent is not None:
            updates["custom_price"] = bulk_margin_custom_price(
                float(offer.price), update.margin_percent
            )
        if updates.get("custom_price") is not None:
            updates["custom_price"] = Decimal(str(updates["custom_price"]))

        await upsert_partner_offer(db, partner.id, offer_id, updates)
        updated += 1

    logger.info(f"Bulk updated {updated} offers for partner {partner.slug}")
    return BulkUpdateResponse(updated=updated)


@router.post("/{partner_id}/calculator", response_model=CalculatorResponse)
async def calculate_partner_margins(
    partner_id: UUID,
    request: CalculatorRequest,
    db: AsyncSession = Depends(get_db),
) -> CalculatorResponse:
    """Cost-basis margins for the selected offers, shipped together."""
    partner = await _get_partner_or_404(db, partner_id)

    rows_by_id = {row.offer_id: row for row in await load_partner_offer_rows(db, partner)}
    missing = [str(offer_id) for offer_id in request.offer_ids if offer_id not in rows_by_id]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Offers not available for this partner: {', '.join(missing)}",
        )

    if request.exchange_rate_pln_per_eur is not None:
        exchange_rate = request.exchange_rate_pln_per_eur
    else:
        exchange_rate = await get_exchange_rate(db)

    selection = calculate_selection_margins(
        pricing_config_for_partner(partner),
        [rows_by_id[offer_id] for offer_id in dict.fromkeys(request.offer_ids)],
        request.sale_gross_eur,
        exchange_rate,
    )

    return CalculatorResponse(
        vehicle_count=selection.vehicle_count,
        exchange_rate_pln_per_eur=selection.exchange_rate_pln_per_eur,
        exchange_rate_missing=selection.exchange_rate_missing,
        transport_bundles=selection.transport_bundles,
        transport_cost_total_eur=selection.transport_cost_total_eur,
        transport_cost_per_car_eur=selection.transport_cost_per_car_eur,
        items=[
            CalculatorItem(
                offer_id=row.offer_id,
                brand=row.offer.brand,
                model=row.offer.model,
                breakdown=breakdown,
            )
            for row, breakdown in selection.breakdowns
        ],
    )
