"""Partner self-admin endpoints, addressed by the partner's public slug.

Endpoints:
- GET /showroom/{slug}/admin/arbitrage - offers ranked by cost-basis margin
- PUT /showroom/{slug}/admin/offers/{offer_id} - custom sale price in EUR
"""

import logging
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from showroom.db import Partner, get_db
from showroom.pricing import (
    MAX_TRANSPORT_COUNT,
    VehicleMarginBreakdown,
    calculate_transport_cost_per_car_eur,
    calculate_transport_cost_total_eur,
    decompose_transport_bundles,
)
from showroom.pricing.vat import eur_to_pln, round_pln
from showroom.services import (
    CostBasisSort,
    get_exchange_rate,
    get_partner_by_slug,
    load_partner_offer_rows,
    pricing_config_for_partner,
    search_offer_rows,
    sort_cost_basis_arbitrage_rows,
    upsert_partner_offer,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/showroom", tags=["partner-admin"])


class CostBasisArbitrageItem(BaseModel):
    """Offer ranked by margin over the partner's full landed cost."""

    rank: int
    offer_id: UUID
    brand: str
    model: str
    model_version: str | None
    purchase_gross_pln: float
    custom_price: float | None = Field(None, description="Partner price in PLN, if set")
    sale_gross_eur: float
    is_break_even_price: bool = Field(
        ..., description="No custom price, sale price set to cover the total cost"
    )
    breakdown: VehicleMarginBreakdown


class CostBasisArbitrageResponse(BaseModel):
    """Ranked offers plus the transport assumption they were costed with."""

    partner_slug: str
    exchange_rate_pln_per_eur: float
    exchange_rate_missing: bool
    batch_size: int
    transport_bundles: list[int]
    transport_cost_total_eur: float
    transport_cost_per_car_eur: float
    items: list[CostBasisArbitrageItem]


class CustomPriceUpdate(BaseModel):
    """Partner sale price in gross EUR; null goes back to the default margin."""

    custom_price_eur: float | None = Field(None, gt=0)


class CustomPriceResponse(BaseModel):
    """Stored custom price and the resulting display price."""

    offer_id: UUID
    custom_price: float | None
    calculated_price: float
    calculated_price_net: int


async def _get_active_partner_or_404(db: AsyncSession, slug: str) -> Partner:
    partner = await get_partner_by_slug(db, slug)
    if not partner:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Partner not found",
        )
    return partner


@router.get("/{slug}/admin/arbitrage", response_model=CostBasisArbitrageResponse)
async def list_cost_basis_arbitrage(
    slug: str,
    batch_size: int = Query(1, ge=1, le=MAX_TRANSPORT_COUNT, description="Cars per transport"),
    sort: CostBasisSort = Query(CostBasisSort.MARGIN_PCT_DESC),
    q: str | None = Query(None, description="Search brand, model or version"),
    db: AsyncSession = Depends(get_db),
) -> CostBasisArbitrageResponse:
    """Partner offers ranked by margin over purchase, financing, extras and transport.

    Offers without a custom price are shown at their break-even price.
    """
    partner = await _get_active_partner_or_404(db, slug)
    config = pricing_config_for_partner(partner)
    exchange_rate = await get_exchange_rate(db)
    tiers = config.transport_cost_tiers_eur

    rows = search_offer_rows(await load_partner_offer_rows(db, partner), q)
    ranked = sort_cost_basis_arbitrage_rows(config, rows, batch_size, exchange_rate, sort)

    return CostBasisArbitrageResponse(
        partner_slug=partner.slug,
        exchange_rate_pln_per_eur=exchange_rate,
        exchange_rate_missing=exchange_rate <= 0,
        batch_size=batch_size,
        transport_bundles=decompose_transport_bundles(batch_size, tiers),
        transport_cost_total_eur=calculate_transport_cost_total_eur(batch_size, tiers),
        transport_cost_per_car_eur=calculate_transport_cost_per_car_eur(batch_size, tiers),
        items=[
            CostBasisArbitrageItem(
                rank=index,
                offer_id=item.row.offer_id,
                brand=item.row.offer.brand,
                model=item.row.offer.model,
                model_version=item.row.offer.model_version,
                purchase_gross_pln=item.row.base_price,
                custom_price=item.row.custom_price,
                sale_gross_eur=item.sale_gross_eur,
                is_break_even_price=item.is_break_even_price,
                breakdown=item.breakdown,
            )
            for index, item in enumerate(ranked, start=1)
        ],
    )


@router.put("/{slug}/admin/offers/{offer_id}", response_model=CustomPriceResponse)
async def set_custom_price_eur(
    slug: str,
    offer_id: UUID,
    update: CustomPriceUpdate,
    db: AsyncSession = Depends(get_db),
) -> CustomPriceResponse:
    """Set a partner's sale price in EUR, stored as whole PLN at today's rate."""
    partner = await _get_active_partner_or_404(db, slug)
    rows = await load_partner_offer_rows(db, partner)
    if not any(row.offer_id == offer_id for row in rows):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Offer not found",
        )

    custom_price = None
    if update.custom_price_eur is not None:
        exchange_rate = await get_exchange_rate(db)
        if exchange_rate <= 0:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Exchange rate is not configured",
            )
        custom_price = Decimal(round_pln(eur_to_pln(update.custom_price_eur, exchange_rate)))

    await upsert_partner_offer(db, partner.id, offer_id, {"custom_price": custom_price})
    logger.info(f"Partner {partner.slug} set custom price {custom_price} for offer {offer_id}")

    row = next(r for r in await load_partner_offer_rows(db, partner) if r.offer_id == offer_id)
    return CustomPriceResponse(
        offer_id=row.offer_id,
        custom_price=row.custom_price,
        calculated_price=row.calculated_price,
        calculated_price_net=row.calculated_price_net,
    )
