"""Public partner storefront endpoints.

Only active partners are served, and only offers that match the partner's
filters and are not hidden.
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from showroom.db import Partner, get_db
from showroom.pricing import approximate_eur_price
from showroom.services import (
    PartnerOfferRow,
    get_exchange_rate,
    get_partner_by_slug,
    load_partner_offer_rows,
)

router = APIRouter(prefix="/showroom", tags=["showroom"])


class ShowroomPartner(BaseModel):
    """Public partner profile."""

    slug: str
    company_name: str
    company_address: str | None
    phone: str | None
    email: str | None
    website: str | None
    show_net_prices: bool
    show_secondary_currency: bool

    class Config:
        from_attributes = True


class ShowroomOffer(BaseModel):
    """Offer as shown in a partner's showroom."""

    offer_id: UUID
    brand: str
    model: str
    model_version: str | None
    year: int | None
    mileage: int | None
    fuel_type: str | None
    engine_power: str | None
    transmission: str | None
    main_photo_url: str | None
    display_price: float
    display_price_net: int | None
    display_price_eur: int | None
    features: dict[str, Any]
    technical_spec: dict[str, Any]


def _showroom_offer(partner: Partner, row: PartnerOfferRow, exchange_rate: float) -> ShowroomOffer:
    offer = row.offer
    price_for_eur = row.calculated_price_net if partner.show_net_prices else row.calculated_price

    display_price_eur = None
    if partner.show_secondary_currency and exchange_rate > 0:
        display_price_eur = approximate_eur_price(price_for_eur, exchange_rate)

    return ShowroomOffer(
        offer_id=offer.id,
        brand=offer.brand,
        model=offer.model,
        model_version=offer.model_version,
        year=offer.year,
        mileage=offer.mileage,
        fuel_type=offer.fuel_type,
        engine_power=offer.engine_power,
        transmission=offer.transmission,
        main_photo_url=offer.main_photo_url,
        display_price=row.calculated_price,
        display_price_net=row.calculated_price_net if partner.show_net_prices else None,
        display_price_eur=display_price_eur,
        features=offer.features or {},
        technical_spec=offer.technical_spec or {},
    )


async def _get_active_partner_or_404(db: AsyncSession, slug: str) -> Partner:
    partner = await get_partner_by_slug(db, slug)
    if not partner:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Partner not found",
        )
    return partner


@router.get("/{slug}", response_model=ShowroomPartner)
async def get_showroom(
    slug: str,
    db: AsyncSession = Depends(get_db),
) -> Partner:
    """Public partner profile for the showroom header."""
    return await _get_active_partner_or_404(db, slug)


@router.get("/{slug}/offers", response_model=list[ShowroomOffer])
async def list_showroom_offers(
    slug: str,
    db: AsyncSession = Depends(get_db),
) -> list[ShowroomOffer]:
    """Visible offers of a partner at partner prices."""
    partner = await _get_active_partner_or_404(db, slug)
    rows = [row for row in await load_partner_offer_rows(db, partner) if row.is_visible]

    exchange_rate = await get_exchange_rate(db) if partner.show_secondary_currency else 0.0
    return [_showroom_offer(partner, row, exchange_rate) for row in rows]


@router.get("/{slug}/offers/{offer_id}", response_model=ShowroomOffer)
async def get_showroom_offer(
    slug: str,
    offer_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> ShowroomOffer:
    """One visible offer of a partner."""
    partner = await _get_active_partner_or_404(db, slug)
    row = next(
        (
            row
            for row in await load_partner_offer_rows(db, partner)
            if row.offer_id == offer_id and row.is_visible
        ),
        None,
    )
    if row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Offer not found",
        )

    exchange_rate = await get_exchange_rate(db) if partner.show_secondary_currency else 0.0
    return _showroom_offer(partner, row, exchange_rate)
