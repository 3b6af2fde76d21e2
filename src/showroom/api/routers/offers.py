"""Catalogue offer endpoints (public listing and detail)."""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from showroom.db import CarOffer, get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/offers", tags=["offers"])


class OfferResponse(BaseModel):
    """Catalogue offer response schema."""

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
    features: dict[str, Any]
    technical_spec: dict[str, Any]
    created_at: datetime

    class Config:
        from_attributes = True


class OfferListResponse(BaseModel):
    """Paginated list of offers."""

    items: list[OfferResponse]
    total: int
    limit: int
    offset: int


class OfferCreate(BaseModel):
    """Offer creation schema (catalogue import / admin use)."""

    brand: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    model_version: str | None = None
    year: int | None = Field(None, ge=1900, le=2100)
    mileage: int | None = Field(None, ge=0)
    price: Decimal = Field(..., ge=0, description="Gross price in PLN")
    fuel_type: str | None = None
    engine_power: str | None = None
    transmission: str | None = None
    main_photo_url: str | None = None
    features: dict[str, Any] = {}
    technical_spec: dict[str, Any] = {}


@router.get("", response_model=OfferListResponse)
async def list_offers(
    brand: str | None = Query(None, description="Filter by brand (case-insensitive)"),
    limit: int = Query(20, ge=1, le=100, description="Maximum number of results"),
    offset: int = Query(0, ge=0, description="Number of results to skip"),
    db: AsyncSession = Depends(get_db),
) -> OfferListResponse:
    """List catalogue offers, newest first."""
    query = select(CarOffer)
    if brand:
        query = query.where(func.lower(CarOffer.brand) == brand.lower())

    total = await db.scalar(select(func.count()).select_from(query.subquery()))

    result = await db.execute(
        query.order_by(CarOffer.created_at.desc()).limit(limit).offset(offset)
    )
    offers = result.scalars().all()

    return OfferListResponse(
        items=[OfferResponse.model_validate(offer) for offer in offers],
        total=total or 0,
        limit=limit,
        offset=offset,
    )


@router.get("/{offer_id}", response_model=OfferResponse)
async def get_offer(
    offer_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> CarOffer:
    """Get a single offer for the detail page."""
    offer = await db.get(CarOffer, offer_id)

    if not offer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Offer not found",
        )

    return offer


@router.post("", response_model=OfferResponse, status_code=status.HTTP_201_CREATED)
async def create_offer(
    offer_data: OfferCreate,
    db: AsyncSession = Depends(get_db),
) -> CarOffer:
    """Add an offer to the catalogue."""
    offer = CarOffer(**offer_data.model_dump())
    db.add(offer)
    await db.flush()
    await db.refresh(offer)

    logger.info(f"Created offer {offer.id}: {offer.brand} {offer.model}")
    return offer
