"""Global app settings endpoints (exchange rate, storefront switches)."""

import logging
from datetime import datetime
from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.ext.asyncio import AsyncSession

from showroom.db import AppSettings, get_db
from showroom.services import get_or_create_app_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


class AppSettingsResponse(BaseModel):
    """Current app settings."""

    site_name: str
    default_currency: str
    exchange_rate_eur: float = Field(description="PLN per 1 EUR, 0 = not configured")
    show_eur_prices: bool
    contact_phone: str | None
    contact_email: str | None
    updated_at: datetime

    class Config:
        from_attributes = True


class AppSettingsUpdate(BaseModel):
    """Request to update app settings."""

    site_name: str | None = Field(None, min_length=1)
    default_currency: str | None = Field(None, min_length=3, max_length=3)
    exchange_rate_eur: float | None = Field(None, ge=0)
    show_eur_prices: bool | None = None
    contact_phone: str | None = None
    contact_email: EmailStr | None = None


@router.get("", response_model=AppSettingsResponse)
async def get_app_settings(
    db: AsyncSession = Depends(get_db),
) -> AppSettings:
    """Get current app settings."""
    return await get_or_create_app_settings(db)


@router.put("", response_model=AppSettingsResponse)
async def update_app_settings(
    request: AppSettingsUpdate,
    db: AsyncSession = Depends(get_db),
) -> AppSettings:
    """Update app settings. Only provided fields change."""
    app_settings = await get_or_create_app_settings(db)

    update_data = request.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field not in ("contact_phone", "contact_email"):
            continue
        if field == "exchange_rate_eur":
            value = Decimal(str(value))
        elif field == "default_currency":
            value = value.upper()
        setattr(app_settings, field, value)

    await db.flush()
    await db.refresh(app_settings)

    logger.info(f"Updated app settings: {sorted(update_data)}")
    return app_settings
