"""Global app settings (exchange rate, storefront switches)."""

import logging
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from showroom.config import get_settings
from showroom.db.models import AppSettings

logger = logging.getLogger(__name__)

SETTINGS_ID = 1


async def get_or_create_app_settings(db: AsyncSession) -> AppSettings:
    """Get the settings singleton, creating it from config defaults."""
    app_settings = await db.get(AppSettings, SETTINGS_ID)

    if app_settings is None:
        config = get_settings()
        app_settings = AppSettings(
            id=SETTINGS_ID,
            default_currency=config.default_currency,
            exchange_rate_eur=Decimal(str(config.default_exchange_rate_eur)),
        )
        db.add(app_settings)
        await db.flush()
        await db.refresh(app_settings)
        logger.info(f"Created app settings (exchange rate {app_settings.exchange_rate_eur})")

    return app_settings


async def get_exchange_rate(db: AsyncSession) -> float:
    """Current PLN per EUR rate, 0.0 when not configured."""
    app_settings = await get_or_create_app_settings(db)
    rate = float(app_settings.exchange_rate_eur or 0)
    if rate <= 0:
        logger.warning("exchange_rate_eur is not set - EUR prices degrade to 0")
    return rate
