"""Pytest fixtures for database testing."""

from collections.abc import AsyncGenerator
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from showroom.api.app import app
from showroom.db.base import Base, get_db
from showroom.db.models import CarOffer


# Use SQLite in-memory for tests
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TIERS_EUR = {"1": 900.0, "2": 1500.0, "4": 2600.0, "8": 4400.0, "9": 4800.0}


@pytest_asyncio.fixture
async def test_db() -> AsyncGenerator[AsyncSession, None]:
    """Provide a test database session with isolated transactions.

    Creates an in-memory SQLite database, creates all tables,
    and yields a session. Overrides app's get_db dependency.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        # Override app's get_db dependency
        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db

        try:
            yield session
        finally:
            app.dependency_overrides.clear()
            await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def sample_offers(test_db: AsyncSession) -> dict[str, CarOffer]:
    """Three catalogue offers: two BMWs and an Audi."""
    offers = {
        "x5": CarOffer(
            brand="BMW",
            model="X5",
            model_version="xDrive30d M Sport",
            year=2023,
            mileage=15000,
            price=Decimal("100000.00"),
            fuel_type="diesel",
        ),
        "320i": CarOffer(
            brand="BMW",
            model="320i",
            model_version="Sport Line",
            year=2022,
            mileage=30000,
            price=Decimal("12300.00"),
            fuel_type="petrol",
        ),
        "a6": CarOffer(
            brand="Audi",
            model="A6",
            model_version="Avant 40 TDI",
            year=2021,
            mileage=60000,
            price=Decimal("200000.00"),
            fuel_type="diesel",
        ),
    }
    test_db.add_all(offers.values())
    await test_db.flush()
    for offer in offers.values():
        await test_db.refresh(offer)
    return offers


@pytest.fixture
def partner_payload() -> dict[str, Any]:
    """Valid partner creation body."""
    return {
        "slug": "autohaus-utrecht",
        "company_name": "Autohaus Utrecht B.V.",
        "email": "sales@autohaus-utrecht.nl",
        "default_margin_percent": 10,
        "financing_cost_percent": 0,
        "additional_cost_items": [],
        "transport_cost_tiers_eur": TIERS_EUR,
    }
