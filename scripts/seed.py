#!/usr/bin/env python3
"""Seed the database with sample offers, a partner and app settings."""

import asyncio
from decimal import Decimal

from sqlalchemy import select

from showroom.db.base import async_session_maker
from showroom.db.models import CarOffer, Partner, PartnerFilter
from showroom.services import get_or_create_app_settings


SAMPLE_OFFERS = [
    {
        "brand": "BMW",
        "model": "X5",
        "model_version": "xDrive30d M Sport",
        "year": 2022,
        "mileage": 48000,
        "price": Decimal("289000"),
        "fuel_type": "diesel",
        "engine_power": "286 KM",
        "transmission": "automatic",
    },
    {
        "brand": "BMW",
        "model": "320i",
        "model_version": "Sport Line",
        "year": 2021,
        "mileage": 61000,
        "price": Decimal("123000"),
        "fuel_type": "petrol",
        "engine_power": "184 KM",
        "transmission": "automatic",
    },
    {
        "brand": "Audi",
        "model": "A6",
        "model_version": "40 TDI quattro",
        "year": 2020,
        "mileage": 92000,
        "price": Decimal("154900"),
        "fuel_type": "diesel",
        "engine_power": "204 KM",
        "transmission": "automatic",
    },
    {
        "brand": "Toyota",
        "model": "Corolla",
        "model_version": "1.8 Hybrid Comfort",
        "year": 2023,
        "mileage": 12000,
        "price": Decimal("104500"),
        "fuel_type": "hybrid",
        "engine_power": "140 KM",
        "transmission": "automatic",
    },
]

SAMPLE_PARTNER = {
    "slug": "autohaus-utrecht",
    "company_name": "Autohaus Utrecht B.V.",
    "website": "https://autohaus-utrecht.example",
    "default_margin_percent": Decimal("8"),
    "financing_cost_percent": Decimal("2.5"),
    "additional_cost_items": [
        {"description": "BPM registration", "mode": "fixed_eur", "valueEurNet": 350, "percentValue": 0},
        {
            "description": "Warranty",
            "mode": "percent_of_net_plus_financing",
            "valueEurNet": 0,
            "percentValue": 1.5,
        },
    ],
    "transport_cost_tiers_eur": {"1": 900, "2": 1500, "4": 2600, "8": 4400, "9": 4800},
    "show_net_prices": True,
    "show_secondary_currency": True,
}


async def seed() -> None:
    """Seed the database with sample data."""
    async with async_session_maker() as session:
        await get_or_create_app_settings(session)

        for offer_data in SAMPLE_OFFERS:
            result = await session.execute(
                select(CarOffer).where(
                    CarOffer.brand == offer_data["brand"],
                    CarOffer.model_version == offer_data["model_version"],
                )
            )
            if result.scalar_one_or_none():
                print(f"Offer '{offer_data['brand']} {offer_data['model']}' already exists, skipping...")
                continue

            session.add(CarOffer(**offer_data))
            print(f"Created offer: {offer_data['brand']} {offer_data['model']}")

        result = await session.execute(
            select(Partner).where(Partner.slug == SAMPLE_PARTNER["slug"])
        )
        if result.scalar_one_or_none():
            print(f"Partner '{SAMPLE_PARTNER['slug']}' already exists, skipping...")
        else:
            partner = Partner(**SAMPLE_PARTNER)
            session.add(partner)
            await session.flush()
            session.add(PartnerFilter(partner_id=partner.id, brand_name="BMW"))
            session.add(PartnerFilter(partner_id=partner.id, brand_name="Audi", model_name="A6"))
            print(f"Created partner: {SAMPLE_PARTNER['company_name']}")

        await session.commit()
        print("\nSeeding complete!")


if __name__ == "__main__":
    asyncio.run(seed())
