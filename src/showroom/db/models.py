"""Database models for offers, partners and app settings."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from showroom.db.base import Base


class CarOffer(Base):
    """Vehicle offer from the main catalogue (prices are gross PLN)."""

    __tablename__ = "car_offers"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    brand: Mapped[str] = mapped_column(String(100), index=True)
    model: Mapped[str] = mapped_column(String(100))
    model_version: Mapped[str | None] = mapped_column(String(255), nullable=True)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    mileage: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Purchase price incl. 23% VAT
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2))

    # Specs
    fuel_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    engine_power: Mapped[str | None] = mapped_column(String(50), nullable=True)
    transmission: Mapped[str | None] = mapped_column(String(50), nullable=True)
    main_photo_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    features: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    technical_spec: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<CarOffer {self.brand} {self.model}: {self.price}>"


class Partner(Base):
    """Reseller with its own branded showroom and pricing configuration."""

    __tablename__ = "partners"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    slug: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    company_name: Mapped[str] = mapped_column(String(255))

    # Company details
    company_address: Mapped[str | None] = mapped_column(Text, nullable=True)
    vat_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    contact_person: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Pricing configuration (read by the margin calculator)
    default_margin_percent: Mapped[Decimal] = mapped_column(Numeric(6, 2), default=Decimal("0"))
    financing_cost_percent: Mapped[Decimal] = mapped_column(Numeric(6, 2), default=Decimal("0"))
    additional_cost_items: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    transport_cost_tiers_eur: Mapped[dict[str, float]] = mapped_column(JSON, default=dict)

    # Storefront display
    show_net_prices: Mapped[bool] = mapped_column(Boolean, default=False)
    show_secondary_currency: Mapped[bool] = mapped_column(Boolean, default=False)

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    # Relationships
    filters: Mapped[list["PartnerFilter"]] = relationship(
        back_populates="partner",
        cascade="all, delete-orphan",
    )
    partner_offers: Mapped[list["PartnerOffer"]] = relationship(
        back_populates="partner",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Partner {self.slug}: {self.company_name}>"


class PartnerFilter(Base):
    """Brand (and optionally model) a partner resells."""

    __tablename__ = "partner_filters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    partner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("partners.id", ondelete="CASCADE"),
        index=True,
    )
    brand_name: Mapped[str] = mapped_column(String(100))
    # None means every model of the brand
    model_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )

    partner: Mapped["Partner"] = relationship(back_populates="filters")

    def __repr__(self) -> str:
        return f"<PartnerFilter {self.brand_name} {self.model_name or '*'}>"


class PartnerOffer(Base):
    """Partner override for one catalogue offer (custom price, visibility)."""

    __tablename__ = "partner_offers"
    __table_args__ = (UniqueConstraint("partner_id", "offer_id", name="uq_partner_offer"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    partner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("partners.id", ondelete="CASCADE"),
        index=True,
    )
    offer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("car_offers.id", ondelete="CASCADE"),
        index=True,
    )

    # Gross PLN, overrides the partner's default margin
    custom_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    is_visible: Mapped[bool] = mapped_column(Boolean, default=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    partner: Mapped["Partner"] = relationship(back_populates="partner_offers")

    def __repr__(self) -> str:
        return f"<PartnerOffer {self.partner_id}/{self.offer_id}>"


class AppSettings(Base):
    """Global storefront settings (singleton row, id=1)."""

    __tablename__ = "app_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    site_name: Mapped[str] = mapped_column(String(255), default="Showroom")
    default_currency: Mapped[str] = mapped_column(String(3), default="PLN")

    # PLN per 1 EUR; 0 means not configured
    exchange_rate_eur: Mapped[Decimal] = mapped_column(Numeric(10, 4), default=Decimal("0"))
    show_eur_prices: Mapped[bool] = mapped_column(Boolean, default=False)

    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<AppSettings rate={self.exchange_rate_eur}>"
