"""Initial migration - offers, partners and app settings.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Catalogue offers (prices gross PLN)
    op.create_table(
        "car_offers",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("brand", sa.String(100), nullable=False, index=True),
        sa.Column("model", sa.String(100), nullable=False),
        sa.Column("model_version", sa.String(255), nullable=True),
        sa.Column("year", sa.Integer(), nullable=True),
        sa.Column("mileage", sa.Integer(), nullable=True),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        # Specs
        sa.Column("fuel_type", sa.String(50), nullable=True),
        sa.Column("engine_power", sa.String(50), nullable=True),
        sa.Column("transmission", sa.String(50), nullable=True),
        sa.Column("main_photo_url", sa.String(1000), nullable=True),
        sa.Column("features", sa.JSON(), nullable=False, server_default="{}"),
        sa.Column("technical_spec", sa.JSON(), nullable=False, server_default="{}"),
        # Timestamps
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    # Partners with pricing configuration
    op.create_table(
        "partners",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("slug", sa.String(100), nullable=False, unique=True, index=True),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("company_address", sa.Text(), nullable=True),
        sa.Column("vat_number", sa.String(50), nullable=True),
        sa.Column("contact_person", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("website", sa.String(500), nullable=True),
        # Pricing
        sa.Column("default_margin_percent", sa.Numeric(6, 2), nullable=False, server_default="0"),
        sa.Column("financing_cost_percent", sa.Numeric(6, 2), nullable=False, server_default="0"),
        sa.Column("additional_cost_items", sa.JSON(), nullable=False, server_default="[]"),
        sa.Column("transport_cost_tiers_eur", sa.JSON(), nullable=False, server_default="{}"),
        # Storefront display
        sa.Column("show_net_prices", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("show_secondary_currency", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("notes", sa.Text(), nullable=True),
        # Timestamps
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "partner_filters",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "partner_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("partners.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("brand_name", sa.String(100), nullable=False),
        sa.Column("model_name", sa.String(100), nullable=True),  # NULL = all models
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )

    op.create_table(
        "partner_offers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "partner_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("partners.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column(
            "offer_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("car_offers.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        ),
        sa.Column("custom_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_visible", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("partner_id", "offer_id", name="uq_partner_offer"),
    )

    # Singleton settings row
    op.create_table(
        "app_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("site_name", sa.String(255), nullable=False, server_default="Showroom"),
        sa.Column("default_currency", sa.String(3), nullable=False, server_default="PLN"),
        sa.Column("exchange_rate_eur", sa.Numeric(10, 4), nullable=False, server_default="0"),
        sa.Column("show_eur_prices", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("contact_phone", sa.String(50), nullable=True),
        sa.Column("contact_email", sa.String(255), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("app_settings")
    op.drop_table("partner_offers")
    op.drop_table("partner_filters")
    op.drop_table("partners")
    op.drop_table("car_offers")
