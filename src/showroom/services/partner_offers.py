"""Partner offer assembly - combines the catalogue with partner overrides.

A partner sees every catalogue offer that matches its brand/model filters
(all offers when it has none). Each offer gets a display price from the
partner's default margin unless the partner set a custom price, and is
visible unless the partner hid it.

Usage:
    rows = await load_partner_offer_rows(db, partner)
    visible = [row for row in rows if row.is_visible]
"""

import logging
import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from showroom.db.models import CarOffer, Partner, PartnerFilter, PartnerOffer
from showroom.pricing import (
    AdditionalCostItem,
    VehicleMarginBreakdown,
    VehicleMarginInput,
    calculate_display_price,
    calculate_margin_amount,
    calculate_margin_percent,
    calculate_net_price,
    calculate_transport_cost_per_car_eur,
    calculate_transport_cost_total_eur,
    calculate_vehicle_margin_breakdown,
    decompose_transport_bundles,
    normalize_additional_cost_items,
    normalize_transport_tiers,
    round_pln,
)
from showroom.pricing.transport import TransportTiers
from showroom.pricing.vat import SALE_VAT_RATE, coerce_amount, pln_to_eur, round_money

logger = logging.getLogger(__name__)


class ArbitrageSort(str, Enum):
    """Orderings for the arbitrage (flat margin) list."""

    MARGIN_AMOUNT_DESC = "margin_amount_desc"
    MARGIN_PCT_DESC = "margin_pct_desc"


class CostBasisSort(str, Enum):
    """Orderings for the partner self-admin (cost-basis margin) list."""

    MARGIN_EUR_DESC = "margin_eur_desc"
    MARGIN_PCT_DESC = "margin_pct_desc"


@dataclass(frozen=True)
class PartnerPricingConfig:
    """Pricing fields read from a partner record, normalized."""

    default_margin_percent: float = 0.0
    financing_cost_percent: float = 0.0
    additional_cost_items: list[AdditionalCostItem] = field(default_factory=list)
    transport_cost_tiers_eur: TransportTiers = field(default_factory=normalize_transport_tiers)
    show_net_prices: bool = False


@dataclass
class PartnerOfferRow:
    """One catalogue offer as a given partner sells it."""

    offer: CarOffer
    calculated_price: float
    calculated_price_net: int
    margin_percent: float
    is_visible: bool = True
    show_net_prices: bool = False
    partner_offer_id: int | None = None
    custom_price: float | None = None
    notes: str | None = None

    @property
    def offer_id(self) -> uuid.UUID:
        return self.offer.id

    @property
    def base_price(self) -> float:
        return float(self.offer.price)

    @property
    def margin_amount_pln(self) -> float:
        """Flat margin in PLN: partner price - catalogue price."""
        return calculate_margin_amount(self.base_price, self.calculated_price)

    @property
    def margin_percent_flat(self) -> float:
        """Flat margin as a percentage of the catalogue price."""
        return calculate_margin_percent(self.base_price, self.calculated_price)


@dataclass
class SelectionMargins:
    """Cost-basis margins for a set of vehicles shipped together."""

    vehicle_count: int
    exchange_rate_pln_per_eur: float
    transport_bundles: list[int]
    transport_cost_total_eur: float
    transport_cost_per_car_eur: float
    breakdowns: list[tuple[PartnerOfferRow, VehicleMarginBreakdown]] = field(default_factory=list)

    @property
    def exchange_rate_missing(self) -> bool:
        return self.exchange_rate_pln_per_eur <= 0


@dataclass
class CostBasisArbitrageRow:
    """Partner offer with its cost-basis margin at the partner's sale price."""

    row: PartnerOfferRow
    sale_gross_eur: float
    is_break_even_price: bool
    breakdown: VehicleMarginBreakdown


def pricing_config_for_partner(partner: Partner) -> PartnerPricingConfig:
    """Read a partner's pricing configuration.

    Stored values are not validated, only normalized: negative percentages
    become 0, cost items and tier tables are cleaned up.
    """
    return PartnerPricingConfig(
        default_margin_percent=max(0.0, coerce_amount(partner.default_margin_percent)),
        financing_cost_percent=max(0.0, coerce_amount(partner.financing_cost_percent)),
        additional_cost_items=normalize_additional_cost_items(partner.additional_cost_items),
        transport_cost_tiers_eur=normalize_transport_tiers(partner.transport_cost_tiers_eur),
        show_net_prices=bool(partner.show_net_prices),
    )


def offer_matches_filters(offer: CarOffer, filters: Iterable[PartnerFilter]) -> bool:
    """Check an offer against a partner's brand/model filters.

    A filter without a model covers the whole brand. Matching is
    case-insensitive. No active filters means every offer matches.
    """
    active = [f for f in filters if f.is_active]
    if not active:
        return True

    brand = (offer.brand or "").lower()
    model = (offer.model or "").lower()

    for partner_filter in active:
        if partner_filter.brand_name.lower() != brand:
            continue
        if not partner_filter.model_name:
            return True
        if partner_filter.model_name.lower() == model:
            return True

    return False


def build_partner_offer_rows(
    config: PartnerPricingConfig,
    offers: Iterable[CarOffer],
    filters: Iterable[PartnerFilter],
    partner_offers: Iterable[PartnerOffer],
) -> list[PartnerOfferRow]:
    """Combine catalogue offers with a partner's overrides and prices."""
    filters = list(filters)
    overrides = {po.offer_id: po for po in partner_offers}

    rows = []
    for offer in offers:
        if not offer_matches_filters(offer, filters):
            continue

        override = overrides.get(offer.id)
        custom_price = (
            float(override.custom_price)
            if override is not None and override.custom_price is not None
            else None
        )
        calculated_price = calculate_display_price(
            base_price=float(offer.price),
            margin_percent=config.default_margin_percent,
            custom_price=custom_price,
        )

        rows.append(
            PartnerOfferRow(
                offer=offer,
                calculated_price=calculated_price,
                calculated_price_net=calculate_net_price(calculated_price),
                margin_percent=config.default_margin_percent,
                is_visible=override.is_visible if override is not None else True,
                show_net_prices=config.show_net_prices,
                partner_offer_id=override.id if override is not None else None,
                custom_price=custom_price,
                notes=override.notes if override is not None else None,
            )
        )

    return rows


def search_offer_rows(rows: Iterable[PartnerOfferRow], query: str | None) -> list[PartnerOfferRow]:
    """Case-insensitive search over brand, model and model version."""
    rows = list(rows)
    if not query:
        return rows

    needle = query.lower()
    return [
        row
        for row in rows
        if needle in (row.offer.brand or "").lower()
        or needle in (row.offer.model or "").lower()
        or needle in (row.offer.model_version or "").lower()
    ]


def sort_arbitrage_rows(
    rows: Iterable[PartnerOfferRow],
    sort: ArbitrageSort = ArbitrageSort.MARGIN_PCT_DESC,
) -> list[PartnerOfferRow]:
    """Order rows by flat margin, highest first."""
    if sort == ArbitrageSort.MARGIN_AMOUNT_DESC:
        return sorted(rows, key=lambda row: row.margin_amount_pln, reverse=True)
    return sorted(rows, key=lambda row: row.margin_percent_flat, reverse=True)


def bulk_margin_custom_price(base_price: float, margin_percent: float) -> int:
    """Custom price that applies ``margin_percent`` on top of the base price."""
    return round_pln(base_price * (1 + margin_percent / 100))


def calculate_selection_margins(
    config: PartnerPricingConfig,
    rows: Iterable[PartnerOfferRow],
    sale_gross_eur_by_offer: Mapping[Any, float],
    exchange_rate_pln_per_eur: float,
) -> SelectionMargins:
    """Cost-basis margin breakdown for every selected offer.

    The selected vehicles are assumed to ship together, so the transport
    tier is picked from the number of rows and split evenly per car.
    Offers without a sale price get a sale price of 0.

    Args:
        config: Partner pricing configuration
        rows: Selected partner offer rows
        sale_gross_eur_by_offer: Gross EUR sale price keyed by offer id (UUID or any UUID string)
        exchange_rate_pln_per_eur: Global exchange rate

    Returns:
        SelectionMargins with transport totals and one breakdown per row
    """
    rows = list(rows)
    count = len(rows)
    sale_prices = _sale_prices_by_offer_id(sale_gross_eur_by_offer)
    tiers = config.transport_cost_tiers_eur

    if exchange_rate_pln_per_eur <= 0 and rows:
        logger.warning("No EUR exchange rate configured - EUR purchase costs will be 0")

    result = SelectionMargins(
        vehicle_count=count,
        exchange_rate_pln_per_eur=exchange_rate_pln_per_eur,
        transport_bundles=decompose_transport_bundles(count, tiers),
        transport_cost_total_eur=calculate_transport_cost_total_eur(count, tiers),
        transport_cost_per_car_eur=calculate_transport_cost_per_car_eur(count, tiers),
    )

    for row in rows:
        sale_gross_eur = sale_prices.get(row.offer_id, 0.0)
        breakdown = calculate_vehicle_margin_breakdown(
            VehicleMarginInput(
                purchase_gross_pln=row.base_price,
                exchange_rate_pln_per_eur=exchange_rate_pln_per_eur,
                financing_cost_percent=config.financing_cost_percent,
                additional_cost_items=list(config.additional_cost_items),
                transport_cost_eur=result.transport_cost_per_car_eur,
                sale_gross_eur=sale_gross_eur,
            )
        )
        result.breakdowns.append((row, breakdown))

    return result


def _sale_prices_by_offer_id(sale_gross_eur_by_offer: Mapping[Any, float]) -> dict[uuid.UUID, float]:
    prices: dict[uuid.UUID, float] = {}
    for key, value in sale_gross_eur_by_offer.items():
        try:
            offer_id = key if isinstance(key, uuid.UUID) else uuid.UUID(str(key))
        except ValueError:
            logger.warning(f"Ignoring sale price for invalid offer id {key!r}")
            continue
        prices[offer_id] = value
    return prices


def break_even_sale_gross_eur(total_cost_eur: float) -> float:
    """Gross EUR sale price whose net value covers ``total_cost_eur``."""
    return round_money(max(0.0, total_cost_eur) * (1 + SALE_VAT_RATE))


def sort_cost_basis_arbitrage_rows(
    config: PartnerPricingConfig,
    rows: Iterable[PartnerOfferRow],
    batch_size: int,
    exchange_rate_pln_per_eur: float,
    sort: CostBasisSort = CostBasisSort.MARGIN_PCT_DESC,
) -> list[CostBasisArbitrageRow]:
    """Rank a partner's offers by cost-basis margin, highest first.

    Every vehicle is costed as if shipped in a batch of ``batch_size``.
    The sale price is the partner's custom price converted to EUR; offers
    without one are priced at break-even (total cost plus sale VAT), so
    their margin is 0.

    Args:
        config: Partner pricing configuration
        rows: Partner offer rows to rank
        batch_size: Vehicles per transport batch (values below 1 count as 1)
        exchange_rate_pln_per_eur: Global exchange rate
        sort: Order by margin in EUR or by margin percent

    Returns:
        Ranked rows with the breakdown used for the ranking
    """
    transport_cost_eur = calculate_transport_cost_per_car_eur(
        max(1, batch_size), config.transport_cost_tiers_eur
    )

    ranked = []
    for row in rows:
        base_input = VehicleMarginInput(
            purchase_gross_pln=row.base_price,
            exchange_rate_pln_per_eur=exchange_rate_pln_per_eur,
            financing_cost_percent=config.financing_cost_percent,
            additional_cost_items=list(config.additional_cost_items),
            transport_cost_eur=transport_cost_eur,
        )
        base = calculate_vehicle_margin_breakdown(base_input)

        has_custom = False
        if row.custom_price is not None and row.custom_price > 0:
            has_custom = True
            sale_gross_eur = round_money(pln_to_eur(row.custom_price, exchange_rate_pln_per_eur))
        else:
            sale_gross_eur = break_even_sale_gross_eur(base.total_cost_eur)

        breakdown = calculate_vehicle_margin_breakdown(
            base_input.model_copy(update={"sale_gross_eur": sale_gross_eur})
        )
        ranked.append(
            CostBasisArbitrageRow(
                row=row,
                sale_gross_eur=sale_gross_eur,
                is_break_even_price=not has_custom,
                breakdown=breakdown,
            )
        )

    if sort == CostBasisSort.MARGIN_EUR_DESC:
        return sorted(ranked, key=lambda item: item.breakdown.margin_eur, reverse=True)
    return sorted(ranked, key=lambda item: item.breakdown.margin_percent, reverse=True)


# --- Database access ---


async def get_partner(db: AsyncSession, partner_id: uuid.UUID) -> Partner | None:
    """Get a partner by ID (active or not)."""
    return await db.get(Partner, partner_id)


async def get_partner_by_slug(db: AsyncSession, slug: str) -> Partner | None:
    """Get an active partner by slug (public storefront)."""
    result = await db.execute(
        select(Partner).where(Partner.slug == slug.lower(), Partner.is_active == True)  # noqa: E712
    )
    return result.scalar_one_or_none()


async def get_partner_filters(db: AsyncSession, partner_id: uuid.UUID) -> list[PartnerFilter]:
    """Active filters of a partner, ordered by brand."""
    result = await db.execute(
        select(PartnerFilter)
        .where(PartnerFilter.partner_id == partner_id, PartnerFilter.is_active == True)  # noqa: E712
        .order_by(PartnerFilter.brand_name, PartnerFilter.model_name)
    )
    return list(result.scalars().all())


async def load_partner_offer_rows(db: AsyncSession, partner: Partner) -> list[PartnerOfferRow]:
    """Load and price every catalogue offer the partner resells."""
    filters = await get_partner_filters(db, partner.id)

    offers_result = await db.execute(select(CarOffer).order_by(CarOffer.created_at.desc()))
    offers = list(offers_result.scalars().all())

    overrides_result = await db.execute(
        select(PartnerOffer).where(PartnerOffer.partner_id == partner.id)
    )
    overrides = list(overrides_result.scalars().all())

    rows = build_partner_offer_rows(pricing_config_for_partner(partner), offers, filters, overrides)
    logger.debug(f"Partner {partner.slug}: {len(rows)} of {len(offers)} offers match filters")
    return rows


async def upsert_partner_offer(
    db: AsyncSession,
    partner_id: uuid.UUID,
    offer_id: uuid.UUID,
    updates: Mapping[str, Any],
) -> PartnerOffer:
    """Create or update a partner's override for one offer.

    Only keys present in ``updates`` are changed, so ``custom_price=None``
    clears a custom price while omitting it leaves it untouched.
    """
    result = await db.execute(
        select(PartnerOffer).where(
            PartnerOffer.partner_id == partner_id,
            PartnerOffer.offer_id == offer_id,
        )
    )
    partner_offer = result.scalar_one_or_none()

    if partner_offer is None:
        partner_offer = PartnerOffer(partner_id=partner_id, offer_id=offer_id, is_visible=True)
        db.add(partner_offer)
        logger.info(f"Creating partner offer {partner_id}/{offer_id}")

    for key, value in updates.items():
        if key == "is_visible" and value is None:
            continue
        setattr(partner_offer, key, value)

    await db.flush()
    await db.refresh(partner_offer)
    return partner_offer
