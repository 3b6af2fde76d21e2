"""Business logic services."""

from showroom.services.app_settings import get_exchange_rate, get_or_create_app_settings
from showroom.services.partner_offers import (
    ArbitrageSort,
    CostBasisArbitrageRow,
    CostBasisSort,
    PartnerOfferRow,
    PartnerPricingConfig,
    SelectionMargins,
    break_even_sale_gross_eur,
    build_partner_offer_rows,
    bulk_margin_custom_price,
    calculate_selection_margins,
    get_partner,
    get_partner_by_slug,
    get_partner_filters,
    load_partner_offer_rows,
    offer_matches_filters,
    pricing_config_for_partner,
    search_offer_rows,
    sort_arbitrage_rows,
    sort_cost_basis_arbitrage_rows,
    upsert_partner_offer,
)

__all__ = [
    # App settings
    "get_exchange_rate",
    "get_or_create_app_settings",
    # Partner offers
    "ArbitrageSort",
    "CostBasisArbitrageRow",
    "CostBasisSort",
    "PartnerOfferRow",
    "PartnerPricingConfig",
    "SelectionMargins",
    "break_even_sale_gross_eur",
    "build_partner_offer_rows",
    "bulk_margin_custom_price",
    "calculate_selection_margins",
    "get_partner",
    "get_partner_by_slug",
    "get_partner_filters",
    "load_partner_offer_rows",
    "offer_matches_filters",
    "pricing_config_for_partner",
    "search_offer_rows",
    "sort_arbitrage_rows",
    "sort_cost_basis_arbitrage_rows",
    "upsert_partner_offer",
]
