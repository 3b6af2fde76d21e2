"""Vehicle pricing and margin calculation."""

from showroom.pricing.costs import (
    calculate_additional_costs_total_eur,
    normalize_additional_cost_items,
    serialize_additional_cost_items,
)
from showroom.pricing.display import (
    approximate_eur_price,
    calculate_display_price,
    calculate_margin_amount,
    calculate_margin_percent,
    format_price,
    format_price_precise,
)
from showroom.pricing.margin import (
    calculate_vehicle_margin_breakdown,
    cost_basis_margin_percent,
    sale_value_margin_percent,
)
from showroom.pricing.models import (
    AdditionalCostItem,
    AdditionalCostMode,
    FixedEurCost,
    PercentOfBaseCost,
    VehicleMarginBreakdown,
    VehicleMarginInput,
)
from showroom.pricing.transport import (
    MAX_TRANSPORT_COUNT,
    TRANSPORT_TIERS,
    calculate_transport_cost_per_car_eur,
    calculate_transport_cost_total_eur,
    count_transport_bundles,
    decompose_transport_bundles,
    normalize_transport_tiers,
)
from showroom.pricing.vat import (
    PURCHASE_VAT_RATE,
    SALE_VAT_RATE,
    calculate_gross_price,
    calculate_net_price,
    eur_to_pln,
    net_from_gross,
    pln_to_eur,
    round_money,
    round_pln,
    sale_gross_to_net,
)

__all__ = [
    # Models
    "AdditionalCostItem",
    "AdditionalCostMode",
    "FixedEurCost",
    "PercentOfBaseCost",
    "VehicleMarginBreakdown",
    "VehicleMarginInput",
    # VAT / currency
    "PURCHASE_VAT_RATE",
    "SALE_VAT_RATE",
    "calculate_gross_price",
    "calculate_net_price",
    "eur_to_pln",
    "net_from_gross",
    "pln_to_eur",
    "round_money",
    "round_pln",
    "sale_gross_to_net",
    # Transport
    "MAX_TRANSPORT_COUNT",
    "TRANSPORT_TIERS",
    "calculate_transport_cost_per_car_eur",
    "calculate_transport_cost_total_eur",
    "count_transport_bundles",
    "decompose_transport_bundles",
    "normalize_transport_tiers",
    # Additional costs
    "calculate_additional_costs_total_eur",
    "normalize_additional_cost_items",
    "serialize_additional_cost_items",
    # Margin
    "calculate_vehicle_margin_breakdown",
    "cost_basis_margin_percent",
    "sale_value_margin_percent",
    # Display
    "approximate_eur_price",
    "calculate_display_price",
    "calculate_margin_amount",
    "calculate_margin_percent",
    "format_price",
    "format_price_precise",
]
