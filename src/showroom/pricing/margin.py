"""Vehicle margin breakdown.

Total cost = net purchase EUR + financing EUR + additional costs EUR + transport EUR
Margin     = sale net EUR - total cost
Margin %   = margin / total cost × 100   (cost basis)

Every EUR figure is rounded to 2 decimals and later steps use the rounded
values, so the published parts add up to the published totals.
"""

from collections.abc import Mapping
from typing import Any

from showroom.pricing.costs import calculate_additional_costs_total_eur
from showroom.pricing.models import VehicleMarginBreakdown, VehicleMarginInput
from showroom.pricing.vat import net_from_gross, pln_to_eur, round_money, sale_gross_to_net


def cost_basis_margin_percent(margin_eur: float, total_cost_eur: float) -> float:
    """Margin as a percentage of the total cost basis, 0 without costs."""
    if total_cost_eur <= 0:
        return 0.0
    return round_money(margin_eur / total_cost_eur * 100)


def sale_value_margin_percent(margin_eur: float, sale_net_eur: float) -> float:
    """Margin as a percentage of net sale value.

    Older partner reports used this denominator. It is not interchangeable
    with cost_basis_margin_percent.
    """
    if sale_net_eur <= 0:
        return 0.0
    return round_money(margin_eur / sale_net_eur * 100)


def calculate_vehicle_margin_breakdown(
    data: VehicleMarginInput | Mapping[str, Any],
) -> VehicleMarginBreakdown:
    """Calculate the full cost and margin breakdown for one vehicle.

    Never raises for numeric input: negative prices and rates are clamped,
    and a missing exchange rate turns every EUR purchase figure into 0.

    Args:
        data: VehicleMarginInput, or a mapping with its fields

    Returns:
        VehicleMarginBreakdown with EUR fields rounded to 2 decimals
    """
    if not isinstance(data, VehicleMarginInput):
        data = VehicleMarginInput.model_validate(data)

    purchase_net_pln = net_from_gross(data.purchase_gross_pln)
    # Derived from the net value so net + VAT always equals the gross input
    vat_pln = round_money(data.purchase_gross_pln - purchase_net_pln)

    purchase_net_eur = round_money(pln_to_eur(purchase_net_pln, data.exchange_rate_pln_per_eur))
    financing_cost_eur = round_money(
        purchase_net_eur * max(0.0, data.financing_cost_percent) / 100
    )
    net_plus_financing = purchase_net_eur + financing_cost_eur

    if data.additional_costs_eur is not None:
        additional_costs_eur = round_money(max(0.0, data.additional_costs_eur))
    else:
        additional_costs_eur = calculate_additional_costs_total_eur(
            data.additional_cost_items, net_plus_financing
        )

    transport_cost_eur = round_money(max(0.0, data.transport_cost_eur))

    total_cost_eur = round_money(
        purchase_net_eur + financing_cost_eur + additional_costs_eur + transport_cost_eur
    )

    sale_gross_eur = round_money(max(0.0, data.sale_gross_eur))
    sale_net_eur = sale_gross_to_net(sale_gross_eur)

    margin_eur = round_money(sale_net_eur - total_cost_eur)

    return VehicleMarginBreakdown(
        purchase_net_pln=purchase_net_pln,
        vat_pln=vat_pln,
        purchase_net_eur=purchase_net_eur,
        financing_cost_eur=financing_cost_eur,
        additional_costs_eur=additional_costs_eur,
        transport_cost_eur=transport_cost_eur,
        total_cost_eur=total_cost_eur,
        sale_gross_eur=sale_gross_eur,
        sale_net_eur=sale_net_eur,
        margin_eur=margin_eur,
        margin_percent=cost_basis_margin_percent(margin_eur, total_cost_eur),
    )
