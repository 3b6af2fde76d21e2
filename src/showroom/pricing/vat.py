"""VAT and currency conversion primitives.

Purchases are made in Poland (gross PLN, 23% VAT), sales are made abroad
(gross EUR, 18% VAT). Exchange rates are always PLN per 1 EUR and are
supplied by the caller.

None of these functions raise on numeric input. A missing or zero exchange
rate degrades to 0 so the admin screens can still render.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

PURCHASE_VAT_RATE = 0.23
SALE_VAT_RATE = 0.18


def round_money(value: float, places: int = 2) -> float:
    """Round half-up to a fixed number of decimal places.

    Rounding is done on the shortest decimal representation of the float,
    so 2.675 becomes 2.68 (binary float rounding would give 2.67).

    Args:
        value: Amount to round
        places: Decimal places (2 for EUR breakdown fields)

    Returns:
        Rounded amount, or 0.0 for NaN/infinity
    """
    if not math.isfinite(value):
        return 0.0
    quantum = Decimal(1).scaleb(-places)
    try:
        rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # Magnitude beyond decimal context precision, nothing left to round
        return float(value)
    return float(rounded) + 0.0  # normalizes -0.0


def round_pln(value: float) -> int:
    """Round half-up to whole PLN (legacy display paths)."""
    return int(round_money(value, places=0))


def coerce_amount(value: Any) -> float:
    """Read a number from loosely typed stored configuration.

    None, empty strings, garbage and non-finite numbers all become 0.0.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError, InvalidOperation):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def net_from_gross(gross_pln: float) -> float:
    """Remove Polish purchase VAT: gross / 1.23, rounded to 2 decimals."""
    return round_money(gross_pln / (1 + PURCHASE_VAT_RATE))


def pln_to_eur(amount_pln: float, rate_pln_per_eur: float) -> float:
    """Convert PLN to EUR.

    Returns 0.0 when the rate is not positive (no exchange rate configured).
    """
    if rate_pln_per_eur <= 0:
        return 0.0
    return amount_pln / rate_pln_per_eur


def eur_to_pln(amount_eur: float, rate_pln_per_eur: float) -> float:
    """Convert EUR to PLN, 0.0 when the rate is not positive."""
    if rate_pln_per_eur <= 0:
        return 0.0
    return amount_eur * rate_pln_per_eur


def sale_gross_to_net(sale_gross_eur: float) -> float:
    """Remove sale-side VAT: gross / 1.18, rounded to 2 decimals."""
    return round_money(sale_gross_eur / (1 + SALE_VAT_RATE))


def calculate_net_price(gross_pln: float) -> int:
    """Legacy net price in whole PLN (23% VAT)."""
    return round_pln(gross_pln / (1 + PURCHASE_VAT_RATE))


def calculate_gross_price(net_pln: float) -> int:
    """Legacy gross price in whole PLN (23% VAT)."""
    return round_pln(net_pln * (1 + PURCHASE_VAT_RATE))
