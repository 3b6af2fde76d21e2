"""Partner display prices, flat margins and price formatting.

The flat margin here compares a partner's display price with the offer's
base price (both gross PLN):

    Margin amount = display - base
    Margin %      = (display - base) / base × 100

It is used by the storefront and the arbitrage list, and is a different
figure from the cost-basis margin in ``showroom.pricing.margin``.
"""

from showroom.pricing.vat import pln_to_eur, round_money, round_pln

NBSP = "\u00a0"

CURRENCY_SYMBOLS: dict[str, str] = {
    "PLN": "zł",
    "EUR": "€",
}


def calculate_display_price(
    base_price: float,
    margin_percent: float,
    custom_price: float | None = None,
) -> float:
    """Price shown by a partner for an offer.

    Priority: custom price > base price + margin (whole PLN) > base price.
    """
    if custom_price is not None:
        return custom_price

    if margin_percent > 0:
        return round_pln(base_price * (1 + margin_percent / 100))

    return base_price


def calculate_margin_amount(base_price: float, display_price: float) -> float:
    """Flat margin amount: display - base, rounded to 2 decimals."""
    return round_money(display_price - base_price)


def calculate_margin_percent(base_price: float, display_price: float) -> float:
    """Flat margin percentage of the base price, 0 for a zero base."""
    if base_price == 0:
        return 0.0
    return round_money((display_price - base_price) / base_price * 100)


def approximate_eur_price(price_pln: float, rate_pln_per_eur: float) -> int:
    """Whole-EUR secondary currency figure, 0 without an exchange rate."""
    return round_pln(pln_to_eur(price_pln, rate_pln_per_eur))


def format_price(price: float, currency: str = "PLN") -> str:
    """Format a price the Polish way without decimals, e.g. ``12 300 zł``."""
    return _format(round_money(price, places=0), currency, decimals=0)


def format_price_precise(price: float, currency: str = "PLN") -> str:
    """Format a price with two decimals, e.g. ``2 325,58 €``."""
    return _format(round_money(price), currency, decimals=2)


def _format(amount: float, currency: str, decimals: int) -> str:
    sign = "-" if amount < 0 else ""
    integer_part, _, fraction = f"{abs(amount):.{decimals}f}".partition(".")

    # Polish grouping only kicks in from five integer digits (1234 stays as is)
    if len(integer_part) > 4:
        integer_part = f"{int(integer_part):,}".replace(",", NBSP)

    number = integer_part + (f",{fraction}" if fraction else "")
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    return f"{sign}{number}{NBSP}{symbol}"
