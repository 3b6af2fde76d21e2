"""Tests for VAT and currency primitives.

Hand-calculated reference values:
- 12 300 PLN gross / 1.23 = 10 000 PLN net
- 10 000 PLN / 4.3 = 2 325.58 EUR
- 2 360 EUR gross / 1.18 = 2 000 EUR net
"""

import math

import pytest

from showroom.pricing.vat import (
    PURCHASE_VAT_RATE,
    SALE_VAT_RATE,
    calculate_gross_price,
    calculate_net_price,
    coerce_amount,
    eur_to_pln,
    net_from_gross,
    pln_to_eur,
    round_money,
    round_pln,
    sale_gross_to_net,
)


class TestRounding:
    """Tests for half-up money rounding."""

    def test_rates(self) -> None:
        assert PURCHASE_VAT_RATE == 0.23
        assert SALE_VAT_RATE == 0.18

    def test_half_up_on_decimal_representation(self) -> None:
        """2.675 and 1.005 round up even though their binary value is below."""
        assert round_money(2.675) == 2.68
        assert round_money(1.005) == 1.01

    def test_half_away_from_zero_for_negatives(self) -> None:
        assert round_money(-2.675) == -2.68
        assert round_pln(-0.5) == -1

    def test_no_negative_zero(self) -> None:
        result = round_money(-0.004)
        assert result == 0.0
        assert math.copysign(1, result) == 1

    def test_non_finite_becomes_zero(self) -> None:
        assert round_money(float("nan")) == 0.0
        assert round_money(float("inf")) == 0.0

    def test_round_pln_returns_int(self) -> None:
        assert round_pln(2.5) == 3
        assert round_pln(1234.49) == 1234
        assert isinstance(round_pln(99.9), int)


class TestCoerceAmount:
    """Tests for lenient numeric coercion of stored values."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, 0.0),
            ("12.5", 12.5),
            ("abc", 0.0),
            (True, 0.0),
            (float("nan"), 0.0),
            (7, 7.0),
            (-3.5, -3.5),
        ],
    )
    def test_coerce(self, value: object, expected: float) -> None:
        assert coerce_amount(value) == expected


class TestVat:
    """Tests for net/gross conversions."""

    def test_net_from_gross(self) -> None:
        assert net_from_gross(12300) == 10000.0
        assert net_from_gross(100) == 81.3

    def test_net_from_gross_keeps_sign(self) -> None:
        assert net_from_gross(-123) == -100.0

    def test_sale_gross_to_net(self) -> None:
        assert sale_gross_to_net(2360) == 2000.0
        assert sale_gross_to_net(118) == 100.0
        assert sale_gross_to_net(0) == 0.0

    def test_whole_pln_net_and_gross(self) -> None:
        assert calculate_net_price(123000) == 100000
        assert calculate_gross_price(100000) == 123000
        assert calculate_net_price(110000) == 89431

    def test_net_gross_round_trip_within_one_pln(self) -> None:
        """Whole-PLN rounding can drift by at most 1 PLN over a round trip."""
        for gross in range(0, 5000, 7):
            assert abs(calculate_gross_price(calculate_net_price(gross)) - gross) <= 1


class TestCurrency:
    """Tests for PLN/EUR conversion."""

    def test_pln_to_eur(self) -> None:
        assert pln_to_eur(10000, 4.3) == pytest.approx(2325.5813953)
        assert round_money(pln_to_eur(10000, 4.3)) == 2325.58

    def test_eur_to_pln(self) -> None:
        assert eur_to_pln(100, 4.3) == pytest.approx(430.0)

    @pytest.mark.parametrize("rate", [0, -4.3])
    def test_missing_rate_degrades_to_zero(self, rate: float) -> None:
        """A non-positive rate means 'no rate configured', not an error."""
        assert pln_to_eur(10000, rate) == 0.0
        assert eur_to_pln(100, rate) == 0.0
