"""Tests for partner additional cost items."""

import pytest
from pydantic import TypeAdapter, ValidationError

from showroom.pricing.costs import (
    calculate_additional_costs_total_eur,
    normalize_additional_cost_items,
    serialize_additional_cost_items,
)
from showroom.pricing.models import (
    AdditionalCostItem,
    AdditionalCostMode,
    FixedEurCost,
    PercentOfBaseCost,
)


@pytest.fixture
def cost_items() -> list[dict]:
    """Stored JSON shape, as the admin form saves it."""
    return [
        {"description": "Registration", "mode": "fixed_eur", "valueEurNet": 350, "percentValue": 0},
        {
            "description": "Warranty",
            "mode": "percent_of_net_plus_financing",
            "valueEurNet": 0,
            "percentValue": 1.5,
        },
    ]


class TestCostItemModels:
    """Tests for the tagged cost item variants."""

    def test_discriminated_on_mode(self) -> None:
        adapter = TypeAdapter(AdditionalCostItem)
        fixed = adapter.validate_python({"description": "A", "mode": "fixed_eur", "valueEurNet": 5})
        percent = adapter.validate_python(
            {"description": "B", "mode": "percent_of_net_plus_financing", "percentValue": 2}
        )
        assert isinstance(fixed, FixedEurCost)
        assert isinstance(percent, PercentOfBaseCost)
        assert percent.mode == AdditionalCostMode.PERCENT_OF_NET_PLUS_FINANCING.value

    def test_unknown_mode_rejected_by_model(self) -> None:
        """Strict validation rejects it; normalization (below) is the lenient path."""
        with pytest.raises(ValidationError):
            TypeAdapter(AdditionalCostItem).validate_python({"description": "A", "mode": "weird"})


class TestNormalizeCostItems:
    """Tests for lenient cleanup of stored cost items."""

    def test_stored_shape(self, cost_items: list[dict]) -> None:
        items = normalize_additional_cost_items(cost_items)
        assert items == [
            FixedEurCost(description="Registration", value_eur_net=350),
            PercentOfBaseCost(description="Warranty", percent_value=1.5),
        ]

    @pytest.mark.parametrize("raw", [None, [], "fixed_eur", {"description": "x"}])
    def test_non_list_input(self, raw: object) -> None:
        assert normalize_additional_cost_items(raw) == []  # type: ignore[arg-type]

    def test_blank_description_dropped(self) -> None:
        items = normalize_additional_cost_items(
            [
                {"description": "   ", "mode": "fixed_eur", "valueEurNet": 100},
                {"mode": "fixed_eur", "valueEurNet": 100},
                {"description": "  Cleaning ", "mode": "fixed_eur", "valueEurNet": 40},
            ]
        )
        assert items == [FixedEurCost(description="Cleaning", value_eur_net=40)]

    def test_unknown_mode_falls_back_to_fixed(self) -> None:
        items = normalize_additional_cost_items(
            [{"description": "Misc", "mode": "weird", "valueEurNet": 50, "percentValue": 10}]
        )
        assert items == [FixedEurCost(description="Misc", value_eur_net=50)]

    def test_negative_and_garbage_amounts_clamped(self) -> None:
        items = normalize_additional_cost_items(
            [
                {"description": "A", "mode": "fixed_eur", "valueEurNet": -20},
                {"description": "B", "mode": "percent_of_net_plus_financing", "percentValue": "x"},
            ]
        )
        assert items[0].value_eur_net == 0.0
        assert items[1].percent_value == 0.0

    def test_snake_case_and_models_accepted(self) -> None:
        items = normalize_additional_cost_items(
            [
                {"description": "A", "mode": "fixed_eur", "value_eur_net": 10},
                PercentOfBaseCost(description="B", percent_value=3),
                "not an item",
            ]
        )
        assert items == [
            FixedEurCost(description="A", value_eur_net=10),
            PercentOfBaseCost(description="B", percent_value=3),
        ]


class TestSerializeCostItems:
    """Tests for the stored JSON shape."""

    def test_unused_amount_zeroed(self) -> None:
        serialized = serialize_additional_cost_items(
            [
                {
                    "description": "Warranty",
                    "mode": "percent_of_net_plus_financing",
                    "valueEurNet": 99,
                    "percentValue": 1.5,
                },
                {"description": "Registration", "mode": "fixed_eur", "valueEurNet": 350, "percentValue": 7},
            ]
        )
        assert serialized == [
            {
                "description": "Warranty",
                "mode": "percent_of_net_plus_financing",
                "valueEurNet": 0.0,
                "percentValue": 1.5,
            },
            {
                "description": "Registration",
                "mode": "fixed_eur",
                "valueEurNet": 350.0,
                "percentValue": 0.0,
            },
        ]


class TestAdditionalCostsTotal:
    """Tests for summing additional costs."""

    def test_percent_of_base(self) -> None:
        items = [{"description": "Fee", "mode": "percent_of_net_plus_financing", "percentValue": 10}]
        assert calculate_additional_costs_total_eur(items, 1000) == 100.0

    def test_mixed_items(self, cost_items: list[dict]) -> None:
        # 350 + 1.5% of 2000
        assert calculate_additional_costs_total_eur(cost_items, 2000) == 380.0

    def test_rounded_to_cents(self, cost_items: list[dict]) -> None:
        # 350 + 1.5% of 23 720.93 = 350 + 355.81395
        assert calculate_additional_costs_total_eur(cost_items, 23720.93) == 705.81

    @pytest.mark.parametrize("base", [0, -500])
    def test_non_positive_base(self, cost_items: list[dict], base: float) -> None:
        """Percentage items add nothing without a base; fixed items still count."""
        assert calculate_additional_costs_total_eur(cost_items, base) == 350.0

    def test_no_items(self) -> None:
        assert calculate_additional_costs_total_eur(None, 1000) == 0.0
        assert calculate_additional_costs_total_eur([], 1000) == 0.0
