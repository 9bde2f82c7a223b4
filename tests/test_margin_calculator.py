"""
Unit tests for margin, food-cost and pricing-tier math.
"""
from decimal import Decimal

import pytest

from src.schemas.costing import PricingTiersResponse
from src.services.margin_calculator import (
    FoodCostRating,
    MarginTier,
    classify_food_cost,
    classify_margin,
    contribution_margin,
    evaluate_margin,
    food_cost_percentage,
    margin,
    pricing_tiers,
)


class TestMargin:

    def test_basic_margin(self):
        # $6.00 food cost on a $20.00 plate
        assert margin(Decimal("20.00"), Decimal("6.00")) == Decimal(70)

    def test_negative_margin_is_not_clamped(self):
        assert margin(Decimal("10"), Decimal("15")) == Decimal(-50)

    @pytest.mark.parametrize("price,cost", [
        (0, 5),
        (-10, 5),
        (None, 5),
        ("", 5),
        (10, 0),
        (10, -1),
        (10, None),
        (0, 0),
        (float("nan"), 5),
        (10, float("inf")),
    ])
    def test_undefined_margin_is_none(self, price, cost):
        assert margin(price, cost) is None

    @pytest.mark.parametrize("price,cost", [
        ("0.01", "1000000"),
        ("1000000", "0.01"),
        (12.5, 3.75),
        (1, 1),
    ])
    def test_defined_margin_is_finite(self, price, cost):
        result = margin(price, cost)
        assert result is not None
        assert result.is_finite()

    def test_accepts_floats_and_strings(self):
        assert margin(20.0, "6") == Decimal(70)


class TestMarginTiers:

    @pytest.mark.parametrize("value,tier", [
        (Decimal("85"), MarginTier.EXCELLENT),
        (Decimal("70"), MarginTier.EXCELLENT),
        (Decimal("69.99"), MarginTier.GOOD),
        (Decimal("50"), MarginTier.GOOD),
        (Decimal("30"), MarginTier.FAIR),
        (Decimal("29.9"), MarginTier.POOR),
        (Decimal("-40"), MarginTier.POOR),
        (None, MarginTier.UNKNOWN),
    ])
    def test_classify_margin(self, value, tier):
        assert classify_margin(value) == tier

    def test_tier_values_are_plain_strings(self):
        assert MarginTier.EXCELLENT == "excellent"
        assert MarginTier.UNKNOWN.value == "unknown"

    def test_evaluate_margin(self):
        result = evaluate_margin(Decimal("20.00"), Decimal("6.00"))

        assert result.margin == Decimal(70)
        assert result.tier == MarginTier.EXCELLENT

    def test_evaluate_margin_without_cost(self):
        result = evaluate_margin(Decimal("10.00"), Decimal(0))

        assert result.margin is None
        assert result.tier == MarginTier.UNKNOWN


class TestPricingTiers:

    def test_tiers_for_six_dollar_cost(self):
        tiers = pricing_tiers(Decimal("6.00"))

        assert tiers.break_even == Decimal("20.00")
        assert tiers.recommended == Decimal("24.00")
        assert tiers.premium == Decimal("30.00")

    def test_tiers_are_ordered(self):
        tiers = pricing_tiers(Decimal("3.17"))
        assert tiers.break_even < tiers.recommended < tiers.premium

    @pytest.mark.parametrize("cost", [0, None, -2])
    def test_no_cost_gives_zero_tiers(self, cost):
        tiers = pricing_tiers(cost)
        assert (tiers.break_even, tiers.recommended, tiers.premium) == (0, 0, 0)


class TestFoodCost:

    def test_food_cost_percentage(self):
        assert food_cost_percentage(Decimal("20.00"), Decimal("6.00")) == Decimal(30)

    def test_food_cost_percentage_without_price(self):
        assert food_cost_percentage(None, Decimal("6.00")) is None

    @pytest.mark.parametrize("pct,rating", [
        (Decimal("10"), FoodCostRating.LOW),
        (Decimal("24.99"), FoodCostRating.LOW),
        (Decimal("25"), FoodCostRating.MODERATE),
        (Decimal("34.99"), FoodCostRating.MODERATE),
        (Decimal("35"), FoodCostRating.HIGH),
        (None, FoodCostRating.UNKNOWN),
    ])
    def test_classify_food_cost(self, pct, rating):
        assert classify_food_cost(pct) == rating

    def test_contribution_margin(self):
        assert contribution_margin(Decimal("12.00"), Decimal("2.50")) == Decimal("9.50")

    def test_contribution_margin_with_unknown_cost(self):
        assert contribution_margin(Decimal("12.00"), None) == Decimal("12.00")

    def test_contribution_margin_without_price(self):
        assert contribution_margin(None, Decimal("2.50")) is None


class TestPlainDecimals:

    def test_whole_tiers_have_no_exponent(self):
        tiers = pricing_tiers(6)

        assert [str(t) for t in (tiers.break_even, tiers.recommended, tiers.premium)] == ["20", "24", "30"]

    def test_whole_tiers_serialize_without_exponent(self):
        data = PricingTiersResponse.model_validate(pricing_tiers(6)).model_dump(mode="json")

        assert data == {"break_even": "20", "recommended": "24", "premium": "30"}

    def test_whole_food_cost_percentage_has_no_exponent(self):
        assert str(food_cost_percentage(Decimal("0.30"), 6)) == "2000"

    def test_fractional_results_keep_their_digits(self):
        assert pricing_tiers(Decimal("2.50")).break_even == Decimal("2.50") / Decimal("0.30")
