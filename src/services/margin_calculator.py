"""
Margin and pricing math for menu items.

    margin %          = (price - cost) / price × 100
    food cost %       = cost / price × 100
    contribution      = price - cost

Margins are undefined (None) when either the price or the cost is missing
or not positive, so an unpriced or uncosted item never shows up as a 0%
or 100% margin. Negative margins (cost above price) are returned as-is.
"""
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from src.core.numbers import HUNDRED, ZERO, is_positive, to_decimal, to_plain


# Food-cost targets for the suggested price points. Fixed by product
# decision, not derived from the menu.
BREAK_EVEN_FOOD_COST = Decimal("0.30")
RECOMMENDED_FOOD_COST = Decimal("0.25")
PREMIUM_FOOD_COST = Decimal("0.20")

# Lower bounds (inclusive) of the margin tiers, in percent
EXCELLENT_MARGIN = Decimal(70)
GOOD_MARGIN = Decimal(50)
FAIR_MARGIN = Decimal(30)

# Upper bounds (exclusive) of the food-cost ratings, in percent
LOW_FOOD_COST = Decimal(25)
MODERATE_FOOD_COST = Decimal(35)


class MarginTier(str, Enum):
    """Margin classification used for color-coding."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    UNKNOWN = "unknown"


class FoodCostRating(str, Enum):
    """Food-cost percentage classification."""
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class MarginResult:
    margin: Optional[Decimal]
    tier: MarginTier


@dataclass(frozen=True)
class PricingTiers:
    """Menu prices that hit the 30% / 25% / 20% food-cost targets."""
    break_even: Decimal
    recommended: Decimal
    premium: Decimal


def margin(price: Any, cost: Any) -> Optional[Decimal]:
    """Profit margin percentage, or None when price or cost is not positive."""
    price, cost = to_decimal(price), to_decimal(cost)
    if not is_positive(price) or not is_positive(cost):
        return None
    return to_plain((price - cost) / price * HUNDRED)


def classify_margin(value: Optional[Decimal]) -> MarginTier:
    if value is None:
        return MarginTier.UNKNOWN
    if value >= EXCELLENT_MARGIN:
        return MarginTier.EXCELLENT
    if value >= GOOD_MARGIN:
        return MarginTier.GOOD
    if value >= FAIR_MARGIN:
        return MarginTier.FAIR
    return MarginTier.POOR


def evaluate_margin(price: Any, cost: Any) -> MarginResult:
    value = margin(price, cost)
    return MarginResult(margin=value, tier=classify_margin(value))


def food_cost_percentage(price: Any, cost: Any) -> Optional[Decimal]:
    """Cost as a percentage of price; same None policy as margin()."""
    price, cost = to_decimal(price), to_decimal(cost)
    if not is_positive(price) or not is_positive(cost):
        return None
    return to_plain(cost / price * HUNDRED)


def classify_food_cost(percentage: Optional[Decimal]) -> FoodCostRating:
    if percentage is None:
        return FoodCostRating.UNKNOWN
    if percentage < LOW_FOOD_COST:
        return FoodCostRating.LOW
    if percentage < MODERATE_FOOD_COST:
        return FoodCostRating.MODERATE
    return FoodCostRating.HIGH


def contribution_margin(price: Any, cost: Any) -> Optional[Decimal]:
    """Profit per plate (price - cost). None when the item has no price."""
    price = to_decimal(price)
    if not is_positive(price):
        return None
    return to_plain(price - (to_decimal(cost) or ZERO))


def pricing_tiers(cost: Any) -> PricingTiers:
    """
    Suggested menu prices for a food cost.

    break_even  = cost / 0.30
    recommended = cost / 0.25
    premium     = cost / 0.20
    """
    cost = to_decimal(cost)
    if not is_positive(cost):
        return PricingTiers(break_even=ZERO, recommended=ZERO, premium=ZERO)

    return PricingTiers(
        break_even=to_plain(cost / BREAK_EVEN_FOOD_COST),
        recommended=to_plain(cost / RECOMMENDED_FOOD_COST),
        premium=to_plain(cost / PREMIUM_FOOD_COST),
    )
