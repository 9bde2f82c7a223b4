"""
Menu item cost analysis.

Ties the recipe engine to the database: snapshot -> normalized recipe ->
cost breakdown -> margin figures, and runs what-if scenarios on top of the
same breakdown.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from src.services.cost_aggregator import CostBreakdown, aggregate
from src.services.margin_calculator import (
    FoodCostRating,
    MarginResult,
    PricingTiers,
    classify_food_cost,
    contribution_margin,
    evaluate_margin,
    food_cost_percentage,
    pricing_tiers,
)
from src.services.recipe_graph import Recipe, normalize
from src.services.recipe_snapshots import CostHistoryEntry, RecipeSnapshotRepository
from src.services.scenario_engine import ScenarioBreakdown, apply_scenario, build_scenario
from src.services.unit_conversion import NaiveUnitConverter, UnitConverter

logger = logging.getLogger(__name__)


@dataclass
class CostAnalysis:
    """Base (non-scenario) cost and margin figures for a menu item."""
    recipe: Recipe
    breakdown: CostBreakdown
    menu_price: Optional[Decimal]
    margin: MarginResult
    contribution_margin: Optional[Decimal]
    food_cost_percentage: Optional[Decimal]
    food_cost_rating: FoodCostRating
    pricing_tiers: PricingTiers


class MenuItemCostAnalyzer:
    """
    Computes cost breakdowns and scenarios for menu items.

    The unit converter defaults to naive quantity × price when the
    standardization service is not wired in.
    """

    def __init__(self, db: Session, converter: Optional[UnitConverter] = None):
        self.repository = RecipeSnapshotRepository(db)
        self.converter = converter or NaiveUnitConverter()

    def analyze(self, menu_item_id: UUID) -> Optional[CostAnalysis]:
        """
        Cost analysis for a single menu item.

        Returns None if the menu item is not found. Raises RecipeGraphError
        when the stored recipe cannot be normalized.
        """
        snapshot = self.repository.get_snapshot(menu_item_id)
        if snapshot is None:
            return None

        recipe = normalize(snapshot.menu_item, snapshot.components, snapshot.lines, self.converter)
        breakdown = aggregate(recipe)

        if breakdown.missing_price_count:
            logger.info(
                f"Menu item {menu_item_id} has {breakdown.missing_price_count} "
                f"ingredient(s) without price data"
            )

        food_cost_pct = food_cost_percentage(recipe.menu_price, breakdown.total_cost)

        return CostAnalysis(
            recipe=recipe,
            breakdown=breakdown,
            menu_price=recipe.menu_price,
            margin=evaluate_margin(recipe.menu_price, breakdown.total_cost),
            contribution_margin=contribution_margin(recipe.menu_price, breakdown.total_cost),
            food_cost_percentage=food_cost_pct,
            food_cost_rating=classify_food_cost(food_cost_pct),
            pricing_tiers=pricing_tiers(breakdown.total_cost),
        )

    def run_scenario(
        self,
        menu_item_id: UUID,
        multipliers: Optional[Mapping[str, Any]] = None,
        price_override: Any = None,
    ) -> Optional[ScenarioBreakdown]:
        """
        What-if figures for a menu item from raw user input.

        Returns None if the menu item is not found.
        """
        analysis = self.analyze(menu_item_id)
        if analysis is None:
            return None

        state = build_scenario(multipliers, price_override, recipe_key=analysis.recipe.key)
        return apply_scenario(analysis.recipe, analysis.breakdown, state)

    def cost_history(self, menu_item_id: UUID, limit: int = 10) -> Optional[list[CostHistoryEntry]]:
        """Recent recipe cost changes. Returns None if the menu item is not found."""
        if not self.repository.menu_item_exists(menu_item_id):
            return None
        return self.repository.get_cost_history(menu_item_id, limit)
