"""
Menu item costing router.

Provides API endpoints for:
- Recipe cost breakdown with margin and suggested prices
- What-if scenarios (portion scaling, hypothetical price)
- Recipe cost history
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.core.config import get_settings
from src.core.deps import get_cost_analyzer
from src.schemas.costing import (
    CostAnalysisResponse,
    CostBreakdownResponse,
    CostHistoryEntryResponse,
    CostHistoryResponse,
    MarginResponse,
    PricingTiersResponse,
    ScenarioRequest,
    ScenarioResponse,
)
from src.services.cost_analysis import MenuItemCostAnalyzer
from src.services.recipe_graph import RecipeGraphError


router = APIRouter(prefix="/menu-items", tags=["costing"])
settings = get_settings()


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found")


def _malformed_recipe(e: RecipeGraphError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=f"Recipe data for this menu item is malformed: {e}",
    )


@router.get("/{menu_item_id}/cost-breakdown", response_model=CostAnalysisResponse)
def get_cost_breakdown(
    menu_item_id: UUID,
    analyzer: MenuItemCostAnalyzer = Depends(get_cost_analyzer),
):
    """
    Get the recipe cost breakdown for a menu item.

    Returns:
    - Component and ingredient costs, with missing price data flagged
    - Margin and margin tier (null margin when price or cost is unknown)
    - Food-cost percentage and rating
    - Break-even / recommended / premium prices (30% / 25% / 20% food cost)
    """
    try:
        analysis = analyzer.analyze(menu_item_id)
    except RecipeGraphError as e:
        raise _malformed_recipe(e)

    if not analysis:
        raise _not_found()

    return CostAnalysisResponse(
        menu_item_id=menu_item_id,
        menu_item_name=analysis.recipe.name,
        menu_price=analysis.menu_price,
        breakdown=CostBreakdownResponse.model_validate(analysis.breakdown),
        margin=MarginResponse.model_validate(analysis.margin),
        contribution_margin=analysis.contribution_margin,
        food_cost_percentage=analysis.food_cost_percentage,
        food_cost_rating=analysis.food_cost_rating,
        pricing_tiers=PricingTiersResponse.model_validate(analysis.pricing_tiers),
    )


@router.post("/{menu_item_id}/scenario", response_model=ScenarioResponse)
def run_scenario(
    menu_item_id: UUID,
    request: ScenarioRequest,
    analyzer: MenuItemCostAnalyzer = Depends(get_cost_analyzer),
):
    """
    Recompute cost and margin with scaled components and/or a hypothetical price.

    Multipliers are keyed by component id ("lines" for recipes without
    components). Nothing is saved.
    """
    try:
        scenario = analyzer.run_scenario(menu_item_id, request.multipliers, request.price_override)
    except RecipeGraphError as e:
        raise _malformed_recipe(e)

    if not scenario:
        raise _not_found()

    return ScenarioResponse.model_validate(scenario)


@router.get("/{menu_item_id}/cost-history", response_model=CostHistoryResponse)
def get_cost_history(
    menu_item_id: UUID,
    limit: Optional[int] = Query(None, ge=1, le=100, description="Number of entries to return"),
    analyzer: MenuItemCostAnalyzer = Depends(get_cost_analyzer),
):
    """Get the most recent recipe cost changes, newest first."""
    entries = analyzer.cost_history(menu_item_id, limit or settings.COST_HISTORY_LIMIT)
    if entries is None:
        raise _not_found()

    return CostHistoryResponse(
        items=[CostHistoryEntryResponse.model_validate(e) for e in entries],
        total=len(entries),
    )
