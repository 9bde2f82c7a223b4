"""
Cost breakdown and scenario Pydantic schemas for API request/response models.

Numbers are returned unformatted; currency and rounding are up to the
client.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.services.margin_calculator import FoodCostRating, MarginTier


class IngredientSnapshotResponse(BaseModel):
    id: Optional[str] = None
    name: str
    unit: str
    unit_price: Optional[Decimal] = None
    last_ordered_at: Optional[datetime] = None
    has_price: bool

    model_config = ConfigDict(from_attributes=True)


class RecipeLineResponse(BaseModel):
    """A costed recipe line."""
    id: Optional[str] = None
    name: str
    quantity: Decimal
    unit: str
    cost: Decimal
    has_price: bool
    ingredient: IngredientSnapshotResponse

    model_config = ConfigDict(from_attributes=True)


class ComponentCostResponse(BaseModel):
    key: str
    name: str
    cost: Decimal
    share: Decimal
    stored_cost: Optional[Decimal] = None
    stored_cost_variance: Optional[Decimal] = None
    ingredient_count: int
    lines: List[RecipeLineResponse]

    model_config = ConfigDict(from_attributes=True)


class CostBreakdownResponse(BaseModel):
    recipe_key: str
    source: str  # "components" or "lines"
    total_cost: Decimal
    components: List[ComponentCostResponse]
    missing_price_ingredients: List[RecipeLineResponse]
    missing_price_count: int
    has_complete_data: bool
    ingredient_count: int
    unique_ingredient_count: int

    model_config = ConfigDict(from_attributes=True)


class MarginResponse(BaseModel):
    margin: Optional[Decimal] = None  # None renders as "N/A"
    tier: MarginTier

    model_config = ConfigDict(from_attributes=True)


class PricingTiersResponse(BaseModel):
    break_even: Decimal
    recommended: Decimal
    premium: Decimal

    model_config = ConfigDict(from_attributes=True)


class CostAnalysisResponse(BaseModel):
    """Response model for a menu item's base cost breakdown."""
    menu_item_id: UUID
    menu_item_name: str
    menu_price: Optional[Decimal] = None
    breakdown: CostBreakdownResponse
    margin: MarginResponse
    contribution_margin: Optional[Decimal] = None
    food_cost_percentage: Optional[Decimal] = None
    food_cost_rating: FoodCostRating
    pricing_tiers: PricingTiersResponse


class ScenarioRequest(BaseModel):
    """
    What-if input. Values are taken as typed by the user and coerced by the
    engine: bad multipliers become 0, a bad price falls back to the menu price.
    """
    multipliers: Dict[str, Any] = Field(default_factory=dict)
    price_override: Any = None


class ScaledLineResponse(BaseModel):
    ingredient_id: Optional[str] = None
    ingredient_name: str
    unit: str
    base_quantity: Decimal
    quantity: Decimal
    base_cost: Decimal
    cost: Decimal
    has_price: bool

    model_config = ConfigDict(from_attributes=True)


class ScenarioComponentResponse(BaseModel):
    key: str
    name: str
    multiplier: Decimal
    base_cost: Decimal
    cost: Decimal
    lines: List[ScaledLineResponse]

    model_config = ConfigDict(from_attributes=True)


class ScenarioResponse(BaseModel):
    """Response model for a scenario recomputation."""
    recipe_key: str
    components: List[ScenarioComponentResponse]
    base_total_cost: Decimal
    total_cost: Decimal
    cost_change: Decimal
    price: Optional[Decimal] = None
    price_source: str  # "override" or "menu"
    base_margin: MarginResponse
    margin: MarginResponse
    margin_change: Optional[Decimal] = None
    food_cost_percentage: Optional[Decimal] = None
    pricing_tiers: PricingTiersResponse

    model_config = ConfigDict(from_attributes=True)


class CostHistoryEntryResponse(BaseModel):
    id: UUID
    created_at: Optional[datetime] = None
    old_cost: Optional[Decimal] = None
    new_cost: Optional[Decimal] = None
    change: Decimal
    change_reason: Optional[str] = None
    reason_label: str

    model_config = ConfigDict(from_attributes=True)


class CostHistoryResponse(BaseModel):
    items: List[CostHistoryEntryResponse]
    total: int
