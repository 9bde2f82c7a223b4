"""
What-if scenarios for recipe cost and margin.

A scenario scales each component's portion by a multiplier and optionally
replaces the menu price with a hypothetical one:

    scaled_quantity = quantity × multiplier
    scaled_cost     = line_cost × multiplier
    scenario_total  = Σ scaled_cost
    scenario_margin = margin(price_override or menu_price, scenario_total)

ScenarioState is an immutable value owned by the caller. The reducer
functions below return new states; nothing here mutates a recipe, a
breakdown or a previous state. Multipliers of 0 remove a component from
the plate; there is no upper bound.
"""
from dataclasses import dataclass, field, replace
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Mapping, Optional

from src.core.numbers import ONE, ZERO, is_positive, to_decimal
from src.services.cost_aggregator import CostBreakdown, sum_line_costs
from src.services.margin_calculator import (
    MarginResult,
    PricingTiers,
    evaluate_margin,
    food_cost_percentage,
    pricing_tiers,
)
from src.services.recipe_graph import (
    FLAT_BUCKET_KEY,
    FlatRecipe,
    Recipe,
    RecipeLine,
    StructuredRecipe,
)


PRICE_SOURCE_OVERRIDE = "override"
PRICE_SOURCE_MENU = "menu"


@dataclass(frozen=True)
class ScenarioState:
    """
    Per-recipe scaling multipliers plus an optional hypothetical price.

    Keys are component ids, or "lines" for a flat recipe. Missing keys
    mean "unchanged" (multiplier 1). Values are coerced on construction,
    so a state built directly holds the same clean values the reducers
    produce. Multipliers are stored as a read-only mapping.
    """
    multipliers: Mapping[str, Decimal] = field(default_factory=dict)
    price_override: Optional[Decimal] = None
    recipe_key: Optional[str] = None

    def __post_init__(self):
        multipliers = {str(key): coerce_multiplier(raw) for key, raw in (self.multipliers or {}).items()}
        object.__setattr__(self, "multipliers", MappingProxyType(multipliers))
        object.__setattr__(self, "price_override", coerce_price(self.price_override))

    def __hash__(self):
        return hash((frozenset(self.multipliers.items()), self.price_override, self.recipe_key))

    def multiplier_for(self, key: str) -> Decimal:
        return self.multipliers.get(key, ONE)

    @property
    def is_identity(self) -> bool:
        return self.price_override is None and all(m == ONE for m in self.multipliers.values())


@dataclass(frozen=True)
class ScaledLine:
    ingredient_id: Optional[str]
    ingredient_name: str
    unit: str
    base_quantity: Decimal
    quantity: Decimal
    base_cost: Decimal
    cost: Decimal
    has_price: bool


@dataclass(frozen=True)
class ScenarioComponent:
    key: str
    name: str
    multiplier: Decimal
    base_cost: Decimal
    cost: Decimal
    lines: tuple[ScaledLine, ...]


@dataclass(frozen=True)
class ScenarioBreakdown:
    """Scenario figures next to the base figures they were derived from."""
    recipe_key: str
    components: tuple[ScenarioComponent, ...]
    base_total_cost: Decimal
    total_cost: Decimal
    cost_change: Decimal
    price: Optional[Decimal]
    price_source: str
    base_margin: MarginResult
    margin: MarginResult
    margin_change: Optional[Decimal]
    food_cost_percentage: Optional[Decimal]
    pricing_tiers: PricingTiers


# ============ Input coercion ============

def coerce_multiplier(raw: Any) -> Decimal:
    """
    Turn user input into a usable multiplier.

    Anything that is not a finite, non-negative number (empty string,
    None, "abc", NaN, -1) becomes 0, i.e. the component is removed.
    """
    value = to_decimal(raw)
    if value is None or value < 0:
        return ZERO
    return value


def coerce_price(raw: Any) -> Optional[Decimal]:
    """Hypothetical price, or None to fall back to the menu price."""
    value = to_decimal(raw)
    if not is_positive(value):
        return None
    return value


# ============ Reducers ============

def empty_scenario(recipe_key: Optional[str] = None) -> ScenarioState:
    """Identity scenario: every multiplier 1, no price override."""
    return ScenarioState(recipe_key=recipe_key)


def apply_multiplier(state: ScenarioState, key: str, raw: Any) -> ScenarioState:
    multipliers = dict(state.multipliers)
    multipliers[key] = coerce_multiplier(raw)
    return replace(state, multipliers=multipliers)


def set_price_override(state: ScenarioState, raw: Any) -> ScenarioState:
    return replace(state, price_override=coerce_price(raw))


def reset_scenario(state: Optional[ScenarioState] = None) -> ScenarioState:
    """Back to the identity scenario for the same recipe."""
    return empty_scenario(state.recipe_key if state is not None else None)


def select_recipe(state: Optional[ScenarioState], recipe_key: str) -> ScenarioState:
    """Keep the state while the same recipe stays selected, else start over."""
    if state is not None and state.recipe_key == recipe_key:
        return state
    return empty_scenario(recipe_key)


def build_scenario(
    multipliers: Optional[Mapping[str, Any]] = None,
    price_override: Any = None,
    recipe_key: Optional[str] = None,
) -> ScenarioState:
    """Fold raw user input into a ScenarioState through the reducers."""
    state = empty_scenario(recipe_key)
    for key, raw in (multipliers or {}).items():
        state = apply_multiplier(state, str(key), raw)
    if price_override is not None:
        state = set_price_override(state, price_override)
    return state


# ============ Scenario computation ============

def apply_scenario(recipe: Recipe, breakdown: CostBreakdown, state: ScenarioState) -> ScenarioBreakdown:
    """
    Recompute cost and margin under a scenario.

    Deterministic and side-effect free. Multipliers for keys the recipe
    does not have are ignored.
    """
    match recipe:
        case StructuredRecipe(components=components):
            buckets = [(c.id, c.name, c.lines) for c in components]
        case FlatRecipe(lines=lines):
            buckets = [(FLAT_BUCKET_KEY, recipe.name, lines)]
        case _:
            raise TypeError(f"Unsupported recipe type: {type(recipe).__name__}")

    scenario_components = tuple(
        _scale_component(key, name, lines, state.multiplier_for(key))
        for key, name, lines in buckets
    )
    total_cost = sum((c.cost for c in scenario_components), ZERO)

    if state.price_override is not None:
        price, price_source = state.price_override, PRICE_SOURCE_OVERRIDE
    else:
        price, price_source = recipe.menu_price, PRICE_SOURCE_MENU

    base_margin = evaluate_margin(recipe.menu_price, breakdown.total_cost)
    scenario_margin = evaluate_margin(price, total_cost)

    if base_margin.margin is None or scenario_margin.margin is None:
        margin_change = None
    else:
        margin_change = scenario_margin.margin - base_margin.margin

    return ScenarioBreakdown(
        recipe_key=recipe.key,
        components=scenario_components,
        base_total_cost=breakdown.total_cost,
        total_cost=total_cost,
        cost_change=total_cost - breakdown.total_cost,
        price=price,
        price_source=price_source,
        base_margin=base_margin,
        margin=scenario_margin,
        margin_change=margin_change,
        food_cost_percentage=food_cost_percentage(price, total_cost),
        pricing_tiers=pricing_tiers(total_cost),
    )


def _scale_component(
    key: str,
    name: str,
    lines: tuple[RecipeLine, ...],
    multiplier: Decimal,
) -> ScenarioComponent:
    scaled = tuple(_scale_line(line, multiplier) for line in lines)
    return ScenarioComponent(
        key=key,
        name=name,
        multiplier=multiplier,
        base_cost=sum_line_costs(lines),
        cost=sum((line.cost for line in scaled), ZERO),
        lines=scaled,
    )


def _scale_line(line: RecipeLine, multiplier: Decimal) -> ScaledLine:
    # Units are untouched; only magnitudes scale
    return ScaledLine(
        ingredient_id=line.ingredient.id,
        ingredient_name=line.name,
        unit=line.unit,
        base_quantity=line.quantity,
        quantity=line.quantity * multiplier,
        base_cost=line.cost,
        cost=line.cost * multiplier,
        has_price=line.has_price,
    )
