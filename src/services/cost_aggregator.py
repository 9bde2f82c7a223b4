"""
Cost aggregation for normalized recipes.

Rolls line costs up into component costs and component costs into the
recipe's total food cost:

    component_cost = Σ line.cost
    total_cost     = Σ component_cost
    share          = component_cost / total_cost   (0 when total is 0)

A flat recipe is treated as a single bucket keyed "lines".
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from src.core.numbers import ZERO
from src.services.recipe_graph import (
    FLAT_BUCKET_KEY,
    FlatRecipe,
    Recipe,
    RecipeLine,
    StructuredRecipe,
)


@dataclass(frozen=True)
class ComponentCost:
    """Cost rollup for one component (or the flat bucket)."""
    key: str
    name: str
    cost: Decimal
    share: Decimal  # fraction of total cost, 0..1
    stored_cost: Optional[Decimal]
    stored_cost_variance: Optional[Decimal]  # calculated - stored
    ingredient_count: int
    lines: tuple[RecipeLine, ...]


@dataclass(frozen=True)
class CostBreakdown:
    """Full cost rollup for a recipe."""
    recipe_key: str
    source: str  # "components" or "lines"
    total_cost: Decimal
    components: tuple[ComponentCost, ...]
    lines: tuple[RecipeLine, ...]
    missing_price_ingredients: tuple[RecipeLine, ...]
    missing_price_count: int
    has_complete_data: bool
    ingredient_count: int
    unique_ingredient_count: int


def aggregate(recipe: Recipe) -> CostBreakdown:
    """Compute the CostBreakdown of a recipe. Pure; never raises."""
    match recipe:
        case StructuredRecipe(components=components):
            buckets = [_bucket(c.id, c.name, c.lines, c.stored_cost) for c in components]
            source = "components"
        case FlatRecipe(lines=lines):
            buckets = [_bucket(FLAT_BUCKET_KEY, recipe.name, lines, None)]
            source = "lines"
        case _:
            raise TypeError(f"Unsupported recipe type: {type(recipe).__name__}")

    total_cost = sum((cost for _, _, cost, _, _ in buckets), ZERO)

    components = tuple(
        ComponentCost(
            key=key,
            name=name,
            cost=cost,
            share=_share(cost, total_cost),
            stored_cost=stored_cost,
            stored_cost_variance=cost - stored_cost if stored_cost is not None else None,
            ingredient_count=len(lines),
            lines=lines,
        )
        for key, name, cost, stored_cost, lines in buckets
    )

    all_lines = tuple(line for component in components for line in component.lines)
    missing = tuple(line for line in all_lines if not line.has_price)

    # An empty recipe is never "fully costed"
    has_complete_data = len(all_lines) > 0 and not missing

    return CostBreakdown(
        recipe_key=recipe.key,
        source=source,
        total_cost=total_cost,
        components=components,
        lines=all_lines,
        missing_price_ingredients=missing,
        missing_price_count=len(missing),
        has_complete_data=has_complete_data,
        ingredient_count=len(all_lines),
        unique_ingredient_count=_unique_ingredient_count(all_lines),
    )


def sum_line_costs(lines: tuple[RecipeLine, ...]) -> Decimal:
    return sum((line.cost for line in lines), ZERO)


def _bucket(
    key: str,
    name: str,
    lines: tuple[RecipeLine, ...],
    stored_cost: Optional[Decimal],
) -> tuple[str, str, Decimal, Optional[Decimal], tuple[RecipeLine, ...]]:
    return key, name, sum_line_costs(lines), stored_cost, lines


def _share(cost: Decimal, total_cost: Decimal) -> Decimal:
    if total_cost <= 0:
        return ZERO
    return cost / total_cost


def _unique_ingredient_count(lines: tuple[RecipeLine, ...]) -> int:
    """Distinct ingredient ids; lines not linked to an ingredient are skipped."""
    return len({line.ingredient.id for line in lines if line.ingredient.id is not None})
