"""
Recipe graph loader.

Normalizes raw menu item records into one in-memory recipe shape. A menu
item is costed either from its components (each a named group of
ingredient links) or, when it has no components, from the legacy flat
ingredient list. The two shapes are modeled as separate variants:

    Recipe = StructuredRecipe(components) | FlatRecipe(lines)

Each line's cost is computed once here through the injected
`UnitConverter`, so aggregation and scenario math never convert units.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence, Union

from src.core.numbers import ZERO, is_positive, to_decimal
from src.services.unit_conversion import UnitConverter

logger = logging.getLogger(__name__)

# Scenario/aggregation key for the single bucket of a flat recipe
FLAT_BUCKET_KEY = "lines"

UNKNOWN_INGREDIENT_NAME = "Unknown"
UNNAMED_COMPONENT = "Unnamed component"


class RecipeGraphError(ValueError):
    """Raised when raw recipe records are too malformed to normalize."""


@dataclass(frozen=True)
class IngredientSnapshot:
    """Read-only view of an ingredient at the time the recipe was loaded."""
    id: Optional[str]
    name: str
    unit: str  # priced unit
    unit_price: Optional[Decimal]  # None/0 = no price data
    last_ordered_at: Optional[datetime] = None

    @property
    def has_price(self) -> bool:
        return is_positive(self.unit_price)


@dataclass(frozen=True)
class RecipeLine:
    """How much of an ingredient a recipe calls for, and what it costs."""
    id: Optional[str]
    ingredient: IngredientSnapshot
    quantity: Decimal
    unit: str  # recipe unit, may differ from ingredient.unit
    cost: Decimal

    @property
    def has_price(self) -> bool:
        return self.ingredient.has_price

    @property
    def name(self) -> str:
        return self.ingredient.name


@dataclass(frozen=True)
class Component:
    """Named group of recipe lines (Sauce, Protein, ...)."""
    id: str
    name: str
    lines: tuple[RecipeLine, ...]
    stored_cost: Optional[Decimal] = None


@dataclass(frozen=True)
class StructuredRecipe:
    """Recipe costed from one or more components."""
    key: str
    name: str
    menu_price: Optional[Decimal]
    components: tuple[Component, ...]

    @property
    def lines(self) -> tuple[RecipeLine, ...]:
        return tuple(line for component in self.components for line in component.lines)


@dataclass(frozen=True)
class FlatRecipe:
    """Recipe costed from the legacy flat ingredient list (possibly empty)."""
    key: str
    name: str
    menu_price: Optional[Decimal]
    lines: tuple[RecipeLine, ...]


Recipe = Union[StructuredRecipe, FlatRecipe]


def normalize(
    menu_item: Mapping[str, Any],
    components: Optional[Sequence[Mapping[str, Any]]] = None,
    lines: Optional[Sequence[Mapping[str, Any]]] = None,
    converter: Optional[UnitConverter] = None,
) -> Recipe:
    """
    Build a Recipe from raw data-store records.

    Args:
        menu_item: {id, name, price}
        components: [{id, name, cost, ingredients: [{id, quantity, unit, ingredient}]}]
        lines: [{id?, quantity, unit?, ingredient}] - ignored when components exist
        converter: unit standardization service; naive pricing when None

    Raises:
        RecipeGraphError: missing identifiers or unusable quantities
    """
    _require_mapping(menu_item, "menu item")
    if menu_item.get("id") is None:
        raise RecipeGraphError("Menu item record is missing its id")

    key = str(menu_item["id"])
    name = menu_item.get("name") or ""
    menu_price = to_decimal(menu_item.get("price"))

    if components:
        return StructuredRecipe(
            key=key,
            name=name,
            menu_price=menu_price,
            components=tuple(_build_component(c, converter) for c in components),
        )

    return FlatRecipe(
        key=key,
        name=name,
        menu_price=menu_price,
        lines=tuple(_build_line(record, converter, flat=True) for record in (lines or [])),
    )


def _require_mapping(record: Any, label: str) -> None:
    if not isinstance(record, Mapping):
        raise RecipeGraphError(f"Expected a mapping for {label}, got {type(record).__name__}")


def _build_component(record: Mapping[str, Any], converter: Optional[UnitConverter]) -> Component:
    _require_mapping(record, "component")
    if record.get("id") is None:
        raise RecipeGraphError(f"Component {record.get('name')!r} is missing its id")

    links = record.get("ingredients")
    if links is None:
        links = record.get("component_ingredients") or []

    return Component(
        id=str(record["id"]),
        name=record.get("name") or UNNAMED_COMPONENT,
        lines=tuple(_build_line(link, converter, flat=False) for link in links),
        stored_cost=to_decimal(record.get("cost")),
    )


def _build_ingredient(record: Optional[Mapping[str, Any]]) -> IngredientSnapshot:
    if record is None:
        return IngredientSnapshot(id=None, name=UNKNOWN_INGREDIENT_NAME, unit="", unit_price=None)

    _require_mapping(record, "ingredient")
    ingredient_id = record.get("id")
    return IngredientSnapshot(
        id=str(ingredient_id) if ingredient_id is not None else None,
        name=record.get("name") or UNKNOWN_INGREDIENT_NAME,
        unit=record.get("unit") or "",
        unit_price=to_decimal(record.get("last_price")),
        last_ordered_at=record.get("last_ordered_at"),
    )


def _build_line(record: Mapping[str, Any], converter: Optional[UnitConverter], flat: bool) -> RecipeLine:
    _require_mapping(record, "recipe line")

    ingredient_record = record.get("ingredient")
    if ingredient_record is None:
        ingredient_record = record.get("ingredients")
    ingredient = _build_ingredient(ingredient_record)

    quantity = to_decimal(record.get("quantity"))
    if quantity is None:
        raise RecipeGraphError(
            f"Recipe line for {ingredient.name!r} has an invalid quantity: {record.get('quantity')!r}"
        )
    if quantity < 0:
        raise RecipeGraphError(f"Recipe line for {ingredient.name!r} has a negative quantity: {quantity}")

    # Flat lines are stored in the ingredient's own unit
    unit = record.get("unit") or (ingredient.unit if flat else "")
    line_id = record.get("id")

    return RecipeLine(
        id=str(line_id) if line_id is not None else None,
        ingredient=ingredient,
        quantity=quantity,
        unit=unit,
        cost=_line_cost(converter, ingredient, quantity, unit),
    )


def _line_cost(
    converter: Optional[UnitConverter],
    ingredient: IngredientSnapshot,
    quantity: Decimal,
    unit: str,
) -> Decimal:
    """
    Cost of one line. Unpriced ingredients cost 0; a missing or failing
    converter degrades to quantity * unit_price for this line only.
    """
    if not ingredient.has_price:
        return ZERO

    naive_cost = quantity * ingredient.unit_price

    if converter is None:
        logger.debug(f"No unit converter configured, pricing {ingredient.name} naively")
        return naive_cost

    try:
        raw_cost = converter.standardized_cost(quantity, unit, ingredient.unit_price, ingredient.name)
    except Exception as e:
        logger.warning(
            f"Unit conversion failed for {ingredient.name} ({quantity} {unit}): {e}; "
            f"falling back to {quantity} x {ingredient.unit_price}"
        )
        return naive_cost

    cost = to_decimal(raw_cost)
    if cost is None or cost < 0:
        logger.warning(
            f"Unit conversion returned unusable cost {raw_cost!r} for {ingredient.name}; "
            f"falling back to {quantity} x {ingredient.unit_price}"
        )
        return naive_cost

    return cost
