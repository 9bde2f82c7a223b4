"""
Read-only snapshots of menu item recipes from the back-office database.

Loads a menu item with its components, component ingredient links and
legacy flat ingredient lines, and hands them to the recipe loader as plain
records:

    menu item  {id, name, price}
    component  {id, name, cost, ingredients: [{id, quantity, unit, ingredient}]}
    flat line  {id, quantity, unit, ingredient}
    ingredient {id, name, unit, last_price, last_ordered_at}

Nothing here writes to the database.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from src.models.ingredient import Ingredient
from src.models.menu import ComponentIngredient, MenuItem, MenuItemComponent, MenuItemIngredient
from src.models.recipe import MenuItemCostHistory


CHANGE_REASON_LABELS = {
    "invoice_saved": "Invoice Processing",
    "manual_update": "Manual Update",
}


@dataclass
class RecipeSnapshot:
    """Raw records for one menu item, ready for `recipe_graph.normalize`."""
    menu_item: dict[str, Any]
    components: list[dict[str, Any]] = field(default_factory=list)
    lines: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class CostHistoryEntry:
    """One recipe cost change."""
    id: UUID
    created_at: Optional[datetime]
    old_cost: Optional[Decimal]
    new_cost: Optional[Decimal]
    change: Decimal  # new_cost - old_cost, missing values count as 0
    change_reason: Optional[str]
    reason_label: str


class RecipeSnapshotRepository:
    """Reads recipe snapshots and cost history for menu items."""

    def __init__(self, db: Session):
        self.db = db

    def get_snapshot(self, menu_item_id: UUID) -> Optional[RecipeSnapshot]:
        """
        Load the raw recipe records for a menu item.

        Returns None if the menu item does not exist.
        """
        menu_item = self.db.get(MenuItem, menu_item_id)
        if not menu_item:
            return None

        components = self.db.execute(
            select(MenuItemComponent)
            .where(MenuItemComponent.menu_item_id == menu_item_id)
            .options(
                selectinload(MenuItemComponent.ingredients).selectinload(ComponentIngredient.ingredient)
            )
            .order_by(MenuItemComponent.name)
        ).scalars().all()

        # Flat lines only matter when there are no components
        flat_lines = []
        if not components:
            flat_lines = self.db.execute(
                select(MenuItemIngredient, Ingredient)
                .join(Ingredient, MenuItemIngredient.ingredient_id == Ingredient.id)
                .where(MenuItemIngredient.menu_item_id == menu_item_id)
            ).all()

        return RecipeSnapshot(
            menu_item={"id": menu_item.id, "name": menu_item.name, "price": menu_item.price},
            components=[self._component_record(c) for c in components],
            lines=[
                {
                    "id": line.id,
                    "quantity": line.quantity,
                    "unit": ingredient.unit,
                    "ingredient": self._ingredient_record(ingredient),
                }
                for line, ingredient in flat_lines
            ],
        )

    def menu_item_exists(self, menu_item_id: UUID) -> bool:
        return self.db.get(MenuItem, menu_item_id) is not None

    def get_cost_history(self, menu_item_id: UUID, limit: int = 10) -> list[CostHistoryEntry]:
        """Most recent recipe cost changes for a menu item, newest first."""
        rows = self.db.execute(
            select(MenuItemCostHistory)
            .where(MenuItemCostHistory.menu_item_id == menu_item_id)
            .order_by(MenuItemCostHistory.created_at.desc())
            .limit(limit)
        ).scalars().all()

        return [
            CostHistoryEntry(
                id=row.id,
                created_at=row.created_at,
                old_cost=row.old_cost,
                new_cost=row.new_cost,
                change=(row.new_cost or Decimal(0)) - (row.old_cost or Decimal(0)),
                change_reason=row.change_reason,
                reason_label=self._reason_label(row.change_reason),
            )
            for row in rows
        ]

    def _component_record(self, component: MenuItemComponent) -> dict[str, Any]:
        return {
            "id": component.id,
            "name": component.name,
            "cost": component.cost,
            "ingredients": [
                {
                    "id": link.id,
                    "quantity": link.quantity,
                    "unit": link.unit,
                    "ingredient": self._ingredient_record(link.ingredient) if link.ingredient else None,
                }
                for link in component.ingredients
            ],
        }

    @staticmethod
    def _ingredient_record(ingredient: Ingredient) -> dict[str, Any]:
        return {
            "id": ingredient.id,
            "name": ingredient.name,
            "unit": ingredient.unit,
            "last_price": ingredient.last_price,
            "last_ordered_at": ingredient.last_ordered_at,
        }

    @staticmethod
    def _reason_label(reason: Optional[str]) -> str:
        if not reason:
            return "Unknown"
        return CHANGE_REASON_LABELS.get(reason, reason)
