"""
SQLAlchemy models for the back-office store (read-only).
"""
# Ingredients
from src.models.ingredient import Ingredient

# Menu & Recipes
from src.models.menu import MenuItem, MenuItemIngredient, MenuItemComponent, ComponentIngredient
from src.models.recipe import MenuItemCostHistory


__all__ = [
    # Ingredients
    "Ingredient",
    # Menu
    "MenuItem",
    "MenuItemIngredient",
    "MenuItemComponent",
    "ComponentIngredient",
    # Cost history
    "MenuItemCostHistory",
]
