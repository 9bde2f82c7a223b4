"""
Menu-related models: menu items, their recipe components, and the legacy
flat ingredient list.
"""
import uuid
from sqlalchemy import Column, String, Text, Boolean, Numeric, DateTime, ForeignKey, Uuid, func
from sqlalchemy.orm import relationship

from src.db.base import Base


class MenuItem(Base):
    """A dish or product sold by the restaurant."""
    __tablename__ = "menu_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    price = Column(Numeric(10, 2))  # NULL when the item has no price set yet
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    components = relationship(
        "MenuItemComponent",
        back_populates="menu_item",
        cascade="all, delete-orphan",
        order_by="MenuItemComponent.name",
    )
    ingredient_lines = relationship("MenuItemIngredient", back_populates="menu_item", cascade="all, delete-orphan")
    cost_history = relationship("MenuItemCostHistory", back_populates="menu_item", cascade="all, delete-orphan")


class MenuItemIngredient(Base):
    """
    Legacy flat recipe line: quantity of an ingredient in its priced unit.

    Only used for menu items that have no components.
    """
    __tablename__ = "menu_item_ingredients"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    menu_item_id = Column(Uuid(as_uuid=True), ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False)
    ingredient_id = Column(Uuid(as_uuid=True), ForeignKey("ingredients.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Numeric(10, 4), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    menu_item = relationship("MenuItem", back_populates="ingredient_lines")
    ingredient = relationship("Ingredient", back_populates="menu_item_lines")


class MenuItemComponent(Base):
    """Named group of ingredients within a menu item (Sauce, Protein, ...)."""
    __tablename__ = "menu_item_components"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    menu_item_id = Column(Uuid(as_uuid=True), ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    cost = Column(Numeric(10, 4))  # stored cost, reconciled against the calculated one
    created_at = Column(DateTime, server_default=func.now())

    menu_item = relationship("MenuItem", back_populates="components")
    ingredients = relationship("ComponentIngredient", back_populates="component", cascade="all, delete-orphan")


class ComponentIngredient(Base):
    """Quantity of an ingredient in a component, in the recipe's own unit."""
    __tablename__ = "component_ingredients"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    component_id = Column(Uuid(as_uuid=True), ForeignKey("menu_item_components.id", ondelete="CASCADE"), nullable=False)
    ingredient_id = Column(Uuid(as_uuid=True), ForeignKey("ingredients.id", ondelete="SET NULL"))
    quantity = Column(Numeric(10, 4), nullable=False)
    unit = Column(String(50), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    component = relationship("MenuItemComponent", back_populates="ingredients")
    ingredient = relationship("Ingredient", back_populates="component_links")
