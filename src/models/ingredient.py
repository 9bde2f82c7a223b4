"""
Ingredient model as stored by the back-office database.
"""
import uuid
from sqlalchemy import Column, String, Numeric, DateTime, Uuid, func
from sqlalchemy.orm import relationship

from src.db.base import Base


class Ingredient(Base):
    """A purchasable ingredient priced per `unit`."""
    __tablename__ = "ingredients"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    unit = Column(String(50), nullable=False)  # priced unit: lb, kg, L, each
    last_price = Column(Numeric(10, 4))  # NULL or 0 means no price data yet
    last_ordered_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    menu_item_lines = relationship("MenuItemIngredient", back_populates="ingredient")
    component_links = relationship("ComponentIngredient", back_populates="ingredient")
