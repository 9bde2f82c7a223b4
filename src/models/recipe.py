"""
Recipe cost history.

MenuItemCostHistory: log of recipe cost changes written by invoice
processing and manual edits. This service only reads it.
"""
import uuid
from sqlalchemy import Column, String, Numeric, DateTime, ForeignKey, Uuid, func, Index
from sqlalchemy.orm import relationship

from src.db.base import Base


class MenuItemCostHistory(Base):
    """
    Historical record of a menu item's recipe cost.

    Each row captures the cost before and after a change and why it
    changed ("invoice_saved", "manual_update", ...).
    """
    __tablename__ = "menu_item_cost_history"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    menu_item_id = Column(Uuid(as_uuid=True), ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=False)
    old_cost = Column(Numeric(10, 4))
    new_cost = Column(Numeric(10, 4))
    change_reason = Column(String(50))
    created_at = Column(DateTime, server_default=func.now())

    menu_item = relationship("MenuItem", back_populates="cost_history")

    __table_args__ = (
        Index("ix_menu_item_cost_history_item_created", "menu_item_id", "created_at"),
    )
