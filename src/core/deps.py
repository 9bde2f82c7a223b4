"""
Shared FastAPI dependencies.
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from src.db.session import get_db
from src.services.cost_analysis import MenuItemCostAnalyzer
from src.services.unit_conversion import NaiveUnitConverter, UnitConverter


def get_unit_converter() -> UnitConverter:
    """
    Unit standardization service used to price recipe lines.

    Override this dependency to plug in a real converter.
    """
    return NaiveUnitConverter()


def get_cost_analyzer(
    db: Session = Depends(get_db),
    converter: UnitConverter = Depends(get_unit_converter),
) -> MenuItemCostAnalyzer:
    return MenuItemCostAnalyzer(db, converter)
