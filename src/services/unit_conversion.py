"""
Unit conversion contract used by the recipe loader.

Converting a recipe quantity ("3 tbsp") into the ingredient's priced unit
("per L") is done by an external standardization service. The loader only
depends on the `UnitConverter` protocol below; when no converter is wired
in, `NaiveUnitConverter` multiplies quantity by unit price.
"""
from decimal import Decimal
from typing import Protocol, Union

Number = Union[Decimal, float, int]


class UnitConverter(Protocol):
    """Anything that can price a recipe quantity in the ingredient's unit."""

    def standardized_cost(
        self,
        quantity: Decimal,
        unit: str,
        unit_price: Decimal,
        ingredient_name: str,
    ) -> Number:
        """
        Return the cost of `quantity` `unit` of an ingredient priced at
        `unit_price` per its standard unit. May raise when the units are
        incompatible.
        """
        ...


class NaiveUnitConverter:
    """Assumes the recipe unit already matches the priced unit."""

    def standardized_cost(
        self,
        quantity: Decimal,
        unit: str,
        unit_price: Decimal,
        ingredient_name: str,
    ) -> Decimal:
        return quantity * unit_price
