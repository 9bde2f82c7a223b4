"""
Decimal coercion helpers shared by the costing engine.

Values arrive from the database (Decimal), JSON request bodies (int, float,
str) or a unit converter (float). Everything is normalized to Decimal so
money math stays exact.
"""
from decimal import Decimal, InvalidOperation
from typing import Any, Optional


ZERO = Decimal(0)
ONE = Decimal(1)
HUNDRED = Decimal(100)


def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a raw value to a finite Decimal.

    Returns None for None, booleans, empty or non-numeric strings, NaN and
    infinities. Floats go through str() so 0.1 becomes Decimal("0.1").
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            result = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not result.is_finite():
        return None
    return result


def to_plain(value: Decimal) -> Decimal:
    """
    Drop a positive exponent so whole results print without scientific
    notation: Decimal("6") / Decimal("0.30") is 2E+1, returned as 20.
    """
    if value.as_tuple().exponent > 0:
        return value.quantize(ONE)
    return value


def is_positive(value: Optional[Decimal]) -> bool:
    """True for a finite Decimal strictly greater than zero."""
    return value is not None and value.is_finite() and value > 0
