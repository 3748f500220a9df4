"""
Numeric coercion for loosely-typed upstream records.

Inventory rows arrive from the database, spreadsheets and the dashboard
client with numbers as ints, floats, strings or nothing at all. These
helpers never raise: anything unreadable becomes the supplied default.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """
    Coerce a value to a finite Decimal.

    - 12.5, "12.50", Decimal("12.5") → Decimal("12.5")
    - None, "", "abc", NaN, Infinity → default

    Args:
        value: Raw value (number, numeric string, None)
        default: Returned when value is missing or unreadable

    Returns:
        Decimal
    """
    if value is None or isinstance(value, bool):
        return default

    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default

    if not result.is_finite():
        return default
    return result


def to_int(value: Any, default: int = 0) -> int:
    """
    Coerce a value to int, truncating fractions.

    - 5, "5", 5.9, "5.9" → 5
    - None, "", "abc" → default
    """
    number = to_decimal(value, default=None)
    if number is None:
        return default
    return int(number)


def non_negative(value: int, default: int = 0) -> int:
    """Replace negative counts with default."""
    return value if value >= 0 else default


def first_present(*values: Any) -> Optional[Any]:
    """
    Return the first value that is not None or an empty string.

    Zero counts as present: a stock level of 0 is real data.
    """
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None
