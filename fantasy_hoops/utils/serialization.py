"""
Helpers for turning ORM values into JSON-friendly primitives.
"""

from decimal import Decimal
from typing import Optional


def isoformat_or_none(value) -> Optional[str]:
    """Serialize a datetime to ISO 8601, passing None through."""
    return value.isoformat() if value else None


def decimal_to_str(value) -> Optional[str]:
    """
    Render a numeric column as a two-decimal string ("30.00").

    Numeric columns come back as Decimal from the database but hold plain
    ints/floats right after a flush, so everything goes through Decimal(str()).
    """
    if value is None:
        return None
    return f"{Decimal(str(value)):.2f}"
