"""
Value coercion for CSV/text sources. Pure functions, ZERO I/O.

Amounts arrive as currency-formatted text ("$2,400,000"); they are
stripped of "$" and "," and converted to Decimal.  A value that still is
not numeric coerces to zero rather than rejecting the row.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

_AMOUNT_JUNK = str.maketrans("", "", "$,")


def clean_text(value: Any, default: str = "") -> str:
    """Trim a cell to a string; None and blank cells become ``default``."""
    if value is None:
        return default
    s = str(value).strip()
    return s or default


def coerce_amount(value: Any) -> tuple[Decimal, bool]:
    """
    Coerce a cell to a Decimal amount.

    Returns:
        (amount, ok).  ``ok`` is False when the cell was non-empty but not
        numeric and the amount fell back to zero.
    """
    if isinstance(value, bool):
        return Decimal("0"), False
    if isinstance(value, (Decimal, int)):
        return Decimal(value), True
    if isinstance(value, float):
        amount = Decimal(str(value))
    else:
        s = clean_text(value).translate(_AMOUNT_JUNK).strip()
        if not s:
            return Decimal("0"), True
        try:
            amount = Decimal(s)
        except InvalidOperation:
            return Decimal("0"), False
    if not amount.is_finite():
        return Decimal("0"), False
    return amount, True
