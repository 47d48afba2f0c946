"""
Formatting -- Deterministic display helpers for amounts and risk scores.

Responsibility:
    Currency-abbreviated amount strings (2_400_000 -> "$2.40M") used by the
    audit log and the context brief, and the risk band label for a score.

Architecture position:
    Kernel > Domain -- pure functions, zero I/O.

Invariants enforced:
    - Decimal arithmetic with ROUND_HALF_UP; identical inputs always give
      identical strings.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

MISSING_AMOUNT = "—"

_BILLION = Decimal("1e9")
_MILLION = Decimal("1e6")
_THOUSAND = Decimal("1e3")
_CENTS = Decimal("0.01")
_UNITS = Decimal("1")

# (minimum score, label), highest first
RISK_BANDS: tuple[tuple[int, str], ...] = (
    (75, "Critical"),
    (50, "High"),
    (30, "Moderate"),
)


def format_amount(value: Decimal | int | float | str | None) -> str:
    """Format an amount as an abbreviated dollar string.

    >= 1e9 -> "$X.XXB", >= 1e6 -> "$X.XXM", >= 1e3 -> "$XK", otherwise
    "$X".  Negative values carry a leading "-".  None or a non-numeric
    value formats as an em dash.
    """
    if value is None:
        return MISSING_AMOUNT
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return MISSING_AMOUNT
    if not amount.is_finite():
        return MISSING_AMOUNT

    sign = "-" if amount < 0 else ""
    magnitude = abs(amount)

    if magnitude >= _BILLION:
        body = f"{(magnitude / _BILLION).quantize(_CENTS, ROUND_HALF_UP)}B"
    elif magnitude >= _MILLION:
        body = f"{(magnitude / _MILLION).quantize(_CENTS, ROUND_HALF_UP)}M"
    elif magnitude >= _THOUSAND:
        body = f"{(magnitude / _THOUSAND).quantize(_UNITS, ROUND_HALF_UP)}K"
    else:
        body = f"{magnitude.quantize(_UNITS, ROUND_HALF_UP)}"
    return f"{sign}${body}"


def risk_band(score: int) -> str:
    """Label a 0-100 risk score: Critical, High, Moderate or Low."""
    for threshold, label in RISK_BANDS:
        if score >= threshold:
            return label
    return "Low"
