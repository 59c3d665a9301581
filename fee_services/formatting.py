"""
Display formatting for money, rates and deltas.

All money renders with two decimal places and US thousands separators.
Rates arrive as decimal fractions (0.090909) and render as percent
("9.09%"). Missing values render as an em dash.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Union

MISSING = "—"

Number = Union[Decimal, int, float]


def _as_decimal(value: Number | None) -> Decimal | None:
    if value is None:
        return None
    if isinstance(value, float):
        value = Decimal(repr(value))
    elif not isinstance(value, Decimal):
        value = Decimal(value)
    return value if value.is_finite() else None


def _quantize(value: Decimal, places: int) -> Decimal:
    with localcontext() as ctx:
        # Wide enough that quantize never overflows the coefficient
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        quantized = value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    # Avoid "-0.00"
    return quantized.copy_abs() if quantized == 0 else quantized


def fmt_currency(value: Number | None) -> str:
    """1524.6 -> "$1,524.60"; negatives render as "-$5.00"."""
    amount = _as_decimal(value)
    if amount is None:
        return MISSING
    amount = _quantize(amount, 2)
    sign = "-" if amount < 0 else ""
    return f"{sign}${amount.copy_abs():,.2f}"


def fmt_percent(value: Number | None, places: int = 2) -> str:
    """Decimal fraction to percent text: 0.090909 -> "9.09%"."""
    fraction = _as_decimal(value)
    if fraction is None:
        return MISSING
    return f"{_quantize(fraction.scaleb(2), places):.{places}f}%"


def fmt_delta_currency(value: Number | None) -> str:
    """Signed money delta; zero is shown as "+$0.00"."""
    amount = _as_decimal(value)
    if amount is None:
        return MISSING
    text = fmt_currency(amount)
    return text if text.startswith("-") else f"+{text}"


def fmt_delta_percent(value: Number | None, places: int = 2) -> str:
    """Signed rate delta in percentage points; zero carries no sign."""
    fraction = _as_decimal(value)
    if fraction is None:
        return MISSING
    text = fmt_percent(fraction, places)
    if _quantize(fraction.scaleb(2), places) > 0:
        return f"+{text}"
    return text
