"""
Fixed-point conversion primitives.

Responsibility:
    Convert user/transport values into exact integer representations
    (money -> integer minor units, rates -> integer parts-per-million)
    and back again for presentation and transport.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Imported by the Truth Engine and by display collaborators.

Invariants enforced:
    - Parsing is textual: the decimal digits the caller wrote are the
      digits that get scaled. Floats are first turned into their
      shortest round-trip text, never multiplied.
    - Money ingestion mode is an explicit argument. The Truth Engine
      always ingests with ``MoneyIngestion.ROUND``.
    - Rates are truncated toward zero beyond the sixth decimal.

Failure modes:
    - InvalidMoneyError / InvalidRateError on malformed text, non-finite
      numbers, booleans or unsupported types.

Audit relevance:
    No rounding ambiguity survives parsing. Given the same input text,
    the integer result is identical on every platform.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from enum import Enum
from typing import Any

from fee_kernel.domain.rounding import PPM_SCALE
from fee_kernel.exceptions import InvalidMoneyError, InvalidRateError

MINOR_UNITS_PER_MAJOR = 100
CURRENCY_DECIMALS = 2
RATE_DECIMALS = 6

_DECIMAL_TEXT = re.compile(r"^-?[0-9]+(\.[0-9]+)?$")


class MoneyIngestion(str, Enum):
    """How digits beyond the second decimal are treated when parsing money."""

    ROUND = "round"  # half-away-from-zero at the second decimal
    TRUNCATE = "truncate"  # discard third and later decimals


def _to_text(value: Any) -> str | None:
    """Render a supported numeric/text value as plain decimal text."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return format(Decimal(repr(value)), "f")
    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        return format(value, "f")
    if isinstance(value, str):
        return value
    return None


def _split_decimal(text: str) -> tuple[bool, str, str] | None:
    """Split validated decimal text into (negative, whole digits, fraction digits)."""
    if not _DECIMAL_TEXT.match(text):
        return None
    negative = text.startswith("-")
    body = text[1:] if negative else text
    whole, _, fraction = body.partition(".")
    return negative, whole, fraction


def parse_money(
    value: Any,
    *,
    field: str = "direct_labor",
    mode: MoneyIngestion = MoneyIngestion.ROUND,
) -> int:
    """
    Parse a money value into integer minor units.

    Accepts int, float, Decimal or str. Strings may carry a ``$`` and
    thousands separators ("$54,254.00").

    In ROUND mode the amount is rounded half-away-from-zero at the second
    decimal; the decision depends only on the third decimal digit, which
    is exact for decimal text. In TRUNCATE mode extra digits are dropped.

    Raises:
        InvalidMoneyError: If the value is not a plain decimal number.
    """
    text = _to_text(value)
    if text is None:
        raise InvalidMoneyError(field, value)

    parts = _split_decimal(text.replace("$", "").replace(",", "").strip())
    if parts is None:
        raise InvalidMoneyError(field, value)
    negative, whole, fraction = parts

    padded = (fraction + "000")[:3]
    minor = int(whole) * MINOR_UNITS_PER_MAJOR + int(padded[:2])
    if mode is MoneyIngestion.ROUND and int(padded[2]) >= 5:
        minor += 1

    return -minor if negative else minor


def parse_rate(value: Any, *, field: str) -> int:
    """
    Parse a decimal-fraction rate into integer parts-per-million.

    "0.2850" -> 285000. Digits beyond the sixth decimal are truncated.
    Thousands separators are tolerated; a currency symbol is not.

    Raises:
        InvalidRateError: If the value is not a plain decimal number.
    """
    text = _to_text(value)
    if text is None:
        raise InvalidRateError(field, value)

    parts = _split_decimal(text.replace(",", "").strip())
    if parts is None:
        raise InvalidRateError(field, value)
    negative, whole, fraction = parts

    ppm = int(whole) * PPM_SCALE + int((fraction + "000000")[:RATE_DECIMALS])
    return -ppm if negative else ppm


# ---------------------------------------------------------------------------
# Outbound conversions
# ---------------------------------------------------------------------------


def minor_to_decimal(minor_units: int) -> Decimal:
    """Minor units as an exact two-place Decimal (15246 -> Decimal('152.46'))."""
    # Built from text so no context precision applies
    return Decimal(f"{minor_units}E-{CURRENCY_DECIMALS}")


def ppm_to_decimal(ppm: int) -> Decimal:
    """PPM as an exact six-place Decimal fraction (75000 -> Decimal('0.075000'))."""
    return Decimal(f"{ppm}E-{RATE_DECIMALS}")


def decimal_to_minor(amount: Decimal) -> int:
    """
    Inverse of minor_to_decimal.

    Works on the digit tuple, so it is exact at any magnitude.

    Raises:
        ValueError: If the amount is not an exact multiple of 0.01.
    """
    value = Decimal(amount)
    if not value.is_finite():
        raise ValueError(f"{amount} is not an exact number of minor units")
    sign, digits, exponent = value.as_tuple()
    coefficient = int("".join(map(str, digits)) or "0")
    shift = exponent + CURRENCY_DECIMALS
    if shift >= 0:
        minor = coefficient * 10**shift
    else:
        minor, remainder = divmod(coefficient, 10**-shift)
        if remainder:
            raise ValueError(f"{amount} is not an exact number of minor units")
    return -minor if sign else minor


def to_money_display(minor_units: int) -> float:
    """Presentation value for money. Never feed back into computation."""
    return minor_units / MINOR_UNITS_PER_MAJOR


def to_rate_display(ppm: int) -> float:
    """Presentation value for a rate as a decimal fraction."""
    return ppm / PPM_SCALE
