"""
Rounding -- the single rounding rule of the fee kernel.

Responsibility:
    Integer division with half-away-from-zero tie-breaking, and the
    rate-application helper built on it. Every rounded quantity the
    Truth Engine produces goes through ``rounded_div``.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Ties round away from zero regardless of sign:
      rounded_div(5, 2) == 3, rounded_div(-5, 2) == -3.
    - No float arithmetic; operands and results are ``int``.

Failure modes:
    - ValueError when the denominator is not strictly positive.
    - TypeError when operands are not ``int``.
"""

from __future__ import annotations

ROUNDING_RULE = "HALF_AWAY_FROM_ZERO"

PPM_SCALE = 1_000_000


def rounded_div(numerator: int, denominator: int) -> int:
    """
    Nearest integer quotient with half-away-from-zero tie-breaking.

    The quotient is computed on the magnitude of the numerator and the
    sign is restored afterwards, so the rule is symmetric around zero:
    if twice the remainder reaches the denominator, the magnitude is
    incremented.

    Raises:
        TypeError: If either operand is not an int (bool is rejected).
        ValueError: If denominator <= 0.
    """
    if type(numerator) is not int or type(denominator) is not int:
        raise TypeError("rounded_div operands must be int")
    if denominator <= 0:
        raise ValueError(f"denominator must be positive, got {denominator}")
    if numerator == 0:
        return 0

    negative = numerator < 0
    magnitude = -numerator if negative else numerator

    quotient, remainder = divmod(magnitude, denominator)
    if 2 * remainder >= denominator:
        quotient += 1

    return -quotient if negative else quotient


def apply_rate(minor_units: int, rate_ppm: int) -> int:
    """Multiply minor units by a PPM rate, rounded back to minor units."""
    return rounded_div(minor_units * rate_ppm, PPM_SCALE)
