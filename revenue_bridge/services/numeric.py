"""
Numeric guard helpers shared by the generator, aggregator and view models.

Every ratio in the package goes through safe_divide so a zero or non-finite
divisor produces a defined fallback instead of NaN/Infinity, and every derived
float that feeds the data model goes through finite_or.
"""

import math


def finite_or(value: float, fallback: float = 0.0) -> float:
    """
    Return value if it is a finite number, otherwise fallback.

    Args:
        value: Candidate value
        fallback: Replacement for NaN, +Inf and -Inf

    Returns:
        value or fallback
    """
    try:
        return value if math.isfinite(value) else fallback
    except TypeError:
        return fallback


def safe_divide(numerator: float, denominator: float, fallback: float = 0.0) -> float:
    """
    Divide, returning fallback when the result would not be finite.

    Covers a zero denominator as well as non-finite operands.

    Example:
        >>> safe_divide(10, 4)
        2.5
        >>> safe_divide(10, 0)
        0.0
        >>> safe_divide(10, 0, fallback=1.0)
        1.0
    """
    if denominator == 0:
        return fallback
    try:
        return finite_or(numerator / denominator, fallback)
    except (TypeError, ZeroDivisionError, OverflowError):
        return fallback


def clamp(value: float, low: float, high: float) -> float:
    """Constrain value to the closed range [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves rounded towards +Infinity.

    Python's round() uses banker's rounding; the dashboard's day counts and
    transaction counts round .5 upwards.

    Example:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-2.5)
        -2
    """
    return int(math.floor(value + 0.5))
