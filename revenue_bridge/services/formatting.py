"""
Display formatting for money, percentages, rates and prices.

These are the formatting contracts the dashboard relies on for KPI cards,
the waterfall labels, the ranked driver table, the drill-down modal and the
insight sentences. Non-finite inputs format as zero. Ties round away from
zero on the exact binary value, matching the dashboard's fixed-point output.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

DEFAULT_CURRENCY = "$"


def _fixed(magnitude: float, places: int) -> Decimal:
    """Round a non-negative float to a fixed number of decimals, halves up."""
    return Decimal(magnitude).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_money(value: float, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Abbreviated money figure.

    - |value| >= 1e6: two decimals with an "m" suffix
    - |value| >= 1e3: one decimal with a "k" suffix
    - otherwise: whole units

    Example:
        >>> format_money(1523400)
        '$1.52m'
        >>> format_money(-48310)
        '-$48.3k'
        >>> format_money(1250)
        '$1.3k'
        >>> format_money(612.4)
        '$612'
    """
    if not math.isfinite(value):
        return f"{currency}0"
    sign = "-" if value < 0 else ""
    magnitude = abs(value)
    if magnitude >= 1e6:
        return f"{sign}{currency}{_fixed(magnitude / 1e6, 2)}m"
    if magnitude >= 1e3:
        return f"{sign}{currency}{_fixed(magnitude / 1e3, 1)}k"
    return f"{sign}{currency}{_fixed(magnitude, 0)}"


def format_pct(value: float) -> str:
    """
    Ratio as a percentage with one decimal.

    Example:
        >>> format_pct(0.1234)
        '12.3%'
    """
    if not math.isfinite(value):
        return "0.0%"
    sign = "-" if value < 0 else ""
    return f"{sign}{_fixed(abs(value) * 100, 1)}%"


def format_rate(value: float) -> str:
    """FX rate with four decimals, e.g. '1.0123'."""
    if not math.isfinite(value):
        return "0.0000"
    sign = "-" if value < 0 else ""
    return f"{sign}{_fixed(abs(value), 4)}"


def format_price(value: float, currency: str = DEFAULT_CURRENCY) -> str:
    """Unit price with four decimals, e.g. '$0.2750'."""
    if not math.isfinite(value):
        return f"{currency}0.0000"
    sign = "-" if value < 0 else ""
    return f"{sign}{currency}{_fixed(abs(value), 4)}"


def format_currency(value: float, currency: str = DEFAULT_CURRENCY) -> str:
    """
    Whole-unit currency with thousands separators, used in insight sentences.

    Example:
        >>> format_currency(164250.7)
        '$164,251'
    """
    if not math.isfinite(value):
        return f"{currency}0"
    sign = "-" if value < 0 else ""
    return f"{sign}{currency}{_fixed(abs(value), 0):,}"
