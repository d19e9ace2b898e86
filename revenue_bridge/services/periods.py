"""
Calendar period helpers.

A period is one calendar month identified by a "YYYY-MM" key. Cumulative
views walk backwards from the selected month with negative offsets.
"""

import re
from datetime import MAXYEAR, MINYEAR, date
from typing import List, Tuple

PERIOD_KEY_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")

# Go-live dates spill into the neighbouring year, so keep one year of headroom
MIN_PERIOD_YEAR: int = MINYEAR + 1
MAX_PERIOD_YEAR: int = MAXYEAR - 1

MONTH_ABBREVIATIONS: Tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def parse_period_key(period_key: str) -> Tuple[int, int]:
    """
    Parse a "YYYY-MM" key into (year, month).

    Raises:
        ValueError: If the key is malformed, the month is not 1..12 or the
            year falls outside MIN_PERIOD_YEAR..MAX_PERIOD_YEAR
    """
    match = PERIOD_KEY_PATTERN.match(period_key or "")
    if not match:
        raise ValueError(f"Invalid period key {period_key!r}; expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month in period key {period_key!r}")
    if not MIN_PERIOD_YEAR <= year <= MAX_PERIOD_YEAR:
        raise ValueError(
            f"Year in period key {period_key!r} must be between "
            f"{MIN_PERIOD_YEAR} and {MAX_PERIOD_YEAR}"
        )
    return year, month


def format_period_key(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def shift_period(year: int, month: int, offset: int) -> Tuple[int, int]:
    """
    Move a (year, month) pair by offset months, rolling over year boundaries.

    Example:
        >>> shift_period(2025, 1, -1)
        (2024, 12)
        >>> shift_period(2025, 11, 3)
        (2026, 2)
    """
    shifted_year, month_index = divmod(year * 12 + (month - 1) + offset, 12)
    return shifted_year, month_index + 1


def shift_period_key(period_key: str, offset: int) -> str:
    """Shift a "YYYY-MM" key by offset months."""
    year, month = parse_period_key(period_key)
    return format_period_key(*shift_period(year, month, offset))


def period_start(period_key: str) -> date:
    """First calendar day of the period."""
    year, month = parse_period_key(period_key)
    return date(year, month, 1)


def period_label(period_key: str) -> str:
    """Human label such as "Jun 2025"."""
    year, month = parse_period_key(period_key)
    return f"{MONTH_ABBREVIATIONS[month - 1]} {year}"


def trailing_period_keys(period_key: str, count: int) -> List[str]:
    """
    The period itself followed by the count-1 periods before it.

    Example:
        >>> trailing_period_keys("2025-02", 3)
        ['2025-02', '2025-01', '2024-12']
    """
    return [shift_period_key(period_key, -i) for i in range(count)]
