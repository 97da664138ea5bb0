"""
Month offset <-> calendar month conversions and month labels.

An offset is the zero-based number of months elapsed since the configured
start month. Everything here is a pure function of its arguments.
"""

from __future__ import annotations
import numpy as np
import pandas as pd

from .config import START, YearMonth

MONTH_ABBREVS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# Southern hemisphere seasons
_SEASONS = {
    12: "Summer", 1: "Summer", 2: "Summer",
    3: "Autumn", 4: "Autumn", 5: "Autumn",
    6: "Winter", 7: "Winter", 8: "Winter",
    9: "Spring", 10: "Spring", 11: "Spring",
}

# Slider range colour per month, warm through summer and cool through winter
_MONTH_COLOURS = {
    1: "#d7301f", 2: "#ef6548", 3: "#fc8d59",
    4: "#fdbb84", 5: "#9ecae1", 6: "#4292c6",
    7: "#2171b5", 8: "#6baed6", 9: "#a1d99b",
    10: "#74c476", 11: "#fdae6b", 12: "#e6550d",
}


class InvalidMonthError(ValueError):
    """Raised for a month index outside 1-12."""


def _check_month(month: int) -> int:
    try:
        m = int(month)
    except (TypeError, ValueError):
        raise InvalidMonthError(f"Month must be an integer in 1-12, got {month!r}") from None
    if m != month or not 1 <= m <= 12:
        raise InvalidMonthError(f"Month must be in 1-12, got {month!r}")
    return m


def offset_to_year_month(offset: int, start: YearMonth = START) -> YearMonth:
    """
    Calendar month for a month offset.

    >>> offset_to_year_month(12, YearMonth(2000, 1))
    YearMonth(year=2001, month=1)
    """
    if offset < 0:
        raise ValueError(f"Month offset must be >= 0, got {offset}")
    _check_month(start.month)
    total = start.month + int(offset) - 1
    return YearMonth(start.year + total // 12, total % 12 + 1)


def year_month_to_offset(year, month, start: YearMonth = START):
    """
    Inverse of `offset_to_year_month`; negative when before `start`.

    Also accepts equal-length integer arrays (already validated months),
    returning an array of offsets.
    """
    if np.ndim(month) == 0:
        _check_month(month)
        year = int(year)
    return (year - start.year) * 12 + (month - start.month)


def format_label(year: int, month: int) -> str:
    """Canonical bucket label, e.g. ``"Jan 2000"``."""
    m = _check_month(month)
    return f"{MONTH_ABBREVS[m - 1]} {int(year)}"


def months_between(start_year: int, start_month: int, end_year: int, end_month: int) -> int:
    """Inclusive number of months from (start_year, start_month) to (end_year, end_month)."""
    _check_month(start_month)
    _check_month(end_month)
    return (end_year - start_year) * 12 + (end_month - start_month + 1)


def in_window(year, month, start: YearMonth, end: YearMonth):
    """Inclusive (year, month) window test; element-wise for arrays."""
    offset = year_month_to_offset(year, month, start)
    last = year_month_to_offset(end.year, end.month, start)
    return (offset >= 0) & (offset <= last)


def month_start(year: int, month: int) -> pd.Timestamp:
    m = _check_month(month)
    return pd.Timestamp(year=int(year), month=m, day=1)


def season_of(month: int) -> str:
    return _SEASONS[_check_month(month)]


def slider_class(month: int) -> str:
    return f"ui-slider-range-{MONTH_ABBREVS[_check_month(month) - 1]}"


def slider_colour(month: int) -> str:
    return _MONTH_COLOURS[_check_month(month)]
