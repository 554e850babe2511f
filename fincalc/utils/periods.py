"""
utils/periods.py -- Period counts and calendar arithmetic.

period_count(years, per_year)  -> whole periods in a (possibly fractional) term
parse_date(value)              -> date or None, never raises
months_between(start, end)     -> completed calendar months, >= 0
years_between(start, end)      -> elapsed days / 365.25, >= 0

A calendar month is completed when the end day-of-month reaches the start
day-of-month: 15 Jan -> 14 Mar is one month, 15 Jan -> 15 Mar is two, and
30 Jan -> 28 Feb is none. Month-end dates are not clipped.
"""
from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Optional

from dateutil import parser as date_parser

DAYS_PER_YEAR = 365.25

# Absorbs float noise such as 0.35 * 12 == 4.199999...
_PERIOD_TOLERANCE = 1e-9


def period_count(years: float, per_year: int = 12) -> int:
    """Whole periods in `years`; fractional remainders are dropped, negatives give 0."""
    if years <= 0:
        return 0
    return int(math.floor(years * per_year + _PERIOD_TOLERANCE))


def parse_date(value: Any) -> Optional[date]:
    """
    Coerce a date-ish input to a date.

    Accepts date/datetime objects and strings dateutil can read
    ("2021-04-01", "1 Apr 2021", "2021/04/01T10:00:00"). Anything else is None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return date_parser.parse(value.strip()).date()
    except (ValueError, OverflowError):
        return None


def months_between(start: date, end: date) -> int:
    """Completed calendar months from start to end; 0 when end precedes start."""
    if end <= start:
        return 0
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(0, months)


def years_between(start: date, end: date) -> float:
    if end <= start:
        return 0.0
    return (end - start).days / DAYS_PER_YEAR
