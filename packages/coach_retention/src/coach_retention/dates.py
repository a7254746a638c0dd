"""Calendar-month helpers used by every engine."""

from __future__ import annotations

import calendar
from datetime import date

from dateutil.relativedelta import relativedelta


def start_of_month(d: date) -> date:
    return d.replace(day=1)


def end_of_month(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def add_months(d: date, months: int) -> date:
    """Shift *d* by whole months, clamping the day to the target month length."""
    return d + relativedelta(months=months)


def months_between(later: date, earlier: date) -> int:
    """Whole calendar months from *earlier* to *later*.

    Partial months are truncated toward zero, so 2024-01-31 -> 2024-02-29
    counts as one month and 2024-01-10 -> 2024-02-09 as zero.
    """
    delta = relativedelta(later, earlier)
    return delta.years * 12 + delta.months


def month_key(d: date) -> str:
    """``"YYYY-MM"`` key for the month containing *d*."""
    return f"{d.year:04d}-{d.month:02d}"


def month_label(d: date) -> str:
    """Short display label, e.g. ``"Jan '24"``."""
    return f"{calendar.month_abbr[d.month]} '{d.year % 100:02d}"


def parse_month(value: str) -> date:
    """Parse ``"YYYY-MM"`` into the 15th of that month.

    Mid-month keeps the reference inside the month regardless of its length.
    """
    try:
        year_str, month_str = value.strip().split("-")
        return date(int(year_str), int(month_str), 15)
    except ValueError as e:
        raise ValueError(f"Expected a YYYY-MM month, got {value!r}") from e
