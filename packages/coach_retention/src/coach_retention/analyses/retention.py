"""Horizon retention: share of athletes still enrolled N months after entry.

Athletes who entered too recently to have reached the horizon are left out
of the denominator instead of counting as losses, and a population with no
eligible athletes reports 100%.

Two variants exist on purpose. ``retention`` measures elapsed months up to
the reference date itself and is what coach cards use.
``retention_at_month_end`` measures up to the end of the reference month and
also requires an active athlete's exit, if any, to fall after that boundary;
the organization health series uses it.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from coach_retention.dates import end_of_month, months_between
from coach_retention.models import Athlete

HORIZONS = (3, 6, 12)


def retention(population: Iterable[Athlete], horizon_months: int, reference_date: date) -> float:
    """Percentage of eligible athletes retained *horizon_months* after entry."""
    eligible = [
        a for a in population if months_between(reference_date, a.entry_date) >= horizon_months
    ]
    if not eligible:
        return 100.0

    retained = sum(
        1 for a in eligible if a.is_active or a.months_enrolled(reference_date) >= horizon_months
    )
    return retained / len(eligible) * 100


def retention_at_month_end(
    population: Iterable[Athlete], horizon_months: int, reference_date: date
) -> float:
    """Like :func:`retention`, measured at the end of the reference month."""
    checkpoint = end_of_month(reference_date)
    eligible = [
        a for a in population if months_between(checkpoint, a.entry_date) >= horizon_months
    ]
    if not eligible:
        return 100.0

    retained = sum(1 for a in eligible if _retained_at(a, horizon_months, checkpoint))
    return retained / len(eligible) * 100


def _retained_at(athlete: Athlete, horizon_months: int, checkpoint: date) -> bool:
    if athlete.is_active:
        return athlete.exit_date is None or athlete.exit_date > checkpoint
    if athlete.exit_date is None:
        return False
    return months_between(athlete.exit_date, athlete.entry_date) >= horizon_months
