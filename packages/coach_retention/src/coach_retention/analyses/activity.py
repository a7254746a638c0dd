"""Entries, exits and base counts for one calendar month."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from coach_retention.dates import end_of_month, start_of_month
from coach_retention.models import Athlete


@dataclass(frozen=True)
class MonthActivity:
    month_start: date
    month_end: date
    entries: int
    exits: int
    base_at_month_start: int

    @property
    def base_at_month_end(self) -> int:
        return self.base_at_month_start + self.entries - self.exits

    @property
    def churn(self) -> float:
        """Exits as a percentage of the starting base; 0 with an empty base."""
        if self.base_at_month_start == 0:
            return 0.0
        return self.exits / self.base_at_month_start * 100

    @property
    def net_change(self) -> int:
        return self.entries - self.exits


def month_activity(population: Iterable[Athlete], reference_date: date) -> MonthActivity:
    """Count movements in the calendar month containing *reference_date*."""
    month_start = start_of_month(reference_date)
    month_end = end_of_month(reference_date)

    entries = exits = base = 0
    for a in population:
        if month_start <= a.entry_date <= month_end:
            entries += 1
        if (
            not a.is_active
            and a.exit_date is not None
            and month_start <= a.exit_date <= month_end
        ):
            exits += 1
        # Present at the start-of-month snapshot.
        if a.entry_date < month_start and (
            a.is_active or (a.exit_date is not None and a.exit_date >= month_start)
        ):
            base += 1

    return MonthActivity(
        month_start=month_start,
        month_end=month_end,
        entries=entries,
        exits=exits,
        base_at_month_start=base,
    )
