"""Month-of-entry cohort retention tables."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import date

from coach_retention.dates import add_months, end_of_month, month_key, month_label, months_between
from coach_retention.models import Athlete, CohortRow, CohortTable
from coach_retention.roster import (
    DEFAULT_EXCLUSIONS,
    Discipline,
    ExclusionPredicate,
    athletes_of_coach,
    filter_population,
)

logger = logging.getLogger(__name__)

DEFAULT_START_YEAR = 2024


def compute_cohort(
    population: Iterable[Athlete],
    start_year: int = DEFAULT_START_YEAR,
    discipline: Discipline | str = Discipline.PRIMARY,
    is_excluded: ExclusionPredicate = DEFAULT_EXCLUSIONS,
) -> CohortTable:
    """Retention curve per entry month for athletes who joined from *start_year* on.

    The timeline ends with the month of the latest date known in the data
    (an exit, or an entry if nobody has exited since). Month *m* of a cohort
    counts members who had not left by the end of the m-th month after the
    entry month.
    """
    timeline_start = date(start_year, 1, 1)
    athletes = [
        a
        for a in filter_population(population, discipline, is_excluded)
        if a.entry_date >= timeline_start
    ]
    if not athletes:
        return CohortTable()

    latest = max([timeline_start] + [a.exit_date or a.entry_date for a in athletes])
    timeline_end = end_of_month(latest)

    groups: dict[str, list[Athlete]] = defaultdict(list)
    for a in athletes:
        groups[month_key(a.entry_date)].append(a)

    rows: list[CohortRow] = []
    max_months = 0
    for key in sorted(groups):
        members = groups[key]
        first = min(a.entry_date for a in members).replace(day=1)
        months_available = months_between(timeline_end, end_of_month(first))
        curve = tuple(
            _retained_pct(members, end_of_month(add_months(first, m)))
            for m in range(1, months_available + 1)
        )
        max_months = max(max_months, len(curve))
        rows.append(
            CohortRow(
                entry_month_key=key,
                label=month_label(first),
                initial_size=len(members),
                retention_by_month=curve,
            )
        )

    logger.debug("Built %d cohorts spanning up to %d months", len(rows), max_months)
    return CohortTable(cohorts=tuple(rows), max_months_observed=max_months)


def compute_coach_cohort(
    population: Iterable[Athlete],
    coach_name: str,
    start_year: int = DEFAULT_START_YEAR,
    discipline: Discipline | str = Discipline.PRIMARY,
    is_excluded: ExclusionPredicate = DEFAULT_EXCLUSIONS,
) -> CohortTable:
    """Cohort table restricted to *coach_name*'s athletes."""
    athletes = athletes_of_coach(population, coach_name, discipline)
    return compute_cohort(athletes, start_year, discipline, is_excluded)


def _retained_pct(members: list[Athlete], checkpoint: date) -> float:
    retained = sum(
        1
        for a in members
        if a.entry_date <= checkpoint and (a.exit_date is None or a.exit_date > checkpoint)
    )
    return retained / len(members) * 100
