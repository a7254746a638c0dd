"""Organization health: trailing monthly series, yearly averages, watch lists."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date

from coach_retention.analyses.activity import month_activity
from coach_retention.analyses.retention import HORIZONS, retention_at_month_end
from coach_retention.dates import add_months, month_label
from coach_retention.models import (
    Athlete,
    CoachMetrics,
    MonthlyPoint,
    TrafficLight,
    YearlyAverage,
)
from coach_retention.roster import (
    DEFAULT_EXCLUSIONS,
    Discipline,
    ExclusionPredicate,
    filter_population,
)
from coach_retention.thresholds import DEFAULT_THRESHOLDS, ThresholdConfig


def org_retention(
    population: Iterable[Athlete],
    reference_date: date,
    discipline: Discipline | str = Discipline.PRIMARY,
    is_excluded: ExclusionPredicate = DEFAULT_EXCLUSIONS,
) -> dict[int, float]:
    """Month-end retention of the whole organization at 3, 6 and 12 months."""
    athletes = filter_population(population, discipline, is_excluded)
    return {h: retention_at_month_end(athletes, h, reference_date) for h in HORIZONS}


def build_monthly_series(
    population: Iterable[Athlete],
    reference_date: date,
    discipline: Discipline | str = Discipline.PRIMARY,
    is_excluded: ExclusionPredicate = DEFAULT_EXCLUSIONS,
    months: int = 12,
) -> list[MonthlyPoint]:
    """One point per month for the *months* months ending at the reference month."""
    athletes = filter_population(population, discipline, is_excluded)
    if not athletes:
        return []

    first = add_months(reference_date.replace(day=15), -(months - 1))
    points: list[MonthlyPoint] = []
    for i in range(months):
        ref = add_months(first, i)
        activity = month_activity(athletes, ref)
        ret = {h: round(retention_at_month_end(athletes, h, ref), 1) for h in HORIZONS}
        points.append(
            MonthlyPoint(
                label=month_label(ref),
                month_start=activity.month_start,
                year=ref.year,
                churn=round(activity.churn, 2),
                net_change=activity.net_change,
                base_at_month_start=activity.base_at_month_start,
                base_at_month_end=activity.base_at_month_end,
                entries=activity.entries,
                exits=activity.exits,
                retention_3m=ret[3],
                retention_6m=ret[6],
                retention_12m=ret[12],
            )
        )
    return points


def annual_averages(series: Sequence[MonthlyPoint], min_year: int = 2024) -> list[YearlyAverage]:
    """Mean churn and retention per calendar year present in *series*."""
    by_year: dict[int, list[MonthlyPoint]] = defaultdict(list)
    for p in series:
        if p.year >= min_year:
            by_year[p.year].append(p)

    return [
        YearlyAverage(
            year=year,
            churn=_mean(p.churn for p in pts),
            retention_3m=_mean(p.retention_3m for p in pts),
            retention_6m=_mean(p.retention_6m for p in pts),
            retention_12m=_mean(p.retention_12m for p in pts),
        )
        for year, pts in sorted(by_year.items())
    ]


def worst_by_churn(metrics: Sequence[CoachMetrics], n: int = 3) -> list[CoachMetrics]:
    return sorted(metrics, key=lambda m: m.monthly_churn.value, reverse=True)[:n]


def worst_by_retention(metrics: Sequence[CoachMetrics], n: int = 3) -> list[CoachMetrics]:
    return sorted(metrics, key=lambda m: m.retention_6m.value)[:n]


def coaches_needing_attention(
    metrics: Sequence[CoachMetrics],
    thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> list[CoachMetrics]:
    """Coaches that are red overall, churn at or past the yellow cutoff, or
    keep fewer athletes at six months than the yellow cutoff allows."""
    return [
        m
        for m in metrics
        if m.overall_status is TrafficLight.RED
        or m.monthly_churn.value >= thresholds.churn.yellow
        or m.retention_6m.value < thresholds.retention_6m.yellow
    ]


def _mean(values: Iterable[float]) -> float:
    values = list(values)
    return sum(values) / len(values)
