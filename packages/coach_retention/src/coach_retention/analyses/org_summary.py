"""Organization-wide monthly summary."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from coach_retention.analyses.activity import month_activity
from coach_retention.models import Athlete, CoachMetrics, MetricWithStatus, OrgSummary, TrafficLight
from coach_retention.roster import (
    DEFAULT_EXCLUSIONS,
    Discipline,
    ExclusionPredicate,
    filter_population,
)
from coach_retention.thresholds import (
    DEFAULT_THRESHOLDS,
    ThresholdConfig,
    classify_churn,
    classify_net_change,
)


def compute_org_summary(
    population: Iterable[Athlete],
    coach_metrics: Sequence[CoachMetrics],
    reference_date: date,
    discipline: Discipline | str = Discipline.PRIMARY,
    is_excluded: ExclusionPredicate = DEFAULT_EXCLUSIONS,
    thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> OrgSummary:
    """Aggregate the month's counts over *discipline*'s population.

    Status tallies come from *coach_metrics*, which the caller computes for
    the same month and discipline.
    """
    athletes = filter_population(population, discipline, is_excluded)
    activity = month_activity(athletes, reference_date)
    active = sum(1 for a in athletes if a.is_active)

    return OrgSummary(
        total_athletes=len(athletes),
        active_count=active,
        inactive_count=len(athletes) - active,
        entries_this_month=activity.entries,
        exits_this_month=activity.exits,
        base_at_month_start=activity.base_at_month_start,
        base_at_month_end=activity.base_at_month_end,
        monthly_churn=MetricWithStatus(activity.churn, classify_churn(activity.churn, thresholds)),
        net_change=MetricWithStatus(
            activity.net_change, classify_net_change(activity.net_change, thresholds)
        ),
        green_count=_count(coach_metrics, TrafficLight.GREEN),
        yellow_count=_count(coach_metrics, TrafficLight.YELLOW),
        red_count=_count(coach_metrics, TrafficLight.RED),
    )


def _count(metrics: Sequence[CoachMetrics], status: TrafficLight) -> int:
    return sum(1 for m in metrics if m.overall_status is status)
