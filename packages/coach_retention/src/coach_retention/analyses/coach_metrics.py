"""Per-coach monthly metrics with traffic-light status."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from coach_retention.analyses.activity import month_activity
from coach_retention.analyses.retention import retention
from coach_retention.models import Athlete, CoachMetrics, MetricWithStatus
from coach_retention.roster import (
    DEFAULT_EXCLUSIONS,
    Discipline,
    ExclusionPredicate,
    athletes_of_coach,
    coach_names,
)
from coach_retention.thresholds import (
    DEFAULT_THRESHOLDS,
    ThresholdConfig,
    classify_churn,
    classify_net_change,
    classify_retention,
    overall_status,
)

logger = logging.getLogger(__name__)


def compute_coach_metrics(
    population: Iterable[Athlete],
    coach_name: str,
    reference_date: date,
    discipline: Discipline | str = Discipline.PRIMARY,
    thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> CoachMetrics:
    """Build the metrics card for *coach_name* in the month of *reference_date*.

    The coach is matched case-insensitively on the field(s) selected by
    *discipline*. A coach with no athletes gets zero counts, 0% churn and
    100% retention rather than an error.
    """
    discipline = Discipline.parse(discipline)
    athletes = athletes_of_coach(population, coach_name, discipline)
    activity = month_activity(athletes, reference_date)

    ret3 = retention(athletes, 3, reference_date)
    ret6 = retention(athletes, 6, reference_date)
    ret12 = retention(athletes, 12, reference_date)

    churn_status = classify_churn(activity.churn, thresholds)
    net_status = classify_net_change(activity.net_change, thresholds)
    ret3_status = classify_retention(ret3, 3, thresholds)
    ret6_status = classify_retention(ret6, 6, thresholds)
    ret12_status = classify_retention(ret12, 12, thresholds)

    active = sum(1 for a in athletes if a.is_active)

    return CoachMetrics(
        name=coach_name,
        total_historical=len(athletes),
        active_count=active,
        inactive_count=len(athletes) - active,
        entries_this_month=activity.entries,
        exits_this_month=activity.exits,
        base_at_month_start=activity.base_at_month_start,
        base_at_month_end=activity.base_at_month_end,
        monthly_churn=MetricWithStatus(activity.churn, churn_status),
        net_change=MetricWithStatus(activity.net_change, net_status),
        retention_3m=MetricWithStatus(ret3, ret3_status),
        retention_6m=MetricWithStatus(ret6, ret6_status),
        retention_12m=MetricWithStatus(ret12, ret12_status),
        overall_status=overall_status(
            churn_status, ret3_status, ret6_status, ret12_status, net_change=net_status
        ),
    )


def compute_metrics_for_all_coaches(
    population: Iterable[Athlete],
    reference_date: date,
    discipline: Discipline | str = Discipline.PRIMARY,
    is_excluded: ExclusionPredicate = DEFAULT_EXCLUSIONS,
    thresholds: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> list[CoachMetrics]:
    """Metrics for every non-excluded coach of *discipline*.

    Ordered green, yellow, red; within a status by active athletes, descending.
    """
    discipline = Discipline.parse(discipline)
    population = list(population)
    names = coach_names(population, discipline, is_excluded)
    metrics = [
        compute_coach_metrics(population, name, reference_date, discipline, thresholds)
        for name in names
    ]
    logger.debug("Computed %s metrics for %d coaches", discipline.value, len(metrics))
    return sort_by_health(metrics)


def sort_by_health(metrics: Sequence[CoachMetrics]) -> list[CoachMetrics]:
    return sorted(metrics, key=lambda m: (m.overall_status.severity, -m.active_count))
