"""Tabular views of the engine results for export and display.

Each ``analyze_*`` function computes (or reads from *context*) one engine
result and flattens it into a DataFrame. Results that later analyses need
are stored in *context* under a fixed key.
"""

from __future__ import annotations

from dataclasses import asdict

import pandas as pd

from coach_retention.analyses.base import AnalysisResult
from coach_retention.analyses.coach_metrics import compute_metrics_for_all_coaches
from coach_retention.analyses.cohort import compute_cohort
from coach_retention.analyses.health import (
    annual_averages,
    build_monthly_series,
    coaches_needing_attention,
    org_retention,
)
from coach_retention.analyses.org_summary import compute_org_summary
from coach_retention.dates import month_key
from coach_retention.models import Athlete, CoachMetrics, CohortTable, OrgSummary
from coach_retention.settings import Settings


def coach_metrics_frame(metrics: list[CoachMetrics]) -> pd.DataFrame:
    rows = [
        {
            "coach": m.name,
            "status": m.overall_status.value,
            "active": m.active_count,
            "inactive": m.inactive_count,
            "total_historical": m.total_historical,
            "entries": m.entries_this_month,
            "exits": m.exits_this_month,
            "base_start": m.base_at_month_start,
            "base_end": m.base_at_month_end,
            "churn_pct": round(m.monthly_churn.value, 2),
            "churn_status": m.monthly_churn.status.value,
            "net_change": m.net_change.value,
            "net_change_status": m.net_change.status.value,
            "retention_3m_pct": round(m.retention_3m.value, 1),
            "retention_3m_status": m.retention_3m.status.value,
            "retention_6m_pct": round(m.retention_6m.value, 1),
            "retention_6m_status": m.retention_6m.status.value,
            "retention_12m_pct": round(m.retention_12m.value, 1),
            "retention_12m_status": m.retention_12m.status.value,
        }
        for m in metrics
    ]
    return pd.DataFrame(rows)


def org_summary_frame(summary: OrgSummary, retention: dict[int, float]) -> pd.DataFrame:
    rows = [
        ("Total Athletes", summary.total_athletes),
        ("Active", summary.active_count),
        ("Inactive", summary.inactive_count),
        ("Base at Month Start", summary.base_at_month_start),
        ("Entries", summary.entries_this_month),
        ("Exits", summary.exits_this_month),
        ("Base at Month End", summary.base_at_month_end),
        ("Monthly Churn %", round(summary.monthly_churn.value, 2)),
        ("Net Change", summary.net_change.value),
        ("Retention 3m %", round(retention[3], 1)),
        ("Retention 6m %", round(retention[6], 1)),
        ("Retention 12m %", round(retention[12], 1)),
        ("Green Coaches", summary.green_count),
        ("Yellow Coaches", summary.yellow_count),
        ("Red Coaches", summary.red_count),
    ]
    return pd.DataFrame(rows, columns=["metric", "value"])


def cohort_frame(table: CohortTable) -> pd.DataFrame:
    """One row per cohort, one ``M<n>`` column per month after entry."""
    month_cols = [f"M{m}" for m in range(1, table.max_months_observed + 1)]
    rows = []
    for c in table.cohorts:
        row = {"cohort": c.entry_month_key, "label": c.label, "initial_size": c.initial_size}
        for col, pct in zip(month_cols, c.retention_by_month):
            row[col] = round(pct, 1)
        rows.append(row)
    return pd.DataFrame(rows, columns=["cohort", "label", "initial_size", *month_cols])


def analyze_coach_scorecard(
    athletes: list[Athlete], settings: Settings, context: dict
) -> AnalysisResult:
    """Per-coach metrics for the reference month."""
    metrics = compute_metrics_for_all_coaches(
        athletes,
        settings.reference_date,
        settings.discipline,
        settings.exclusions,
        settings.thresholds,
    )
    context["coach_metrics"] = metrics
    return AnalysisResult.from_df(
        "coach_scorecard",
        "Coach Scorecard",
        coach_metrics_frame(metrics),
        sheet_name="Coaches",
        metadata={"month": month_key(settings.reference_date), "coaches": len(metrics)},
    )


def analyze_org_summary(
    athletes: list[Athlete], settings: Settings, context: dict
) -> AnalysisResult:
    """Organization totals; reads coach_metrics from context."""
    summary = compute_org_summary(
        athletes,
        context.get("coach_metrics", []),
        settings.reference_date,
        settings.discipline,
        settings.exclusions,
        settings.thresholds,
    )
    retention = org_retention(
        athletes, settings.reference_date, settings.discipline, settings.exclusions
    )
    context["summary"] = summary
    context["org_retention"] = retention
    return AnalysisResult.from_df(
        "org_summary",
        "Organization Summary",
        org_summary_frame(summary, retention),
        sheet_name="Summary",
        metadata={"month": month_key(settings.reference_date)},
    )


def analyze_cohorts(athletes: list[Athlete], settings: Settings, context: dict) -> AnalysisResult:
    table = compute_cohort(
        athletes, settings.cohort_start_year, settings.discipline, settings.exclusions
    )
    context["cohort"] = table
    return AnalysisResult.from_df(
        "cohort_retention",
        "Cohort Retention by Entry Month",
        cohort_frame(table),
        sheet_name="Cohorts",
        metadata={"start_year": settings.cohort_start_year},
    )


def analyze_health_series(
    athletes: list[Athlete], settings: Settings, context: dict
) -> AnalysisResult:
    series = build_monthly_series(
        athletes,
        settings.reference_date,
        settings.discipline,
        settings.exclusions,
        months=settings.history_months,
    )
    context["series"] = series
    df = pd.DataFrame([asdict(p) for p in series])
    return AnalysisResult.from_df(
        "health_series", "Monthly Health Series", df, sheet_name="Monthly Series"
    )


def analyze_annual_averages(
    athletes: list[Athlete], settings: Settings, context: dict
) -> AnalysisResult:
    """Yearly means of the health series; reads series from context."""
    averages = annual_averages(context.get("series", []), min_year=settings.averages_start_year)
    df = pd.DataFrame([asdict(a) for a in averages])
    return AnalysisResult.from_df(
        "annual_averages", "Annual Averages", df, sheet_name="Annual Averages"
    )


def analyze_attention_list(
    athletes: list[Athlete], settings: Settings, context: dict
) -> AnalysisResult:
    flagged = coaches_needing_attention(context.get("coach_metrics", []), settings.thresholds)
    return AnalysisResult.from_df(
        "attention_list",
        "Coaches Needing Attention",
        coach_metrics_frame(flagged),
        sheet_name="Attention",
        metadata={"flagged": len(flagged)},
    )
