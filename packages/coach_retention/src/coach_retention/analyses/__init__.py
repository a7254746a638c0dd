"""Analysis registry and runner."""

from __future__ import annotations

import logging
from collections.abc import Callable

import pandas as pd

from coach_retention.analyses.base import AnalysisResult
from coach_retention.analyses.reports import (
    analyze_annual_averages,
    analyze_attention_list,
    analyze_coach_scorecard,
    analyze_cohorts,
    analyze_health_series,
    analyze_org_summary,
)
from coach_retention.models import Athlete
from coach_retention.settings import Settings

logger = logging.getLogger(__name__)

AnalysisFunc = Callable[[list[Athlete], Settings, dict], AnalysisResult]

# Deterministic ordering -- dependency constraints:
#   coach_scorecard MUST precede org_summary and attention_list (coach_metrics)
#   health_series MUST precede annual_averages (series)
ANALYSIS_REGISTRY: list[tuple[str, AnalysisFunc]] = [
    ("coach_scorecard", analyze_coach_scorecard),
    ("org_summary", analyze_org_summary),
    ("cohort_retention", analyze_cohorts),
    ("health_series", analyze_health_series),
    ("annual_averages", analyze_annual_averages),
    ("attention_list", analyze_attention_list),
]


def run_all_analyses(
    athletes: list[Athlete],
    settings: Settings,
    on_progress: Callable[[str], None] | None = None,
) -> tuple[list[AnalysisResult], dict]:
    """Execute every registered analysis.

    Returns the tabular results and the context holding the engine objects
    (``coach_metrics``, ``summary``, ``org_retention``, ``cohort``,
    ``series``). A failed analysis yields a result with ``error`` set.
    """
    context: dict = {}
    results: list[AnalysisResult] = []

    for name, func in ANALYSIS_REGISTRY:
        if on_progress:
            on_progress(name)
        try:
            results.append(func(athletes, settings, context))
        except Exception as e:
            logger.warning("Analysis '%s' failed: %s", name, e)
            results.append(AnalysisResult.from_df(name, name, pd.DataFrame(), error=str(e)))

    return results, context
