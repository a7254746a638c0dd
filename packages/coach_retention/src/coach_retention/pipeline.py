"""Load -> analyze -> export orchestration used by the CLI and run_report()."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from coach_retention.analyses import run_all_analyses
from coach_retention.analyses.base import AnalysisResult
from coach_retention.data_loader import load_roster
from coach_retention.dates import month_key
from coach_retention.exports import write_excel_report, write_roster_csv, write_roster_json
from coach_retention.models import (
    Athlete,
    CoachMetrics,
    CohortTable,
    MonthlyPoint,
    OrgSummary,
)
from coach_retention.settings import Settings

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]


@dataclass
class PipelineResult:
    """Roster, engine objects and report tables for one run."""

    settings: Settings
    athletes: list[Athlete]
    analyses: list[AnalysisResult] = field(default_factory=list)
    coach_metrics: list[CoachMetrics] = field(default_factory=list)
    summary: OrgSummary | None = None
    org_retention: dict[int, float] = field(default_factory=dict)
    cohort: CohortTable = field(default_factory=CohortTable)
    series: list[MonthlyPoint] = field(default_factory=list)

    @property
    def report_stem(self) -> str:
        """File stem shared by the run's outputs, e.g. ``coach_retention_primary_2024-02``."""
        return (
            f"coach_retention_{self.settings.discipline.value}_"
            f"{month_key(self.settings.reference_date)}"
        )


def run_pipeline(
    settings: Settings,
    on_progress: ProgressCallback | None = None,
    athletes: list[Athlete] | None = None,
) -> PipelineResult:
    """Load the roster (unless *athletes* is given) and run every analysis.

    Args:
        settings: Run configuration.
        on_progress: Optional callback(step, total, message).
        athletes: Already-validated roster; ``settings.data_file`` is not read.
    """
    notify = on_progress or (lambda step, total, msg: None)

    if athletes is None:
        notify(0, 2, "Loading roster...")
        athletes = load_roster(settings)

    notify(1, 2, "Running analyses...")
    analyses, context = run_all_analyses(athletes, settings)

    failed = [a.name for a in analyses if a.error is not None]
    if failed:
        logger.warning("Analyses with errors: %s", ", ".join(failed))
    logger.info(
        "%s %s: %d/%d analyses completed",
        month_key(settings.reference_date),
        settings.discipline.value,
        len(analyses) - len(failed),
        len(analyses),
    )

    return PipelineResult(
        settings=settings,
        athletes=athletes,
        analyses=analyses,
        coach_metrics=context.get("coach_metrics", []),
        summary=context.get("summary"),
        org_retention=context.get("org_retention", {}),
        cohort=context.get("cohort", CohortTable()),
        series=context.get("series", []),
    )


def export_outputs(result: PipelineResult) -> list[Path]:
    """Write the outputs enabled in ``settings.outputs``; return their paths.

    A failing writer is logged and skipped so the other outputs still land.
    """
    settings = result.settings
    out_dir = settings.output_dir
    out_dir.mkdir(parents=True, exist_ok=True)
    as_of = settings.reference_date

    writers: list[tuple[bool, str, Callable[[], Path]]] = [
        (
            settings.outputs.excel,
            "Excel report",
            lambda: write_excel_report(result.analyses, out_dir / f"{result.report_stem}.xlsx"),
        ),
        (
            settings.outputs.roster_csv,
            "Roster CSV",
            lambda: write_roster_csv(result.athletes, out_dir / "roster.csv", as_of),
        ),
        (
            settings.outputs.roster_json,
            "Roster JSON",
            lambda: write_roster_json(result.athletes, out_dir / "roster.json", as_of),
        ),
    ]

    generated: list[Path] = []
    for enabled, label, write in writers:
        if not enabled:
            continue
        try:
            generated.append(write())
        except Exception as e:
            logger.error("%s failed: %s", label, e, exc_info=True)
    return generated
