"""Athlete roster retention, churn and cohort analytics per coach."""

from __future__ import annotations

from pathlib import Path

__version__ = "1.0.0"


def run_report(
    data_file: str | Path,
    output_dir: str | Path = "output/",
    **kwargs,
):
    """Load, analyze and export one roster in a single call.

    Example::

        from coach_retention import run_report
        result = run_report("data/roster.csv", reference_date="2024-02")
    """
    from coach_retention.pipeline import export_outputs, run_pipeline
    from coach_retention.settings import Settings

    settings = Settings.from_args(data_file=Path(data_file), output_dir=Path(output_dir), **kwargs)
    result = run_pipeline(settings)
    export_outputs(result)
    return result
