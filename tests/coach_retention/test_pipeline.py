"""Tests for the pipeline orchestrator and run_report()."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from factories import FEB_2024, make_athlete
from openpyxl import load_workbook

from coach_retention import run_report
from coach_retention.analyses import ANALYSIS_REGISTRY, run_all_analyses
from coach_retention.exceptions import DataLoadError
from coach_retention.models import TrafficLight as TL
from coach_retention.pipeline import PipelineResult, export_outputs, run_pipeline
from coach_retention.settings import Settings


class TestRunPipeline:
    def test_returns_result(self, sample_settings: Settings):
        result = run_pipeline(sample_settings)
        assert isinstance(result, PipelineResult)
        assert len(result.athletes) == 8
        assert len(result.analyses) == len(ANALYSIS_REGISTRY)
        assert all(a.error is None for a in result.analyses)

    def test_primary_coaches(self, sample_settings: Settings):
        result = run_pipeline(sample_settings)
        assert [m.name for m in result.coach_metrics] == ["Ana", "Marta"]
        ana, marta = result.coach_metrics
        assert ana.base_at_month_start == 3
        assert ana.active_count == 3
        assert marta.monthly_churn.value == 50.0
        assert {ana.overall_status, marta.overall_status} == {TL.RED}

    def test_summary(self, sample_settings: Settings):
        s = run_pipeline(sample_settings).summary
        assert s.total_athletes == 7
        assert s.entries_this_month == 1
        assert s.exits_this_month == 2
        assert s.base_at_month_start == 5
        assert s.monthly_churn.value == pytest.approx(40.0)
        assert s.red_count == 2

    def test_combined_includes_secondary_coaches(self, sample_csv_path: Path, tmp_path: Path):
        settings = Settings(
            data_file=sample_csv_path,
            output_dir=tmp_path,
            reference_date="2024-02",
            discipline="combined",
        )
        result = run_pipeline(settings)
        assert [m.name for m in result.coach_metrics if m.name == "Bruno"] == ["Bruno"]
        assert result.summary.total_athletes == 8

    def test_secondary(self, sample_csv_path: Path, tmp_path: Path):
        settings = Settings(
            data_file=sample_csv_path,
            output_dir=tmp_path,
            reference_date="2024-02",
            discipline="secondary",
        )
        result = run_pipeline(settings)
        assert [m.name for m in result.coach_metrics] == ["Bruno"]
        assert result.summary.total_athletes == 3

    def test_context_objects(self, sample_settings: Settings):
        result = run_pipeline(sample_settings)
        assert set(result.org_retention) == {3, 6, 12}
        assert len(result.series) == sample_settings.history_months
        assert result.series[-1].label == "Feb '24"
        assert [c.entry_month_key for c in result.cohort.cohorts] == ["2024-01", "2024-02"]

    def test_annual_averages_floor_is_its_own_setting(self, sample_csv_path: Path, tmp_path: Path):
        settings = Settings(
            data_file=sample_csv_path,
            output_dir=tmp_path,
            reference_date="2024-02",
            cohort_start_year=2024,
            averages_start_year=2023,
        )
        result = run_pipeline(settings)
        averages = next(a for a in result.analyses if a.name == "annual_averages")
        assert averages.df["year"].tolist() == [2023, 2024]
        assert [c.entry_month_key for c in result.cohort.cohorts] == ["2024-01", "2024-02"]

    def test_annual_averages_default_floor(self, sample_settings: Settings):
        result = run_pipeline(sample_settings)
        averages = next(a for a in result.analyses if a.name == "annual_averages")
        assert averages.df["year"].tolist() == [2024]

    def test_preloaded_athletes(self, tmp_path: Path):
        settings = Settings(output_dir=tmp_path, reference_date="2024-02")
        athletes = [make_athlete("A", date(2024, 1, 10))]
        result = run_pipeline(settings, athletes=athletes)
        assert result.athletes == athletes
        assert result.summary.total_athletes == 1

    def test_progress_callback(self, sample_settings: Settings):
        calls = []
        run_pipeline(sample_settings, on_progress=lambda step, total, msg: calls.append(step))
        assert calls == [0, 1]

    def test_missing_data_file(self, tmp_path: Path):
        with pytest.raises(DataLoadError):
            run_pipeline(Settings(output_dir=tmp_path))


class TestRunAllAnalyses:
    def test_failure_is_isolated(self, monkeypatch, tmp_path: Path):
        import coach_retention.analyses as registry

        def explode(athletes, settings, context):
            raise RuntimeError("boom")

        patched = [(name, explode if name == "cohort_retention" else fn) for name, fn in ANALYSIS_REGISTRY]
        monkeypatch.setattr(registry, "ANALYSIS_REGISTRY", patched)

        settings = Settings(output_dir=tmp_path, reference_date=FEB_2024)
        results, context = run_all_analyses([make_athlete("A", date(2024, 1, 10))], settings)
        errors = {r.name: r.error for r in results}
        assert errors["cohort_retention"] == "boom"
        assert errors["coach_scorecard"] is None
        assert "cohort" not in context

    def test_progress_names(self, tmp_path: Path):
        names = []
        settings = Settings(output_dir=tmp_path, reference_date=FEB_2024)
        run_all_analyses([], settings, on_progress=names.append)
        assert names == [name for name, _ in ANALYSIS_REGISTRY]


class TestExportOutputs:
    def test_excel_only_by_default(self, sample_settings: Settings):
        paths = export_outputs(run_pipeline(sample_settings))
        assert [p.name for p in paths] == ["coach_retention_primary_2024-02.xlsx"]
        wb = load_workbook(paths[0])
        assert wb.sheetnames == [
            "Report Info",
            "Coaches",
            "Summary",
            "Cohorts",
            "Monthly Series",
            "Annual Averages",
            "Attention",
        ]

    def test_roster_outputs(self, sample_csv_path: Path, tmp_path: Path):
        settings = Settings(
            data_file=sample_csv_path,
            output_dir=tmp_path,
            reference_date="2024-02",
            outputs={"excel": False, "roster_csv": True, "roster_json": True},
        )
        paths = export_outputs(run_pipeline(settings))
        assert [p.name for p in paths] == ["roster.csv", "roster.json"]
        assert all(p.exists() for p in paths)


class TestRunReport:
    def test_convenience_entry_point(self, sample_csv_path: Path, tmp_path: Path):
        result = run_report(sample_csv_path, tmp_path, reference_date="2024-02")
        assert result.summary.total_athletes == 7
        assert (tmp_path / "coach_retention_primary_2024-02.xlsx").exists()
