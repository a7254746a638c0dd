"""Tests for the Typer CLI."""

from __future__ import annotations

from typer.testing import CliRunner

from coach_retention.cli import app

runner = CliRunner()


class TestCLI:
    def test_analyze_runs(self, sample_csv_path, tmp_path):
        result = runner.invoke(
            app, [str(sample_csv_path), "--output-dir", str(tmp_path), "--month", "2024-02"]
        )
        assert result.exit_code == 0
        assert "Done" in result.output
        assert "8 athletes, 2 coaches" in result.output

    def test_analyze_with_verbose(self, sample_csv_path, tmp_path):
        result = runner.invoke(
            app, [str(sample_csv_path), "-o", str(tmp_path), "-m", "2024-02", "--verbose"]
        )
        assert result.exit_code == 0

    def test_produces_excel_output(self, sample_csv_path, tmp_path):
        runner.invoke(app, [str(sample_csv_path), "--output-dir", str(tmp_path), "-m", "2024-02"])
        assert [p.name for p in tmp_path.glob("*.xlsx")] == ["coach_retention_primary_2024-02.xlsx"]

    def test_discipline_option(self, sample_csv_path, tmp_path):
        result = runner.invoke(
            app,
            [str(sample_csv_path), "-o", str(tmp_path), "-m", "2024-02", "--discipline", "secondary"],
        )
        assert result.exit_code == 0
        assert "Bruno" in result.output
        assert (tmp_path / "coach_retention_secondary_2024-02.xlsx").exists()

    def test_config_file(self, sample_csv_path, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text("outputs:\n  excel: false\n  roster_json: true\n")
        result = runner.invoke(
            app, [str(sample_csv_path), "-c", str(cfg), "-o", str(tmp_path), "-m", "2024-02"]
        )
        assert result.exit_code == 0
        assert (tmp_path / "roster.json").exists()
        assert not list(tmp_path.glob("*.xlsx"))

    def test_bad_file_exits_nonzero(self, tmp_path):
        result = runner.invoke(app, [str(tmp_path / "nonexistent.csv")])
        assert result.exit_code != 0

    def test_bad_discipline_is_config_error(self, sample_csv_path, tmp_path):
        result = runner.invoke(
            app, [str(sample_csv_path), "-o", str(tmp_path), "--discipline", "yoga"]
        )
        assert result.exit_code == 2

    def test_bad_month_is_config_error(self, sample_csv_path, tmp_path):
        result = runner.invoke(app, [str(sample_csv_path), "-o", str(tmp_path), "-m", "2024-13"])
        assert result.exit_code == 2

    def test_missing_columns_exits_one(self, tmp_path):
        csv = tmp_path / "roster.csv"
        csv.write_text("name,status\nAlice,Active\n")
        result = runner.invoke(app, [str(csv), "-o", str(tmp_path), "-m", "2024-02"])
        assert result.exit_code == 1
        assert "Missing required columns" in result.output
