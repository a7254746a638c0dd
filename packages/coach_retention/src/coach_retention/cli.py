"""Typer CLI for coach_retention."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from coach_retention.exceptions import RetentionError
from coach_retention.pipeline import PipelineResult, export_outputs, run_pipeline
from coach_retention.settings import DEFAULT_CONFIG_PATH, Settings

app = typer.Typer(help="Coach retention, churn and cohort analytics.")
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _coach_table(result: PipelineResult) -> Table:
    table = Table(title="Coaches")
    for col in ("Coach", "Status", "Active", "Churn %", "Net", "Ret 3m", "Ret 6m", "Ret 12m"):
        table.add_column(col, justify="left" if col == "Coach" else "right")
    for m in result.coach_metrics:
        status = m.overall_status.value
        table.add_row(
            escape(m.name),
            f"[{status}]{status}[/]",
            str(m.active_count),
            f"{m.monthly_churn.value:.1f}",
            f"{m.net_change.value:+d}",
            f"{m.retention_3m.value:.0f}%",
            f"{m.retention_6m.value:.0f}%",
            f"{m.retention_12m.value:.0f}%",
        )
    return table


def _fail(error: Exception, code: int) -> typer.Exit:
    console.print(f"[bold red]{escape(str(error))}[/bold red]")
    return typer.Exit(code=code)


def _print_summary(result: PipelineResult) -> None:
    console.print(f"  {len(result.athletes)} athletes, {len(result.coach_metrics)} coaches")
    if result.coach_metrics:
        console.print(_coach_table(result))
    s = result.summary
    if s is not None:
        console.print(
            f"  Churn {s.monthly_churn.value:.1f}% | net {s.net_change.value:+d} | "
            f"green {s.green_count} / yellow {s.yellow_count} / red {s.red_count}"
        )


@app.command()
def analyze(
    data_file: Path = typer.Argument(..., help="Roster file (.csv, .xlsx or .xls)."),
    config: Path = typer.Option(
        None, "--config", "-c", help=f"YAML settings file (default: {DEFAULT_CONFIG_PATH})"
    ),
    output_dir: Path = typer.Option(None, "--output-dir", "-o", help="Where reports are written"),
    month: str = typer.Option(None, "--month", "-m", help="Reference month as YYYY-MM"),
    discipline: str = typer.Option(
        None, "--discipline", "-d", help="primary, secondary or combined"
    ),
    start_year: int = typer.Option(None, "--start-year", help="First year of the cohort table"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Coach scorecards, organization summary and cohorts for one month."""
    _setup_logging(verbose)

    try:
        settings = Settings.from_yaml(
            config or DEFAULT_CONFIG_PATH,
            data_file=data_file,
            output_dir=output_dir,
            reference_date=month,
            discipline=discipline,
            cohort_start_year=start_year,
        )
    except RetentionError as e:
        raise _fail(e, code=2) from e

    console.print(f"[bold]Coach Retention[/bold] -- {data_file.name}")
    try:
        result = run_pipeline(
            settings,
            on_progress=lambda step, total, msg: console.print(f"  [{step + 1}/{total}] {msg}"),
        )
    except RetentionError as e:
        raise _fail(e, code=1) from e

    _print_summary(result)
    for path in export_outputs(result):
        console.print(f"  Output: {path}")

    console.print("[bold green]Done.[/bold green]")
