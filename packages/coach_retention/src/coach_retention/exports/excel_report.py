"""Formatted Excel report: a cover sheet plus one styled sheet per analysis."""

from __future__ import annotations

import logging
import time
from datetime import datetime
from pathlib import Path

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils.dataframe import dataframe_to_rows
from openpyxl.worksheet.worksheet import Worksheet

from coach_retention.analyses.base import AnalysisResult

logger = logging.getLogger(__name__)

NAVY = "1F3A5F"
TITLE_FONT = Font(name="Calibri", size=14, bold=True, color=NAVY)
COLUMN_FONT = Font(name="Calibri", size=11, bold=True, color="FFFFFF")
COLUMN_FILL = PatternFill(start_color=NAVY, end_color=NAVY, fill_type="solid")
BODY_FONT = Font(name="Calibri", size=10)
STRIPE_FILL = PatternFill(start_color="F2F5F9", end_color="F2F5F9", fill_type="solid")
ROW_RULE = Border(bottom=Side(style="thin", color="D9D9D9"))

# Traffic-light status cells
STATUS_FILLS = {
    "green": PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid"),
    "yellow": PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid"),
    "red": PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid"),
}

TABLE_START_ROW = 3
MAX_COLUMN_WIDTH = 40
_INVALID_TITLE_CHARS = set("[]:*?/\\")


def write_excel_report(
    analyses: list[AnalysisResult],
    path: Path,
    title: str = "Coach Retention Report",
) -> Path:
    """Write every successful analysis to *path* and return it."""
    wb = create_workbook(title)
    written = 0
    for result in analyses:
        if result.error is not None:
            continue
        ws = wb.create_sheet(title=sheet_title(result.sheet_name or result.name))
        _write_table(ws, result.df, result.title)
        written += 1
    save_workbook(wb, path)
    logger.info("Wrote %d sheets to %s", written, path.name)
    return path


def create_workbook(title: str) -> Workbook:
    """New workbook whose first sheet carries the report title and timestamp."""
    wb = Workbook()
    cover = wb.active
    cover.title = "Report Info"
    cover["A1"] = title
    cover["A1"].font = Font(name="Calibri", size=16, bold=True, color=NAVY)
    cover["A2"] = f"Generated {datetime.now():%Y-%m-%d %H:%M}"
    cover["A2"].font = Font(name="Calibri", size=10, italic=True, color="7F7F7F")
    return wb


def _write_table(ws: Worksheet, df: pd.DataFrame, title: str) -> None:
    ws["A1"] = title
    ws["A1"].font = TITLE_FONT

    rows = dataframe_to_rows(df, index=False, header=True)
    for offset, values in enumerate(rows):
        row = TABLE_START_ROW + offset
        for col, value in enumerate(values, 1):
            if isinstance(value, float) and pd.isna(value):
                value = None
            cell = ws.cell(row=row, column=col, value=value)
            if offset == 0:
                cell.font = COLUMN_FONT
                cell.fill = COLUMN_FILL
                cell.alignment = Alignment(horizontal="center", wrap_text=True)
            else:
                _style_body_cell(cell, value, striped=offset % 2 == 0)

    ws.freeze_panes = ws.cell(row=TABLE_START_ROW + 1, column=1)
    _fit_columns(ws)


def _style_body_cell(cell, value, striped: bool) -> None:
    cell.font = BODY_FONT
    cell.border = ROW_RULE
    status_fill = STATUS_FILLS.get(value) if isinstance(value, str) else None
    if status_fill is not None:
        cell.fill = status_fill
    elif striped:
        cell.fill = STRIPE_FILL


def _fit_columns(ws: Worksheet) -> None:
    for column in ws.iter_cols(min_row=TABLE_START_ROW):
        if not column:
            continue
        widest = max((len(str(c.value)) for c in column if c.value is not None), default=0)
        ws.column_dimensions[column[0].column_letter].width = min(widest + 2, MAX_COLUMN_WIDTH)


def save_workbook(wb: Workbook, path: Path, attempts: int = 3, delay: float = 1.0) -> None:
    """Save *wb*, retrying while the file is locked (e.g. open in Excel)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    for attempt in range(1, attempts + 1):
        try:
            wb.save(str(path))
            return
        except PermissionError:
            if attempt == attempts:
                raise
            logger.warning("%s is locked, retrying (%d/%d)", path.name, attempt, attempts)
            time.sleep(delay)


def sheet_title(name: str) -> str:
    """Excel-safe sheet name: reserved characters removed, at most 31 chars."""
    return "".join(ch for ch in name if ch not in _INVALID_TITLE_CHARS)[:31]
