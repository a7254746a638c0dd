"""Roster loading and validation.

Reads a CSV/Excel roster with the canonical column layout and turns each
valid row into an :class:`~coach_retention.models.Athlete`. Rows that fail
validation are skipped with a warning so one bad line never blocks a report.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from pathlib import Path

import pandas as pd

from coach_retention.exceptions import ColumnMismatchError, DataLoadError
from coach_retention.models import Athlete, AthleteStatus
from coach_retention.settings import Settings

logger = logging.getLogger(__name__)

_YEAR_FIRST = re.compile(r"\d{4}[-/.]")

REQUIRED_COLUMNS = {"name", "primary_coach", "status", "entry_date"}
OPTIONAL_COLUMNS = {"id", "secondary_coach", "exit_date", "plan"}

_STATUS_VALUES = {
    "active": AthleteStatus.ACTIVE,
    "ativo": AthleteStatus.ACTIVE,
    "inactive": AthleteStatus.INACTIVE,
    "inativo": AthleteStatus.INACTIVE,
}


def load_roster(settings: Settings) -> list[Athlete]:
    """Load and validate the roster named by ``settings.data_file``."""
    if settings.data_file is None:
        raise DataLoadError("No data_file configured")
    df = _read_file(settings.data_file)
    df = normalize_columns(df)
    athletes = frame_to_athletes(df)
    logger.info(
        "Loaded %d athletes (%d rows skipped) from %s",
        len(athletes),
        len(df) - len(athletes),
        settings.data_file.name,
    )
    return athletes


def _read_file(path: Path) -> pd.DataFrame:
    """Read a CSV or Excel file into a DataFrame of strings/dates."""
    suffix = path.suffix.lower()
    try:
        if suffix == ".csv":
            return pd.read_csv(path, dtype=str, keep_default_na=False)
        return pd.read_excel(path, dtype=object)
    except Exception as e:
        raise DataLoadError(f"Failed to read {path}: {e}") from e


def normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Lower-case and trim headers; raise if a required column is absent."""
    result = df.rename(columns={c: str(c).strip().lower() for c in df.columns})
    available = set(result.columns)
    missing = REQUIRED_COLUMNS - available
    if missing:
        raise ColumnMismatchError(missing=missing, available=available)
    return result


def frame_to_athletes(df: pd.DataFrame) -> list[Athlete]:
    athletes: list[Athlete] = []
    for index, row in enumerate(df.to_dict(orient="records")):
        athlete = _row_to_athlete(row, index)
        if athlete is not None:
            athletes.append(athlete)
    return athletes


def _row_to_athlete(row: dict, index: int) -> Athlete | None:
    line = index + 2  # header is line 1
    name = _text(row.get("name"))
    coach = _text(row.get("primary_coach"))
    if not name or not coach:
        logger.warning("Line %d: missing name or primary coach, skipped", line)
        return None

    entry = parse_date(row.get("entry_date"))
    if entry is None:
        logger.warning("Line %d: invalid entry date %r, skipped", line, row.get("entry_date"))
        return None

    status = _STATUS_VALUES.get(_text(row.get("status")).lower())
    if status is None:
        logger.warning("Line %d: unknown status %r, skipped", line, row.get("status"))
        return None

    exit_date = parse_date(row.get("exit_date"))
    if exit_date is not None and exit_date < entry:
        logger.warning("Line %d: exit date %s precedes entry %s, ignored", line, exit_date, entry)
        exit_date = None

    return Athlete(
        id=_text(row.get("id")) or str(index),
        name=name,
        primary_coach=coach,
        secondary_coach=_text(row.get("secondary_coach")) or None,
        status=status,
        entry_date=entry,
        exit_date=exit_date,
        plan=_text(row.get("plan")) or None,
    )


def parse_date(value) -> date | None:
    """Parse a spreadsheet cell into a date.

    Accepts datetime-like values, ISO strings and day-first strings such as
    ``31/01/2024``. Blank cells and formulas (``=TODAY()``) yield None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        if pd.isna(value):
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
    text = _text(value)
    if not text or text.startswith("="):
        return None
    dayfirst = not _YEAR_FIRST.match(text) and ("/" in text or text[2:3] == "-")
    parsed = pd.to_datetime(text, errors="coerce", dayfirst=dayfirst)
    if pd.isna(parsed):
        return None
    return parsed.date()


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value).strip()
