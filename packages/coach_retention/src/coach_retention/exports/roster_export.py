"""Roster export to CSV and JSON, including derived tenure fields."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

import pandas as pd

from coach_retention.models import Athlete

logger = logging.getLogger(__name__)

ROSTER_COLUMNS = [
    "id",
    "name",
    "primary_coach",
    "secondary_coach",
    "status",
    "entry_date",
    "exit_date",
    "plan",
    "months_enrolled",
    "months_to_churn",
]


def roster_records(athletes: list[Athlete], as_of: date) -> list[dict]:
    """Plain dicts with tenure derived as of *as_of*."""
    return [
        {
            "id": a.id,
            "name": a.name,
            "primary_coach": a.primary_coach,
            "secondary_coach": a.secondary_coach_name,
            "status": a.status.value,
            "entry_date": a.entry_date.isoformat(),
            "exit_date": a.exit_date.isoformat() if a.exit_date else None,
            "plan": a.plan,
            "months_enrolled": a.months_enrolled(as_of),
            "months_to_churn": a.months_to_churn,
        }
        for a in athletes
    ]


def roster_frame(athletes: list[Athlete], as_of: date) -> pd.DataFrame:
    df = pd.DataFrame(roster_records(athletes, as_of), columns=ROSTER_COLUMNS)
    df["months_to_churn"] = df["months_to_churn"].astype("Int64")
    return df


def write_roster_csv(athletes: list[Athlete], path: Path, as_of: date) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    roster_frame(athletes, as_of).to_csv(path, index=False, encoding="utf-8")
    logger.info("Roster CSV: %s (%d rows)", path.name, len(athletes))
    return path


def write_roster_json(athletes: list[Athlete], path: Path, as_of: date) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(roster_records(athletes, as_of), f, ensure_ascii=False, indent=2)
    logger.info("Roster JSON: %s (%d rows)", path.name, len(athletes))
    return path
