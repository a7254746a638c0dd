"""Shared fixtures for coach_retention tests."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest
from factories import make_athlete

from coach_retention.models import Athlete
from coach_retention.settings import Settings

DATA_DIR = Path(__file__).parent / "data"
SAMPLE_CSV = DATA_DIR / "sample_roster.csv"


@pytest.fixture()
def scenario_population() -> list[Athlete]:
    """A active since Jan, B left in Feb, C joined in Feb -- all coached by Ana."""
    return [
        make_athlete("A", date(2024, 1, 10)),
        make_athlete("B", date(2024, 1, 15), date(2024, 2, 20)),
        make_athlete("C", date(2024, 2, 5)),
    ]


@pytest.fixture()
def sample_csv_path() -> Path:
    """Path to the synthetic 8-row roster."""
    return SAMPLE_CSV


@pytest.fixture()
def sample_settings(sample_csv_path: Path, tmp_path: Path) -> Settings:
    """Settings for the sample roster, February 2024."""
    return Settings(data_file=sample_csv_path, output_dir=tmp_path, reference_date="2024-02")
