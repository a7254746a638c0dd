"""Pydantic configuration for coach_retention."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from coach_retention.dates import parse_month
from coach_retention.exceptions import ConfigError
from coach_retention.roster import DEFAULT_EXCLUDED_COACHES, Discipline, ExclusionList
from coach_retention.thresholds import ThresholdConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config.yaml")
ROSTER_SUFFIXES = (".csv", ".xlsx", ".xls")


class OutputConfig(BaseModel):
    """Which files export_outputs() writes."""

    excel: bool = True
    roster_csv: bool = False
    roster_json: bool = False


class Settings(BaseModel):
    """Run configuration for one roster and reference month; frozen once built."""

    model_config = {"frozen": True, "extra": "forbid"}

    data_file: Path | None = None
    output_dir: Path = Path("output/")
    reference_date: date = Field(default_factory=date.today)
    discipline: Discipline = Discipline.PRIMARY
    cohort_start_year: int = 2024
    averages_start_year: int = 2024
    history_months: int = 12
    excluded_coaches: list[str] = Field(default_factory=lambda: list(DEFAULT_EXCLUDED_COACHES))
    thresholds: ThresholdConfig = ThresholdConfig()
    outputs: OutputConfig = OutputConfig()

    @field_validator("data_file", mode="before")
    @classmethod
    def check_roster_file(cls, v: str | Path | None) -> Path | None:
        if v is None:
            return None
        path = Path(v).expanduser().resolve()
        if not path.exists():
            raise ValueError(f"Data file not found: {path}")
        if path.suffix.lower() not in ROSTER_SUFFIXES:
            raise ValueError(
                f"Unsupported file type: {path.suffix} (expected one of {ROSTER_SUFFIXES})"
            )
        return path

    @field_validator("output_dir", mode="before")
    @classmethod
    def resolve_output_dir(cls, v: str | Path) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("reference_date", mode="before")
    @classmethod
    def parse_reference_month(cls, v: str | date) -> str | date:
        # "YYYY-MM" selects a month; full ISO dates pass through to pydantic.
        if isinstance(v, str) and len(v.strip()) == 7:
            return parse_month(v)
        return v

    @field_validator("discipline", mode="before")
    @classmethod
    def parse_discipline(cls, v: Discipline | str) -> Discipline:
        return Discipline.parse(v)

    @field_validator("cohort_start_year", "averages_start_year")
    @classmethod
    def validate_start_year(cls, v: int, info: ValidationInfo) -> int:
        if v < 2000:
            raise ValueError(f"{info.field_name}={v} is before 2000")
        return v

    @field_validator("history_months")
    @classmethod
    def validate_history_months(cls, v: int) -> int:
        if not 1 <= v <= 36:
            raise ValueError(f"history_months={v} outside 1-36")
        return v

    @property
    def exclusions(self) -> ExclusionList:
        return ExclusionList(names=tuple(self.excluded_coaches))

    @classmethod
    def from_yaml(cls, config_path: Path = DEFAULT_CONFIG_PATH, **cli_overrides) -> Settings:
        """Read *config_path* (optional) and apply non-None *cli_overrides* on top."""
        data: dict = {}
        if config_path.exists():
            try:
                data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"{config_path} must contain a mapping of settings")
            logger.debug("Loaded %d settings from %s", len(data), config_path)
        data.update(_given(cli_overrides))
        return _build(cls, data)

    @classmethod
    def from_args(cls, **kwargs) -> Settings:
        """Build from keyword arguments alone; None values keep the defaults."""
        return _build(cls, _given(kwargs))


def _build(cls: type[Settings], data: dict) -> Settings:
    try:
        return cls(**data)
    except Exception as e:
        raise ConfigError(f"Configuration error: {e}") from e


def _given(values: dict) -> dict:
    return {k: v for k, v in values.items() if v is not None}
