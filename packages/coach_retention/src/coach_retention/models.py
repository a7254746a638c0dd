"""Roster records and the result types produced by the analytics engines."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from coach_retention.dates import months_between

# Values meaning "this athlete has no secondary coach" (compared lower-cased).
NO_SECONDARY_COACH = frozenset({"none", "nobody", "ninguém", "ninguem"})


class AthleteStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class TrafficLight(str, Enum):
    """Three-level health classification of a metric."""

    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]


_SEVERITY = {TrafficLight.GREEN: 0, TrafficLight.YELLOW: 1, TrafficLight.RED: 2}


def is_blank_or_sentinel(name: str | None) -> bool:
    """True if a coach field is empty or one of the "no coach" sentinels."""
    if name is None:
        return True
    normalized = name.strip().lower()
    return normalized == "" or normalized in NO_SECONDARY_COACH


@dataclass(frozen=True)
class Athlete:
    """One roster entry as delivered by the ingestion layer.

    Tenure fields are derived on demand from the dates and status so an
    edited record can never carry stale values.
    """

    id: str
    name: str
    primary_coach: str
    status: AthleteStatus
    entry_date: date
    exit_date: date | None = None
    secondary_coach: str | None = None
    plan: str | None = None

    def __post_init__(self) -> None:
        if self.exit_date is not None and self.exit_date < self.entry_date:
            raise ValueError(
                f"Athlete {self.id!r}: exit date {self.exit_date} precedes entry {self.entry_date}"
            )

    @property
    def is_active(self) -> bool:
        return self.status == AthleteStatus.ACTIVE

    @property
    def secondary_coach_name(self) -> str | None:
        """Secondary coach, or None when absent or a "none" sentinel."""
        if is_blank_or_sentinel(self.secondary_coach):
            return None
        return self.secondary_coach

    def months_enrolled(self, as_of: date) -> int:
        """Whole months from entry to exit (inactive) or to *as_of*."""
        if not self.is_active and self.exit_date is not None:
            end = self.exit_date
        else:
            end = as_of
        return max(0, months_between(end, self.entry_date))

    @property
    def months_to_churn(self) -> int | None:
        if self.is_active or self.exit_date is None:
            return None
        return months_between(self.exit_date, self.entry_date)


@dataclass(frozen=True)
class MetricWithStatus:
    value: float
    status: TrafficLight


@dataclass(frozen=True)
class CoachMetrics:
    """Monthly health snapshot for one coach."""

    name: str
    total_historical: int
    active_count: int
    inactive_count: int
    entries_this_month: int
    exits_this_month: int
    base_at_month_start: int
    base_at_month_end: int
    monthly_churn: MetricWithStatus
    net_change: MetricWithStatus
    retention_3m: MetricWithStatus
    retention_6m: MetricWithStatus
    retention_12m: MetricWithStatus
    overall_status: TrafficLight


@dataclass(frozen=True)
class OrgSummary:
    """Organization-wide counterpart of CoachMetrics plus status tallies."""

    total_athletes: int
    active_count: int
    inactive_count: int
    entries_this_month: int
    exits_this_month: int
    base_at_month_start: int
    base_at_month_end: int
    monthly_churn: MetricWithStatus
    net_change: MetricWithStatus
    green_count: int
    yellow_count: int
    red_count: int

    @property
    def coaches_evaluated(self) -> int:
        return self.green_count + self.yellow_count + self.red_count


@dataclass(frozen=True)
class CohortRow:
    """Retention curve of athletes who entered in the same month.

    ``retention_by_month[m]`` is the percentage still enrolled at the end of
    the (m+1)-th month after entry.
    """

    entry_month_key: str
    label: str
    initial_size: int
    retention_by_month: tuple[float, ...] = ()


@dataclass(frozen=True)
class CohortTable:
    cohorts: tuple[CohortRow, ...] = ()
    max_months_observed: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.cohorts


@dataclass(frozen=True)
class MonthlyPoint:
    """One month of the organization health series."""

    label: str
    month_start: date
    year: int
    churn: float
    net_change: int
    base_at_month_start: int
    base_at_month_end: int
    entries: int
    exits: int
    retention_3m: float
    retention_6m: float
    retention_12m: float


@dataclass(frozen=True)
class YearlyAverage:
    year: int
    churn: float
    retention_3m: float
    retention_6m: float
    retention_12m: float
