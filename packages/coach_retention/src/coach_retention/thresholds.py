"""Traffic-light classification of coach metrics.

Cutoffs are inclusive on the healthy side: churn is green at or below its
green cutoff, retention is green at or above it. Net change is green only
when strictly above its green cutoff so a flat month reads yellow.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, model_validator

from coach_retention.exceptions import ContractError
from coach_retention.models import TrafficLight


class MetricKind(str, Enum):
    CHURN = "churn"
    NET_CHANGE = "net_change"
    RETENTION_3M = "retention_3m"
    RETENTION_6M = "retention_6m"
    RETENTION_12M = "retention_12m"


RETENTION_HORIZONS: dict[int, MetricKind] = {
    3: MetricKind.RETENTION_3M,
    6: MetricKind.RETENTION_6M,
    12: MetricKind.RETENTION_12M,
}


class Cutoffs(BaseModel):
    """Green and yellow boundaries for one metric."""

    model_config = {"frozen": True}

    green: float
    yellow: float


class ThresholdConfig(BaseModel):
    """Per-metric cutoffs; overridable from config.yaml."""

    model_config = {"frozen": True, "extra": "forbid"}

    churn: Cutoffs = Cutoffs(green=2, yellow=4)
    net_change: Cutoffs = Cutoffs(green=0, yellow=0)
    retention_3m: Cutoffs = Cutoffs(green=90, yellow=85)
    retention_6m: Cutoffs = Cutoffs(green=80, yellow=75)
    retention_12m: Cutoffs = Cutoffs(green=75, yellow=70)

    @model_validator(mode="after")
    def check_ordering(self) -> ThresholdConfig:
        if self.churn.green > self.churn.yellow:
            raise ValueError("churn: green cutoff must not exceed yellow cutoff")
        if self.net_change.green < self.net_change.yellow:
            raise ValueError("net_change: green cutoff must not be below yellow cutoff")
        for kind in RETENTION_HORIZONS.values():
            cut: Cutoffs = getattr(self, kind.value)
            if cut.green < cut.yellow:
                raise ValueError(f"{kind.value}: green cutoff must not be below yellow cutoff")
        return self

    def for_kind(self, kind: MetricKind) -> Cutoffs:
        return getattr(self, MetricKind(kind).value)


DEFAULT_THRESHOLDS = ThresholdConfig()


def classify_churn(value: float, config: ThresholdConfig = DEFAULT_THRESHOLDS) -> TrafficLight:
    if value <= config.churn.green:
        return TrafficLight.GREEN
    if value <= config.churn.yellow:
        return TrafficLight.YELLOW
    return TrafficLight.RED


def classify_net_change(
    value: float, config: ThresholdConfig = DEFAULT_THRESHOLDS
) -> TrafficLight:
    if value > config.net_change.green:
        return TrafficLight.GREEN
    if value >= config.net_change.yellow:
        return TrafficLight.YELLOW
    return TrafficLight.RED


def classify_retention(
    value: float,
    horizon_months: int,
    config: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> TrafficLight:
    kind = RETENTION_HORIZONS.get(horizon_months)
    if kind is None:
        raise ContractError(
            f"No retention cutoffs for a {horizon_months}-month horizon; "
            f"expected one of {sorted(RETENTION_HORIZONS)}"
        )
    cut = config.for_kind(kind)
    if value >= cut.green:
        return TrafficLight.GREEN
    if value >= cut.yellow:
        return TrafficLight.YELLOW
    return TrafficLight.RED


def classify(
    value: float,
    kind: MetricKind | str,
    config: ThresholdConfig = DEFAULT_THRESHOLDS,
) -> TrafficLight:
    """Classify *value* as the metric named by *kind*."""
    try:
        kind = MetricKind(kind)
    except ValueError as e:
        raise ContractError(f"Unknown metric kind {kind!r}") from e
    if kind is MetricKind.CHURN:
        return classify_churn(value, config)
    if kind is MetricKind.NET_CHANGE:
        return classify_net_change(value, config)
    horizon = next(h for h, k in RETENTION_HORIZONS.items() if k is kind)
    return classify_retention(value, horizon, config)


def overall_status(
    churn: TrafficLight,
    retention_3m: TrafficLight,
    retention_6m: TrafficLight,
    retention_12m: TrafficLight,
    net_change: TrafficLight | None = None,
) -> TrafficLight:
    """Worst of churn and the three retention statuses.

    *net_change* is accepted for call-site symmetry but never affects the
    result.
    """
    return max((churn, retention_3m, retention_6m, retention_12m), key=lambda s: s.severity)
