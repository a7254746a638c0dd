"""Tabular result container shared by the report analyses and exporters."""

from __future__ import annotations

from dataclasses import dataclass, field

import pandas as pd


@dataclass
class AnalysisResult:
    """Outcome of a single report analysis."""

    name: str
    title: str
    df: pd.DataFrame
    error: str | None = None
    sheet_name: str | None = None
    metadata: dict = field(default_factory=dict)

    @classmethod
    def from_df(
        cls,
        name: str,
        title: str,
        df: pd.DataFrame,
        *,
        error: str | None = None,
        sheet_name: str | None = None,
        metadata: dict | None = None,
    ) -> AnalysisResult:
        return cls(
            name=name,
            title=title,
            df=df,
            error=error,
            sheet_name=sheet_name or name.replace("_", " ").title()[:31],
            metadata=dict(metadata) if metadata else {},
        )
