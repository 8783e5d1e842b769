"""
Active Travel Pipeline (Functional Core entry point)

Chains the analysis stages in order:

    records -> year totals -> country series -> display series -> trends

Each stage returns a new table; no stage modifies its input.  Findings
that affect a single country, year or group are gathered into one
diagnostics list instead of stopping the run.

Package Location: src/activetravel/pipeline.py
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Union

import pandas as pd

from .analysis import (
    ActivityRecord,
    Diagnostic,
    aggregate_year_totals,
    build_series,
    diagnostics_frame,
    estimate_trends,
    prepare_display_series,
    records_frame,
)
from .config import AnalysisConfig, reference_config


@dataclass
class PipelineResult:
    """
    Everything one pipeline run produces.

    Attributes:
        totals: Year totals per (country, year, category).
        series: Wide per-country shares before allow-list / trims /
            scaling (all countries).
        display: Series table: long, filtered, bike shares in display
            units.  This is the chart input.
        trends: Trend table, slopes in true percentage points per year.
        diagnostics: Scope-tagged warnings and group-level failures.
    """
    totals: pd.DataFrame
    series: pd.DataFrame
    display: pd.DataFrame
    trends: pd.DataFrame
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def diagnostics_table(self) -> pd.DataFrame:
        return diagnostics_frame(self.diagnostics)


def run_pipeline(
    records: Union[pd.DataFrame, Iterable[ActivityRecord]],
    config: Optional[AnalysisConfig] = None,
) -> PipelineResult:
    """
    Run classification through trend estimation.

    Args:
        records: Canonical record DataFrame or iterable of
            :class:`ActivityRecord`.
        config: Analysis options.  Defaults to :func:`reference_config`.

    Returns:
        :class:`PipelineResult`.

    Raises:
        KeyError: If a DataFrame input lacks a required column.
    """
    config = config or reference_config()
    records_df = records_frame(records)

    totals = aggregate_year_totals(records_df)
    series, diagnostics = build_series(totals, config.min_years_for_series)

    display = prepare_display_series(
        series,
        allow_list=config.country_allow_list,
        min_year_exclusive=config.min_year_exclusive,
        bike_display_scale=config.bike_display_scale,
    )

    trends, trend_diags = estimate_trends(
        display,
        bike_display_scale=config.bike_display_scale,
        exclusions=config.trend_exclusions,
        alpha=config.significance_alpha,
    )
    diagnostics.extend(trend_diags)

    return PipelineResult(
        totals=totals,
        series=series,
        display=display,
        trends=trends,
        diagnostics=diagnostics,
    )
