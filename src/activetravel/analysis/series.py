"""
Country Share Series (Functional Core)

Pure functions only. No I/O, no side effects.

Package Location: src/activetravel/analysis/series.py

Builds, per country, one row per survey year with the share of travel
time spent walking and cycling.

Year Rule:
    A year is kept only if the country has an all-mode total for it.  A
    walk or bike total without a denominator is meaningless and dropped.
    Walk/bike totals missing for a kept year are taken as 0.

Denominator Rule:
    An all-mode total of 0 cannot happen for a kept year when totals come
    from :func:`aggregate_year_totals` with positive durations, but
    zero-length episodes make it possible.  Such a row is dropped and a
    ``degenerate_denominator`` diagnostic is returned; NaN / Inf shares
    are never emitted.
"""

from __future__ import annotations

from typing import List, Tuple

import pandas as pd

from .aggregate import country_totals
from .diagnostics import (
    Diagnostic,
    data_absence,
    degenerate_denominator,
    insufficient_history,
)
from .models import Category, SERIES_COLUMNS


def build_country_series(
    totals_df: pd.DataFrame,
    country: str,
    min_years: int = 3,
) -> Tuple[pd.DataFrame, List[Diagnostic]]:
    """
    Join one country's walk, bike and all-mode totals on year and compute shares.

    Args:
        totals_df: Output of :func:`aggregate_year_totals` (may hold other
            countries; only *country* is used).
        country: Country code.
        min_years: Fewer distinct kept years than this yields an
            ``insufficient_history`` warning.

    Returns:
        ``(series_df, diagnostics)``.  *series_df* has ``SERIES_COLUMNS``
        sorted by year.  When the country has no all-mode totals at all
        the frame is empty and no diagnostics are raised.
    """
    walk = country_totals(totals_df, country, Category.WALK)
    bike = country_totals(totals_df, country, Category.BIKE)
    all_modes = country_totals(totals_df, country, Category.ALL)

    if all_modes.empty:
        return pd.DataFrame(columns=SERIES_COLUMNS), []

    diagnostics: List[Diagnostic] = []
    if walk.empty:
        diagnostics.append(data_absence(country, Category.WALK))
    if bike.empty:
        diagnostics.append(data_absence(country, Category.BIKE))

    candidate_years = set(walk.index) | set(bike.index) | set(all_modes.index)
    years = sorted(candidate_years & set(all_modes.index))

    series = pd.DataFrame({"year": years})
    series["country"] = country
    series["all_total"] = all_modes.reindex(years).to_numpy()
    series["walk_total"] = walk.reindex(years, fill_value=0.0).to_numpy()
    series["bike_total"] = bike.reindex(years, fill_value=0.0).to_numpy()

    degenerate = ~(series["all_total"] > 0)
    for year in series.loc[degenerate, "year"]:
        diagnostics.append(degenerate_denominator(country, int(year)))
    series = series.loc[~degenerate].reset_index(drop=True)

    series["walk_share"] = series["walk_total"] / series["all_total"]
    series["bike_share"] = series["bike_total"] / series["all_total"]

    n_years = series["year"].nunique()
    if n_years < min_years:
        diagnostics.append(insufficient_history(country, n_years, min_years))

    series["year"] = series["year"].astype(int)
    return series[SERIES_COLUMNS], diagnostics


def build_series(
    totals_df: pd.DataFrame,
    min_years: int = 3,
) -> Tuple[pd.DataFrame, List[Diagnostic]]:
    """
    Run :func:`build_country_series` for every country in *totals_df*.

    Returns:
        ``(series_df, diagnostics)`` with all countries stacked, sorted by
        country then year.
    """
    frames: List[pd.DataFrame] = []
    diagnostics: List[Diagnostic] = []

    for country in sorted(totals_df["country"].unique()):
        country_df, country_diags = build_country_series(
            totals_df, country, min_years
        )
        diagnostics.extend(country_diags)
        if not country_df.empty:
            frames.append(country_df)

    if not frames:
        return pd.DataFrame(columns=SERIES_COLUMNS), diagnostics

    series = pd.concat(frames, ignore_index=True)
    return series.sort_values(["country", "year"]).reset_index(drop=True), diagnostics
