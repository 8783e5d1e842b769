"""
Country Selection, Year Trims and Display Scaling (Functional Core)

Pure functions only. No I/O, no side effects.

Package Location: src/activetravel/analysis/filtering.py

Display Scale Rule:
    Bike shares are typically an order of magnitude below walk shares.
    ``rescale_bike`` multiplies them by a per-country factor so both fit
    on one chart.  The scaled values are display units only; the trend
    estimator divides the factor back out before reporting slopes.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Optional

import pandas as pd

from .models import LONG_COLUMNS, SHARE_CATEGORIES


def filter_countries(series_df: pd.DataFrame, allow_list: Iterable[str]) -> pd.DataFrame:
    """Keep only rows whose country is in *allow_list*.  Idempotent."""
    allowed = set(allow_list)
    return series_df.loc[series_df["country"].isin(allowed)].reset_index(drop=True)


def trim_years(
    series_df: pd.DataFrame,
    min_year_exclusive: Optional[Mapping[str, int]] = None,
) -> pd.DataFrame:
    """
    Drop rows with ``year <= min_year_exclusive[country]``.

    Countries without an entry are left untouched.
    """
    if not min_year_exclusive:
        return series_df.reset_index(drop=True)

    threshold = series_df["country"].map(dict(min_year_exclusive))
    keep = threshold.isna() | (series_df["year"] > threshold)
    return series_df.loc[keep].reset_index(drop=True)


def rescale_bike(
    series_df: pd.DataFrame,
    bike_display_scale: Optional[Mapping[str, float]] = None,
) -> pd.DataFrame:
    """
    Multiply ``bike_share`` by the country's display factor (default 1).

    Returns a copy; ``bike_total`` and ``walk_share`` are unchanged.
    """
    out = series_df.copy()
    if not bike_display_scale or out.empty:
        return out
    factor = out["country"].map(dict(bike_display_scale)).fillna(1.0).astype(float)
    out["bike_share"] = out["bike_share"] * factor
    return out


def to_long(series_df: pd.DataFrame) -> pd.DataFrame:
    """
    Reshape wide shares into one row per (country, year, category).

    Returns:
        DataFrame with ``LONG_COLUMNS``: ``category`` is ``"walk"`` or
        ``"bike"`` and ``series`` is the ``"<country>:<category>"`` label
        used as the chart series key.
    """
    if series_df.empty:
        return pd.DataFrame(columns=LONG_COLUMNS)

    share_cols: Dict[str, str] = {
        f"{c.value}_share": c.value for c in SHARE_CATEGORIES
    }
    long_df = series_df.melt(
        id_vars=["country", "year"],
        value_vars=list(share_cols),
        var_name="category",
        value_name="share",
    )
    long_df["category"] = long_df["category"].map(share_cols)
    long_df["series"] = long_df["country"] + ":" + long_df["category"]
    long_df = long_df.sort_values(["country", "category", "year"])
    return long_df[LONG_COLUMNS].reset_index(drop=True)


def prepare_display_series(
    series_df: pd.DataFrame,
    allow_list: Iterable[str],
    min_year_exclusive: Optional[Mapping[str, int]] = None,
    bike_display_scale: Optional[Mapping[str, float]] = None,
) -> pd.DataFrame:
    """Allow-list, trim, rescale and reshape in one call (the series table)."""
    out = filter_countries(series_df, allow_list)
    out = trim_years(out, min_year_exclusive)
    out = rescale_bike(out, bike_display_scale)
    return to_long(out)
