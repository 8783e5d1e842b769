"""
Duration Aggregation (Functional Core)

Pure functions only. No I/O, no side effects.
Input/output is DataFrames.

Package Location: src/activetravel/analysis/aggregate.py

Each category mask is applied to the full record set on its own, so the
``all`` total includes walking and cycling time.  Groups with no matching
records produce no row: absence means zero.

Sums use ``math.fsum`` per group, which is correctly rounded and therefore
independent of record order.
"""

from __future__ import annotations

import math
from typing import Iterable, Union

import pandas as pd

from .classify import category_mask
from .models import ActivityRecord, Category, RECORD_COLUMNS, TOTAL_COLUMNS


def records_frame(
    records: Union[pd.DataFrame, Iterable[ActivityRecord]],
) -> pd.DataFrame:
    """
    Coerce the pipeline input to the canonical record DataFrame.

    Args:
        records: Either a DataFrame that already carries the canonical
            columns or an iterable of :class:`ActivityRecord`.

    Returns:
        New DataFrame with exactly ``RECORD_COLUMNS`` and normalised dtypes.

    Raises:
        KeyError: If a DataFrame input lacks a required column.
        ValueError: If any duration is negative or missing.
    """
    if isinstance(records, pd.DataFrame):
        missing = [c for c in RECORD_COLUMNS if c not in records.columns]
        if missing:
            raise KeyError(f"Record table is missing required columns: {missing}")
        df = records.loc[:, RECORD_COLUMNS].copy()
    else:
        rows = [r.to_dict() for r in records]
        df = pd.DataFrame(rows, columns=RECORD_COLUMNS)

    df["country"] = df["country"].astype(str)
    df["year"] = df["year"].astype(int)
    df["main_activity"] = df["main_activity"].astype(int)
    df["travel_mode"] = df["travel_mode"].astype(int)
    df["duration"] = df["duration"].astype(float)

    invalid = df["duration"].isna() | (df["duration"] < 0)
    if invalid.any():
        raise ValueError(
            f"Duration must be non-negative; {int(invalid.sum())} record(s) "
            f"have a negative or missing duration"
        )
    return df


def aggregate_year_totals(records_df: pd.DataFrame) -> pd.DataFrame:
    """
    Sum durations per (country, year, category).

    Args:
        records_df: Canonical record DataFrame (see :func:`records_frame`).

    Returns:
        DataFrame with columns ``[country, year, category, total_duration]``,
        one row per group that has at least one matching record, sorted by
        country, year and category.  ``category`` holds the string value
        (``"walk"``, ``"bike"``, ``"all"``).
    """
    frames = []
    for category in Category:
        subset = records_df.loc[category_mask(records_df, category)]
        if subset.empty:
            continue
        totals = (
            subset.groupby(["country", "year"])["duration"]
            .agg(math.fsum)
            .rename("total_duration")
            .reset_index()
        )
        totals["category"] = category.value
        frames.append(totals)

    if not frames:
        return pd.DataFrame(columns=TOTAL_COLUMNS)

    result = pd.concat(frames, ignore_index=True)[TOTAL_COLUMNS]
    return result.sort_values(["country", "year", "category"]).reset_index(drop=True)


def country_totals(
    totals_df: pd.DataFrame,
    country: str,
    category: Union[Category, str],
) -> pd.Series:
    """
    Year-indexed totals for one country and category.

    Returns an empty float Series when the group has no rows.
    """
    category = Category.parse(category)
    mask = (totals_df["country"] == country) & (totals_df["category"] == category.value)
    return (
        totals_df.loc[mask]
        .set_index("year")["total_duration"]
        .astype(float)
        .sort_index()
    )
