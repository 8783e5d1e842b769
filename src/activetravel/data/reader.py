"""
Activity Record Reader (Imperative Shell)

Loads an episode-level time-use extract from CSV and returns the
canonical record DataFrame consumed by the Functional Core
(``activetravel.analysis``).

Package Location: src/activetravel/data/reader.py

Source columns:
    The default mapping follows the multinational time-use study naming
    used by IPUMS extracts::

        COUNTRY -> country        MAIN  -> main_activity
        YEAR    -> year           MTRAV -> travel_mode
        TIME    -> duration (minutes)

    Pass ``columns=`` to read extracts that use other names.  Only the
    mapped columns are read from disk.

Cleaning:
    Rows with a missing value in any required column, or with a negative
    duration, are dropped and counted; the counts are logged at WARNING
    level.  Nothing else is altered.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

import pandas as pd

from ..analysis.classify import classify_activities
from ..analysis.models import RECORD_COLUMNS

log = logging.getLogger(__name__)

DEFAULT_COLUMN_MAP: Dict[str, str] = {
    "COUNTRY": "country",
    "YEAR":    "year",
    "MAIN":    "main_activity",
    "MTRAV":   "travel_mode",
    "TIME":    "duration",
}

# Rows per chunk when reading large extracts.
_DEFAULT_CHUNKSIZE: int = 500_000


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def read_activity_csv(
    path: Union[str, Path],
    columns: Optional[Mapping[str, str]] = None,
    countries: Optional[Iterable[str]] = None,
    country_labels: Optional[Mapping[Any, str]] = None,
    chunksize: int = _DEFAULT_CHUNKSIZE,
) -> pd.DataFrame:
    """
    Read an activity extract into the canonical record DataFrame.

    Args:
        path: CSV file (compression inferred from the suffix, e.g. ``.gz``).
        columns: Mapping of source column name to canonical name.  Must
            cover every name in ``RECORD_COLUMNS``.  Defaults to
            :data:`DEFAULT_COLUMN_MAP`.
        countries: When given, only rows for these (canonical) country
            codes are kept.  Filtering happens per chunk so large extracts
            never need to fit in memory unfiltered.
        country_labels: Optional recode of raw country values (e.g.
            numeric IPUMS codes) to the string codes used in the
            configuration.  Unmapped values are kept as their string form.
        chunksize: Rows per read chunk.

    Returns:
        DataFrame with exactly ``RECORD_COLUMNS``.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ValueError: If *columns* does not map onto every required column,
            or the file lacks a mapped source column.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Activity extract not found: {path}")

    column_map = dict(columns or DEFAULT_COLUMN_MAP)
    missing = sorted(set(RECORD_COLUMNS) - set(column_map.values()))
    if missing:
        raise ValueError(f"Column mapping does not cover: {missing}")

    wanted = set(countries) if countries is not None else None

    log.info(
        f"Reading activity extract {path.name}",
        extra={"path": str(path), "columns": column_map},
    )

    chunks: List[pd.DataFrame] = []
    dropped_missing = 0
    dropped_negative = 0
    try:
        reader = pd.read_csv(path, usecols=list(column_map), chunksize=chunksize)
        for chunk in reader:
            chunk = chunk.rename(columns=column_map)
            chunk, n_missing, n_negative = _clean_chunk(chunk, country_labels)
            dropped_missing += n_missing
            dropped_negative += n_negative
            if wanted is not None:
                chunk = chunk.loc[chunk["country"].isin(wanted)]
            if not chunk.empty:
                chunks.append(chunk)
    except ValueError as exc:
        # pandas raises ValueError when a usecols name is absent.
        raise ValueError(f"Cannot read {path.name}: {exc}") from exc

    if dropped_missing:
        log.warning(
            f"Dropped {dropped_missing} record(s) with missing values",
            extra={"dropped_missing": dropped_missing},
        )
    if dropped_negative:
        log.warning(
            f"Dropped {dropped_negative} record(s) with negative duration",
            extra={"dropped_negative": dropped_negative},
        )

    if not chunks:
        log.warning(f"No usable records in {path.name}")
        return pd.DataFrame(columns=RECORD_COLUMNS)

    df = pd.concat(chunks, ignore_index=True)[RECORD_COLUMNS]
    log.info(f"Loaded {len(df)} activity records", extra={"rows": len(df)})
    return df


def check_data_quality(records_df: pd.DataFrame) -> Dict[str, Any]:
    """
    Summarise a canonical record DataFrame for logging.

    Returns:
        Dict with ``rows``, ``travel_rows``, ``countries`` and a per-country
        ``years`` mapping of ``{country: [first_year, last_year, n_years]}``.
    """
    if records_df.empty:
        return {"rows": 0, "travel_rows": 0, "countries": [], "years": {}}

    classified = classify_activities(records_df)
    years: Dict[str, List[int]] = {}
    for country, grp in records_df.groupby("country"):
        yrs = grp["year"]
        years[str(country)] = [int(yrs.min()), int(yrs.max()), int(yrs.nunique())]

    return {
        "rows": int(len(records_df)),
        "travel_rows": int(classified["is_all"].sum()),
        "countries": sorted(years),
        "years": years,
    }


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _clean_chunk(
    chunk: pd.DataFrame,
    country_labels: Optional[Mapping[Any, str]],
) -> Tuple[pd.DataFrame, int, int]:
    """
    Drop unusable rows and coerce dtypes.

    Returns:
        ``(clean_chunk, n_dropped_missing, n_dropped_negative)``.
    """
    n_in = len(chunk)
    numeric = ["year", "main_activity", "travel_mode", "duration"]
    for col in numeric:
        chunk[col] = pd.to_numeric(chunk[col], errors="coerce")

    chunk = chunk.dropna(subset=RECORD_COLUMNS)
    n_missing = n_in - len(chunk)

    negative = chunk["duration"] < 0
    n_negative = int(negative.sum())
    chunk = chunk.loc[~negative].copy()

    if country_labels:
        labels = dict(country_labels)
        chunk["country"] = chunk["country"].map(lambda v: labels.get(v, v))
    chunk["country"] = chunk["country"].astype(str)
    chunk["year"] = chunk["year"].astype(int)
    chunk["main_activity"] = chunk["main_activity"].astype(int)
    chunk["travel_mode"] = chunk["travel_mode"].astype(int)
    chunk["duration"] = chunk["duration"].astype(float)

    return chunk, n_missing, n_negative
