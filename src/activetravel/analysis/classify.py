"""
Activity Classification (Functional Core)

Pure functions only. No I/O, no side effects.

Package Location: src/activetravel/analysis/classify.py

Code sets (multinational time-use study activity list):
    Main activity 43 = walking, 44 = cycling, 63-68 = travel for work,
    education, civic, care, shopping and other purposes.
    Travel mode 3 = walk / on foot, 4 = other physical transport.
    Non-positive travel-mode codes mean "not travelling" or missing.

A record is classified against every category independently:

    all  : travel_mode > 0  or  main_activity in {43, 44, 63..68}
    walk : main_activity == 43  or  travel_mode == 3
    bike : main_activity == 44  or  travel_mode == 4

Categories are not a partition.  A walking episode counts toward both
``walk`` and ``all``.
"""

from __future__ import annotations

from typing import FrozenSet, Union

import pandas as pd

from .models import ActivityRecord, Category

MAIN_WALK: int = 43
MAIN_BIKE: int = 44
MAIN_TRAVEL_CODES: FrozenSet[int] = frozenset({43, 44, 63, 64, 65, 66, 67, 68})

MODE_WALK: int = 3
# Travel mode 4 is "other physical transport", not cycling alone.  It is
# counted as bike, which over-counts cycling where skating, scooters etc.
# are common.  Kept as-is so results stay comparable with earlier runs.
MODE_BIKE: int = 4


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def classify_record(record: ActivityRecord) -> FrozenSet[Category]:
    """Return the set of categories *record* counts toward (possibly empty)."""
    cats = set()
    if record.travel_mode > 0 or record.main_activity in MAIN_TRAVEL_CODES:
        cats.add(Category.ALL)
    if record.main_activity == MAIN_WALK or record.travel_mode == MODE_WALK:
        cats.add(Category.WALK)
    if record.main_activity == MAIN_BIKE or record.travel_mode == MODE_BIKE:
        cats.add(Category.BIKE)
    return frozenset(cats)


def category_mask(records_df: pd.DataFrame, category: Union[Category, str]) -> pd.Series:
    """
    Vectorised form of :func:`classify_record` for a single category.

    Args:
        records_df: DataFrame with ``main_activity`` and ``travel_mode``
            columns.
        category: Category to test.

    Returns:
        Boolean Series aligned with *records_df*.
    """
    category = Category.parse(category)
    main = records_df["main_activity"]
    mode = records_df["travel_mode"]

    if category is Category.ALL:
        return (mode > 0) | main.isin(MAIN_TRAVEL_CODES)
    if category is Category.WALK:
        return (main == MAIN_WALK) | (mode == MODE_WALK)
    return (main == MAIN_BIKE) | (mode == MODE_BIKE)


def classify_activities(records_df: pd.DataFrame) -> pd.DataFrame:
    """
    Add one boolean membership column per category.

    Returns a copy of *records_df* with ``is_walk``, ``is_bike`` and
    ``is_all`` columns; the input is not modified.
    """
    out = records_df.copy()
    for category in Category:
        out[f"is_{category.value}"] = category_mask(records_df, category)
    return out
