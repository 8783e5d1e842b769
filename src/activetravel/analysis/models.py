"""
Active Travel Record Types (Functional Core)

Plain value types shared by every stage of the pipeline.  Nothing here
performs I/O.

Package Location: src/activetravel/analysis/models.py

Column conventions:
    Every DataFrame passed between stages uses the canonical column names
    defined below (``RECORD_COLUMNS``, ``TOTAL_COLUMNS`` ...).  The shell
    (``data/reader.py``) is responsible for renaming source columns before
    the core ever sees them.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List


class Category(str, Enum):
    """Travel category a record can count toward."""
    WALK = "walk"
    BIKE = "bike"
    ALL = "all"   # any travel, the share denominator

    @classmethod
    def parse(cls, value: Any) -> "Category":
        """Accept an enum member or its string value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown category '{value}'. "
                f"Expected one of: {', '.join(c.value for c in cls)}."
            ) from None


# Categories that get a share series (the numerators).
SHARE_CATEGORIES: List[Category] = [Category.WALK, Category.BIKE]

# ---------------------------------------------------------------------------
# Canonical column layouts
# ---------------------------------------------------------------------------

RECORD_COLUMNS: List[str] = [
    "country", "year", "main_activity", "travel_mode", "duration",
]
TOTAL_COLUMNS: List[str] = ["country", "year", "category", "total_duration"]
SERIES_COLUMNS: List[str] = [
    "country", "year",
    "walk_total", "bike_total", "all_total",
    "walk_share", "bike_share",
]
LONG_COLUMNS: List[str] = ["country", "year", "category", "share", "series"]
TREND_COLUMNS: List[str] = [
    "country", "category",
    "slope_per_year_pct", "std_err_pct", "p_value", "intercept",
    "n_points", "significant", "scale_adjusted",
]


@dataclass(frozen=True)
class ActivityRecord:
    """
    One observed activity episode from a time-use diary.

    Attributes:
        country: Country code, e.g. ``"UK"``.
        year: Survey year.
        main_activity: Main-activity code of the episode.
        travel_mode: Travel-mode code (``<= 0`` when not travelling or
            not recorded).
        duration: Episode length in minutes.
    """
    country: str
    year: int
    main_activity: int
    travel_mode: int
    duration: float

    def __post_init__(self):
        if not self.country:
            raise ValueError("Country code cannot be empty")
        if self.duration < 0:
            raise ValueError("Duration must be non-negative")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TrendResult:
    """
    Fitted trend for one (country, category) group.

    Slope and standard error are expressed in percentage points per year,
    already converted back from display units when ``scale_adjusted``.
    """
    country: str
    category: Category
    slope_per_year_pct: float
    std_err_pct: float
    p_value: float
    intercept: float
    n_points: int
    significant: bool
    scale_adjusted: bool

    def to_dict(self) -> Dict[str, Any]:
        row = asdict(self)
        row["category"] = self.category.value
        return row
