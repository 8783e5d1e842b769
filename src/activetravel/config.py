"""
Analysis Configuration

Every country-specific constant used by the pipeline (which countries are
kept, where their series start, how bike shares are scaled for display,
which points are left out of trend fits) lives in an ``AnalysisConfig``
value rather than in the code that applies it.

Package Location: src/activetravel/config.py

JSON layout (as written by ``activetravel init``)::

    {
        "country_allow_list": ["NL", "UK", "US"],
        "min_year_exclusive": {"US": 1998, "NL": 1975},
        "bike_display_scale": {"UK": 5, "US": 5, "NL": 1},
        "trend_exclusions": [
            {"country": "UK", "category": "walk", "year": 2005},
            {"country": "US", "category": "bike", "max_year": 2000}
        ],
        "min_years_for_series": 3,
        "significance_alpha": 0.05
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from .analysis.models import Category, SHARE_CATEGORIES

DEFAULT_MIN_YEARS_FOR_SERIES: int = 3
DEFAULT_SIGNIFICANCE_ALPHA: float = 0.05


@dataclass(frozen=True)
class ExclusionRule:
    """
    Leave a point out of a trend fit.

    Matches one (country, category) group and either a single ``year`` or
    every year up to and including ``max_year``.
    """
    country: str
    category: Category
    year: Optional[int] = None
    max_year: Optional[int] = None

    def __post_init__(self):
        if (self.year is None) == (self.max_year is None):
            raise ValueError(
                f"Exclusion for {self.country}:{self.category.value} needs "
                f"exactly one of 'year' or 'max_year'."
            )
        if self.category not in SHARE_CATEGORIES:
            raise ValueError(
                f"Exclusions apply to walk/bike trends only, "
                f"got '{self.category.value}'."
            )

    def matches(self, country: str, category: Category, year: int) -> bool:
        if country != self.country or category != self.category:
            return False
        if self.year is not None:
            return year == self.year
        return year <= self.max_year

    def to_dict(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "country": self.country,
            "category": self.category.value,
        }
        if self.year is not None:
            row["year"] = self.year
        else:
            row["max_year"] = self.max_year
        return row


@dataclass(frozen=True)
class AnalysisConfig:
    """
    Options recognised by the pipeline.

    Args:
        country_allow_list: Countries kept in the series and trend tables.
        min_year_exclusive: Per-country trim; rows with ``year <= value``
            are dropped.  Countries without an entry are not trimmed.
        bike_display_scale: Per-country multiplier applied to bike shares
            so they plot on the same axis as walk shares.  Unlisted
            countries use 1.  Inverted before trends are reported.
        trend_exclusions: Points left out of the OLS fits.
        min_years_for_series: Fewer distinct years than this raises an
            ``insufficient_history`` warning.
        significance_alpha: p-value threshold for ``significant``.
    """
    country_allow_list: FrozenSet[str] = frozenset()
    min_year_exclusive: Dict[str, int] = field(default_factory=dict)
    bike_display_scale: Dict[str, float] = field(default_factory=dict)
    trend_exclusions: Tuple[ExclusionRule, ...] = ()
    min_years_for_series: int = DEFAULT_MIN_YEARS_FOR_SERIES
    significance_alpha: float = DEFAULT_SIGNIFICANCE_ALPHA

    def __post_init__(self):
        # Normalise container types so callers can pass lists/sets freely.
        object.__setattr__(
            self, "country_allow_list", frozenset(self.country_allow_list)
        )
        object.__setattr__(
            self, "trend_exclusions", tuple(self.trend_exclusions)
        )
        object.__setattr__(
            self, "min_year_exclusive",
            {str(k): int(v) for k, v in self.min_year_exclusive.items()},
        )
        object.__setattr__(
            self, "bike_display_scale",
            {str(k): float(v) for k, v in self.bike_display_scale.items()},
        )

        if not 0.0 < self.significance_alpha < 1.0:
            raise ValueError(
                f"significance_alpha must be in (0, 1), "
                f"got {self.significance_alpha}"
            )
        if self.min_years_for_series < 1:
            raise ValueError(
                f"min_years_for_series must be >= 1, "
                f"got {self.min_years_for_series}"
            )
        bad = {c: s for c, s in self.bike_display_scale.items() if s <= 0}
        if bad:
            raise ValueError(f"bike_display_scale values must be > 0: {bad}")


# ---------------------------------------------------------------------------
# Reference analysis
# ---------------------------------------------------------------------------

def reference_config() -> AnalysisConfig:
    """
    Settings of the reference UK / US / NL comparison.

    The UK 2005 diary and the early US surveys are known outliers, so
    those points stay on the chart but are left out of the trend fits.
    """
    exclusions: List[ExclusionRule] = []
    for category in SHARE_CATEGORIES:
        exclusions.append(ExclusionRule("UK", category, year=2005))
        exclusions.append(ExclusionRule("US", category, max_year=2000))

    return AnalysisConfig(
        country_allow_list={"UK", "US", "NL"},
        min_year_exclusive={"US": 1998, "NL": 1975},
        bike_display_scale={"UK": 5.0, "US": 5.0, "NL": 1.0},
        trend_exclusions=exclusions,
    )


# ---------------------------------------------------------------------------
# Dict / JSON conversion
# ---------------------------------------------------------------------------

def parse_exclusions(raw: Optional[Iterable[Dict[str, Any]]]) -> List[ExclusionRule]:
    """
    Build exclusion rules from a list of plain dicts.

    Each dict has ``country``, ``category`` and one of ``year`` /
    ``max_year``.

    Raises:
        ValueError: On an unknown category or an ambiguous rule.
        KeyError: When ``country`` or ``category`` is missing.
    """
    rules: List[ExclusionRule] = []
    for item in raw or []:
        year = item.get("year")
        max_year = item.get("max_year")
        rules.append(ExclusionRule(
            country=str(item["country"]),
            category=Category.parse(item["category"]),
            year=int(year) if year is not None else None,
            max_year=int(max_year) if max_year is not None else None,
        ))
    return rules


def config_from_dict(data: Dict[str, Any]) -> AnalysisConfig:
    """Build an ``AnalysisConfig`` from a JSON-style dict; missing keys take defaults."""
    return AnalysisConfig(
        country_allow_list=data.get("country_allow_list", []),
        min_year_exclusive=data.get("min_year_exclusive", {}),
        bike_display_scale=data.get("bike_display_scale", {}),
        trend_exclusions=parse_exclusions(data.get("trend_exclusions")),
        min_years_for_series=int(
            data.get("min_years_for_series", DEFAULT_MIN_YEARS_FOR_SERIES)
        ),
        significance_alpha=float(
            data.get("significance_alpha", DEFAULT_SIGNIFICANCE_ALPHA)
        ),
    )


def config_to_dict(config: AnalysisConfig) -> Dict[str, Any]:
    return {
        "country_allow_list": sorted(config.country_allow_list),
        "min_year_exclusive": dict(config.min_year_exclusive),
        "bike_display_scale": dict(config.bike_display_scale),
        "trend_exclusions": [r.to_dict() for r in config.trend_exclusions],
        "min_years_for_series": config.min_years_for_series,
        "significance_alpha": config.significance_alpha,
    }


def load_config(path: Union[str, Path]) -> AnalysisConfig:
    """
    Read an ``AnalysisConfig`` from a JSON file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
    """
    with Path(path).open() as fh:
        return config_from_dict(json.load(fh))


def save_config(config: AnalysisConfig, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as fh:
        json.dump(config_to_dict(config), fh, indent=4)
    return path
