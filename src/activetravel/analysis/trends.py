"""
Trend Estimation (Functional Core)

Pure functions only. No I/O, no side effects.

Package Location: src/activetravel/analysis/trends.py

For every (country, category) group of the display series:

1. Points matched by an exclusion rule are dropped.
2. ``share ~ year`` is fitted by ordinary least squares using the
   closed-form simple-regression formulas (:func:`fit_ols`).
3. The slope is tested against zero with a two-sided t-test on n - 2
   degrees of freedom.
4. The slope is reported in percentage points per year.  Bike slopes are
   divided by the country's display factor so they are in true units.

A group that cannot be fitted is left out of the table and reported as an
``insufficient_points`` diagnostic; the remaining groups are unaffected.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy import stats

from .diagnostics import Diagnostic, insufficient_points
from .models import Category, TREND_COLUMNS, TrendResult

if TYPE_CHECKING:
    from ..config import ExclusionRule


class TrendFitError(Exception):
    """Raised when a group has too few points (or distinct years) for OLS."""

    def __init__(self, n_points: int, reason: str):
        super().__init__(reason)
        self.n_points = n_points
        self.reason = reason


@dataclass(frozen=True)
class OLSFit:
    """Result of a one-predictor OLS fit (share units, per year)."""
    slope: float
    intercept: float
    std_err: float
    p_value: float
    n_points: int


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def fit_ols(years: Sequence[float], shares: Sequence[float]) -> OLSFit:
    """
    Fit ``share = intercept + slope * year``.

    With exactly two points the line is exact and the standard error and
    p-value are undefined (NaN).  A perfect fit through three or more
    points has a zero standard error; its p-value is 0 for a non-zero
    slope and 1 for a flat line.

    Args:
        years: Predictor values.
        shares: Response values, same length as *years*.

    Returns:
        :class:`OLSFit`.

    Raises:
        TrendFitError: Fewer than two points, or every point in one year.
        ValueError: If *years* and *shares* differ in length.
    """
    x = np.asarray(years, dtype=float)
    y = np.asarray(shares, dtype=float)
    if x.shape != y.shape:
        raise ValueError(
            f"years and shares must have the same length "
            f"({x.size} != {y.size})"
        )

    n = int(x.size)
    if n < 2:
        raise TrendFitError(n, "need at least 2 points")

    x_mean = x.mean()
    y_mean = y.mean()
    sxx = float(np.sum((x - x_mean) ** 2))
    if sxx == 0.0:
        raise TrendFitError(n, "all points fall in the same year")

    slope = float(np.sum((x - x_mean) * (y - y_mean)) / sxx)
    intercept = float(y_mean - slope * x_mean)

    dof = n - 2
    if dof == 0:
        return OLSFit(slope, intercept, math.nan, math.nan, n)

    residuals = y - (intercept + slope * x)
    sse = float(np.sum(residuals ** 2))
    std_err = math.sqrt(sse / dof / sxx)

    if std_err == 0.0:
        p_value = 0.0 if slope != 0.0 else 1.0
    else:
        t_stat = slope / std_err
        p_value = float(2.0 * stats.t.sf(abs(t_stat), dof))

    return OLSFit(slope, intercept, std_err, p_value, n)


def apply_exclusions(
    long_df: pd.DataFrame,
    exclusions: Optional[Iterable["ExclusionRule"]] = None,
) -> pd.DataFrame:
    """
    Remove points matched by any exclusion rule.

    Args:
        long_df: Series table (``country, year, category, share, ...``).
        exclusions: Rules exposing ``matches(country, category, year)``.

    Returns:
        Filtered copy of *long_df*.
    """
    rules = list(exclusions or [])
    if not rules or long_df.empty:
        return long_df.reset_index(drop=True)

    excluded = [
        any(
            rule.matches(country, Category.parse(category), int(year))
            for rule in rules
        )
        for country, category, year in zip(
            long_df["country"], long_df["category"], long_df["year"]
        )
    ]
    return long_df.loc[~np.asarray(excluded, dtype=bool)].reset_index(drop=True)


def estimate_group_trend(
    country: str,
    category: Category,
    years: Sequence[float],
    shares: Sequence[float],
    bike_scale: float = 1.0,
    alpha: float = 0.05,
) -> TrendResult:
    """
    Fit one group and convert the slope to true percentage points per year.

    Raises:
        TrendFitError: Propagated from :func:`fit_ols`.
    """
    fit = fit_ols(years, shares)

    slope_pct = fit.slope * 100.0
    std_err_pct = fit.std_err * 100.0
    intercept = fit.intercept

    scale_adjusted = category is Category.BIKE and bike_scale != 1.0
    if scale_adjusted:
        slope_pct /= bike_scale
        std_err_pct /= bike_scale
        intercept /= bike_scale

    significant = (not math.isnan(fit.p_value)) and fit.p_value < alpha

    return TrendResult(
        country=country,
        category=category,
        slope_per_year_pct=slope_pct,
        std_err_pct=std_err_pct,
        p_value=fit.p_value,
        intercept=intercept,
        n_points=fit.n_points,
        significant=significant,
        scale_adjusted=scale_adjusted,
    )


def estimate_trends(
    long_df: pd.DataFrame,
    bike_display_scale: Optional[Mapping[str, float]] = None,
    exclusions: Optional[Iterable["ExclusionRule"]] = None,
    alpha: float = 0.05,
) -> Tuple[pd.DataFrame, List[Diagnostic]]:
    """
    Fit a trend per (country, category) group of the display series.

    Args:
        long_df: Output of :func:`prepare_display_series`; bike shares are
            in display units.
        bike_display_scale: The same per-country factors used to build
            *long_df*; unlisted countries use 1.
        exclusions: Points to leave out of the fits.
        alpha: Significance threshold for the slope p-value.

    Returns:
        ``(trends_df, diagnostics)``.  *trends_df* has ``TREND_COLUMNS``,
        one row per group that could be fitted, sorted by country and
        category.
    """
    scales = dict(bike_display_scale or {})
    diagnostics: List[Diagnostic] = []

    if long_df.empty:
        return pd.DataFrame(columns=TREND_COLUMNS), diagnostics

    groups = sorted(
        {(c, cat) for c, cat in zip(long_df["country"], long_df["category"])}
    )
    kept = apply_exclusions(long_df, exclusions)

    results: List[TrendResult] = []
    for country, category_value in groups:
        category = Category.parse(category_value)
        group = kept.loc[
            (kept["country"] == country) & (kept["category"] == category_value)
        ].sort_values("year")

        try:
            result = estimate_group_trend(
                country=country,
                category=category,
                years=group["year"].to_numpy(dtype=float),
                shares=group["share"].to_numpy(dtype=float),
                bike_scale=scales.get(country, 1.0),
                alpha=alpha,
            )
        except TrendFitError as exc:
            diagnostics.append(
                insufficient_points(country, category, exc.n_points, exc.reason)
            )
            continue
        results.append(result)

    if not results:
        return pd.DataFrame(columns=TREND_COLUMNS), diagnostics

    trends = pd.DataFrame([r.to_dict() for r in results])[TREND_COLUMNS]
    return trends, diagnostics
