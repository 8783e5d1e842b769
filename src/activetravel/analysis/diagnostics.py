"""
Pipeline Diagnostics (Functional Core)

Non-fatal findings are collected as structured ``Diagnostic`` values and
returned next to the result tables instead of being printed.  Every
diagnostic names the scope it affects (country, and where relevant the
category and/or year) so callers can filter, log, or assert on them.

Package Location: src/activetravel/analysis/diagnostics.py

Kinds:
    ``data_absence``            A country has no walk (or bike) records at
                                all.  Shares default to 0.  Warning.
    ``insufficient_history``    Fewer than ``min_years_for_series`` distinct
                                years for a country.  Warning; the country
                                is still kept.
    ``degenerate_denominator``  All-mode total of zero for a retained year.
                                That row is dropped.  Error.
    ``insufficient_points``     Fewer than two usable points for an OLS fit
                                after exclusions.  That group is omitted.
                                Error.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from .models import Category


class DiagnosticKind(str, Enum):
    DATA_ABSENCE = "data_absence"
    INSUFFICIENT_HISTORY = "insufficient_history"
    DEGENERATE_DENOMINATOR = "degenerate_denominator"
    INSUFFICIENT_POINTS = "insufficient_points"


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


_SEVERITY: Dict[DiagnosticKind, Severity] = {
    DiagnosticKind.DATA_ABSENCE:           Severity.WARNING,
    DiagnosticKind.INSUFFICIENT_HISTORY:   Severity.WARNING,
    DiagnosticKind.DEGENERATE_DENOMINATOR: Severity.ERROR,
    DiagnosticKind.INSUFFICIENT_POINTS:    Severity.ERROR,
}

DIAGNOSTIC_COLUMNS: List[str] = [
    "kind", "severity", "country", "category", "year", "message",
]


@dataclass(frozen=True)
class Diagnostic:
    """A scope-tagged, non-fatal pipeline finding."""
    kind: DiagnosticKind
    country: str
    message: str
    category: Optional[Category] = None
    year: Optional[int] = None

    @property
    def severity(self) -> Severity:
        return _SEVERITY[self.kind]

    @property
    def scope(self) -> str:
        """Human-readable scope label, e.g. ``"UK:bike"`` or ``"NL@1980"``."""
        label = self.country
        if self.category is not None:
            label = f"{label}:{self.category.value}"
        if self.year is not None:
            label = f"{label}@{self.year}"
        return label

    def to_dict(self) -> Dict[str, Any]:
        row = asdict(self)
        row["kind"] = self.kind.value
        row["severity"] = self.severity.value
        row["category"] = self.category.value if self.category else None
        return row


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------

def data_absence(country: str, category: Category) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.DATA_ABSENCE,
        country=country,
        category=category,
        message=f"No {category.value} data for {country}; share set to 0.",
    )


def insufficient_history(country: str, n_years: int, required: int) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.INSUFFICIENT_HISTORY,
        country=country,
        message=(
            f"Only {n_years} year(s) of data for {country} "
            f"(at least {required} expected); trends may be unreliable."
        ),
    )


def degenerate_denominator(country: str, year: int) -> Diagnostic:
    return Diagnostic(
        kind=DiagnosticKind.DEGENERATE_DENOMINATOR,
        country=country,
        year=year,
        message=(
            f"Total travel time is zero for {country} in {year}; "
            f"row dropped."
        ),
    )


def insufficient_points(
    country: str,
    category: Category,
    n_points: int,
    reason: str = "",
) -> Diagnostic:
    detail = f" ({reason})" if reason else ""
    return Diagnostic(
        kind=DiagnosticKind.INSUFFICIENT_POINTS,
        country=country,
        category=category,
        message=(
            f"Cannot fit trend for {country}:{category.value} with "
            f"{n_points} point(s){detail}; group omitted."
        ),
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def diagnostics_frame(diagnostics: Iterable[Diagnostic]) -> pd.DataFrame:
    """Tabulate diagnostics in the order they were raised."""
    rows = [d.to_dict() for d in diagnostics]
    if not rows:
        return pd.DataFrame(columns=DIAGNOSTIC_COLUMNS)
    return pd.DataFrame(rows)[DIAGNOSTIC_COLUMNS]


def filter_diagnostics(
    diagnostics: Iterable[Diagnostic],
    kind: Optional[DiagnosticKind] = None,
    country: Optional[str] = None,
    category: Optional[Category] = None,
) -> List[Diagnostic]:
    """Return the diagnostics matching every supplied criterion."""
    out = []
    for d in diagnostics:
        if kind is not None and d.kind != kind:
            continue
        if country is not None and d.country != country:
            continue
        if category is not None and d.category != category:
            continue
        out.append(d)
    return out
