"""
Active Travel Analysis Package (Functional Core)

This package contains pure transformation functions with no I/O.
All functions accept data structures (DataFrames, records, dicts) and
return transformed data plus, where a stage can fail for a single
country or group, a list of ``Diagnostic`` values.

Modules:
- models:      Record, category and result types
- classify:    Walk / bike / any-travel membership
- aggregate:   Duration totals per country, year and category
- series:      Per-country walk and bike shares of travel time
- filtering:   Allow-list, year trims, bike display scaling, long reshape
- trends:      Per-group OLS slopes and significance
- diagnostics: Scope-tagged warnings and group-level failures
"""

from .models import (
    ActivityRecord,
    Category,
    TrendResult,
    SHARE_CATEGORIES,
)

from .classify import (
    classify_record,
    classify_activities,
    category_mask,
)

from .aggregate import (
    records_frame,
    aggregate_year_totals,
    country_totals,
)

from .series import (
    build_country_series,
    build_series,
)

from .filtering import (
    filter_countries,
    trim_years,
    rescale_bike,
    to_long,
    prepare_display_series,
)

from .trends import (
    TrendFitError,
    OLSFit,
    fit_ols,
    apply_exclusions,
    estimate_group_trend,
    estimate_trends,
)

from .diagnostics import (
    Diagnostic,
    DiagnosticKind,
    Severity,
    diagnostics_frame,
    filter_diagnostics,
)

__all__ = [
    # Models
    'ActivityRecord',
    'Category',
    'TrendResult',
    'SHARE_CATEGORIES',
    # Classify
    'classify_record',
    'classify_activities',
    'category_mask',
    # Aggregate
    'records_frame',
    'aggregate_year_totals',
    'country_totals',
    # Series
    'build_country_series',
    'build_series',
    # Filtering
    'filter_countries',
    'trim_years',
    'rescale_bike',
    'to_long',
    'prepare_display_series',
    # Trends
    'TrendFitError',
    'OLSFit',
    'fit_ols',
    'apply_exclusions',
    'estimate_group_trend',
    'estimate_trends',
    # Diagnostics
    'Diagnostic',
    'DiagnosticKind',
    'Severity',
    'diagnostics_frame',
    'filter_diagnostics',
]
