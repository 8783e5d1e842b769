"""
Active Travel Data Package (Imperative Shell)

This package handles all file I/O for the analysis: reading the activity
extract and writing result tables.

Modules:
- reader: CSV extract loading, cleaning and quality summary
- engine: TrendEngine orchestration and diagnostic logging
"""

from .reader import (
    DEFAULT_COLUMN_MAP,
    read_activity_csv,
    check_data_quality,
)

from .engine import (
    TrendEngine,
    log_diagnostics,
    run_analysis,
)

__all__ = [
    # Reader
    'DEFAULT_COLUMN_MAP',
    'read_activity_csv',
    'check_data_quality',
    # Engine
    'TrendEngine',
    'log_diagnostics',
    'run_analysis',
]
