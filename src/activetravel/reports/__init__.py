"""
Active Travel Reports Package (Imperative Shell)

Turns a finished pipeline result into HTML output.  No analysis logic
lives here; this package calls the plotting functions
(src/activetravel/plotting/) on tables produced by the functional core.

Modules:
    generators: ReportGenerator class and generate_report() convenience
                function for writing the share chart and trend table.
"""

from .generators import (
    ReportGenerator,
    generate_report,
)

__all__ = [
    'ReportGenerator',
    'generate_report',
]
