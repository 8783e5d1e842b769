"""
Active Travel Plotting Package (Functional Core)

Pure plotting functions only – no file I/O, no side effects.
Every public function accepts DataFrames and returns a
``plotly.graph_objects.Figure``.

Modules:
    trends: Walk / bike share line chart and trend-estimate table.
"""

from .trends import plot_share_series, plot_trend_table

__all__ = [
    'plot_share_series',
    'plot_trend_table',
]
