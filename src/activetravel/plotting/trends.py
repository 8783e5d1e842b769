"""
Active Travel Share and Trend Plots (Functional Core)

Pure functions – no file I/O, no side effects.
Input: series / trend DataFrames produced by ``activetravel.pipeline``.
Output: plotly.graph_objects.Figure.

Package Location: src/activetravel/plotting/trends.py

Series Style Rule:
    One trace per ``series`` label (``"<country>:<category>"``).  Colour
    identifies the country; walk is drawn solid with circle markers, bike
    dashed with square markers.  When a country's bike shares were scaled
    for display the legend entry carries the factor, e.g. ``UK:bike (x5)``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_COUNTRY_COLORS: List[str] = [
    '#1f77b4', '#d62728', '#2ca02c', '#ff7f0e', '#9467bd',
    '#8c564b', '#e377c2', '#7f7f7f', '#bcbd22', '#17becf',
]

_CATEGORY_STYLES: Dict[str, Dict[str, Any]] = {
    'walk': {'dash': 'solid', 'symbol': 'circle', 'name': 'Walk'},
    'bike': {'dash': 'dash',  'symbol': 'square', 'name': 'Bike'},
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def plot_share_series(
    series_df: pd.DataFrame,
    bike_display_scale: Optional[Mapping[str, float]] = None,
    title: str = 'Active travel as a share of total travel time',
) -> go.Figure:
    """
    Build the line + point chart of walk and bike shares by year.

    Args:
        series_df: Series table with columns ``country, year, category,
            share, series``.
        bike_display_scale: Factors used to scale bike shares, for the
            legend labels only.  ``None`` labels nothing.
        title: Figure title.

    Returns:
        ``plotly.graph_objects.Figure``.

    Raises:
        ValueError: If *series_df* is missing required columns.
    """
    _validate_columns(
        series_df, ['country', 'year', 'category', 'share', 'series']
    )
    scales = dict(bike_display_scale or {})

    countries = sorted(series_df['country'].unique())
    color_of = {
        c: _COUNTRY_COLORS[i % len(_COUNTRY_COLORS)]
        for i, c in enumerate(countries)
    }

    fig = make_subplots(rows=1, cols=1, subplot_titles=[title])

    for label, grp in series_df.groupby('series', sort=True):
        grp = grp.sort_values('year')
        country = grp['country'].iloc[0]
        category = grp['category'].iloc[0]
        style = _CATEGORY_STYLES.get(category, _CATEGORY_STYLES['walk'])

        name = label
        factor = scales.get(country, 1.0)
        if category == 'bike' and factor != 1.0:
            name = f"{label} (x{factor:g})"

        fig.add_trace(go.Scatter(
            x=grp['year'],
            y=grp['share'],
            mode='lines+markers',
            line=dict(color=color_of[country], dash=style['dash']),
            marker=dict(color=color_of[country], symbol=style['symbol'], size=7),
            name=name,
            legendgroup=country,
            hovertemplate=(
                f"<b>{name}</b><br>"
                "Year: %{x}<br>"
                "Share: %{y:.3f}<extra></extra>"
            ),
        ))

    fig.update_layout(
        xaxis=dict(title='Year', tickformat='d'),
        yaxis=dict(title='Share of travel time', rangemode='tozero'),
        showlegend=True,
        legend=dict(
            orientation='h',
            yanchor='bottom',
            y=1.02,
            xanchor='right',
            x=1,
        ),
        hovermode='closest',
        template='plotly_white',
    )
    return fig


def plot_trend_table(
    trends_df: pd.DataFrame,
    title: str = 'Estimated change in share (percentage points per year)',
) -> go.Figure:
    """
    Render the trend table as a plotly table figure.

    Significant slopes are marked with ``*``.

    Raises:
        ValueError: If *trends_df* is missing required columns.
    """
    _validate_columns(
        trends_df, ['country', 'category', 'slope_per_year_pct', 'p_value', 'significant']
    )
    df = trends_df.sort_values(['country', 'category'])

    slope_text = [
        f"{s:+.3f}{' *' if sig else ''}"
        for s, sig in zip(df['slope_per_year_pct'], df['significant'])
    ]
    p_text = [_format_p(p) for p in df['p_value']]

    fig = go.Figure(data=[go.Table(
        header=dict(
            values=['Country', 'Category', 'Slope (pp/yr)', 'p-value', 'n'],
            fill_color='#e5ecf6',
            align='left',
        ),
        cells=dict(
            values=[
                df['country'].tolist(),
                df['category'].tolist(),
                slope_text,
                p_text,
                df['n_points'].tolist() if 'n_points' in df else [''] * len(df),
            ],
            align='left',
        ),
    )])
    fig.update_layout(title=title, template='plotly_white')
    return fig


# ---------------------------------------------------------------------------
# Private helpers
# ---------------------------------------------------------------------------

def _validate_columns(df: pd.DataFrame, required: list[str]) -> None:
    """
    Raise ValueError if any required columns are absent.

    Raises:
        ValueError: Listing the missing columns.
    """
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"DataFrame is missing required columns: {missing}")


def _format_p(p: float) -> str:
    if pd.isna(p):
        return 'n/a'
    if p < 0.001:
        return '<0.001'
    return f"{p:.3f}"
