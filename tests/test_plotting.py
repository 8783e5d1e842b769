"""
Tests for the share chart and trend table figures
"""
import math

import pandas as pd
import plotly.graph_objects as go
import pytest

from activetravel.pipeline import run_pipeline
from activetravel.plotting import plot_share_series, plot_trend_table


@pytest.mark.unit
class TestPlotShareSeries:

    def test_one_trace_per_series(self, survey_records, test_config):
        display = run_pipeline(survey_records, test_config).display
        fig = plot_share_series(display, bike_display_scale=test_config.bike_display_scale)

        names = [trace.name for trace in fig.data]
        assert len(names) == display["series"].nunique()
        assert "UK:bike (x5)" in names
        assert "NL:bike" in names
        assert "UK:walk" in names

    def test_without_scales(self, survey_records, test_config):
        display = run_pipeline(survey_records, test_config).display
        fig = plot_share_series(display)
        assert "UK:bike" in [trace.name for trace in fig.data]

    def test_points_sorted_by_year(self):
        df = pd.DataFrame({
            "country": ["NL"] * 3,
            "year": [2000, 1980, 1990],
            "category": ["walk"] * 3,
            "share": [0.16, 0.18, 0.17],
            "series": ["NL:walk"] * 3,
        })
        fig = plot_share_series(df)
        assert list(fig.data[0].x) == [1980, 1990, 2000]

    def test_missing_columns(self):
        with pytest.raises(ValueError, match="missing required columns"):
            plot_share_series(pd.DataFrame({"country": ["UK"]}))


@pytest.mark.unit
class TestPlotTrendTable:

    def test_marks_significant(self):
        trends = pd.DataFrame({
            "country": ["UK", "NL"],
            "category": ["walk", "bike"],
            "slope_per_year_pct": [-0.25, 0.1],
            "p_value": [0.0001, math.nan],
            "n_points": [5, 2],
            "significant": [True, False],
        })
        fig = plot_trend_table(trends)

        assert isinstance(fig.data[0], go.Table)
        cells = fig.data[0].cells.values
        # Sorted by country: NL first
        assert list(cells[0]) == ["NL", "UK"]
        assert list(cells[2]) == ["+0.100", "-0.250 *"]
        assert list(cells[3]) == ["n/a", "<0.001"]

    def test_missing_columns(self):
        with pytest.raises(ValueError):
            plot_trend_table(pd.DataFrame({"country": ["UK"]}))
