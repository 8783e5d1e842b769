"""
Unit tests for analysis configuration
"""
import json

import pandas as pd
import pytest

from activetravel.analysis.models import Category
from activetravel.analysis.trends import apply_exclusions
from activetravel.config import (
    AnalysisConfig,
    ExclusionRule,
    config_from_dict,
    config_to_dict,
    load_config,
    parse_exclusions,
    reference_config,
    save_config,
)


@pytest.mark.unit
class TestReferenceConfig:

    def test_values(self):
        cfg = reference_config()

        assert cfg.country_allow_list == frozenset({"UK", "US", "NL"})
        assert cfg.min_year_exclusive == {"US": 1998, "NL": 1975}
        assert cfg.bike_display_scale == {"UK": 5.0, "US": 5.0, "NL": 1.0}
        assert cfg.min_years_for_series == 3
        assert cfg.significance_alpha == 0.05

    @pytest.mark.parametrize("country,category,year,expected", [
        ("UK", Category.WALK, 2005, True),
        ("UK", Category.BIKE, 2005, True),
        ("UK", Category.WALK, 2000, False),
        ("US", Category.BIKE, 2000, True),
        ("US", Category.WALK, 1999, True),
        ("US", Category.WALK, 2003, False),
        ("NL", Category.BIKE, 2005, False),
    ])
    def test_exclusions(self, country, category, year, expected):
        point = pd.DataFrame({
            "country": [country], "year": [year], "category": [category.value],
            "share": [0.1], "series": [f"{country}:{category.value}"],
        })
        kept = apply_exclusions(point, reference_config().trend_exclusions)
        assert kept.empty is expected


@pytest.mark.unit
class TestExclusionRule:

    def test_needs_exactly_one_bound(self):
        with pytest.raises(ValueError, match="exactly one"):
            ExclusionRule("UK", Category.WALK)
        with pytest.raises(ValueError, match="exactly one"):
            ExclusionRule("UK", Category.WALK, year=2005, max_year=2006)

    def test_all_category_rejected(self):
        with pytest.raises(ValueError, match="walk/bike"):
            ExclusionRule("UK", Category.ALL, year=2005)

    def test_parse_from_dicts(self):
        rules = parse_exclusions([
            {"country": "UK", "category": "Bike", "year": 2005},
            {"country": "US", "category": "walk", "max_year": "2000"},
        ])
        assert rules == [
            ExclusionRule("UK", Category.BIKE, year=2005),
            ExclusionRule("US", Category.WALK, max_year=2000),
        ]

    def test_parse_missing_key(self):
        with pytest.raises(KeyError):
            parse_exclusions([{"category": "walk", "year": 2005}])

    def test_parse_none(self):
        assert parse_exclusions(None) == []


@pytest.mark.unit
class TestAnalysisConfig:

    def test_defaults(self):
        cfg = AnalysisConfig()
        assert cfg.country_allow_list == frozenset()
        assert cfg.bike_display_scale == {}
        assert cfg.trend_exclusions == ()

    @pytest.mark.parametrize("kwargs", [
        {"significance_alpha": 0.0},
        {"significance_alpha": 1.5},
        {"min_years_for_series": 0},
        {"bike_display_scale": {"UK": 0}},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            AnalysisConfig(**kwargs)

    def test_dict_round_trip(self):
        cfg = reference_config()
        assert config_from_dict(config_to_dict(cfg)) == cfg

    def test_partial_dict_uses_defaults(self):
        cfg = config_from_dict({"country_allow_list": ["DE"]})
        assert cfg.country_allow_list == frozenset({"DE"})
        assert cfg.min_years_for_series == 3

    def test_file_round_trip(self, tmp_path):
        path = save_config(reference_config(), tmp_path / "nested" / "cfg.json")

        data = json.loads(path.read_text())
        assert data["country_allow_list"] == ["NL", "UK", "US"]
        assert {"country": "US", "category": "bike", "max_year": 2000} in data["trend_exclusions"]
        assert load_config(path) == reference_config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.json")
