"""
Pytest configuration and fixtures
"""
from typing import Dict, Iterable, List, Tuple

import pandas as pd
import pytest

from activetravel.analysis.models import RECORD_COLUMNS
from activetravel.config import AnalysisConfig

# Episode templates: (main_activity, travel_mode)
WALK = (43, 3)
BIKE = (44, 4)
CAR = (63, 1)
WORK = (5, -7)


def make_records(rows: Iterable[Tuple[str, int, Tuple[int, int], float]]) -> pd.DataFrame:
    """Build a canonical record DataFrame from (country, year, episode, minutes)."""
    data = [
        {
            "country": country,
            "year": year,
            "main_activity": episode[0],
            "travel_mode": episode[1],
            "duration": float(minutes),
        }
        for country, year, episode, minutes in rows
    ]
    return pd.DataFrame(data, columns=RECORD_COLUMNS)


def survey_rows(
    country: str,
    minutes_by_year: Dict[int, Tuple[float, float, float]],
) -> List[Tuple[str, int, Tuple[int, int], float]]:
    """Rows for one country: ``{year: (walk, bike, car)}`` plus a work episode."""
    rows = []
    for year, (walk, bike, car) in minutes_by_year.items():
        if walk:
            rows.append((country, year, WALK, walk))
        if bike:
            rows.append((country, year, BIKE, bike))
        if car:
            rows.append((country, year, CAR, car))
        rows.append((country, year, WORK, 480.0))
    return rows


@pytest.fixture
def survey_records():
    """Three allow-listed countries, one extra country, one without travel."""
    rows = []
    rows += survey_rows("UK", {
        2000: (30.0, 5.0, 65.0),
        2005: (20.0, 2.0, 78.0),
        2010: (28.0, 4.0, 68.0),
        2015: (26.0, 5.0, 69.0),
    })
    rows += survey_rows("US", {
        1998: (10.0, 1.0, 89.0),
        2003: (8.0, 1.0, 91.0),
        2008: (7.0, 1.0, 92.0),
        2013: (6.0, 1.0, 93.0),
    })
    rows += survey_rows("NL", {
        1975: (20.0, 30.0, 50.0),
        1980: (18.0, 28.0, 54.0),
        1990: (17.0, 27.0, 56.0),
        2000: (16.0, 27.0, 57.0),
    })
    rows += survey_rows("FR", {
        2000: (15.0, 0.0, 85.0),
        2010: (14.0, 0.0, 86.0),
    })
    rows += [("ZZ", 2000, WORK, 480.0), ("ZZ", 2001, WORK, 420.0)]
    return make_records(rows)


@pytest.fixture
def test_config():
    """Reference-style configuration over the survey_records countries."""
    from activetravel.config import ExclusionRule
    from activetravel.analysis.models import Category

    return AnalysisConfig(
        country_allow_list={"UK", "US", "NL"},
        min_year_exclusive={"US": 1998, "NL": 1975},
        bike_display_scale={"UK": 5.0, "US": 5.0, "NL": 1.0},
        trend_exclusions=[
            ExclusionRule("UK", Category.WALK, year=2005),
            ExclusionRule("UK", Category.BIKE, year=2005),
        ],
    )


@pytest.fixture
def survey_csv(tmp_path, survey_records):
    """survey_records written with the default extract column names."""
    from activetravel.data.reader import DEFAULT_COLUMN_MAP

    to_source = {canonical: source for source, canonical in DEFAULT_COLUMN_MAP.items()}
    path = tmp_path / "episodes.csv"
    survey_records.rename(columns=to_source).to_csv(path, index=False)
    return path
