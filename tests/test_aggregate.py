"""
Unit tests for duration aggregation
"""
import pandas as pd
import pytest

from activetravel.analysis.aggregate import (
    aggregate_year_totals,
    country_totals,
    records_frame,
)
from activetravel.analysis.models import ActivityRecord, TOTAL_COLUMNS

from conftest import BIKE, CAR, WALK, WORK, make_records


def _total(totals, country, year, category):
    row = totals.loc[
        (totals["country"] == country)
        & (totals["year"] == year)
        & (totals["category"] == category)
    ]
    assert len(row) <= 1
    return None if row.empty else row["total_duration"].iloc[0]


@pytest.mark.unit
class TestAggregateYearTotals:

    def test_categories_are_not_a_partition(self):
        df = make_records([
            ("UK", 2000, WALK, 30),
            ("UK", 2000, BIKE, 10),
            ("UK", 2000, CAR, 60),
            ("UK", 2000, WORK, 480),
        ])
        totals = aggregate_year_totals(df)

        assert list(totals.columns) == TOTAL_COLUMNS
        assert _total(totals, "UK", 2000, "walk") == 30
        assert _total(totals, "UK", 2000, "bike") == 10
        assert _total(totals, "UK", 2000, "all") == 100

    def test_empty_group_has_no_row(self):
        df = make_records([("UK", 2000, CAR, 60), ("UK", 2001, WALK, 5)])
        totals = aggregate_year_totals(df)

        assert _total(totals, "UK", 2000, "walk") is None
        assert _total(totals, "UK", 2000, "bike") is None
        assert _total(totals, "UK", 2001, "walk") == 5

    def test_keys_unique(self, survey_records):
        totals = aggregate_year_totals(survey_records)
        assert not totals.duplicated(["country", "year", "category"]).any()

    def test_order_independent(self, survey_records):
        shuffled = survey_records.sample(frac=1.0, random_state=7).reset_index(drop=True)
        pd.testing.assert_frame_equal(
            aggregate_year_totals(survey_records),
            aggregate_year_totals(shuffled),
        )

    def test_no_travel_country_absent(self, survey_records):
        totals = aggregate_year_totals(survey_records)
        assert "ZZ" not in set(totals["country"])

    def test_empty_input(self):
        totals = aggregate_year_totals(make_records([]))
        assert totals.empty
        assert list(totals.columns) == TOTAL_COLUMNS

    def test_country_totals_lookup(self, survey_records):
        totals = aggregate_year_totals(survey_records)
        walk = country_totals(totals, "UK", "walk")
        assert walk.index.tolist() == [2000, 2005, 2010, 2015]
        assert walk.loc[2005] == 20.0
        assert country_totals(totals, "FR", "bike").empty


@pytest.mark.unit
class TestRecordsFrame:

    def test_from_activity_records(self):
        records = [
            ActivityRecord("UK", 2000, 43, 3, 12.5),
            ActivityRecord("NL", 2001, 44, 4, 7),
        ]
        df = records_frame(records)
        assert df["country"].tolist() == ["UK", "NL"]
        assert df["duration"].dtype == float
        assert df["year"].tolist() == [2000, 2001]

    def test_missing_column_raises(self):
        df = pd.DataFrame({"country": ["UK"], "year": [2000]})
        with pytest.raises(KeyError, match="missing required columns"):
            records_frame(df)

    def test_does_not_alias_input(self, survey_records):
        df = records_frame(survey_records)
        df.loc[0, "duration"] = -1.0
        assert survey_records.loc[0, "duration"] != -1.0

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            ActivityRecord("UK", 2000, 43, 3, -1.0)

    def test_negative_duration_in_frame_rejected(self):
        df = make_records([
            ("TS", 2000, CAR, 100), ("TS", 2000, WALK, -20),
            ("TS", 2001, CAR, 100), ("TS", 2001, WALK, 10),
        ])
        with pytest.raises(ValueError, match="1 record"):
            records_frame(df)

    def test_missing_duration_in_frame_rejected(self):
        df = make_records([("TS", 2000, CAR, 100), ("TS", 2000, WALK, 10)])
        df.loc[1, "duration"] = float("nan")
        with pytest.raises(ValueError, match="non-negative"):
            records_frame(df)

    def test_empty_country_rejected(self):
        with pytest.raises(ValueError, match="Country"):
            ActivityRecord("", 2000, 43, 3, 1.0)
