"""
Tests for HTML report generation
"""
import pytest

from activetravel.pipeline import run_pipeline
from activetravel.reports import ReportGenerator, generate_report
from activetravel.reports.generators import SHARES_FILENAME, TRENDS_FILENAME

from conftest import CAR, WALK, make_records


@pytest.mark.integration
class TestReportGenerator:

    def test_writes_both_figures(self, survey_records, test_config, tmp_path):
        result = run_pipeline(survey_records, test_config)
        written = ReportGenerator(tmp_path / "report", test_config).generate(result)

        assert written == {
            "shares": tmp_path / "report" / SHARES_FILENAME,
            "trends": tmp_path / "report" / TRENDS_FILENAME,
        }
        assert "UK:bike (x5)" in written["shares"].read_text(encoding="utf-8")

    def test_skips_empty_trends(self, test_config, tmp_path):
        records = make_records([("UK", 2000, WALK, 10), ("UK", 2000, CAR, 90)])
        result = run_pipeline(records, test_config)

        written = generate_report(result, tmp_path, test_config)

        assert set(written) == {"shares"}
        assert not (tmp_path / TRENDS_FILENAME).exists()
