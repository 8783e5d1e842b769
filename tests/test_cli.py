"""
Tests for the command-line interface
"""
import json
import logging

import pytest

from activetravel.cli import main
from activetravel.config import load_config, reference_config


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("activetravel")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.mark.integration
class TestInit:

    def test_writes_reference_config(self, tmp_path):
        path = tmp_path / "cfg.json"
        main(["init", "--output", str(path)])
        assert load_config(path) == reference_config()

    def test_refuses_overwrite(self, tmp_path, capsys):
        path = tmp_path / "cfg.json"
        path.write_text("{}")

        with pytest.raises(SystemExit) as exc_info:
            main(["init", "--output", str(path)])

        assert exc_info.value.code == 1
        assert "already exists" in capsys.readouterr().err
        assert path.read_text() == "{}"

    def test_force(self, tmp_path):
        path = tmp_path / "cfg.json"
        path.write_text("{}")
        main(["init", "--output", str(path), "--force"])
        assert json.loads(path.read_text())["country_allow_list"] == ["NL", "UK", "US"]


@pytest.mark.integration
class TestAnalyze:

    def test_writes_tables_and_report(self, survey_csv, tmp_path, capsys):
        cfg = tmp_path / "cfg.json"
        main(["init", "--output", str(cfg)])
        out = tmp_path / "out"

        main(["analyze", "--data", str(survey_csv), "--config", str(cfg), "--output", str(out)])

        for name in ("series.csv", "trends.csv", "totals.csv", "diagnostics.csv",
                     "Active_Travel_Shares.html", "Trend_Estimates.html"):
            assert (out / name).exists(), name
        assert "Done: 6 trend(s)" in capsys.readouterr().out

    def test_no_report(self, survey_csv, tmp_path):
        out = tmp_path / "out"
        main(["--log-level", "WARNING", "analyze", "--data", str(survey_csv),
              "--output", str(out), "--no-report"])

        assert (out / "trends.csv").exists()
        assert not (out / "Trend_Estimates.html").exists()

    def test_missing_data(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["analyze", "--data", str(tmp_path / "absent.csv"), "--output", str(tmp_path)])
        assert exc_info.value.code == 1
        assert "Analysis failed" in capsys.readouterr().err

    def test_missing_config(self, survey_csv, tmp_path, capsys):
        with pytest.raises(SystemExit):
            main(["analyze", "--data", str(survey_csv),
                  "--config", str(tmp_path / "none.json"), "--output", str(tmp_path)])
        assert "Config file not found" in capsys.readouterr().err

    def test_invalid_config(self, survey_csv, tmp_path, capsys):
        cfg = tmp_path / "bad.json"
        cfg.write_text(json.dumps({"significance_alpha": 2}))
        with pytest.raises(SystemExit):
            main(["analyze", "--data", str(survey_csv), "--config", str(cfg),
                  "--output", str(tmp_path)])
        assert "Invalid configuration" in capsys.readouterr().err

    def test_requires_command(self):
        with pytest.raises(SystemExit):
            main([])
