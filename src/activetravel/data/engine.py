"""
Active Travel Trend Engine (Imperative Shell)

Orchestrates one analysis run: reads the activity extract, delegates all
computation to the Functional Core (``activetravel.pipeline``), logs the
returned diagnostics, and writes the result tables.

Package Location: src/activetravel/data/engine.py

Output files (written by :meth:`TrendEngine.write_tables`)::

    <output_dir>/series.csv        country, year, category, share, series
    <output_dir>/trends.csv        country, category, slope_per_year_pct, ...
    <output_dir>/totals.csv        country, year, category, total_duration
    <output_dir>/diagnostics.csv   kind, severity, country, category, year, message
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import pandas as pd

from .reader import check_data_quality, read_activity_csv
from ..analysis.diagnostics import Diagnostic, Severity
from ..config import AnalysisConfig, reference_config
from ..pipeline import PipelineResult, run_pipeline

log = logging.getLogger(__name__)

_LOG_LEVEL: Dict[Severity, int] = {
    Severity.WARNING: logging.WARNING,
    Severity.ERROR:   logging.ERROR,
}


class TrendEngine:
    """
    Reads an activity extract and produces the series and trend tables.

    The engine owns the data path and configuration; the analysis itself
    is the pure :func:`run_pipeline`.

    Example::

        engine = TrendEngine(Path("mtus_episodes.csv.gz"), load_config("cfg.json"))
        result = engine.run()
        engine.write_tables(result, Path("outputs"))

    Args:
        data_path: CSV activity extract.
        config: Analysis options.  Defaults to :func:`reference_config`.
        columns: Source-to-canonical column mapping for the reader.
        country_labels: Optional recode of raw country values.
    """

    def __init__(
        self,
        data_path: Union[str, Path],
        config: Optional[AnalysisConfig] = None,
        columns: Optional[Mapping[str, str]] = None,
        country_labels: Optional[Mapping[Any, str]] = None,
    ) -> None:
        self.data_path = Path(data_path)
        if not self.data_path.exists():
            raise FileNotFoundError(f"Activity extract not found: {self.data_path}")
        self.config = config or reference_config()
        self.columns = columns
        self.country_labels = country_labels

    # ------------------------------------------------------------------
    # Public methods
    # ------------------------------------------------------------------

    def load_records(self) -> pd.DataFrame:
        """
        Read the extract.

        Every country is loaded (not only the allow-list) so that the
        diagnostics cover the whole survey.
        """
        records = read_activity_csv(
            self.data_path,
            columns=self.columns,
            country_labels=self.country_labels,
        )
        summary = check_data_quality(records)
        log.info(
            f"{summary['rows']} records, {summary['travel_rows']} travel "
            f"episodes, {len(summary['countries'])} countries",
            extra={"quality": summary},
        )
        return records

    def run(self, records: Optional[pd.DataFrame] = None) -> PipelineResult:
        """
        Run the pipeline on *records* (read from disk when omitted).

        Returns:
            :class:`PipelineResult`; diagnostics have already been logged.
        """
        if records is None:
            records = self.load_records()

        result = run_pipeline(records, self.config)
        log_diagnostics(result.diagnostics)

        log.info(
            f"Series: {len(result.display)} rows; trends: "
            f"{len(result.trends)} group(s); diagnostics: "
            f"{len(result.diagnostics)}",
        )
        return result

    @staticmethod
    def write_tables(result: PipelineResult, output_dir: Union[str, Path]) -> Dict[str, Path]:
        """
        Write the result tables as CSV files into *output_dir*.

        Returns:
            Mapping of table name to written path.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        tables = {
            "series": result.display,
            "trends": result.trends,
            "totals": result.totals,
            "diagnostics": result.diagnostics_table,
        }
        written: Dict[str, Path] = {}
        for name, df in tables.items():
            path = output_dir / f"{name}.csv"
            df.to_csv(path, index=False)
            written[name] = path
            log.info(f"Wrote {path.name}", extra={"path": str(path), "rows": len(df)})
        return written


# ---------------------------------------------------------------------------
# Module-level helpers
# ---------------------------------------------------------------------------

def log_diagnostics(diagnostics: Iterable[Diagnostic]) -> None:
    """Log each diagnostic at its severity with its scope as structured fields."""
    for diag in diagnostics:
        log.log(
            _LOG_LEVEL[diag.severity],
            diag.message,
            extra={
                "kind": diag.kind.value,
                "scope": diag.scope,
                "country": diag.country,
                "category": diag.category.value if diag.category else None,
                "year": diag.year,
            },
        )


# ---------------------------------------------------------------------------
# Convenience entry-point
# ---------------------------------------------------------------------------

def run_analysis(
    data_path: Union[str, Path],
    output_dir: Union[str, Path],
    config: Optional[AnalysisConfig] = None,
) -> PipelineResult:
    """Convenience wrapper: run :class:`TrendEngine` and write its tables."""
    engine = TrendEngine(data_path, config)
    result = engine.run()
    engine.write_tables(result, output_dir)
    return result
