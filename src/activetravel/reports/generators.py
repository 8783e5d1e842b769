"""
Active Travel Report Generator (Imperative Shell)

Thin orchestration layer: takes a finished ``PipelineResult``, calls the
plotting functions to build figures, writes HTML.

No analysis logic lives here.

Package Location: src/activetravel/reports/generators.py

Usage::

    from pathlib import Path
    from activetravel.reports.generators import ReportGenerator

    gen = ReportGenerator(output_dir=Path("outputs"), config=config)
    gen.generate(result)
    # Writes:
    #   outputs/Active_Travel_Shares.html
    #   outputs/Trend_Estimates.html
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

from ..config import AnalysisConfig, reference_config
from ..pipeline import PipelineResult
from ..plotting.trends import plot_share_series, plot_trend_table

log = logging.getLogger(__name__)

SHARES_FILENAME = 'Active_Travel_Shares.html'
TRENDS_FILENAME = 'Trend_Estimates.html'


class ReportGenerator:
    """
    Generates and saves the HTML charts for one analysis run.

    Args:
        output_dir: Directory for the HTML files (created if missing).
        config: Configuration the result was produced with; used for the
            bike display-scale legend labels.
    """

    def __init__(self, output_dir: Path, config: Optional[AnalysisConfig] = None) -> None:
        self.output_dir = Path(output_dir)
        self.config = config or reference_config()

    def generate(self, result: PipelineResult) -> Dict[str, Path]:
        """
        Write the share chart and the trend table.

        Errors in one figure are logged so that a failure there does not
        prevent the other from being saved.

        Returns:
            Mapping of ``"shares"`` / ``"trends"`` to written paths (only
            those that succeeded or were not skipped).
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        written: Dict[str, Path] = {}

        try:
            path = self._generate_shares(result)
            if path is not None:
                written['shares'] = path
        except Exception:
            log.exception("Share chart FAILED")

        try:
            path = self._generate_trends(result)
            if path is not None:
                written['trends'] = path
        except Exception:
            log.exception("Trend table FAILED")

        return written

    # ------------------------------------------------------------------
    # Private figure writers
    # ------------------------------------------------------------------

    def _generate_shares(self, result: PipelineResult) -> Optional[Path]:
        if result.display.empty:
            log.warning("Share chart: no series rows – skipping")
            return None

        fig = plot_share_series(
            result.display,
            bike_display_scale=self.config.bike_display_scale,
        )
        out_path = self.output_dir / SHARES_FILENAME
        fig.write_html(str(out_path))
        log.info(f"Share chart saved → {out_path}")
        return out_path

    def _generate_trends(self, result: PipelineResult) -> Optional[Path]:
        if result.trends.empty:
            log.warning("Trend table: no fitted groups – skipping")
            return None

        fig = plot_trend_table(result.trends)
        out_path = self.output_dir / TRENDS_FILENAME
        fig.write_html(str(out_path))
        log.info(f"Trend table saved → {out_path}")
        return out_path


# ---------------------------------------------------------------------------
# Convenience entry-point
# ---------------------------------------------------------------------------

def generate_report(
    result: PipelineResult,
    output_dir: Path,
    config: Optional[AnalysisConfig] = None,
) -> Dict[str, Path]:
    """Convenience function: create a ``ReportGenerator`` and run it once."""
    return ReportGenerator(output_dir=output_dir, config=config).generate(result)
