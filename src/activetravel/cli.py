"""
Active Travel Command-Line Interface

Exposes two subcommands:

    activetravel init    --output <config.json>             Write a config template
    activetravel analyze --data <extract.csv> --output <dir>  Run the analysis

The package must be installed (``pip install -e .``) for the
``activetravel`` entry point to be available.

Package Location: src/activetravel/cli.py
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

from .config import AnalysisConfig, load_config, reference_config, save_config

log = logging.getLogger(__name__)


# ===========================================================================
# Shared helpers
# ===========================================================================

def _die(message: str) -> NoReturn:
    """Print an error message and exit with status 1."""
    print(f"\nError: {message}", file=sys.stderr)
    sys.exit(1)


def _resolve_config(config_path: Optional[str]) -> AnalysisConfig:
    """Load *config_path*, or the reference configuration when omitted.

    Raises:
        SystemExit: If the file is missing, unparseable, or invalid.
    """
    if not config_path:
        return reference_config()
    try:
        return load_config(config_path)
    except FileNotFoundError:
        _die(
            f"Config file not found: {config_path}\n"
            f"Tip: run 'activetravel init --output {config_path}' first."
        )
    except json.JSONDecodeError as exc:
        _die(f"Failed to parse {config_path}: {exc}")
    except (KeyError, ValueError) as exc:
        _die(f"Invalid configuration in {config_path}: {exc}")


# ===========================================================================
# Subcommand handlers
# ===========================================================================

def handle_init(args: argparse.Namespace) -> None:
    """Write the reference configuration as an editable JSON template."""
    path = Path(args.output)
    if path.exists() and not args.force:
        _die(f"{path} already exists (use --force to overwrite).")
    save_config(reference_config(), path)
    print(f"Configuration template written to {path}")


def handle_analyze(args: argparse.Namespace) -> None:
    """Run the pipeline on an extract and write tables (and report)."""
    from .data.engine import TrendEngine
    from .reports.generators import ReportGenerator

    config = _resolve_config(args.config)
    output_dir = Path(args.output)

    try:
        engine = TrendEngine(args.data, config)
        result = engine.run()
    except (FileNotFoundError, KeyError, ValueError) as exc:
        if args.verbose:
            log.exception("Analysis failed")
        _die(f"Analysis failed: {exc}")

    written = engine.write_tables(result, output_dir)
    if not args.no_report:
        written.update(ReportGenerator(output_dir, config).generate(result))

    n_warn = sum(1 for d in result.diagnostics if d.severity.value == "warning")
    n_err = len(result.diagnostics) - n_warn
    print(
        f"\nDone: {len(result.trends)} trend(s), "
        f"{n_warn} warning(s), {n_err} group/row error(s)."
    )
    for name, path in written.items():
        print(f"    {name:<12} {path}")


# ===========================================================================
# Argument parser construction
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="activetravel",
        description=(
            "Active travel trends from time-use diaries.\n"
            "Walking and cycling as a share of travel time, per country and year."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        metavar="LEVEL",
        help="Logging level (default: INFO).",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=False,
        help="Emit log lines as JSON objects.",
    )
    subs = parser.add_subparsers(dest="command", metavar="<command>")
    subs.required = True

    # ------------------------------------------------------------------
    # init
    # ------------------------------------------------------------------
    p_init = subs.add_parser(
        "init",
        help="Write the reference configuration as a JSON template.",
    )
    p_init.add_argument(
        "--output",
        default="activetravel.json",
        metavar="FILE",
        help="Destination file (default: activetravel.json).",
    )
    p_init.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Overwrite an existing file.",
    )
    p_init.set_defaults(func=handle_init)

    # ------------------------------------------------------------------
    # analyze
    # ------------------------------------------------------------------
    p_an = subs.add_parser(
        "analyze",
        help="Compute share series and trends from an activity extract.",
        description=(
            "Read an episode-level CSV extract (COUNTRY, YEAR, MAIN, MTRAV,\n"
            "TIME columns), compute walk and bike shares of travel time and\n"
            "per-country trends, and write:\n"
            "  <output>/series.csv, trends.csv, totals.csv, diagnostics.csv\n"
            "  <output>/Active_Travel_Shares.html, Trend_Estimates.html"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p_an.add_argument(
        "--data",
        required=True,
        metavar="CSV",
        help="Activity extract (CSV, optionally compressed).",
    )
    p_an.add_argument(
        "--config",
        default=None,
        metavar="FILE",
        help="JSON configuration (default: the reference UK/US/NL settings).",
    )
    p_an.add_argument(
        "--output",
        default="outputs",
        metavar="DIR",
        help="Output directory (default: outputs).",
    )
    p_an.add_argument(
        "--no-report",
        action="store_true",
        default=False,
        help="Only write CSV tables; skip the HTML figures.",
    )
    p_an.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Log full tracebacks on failure.",
    )
    p_an.set_defaults(func=handle_analyze)

    return parser


# ===========================================================================
# Entry point
# ===========================================================================

def main(argv: Optional[list] = None) -> None:
    """Parse CLI arguments and dispatch to the appropriate handler.

    Registered as the ``activetravel`` console script in ``pyproject.toml``.
    """
    from .utils.logging import configure_logging

    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, json_format=args.json_logs)
    args.func(args)


if __name__ == "__main__":
    main()
