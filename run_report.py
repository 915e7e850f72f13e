#!/usr/bin/env python3
"""Entry point for generating a notebook variable report.

Reads the notebook and its variable snapshot, chains all pipeline stages,
and writes <notebook>_vars.json and <notebook>_report.md.

Usage:
    python run_report.py analysis.ipynb
    python run_report.py analysis.ipynb --snapshot vars.json --output-dir out/
    python run_report.py analysis.ipynb --config report_config.json --verbose
    python run_report.py --print-snapshot-cell
"""

import argparse
import logging
import sys
from pathlib import Path

from nbreport.config import DEFAULT_CONFIG, load_config
from nbreport.errors import ConfigError, ReportError
from nbreport.notebook.snapshot import snapshot_cell_source
from nbreport.pipeline import generate_report

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Render notebook variables as a LaTeX/Markdown report"
    )
    parser.add_argument(
        "notebook",
        type=str,
        nargs="?",
        help="Path to the .ipynb notebook",
    )
    parser.add_argument(
        "--snapshot",
        type=str,
        default=None,
        help="Snapshot JSON file (default: read from notebook outputs)",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for the report files (default: next to the notebook)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to report config JSON file",
    )
    parser.add_argument(
        "--print-snapshot-cell",
        action="store_true",
        help="Print the code cell that captures a snapshot, then exit",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG-level logging",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.print_snapshot_cell:
        print(snapshot_cell_source(), end="")
        return

    if args.notebook is None:
        parser.error("the notebook argument is required")

    notebook_path = Path(args.notebook)
    if not notebook_path.exists():
        print(f"Error: notebook not found: {notebook_path}", file=sys.stderr)
        sys.exit(1)

    config = DEFAULT_CONFIG
    if args.config is not None:
        config_path = Path(args.config)
        if not config_path.exists():
            print(f"Error: config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)
        try:
            config = load_config(config_path)
        except ConfigError:
            log.exception("Could not load config")
            sys.exit(1)

    try:
        result = generate_report(
            notebook_path,
            snapshot_path=args.snapshot,
            output_dir=args.output_dir,
            config=config,
        )
    except ReportError:
        log.exception("Report generation failed")
        sys.exit(1)

    print(f"Variables: {result.n_variables}")
    print(f"Records:   {result.records_path}")
    print(f"Report:    {result.report_path}")


if __name__ == "__main__":
    main()
