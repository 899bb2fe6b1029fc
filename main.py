"""
main.py  –  Sideline  –  merged match data from the command line
================================================================

Usage
-----
    python main.py merged                     # merge sheet + store, print a summary
    python main.py merged --team-id 3
    python main.py render chart.json          # print render data for a chart config
"""

import argparse
import json
import sys
from pathlib import Path

import pandas as pd

from chart.chart_assembler import assemble
from config import get_settings
from contracts.chart_config import ChartConfig
from contracts.errors import ConfigurationError
from contracts.match_record import DATE_LABEL, IDENTITY_LABEL, OPPONENT_LABEL, MatchRecord
from logging_config import configure_logging
from backend_api import build_service

SUMMARY_COLUMNS = (IDENTITY_LABEL, DATE_LABEL, OPPONENT_LABEL, "Result")


def records_frame(records: list[MatchRecord]) -> pd.DataFrame:
    """
    Tabular view of merged records for printing.
    Only the identity columns are shown; the full schema is open-ended.
    """
    rows = [{col: r.lookup(col) for col in SUMMARY_COLUMNS} for r in records]
    return pd.DataFrame(rows, columns=list(SUMMARY_COLUMNS))


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sideline merged match data")
    sub = parser.add_subparsers(dest="command", required=True)

    merged = sub.add_parser("merged", help="Merge spreadsheet and store records")
    merged.add_argument("--team-id", type=int, default=None)
    merged.add_argument("--range", dest="sheet_range", default=None)

    render = sub.add_parser("render", help="Render a chart config against merged records")
    render.add_argument("config_path", type=Path)
    render.add_argument("--team-id", type=int, default=None)

    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    settings = get_settings()
    # stdout carries the command output
    configure_logging("sideline-cli", settings.environment, settings.log_level or "WARNING", stream=sys.stderr)
    service = build_service(settings)

    if args.command == "merged":
        dataset = service.load(sheet_range=args.sheet_range, team_id=args.team_id)

        print("=" * 60)
        print("  MERGED MATCH DATA")
        print("=" * 60)
        print(f"[*] Sheets: {len(dataset.sheet_records)}  Store: {len(dataset.store_records)}"
              f"  Merged: {len(dataset.records)}")
        if dataset.report.duplicates_skipped:
            print(f"[!!] Duplicate sheet rows skipped: {dataset.report.duplicates_skipped}")
        if dataset.report.unkeyed_count:
            print(f"[!!] Records without id/date/opponent: {dataset.report.unkeyed_count}")
        for source, error in dataset.source_errors.items():
            print(f"[!!] {source} unavailable: {error}")
        print()
        print(records_frame(dataset.records).to_string(index=False))
        return 0

    try:
        config = ChartConfig.from_dict(json.loads(args.config_path.read_text(encoding="utf-8")))
    except ConfigurationError as e:
        print(f"[!!] Invalid chart config: {e}", file=sys.stderr)
        return 2

    dataset = service.load(team_id=args.team_id)
    print(json.dumps(assemble(dataset.records, config).to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
