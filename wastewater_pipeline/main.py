"""
Main Entry Point - Berlin Wastewater Pipeline

Command line interface for the incremental fetch/merge job and the
per-station views of the stored dataset.

Exit codes: 0 on success (including "nothing new"), 1 on any failure.
"""

import argparse
import json
import logging
import sys
from datetime import date
from typing import List, Optional

import polars as pl

from .coreutils.config import PipelineConfig, load_config
from .coreutils.logging import setup_logging
from .errors import PipelineError
from .load.local_storage import JsonFileStore, file_exists, save_dashboard_payload
from .orchestration.incremental_pipeline import IncrementalPipeline
from .orchestration.scheduler import create_scheduler
from .transformation.stations import get_stations, station_series, station_summary

logger = logging.getLogger(__name__)


def _iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wastewater-pipeline", description="Berlin Wastewater Data Pipeline"
    )
    parser.add_argument("--store", help="Path to the JSON store (overrides env)")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Fetch and merge the next month window")
    run.add_argument("--dry-run", action="store_true", help="Do not write the store")
    run.add_argument("--today", type=_iso_date, help="Reference date (YYYY-MM-DD)")

    backfill = subparsers.add_parser(
        "backfill", help="Fetch month windows until caught up with today"
    )
    backfill.add_argument("--max-windows", type=int, help="Stop after N windows")
    backfill.add_argument("--dry-run", action="store_true", help="Do not write the store")
    backfill.add_argument("--today", type=_iso_date, help="Reference date (YYYY-MM-DD)")

    subparsers.add_parser("schedule", help="Run the daily update on a schedule")
    subparsers.add_parser("status", help="Show store status and the next window")
    subparsers.add_parser("stations", help="Show a summary per measuring point")

    series = subparsers.add_parser("series", help="Show the value series of a station")
    series.add_argument("station", help="measuring_point to select")
    series.add_argument("--output", help="Write the series to this CSV file")

    export = subparsers.add_parser(
        "export", help="Write the dataset in the dashboard {\"body\": [...]} envelope"
    )
    export.add_argument(
        "--output", default="public/data/data.json", help="Payload path"
    )

    return parser


def run_pipeline(config: PipelineConfig, args: argparse.Namespace) -> int:
    pipeline = IncrementalPipeline.from_config(config, dry_run=args.dry_run)

    if args.command == "run":
        result = pipeline.run_incremental_update(args.today)
        print(result.summary())
    else:
        results = pipeline.run_backfill(args.today, max_windows=args.max_windows)
        for result in results:
            print(result.summary())
        if not results:
            print("Nothing to fetch, store is up to date")
    return 0


def show_stations(config: PipelineConfig) -> int:
    if not file_exists(config.store_path):
        logger.warning(f"Store {config.store_path} does not exist yet")
    records = JsonFileStore(config.store_path).load()
    with pl.Config(tbl_rows=-1):
        print(station_summary(records))
    return 0


def show_series(config: PipelineConfig, station: str, output: Optional[str]) -> int:
    records = JsonFileStore(config.store_path).load()
    if station not in get_stations(records):
        print(f"Unknown station: {station}", file=sys.stderr)
        return 1

    df = station_series(records, station)
    if output:
        try:
            df.write_csv(output)
        except OSError as e:
            logger.error(f"❌ Cannot write series: {e}")
            print(f"Cannot write {output}: {e}", file=sys.stderr)
            return 1
        print(f"Wrote {df.height} rows to {output}")
    else:
        with pl.Config(tbl_rows=-1):
            print(df)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    config = load_config(
        store_path=args.store, log_level="DEBUG" if args.verbose else None
    )
    setup_logging(config.log_level, config.log_dir)

    try:
        if args.command in ("run", "backfill"):
            return run_pipeline(config, args)

        elif args.command == "schedule":
            pipeline = IncrementalPipeline.from_config(config)
            create_scheduler(pipeline, run_at=config.schedule_time).start()
            return 0

        elif args.command == "status":
            pipeline = IncrementalPipeline.from_config(config, dry_run=True)
            print(json.dumps(pipeline.get_pipeline_status(), indent=2))
            return 0

        elif args.command == "stations":
            return show_stations(config)

        elif args.command == "series":
            return show_series(config, args.station, args.output)

        elif args.command == "export":
            records = JsonFileStore(config.store_path).load()
            path = save_dashboard_payload(records, args.output)
            print(f"Exported {len(records)} records to {path}")
            return 0

    except PipelineError as e:
        logger.error(f"❌ Pipeline failed: {e}")
        print(f"Error fetching or saving data: {e}", file=sys.stderr)
        return 1

    raise ValueError(f"Unknown command: {args.command}")


if __name__ == "__main__":
    sys.exit(main())
