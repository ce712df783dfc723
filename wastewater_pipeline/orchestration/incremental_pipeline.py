#!/usr/bin/env python3
"""
Incremental pipeline for the Berlin wastewater open data

One run: load store → plan next month window → fetch → dedup/merge → save.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from ..coreutils.config import DEFAULT_BOOTSTRAP_START, PipelineConfig
from ..coreutils.time import format_extraction_date
from ..extract.hygiene_api import HygieneMonitorClient
from ..load.local_storage import JsonFileStore, Store
from ..transformation.merger import latest_extraction_date, merge_records
from ..transformation.planner import FetchWindow, compute_next_window
from ..transformation.validators import validate_dataset_quality, validate_records

logger = logging.getLogger(__name__)

STATUS_UP_TO_DATE = "up_to_date"
STATUS_NO_NEW_DATA = "no_new_data"
STATUS_UPDATED = "updated"


@dataclass
class RunResult:
    status: str
    window: FetchWindow
    fetched: int = 0
    added: int = 0
    invalid: int = 0
    total_records: int = 0
    written: bool = False

    def summary(self) -> str:
        if self.status == STATUS_UP_TO_DATE:
            return f"Nothing to fetch yet (next window {self.window} has not begun)"
        if self.status == STATUS_NO_NEW_DATA:
            return (
                f"No new unique data found for {self.window} "
                f"({self.fetched} fetched, total records: {self.total_records})"
            )
        action = "saved" if self.written else "merged (dry run, not saved)"
        return (
            f"Data {action} for {self.window}: {self.added} new, "
            f"total records: {self.total_records}"
        )


class IncrementalPipeline:
    """Incremental pipeline that only fetches the month after the latest record"""

    def __init__(
        self,
        store: Store,
        fetcher: Any,
        bootstrap_start: date = DEFAULT_BOOTSTRAP_START,
        dry_run: bool = False,
    ):
        """
        Args:
            store: Dataset store (load/save)
            fetcher: Object with fetch_window(start, end) -> list of records
            bootstrap_start: First month fetched when the store is empty
            dry_run: If true, never write the store
        """
        self.store = store
        self.fetcher = fetcher
        self.bootstrap_start = bootstrap_start
        self.dry_run = dry_run

    @classmethod
    def from_config(cls, config: PipelineConfig, dry_run: bool = False):
        """Wire the file store and API client from configuration"""
        return cls(
            store=JsonFileStore(config.store_path),
            fetcher=HygieneMonitorClient(
                api_url=config.api_url,
                timeout=config.timeout,
                max_retries=config.max_retries,
            ),
            bootstrap_start=config.bootstrap_start,
            dry_run=dry_run,
        )

    def plan(self, records: List[Dict[str, Any]], today: date) -> FetchWindow:
        last_date = latest_extraction_date(records)
        if last_date is None:
            logger.info(
                f"No existing data found. Starting from {self.bootstrap_start:%b %Y}."
            )
        else:
            logger.info(
                f"Latest extraction date in store: {format_extraction_date(last_date)}"
            )
        return compute_next_window(last_date, today, self.bootstrap_start)

    def _process_window(
        self, records: List[Dict[str, Any]], window: FetchWindow
    ) -> Tuple[RunResult, List[Dict[str, Any]]]:
        """Fetch one window, merge it into records and save if anything is new"""
        # Step 1: Fetch
        logger.info(f"📊 Fetching window {window}...")
        incoming = self.fetcher.fetch_window(window.start, window.end)

        # Step 2: Validate and merge
        logger.info(f"🔄 Validating and merging {len(incoming)} fetched records...")
        valid, invalid = validate_records(incoming)
        merged = merge_records(records, valid)

        result = RunResult(
            status=STATUS_NO_NEW_DATA,
            window=window,
            fetched=len(incoming),
            added=merged.added,
            invalid=invalid,
            total_records=len(merged.records),
        )
        if not merged.has_new_data:
            logger.info("No new unique data found for this interval.")
            return result, records

        result.status = STATUS_UPDATED
        validate_dataset_quality(merged.records)

        # Step 3: Save
        if self.dry_run:
            logger.info("🔍 Dry run: Skipping store write")
        else:
            logger.info(f"💾 Writing {len(merged.records)} records to {self.store!r}...")
            self.store.save(merged.records)
            result.written = True

        return result, merged.records

    def run_incremental_update(self, today: Optional[date] = None) -> RunResult:
        """
        Run one incremental update

        Fetches only the calendar month after the latest stored record,
        clipped to today.

        Args:
            today: Reference date (defaults to date.today())

        Returns:
            RunResult: What happened; the store is written only when
                status is 'updated' and not in dry-run mode

        Raises:
            RemoteError: Fetch failed (fatal)
            StoreWriteError: Saving failed (fatal)
        """
        if today is None:
            today = date.today()

        logger.info(f"🔄 Starting INCREMENTAL UPDATE (today={today})")
        logger.info("=" * 60)

        try:
            records = self.store.load()
            window = self.plan(records, today)

            if window.is_empty:
                logger.info(f"✅ Up to date: next window {window} has not begun")
                return RunResult(
                    status=STATUS_UP_TO_DATE,
                    window=window,
                    total_records=len(records),
                )

            result, _ = self._process_window(records, window)
            logger.info(f"✅ {result.summary()}")
            return result

        except Exception as e:
            logger.error(f"❌ Incremental update failed: {e}")
            raise

    def run_backfill(
        self, today: Optional[date] = None, max_windows: Optional[int] = None
    ) -> List[RunResult]:
        """
        Walk month windows forward until caught up with today

        The cursor advances by window end rather than by the latest record,
        so months without upstream data do not stall the walk.

        Args:
            today: Reference date (defaults to date.today())
            max_windows: Stop after this many fetched windows

        Returns:
            List[RunResult]: One result per fetched window
        """
        if today is None:
            today = date.today()

        logger.info(f"🚀 Starting BACKFILL (today={today}, max_windows={max_windows})")
        logger.info("=" * 60)

        results: List[RunResult] = []
        try:
            records = self.store.load()
            cursor = latest_extraction_date(records)

            while max_windows is None or len(results) < max_windows:
                window = compute_next_window(cursor, today, self.bootstrap_start)
                if window.is_empty:
                    logger.info(f"✅ Caught up: next window {window} has not begun")
                    break

                result, records = self._process_window(records, window)
                logger.info(f"✅ {result.summary()}")
                results.append(result)
                cursor = window.end

        except Exception as e:
            logger.error(f"❌ Backfill failed after {len(results)} windows: {e}")
            raise

        added = sum(r.added for r in results)
        logger.info(f"🎉 Backfill finished: {len(results)} windows, {added} new records")
        return results

    def get_pipeline_status(self, today: Optional[date] = None) -> dict:
        """Get current pipeline status without fetching anything"""
        if today is None:
            today = date.today()
        records = self.store.load()
        last_date = latest_extraction_date(records)
        window = compute_next_window(last_date, today, self.bootstrap_start)
        return {
            "total_records": len(records),
            "latest_extraction_date": last_date.isoformat() if last_date else None,
            "next_window": None if window.is_empty else str(window),
            "dry_run": self.dry_run,
        }
