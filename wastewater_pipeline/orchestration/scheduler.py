"""
Scheduler - Orchestration Layer

Pure workflow coordination for scheduled pipeline execution.
Runs the incremental update once a day; each run fetches at most one
month, so most days end as a no-op.
"""

import schedule
import time
from typing import Optional
from .incremental_pipeline import IncrementalPipeline, RunResult
from ..errors import PipelineError
import logging

logger = logging.getLogger(__name__)


class PipelineScheduler:
    """Pure workflow coordination for scheduled pipeline execution"""

    def __init__(
        self,
        pipeline: IncrementalPipeline,
        run_at: str = "06:00",
        poll_interval: int = 60,
    ):
        self.pipeline = pipeline
        self.run_at = run_at
        self.poll_interval = poll_interval
        self.running = False
        self.scheduler = schedule.Scheduler()

    def run_daily_update(self) -> Optional[RunResult]:
        """Daily: fetch and merge the next window

        A failed run is logged and swallowed so the scheduler keeps going;
        the next scheduled run retries the same window.
        """
        logger.info("🔄 Running daily update...")

        try:
            result = self.pipeline.run_incremental_update()
            logger.info("✅ Daily update completed successfully")
            return result

        except PipelineError as e:
            logger.error(f"❌ Daily update failed, will retry at next run: {e}")
            return None

    def start(self):
        """Start the scheduler"""
        logger.info("🚀 Starting pipeline scheduler...")

        self.scheduler.every().day.at(self.run_at).do(self.run_daily_update)

        self.running = True
        logger.info(f"📅 Scheduler started - Daily: {self.run_at}")

        try:
            while self.running:
                self.scheduler.run_pending()
                time.sleep(self.poll_interval)

        except KeyboardInterrupt:
            logger.info("🛑 Scheduler stopped by user")
            self.running = False

    def stop(self):
        """Stop the scheduler"""
        logger.info("🛑 Stopping scheduler...")
        self.running = False
        self.scheduler.clear()

    def run_now(self) -> Optional[RunResult]:
        """Run the daily job immediately"""
        logger.info("🔄 Running daily pipeline now...")
        return self.run_daily_update()


def create_scheduler(
    pipeline: IncrementalPipeline, run_at: str = "06:00"
) -> PipelineScheduler:
    """
    Create a new pipeline scheduler

    Args:
        pipeline: Pipeline whose incremental update is scheduled
        run_at: Daily run time as HH:MM

    Returns:
        PipelineScheduler: New scheduler instance
    """
    return PipelineScheduler(pipeline, run_at=run_at)
