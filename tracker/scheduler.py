"""Periodic driver for renewal cycles."""

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from apscheduler.schedulers.blocking import BlockingScheduler

from tracker.orchestrator import CycleReport, RenewalOrchestrator

logger = logging.getLogger(__name__)

JOB_ID = "certificate_check"


class CycleDriver:
    """Run one cycle per trigger, flagging only the first as the first run."""

    def __init__(self, orchestrator: RenewalOrchestrator, config_path: str | Path):
        self.orchestrator = orchestrator
        self.config_path = Path(config_path)
        self._has_run = False
        self._interval: Optional[timedelta] = None

    @property
    def has_run(self) -> bool:
        return self._has_run

    def run_once(self) -> Optional[CycleReport]:
        first_run = not self._has_run
        self._has_run = True
        try:
            return self.orchestrator.run_cycle_from_file(self.config_path, first_run=first_run)
        except Exception:
            logger.exception("Certificate check cycle failed")
            return None

    def build_scheduler(self, interval: timedelta) -> BlockingScheduler:
        """A scheduler that runs a cycle now and then every ``interval``.

        ``max_instances=1`` keeps cycles from overlapping; a trigger that
        fires while a cycle is still running is coalesced into the next one.
        """
        scheduler = BlockingScheduler(timezone=timezone.utc)
        scheduler.add_job(
            func=self._scheduled_run,
            trigger="interval",
            seconds=interval.total_seconds(),
            id=JOB_ID,
            next_run_time=datetime.now(timezone.utc),
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._interval = interval
        return scheduler

    def run_forever(self, interval: timedelta) -> None:
        """Block, running cycles until interrupted."""
        scheduler = self.build_scheduler(interval)
        logger.info("Scheduler started: certificate check every %s", interval)
        try:
            scheduler.start()
        except (KeyboardInterrupt, SystemExit):
            logger.info("Scheduler stopped")

    def _scheduled_run(self) -> None:
        self.run_once()
        logger.info("Next check in %s.", self._interval)
