"""Refresh Scheduler: APScheduler job that keeps the transaction store fresh.

Runs the refresh once immediately on start, then every
REFRESH_INTERVAL_SECONDS. Slow provider calls may overlap with the next
tick; up to REFRESH_MAX_OVERLAP runs are allowed at once and whichever
finishes last wins. A tick that finds the cap already reached is skipped
and APScheduler logs "maximum number of running instances reached". With
HTTP_TIMEOUT bounding each provider call, a run ends long before the cap
can fill.
"""

from __future__ import annotations

from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from insider_tracker.config import settings
from insider_tracker.services.refresh_service import TransactionRefresher
from insider_tracker.utils.logger import logger

REFRESH_JOB_ID = "transaction_refresh"


class RefreshScheduler:
    """Manages the periodic transaction refresh."""

    def __init__(
        self,
        refresher: TransactionRefresher,
        interval_seconds: int | None = None,
    ) -> None:
        self._refresher = refresher
        self._interval = interval_seconds or settings.REFRESH_INTERVAL_SECONDS
        self._scheduler: AsyncIOScheduler | None = None
        self.is_running = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> dict:
        """Register the refresh job (first run fires now) and start ticking."""
        if self.is_running:
            return {"status": "already_running"}

        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self._refresh_tick,
            IntervalTrigger(seconds=self._interval),
            id=REFRESH_JOB_ID,
            name="Insider Transactions Refresh",
            next_run_time=datetime.now(),
            max_instances=settings.REFRESH_MAX_OVERLAP,
            coalesce=False,
            replace_existing=True,
        )
        self._scheduler.start()
        self.is_running = True
        logger.info(
            "[Scheduler] Started: refreshing every %ds", self._interval,
        )
        return {"status": "started", "interval_seconds": self._interval}

    def stop(self) -> dict:
        if not self.is_running or not self._scheduler:
            return {"status": "not_running"}

        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        self.is_running = False
        logger.info("[Scheduler] Stopped")
        return {"status": "stopped"}

    # ------------------------------------------------------------------
    # Status & manual trigger
    # ------------------------------------------------------------------

    def get_status(self) -> dict:
        """Scheduler state plus store statistics."""
        next_run = None
        if self._scheduler and self.is_running:
            job = self._scheduler.get_job(REFRESH_JOB_ID)
            if job and job.next_run_time:
                next_run = job.next_run_time.isoformat()

        return {
            "is_running": self.is_running,
            "interval_seconds": self._interval,
            "next_run": next_run,
            "store": self._refresher.store.stats(),
        }

    async def run_now(self) -> dict:
        """Run one refresh outside the schedule."""
        replaced = await self._refresher.refresh()
        return {
            "status": "refreshed" if replaced else "failed",
            "store": self._refresher.store.stats(),
        }

    # ------------------------------------------------------------------
    # Job
    # ------------------------------------------------------------------

    async def _refresh_tick(self) -> None:
        try:
            await self._refresher.refresh()
        except Exception:
            logger.exception("[Scheduler] Transaction refresh failed")
