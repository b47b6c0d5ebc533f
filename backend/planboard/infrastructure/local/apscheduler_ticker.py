"""
APScheduler-backed frame ticker.

Runs the tick as a coroutine job on an AsyncIOScheduler so every tick executes
on the event loop thread, never on an executor thread.
"""

from __future__ import annotations

from typing import Callable, Optional

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from planboard.core.exceptions import ConfigurationError
from planboard.core.logger import logger
from planboard.interfaces.frame_ticker import IFrameTicker


class APSchedulerFrameTicker(IFrameTicker):
    """
    Repeating timer on an asyncio event loop.

    Must be started from within a running event loop. A shared scheduler may
    be passed in; otherwise the ticker owns one and shuts it down in
    ``shutdown()``.
    """

    def __init__(
        self,
        scheduler: Optional[AsyncIOScheduler] = None,
        job_id: str = "planboard_frame_ticker",
    ):
        self._scheduler = scheduler
        self._owns_scheduler = scheduler is None
        self._job_id = job_id
        self._job: Optional[Job] = None
        self._callback: Optional[Callable[[], None]] = None

    @property
    def is_running(self) -> bool:
        return self._job is not None

    def start(self, callback: Callable[[], None], interval_seconds: float) -> None:
        if interval_seconds <= 0:
            raise ConfigurationError(
                f"Frame interval must be positive, got {interval_seconds}",
                details={"interval_seconds": interval_seconds},
            )
        self._callback = callback
        if self._job is not None:
            return

        if self._scheduler is None:
            self._scheduler = AsyncIOScheduler()
        if not self._scheduler.running:
            self._scheduler.start()

        self._job = self._scheduler.add_job(
            self._tick,
            IntervalTrigger(seconds=interval_seconds),
            id=self._job_id,
            name="Frame Ticker",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        logger.debug(f"Frame ticker started ({interval_seconds:.4f}s)")

    def stop(self) -> None:
        job, self._job = self._job, None
        self._callback = None
        if job is None:
            return
        try:
            job.remove()
        except JobLookupError:
            logger.debug(f"Frame ticker job {self._job_id} already removed")
            return
        logger.debug("Frame ticker stopped")

    def shutdown(self) -> None:
        """Stop ticking and shut down an owned scheduler."""
        self.stop()
        if self._owns_scheduler and self._scheduler is not None and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None

    async def _tick(self) -> None:
        callback = self._callback
        if callback is not None:
            callback()
