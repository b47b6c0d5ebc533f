"""
Infrastructure factories.

Pick the implementation for the current environment. Imports are deferred so
test runs never touch the scheduler.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Optional
from uuid import uuid4

from planboard.core.config import Settings, get_settings
from planboard.interfaces.frame_ticker import IFrameTicker

if TYPE_CHECKING:
    from apscheduler.schedulers.asyncio import AsyncIOScheduler


@lru_cache()
def get_frame_scheduler() -> AsyncIOScheduler:
    """Get the scheduler shared by all frame tickers."""
    from apscheduler.schedulers.asyncio import AsyncIOScheduler

    return AsyncIOScheduler()


def get_frame_ticker(settings: Optional[Settings] = None) -> IFrameTicker:
    """
    Get a frame ticker for one drag controller.

    Not cached: a ticker runs a single job, so each controller needs its own.
    Tickers share the cached scheduler under distinct job ids.
    """
    settings = settings or get_settings()
    if settings.is_test:
        from planboard.infrastructure.local.manual_ticker import ManualFrameTicker

        return ManualFrameTicker()

    from planboard.infrastructure.local.apscheduler_ticker import APSchedulerFrameTicker

    return APSchedulerFrameTicker(
        scheduler=get_frame_scheduler(),
        job_id=f"planboard_frame_ticker_{uuid4().hex}",
    )
