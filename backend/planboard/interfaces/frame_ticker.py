"""
Frame ticker interface.

Defines the contract for the repeating timer that drives auto-scroll.
Implementations: APScheduler (asyncio loop), manual (headless tests/replays)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable


class IFrameTicker(ABC):
    """Abstract repeating timer."""

    @abstractmethod
    def start(self, callback: Callable[[], None], interval_seconds: float) -> None:
        """
        Start calling ``callback`` every ``interval_seconds``.

        Starting an already running ticker replaces its callback.

        Args:
            callback: Function invoked on each tick
            interval_seconds: Tick period
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop ticking. Safe to call when not running."""
        pass

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """Whether ticks are currently scheduled."""
        pass
