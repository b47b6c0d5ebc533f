"""
Manual frame ticker.

Headless stand-in for a real timer: ticks only when ``tick()`` is called.
Used by tests and by replaying recorded pointer streams.
"""

from __future__ import annotations

from typing import Callable, Optional

from planboard.interfaces.frame_ticker import IFrameTicker


class ManualFrameTicker(IFrameTicker):
    """Ticker driven explicitly by the caller."""

    def __init__(self) -> None:
        self._callback: Optional[Callable[[], None]] = None
        self.interval_seconds: Optional[float] = None
        self.start_count = 0
        self.stop_count = 0

    @property
    def is_running(self) -> bool:
        return self._callback is not None

    def start(self, callback: Callable[[], None], interval_seconds: float) -> None:
        if self._callback is None:
            self.start_count += 1
        self._callback = callback
        self.interval_seconds = interval_seconds

    def stop(self) -> None:
        if self._callback is not None:
            self.stop_count += 1
        self._callback = None

    def tick(self, times: int = 1) -> int:
        """
        Fire up to ``times`` ticks.

        Returns:
            Number of ticks actually fired (stops early if the callback
            stopped the ticker)
        """
        fired = 0
        for _ in range(times):
            if self._callback is None:
                break
            self._callback()
            fired += 1
        return fired
