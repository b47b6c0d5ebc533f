"""
Edge auto-scroll while dragging.

When the pointer comes within ``edge_px`` of a viewport edge the container
scrolls toward that edge, faster the closer the pointer is, up to
``max_speed`` pixels per tick. A frame ticker repeats the scroll step.
"""

from __future__ import annotations

from typing import Callable, Optional

from planboard.core.config import get_settings
from planboard.interfaces.frame_ticker import IFrameTicker
from planboard.models.grid import Viewport
from planboard.models.interaction import PointerEvent

ScrollListener = Callable[[float, float], None]


def scroll_velocity(position: float, extent: float, edge_px: float, max_speed: float) -> float:
    """
    Signed scroll speed along one axis.

    Args:
        position: Pointer coordinate relative to the viewport
        extent: Viewport size along the axis
        edge_px: Proximity threshold
        max_speed: Speed cap in pixels per tick

    Returns:
        Negative toward the start edge, positive toward the end edge, 0 outside
        both edge zones
    """
    if extent <= 0 or edge_px <= 0:
        return 0.0
    # Viewports smaller than two edge zones would scroll both ways at once
    edge_px = min(edge_px, extent / 2)
    if position < edge_px:
        return -min(max_speed, (edge_px - position) / edge_px * max_speed)
    if position > extent - edge_px:
        return min(max_speed, (position - (extent - edge_px)) / edge_px * max_speed)
    return 0.0


def _toward_room(velocity: float, offset: float, max_offset: float) -> float:
    # Already at the bound in that direction
    if (velocity < 0 and offset <= 0) or (velocity > 0 and offset >= max_offset):
        return 0.0
    return velocity


class AutoScroller:
    """Drives container scrolling from the last pointer position."""

    def __init__(
        self,
        ticker: IFrameTicker,
        edge_px: Optional[float] = None,
        max_speed: Optional[float] = None,
        interval_seconds: Optional[float] = None,
    ):
        settings = get_settings()
        self.ticker = ticker
        self.edge_px = edge_px if edge_px is not None else settings.AUTO_SCROLL_EDGE_PX
        self.max_speed = max_speed if max_speed is not None else settings.AUTO_SCROLL_MAX_SPEED
        self.interval_seconds = (
            interval_seconds
            if interval_seconds is not None
            else settings.AUTO_SCROLL_INTERVAL_SECONDS
        )
        self.viewport: Optional[Viewport] = None
        self.content_width = 0.0
        self.content_height = 0.0
        self.scroll_left = 0.0
        self.scroll_top = 0.0
        self.velocity: tuple[float, float] = (0.0, 0.0)
        # Set once a tick has moved the container; the host may not report it back
        self.driving = False
        self._listener: Optional[ScrollListener] = None

    @property
    def is_active(self) -> bool:
        return self.ticker.is_running

    def configure(self, viewport: Optional[Viewport], content_width: float, content_height: float) -> None:
        """Set the visible area and scrollable content size."""
        self.viewport = viewport
        self.content_width = content_width
        self.content_height = content_height
        self.driving = False

    def update(self, event: PointerEvent, listener: ScrollListener) -> tuple[float, float]:
        """
        Recompute the scroll velocity for a pointer position.

        Starts the ticker when the pointer enters an edge zone and stops it
        when it leaves.

        Returns:
            (horizontal, vertical) velocity in pixels per tick
        """
        if not self.driving:
            self.scroll_left = event.scroll_left
            self.scroll_top = event.scroll_top
        if self.viewport is None:
            self.velocity = (0.0, 0.0)
        else:
            max_left, max_top = self._max_scroll()
            self.velocity = (
                _toward_room(
                    scroll_velocity(event.x, self.viewport.width, self.edge_px, self.max_speed),
                    self.scroll_left,
                    max_left,
                ),
                _toward_room(
                    scroll_velocity(event.y, self.viewport.height, self.edge_px, self.max_speed),
                    self.scroll_top,
                    max_top,
                ),
            )

        if self.velocity == (0.0, 0.0):
            self.stop()
        else:
            self._listener = listener
            self.ticker.start(self._tick, self.interval_seconds)
        return self.velocity

    def resolve(self, event: PointerEvent) -> PointerEvent:
        """Return ``event`` carrying the offset this scroller has applied, if any."""
        if not self.driving:
            return event
        return event.with_scroll(self.scroll_left, self.scroll_top)

    def stop(self) -> None:
        self.velocity = (0.0, 0.0)
        self._listener = None
        self.ticker.stop()

    def reset(self) -> None:
        """Stop and hand the scroll offset back to the host."""
        self.stop()
        self.driving = False

    def _max_scroll(self) -> tuple[float, float]:
        if self.viewport is None:
            return 0.0, 0.0
        return (
            max(0.0, self.content_width - self.viewport.width),
            max(0.0, self.content_height - self.viewport.height),
        )

    def _tick(self) -> None:
        max_left, max_top = self._max_scroll()
        dx, dy = self.velocity
        left = min(max_left, max(0.0, self.scroll_left + dx))
        top = min(max_top, max(0.0, self.scroll_top + dy))
        if (left, top) == (self.scroll_left, self.scroll_top):
            return
        self.scroll_left, self.scroll_top = left, top
        self.driving = True
        listener = self._listener
        if listener is not None:
            listener(left, top)
