"""
Unit tests for edge auto-scroll and the frame tickers.
"""

import asyncio

import pytest

from planboard.core.exceptions import ConfigurationError
from planboard.infrastructure.local.apscheduler_ticker import APSchedulerFrameTicker
from planboard.infrastructure.local.manual_ticker import ManualFrameTicker
from planboard.models.enums import PointerEventKind
from planboard.models.grid import Viewport
from planboard.models.interaction import PointerEvent
from planboard.services.auto_scroll import AutoScroller, scroll_velocity


def make_scroller(ticker=None) -> AutoScroller:
    scroller = AutoScroller(
        ticker or ManualFrameTicker(), edge_px=80, max_speed=20, interval_seconds=1 / 60
    )
    scroller.configure(Viewport(width=800, height=400), content_width=2000, content_height=1000)
    return scroller


def move(x: float, y: float, scroll_left: float = 0.0, scroll_top: float = 0.0) -> PointerEvent:
    return PointerEvent(
        kind=PointerEventKind.MOVE, x=x, y=y, scroll_left=scroll_left, scroll_top=scroll_top
    )


class TestScrollVelocity:
    def test_outside_edge_zone(self):
        """Pointer away from both edges does not scroll."""
        assert scroll_velocity(400, 800, 80, 20) == 0

    def test_proportional_to_proximity(self):
        """Speed grows with how deep the pointer is in the edge zone."""
        assert scroll_velocity(760, 800, 80, 20) == pytest.approx(10)
        assert scroll_velocity(40, 800, 80, 20) == pytest.approx(-10)

    def test_capped_at_max_speed(self):
        """Pointer beyond the viewport scrolls at max speed, never faster."""
        assert scroll_velocity(900, 800, 80, 20) == 20
        assert scroll_velocity(-50, 800, 80, 20) == -20

    def test_degenerate_viewport(self):
        """Empty or tiny viewports never scroll both ways."""
        assert scroll_velocity(10, 0, 80, 20) == 0
        # Edge zone never exceeds half the viewport
        assert scroll_velocity(50, 100, 80, 20) == 0


class TestAutoScroller:
    def test_starts_ticker_near_edge(self):
        """Entering an edge zone starts the ticker at the configured interval."""
        ticker = ManualFrameTicker()
        scroller = make_scroller(ticker)
        scroller.update(move(790, 200), lambda left, top: None)
        assert ticker.is_running
        assert ticker.interval_seconds == pytest.approx(1 / 60)

    def test_stops_ticker_when_leaving_edge(self):
        """Leaving the edge zone stops the ticker once."""
        ticker = ManualFrameTicker()
        scroller = make_scroller(ticker)
        scroller.update(move(790, 200), lambda left, top: None)
        scroller.update(move(400, 200), lambda left, top: None)
        assert not ticker.is_running
        assert ticker.stop_count == 1

    def test_tick_scrolls_and_notifies(self):
        """Each tick advances the offset and reports it."""
        ticker = ManualFrameTicker()
        scroller = make_scroller(ticker)
        seen = []
        scroller.update(move(800, 200, scroll_left=100), lambda left, top: seen.append((left, top)))
        ticker.tick(3)
        assert seen == [(120, 0), (140, 0), (160, 0)]

    def test_clamped_to_content(self):
        """Scrolling stops at the end of the content."""
        ticker = ManualFrameTicker()
        scroller = make_scroller(ticker)
        seen = []
        scroller.update(move(800, 399, scroll_left=1190), lambda left, top: seen.append((left, top)))
        ticker.tick(2)
        assert seen[-1][0] == 1200
        assert len(seen) == 2

    def test_no_viewport_never_scrolls(self):
        """Without a viewport there is nothing to scroll."""
        ticker = ManualFrameTicker()
        scroller = AutoScroller(ticker, edge_px=80, max_speed=20, interval_seconds=0.1)
        assert scroller.update(move(0, 0), lambda left, top: None) == (0.0, 0.0)
        assert not ticker.is_running


class TestManualFrameTicker:
    def test_tick_stops_when_callback_stops_ticker(self):
        """A callback stopping the ticker ends the tick loop."""
        ticker = ManualFrameTicker()
        calls = []

        def callback():
            calls.append(1)
            ticker.stop()

        ticker.start(callback, 0.1)
        assert ticker.tick(5) == 1
        assert calls == [1]


class TestAPSchedulerFrameTicker:
    @pytest.mark.asyncio
    async def test_ticks_on_event_loop_until_stopped(self):
        """Ticks run on the event loop thread and end at stop()."""
        ticker = APSchedulerFrameTicker()
        loop = asyncio.get_running_loop()
        ticks = []

        def callback():
            assert asyncio.get_running_loop() is loop
            ticks.append(1)

        try:
            ticker.start(callback, 0.01)
            assert ticker.is_running
            await asyncio.sleep(0.3)
            ticker.stop()
            assert not ticker.is_running
            count = len(ticks)
            assert count > 0
            await asyncio.sleep(0.1)
            assert len(ticks) == count
        finally:
            ticker.shutdown()

    def test_non_positive_interval_rejected(self):
        """A zero interval is a configuration error."""
        ticker = APSchedulerFrameTicker()
        with pytest.raises(ConfigurationError):
            ticker.start(lambda: None, 0)
        assert not ticker.is_running

    @pytest.mark.asyncio
    async def test_stop_without_start_is_noop(self):
        """Stopping an idle ticker does nothing."""
        ticker = APSchedulerFrameTicker()
        ticker.stop()
        ticker.shutdown()
        assert not ticker.is_running


class TestScrollOwnership:
    def test_stale_offset_does_not_roll_back_scroll(self):
        """Once ticks have scrolled, an event still reporting the old offset is ignored."""
        ticker = ManualFrameTicker()
        scroller = make_scroller(ticker)
        scroller.update(move(800, 200, scroll_left=100), lambda left, top: None)
        ticker.tick(2)
        scroller.update(move(800, 200, scroll_left=100), lambda left, top: None)
        assert scroller.scroll_left == 140
        assert scroller.resolve(move(500, 200, scroll_left=100)).scroll_left == 140

    def test_reset_hands_offset_back_to_host(self):
        """After reset the host's reported offset is authoritative again."""
        ticker = ManualFrameTicker()
        scroller = make_scroller(ticker)
        scroller.update(move(800, 200), lambda left, top: None)
        ticker.tick(1)
        scroller.reset()
        assert not ticker.is_running
        assert scroller.resolve(move(500, 200, scroll_left=7)).scroll_left == 7
