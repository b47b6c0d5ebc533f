"""
Unit tests for ScheduleBoard routing and relayout.
"""

from datetime import date

from planboard.core.config import Settings
from planboard.infrastructure.local.apscheduler_ticker import APSchedulerFrameTicker
from planboard.infrastructure.local.manual_ticker import ManualFrameTicker
from planboard.infrastructure.local.memory_task_store import InMemoryTaskStore
from planboard.models.enums import InteractionState, PointerEventKind, PointerHandle, TrackType
from planboard.models.grid import GridConfig, Viewport
from planboard.models.interaction import DragPreview, PointerEvent, ResizePreview
from planboard.models.task import Task
from planboard.models.track import Track
from planboard.services.schedule_board import ScheduleBoard


def make_tracks() -> list[Track]:
    return [
        Track(id="A", name="Plant A", type=TrackType.MANUFACTURING.value),
        Track(id="B", name="Packing B", type=TrackType.PACKAGING.value),
        Track(id="C", name="Plant C", type=TrackType.MANUFACTURING.value),
    ]


def make_settings(**overrides) -> Settings:
    values = {
        "LANE_HEIGHT": 40,
        "TRACK_PADDING": 20,
        "MIN_TRACK_HEIGHT": 50,
        "MAX_LANES": 10,
        "DRAG_THRESHOLD_PX": 4.0,
        "RESIZE_EDGE_PX": 8.0,
        "SNAP_TO_FREE_SLOT": False,
    }
    values.update(overrides)
    return Settings(**values)


def make_board(tasks=None, **kwargs):
    tasks = tasks or [
        Task(id="T1", track_id="A", start=date(2025, 1, 1), end=date(2025, 1, 5)),
        Task(id="T3", track_id="C", start=date(2025, 1, 10), end=date(2025, 1, 12)),
    ]
    store = InMemoryTaskStore(tasks)
    kwargs.setdefault("ticker", ManualFrameTicker())
    kwargs.setdefault("settings", make_settings())
    grid = GridConfig.from_range(date(2025, 1, 1), date(2025, 3, 31), 40)
    board = ScheduleBoard(grid, make_tracks(), store, **kwargs)
    return board, store


def pointer(kind: PointerEventKind, x: float, y: float, **kwargs) -> PointerEvent:
    return PointerEvent(kind=kind, x=x, y=y, **kwargs)


class TestRouting:
    def test_body_hit_starts_drag(self):
        """Pointer-down on a bar body starts a drag."""
        board, _ = make_board()
        board.handle(pointer(PointerEventKind.DOWN, 100, 30))
        assert board.drag.state == InteractionState.ARMED
        assert board.coordinator.active is board.drag

    def test_edge_hit_starts_resize(self):
        """Pointer-down near a bar edge starts a resize."""
        board, _ = make_board()
        board.handle(pointer(PointerEventKind.DOWN, 197, 30))
        assert board.resize.state == InteractionState.ARMED
        assert board.resize.session.edge.value == "end"

    def test_explicit_target_without_handle_drags(self):
        """An event naming a task but no handle drags."""
        board, _ = make_board()
        board.handle(pointer(PointerEventKind.DOWN, 500, 500, task_id="T1"))
        assert board.drag.state == InteractionState.ARMED

    def test_empty_space_does_nothing(self):
        """Pointer-down on empty space starts nothing."""
        board, _ = make_board()
        assert board.handle(pointer(PointerEventKind.DOWN, 1000, 30)) is None
        assert board.coordinator.active is None
        assert board.handle(pointer(PointerEventKind.MOVE, 1100, 30)) is None

    def test_hit_test_respects_scroll(self):
        """Hit-testing uses content coordinates."""
        board, _ = make_board()
        # T3 starts at x=360 in content coordinates
        board.handle(pointer(PointerEventKind.DOWN, 60, 150, scroll_left=340))
        assert board.drag.session.task.id == "T3"

    def test_active_preview(self):
        """The board exposes the running session's preview."""
        board, _ = make_board()
        board.handle(pointer(PointerEventKind.DOWN, 100, 30))
        assert board.active_preview is None
        board.handle(pointer(PointerEventKind.MOVE, 100, 150))
        assert isinstance(board.active_preview, DragPreview)


class TestExclusivity:
    def test_new_session_cancels_running_one(self):
        """Starting a resize cancels a running drag."""
        board, store = make_board()
        board.handle(pointer(PointerEventKind.DOWN, 100, 30))
        board.handle(pointer(PointerEventKind.MOVE, 140, 30))
        assert board.drag.state == InteractionState.DRAGGING

        board.handle(pointer(PointerEventKind.DOWN, 0, 0, task_id="T3", handle=PointerHandle.END_EDGE))
        assert board.drag.state == InteractionState.IDLE
        assert board.drag.last_outcome == InteractionState.CANCELLED
        assert board.coordinator.active is board.resize

        preview = board.handle(pointer(PointerEventKind.MOVE, 600, 150))
        assert isinstance(preview, ResizePreview)
        assert store.get("T1").start == date(2025, 1, 1)

    def test_cancel_interaction(self):
        """cancel_interaction clears the running session."""
        board, _ = make_board()
        board.handle(pointer(PointerEventKind.DOWN, 100, 30))
        board.handle(pointer(PointerEventKind.MOVE, 100, 150))
        board.cancel_interaction()
        assert board.coordinator.active is None
        assert board.active_preview is None


class TestRelayout:
    def test_commit_updates_store_and_layout(self):
        """A committed drop updates the store and re-packs the layout."""
        board, store = make_board()
        board.handle(pointer(PointerEventKind.DOWN, 100, 30))
        board.handle(pointer(PointerEventKind.MOVE, 100, 150))
        board.handle(pointer(PointerEventKind.UP, 100, 150))

        assert store.get("T1").track_id == "C"
        assert board.placements["T1"].track_id == "C"
        # T1 (Jan 1-5) and T3 (Jan 10-12) share one lane on C
        assert board.placements["T1"].lane == 0
        assert board.track_heights == {"A": 60.0, "B": 60.0, "C": 60.0}
        assert board.drag.layout is board.layout

    def test_overlapping_commit_is_rejected(self):
        """A drop onto an occupied range leaves the store unchanged."""
        board, store = make_board()
        board.handle(pointer(PointerEventKind.DOWN, 100, 30))
        # Ghost lands on Jan 10 on track C, where T3 sits
        board.handle(pointer(PointerEventKind.MOVE, 460, 150))
        board.handle(pointer(PointerEventKind.UP, 460, 150))
        assert store.get("T1").track_id == "A"
        assert board.drag.last_outcome == InteractionState.REVERTING

    def test_external_snapshot_repacks(self):
        """A new store snapshot re-runs lane packing."""
        board, store = make_board()
        store.upsert(Task(id="T4", track_id="A", start=date(2025, 1, 2), end=date(2025, 1, 3)))
        assert board.placements["T4"].lane == 1
        assert board.track_heights["A"] == 100.0

    def test_close_stops_listening(self):
        """After close the board ignores store snapshots."""
        board, store = make_board()
        board.close()
        store.upsert(Task(id="T4", track_id="A", start=date(2025, 1, 2), end=date(2025, 1, 3)))
        assert "T4" not in board.placements


class TestAutoScroll:
    def test_default_ticker_follows_environment(self):
        """Test runs get the manual ticker; other environments get APScheduler."""
        board, _ = make_board(ticker=None, settings=make_settings(ENVIRONMENT="test"))
        assert isinstance(board.drag.auto_scroller.ticker, ManualFrameTicker)

        local, _ = make_board(ticker=None, settings=make_settings(ENVIRONMENT="local"))
        other, _ = make_board(ticker=None, settings=make_settings(ENVIRONMENT="local"))
        assert isinstance(local.drag.auto_scroller.ticker, APSchedulerFrameTicker)
        assert not local.drag.auto_scroller.ticker.is_running
        assert local.drag.auto_scroller.ticker is not other.drag.auto_scroller.ticker

    def test_host_is_told_to_scroll_and_drop_matches_preview(self):
        """The host receives each scroll step and the drop lands where the preview showed."""
        previews = []
        scrolls = []
        ticker = ManualFrameTicker()
        board, store = make_board(
            ticker=ticker,
            viewport=Viewport(width=400, height=200),
            on_preview=previews.append,
            on_scroll=lambda left, top: scrolls.append((left, top)),
        )
        board.handle(pointer(PointerEventKind.DOWN, 100, 30))
        board.handle(pointer(PointerEventKind.MOVE, 380, 30))
        ticker.tick(10)
        assert scrolls == [(15.0 * step, 0.0) for step in range(1, 11)]
        assert previews[-1].scroll_left == 150

        board.handle(pointer(PointerEventKind.UP, 380, 30))
        assert store.get("T1").start == previews[-1].candidate_start == date(2025, 1, 12)
        assert store.get("T1").end == date(2025, 1, 16)


def test_audit_flags_unassigned_tasks():
    """Tasks on unknown tracks are reported and left unplaced."""
    board, _ = make_board(
        [
            Task(id="T1", track_id="A", start=date(2025, 1, 1), end=date(2025, 1, 5)),
            Task(id="X", track_id="ghost", start=date(2025, 1, 1), end=date(2025, 1, 2)),
        ]
    )
    report = board.audit()
    assert not report.is_valid
    assert [t.id for t in board.unassigned_tasks] == ["X"]
