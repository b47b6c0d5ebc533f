"""
Schedule board: the headless Gantt surface.

Wires grid, track directory, validator, layout and the two interaction
controllers together, routes pointer events and re-lays out the board whenever
the task store publishes a new snapshot.
"""

from __future__ import annotations

from typing import Iterable, Optional, Union

from planboard.core.config import Settings, get_settings
from planboard.core.deps import get_frame_ticker
from planboard.core.logger import setup_logger
from planboard.interfaces.frame_ticker import IFrameTicker
from planboard.interfaces.task_store import ITaskStore
from planboard.models.enums import PointerEventKind, PointerHandle
from planboard.models.grid import GridConfig, Viewport
from planboard.models.interaction import DragPreview, PointerEvent, ResizePreview
from planboard.models.layout import TaskPlacement
from planboard.models.task import Task
from planboard.models.track import Track
from planboard.models.validation import TrackAuditReport
from planboard.services.auto_scroll import ScrollListener
from planboard.services.drag_controller import DragSessionController, PreviewListener
from planboard.services.grid_coordinates import GridCoordinateCalculator
from planboard.services.interaction_session import InteractionCoordinator
from planboard.services.lane_packer import LanePacker
from planboard.services.placement_validator import PlacementValidator
from planboard.services.resize_controller import ResizeController
from planboard.services.schedule_layout import ScheduleLayout
from planboard.services.track_directory import TrackDirectory

logger = setup_logger(__name__)

Preview = Union[DragPreview, ResizePreview]

_EDGE_HANDLES = (PointerHandle.START_EDGE, PointerHandle.END_EDGE)


class ScheduleBoard:
    """
    Facade over the scheduling engine.

    Example:
        store = InMemoryTaskStore(tasks)
        board = ScheduleBoard(GridConfig.from_range(start, end, 40), tracks, store)
        board.handle(PointerEvent(kind=PointerEventKind.DOWN, x=10, y=15))
    """

    def __init__(
        self,
        grid: GridConfig,
        tracks: Iterable[Track],
        store: ITaskStore,
        ticker: Optional[IFrameTicker] = None,
        settings: Optional[Settings] = None,
        viewport: Optional[Viewport] = None,
        on_preview: Optional[PreviewListener] = None,
        on_scroll: Optional[ScrollListener] = None,
    ):
        """
        Initialize board.

        Args:
            grid: Visible day range and cell width
            tracks: Ordered tracks (rows)
            store: Task store receiving intents and publishing snapshots
            ticker: Frame ticker for auto-scroll (default: get_frame_ticker())
            settings: Settings override
            viewport: Visible container size
            on_preview: Receives drag previews produced by auto-scroll steps
            on_scroll: Receives the container scroll offset set by auto-scroll
        """
        self.settings = settings or get_settings()
        self.store = store
        self.calculator = GridCoordinateCalculator(grid)
        self.directory = TrackDirectory(tracks)
        self.validator = PlacementValidator(
            self.directory, max_slot_attempts=self.settings.FREE_SLOT_MAX_ATTEMPTS
        )
        self.packer = LanePacker(max_lanes=self.settings.MAX_LANES)
        self.coordinator = InteractionCoordinator()
        self.layout = self._build_layout(store.list_tasks())

        self.drag = DragSessionController(
            self.layout,
            self.validator,
            commit=store.request_move,
            ticker=ticker or get_frame_ticker(self.settings),
            coordinator=self.coordinator,
            settings=self.settings,
            viewport=viewport,
            on_preview=on_preview,
            on_scroll=on_scroll,
        )
        self.resize = ResizeController(
            self.layout,
            self.validator,
            commit=store.request_resize,
            coordinator=self.coordinator,
            settings=self.settings,
        )
        self._unsubscribe = store.subscribe(self.load_tasks)

    # ------------------------------------------------------------------
    # Snapshot and layout
    # ------------------------------------------------------------------

    def _build_layout(self, tasks: Iterable[Task]) -> ScheduleLayout:
        return ScheduleLayout(
            self.calculator,
            self.directory,
            tasks,
            packer=self.packer,
            lane_height=self.settings.LANE_HEIGHT,
            track_padding=self.settings.TRACK_PADDING,
            min_track_height=self.settings.MIN_TRACK_HEIGHT,
        )

    def load_tasks(self, tasks: Iterable[Task]) -> None:
        """Re-run lane packing for a new task snapshot."""
        self.layout = self._build_layout(tasks)
        # Running sessions keep the snapshot they armed with
        self.drag.layout = self.layout
        self.resize.layout = self.layout
        logger.debug(
            f"Board laid out: {len(self.layout.placements)} placed, "
            f"{len(self.layout.unassigned_tasks)} unassigned"
        )

    def set_viewport(self, viewport: Optional[Viewport]) -> None:
        self.drag.viewport = viewport

    def close(self) -> None:
        """Cancel any session and stop listening to the store."""
        self.cancel_interaction()
        self._unsubscribe()

    @property
    def placements(self) -> dict[str, TaskPlacement]:
        return self.layout.placements

    @property
    def track_heights(self) -> dict[str, float]:
        return {row.track_id: row.height for row in self.layout.rows}

    @property
    def unassigned_tasks(self) -> tuple[Task, ...]:
        return self.layout.unassigned_tasks

    def audit(self) -> TrackAuditReport:
        return self.directory.audit(self.layout.tasks)

    # ------------------------------------------------------------------
    # Pointer routing
    # ------------------------------------------------------------------

    @property
    def active_preview(self) -> Optional[Preview]:
        active = self.coordinator.active
        return active.preview if active is not None else None

    def handle(self, event: PointerEvent) -> Optional[Preview]:
        """
        Route a pointer event to the matching controller.

        Pointer-down events without a target are hit-tested against the
        layout; other events go to the controller owning the session.

        Returns:
            The active preview after the event, if any
        """
        if event.kind == PointerEventKind.DOWN:
            event = self._resolve_target(event)
            if event is None:
                return None
            controller = self.resize if event.handle in _EDGE_HANDLES else self.drag
            return controller.handle(event)

        active = self.coordinator.active
        if active is None:
            return None
        return active.handle(event)

    def cancel_interaction(self) -> None:
        active = self.coordinator.active
        if active is not None:
            active.cancel()

    def _resolve_target(self, event: PointerEvent) -> Optional[PointerEvent]:
        if event.task_id is not None:
            if event.handle is None:
                return event.model_copy(update={"handle": PointerHandle.BODY})
            return event
        hit = self.layout.hit_test(
            event.content_x, event.content_y, edge_px=self.settings.RESIZE_EDGE_PX
        )
        if hit is None:
            return None
        task_id, handle = hit
        return event.model_copy(update={"task_id": task_id, "handle": handle})
