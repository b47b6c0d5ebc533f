"""
Drag session controller: moves a task bar across tracks and dates.

The controller never mutates tasks. On a valid drop it returns to IDLE and
then hands a MoveIntent to the commit callback (usually the task store).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from planboard.core.config import Settings
from planboard.core.logger import setup_logger
from planboard.interfaces.frame_ticker import IFrameTicker
from planboard.models.enums import InteractionState, PointerHandle, RejectionCode
from planboard.models.grid import Viewport
from planboard.models.interaction import DragPreview, MoveIntent, PlacementCandidate, PointerEvent
from planboard.models.task import Task
from planboard.models.validation import ValidationResult
from planboard.services.auto_scroll import AutoScroller, ScrollListener
from planboard.services.grid_coordinates import end_date_for_duration
from planboard.services.interaction_session import InteractionController, InteractionCoordinator
from planboard.services.placement_validator import PlacementValidator
from planboard.services.schedule_layout import ScheduleLayout

logger = setup_logger(__name__)

PreviewListener = Callable[[DragPreview], None]


@dataclass
class DragSession:
    task: Task
    layout: ScheduleLayout
    origin_x: float
    origin_y: float
    # Pointer position relative to the bar's top-left corner, content coordinates
    offset_x: float
    offset_y: float
    original: PlacementCandidate
    candidate: PlacementCandidate
    last_valid: PlacementCandidate
    last_event: PointerEvent
    is_valid: bool = True
    reason: Optional[str] = None
    code: Optional[str] = None


class DragSessionController(InteractionController[DragSession, DragPreview]):
    """
    Move-task state machine.

    IDLE -> ARMED on pointer-down over a bar body, ARMED -> DRAGGING past the
    movement threshold, then COMMITTING / REVERTING / CANCELLED -> IDLE.
    While dragging near a viewport edge the container auto-scrolls and the
    preview is re-evaluated on every scroll step.
    """

    def __init__(
        self,
        layout: ScheduleLayout,
        validator: PlacementValidator,
        commit: Callable[[MoveIntent], None],
        ticker: IFrameTicker,
        coordinator: Optional[InteractionCoordinator] = None,
        settings: Optional[Settings] = None,
        viewport: Optional[Viewport] = None,
        on_preview: Optional[PreviewListener] = None,
        on_scroll: Optional[ScrollListener] = None,
    ):
        """
        Initialize controller.

        Args:
            layout: Layout of the current task snapshot
            validator: Placement validator over the same track directory
            commit: Receives the MoveIntent of a committed drop
            ticker: Frame ticker driving auto-scroll
            coordinator: Shared session coordinator
            settings: Settings override
            viewport: Visible container size (enables auto-scroll)
            on_preview: Called with the preview after each auto-scroll step
            on_scroll: Called with the new (scroll_left, scroll_top) after each
                auto-scroll step, so the host can scroll its container
        """
        super().__init__(coordinator=coordinator, settings=settings)
        self.layout = layout
        self.validator = validator
        self.commit = commit
        self.viewport = viewport
        self.on_preview = on_preview
        self.on_scroll = on_scroll
        self.snap_to_free_slot = self.settings.SNAP_TO_FREE_SLOT
        self.auto_scroller = AutoScroller(
            ticker,
            edge_px=self.settings.AUTO_SCROLL_EDGE_PX,
            max_speed=self.settings.AUTO_SCROLL_MAX_SPEED,
            interval_seconds=self.settings.AUTO_SCROLL_INTERVAL_SECONDS,
        )

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_pointer_down(self, event: PointerEvent) -> None:
        if event.handle not in (None, PointerHandle.BODY):
            return
        layout = self.layout
        task = layout.get_task(event.task_id)
        placement = layout.placement_for(event.task_id) if event.task_id else None
        if task is None or placement is None:
            logger.debug(f"Pointer down on unknown or unplaced task {event.task_id!r}")
            return

        original = PlacementCandidate(track_id=placement.track_id, start=task.start, end=task.end)
        self._arm(
            DragSession(
                task=task,
                layout=layout,
                origin_x=event.x,
                origin_y=event.y,
                offset_x=event.content_x - placement.x,
                offset_y=event.content_y - placement.y,
                original=original,
                candidate=original,
                last_valid=original,
                last_event=event,
            )
        )

    def _on_armed_move(self, event: PointerEvent) -> None:
        session = self._session
        if not self._passed_threshold(session.origin_x, session.origin_y, event):
            return
        self._transition(InteractionState.DRAGGING)
        self.auto_scroller.configure(
            self.viewport, session.layout.content_width, session.layout.total_height
        )
        self._on_drag_move(event)

    def _on_drag_move(self, event: PointerEvent) -> None:
        event = self.auto_scroller.resolve(event)
        self._evaluate(event)
        self.auto_scroller.update(event, self._on_scroll)

    def _on_release(self, event: PointerEvent) -> None:
        self._evaluate(self.auto_scroller.resolve(event))
        session = self._session
        if not session.is_valid:
            logger.debug(f"Drop of task {session.task.id} rejected: {session.reason}")
            self._finish(InteractionState.REVERTING)
            return
        candidate = session.candidate
        if candidate == session.original:
            self._finish(InteractionState.REVERTING)
            return

        intent = MoveIntent(
            task_id=session.task.id,
            new_track_id=candidate.track_id,
            new_start=candidate.start,
            new_end=candidate.end,
        )
        self._finish(InteractionState.COMMITTING)
        logger.info(
            f"Committing move of task {intent.task_id} to {intent.new_track_id} "
            f"({intent.new_start} ~ {intent.new_end})"
        )
        self.commit(intent)

    def _on_scroll(self, scroll_left: float, scroll_top: float) -> None:
        session = self._session
        if session is None or self._state != InteractionState.DRAGGING:
            return
        if self.on_scroll is not None:
            self.on_scroll(scroll_left, scroll_top)
        self._evaluate(session.last_event.with_scroll(scroll_left, scroll_top))
        if self.on_preview is not None and self._preview is not None:
            self.on_preview(self._preview)

    def _teardown(self) -> None:
        self.auto_scroller.reset()

    # ------------------------------------------------------------------
    # Candidate evaluation
    # ------------------------------------------------------------------

    def _evaluate(self, event: PointerEvent) -> None:
        session = self._session
        session.last_event = event
        layout = session.layout
        calculator = layout.calculator
        task = session.task

        ghost_x = event.content_x - session.offset_x
        ghost_y = event.content_y - session.offset_y

        track = layout.track_at_y(event.content_y)
        if track is None or not layout.contains(event.content_x, event.content_y):
            self._reject(RejectionCode.OUTSIDE_GRID.value, "Pointer is outside the schedule grid")
        else:
            # Anchor at the cell nearest to the ghost's left edge
            start = calculator.pixel_to_date(
                ghost_x + calculator.safe_cell_width / 2, include_scroll=False
            )
            end = end_date_for_duration(start, task.duration_days)
            result = self.validator.validate_move(task, track.id, start, end, layout.tasks)

            if (
                not result.allowed
                and result.code == RejectionCode.DATE_CONFLICT.value
                and self.snap_to_free_slot
            ):
                slot = self.validator.find_free_slot(
                    track.id, start, task.duration_days, layout.tasks, exclude_task_id=task.id
                )
                if slot.found:
                    start, end = slot.start, slot.end
                    result = self.validator.check_compatibility(task, track.id)
                else:
                    result = ValidationResult.rejected(RejectionCode.NO_FREE_SLOT.value, slot.reason)

            session.candidate = PlacementCandidate(track_id=track.id, start=start, end=end)
            if result.allowed:
                session.last_valid = session.candidate
                session.is_valid = True
                session.reason = None
                session.code = None
            else:
                self._reject(result.code, result.reason)

        shown = session.last_valid
        self._preview = DragPreview(
            task_id=task.id,
            ghost_x=ghost_x - event.scroll_left,
            ghost_y=ghost_y - event.scroll_top,
            candidate_track_id=shown.track_id,
            candidate_start=shown.start,
            candidate_end=shown.end,
            is_valid=session.is_valid,
            reason=session.reason,
            code=session.code,
            scroll_left=event.scroll_left,
            scroll_top=event.scroll_top,
        )

    def _reject(self, code: Optional[str], reason: Optional[str]) -> None:
        session = self._session
        session.is_valid = False
        session.code = code
        session.reason = reason
