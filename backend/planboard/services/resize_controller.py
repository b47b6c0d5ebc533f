"""
Resize controller: drags one boundary of a task bar.

Only the grabbed edge moves; the opposite edge stays pinned and the task never
shrinks below one day. Resizing stays on the task's own track, so only
availability is checked.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from planboard.core.config import Settings
from planboard.core.logger import setup_logger
from planboard.models.enums import (
    InteractionState,
    PointerHandle,
    RejectionCode,
    ResizeEdge,
    SnapMode,
)
from planboard.models.interaction import PointerEvent, ResizeIntent, ResizePreview
from planboard.models.task import Task
from planboard.services.interaction_session import InteractionController, InteractionCoordinator
from planboard.services.placement_validator import PlacementValidator
from planboard.services.schedule_layout import ScheduleLayout

logger = setup_logger(__name__)

_EDGE_BY_HANDLE = {
    PointerHandle.START_EDGE: ResizeEdge.START,
    PointerHandle.END_EDGE: ResizeEdge.END,
}


@dataclass
class ResizeSession:
    task: Task
    layout: ScheduleLayout
    edge: ResizeEdge
    track_id: str
    origin_x: float
    origin_y: float
    start: date
    end: date
    is_valid: bool = True
    reason: Optional[str] = None
    code: Optional[str] = None

    @property
    def changed(self) -> bool:
        return (self.start, self.end) != (self.task.start, self.task.end)


class ResizeController(InteractionController[ResizeSession, ResizePreview]):
    """Resize-task state machine with the same state shape as dragging."""

    def __init__(
        self,
        layout: ScheduleLayout,
        validator: PlacementValidator,
        commit: Callable[[ResizeIntent], None],
        coordinator: Optional[InteractionCoordinator] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(coordinator=coordinator, settings=settings)
        self.layout = layout
        self.validator = validator
        self.commit = commit

    def _on_pointer_down(self, event: PointerEvent) -> None:
        edge = _EDGE_BY_HANDLE.get(event.handle)
        if edge is None:
            return
        task = self.layout.get_task(event.task_id)
        placement = self.layout.placement_for(event.task_id) if event.task_id else None
        if task is None or placement is None:
            logger.debug(f"Resize handle on unknown or unplaced task {event.task_id!r}")
            return
        self._arm(
            ResizeSession(
                task=task,
                layout=self.layout,
                edge=edge,
                track_id=placement.track_id,
                origin_x=event.x,
                origin_y=event.y,
                start=task.start,
                end=task.end,
            )
        )

    def _on_armed_move(self, event: PointerEvent) -> None:
        session = self._session
        if not self._passed_threshold(session.origin_x, session.origin_y, event):
            return
        self._transition(InteractionState.DRAGGING)
        self._evaluate(event)

    def _on_drag_move(self, event: PointerEvent) -> None:
        self._evaluate(event)

    def _on_release(self, event: PointerEvent) -> None:
        self._evaluate(event)
        session = self._session
        if not session.is_valid or not session.changed:
            self._finish(InteractionState.REVERTING)
            return

        if session.edge == ResizeEdge.START:
            intent = ResizeIntent(task_id=session.task.id, edge=session.edge, new_start=session.start)
        else:
            intent = ResizeIntent(task_id=session.task.id, edge=session.edge, new_end=session.end)
        self._finish(InteractionState.COMMITTING)
        logger.info(f"Committing {intent.edge.value} resize of task {intent.task_id} to {intent.new_date}")
        self.commit(intent)

    def _evaluate(self, event: PointerEvent) -> None:
        session = self._session
        task = session.task
        calculator = session.layout.calculator
        x = event.content_x

        day = calculator.boundary_to_date(x, session.edge)
        if day is None:
            session.is_valid = False
            session.code = RejectionCode.OUTSIDE_GRID.value
            session.reason = "Grid has no days"
        else:
            # The pinned boundary wins: never cross it, keep at least one day
            if session.edge == ResizeEdge.END:
                session.start, session.end = task.start, max(day, task.start)
            else:
                session.start, session.end = min(day, task.end), task.end
            result = self.validator.check_availability(
                task.id, session.track_id, session.start, session.end, session.layout.tasks
            )
            session.is_valid = result.allowed
            session.code = result.code
            session.reason = result.reason

        snap_mode = SnapMode.END if session.edge == ResizeEdge.END else SnapMode.START
        self._preview = ResizePreview(
            task_id=task.id,
            edge=session.edge,
            candidate_start=session.start,
            candidate_end=session.end,
            hovered_day_index=calculator.day_index_at(x),
            snap_indicator_x=calculator.snap_to_grid(x, snap_mode) - event.scroll_left,
            is_valid=session.is_valid,
            reason=session.reason,
            code=session.code,
        )
