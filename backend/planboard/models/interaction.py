"""
Pointer events, previews and commit intents.

Pointer coordinates are container-local (relative to the visible scroll area);
adding the scroll offsets gives content coordinates, which is what task
geometry and previews use.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from planboard.models.enums import PointerEventKind, PointerHandle, ResizeEdge


class PointerEvent(BaseModel):
    """One abstract pointer event (down / move / up / cancel)."""

    model_config = ConfigDict(frozen=True)

    kind: PointerEventKind
    x: float = 0.0
    y: float = 0.0
    scroll_left: float = 0.0
    scroll_top: float = 0.0
    task_id: Optional[str] = Field(None, description="Task under the pointer, if known")
    handle: Optional[PointerHandle] = Field(None, description="Part of the bar under the pointer")

    @property
    def content_x(self) -> float:
        return self.x + self.scroll_left

    @property
    def content_y(self) -> float:
        return self.y + self.scroll_top

    def with_scroll(self, scroll_left: float, scroll_top: float) -> PointerEvent:
        return self.model_copy(update={"scroll_left": scroll_left, "scroll_top": scroll_top})


class PlacementCandidate(BaseModel):
    """Track + date range a session would commit."""

    model_config = ConfigDict(frozen=True)

    track_id: Optional[str]
    start: date
    end: date


class DragPreview(BaseModel):
    """Per-frame preview of a move session."""

    task_id: str
    ghost_x: float
    ghost_y: float
    candidate_track_id: Optional[str]
    candidate_start: date
    candidate_end: date
    is_valid: bool
    reason: Optional[str] = None
    code: Optional[str] = None
    # Container scroll the ghost position was computed against
    scroll_left: float = 0.0
    scroll_top: float = 0.0


class ResizePreview(BaseModel):
    """Per-frame preview of a resize session."""

    task_id: str
    edge: ResizeEdge
    candidate_start: date
    candidate_end: date
    hovered_day_index: int = -1
    snap_indicator_x: Optional[float] = None
    is_valid: bool = True
    reason: Optional[str] = None
    code: Optional[str] = None


class MoveIntent(BaseModel):
    """Request to move a task to another track and/or date range."""

    model_config = ConfigDict(frozen=True)

    task_id: str
    new_track_id: str
    new_start: date
    new_end: date

    @model_validator(mode="after")
    def _check_range(self) -> MoveIntent:
        if self.new_start > self.new_end:
            raise ValueError("Move intent starts after it ends")
        return self


class ResizeIntent(BaseModel):
    """Request to change exactly one boundary of a task."""

    model_config = ConfigDict(frozen=True)

    task_id: str
    edge: ResizeEdge
    new_start: Optional[date] = None
    new_end: Optional[date] = None

    @model_validator(mode="after")
    def _check_boundary(self) -> ResizeIntent:
        if self.edge == ResizeEdge.START and (self.new_start is None or self.new_end is not None):
            raise ValueError("Start resize must set new_start only")
        if self.edge == ResizeEdge.END and (self.new_end is None or self.new_start is not None):
            raise ValueError("End resize must set new_end only")
        return self

    @property
    def new_date(self) -> date:
        return self.new_start if self.edge == ResizeEdge.START else self.new_end
