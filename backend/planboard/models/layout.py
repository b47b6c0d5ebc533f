"""
Derived layout models: lane packing and pixel placement.

Everything here is recomputed from task dates and grid config; none of it is a
source of truth.
"""

from typing import Optional

from pydantic import BaseModel, Field


class LanePacking(BaseModel):
    """Lane assignment for the tasks of one track."""

    lanes: dict[str, int] = Field(default_factory=dict, description="task_id -> lane")
    lane_count: int = Field(0, ge=0)
    overflow_task_ids: list[str] = Field(
        default_factory=list,
        description="Tasks forced into the last lane because the lane cap was reached",
    )


class TaskPlacement(BaseModel):
    """Pixel rectangle of a task bar in content coordinates."""

    task_id: str
    track_id: Optional[str]
    lane: int = Field(..., ge=0)
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x < self.right and self.y <= y < self.bottom


class TrackRow(BaseModel):
    """Vertical extent of one track on the board."""

    track_id: str
    top: float
    height: float
    lane_count: int = Field(..., ge=0)

    @property
    def bottom(self) -> float:
        return self.top + self.height
