"""
Schedule layout: lane packing per track plus vertical track stacking.

Built once per task snapshot (after a committed change), never per preview
frame. Controllers use it to resolve the hovered track and to hit-test bars.
"""

from __future__ import annotations

from typing import Iterable, Optional

from planboard.core.config import get_settings
from planboard.models.enums import PointerHandle
from planboard.models.layout import LanePacking, TaskPlacement, TrackRow
from planboard.models.task import Task
from planboard.models.track import Track
from planboard.services.grid_coordinates import GridCoordinateCalculator
from planboard.services.lane_packer import LanePacker
from planboard.services.track_directory import TrackDirectory


class ScheduleLayout:
    """Immutable layout of one task snapshot on one grid."""

    def __init__(
        self,
        calculator: GridCoordinateCalculator,
        directory: TrackDirectory,
        tasks: Iterable[Task],
        packer: Optional[LanePacker] = None,
        lane_height: Optional[int] = None,
        track_padding: Optional[int] = None,
        min_track_height: Optional[int] = None,
    ):
        settings = get_settings()
        self.calculator = calculator
        self.directory = directory
        self.lane_height = lane_height if lane_height is not None else settings.LANE_HEIGHT
        self.track_padding = track_padding if track_padding is not None else settings.TRACK_PADDING
        self.min_track_height = (
            min_track_height if min_track_height is not None else settings.MIN_TRACK_HEIGHT
        )
        packer = packer or LanePacker()

        self.tasks: tuple[Task, ...] = tuple(tasks)
        self._tasks_by_id = {task.id: task for task in self.tasks}

        grouped, unassigned = directory.group_tasks(self.tasks)
        self.unassigned_tasks: tuple[Task, ...] = tuple(unassigned)
        self.packings: dict[str, LanePacking] = {
            track_id: packer.pack(track_tasks) for track_id, track_tasks in grouped.items()
        }

        self.rows: list[TrackRow] = []
        self.placements: dict[str, TaskPlacement] = {}
        top = 0.0
        for track in directory.tracks:
            packing = self.packings[track.id]
            row = TrackRow(
                track_id=track.id,
                top=top,
                height=self.track_height(packing.lane_count),
                lane_count=packing.lane_count,
            )
            self.rows.append(row)
            for task in grouped[track.id]:
                self.placements[task.id] = self._place(task, row, packing.lanes[task.id])
            top = row.bottom
        self.total_height = top

    def track_height(self, lane_count: int) -> float:
        """Row height: one lane minimum, padded, never below the minimum height."""
        lanes = max(1, lane_count)
        return float(max(self.min_track_height, lanes * self.lane_height + self.track_padding))

    def _place(self, task: Task, row: TrackRow, lane: int) -> TaskPlacement:
        x, width = self.calculator.task_span(task.start, task.end)
        return TaskPlacement(
            task_id=task.id,
            track_id=row.track_id,
            lane=lane,
            x=x,
            y=row.top + self.track_padding / 2 + lane * self.lane_height,
            width=width,
            height=float(self.lane_height),
        )

    @property
    def content_width(self) -> float:
        return self.calculator.grid_width

    def get_task(self, task_id: Optional[str]) -> Optional[Task]:
        if task_id is None:
            return None
        return self._tasks_by_id.get(task_id)

    def placement_for(self, task_id: str) -> Optional[TaskPlacement]:
        return self.placements.get(task_id)

    def row_for(self, track_id: str) -> Optional[TrackRow]:
        for row in self.rows:
            if row.track_id == track_id:
                return row
        return None

    def track_at_y(self, y: float) -> Optional[Track]:
        """Track whose row contains content coordinate ``y``."""
        for row in self.rows:
            if row.top <= y < row.bottom:
                return self.directory.get(row.track_id)
        return None

    def contains(self, x: float, y: float) -> bool:
        """Whether a content coordinate lies on the grid."""
        return 0 <= x < self.content_width and 0 <= y < self.total_height

    def hit_test(
        self, x: float, y: float, edge_px: Optional[float] = None
    ) -> Optional[tuple[str, PointerHandle]]:
        """
        Find the task bar under a content coordinate.

        Returns:
            (task_id, handle) where handle is an edge when within ``edge_px``
            of the bar's left/right side, or None when nothing is hit
        """
        if edge_px is None:
            edge_px = get_settings().RESIZE_EDGE_PX
        for placement in reversed(list(self.placements.values())):
            if not placement.contains(x, y):
                continue
            # Narrow bars: edges must not swallow the whole body
            edge = min(edge_px, placement.width / 3)
            if x - placement.x < edge:
                return placement.task_id, PointerHandle.START_EDGE
            if placement.right - x <= edge:
                return placement.task_id, PointerHandle.END_EDGE
            return placement.task_id, PointerHandle.BODY
        return None
