"""
Interval lane packer.

Assigns vertical lanes to the tasks of one track so that no two date-overlapping
tasks share a lane. Greedy first-fit over tasks sorted by (start, id).
"""

from __future__ import annotations

from typing import Iterable, Optional

from planboard.core.config import get_settings
from planboard.core.logger import setup_logger
from planboard.models.layout import LanePacking
from planboard.models.task import Task

logger = setup_logger(__name__)


def tasks_overlap(a: Task, b: Task) -> bool:
    """
    Check whether two tasks share at least one day.

    Symmetric; a task never overlaps itself (same id).
    """
    if a.id == b.id:
        return False
    return not (a.end < b.start or a.start > b.end)


def find_overlapping_tasks(task: Task, tasks: Iterable[Task]) -> list[Task]:
    """All tasks in ``tasks`` sharing a day with ``task`` (itself excluded)."""
    return [other for other in tasks if tasks_overlap(task, other)]


class LanePacker:
    """Packs the tasks of a single track into lanes."""

    def __init__(self, max_lanes: Optional[int] = None):
        """
        Initialize packer.

        Args:
            max_lanes: Lane cap; tasks beyond it share the last lane
        """
        if max_lanes is None:
            max_lanes = get_settings().MAX_LANES
        self.max_lanes = max(1, max_lanes)

    def pack(self, tasks: Iterable[Task]) -> LanePacking:
        """
        Assign a lane to every task.

        Args:
            tasks: All tasks of one track

        Returns:
            LanePacking with per-task lanes, lane count and overflowed tasks
        """
        ordered = sorted(tasks, key=lambda t: (t.start, t.id))
        # Last task placed in each lane; it always has the latest end in that lane
        occupants: list[Task] = []
        lanes: dict[str, int] = {}
        overflow: list[str] = []

        for task in ordered:
            lane = self._first_free_lane(task, occupants)
            if lane is None:
                lane = self.max_lanes - 1
                overflow.append(task.id)
                if occupants[lane].end < task.end:
                    occupants[lane] = task
            elif lane == len(occupants):
                occupants.append(task)
            else:
                occupants[lane] = task
            lanes[task.id] = lane

        if overflow:
            logger.warning(
                f"Lane cap {self.max_lanes} reached: {len(overflow)} task(s) stacked in the last lane"
            )

        return LanePacking(
            lanes=lanes,
            lane_count=len(occupants),
            overflow_task_ids=overflow,
        )

    def _first_free_lane(self, task: Task, occupants: list[Task]) -> Optional[int]:
        for lane, occupant in enumerate(occupants):
            if not tasks_overlap(task, occupant):
                return lane
        if len(occupants) < self.max_lanes:
            return len(occupants)
        return None
