"""
Compatibility & availability validator.

Decides whether a candidate move/resize is legal. Both checks return a
ValidationResult so the caller can show the reason during a live drag.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from planboard.core.config import get_settings
from planboard.core.exceptions import ValidationError
from planboard.core.logger import setup_logger
from planboard.models.enums import RejectionCode
from planboard.models.task import Task
from planboard.models.validation import DropFeedback, FreeSlotResult, ValidationResult
from planboard.services.grid_coordinates import end_date_for_duration
from planboard.services.track_directory import TrackDirectory
from planboard.utils.date_utils import add_days, format_day

logger = setup_logger(__name__)


def _ranges_overlap(start: date, end: date, task: Task) -> bool:
    return not (end < task.start or start > task.end)


class PlacementValidator:
    """
    Validates candidate placements against a track snapshot.

    Provides:
    - Compatibility (source and candidate track types must match)
    - Availability (no date overlap with other tasks on the candidate track)
    - Bounded forward search for the nearest free slot
    """

    def __init__(self, directory: TrackDirectory, max_slot_attempts: Optional[int] = None):
        """
        Initialize validator.

        Args:
            directory: Read-only track lookup table
            max_slot_attempts: Iteration bound for find_free_slot
        """
        self.directory = directory
        if max_slot_attempts is None:
            max_slot_attempts = get_settings().FREE_SLOT_MAX_ATTEMPTS
        self.max_slot_attempts = max_slot_attempts

    def check_compatibility(self, task: Task, candidate_track_ref: Optional[str]) -> ValidationResult:
        """
        Check that ``task`` may move to the candidate track.

        Missing track metadata fails open: the move is allowed and the result
        is flagged, so a broken record never blocks the user.
        """
        source = self.directory.track_for_task(task)
        target = self.directory.resolve(candidate_track_ref)

        if source is None or target is None:
            logger.warning(
                f"Track metadata missing for task {task.id} "
                f"(source={task.track_ref!r}, target={candidate_track_ref!r}); allowing move"
            )
            return ValidationResult.ok(metadata_missing=True)

        if source.type != target.type:
            return ValidationResult.rejected(
                RejectionCode.TYPE_MISMATCH.value,
                f"Track type mismatch: {source.type} → {target.type}",
            )
        return ValidationResult.ok()

    def check_availability(
        self,
        task_id: Optional[str],
        track_ref: Optional[str],
        start: date,
        end: date,
        tasks: Iterable[Task],
    ) -> ValidationResult:
        """
        Check that ``start``..``end`` is free on the track.

        Args:
            task_id: Task being placed (ignored when looking for conflicts)
            track_ref: Candidate track id (or legacy name)
            start: Candidate first day
            end: Candidate last day
            tasks: Current task snapshot

        Returns:
            ValidationResult listing the conflicting task ids when rejected
        """
        conflicts = [
            other
            for other in self.directory.tasks_on_ref(tasks, track_ref)
            if other.id != task_id and _ranges_overlap(start, end, other)
        ]
        if conflicts:
            return ValidationResult.rejected(
                RejectionCode.DATE_CONFLICT.value,
                f"{format_day(start)} ~ {format_day(end)} overlaps {len(conflicts)} task(s) on this track",
                conflicting_task_ids=[t.id for t in conflicts],
            )
        return ValidationResult.ok()

    def validate_move(
        self,
        task: Task,
        track_ref: Optional[str],
        start: date,
        end: date,
        tasks: Iterable[Task],
    ) -> ValidationResult:
        """Both checks; compatibility is reported first."""
        compatibility = self.check_compatibility(task, track_ref)
        if not compatibility.allowed:
            return compatibility
        availability = self.check_availability(task.id, track_ref, start, end, tasks)
        if not availability.allowed:
            return availability
        return compatibility

    def find_free_slot(
        self,
        track_ref: Optional[str],
        desired_start: date,
        duration_days: int,
        tasks: Iterable[Task],
        exclude_task_id: Optional[str] = None,
        max_attempts: Optional[int] = None,
    ) -> FreeSlotResult:
        """
        Find the nearest free window at or after ``desired_start``.

        On conflict the window jumps to the day after the latest conflicting
        end. Only scans forward, even when an earlier gap exists.

        Args:
            track_ref: Track to search
            desired_start: Preferred first day
            duration_days: Window length in days (>= 1)
            tasks: Current task snapshot
            exclude_task_id: Task being moved (does not block itself)
            max_attempts: Iteration bound (default: validator setting)

        Returns:
            FreeSlotResult; ``found`` is False after the bound is exhausted

        Raises:
            ValidationError: If duration_days < 1
        """
        if duration_days < 1:
            raise ValidationError(f"Duration must be at least 1 day, got {duration_days}")
        limit = self.max_slot_attempts if max_attempts is None else max_attempts

        track_tasks = [
            t for t in self.directory.tasks_on_ref(tasks, track_ref) if t.id != exclude_task_id
        ]
        start = desired_start
        end = end_date_for_duration(start, duration_days)
        attempts = 0

        while attempts < limit:
            conflicts = [t for t in track_tasks if _ranges_overlap(start, end, t)]
            if not conflicts:
                return FreeSlotResult(found=True, start=start, end=end, attempts=attempts)
            start = add_days(max(t.end for t in conflicts), 1)
            end = end_date_for_duration(start, duration_days)
            attempts += 1

        logger.warning(
            f"No free slot on track {track_ref!r} for {duration_days} day(s) "
            f"from {format_day(desired_start)} after {attempts} attempts"
        )
        return FreeSlotResult(
            found=False,
            start=start,
            end=end,
            attempts=attempts,
            reason=f"No free {duration_days}-day slot found after {attempts} attempts",
        )

    def drop_feedback(self, task: Task, track_ref: Optional[str]) -> DropFeedback:
        """Hover message for a track while ``task`` is dragged over it."""
        result = self.check_compatibility(task, track_ref)
        if not result.allowed:
            return DropFeedback(can_drop=False, message=result.reason)
        return DropFeedback(can_drop=True, message="Drop here to move the task")
