"""
Track directory: read-only lookup table for task -> track resolution.

Legacy task records reference their track by name instead of id (sometimes with
a " (type)" suffix on the track name). That migration shim lives only in
``TrackDirectory.resolve``; lane packing and validation never branch on it.
"""

from __future__ import annotations

import re
from collections import defaultdict
from types import MappingProxyType
from typing import Iterable, Optional

from planboard.models.task import Task
from planboard.models.track import Track
from planboard.models.validation import TrackAuditReport

_TYPE_SUFFIX = re.compile(r"\s*\([^)]*\)\s*$")


def strip_type_suffix(name: str) -> str:
    """'Acme Plant (manufacturing)' -> 'Acme Plant'."""
    return _TYPE_SUFFIX.sub("", name).strip()


class TrackDirectory:
    """Immutable index of tracks by id, name and suffix-less name."""

    def __init__(self, tracks: Iterable[Track]):
        ordered = list(tracks)
        by_id: dict[str, Track] = {}
        by_name: dict[str, Track] = {}
        by_bare_name: dict[str, Track] = {}
        for track in ordered:
            by_id.setdefault(track.id, track)
            by_name.setdefault(track.name, track)
            by_bare_name.setdefault(strip_type_suffix(track.name), track)

        self._tracks = tuple(ordered)
        self._by_id = MappingProxyType(by_id)
        self._by_name = MappingProxyType(by_name)
        self._by_bare_name = MappingProxyType(by_bare_name)

    @property
    def tracks(self) -> tuple[Track, ...]:
        return self._tracks

    def __len__(self) -> int:
        return len(self._tracks)

    def __contains__(self, track_id: object) -> bool:
        return track_id in self._by_id

    def get(self, track_id: str) -> Optional[Track]:
        return self._by_id.get(track_id)

    def resolve(
        self,
        track_id: Optional[str],
        track_name: Optional[str] = None,
    ) -> Optional[Track]:
        """
        Resolve a track reference.

        Order: id, then exact name (legacy records stored the name in the id
        field), then name without a trailing "(type)" suffix.

        Args:
            track_id: Reference by id (or legacy name)
            track_name: Legacy reference by name

        Returns:
            Track if any strategy matches, None otherwise
        """
        for ref in (track_id, track_name):
            if not ref:
                continue
            track = self._by_id.get(ref) or self._by_name.get(ref)
            if track is None:
                track = self._by_bare_name.get(strip_type_suffix(ref))
            if track is not None:
                return track
        return None

    def track_for_task(self, task: Task) -> Optional[Track]:
        return self.resolve(task.track_id, task.track_name)

    def resolve_ref(self, track_ref: Optional[str]) -> Optional[str]:
        """Canonical track id for a reference, or the raw reference if unknown."""
        track = self.resolve(track_ref)
        return track.id if track else track_ref

    def tasks_for_track(self, tasks: Iterable[Task], track: Track) -> list[Task]:
        """Tasks resolving to ``track``."""
        return [task for task in tasks if self.track_for_task(task) == track]

    def tasks_on_ref(self, tasks: Iterable[Task], track_ref: Optional[str]) -> list[Task]:
        """
        Tasks on the track referenced by ``track_ref``.

        Unknown references fall back to comparing raw task references, so
        tasks on a track missing from the snapshot still block each other.
        """
        track = self.resolve(track_ref)
        if track is not None:
            return self.tasks_for_track(tasks, track)
        if not track_ref:
            return []
        return [
            task
            for task in tasks
            if self.track_for_task(task) is None and track_ref in (task.track_id, task.track_name)
        ]

    def group_tasks(self, tasks: Iterable[Task]) -> tuple[dict[str, list[Task]], list[Task]]:
        """
        Group tasks by canonical track id.

        Returns:
            Tuple of (track_id -> tasks for every known track, unassigned tasks)
        """
        grouped: dict[str, list[Task]] = defaultdict(list)
        unassigned: list[Task] = []
        for task in tasks:
            track = self.track_for_task(task)
            if track is None:
                unassigned.append(task)
            else:
                grouped[track.id].append(task)
        return {track.id: grouped.get(track.id, []) for track in self._tracks}, unassigned

    def audit(self, tasks: Iterable[Task]) -> TrackAuditReport:
        """
        Check task -> track references for consistency.

        Useful for spotting legacy records before they silently drop off the
        board.
        """
        task_list = list(tasks)
        issues: list[str] = []

        without_track = [t for t in task_list if not t.track_id and not t.track_name]
        if without_track:
            issues.append(f"{len(without_track)} tasks have no track assignment")

        unknown_names = [
            t
            for t in task_list
            if t.track_name
            and t.track_name not in self._by_name
            and strip_type_suffix(t.track_name) not in self._by_bare_name
        ]
        if unknown_names:
            issues.append(f"{len(unknown_names)} tasks have invalid track names")

        unknown_ids = [
            t
            for t in task_list
            if t.track_id and t.track_id not in self._by_id and self.resolve(t.track_id) is None
        ]
        if unknown_ids:
            issues.append(f"{len(unknown_ids)} tasks have invalid track IDs")

        return TrackAuditReport(
            is_valid=not issues,
            issues=issues,
            summary={
                "total_tasks": len(task_list),
                "tasks_with_track_id": sum(1 for t in task_list if t.track_id),
                "tasks_with_track_name": sum(1 for t in task_list if t.track_name),
                "unresolved_tasks": sum(1 for t in task_list if self.track_for_task(t) is None),
            },
        )
