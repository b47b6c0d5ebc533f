"""
Unit tests for InMemoryTaskStore.
"""

from datetime import date

import pytest

from planboard.core.exceptions import NotFoundError, ValidationError
from planboard.infrastructure.local.memory_task_store import InMemoryTaskStore
from planboard.models.enums import ResizeEdge
from planboard.models.interaction import MoveIntent, ResizeIntent
from planboard.models.task import Task


def make_store() -> InMemoryTaskStore:
    return InMemoryTaskStore(
        [
            Task(id="t1", track_name="Plant A", start=date(2025, 1, 1), end=date(2025, 1, 5)),
            Task(id="t2", track_id="B", start=date(2025, 1, 3), end=date(2025, 1, 4)),
        ]
    )


def test_move_replaces_legacy_track_name():
    """A move sets the track id and clears the legacy name."""
    store = make_store()
    store.request_move(
        MoveIntent(task_id="t1", new_track_id="C", new_start=date(2025, 1, 10), new_end=date(2025, 1, 14))
    )
    moved = store.get("t1")
    assert moved.track_id == "C"
    assert moved.track_name is None
    assert (moved.start, moved.end) == (date(2025, 1, 10), date(2025, 1, 14))


def test_resize_changes_one_boundary():
    """A resize moves only the grabbed edge."""
    store = make_store()
    store.request_resize(ResizeIntent(task_id="t1", edge=ResizeEdge.END, new_end=date(2025, 1, 2)))
    assert (store.get("t1").start, store.get("t1").end) == (date(2025, 1, 1), date(2025, 1, 2))


def test_resize_past_pinned_boundary_raises():
    """A resize that inverts the range is rejected."""
    store = make_store()
    with pytest.raises(ValidationError):
        store.request_resize(ResizeIntent(task_id="t2", edge=ResizeEdge.START, new_start=date(2025, 1, 9)))
    assert store.get("t2").start == date(2025, 1, 3)


def test_unknown_task_raises():
    """Intents for a missing task raise NotFoundError."""
    store = make_store()
    with pytest.raises(NotFoundError):
        store.request_move(
            MoveIntent(task_id="zz", new_track_id="A", new_start=date(2025, 1, 1), new_end=date(2025, 1, 1))
        )
    with pytest.raises(NotFoundError):
        store.delete("zz")


def test_subscribers_receive_snapshots_until_unsubscribed():
    """Subscribers get each new snapshot until they unsubscribe."""
    store = make_store()
    snapshots = []
    unsubscribe = store.subscribe(snapshots.append)
    store.delete("t2")
    assert [t.id for t in snapshots[-1]] == ["t1"]
    unsubscribe()
    store.upsert(Task(id="t3", track_id="A", start=date(2025, 2, 1), end=date(2025, 2, 1)))
    assert len(snapshots) == 1
    assert len(store.list_tasks()) == 2
