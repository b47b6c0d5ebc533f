"""
In-memory task store.

Mock database for local development and tests: applies intents to a dict of
tasks and publishes the new snapshot to subscribers.
"""

from __future__ import annotations

from typing import Callable, Iterable

from planboard.core.exceptions import NotFoundError, ValidationError
from planboard.core.logger import logger
from planboard.interfaces.task_store import ITaskStore, SnapshotListener
from planboard.models.enums import ResizeEdge
from planboard.models.interaction import MoveIntent, ResizeIntent
from planboard.models.task import Task


class InMemoryTaskStore(ITaskStore):
    """Dict-backed implementation of ITaskStore."""

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: dict[str, Task] = {task.id: task for task in tasks}
        self._listeners: list[SnapshotListener] = []

    def list_tasks(self) -> list[Task]:
        return list(self._tasks.values())

    def get(self, task_id: str) -> Task:
        task = self._tasks.get(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found", details={"task_id": task_id})
        return task

    def upsert(self, task: Task) -> None:
        self._tasks[task.id] = task
        self._publish()

    def delete(self, task_id: str) -> None:
        self.get(task_id)
        del self._tasks[task_id]
        self._publish()

    def request_move(self, intent: MoveIntent) -> None:
        task = self.get(intent.task_id)
        moved = task.with_track(intent.new_track_id).with_range(intent.new_start, intent.new_end)
        self._tasks[task.id] = moved
        logger.info(
            f"Task {task.id} moved to {intent.new_track_id} "
            f"({intent.new_start} ~ {intent.new_end})"
        )
        self._publish()

    def request_resize(self, intent: ResizeIntent) -> None:
        task = self.get(intent.task_id)
        start = intent.new_start if intent.edge == ResizeEdge.START else task.start
        end = intent.new_end if intent.edge == ResizeEdge.END else task.end
        if start > end:
            raise ValidationError(
                f"Resize of task {task.id} would start after it ends",
                details={"start": start, "end": end},
            )
        self._tasks[task.id] = task.with_range(start, end)
        logger.info(f"Task {task.id} resized to {start} ~ {end}")
        self._publish()

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        snapshot = self.list_tasks()
        for listener in list(self._listeners):
            listener(snapshot)
