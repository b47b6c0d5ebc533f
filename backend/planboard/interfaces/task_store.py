"""
Task store interface.

Defines the contract of the external collaborator that owns task persistence.
The engine only reads snapshots and emits intents; whether an intent is
applied, rejected or retried is the store's concern.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable

from planboard.models.interaction import MoveIntent, ResizeIntent
from planboard.models.task import Task

SnapshotListener = Callable[[list[Task]], None]


class ITaskStore(ABC):
    """Abstract interface for the task store."""

    @abstractmethod
    def list_tasks(self) -> list[Task]:
        """
        Get the current task snapshot.

        Returns:
            All tasks
        """
        pass

    @abstractmethod
    def request_move(self, intent: MoveIntent) -> None:
        """
        Move a task to another track and/or date range.

        Args:
            intent: Validated move intent
        """
        pass

    @abstractmethod
    def request_resize(self, intent: ResizeIntent) -> None:
        """
        Change one boundary of a task.

        Args:
            intent: Validated resize intent
        """
        pass

    @abstractmethod
    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register a listener called with the new snapshot after each change.

        Args:
            listener: Snapshot callback

        Returns:
            Function that removes the listener
        """
        pass
