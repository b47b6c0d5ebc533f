"""Abstract interfaces for external collaborators."""

from planboard.interfaces.frame_ticker import IFrameTicker
from planboard.interfaces.task_store import ITaskStore, SnapshotListener

__all__ = [
    "IFrameTicker",
    "ITaskStore",
    "SnapshotListener",
]
