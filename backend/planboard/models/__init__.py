"""Pydantic models (schemas) for the scheduling engine."""

from planboard.models.enums import (
    InteractionState,
    PointerEventKind,
    PointerHandle,
    RejectionCode,
    ResizeEdge,
    SnapMode,
    TrackType,
)
from planboard.models.grid import GridConfig, Viewport
from planboard.models.interaction import (
    DragPreview,
    MoveIntent,
    PlacementCandidate,
    PointerEvent,
    ResizeIntent,
    ResizePreview,
)
from planboard.models.layout import LanePacking, TaskPlacement, TrackRow
from planboard.models.task import Task
from planboard.models.track import Track
from planboard.models.validation import (
    DropFeedback,
    FreeSlotResult,
    TrackAuditReport,
    ValidationResult,
)

__all__ = [
    # Enums
    "InteractionState",
    "PointerEventKind",
    "PointerHandle",
    "RejectionCode",
    "ResizeEdge",
    "SnapMode",
    "TrackType",
    # Snapshots
    "Task",
    "Track",
    "GridConfig",
    "Viewport",
    # Interaction
    "PointerEvent",
    "PlacementCandidate",
    "DragPreview",
    "ResizePreview",
    "MoveIntent",
    "ResizeIntent",
    # Layout
    "LanePacking",
    "TaskPlacement",
    "TrackRow",
    # Validation
    "ValidationResult",
    "FreeSlotResult",
    "DropFeedback",
    "TrackAuditReport",
]
