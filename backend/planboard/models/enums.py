"""
Enum definitions for the scheduling engine.

These enums are used across models and provide type-safe state/tag values.
"""

from enum import Enum


class TrackType(str, Enum):
    """
    Compatibility tag of a track (factory).

    A task may only move between tracks of the same type.
    """

    MANUFACTURING = "manufacturing"
    CONTAINER = "container"
    PACKAGING = "packaging"


class InteractionState(str, Enum):
    """
    State of a drag or resize session.

    IDLE -> ARMED -> DRAGGING -> (COMMITTING | REVERTING | CANCELLED) -> IDLE
    """

    IDLE = "IDLE"
    ARMED = "ARMED"
    DRAGGING = "DRAGGING"
    COMMITTING = "COMMITTING"
    REVERTING = "REVERTING"
    CANCELLED = "CANCELLED"


class PointerEventKind(str, Enum):
    """Abstract pointer event kinds."""

    DOWN = "down"
    MOVE = "move"
    UP = "up"
    CANCEL = "cancel"


class PointerHandle(str, Enum):
    """Which part of a task bar the pointer grabbed."""

    BODY = "body"
    START_EDGE = "start_edge"
    END_EDGE = "end_edge"


class ResizeEdge(str, Enum):
    """Task boundary edited by a resize session."""

    START = "start"
    END = "end"


class SnapMode(str, Enum):
    """Where inside a cell a coordinate snaps to."""

    START = "start"
    CENTER = "center"
    END = "end"


class RejectionCode(str, Enum):
    """Machine-readable reason a candidate placement is not allowed."""

    TYPE_MISMATCH = "type_mismatch"
    DATE_CONFLICT = "date_conflict"
    OUTSIDE_GRID = "outside_grid"
    NO_FREE_SLOT = "no_free_slot"
