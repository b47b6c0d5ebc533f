"""
Validation result models.

A rejected placement is a normal result, not an exception: these records are
shown directly as UI feedback during a live drag.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field


class ValidationResult(BaseModel):
    """Outcome of a compatibility or availability check."""

    allowed: bool
    reason: Optional[str] = None
    code: Optional[str] = None
    conflicting_task_ids: list[str] = Field(default_factory=list)
    metadata_missing: bool = Field(
        False, description="Track metadata was missing and the check failed open"
    )

    @classmethod
    def ok(cls, metadata_missing: bool = False) -> ValidationResult:
        return cls(allowed=True, metadata_missing=metadata_missing)

    @classmethod
    def rejected(
        cls,
        code: str,
        reason: str,
        conflicting_task_ids: Optional[list[str]] = None,
    ) -> ValidationResult:
        return cls(
            allowed=False,
            code=code,
            reason=reason,
            conflicting_task_ids=conflicting_task_ids or [],
        )


class FreeSlotResult(BaseModel):
    """Outcome of the bounded forward free-slot search."""

    found: bool
    start: date
    end: date
    attempts: int = Field(..., ge=0)
    reason: Optional[str] = None


class DropFeedback(BaseModel):
    """Hover feedback for a track while a task is dragged over it."""

    can_drop: bool
    message: Optional[str] = None


class TrackAuditReport(BaseModel):
    """Consistency report of task → track references."""

    is_valid: bool
    issues: list[str] = Field(default_factory=list)
    summary: dict[str, int] = Field(default_factory=dict)
