"""
Task model definitions.

Tasks are time-bound bars placed on a track. Lane and pixel geometry are never
stored here; they are recomputed from dates and grid config (see
``TaskPlacement``).
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from planboard.utils.date_utils import DateLike, to_date


class Task(BaseModel):
    """Snapshot of a scheduled task as read from the external store."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Task ID")
    title: str = Field("", max_length=500, description="Display title")
    track_id: Optional[str] = Field(None, description="Track (factory) ID")
    track_name: Optional[str] = Field(
        None, description="Legacy track reference by name (records without track_id)"
    )
    start: date = Field(..., description="First day (inclusive)")
    end: date = Field(..., description="Last day (inclusive)")

    @field_validator("start", "end", mode="before")
    @classmethod
    def _coerce_day(cls, value: DateLike) -> date:
        return to_date(value)

    @model_validator(mode="after")
    def _check_range(self) -> "Task":
        if self.start > self.end:
            raise ValueError(
                f"Task {self.id} starts after it ends ({self.start} > {self.end})"
            )
        return self

    @property
    def duration_days(self) -> int:
        """Inclusive length in days (a same-day task lasts 1 day)."""
        return (self.end - self.start).days + 1

    @property
    def track_ref(self) -> Optional[str]:
        """Raw track reference, id first then legacy name."""
        return self.track_id or self.track_name

    def with_range(self, start: date, end: date) -> "Task":
        return self.model_validate({**self.model_dump(), "start": start, "end": end})

    def with_track(self, track_id: str) -> "Task":
        return self.model_copy(update={"track_id": track_id, "track_name": None})
