"""
Grid configuration models.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from planboard.core.config import get_settings
from planboard.utils.date_utils import each_day


class GridConfig(BaseModel):
    """Date-indexed horizontal axis: one column per calendar day."""

    model_config = ConfigDict(frozen=True)

    days: list[date] = Field(default_factory=list, description="Ordered contiguous days")
    cell_width: float = Field(..., description="Column width in pixels")
    scroll_left: float = Field(0.0, description="Current horizontal scroll offset")

    @field_validator("days")
    @classmethod
    def _check_contiguous(cls, days: list[date]) -> list[date]:
        for previous, current in zip(days, days[1:]):
            if (current - previous).days != 1:
                raise ValueError(
                    f"Grid days must be ordered and contiguous ({previous} -> {current})"
                )
        return days

    @classmethod
    def from_range(cls, start: date, end: date, cell_width: Optional[float] = None) -> GridConfig:
        """Build a grid covering ``start`` to ``end`` inclusive."""
        if cell_width is None:
            cell_width = get_settings().DEFAULT_CELL_WIDTH
        return cls(days=list(each_day(start, end)), cell_width=cell_width)

    def with_scroll(self, scroll_left: float) -> GridConfig:
        if scroll_left == self.scroll_left:
            return self
        return self.model_copy(update={"scroll_left": scroll_left})

    @property
    def first_day(self) -> date | None:
        return self.days[0] if self.days else None

    @property
    def last_day(self) -> date | None:
        return self.days[-1] if self.days else None


class Viewport(BaseModel):
    """Visible area of the scroll container, used for auto-scroll."""

    width: float = Field(..., ge=0)
    height: float = Field(..., ge=0)
