"""
Grid coordinate calculator.

Pure date <-> pixel mapping over a GridConfig. Every component (layout, drag,
resize, previews) goes through this class so positions stay consistent. No
hidden state: safe to call on every animation frame.
"""

from __future__ import annotations

import math
from datetime import date
from typing import NamedTuple, Optional

from planboard.core.exceptions import ValidationError
from planboard.models.enums import ResizeEdge, SnapMode
from planboard.models.grid import GridConfig
from planboard.utils.date_utils import add_days, days_between


class GridCoordinates(NamedTuple):
    x: float
    width: float
    day: date
    day_index: int


class GridCoordinateCalculator:
    """Maps calendar days to pixel columns and back."""

    def __init__(self, config: GridConfig):
        self.config = config

    @property
    def safe_cell_width(self) -> float:
        """Cell width guarded against zero/negative values for division."""
        return self.config.cell_width if self.config.cell_width > 0 else 1.0

    @property
    def grid_width(self) -> float:
        return len(self.config.days) * max(self.config.cell_width, 0.0)

    def date_to_pixel(self, day: date) -> float:
        """Left pixel edge of ``day`` (may lie outside the grid)."""
        first_day = self.config.first_day
        if first_day is None:
            return 0.0
        return days_between(first_day, day) * self.config.cell_width

    def _clamp_index(self, index: int) -> int:
        return max(0, min(index, len(self.config.days) - 1))

    def day_index_at(self, x: float, include_scroll: bool = False) -> int:
        """
        Clamped column index under ``x``.

        Returns:
            Index into ``days``, or -1 on an empty grid
        """
        if not self.config.days:
            return -1
        if include_scroll:
            x += self.config.scroll_left
        return self._clamp_index(math.floor(x / self.safe_cell_width))

    def pixel_to_date(self, x: float, include_scroll: bool = True) -> Optional[date]:
        """
        Convert an x coordinate to the grid day containing it.

        Args:
            x: Pixel coordinate
            include_scroll: Add the grid scroll offset first (x is container-local)

        Returns:
            The clamped grid day, or None on an empty grid
        """
        index = self.day_index_at(x, include_scroll=include_scroll)
        if index < 0:
            return None
        return self.config.days[index]

    def snap_to_grid(self, x: float, mode: SnapMode = SnapMode.START) -> float:
        """Round ``x`` to the start, center or end of its cell."""
        cell_width = self.safe_cell_width
        cell_index = math.floor(x / cell_width)
        if mode == SnapMode.CENTER:
            return cell_index * cell_width + cell_width / 2
        if mode == SnapMode.END:
            return (cell_index + 1) * cell_width
        return cell_index * cell_width

    def boundary_to_date(self, x: float, edge: ResizeEdge) -> Optional[date]:
        """
        Date picked by a resize handle dropped at ``x``.

        The handle snaps to the nearest cell boundary. A start edge takes the
        cell to the right of that boundary, an end edge the cell to its left.
        """
        if not self.config.days:
            return None
        boundary = int(math.floor(x / self.safe_cell_width + 0.5))
        index = boundary if edge == ResizeEdge.START else boundary - 1
        return self.config.days[self._clamp_index(index)]

    def day_index(self, day: date) -> int:
        """Index of ``day`` in the grid, -1 if outside."""
        first_day = self.config.first_day
        if first_day is None:
            return -1
        index = days_between(first_day, day)
        if 0 <= index < len(self.config.days):
            return index
        return -1

    def task_span(self, start: date, end: date) -> tuple[float, float]:
        """
        Pixel x and width of a bar covering ``start``..``end``.

        The width is at least one cell, even for zero-length spans.
        """
        left = self.date_to_pixel(start)
        right = self.date_to_pixel(end)
        width = max(self.config.cell_width, right - left + self.config.cell_width)
        return left, width

    def calculate_task_position(
        self, start: date, end: date, for_preview: bool = False
    ) -> GridCoordinates:
        """Task bar geometry; previews are shifted into container coordinates."""
        left, width = self.task_span(start, end)
        x = left - self.config.scroll_left if for_preview else left
        return GridCoordinates(x=x, width=width, day=start, day_index=self.day_index(start))


def task_duration_days(start: date, end: date) -> int:
    """Inclusive number of days covered by ``start``..``end``."""
    return days_between(start, end) + 1


def end_date_for_duration(start: date, duration_days: int) -> date:
    """
    Last day of a range of ``duration_days`` days beginning at ``start``.

    Raises:
        ValidationError: If duration is below one day
    """
    if duration_days < 1:
        raise ValidationError(f"Duration must be at least 1 day, got {duration_days}")
    return add_days(start, duration_days - 1)
