"""Mapping between canvas pixels and grid cells."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .models import Cell


@dataclass
class Viewport:
    """Centred layout of a ``rows x cols`` grid on a canvas.

    ``cell_size`` and the offsets are in CSS (logical) pixels. Input arrives
    in physical pixels, which are ``pixel_ratio`` times larger.
    """

    rows: int
    cols: int
    padding: float = 20.0
    pixel_ratio: float = 1.0
    width: float = 0.0
    height: float = 0.0
    cell_size: float = 0.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    def resize(self, width: float, height: float, pixel_ratio: float | None = None) -> None:
        """Recompute the layout for a canvas of *width* x *height* CSS pixels."""

        if pixel_ratio is not None:
            self.pixel_ratio = pixel_ratio if pixel_ratio > 0 else 1.0
        self.width = width
        self.height = height
        available_width = width - self.padding * 2
        available_height = height - self.padding * 2
        self.cell_size = max(
            0.0, min(available_width / self.cols, available_height / self.rows)
        )
        self.offset_x = (width - self.cell_size * self.cols) / 2
        self.offset_y = (height - self.cell_size * self.rows) / 2

    @property
    def physical_size(self) -> tuple[int, int]:
        return (
            int(round(self.width * self.pixel_ratio)),
            int(round(self.height * self.pixel_ratio)),
        )

    def to_grid_coords(self, x: float, y: float) -> Cell:
        """Convert physical canvas pixels to a (possibly off-grid) cell."""

        if self.cell_size <= 0:
            return Cell(-1, -1)
        css_x = x / self.pixel_ratio
        css_y = y / self.pixel_ratio
        col = math.floor((css_x - self.offset_x) / self.cell_size)
        row = math.floor((css_y - self.offset_y) / self.cell_size)
        return Cell(row, col)

    def cell_origin(self, row: float, col: float) -> tuple[float, float]:
        """Return the CSS-pixel top-left corner of the cell at *row*, *col*."""

        return (
            self.offset_x + col * self.cell_size,
            self.offset_y + row * self.cell_size,
        )

    def cell_center(self, row: float, col: float) -> tuple[float, float]:
        x, y = self.cell_origin(row, col)
        half = self.cell_size / 2
        return x + half, y + half

    def contains(self, cell: Cell) -> bool:
        return 0 <= cell.row < self.rows and 0 <= cell.col < self.cols
