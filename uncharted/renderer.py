"""Drawing of the survey grid and its overlays."""

from __future__ import annotations

from typing import Iterable

import pygame

from .grid import SiteMap
from .models import Cell, Rect
from .tools import Tool
from .viewport import Viewport

Color = tuple[int, int, int] | tuple[int, int, int, int]


class Palette:
    """Colours used by the survey display."""

    BACKGROUND: Color = (5, 10, 8)
    GRID: Color = (0, 255, 65)
    GRID_DIM: Color = (0, 70, 20)
    STRUCTURE: Color = (0, 255, 65)
    STRUCTURE_INNER: Color = (0, 51, 0)
    DIRT: Color = (26, 26, 26)
    DRILL_HIT: Color = (255, 215, 0)
    DRILL_MISS: Color = (60, 60, 60)
    SELECTION: Color = (255, 255, 255, 50)
    SELECTION_BORDER: Color = (255, 255, 255)
    PREVIEW_LIDAR: Color = (255, 165, 0)
    PREVIEW_LIDAR_FILL: Color = (255, 165, 0, 50)

    SCAN_EMPTY: Color = (0, 0, 255, 25)
    SCAN_LOW: Color = (0, 255, 0, 50)
    SCAN_MEDIUM: Color = (255, 255, 0, 75)
    SCAN_HIGH: Color = (255, 0, 0, 100)

    LIDAR_FAR: Color = (100, 110, 130, 60)
    LIDAR_MODERATE: Color = (255, 165, 0, 70)
    LIDAR_CLOSE: Color = (255, 100, 0, 100)
    LIDAR_VERY_CLOSE: Color = (255, 50, 0, 130)


def scan_heat(density: float) -> Color:
    """Return the overlay colour for a scan window of the given density."""

    if density > 0.5:
        return Palette.SCAN_HIGH
    if density > 0.25:
        return Palette.SCAN_MEDIUM
    if density > 0:
        return Palette.SCAN_LOW
    return Palette.SCAN_EMPTY


def lidar_heat(proximity: float) -> Color:
    """Return the overlay colour for a lidar probe at the given distance."""

    if proximity <= 1:
        return Palette.LIDAR_VERY_CLOSE
    if proximity <= 3:
        return Palette.LIDAR_CLOSE
    if proximity <= 6:
        return Palette.LIDAR_MODERATE
    return Palette.LIDAR_FAR


class Renderer:
    """Draws a read-only view of a :class:`SiteMap` onto a surface."""

    SCAN_RADIUS = 2
    LIDAR_SPAN = 2

    def __init__(self, site: SiteMap, viewport: Viewport) -> None:
        self.site = site
        self.viewport = viewport

    def render(
        self,
        surface: pygame.Surface,
        *,
        scans: Iterable[Cell] = (),
        lidars: Iterable[Cell] = (),
        tool: Tool = Tool.SCAN,
        selection: Rect | None = None,
        hover: Cell | None = None,
    ) -> None:
        """Compose a full frame of the grid and its overlays."""

        self.draw_grid(surface)
        self.draw_heat_map(surface, scans)
        self.draw_lidar_map(surface, lidars)
        self.draw_cells(surface)

        if tool is Tool.EXCAVATE and selection is not None:
            self.draw_selection(surface, selection)
        elif hover is not None and self.viewport.contains(hover):
            if tool is Tool.SCAN:
                radius = self.SCAN_RADIUS
                span = 2 * radius + 1
                self.draw_selection(
                    surface, Rect(hover.row - radius, hover.col - radius, span, span)
                )
            elif tool is Tool.LIDAR:
                self.draw_selection(
                    surface,
                    Rect(hover.row, hover.col, self.LIDAR_SPAN, self.LIDAR_SPAN),
                    fill=Palette.PREVIEW_LIDAR_FILL,
                    border=Palette.PREVIEW_LIDAR,
                )
            elif tool is Tool.DRILL:
                self.draw_hover(surface, hover)

    # Layers -----------------------------------------------------------

    def draw_grid(self, surface: pygame.Surface) -> None:
        view = self.viewport
        width = view.cols * view.cell_size
        height = view.rows * view.cell_size
        for r in range(view.rows + 1):
            y = view.offset_y + r * view.cell_size
            pygame.draw.line(
                surface,
                Palette.GRID_DIM,
                self._to_surface(view.offset_x, y),
                self._to_surface(view.offset_x + width, y),
            )
        for c in range(view.cols + 1):
            x = view.offset_x + c * view.cell_size
            pygame.draw.line(
                surface,
                Palette.GRID_DIM,
                self._to_surface(x, view.offset_y),
                self._to_surface(x, view.offset_y + height),
            )

    def draw_cells(self, surface: pygame.Surface) -> None:
        """Paint excavated and drilled cells."""

        site = self.site
        size = self.viewport.cell_size
        for r in range(site.rows):
            for c in range(site.cols):
                index = site.index(r, c)
                x, y = self.viewport.cell_origin(r, c)
                occupied = site.occupancy[index]
                if site.excavated[index]:
                    if occupied:
                        self._fill(surface, Palette.STRUCTURE, x + 1, y + 1, size - 2, size - 2)
                        self._fill(
                            surface, Palette.STRUCTURE_INNER, x + 4, y + 4, size - 8, size - 8
                        )
                    else:
                        self._fill(surface, Palette.DIRT, x + 1, y + 1, size - 2, size - 2)
                elif site.drilled[index]:
                    if occupied:
                        center = self._to_surface(x + size / 2, y + size / 2)
                        radius = max(1, int(round(size / 4 * self.viewport.pixel_ratio)))
                        pygame.draw.circle(surface, Palette.DRILL_HIT, center, radius)
                    else:
                        self._fill(surface, Palette.DRILL_MISS, x + 2, y + 2, size - 4, size - 4)

    def draw_heat_map(self, surface: pygame.Surface, scans: Iterable[Cell]) -> None:
        radius = self.SCAN_RADIUS
        span = 2 * radius + 1
        for scan in scans:
            color = scan_heat(self.site.density(scan.row, scan.col, radius))
            rect = Rect(scan.row - radius, scan.col - radius, span, span)
            self._blend_rect(surface, rect, color, border=color)

    def draw_lidar_map(self, surface: pygame.Surface, lidars: Iterable[Cell]) -> None:
        for probe in lidars:
            color = lidar_heat(self.site.proximity(probe.row, probe.col))
            rect = Rect(probe.row, probe.col, self.LIDAR_SPAN, self.LIDAR_SPAN)
            self._blend_rect(surface, rect, color, border=color)

    def draw_selection(
        self,
        surface: pygame.Surface,
        rect: Rect,
        *,
        fill: Color = Palette.SELECTION,
        border: Color = Palette.SELECTION_BORDER,
    ) -> None:
        self._blend_rect(surface, rect, fill, border=border)

    def draw_hover(self, surface: pygame.Surface, cell: Cell) -> None:
        if not self.viewport.contains(cell):
            return
        x, y = self.viewport.cell_origin(cell.row, cell.col)
        size = self.viewport.cell_size
        pygame.draw.rect(surface, Palette.GRID, self._surface_rect(x, y, size, size), width=2)

    # Internal helpers -------------------------------------------------

    def _to_surface(self, x: float, y: float) -> tuple[int, int]:
        ratio = self.viewport.pixel_ratio
        return int(round(x * ratio)), int(round(y * ratio))

    def _surface_rect(self, x: float, y: float, width: float, height: float) -> pygame.Rect:
        ratio = self.viewport.pixel_ratio
        left, top = self._to_surface(x, y)
        return pygame.Rect(
            left,
            top,
            max(0, int(round(width * ratio))),
            max(0, int(round(height * ratio))),
        )

    def _fill(
        self, surface: pygame.Surface, color: Color, x: float, y: float, width: float, height: float
    ) -> None:
        surface.fill(color, self._surface_rect(x, y, width, height))

    def _blend_rect(
        self, surface: pygame.Surface, rect: Rect, fill: Color, *, border: Color
    ) -> None:
        """Draw a translucent block of cells with a solid outline."""

        x, y = self.viewport.cell_origin(rect.row, rect.col)
        size = self.viewport.cell_size
        target = self._surface_rect(x, y, rect.width * size, rect.height * size)
        if target.width <= 0 or target.height <= 0:
            return
        overlay = pygame.Surface(target.size, pygame.SRCALPHA)
        overlay.fill(fill)
        surface.blit(overlay, target.topleft)
        pygame.draw.rect(surface, border[:3], target, width=2)
