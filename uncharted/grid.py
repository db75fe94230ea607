"""Hidden survey map: structure placement and sensor queries."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Iterable, List

from .models import Rect, ShapeMask, Structure

logger = logging.getLogger(__name__)

PYRAMID_SHAPE: ShapeMask = (
    (0, 0, 1, 0, 0),
    (0, 1, 1, 1, 0),
    (1, 1, 1, 1, 1),
)

TOMB_SHAPE: ShapeMask = (
    (1, 1, 1),
    (1, 0, 1),
    (1, 0, 1),
)

# 2x2 block probed by the lidar drone, relative to its anchor.
PROBE_OFFSETS = ((0, 0), (0, 1), (1, 0), (1, 1))


def transpose(shape: ShapeMask) -> ShapeMask:
    return tuple(zip(*shape))


@dataclass(frozen=True)
class Blueprint:
    """Template for one kind of buried structure."""

    type: str
    width: int
    height: int
    shape: ShapeMask | None = None
    rotatable: bool = False

    def oriented(self, rotated: bool) -> tuple[int, int, ShapeMask | None]:
        """Return ``(width, height, shape)`` for the requested orientation."""

        if not rotated:
            return self.width, self.height, self.shape
        shape = transpose(self.shape) if self.shape is not None else None
        return self.height, self.width, shape


BLUEPRINTS: tuple[Blueprint, ...] = (
    Blueprint("Monument", 4, 4),
    Blueprint("Wall", 4, 1, rotatable=True),
    Blueprint("Tomb", 3, 3, shape=TOMB_SHAPE),
    Blueprint("Relic", 2, 2),
    Blueprint("Pyramid", 5, 3, shape=PYRAMID_SHAPE, rotatable=True),
)


class SiteMap:
    """Owns the hidden grid layers and the structures buried in them.

    Every layer is a flat list indexed by ``row * cols + col``. ``occupancy``
    is fixed once :meth:`generate` returns; ``drilled`` and ``excavated`` only
    ever flip from ``False`` to ``True``.
    """

    def __init__(
        self,
        rows: int = 20,
        cols: int = 20,
        *,
        rng: random.Random | None = None,
        placement_attempts: int = 100,
        blueprints: Iterable[Blueprint] = BLUEPRINTS,
        generate: bool = True,
    ) -> None:
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.rng = rng or random.Random()
        self.placement_attempts = placement_attempts
        self.blueprints = tuple(blueprints)
        size = rows * cols
        self.occupancy: List[bool] = [False] * size
        self.scanned: List[float] = [0.0] * size
        self.drilled: List[bool] = [False] * size
        self.excavated: List[bool] = [False] * size
        self.structures: List[Structure] = []
        self._occupied_cells: List[tuple[int, int]] = []
        if generate:
            self.generate()

    # Generation -------------------------------------------------------

    def generate(self) -> None:
        """Clear the map and bury one of each blueprint."""

        self.occupancy = [False] * (self.rows * self.cols)
        self.structures = []
        self._occupied_cells = []
        for blueprint in self.blueprints:
            self.place(blueprint)

    def place(self, blueprint: Blueprint) -> Structure | None:
        """Bury *blueprint* at a random free spot, giving up after the attempt cap."""

        for attempt in range(self.placement_attempts):
            rotated = blueprint.rotatable and self.rng.random() > 0.5
            width, height, _ = blueprint.oriented(rotated)
            if width > self.cols or height > self.rows:
                continue
            row = self.rng.randrange(self.rows - height + 1)
            col = self.rng.randrange(self.cols - width + 1)
            if self.can_place(row, col, width, height):
                structure = self.commit(blueprint, row, col, rotated=rotated)
                logger.debug(
                    "Placed %s at (%d, %d) after %d attempt(s)",
                    blueprint.type,
                    row,
                    col,
                    attempt + 1,
                )
                return structure

        logger.warning(
            "Could not place %s after %d attempts; omitting it from this site",
            blueprint.type,
            self.placement_attempts,
        )
        return None

    def can_place(self, row: int, col: int, width: int, height: int) -> bool:
        """Return whether the whole footprint is inside the grid and unoccupied."""

        if row < 0 or col < 0 or row + height > self.rows or col + width > self.cols:
            return False
        for r in range(row, row + height):
            for c in range(col, col + width):
                if self.occupancy[self.index(r, c)]:
                    return False
        return True

    def commit(
        self, blueprint: Blueprint, row: int, col: int, *, rotated: bool = False
    ) -> Structure:
        """Write *blueprint* into the occupancy layer at *row*, *col*."""

        width, height, shape = blueprint.oriented(rotated)
        if not self.can_place(row, col, width, height):
            raise ValueError(
                f"{blueprint.type} does not fit at ({row}, {col}) as {width}x{height}"
            )

        cells: list[int] = []
        for i in range(height):
            for j in range(width):
                if shape is not None and not shape[i][j]:
                    continue
                index = self.index(row + i, col + j)
                self.occupancy[index] = True
                self._occupied_cells.append((row + i, col + j))
                cells.append(index)

        structure = Structure(
            type=blueprint.type,
            cells=cells,
            width=width,
            height=height,
            shape=shape,
        )
        self.structures.append(structure)
        return structure

    # Queries ----------------------------------------------------------

    def index(self, row: int, col: int) -> int:
        return row * self.cols + col

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def is_occupied(self, row: int, col: int) -> bool:
        return self.occupancy[self.index(row, col)]

    def density(self, row: int, col: int, radius: int = 2) -> float:
        """Return the occupied fraction of the window around *row*, *col*.

        The ``(2 * radius + 1)`` square window is clipped to the grid, so
        corner probes average over fewer cells.
        """

        count = 0
        total = 0
        for r in range(max(0, row - radius), min(self.rows - 1, row + radius) + 1):
            for c in range(max(0, col - radius), min(self.cols - 1, col + radius) + 1):
                total += 1
                if self.occupancy[self.index(r, c)]:
                    count += 1
        if total == 0:
            return 0.0
        return count / total

    def proximity(self, row: int, col: int) -> float:
        """Return the Manhattan distance from the 2x2 probe to the nearest structure.

        Probe cells falling off the grid are skipped. Returns ``math.inf`` when
        nothing is buried or the whole probe is off the grid.
        """

        best = math.inf
        for dr, dc in PROBE_OFFSETS:
            probe_row = row + dr
            probe_col = col + dc
            if not self.in_bounds(probe_row, probe_col):
                continue
            for occupied_row, occupied_col in self._occupied_cells:
                distance = abs(occupied_row - probe_row) + abs(occupied_col - probe_col)
                if distance < best:
                    best = distance
        return best

    def drill(self, row: int, col: int) -> bool:
        """Mark the cell as drilled and return whether it hides a structure."""

        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) is outside the {self.rows}x{self.cols} grid")
        index = self.index(row, col)
        self.drilled[index] = True
        return self.occupancy[index]

    def excavate(self, rect: Rect) -> list[Structure]:
        """Excavate *rect* and return every structure it newly completes.

        Completion is judged on the cumulative excavated layer, so a
        structure dug out over several calls is reported by the call that
        uncovers its last cell.
        """

        if (
            rect.width <= 0
            or rect.height <= 0
            or not self.in_bounds(rect.row, rect.col)
            or not self.in_bounds(rect.row + rect.height - 1, rect.col + rect.width - 1)
        ):
            raise ValueError(f"{rect} is outside the {self.rows}x{self.cols} grid")

        for cell in rect.cells():
            self.excavated[self.index(cell.row, cell.col)] = True

        newly_found: list[Structure] = []
        for structure in self.structures:
            if structure.found:
                continue
            if all(self.excavated[index] for index in structure.cells):
                structure.found = True
                newly_found.append(structure)
        return newly_found

    def reveal_unfound(self) -> list[Structure]:
        """Mark every cell of each unfound structure as drilled."""

        revealed = [structure for structure in self.structures if not structure.found]
        for structure in revealed:
            for index in structure.cells:
                self.drilled[index] = True
        return revealed

    def found_count(self) -> int:
        return sum(1 for structure in self.structures if structure.found)

    def all_found(self) -> bool:
        return all(structure.found for structure in self.structures)
