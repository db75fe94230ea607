"""Game domain models for Uncharted Ruins."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple, Union

from .tools import Tool

ShapeMask = Tuple[Tuple[int, ...], ...]


class Severity(str, Enum):
    """Tone of a player-facing log message."""

    NORMAL = "normal"
    ALERT = "alert"
    SUCCESS = "success"


class Cue(str, Enum):
    """Audio cues fired by the game controller."""

    SCAN = "scan"
    LIDAR = "lidar"
    DRILL = "drill"
    DRILL_HIT = "drill_hit"
    EXCAVATE = "excavate"
    DISCOVERY = "discovery"
    TERRAQUEST = "terraquest"
    VICTORY = "victory"
    ERROR = "error"
    CLICK = "click"


@dataclass(frozen=True, slots=True)
class Cell:
    """A grid coordinate addressed by row and column."""

    row: int
    col: int


@dataclass(frozen=True, slots=True)
class Rect:
    """Axis-aligned block of cells anchored at its top-left corner."""

    row: int
    col: int
    width: int
    height: int

    def cells(self) -> list[Cell]:
        return [
            Cell(r, c)
            for r in range(self.row, self.row + self.height)
            for c in range(self.col, self.col + self.width)
        ]


@dataclass(slots=True)
class Structure:
    """A buried structure and the grid cells it occupies."""

    type: str
    cells: List[int]
    width: int
    height: int
    shape: ShapeMask | None = None
    found: bool = False

    def summary(self) -> "StructureSummary":
        return StructureSummary(
            type=self.type,
            found=self.found,
            width=self.width,
            height=self.height,
            shape=self.shape,
        )


@dataclass(frozen=True, slots=True)
class StructureSummary:
    """Read-only view of a structure handed to the presentation layer."""

    type: str
    found: bool
    width: int
    height: int
    shape: ShapeMask | None = None

    def is_filled(self, row: int, col: int) -> bool:
        """Return whether the footprint cell at *row*, *col* is solid."""

        if self.shape is None:
            return True
        return bool(self.shape[row][col])


@dataclass(frozen=True, slots=True)
class NoGesture:
    """Nothing is waiting on a follow-up gesture."""


@dataclass(frozen=True, slots=True)
class AwaitingConfirmTap:
    """A touch tap that needs a second tap on the same cell and tool."""

    cell: Cell
    tool: Tool


@dataclass(frozen=True, slots=True)
class ActiveSelection:
    """An excavation rectangle being built by a drag or touch."""

    anchor: Cell
    rect: Rect


PendingGesture = Union[NoGesture, AwaitingConfirmTap, ActiveSelection]

NO_GESTURE = NoGesture()


@dataclass(frozen=True, slots=True)
class Identity:
    """The surveyor playing the current session."""

    user_id: str
    gamertag: str

    @property
    def is_guest(self) -> bool:
        return self is GUEST or self.user_id == GUEST.user_id


GUEST = Identity(user_id="guest", gamertag="GUEST")


@dataclass(frozen=True, slots=True)
class CompletionReport:
    """Final tally delivered once when every structure is found."""

    final_funds: int
    structures_found: int
    actions_used: int

    @property
    def is_success(self) -> bool:
        return self.final_funds > 0


@dataclass(slots=True)
class MarkerHistory:
    """Permanent overlays left behind by scan and lidar actions."""

    scans: List[Cell] = field(default_factory=list)
    lidars: List[Cell] = field(default_factory=list)
