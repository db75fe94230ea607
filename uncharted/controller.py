"""Central state machine wiring tools, gestures, the map and the budget."""

from __future__ import annotations

import logging
from typing import Callable

from .config import GameConfig
from .economy import Economy, RewardKind
from .grid import SiteMap
from .models import (
    NO_GESTURE,
    ActiveSelection,
    AwaitingConfirmTap,
    Cell,
    CompletionReport,
    Cue,
    MarkerHistory,
    PendingGesture,
    Rect,
    Severity,
    Structure,
)
from .presentation import AudioSink, PresentationSink, SilentAudio
from .scheduler import Scheduler
from .tools import TOOL_CATALOG, Tool, tool_name
from .viewport import Viewport

logger = logging.getLogger(__name__)

Point = tuple[float, float]

# Lidar proximity tiers reported in the message log.
STRONG_SIGNAL = 2
MODERATE_SIGNAL = 5

REVEAL_LABEL = "TerraQuest Scan"


def clamp_selection(anchor: Cell, current: Cell, rows: int, cols: int, max_span: int = 5) -> Rect:
    """Build the excavation rectangle spanned by *anchor* and *current*.

    The rectangle is clipped to the grid. A dimension longer than
    *max_span* is cut back to exactly *max_span* cells measured from the
    anchor, in the direction of the drag.
    """

    top = max(0, min(anchor.row, current.row))
    bottom = min(rows - 1, max(anchor.row, current.row))
    left = max(0, min(anchor.col, current.col))
    right = min(cols - 1, max(anchor.col, current.col))

    if bottom - top + 1 > max_span:
        if current.row < anchor.row:
            top = anchor.row - max_span + 1
            bottom = anchor.row
        else:
            top = anchor.row
            bottom = anchor.row + max_span - 1
    if right - left + 1 > max_span:
        if current.col < anchor.col:
            left = anchor.col - max_span + 1
            right = anchor.col
        else:
            left = anchor.col
            right = anchor.col + max_span - 1

    return Rect(row=top, col=left, width=right - left + 1, height=bottom - top + 1)


def _at(cell: Cell) -> str:
    return f"[{cell.col}, {cell.row}]"


class GameController:
    """Dispatches resolved gestures to the equipped tool.

    Gesture coordinates arrive as physical canvas pixels and are mapped to
    cells through the shared :class:`Viewport`. All mutation happens
    synchronously inside these handlers or inside scheduler callbacks that
    belong to the controller's generation.
    """

    def __init__(
        self,
        site: SiteMap,
        economy: Economy,
        viewport: Viewport,
        *,
        sink: PresentationSink,
        scheduler: Scheduler,
        audio: AudioSink | None = None,
        on_complete: Callable[[CompletionReport], None] | None = None,
        config: GameConfig | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.site = site
        self.economy = economy
        self.viewport = viewport
        self.sink = sink
        self.audio = audio or SilentAudio()
        self.scheduler = scheduler
        self.on_complete = on_complete
        self.generation = scheduler.generation

        self.tool = Tool.SCAN
        self.markers = MarkerHistory()
        self.hover: Cell | None = None
        self.pending: PendingGesture = NO_GESTURE
        self.terraquest_used = False
        self.is_running = True
        self.report: CompletionReport | None = None
        self._completion_scheduled = False

        self.economy.on_funds_changed = self.sink.funds_changed

    def start(self) -> None:
        """Publish the initial state to the presentation sink."""

        self.sink.funds_changed(self.economy.funds)
        self.sink.tool_changed(self.tool)
        self.sink.log_message(f"System Online. Funds: ${self.economy.funds}")
        self.sink.log_message("Select tool to begin survey.")
        self._publish_targets()

    def shutdown(self) -> None:
        """Stop accepting input; used when the session is torn down."""

        self.is_running = False
        self.pending = NO_GESTURE
        self.hover = None

    def frame(self, now_ms: int | None = None) -> bool:
        """Run due delayed callbacks and report whether to keep rendering."""

        self.scheduler.run_due(now_ms)
        return self.is_running

    # State helpers ----------------------------------------------------

    @property
    def selection(self) -> Rect | None:
        if isinstance(self.pending, ActiveSelection):
            return self.pending.rect
        return None

    @property
    def pending_tap(self) -> AwaitingConfirmTap | None:
        if isinstance(self.pending, AwaitingConfirmTap):
            return self.pending
        return None

    def found_count(self) -> int:
        return self.site.found_count()

    def is_terraquest_unlocked(self) -> bool:
        return TOOL_CATALOG[Tool.TERRAQUEST].is_unlocked(self.found_count(), False)

    def is_valid(self, cell: Cell) -> bool:
        return self.site.in_bounds(cell.row, cell.col)

    def cancel_pending(self) -> None:
        self.pending = NO_GESTURE

    # Tool selection ---------------------------------------------------

    def set_tool(self, tool: Tool | str) -> bool:
        """Equip *tool*, refusing the area reveal while it is gated."""

        if not self.is_running:
            return False
        tool = Tool.parse(tool)
        if tool is Tool.TERRAQUEST:
            if not self.is_terraquest_unlocked():
                self._refuse("TerraQuest LOCKED! Find 3 structures to unlock.")
                return False
            if self.terraquest_used:
                self._refuse("TerraQuest already deployed this mission.")
                return False
        self.tool = tool
        self.audio.play(Cue.CLICK)
        self.sink.tool_changed(tool)
        self.sink.log_message(f"Equipped: {tool_name(tool)}")
        return True

    # Pointer gestures -------------------------------------------------

    def handle_hover(self, position: Point) -> None:
        self.hover = self.viewport.to_grid_coords(*position)

    def handle_pointer_start(self, position: Point) -> None:
        if not self.is_running:
            return
        cell = self.viewport.to_grid_coords(*position)
        if not self.is_valid(cell):
            return
        if self.tool is Tool.EXCAVATE:
            self.pending = ActiveSelection(anchor=cell, rect=Rect(cell.row, cell.col, 1, 1))

    def handle_pointer_drag(self, start: Point, current: Point) -> None:
        if not self.is_running or self.tool is not Tool.EXCAVATE:
            return
        if not isinstance(self.pending, ActiveSelection):
            return
        current_cell = self.viewport.to_grid_coords(*current)
        self.hover = current_cell
        rect = clamp_selection(
            self.pending.anchor,
            current_cell,
            self.site.rows,
            self.site.cols,
            self.config.grid.max_selection_span,
        )
        self.pending = ActiveSelection(anchor=self.pending.anchor, rect=rect)

    def handle_pointer_end(self, start: Point, end: Point) -> None:
        if not self.is_running:
            return
        cell = self.viewport.to_grid_coords(*end)
        if not self.is_valid(cell):
            if isinstance(self.pending, ActiveSelection):
                self.pending = NO_GESTURE
            return

        if self.tool is Tool.EXCAVATE:
            selection = self.selection
            if selection is not None:
                self.pending = NO_GESTURE
                self.perform_excavation(selection)
            return
        self.act_at(cell)

    # Touch gestures ---------------------------------------------------

    def handle_touch_start(self, position: Point) -> None:
        if not self.is_running:
            return
        cell = self.viewport.to_grid_coords(*position)
        if not self.is_valid(cell):
            return
        if self.tool is Tool.EXCAVATE:
            self.pending = ActiveSelection(anchor=cell, rect=Rect(cell.row, cell.col, 1, 1))
        self.hover = cell

    def handle_touch_end(self, start: Point, end: Point, long_press: bool) -> None:
        """Resolve a finished touch into an action, a pending tap or a hint."""

        if not self.is_running:
            return
        cell = self.viewport.to_grid_coords(*end)
        if not self.is_valid(cell):
            self.pending = NO_GESTURE
            return

        if self.tool is Tool.EXCAVATE:
            selection = self.selection
            self.pending = NO_GESTURE
            if selection is None:
                return
            if long_press:
                self.perform_excavation(selection)
            else:
                self.sink.log_message("Hold to confirm excavation", Severity.ALERT)
            return

        tap = self.pending_tap
        confirmed = tap is not None and tap.cell == cell and tap.tool is self.tool
        if long_press or confirmed:
            self.pending = NO_GESTURE
            self.act_at(cell)
            return

        self.pending = AwaitingConfirmTap(cell=cell, tool=self.tool)
        self.sink.log_message(f"Tap again to use {tool_name(self.tool)} at {_at(cell)}")

    # Actions ----------------------------------------------------------

    def act_at(self, cell: Cell) -> None:
        """Use the equipped single-cell tool on *cell*."""

        if not self.is_running or not self.is_valid(cell):
            return
        if self.tool is Tool.SCAN:
            self.perform_scan(cell)
        elif self.tool is Tool.LIDAR:
            self.perform_lidar(cell)
        elif self.tool is Tool.DRILL:
            self.perform_drill(cell)
        elif self.tool is Tool.TERRAQUEST:
            self.perform_terraquest(cell)

    def perform_scan(self, cell: Cell) -> None:
        self.economy.spend(Tool.SCAN)
        self.audio.play(Cue.SCAN)
        self.markers.scans.append(cell)
        self.sink.log_message(f"Imaging complete at {_at(cell)}")

    def perform_lidar(self, cell: Cell) -> float:
        self.economy.spend(Tool.LIDAR)
        self.audio.play(Cue.LIDAR)
        self.markers.lidars.append(cell)
        proximity = self.site.proximity(cell.row, cell.col)
        if proximity <= STRONG_SIGNAL:
            self.sink.log_message(
                f"LiDAR: STRONG signal at {_at(cell)}! Structure very close.",
                Severity.SUCCESS,
            )
        elif proximity <= MODERATE_SIGNAL:
            self.sink.log_message(f"LiDAR: Moderate signal at {_at(cell)}. Structure nearby.")
        else:
            self.sink.log_message(
                f"LiDAR: Weak signal at {_at(cell)}. No structures detected nearby."
            )
        return proximity

    def perform_drill(self, cell: Cell) -> bool:
        self.economy.spend(Tool.DRILL)
        self.audio.play(Cue.DRILL)
        hit = self.site.drill(cell.row, cell.col)
        if hit:
            self.audio.play(Cue.DRILL_HIT)
            self.sink.log_message(f"GPR ECHO at {_at(cell)}!", Severity.SUCCESS)
        else:
            self.sink.log_message(f"No echo at {_at(cell)}.")
        return hit

    def perform_excavation(self, rect: Rect) -> list[Structure]:
        """Dig out *rect*, paying a reward for each structure it completes."""

        if not self.is_running:
            return []
        self.economy.spend(Tool.EXCAVATE)
        self.audio.play(Cue.EXCAVATE)
        found = self.site.excavate(rect)
        if not found:
            self.sink.log_message("Excavation yielded no complete structures.")
            return found

        for structure in found:
            self.audio.play(Cue.DISCOVERY)
            reward = self.economy.reward(RewardKind.STRUCTURE)
            self.sink.log_message(
                f"{structure.type.upper()} EXCAVATED! +${reward}", Severity.SUCCESS
            )
            self.sink.discovery(structure.type, reward)
        self._publish_targets()

        if self.site.all_found():
            self._schedule_completion()
        return found

    def perform_terraquest(self, cell: Cell | None = None) -> bool:
        """Deploy the one-shot area reveal over every unfound structure."""

        if self.terraquest_used:
            self._refuse("TerraQuest already deployed this mission!")
            return False
        if not self.is_terraquest_unlocked():
            self._refuse("TerraQuest LOCKED! Find 3 structures first.")
            return False

        self.economy.spend(Tool.TERRAQUEST)
        self.audio.play(Cue.TERRAQUEST)
        self.terraquest_used = True
        self.sink.log_message("TERRAQUEST DEPLOYED! Scanning entire site...", Severity.SUCCESS)

        revealed = self.site.reveal_unfound()
        if revealed:
            self.sink.log_message(
                f"TerraQuest revealed {len(revealed)} hidden structure(s)!",
                Severity.SUCCESS,
            )
            self.sink.discovery(REVEAL_LABEL, 0)
        else:
            self.sink.log_message("TerraQuest: No hidden structures remaining.")

        self.tool = Tool.EXCAVATE
        self.sink.tool_changed(self.tool)
        return True

    # Completion -------------------------------------------------------

    def _schedule_completion(self) -> None:
        if self._completion_scheduled:
            return
        self._completion_scheduled = True
        self.scheduler.call_later(
            self.config.timing.completion_delay_ms, self._complete, label="completion"
        )

    def _complete(self) -> None:
        if not self.is_running or self.scheduler.generation != self.generation:
            return
        self.is_running = False
        self.pending = NO_GESTURE
        self.audio.play(Cue.VICTORY)
        self.sink.log_message("ALL STRUCTURES FOUND. MISSION SUCCESS!", Severity.SUCCESS)
        self.report = CompletionReport(
            final_funds=self.economy.funds,
            structures_found=self.found_count(),
            actions_used=self.economy.actions_used,
        )
        logger.info(
            "Survey complete: funds=%d structures=%d actions=%d",
            self.report.final_funds,
            self.report.structures_found,
            self.report.actions_used,
        )
        if self.on_complete is not None:
            self.on_complete(self.report)

    # Internal helpers -------------------------------------------------

    def _refuse(self, message: str) -> None:
        self.audio.play(Cue.ERROR)
        self.sink.log_message(message, Severity.ALERT)

    def _publish_targets(self) -> None:
        self.sink.targets_changed([structure.summary() for structure in self.site.structures])
