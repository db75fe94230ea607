"""Pygame application bootstrap for Uncharted Ruins."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Sequence

import pygame

from .audio import AudioCues
from .config import GameConfig
from .input import EventRouter
from .models import GUEST, CompletionReport, Identity, Severity, StructureSummary
from .presentation import FanoutSink, LoggingSink
from .renderer import Palette, Renderer
from .resources import ResourceManager
from .scheduler import Scheduler
from .session import GameSession
from .tools import TOOL_CATALOG, Tool, tool_for_hotkey

logger = logging.getLogger(__name__)

SEVERITY_COLORS = {
    Severity.NORMAL: (170, 220, 170),
    Severity.ALERT: (255, 90, 90),
    Severity.SUCCESS: (0, 255, 65),
}


@dataclass
class Popup:
    label: str
    reward: int
    shown_ms: int


class HudSink:
    """Presentation sink that keeps the latest state for the side panel.

    Discovery popups are shown one at a time, in the order they were raised.
    Each popup's dismissal is scheduled when it is shown and only ever
    closes that popup.
    """

    MAX_MESSAGES = 12

    def __init__(self, scheduler: Scheduler, popup_duration_ms: int = 1500) -> None:
        self.scheduler = scheduler
        self.popup_duration_ms = popup_duration_ms
        self.funds = 0
        self.tool = Tool.SCAN
        self.targets: list[StructureSummary] = []
        self.messages: deque[tuple[str, Severity]] = deque(maxlen=self.MAX_MESSAGES)
        self.popup: Popup | None = None
        self.queued: deque[Popup] = deque()

    def reset(self) -> None:
        self.messages.clear()
        self.targets = []
        self.popup = None
        self.queued.clear()

    def funds_changed(self, amount: int) -> None:
        self.funds = amount

    def log_message(self, text: str, severity: Severity = Severity.NORMAL) -> None:
        self.messages.append((text, severity))

    def tool_changed(self, tool: Tool) -> None:
        self.tool = tool

    def targets_changed(self, targets: Sequence[StructureSummary]) -> None:
        self.targets = list(targets)

    def discovery(self, label: str, reward: int) -> None:
        self.queued.append(Popup(label=label, reward=reward, shown_ms=0))
        if self.popup is None:
            self._show_next()

    def dismiss_popup(self, popup: Popup) -> None:
        if self.popup is not popup:
            return
        self.popup = None
        self._show_next()

    def _show_next(self) -> None:
        if not self.queued:
            return
        popup = self.queued.popleft()
        popup.shown_ms = self.scheduler.clock()
        self.popup = popup
        self.scheduler.call_later(
            self.popup_duration_ms, lambda: self.dismiss_popup(popup), label="popup"
        )


class SurveyApp:
    """Minimal pygame wrapper that wires together the systems."""

    PANEL_WIDTH = 340
    PANEL_MARGIN = 16
    TOOL_BUTTON_HEIGHT = 38
    BACKGROUND = Palette.BACKGROUND
    PANEL_COLOR = (12, 22, 16)

    def __init__(
        self,
        config: GameConfig | None = None,
        identity: Identity | None = None,
        on_complete: Callable[[CompletionReport], None] | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.identity = identity or GUEST
        self.on_complete = on_complete
        self.resources = ResourceManager(self.config.assets)
        self.audio = AudioCues(self.resources)
        scheduler = Scheduler(clock=self.now)
        self.hud = HudSink(scheduler, self.config.timing.popup_duration_ms)
        self.router = EventRouter()
        self.session = GameSession(
            self.config,
            identity=self.identity,
            on_complete=self._handle_completion,
            sink=FanoutSink(self.hud, LoggingSink()),
            audio=self.audio,
            router=self.router,
            scheduler=scheduler,
            window_size=self._window_size,
        )
        self.renderer: Renderer | None = None
        self.screen: pygame.Surface | None = None
        self.clock: pygame.time.Clock | None = None
        self.running = False
        self.report: CompletionReport | None = None
        self.tool_buttons: list[tuple[Tool, pygame.Rect]] = []

    def now(self) -> int:
        return pygame.time.get_ticks()

    def setup(self) -> None:
        """Initialise pygame and the display surface."""

        pygame.init()
        display = self.config.display
        flags = pygame.RESIZABLE
        size = (display.width, display.height)

        if display.fullscreen:
            flags = pygame.FULLSCREEN
            if display.width <= 0 or display.height <= 0:
                info = pygame.display.Info()
                size = (info.current_w, info.current_h)

        self.screen = pygame.display.set_mode(size, flags)
        pygame.display.set_caption(display.caption)
        self.clock = pygame.time.Clock()
        self.running = True
        self.new_game()

    def new_game(self) -> None:
        """Start (or restart) a survey, discarding the previous one."""

        self.hud.reset()
        self.report = None
        controller = self.session.start()
        self.renderer = Renderer(controller.site, self.session.viewport)
        self._layout()

    def handle_events(self) -> None:
        """Consume pygame events."""

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type in (pygame.VIDEORESIZE, pygame.WINDOWSIZECHANGED):
                self._layout()
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)
            elif (
                event.type == pygame.MOUSEBUTTONDOWN
                and event.button == 1
                and self._handle_panel_click(event.pos)
            ):
                continue
            else:
                self.router.dispatch(event)

    def update(self) -> None:
        """Run due timers; the controller decides whether the game continues."""

        controller = self.session.controller
        if controller is not None:
            controller.frame(self.now())

    def draw(self) -> None:
        """Render the current frame."""

        assert self.screen is not None
        controller = self.session.controller
        if controller is not None and controller.is_running:
            self.screen.fill(self.BACKGROUND)
            if self.renderer is not None:
                self.renderer.render(
                    self.screen,
                    scans=controller.markers.scans,
                    lidars=controller.markers.lidars,
                    tool=controller.tool,
                    selection=controller.selection,
                    hover=controller.hover,
                )
            self._draw_panel(self.screen)
            self._draw_popup(self.screen)
        elif self.report is not None:
            self._draw_completion(self.screen, self.report)
        pygame.display.flip()

    def run(self) -> None:
        """Run the main loop until the app stops."""

        if not self.running:
            self.setup()

        assert self.clock is not None
        display = self.config.display

        while self.running:
            self.handle_events()
            self.clock.tick(display.frame_rate)
            self.update()
            self.draw()

        self.session.close()
        pygame.quit()

    # Internal helpers -------------------------------------------------

    def _window_size(self) -> tuple[int, int]:
        if self.screen is None:
            return (self.config.display.width, self.config.display.height)
        return self.screen.get_size()

    def _layout(self) -> None:
        """Recompute the grid viewport and tool buttons for the window size."""

        width, height = self._window_size()
        ratio = self.config.display.pixel_ratio or 1.0
        canvas_width = max(0, width - self.PANEL_WIDTH)
        self.session.resize(canvas_width / ratio, height / ratio, ratio)
        logger.debug(
            "Canvas %dx%d, cell size %.1f",
            canvas_width,
            height,
            self.session.viewport.cell_size,
        )

        left = canvas_width + self.PANEL_MARGIN
        button_width = self.PANEL_WIDTH - 2 * self.PANEL_MARGIN
        top = 70
        self.tool_buttons = []
        for entry in TOOL_CATALOG.values():
            rect = pygame.Rect(left, top, button_width, self.TOOL_BUTTON_HEIGHT)
            self.tool_buttons.append((entry.tool, rect))
            top += self.TOOL_BUTTON_HEIGHT + 6

    def _handle_key(self, event: pygame.event.Event) -> None:
        controller = self.session.controller
        if event.key == pygame.K_r:
            self.new_game()
        elif event.key == pygame.K_m:
            enabled = self.audio.toggle()
            self.hud.log_message(f"Audio {'on' if enabled else 'off'}")
        elif event.key == pygame.K_ESCAPE and controller is not None:
            controller.cancel_pending()
        elif controller is not None:
            tool = tool_for_hotkey(event.unicode)
            if tool is not None:
                controller.set_tool(tool)

    def _handle_panel_click(self, position: tuple[int, int]) -> bool:
        controller = self.session.controller
        if controller is None:
            return False
        for tool, rect in self.tool_buttons:
            if rect.collidepoint(position):
                controller.set_tool(tool)
                return True
        return False

    def _handle_completion(self, report: CompletionReport) -> None:
        self.report = report
        if self.on_complete is not None:
            self.on_complete(report)

    # Drawing ----------------------------------------------------------

    def _draw_panel(self, surface: pygame.Surface) -> None:
        width, height = surface.get_size()
        left = width - self.PANEL_WIDTH
        pygame.draw.rect(surface, self.PANEL_COLOR, pygame.Rect(left, 0, self.PANEL_WIDTH, height))
        pygame.draw.line(surface, Palette.GRID_DIM, (left, 0), (left, height), 2)

        x = left + self.PANEL_MARGIN
        title_font = self.resources.font(22, bold=True)
        body_font = self.resources.font(15)
        surface.blit(title_font.render(f"${self.hud.funds:,}", True, Palette.GRID), (x, 18))
        tag = body_font.render(self.identity.gamertag, True, (140, 180, 140))
        surface.blit(tag, (width - self.PANEL_MARGIN - tag.get_width(), 24))

        controller = self.session.controller
        for tool, rect in self.tool_buttons:
            entry = TOOL_CATALOG[tool]
            active = tool is self.hud.tool
            locked = tool is Tool.TERRAQUEST and controller is not None and (
                controller.terraquest_used or not controller.is_terraquest_unlocked()
            )
            border = Palette.GRID if active else Palette.GRID_DIM
            pygame.draw.rect(surface, (20, 40, 28) if active else self.PANEL_COLOR, rect)
            pygame.draw.rect(surface, border, rect, width=1)
            text_color = (90, 90, 90) if locked else (220, 255, 220)
            label = body_font.render(f"{entry.hotkey} {entry.name}", True, text_color)
            cost = body_font.render(f"${entry.cost}", True, text_color)
            surface.blit(label, (rect.x + 8, rect.centery - label.get_height() // 2))
            surface.blit(cost, (rect.right - 8 - cost.get_width(), rect.centery - cost.get_height() // 2))

        y = self.tool_buttons[-1][1].bottom + 18 if self.tool_buttons else 70
        y = self._draw_targets(surface, x, y, body_font)
        self._draw_messages(surface, x, y + 12, body_font)

    def _draw_targets(self, surface: pygame.Surface, x: int, y: int, font: pygame.font.Font) -> int:
        """Draw a mini footprint for each target and return the next free row."""

        pip = 4
        for target in self.hud.targets:
            color = Palette.GRID if target.found else (120, 140, 120)
            for i in range(target.height):
                for j in range(target.width):
                    if target.is_filled(i, j):
                        pygame.draw.rect(
                            surface,
                            color,
                            pygame.Rect(x + j * (pip + 1), y + i * (pip + 1), pip, pip),
                        )
            label = target.type.upper() + ("  ✓" if target.found else "")
            text = font.render(label, True, color)
            surface.blit(text, (x + 34, y))
            y += max(26, target.height * (pip + 1) + 6)
        return y

    def _draw_messages(self, surface: pygame.Surface, x: int, y: int, font: pygame.font.Font) -> None:
        _, height = surface.get_size()
        line_height = font.get_linesize()
        visible = max(0, (height - y - self.PANEL_MARGIN) // max(1, line_height))
        if not visible:
            return
        for text, severity in list(self.hud.messages)[-visible:]:
            rendered = font.render(f"> {text}", True, SEVERITY_COLORS[severity])
            surface.blit(rendered, (x, y))
            y += line_height

    def _draw_popup(self, surface: pygame.Surface) -> None:
        """Draw the discovery banner, fading out over its lifetime."""

        popup = self.hud.popup
        if popup is None:
            return
        duration = max(1, self.config.timing.popup_duration_ms)
        age = self.now() - popup.shown_ms
        fade = max(0.0, min(1.0, 1.0 - age / duration))

        title_font = self.resources.font(40, bold=True)
        body_font = self.resources.font(24)
        lines = [
            title_font.render("DISCOVERY!", True, Palette.GRID),
            body_font.render(popup.label.upper(), True, (255, 255, 255)),
            body_font.render(f"+${popup.reward:,}", True, Palette.DRILL_HIT[:3]),
        ]
        width = max(line.get_width() for line in lines) + 60
        height = sum(line.get_height() for line in lines) + 50
        banner = pygame.Surface((width, height), pygame.SRCALPHA)
        banner.fill((0, 0, 0, 200))
        pygame.draw.rect(banner, Palette.GRID, banner.get_rect(), width=2)
        top = 25
        for line in lines:
            banner.blit(line, ((width - line.get_width()) // 2, top))
            top += line.get_height()
        banner.fill((255, 255, 255, int(round(255 * fade))), special_flags=pygame.BLEND_RGBA_MULT)

        canvas_width = surface.get_width() - self.PANEL_WIDTH
        rect = banner.get_rect(center=(canvas_width // 2, surface.get_height() // 2))
        surface.blit(banner, rect)

    def _draw_completion(self, surface: pygame.Surface, report: CompletionReport) -> None:
        surface.fill((0, 0, 0))
        title_font = self.resources.font(40, bold=True)
        body_font = self.resources.font(22)
        color = SEVERITY_COLORS[Severity.SUCCESS] if report.is_success else SEVERITY_COLORS[Severity.ALERT]
        lines = [
            (title_font, "MISSION SUCCESSFUL" if report.is_success else "MISSION FAILURE", color),
            (body_font, f"FINAL FUNDS  ${report.final_funds:,}", (230, 230, 230)),
            (
                body_font,
                f"STRUCTURES   {report.structures_found}/{len(self.hud.targets)}",
                (230, 230, 230),
            ),
            (body_font, f"ACTIONS USED {report.actions_used}", (230, 230, 230)),
        ]
        if self.identity.is_guest:
            lines.append((body_font, "FREE PLAY MODE - Score not recorded", (0, 220, 255)))
        lines.append((body_font, "Press R to play again", (150, 150, 150)))

        y = surface.get_height() // 3
        for font, text, text_color in lines:
            rendered = font.render(text, True, text_color)
            surface.blit(rendered, ((surface.get_width() - rendered.get_width()) // 2, y))
            y += rendered.get_height() + 12
