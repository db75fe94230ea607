"""Lifecycle of a single survey session and its replacement."""

from __future__ import annotations

import logging
import random
from typing import Callable

from .config import GameConfig
from .controller import GameController
from .economy import Economy
from .grid import SiteMap
from .input import EventRouter, InputController
from .models import GUEST, CompletionReport, Identity
from .presentation import AudioSink, LoggingSink, PresentationSink
from .scheduler import Scheduler
from .viewport import Viewport

logger = logging.getLogger(__name__)


class GameSession:
    """Builds the map, budget, controller and input wiring for one game.

    :meth:`restart` detaches the previous input listener before attaching a
    new one and starts a new scheduler generation, so delayed callbacks from
    the old game are dropped instead of firing into the new one.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        identity: Identity | None = None,
        on_complete: Callable[[CompletionReport], None] | None = None,
        sink: PresentationSink | None = None,
        audio: AudioSink | None = None,
        scheduler: Scheduler | None = None,
        router: EventRouter | None = None,
        window_size: Callable[[], tuple[int, int]] | None = None,
        site_factory: Callable[[random.Random], SiteMap] | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.identity = identity or GUEST
        self.on_complete = on_complete
        self.sink = sink or LoggingSink()
        self.audio = audio
        self.scheduler = scheduler or Scheduler()
        self.router = router or EventRouter()
        self.window_size = window_size
        self.site_factory = site_factory
        self.rng = random.Random(self.config.seed)
        grid = self.config.grid
        self.viewport = Viewport(
            rows=grid.rows,
            cols=grid.cols,
            padding=grid.padding,
            pixel_ratio=self.config.display.pixel_ratio,
        )
        self.games_started = 0
        self.controller: GameController | None = None
        self.input: InputController | None = None

    def start(self) -> GameController:
        """Begin a fresh game, tearing down any game already running."""

        self._teardown()
        self.games_started += 1
        site = self._build_site()
        economy = Economy(self.config.economy)
        controller = GameController(
            site,
            economy,
            self.viewport,
            sink=self.sink,
            scheduler=self.scheduler,
            audio=self.audio,
            on_complete=self._completed,
            config=self.config,
        )
        controller_input = InputController(
            controller,
            self.config.input,
            clock=self.scheduler.clock,
            window_size=self.window_size,
        )
        controller_input.attach(self.router)
        self.controller = controller
        self.input = controller_input
        logger.info(
            "Session %d started for %s (generation %d, %d structure(s) buried)",
            self.games_started,
            self.identity.gamertag,
            self.scheduler.generation,
            len(site.structures),
        )
        controller.start()
        return controller

    def restart(self) -> GameController:
        logger.info("Restarting survey for %s", self.identity.gamertag)
        return self.start()

    def close(self) -> None:
        self._teardown()

    def resize(self, width: float, height: float, pixel_ratio: float | None = None) -> None:
        self.viewport.resize(width, height, pixel_ratio)

    @property
    def is_running(self) -> bool:
        return self.controller is not None and self.controller.is_running

    def _build_site(self) -> SiteMap:
        if self.site_factory is not None:
            return self.site_factory(self.rng)
        grid = self.config.grid
        return SiteMap(
            grid.rows,
            grid.cols,
            rng=self.rng,
            placement_attempts=grid.placement_attempts,
        )

    def _teardown(self) -> None:
        if self.input is not None:
            self.input.detach()
            self.input = None
        if self.controller is not None:
            self.controller.shutdown()
            self.controller = None
            self.scheduler.reset()

    def _completed(self, report: CompletionReport) -> None:
        if self.identity.is_guest:
            logger.info("Free play for %s; score not recorded", self.identity.gamertag)
        if self.on_complete is not None:
            self.on_complete(report)
