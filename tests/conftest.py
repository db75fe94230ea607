"""Shared fixtures for the survey game tests."""

from __future__ import annotations

import os
import random

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from uncharted.config import GameConfig
from uncharted.controller import GameController
from uncharted.economy import Economy
from uncharted.grid import BLUEPRINTS, SiteMap
from uncharted.models import Severity
from uncharted.scheduler import Scheduler
from uncharted.viewport import Viewport

BLUEPRINT_BY_TYPE = {blueprint.type: blueprint for blueprint in BLUEPRINTS}

# Hand-placed layout: (type, row, col, rotated)
LAYOUT = (
    ("Monument", 0, 0, False),
    ("Wall", 10, 10, False),
    ("Tomb", 15, 0, False),
    ("Relic", 5, 15, False),
    ("Pyramid", 15, 12, False),
)


class RecordingSink:
    """Presentation sink that remembers every notification."""

    def __init__(self) -> None:
        self.funds: list[int] = []
        self.messages: list[tuple[str, Severity]] = []
        self.tools = []
        self.targets = []
        self.discoveries: list[tuple[str, int]] = []

    def funds_changed(self, amount):
        self.funds.append(amount)

    def log_message(self, text, severity=Severity.NORMAL):
        self.messages.append((text, severity))

    def tool_changed(self, tool):
        self.tools.append(tool)

    def targets_changed(self, targets):
        self.targets.append(list(targets))

    def discovery(self, label, reward):
        self.discoveries.append((label, reward))

    @property
    def last_message(self) -> str:
        return self.messages[-1][0]


class RecordingAudio:
    def __init__(self) -> None:
        self.cues = []

    def play(self, cue):
        self.cues.append(cue)


class ManualClock:
    def __init__(self, now: int = 0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


def build_site(layout=LAYOUT, rows: int = 20, cols: int = 20) -> SiteMap:
    site = SiteMap(rows, cols, generate=False)
    for kind, row, col, rotated in layout:
        site.commit(BLUEPRINT_BY_TYPE[kind], row, col, rotated=rotated)
    return site


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def audio() -> RecordingAudio:
    return RecordingAudio()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def site() -> SiteMap:
    return build_site()


@pytest.fixture
def viewport() -> Viewport:
    # 20x20 grid of 10px cells with no offset: pixel (x, y) -> cell (y // 10, x // 10).
    view = Viewport(rows=20, cols=20, padding=0)
    view.resize(200, 200)
    return view


@pytest.fixture
def scheduler(clock) -> Scheduler:
    return Scheduler(clock=clock)


@pytest.fixture
def make_controller(site, viewport, sink, audio, scheduler):
    def factory(config: GameConfig | None = None, on_complete=None, site_map=None):
        config = config or GameConfig()
        controller = GameController(
            site_map or site,
            Economy(config.economy),
            viewport,
            sink=sink,
            scheduler=scheduler,
            audio=audio,
            on_complete=on_complete,
            config=config,
        )
        controller.start()
        return controller

    return factory


@pytest.fixture
def controller(make_controller) -> GameController:
    return make_controller()


def pixel(row: int, col: int) -> tuple[float, float]:
    """Centre of a cell in the 10px test viewport."""

    return (col * 10 + 5, row * 10 + 5)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
