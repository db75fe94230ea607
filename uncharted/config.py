"""Configuration helpers for Uncharted Ruins."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .tools import Tool


@dataclass(frozen=True)
class DisplayConfig:
    """Visual settings for the pygame display."""

    width: int = 1280
    height: int = 720
    caption: str = "UNCHARTED RUINS"
    frame_rate: int = 60
    fullscreen: bool = False
    pixel_ratio: float = 1.0


@dataclass(frozen=True)
class AssetConfig:
    """Configuration for locating local assets."""

    root: Path = Path("assets")
    fonts: Path = Path("fonts")
    audio: Path = Path("audio")

    def font_path(self, name: str) -> Path:
        """Return the full path for a font asset."""

        return self.root / self.fonts / name

    def audio_path(self, name: str) -> Path:
        """Return the full path for an audio asset."""

        return self.root / self.audio / name


@dataclass(frozen=True)
class GridConfig:
    """Dimensions of the survey site and the limits applied to it."""

    rows: int = 20
    cols: int = 20
    padding: int = 20
    placement_attempts: int = 100
    max_selection_span: int = 5


@dataclass(frozen=True)
class EconomyConfig:
    """Starting budget, rewards and per-tool price overrides."""

    initial_funds: int = 5000
    discovery_reward: int = 2000
    cost_overrides: tuple[tuple[Tool, int], ...] = ()


@dataclass(frozen=True)
class InputConfig:
    """Gesture timing and device capability switches."""

    long_press_ms: int = 300
    touch_enabled: bool = True


@dataclass(frozen=True)
class TimingConfig:
    """Fixed presentation delays, in milliseconds."""

    completion_delay_ms: int = 2000
    popup_duration_ms: int = 1500


@dataclass(frozen=True)
class GameConfig:
    """High-level configuration structure for the game."""

    display: DisplayConfig = DisplayConfig()
    assets: AssetConfig = AssetConfig()
    grid: GridConfig = GridConfig()
    economy: EconomyConfig = EconomyConfig()
    input: InputConfig = InputConfig()
    timing: TimingConfig = TimingConfig()
    seed: int | None = None
