"""Asset discovery helpers for Uncharted Ruins."""

from __future__ import annotations

from pathlib import Path

import pygame

from .config import AssetConfig

PREFERRED_FONTS = (
    "sharetechmono",
    "dejavusansmono",
    "liberationmono",
    "couriernew",
)


class ResourceManager:
    """Utility to locate optional asset files."""

    def __init__(self, config: AssetConfig | None = None) -> None:
        self.config = config or AssetConfig()
        self._fonts: dict[tuple[int, bool], pygame.font.Font] = {}

    def resolve(self, path: Path | str) -> Path:
        """Resolve a path relative to the asset root."""

        candidate = Path(path)
        if not candidate.is_absolute() and not candidate.is_relative_to(self.config.root):
            candidate = self.config.root / candidate
        return candidate

    def find(self, path: Path | str) -> Path | None:
        """Return the resolved asset path, or ``None`` when it is absent."""

        resolved = self.resolve(path)
        return resolved if resolved.is_file() else None

    def font(self, size: int, bold: bool = False) -> pygame.font.Font:
        """Return a monospace HUD font, preferring a bundled ``hud.ttf``."""

        key = (size, bold)
        cached = self._fonts.get(key)
        if cached is not None:
            return cached

        bundled = self.find(self.config.font_path("hud.ttf"))
        if bundled is not None:
            font = pygame.font.Font(str(bundled), size)
        else:
            font = None
            for name in PREFERRED_FONTS:
                path = pygame.font.match_font(name, bold=bold)
                if path:
                    font = pygame.font.Font(path, size)
                    break
            if font is None:
                font = pygame.font.Font(None, size)
        self._fonts[key] = font
        return font
