"""Static catalog of survey tools."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

# Structures that must be excavated before the area reveal unlocks.
REVEAL_UNLOCK_THRESHOLD = 3


class Tool(str, Enum):
    """Survey tools the player can equip."""

    SCAN = "scan"
    LIDAR = "lidar"
    DRILL = "drill"
    EXCAVATE = "excavate"
    TERRAQUEST = "terraquest"

    @classmethod
    def parse(cls, value: "str | Tool") -> "Tool":
        """Return the tool named *value*, raising ``KeyError`` if unknown."""

        if isinstance(value, Tool):
            return value
        try:
            return cls(value)
        except ValueError:
            raise KeyError(f"Unknown tool: {value!r}") from None


def _reveal_unlocked(found_count: int, already_used: bool) -> bool:
    return found_count >= REVEAL_UNLOCK_THRESHOLD and not already_used


@dataclass(frozen=True)
class ToolSpec:
    """Display and pricing metadata for one tool."""

    tool: Tool
    name: str
    cost: int
    short_description: str
    description: str
    hotkey: str
    unlock: Callable[[int, bool], bool] | None = None

    def is_unlocked(self, found_count: int, already_used: bool) -> bool:
        """Return whether the tool may be equipped right now."""

        if self.unlock is None:
            return True
        return self.unlock(found_count, already_used)


TOOL_CATALOG: dict[Tool, ToolSpec] = {
    Tool.SCAN: ToolSpec(
        tool=Tool.SCAN,
        name="Multispectral Imaging",
        cost=50,
        short_description="5x5 density scan from orbit",
        description=(
            "Satellites capture infrared and thermal wavelengths. Buried walls "
            "retain heat differently than loose soil, outlining hidden buildings."
        ),
        hotkey="1",
    ),
    Tool.LIDAR: ToolSpec(
        tool=Tool.LIDAR,
        name="LiDAR Drone",
        cost=100,
        short_description="2x2 proximity detection",
        description=(
            "Laser pulses measure tiny elevation changes. The 2x2 probe reports "
            "how close the nearest buried structure lies."
        ),
        hotkey="2",
    ),
    Tool.DRILL: ToolSpec(
        tool=Tool.DRILL,
        name="Ground Penetrating Radar",
        cost=250,
        short_description="Precise single-tile confirmation",
        description=(
            "Radio waves bounce back from buried masonry. Ping a tile to confirm "
            "a structure before committing to excavation."
        ),
        hotkey="3",
    ),
    Tool.EXCAVATE: ToolSpec(
        tool=Tool.EXCAVATE,
        name="Archaeological Excavation",
        cost=500,
        short_description="Reveal structures, earn $2000 reward",
        description=(
            "A trained team removes soil layer by layer. Completing a structure "
            "earns a research grant; empty ground wastes budget."
        ),
        hotkey="4",
    ),
    Tool.TERRAQUEST: ToolSpec(
        tool=Tool.TERRAQUEST,
        name="TerraQuest Explorer",
        cost=60,
        short_description="Reveals ALL hidden structures (one-time use)",
        description=(
            "An autonomous hybrid vehicle that scans the whole site at once. "
            "Unlocks after 3 discoveries and can be deployed once per mission."
        ),
        hotkey="5",
        unlock=_reveal_unlocked,
    ),
}


def tool_name(tool: Tool) -> str:
    return TOOL_CATALOG[tool].name


def tool_for_hotkey(key: str) -> Tool | None:
    """Return the tool bound to *key*, if any."""

    for entry in TOOL_CATALOG.values():
        if entry.hotkey == key:
            return entry.tool
    return None
