"""One-way notification sinks consumed by the game controller."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from .models import Cue, Severity, StructureSummary
from .tools import Tool

logger = logging.getLogger(__name__)

_SEVERITY_LEVELS = {
    Severity.NORMAL: logging.INFO,
    Severity.ALERT: logging.WARNING,
    Severity.SUCCESS: logging.INFO,
}


class PresentationSink(Protocol):
    """Receives display updates; return values are never inspected."""

    def funds_changed(self, amount: int) -> None: ...

    def log_message(self, text: str, severity: Severity = Severity.NORMAL) -> None: ...

    def tool_changed(self, tool: Tool) -> None: ...

    def targets_changed(self, targets: Sequence[StructureSummary]) -> None: ...

    def discovery(self, label: str, reward: int) -> None: ...


class AudioSink(Protocol):
    def play(self, cue: Cue) -> None: ...


class LoggingSink:
    """Presentation sink that mirrors everything to the standard logger."""

    def funds_changed(self, amount: int) -> None:
        logger.debug("Funds: $%d", amount)

    def log_message(self, text: str, severity: Severity = Severity.NORMAL) -> None:
        logger.log(_SEVERITY_LEVELS.get(severity, logging.INFO), "> %s", text)

    def tool_changed(self, tool: Tool) -> None:
        logger.debug("Tool: %s", tool.value)

    def targets_changed(self, targets: Sequence[StructureSummary]) -> None:
        found = sum(1 for target in targets if target.found)
        logger.debug("Targets: %d/%d found", found, len(targets))

    def discovery(self, label: str, reward: int) -> None:
        logger.info("Discovery: %s (+$%d)", label, reward)


class FanoutSink:
    """Forwards each notification to several sinks in order."""

    def __init__(self, *sinks: PresentationSink) -> None:
        self.sinks = list(sinks)

    def funds_changed(self, amount: int) -> None:
        for sink in self.sinks:
            sink.funds_changed(amount)

    def log_message(self, text: str, severity: Severity = Severity.NORMAL) -> None:
        for sink in self.sinks:
            sink.log_message(text, severity)

    def tool_changed(self, tool: Tool) -> None:
        for sink in self.sinks:
            sink.tool_changed(tool)

    def targets_changed(self, targets: Sequence[StructureSummary]) -> None:
        for sink in self.sinks:
            sink.targets_changed(targets)

    def discovery(self, label: str, reward: int) -> None:
        for sink in self.sinks:
            sink.discovery(label, reward)


class SilentAudio:
    def play(self, cue: Cue) -> None:
        pass
