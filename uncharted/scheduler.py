"""Delayed callbacks bound to a session generation."""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable

import pygame

logger = logging.getLogger(__name__)


@dataclass(order=True)
class ScheduledTask:
    due_ms: int
    sequence: int
    generation: int = field(compare=False)
    callback: Callable[[], None] = field(compare=False, repr=False)
    label: str = field(default="", compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class Scheduler:
    """Runs callbacks once their delay has elapsed.

    Every task is stamped with the generation current when it was scheduled.
    :meth:`reset` starts a new generation and drops everything queued, so a
    callback from a finished session can never fire in the next one.
    """

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        self.clock = clock or pygame.time.get_ticks
        self.generation = 0
        self._queue: list[ScheduledTask] = []
        self._sequence = itertools.count()

    def call_later(
        self, delay_ms: int, callback: Callable[[], None], *, label: str = ""
    ) -> ScheduledTask:
        task = ScheduledTask(
            due_ms=self.clock() + max(0, delay_ms),
            sequence=next(self._sequence),
            generation=self.generation,
            callback=callback,
            label=label,
        )
        heapq.heappush(self._queue, task)
        return task

    def run_due(self, now_ms: int | None = None) -> int:
        """Run every task due at *now_ms* and return how many ran."""

        now = self.clock() if now_ms is None else now_ms
        ran = 0
        while self._queue and self._queue[0].due_ms <= now:
            task = heapq.heappop(self._queue)
            if task.cancelled or task.generation != self.generation:
                continue
            task.callback()
            ran += 1
        return ran

    def reset(self) -> int:
        """Discard all pending tasks and begin a new generation."""

        dropped = sum(1 for task in self._queue if not task.cancelled)
        if dropped:
            logger.debug("Discarding %d pending task(s) from generation %d", dropped, self.generation)
        self._queue.clear()
        self.generation += 1
        return self.generation

    def pending(self) -> int:
        return sum(
            1
            for task in self._queue
            if not task.cancelled and task.generation == self.generation
        )
