"""Tests for generation-bound delayed callbacks."""

import pygame

from uncharted.scheduler import Scheduler


def test_tasks_run_in_due_order(clock):
    scheduler = Scheduler(clock=clock)
    calls = []
    scheduler.call_later(200, lambda: calls.append("late"))
    scheduler.call_later(100, lambda: calls.append("early"))

    assert scheduler.run_due() == 0
    clock.advance(150)
    assert scheduler.run_due() == 1
    clock.advance(100)
    scheduler.run_due()

    assert calls == ["early", "late"]
    assert scheduler.pending() == 0


def test_reset_discards_previous_generation(clock):
    scheduler = Scheduler(clock=clock)
    calls = []
    scheduler.call_later(100, lambda: calls.append("stale"))

    generation = scheduler.reset()
    scheduler.call_later(100, lambda: calls.append("fresh"))
    clock.advance(500)
    scheduler.run_due()

    assert generation == 1
    assert calls == ["fresh"]


def test_cancelled_task_never_runs(clock):
    scheduler = Scheduler(clock=clock)
    calls = []
    task = scheduler.call_later(10, lambda: calls.append("x"))
    task.cancel()
    clock.advance(20)

    assert scheduler.run_due() == 0
    assert calls == []


def test_default_clock_is_pygame_ticks():
    assert Scheduler().clock is pygame.time.get_ticks
