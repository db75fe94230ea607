"""Tests for session start, restart and teardown."""

import logging

import pygame

from conftest import build_site
from uncharted.config import GameConfig, GridConfig
from uncharted.input import EventRouter
from uncharted.models import GUEST, Identity, Rect
from uncharted.scheduler import Scheduler
from uncharted.session import GameSession


def make_session(clock, sink, **kwargs):
    session = GameSession(
        GameConfig(grid=GridConfig(padding=0)),
        sink=sink,
        scheduler=Scheduler(clock=clock),
        router=EventRouter(),
        site_factory=lambda rng: build_site(),
        **kwargs,
    )
    session.resize(200, 200)
    return session


def complete_all(controller):
    for structure in controller.site.structures:
        for index in structure.cells:
            row, col = divmod(index, controller.site.cols)
            controller.perform_excavation(Rect(row, col, 1, 1))


def test_start_wires_input_to_controller(clock, sink):
    session = make_session(clock, sink)
    controller = session.start()

    session.router.dispatch(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(5, 5)))
    session.router.dispatch(pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(5, 5)))

    assert session.is_running
    assert controller.economy.actions_used == 1
    assert session.identity is GUEST


def test_restart_detaches_previous_listener(clock, sink):
    session = make_session(clock, sink)
    first = session.start()
    second = session.restart()

    assert len(session.router.listeners) == 1
    assert first.is_running is False

    session.router.dispatch(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(5, 5)))
    session.router.dispatch(pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(5, 5)))

    assert first.economy.actions_used == 0
    assert second.economy.actions_used == 1


def test_restart_discards_pending_completion(clock, sink):
    reports = []
    session = make_session(clock, sink, on_complete=reports.append)
    first = session.start()
    complete_all(first)

    second = session.restart()
    clock.advance(5000)
    second.frame()

    assert reports == []
    assert second.is_running


def test_completion_reaches_callback(clock, sink, caplog):
    reports = []
    session = make_session(
        clock, sink, on_complete=reports.append, identity=Identity("u-1", "digger")
    )
    controller = session.start()
    complete_all(controller)

    clock.advance(2000)
    with caplog.at_level(logging.INFO):
        controller.frame()

    assert len(reports) == 1
    assert reports[0].structures_found == 5
    assert "score not recorded" not in caplog.text


def test_guest_completion_is_free_play(clock, sink, caplog):
    session = make_session(clock, sink)
    controller = session.start()
    complete_all(controller)
    clock.advance(2000)

    with caplog.at_level(logging.INFO, logger="uncharted.session"):
        controller.frame()

    assert "score not recorded" in caplog.text


def test_seeded_sessions_generate_same_site(clock, sink):
    config = GameConfig(seed=7)
    first = GameSession(config, sink=sink, scheduler=Scheduler(clock=clock)).start()
    second = GameSession(config, sink=sink, scheduler=Scheduler(clock=clock)).start()

    assert first.site.occupancy == second.site.occupancy
    assert len(first.site.structures) == 5


def test_close_tears_down(clock, sink):
    session = make_session(clock, sink)
    controller = session.start()
    session.close()

    assert session.router.listeners == []
    assert session.controller is None
    assert controller.is_running is False
