"""Tests for the side-panel sink and its discovery popups."""

import pytest

from conftest import build_site
from uncharted.app import HudSink
from uncharted.config import GameConfig
from uncharted.input import EventRouter
from uncharted.scheduler import Scheduler
from uncharted.session import GameSession


@pytest.fixture
def hud(scheduler) -> HudSink:
    return HudSink(scheduler, popup_duration_ms=1500)


def test_popup_is_dismissed_after_its_duration(hud, scheduler, clock):
    hud.discovery("Relic", 2000)
    assert hud.popup.label == "Relic"
    assert hud.popup.shown_ms == 0

    clock.advance(1499)
    scheduler.run_due()
    assert hud.popup is not None

    clock.advance(1)
    scheduler.run_due()
    assert hud.popup is None


def test_later_popup_gets_its_full_duration(hud, scheduler, clock):
    hud.discovery("Relic", 2000)
    clock.advance(1000)
    hud.discovery("TerraQuest Scan", 0)
    assert hud.popup.label == "Relic"

    clock.advance(500)
    scheduler.run_due()
    assert hud.popup.label == "TerraQuest Scan"
    assert hud.popup.shown_ms == 1500

    clock.advance(1499)
    scheduler.run_due()
    assert hud.popup.label == "TerraQuest Scan"

    clock.advance(1)
    scheduler.run_due()
    assert hud.popup is None


def test_discoveries_in_one_action_are_shown_in_turn(hud, scheduler, clock):
    hud.discovery("Relic", 2000)
    hud.discovery("Wall", 2000)

    shown = [hud.popup.label]
    while hud.popup is not None:
        clock.advance(1500)
        scheduler.run_due()
        if hud.popup is not None:
            shown.append(hud.popup.label)

    assert shown == ["Relic", "Wall"]


def test_dismissing_a_stale_popup_leaves_the_current_one(hud):
    hud.discovery("Relic", 2000)
    first = hud.popup
    hud.reset()
    hud.discovery("Tomb", 2000)

    hud.dismiss_popup(first)

    assert hud.popup.label == "Tomb"


def test_restart_drops_pending_popup_dismissal(scheduler, clock):
    hud = HudSink(scheduler, popup_duration_ms=1500)
    session = GameSession(
        GameConfig(),
        sink=hud,
        scheduler=scheduler,
        router=EventRouter(),
        site_factory=lambda rng: build_site(),
    )
    session.start()
    hud.discovery("Relic", 2000)
    assert scheduler.pending() == 1

    clock.advance(1000)
    session.restart()
    hud.reset()
    hud.discovery("Tomb", 2000)
    assert scheduler.pending() == 1

    clock.advance(500)
    assert scheduler.run_due() == 0
    assert hud.popup.label == "Tomb"

    clock.advance(1000)
    assert scheduler.run_due() == 1
    assert hud.popup is None
