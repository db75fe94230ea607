"""Tests for pointer and touch gesture resolution."""

import pygame
import pytest

from uncharted.config import InputConfig
from uncharted.input import Device, EventRouter, InputController, to_canvas_coords


class RecordingTarget:
    def __init__(self) -> None:
        self.calls = []

    def handle_hover(self, position):
        self.calls.append(("hover", position))

    def handle_pointer_start(self, position):
        self.calls.append(("start", position))

    def handle_pointer_drag(self, start, current):
        self.calls.append(("drag", start, current))

    def handle_pointer_end(self, start, end):
        self.calls.append(("end", start, end))

    def handle_touch_start(self, position):
        self.calls.append(("touch_start", position))

    def handle_touch_end(self, start, end, long_press):
        self.calls.append(("touch_end", start, end, long_press))


@pytest.fixture
def target():
    return RecordingTarget()


@pytest.fixture
def resolver(target, clock):
    return InputController(target, InputConfig(), clock=clock, window_size=lambda: (800, 600))


def test_canvas_coords_account_for_origin_and_scale():
    assert to_canvas_coords((110, 60), (10, 10), 2.0) == (200, 100)


def test_pointer_state_machine(resolver, target):
    resolver.on_move((1, 1))
    resolver.on_down((10, 10))
    resolver.on_move((20, 30))
    resolver.on_move((40, 50))
    resolver.on_up((99, 99))

    assert target.calls == [
        ("hover", (1, 1)),
        ("start", (10, 10)),
        ("drag", (10, 10), (20, 30)),
        ("drag", (10, 10), (40, 50)),
        ("end", (10, 10), (40, 50)),
    ]
    assert resolver.is_down is False


def test_up_without_down_is_ignored(resolver, target):
    resolver.on_up((5, 5))
    assert target.calls == []


@pytest.mark.parametrize("held, expected", [(299, False), (300, True), (1200, True)])
def test_touch_hold_duration_decides_long_press(resolver, target, clock, held, expected):
    resolver.on_down((10, 10), Device.TOUCH)
    clock.advance(held)
    resolver.on_up((12, 12), Device.TOUCH)

    assert target.calls[0] == ("touch_start", (10, 10))
    assert target.calls[-1] == ("touch_end", (10, 10), (12, 12), expected)


def test_touch_ignored_when_disabled(target, clock):
    resolver = InputController(target, InputConfig(touch_enabled=False), clock=clock)
    resolver.on_down((10, 10), Device.TOUCH)
    resolver.on_up((10, 10), Device.TOUCH)
    assert target.calls == []


def test_pygame_mouse_events_are_translated(resolver, target):
    resolver.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(5, 6)))
    resolver.handle_event(pygame.event.Event(pygame.MOUSEMOTION, pos=(7, 8)))
    resolver.handle_event(pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(7, 8)))

    assert [call[0] for call in target.calls] == ["start", "drag", "end"]


def test_right_button_is_ignored(resolver, target):
    used = resolver.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=(5, 6)))
    assert used is False
    assert target.calls == []


def test_finger_events_use_window_size(resolver, target, clock):
    resolver.handle_event(
        pygame.event.Event(pygame.FINGERDOWN, finger_id=1, touch_id=0, x=0.5, y=0.5)
    )
    # Mouse events synthesised from the same touch are skipped.
    resolver.handle_event(
        pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(400, 300), touch=True)
    )
    clock.advance(400)
    resolver.handle_event(
        pygame.event.Event(pygame.FINGERUP, finger_id=1, touch_id=0, x=0.25, y=0.5)
    )

    assert target.calls == [
        ("touch_start", (400.0, 300.0)),
        ("touch_end", (400.0, 300.0), (200.0, 300.0), True),
    ]


def test_detach_stops_routing(resolver, target):
    router = EventRouter()
    resolver.attach(router)
    router.dispatch(pygame.event.Event(pygame.MOUSEMOTION, pos=(1, 2)))

    resolver.detach()
    router.dispatch(pygame.event.Event(pygame.MOUSEMOTION, pos=(3, 4)))

    assert target.calls == [("hover", (1, 2))]
    assert router.listeners == []
