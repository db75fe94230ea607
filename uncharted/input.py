"""Gesture resolution for pointer and touch input."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Protocol

import pygame

from .config import InputConfig

logger = logging.getLogger(__name__)

Point = tuple[float, float]
EventListener = Callable[[pygame.event.Event], bool]


class Device(str, Enum):
    POINTER = "pointer"
    TOUCH = "touch"


class GestureTarget(Protocol):
    """Receiver of resolved gestures, in canvas-local physical pixels."""

    def handle_hover(self, position: Point) -> None: ...

    def handle_pointer_start(self, position: Point) -> None: ...

    def handle_pointer_drag(self, start: Point, current: Point) -> None: ...

    def handle_pointer_end(self, start: Point, end: Point) -> None: ...

    def handle_touch_start(self, position: Point) -> None: ...

    def handle_touch_end(self, start: Point, end: Point, long_press: bool) -> None: ...


def to_canvas_coords(
    client: Point, origin: Point = (0.0, 0.0), scale: float = 1.0
) -> Point:
    """Convert window coordinates to canvas-local physical pixels.

    *scale* is the ratio of the canvas backing size to its on-screen size.
    """

    return ((client[0] - origin[0]) * scale, (client[1] - origin[1]) * scale)


class EventRouter:
    """Fan-out of pygame events to the currently attached listeners."""

    def __init__(self) -> None:
        self.listeners: list[EventListener] = []

    def subscribe(self, listener: EventListener) -> None:
        if listener not in self.listeners:
            self.listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    def dispatch(self, event: pygame.event.Event) -> bool:
        handled = False
        for listener in list(self.listeners):
            handled = listener(event) or handled
        return handled


class InputController:
    """Turns raw down/move/up events into gestures for a :class:`GestureTarget`.

    Pointer input follows ``Idle -> Dragging -> Idle``. Touch input measures
    how long the finger was held so the target can tell a tap from a long
    press. Both resolvers coexist; whether touch events are honoured is
    decided once, here, from :class:`InputConfig`.
    """

    def __init__(
        self,
        target: GestureTarget,
        config: InputConfig | None = None,
        *,
        clock: Callable[[], int] | None = None,
        canvas_origin: Point = (0.0, 0.0),
        canvas_scale: float = 1.0,
        window_size: Callable[[], tuple[int, int]] | None = None,
    ) -> None:
        config = config or InputConfig()
        self.target = target
        self.touch_enabled = config.touch_enabled
        self.long_press_ms = config.long_press_ms
        self.clock = clock or pygame.time.get_ticks
        self.canvas_origin = canvas_origin
        self.canvas_scale = canvas_scale
        self.window_size = window_size or pygame.display.get_window_size
        self.is_down = False
        self.device: Device | None = None
        self.start_pos: Point = (0.0, 0.0)
        self.current_pos: Point = (0.0, 0.0)
        self.touch_started_ms = 0
        self.finger_id: int | None = None
        self.router: EventRouter | None = None

    # Listener lifecycle -----------------------------------------------

    def attach(self, router: EventRouter) -> None:
        if self.router is not None:
            self.detach()
        router.subscribe(self.handle_event)
        self.router = router

    def detach(self) -> None:
        """Stop receiving events and forget any gesture in progress."""

        if self.router is not None:
            self.router.unsubscribe(self.handle_event)
            self.router = None
            logger.debug("Input listener detached")
        self.is_down = False
        self.device = None
        self.finger_id = None

    # Raw event entry points -------------------------------------------

    def on_down(self, client: Point, device: Device = Device.POINTER) -> None:
        if device is Device.TOUCH and not self.touch_enabled:
            return
        coords = self._canvas(client)
        self.is_down = True
        self.device = device
        self.start_pos = coords
        self.current_pos = coords
        if device is Device.TOUCH:
            self.touch_started_ms = self.clock()
            self.target.handle_touch_start(coords)
        else:
            self.target.handle_pointer_start(coords)

    def on_move(self, client: Point, device: Device = Device.POINTER) -> None:
        if device is Device.TOUCH and not self.touch_enabled:
            return
        coords = self._canvas(client)
        self.current_pos = coords
        if self.is_down and self.device is device:
            self.target.handle_pointer_drag(self.start_pos, coords)
        elif not self.is_down:
            self.target.handle_hover(coords)

    def on_up(self, client: Point, device: Device = Device.POINTER) -> None:
        if not self.is_down or self.device is not device:
            return
        self.is_down = False
        self.device = None
        if device is Device.TOUCH:
            coords = self._canvas(client)
            held = self.clock() - self.touch_started_ms
            self.target.handle_touch_end(self.start_pos, coords, held >= self.long_press_ms)
        else:
            self.target.handle_pointer_end(self.start_pos, self.current_pos)

    # pygame translation -----------------------------------------------

    def handle_event(self, event: pygame.event.Event) -> bool:
        """Feed a pygame event through the resolvers; return whether it was used."""

        if event.type in (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP, pygame.MOUSEMOTION):
            # SDL mirrors finger input as mouse events; the finger events win.
            if getattr(event, "touch", False) and self.touch_enabled:
                return False
            if event.type == pygame.MOUSEMOTION:
                self.on_move(event.pos)
                return True
            if event.button != 1:
                return False
            if event.type == pygame.MOUSEBUTTONDOWN:
                self.on_down(event.pos)
            else:
                self.on_up(event.pos)
            return True

        if not self.touch_enabled:
            return False

        if event.type == pygame.FINGERDOWN:
            if self.is_down:
                return False
            self.finger_id = event.finger_id
            self.on_down(self._finger_position(event), Device.TOUCH)
            return True
        if event.type == pygame.FINGERMOTION:
            if event.finger_id != self.finger_id:
                return False
            self.on_move(self._finger_position(event), Device.TOUCH)
            return True
        if event.type == pygame.FINGERUP:
            if event.finger_id != self.finger_id:
                return False
            self.finger_id = None
            self.on_up(self._finger_position(event), Device.TOUCH)
            return True
        return False

    def _finger_position(self, event: pygame.event.Event) -> Point:
        width, height = self.window_size()
        return (event.x * width, event.y * height)

    def _canvas(self, client: Point) -> Point:
        return to_canvas_coords(client, self.canvas_origin, self.canvas_scale)
