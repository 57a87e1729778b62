"""Polled keyboard and mouse state."""

from __future__ import annotations

from eis.events import (
    Event,
    KeyPressedEvent,
    KeyReleasedEvent,
    MouseButtonPressedEvent,
    MouseButtonReleasedEvent,
    MouseMovedEvent,
)


class InputBackend:
    """Current key, button and cursor state, kept up to date from events."""

    def __init__(self) -> None:
        self._keys: set[int] = set()
        self._buttons: set[int] = set()
        self._mouse = (0.0, 0.0)

    def is_key_pressed(self, key: int) -> bool:
        return int(key) in self._keys

    def is_mouse_button_pressed(self, button: int) -> bool:
        return int(button) in self._buttons

    def mouse_position(self) -> tuple[float, float]:
        return self._mouse

    def on_event(self, event: Event) -> None:
        """Update the state from an input event; other events are ignored."""
        if isinstance(event, KeyPressedEvent):
            self._keys.add(int(event.key_code))
        elif isinstance(event, KeyReleasedEvent):
            self._keys.discard(int(event.key_code))
        elif isinstance(event, MouseButtonPressedEvent):
            self._buttons.add(int(event.button))
        elif isinstance(event, MouseButtonReleasedEvent):
            self._buttons.discard(int(event.button))
        elif isinstance(event, MouseMovedEvent):
            self._mouse = (float(event.x), float(event.y))


_backend = InputBackend()


def set_backend(backend: InputBackend) -> InputBackend:
    """Install ``backend`` for the module functions and return the previous one."""
    global _backend
    previous, _backend = _backend, backend
    return previous


def is_key_pressed(key: int) -> bool:
    return _backend.is_key_pressed(key)


def is_mouse_button_pressed(button: int) -> bool:
    return _backend.is_mouse_button_pressed(button)


def get_mouse_pos() -> tuple[float, float]:
    return _backend.mouse_position()


def get_mouse_x() -> float:
    return get_mouse_pos()[0]


def get_mouse_y() -> float:
    return get_mouse_pos()[1]