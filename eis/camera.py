"""Orthographic 2D camera and a keyboard/scroll controller for it."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from eis import input as eis_input
from eis.codes import KeyCode
from eis.events import Event, EventDispatcher, MouseScrolledEvent, WindowResizeEvent


def _ortho(left: float, right: float, bottom: float, top: float,
           near: float = -1.0, far: float = 1.0) -> np.ndarray:
    m = np.identity(4)
    m[0, 0] = 2.0 / (right - left)
    m[1, 1] = 2.0 / (top - bottom)
    m[2, 2] = -2.0 / (far - near)
    m[0, 3] = -(right + left) / (right - left)
    m[1, 3] = -(top + bottom) / (top - bottom)
    m[2, 3] = -(far + near) / (far - near)
    return m


def _translation(offset: np.ndarray) -> np.ndarray:
    m = np.identity(4)
    m[:3, 3] = offset
    return m


def _rotation_z(degrees: float) -> np.ndarray:
    rad = math.radians(degrees)
    c, s = math.cos(rad), math.sin(rad)
    m = np.identity(4)
    m[0, 0], m[0, 1] = c, -s
    m[1, 0], m[1, 1] = s, c
    return m


class OrthographicCamera:
    """Orthographic projection with a position and a rotation about z, in degrees."""

    def __init__(self, left: float, right: float, bottom: float, top: float) -> None:
        self._position = np.zeros(3)
        self._rotation = 0.0
        self._view = np.identity(4)
        self._projection = _ortho(left, right, bottom, top)
        self._view_projection = self._projection @ self._view

    def set_projection(self, left: float, right: float, bottom: float, top: float) -> None:
        self._projection = _ortho(left, right, bottom, top)
        self._view_projection = self._projection @ self._view

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @position.setter
    def position(self, pos: Sequence[float]) -> None:
        self._position = np.array(pos, dtype=float).reshape(3)
        self._recalculate_view()

    @property
    def rotation(self) -> float:
        return self._rotation

    @rotation.setter
    def rotation(self, degrees: float) -> None:
        self._rotation = float(degrees)
        self._recalculate_view()

    @property
    def projection_matrix(self) -> np.ndarray:
        return self._projection

    @property
    def view_matrix(self) -> np.ndarray:
        return self._view

    @property
    def view_projection_matrix(self) -> np.ndarray:
        return self._view_projection

    def _recalculate_view(self) -> None:
        transform = _translation(self._position) @ _rotation_z(self._rotation)
        self._view = np.linalg.inv(transform)
        self._view_projection = self._projection @ self._view


class OrthoCameraController:
    """Moves, rotates and zooms an orthographic camera from keys and scrolling."""

    def __init__(self, aspect_ratio: float) -> None:
        self.aspect_ratio = float(aspect_ratio)
        self._zoom = 2.0
        self.min_zoom = 0.5
        self.max_zoom = 10.0
        self.camera = OrthographicCamera(-self.aspect_ratio * self._zoom, self.aspect_ratio * self._zoom,
                                         -self._zoom, self._zoom)
        self._position = np.zeros(3)
        self._rotation = 0.0
        self.camera_speed = 1.0
        self.rotation_speed = 90.0
        self.zoom_sensitivity = 5.0

        self.pose_lock = False
        self.zoom_lock = False
        self.rotation_lock = True
        self.zoom_speed_effect = True

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @property
    def rotation(self) -> float:
        return self._rotation

    @property
    def zoom(self) -> float:
        return self._zoom

    @zoom.setter
    def zoom(self, value: float) -> None:
        """Accept zoom levels within the limits only; the projection is refreshed either way."""
        if self.min_zoom <= value <= self.max_zoom:
            self._zoom = float(value)
        self._update_projection()

    def set_position(self, pos: Sequence[float]) -> None:
        self._position = np.array(pos, dtype=float).reshape(3)
        self.camera.position = self._position

    def _update_projection(self) -> None:
        a, z = self.aspect_ratio, self._zoom
        self.camera.set_projection(-a * z, a * z, -z, z)

    def on_update(self, ts: float) -> None:
        if self.pose_lock:
            return
        seconds = float(ts)
        pressed = eis_input.is_key_pressed

        rad = math.radians(self._rotation)
        sin_rot, cos_rot = math.sin(rad), math.cos(rad)
        delta = np.zeros(2)
        if pressed(KeyCode.Up) or pressed(KeyCode.W):
            delta += (-sin_rot, cos_rot)
        if pressed(KeyCode.Down) or pressed(KeyCode.S):
            delta -= (-sin_rot, cos_rot)
        if pressed(KeyCode.Left) or pressed(KeyCode.A):
            delta -= (cos_rot, sin_rot)
        if pressed(KeyCode.Right) or pressed(KeyCode.D):
            delta += (cos_rot, sin_rot)

        if np.linalg.norm(delta) > 1.0:
            delta /= 1.4142
        if self.zoom_speed_effect:
            delta *= self._zoom

        self._position[:2] += delta * (seconds * self.camera_speed)
        self.camera.position = self._position

        if self.rotation_lock:
            return

        if pressed(KeyCode.Q):
            self._rotation += self.rotation_speed * seconds
        if pressed(KeyCode.E):
            self._rotation -= self.rotation_speed * seconds

        if self._rotation > 180.0:
            self._rotation -= 360.0
        elif self._rotation <= -180.0:
            self._rotation += 360.0

        self.camera.rotation = self._rotation

    def on_event(self, event: Event) -> None:
        dispatcher = EventDispatcher(event)
        dispatcher.dispatch(MouseScrolledEvent, self._on_mouse_scrolled)
        dispatcher.dispatch(WindowResizeEvent, self._on_window_resized)

    def _on_mouse_scrolled(self, event: MouseScrolledEvent) -> bool:
        if self.zoom_lock:
            return False
        zoom = self._zoom - event.y_offset / self.zoom_sensitivity
        self._zoom = min(max(zoom, self.min_zoom), self.max_zoom)
        self._update_projection()
        return False

    def _on_window_resized(self, event: WindowResizeEvent) -> bool:
        if event.width == 0 or event.height == 0:
            return False
        self.aspect_ratio = event.width / event.height
        self._update_projection()
        return False

    def calculate_mouse_world_pos(self, mouse_pos: Sequence[float], window_width: float,
                                  window_height: float) -> tuple[float, float]:
        """Map a window-space cursor position to world coordinates."""
        x = mouse_pos[0] / window_width * 2.0 - 1.0
        y = -(mouse_pos[1] / window_height * 2.0 - 1.0)
        inverse = np.linalg.inv(self.camera.view_matrix) @ np.linalg.inv(self.camera.projection_matrix)
        world = inverse @ np.array([x, y, 0.0, 1.0])
        return float(world[0]), float(world[1])