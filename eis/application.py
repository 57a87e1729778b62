"""The application: window, layer stack, event routing and the main loop."""

from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, ClassVar, Optional

from eis import input as eis_input
from eis import log, randomgen
from eis.events import Event, EventDispatcher, WindowCloseEvent, WindowResizeEvent
from eis.input import InputBackend
from eis.instrumentor import profile_scope
from eis.layers import Layer, LayerStack
from eis.timestep import TimeStep

EventCallback = Callable[[Event], Any]


@dataclass
class WindowProps:
    """Title and size a window is created with."""

    title: str = "Default Window"
    width: int = 1280
    height: int = 720


class Window:
    """A window without a display: events posted to it reach the callback on update."""

    def __init__(self, props: Optional[WindowProps] = None) -> None:
        props = props if props is not None else WindowProps()
        self.title = props.title
        self.width = props.width
        self.height = props.height
        self.vsync = True
        self._callback: Optional[EventCallback] = None
        self._pending: deque[Event] = deque()
        log.core_logger().info("Initialized '%s' window (%d, %d, %s)",
                               self.title, self.width, self.height, self.vsync)

    def post_event(self, event: Event) -> None:
        """Queue an event for delivery on the next update."""
        self._pending.append(event)

    def on_update(self) -> None:
        """Deliver every queued event, in order, to the event callback."""
        while self._pending:
            event = self._pending.popleft()
            if isinstance(event, WindowResizeEvent):
                self.width, self.height = event.width, event.height
            if self._callback is not None:
                self._callback(event)

    def set_size(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.post_event(WindowResizeEvent(width, height))

    def set_vsync(self, enabled: bool) -> None:
        self.vsync = bool(enabled)

    def set_title(self, title: str) -> None:
        self.title = title

    def set_event_callback(self, callback: EventCallback) -> None:
        self._callback = callback


class Application:
    """Owns the window and layers, routes events and runs the frame loop.

    Only one application may exist at a time.
    """

    _instance: ClassVar[Optional["Application"]] = None

    def __init__(self, window_factory: Optional[Callable[[WindowProps], Window]] = None,
                 renderer: Any = None, props: Optional[WindowProps] = None) -> None:
        if Application._instance is not None:
            raise RuntimeError("Application already exists!")
        props = props if props is not None else WindowProps()
        factory = window_factory if window_factory is not None else Window
        self.window = factory(props)
        self.window.set_event_callback(self.on_event)

        if renderer is None:
            from eis.rendering.renderer2d import Renderer2D
            renderer = Renderer2D()
        self.renderer = renderer
        randomgen.init()

        self.input = InputBackend()
        self._previous_input = eis_input.set_backend(self.input)

        self.layer_stack = LayerStack()
        self.running = True
        self.minimized = False
        self._clock_start = time.perf_counter()
        self._last_frame_time = 0.0
        self._shut_down = False
        Application._instance = self

    @classmethod
    def get(cls) -> "Application":
        if cls._instance is None:
            raise RuntimeError("No application exists")
        return cls._instance

    def on_event(self, event: Event) -> None:
        """Handle window events, then pass the event down the stack from the top."""
        self.input.on_event(event)
        dispatcher = EventDispatcher(event)
        dispatcher.dispatch(WindowCloseEvent, self._on_window_close)
        dispatcher.dispatch(WindowResizeEvent, self._on_window_resize)

        for layer in reversed(self.layer_stack):
            layer.on_event(event)
            if event.handled:
                break

    def push_layer(self, layer: Layer) -> None:
        self.layer_stack.push_layer(layer)
        layer.on_attach()

    def push_overlay(self, overlay: Layer) -> None:
        self.layer_stack.push_overlay(overlay)
        overlay.on_attach()

    def run(self) -> None:
        """Run frames until the application is closed."""
        while self.running:
            with profile_scope("RunLoop frame"):
                now = time.perf_counter() - self._clock_start
                ts = TimeStep(now - self._last_frame_time)
                self._last_frame_time = now

                if not self.minimized:
                    with profile_scope("LayerStack OnUpdate"):
                        for layer in self.layer_stack:
                            layer.on_update(ts)
                    with profile_scope("LayerStack OnImGuiRender"):
                        for layer in self.layer_stack:
                            layer.on_imgui_render()

                self.window.on_update()

    def close(self) -> None:
        """Stop the main loop after the current frame."""
        self.running = False

    def shutdown(self) -> None:
        """Release the renderer, detach all layers and give up the single instance."""
        if self._shut_down:
            return
        self._shut_down = True
        self.running = False
        self.renderer.shutdown()
        self.layer_stack.clear()
        eis_input.set_backend(self._previous_input)
        if Application._instance is self:
            Application._instance = None

    def __enter__(self) -> "Application":
        return self

    def __exit__(self, *args: Any) -> None:
        self.shutdown()

    def _on_window_resize(self, event: WindowResizeEvent) -> bool:
        if event.width == 0 or event.height == 0:
            self.minimized = True
            return False
        self.minimized = False
        self.renderer.on_window_resized(event.width, event.height)
        return False

    def _on_window_close(self, event: WindowCloseEvent) -> bool:
        self.running = False
        return True


def run_app(create_application: Callable[[], Application]) -> int:
    """Set up logging, create the application, run it and shut it down."""
    log.init()
    core = log.core_logger()
    core.log(log.TRACE, "Init")
    app = create_application()
    try:
        app.run()
    finally:
        core.log(log.TRACE, "Shutting down...")
        app.shutdown()
    return 0