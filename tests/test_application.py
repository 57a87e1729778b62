import pytest

from eis import input as eis_input
from eis.application import Application, Window, WindowProps, run_app
from eis.codes import KeyCode
from eis.events import KeyPressedEvent, KeyReleasedEvent, WindowCloseEvent, WindowResizeEvent
from eis.layers import Layer
from eis.rendering.renderer2d import Renderer2D

SHADER_SOURCE = "#type vertex\nvoid main() {}\n#type fragment\nvoid main() {}\n"


class Recorder(Layer):
    def __init__(self, name, journal, close_after=None, handles=False):
        super().__init__(name)
        self.journal = journal
        self.close_after = close_after
        self.handles = handles
        self.updates = 0
        self.renders = 0
        self.events = []

    def on_attach(self):
        self.journal.append(("attach", self.name))

    def on_detach(self):
        self.journal.append(("detach", self.name))

    def on_update(self, ts):
        self.updates += 1
        if self.close_after is not None and self.updates >= self.close_after:
            Application.get().close()

    def on_imgui_render(self):
        self.renders += 1

    def on_event(self, event):
        self.events.append(event)
        if self.handles:
            event.handled = True


@pytest.fixture
def renderer(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    shaders = tmp_path / "assets" / "shaders"
    shaders.mkdir(parents=True)
    for name in ("Quad", "Circle", "Line"):
        (shaders / f"{name}.glsl").write_text(SHADER_SOURCE)
    return Renderer2D()


@pytest.fixture
def app(renderer):
    application = Application(renderer=renderer, props=WindowProps("Test", 640, 480))
    yield application
    application.shutdown()


def test_window_props_defaults():
    props = WindowProps()
    assert (props.title, props.width, props.height) == ("Default Window", 1280, 720)


def test_window_delivers_posted_events_on_update():
    window = Window(WindowProps("w", 10, 20))
    received = []
    window.set_event_callback(received.append)
    window.set_size(30, 40)
    assert received == []
    window.on_update()
    assert len(received) == 1
    assert (received[0].width, received[0].height) == (30, 40)
    assert (window.width, window.height) == (30, 40)


def test_window_title_and_vsync():
    window = Window()
    assert window.vsync is True
    window.set_vsync(False)
    window.set_title("renamed")
    assert (window.vsync, window.title) == (False, "renamed")


def test_window_created_from_props(app):
    assert (app.window.title, app.window.width, app.window.height) == ("Test", 640, 480)


def test_single_instance(app, renderer):
    assert Application.get() is app
    with pytest.raises(RuntimeError):
        Application(renderer=renderer)


def test_shutdown_releases_instance_and_detaches(renderer):
    journal = []
    application = Application(renderer=renderer)
    application.push_layer(Recorder("game", journal))
    application.shutdown()
    assert journal == [("attach", "game"), ("detach", "game")]
    with pytest.raises(RuntimeError):
        Application.get()


def test_layers_precede_overlays(app):
    journal = []
    overlay = Recorder("overlay", journal)
    first = Recorder("first", journal)
    second = Recorder("second", journal)
    app.push_overlay(overlay)
    app.push_layer(first)
    app.push_layer(second)
    assert [layer.name for layer in app.layer_stack] == ["first", "second", "overlay"]
    assert journal == [("attach", "overlay"), ("attach", "first"), ("attach", "second")]


def test_close_event_stops_and_reaches_only_top_layer(app):
    journal = []
    bottom = Recorder("bottom", journal)
    top = Recorder("top", journal)
    app.push_layer(bottom)
    app.push_overlay(top)
    event = WindowCloseEvent()
    app.on_event(event)
    assert app.running is False
    assert event.handled is True
    assert top.events == [event]
    assert bottom.events == []


def test_handled_event_stops_propagation(app):
    journal = []
    bottom = Recorder("bottom", journal)
    top = Recorder("top", journal, handles=True)
    app.push_layer(bottom)
    app.push_layer(top)
    app.on_event(KeyPressedEvent(KeyCode.A, 0))
    assert len(top.events) == 1
    assert bottom.events == []


def test_resize_minimizes_and_sets_viewport(app, renderer):
    app.on_event(WindowResizeEvent(0, 0))
    assert app.minimized is True
    app.on_event(WindowResizeEvent(800, 600))
    assert app.minimized is False
    assert renderer.commands.renderer_api.viewport == (0, 0, 800, 600)


def test_key_events_update_polled_input(app):
    app.on_event(KeyPressedEvent(KeyCode.A, 0))
    assert eis_input.is_key_pressed(KeyCode.A) is True
    app.on_event(KeyReleasedEvent(KeyCode.A))
    assert eis_input.is_key_pressed(KeyCode.A) is False


def test_run_until_layer_closes(app):
    layer = Recorder("game", [], close_after=3)
    app.push_layer(layer)
    app.run()
    assert layer.updates == 3
    assert layer.renders == 3


def test_run_stops_on_window_close_event(app):
    layer = Recorder("game", [])
    app.push_layer(layer)
    app.window.post_event(WindowCloseEvent())
    app.run()
    assert layer.updates == 1
    assert app.running is False


def test_minimized_window_skips_layer_updates(app):
    layer = Recorder("game", [])
    app.push_layer(layer)
    app.window.post_event(WindowResizeEvent(0, 0))
    app.run_frames = None
    app.window.post_event(WindowCloseEvent())
    app.run()
    assert layer.updates == 1
    assert app.minimized is True


def test_run_app_logs_and_shuts_down(renderer, tmp_path):
    journal = []

    def create():
        application = Application(renderer=renderer)
        application.push_layer(Recorder("game", journal, close_after=2))
        return application

    assert run_app(create) == 0
    assert journal[-1] == ("detach", "game")
    with pytest.raises(RuntimeError):
        Application.get()
    text = (tmp_path / "Eis.log").read_text()
    assert "Init" in text
    assert "Shutting down..." in text