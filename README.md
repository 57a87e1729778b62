# eis

A small framework for 2D applications. It holds the parts a game or
visualisation loop is made of: events, layers, input state, cameras, a
batching 2D renderer, images, profiling and logging. Everything runs in
memory, so every part can be driven and inspected from plain Python code
and from tests.

## What is in it

- `eis.events`: window, application, keyboard and mouse events. Each has
  an `EventType` and `EventCategory` flags (`is_in_category`). There is
  also an `EventDispatcher` that calls a handler when the event is of a
  given class. The handler's return value sets `event.handled`.
- `eis.codes`: `KeyCode` and `MouseCode`, numbered as in GLFW.
- `eis.layers`: `Layer`, which has hooks to override (`on_attach`,
  `on_detach`, `on_update`, `on_imgui_render`, `on_event`), and
  `LayerStack`. Normal layers sit below overlays. Iteration runs from
  the bottom up and `reversed()` runs from the top down.
- `eis.timestep`: `TimeStep`, a frame delta in seconds, with
  `milliseconds`.
- `eis.buffer`: `Buffer`, a resizable block of bytes. Writes are
  bounds-checked, reads are typed (`read(fmt, offset)` uses `struct`
  formats), and it has `append_null`, `zero_init`, `resize` and
  `release`.
- `eis.randomgen`: `RandomGenerator`. When seeded with the same value it
  produces the same 32-bit sequence as `mt19937`. It offers `uint`,
  `uniform` and `vec3`, with optional bounds. The module-level `init`,
  `set_seed`, `uint`, `uniform` and `vec3` share one generator, which
  starts with seed 5489. `init()` reseeds it from system entropy.
- `eis.input`: `InputBackend` keeps key, button and cursor state up to
  date from events. `is_key_pressed`, `is_mouse_button_pressed`,
  `get_mouse_pos`, `get_mouse_x` and `get_mouse_y` query the installed
  backend, and `set_backend` replaces it.
- `eis.camera`: `OrthographicCamera` has `position` and `rotation` in
  degrees, and the projection, view and view-projection matrices as
  numpy arrays. `OrthoCameraController` does the following:
  - Moves the camera with WASD or the arrow keys.
  - Rotates it with Q and E once `rotation_lock` is turned off.
  - Zooms with the scroll wheel, clamped to `min_zoom` and `max_zoom`.
  - Follows window resizes.
  - Maps a cursor position to world coordinates with
    `calculate_mouse_world_pos`.
- `eis.rendering`:
  - `buffers`: `ShaderDataType`, `BufferElement`, `BufferLayout`,
    `VertexBuffer` and `IndexBuffer`.
  - `shader`:
    - `Shader` stores each stage's source and the uniform values set on
      it.
    - `preprocess` splits a file into sections marked
      `#type vertex` / `#type fragment`.
    - `shader_name_from_path` takes the name from the file name.
    - `ShaderLibrary` holds shaders by unique name.
  - `texture`: `Texture` and `Texture2D`, which hold RGB or RGBA pixels.
    `Texture2D.load` reads an image file flipped bottom-up. Textures
    compare equal by `renderer_id`.
  - `vertex_array`: `VertexArray` assigns attribute indices to each
    vertex buffer's layout and holds an index buffer.
  - `renderer_api`: `RendererAPI` keeps render state such as the
    viewport, clear colour, line width and enabled capabilities. It
    records every draw as a `DrawCall`. `RenderCommands` forwards calls
    to it.
  - `renderer2d`: `Renderer2D` batches quads, rotated quads, textured
    quads, circles and lines. A batch is flushed as one draw call, and
    a new batch starts when it reaches 10000 quads, 5000 circles,
    1000 lines or 32 texture slots. It keeps `Statistics`.
- `eis.image`: `Image` holds 8-bit pixels with 1 to 4 channels. It has
  `Image.load`, `get_pixel`, `resize`, `copy`, and `save` to `.png`,
  `.jpg`, `.bmp` or `.tga`.
- `eis.instrumentor`: `Instrumentor` writes timing scopes to a
  Chrome-trace JSON file. Two timing helpers report to the process-wide
  instrumentor from `get_instrumentor()`:
  - `profile_scope` (an `InstrumentationTimer` used with `with`).
  - `profile_function` (a decorator).
- `eis.log`: `init(log_file="Eis.log")` sends the core logger `EIS`
  (`core_logger()`) and the client logger `APP` (`client_logger()`) to
  stdout and to a fresh log file. Both loggers log at the `TRACE` level.
- `eis.application`:
  - `WindowProps` gives a window's title and size.
  - `Window` queues events with `post_event` and delivers them on
    `on_update`.
  - `Application` owns the window, the renderer, an input backend and
    the layer stack, routes events and runs the frame loop.
  - `run_app` sets up logging, then creates, runs and shuts down an
    application.

## Handling events

```python
from eis.events import EventDispatcher, WindowResizeEvent
from eis.layers import Layer


class Game(Layer):
    def on_event(self, event):
        EventDispatcher(event).dispatch(WindowResizeEvent, self.on_resize)

    def on_resize(self, event):
        print(event)  # "WindowResizeEvent: 800, 600"
        return False  # leave it unhandled for the layers below
```

## Buffers

```python
from eis.buffer import Buffer

buf = Buffer(b"hello")
buf.append_null()
assert bytes(buf) == b"hello\x00"
assert len(buf) == 6
```

## Running an application

`Application` takes a window factory, a renderer and `WindowProps`. By
default it uses the in-memory `Window` and a `Renderer2D`. Any renderer
with `shutdown()` and `on_window_resized(width, height)` will do. The
loop runs until `close()` is called or a `WindowCloseEvent` arrives.

```python
from eis.application import Application, WindowProps, run_app
from eis.layers import Layer


class NullRenderer:
    def shutdown(self):
        pass

    def on_window_resized(self, width, height):
        pass


class ThreeFrames(Layer):
    frames = 0

    def on_update(self, ts):
        self.frames += 1
        if self.frames == 3:
            Application.get().close()


def create_application():
    app = Application(renderer=NullRenderer(), props=WindowProps("Demo", 800, 600))
    app.push_layer(ThreeFrames("Game"))
    return app


run_app(create_application)  # returns 0; writes Eis.log in the working directory
```

Only one `Application` can exist at a time. `shutdown()`, or leaving a
`with Application(...)` block, gives up the instance and detaches all
layers.

## Drawing in 2D

By default `Renderer2D` loads its shaders from
`assets/shaders/Quad.glsl`, `Circle.glsl` and `Line.glsl`. To supply them
another way, subclass `RendererAPI` and override `create_shader`:

```python
from eis.camera import OrthographicCamera
from eis.rendering.renderer2d import Renderer2D
from eis.rendering.renderer_api import RendererAPI
from eis.rendering.shader import Shader


class InlineShaders(RendererAPI):
    def create_shader(self, file_path):
        return Shader.from_sources(file_path, "", "")


renderer = Renderer2D(InlineShaders())
renderer.begin_scene(OrthographicCamera(-1.6, 1.6, -0.9, 0.9))
renderer.draw_quad((0, 0), (1, 1), (1, 0, 0, 1))
renderer.draw_circle((0.5, 0.5), (0.2, 0.2), (0, 1, 0, 1))
renderer.draw_line((0, 0), (1, 1), (1, 1, 1, 1))
renderer.end_scene()

assert renderer.stats.draw_calls == 3
print(renderer.commands.renderer_api.draw_calls)
```

## Profiling

```python
from eis.instrumentor import get_instrumentor, profile_function, profile_scope

profiler = get_instrumentor()
profiler.begin_session("Startup", "startup.json")
with profile_scope("load level"):
    ...
profiler.end_session()
```

Results are written only while a session is open. The file loads in any
viewer that reads the Chrome tracing format.

## What it does not do

The package opens no operating-system window and draws nothing on screen.
`Window` is an event queue. `RendererAPI` keeps state and records draw
calls instead of sending them to a GPU, and `Shader` does not compile its
sources. There is no immediate-mode UI: `Layer.on_imgui_render` is only a
per-frame hook. There is no networking. Key, mouse and window input
reaches the application only as events posted to its window or passed to
`Application.on_event`.