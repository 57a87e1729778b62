"""The rendering backend and the command front end that drives it."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Iterable, Optional, Sequence

from eis.rendering.buffers import IndexBuffer, VertexBuffer
from eis.rendering.shader import Shader
from eis.rendering.texture import Texture2D
from eis.rendering.vertex_array import VertexArray

LINE_SMOOTH = 0x0B20
BLEND = 0x0BE2
DEPTH_TEST = 0x0B71


class API(Enum):
    """Graphics interfaces a backend can implement."""

    NONE = 0
    OPENGL = 1


@dataclass(frozen=True)
class DrawCall:
    """One recorded draw: 'triangles' or 'lines', the array drawn and the element count."""

    primitive: str
    vertex_array: VertexArray
    count: int


def _index_count(va: VertexArray) -> int:
    if va.index_buffer is None:
        raise ValueError("Vertex array has no index buffer to take a count from")
    return va.index_buffer.count


class RendererAPI:
    """Backend keeping its render state in memory and recording every draw."""

    backend: ClassVar[API] = API.OPENGL

    def __init__(self) -> None:
        self.initialized = False
        self.viewport = (0, 0, 0, 0)
        self.clear_color = (0.0, 0.0, 0.0, 0.0)
        self.line_width = 1.0
        self.blend_function: Optional[tuple[str, str]] = None
        self.enabled: set[int] = set()
        self.clear_count = 0
        self.draw_calls: list[DrawCall] = []

    @classmethod
    def create(cls, api: API = API.OPENGL) -> "RendererAPI":
        if api is API.NONE:
            raise ValueError("Invalid graphics API: None")
        if api is not cls.backend:
            raise ValueError(f"Unknown graphics API: {api!r}")
        return cls()

    def init(self) -> None:
        self.enabled.update((LINE_SMOOTH, BLEND, DEPTH_TEST))
        self.blend_function = ("src_alpha", "one_minus_src_alpha")
        self.initialized = True

    def set_viewport(self, x: int, y: int, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError("viewport size must not be negative")
        self.viewport = (x, y, width, height)

    def set_clear_color(self, color: Sequence[float]) -> None:
        values = tuple(float(c) for c in color)
        if len(values) != 4:
            raise ValueError("clear color needs four components")
        self.clear_color = values

    def clear(self) -> None:
        self.clear_count += 1

    def draw_indexed(self, va: VertexArray, index_count: int = 0) -> DrawCall:
        """Draw triangles; a zero count means the whole index buffer."""
        va.bind()
        call = DrawCall("triangles", va, index_count or _index_count(va))
        self.draw_calls.append(call)
        return call

    def draw_lines(self, va: VertexArray, vertex_count: int = 0) -> DrawCall:
        """Draw line segments; a zero count means the index buffer's count."""
        va.bind()
        call = DrawCall("lines", va, vertex_count or _index_count(va))
        self.draw_calls.append(call)
        return call

    def set_line_width(self, width: float) -> None:
        if width <= 0:
            raise ValueError("line width must be positive")
        self.line_width = float(width)

    def enable(self, code: int) -> None:
        self.enabled.add(code)

    def disable(self, code: int) -> None:
        self.enabled.discard(code)

    def create_vertex_buffer(self, size: int) -> VertexBuffer:
        return VertexBuffer(size)

    def create_index_buffer(self, indices: Iterable[int]) -> IndexBuffer:
        return IndexBuffer(indices)

    def create_vertex_array(self) -> VertexArray:
        return VertexArray()

    def create_texture(self, width: int, height: int) -> Texture2D:
        return Texture2D(width, height)

    def create_shader(self, file_path: str) -> Shader:
        return Shader.from_file(file_path)


class RenderCommands:
    """Forwards render commands to one backend."""

    def __init__(self, api: Optional[RendererAPI] = None) -> None:
        self.renderer_api = api if api is not None else RendererAPI.create()

    def init(self) -> None:
        self.renderer_api.init()

    def set_viewport(self, x: int, y: int, width: int, height: int) -> None:
        self.renderer_api.set_viewport(x, y, width, height)

    def set_clear_color(self, color: Sequence[float]) -> None:
        self.renderer_api.set_clear_color(color)

    def clear(self) -> None:
        self.renderer_api.clear()

    def draw_indexed(self, va: VertexArray, index_count: int = 0) -> DrawCall:
        return self.renderer_api.draw_indexed(va, index_count)

    def draw_lines(self, va: VertexArray, vertex_count: int = 0) -> DrawCall:
        return self.renderer_api.draw_lines(va, vertex_count)

    def set_line_width(self, width: float) -> None:
        self.renderer_api.set_line_width(width)

    def enable(self, code: int) -> None:
        self.renderer_api.enable(code)

    def disable(self, code: int) -> None:
        self.renderer_api.disable(code)