"""Batched 2D renderer for quads, circles and lines."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, replace
from typing import ClassVar, Optional, Sequence

import numpy as np

from eis.rendering.buffers import BufferElement, BufferLayout, ShaderDataType
from eis.rendering.renderer_api import API, RenderCommands, RendererAPI
from eis.rendering.shader import Shader
from eis.rendering.texture import Texture2D
from eis.rendering.vertex_array import VertexArray

MAX_QUADS = 10000
MAX_QUAD_VERTICES = MAX_QUADS * 4
MAX_QUAD_INDICES = MAX_QUADS * 6

MAX_CIRCLES = 5000
MAX_CIRCLE_VERTICES = MAX_CIRCLES * 4
MAX_CIRCLE_INDICES = MAX_CIRCLES * 6

MAX_LINES = 1000
MAX_LINE_VERTICES = MAX_LINES * 2

MAX_TEXTURE_SLOTS = 32

QUAD_SHADER_PATH = "assets/shaders/Quad.glsl"
CIRCLE_SHADER_PATH = "assets/shaders/Circle.glsl"
LINE_SHADER_PATH = "assets/shaders/Line.glsl"

_WHITE = (1.0, 1.0, 1.0, 1.0)
_TEXTURE_COORDS = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0))
_QUAD_POSITIONS = np.array([
    [-0.5, -0.5, 0.0, 1.0],
    [0.5, -0.5, 0.0, 1.0],
    [0.5, 0.5, 0.0, 1.0],
    [-0.5, 0.5, 0.0, 1.0],
])

Vec3 = tuple[float, float, float]
Vec4 = tuple[float, float, float, float]


def _vec(values: Sequence[float], count: int, what: str) -> tuple[float, ...]:
    result = tuple(float(v) for v in values)
    if len(result) != count:
        raise ValueError(f"{what} needs {count} components, got {len(result)}")
    return result


def _position(values: Sequence[float], z: float = 0.0) -> Vec3:
    result = tuple(float(v) for v in values)
    if len(result) == 2:
        return (result[0], result[1], z)
    if len(result) == 3:
        return result  # type: ignore[return-value]
    raise ValueError(f"position needs 2 or 3 components, got {len(result)}")


def _transform(position: Vec3, size: Sequence[float], rotation: float = 0.0) -> np.ndarray:
    sx, sy = _vec(size, 2, "size")
    translate = np.identity(4)
    translate[:3, 3] = position
    rad = math.radians(rotation)
    c, s = math.cos(rad), math.sin(rad)
    rotate = np.identity(4)
    rotate[0, 0], rotate[0, 1] = c, -s
    rotate[1, 0], rotate[1, 1] = s, c
    scale = np.diag([sx, sy, 1.0, 1.0])
    return translate @ rotate @ scale


def _corners(transform: np.ndarray) -> list[Vec3]:
    world = (transform @ _QUAD_POSITIONS.T).T
    return [(float(x), float(y), float(z)) for x, y, z, _ in world]


@dataclass(frozen=True)
class QuadVertex:
    """One corner of a quad as the quad shader reads it."""

    position: Vec3
    color: Vec4
    tex_coord: tuple[float, float]
    tex_index: float
    tiling_factor: float

    FORMAT: ClassVar[struct.Struct] = struct.Struct("<11f")

    def pack(self) -> bytes:
        return self.FORMAT.pack(*self.position, *self.color, *self.tex_coord,
                                self.tex_index, self.tiling_factor)


@dataclass(frozen=True)
class CircleVertex:
    """One corner of a circle's bounding quad."""

    world_position: Vec3
    local_position: Vec3
    color: Vec4
    thickness: float
    fade: float

    FORMAT: ClassVar[struct.Struct] = struct.Struct("<12f")

    def pack(self) -> bytes:
        return self.FORMAT.pack(*self.world_position, *self.local_position, *self.color,
                                self.thickness, self.fade)


@dataclass(frozen=True)
class LineVertex:
    """One end of a line segment."""

    position: Vec3
    color: Vec4

    FORMAT: ClassVar[struct.Struct] = struct.Struct("<7f")

    def pack(self) -> bytes:
        return self.FORMAT.pack(*self.position, *self.color)


@dataclass
class Statistics:
    """Draw calls and primitives submitted since the last reset."""

    draw_calls: int = 0
    quad_count: int = 0
    circle_count: int = 0
    line_count: int = 0

    def vertex_count(self) -> int:
        return (self.quad_count + self.circle_count) * 4 + self.line_count * 2

    def index_count(self) -> int:
        return (self.quad_count + self.circle_count) * 6 + self.line_count * 2


def _quad_indices():
    for off in range(0, MAX_QUAD_VERTICES, 4):
        yield from (off, off + 1, off + 2, off + 2, off + 3, off)


class Renderer2D:
    """Collects primitives into batches and submits each batch as one draw call."""

    def __init__(self, api: Optional[RendererAPI] = None) -> None:
        self.commands = RenderCommands(api)
        backend = self.commands.renderer_api
        self.commands.init()

        self._quad_vb = backend.create_vertex_buffer(MAX_QUAD_VERTICES * QuadVertex.FORMAT.size)
        self._quad_vb.layout = BufferLayout([
            BufferElement(ShaderDataType.FLOAT3, "a_Position"),
            BufferElement(ShaderDataType.FLOAT4, "a_Color"),
            BufferElement(ShaderDataType.FLOAT2, "a_TexCoord"),
            BufferElement(ShaderDataType.FLOAT, "a_TexIndex"),
            BufferElement(ShaderDataType.FLOAT, "a_TilingFactor"),
        ])
        self.quad_vertex_array: VertexArray = backend.create_vertex_array()
        self.quad_vertex_array.add_vertex_buffer(self._quad_vb)
        quad_ib = backend.create_index_buffer(_quad_indices())
        self.quad_vertex_array.set_index_buffer(quad_ib)

        self._circle_vb = backend.create_vertex_buffer(MAX_CIRCLE_VERTICES * CircleVertex.FORMAT.size)
        self._circle_vb.layout = BufferLayout([
            BufferElement(ShaderDataType.FLOAT3, "a_WorldPosition"),
            BufferElement(ShaderDataType.FLOAT3, "a_LocalPosition"),
            BufferElement(ShaderDataType.FLOAT4, "a_Color"),
            BufferElement(ShaderDataType.FLOAT, "a_Thickness"),
            BufferElement(ShaderDataType.FLOAT, "a_Fade"),
        ])
        self.circle_vertex_array: VertexArray = backend.create_vertex_array()
        self.circle_vertex_array.add_vertex_buffer(self._circle_vb)
        self.circle_vertex_array.set_index_buffer(quad_ib)

        self._line_vb = backend.create_vertex_buffer(MAX_LINE_VERTICES * LineVertex.FORMAT.size)
        self._line_vb.layout = BufferLayout([
            BufferElement(ShaderDataType.FLOAT3, "a_Position"),
            BufferElement(ShaderDataType.FLOAT4, "a_Color"),
        ])
        self.line_vertex_array: VertexArray = backend.create_vertex_array()
        self.line_vertex_array.add_vertex_buffer(self._line_vb)

        self.white_texture: Texture2D = backend.create_texture(1, 1)
        self.white_texture.set_data(b"\xff\xff\xff\xff")

        self.quad_shader: Shader = backend.create_shader(QUAD_SHADER_PATH)
        self.quad_shader.bind()
        self.quad_shader.set_int_array("u_Textures", range(MAX_TEXTURE_SLOTS))

        self.circle_shader: Shader = backend.create_shader(CIRCLE_SHADER_PATH)
        self.circle_shader.bind()
        self.circle_shader.set_int("u_Texture", 0)

        self.line_shader: Shader = backend.create_shader(LINE_SHADER_PATH)
        self.line_shader.bind()

        self.line_width = 1.5
        self._texture_slots: list[Optional[Texture2D]] = [None] * MAX_TEXTURE_SLOTS
        self._texture_slots[0] = self.white_texture
        self._stats = Statistics()

        self._quad_vertices: list[QuadVertex] = []
        self._circle_vertices: list[CircleVertex] = []
        self._line_vertices: list[LineVertex] = []
        self._quad_index_count = 0
        self._circle_index_count = 0
        self._line_vertex_count = 0
        self._texture_slot_index = 1

    # State

    @property
    def api(self) -> API:
        return self.commands.renderer_api.backend

    @property
    def stats(self) -> Statistics:
        return replace(self._stats)

    @property
    def quad_vertices(self) -> tuple[QuadVertex, ...]:
        return tuple(self._quad_vertices)

    @property
    def circle_vertices(self) -> tuple[CircleVertex, ...]:
        return tuple(self._circle_vertices)

    @property
    def line_vertices(self) -> tuple[LineVertex, ...]:
        return tuple(self._line_vertices)

    @property
    def texture_slots(self) -> tuple[Texture2D, ...]:
        """Textures used by the current quad batch; slot 0 is the white texture."""
        return tuple(self._texture_slots[: self._texture_slot_index])  # type: ignore[arg-type]

    def shutdown(self) -> None:
        """Drop any pending vertices."""
        self._start_batch_quads()
        self._start_batch_circles()
        self._start_batch_lines()

    # Scenes and batches

    def begin_scene(self, camera) -> None:
        view_projection = camera.view_projection_matrix
        for shader in (self.quad_shader, self.circle_shader, self.line_shader):
            shader.bind()
            shader.set_mat4("u_VP", view_projection)
        self.start_batch()

    def end_scene(self) -> None:
        self.flush()

    def start_batch(self) -> None:
        self._start_batch_quads()
        self._start_batch_circles()
        self._start_batch_lines()

    def _start_batch_quads(self) -> None:
        self._quad_index_count = 0
        self._quad_vertices.clear()
        self._texture_slot_index = 1

    def _start_batch_circles(self) -> None:
        self._circle_index_count = 0
        self._circle_vertices.clear()

    def _start_batch_lines(self) -> None:
        self._line_vertex_count = 0
        self._line_vertices.clear()

    def next_batch_quads(self) -> None:
        self._flush_quads()
        self._start_batch_quads()

    def next_batch_circles(self) -> None:
        self._flush_circles()
        self._start_batch_circles()

    def next_batch_lines(self) -> None:
        self._flush_lines()
        self._start_batch_lines()

    def flush(self) -> None:
        self._flush_quads()
        self._flush_circles()
        self._flush_lines()

    def _flush_quads(self) -> None:
        if self._quad_index_count == 0:
            return
        self._quad_vb.set_data(b"".join(v.pack() for v in self._quad_vertices))
        for slot, texture in enumerate(self._texture_slots[: self._texture_slot_index]):
            texture.bind(slot)  # type: ignore[union-attr]
        self.quad_shader.bind()
        self.commands.draw_indexed(self.quad_vertex_array, self._quad_index_count)
        self._stats.draw_calls += 1

    def _flush_circles(self) -> None:
        if self._circle_index_count == 0:
            return
        self._circle_vb.set_data(b"".join(v.pack() for v in self._circle_vertices))
        self.circle_shader.bind()
        self.commands.draw_indexed(self.circle_vertex_array, self._circle_index_count)
        self._stats.draw_calls += 1

    def _flush_lines(self) -> None:
        if self._line_vertex_count == 0:
            return
        self._line_vb.set_data(b"".join(v.pack() for v in self._line_vertices))
        self.line_shader.bind()
        self.commands.set_line_width(self.line_width)
        self.commands.draw_lines(self.line_vertex_array, self._line_vertex_count)
        self._stats.draw_calls += 1

    # Primitives

    def _texture_index(self, texture: Texture2D) -> float:
        for slot in range(1, self._texture_slot_index):
            if self._texture_slots[slot] == texture:
                return float(slot)
        if self._texture_slot_index >= MAX_TEXTURE_SLOTS:
            self.next_batch_quads()
        slot = self._texture_slot_index
        self._texture_slots[slot] = texture
        self._texture_slot_index += 1
        return float(slot)

    def _push_quad(self, position: Vec3, size: Sequence[float], rotation: float,
                   color: Sequence[float], texture: Optional[Texture2D], tiling: float) -> None:
        rgba = _vec(color, 4, "color")
        transform = _transform(position, size, rotation)
        if self._quad_index_count >= MAX_QUAD_INDICES:
            self.next_batch_quads()
        if texture is None:
            tex_index, tiling_factor = 0.0, 1.0
        else:
            tex_index, tiling_factor = self._texture_index(texture), float(tiling)
        for corner, tex_coord in zip(_corners(transform), _TEXTURE_COORDS):
            self._quad_vertices.append(QuadVertex(corner, rgba, tex_coord, tex_index, tiling_factor))  # type: ignore[arg-type]
        self._quad_index_count += 6
        self._stats.quad_count += 1

    def draw_quad(self, position: Sequence[float], size: Sequence[float],
                  color: Sequence[float] = _WHITE, texture: Optional[Texture2D] = None,
                  tiling: float = 1.0) -> None:
        """Draw an axis-aligned quad; with a texture, ``color`` tints it."""
        self._push_quad(_position(position), size, 0.0, color, texture, tiling)

    def draw_rotated_quad(self, position: Sequence[float], size: Sequence[float], rotation: float,
                          color: Sequence[float] = _WHITE, texture: Optional[Texture2D] = None,
                          tiling: float = 1.0) -> None:
        """Draw a quad rotated by ``rotation`` degrees about its centre.

        A textured quad given a 2D position is placed at depth 1.
        """
        z = 1.0 if texture is not None else 0.0
        self._push_quad(_position(position, z), size, float(rotation), color, texture, tiling)

    def draw_circle(self, position: Sequence[float], size: Sequence[float], color: Sequence[float],
                    thickness: float = 1.0, fade: float = 0.0) -> None:
        rgba = _vec(color, 4, "color")
        transform = _transform(_position(position), size)
        if self._circle_index_count >= MAX_CIRCLE_INDICES:
            self.next_batch_circles()
        for corner, local in zip(_corners(transform), _QUAD_POSITIONS):
            local_pos = (float(local[0] * 2.0), float(local[1] * 2.0), float(local[2] * 2.0))
            self._circle_vertices.append(
                CircleVertex(corner, local_pos, rgba, float(thickness), float(fade)))  # type: ignore[arg-type]
        self._circle_index_count += 6
        self._stats.circle_count += 1

    def draw_line(self, start: Sequence[float], end: Sequence[float], color: Sequence[float]) -> None:
        rgba = _vec(color, 4, "color")
        a, b = _position(start), _position(end)
        if self._line_vertex_count >= MAX_LINE_VERTICES:
            self.next_batch_lines()
        self._line_vertices.append(LineVertex(a, rgba))  # type: ignore[arg-type]
        self._line_vertices.append(LineVertex(b, rgba))  # type: ignore[arg-type]
        self._line_vertex_count += 2
        self._stats.line_count += 1

    def draw_line_polar(self, start: Sequence[float], angle: float, length: float,
                        color: Sequence[float]) -> None:
        """Draw a line of ``length`` from ``start``, ``angle`` degrees anticlockwise from +y.

        A 2D start point is placed at depth 1.
        """
        origin = _position(start, 1.0)
        rad = math.radians(angle)
        end = (origin[0] - length * math.sin(rad), origin[1] + length * math.cos(rad), origin[2])
        self.draw_line(origin, end, color)

    # Commands

    def reset_stats(self) -> None:
        self._stats = Statistics()

    def set_clear_color(self, color: Sequence[float]) -> None:
        self.commands.set_clear_color(color)

    def clear(self) -> None:
        self.commands.clear()

    def on_window_resized(self, width: int, height: int) -> None:
        self.commands.set_viewport(0, 0, width, height)