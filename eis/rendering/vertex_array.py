"""Vertex arrays tying vertex buffers and an index buffer together."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Optional

from eis.rendering.buffers import IndexBuffer, ShaderDataType, VertexBuffer

_ids = itertools.count(1)

_COMPONENT_TYPE = {
    ShaderDataType.BOOL: "bool",
    ShaderDataType.INT: "int",
    ShaderDataType.INT2: "int",
    ShaderDataType.INT3: "int",
    ShaderDataType.INT4: "int",
    ShaderDataType.FLOAT: "float",
    ShaderDataType.FLOAT2: "float",
    ShaderDataType.FLOAT3: "float",
    ShaderDataType.FLOAT4: "float",
    ShaderDataType.MAT3: "float",
    ShaderDataType.MAT4: "float",
}


@dataclass(frozen=True)
class VertexAttribute:
    """How one attribute index reads from its vertex buffer."""

    index: int
    component_count: int
    component_type: str
    normalized: bool
    stride: int
    offset: int
    buffer: VertexBuffer


class VertexArray:
    """Attribute bindings for a set of vertex buffers plus an optional index buffer."""

    def __init__(self) -> None:
        self.renderer_id = next(_ids)
        self._vertex_buffers: list[VertexBuffer] = []
        self._attributes: list[VertexAttribute] = []
        self.index_buffer: Optional[IndexBuffer] = None
        self.bound = False

    @property
    def vertex_buffers(self) -> tuple[VertexBuffer, ...]:
        return tuple(self._vertex_buffers)

    @property
    def attributes(self) -> tuple[VertexAttribute, ...]:
        return tuple(self._attributes)

    def bind(self) -> None:
        self.bound = True

    def unbind(self) -> None:
        self.bound = False

    def add_vertex_buffer(self, vb: VertexBuffer) -> None:
        """Attach ``vb``, giving each of its layout elements the next attribute index."""
        layout = vb.layout
        if not len(layout):
            raise ValueError("Vertex Buffer has no layout!")
        self.bind()
        vb.bind()
        for element in layout:
            count = element.component_count()
            self._attributes.append(VertexAttribute(
                index=len(self._attributes),
                component_count=count,
                component_type=_COMPONENT_TYPE[element.data_type],
                normalized=element.normalized,
                stride=layout.stride,
                offset=element.offset,
                buffer=vb,
            ))
        self._vertex_buffers.append(vb)

    def set_index_buffer(self, ib: IndexBuffer) -> None:
        self.bind()
        ib.bind()
        self.index_buffer = ib