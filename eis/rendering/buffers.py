"""Vertex layouts and GPU-side vertex and index buffers."""

from __future__ import annotations

from array import array
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, Iterator

_UINT32_LIMIT = 1 << 32


class ShaderDataType(Enum):
    """Types a vertex attribute or uniform can have."""

    NONE = 0
    BOOL = 1
    INT = 2
    INT2 = 3
    INT3 = 4
    INT4 = 5
    FLOAT = 6
    FLOAT2 = 7
    FLOAT3 = 8
    FLOAT4 = 9
    MAT3 = 10
    MAT4 = 11


_COMPONENTS = {
    ShaderDataType.BOOL: 1,
    ShaderDataType.INT: 1,
    ShaderDataType.INT2: 2,
    ShaderDataType.INT3: 3,
    ShaderDataType.INT4: 4,
    ShaderDataType.FLOAT: 1,
    ShaderDataType.FLOAT2: 2,
    ShaderDataType.FLOAT3: 3,
    ShaderDataType.FLOAT4: 4,
    ShaderDataType.MAT3: 3 * 3,
    ShaderDataType.MAT4: 4 * 4,
}


def _component_count(data_type: ShaderDataType) -> int:
    try:
        return _COMPONENTS[data_type]
    except KeyError:
        raise ValueError(f"Unknown ShaderDataType: {data_type!r}") from None


def shader_data_type_size(data_type: ShaderDataType) -> int:
    """Size in bytes of one value of ``data_type``."""
    count = _component_count(data_type)
    return count if data_type is ShaderDataType.BOOL else count * 4


@dataclass(frozen=True)
class BufferElement:
    """One attribute in a vertex layout."""

    data_type: ShaderDataType
    name: str
    normalized: bool = False
    offset: int = 0

    @property
    def size(self) -> int:
        return shader_data_type_size(self.data_type)

    def component_count(self) -> int:
        return _component_count(self.data_type)


class BufferLayout:
    """Ordered attributes of a vertex, with their offsets and the vertex stride."""

    def __init__(self, elements: Iterable[BufferElement] = ()) -> None:
        placed: list[BufferElement] = []
        offset = 0
        for element in elements:
            placed.append(replace(element, offset=offset))
            offset += element.size
        self._elements = tuple(placed)
        self._stride = offset

    @property
    def elements(self) -> tuple[BufferElement, ...]:
        return self._elements

    @property
    def stride(self) -> int:
        return self._stride

    def __iter__(self) -> Iterator[BufferElement]:
        return iter(self._elements)

    def __len__(self) -> int:
        return len(self._elements)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BufferLayout):
            return NotImplemented
        return self._elements == other._elements

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"BufferLayout({list(self._elements)!r})"


def _as_bytes(data: Any) -> bytes:
    if isinstance(data, int):
        raise TypeError("expected bytes-like data, not int")
    return bytes(data)


def _pack_floats(vertices: Any) -> bytes:
    if isinstance(vertices, (bytes, bytearray, memoryview)):
        return bytes(vertices)
    return array("f", (float(v) for v in vertices)).tobytes()


class VertexBuffer:
    """Fixed-size vertex storage with a layout describing its contents."""

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("size must not be negative")
        self._storage = bytearray(size)
        self.layout = BufferLayout()
        self.bound = False

    @classmethod
    def from_vertices(cls, vertices: Any) -> "VertexBuffer":
        """A buffer holding ``vertices``: raw bytes, or floats packed as 32-bit."""
        packed = _pack_floats(vertices)
        buffer = cls(len(packed))
        buffer._storage[:] = packed
        return buffer

    @property
    def size(self) -> int:
        return len(self._storage)

    @property
    def data(self) -> bytes:
        return bytes(self._storage)

    def bind(self) -> None:
        self.bound = True

    def unbind(self) -> None:
        self.bound = False

    def set_data(self, data: Any) -> None:
        """Overwrite the start of the buffer with ``data``."""
        chunk = _as_bytes(data)
        if len(chunk) > len(self._storage):
            raise ValueError("Data exceeds the buffer size!")
        self._storage[: len(chunk)] = chunk


class IndexBuffer:
    """Unsigned 32-bit vertex indices."""

    def __init__(self, indices: Iterable[int]) -> None:
        values = tuple(int(i) for i in indices)
        if any(not 0 <= i < _UINT32_LIMIT for i in values):
            raise ValueError("indices must be unsigned 32-bit integers")
        self._indices = values
        self.bound = False

    @property
    def indices(self) -> tuple[int, ...]:
        return self._indices

    @property
    def count(self) -> int:
        return len(self._indices)

    def bind(self) -> None:
        self.bound = True

    def unbind(self) -> None:
        self.bound = False