"""Shader programs, the '#type' source format and a named shader library."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence, Union

import numpy as np

_TYPE_TOKEN = "#type"
_NEWLINE = re.compile(r"[\r\n]")
_NOT_NEWLINE = re.compile(r"[^\r\n]")


class ShaderType(Enum):
    """Stages a shader source section can declare."""

    VERTEX = "vertex"
    FRAGMENT = "fragment"

    @classmethod
    def from_name(cls, name: str) -> "ShaderType":
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unknown shader type: {name!r}") from None


def preprocess(source: str) -> dict[ShaderType, str]:
    """Split a combined source into stages, each introduced by a '#type <stage>' line."""
    sections: dict[ShaderType, str] = {}
    pos = source.find(_TYPE_TOKEN)
    while pos != -1:
        eol = _NEWLINE.search(source, pos)
        if eol is None:
            raise ValueError("Syntax error: '#type' line is not terminated")
        begin = pos + len(_TYPE_TOKEN) + 1
        shader_type = ShaderType.from_name(source[begin:eol.start()])

        code = _NOT_NEWLINE.search(source, eol.start())
        if code is None:
            raise ValueError("Syntax error: no shader code after '#type' line")
        start = code.start()
        pos = source.find(_TYPE_TOKEN, start)
        sections[shader_type] = source[start:] if pos == -1 else source[start:pos]
    return sections


def shader_name_from_path(path: str) -> str:
    """The file name without directory or extension: 'assets/shaders/Example.glsl' gives 'Example'."""
    start = max(path.rfind("/"), path.rfind("\\")) + 1
    dot = path.rfind(".")
    if dot == -1 or dot < start:
        return path[start:]
    return path[start:dot]


def read_shader_file(path: Union[str, Path]) -> str:
    """The file's text exactly as stored, line endings included."""
    return Path(path).read_bytes().decode("utf-8")


def _floats(value: Sequence[float], count: int) -> tuple[float, ...]:
    values = tuple(float(v) for v in value)
    if len(values) != count:
        raise ValueError(f"expected {count} components, got {len(values)}")
    return values


class Shader:
    """A shader program: its stage sources and the uniform values set on it."""

    def __init__(self, name: str, sources: Mapping[ShaderType, str]) -> None:
        self.name = name
        self._sources = {ShaderType(key): str(text) for key, text in sources.items()}
        self._uniforms: dict[str, Any] = {}
        self.bound = False

    @classmethod
    def from_file(cls, path: str) -> "Shader":
        return cls(shader_name_from_path(path), preprocess(read_shader_file(path)))

    @classmethod
    def from_sources(cls, name: str, vertex_source: str, fragment_source: str) -> "Shader":
        return cls(name, {ShaderType.VERTEX: vertex_source, ShaderType.FRAGMENT: fragment_source})

    @property
    def sources(self) -> Mapping[ShaderType, str]:
        return MappingProxyType(self._sources)

    @property
    def uniforms(self) -> Mapping[str, Any]:
        return MappingProxyType(self._uniforms)

    def bind(self) -> None:
        self.bound = True

    def unbind(self) -> None:
        self.bound = False

    def set_int(self, name: str, value: int) -> None:
        self._uniforms[name] = int(value)

    def set_int_array(self, name: str, values: Sequence[int]) -> None:
        self._uniforms[name] = tuple(int(v) for v in values)

    def set_float(self, name: str, value: float) -> None:
        self._uniforms[name] = float(value)

    def set_float2(self, name: str, value: Sequence[float]) -> None:
        self._uniforms[name] = _floats(value, 2)

    def set_float3(self, name: str, value: Sequence[float]) -> None:
        self._uniforms[name] = _floats(value, 3)

    def set_float4(self, name: str, value: Sequence[float]) -> None:
        self._uniforms[name] = _floats(value, 4)

    def set_mat4(self, name: str, value: Any) -> None:
        matrix = np.array(value, dtype=np.float32)
        if matrix.shape != (4, 4):
            raise ValueError(f"expected a 4x4 matrix, got shape {matrix.shape}")
        self._uniforms[name] = matrix

    def __repr__(self) -> str:
        return f"<Shader {self.name!r}>"


class ShaderLibrary:
    """Shaders stored under unique names."""

    def __init__(self, factory: Optional[Callable[[str], Shader]] = None) -> None:
        self._factory = factory if factory is not None else Shader.from_file
        self._shaders: dict[str, Shader] = {}

    def add(self, shader: Shader, name: Optional[str] = None) -> None:
        key = shader.name if name is None else name
        if key in self._shaders:
            raise ValueError(f"Shader already exists: {key!r}")
        self._shaders[key] = shader

    def load(self, file_path: str, name: Optional[str] = None) -> Shader:
        shader = self._factory(file_path)
        self.add(shader, name)
        return shader

    def get(self, name: str) -> Shader:
        try:
            return self._shaders[name]
        except KeyError:
            raise KeyError(f"Shader not found: {name!r}") from None

    def __contains__(self, name: object) -> bool:
        return name in self._shaders

    def __len__(self) -> int:
        return len(self._shaders)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._shaders))