"""A resizable block of raw bytes."""

from __future__ import annotations

import struct
from typing import Any


def _as_bytes(data: Any) -> bytes:
    if isinstance(data, int):
        raise TypeError("expected bytes-like data, not int")
    return bytes(data)


class Buffer:
    """Owned, resizable byte storage with typed reads and bounded writes."""

    __slots__ = ("_data",)

    def __init__(self, data: Any = None) -> None:
        self._data = bytearray() if data is None else bytearray(_as_bytes(data))

    @property
    def size(self) -> int:
        return len(self._data)

    @property
    def data(self) -> memoryview:
        return memoryview(self._data)

    def allocate(self, size: int) -> None:
        """Replace the contents with ``size`` zero bytes."""
        if size < 0:
            raise ValueError("size must not be negative")
        self._data = bytearray(size)

    def resize(self, size: int) -> None:
        """Change the size, keeping the common prefix; new bytes are zero."""
        if size < 0:
            raise ValueError("size must not be negative")
        if size < len(self._data):
            del self._data[size:]
        else:
            self._data.extend(bytes(size - len(self._data)))

    def release(self) -> None:
        self._data = bytearray()

    def zero_init(self) -> None:
        self._data[:] = bytes(len(self._data))

    def append_null(self) -> None:
        self._data.append(0)

    def write(self, data: Any, offset: int = 0) -> None:
        """Copy ``data`` in at ``offset``; the buffer does not grow."""
        chunk = _as_bytes(data)
        if not chunk:
            return
        if offset < 0:
            raise ValueError("offset must not be negative")
        if offset + len(chunk) > len(self._data):
            raise ValueError("Buffer overflow!")
        self._data[offset:offset + len(chunk)] = chunk

    def read(self, fmt: str, offset: int = 0) -> Any:
        """Unpack a struct format at ``offset``; a single field is returned bare."""
        if offset < 0:
            raise ValueError("offset must not be negative")
        try:
            values = struct.unpack_from(fmt, self._data, offset)
        except struct.error as exc:
            raise ValueError(str(exc)) from exc
        return values[0] if len(values) == 1 else values

    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:
        return bool(self._data)

    def __getitem__(self, index: int | slice) -> int | bytes:
        item = self._data[index]
        return bytes(item) if isinstance(index, slice) else item

    def __setitem__(self, index: int, value: int) -> None:
        self._data[index] = value

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Buffer):
            return self._data == other._data
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self._data == bytes(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Buffer({bytes(self._data)!r})"