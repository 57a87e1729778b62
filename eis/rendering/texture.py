"""2D textures holding RGB or RGBA pixel data."""

from __future__ import annotations

import itertools
from typing import Any, Optional

from PIL import Image as PILImage

from eis.log import core_logger

_ids = itertools.count(1)
_SUPPORTED_CHANNELS = (3, 4)


class Texture:
    """Pixel storage identified by a unique renderer id."""

    def __init__(self, width: int, height: int, channels: int = 4,
                 data: Any = None, path: Optional[str] = None) -> None:
        if channels not in _SUPPORTED_CHANNELS:
            raise ValueError("Only RGB and RGBA formats are supported!")
        if width < 0 or height < 0:
            raise ValueError("width and height must not be negative")
        self.width = width
        self.height = height
        self.channels = channels
        self.path = path
        self.renderer_id = next(_ids)
        self._pixels = bytearray(width * height * channels)
        self._slots: set[int] = set()
        if data is not None:
            self.set_data(data)

    @property
    def pixels(self) -> bytes:
        return bytes(self._pixels)

    @property
    def bound_slots(self) -> frozenset[int]:
        return frozenset(self._slots)

    def set_data(self, data: Any) -> None:
        """Replace all pixels; ``data`` must cover the whole texture."""
        if isinstance(data, int):
            raise TypeError("expected bytes-like data, not int")
        chunk = bytes(data)
        if len(chunk) != len(self._pixels):
            raise ValueError("Data must cover entire texture!")
        self._pixels[:] = chunk

    def bind(self, slot: int = 0) -> None:
        self._slots.add(slot)

    def unbind(self, slot: int = 0) -> None:
        self._slots.discard(slot)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Texture):
            return NotImplemented
        return self.renderer_id == other.renderer_id

    def __hash__(self) -> int:
        return hash(self.renderer_id)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} #{self.renderer_id} {self.width}x{self.height}x{self.channels}>"


class Texture2D(Texture):
    """A 2D texture, created empty, from pixels, or from an image file."""

    @classmethod
    def load(cls, path: str) -> "Texture2D":
        """Load an RGB or RGBA image, flipped so the first row is the bottom one."""
        if "C:/" in path:
            core_logger().warning("Absolute path is not going to work on other computers!")
        with PILImage.open(path) as image:
            image.load()
            if image.mode == "P":
                image = image.convert("RGBA" if "transparency" in image.info else "RGB")
            if image.mode not in ("RGB", "RGBA"):
                raise ValueError(f"Format not supported: {image.mode}")
            flipped = image.transpose(PILImage.Transpose.FLIP_TOP_BOTTOM)
            channels = len(flipped.mode)
            return cls(flipped.width, flipped.height, channels, flipped.tobytes(), path=path)