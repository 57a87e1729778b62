"""CPU-side images: loading, pixel access, resizing and saving."""

from __future__ import annotations

import os
from enum import IntEnum
from typing import Any, Optional, Union

from PIL import Image as PILImage

from eis.log import client_logger

_MODES = {1: "L", 2: "LA", 3: "RGB", 4: "RGBA"}
_CHANNELS = {mode: channels for channels, mode in _MODES.items()}
_SAVE_FORMATS = {".png": "PNG", ".jpg": "JPEG", ".bmp": "BMP", ".tga": "TGA"}


class ColorFormat(IntEnum):
    """Colour channel selections."""

    NONE = 0
    Y = 1
    R = 2
    G = 3
    B = 4
    RG = 5
    GB = 6
    RB = 7
    RGB = 8


def _normalise(picture: PILImage.Image) -> PILImage.Image:
    """Bring a decoded picture to one of the 1 to 4 channel 8-bit modes."""
    mode = picture.mode
    if mode in _CHANNELS:
        return picture
    if mode == "P":
        return picture.convert("RGBA" if "transparency" in picture.info else "RGB")
    if mode == "PA":
        return picture.convert("RGBA")
    if mode in ("1", "I", "F") or mode.startswith("I;"):
        return picture.convert("L")
    return picture.convert("RGBA" if "A" in picture.getbands() else "RGB")


class Image:
    """Interleaved 8-bit pixel data, rows stored one after another."""

    def __init__(self, data: Any, width: int, height: int, channels: int) -> None:
        if channels not in _MODES:
            raise ValueError(f"channels must be 1 to 4, got {channels}")
        if width < 0 or height < 0:
            raise ValueError("width and height must not be negative")
        if isinstance(data, int):
            raise TypeError("expected bytes-like data, not int")
        raw = bytes(data)
        if len(raw) != width * height * channels:
            raise ValueError(
                f"data holds {len(raw)} bytes, {width}x{height}x{channels} needs "
                f"{width * height * channels}"
            )
        self._data = raw
        self.width = width
        self.height = height
        self.channels = channels
        self.path = ""

    @classmethod
    def load(cls, path: Union[str, "os.PathLike[str]"], flip_vertically: bool = True) -> "Image":
        """Decode an image file; by default the bottom row comes first."""
        path_text = os.fspath(path)
        try:
            with PILImage.open(path_text) as opened:
                opened.load()
                picture = _normalise(opened)
                if flip_vertically:
                    picture = picture.transpose(PILImage.Transpose.FLIP_TOP_BOTTOM)
                channels = _CHANNELS[picture.mode]
                image = cls(picture.tobytes(), picture.width, picture.height, channels)
        except OSError:
            client_logger().error("Invalid image path: %s", path_text)
            raise
        image.path = path_text
        return image

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def mode(self) -> str:
        return _MODES[self.channels]

    def _to_pil(self) -> PILImage.Image:
        return PILImage.frombytes(self.mode, (self.width, self.height), self._data)

    def get_pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """The first three channel values of the pixel at column ``x``, row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            client_logger().error("Invalid pixel requested!")
            raise IndexError(f"pixel ({x}, {y}) is outside a {self.width}x{self.height} image")
        if self.channels < 3:
            raise ValueError("get_pixel needs an image with at least three channels")
        start = x * self.channels + y * self.width * self.channels
        r, g, b = self._data[start:start + 3]
        return float(r), float(g), float(b)

    def resize(self, width: int, height: int, channels: int = 0) -> "Image":
        """A resampled copy; ``channels`` of 0 keeps the current channel count."""
        if channels == 0:
            channels = self.channels
        if channels not in _MODES:
            raise ValueError(f"channels must be 1 to 4, got {channels}")
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be positive")
        picture = self._to_pil()
        if channels != self.channels:
            picture = picture.convert(_MODES[channels])
        picture = picture.resize((width, height), PILImage.Resampling.BICUBIC)
        return Image(picture.tobytes(), width, height, channels)

    def save(self, name: Optional[Union[str, "os.PathLike[str]"]] = None) -> str:
        """Write the image as PNG, JPG, BMP or TGA, chosen by the name's extension.

        Without a name the file name of the image's own path is used.
        """
        if name is None:
            if not self.path:
                raise ValueError("image has no path to take a file name from")
            target = self.path[self.path.rfind("/") + 1:]
        else:
            target = os.fspath(name)
        dot = target.rfind(".")
        extension = target[dot:] if dot != -1 else ""
        file_format = _SAVE_FORMATS.get(extension)
        if file_format is None:
            client_logger().error("Invalid file type given for: '%s'!", target)
            raise ValueError(f"Invalid file type given for: '{target}'!")

        picture = self._to_pil()
        options: dict[str, Any] = {}
        if file_format == "JPEG":
            if picture.mode == "LA":
                picture = picture.convert("L")
            elif picture.mode == "RGBA":
                picture = picture.convert("RGB")
            options["quality"] = 90
        elif file_format == "BMP" and picture.mode == "LA":
            picture = picture.convert("RGBA")
        picture.save(target, format=file_format, **options)
        return target

    def copy(self) -> "Image":
        duplicate = Image(self._data, self.width, self.height, self.channels)
        duplicate.path = self.path
        return duplicate

    def __getitem__(self, index: int) -> int:
        return self._data[index]

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"<Image {self.width}x{self.height}x{self.channels} {self.path!r}>"