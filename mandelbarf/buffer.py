"""Flat RGBA pixel storage shared between render workers."""

from __future__ import annotations

import numpy as np
import PIL.Image

from .errors import ConfigurationError

Color = tuple[int, int, int, int]

SENTINEL: Color = (255, 0, 0, 255)
OPAQUE = 255


class PixelBuffer:
    """A ``width`` by ``height`` grid of RGBA pixels stored row-major.

    Pixel ``(x, y)`` lives at ``pixels[y * width + x]``. Reads outside the
    grid return :data:`SENTINEL` and writes outside it are ignored, so an
    encoder probing one pixel past the edge never faults.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ConfigurationError(f"pixel buffer needs positive dimensions, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.width * self.height, 4), dtype=np.uint8)

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"

    def bounds(self) -> tuple[int, int]:
        return self.width, self.height

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def index(self, x: int, y: int) -> int:
        return y * self.width + x

    def get(self, x: int, y: int) -> Color:
        if not self.contains(x, y):
            return SENTINEL
        r, g, b, a = self.pixels[self.index(x, y)]
        return int(r), int(g), int(b), int(a)

    def set(self, x: int, y: int, color: Color) -> None:
        if self.contains(x, y):
            self.pixels[self.index(x, y)] = color

    def rows(self, start: int, stop: int) -> np.ndarray:
        """Return a writable ``(stop - start, width, 4)`` view of a row band."""

        start = min(max(start, 0), self.height)
        stop = min(max(stop, start), self.height)
        band = self.pixels[start * self.width:stop * self.width]
        return band.reshape(stop - start, self.width, 4)

    def as_array(self) -> np.ndarray:
        """Return the pixels as a ``(height, width, 4)`` view."""

        return self.pixels.reshape(self.height, self.width, 4)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        if array.ndim != 3 or array.shape[2] != 4:
            raise ConfigurationError(f"expected a (height, width, 4) array, got shape {array.shape}")
        height, width = array.shape[:2]
        buffer = cls(width, height)
        buffer.as_array()[...] = np.clip(array, 0, 255).astype(np.uint8)
        return buffer

    def to_image(self) -> PIL.Image.Image:
        return PIL.Image.fromarray(self.as_array())
