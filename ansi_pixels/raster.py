"""Upsampled RGBA pixel buffers.

A :class:`RasterBuffer` is the mutable, write-only canvas used during a single
rasterization pass.  :meth:`RasterBuffer.freeze` hands the pixels off as a
read-only :class:`RasterImage` that can be serialized with Pillow.

Pixels live in a flat ``uint8`` array, four bytes per pixel in R, G, B, A
order, row-major: device pixel ``(x, y)`` starts at ``(x + width * y) * 4``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image

from .colors import RGBA

CHANNELS = 4


class RasterBuffer:
    """Zero-initialised RGBA canvas addressed in logical (cell) coordinates."""

    def __init__(self, logical_width: int, logical_height: int, pixel_size: int):
        if logical_width < 1 or logical_height < 1:
            raise ValueError(
                f"Raster needs at least one cell, got {logical_width}x{logical_height}"
            )
        if pixel_size < 1:
            raise ValueError(f"pixel_size must be positive, got {pixel_size}")
        self.logical_width = logical_width
        self.logical_height = logical_height
        self.pixel_size = pixel_size
        self.width = logical_width * pixel_size
        self.height = logical_height * pixel_size
        self.data = np.zeros(self.width * self.height * CHANNELS, dtype=np.uint8)
        self._frozen = False

    def index(self, x: int, y: int) -> int:
        """Flat byte offset of device pixel ``(x, y)``."""
        return (x + self.width * y) * CHANNELS

    def set_block(self, logical_x: int, logical_y: int, color: RGBA) -> None:
        """Fill the ``pixel_size`` square of cell ``(logical_x, logical_y)``."""
        if self._frozen:
            raise RuntimeError("RasterBuffer is frozen")
        if not (0 <= logical_x < self.logical_width and 0 <= logical_y < self.logical_height):
            raise IndexError(
                f"Cell ({logical_x}, {logical_y}) outside "
                f"{self.logical_width}x{self.logical_height} grid"
            )
        size = self.pixel_size
        x0 = logical_x * size
        y0 = logical_y * size
        grid = self.data.reshape(self.height, self.width, CHANNELS)
        grid[y0:y0 + size, x0:x0 + size] = color

    def freeze(self) -> "RasterImage":
        """End the construction pass and hand the pixels off read-only."""
        self._frozen = True
        self.data.flags.writeable = False
        return RasterImage(self.width, self.height, self.pixel_size, self.data)


class RasterImage:
    """Finished, immutable RGBA raster ready for image encoding."""

    def __init__(self, width: int, height: int, pixel_size: int, data: np.ndarray):
        self.width = width
        self.height = height
        self.pixel_size = pixel_size
        self._data = data

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def data(self) -> bytes:
        return self._data.tobytes()

    def as_array(self) -> np.ndarray:
        """Read-only ``(height, width, 4)`` view of the pixels."""
        return self._data.reshape(self.height, self.width, CHANNELS)

    def pixel(self, x: int, y: int) -> RGBA:
        i = (x + self.width * y) * CHANNELS
        r, g, b, a = (int(v) for v in self._data[i:i + CHANNELS])
        return r, g, b, a

    def to_pil(self) -> Image.Image:
        return Image.frombytes("RGBA", self.size, self.data)

    def save(self, path: Union[str, Path]) -> Path:
        """Encode as PNG at ``path``."""
        path = Path(path)
        self.to_pil().save(path, format="PNG")
        return path
