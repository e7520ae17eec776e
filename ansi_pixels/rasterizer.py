"""Turn a decoded artwork into a finished RGBA raster."""

from __future__ import annotations

import logging

from .colors import resolve_color
from .decoder import ArtworkDocument, decode_artwork
from .errors import InvalidColorCode
from .raster import RasterBuffer, RasterImage

logger = logging.getLogger(__name__)


def rasterize(doc: ArtworkDocument) -> RasterImage:
    """Resolve every cell of ``doc`` and paint it as a ``pixel_size`` block.

    Cells are visited row by row, left to right.  Empty (``None``) cells
    are written as transparent black.

    ``ArtworkDocument`` guarantees a non-empty rectangular grid, so every
    cell of the buffer is written exactly once.

    Raises:
        InvalidColorCode: a cell is out of range; ``x``/``y`` name the cell.
    """
    height = doc.height
    width = doc.width

    buffer = RasterBuffer(width, height, doc.pixel_size)
    for y, row in enumerate(doc.pixels):
        for x, code in enumerate(row):
            try:
                color = resolve_color(code)
            except InvalidColorCode as exc:
                raise exc.at(x, y) from exc
            buffer.set_block(x, y, color)

    image = buffer.freeze()
    logger.debug("Rasterized %dx%d cells -> %dx%d px", width, height, image.width, image.height)
    return image


def render_artwork(encoded: str) -> RasterImage:
    """Decode ``encoded`` and rasterize it in one step."""
    return rasterize(decode_artwork(encoded))
