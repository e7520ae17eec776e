"""Public interface for the ANSI Pixels artwork decoder and rasterizer."""

from __future__ import annotations

from .colors import ANSI16_PALETTE, RGBA, TRANSPARENT, resolve_color
from .decoder import ArtworkDocument, decode_artwork, encode_artwork, parse_document
from .errors import (
    ArtworkError,
    DecompressionError,
    EmptyArtworkError,
    EncodingError,
    ImageWriteError,
    InvalidColorCode,
    MalformedDocumentError,
)
from .raster import RasterBuffer, RasterImage
from .rasterizer import rasterize, render_artwork

__all__ = [
    "ANSI16_PALETTE",
    "RGBA",
    "TRANSPARENT",
    "ArtworkDocument",
    "ArtworkError",
    "DecompressionError",
    "EmptyArtworkError",
    "EncodingError",
    "ImageWriteError",
    "InvalidColorCode",
    "MalformedDocumentError",
    "RasterBuffer",
    "RasterImage",
    "decode_artwork",
    "encode_artwork",
    "parse_document",
    "rasterize",
    "render_artwork",
    "resolve_color",
]
