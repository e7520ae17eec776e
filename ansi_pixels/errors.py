"""Typed failures raised while decoding and rasterizing an artwork.

Every error is fatal for the record it belongs to.  The orchestration layer
attaches the record index and title with :meth:`ArtworkError.with_record`
before reporting it.
"""

from __future__ import annotations

from typing import Optional


class ArtworkError(Exception):
    """Base class for all per-record artwork failures."""

    stage = "decode"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.record_index: Optional[int] = None
        self.title: Optional[str] = None

    def with_record(self, index: int, title: Optional[str] = None) -> "ArtworkError":
        self.record_index = index
        self.title = title
        return self

    def __str__(self) -> str:
        if self.record_index is None:
            return self.message
        label = f"record {self.record_index}"
        if self.title:
            label += f" ({self.title!r})"
        return f"{label} [{self.stage}]: {self.message}"


class EncodingError(ArtworkError):
    """The text is not valid base64 after the url-safe substitution."""


class DecompressionError(ArtworkError):
    """The zlib stream is truncated or malformed."""


class MalformedDocumentError(ArtworkError):
    """The decompressed document does not match ``{pixels, pixelSize}``."""


class EmptyArtworkError(MalformedDocumentError):
    """The pixel grid has no rows."""


class InvalidColorCode(ArtworkError):
    """A cell holds a color code outside ``[0, 255]``."""

    stage = "rasterize"

    def __init__(self, code: object, x: Optional[int] = None, y: Optional[int] = None):
        self.code = code
        self.x = x
        self.y = y
        message = f"Invalid ANSI code: {code!r}"
        if x is not None and y is not None:
            message += f" at ({x}, {y})"
        super().__init__(message)

    def at(self, x: int, y: int) -> "InvalidColorCode":
        """Return a copy of this error annotated with the failing cell."""
        located = InvalidColorCode(self.code, x=x, y=y)
        located.record_index = self.record_index
        located.title = self.title
        return located


class ImageWriteError(ArtworkError):
    """The finished raster could not be written to disk."""

    stage = "write"
