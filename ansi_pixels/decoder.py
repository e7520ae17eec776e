"""Decode the compact, text-safe artwork encoding.

Wire format (fixed by the ANSI Pixels editor, not ours to change)::

    base64url( zlib( json({"pixels": [[code|null, ...], ...], "pixelSize": n}) ) )

The url-safe alphabet swaps ``+`` for ``-`` and ``/`` for ``_``; trailing
``=`` padding may be omitted.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import re
import zlib
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from .errors import (
    DecompressionError,
    EmptyArtworkError,
    EncodingError,
    MalformedDocumentError,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("pixels", "pixelSize")

_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")

Cell = Optional[int]
Row = Tuple[Cell, ...]


@dataclass(frozen=True)
class ArtworkDocument:
    """A validated, rectangular grid of color codes plus its block size."""
    pixels: Tuple[Row, ...]
    pixel_size: int

    def __post_init__(self):
        if not self.pixels:
            raise EmptyArtworkError("pixels has no rows")
        width = len(self.pixels[0])
        if width == 0:
            raise MalformedDocumentError("pixels rows must not be empty")
        for y, row in enumerate(self.pixels):
            if len(row) != width:
                raise MalformedDocumentError(
                    f"pixels is not rectangular: row {y} has {len(row)} cells, expected {width}"
                )
        if isinstance(self.pixel_size, bool) or not isinstance(self.pixel_size, int) \
                or self.pixel_size < 1:
            raise MalformedDocumentError(
                f"pixelSize must be a positive integer, got {self.pixel_size!r}"
            )

    @property
    def width(self) -> int:
        return len(self.pixels[0])

    @property
    def height(self) -> int:
        return len(self.pixels)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Cell]], pixel_size: int) -> "ArtworkDocument":
        return cls(tuple(tuple(row) for row in rows), pixel_size)

    def to_dict(self) -> dict:
        return {
            "pixels": [list(row) for row in self.pixels],
            "pixelSize": self.pixel_size,
        }


# ---------------------------------------------------------------------------
# Schema validation
# ---------------------------------------------------------------------------

def _parse_cell(value: Any, x: int, y: int) -> Cell:
    if value is None:
        return None
    if isinstance(value, bool):
        raise MalformedDocumentError(f"pixels[{y}][{x}] is a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _DECIMAL_RE.fullmatch(value):
        return int(value)
    raise MalformedDocumentError(
        f"pixels[{y}][{x}] must be null, an integer or a decimal string, got {value!r}"
    )


def _parse_pixel_size(value: Any) -> int:
    if isinstance(value, bool):
        raise MalformedDocumentError("pixelSize must be a positive integer, got a boolean")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 1:
        raise MalformedDocumentError(f"pixelSize must be a positive integer, got {value!r}")
    return value


def parse_document(obj: Any) -> ArtworkDocument:
    """Validate a deserialized JSON object and build an :class:`ArtworkDocument`.

    Required fields are exactly ``pixels`` and ``pixelSize``; anything else
    in the object is ignored.

    Raises:
        EmptyArtworkError: ``pixels`` has no rows.
        MalformedDocumentError: any other shape violation.
    """
    if not isinstance(obj, dict):
        raise MalformedDocumentError(
            f"Document must be an object, got {type(obj).__name__}"
        )
    missing = [name for name in REQUIRED_FIELDS if name not in obj]
    if missing:
        raise MalformedDocumentError(f"Missing field(s): {', '.join(missing)}")

    raw_rows = obj["pixels"]
    if not isinstance(raw_rows, list):
        raise MalformedDocumentError("pixels must be a list of rows")
    if not raw_rows:
        raise EmptyArtworkError("pixels has no rows")

    rows: List[Row] = []
    width: Optional[int] = None
    for y, raw_row in enumerate(raw_rows):
        if not isinstance(raw_row, list):
            raise MalformedDocumentError(f"pixels[{y}] must be a list")
        if width is None:
            width = len(raw_row)
            if width == 0:
                raise MalformedDocumentError("pixels rows must not be empty")
        elif len(raw_row) != width:
            raise MalformedDocumentError(
                f"pixels is not rectangular: row {y} has {len(raw_row)} cells, expected {width}"
            )
        rows.append(tuple(_parse_cell(v, x, y) for x, v in enumerate(raw_row)))

    return ArtworkDocument(tuple(rows), _parse_pixel_size(obj["pixelSize"]))


# ---------------------------------------------------------------------------
# Encoding layers
# ---------------------------------------------------------------------------

def _b64url_decode(encoded: str) -> bytes:
    text = encoded.replace("-", "+").replace("_", "/")
    text += "=" * (-len(text) % 4)
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise EncodingError(f"Invalid base64 payload: {exc}") from exc


def _inflate(payload: bytes) -> bytes:
    try:
        return zlib.decompress(payload)
    except zlib.error as exc:
        raise DecompressionError(f"Corrupt zlib stream: {exc}") from exc


def decode_artwork(encoded: str) -> ArtworkDocument:
    """Decode an encoded artwork string into a validated document.

    Raises:
        EncodingError, DecompressionError, MalformedDocumentError,
        EmptyArtworkError
    """
    zipped = _b64url_decode(encoded)
    raw = _inflate(zipped)
    try:
        obj = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedDocumentError(f"Payload is not JSON: {exc}") from exc
    doc = parse_document(obj)
    logger.debug(
        "Decoded artwork %dx%d (pixelSize=%d)", doc.width, doc.height, doc.pixel_size
    )
    return doc


def encode_artwork(doc: ArtworkDocument) -> str:
    """Inverse of :func:`decode_artwork`; emits unpadded base64url."""
    raw = json.dumps(doc.to_dict(), separators=(",", ":")).encode("utf-8")
    b64 = base64.urlsafe_b64encode(zlib.compress(raw)).decode("ascii")
    return b64.rstrip("=")
