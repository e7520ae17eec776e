"""
Render a single encoded ANSI Pixels artwork to a PNG file.

Usage examples
--------------

Write the artwork from the editor URL fragment to ``artwork.png``::

    python -m ansi_pixels.cli eJyLjo...

Read the payload from stdin and force 4x4 blocks::

    echo eJyLjo... | python -m ansi_pixels.cli - -o cat.png --pixel-size 4
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .decoder import decode_artwork
from .errors import ArtworkError
from .rasterizer import rasterize

logger = logging.getLogger("ansi_pixels")


def _setup_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render one ANSI Pixels artwork to PNG.")
    parser.add_argument(
        "encoded",
        help="Encoded artwork (base64url of zlib JSON), or '-' to read stdin.",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("artwork.png"),
        help="PNG file to write (default: ./artwork.png).",
    )
    parser.add_argument(
        "--pixel-size",
        type=int,
        help="Override the block size stored in the artwork.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    _setup_logging(args.debug)

    encoded = sys.stdin.read() if args.encoded == "-" else args.encoded
    encoded = encoded.strip()

    if args.pixel_size is not None and args.pixel_size < 1:
        logger.error("--pixel-size must be positive, got %d", args.pixel_size)
        return 2

    try:
        doc = decode_artwork(encoded)
        if args.pixel_size is not None:
            doc = dataclasses.replace(doc, pixel_size=args.pixel_size)
        image = rasterize(doc)
    except ArtworkError as exc:
        logger.error("Failed to render artwork: %s", exc)
        return 1

    try:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        image.save(args.output)
    except OSError as exc:
        logger.error("Cannot write %s: %s", args.output, exc)
        return 1
    logger.info(
        "Wrote %dx%d artwork (%dx%d px) -> %s",
        doc.width, doc.height, image.width, image.height, args.output,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
