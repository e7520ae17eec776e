"""ANSI 256-color code resolution.

Codes split into three disjoint ranges:

  - 0-15:    the 16-color terminal palette
  - 16-231:  a 6x6x6 RGB cube
  - 232-255: a grayscale ramp

``None`` stands for an empty cell and resolves to transparent black.
"""

from __future__ import annotations

import math
from functools import lru_cache
from typing import Dict, Optional, Tuple

from .errors import InvalidColorCode

RGBA = Tuple[int, int, int, int]

TRANSPARENT: RGBA = (0, 0, 0, 0)
OPAQUE = 255


# ---------------------------------------------------------------------------
# 16-color palette (normal 0-7 at 0/204, bright 8-15 at 102/255)
# ---------------------------------------------------------------------------
ANSI16_PALETTE: Dict[int, Tuple[int, int, int]] = {
    0: (0, 0, 0),
    1: (204, 0, 0),
    2: (0, 204, 0),
    3: (204, 204, 0),
    4: (0, 0, 204),
    5: (204, 0, 204),
    6: (0, 204, 204),
    7: (204, 204, 204),

    8: (102, 102, 102),
    9: (255, 102, 102),
    10: (102, 255, 102),
    11: (255, 255, 102),
    12: (102, 102, 255),
    13: (255, 102, 255),
    14: (102, 255, 255),
    15: (255, 255, 255),
}

CUBE_START = 16
GRAY_START = 232
MAX_CODE = 255

RGB_STEP = 255 / 5
# the format's ramp tops out at 100, not 255
GRAY_STEP = 100 / (MAX_CODE - GRAY_START)


def _cube_rgb(code: int) -> Tuple[int, int, int]:
    base = code - CUBE_START
    gb = base % 36
    red = math.floor((base // 36) * RGB_STEP)
    green = math.floor((gb // 6) * RGB_STEP)
    blue = math.floor((gb % 6) * RGB_STEP)
    return red, green, blue


def _gray_rgb(code: int) -> Tuple[int, int, int]:
    # half rounds up, never to even
    g = math.floor((code - GRAY_START) * GRAY_STEP + 0.5)
    return g, g, g


@lru_cache(maxsize=None)
def _resolve_code(code: int) -> RGBA:
    if 0 <= code < CUBE_START:
        rgb = ANSI16_PALETTE[code]
    elif CUBE_START <= code < GRAY_START:
        rgb = _cube_rgb(code)
    elif GRAY_START <= code <= MAX_CODE:
        rgb = _gray_rgb(code)
    else:
        raise InvalidColorCode(code)
    return rgb + (OPAQUE,)


def resolve_color(code: Optional[int]) -> RGBA:
    """Map an ANSI color code to an RGBA tuple.

    Args:
        code: Integer in ``[0, 255]``, or ``None`` for an empty cell.

    Returns:
        ``(red, green, blue, alpha)`` with alpha 255 for any resolved code
        and ``(0, 0, 0, 0)`` for ``None``.

    Raises:
        InvalidColorCode: ``code`` is not an integer in ``[0, 255]``.
    """
    if code is None:
        return TRANSPARENT
    if isinstance(code, bool) or not isinstance(code, int):
        raise InvalidColorCode(code)
    return _resolve_code(code)
