"""Color string parsing and conversion to/from Lottie's normalized RGB."""

from __future__ import annotations

import logging
import re

from PIL import ImageColor

from lottiekit.models import round_half_up

logger = logging.getLogger(__name__)

BLACK = (0, 0, 0)

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)
_SHORT_HEX_RE = re.compile(r"^#?([0-9a-f])([0-9a-f])([0-9a-f])$", re.IGNORECASE)
_RGB_RE = re.compile(r"rgba?\s*\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)", re.IGNORECASE)


def _clamp_channel(value: float) -> int:
    return max(0, min(255, round_half_up(value)))


def parse_color(value: str) -> tuple[int, int, int]:
    """Parse a CSS-style color into 8-bit (r, g, b).

    Accepts ``#rrggbb``, ``#rgb`` (with or without ``#``), ``rgb()``/``rgba()``
    and anything Pillow's ImageColor understands (named colors, hsl()).
    Unparseable input is logged and mapped to black.
    """
    if not isinstance(value, str):
        logger.warning("Could not parse color %r, substituting black", value)
        return BLACK

    text = value.strip()

    m = _HEX_RE.match(text)
    if m:
        return (int(m.group(1), 16), int(m.group(2), 16), int(m.group(3), 16))

    m = _SHORT_HEX_RE.match(text)
    if m:
        return tuple(int(c * 2, 16) for c in m.groups())

    m = _RGB_RE.match(text)
    if m:
        return tuple(_clamp_channel(int(c)) for c in m.groups())

    try:
        rgb = ImageColor.getrgb(text)
    except ValueError:
        logger.warning("Could not parse color %r, substituting black", value)
        return BLACK
    return rgb[0], rgb[1], rgb[2]


def rgb_to_hex(r: float, g: float, b: float) -> str:
    """Encode 0-255 channels (rounded and clamped) as ``#rrggbb``."""
    return "#" + "".join(f"{_clamp_channel(c):02x}" for c in (r, g, b))


def color_to_lottie(value: str) -> list[float]:
    """Convert a color string to Lottie's 3-float normalized RGB (never RGBA)."""
    r, g, b = parse_color(value)
    return [r / 255, g / 255, b / 255]


def lottie_to_hex(rgb) -> str:
    """Convert a Lottie ``[r, g, b(, a)]`` normalized array to ``#rrggbb``."""
    if not isinstance(rgb, (list, tuple)) or len(rgb) < 3:
        logger.warning("Malformed Lottie color %r, substituting black", rgb)
        return "#000000"
    return rgb_to_hex(rgb[0] * 255, rgb[1] * 255, rgb[2] * 255)
