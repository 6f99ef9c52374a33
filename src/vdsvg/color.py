"""Convert Android color strings to CSS colors."""

from __future__ import annotations

import logging
import re
from typing import TypeAlias

logger = logging.getLogger(__name__)

TRGBA: TypeAlias = tuple[int, int, int, int]

# Android colors are '#RGB', '#ARGB', '#RRGGBB', or '#AARRGGBB'.
_RE_ANDROID_HEX = re.compile(
    r'#([0-9a-f]{3,4}|[0-9a-f]{6}|[0-9a-f]{8})$',
    flags=(re.IGNORECASE | re.ASCII),
)

_ANDROID_SHORT_LEN = 3
_ANDROID_ASHORT_LEN = 4
_ANDROID_RGB_LEN = 6


def parse_android_color(color: str) -> TRGBA | None:
    """Parse an Android color string.

    Note that Android puts the alpha channel first, unlike CSS
    which puts it last.

    Args:
        color: An Android color string ('#RGB', '#ARGB', '#RRGGBB',
            or '#AARRGGBB').

    Returns:
        An integer RGBA tuple where each component is 0-255,
        or None if the color can't be parsed.
    """
    m = _RE_ANDROID_HEX.match(color.strip())
    if not m:
        return None
    hexcolor = m.group(1)
    hlen = len(hexcolor)
    if hlen in {_ANDROID_SHORT_LEN, _ANDROID_ASHORT_LEN}:
        # Short form where each hex digit is doubled (ie 'f' -> 'ff')
        channels = [int(c, 16) * 17 for c in hexcolor]
    else:
        channels = [
            int(hexcolor[i : i + 2], 16) for i in range(0, hlen, 2)
        ]
    if hlen in {_ANDROID_SHORT_LEN, _ANDROID_RGB_LEN}:
        r, g, b = channels
        a = 255
    else:
        a, r, g, b = channels
    return (r, g, b, a)


def rgba_to_csshex(rgba: TRGBA) -> str:
    """Format an integer RGBA color as a CSS hex color.

    Returns:
        '#rrggbb' if the color is opaque, otherwise '#rrggbbaa'.
    """
    r, g, b, a = rgba
    if a == 255:  # noqa: PLR2004
        return f'#{r:02x}{g:02x}{b:02x}'
    return f'#{r:02x}{g:02x}{b:02x}{a:02x}'


def android_to_csshex(color: str) -> str | None:
    """Convert an Android color string to a CSS hex color.

    Args:
        color: An Android color string.

    Returns:
        A CSS hex color, or None if the color is malformed.
    """
    rgba = parse_android_color(color)
    if rgba is None:
        logger.warning('Malformed color: %r', color)
        return None
    return rgba_to_csshex(rgba)
