"""Convert trim path ranges to SVG stroke dashes.

A trimmed path only shows the part of its stroke between
`trim_start` and `trim_end`, shifted by `trim_offset`, where all three
are fractions of the path length. SVG has no trim, but the same
effect is produced with a single dash as long as the visible part
followed by a gap that covers the rest of the path.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, NamedTuple

from . import svg
from .transform import scale_factors

if TYPE_CHECKING:
    from geom2d.transform2d import TMatrix

    from .pathdata import PathData

logger = logging.getLogger(__name__)

# Extra length added to the dash gap so that rounding errors
# don't leave a visible seam where the dash pattern repeats.
TRIM_GAP_PADDING = 0.001


class DashPattern(NamedTuple):
    """SVG stroke-dasharray and stroke-dashoffset values."""

    dash_array: str
    dash_offset: str


def is_trimmed(trim_start: float, trim_end: float, trim_offset: float) -> bool:
    """Return True unless the trim range shows the whole path."""
    return trim_start != 0 or trim_end != 1 or trim_offset != 0


def shown_fraction(trim_start: float, trim_end: float) -> float:
    """Fraction of the path length that is visible.

    If `trim_start` is greater than `trim_end` the visible part
    wraps around the end of the path and is the combined length
    of [trim_start, 1] and [0, trim_end].
    """
    fraction = trim_end - trim_start
    if trim_start > trim_end:
        fraction += 1
    return fraction


def compute_trim(
    trim_start: float,
    trim_end: float,
    trim_offset: float,
    path_length: float,
) -> DashPattern:
    """Compute the stroke dashes that reproduce a trimmed path.

    Args:
        trim_start: Start of the visible range, 0-1.
        trim_end: End of the visible range, 0-1.
        trim_offset: Shift of the visible range, 0-1.
            Values outside this range wrap around.
        path_length: Length of the path in viewport coordinates.

    Returns:
        The dash array and dash offset attribute values.
    """
    fraction = shown_fraction(trim_start, trim_end)
    dash = fraction * path_length
    gap = (1 - fraction + TRIM_GAP_PADDING) * path_length
    # The dash starts at trim_start + trim_offset, and
    # wraps around once it reaches the end of the path.
    offset = path_length * (1 - ((trim_start + trim_offset) % 1))
    return DashPattern(
        f'{svg.floatystr(dash)},{svg.floatystr(gap)}', svg.floatystr(offset)
    )


def scaled_path_length(
    path_data: PathData | None, transform: TMatrix
) -> float:
    """Get the length of a path as it is rendered in the viewport.

    Scaling changes the length of a path, so if the transform
    has a scale component the length is measured on a transformed
    copy of the path.

    Args:
        path_data: The path geometry or None for an empty path.
        transform: The flattened transform of the enclosing groups.

    Returns:
        The path length.
    """
    if path_data is None:
        return 0.0
    a, d = scale_factors(transform)
    if a != 1 or d != 1:
        logger.debug('Measuring path length with scale (%g, %g)', a, d)
        return path_data.transform(transform).path_length()
    return path_data.path_length()
