"""Group transforms and their composition."""

from __future__ import annotations

import functools
import math
from typing import TYPE_CHECKING

from geom2d import transform2d

from .layers import GroupLayer, find_layer_path

if TYPE_CHECKING:
    from geom2d.transform2d import TMatrix

    from .layers import Layer

IDENTITY_MATRIX: TMatrix = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0))


def group_transform(group: GroupLayer) -> TMatrix:
    """Get the transform matrix of a group layer.

    The matrix is equivalent to the SVG transform list
    `translate(tx ty) rotate(r px py) translate(px py) scale(sx sy)
    translate(-px -py)`, which rotates and scales about the pivot
    before translating.
    """
    pivot = (group.pivot_x, group.pivot_y)
    matrices = (
        transform2d.matrix_translate(group.translate_x, group.translate_y),
        transform2d.matrix_rotate(math.radians(group.rotation), pivot),
        transform2d.matrix_translate(group.pivot_x, group.pivot_y),
        transform2d.matrix_scale(group.scale_x, group.scale_y),
        transform2d.matrix_translate(-group.pivot_x, -group.pivot_y),
    )
    return functools.reduce(transform2d.compose_transform, matrices)


def flatten_transform(root: Layer, layer_id: str) -> TMatrix:
    """Compose the transforms of all groups enclosing a layer.

    Transforms are composed outermost first, so the result maps
    the layer's coordinates to root (viewport) coordinates.
    If the layer is itself a group its own transform is included.

    Args:
        root: The root of the layer tree.
        layer_id: Id of the target layer.

    Returns:
        The flattened transform matrix.

    Raises:
        KeyError: If there is no layer with `layer_id` in the tree.
    """
    layer_path = find_layer_path(root, layer_id)
    if layer_path is None:
        raise KeyError(layer_id)
    return functools.reduce(
        lambda matrix, layer: transform2d.compose_transform(
            matrix, group_transform(layer)
        )
        if isinstance(layer, GroupLayer)
        else matrix,
        layer_path,
        IDENTITY_MATRIX,
    )


def scale_factors(matrix: TMatrix) -> tuple[float, float]:
    """The horizontal (a) and vertical (d) scale components of a matrix."""
    return (matrix[0][0], matrix[1][1])
