"""Vector drawable layer model.

A drawable is a tree of layers rooted at a single VectorLayer.
Groups apply a coordinate transform to their descendants and
paths are the leaves that actually draw something.

The layer variants are a closed set, so code that handles layers
matches on all three and raises TypeError on anything else.
"""

from __future__ import annotations

import enum
import itertools
import json
import logging
import typing
from dataclasses import dataclass, field
from typing import IO, TYPE_CHECKING, Any, Union

from .pathdata import PathData

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from typing_extensions import TypeAlias

logger = logging.getLogger(__name__)


class LayerModelError(ValueError):
    """Malformed layer model."""


class FillType(enum.Enum):
    """Path fill rule."""

    NON_ZERO = 'nonZero'
    EVEN_ODD = 'evenOdd'


@dataclass
class VectorLayer:
    """Root layer that defines the viewport."""

    id: str
    name: str = ''
    width: float = 24
    height: float = 24
    alpha: float = 1
    children: list[Layer] = field(default_factory=list)


@dataclass
class GroupLayer:
    """A transformed container of other layers."""

    id: str
    name: str = ''
    translate_x: float = 0
    translate_y: float = 0
    rotation: float = 0
    pivot_x: float = 0
    pivot_y: float = 0
    scale_x: float = 1
    scale_y: float = 1
    children: list[Layer] = field(default_factory=list)


@dataclass
class PathLayer:
    """A filled and/or stroked path."""

    id: str
    name: str = ''
    path_data: PathData | None = None
    fill_color: str | None = None
    fill_alpha: float = 1
    stroke_color: str | None = None
    stroke_alpha: float = 1
    stroke_width: float = 0
    trim_path_start: float = 0
    trim_path_end: float = 1
    trim_path_offset: float = 0
    stroke_linecap: str = 'butt'
    stroke_linejoin: str = 'miter'
    stroke_miter_limit: float = 4
    fill_type: FillType = FillType.NON_ZERO

    @property
    def children(self) -> list[Layer]:
        """Paths are leaves."""
        return []


Layer: TypeAlias = Union[VectorLayer, GroupLayer, PathLayer]


def iter_layers(root: Layer) -> Iterator[Layer]:
    """Iterate over a layer tree in pre-order (document order)."""
    yield root
    for child in root.children:
        yield from iter_layers(child)


def find_layer_path(root: Layer, layer_id: str) -> list[Layer] | None:
    """Find the chain of layers from `root` down to a layer.

    Args:
        root: The root of the layer tree.
        layer_id: Id of the layer to find.

    Returns:
        A list of layers starting with `root` and ending with the
        layer having `layer_id`, or None if there is no such layer.
    """
    if root.id == layer_id:
        return [root]
    for child in root.children:
        path = find_layer_path(child, layer_id)
        if path is not None:
            return [root, *path]
    return None


# JSON key -> (attribute name, converter) for each layer type
_VECTOR_KEYS: dict[str, tuple[str, Callable]] = {
    'width': ('width', float),
    'height': ('height', float),
    'alpha': ('alpha', float),
}
_GROUP_KEYS: dict[str, tuple[str, Callable]] = {
    'translateX': ('translate_x', float),
    'translateY': ('translate_y', float),
    'rotation': ('rotation', float),
    'pivotX': ('pivot_x', float),
    'pivotY': ('pivot_y', float),
    'scaleX': ('scale_x', float),
    'scaleY': ('scale_y', float),
}
_PATH_KEYS: dict[str, tuple[str, Callable]] = {
    'pathData': ('path_data', lambda d: PathData(d) if d else None),
    'fillColor': ('fill_color', str),
    'fillAlpha': ('fill_alpha', float),
    'strokeColor': ('stroke_color', str),
    'strokeAlpha': ('stroke_alpha', float),
    'strokeWidth': ('stroke_width', float),
    'trimPathStart': ('trim_path_start', float),
    'trimPathEnd': ('trim_path_end', float),
    'trimPathOffset': ('trim_path_offset', float),
    'strokeLinecap': ('stroke_linecap', str),
    'strokeLinejoin': ('stroke_linejoin', str),
    'strokeMiterLimit': ('stroke_miter_limit', float),
    'fillType': ('fill_type', FillType),
}
_LAYER_TYPES: dict[str, tuple[type, dict[str, tuple[str, Callable]]]] = {
    'vector': (VectorLayer, _VECTOR_KEYS),
    'group': (GroupLayer, _GROUP_KEYS),
    'path': (PathLayer, _PATH_KEYS),
}


def layer_from_dict(data: dict[str, Any]) -> VectorLayer:
    """Build a layer tree from the editor's JSON layer format.

    Keys use the editor's camelCase names (ie 'translateX',
    'trimPathStart'). Missing values take the layer defaults
    and missing ids are generated in document order, skipping
    any id that is already used by another layer.

    Args:
        data: A dictionary describing a vector layer.

    Returns:
        The root VectorLayer.

    Raises:
        LayerModelError: If the model is malformed or
            two layers have the same id.
    """
    if not isinstance(data, dict) or data.get('type') != 'vector':
        raise LayerModelError('Root layer must be a vector layer.')
    used_ids = _explicit_ids(data)
    counter = itertools.count(1)

    def make_id(layer_type: str) -> str:
        layer_id = f'{layer_type}_{next(counter)}'
        while layer_id in used_ids:
            layer_id = f'{layer_type}_{next(counter)}'
        used_ids.add(layer_id)
        return layer_id

    root = typing.cast('VectorLayer', _build_layer(data, make_id))
    if root.width <= 0 or root.height <= 0:
        raise LayerModelError(
            f'Invalid viewport size: {root.width} x {root.height}'
        )
    return root


def load_layers(stream: IO[str]) -> VectorLayer:
    """Load a layer tree from a JSON stream.

    Raises:
        LayerModelError: If the JSON can't be decoded or
            the model is malformed.
    """
    try:
        data = json.load(stream)
    except json.JSONDecodeError as e:
        raise LayerModelError(f'Invalid JSON: {e}') from e
    return layer_from_dict(data)


def _explicit_ids(data: dict[str, Any]) -> set[str]:
    """Collect the ids given in the layer data.

    Raises:
        LayerModelError: If an id is used more than once.
    """
    layer_ids: set[str] = set()
    stack: list[Any] = [data]
    while stack:
        layer_data = stack.pop()
        if not isinstance(layer_data, dict):
            continue
        if layer_data.get('id'):
            layer_id = str(layer_data['id'])
            if layer_id in layer_ids:
                raise LayerModelError(f'Duplicate layer id: {layer_id}')
            layer_ids.add(layer_id)
        children = layer_data.get('children')
        if isinstance(children, list):
            stack.extend(children)
    return layer_ids


def _build_layer(data: Any, make_id: Callable[[str], str]) -> Layer:  # noqa: ANN401
    if not isinstance(data, dict):
        raise LayerModelError(f'Layer must be an object: {data!r}')
    layer_type = data.get('type')
    if layer_type not in _LAYER_TYPES:
        raise LayerModelError(f'Unknown layer type: {layer_type!r}')
    layer_class, keys = _LAYER_TYPES[layer_type]

    kwargs: dict[str, Any] = {
        'id': str(data.get('id') or make_id(layer_type)),
        'name': str(data.get('name') or ''),
    }
    for key, (attr, convert) in keys.items():
        value = data.get(key)
        if value is None:
            continue
        try:
            kwargs[attr] = convert(value)
        except (TypeError, ValueError) as e:
            raise LayerModelError(
                f'Invalid {key} value for layer {kwargs["id"]}: {value!r}'
            ) from e

    children_data = data.get('children') or []
    if not isinstance(children_data, list):
        raise LayerModelError(f'Layer {kwargs["id"]}: children must be a list')
    if layer_class is PathLayer:
        if children_data:
            raise LayerModelError(
                f'Path layer {kwargs["id"]} can not have children'
            )
        return PathLayer(**kwargs)

    children = []
    for child_data in children_data:
        if isinstance(child_data, dict) and child_data.get('type') == 'vector':
            raise LayerModelError('Vector layer must be the root layer.')
        children.append(_build_layer(child_data, make_id))
    logger.debug('%s %s: %d children', layer_type, kwargs['id'], len(children))
    return layer_class(children=children, **kwargs)
