"""Export a vector drawable layer tree as an SVG document."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from . import color, svg, trim
from .layers import FillType, GroupLayer, PathLayer, VectorLayer
from .transform import flatten_transform

if TYPE_CHECKING:
    from collections.abc import Callable

    from .layers import Layer
    from .svg import TElement

logger = logging.getLogger(__name__)

TContext = TypeVar('TContext')

# Marker for attributes that are always emitted
_NO_DEFAULT: Any = object()


def to_svg_string(
    vector_layer: VectorLayer,
    width: float | None = None,
    height: float | None = None,
    x: float | None = None,
    y: float | None = None,
    with_ids_and_ns: bool = True,
    indent: int = 4,
    multi_attribute_indent: int = 4,
) -> str:
    """Serialize a vector layer tree to an SVG document string.

    Args:
        vector_layer: The root of the layer tree.
        width: Optional root element width in px.
        height: Optional root element height in px.
        x: Optional root element x position in px.
        y: Optional root element y position in px.
        with_ids_and_ns: Emit the SVG namespace declaration and
            element ids (from layer names). Disable this to embed
            the SVG in another document without id collisions.
        indent: Number of spaces per nesting level.
        multi_attribute_indent: Indentation of attributes when
            an element has more than one.

    Returns:
        The SVG document as a string.
    """
    root_node = svg.create_element('svg', with_ns=with_ids_and_ns)
    vector_layer_to_svg_node(vector_layer, root_node, with_ids_and_ns)
    root_size = (('width', width), ('height', height), ('x', x), ('y', y))
    for name, value in root_size:
        if value is not None:
            root_node.set(name, f'{svg.floatystr(value)}px')
    return svg.serialize_to_string(
        root_node, indent=indent, multi_attribute_indent=multi_attribute_indent
    )


def vector_layer_to_svg_node(
    vector_layer: VectorLayer,
    root_node: TElement,
    with_ids_and_ns: bool = True,
) -> None:
    """Convert a layer tree into SVG elements under `root_node`.

    Args:
        vector_layer: The root of the layer tree.
        root_node: An `svg` element that receives the viewport
            attributes and the converted child layers.
        with_ids_and_ns: Emit element ids.
    """
    root_node.set(
        'viewBox',
        f'0 0 {svg.floatystr(vector_layer.width)}'
        f' {svg.floatystr(vector_layer.height)}',
    )

    def visit(layer: Layer, parent_node: TElement) -> TElement:
        return map_layer(layer, parent_node, vector_layer, with_ids_and_ns)

    walk(vector_layer, visit, root_node)


def walk(
    layer: Layer,
    visit: Callable[[Layer, TContext], TContext],
    context: TContext,
) -> None:
    """Visit a layer tree in pre-order.

    Children are visited in document order, which is back to front.

    Args:
        layer: The root of the (sub)tree to walk.
        visit: A function called with each layer and the context
            of its parent. It returns the context for the layer's children.
        context: The context passed with the root layer.
    """
    child_context = visit(layer, context)
    for child in layer.children:
        walk(child, visit, child_context)


def map_layer(
    layer: Layer,
    parent_node: TElement,
    root: VectorLayer,
    with_ids: bool = True,
) -> TElement:
    """Create the SVG node (if any) for a layer.

    Args:
        layer: The layer to convert.
        parent_node: The SVG element of the enclosing group or root.
        root: The root of the layer tree, used to flatten
            the transforms of the enclosing groups.
        with_ids: Emit the layer name as the element id.

    Returns:
        The parent element for the layer's children.

    Raises:
        TypeError: If the layer is not a vector, group, or path layer.
    """
    if isinstance(layer, VectorLayer):
        if with_ids:
            conditional_attr(parent_node, 'id', layer.name, '')
        conditional_attr(parent_node, 'opacity', layer.alpha, 1)
        return parent_node
    if isinstance(layer, PathLayer):
        path_to_svg_node(layer, parent_node, root, with_ids)
        return parent_node
    if isinstance(layer, GroupLayer):
        return group_to_svg_node(layer, parent_node, with_ids)
    raise TypeError(f'Unrecognized layer type: {type(layer).__name__}')


def path_to_svg_node(
    layer: PathLayer,
    parent_node: TElement,
    root: VectorLayer,
    with_ids: bool = True,
) -> TElement:
    """Create an SVG path element for a path layer."""
    node = svg.create_element('path', parent_node, with_ns=_has_ns(parent_node))
    if with_ids:
        conditional_attr(node, 'id', layer.name, '')
    path = layer.path_data
    conditional_attr(node, 'd', path.path_string if path else '')
    fill = None
    if layer.fill_color:
        fill = color.android_to_csshex(layer.fill_color)
    # A missing fill attribute would paint black
    conditional_attr(node, 'fill', fill or 'none')
    conditional_attr(node, 'fill-opacity', layer.fill_alpha, 1)
    if layer.stroke_color:
        conditional_attr(
            node, 'stroke', color.android_to_csshex(layer.stroke_color), ''
        )
    conditional_attr(node, 'stroke-opacity', layer.stroke_alpha, 1)
    conditional_attr(node, 'stroke-width', layer.stroke_width, 0)

    if trim.is_trimmed(
        layer.trim_path_start, layer.trim_path_end, layer.trim_path_offset
    ):
        transform = flatten_transform(root, layer.id)
        path_length = trim.scaled_path_length(path, transform)
        dashes = trim.compute_trim(
            layer.trim_path_start,
            layer.trim_path_end,
            layer.trim_path_offset,
            path_length,
        )
        conditional_attr(node, 'stroke-dasharray', dashes.dash_array)
        conditional_attr(node, 'stroke-dashoffset', dashes.dash_offset)

    conditional_attr(node, 'stroke-linecap', layer.stroke_linecap, 'butt')
    conditional_attr(node, 'stroke-linejoin', layer.stroke_linejoin, 'miter')
    conditional_attr(node, 'stroke-miterlimit', layer.stroke_miter_limit, 4)
    fill_rule = 'evenodd' if layer.fill_type == FillType.EVEN_ODD else 'nonzero'
    conditional_attr(node, 'fill-rule', fill_rule, 'nonzero')
    return node


def group_to_svg_node(
    layer: GroupLayer, parent_node: TElement, with_ids: bool = True
) -> TElement:
    """Create an SVG group element for a group layer."""
    node = svg.create_element('g', parent_node, with_ns=_has_ns(parent_node))
    if with_ids:
        conditional_attr(node, 'id', layer.name, '')
    conditional_attr(node, 'transform', group_transform_attr(layer))
    return node


def group_transform_attr(layer: GroupLayer) -> str | None:
    """Create the SVG transform attribute value for a group.

    The order is significant: translate, then rotate about the pivot,
    then scale about the pivot.

    Returns:
        The transform list, or None if the group transform is identity.
    """
    fmt = svg.floatystr
    px, py = layer.pivot_x, layer.pivot_y
    transforms = []
    if layer.translate_x or layer.translate_y:
        transforms.append(
            f'translate({fmt(layer.translate_x)} {fmt(layer.translate_y)})'
        )
    if layer.rotation:
        transforms.append(f'rotate({fmt(layer.rotation)} {fmt(px)} {fmt(py)})')
    if layer.scale_x != 1 or layer.scale_y != 1:
        if px or py:
            transforms.append(f'translate({fmt(px)} {fmt(py)})')
        transforms.append(f'scale({fmt(layer.scale_x)} {fmt(layer.scale_y)})')
        if px or py:
            transforms.append(f'translate({fmt(-px)} {fmt(-py)})')
    return ' '.join(transforms) if transforms else None


def conditional_attr(
    node: TElement,
    name: str,
    value: str | float | None,
    default: Any = _NO_DEFAULT,  # noqa: ANN401
) -> None:
    """Set an attribute unless its value is None or the default.

    Numbers are formatted with :func:`svg.floatystr` before they are
    compared to the default, so a value that only differs from the
    default below the output precision (ie a stroke width of 1e-7)
    is omitted rather than written as the default.

    Args:
        node: The element to set the attribute on.
        name: Attribute name.
        value: Attribute value.
        default: The attribute's default value. If the value
            equals the default the attribute is omitted.
    """
    if value is None:
        return
    if _is_number(value):
        value = svg.floatystr(value)
        if _is_number(default):
            default = svg.floatystr(default)
    if default is not _NO_DEFAULT and value == default:
        return
    node.set(name, str(value))


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _has_ns(node: TElement) -> bool:
    return node.tag.startswith('{')
