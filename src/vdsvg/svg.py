"""SVG element helpers and a pretty-printing XML serializer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape

from lxml import etree

if TYPE_CHECKING:
    from typing_extensions import TypeAlias

logger = logging.getLogger(__name__)

# : SVG namespace URI
SVG_URI = 'http://www.w3.org/2000/svg'

# : Default namespace map for exported documents
SVG_NS = {None: SVG_URI}

TElement: TypeAlias = (
    etree._Element  # noqa: SLF001 pylint: disable=protected-access
)

# Number of digits after the decimal point for numeric attribute values.
PRECISION = 6

# Entities escaped in double quoted attribute values, besides &, <, and >
_ATTR_ENTITIES = {'"': '&quot;', '\n': '&#10;', '\t': '&#9;'}


def svg_ns(tag: str) -> str:
    """Shortcut to prepend SVG namespace to `tag`."""
    return f'{{{SVG_URI}}}{tag}'


def strip_ns(tag: str) -> str:
    """Strip the namespace part from the tag if any."""
    return tag.rpartition('}')[2]


def floatystr(value: float, precision: int = PRECISION) -> str:
    """Format a number as a fixed point string without trailing zeros.

    This is similar to the 'g' format but won't display scientific
    notation for big numbers, and it rounds away floating point noise
    (ie 39.99999999999999 becomes '40').

    Args:
        value: The number to format.
        precision: Maximum number of digits after the decimal point.

    Returns:
        The formatted number. Negative zero is formatted as '0'.
    """
    s = f'{float(value):.{precision}f}'.rstrip('0').rstrip('.')
    if s == '-0':
        return '0'
    return s


def create_element(
    tag: str, parent: TElement | None = None, with_ns: bool = True
) -> TElement:
    """Create an SVG element.

    Args:
        tag: Unqualified tag name (ie 'g' or 'path').
        parent: Optional parent element. The new element is appended
            to the parent's children.
        with_ns: Put the element in the SVG namespace.
            A root element will declare the SVG namespace as the default.

    Returns:
        The new element.
    """
    qtag = svg_ns(tag) if with_ns else tag
    if parent is not None:
        return etree.SubElement(parent, qtag)
    if with_ns:
        return etree.Element(qtag, nsmap=SVG_NS)
    return etree.Element(qtag)


def serialize_to_string(
    element: TElement, indent: int = 4, multi_attribute_indent: int = 4
) -> str:
    """Serialize an element tree to a pretty printed XML string.

    Namespace declarations are written as attributes. When an element
    has more than one attribute each attribute is written on its own line.

    Args:
        element: The root element to serialize.
        indent: Number of spaces to indent each nesting level.
            Zero puts the whole document on one line.
        multi_attribute_indent: Number of spaces to indent attributes,
            relative to the element tag, when they are written on
            separate lines.

    Returns:
        The XML string (without an XML declaration).
    """
    lines: list[str] = []
    _serialize_element(element, 0, indent, multi_attribute_indent, lines)
    return ('\n' if indent else '').join(lines)


def _serialize_element(
    element: TElement,
    depth: int,
    indent: int,
    multi_attribute_indent: int,
    lines: list[str],
) -> None:
    prefix = ' ' * (depth * indent)
    attrs = _namespace_attrs(element)
    attrs.extend(
        (strip_ns(name), value) for name, value in element.attrib.items()
    )

    tag = strip_ns(element.tag)
    if indent and multi_attribute_indent and len(attrs) > 1:
        attr_prefix = '\n' + prefix + ' ' * multi_attribute_indent
    else:
        attr_prefix = ' '
    attr_str = ''.join(
        f'{attr_prefix}{name}="{escape(value, _ATTR_ENTITIES)}"'
        for name, value in attrs
    )

    children = list(element)
    if not children:
        lines.append(f'{prefix}<{tag}{attr_str}/>')
        return
    lines.append(f'{prefix}<{tag}{attr_str}>')
    for child in children:
        _serialize_element(
            child, depth + 1, indent, multi_attribute_indent, lines
        )
    lines.append(f'{prefix}</{tag}>')


def _namespace_attrs(element: TElement) -> list[tuple[str, str]]:
    """Namespace declarations introduced by this element."""
    parent = element.getparent()
    inherited = parent.nsmap if parent is not None else {}
    attrs = []
    for prefix, uri in element.nsmap.items():
        if inherited.get(prefix) != uri:
            name = f'xmlns:{prefix}' if prefix else 'xmlns'
            attrs.append((name, uri))
    return attrs
