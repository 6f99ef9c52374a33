"""Path data: SVG path strings backed by geom2d segments.

A PathData keeps the original path string for output and lazily
converts it to Line and CubicBezier segments when a length or
a transformed copy is needed. Elliptical arcs are always converted
to cubic Beziers so that non-uniform scaling transforms them exactly.
"""

from __future__ import annotations

import logging
import math
import re
from typing import TYPE_CHECKING, Union

import geom2d

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from geom2d.transform2d import TMatrix
    from typing_extensions import TypeAlias

logger = logging.getLogger(__name__)

TPathGeom: TypeAlias = Union[geom2d.Line, geom2d.CubicBezier]
TSubpath: TypeAlias = list[TPathGeom]

_RE_COMMAND = re.compile(r'[MmZzLlHhVvCcSsQqTtAa]')
_RE_NUMBER = re.compile(
    r'[-+]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?'
)
# Arc flags are single digits and may be written without separators
_RE_FLAG = re.compile(r'[01]')
_SEPARATORS = frozenset(' \t\r\n\f,')

# Number of parameters for each path command
_PARAM_COUNT = {
    'M': 2,
    'L': 2,
    'H': 1,
    'V': 1,
    'C': 6,
    'S': 4,
    'Q': 4,
    'T': 2,
    'A': 7,
    'Z': 0,
}


class PathData:
    """Geometric path with string, length, and transform queries."""

    def __init__(
        self,
        path_string: str = '',
        subpaths: Sequence[TSubpath] | None = None,
    ) -> None:
        """New path.

        Args:
            path_string: SVG path data (the `d` attribute of a path).
            subpaths: Already parsed geometry. If specified and
                `path_string` is empty the path string will
                be generated from the geometry.
        """
        self._path_string = path_string
        self._subpaths = list(subpaths) if subpaths is not None else None

    def __repr__(self) -> str:
        return f'PathData({self.path_string!r})'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PathData):
            return NotImplemented
        return self.path_string == other.path_string

    def __hash__(self) -> int:
        return hash(self.path_string)

    @property
    def path_string(self) -> str:
        """The SVG path data string."""
        if not self._path_string and self._subpaths:
            self._path_string = ' '.join(
                geompath_to_svgpath(subpath)
                for subpath in self._subpaths
                if subpath
            )
        return self._path_string

    @property
    def subpaths(self) -> list[TSubpath]:
        """The path geometry as a list of sub-paths."""
        if self._subpaths is None:
            self._subpaths = parse_path_geom(self._path_string)
        return self._subpaths

    def path_length(self) -> float:
        """Total arc length of all sub-paths."""
        return math.fsum(
            segment.length() for subpath in self.subpaths for segment in subpath
        )

    def transform(self, matrix: TMatrix) -> PathData:
        """Return a copy of this path with an affine transform applied."""
        subpaths = [
            [segment.transform(matrix) for segment in subpath]
            for subpath in self.subpaths
        ]
        return PathData(subpaths=subpaths)


def geompath_to_svgpath(path: Sequence[TPathGeom]) -> str:
    """Create SVG path data from a sequence of connected segments.

    Args:
        path: A sequence of Line or CubicBezier segments.

    Returns:
        An SVG path attribute value (the 'd' part).
    """
    if not path:
        return ''
    dparts = [f'M {path[0].p1.to_svg()}']
    prev_type: type | None = None
    for segment in path:
        add_prefix = prev_type is not type(segment)
        dparts.append(segment.to_svg_path(add_prefix=add_prefix))
        prev_type = type(segment)
    return ' '.join(dparts)


def parse_path_geom(path_data: str) -> list[TSubpath]:  # noqa: PLR0912
    """Parse SVG path data and convert to geometry objects.

    Relative commands are converted to absolute coordinates and
    shorthand commands (H, V, S, T) are converted to their
    canonical forms. Zero-length segments are skipped.

    Parsing is forgiving: a malformed path is parsed up to the
    first error and the rest is ignored.

    Args:
        path_data: The `d` attribute value of an SVG path element.

    Returns:
        A list of zero or more subpaths.
        A subpath being a list of zero or more Line or CubicBezier objects.
    """
    subpath: TSubpath = []
    subpath_list: list[TSubpath] = []
    pen = geom2d.P(0.0, 0.0)
    start = pen
    # Last control point of the previous curve, for reflection by S and T
    last_control = pen
    prev_cmd = ''

    for cmd, params in path_commands(path_data):
        if cmd == 'M':
            if subpath:
                subpath_list.append(subpath)
                subpath = []
            pen = start = geom2d.P(params[0], params[1])
            prev_cmd = cmd
            continue

        if cmd == 'Z':
            if pen != start:
                subpath.append(geom2d.Line(pen, start))
            if subpath:
                subpath_list.append(subpath)
                subpath = []
            pen = start
            prev_cmd = cmd
            continue

        p2 = geom2d.P(params[-2], params[-1])
        if cmd in {'C', 'S'}:
            if cmd == 'C':
                c1 = geom2d.P(params[0], params[1])
            else:
                c1 = _reflect(last_control, pen, prev_cmd in {'C', 'S'})
            c2 = geom2d.P(params[-4], params[-3])
            if not (pen == c1 == c2 == p2):
                subpath.append(geom2d.CubicBezier(pen, c1, c2, p2))
            last_control = c2
        elif cmd in {'Q', 'T'}:
            if cmd == 'Q':
                c1 = geom2d.P(params[0], params[1])
            else:
                c1 = _reflect(last_control, pen, prev_cmd in {'Q', 'T'})
            if not (pen == c1 == p2):
                subpath.append(
                    geom2d.CubicBezier.from_quadratic(pen, c1, p2)
                )
            last_control = c1
        elif cmd == 'A':
            subpath.extend(_arc_to_geom(pen, p2, params))
        elif pen != p2:
            subpath.append(geom2d.Line(pen, p2))
        pen = p2
        prev_cmd = cmd

    if subpath:
        subpath_list.append(subpath)

    return subpath_list


def path_commands(path_data: str) -> Iterator[tuple[str, list[float]]]:
    """Parse an SVG path definition string into absolute commands.

    H and V are converted to L, and M with implicit parameters
    is converted to M followed by L commands.

    Args:
        path_data: The 'd' attribute value of a SVG path element.

    Yields:
        A 2-tuple of the form (cmd, params) where cmd is one of
        M, L, C, S, Q, T, A, or Z.
    """
    pen = (0.0, 0.0)
    start = pen
    for token_cmd, params in _tokenize_commands(path_data):
        cmd = token_cmd.upper()
        if token_cmd.islower():
            params = _absolute(cmd, params, pen)
        if cmd == 'H':
            cmd, params = 'L', [params[0], pen[1]]
        elif cmd == 'V':
            cmd, params = 'L', [pen[0], params[0]]

        if cmd == 'Z':
            pen = start
        else:
            pen = (params[-2], params[-1])
            if cmd == 'M':
                start = pen
        yield cmd, params


def _tokenize_commands(path_data: str) -> Iterator[tuple[str, list[float]]]:
    """Split path data into commands with exactly one parameter set each.

    Arc flags are read as single digits, so compact arcs such as
    `a5 5 0 01 10 0` parse the same as their separated form.
    """
    cmd = ''
    params: list[float] = []
    pos = _skip_separators(path_data, 0)
    while pos < len(path_data):
        match = _RE_COMMAND.match(path_data, pos)
        if match:
            if cmd:
                yield from _split_params(cmd, params)
            elif match.group() not in {'M', 'm'}:
                logger.debug('Path data must start with moveto: %s', path_data)
                return
            cmd = match.group()
            params = []
        elif not cmd:
            logger.debug('Path data must start with moveto: %s', path_data)
            return
        else:
            is_flag = cmd in {'A', 'a'} and len(params) % 7 in {3, 4}
            match = (_RE_FLAG if is_flag else _RE_NUMBER).match(path_data, pos)
            if not match:
                logger.debug('Invalid path data at %d: %s', pos, path_data)
                break
            params.append(float(match.group()))
        pos = _skip_separators(path_data, match.end())
    if cmd:
        yield from _split_params(cmd, params)


def _skip_separators(path_data: str, pos: int) -> int:
    while pos < len(path_data) and path_data[pos] in _SEPARATORS:
        pos += 1
    return pos


def _split_params(
    cmd: str, params: list[float]
) -> Iterator[tuple[str, list[float]]]:
    nparams = _PARAM_COUNT[cmd.upper()]
    if nparams == 0:
        yield cmd, []
        return
    if len(params) % nparams:
        logger.debug('Dropping incomplete %s parameters: %s', cmd, params)
    for i in range(0, len(params) - nparams + 1, nparams):
        yield cmd, params[i : i + nparams]
        # Subsequent moveto parameters are implicit lineto commands
        if cmd == 'M':
            cmd = 'L'
        elif cmd == 'm':
            cmd = 'l'


def _absolute(cmd: str, params: list[float], pen: tuple) -> list[float]:
    """Convert relative command parameters to absolute."""
    if cmd == 'H':
        return [params[0] + pen[0]]
    if cmd == 'V':
        return [params[0] + pen[1]]
    if cmd == 'A':
        return [*params[:5], params[5] + pen[0], params[6] + pen[1]]
    return [value + pen[i % 2] for i, value in enumerate(params)]


def _reflect(control: geom2d.P, pen: geom2d.P, smooth: bool) -> geom2d.P:
    """Reflect the previous control point about the current point."""
    if not smooth:
        return pen
    return geom2d.P(2 * pen[0] - control[0], 2 * pen[1] - control[1])


def _arc_to_geom(
    p1: geom2d.P, p2: geom2d.P, params: list[float]
) -> list[TPathGeom]:
    """Convert an SVG elliptical arc to cubic Beziers."""
    if p1 == p2:
        # SVG renderers omit an arc with coincident end points.
        return []
    rx, ry, phi, large_arc, sweep_flag = params[:5]
    if geom2d.is_zero(rx) or geom2d.is_zero(ry):
        return [geom2d.Line(p1, p2)]
    elliptical_arc = geom2d.ellipse.EllipticalArc.from_endpoints(
        p1,
        p2,
        abs(rx),
        abs(ry),
        math.radians(phi),
        int(large_arc),
        int(sweep_flag),
    )
    if not elliptical_arc:
        # Parameters must be degenerate...
        logger.debug('Degenerate arc: %s -> %s %s', p1, p2, params)
        return [geom2d.Line(p1, p2)]
    return list(geom2d.bezier.bezier_ellipse(elliptical_arc))
