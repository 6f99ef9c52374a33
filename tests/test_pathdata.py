"""Test SVG path parsing and path lengths."""

from __future__ import annotations

import math

import geom2d
import pytest
from vdsvg import pathdata
from vdsvg.pathdata import PathData

SQUARE = 'M 0 0 L 10 0 L 10 10 L 0 10 Z'
SQUARE_RELATIVE = 'm 0,0 l 10,0 0,10 -10,0 z'
SQUARE_HV = 'M0 0H10V10H0Z'

CIRCLE = 'M 10 0 A 10 10 0 1 1 -10 0 A 10 10 0 1 1 10 0'


def test_parse_square() -> None:
    for d in (SQUARE, SQUARE_RELATIVE, SQUARE_HV):
        subpaths = pathdata.parse_path_geom(d)
        assert len(subpaths) == 1
        assert len(subpaths[0]) == 4
        assert all(isinstance(seg, geom2d.Line) for seg in subpaths[0])
        assert subpaths[0][-1].p2 == (0, 0)
        assert PathData(d).path_length() == pytest.approx(40)


def test_implicit_lineto() -> None:
    commands = list(pathdata.path_commands('M 1 2 3 4 5 6'))
    assert commands == [('M', [1, 2]), ('L', [3, 4]), ('L', [5, 6])]

    commands = list(pathdata.path_commands('m 1 2 3 4'))
    assert commands == [('M', [1, 2]), ('L', [4, 6])]


def test_compact_numbers() -> None:
    commands = list(pathdata.path_commands('M.5.5L-1-1e1'))
    assert commands == [('M', [0.5, 0.5]), ('L', [-1, -10])]


def test_malformed_path() -> None:
    # Parsing stops at the first error
    assert pathdata.parse_path_geom('L 10 10') == []
    assert list(pathdata.path_commands('M 0 0 L 10')) == [('M', [0, 0])]


def test_subpaths() -> None:
    path = PathData('M 0 0 L 1 0 M 5 5 L 5 7')
    assert len(path.subpaths) == 2
    assert path.path_length() == pytest.approx(3)


def test_zero_length_segments_skipped() -> None:
    subpaths = pathdata.parse_path_geom('M 0 0 L 0 0 L 5 0 L 5 0')
    assert len(subpaths[0]) == 1


def test_curves() -> None:
    # Degenerate curves that are straight lines
    cubic = PathData('M 0 0 C 2 0 8 0 10 0')
    assert isinstance(cubic.subpaths[0][0], geom2d.CubicBezier)
    assert cubic.path_length() == pytest.approx(10, rel=1e-3)

    quadratic = PathData('M 0 0 Q 5 0 10 0 T 20 0')
    assert len(quadratic.subpaths[0]) == 2
    assert quadratic.path_length() == pytest.approx(20, rel=1e-3)


def test_arc_length() -> None:
    path = PathData(CIRCLE)
    assert all(
        isinstance(seg, geom2d.CubicBezier) for seg in path.subpaths[0]
    )
    assert path.path_length() == pytest.approx(2 * math.pi * 10, rel=1e-2)


def test_transform() -> None:
    path = PathData('M 0 0 L 10 0 L 10 10')
    scaled = path.transform(((2.0, 0.0, 0.0), (0.0, 1.0, 0.0)))
    assert scaled.path_length() == pytest.approx(30)
    assert scaled.path_string.startswith('M')
    # The original is unchanged
    assert path.path_length() == pytest.approx(20)
    assert path.path_string == 'M 0 0 L 10 0 L 10 10'


def test_transform_arc_non_uniform() -> None:
    # A circle scaled by (2, 1) becomes an ellipse with radii 20, 10
    path = PathData(CIRCLE).transform(((2.0, 0.0, 0.0), (0.0, 1.0, 0.0)))
    # Ramanujan's approximation of the ellipse perimeter
    a, b = 20, 10
    perimeter = math.pi * (3 * (a + b) - math.sqrt((3 * a + b) * (a + 3 * b)))
    assert path.path_length() == pytest.approx(perimeter, rel=1e-2)


def test_empty_path() -> None:
    path = PathData('')
    assert path.subpaths == []
    assert path.path_length() == 0
    assert path.path_string == ''


def test_equality() -> None:
    assert PathData(SQUARE) == PathData(SQUARE)
    assert PathData(SQUARE) != PathData(SQUARE_HV)


def test_compact_arc_flags() -> None:
    spaced = PathData('M0 0 a5 5 0 0 1 10 0')
    compact = PathData('M0 0 a5 5 0 01 10 0')
    assert compact.path_length() == pytest.approx(spaced.path_length())
    assert compact.path_length() == pytest.approx(5 * math.pi, rel=1e-2)

    commands = list(pathdata.path_commands('M0 0A5 5 0 1110 0'))
    assert commands[1] == ('A', [5, 5, 0, 1, 1, 10, 0])


def test_invalid_arc_flag() -> None:
    # A flag must be 0 or 1
    assert list(pathdata.path_commands('M 0 0 A 5 5 0 2 1 10 0')) == [
        ('M', [0, 0])
    ]
