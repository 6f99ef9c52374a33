"""Test trim path to stroke dash conversion."""

from __future__ import annotations

import pytest
from vdsvg import trim
from vdsvg.pathdata import PathData
from vdsvg.transform import IDENTITY_MATRIX


def test_no_trim() -> None:
    assert not trim.is_trimmed(0, 1, 0)
    assert trim.is_trimmed(0.1, 1, 0)
    assert trim.is_trimmed(0, 0.9, 0)
    assert trim.is_trimmed(0, 1, 0.5)


def test_shown_fraction() -> None:
    assert trim.shown_fraction(0.25, 0.75) == pytest.approx(0.5)
    # Wraps around the end of the path
    assert trim.shown_fraction(0.8, 0.2) == pytest.approx(0.4)
    assert trim.shown_fraction(0.5, 0.5) == 0


def test_simple_range() -> None:
    dashes = trim.compute_trim(0.25, 0.75, 0, 100)
    assert dashes.dash_array == '50,50.1'
    assert dashes.dash_offset == '75'


def test_wraparound() -> None:
    dashes = trim.compute_trim(0.8, 0.2, 0, 100)
    assert dashes == trim.DashPattern('40,60.1', '20')


def test_offset_modulo() -> None:
    dashes = trim.compute_trim(0.1, 0.6, 0.95, 100)
    assert dashes.dash_array == '50,50.1'
    # (0.1 + 0.95) mod 1 == 0.05
    assert dashes.dash_offset == '95'

    dashes = trim.compute_trim(0.1, 0.6, 0.95, 200)
    assert dashes.dash_offset == '190'


def test_negative_offset_wraps() -> None:
    dashes = trim.compute_trim(0, 0.5, -0.25, 100)
    assert dashes.dash_offset == '25'


def test_gap_padding() -> None:
    dashes = trim.compute_trim(0, 0.5, 0, 1000)
    gap = (1 - 0.5 + trim.TRIM_GAP_PADDING) * 1000
    assert dashes.dash_array == f'500,{gap:g}'
    assert dashes.dash_array == '500,501'


def test_zero_length() -> None:
    dashes = trim.compute_trim(0.2, 0.6, 0.1, 0)
    assert dashes == trim.DashPattern('0,0', '0')


def test_scaled_path_length() -> None:
    path = PathData('M 0 0 L 100 0')
    assert trim.scaled_path_length(path, IDENTITY_MATRIX) == 100
    scale2 = ((2.0, 0.0, 0.0), (0.0, 2.0, 0.0))
    assert trim.scaled_path_length(path, scale2) == pytest.approx(200)
    # Non-uniform scale only stretches along x
    vertical = PathData('M 0 0 L 0 100')
    scale_x = ((3.0, 0.0, 0.0), (0.0, 1.0, 0.0))
    assert trim.scaled_path_length(vertical, scale_x) == pytest.approx(100)
    assert trim.scaled_path_length(path, scale_x) == pytest.approx(300)


def test_scaled_path_length_no_path() -> None:
    assert trim.scaled_path_length(None, IDENTITY_MATRIX) == 0
