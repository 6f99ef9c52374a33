"""Pytest fixtures."""

from __future__ import annotations

import geom2d
import pytest
from vdsvg.layers import GroupLayer, PathLayer, VectorLayer
from vdsvg.pathdata import PathData


@pytest.fixture(scope='session', autouse=True)
def _initialize() -> None:
    geom2d.set_epsilon(1e-8)


@pytest.fixture
def line_path() -> PathData:
    """A horizontal line 100 units long."""
    return PathData('M 0 0 L 100 0')


@pytest.fixture
def drawable(line_path: PathData) -> VectorLayer:
    """A vector containing a group containing a path."""
    path = PathLayer(
        id='path',
        name='path',
        path_data=line_path,
        fill_color='#ff0000',
    )
    group = GroupLayer(id='group', name='group', children=[path])
    return VectorLayer(
        id='vector', name='vector', width=24, height=24, children=[group]
    )
