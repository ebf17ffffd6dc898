"""Shared fixtures for the numcoll test suite."""

import pytest

from numcoll.coll import GeometryCollection
from numcoll.geom import LineString, Point, Polygon


@pytest.fixture
def square_coords():
    """Closed 10x10 square, traversed clockwise from the origin."""
    return [(0., 0.), (0., 10.), (10., 10.), (10., 0.), (0., 0.)]


@pytest.fixture
def square_collection(square_coords):
    """Collection holding a single closed line string."""
    return GeometryCollection([LineString(square_coords)])


@pytest.fixture
def holed_polygon():
    """10x10 polygon with a 2x2 hole."""
    return Polygon([
        [(0., 0.), (10., 0.), (10., 10.), (0., 10.), (0., 0.)],
        [(4., 4.), (6., 4.), (6., 6.), (4., 6.), (4., 4.)],
        ])


@pytest.fixture
def mixed_collection(holed_polygon):
    """Collection with a point, a line, a holed polygon, and a nested part."""
    nested = GeometryCollection([
        Point(20., 20.),
        LineString([(30., 30.), (31., 31.), (32., 30.)]),
        ])
    return GeometryCollection([
        Point(1., 2.),
        LineString([(0., 0.), (1., 1.), (2., 0.)]),
        holed_polygon,
        nested,
        ])
