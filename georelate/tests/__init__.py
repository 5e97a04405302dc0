"""
This file is also needed for the correct work of relative imports in the tests. For example:
from . import factory, square
from .. import relate
"""

from ..geom import GeometryFactory
from ..shared import Coordinate


factory = GeometryFactory()


def c(x, y):
    return Coordinate(float(x), float(y))


def point(x, y):
    return factory.createPoint((x, y))


def line(*coords):
    return factory.createLineString(coords)


def polygon(shell, *holes):
    return factory.createPolygon(shell, list(holes))


def square(minx, miny, size=1., ccw=False):
    """
    A closed square ring with the lower left corner at (minx, miny),
    clockwise unless ccw is set
    """
    maxx = minx + size
    maxy = miny + size
    coords = [(minx, miny), (minx, maxy), (maxx, maxy), (maxx, miny), (minx, miny)]
    if ccw:
        coords.reverse()
    return coords


def squarePolygon(minx, miny, size=1.):
    return polygon(square(minx, miny, size))


def assertMatrix(im, expected):
    assert str(im) == expected, "expected {} got {}".format(expected, im)
