# -*- coding:utf-8 -*-

# ##### BEGIN LGPL LICENSE BLOCK #####
# GEOS - Geometry Engine Open Source
# http://geos.osgeo.org
#
# Copyright (C) 2011 Sandro Santilli <strk@kbt.io>
# Copyright (C) 2005 2006 Refractions Research Inc.
# Copyright (C) 2001-2002 Vivid Solutions Inc.
# Copyright (C) 1995 Olivier Devillers <Olivier.Devillers@sophia.inria.fr>
#
# This is free software you can redistribute and/or modify it under
# the terms of the GNU Lesser General Public Licence as published
# by the Free Software Foundation.
# See the COPYING file for more information.
#
# ##### END LGPL LICENSE BLOCK #####

# <pep8 compliant>

# ----------------------------------------------------------
# georelate - topological relate engine (DE-9IM)
#
# ----------------------------------------------------------


from math import sqrt, isfinite, inf
import numpy as np
import logging
logger = logging.getLogger("georelate")


class GeomTypeId():
    """
     * Variant tags of the geometry model.
     * Atomic kinds come first, the collections follow GEOS_MULTIPOINT.
    """
    GEOS_POINT = 0
    GEOS_LINESTRING = 1
    GEOS_LINEARRING = 2
    GEOS_POLYGON = 3
    GEOS_MULTIPOINT = 4
    GEOS_MULTILINESTRING = 5
    GEOS_MULTIPOLYGON = 6
    GEOS_GEOMETRYCOLLECTION = 7

    names = (
        'Point',
        'LineString',
        'LinearRing',
        'Polygon',
        'MultiPoint',
        'MultiLineString',
        'MultiPolygon',
        'GeometryCollection'
        )

    @staticmethod
    def isCollection(type_id: int) -> bool:
        return type_id >= GeomTypeId.GEOS_MULTIPOINT

    @staticmethod
    def isLineal(type_id: int) -> bool:
        return type_id in (GeomTypeId.GEOS_LINESTRING, GeomTypeId.GEOS_LINEARRING)


class TopologyException(Exception):
    """
     * Raised on an inconsistent topology, e.g. a ring collapsed to
     * less than 3 distinct points or two area edges disagreeing on
     * the location of the side they share.
     *
     * coord is the location of the problem when it is known.
    """
    def __init__(self, message="", coord=None):
        where = "" if coord is None else " at {}".format(coord)
        Exception.__init__(self, "TopologyException: {}{}".format(message, where))
        self.message = message
        self.coord = coord


class NodingException(TopologyException):
    """
     * The edges handed to the relate computation still cross each other
     * away from their endpoints.
     *
     * segments: [p0, p1, q0, q1], the endpoints of the two segments
    """
    def __init__(self, message="", coord=None, segments=None):
        TopologyException.__init__(self, message, coord)
        self.segments = [] if segments is None else segments


class PrecisionModel():
    """
     * Rounding of the computed coordinates.
     * A scale of 0 keeps full double precision, any other scale snaps
     * values to a grid of step 1 / scale.
    """
    def __init__(self, scale: float=0):
        self.scale = scale

    @property
    def isFloating(self) -> bool:
        return self.scale == 0

    def makePrecise(self, val: float) -> float:
        if self.isFloating:
            return val
        return round(val * self.scale) / self.scale


class Location():
    """
     * Topological location of a point relative to a geometry,
     * also the row (first geometry) and column (second geometry)
     * index in the DE-9IM matrix.
    """
    UNDEF = -1
    INTERIOR = 0
    BOUNDARY = 1
    EXTERIOR = 2

    symbols = {UNDEF: '-', INTERIOR: 'i', BOUNDARY: 'b', EXTERIOR: 'e'}

    @staticmethod
    def toLocationSymbol(loc: int) -> str:
        symbol = Location.symbols.get(loc)
        if symbol is None:
            raise ValueError("Unknown location value: {}".format(loc))
        return symbol


class Dimension():
    """
     * Values held in the cells of an IntersectionMatrix.
     *
     * P, L and A are the dimensions of a point, a curve and a surface,
     * FALSE marks an empty intersection. TRUE (any non empty) and
     * DONTCARE only occur in patterns.
    """
    DONTCARE = -3
    TRUE = -2
    FALSE = -1
    P = 0
    L = 1
    A = 2

    # symbol of value v at index v - DONTCARE
    symbols = "*TF012"

    @staticmethod
    def toDimensionSymbol(val: int) -> str:
        index = val - Dimension.DONTCARE
        if not 0 <= index < len(Dimension.symbols):
            raise ValueError("Unknown dimension value: {}".format(val))
        return Dimension.symbols[index]

    @staticmethod
    def toDimensionValue(symbol: str) -> int:
        index = Dimension.symbols.find(symbol.upper()) if len(symbol) == 1 else -1
        if index < 0:
            raise ValueError("Unknown dimension symbol: {}".format(symbol))
        return index + Dimension.DONTCARE


class Quadrant():
    """
     *  NW | NE
     *  ---+---
     *  SW | SE
     *
     * Numbered counter-clockwise from NE, so that sorting by quadrant
     * sorts directions by angle.
    """
    NE = 0
    NW = 1
    SW = 2
    SE = 3

    @staticmethod
    def quadrant(dx, dy) -> int:
        if dx == 0.0 and dy == 0.0:
            raise ValueError("Cannot compute the quadrant of a null vector")
        if dy >= 0:
            return Quadrant.NE if dx >= 0 else Quadrant.NW
        return Quadrant.SE if dx >= 0 else Quadrant.SW


class Position():
    """
     * Indexes of the locations held by a label: on a graph component,
     * to its left and to its right.
    """
    ON = 0
    LEFT = 1
    RIGHT = 2


class Envelope():
    """
     * Axis aligned box, the extent of a geometry.
     *
     * Envelope() is the null envelope of an empty geometry,
     * Envelope(env) copies, Envelope(c0[, c1]) spans Coordinates and
     * Envelope(minx, miny, maxx, maxy) takes the bounds.
    """
    def __init__(self, *args):
        self.minx = self.miny = inf
        self.maxx = self.maxy = -inf
        if len(args) == 4 and isinstance(args[0], (int, float)):
            self._include(args[0], args[1])
            self._include(args[2], args[3])
        else:
            for arg in args:
                self.expandToInclude(arg)

    @property
    def isNull(self) -> bool:
        return self.maxx < self.minx

    def _include(self, x, y) -> None:
        self.minx = min(self.minx, x)
        self.maxx = max(self.maxx, x)
        self.miny = min(self.miny, y)
        self.maxy = max(self.maxy, y)

    def expandToInclude(self, other) -> None:
        if isinstance(other, Envelope):
            if not other.isNull:
                self._include(other.minx, other.miny)
                self._include(other.maxx, other.maxy)
        else:
            self._include(other.x, other.y)

    def covers(self, other) -> bool:
        if self.isNull:
            return False
        if isinstance(other, Envelope):
            return (not other.isNull and
                self.minx <= other.minx and other.maxx <= self.maxx and
                self.miny <= other.miny and other.maxy <= self.maxy)
        return self.minx <= other.x <= self.maxx and self.miny <= other.y <= self.maxy

    def intersects(self, other) -> bool:
        if not isinstance(other, Envelope):
            return self.covers(other)
        if self.isNull or other.isNull:
            return False
        return not (other.minx > self.maxx or other.maxx < self.minx or
            other.miny > self.maxy or other.maxy < self.miny)

    @staticmethod
    def static_intersects(p1, p2, q1, q2=None) -> bool:
        """
         * Whether the box spanned by p1, p2 meets the point q1,
         * or the box spanned by q1, q2 when given.
        """
        if q2 is None:
            q2 = q1
        return not (
            max(q1.x, q2.x) < min(p1.x, p2.x) or min(q1.x, q2.x) > max(p1.x, p2.x) or
            max(q1.y, q2.y) < min(p1.y, p2.y) or min(q1.y, q2.y) > max(p1.y, p2.y))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Envelope):
            return False
        if self.isNull or other.isNull:
            return self.isNull and other.isNull
        return ((self.minx, self.miny, self.maxx, self.maxy) ==
            (other.minx, other.miny, other.maxx, other.maxy))

    def __hash__(self):
        return hash((self.minx, self.miny, self.maxx, self.maxy))

    def __str__(self) -> str:
        return "Env[{}:{}, {}:{}]".format(self.minx, self.maxx, self.miny, self.maxy)


class IntersectionMatrix():
    """
     * The DE-9IM matrix of a geometry A against a geometry B.
     *
     * Rows follow the Location of A, columns the Location of B.
     * The cells live in a 3x3 numpy array and only ever grow:
     * every update keeps the maximum of the old and the new dimension.
     * The string form lists the cells row by row, e.g. "212101212".
    """
    def __init__(self, elements=None):
        self._m = np.full((3, 3), Dimension.FALSE, dtype=np.int8)
        if isinstance(elements, IntersectionMatrix):
            self._m[:] = elements._m
        elif elements is not None:
            self.set(elements)

    @staticmethod
    def _parse(symbols: str):
        if len(symbols) != 9:
            raise ValueError("Should be length 9: {}".format(symbols))
        values = [Dimension.toDimensionValue(symbol) for symbol in symbols]
        return np.array(values, dtype=np.int8).reshape((3, 3))

    def set(self, row, col=None, dimensionValue=None) -> None:
        """
            arguments : (dimensionSymbols) | (row, col, dimensionValue)
        """
        if col is None:
            self._m[:] = self._parse(row)
        else:
            self._m[row, col] = dimensionValue

    def setAtLeast(self, row, col=None, dimensionValue=None) -> None:
        """
         * Raise cells to at least the given dimension.
            arguments : (minimumDimensionSymbols) | (row, col, dimensionValue)
         *
         * 'F', 'T' and '*' in a pattern leave the cell unchanged.
        """
        if col is None:
            np.maximum(self._m, self._parse(row), out=self._m)
        elif self._m[row, col] < dimensionValue:
            self._m[row, col] = dimensionValue

    def setAtLeastIfValid(self, row: int, col: int, dimensionValue: int) -> None:
        # components without a location for both geometries do not count
        if row >= 0 and col >= 0:
            self.setAtLeast(row, col, dimensionValue)

    def setAll(self, dimensionValue: int) -> None:
        self._m[:] = dimensionValue

    def get(self, row: int, col: int) -> int:
        return int(self._m[row, col])

    def add(self, other) -> None:
        np.maximum(self._m, other._m, out=self._m)

    def matches(self, required: str) -> bool:
        return IntersectionMatrix.static_matches(self._m, required)

    @staticmethod
    def static_matches(actual, required: str) -> bool:
        """
         * Whether the cells in actual, a 3x3 array or a 9 symbols string,
         * satisfy the pattern:
         *  '*' any value, 'T' any non empty value,
         *  'F' empty, '0', '1', '2' exactly that dimension
        """
        if isinstance(actual, str):
            actual = IntersectionMatrix._parse(actual)
        req = IntersectionMatrix._parse(required)
        ok = (
            (req == Dimension.DONTCARE) |
            (req == actual) |
            ((req == Dimension.TRUE) & (actual >= Dimension.P))
        )
        return bool(ok.all())

    def _isTrue(self, row: int, col: int) -> bool:
        return self._m[row, col] >= Dimension.P

    def _isFalse(self, row: int, col: int) -> bool:
        return self._m[row, col] == Dimension.FALSE

    @property
    def isDisjoint(self) -> bool:
        return not self.isIntersects

    @property
    def isIntersects(self) -> bool:
        # any of II, IB, BI, BB non empty
        return bool((self._m[:2, :2] >= Dimension.P).any())

    def isTouches(self, dimensionOfGeometryA: int, dimensionOfGeometryB: int) -> bool:
        # the pattern is symmetric, only the pair of dimensions matters
        lo = min(dimensionOfGeometryA, dimensionOfGeometryB)
        hi = max(dimensionOfGeometryA, dimensionOfGeometryB)
        if lo < Dimension.P or hi == Dimension.P:
            return False
        I, B = Location.INTERIOR, Location.BOUNDARY
        return self._isFalse(I, I) and (
            self._isTrue(I, B) or self._isTrue(B, I) or self._isTrue(B, B))

    def isCrosses(self, dimensionOfGeometryA: int, dimensionOfGeometryB: int) -> bool:
        dA, dB = dimensionOfGeometryA, dimensionOfGeometryB
        I, E = Location.INTERIOR, Location.EXTERIOR
        if dA == Dimension.L and dB == Dimension.L:
            return self.get(I, I) == Dimension.P
        if dA < 0 or dB < 0 or dA == dB:
            return False
        if dA < dB:
            return self._isTrue(I, I) and self._isTrue(I, E)
        return self._isTrue(I, I) and self._isTrue(E, I)

    @property
    def isWithin(self) -> bool:
        return self.matches("T*F**F***")

    @property
    def isContains(self) -> bool:
        return self.matches("T*****FF*")

    @property
    def isCovers(self) -> bool:
        return self.isIntersects and self.matches("******FF*")

    @property
    def isCoveredBy(self) -> bool:
        return self.isIntersects and self.matches("**F**F***")

    def isEquals(self, dimensionOfGeometryA: int, dimensionOfGeometryB: int) -> bool:
        if dimensionOfGeometryA != dimensionOfGeometryB:
            return False
        return self.matches("T*F**FFF*")

    def isOverlaps(self, dimensionOfGeometryA: int, dimensionOfGeometryB: int) -> bool:
        if dimensionOfGeometryA != dimensionOfGeometryB or dimensionOfGeometryA < 0:
            return False
        if dimensionOfGeometryA == Dimension.L:
            return self.matches("1*T***T**")
        return self.matches("T*T***T**")

    def transpose(self):
        """
         * Swap the roles of A and B in place.
         * @return this matrix
        """
        self._m[:] = self._m.T.copy()
        return self

    def __eq__(self, other) -> bool:
        return isinstance(other, IntersectionMatrix) and np.array_equal(self._m, other._m)

    __hash__ = None

    def __str__(self) -> str:
        return "".join(Dimension.toDimensionSymbol(int(v)) for v in self._m.flat)

    def __repr__(self) -> str:
        return "IntersectionMatrix('{}')".format(self)


class Coordinate():
    """
     * A point of the plane, compared exactly.
    """
    __slots__ = ('x', 'y')

    def __init__(self, x: float=0, y: float=0):
        self.x = x
        self.y = y

    @property
    def isValid(self) -> bool:
        return isfinite(self.x) and isfinite(self.y)

    def distance(self, other) -> float:
        return sqrt((self.x - other.x) ** 2 + (self.y - other.y) ** 2)

    def __eq__(self, other) -> bool:
        return isinstance(other, Coordinate) and self.x == other.x and self.y == other.y

    def __ne__(self, other) -> bool:
        return not self.__eq__(other)

    def __hash__(self):
        return hash((self.x, self.y))

    def __lt__(self, other) -> bool:
        return (self.x, self.y) < (other.x, other.y)

    def __str__(self) -> str:
        return "({} {})".format(self.x, self.y)

    def __repr__(self) -> str:
        return "Coordinate({}, {})".format(self.x, self.y)


class CoordinateSequence(list):
    """
     * A list of Coordinate, printed the WKT way: (x0 y0, x1 y1)
    """
    @staticmethod
    def removeRepeatedPoints(coords):
        """
         * @return a new CoordinateSequence without consecutive duplicates
        """
        res = CoordinateSequence()
        for coord in coords:
            if len(res) == 0 or res[-1] != coord:
                res.append(coord)
        return res

    def __str__(self) -> str:
        return "({})".format(", ".join("{} {}".format(c.x, c.y) for c in self))
