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


import logging
logger = logging.getLogger("georelate.algorithms")
from fractions import Fraction
from math import isfinite, sqrt
from .shared import (
    GeomTypeId,
    Location,
    Envelope,
    Coordinate
    )


# relative error bound of a float 2x2 determinant, in units of (|ad| + |bc|)
DET_ERROR_BOUND = 4. * 2. ** -53


def _signOf(value) -> int:
    return (value > 0) - (value < 0)


class HCoordinate():
    """
     * Intersection of two lines in homogeneous coordinates.
    """
    @staticmethod
    def intersection(p1, p2, q1, q2):
        """
         * @raise ArithmeticError when the lines are parallel or the
         *        result is not a finite number
        """
        # each line as the cross product of its two points
        pa, pb, pc = p1.y - p2.y, p2.x - p1.x, p1.x * p2.y - p2.x * p1.y
        qa, qb, qc = q1.y - q2.y, q2.x - q1.x, q1.x * q2.y - q2.x * q1.y

        w = pa * qb - qa * pb
        if w == 0:
            raise ArithmeticError("HCoordinate intersection of parallel lines")

        x = (pb * qc - qb * pc) / w
        y = (qa * pc - pa * qc) / w
        if not (isfinite(x) and isfinite(y)):
            raise ArithmeticError("HCoordinate intersection is not finite")
        return Coordinate(x, y)


class RobustDeterminant():
    """
     * Exact sign of a 2x2 determinant of doubles.
     *
     * The product difference is first evaluated in floating point,
     * its sign is trusted when the value exceeds the rounding error bound.
     * Otherwise the determinant is evaluated again with exact rationals.
    """
    @staticmethod
    def signOfDet2x2(x1: float, y1: float, x2: float, y2: float) -> int:
        """
            returns -1 if the determinant is negative,
            returns  1 if the determinant is positive,
            returns  0 if the determinant is null.
        """
        left = x1 * y2
        right = y1 * x2
        det = left - right
        if abs(det) > DET_ERROR_BOUND * (abs(left) + abs(right)):
            return _signOf(det)
        if not (isfinite(left) and isfinite(right)):
            return _signOf(det) if isfinite(det) else 0
        return _signOf(Fraction(x1) * Fraction(y2) - Fraction(y1) * Fraction(x2))

    @staticmethod
    def orient(p1, p2, q) -> int:
        """
         * Sign of the area of the triangle p1, p2, q.
         *
         * Differences are taken relative to q, so that swapping p1 and p2
         * negates the float value exactly and the result is antisymmetric.
        """
        ax, ay = p1.x - q.x, p1.y - q.y
        bx, by = p2.x - q.x, p2.y - q.y
        left = ax * by
        right = ay * bx
        det = left - right
        if abs(det) > DET_ERROR_BOUND * (abs(left) + abs(right)):
            return _signOf(det)
        if not all(isfinite(v) for v in (p1.x, p1.y, p2.x, p2.y, q.x, q.y)):
            return _signOf(det) if isfinite(det) else 0
        qx, qy = Fraction(q.x), Fraction(q.y)
        return _signOf(
            (Fraction(p1.x) - qx) * (Fraction(p2.y) - qy) -
            (Fraction(p1.y) - qy) * (Fraction(p2.x) - qx)
            )


def countRingCrossings(p, ring):
    """
     * Casts a ray from p toward +x and counts the ring segments it crosses.
     *
     * @return (crossings, isOnSegment), the count is not meaningful
     *  once p is found on a segment
    """
    crossings = 0
    for p1, p2 in zip(ring, ring[1:]):

        if p1.x < p.x and p2.x < p.x:
            continue

        if p2 == p:
            return crossings, True

        if p1.y == p.y and p2.y == p.y:
            if min(p1.x, p2.x) <= p.x <= max(p1.x, p2.x):
                return crossings, True
            continue

        # upward segments hold their start, downward ones their end
        if (p1.y > p.y) != (p2.y > p.y):
            side = RobustDeterminant.orient(p1, p2, p)
            if side == 0:
                return crossings, True
            if p2.y < p1.y:
                side = -side
            if side > 0:
                crossings += 1

    return crossings, False


class CGAlgorithms():
    """
     * Basic computational geometry on coordinates.
     * Orientation based predicates are exact, distances are not.
    """
    CLOCKWISE = -1
    COLLINEAR = 0
    COUNTERCLOCKWISE = 1

    @staticmethod
    def orientationIndex(p1, p2, q) -> int:
        """
         * @return 1 if q is left of p1-p2, -1 if right, 0 if collinear
        """
        return RobustDeterminant.orient(p1, p2, q)

    @staticmethod
    def isOnLine(p, coords) -> bool:
        return any(LineIntersector.hasPointOnLineIntersection(p, a, b)
            for a, b in zip(coords, coords[1:]))

    @staticmethod
    def isCCW(ring) -> bool:
        """
         * Orientation of a closed ring, from the turn made at its highest
         * vertex (the first one on ties) between its distinct neighbours.
         *
         * Rings with less than 3 distinct points, or folding back on
         * themselves at the highest vertex, are not counter-clockwise.
        """
        n = len(ring) - 1
        if n < 3:
            return False

        hi = max(range(n), key=lambda i: (ring[i].y, -i))
        hiPt = ring[hi]

        prev = hi
        for _ in range(n):
            prev = (prev - 1) % n
            if ring[prev] != hiPt:
                break

        nxt = hi
        for _ in range(n):
            nxt = (nxt + 1) % n
            if ring[nxt] != hiPt:
                break

        a, b = ring[prev], ring[nxt]
        if a == hiPt or b == hiPt or a == b:
            return False

        turn = CGAlgorithms.orientationIndex(a, hiPt, b)
        if turn == 0:
            # flat top, neighbours on a horizontal line
            return a.x > b.x
        return turn > 0

    @staticmethod
    def locatePointInRing(p, ring) -> int:
        crossings, onSegment = countRingCrossings(p, ring)
        if onSegment:
            return Location.BOUNDARY
        return Location.INTERIOR if crossings % 2 == 1 else Location.EXTERIOR

    @staticmethod
    def isPointInRing(p, ring) -> bool:
        # points on the ring count as inside
        return CGAlgorithms.locatePointInRing(p, ring) != Location.EXTERIOR

    @staticmethod
    def signedArea(ring) -> float:
        """
         * Shoelace area, positive for a clockwise ring.
        """
        if len(ring) < 3:
            return 0.0
        total = sum((a.x + b.x) * (b.y - a.y) for a, b in zip(ring, ring[1:]))
        return -total / 2.0

    @staticmethod
    def length(coords) -> float:
        return sum(a.distance(b) for a, b in zip(coords, coords[1:]))

    @staticmethod
    def distancePointPoint(p0, p1) -> float:
        return p0.distance(p1)

    @staticmethod
    def distancePointLine(p, A, B) -> float:
        """
         * Distance from p to the segment AB
        """
        if A == B:
            return p.distance(A)

        abx, aby = B.x - A.x, B.y - A.y
        apx, apy = p.x - A.x, p.y - A.y
        len2 = abx * abx + aby * aby

        # position of the projection of p along AB
        r = (apx * abx + apy * aby) / len2
        if r <= 0.0:
            return p.distance(A)
        if r >= 1.0:
            return p.distance(B)

        return abs(apx * aby - apy * abx) / sqrt(len2)

    @staticmethod
    def distancePointLinePerpendicular(p, A, B) -> float:
        """
         * Distance from p to the infinite line through A and B
        """
        abx, aby = B.x - A.x, B.y - A.y
        cross = (A.y - p.y) * abx - (A.x - p.x) * aby
        return abs(cross) / sqrt(abx * abx + aby * aby)

    @staticmethod
    def distanceLineLine(A, B, C, D) -> float:
        """
         * Distance between the segments AB and CD, zero when they meet.
         *
         * r and s locate the crossing of the supporting lines along
         * AB and CD, both in [0, 1] when the segments intersect.
         * Not robust for nearly parallel segments.
        """
        if A == B:
            return CGAlgorithms.distancePointLine(A, C, D)
        if C == D:
            return CGAlgorithms.distancePointLine(C, A, B)

        denom = (B.x - A.x) * (D.y - C.y) - (B.y - A.y) * (D.x - C.x)
        if denom != 0:
            r = ((A.y - C.y) * (D.x - C.x) - (A.x - C.x) * (D.y - C.y)) / denom
            s = ((A.y - C.y) * (B.x - A.x) - (A.x - C.x) * (B.y - A.y)) / denom
            if 0 <= r <= 1 and 0 <= s <= 1:
                return 0.0

        return min(
            CGAlgorithms.distancePointLine(A, C, D),
            CGAlgorithms.distancePointLine(B, C, D),
            CGAlgorithms.distancePointLine(C, A, B),
            CGAlgorithms.distancePointLine(D, A, B)
            )


class BoundaryNodeRule():
    """
     * Decides from the number of lineal endpoints meeting at a point
     * whether the point is in the boundary of the geometry.
     *
     *  Mod2 (OGC SFS): an odd count
     *  EndPoint: any count
     *  MultiValent: more than one
     *  MonoValent: exactly one
    """
    def __init__(self, name: str, predicate):
        self.name = name
        self._predicate = predicate

    def isInBoundary(self, boundaryCount: int) -> bool:
        return self._predicate(boundaryCount)

    def __str__(self) -> str:
        return self.name

    @staticmethod
    def getBoundaryRuleMod2():
        return MOD2_RULE

    @staticmethod
    def getBoundaryOGCSFS():
        return MOD2_RULE

    @staticmethod
    def getBoundaryEndPoint():
        return ENDPOINT_RULE

    @staticmethod
    def getBoundaryMultivalentEndPoint():
        return MULTIVALENT_RULE

    @staticmethod
    def getBoundaryMonovalentEndPoint():
        return MONOVALENT_RULE


MOD2_RULE = BoundaryNodeRule("Mod2", lambda count: count % 2 == 1)
ENDPOINT_RULE = BoundaryNodeRule("EndPoint", lambda count: count > 0)
MULTIVALENT_RULE = BoundaryNodeRule("MultiValent", lambda count: count > 1)
MONOVALENT_RULE = BoundaryNodeRule("MonoValent", lambda count: count == 1)


class PointLocator():
    """
     * Location of a point relative to a geometry.
     *
     * Collections count the components whose boundary holds the point
     * and ask the boundary node rule about the count.
     * A LinearRing outside of a polygon encloses nothing.
    """
    def __init__(self, boundaryRule=None):
        if boundaryRule is None:
            boundaryRule = BoundaryNodeRule.getBoundaryOGCSFS()
        self.boundaryRule = boundaryRule

    def locate(self, coord, geom) -> int:
        if geom.is_empty:
            return Location.EXTERIOR

        type_id = geom.type_id
        if GeomTypeId.isLineal(type_id):
            return self.locateInLineString(coord, geom)
        if type_id == GeomTypeId.GEOS_POLYGON:
            return self.locateInPolygon(coord, geom)

        isIn = False
        numBoundaries = 0
        for loc in self._componentLocations(coord, geom):
            if loc == Location.BOUNDARY:
                numBoundaries += 1
            elif loc == Location.INTERIOR:
                isIn = True

        if self.boundaryRule.isInBoundary(numBoundaries):
            return Location.BOUNDARY
        if numBoundaries > 0 or isIn:
            return Location.INTERIOR
        return Location.EXTERIOR

    def intersects(self, coord, geom) -> bool:
        return self.locate(coord, geom) != Location.EXTERIOR

    def _componentLocations(self, coord, geom):
        type_id = geom.type_id
        if geom.is_empty:
            return
        if type_id == GeomTypeId.GEOS_POINT:
            yield Location.INTERIOR if geom.coord == coord else Location.EXTERIOR
        elif GeomTypeId.isLineal(type_id):
            yield self.locateInLineString(coord, geom)
        elif type_id == GeomTypeId.GEOS_POLYGON:
            yield self.locateInPolygon(coord, geom)
        elif GeomTypeId.isCollection(type_id):
            for g in geom.geoms:
                yield from self._componentLocations(coord, g)
        else:
            raise ValueError("Unknown geometry type: {}".format(type_id))

    @staticmethod
    def locateInLineString(coord, geom) -> int:
        if not geom.envelope.intersects(coord):
            return Location.EXTERIOR
        coords = geom.coords
        if not geom.isClosed and (coord == coords[0] or coord == coords[-1]):
            return Location.BOUNDARY
        if CGAlgorithms.isOnLine(coord, coords):
            return Location.INTERIOR
        return Location.EXTERIOR

    @staticmethod
    def locateInRing(coord, ring) -> int:
        if not ring.envelope.intersects(coord):
            return Location.EXTERIOR
        return CGAlgorithms.locatePointInRing(coord, ring.coords)

    @staticmethod
    def locateInPolygon(coord, geom) -> int:
        if geom.is_empty:
            return Location.EXTERIOR

        loc = PointLocator.locateInRing(coord, geom.exterior)
        if loc != Location.INTERIOR:
            return loc

        for hole in geom.interiors:
            loc = PointLocator.locateInRing(coord, hole)
            if loc == Location.BOUNDARY:
                return Location.BOUNDARY
            if loc == Location.INTERIOR:
                return Location.EXTERIOR

        return Location.INTERIOR


class SimplePointInAreaLocator():
    """
     * INTERIOR when the point is in or on some polygon component,
     * lines and points do not count.
    """
    @staticmethod
    def locate(p, geom) -> int:
        if SimplePointInAreaLocator.containsPoint(p, geom):
            return Location.INTERIOR
        return Location.EXTERIOR

    @staticmethod
    def containsPoint(p, geom) -> bool:
        if geom.is_empty:
            return False
        type_id = geom.type_id
        if type_id == GeomTypeId.GEOS_POLYGON:
            return (CGAlgorithms.isPointInRing(p, geom.exterior.coords) and
                not any(CGAlgorithms.isPointInRing(p, hole.coords) for hole in geom.interiors))
        if type_id in (GeomTypeId.GEOS_MULTIPOLYGON, GeomTypeId.GEOS_GEOMETRYCOLLECTION):
            return any(SimplePointInAreaLocator.containsPoint(p, g) for g in geom.geoms)
        return False


class LineIntersector():
    """
     * Intersection of two segments, or of a point and a segment.
     *
     * intersections holds the intersection type, which is also the
     * number of points stored in intersectionPts.
     * Endpoints lying on the other segment are reported as is,
     * only proper crossings are computed, optionally rounded to the
     * PrecisionModel.
    """
    NO_INTERSECTION = 0
    POINT_INTERSECTION = 1
    COLLINEAR_INTERSECTION = 2

    def __init__(self, precisionModel=None):
        self.precisionModel = precisionModel
        self.intersections = LineIntersector.NO_INTERSECTION
        self.intersectionPts = [None, None]
        self._inputLines = [[None, None], [None, None]]
        self._isProper = False

    @property
    def hasIntersection(self) -> bool:
        return self.intersections != LineIntersector.NO_INTERSECTION

    @property
    def isProper(self) -> bool:
        """
         * A single intersection point, interior to both segments,
         * or interior to the segment for the point case.
        """
        return self.hasIntersection and self._isProper

    @property
    def isCollinear(self) -> bool:
        return self.intersections == LineIntersector.COLLINEAR_INTERSECTION

    @property
    def isEndpoint(self) -> bool:
        return self.hasIntersection and not self._isProper

    @property
    def isInteriorIntersection(self) -> bool:
        return self.isInteriorIntersectionIndex(0) or self.isInteriorIntersectionIndex(1)

    def isInteriorIntersectionIndex(self, inputLineIndex: int) -> bool:
        """
         * Whether some intersection point is not an endpoint of
         * the given input segment
        """
        ends = self._inputLines[inputLineIndex]
        return any(pt not in ends for pt in self.intersectionPts[:self.intersections])

    def getIntersection(self, intIndex: int):
        return self.intersectionPts[intIndex]

    def getEdgeDistance(self, segmentIndex: int, intIndex: int) -> float:
        p0, p1 = self._inputLines[segmentIndex]
        return LineIntersector.computeEdgeDistance(self.intersectionPts[intIndex], p0, p1)

    @staticmethod
    def computeEdgeDistance(p, p0, p1) -> float:
        """
         * Position of p, lying on the segment p0-p1, along the segment.
         *
         * Not a euclidean distance: the offset is measured along the
         * major axis of the segment, enough to order points on it.
         * Only points other than p0 have a non zero distance.
        """
        if p == p0:
            return 0.0

        dx = abs(p1.x - p0.x)
        dy = abs(p1.y - p0.y)
        if p == p1:
            return max(dx, dy)

        pdx = abs(p.x - p0.x)
        pdy = abs(p.y - p0.y)
        dist = pdx if dx > dy else pdy
        if dist == 0.0:
            dist = max(pdx, pdy)
        return dist

    @staticmethod
    def hasPointOnLineIntersection(p, p1, p2) -> bool:
        return (Envelope.static_intersects(p1, p2, p) and
            CGAlgorithms.orientationIndex(p1, p2, p) == 0)

    def computePointOnLineIntersection(self, p, p1, p2) -> None:
        self._inputLines = [[p1, p2], [p, p]]
        self._isProper = False
        if LineIntersector.hasPointOnLineIntersection(p, p1, p2):
            self._isProper = p != p1 and p != p2
            self.intersectionPts[0] = p
            self.intersections = LineIntersector.POINT_INTERSECTION
        else:
            self.intersections = LineIntersector.NO_INTERSECTION

    def computeLinesIntersection(self, p1, p2, q1, q2) -> int:
        """
         * Intersect the segments p1-p2 and q1-q2
         *
         * @return the intersection type
        """
        self._inputLines = [[p1, p2], [q1, q2]]
        self._isProper = False
        self.intersections = self._computeIntersect(p1, p2, q1, q2)
        return self.intersections

    def _computeIntersect(self, p1, p2, q1, q2) -> int:

        if not Envelope.static_intersects(p1, p2, q1, q2):
            return LineIntersector.NO_INTERSECTION

        # side of each endpoint relative to the other segment
        pq1 = CGAlgorithms.orientationIndex(p1, p2, q1)
        pq2 = CGAlgorithms.orientationIndex(p1, p2, q2)
        if pq1 * pq2 > 0:
            return LineIntersector.NO_INTERSECTION

        qp1 = CGAlgorithms.orientationIndex(q1, q2, p1)
        qp2 = CGAlgorithms.orientationIndex(q1, q2, p2)
        if qp1 * qp2 > 0:
            return LineIntersector.NO_INTERSECTION

        if pq1 == pq2 == qp1 == qp2 == 0:
            return self._computeCollinearIntersection(p1, p2, q1, q2)

        if 0 in (pq1, pq2, qp1, qp2):
            # an endpoint lies on the other segment, shared endpoints first
            if p1 == q1 or p1 == q2:
                pt = p1
            elif p2 == q1 or p2 == q2:
                pt = p2
            elif pq1 == 0:
                pt = q1
            elif pq2 == 0:
                pt = q2
            elif qp1 == 0:
                pt = p1
            else:
                pt = p2
        else:
            self._isProper = True
            pt = self._properIntersection(p1, p2, q1, q2)

        self.intersectionPts[0] = pt
        return LineIntersector.POINT_INTERSECTION

    def _computeCollinearIntersection(self, p1, p2, q1, q2) -> int:
        """
         * The overlap of collinear segments is bounded by the endpoints
         * of each segment lying within the other one.
        """
        found = []
        for pt, a, b in ((q1, p1, p2), (q2, p1, p2), (p1, q1, q2), (p2, q1, q2)):
            if Envelope.static_intersects(a, b, pt) and pt not in found:
                found.append(pt)

        for i, pt in enumerate(found[:2]):
            self.intersectionPts[i] = pt

        if len(found) == 0:
            return LineIntersector.NO_INTERSECTION
        if len(found) == 1:
            return LineIntersector.POINT_INTERSECTION
        return LineIntersector.COLLINEAR_INTERSECTION

    def _properIntersection(self, p1, p2, q1, q2):
        """
         * Crossing point of the segments, computed relative to the center
         * of the overlap of their envelopes to keep significant digits.
         * A point rounded out of both envelopes is replaced by the
         * endpoint nearest to the other segment.
        """
        midx = (max(min(p1.x, p2.x), min(q1.x, q2.x)) + min(max(p1.x, p2.x), max(q1.x, q2.x))) / 2.0
        midy = (max(min(p1.y, p2.y), min(q1.y, q2.y)) + min(max(p1.y, p2.y), max(q1.y, q2.y))) / 2.0

        def shifted(c):
            return Coordinate(c.x - midx, c.y - midy)

        try:
            pt = HCoordinate.intersection(shifted(p1), shifted(p2), shifted(q1), shifted(q2))
            pt = Coordinate(pt.x + midx, pt.y + midy)
        except ArithmeticError:
            pt = LineIntersector.nearestEndpoint(p1, p2, q1, q2)

        if not (Envelope(p1, p2).covers(pt) and Envelope(q1, q2).covers(pt)):
            logger.debug("LineIntersector intersection %s outside of segment envelopes, use nearest endpoint", pt)
            pt = LineIntersector.nearestEndpoint(p1, p2, q1, q2)

        pm = self.precisionModel
        if pm is not None and not pm.isFloating:
            pt = Coordinate(pm.makePrecise(pt.x), pm.makePrecise(pt.y))
        return pt

    @staticmethod
    def nearestEndpoint(p1, p2, q1, q2):
        """
         * The endpoint of either segment closest to the other segment,
         * a fair stand-in for the crossing of nearly parallel segments.
        """
        candidates = (
            (CGAlgorithms.distancePointLine(p1, q1, q2), 0, p1),
            (CGAlgorithms.distancePointLine(p2, q1, q2), 1, p2),
            (CGAlgorithms.distancePointLine(q1, p1, p2), 2, q1),
            (CGAlgorithms.distancePointLine(q2, p1, p2), 3, q2)
        )
        return min(candidates, key=lambda c: (c[0], c[1]))[2]

    def __str__(self) -> str:
        (p1, p2), (q1, q2) = self._inputLines
        return "p1:{}_p2:{} q1:{}_q2:{} : isEndpoint:{} isProper:{} isCollinear:{}".format(
            p1, p2, q1, q2,
            self.isEndpoint,
            self.isProper,
            self.isCollinear
            )
