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


from collections import Counter
from .shared import (
    logger,
    GeomTypeId,
    Dimension,
    Envelope,
    PrecisionModel,
    Coordinate,
    CoordinateSequence
    )
from .algorithms import CGAlgorithms
from .op_relate import RelateOp


class Geometry():
    """
     * The geometry model consumed by the relate engine:
     * immutable, built by a GeometryFactory, tagged by type_id.
     *
     * Spatial predicates are read from the DE-9IM matrix, after
     * an early answer from the envelopes where they decide.
    """
    type_id = -1
    dimension = Dimension.FALSE
    boundaryDimension = Dimension.FALSE

    def __init__(self, factory):
        self.factory = factory
        self._env = None

    @property
    def geom_type(self) -> str:
        return GeomTypeId.names[self.type_id]

    @property
    def numgeoms(self) -> int:
        return 1

    @property
    def numpoints(self) -> int:
        return len(self.coords)

    @property
    def coords(self):
        return CoordinateSequence()

    @property
    def is_empty(self) -> bool:
        return self.numpoints == 0

    @property
    def envelope(self):
        if self._env is None:
            self._env = self.computeEnvelope()
        return self._env

    def computeEnvelope(self):
        return Envelope(*self.coords)

    @staticmethod
    def _checkCoordinates(coords) -> None:
        for coord in coords:
            if not coord.isValid:
                raise ValueError("coordinate ordinates must be finite: {}".format(coord))

    def relate(self, other, intersectionPattern: str=None):
        """
         * The DE-9IM matrix of this geometry against other,
         * or whether it matches intersectionPattern when given.
        """
        im = RelateOp.relate(self, other)
        if intersectionPattern is None:
            return im
        logger.debug("%s.relate() %s pattern:%s", self.geom_type, im, intersectionPattern)
        return im.matches(intersectionPattern)

    def disjoint(self, other) -> bool:
        return not self.intersects(other)

    def intersects(self, other) -> bool:
        return (self.envelope.intersects(other.envelope) and
            self.relate(other).isIntersects)

    def touches(self, other) -> bool:
        return (self.envelope.intersects(other.envelope) and
            self.relate(other).isTouches(self.dimension, other.dimension))

    def crosses(self, other) -> bool:
        return (self.envelope.intersects(other.envelope) and
            self.relate(other).isCrosses(self.dimension, other.dimension))

    def overlaps(self, other) -> bool:
        return (self.envelope.intersects(other.envelope) and
            self.relate(other).isOverlaps(self.dimension, other.dimension))

    def contains(self, other) -> bool:
        return (self.envelope.covers(other.envelope) and
            self.relate(other).isContains)

    def covers(self, other) -> bool:
        return (self.envelope.covers(other.envelope) and
            self.relate(other).isCovers)

    def within(self, other) -> bool:
        return other.contains(self)

    def coveredBy(self, other) -> bool:
        return other.covers(self)

    def equals(self, other) -> bool:
        # two empty geometries are equal whatever their type
        if self.is_empty or other.is_empty:
            return self.is_empty and other.is_empty
        return (self.envelope == other.envelope and
            self.relate(other).isEquals(self.dimension, other.dimension))

    def __str__(self) -> str:
        return "{} {}".format(self.geom_type, self.coords)


class Point(Geometry):
    """
     * A single coordinate, or nothing when empty
    """
    type_id = GeomTypeId.GEOS_POINT
    dimension = Dimension.P

    def __init__(self, coord, factory):
        Geometry.__init__(self, factory)
        if coord is not None:
            self._checkCoordinates([coord])
        self.coord = coord

    @property
    def coords(self):
        return CoordinateSequence([] if self.coord is None else [self.coord])


class LineString(Geometry):
    """
     * A curve through 0 or at least 2 vertices.
     * Repeated vertices are kept as given.
    """
    type_id = GeomTypeId.GEOS_LINESTRING
    dimension = Dimension.L

    def __init__(self, coords, factory):
        Geometry.__init__(self, factory)
        self._coords = CoordinateSequence(coords or [])
        self._checkCoordinates(self._coords)
        self.validateConstruction()

    def validateConstruction(self) -> None:
        if self.numpoints == 1:
            raise ValueError("point array must contain 0 or >1 elements")

    @property
    def coords(self):
        return self._coords

    @property
    def coord(self):
        return self._coords[0] if self._coords else None

    @property
    def isClosed(self) -> bool:
        return len(self._coords) > 0 and self._coords[0] == self._coords[-1]

    @property
    def boundaryDimension(self) -> int:
        return Dimension.FALSE if self.isClosed else Dimension.P

    @property
    def length(self) -> float:
        return CGAlgorithms.length(self._coords)


class LinearRing(LineString):
    """
     * A closed LineString of 0 or at least 4 vertices, in either orientation.
    """
    type_id = GeomTypeId.GEOS_LINEARRING

    def validateConstruction(self) -> None:
        n = self.numpoints
        if 0 < n < 4:
            raise ValueError("point array must contain 0 or >3 elements")
        if n > 0 and self._coords[0] != self._coords[-1]:
            raise ValueError("first and last points must be equal")

    @property
    def isClosed(self) -> bool:
        return True

    @property
    def boundaryDimension(self) -> int:
        return Dimension.FALSE

    @property
    def is_ccw(self) -> bool:
        return CGAlgorithms.isCCW(self._coords)


class Polygon(Geometry):
    """
     * A surface bounded by an exterior LinearRing, minus the holes
     * bounded by the interiors rings.
     * Ring orientation is free, holes may touch the exterior at points.
    """
    type_id = GeomTypeId.GEOS_POLYGON
    dimension = Dimension.A
    boundaryDimension = Dimension.L

    def __init__(self, exterior, interiors, factory):
        Geometry.__init__(self, factory)
        interiors = list(interiors or [])
        if exterior is None:
            exterior = LinearRing(None, factory)

        if exterior.type_id != GeomTypeId.GEOS_LINEARRING:
            raise ValueError("exterior must be a LinearRing")
        for hole in interiors:
            if hole is None:
                raise ValueError("interiors must not contain null elements")
            if hole.type_id != GeomTypeId.GEOS_LINEARRING:
                raise ValueError("interiors must be LinearRings")
        if exterior.is_empty and any(not hole.is_empty for hole in interiors):
            raise ValueError("exterior is empty but interiors are not")

        self.exterior = exterior
        self.interiors = interiors

    @property
    def rings(self):
        return [self.exterior] + self.interiors

    @property
    def coords(self):
        coords = CoordinateSequence()
        for ring in self.rings:
            coords.extend(ring.coords)
        return coords

    @property
    def coord(self):
        return self.exterior.coord

    @property
    def is_empty(self) -> bool:
        return self.exterior.is_empty

    def computeEnvelope(self):
        return Envelope(self.exterior.envelope)

    @property
    def area(self) -> float:
        return abs(CGAlgorithms.signedArea(self.exterior.coords)) - sum(
            abs(CGAlgorithms.signedArea(hole.coords)) for hole in self.interiors)


class GeometryCollection(Geometry):
    """
     * Heterogeneous components, the Multi* subclasses restrict
     * their kind.
    """
    type_id = GeomTypeId.GEOS_GEOMETRYCOLLECTION
    # allowed component type ids, None for any
    componentTypes = None

    def __init__(self, geoms=None, factory=None):
        Geometry.__init__(self, factory)
        geoms = list(geoms or [])
        for geom in geoms:
            if geom is None:
                raise ValueError("collections must not contain null elements")
            if self.componentTypes is not None and geom.type_id not in self.componentTypes:
                raise ValueError("{} components must be {}".format(
                    self.geom_type,
                    GeomTypeId.names[self.componentTypes[0]]))
        self.geoms = geoms

    @property
    def numgeoms(self) -> int:
        return len(self.geoms)

    def getGeometryN(self, index: int):
        return self.geoms[index]

    @property
    def dimension(self) -> int:
        return max((geom.dimension for geom in self.geoms), default=Dimension.FALSE)

    @property
    def boundaryDimension(self) -> int:
        return max((geom.boundaryDimension for geom in self.geoms), default=Dimension.FALSE)

    @property
    def coords(self):
        coords = CoordinateSequence()
        for geom in self.geoms:
            coords.extend(geom.coords)
        return coords

    @property
    def is_empty(self) -> bool:
        return all(geom.is_empty for geom in self.geoms)

    def computeEnvelope(self):
        return Envelope(*(geom.envelope for geom in self.geoms))


class MultiPoint(GeometryCollection):
    type_id = GeomTypeId.GEOS_MULTIPOINT
    componentTypes = (GeomTypeId.GEOS_POINT, )

    @property
    def dimension(self) -> int:
        return Dimension.P

    @property
    def boundaryDimension(self) -> int:
        return Dimension.FALSE


class MultiLineString(GeometryCollection):
    type_id = GeomTypeId.GEOS_MULTILINESTRING
    componentTypes = (GeomTypeId.GEOS_LINESTRING, GeomTypeId.GEOS_LINEARRING)

    @property
    def dimension(self) -> int:
        return Dimension.L

    @property
    def boundaryDimension(self) -> int:
        """
         * Under the Mod-2 rule an endpoint shared by an even number
         * of component ends is interior, the boundary may be empty
         * although no component is closed.
        """
        ends = Counter()
        for geom in self.geoms:
            if not geom.is_empty and not geom.isClosed:
                ends[geom.coords[0]] += 1
                ends[geom.coords[-1]] += 1
        if any(count % 2 == 1 for count in ends.values()):
            return Dimension.P
        return Dimension.FALSE

    @property
    def isClosed(self) -> bool:
        return all(geom.isClosed for geom in self.geoms)


class MultiPolygon(GeometryCollection):
    type_id = GeomTypeId.GEOS_MULTIPOLYGON
    componentTypes = (GeomTypeId.GEOS_POLYGON, )

    @property
    def dimension(self) -> int:
        return Dimension.A

    @property
    def boundaryDimension(self) -> int:
        return Dimension.L


class GeometryFactory():
    """
     * Builds geometries from Coordinates or (x, y) sequences.
     * Input coordinates are not rounded to the PrecisionModel.
    """
    def __init__(self, precisionModel=None):
        self.precisionModel = PrecisionModel() if precisionModel is None else precisionModel

    def createCoordinate(self, co):
        if isinstance(co, Coordinate):
            return co
        if hasattr(co, 'x'):
            return Coordinate(float(co.x), float(co.y))
        return Coordinate(float(co[0]), float(co[1]))

    def _createCoordinates(self, coords) -> list:
        return [self.createCoordinate(co) for co in coords or []]

    def _asGeometry(self, item, create):
        if item is None or isinstance(item, Geometry):
            return item
        return create(item)

    def createPoint(self, coord=None):
        return Point(None if coord is None else self.createCoordinate(coord), self)

    def createLineString(self, fromCoords=None):
        return LineString(self._createCoordinates(fromCoords), self)

    def createLinearRing(self, fromCoords=None):
        return LinearRing(self._createCoordinates(fromCoords), self)

    def createPolygon(self, exterior=None, interiors=None):
        """
         * exterior and interiors are LinearRings or coordinate sequences
        """
        interiors = [self._asGeometry(hole, self.createLinearRing) for hole in interiors or []]
        if exterior is None and interiors:
            raise ValueError("interiors supplied without an exterior")
        return Polygon(self._asGeometry(exterior, self.createLinearRing), interiors, self)

    def createMultiPoint(self, newPoints=None):
        return MultiPoint([self._asGeometry(p, self.createPoint) for p in newPoints or []], self)

    def createMultiLineString(self, fromLines=None):
        return MultiLineString([self._asGeometry(l, self.createLineString) for l in fromLines or []], self)

    def createMultiPolygon(self, newPolys=None):
        return MultiPolygon(newPolys, self)

    def createGeometryCollection(self, newGeoms=None):
        return GeometryCollection(newGeoms, self)
