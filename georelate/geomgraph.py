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
logger = logging.getLogger("georelate.geomgraph")
from collections import namedtuple, Counter
from .algorithms import (
    CGAlgorithms,
    BoundaryNodeRule
    )
from .noding import (
    SegmentIntersector,
    SegmentEnvelopeNoder
    )
from .shared import (
    GeomTypeId,
    TopologyException,
    Location,
    Position,
    Dimension,
    CoordinateSequence
    )


def refine(old: int, new: int) -> int:
    """
     * The one way a location is ever written: an unknown location
     * takes the new value, a known one is kept.
    """
    return new if old == Location.UNDEF else old


class Label():
    """
     * Locations of a graph component relative to both geometries.
     *
     * For each geometry the label holds [on] for a node or a line edge,
     * [on, left, right] for an area edge, indexed by Position.
    """
    def __init__(self, locs0=None, locs1=None):
        self._locs = [
            list(locs0) if locs0 else [Location.UNDEF],
            list(locs1) if locs1 else [Location.UNDEF]
            ]

    @staticmethod
    def forLine(geomIndex: int, on: int):
        label = Label()
        label._locs[geomIndex][Position.ON] = on
        return label

    @staticmethod
    def forArea(geomIndex: int, on: int, left: int, right: int):
        undef = [Location.UNDEF] * 3
        label = Label(undef, undef)
        label._locs[geomIndex] = [on, left, right]
        return label

    def copy(self):
        return Label(*self._locs)

    def flip(self) -> None:
        # reversed direction swaps the sides
        for locs in self._locs:
            if len(locs) == 3:
                locs[Position.LEFT], locs[Position.RIGHT] = locs[Position.RIGHT], locs[Position.LEFT]

    def refine(self, other) -> None:
        """
         * Fill the unknown locations from the other label,
         * a line label widens to an area one when the other is an area.
        """
        for locs, theirs in zip(self._locs, other._locs):
            if len(theirs) > len(locs):
                locs.extend([Location.UNDEF] * (len(theirs) - len(locs)))
            for posIndex, loc in enumerate(theirs):
                locs[posIndex] = refine(locs[posIndex], loc)

    def refineLocation(self, geomIndex: int, posIndex: int, location: int) -> None:
        locs = self._locs[geomIndex]
        if posIndex < len(locs):
            locs[posIndex] = refine(locs[posIndex], location)

    def refineAll(self, geomIndex: int, location: int) -> None:
        locs = self._locs[geomIndex]
        for posIndex, loc in enumerate(locs):
            locs[posIndex] = refine(loc, location)

    def getLocation(self, geomIndex: int, posIndex: int=Position.ON) -> int:
        locs = self._locs[geomIndex]
        return locs[posIndex] if posIndex < len(locs) else Location.UNDEF

    def isNull(self, geomIndex: int=None) -> bool:
        if geomIndex is None:
            return self.isNull(0) and self.isNull(1)
        return all(loc == Location.UNDEF for loc in self._locs[geomIndex])

    def isAnyNull(self, geomIndex: int) -> bool:
        return any(loc == Location.UNDEF for loc in self._locs[geomIndex])

    def isArea(self, geomIndex: int=None) -> bool:
        if geomIndex is None:
            return self.isArea(0) or self.isArea(1)
        return len(self._locs[geomIndex]) == 3

    def isLine(self, geomIndex: int) -> bool:
        return len(self._locs[geomIndex]) == 1

    @property
    def geometryCount(self) -> int:
        return sum(1 for i in range(2) if not self.isNull(i))

    def allPositionsEqual(self, geomIndex: int, location: int) -> bool:
        return all(loc == location for loc in self._locs[geomIndex])

    def __str__(self) -> str:
        parts = []
        for name, locs in zip("AB", self._locs):
            order = (Position.LEFT, Position.ON, Position.RIGHT) if len(locs) == 3 else (Position.ON, )
            parts.append("{}:{}".format(name, "".join(Location.toLocationSymbol(locs[i]) for i in order)))
        return " ".join(parts)


# a point where an edge is met, at dist along segment segmentIndex
EdgeIntersection = namedtuple('EdgeIntersection', 'coord segmentIndex dist')


class Edge():
    """
     * A chain of segments of an input geometry with the intersections
     * found on it, keyed by (segmentIndex, x, y).
    """
    def __init__(self, coords, label):
        self.coords = coords
        self.label = label
        # no intersection with the other geometry found so far
        self.isIsolated = True
        self._intersections = {}

    @property
    def isClosed(self) -> bool:
        return self.coords[0] == self.coords[-1]

    @property
    def numSegments(self) -> int:
        return len(self.coords) - 1

    def addIntersections(self, li, segmentIndex: int, inputIndex: int) -> None:
        """
         * Record the points found by li on segment segmentIndex,
         * inputIndex tells which input segment of li this edge was.
         * A point on the end vertex of the segment moves to the next one.
        """
        for i in range(li.intersections):
            pt = li.getIntersection(i)
            segIndex = segmentIndex
            dist = li.getEdgeDistance(inputIndex, i)
            if segIndex + 1 < len(self.coords) and pt == self.coords[segIndex + 1]:
                segIndex += 1
                dist = 0.0
            self._addIntersection(pt, segIndex, dist, self._intersections)

    @staticmethod
    def _addIntersection(pt, segIndex: int, dist: float, intersections: dict) -> None:
        key = (segIndex, pt.x, pt.y)
        if key not in intersections:
            intersections[key] = EdgeIntersection(pt, segIndex, dist)

    @property
    def intersections(self) -> list:
        return sorted(self._intersections.values(), key=lambda ei: (ei.segmentIndex, ei.dist))

    def nodePoints(self) -> list:
        """
         * Intersections along the edge, both endpoints included.
        """
        points = dict(self._intersections)
        last = len(self.coords) - 1
        self._addIntersection(self.coords[0], 0, 0.0, points)
        self._addIntersection(self.coords[last], last, 0.0, points)
        return sorted(points.values(), key=lambda ei: (ei.segmentIndex, ei.dist))

    def splitEdges(self) -> list:
        """
         * The pieces between consecutive node points, same label.
        """
        points = self.nodePoints()
        return [self._createSplitEdge(ei0, ei1) for ei0, ei1 in zip(points, points[1:])]

    def _createSplitEdge(self, ei0, ei1):
        end = ei1.segmentIndex + 1
        # distances are not exact, compare with the segment start too
        if ei1.dist == 0.0 and ei1.coord == self.coords[ei1.segmentIndex]:
            end -= 1
        pts = [ei0.coord] + self.coords[ei0.segmentIndex + 1:end] + [ei1.coord]
        return Edge(CoordinateSequence.removeRepeatedPoints(pts), self.label.copy())

    def __str__(self) -> str:
        return "Edge label:{} coords:{}".format(self.label, self.coords)


class Node():
    def __init__(self, coord, label=None):
        self.coord = coord
        self.label = Label() if label is None else label

    @property
    def isIsolated(self) -> bool:
        # known for a single geometry only
        return self.label.geometryCount == 1

    def __str__(self):
        return "Node {} label:{}".format(self.coord, self.label)


class EdgeIntersector(SegmentIntersector):
    """
     * Intersects candidate pairs of edge segments handed over by a noder,
     * records the points on both edges and keeps track of the kinds
     * of intersections met.
     *
     * includeProper: record proper crossings on the edges too
     * recordIsolated: intersecting edges lose their isolated flag
     * boundaryCoords: (x, y) of the boundary nodes, a proper crossing
     *  elsewhere is a proper interior one
     * testSameEdge: test pairs of segments of the same edge
    """
    def __init__(self, li, includeProper: bool, recordIsolated: bool,
            boundaryCoords=None, testSameEdge: bool=True):
        self.li = li
        self.includeProper = includeProper
        self.recordIsolated = recordIsolated
        self.boundaryCoords = set() if boundaryCoords is None else boundaryCoords
        self.testSameEdge = testSameEdge

        self.hasIntersection = False
        self.hasProperIntersection = False
        self.hasProperInteriorIntersection = False
        self.properIntersectionPoint = None

        self.numTests = 0
        self.numIntersections = 0
        self.numProperIntersections = 0

    def isTrivialIntersection(self, e0, segIndex0: int, e1, segIndex1: int) -> bool:
        """
         * The single point shared by consecutive segments of an edge,
         * or by the last and first segments of a closed edge.
        """
        if e0 is not e1 or self.li.intersections != 1:
            return False
        if abs(segIndex0 - segIndex1) == 1:
            return True
        if e0.isClosed:
            last = e0.numSegments - 1
            return {segIndex0, segIndex1} == {0, last}
        return False

    def processIntersections(self, e0, segIndex0: int, e1, segIndex1: int) -> None:
        if e0 is e1 and (segIndex0 == segIndex1 or not self.testSameEdge):
            return

        self.numTests += 1
        li = self.li
        li.computeLinesIntersection(
            e0.coords[segIndex0], e0.coords[segIndex0 + 1],
            e1.coords[segIndex1], e1.coords[segIndex1 + 1])

        if not li.hasIntersection:
            return

        if self.recordIsolated:
            e0.isIsolated = False
            e1.isIsolated = False

        self.numIntersections += 1

        if self.isTrivialIntersection(e0, segIndex0, e1, segIndex1):
            return

        self.hasIntersection = True

        if self.includeProper or not li.isProper:
            e0.addIntersections(li, segIndex0, 0)
            e1.addIntersections(li, segIndex1, 1)

        if li.isProper:
            pt = li.getIntersection(0)
            self.properIntersectionPoint = pt
            self.hasProperIntersection = True
            self.numProperIntersections += 1
            if (pt.x, pt.y) not in self.boundaryCoords:
                self.hasProperInteriorIntersection = True


class GeometryGraph():
    """
     * The edges and nodes of one input geometry.
     *
     * edges and nodes are arenas, nodes are found by (x, y).
     * Node locations are claimed after the whole geometry is read,
     * in this order: ring start points, line endpoints through the
     * boundary node rule, then points. The first known location wins.
    """
    def __init__(self, geomIndex: int=-1, geom=None, boundaryNodeRule=None):
        self.geomIndex = geomIndex
        self.geom = geom
        if boundaryNodeRule is None:
            boundaryNodeRule = BoundaryNodeRule.getBoundaryOGCSFS()
        self.boundaryNodeRule = boundaryNodeRule

        self.edges = []
        self.nodes = []
        self._nodeIndex = {}

        if geom is not None:
            self._build(geom)

    def addNode(self, coord) -> int:
        key = (coord.x, coord.y)
        index = self._nodeIndex.get(key)
        if index is None:
            index = len(self.nodes)
            self._nodeIndex[key] = index
            self.nodes.append(Node(coord))
        return index

    def find(self, coord):
        index = self._nodeIndex.get((coord.x, coord.y))
        return None if index is None else self.nodes[index]

    def claimNode(self, coord, loc: int) -> None:
        node = self.nodes[self.addNode(coord)]
        node.label.refineLocation(self.geomIndex, Position.ON, loc)

    @staticmethod
    def components(geom):
        """
         * The non empty atomic parts of geom
        """
        if geom.is_empty:
            return
        if GeomTypeId.isCollection(geom.type_id):
            for g in geom.geoms:
                yield from GeometryGraph.components(g)
        else:
            yield geom

    def _build(self, geom) -> None:
        ringStarts = []
        endpoints = Counter()
        points = []

        for g in self.components(geom):
            type_id = g.type_id

            if type_id == GeomTypeId.GEOS_POINT:
                points.append(g.coord)

            elif GeomTypeId.isLineal(type_id):
                coords = CoordinateSequence.removeRepeatedPoints(g.coords)
                if len(coords) < 2:
                    points.append(coords[0])
                    continue
                self.edges.append(Edge(coords, Label.forLine(self.geomIndex, Location.INTERIOR)))
                endpoints[coords[0]] += 1
                endpoints[coords[-1]] += 1

            elif type_id == GeomTypeId.GEOS_POLYGON:
                self._addRing(g.exterior, Location.EXTERIOR, Location.INTERIOR, ringStarts)
                for hole in g.interiors:
                    # the polygon lies on the other side of a hole
                    self._addRing(hole, Location.INTERIOR, Location.EXTERIOR, ringStarts)

            else:
                raise ValueError("GeometryGraph: unknown geometry type:{}".format(type_id))

        for coord in ringStarts:
            self.claimNode(coord, Location.BOUNDARY)
        for coord, count in endpoints.items():
            self.claimNode(coord, GeometryGraph.determineBoundary(count, self.boundaryNodeRule))
        for coord in points:
            self.claimNode(coord, Location.INTERIOR)

        logger.debug("GeometryGraph[%s] %s edges:%s nodes:%s",
            self.geomIndex,
            geom.geom_type,
            len(self.edges),
            len(self.nodes))

    def _addRing(self, ring, cwLeft: int, cwRight: int, ringStarts: list) -> None:
        if ring.is_empty:
            return
        coords = CoordinateSequence.removeRepeatedPoints(ring.coords)
        if len(coords) < 4:
            raise TopologyException("too few points in polygon ring", coords[0])

        left, right = cwLeft, cwRight
        if CGAlgorithms.isCCW(coords):
            left, right = cwRight, cwLeft

        self.edges.append(Edge(coords, Label.forArea(self.geomIndex, Location.BOUNDARY, left, right)))
        ringStarts.append(coords[0])

    @staticmethod
    def determineBoundary(boundaryCount: int, boundaryNodeRule=None) -> int:
        """
         * Location of a point met boundaryCount times as a lineal endpoint,
         * Mod-2 rule by default.
        """
        if boundaryNodeRule is None:
            boundaryNodeRule = BoundaryNodeRule.getBoundaryOGCSFS()
        if boundaryNodeRule.isInBoundary(boundaryCount):
            return Location.BOUNDARY
        return Location.INTERIOR

    @property
    def boundaryNodes(self) -> list:
        return [node for node in self.nodes
            if node.label.getLocation(self.geomIndex) == Location.BOUNDARY]

    @property
    def boundaryDimension(self) -> int:
        """
         * Dimension of the boundary under the boundary node rule of this graph
        """
        if any(edge.label.isArea(self.geomIndex) for edge in self.edges):
            return Dimension.L
        if self.boundaryNodes:
            return Dimension.P
        return Dimension.FALSE

    @property
    def isRingGeometry(self) -> bool:
        return self.geom.type_id in (
            GeomTypeId.GEOS_LINEARRING,
            GeomTypeId.GEOS_POLYGON,
            GeomTypeId.GEOS_MULTIPOLYGON)

    def computeSelfNodes(self, li):
        """
         * Node the edges of this graph against each other.
         * Segments of a same ring are not tested, rings are taken as simple.
         *
         * @return the EdgeIntersector holding the intersections found
        """
        si = EdgeIntersector(li, True, False, testSameEdge=not self.isRingGeometry)
        SegmentEnvelopeNoder(si).computeNodes(self.edges)

        for edge in self.edges:
            loc = edge.label.getLocation(self.geomIndex)
            for ei in edge.intersections:
                self.claimNode(ei.coord, loc)

        logger.debug("GeometryGraph[%s].computeSelfNodes() tests:%s intersections:%s nodes:%s",
            self.geomIndex,
            si.numTests,
            si.numIntersections,
            len(self.nodes))
        return si

    def computeEdgeIntersections(self, other, li):
        """
         * Intersect the edges of this graph with the ones of other,
         * proper crossings are flagged but not recorded on the edges.
         *
         * @return the EdgeIntersector holding the proper intersection flags
        """
        boundaryCoords = {(node.coord.x, node.coord.y)
            for node in self.boundaryNodes + other.boundaryNodes}
        si = EdgeIntersector(li, False, True, boundaryCoords)
        SegmentEnvelopeNoder(si).computeIntersections(self.edges, other.edges)

        logger.debug("GeometryGraph[%s].computeEdgeIntersections() tests:%s intersections:%s proper:%s",
            self.geomIndex,
            si.numTests,
            si.numIntersections,
            si.numProperIntersections)
        return si

    def computeSplitEdges(self) -> list:
        splitEdges = []
        for edge in self.edges:
            splitEdges.extend(edge.splitEdges())
        logger.debug("GeometryGraph[%s].computeSplitEdges() %s edges split into %s",
            self.geomIndex,
            len(self.edges),
            len(splitEdges))
        return splitEdges
