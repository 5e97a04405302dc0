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
logger = logging.getLogger("georelate.op_relate")
from collections import namedtuple, Counter
from functools import cmp_to_key
from .algorithms import (
    CGAlgorithms,
    LineIntersector,
    PointLocator,
    SimplePointInAreaLocator,
    BoundaryNodeRule
    )
from .geomgraph import (
    GeometryGraph,
    Node,
    Label
    )
from .noding import EdgeNodingValidator
from .shared import (
    TopologyException,
    Dimension,
    Position,
    Location,
    Quadrant,
    IntersectionMatrix
    )


class EdgeEnd(namedtuple('EdgeEnd', 'geomIndex edgeIndex p0 p1 dx dy quadrant label')):
    """
     * The start of an edge piece leaving a node at p0 toward p1.
     * edgeIndex is the index of the parent edge in the graph of geomIndex.
    """
    __slots__ = ()

    @staticmethod
    def create(geomIndex: int, edgeIndex: int, p0, p1, label):
        dx, dy = p1.x - p0.x, p1.y - p0.y
        return EdgeEnd(geomIndex, edgeIndex, p0, p1, dx, dy, Quadrant.quadrant(dx, dy), label)

    def __str__(self) -> str:
        return "EdgeEnd: {} {} {}-{}".format(self.quadrant, self.label, self.p0, self.p1)


def compareDirection(e0, e1) -> int:
    """
     * Order of edge ends by angle with the positive x axis:
     * the quadrant first, the orientation of the directions within a quadrant.
    """
    if e0.dx == e1.dx and e0.dy == e1.dy:
        return 0
    if e0.quadrant != e1.quadrant:
        return 1 if e0.quadrant > e1.quadrant else -1
    # e0 is greater when counter-clockwise of e1
    return CGAlgorithms.orientationIndex(e1.p0, e1.p1, e0.p1)


def edgeStubs(edge):
    """
     * Yield (p0, p1, isForward) for the pieces of edge leaving each
     * of its node points, backward pieces first.
    """
    coords = edge.coords
    points = edge.nodePoints()
    for i, ei in enumerate(points):
        eiPrev = points[i - 1] if i > 0 else None
        eiNext = points[i + 1] if i + 1 < len(points) else None

        iPrev = ei.segmentIndex if ei.dist > 0.0 else ei.segmentIndex - 1
        if iPrev >= 0:
            pPrev = coords[iPrev]
            if eiPrev is not None and eiPrev.segmentIndex >= iPrev:
                pPrev = eiPrev.coord
            yield ei.coord, pPrev, False

        iNext = ei.segmentIndex + 1
        if iNext < len(coords):
            pNext = coords[iNext]
            if eiNext is not None and eiNext.segmentIndex == ei.segmentIndex:
                pNext = eiNext.coord
            yield ei.coord, pNext, True


class EdgeEndBundle():
    """
     * The edge ends of a node sharing one direction, by index in the
     * edge end arena, and their summary label.
    """
    __slots__ = ('ends', 'label')

    def __init__(self, endIndex: int):
        self.ends = [endIndex]
        self.label = None

    def computeLabel(self, edgeEnds: list, boundaryNodeRule) -> None:
        """
         * ON: BOUNDARY when the rule accepts the count of boundary ends,
         * else INTERIOR when any end is in the interior or on a boundary.
         * Sides: INTERIOR wins over EXTERIOR among the area ends.
        """
        ends = [edgeEnds[i] for i in self.ends]
        areaLabels = [e.label for e in ends if e.label.isArea()]
        if areaLabels:
            undef = [Location.UNDEF] * 3
            self.label = Label(undef, undef)
        else:
            self.label = Label()

        for i in range(2):
            locs = [e.label.getLocation(i) for e in ends]
            boundaryCount = locs.count(Location.BOUNDARY)
            if boundaryCount > 0:
                on = GeometryGraph.determineBoundary(boundaryCount, boundaryNodeRule)
            elif Location.INTERIOR in locs:
                on = Location.INTERIOR
            else:
                on = Location.UNDEF
            self.label.refineLocation(i, Position.ON, on)

            for side in (Position.LEFT, Position.RIGHT):
                sides = [label.getLocation(i, side) for label in areaLabels]
                for loc in (Location.INTERIOR, Location.EXTERIOR):
                    if loc in sides:
                        self.label.refineLocation(i, side, loc)

    def updateIM(self, im) -> None:
        updateIMFromLabel(self.label, im)


def updateIMFromLabel(label, im) -> None:
    """
     * A curve between the ON locations, surfaces between the side
     * locations of an area label
    """
    im.setAtLeastIfValid(label.getLocation(0), label.getLocation(1), Dimension.L)
    if label.isArea():
        for side in (Position.LEFT, Position.RIGHT):
            im.setAtLeastIfValid(label.getLocation(0, side), label.getLocation(1, side), Dimension.A)


class RelateNode(Node):
    """
     * A node of the relate graph with its star of bundles,
     * sorted counter-clockwise from the positive x axis once built.
    """
    def __init__(self, coord):
        Node.__init__(self, coord)
        self.star = []

    def insert(self, edgeEnds: list, endIndex: int) -> None:
        edgeEnd = edgeEnds[endIndex]
        for bundle in self.star:
            if compareDirection(edgeEnds[bundle.ends[0]], edgeEnd) == 0:
                bundle.ends.append(endIndex)
                return
        self.star.append(EdgeEndBundle(endIndex))

    def sortStar(self, edgeEnds: list) -> None:
        self.star.sort(key=cmp_to_key(
            lambda b0, b1: compareDirection(edgeEnds[b0.ends[0]], edgeEnds[b1.ends[0]])))

    def computeLabelling(self, edgeEnds: list, graphs) -> None:
        for bundle in self.star:
            bundle.computeLabel(edgeEnds, graphs[0].boundaryNodeRule)

        # can raise a TopologyException
        self.propagateSideLabels(0)
        self.propagateSideLabels(1)

        # unknown locations remain for a geometry with no area edge here:
        # the whole neighbourhood is inside or outside its area
        for i in range(2):
            collapsed = any(bundle.label.isLine(i) and
                bundle.label.getLocation(i) == Location.BOUNDARY for bundle in self.star)
            loc = None
            for bundle in self.star:
                if bundle.label.isAnyNull(i):
                    if loc is None:
                        loc = Location.EXTERIOR if collapsed else \
                            SimplePointInAreaLocator.locate(self.coord, graphs[i].geom)
                    bundle.label.refineAll(i, loc)

    def propagateSideLabels(self, geomIndex: int) -> None:
        """
         * Walk the star counter-clockwise carrying the location between
         * edges, from the right side to the left side of each area edge.
        """
        currLoc = Location.UNDEF
        for bundle in self.star:
            label = bundle.label
            if label.isArea(geomIndex) and label.getLocation(geomIndex, Position.LEFT) != Location.UNDEF:
                currLoc = label.getLocation(geomIndex, Position.LEFT)

        if currLoc == Location.UNDEF:
            return

        for bundle in self.star:
            label = bundle.label
            label.refineLocation(geomIndex, Position.ON, currLoc)
            if not label.isArea(geomIndex):
                continue

            leftLoc = label.getLocation(geomIndex, Position.LEFT)
            rightLoc = label.getLocation(geomIndex, Position.RIGHT)

            if rightLoc == Location.UNDEF:
                # an edge of the other geometry, inside or outside as a whole
                assert leftLoc == Location.UNDEF, "found single null side"
                label.refineLocation(geomIndex, Position.LEFT, currLoc)
                label.refineLocation(geomIndex, Position.RIGHT, currLoc)
                continue

            if rightLoc != currLoc:
                raise TopologyException(
                    "side location conflict left:{} right:{} != current:{}".format(
                        Location.toLocationSymbol(leftLoc),
                        Location.toLocationSymbol(rightLoc),
                        Location.toLocationSymbol(currLoc)),
                    self.coord
                    )
            assert leftLoc != Location.UNDEF, "found single null side"
            currLoc = leftLoc

    def updateIM(self, im) -> None:
        im.setAtLeastIfValid(self.label.getLocation(0), self.label.getLocation(1), Dimension.P)
        for bundle in self.star:
            bundle.updateIM(im)


class RelateNodeGraph():
    """
     * The nodes where the geometries meet and the edge ends around them.
     *
     * Crossings in the interior of segments are not nodes, the proper
     * intersection flags account for them.
     * nodes and edgeEnds are arenas, nodes are found by (x, y).
    """
    def __init__(self):
        self.nodes = []
        self.edgeEnds = []
        self._nodeIndex = {}

    def addNode(self, coord):
        key = (coord.x, coord.y)
        index = self._nodeIndex.get(key)
        if index is None:
            index = len(self.nodes)
            self._nodeIndex[key] = index
            self.nodes.append(RelateNode(coord))
        return self.nodes[index]

    def find(self, coord):
        index = self._nodeIndex.get((coord.x, coord.y))
        return None if index is None else self.nodes[index]

    def copyNodesAndLabels(self, geomGraph, geomIndex: int) -> None:
        """
         * Nodes of the input graph come first, their location
         * in their own geometry is final.
        """
        for node in geomGraph.nodes:
            self.addNode(node.coord).label.refineLocation(
                geomIndex, Position.ON, node.label.getLocation(geomIndex))

    def computeIntersectionNodes(self, geomGraph, geomIndex: int) -> None:
        """
         * A node for every intersection recorded on the edges.
         * Each time a point is met on a boundary edge it toggles between
         * BOUNDARY and INTERIOR, points met on line edges only are INTERIOR.
        """
        boundaryHits = Counter()
        coords = {}
        for edge in geomGraph.edges:
            onBoundary = edge.label.getLocation(geomIndex) == Location.BOUNDARY
            for ei in edge.intersections:
                key = (ei.coord.x, ei.coord.y)
                coords.setdefault(key, ei.coord)
                if onBoundary:
                    boundaryHits[key] += 1

        for key, coord in coords.items():
            hits = boundaryHits[key]
            loc = Location.BOUNDARY if hits % 2 == 1 else Location.INTERIOR
            self.addNode(coord).label.refineLocation(geomIndex, Position.ON, loc)

    def insertEdgeEnds(self, geomGraph, geomIndex: int) -> None:
        for edgeIndex, edge in enumerate(geomGraph.edges):
            for p0, p1, isForward in edgeStubs(edge):
                label = edge.label.copy()
                if not isForward:
                    label.flip()
                endIndex = len(self.edgeEnds)
                self.edgeEnds.append(EdgeEnd.create(geomIndex, edgeIndex, p0, p1, label))
                self.addNode(p0).insert(self.edgeEnds, endIndex)

    def __len__(self):
        return len(self.nodes)


class RelateComputer():
    """
     * Computes the IntersectionMatrix of the geometries of two graphs
     * from the labels of the edges around each node.
     *
     * Overlapping polygons of a GeometryCollection are not merged first,
     * their result is not defined.
    """
    def __init__(self, graphs, validateNoding: bool=True):
        self.arg = graphs
        self.validateNoding = validateNoding
        self.li = LineIntersector()
        self.ptLocator = PointLocator(graphs[0].boundaryNodeRule)
        self.nodeGraph = RelateNodeGraph()
        self.im = IntersectionMatrix()
        self.isolatedEdges = []

    @property
    def nodes(self) -> list:
        return self.nodeGraph.nodes

    def computeIM(self):
        # both geometries are bounded
        self.im.set(Location.EXTERIOR, Location.EXTERIOR, Dimension.A)

        g0, g1 = self.arg
        if not g0.geom.envelope.intersects(g1.geom.envelope):
            logger.debug("RelateComputer.computeIM() disjoint envelopes")
            self.computeDisjointIM(self.im)
            return self.im

        g0.computeSelfNodes(self.li)
        g1.computeSelfNodes(self.li)

        logger.debug("RelateComputer.computeIM() computing edge intersections")
        intersector = g0.computeEdgeIntersections(g1, self.li)

        if self.validateNoding:
            self.checkNoding()

        for i, graph in enumerate(self.arg):
            self.nodeGraph.copyNodesAndLabels(graph, i)
        for i, graph in enumerate(self.arg):
            self.nodeGraph.computeIntersectionNodes(graph, i)

        self.labelIsolatedNodes()

        self.computeProperIntersectionIM(intersector, self.im)

        # vertex contacts, read from the edges around each node
        for i, graph in enumerate(self.arg):
            self.nodeGraph.insertEdgeEnds(graph, i)
        self.labelNodeEdges()

        # edges meeting nothing of the other geometry
        self.labelIsolatedEdges(0, 1)
        self.labelIsolatedEdges(1, 0)

        self.updateIM(self.im)

        logger.debug("RelateComputer.computeIM() nodes:%s edge ends:%s %s",
            len(self.nodeGraph),
            len(self.nodeGraph.edgeEnds),
            self.im)
        return self.im

    def checkNoding(self) -> None:
        """
         * The edges of each graph, split at their recorded intersections,
         * must only meet at their endpoints.
         * Crossings between the two graphs are left to the proper
         * intersection rules, so each graph is checked on its own.
         *
         * @throws NodingException on the first interior intersection found
        """
        for graph in self.arg:
            EdgeNodingValidator.checkEdges(graph.computeSplitEdges())

    def computeProperIntersectionIM(self, intersector, im) -> None:
        """
         * Lower bounds implied by segments crossing in their interiors.
         *
         * A line crossing an area boundary has its interior on the
         * boundary of the area, on its interior too when the crossing
         * is away from the boundary of the line. Other components may
         * cover the rest of the line, so nothing follows for the exterior
         * of the area.
        """
        dims = (self.arg[0].geom.dimension, self.arg[1].geom.dimension)
        hasProper = intersector.hasProperIntersection
        hasProperInterior = intersector.hasProperInteriorIntersection

        if dims == (Dimension.A, Dimension.A):
            if hasProper:
                im.setAtLeast("212101212")
        elif dims == (Dimension.A, Dimension.L):
            if hasProper:
                im.setAtLeast("FFF0FFFF2")
            if hasProperInterior:
                im.setAtLeast("1FFFFF1FF")
        elif dims == (Dimension.L, Dimension.A):
            if hasProper:
                im.setAtLeast("F0FFFFFF2")
            if hasProperInterior:
                im.setAtLeast("1F1FFFFFF")
        elif dims == (Dimension.L, Dimension.L):
            if hasProperInterior:
                im.setAtLeast("0FFFFFFFF")

    def computeDisjointIM(self, im) -> None:
        """
         * Disjoint geometries only meet each other's exterior.
        """
        for i, graph in enumerate(self.arg):
            geom = graph.geom
            if geom.is_empty:
                continue
            for loc, dim in ((Location.INTERIOR, geom.dimension), (Location.BOUNDARY, graph.boundaryDimension)):
                if i == 0:
                    im.set(loc, Location.EXTERIOR, dim)
                else:
                    im.set(Location.EXTERIOR, loc, dim)

    def labelNodeEdges(self) -> None:
        edgeEnds = self.nodeGraph.edgeEnds
        for node in self.nodes:
            node.sortStar(edgeEnds)
            node.computeLabelling(edgeEnds, self.arg)

    def labelIsolatedNodes(self) -> None:
        """
         * A node known for a single geometry is located
         * against the other geometry.
        """
        for node in self.nodes:
            label = node.label
            assert label.geometryCount > 0, "node with empty label found"
            if node.isIsolated:
                targetIndex = 0 if label.isNull(0) else 1
                loc = self.ptLocator.locate(node.coord, self.arg[targetIndex].geom)
                label.refineAll(targetIndex, loc)

    def labelIsolatedEdges(self, geomIndex: int, targetIndex: int) -> None:
        """
         * An edge meeting nothing of the target lies in its interior or
         * in its exterior as a whole, always the exterior of a puntal target.
        """
        target = self.arg[targetIndex].geom
        for edge in self.arg[geomIndex].edges:
            if not edge.isIsolated:
                continue
            if target.dimension > Dimension.P:
                loc = self.ptLocator.locate(edge.coords[0], target)
            else:
                loc = Location.EXTERIOR
            edge.label.refineAll(targetIndex, loc)
            self.isolatedEdges.append(edge)

    def updateIM(self, im) -> None:
        for edge in self.isolatedEdges:
            updateIMFromLabel(edge.label, im)
        for node in self.nodes:
            node.updateIM(im)


class RelateOp():
    """
     * The DE-9IM relate operation on two geometries,
     * under a BoundaryNodeRule (Mod-2 by default).
    """
    def __init__(self, g0, g1, boundaryNodeRule=None, validateNoding: bool=True):
        """
         * @param validateNoding check the noding of both graphs,
         *  raise a NodingException when it is not correct
        """
        if boundaryNodeRule is None:
            boundaryNodeRule = BoundaryNodeRule.getBoundaryOGCSFS()
        self.arg = [
            GeometryGraph(0, g0, boundaryNodeRule),
            GeometryGraph(1, g1, boundaryNodeRule)
            ]
        self.relateComp = RelateComputer(self.arg, validateNoding)

    def getIntersectionMatrix(self):
        return self.relateComp.computeIM()

    @staticmethod
    def relate(g0, g1, boundaryNodeRule=None, validateNoding: bool=True):
        logger.debug("RelateOp.relate(%s, %s)", g0.geom_type, g1.geom_type)
        return RelateOp(g0, g1, boundaryNodeRule, validateNoding).getIntersectionMatrix()


def relate(a, b, pattern: str=None, boundaryNodeRule=None):
    """
     * The DE-9IM matrix of a against b,
     * or whether it matches pattern when given.
    """
    im = RelateOp.relate(a, b, boundaryNodeRule)
    if pattern is None:
        return im
    return im.matches(pattern)
