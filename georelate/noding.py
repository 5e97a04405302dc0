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


import numpy as np
import logging
logger = logging.getLogger("georelate.noding")
from .algorithms import LineIntersector
from .shared import (
    NodingException,
    CoordinateSequence
    )


class SegmentString():
    """
     * Contiguous segments through coords, with a context
     * telling where they come from.
    """
    def __init__(self, context):
        self.context = context

    @property
    def isClosed(self) -> bool:
        raise NotImplementedError()


class BasicSegmentString(SegmentString):

    def __init__(self, coords, context):
        SegmentString.__init__(self, context)
        self.coords = coords

    @property
    def isClosed(self) -> bool:
        return self.coords[0] == self.coords[-1]

    @property
    def numSegments(self) -> int:
        return len(self.coords) - 1

    def __str__(self) -> str:
        return "LINESTRING{}".format(self.coords)


class SegmentIntersector():
    """
     * Receives the candidate pairs of segments found by a noder,
     * a noder stops as soon as isDone.
    """
    def processIntersections(self, e0, segIndex0: int, e1, segIndex1: int) -> None:
        raise NotImplementedError()

    @property
    def isDone(self) -> bool:
        return False


class InteriorIntersectionFinder(SegmentIntersector):
    """
     * Finds the first intersection point that is not an endpoint
     * of both segments, a correctly noded arrangement has none.
    """
    def __init__(self, li, checkEndSegmentsOnly: bool=False):
        """
         * @param li the LineIntersector to use
         * @param checkEndSegmentsOnly only test the first and last
         *  segment of each string
        """
        self.li = li
        self.checkEndSegmentsOnly = checkEndSegmentsOnly
        self.interiorIntersection = None
        self.intSegments = []
        self.numTests = 0

    @property
    def hasIntersection(self) -> bool:
        return self.interiorIntersection is not None

    @staticmethod
    def isEndSegment(segStr, index: int) -> bool:
        return index == 0 or index >= segStr.numSegments - 1

    def processIntersections(self, e0, segIndex0: int, e1, segIndex1: int) -> None:
        if self.hasIntersection:
            return
        if e0 is e1 and segIndex0 == segIndex1:
            return
        if self.checkEndSegmentsOnly and not (
                self.isEndSegment(e0, segIndex0) or self.isEndSegment(e1, segIndex1)):
            return

        p0, p1 = e0.coords[segIndex0], e0.coords[segIndex0 + 1]
        q0, q1 = e1.coords[segIndex1], e1.coords[segIndex1 + 1]

        self.numTests += 1
        self.li.computeLinesIntersection(p0, p1, q0, q1)

        if self.li.hasIntersection and self.li.isInteriorIntersection:
            self.intSegments = [p0, p1, q0, q1]
            self.interiorIntersection = self.li.intersectionPts[0]

    @property
    def isDone(self) -> bool:
        return self.interiorIntersection is not None


class SegmentEnvelopeNoder():
    """
     * Finds the candidate pairs of segments by an overlap test of
     * their envelopes and hands them to a SegmentIntersector.
     *
     * Segment envelopes are packed in numpy arrays and each segment
     * is tested against a whole set at once.
     * Pairs come in ascending (segment string, segment) order,
     * the scan stops as soon as the SegmentIntersector is done.
    """
    def __init__(self, segInt):
        self.si = segInt
        self.nOverlaps = 0

    @staticmethod
    def _segmentEnvelopes(segStrings):
        """
         * @return the owners list of (segment string, segment index)
         *  and an (n, 4) array of minx, maxx, miny, maxy per segment
        """
        owners = [(segStr, i) for segStr in segStrings for i in range(len(segStr.coords) - 1)]
        segs = np.array(
            [(segStr.coords[i].x, segStr.coords[i].y, segStr.coords[i + 1].x, segStr.coords[i + 1].y)
                for segStr, i in owners],
            dtype=float
            ).reshape((-1, 4))

        bounds = np.column_stack((
            np.minimum(segs[:, 0], segs[:, 2]),
            np.maximum(segs[:, 0], segs[:, 2]),
            np.minimum(segs[:, 1], segs[:, 3]),
            np.maximum(segs[:, 1], segs[:, 3])
            ))
        return owners, bounds

    @staticmethod
    def _overlapping(bounds, env):
        minx, maxx, miny, maxy = env
        return np.nonzero(
            (bounds[:, 0] <= maxx) &
            (bounds[:, 1] >= minx) &
            (bounds[:, 2] <= maxy) &
            (bounds[:, 3] >= miny)
            )[0]

    def _process(self, owner0, owner1) -> bool:
        self.nOverlaps += 1
        self.si.processIntersections(owner0[0], owner0[1], owner1[0], owner1[1])
        return self.si.isDone

    def computeNodes(self, segStrings: list) -> None:
        """
         * Every pair of segments of the set, the same string included
        """
        owners, bounds = self._segmentEnvelopes(segStrings)

        for i, owner in enumerate(owners):
            start = i + 1
            for j in self._overlapping(bounds[start:], bounds[i]) + start:
                if self._process(owner, owners[int(j)]):
                    logger.debug("SegmentEnvelopeNoder.computeNodes(%s) done after %s overlaps",
                        len(owners),
                        self.nOverlaps)
                    return

        logger.debug("SegmentEnvelopeNoder.computeNodes(%s) overlaps:%s",
            len(owners),
            self.nOverlaps)

    def computeIntersections(self, segStrings0: list, segStrings1: list) -> None:
        """
         * Every pair made of a segment of the first set
         * and a segment of the second one
        """
        owners0, bounds0 = self._segmentEnvelopes(segStrings0)
        owners1, bounds1 = self._segmentEnvelopes(segStrings1)

        for i, owner in enumerate(owners0):
            for j in self._overlapping(bounds1, bounds0[i]):
                if self._process(owner, owners1[int(j)]):
                    return

        logger.debug("SegmentEnvelopeNoder.computeIntersections(%s, %s) overlaps:%s",
            len(owners0),
            len(owners1),
            self.nOverlaps)


class FastNodingValidator():
    """
     * Checks that segment strings only meet at their endpoints.
     *
     * A-B-A collapses and endpoint to interior vertex contacts
     * are not checked.
    """
    def __init__(self, segStrings: list, checkEndSegmentsOnly: bool=False) -> None:
        self.li = LineIntersector()
        self.segStrings = segStrings
        self.checkEndSegmentsOnly = checkEndSegmentsOnly
        self.si = None

    def execute(self) -> None:
        if self.si is None:
            self.si = InteriorIntersectionFinder(self.li, self.checkEndSegmentsOnly)
            SegmentEnvelopeNoder(self.si).computeNodes(self.segStrings)

    @property
    def isValid(self) -> bool:
        self.execute()
        return not self.si.hasIntersection

    @property
    def interiorIntersection(self):
        self.execute()
        return self.si.interiorIntersection

    def getErrorMessage(self) -> str:
        if self.isValid:
            return "no intersection found"
        p0, p1, q0, q1 = self.si.intSegments
        return "found non-noded intersection between {} and {}".format(
            CoordinateSequence([p0, p1]),
            CoordinateSequence([q0, q1]))

    def checkValid(self) -> None:
        """
         * @throws NodingException at the first interior intersection
        """
        if not self.isValid:
            message = self.getErrorMessage()
            logger.debug("FastNodingValidator.checkValid() %s at %s", message, self.si.interiorIntersection)
            raise NodingException(message, self.si.interiorIntersection, list(self.si.intSegments))


class EdgeNodingValidator():
    """
     * FastNodingValidator over graph Edges
    """
    def __init__(self, edges):
        self.segStr = [BasicSegmentString(edge.coords, edge) for edge in edges]
        self.nv = FastNodingValidator(self.segStr)

    @property
    def isValid(self) -> bool:
        return self.nv.isValid

    def checkValid(self) -> None:
        self.nv.checkValid()

    @staticmethod
    def checkEdges(edges) -> None:
        EdgeNodingValidator(edges).checkValid()
