import pytest

from ..algorithms import LineIntersector
from ..geomgraph import Edge, Label
from ..noding import (
    BasicSegmentString,
    SegmentIntersector,
    InteriorIntersectionFinder,
    SegmentEnvelopeNoder,
    FastNodingValidator,
    EdgeNodingValidator
    )
from ..shared import Location, NodingException, TopologyException
from . import c


def segString(*coords):
    return BasicSegmentString([c(*xy) for xy in coords], None)


class PairRecorder(SegmentIntersector):
    """
     * Collects every candidate pair handed out by a noder
    """
    def __init__(self, stopAfter=None):
        self.pairs = []
        self.stopAfter = stopAfter

    def processIntersections(self, e0, segIndex0, e1, segIndex1):
        self.pairs.append((e0, segIndex0, e1, segIndex1))

    @property
    def isDone(self):
        return self.stopAfter is not None and len(self.pairs) >= self.stopAfter


def test_basic_segment_string():
    ss = segString((0, 0), (1, 0), (1, 1), (0, 0))
    assert ss.isClosed
    assert ss.numSegments == 3
    assert not segString((0, 0), (1, 0)).isClosed


def test_interior_intersection_finder_crossing():
    a = segString((0, 0), (2, 2))
    b = segString((0, 2), (2, 0))
    finder = InteriorIntersectionFinder(LineIntersector())
    finder.processIntersections(a, 0, b, 0)
    assert finder.hasIntersection
    assert finder.isDone
    assert finder.interiorIntersection == c(1, 1)
    assert finder.intSegments == [c(0, 0), c(2, 2), c(0, 2), c(2, 0)]


def test_interior_intersection_finder_ignores_shared_endpoints():
    a = segString((0, 0), (1, 1))
    b = segString((1, 1), (2, 0))
    finder = InteriorIntersectionFinder(LineIntersector())
    finder.processIntersections(a, 0, b, 0)
    assert not finder.hasIntersection
    assert finder.numTests == 1


def test_interior_intersection_finder_skips_same_segment():
    a = segString((0, 0), (1, 1))
    finder = InteriorIntersectionFinder(LineIntersector())
    finder.processIntersections(a, 0, a, 0)
    assert finder.numTests == 0


def test_interior_intersection_finder_end_segments_only():
    a = segString((0, 0), (1, 0), (2, 0), (3, 0))
    b = segString((-1, 1), (0, 2), (1.5, 1), (1.5, -1), (0, -2), (-1, -1))
    finder = InteriorIntersectionFinder(LineIntersector(), checkEndSegmentsOnly=True)
    # middle segment of both strings
    finder.processIntersections(a, 1, b, 2)
    assert finder.numTests == 0
    assert not finder.hasIntersection

    finder = InteriorIntersectionFinder(LineIntersector())
    finder.processIntersections(a, 1, b, 2)
    assert finder.hasIntersection
    assert finder.interiorIntersection == c(1.5, 0)


def test_is_end_segment():
    ss = segString((0, 0), (1, 0), (2, 0), (3, 0))
    assert InteriorIntersectionFinder.isEndSegment(ss, 0)
    assert not InteriorIntersectionFinder.isEndSegment(ss, 1)
    assert InteriorIntersectionFinder.isEndSegment(ss, 2)


def test_segment_envelope_noder_pairs():
    a = segString((0, 0), (1, 0), (5, 5))
    b = segString((0.5, -1), (0.5, 1))
    far = segString((100, 100), (101, 101))
    recorder = PairRecorder()
    noder = SegmentEnvelopeNoder(recorder)
    noder.computeNodes([a, b, far])

    found = set((id(e0), i0, id(e1), i1) for e0, i0, e1, i1 in recorder.pairs)
    # adjacent segments of a share the vertex (1, 0)
    assert (id(a), 0, id(a), 1) in found
    assert (id(a), 0, id(b), 0) in found
    assert all(id(far) not in (p[0], p[2]) for p in found)
    assert noder.nOverlaps == len(recorder.pairs)


def test_segment_envelope_noder_stops_when_done():
    strings = [segString((0, i), (10, 10 - i)) for i in range(10)]
    recorder = PairRecorder(stopAfter=3)
    SegmentEnvelopeNoder(recorder).computeNodes(strings)
    assert len(recorder.pairs) == 3


def test_segment_envelope_noder_empty():
    recorder = PairRecorder()
    noder = SegmentEnvelopeNoder(recorder)
    noder.computeNodes([])
    assert recorder.pairs == []
    assert noder.nOverlaps == 0


def test_fast_noding_validator_valid():
    strings = [
        segString((0, 0), (1, 1)),
        segString((1, 1), (2, 0)),
        segString((0, 0), (2, 0))
    ]
    nv = FastNodingValidator(strings)
    assert nv.isValid
    assert nv.interiorIntersection is None
    assert nv.getErrorMessage() == "no intersection found"
    nv.checkValid()


def test_fast_noding_validator_invalid():
    strings = [
        segString((0, 0), (2, 2)),
        segString((0, 2), (2, 0))
    ]
    nv = FastNodingValidator(strings)
    assert not nv.isValid
    assert nv.interiorIntersection == c(1, 1)
    assert nv.getErrorMessage() == (
        "found non-noded intersection between (0.0 0.0, 2.0 2.0) and (0.0 2.0, 2.0 0.0)")

    with pytest.raises(NodingException) as excinfo:
        nv.checkValid()
    assert isinstance(excinfo.value, TopologyException)
    assert excinfo.value.coord == c(1, 1)
    assert excinfo.value.segments == [c(0, 0), c(2, 2), c(0, 2), c(2, 0)]
    assert str(excinfo.value).startswith("TopologyException: found non-noded intersection")


def test_fast_noding_validator_vertex_on_interior():
    # a vertex lying in the interior of another segment is not noded
    strings = [
        segString((0, 0), (2, 0)),
        segString((1, 0), (1, 1))
    ]
    nv = FastNodingValidator(strings)
    assert not nv.isValid
    assert nv.interiorIntersection == c(1, 0)


def test_fast_noding_validator_self_crossing_string():
    bowtie = segString((0, 0), (1, 1), (1, 0), (0, 1), (0, 0))
    assert not FastNodingValidator([bowtie]).isValid


def test_edge_noding_validator():
    label = Label.forLine(0, Location.INTERIOR)
    noded = [
        Edge([c(0, 0), c(1, 1)], label),
        Edge([c(1, 1), c(2, 2)], label),
        Edge([c(0, 2), c(1, 1)], label)
    ]
    assert EdgeNodingValidator(noded).isValid
    EdgeNodingValidator.checkEdges(noded)

    crossing = [
        Edge([c(0, 0), c(2, 2)], label),
        Edge([c(0, 2), c(2, 0)], label)
    ]
    assert not EdgeNodingValidator(crossing).isValid
    with pytest.raises(NodingException):
        EdgeNodingValidator.checkEdges(crossing)


def test_segment_envelope_noder_cross_sets():
    a = segString((0, 0), (1, 0), (5, 5))
    b = segString((0.5, -1), (0.5, 1))
    c0 = segString((0.2, -1), (0.2, 1))
    recorder = PairRecorder()
    SegmentEnvelopeNoder(recorder).computeIntersections([a, c0], [b])

    found = [(id(e0), i0, id(e1), i1) for e0, i0, e1, i1 in recorder.pairs]
    # only pairs across the two sets, first set first
    assert found == [(id(a), 0, id(b), 0)]
