import pytest

from .. import relate, RelateOp, BoundaryNodeRule, NodingException, TopologyException
from ..algorithms import LineIntersector
from ..geomgraph import Edge, GeometryGraph, Label
from ..op_relate import EdgeEnd, RelateNodeGraph, compareDirection, edgeStubs
from ..shared import Dimension, Location, Quadrant, IntersectionMatrix
from . import factory, c, point, line, polygon, square, squarePolygon, assertMatrix


bowtie = [(0, 0), (1, 1), (1, 0), (0, 1), (0, 0)]


def test_polygon_contains_interior_point():
    assertMatrix(relate(squarePolygon(0, 0), point(0.5, 0.5)), "0F2FF1FF2")


def test_polygon_boundary_point():
    assertMatrix(relate(squarePolygon(0, 0), point(0, 0.5)), "FF20F1FF2")


def test_lines_touching_at_endpoints():
    assertMatrix(relate(line((0, 0), (1, 1)), line((1, 1), (2, 0))), "FF1F00102")


def test_lines_crossing():
    assertMatrix(relate(line((0, 0), (2, 2)), line((0, 2), (2, 0))), "0F1FF0102")


def test_disjoint_squares():
    assertMatrix(relate(squarePolygon(0, 0), squarePolygon(2, 2)), "FF2FF1212")


def test_overlapping_squares():
    assertMatrix(relate(squarePolygon(0, 0, 2.), squarePolygon(1, 1, 2.)), "212101212")


def test_squares_sharing_an_edge():
    assertMatrix(relate(squarePolygon(0, 0), squarePolygon(1, 0)), "FF2F11212")


def test_line_crossing_polygon():
    assertMatrix(relate(line((-1, 0.5), (2, 0.5)), squarePolygon(0, 0)), "101FF0212")


def test_line_inside_polygon():
    assertMatrix(relate(line((0.2, 0.5), (0.8, 0.5)), squarePolygon(0, 0)), "1FF0FF212")


def test_line_endpoint_point():
    assertMatrix(relate(line((0, 0), (1, 0)), point(0, 0)), "FF10F0FF2")


def test_multipoint_against_polygon():
    mp = factory.createMultiPoint([(0.5, 0.5), (5, 5)])
    assertMatrix(relate(mp, squarePolygon(0, 0)), "0F0FFF212")


def test_self_equality():
    geoms = [
        squarePolygon(0, 0),
        line((0, 0), (1, 1), (2, 0)),
        point(3, 4)
    ]
    for g in geoms:
        im = relate(g, g)
        assert im.isEquals(g.dimension, g.dimension), str(im)


def test_self_equality_polygon_matrix():
    assertMatrix(relate(squarePolygon(0, 0), squarePolygon(0, 0)), "2FFF1FFF2")


def test_transpose_symmetry():
    pairs = [
        (squarePolygon(0, 0), point(0.5, 0.5)),
        (squarePolygon(0, 0), point(0, 0.5)),
        (line((0, 0), (1, 1)), line((1, 1), (2, 0))),
        (line((0, 0), (2, 2)), line((0, 2), (2, 0))),
        (squarePolygon(0, 0, 2.), squarePolygon(1, 1, 2.)),
        (squarePolygon(0, 0), squarePolygon(1, 0)),
        (line((-1, 0.5), (2, 0.5)), squarePolygon(0, 0)),
        (squarePolygon(0, 0), squarePolygon(5, 5))
    ]
    for a, b in pairs:
        ab = relate(a, b)
        ba = relate(b, a)
        assert str(ab) == str(ba.transpose()), "{} {}".format(a, b)


def test_disjoint_fast_path_matches_full_computation():
    ls = line((0, 0), (2, 2))
    # overlapping envelopes go through the whole graph computation
    near = relate(ls, point(2, 0))
    far = relate(ls, point(12, 0))
    assertMatrix(near, "FF1FF00F2")
    assert str(near) == str(far)

    poly = polygon(square(0, 0, 10.), square(4, 4, 2.))
    inHole = relate(poly, point(5, 5))
    outside = relate(poly, point(50, 50))
    assertMatrix(inHole, "FF2FF10F2")
    assert str(inHole) == str(outside)


def test_disjoint_fast_path_multilinestring_boundary():
    # every endpoint is met twice, no boundary under Mod-2
    mls = factory.createMultiLineString([
        [(0, 0), (2, 2)],
        [(2, 2), (0, 0)]
    ])
    assert mls.boundaryDimension == Dimension.FALSE
    near = relate(mls, point(2, 0))
    far = relate(mls, point(9, 9))
    assertMatrix(near, "FF1FFF0F2")
    assertMatrix(far, "FF1FFF0F2")

    endPoint = BoundaryNodeRule.getBoundaryEndPoint()
    assertMatrix(relate(mls, point(2, 0), boundaryNodeRule=endPoint), "FF1FF00F2")
    assertMatrix(relate(mls, point(9, 9), boundaryNodeRule=endPoint), "FF1FF00F2")


def test_multilinestring_boundary_dimension():
    openLines = factory.createMultiLineString([
        [(0, 0), (1, 0)],
        [(1, 0), (2, 0)]
    ])
    assert openLines.boundaryDimension == Dimension.P
    closed = factory.createMultiLineString([square(0, 0)])
    assert closed.boundaryDimension == Dimension.FALSE


def test_empty_geometries():
    emptyPoly = factory.createPolygon()
    emptyPoint = factory.createPoint()
    assertMatrix(relate(emptyPoly, emptyPoint), "FFFFFFFF2")
    assertMatrix(relate(emptyPoly, squarePolygon(0, 0)), "FFFFFF212")
    assertMatrix(relate(line((0, 0), (1, 1)), emptyPoint), "FF1FF0FF2")


def test_boundary_node_rules():
    mls = factory.createMultiLineString([
        [(0, 0), (1, 0)],
        [(1, 0), (2, 0)]
    ])
    pt = point(1, 0)
    # the shared endpoint is met twice, Mod-2 puts it in the interior
    assertMatrix(relate(mls, pt), "0F1FF0FF2")
    assertMatrix(relate(mls, pt, boundaryNodeRule=BoundaryNodeRule.getBoundaryEndPoint()), "FF10F0FF2")
    assertMatrix(relate(mls, pt, boundaryNodeRule=BoundaryNodeRule.getBoundaryMultivalentEndPoint()), "FF10FFFF2")
    assertMatrix(relate(mls, pt, boundaryNodeRule=BoundaryNodeRule.getBoundaryMonovalentEndPoint()), "0F1FF0FF2")


def test_pattern_argument():
    poly = squarePolygon(0, 0)
    assert relate(poly, point(0.5, 0.5), "T*****FF*")
    assert not relate(poly, point(5, 5), "T*****FF*")
    assert relate(poly, point(5, 5), "FF*FF****")


def test_relate_op():
    op = RelateOp(squarePolygon(0, 0), point(0.5, 0.5))
    im = op.getIntersectionMatrix()
    assert im.isContains
    assert len(op.arg) == 2
    assertMatrix(RelateOp.relate(point(0.5, 0.5), squarePolygon(0, 0)), "0FFFFF212")


def test_bowtie_polygon_raises_noding_error():
    with pytest.raises(NodingException) as excinfo:
        relate(polygon(bowtie), squarePolygon(0.6, 0.1))
    assert excinfo.value.coord == c(0.5, 0.5)
    assert len(excinfo.value.segments) == 4


def test_bowtie_polygon_against_point_raises():
    with pytest.raises(TopologyException):
        relate(polygon(bowtie), point(0.5, 0.25))


def test_bowtie_without_noding_validation():
    im = RelateOp.relate(polygon(bowtie), point(0.5, 0.25), validateNoding=False)
    assert im.get(Location.EXTERIOR, Location.EXTERIOR) == Dimension.A


def test_self_crossing_line_is_self_noded():
    ls = line((0, 0), (2, 2), (2, 0), (0, 2))
    assertMatrix(relate(point(1, 1), ls), "0FFFFF102")
    assertMatrix(relate(ls, point(1, 1)), "0F1FF0FF2")


def test_collapsed_ring_raises():
    ring = [(0, 0), (0, 0), (1, 1), (0, 0)]
    with pytest.raises(TopologyException):
        relate(polygon(ring), point(0.5, 0.5))


def test_geometry_relate_method():
    poly = squarePolygon(0, 0)
    im = poly.relate(point(0.5, 0.5))
    assert str(im) == "0F2FF1FF2"
    assert im.get(0, 0) == Dimension.P
    assert poly.relate(point(0.5, 0.5), "0F2FF1FF2")


def test_collection_boundary_point():
    gc = factory.createGeometryCollection([
        squarePolygon(0, 0),
        line((2, 2), (3, 3))
    ])
    assertMatrix(relate(gc, point(0, 0.5)), "FF20F1FF2")


def test_hole_touching_shell_at_vertex():
    shell = [(0, 0), (0, 4), (2, 4), (4, 4), (4, 0), (0, 0)]
    hole = [(1, 2), (2, 4), (3, 2), (1, 2)]
    assertMatrix(relate(polygon(shell, hole), polygon(hole)), "FF2F112F2")


def test_multipolygon_parts_touching_at_point():
    mpoly = factory.createMultiPolygon([squarePolygon(0, 0), squarePolygon(1, 1)])
    assertMatrix(relate(mpoly, point(1, 1)), "FF20F1FF2")


def test_edge_end_direction_order():
    east = EdgeEnd.create(0, 0, c(0, 0), c(1, 0), Label())
    north = EdgeEnd.create(0, 1, c(0, 0), c(0, 1), Label())
    west = EdgeEnd.create(1, 0, c(0, 0), c(-1, 0), Label())
    farEast = EdgeEnd.create(1, 1, c(0, 0), c(5, 0), Label())
    assert east.quadrant == Quadrant.NE
    assert west.quadrant == Quadrant.NW
    assert compareDirection(east, north) == -1
    assert compareDirection(north, east) == 1
    assert compareDirection(west, north) == 1
    assert compareDirection(east, farEast) == 0


def test_edge_stubs():
    edge = Edge([c(0, 0), c(2, 0), c(2, 2)], Label.forLine(0, Location.INTERIOR))
    li = LineIntersector()
    li.computeLinesIntersection(c(0, 0), c(2, 0), c(1, -1), c(1, 1))
    edge.addIntersections(li, 0, 0)
    assert list(edgeStubs(edge)) == [
        (c(0, 0), c(1, 0), True),
        (c(1, 0), c(0, 0), False),
        (c(1, 0), c(2, 0), True),
        (c(2, 2), c(2, 0), False)
    ]


def test_node_graph_bundles_collinear_ends():
    nodeGraph = RelateNodeGraph()
    nodeGraph.insertEdgeEnds(GeometryGraph(0, line((0, 0), (1, 0))), 0)
    nodeGraph.insertEdgeEnds(GeometryGraph(1, line((0, 0), (2, 0), (2, 1))), 1)
    assert len(nodeGraph.edgeEnds) == 4

    node = nodeGraph.find(c(0, 0))
    bundle, = node.star
    assert [nodeGraph.edgeEnds[i].geomIndex for i in bundle.ends] == [0, 1]

    bundle.computeLabel(nodeGraph.edgeEnds, BoundaryNodeRule.getBoundaryRuleMod2())
    # line edges are interior, endpoints are located on the nodes
    assert bundle.label.getLocation(0) == Location.INTERIOR
    assert bundle.label.getLocation(1) == Location.INTERIOR
    im = IntersectionMatrix()
    bundle.updateIM(im)
    assertMatrix(im, "1FFFFFFFF")


def test_sorted_star():
    nodeGraph = RelateNodeGraph()
    mls = factory.createMultiLineString([
        [(0, 0), (0, 1)],
        [(0, 0), (1, 0)]
    ])
    nodeGraph.insertEdgeEnds(GeometryGraph(0, mls), 0)
    node = nodeGraph.find(c(0, 0))
    node.sortStar(nodeGraph.edgeEnds)
    directions = [nodeGraph.edgeEnds[bundle.ends[0]].p1 for bundle in node.star]
    assert directions == [c(1, 0), c(0, 1)]
