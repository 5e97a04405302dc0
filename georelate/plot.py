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


import matplotlib.pyplot as plt
from .shared import Location
from .op_relate import RelateOp


# edge and node colours by location in their own geometry
locationColors = {
    Location.INTERIOR: '#1f77b4',
    Location.BOUNDARY: '#d62728',
    Location.EXTERIOR: '#7f7f7f',
    Location.UNDEF: '#bcbd22'
}

# line styles of the graphs of the first and the second geometry
graphStyles = ('-', '--')


def _getAxes(ax):
    if ax is None:
        fig = plt.figure()
        ax = fig.gca()
    return ax


def plotGraph(graph, ax=None):
    """
    Draw the edges and the nodes of a GeometryGraph.

    Edges are coloured by their On location for the graph's own geometry,
    intersections recorded on the edges are marked with a cross.
    """
    ax = _getAxes(ax)
    geomIndex = max(graph.geomIndex, 0)
    style = graphStyles[geomIndex % 2]

    for edge in graph.edges:
        color = locationColors[edge.label.getLocation(geomIndex)]
        coords = edge.coords
        ax.plot(
            tuple(c.x for c in coords),
            tuple(c.y for c in coords),
            linestyle=style,
            linewidth=1.,
            color=color
        )
        for ei in edge.intersections:
            ax.plot(ei.coord.x, ei.coord.y, marker='x', color=color)

    for node in graph.nodes:
        ax.plot(
            node.coord.x,
            node.coord.y,
            marker='o',
            markersize=4.,
            color=locationColors[node.label.getLocation(geomIndex)]
        )

    ax.axis('equal')
    return ax


def plotRelate(a, b, ax=None):
    """
    Compute the relate matrix of a and b, draw both graphs on one axes
    and title it with the matrix.
    """
    ax = _getAxes(ax)
    op = RelateOp(a, b)
    im = op.getIntersectionMatrix()
    for graph in op.arg:
        plotGraph(graph, ax)
    ax.set_title(str(im))
    return ax
