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


from .shared import (
    Coordinate,
    Location,
    Dimension,
    Position,
    IntersectionMatrix,
    TopologyException,
    NodingException
    )
from .algorithms import BoundaryNodeRule
from .geom import GeometryFactory
from .op_relate import (
    RelateOp,
    relate
    )
