"""
Default tolerances, precisions, and low-level optimization options.
"""

# Copyright 2026 The numcoll Authors
#
# This file is part of numcoll.
#
# numcoll is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# numcoll is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with numcoll.  If not, see <https://www.gnu.org/licenses/>.

__version__ = "0.0.1a0"
__author__ = "The numcoll Authors"


###############################################################################
# USER SETTINGS                                                               #
###############################################################################
# Number of decimal digits used for text output (WKT, GML, GeoJSON,
# KML) when no precision is specified. None means that the shortest
# text that round-trips exactly is written.
DEFAULT_PRECISION = None
# Maximum angle (in radians) spanned by each linear segment when a
# circular arc is segmentized.
DEFAULT_SEGMENTIZE_TOLERANCE = 3.141592653589793 / 180.
# Tolerance used to decide that a query point lies exactly on a segment
# and, by default, that two consecutive vertices are duplicates.
DEFAULT_EPSILON = 4. * 2.220446049250313e-16
# KML altitude mode used for geometries without z-coordinates. (3D
# geometries always use "absolute".)
DEFAULT_KML_ALTITUDE_MODE = "clampToGround"
# Flat arrays with lengths shorter than the value specified below will
# be summed by sum(a.tolist()) (instead of a.sum()).
OPTIMIZE_SUM_CUTOFF = 120
# Flat arrays with lengths shorter than the value specified below will
# be examined by min/max(a.tolist()) (instead of a.min()/max()).
OPTIMIZE_EXTREME_CUTOFF = 70
# Maximum nesting depth of collections accepted when decoding WKB or
# WKT. Deeper input is rejected as malformed.
MAX_DECODE_DEPTH = 100
