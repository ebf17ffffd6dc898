"""
Geometry primitives (points, curves, and surfaces) based on numpy arrays.
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

# Minimum number of vertices for each type of curve. Curves edited below
# these counts are cleared.
MIN_LINESTRING_VERTEX_COUNT = 2
MIN_CIRCULARSTRING_VERTEX_COUNT = 3
MIN_RING_VERTEX_COUNT = 4



###############################################################################
# IMPORT                                                                      #
###############################################################################

# Import internal (intra-package).
from numcoll import opt as _opt
from numcoll import transform as _transform
from numcoll import util as _util

# Import external.
import collections as _collections
import enum as _enum
import math as _math
import numpy as _numpy
import re as _re
import struct as _struct



###############################################################################
# LOCALIZATION                                                                #
###############################################################################

# Derived from built-ins.
_nan = float("nan")
_inf = float("inf")
_two_pi = 2. * _math.pi
_half_pi = 0.5 * _math.pi
_comma_space_join = ", ".join
_space_join = " ".join

# Derived from internal.
_DEFAULT_EPSILON = _opt.DEFAULT_EPSILON
_DEFAULT_PRECISION = _opt.DEFAULT_PRECISION
_DEFAULT_SEGMENTIZE_TOLERANCE = _opt.DEFAULT_SEGMENTIZE_TOLERANCE
_MAX_DECODE_DEPTH = _opt.MAX_DECODE_DEPTH
_OPTIMIZE_EXTREME_CUTOFF = _opt.OPTIMIZE_EXTREME_CUTOFF
_OPTIMIZE_SUM_CUTOFF = _opt.OPTIMIZE_SUM_CUTOFF
_TransformError = _transform.TransformError

# Derived from external.
_math_atan2 = _math.atan2
_math_cos = _math.cos
_math_hypot = _math.hypot
_math_sin = _math.sin
_numpy_array_equal = _numpy.array_equal
_numpy_concatenate = _numpy.concatenate
_numpy_float64 = _numpy.dtype("<f8")
_numpy_float64_big = _numpy.dtype(">f8")
_numpy_format_float_positional = _numpy.format_float_positional
_numpy_isnan = _numpy.isnan
_struct_uint_little = _struct.Struct("<I")
_struct_uint_big = _struct.Struct(">I")
_struct_wkb_prefix = _struct.Struct("<BI")
_struct_wkb_prefix_count = _struct.Struct("<BII")



###############################################################################
# GENERAL SUPPORT                                                             #
###############################################################################

# Note: Both dictionaries are populated by _register_geometry_types().
_wkb_base_type_to_geom_type = {}
_wkt_tag_to_geom_type = {}

def _register_geometry_types(*geom_types):
    """
    Register each geometry type for decoding and derive its WKT tag.
    """
    for geom_type in geom_types:
        geom_type.wkt_tag = geom_type.__name__.upper()
        _wkb_base_type_to_geom_type[geom_type.wkb_base_type] = geom_type
        _wkt_tag_to_geom_type[geom_type.wkt_tag] = geom_type


def format_number(value, precision=None):
    """
    Format a number as text for WKT, GML, and KML output.

    value is a float that specifies the number to be formatted.

    precision is an integer that specifies the maximum number of digits after
    the decimal point. Trailing zeros (and a trailing decimal point) are always
    removed. If precision is None, the shortest text that parses back to value
    exactly is returned.
    """
    if value != value:
        return "nan"
    if value in (_inf, -_inf):
        return "inf" if value > 0. else "-inf"
    if precision is None:
        text = _numpy_format_float_positional(value, trim="-")
    else:
        text = _numpy_format_float_positional(value, precision=precision,
                                              unique=True, trim="-")
    if text == "-0":
        return "0"
    return text


def _format_coords_text(coords_array, precision, value_sep=" ", row_sep=", "):
    format_number_ = format_number
    return row_sep.join([
        value_sep.join([format_number_(value, precision) for value in row])
        for row in coords_array.tolist()
        ])


def _is_near(a, b, epsilon=_DEFAULT_EPSILON):
    return abs(a - b) <= epsilon


def _normalized_angle(angle):
    """
    Wrap angle (in radians) into [0, 2*pi).
    """
    angle %= _two_pi
    if angle >= _two_pi:
        return 0.
    return angle


def _line_angle(x1, y1, x2, y2):
    """
    Return the azimuth of a directed segment.

    The azimuth is measured in radians clockwise from north (the positive
    y-axis) and lies in [0, 2*pi).
    """
    return _normalized_angle(_half_pi - _math_atan2(y2 - y1, x2 - x1))


def _average_angle(angle1, angle2):
    """
    Return the angle that bisects the shorter sweep between two azimuths.
    """
    angle1 = _normalized_angle(angle1)
    angle2 = _normalized_angle(angle2)
    if angle2 >= angle1:
        clockwise_diff = angle2 - angle1
    else:
        clockwise_diff = angle2 + _two_pi - angle1
    counter_clockwise_diff = _two_pi - clockwise_diff
    if clockwise_diff <= counter_clockwise_diff:
        return _normalized_angle(angle1 + 0.5*clockwise_diff)
    return _normalized_angle(angle1 - 0.5*counter_clockwise_diff)


def _ccw_angle(dy, dx):
    """
    Return the counter-clockwise angle from the positive x-axis in [0, 2*pi).
    """
    return _normalized_angle(_math_atan2(dy, dx))


def _circle_center_radius(x1, y1, x2, y2, x3, y3):
    """
    Return (center_x, center_y, radius) of the circle through three points.

    If the first and third points coincide, the circle is taken to have the
    second point diametrically opposite. If the points are collinear, radius
    is -1.
    """
    if _is_near(x1, x3) and _is_near(y1, y3):
        center_x = 0.5 * (x1 + x2)
        center_y = 0.5 * (y1 + y2)
        return (center_x, center_y,
                _math_hypot(center_x - x1, center_y - y1))
    dx21 = x2 - x1
    dy21 = y2 - y1
    dx31 = x3 - x1
    dy31 = y3 - y1
    h21 = dx21*dx21 + dy21*dy21
    h31 = dx31*dx31 + dy31*dy31
    # Note: The determinant is 0 if the points are collinear.
    d = 2. * (dx21*dy31 - dx31*dy21)
    if abs(d) < 1e-11:
        return (0., 0., -1.)
    center_x = x1 + (h21*dy31 - h31*dy21) / d
    center_y = y1 - (h21*dx31 - h31*dx21) / d
    return (center_x, center_y, _math_hypot(center_x - x1, center_y - y1))


def _sweep_angle(center_x, center_y, x1, y1, x2, y2, x3, y3):
    """
    Return the signed angle swept from point 1 to point 3 through point 2.

    The angle is positive if the sweep is counter-clockwise.
    """
    angle1 = _ccw_angle(y1 - center_y, x1 - center_x)
    angle2 = _ccw_angle(y2 - center_y, x2 - center_x)
    angle3 = _ccw_angle(y3 - center_y, x3 - center_x)
    if angle3 >= angle1:
        if angle1 < angle2 < angle3:
            return angle3 - angle1
        return -(angle1 + (_two_pi - angle3))
    if angle3 < angle2 < angle1:
        return -(angle1 - angle3)
    return angle3 + (_two_pi - angle1)


def _segment_side(x1, y1, x2, y2, px, py):
    """
    Return -1 if (px, py) is left of the directed line, +1 if right, or 0.
    """
    side = (px - x1)*(y2 - y1) - (x2 - x1)*(py - y1)
    if _is_near(side, 0.):
        return 0
    return -1 if side < 0. else 1


def _sqr_dist_to_line(px, py, x1, y1, x2, y2, epsilon):
    """
    Return (squared distance, x, y) of the point on a segment closest to
    (px, py).

    If the squared distance does not exceed epsilon, the query point itself is
    returned with a distance of 0.
    """
    nearest_x = x1
    nearest_y = y1
    dx = x2 - x1
    dy = y2 - y1
    if dx or dy:
        t = ((px - x1)*dx + (py - y1)*dy) / (dx*dx + dy*dy)
        if t > 1.:
            nearest_x = x2
            nearest_y = y2
        elif t > 0.:
            nearest_x += dx * t
            nearest_y += dy * t
    dx = px - nearest_x
    dy = py - nearest_y
    dist = dx*dx + dy*dy
    if dist <= epsilon:
        return (0., px, py)
    return (dist, nearest_x, nearest_y)


def _left_of_line(px, py, x1, y1, x2, y2):
    """
    Return -1 if (px, py) is left of the directed line, +1 if right, or 0.
    """
    test = (px - x1)*(y2 - y1) - (py - y1)*(x2 - x1)
    if _is_near(test, 0.):
        return 0
    if test < 0.:
        return -1
    return 1


def _interpolate_arc_values(angles, a1, a2, a3, v1, v2, v3):
    # Note: a1, a2, and a3 are ordered as returned by _segmentize_arc().
    with _numpy.errstate(divide="ignore", invalid="ignore"):
        if a1 < a2:
            return _numpy.where(
                angles <= a2,
                v1 + (v2 - v1) * (angles - a1) / (a2 - a1),
                v2 + (v3 - v2) * (angles - a2) / (a3 - a2)
                )
        return _numpy.where(
            angles >= a2,
            v1 + (v2 - v1) * (a1 - angles) / (a1 - a2),
            v2 + (v3 - v2) * (a2 - angles) / (a2 - a3)
            )


def _segmentize_arc(p1, p2, p3, tolerance, is_3D, is_measure):
    """
    Approximate a circular arc by a linear coordinates array.

    p1, p2, and p3 are flat numpy arrays that specify the start, an
    intermediate point, and the end of the arc. tolerance is a float that
    specifies the maximum angle (in radians) spanned by each segment.

    The returned array starts at p1 and ends at p3. Z and M values are
    interpolated along the arc.
    """
    x1, y1 = p1[:2].tolist()
    x2, y2 = p2[:2].tolist()
    x3, y3 = p3[:2].tolist()
    side = _segment_side(x1, y1, x3, y3, x2, y2)
    reverse = side == -1
    if reverse:
        c1, c3 = p3, p1
    else:
        c1, c3 = p1, p3
    c1x, c1y = c1[:2].tolist()
    c3x, c3y = c3[:2].tolist()
    closed = _is_near(c1x, c3x) and _is_near(c1y, c3y)
    center_x, center_y, radius = _circle_center_radius(c1x, c1y, x2, y2,
                                                       c3x, c3y)
    if not closed and (radius < 0. or side == 0):
        return _numpy.vstack((p1, p2, p3))
    a1 = _math_atan2(c1y - center_y, c1x - center_x)
    a2 = _math_atan2(y2 - center_y, x2 - center_x)
    a3 = _math_atan2(c3y - center_y, c3x - center_x)
    if a3 <= a1:
        a3 += _two_pi
    if a2 < a1:
        a2 += _two_pi
    rows = [c1]
    if not (_is_near(x2, c3x) and _is_near(y2, c3y)) and not (
            _is_near(c1x, x2) and _is_near(c1y, y2)):
        angles = _numpy.arange(a1 + tolerance, a3 - tolerance/100., tolerance)
        middle = _numpy.empty((len(angles), len(p1)), _numpy_float64)
        middle[:,0] = center_x + radius*_numpy.cos(angles)
        middle[:,1] = center_y + radius*_numpy.sin(angles)
        if is_3D:
            middle[:,2] = _interpolate_arc_values(
                angles, a1, a2, a3, c1[2], p2[2], c3[2]
                )
        if is_measure:
            m_idx = 2 + is_3D
            middle[:,m_idx] = _interpolate_arc_values(
                angles, a1, a2, a3, c1[m_idx], p2[m_idx], c3[m_idx]
                )
        rows.append(middle)
    rows.append(c3)
    arc_coords_array = _numpy.vstack(rows)
    if reverse:
        return arc_coords_array[::-1].copy()
    return arc_coords_array


def _arc_length(x1, y1, x2, y2, x3, y3):
    center_x, center_y, radius = _circle_center_radius(x1, y1, x2, y2, x3, y3)
    if radius < 0.:
        return _math_hypot(x3 - x1, y3 - y1)
    return radius * abs(_sweep_angle(center_x, center_y,
                                     x1, y1, x2, y2, x3, y3))


def _closest_point_on_arc(px, py, x1, y1, x2, y2, x3, y3, epsilon):
    """
    Find the point on an arc closest to (px, py).

    Returns (squared distance, x, y, vertex_offset, left_of), where
    vertex_offset is 1 if the closest point precedes the arc's intermediate
    point and 2 otherwise, or None if the arc is degenerate.
    """
    center_x, center_y, radius = _circle_center_radius(x1, y1, x2, y2, x3, y3)
    if radius <= 0.:
        return None
    sweep = _sweep_angle(center_x, center_y, x1, y1, x2, y2, x3, y3)
    angle1 = _ccw_angle(y1 - center_y, x1 - center_x)
    angle2 = _ccw_angle(y2 - center_y, x2 - center_x)
    query_angle = _ccw_angle(py - center_y, px - center_x)
    if sweep > 0.:
        delta = (query_angle - angle1) % _two_pi
        delta2 = (angle2 - angle1) % _two_pi
    else:
        delta = (angle1 - query_angle) % _two_pi
        delta2 = (angle1 - angle2) % _two_pi
    if (px != center_x or py != center_y) and delta <= abs(sweep):
        nearest_x = center_x + radius*_math_cos(query_angle)
        nearest_y = center_y + radius*_math_sin(query_angle)
        vertex_offset = 1 if delta <= delta2 else 2
    elif ((px - x1)**2 + (py - y1)**2) <= ((px - x3)**2 + (py - y3)**2):
        nearest_x, nearest_y, vertex_offset = x1, y1, 1
    else:
        nearest_x, nearest_y, vertex_offset = x3, y3, 2
    dist = (px - nearest_x)**2 + (py - nearest_y)**2
    if dist <= epsilon:
        dist, nearest_x, nearest_y = 0., px, py
    # Note: For a counter-clockwise arc, the inside of the circle lies to the
    # left.
    sqr_dist_to_center = (px - center_x)**2 + (py - center_y)**2
    if _is_near(sqr_dist_to_center, radius*radius):
        left_of = 0
    else:
        inside = sqr_dist_to_center < radius*radius
        if sweep < 0.:
            left_of = 1 if inside else -1
        else:
            left_of = -1 if inside else 1
    return (dist, nearest_x, nearest_y, vertex_offset, left_of)


def _signed_ring_area(coords_array):
    """
    Return the signed area enclosed by a closed coordinates array.

    The area is positive if the vertices run counter-clockwise.
    """
    if len(coords_array) < 3:
        return 0.
    # Note: Coordinates are centered to reduce numerical error.
    base_coords_array = coords_array[:,:2] - coords_array[:,:2].mean(0)
    x = base_coords_array[:,0]
    y = base_coords_array[:,1]
    addends = x[:-1]*y[1:] - x[1:]*y[:-1]
    if len(addends) < _OPTIMIZE_SUM_CUTOFF:
        return 0.5 * sum(addends.tolist())
    return 0.5 * float(addends.sum())


def _planar_length(coords_array):
    if len(coords_array) < 2:
        return 0.
    components = _numpy.diff(coords_array[:,:2], axis=0)
    seg_lengths = _numpy.hypot(components[:,0], components[:,1])
    if len(seg_lengths) < _OPTIMIZE_SUM_CUTOFF:
        return sum(seg_lengths.tolist())
    return float(seg_lengths.sum())


def _point_to_row(point, is_3D, is_measure):
    """
    Convert a Point to a list of coordinates of the specified dimension.

    Missing z- and m-coordinates are filled with 0.
    """
    if not isinstance(point, Point):
        raise TypeError(
            "point must be a Point (not {})".format(type(point).__name__)
            )
    row = point.coords_array[:2].tolist()
    if is_3D:
        row.append(point.z if point.is_3D else 0.)
    if is_measure:
        row.append(point.m if point.is_measure else 0.)
    return row


# Note: Spatial dimension flags compatible with each coordinate count, in
# order of preference.
_width_to_dimension_flags = {2: ((False, False),),
                             3: ((True, False), (False, True)),
                             4: ((True, True),)}

def _resolve_dimension_flags(width, is_3D=None, is_measure=None):
    """
    Resolve (is_3D, is_measure) from the number of coordinates per vertex.

    Raises a TypeError if width is incompatible with any specified flag.
    """
    for flags in _width_to_dimension_flags.get(width, ()):
        if ((is_3D is None or is_3D == flags[0]) and
                (is_measure is None or is_measure == flags[1])):
            return flags
    raise TypeError(
        "coordinates with {} values per vertex are incompatible with "
        "is_3D={!r} and is_measure={!r}".format(width, is_3D, is_measure)
        )


def _transform_coords(coords_array, is_3D, transformer, direction,
                      transform_z):
    if not len(coords_array):
        return coords_array
    z = coords_array[:,2].copy() if transform_z and is_3D else None
    x, y, z = transformer.transform(coords_array[:,0].copy(),
                                    coords_array[:,1].copy(), z, direction)
    new_coords_array = coords_array.copy()
    new_coords_array[:,0] = x
    new_coords_array[:,1] = y
    if z is not None:
        new_coords_array[:,2] = z
    return new_coords_array


def _affine_transform_coords(coords_array, is_3D, is_measure, matrix,
                             z_translate, z_scale, m_translate, m_scale):
    new_coords_array = coords_array.copy()
    x = coords_array[:,0]
    y = coords_array[:,1]
    new_coords_array[:,0] = matrix[0,0]*x + matrix[0,1]*y + matrix[0,2]
    new_coords_array[:,1] = matrix[1,0]*x + matrix[1,1]*y + matrix[1,2]
    if is_3D:
        new_coords_array[:,2] = coords_array[:,2]*z_scale + z_translate
    if is_measure:
        m_idx = 2 + is_3D
        new_coords_array[:,m_idx] = (coords_array[:,m_idx]*m_scale
                                     + m_translate)
    return new_coords_array


def _fetch_affine_matrix(affine):
    matrix = getattr(affine, "matrix", affine)
    try:
        matrix = _numpy.array(matrix, _numpy_float64)
    except (TypeError, ValueError):
        raise TypeError("affine must be an Affine2D or a 3x3 matrix")
    if matrix.shape != (3, 3):
        raise TypeError("affine must be an Affine2D or a 3x3 matrix")
    return matrix



###############################################################################
# VERTEX ADDRESSING                                                           #
###############################################################################

class CursorState(_enum.Enum):
    "State of a VertexId used as a traversal cursor."
    BEFORE_START = 0
    AT_POSITION = 1


class VertexId(_collections.namedtuple("VertexId", ("part", "ring", "vertex"))):
    """
    Immutable address of a vertex within a GeometryCollection.

    part is an integer that specifies the index of the part. ring is an
    integer that specifies the ring within that part (0 for curves and points,
    0 for the exterior ring of a polygon and 1, 2, ... for its interior rings).
    vertex is an integer that specifies the vertex within that ring. Each
    defaults to -1, so that VertexId() is the null sentinel.

    A VertexId whose vertex is negative is positioned before the first vertex
    of its ring, which is how a traversal is started (see
    GeometryCollection.next_vertex()).
    """
    __slots__ = ()

    def __new__(cls, part=-1, ring=-1, vertex=-1):
        return super(VertexId, cls).__new__(cls, part, ring, vertex)

    @property
    def is_valid(self):
        "Whether part, ring, and vertex are all non-negative."
        return self.part >= 0 and self.ring >= 0 and self.vertex >= 0

    @property
    def state(self):
        "The CursorState of the current VertexId."
        if self.vertex < 0:
            return CursorState.BEFORE_START
        return CursorState.AT_POSITION



###############################################################################
# WELL-KNOWN BINARY AND TEXT DECODING                                         #
###############################################################################

class _WkbReader(object):
    """
    Bounds-checked cursor over a well-known binary buffer.

    Every read raises a TypeError rather than reading past the end of the
    buffer.
    """

    def __init__(self, wkb):
        if isinstance(wkb, str):
            try:
                wkb = bytes.fromhex(wkb)
            except ValueError:
                raise TypeError("wkb is neither bytes nor a hex string")
        try:
            self.buffer = bytes(wkb)
        except TypeError:
            raise TypeError(
                "wkb must be bytes-like (not {})".format(type(wkb).__name__)
                )
        self.offset = 0
        self.depth = 0
        self.uint_struct = _struct_uint_little
        self.float_dtype = _numpy_float64

    def _take(self, size):
        start = self.offset
        end = start + size
        if end > len(self.buffer):
            raise TypeError(
                "wkb is truncated: {} bytes needed at offset {} but only {} "
                "bytes available".format(size, start, len(self.buffer) - start)
                )
        self.offset = end
        return self.buffer[start:end]

    def read_uint(self):
        return self.uint_struct.unpack(self._take(4))[0]

    def read_header(self):
        """
        Read a byte order marker and geometry type code.

        Both ISO (+1000/+2000) and extended (high-bit) codes are understood.
        Returns (geom_type, is_3D, is_measure).
        """
        byte_order = self._take(1)[0]
        if byte_order == 1:
            self.uint_struct = _struct_uint_little
            self.float_dtype = _numpy_float64
        elif byte_order == 0:
            self.uint_struct = _struct_uint_big
            self.float_dtype = _numpy_float64_big
        else:
            raise TypeError(
                "wkb byte order marker is invalid: {}".format(byte_order)
                )
        code = self.read_uint()
        is_3D = bool(code & 0x80000000)
        is_measure = bool(code & 0x40000000)
        if code & 0x20000000:
            # Note: An embedded SRID is skipped.
            self.read_uint()
        thousands, base = divmod(code & 0x0FFFFFFF, 1000)
        if thousands == 1:
            is_3D = True
        elif thousands == 2:
            is_measure = True
        elif thousands == 3:
            is_3D = is_measure = True
        elif thousands:
            raise TypeError(
                "wkb geometry type code is not supported: {}".format(code)
                )
        try:
            geom_type = _wkb_base_type_to_geom_type[base]
        except KeyError:
            raise TypeError(
                "wkb geometry type code is not supported: {}".format(code)
                )
        return (geom_type, is_3D, is_measure)

    def read_coords(self, count, width):
        data = self._take(8 * count * width)
        coords_array = _numpy.frombuffer(data, self.float_dtype, count * width)
        return coords_array.astype(_numpy_float64).reshape(count, width)


def _check_decode_depth(reader, codec_name):
    "Count one more nesting level on reader, rejecting over-deep input."
    reader.depth += 1
    if reader.depth > _MAX_DECODE_DEPTH:
        raise TypeError(
            "{} is nested more than {} levels deep".format(codec_name,
                                                        _MAX_DECODE_DEPTH)
            )


def _read_wkb_geometry(reader, expected_types=None):
    _check_decode_depth(reader, "wkb")
    geom_type, is_3D, is_measure = reader.read_header()
    if expected_types is not None and not issubclass(geom_type,
                                                     expected_types):
        raise TypeError(
            "wkb contains a {} where a {} is required".format(
                geom_type.__name__, _comma_space_join(
                    [expected_type.__name__
                     for expected_type in expected_types]
                    )
                )
            )
    geom = geom_type._read_wkb_body(reader, is_3D, is_measure)
    reader.depth -= 1
    return geom


def from_wkb(wkb):
    """
    Create a new Geometry from the specified wkb.

    wkb is a bytes (or hex string) that specifies the well-known binary
    representation of the returned Geometry. Big- and little-endian byte
    orders, ISO type codes, and extended (PostGIS-style) type codes with or
    without an SRID are accepted.

    Raises a TypeError if wkb cannot be decoded.
    """
    return _read_wkb_geometry(_WkbReader(wkb))


# Note: Token kinds are the group indices of _wkt_token_re.
_OPEN, _CLOSE, _COMMA, _NUMBER, _WORD = range(1, 6)
_wkt_token_re = _re.compile(
    r"\s*(?:(\()|(\))|(,)"
    r"|([-+]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?|nan|inf(?:inity)?))"
    r"|([A-Za-z_]+))",
    _re.IGNORECASE
    )
_wkt_dimension_words = {"Z": (True, False), "M": (False, True),
                        "ZM": (True, True)}

class _WktReader(object):
    "Token cursor over well-known text."

    def __init__(self, wkt):
        if not isinstance(wkt, str):
            raise TypeError(
                "wkt must be a str (not {})".format(type(wkt).__name__)
                )
        tokens = []
        match = _wkt_token_re.match
        position = 0
        end = len(wkt)
        while position < end:
            token_match = match(wkt, position)
            if token_match is None:
                if wkt[position:].strip():
                    raise TypeError(
                        "wkt contains unexpected text at position {}: "
                        "{!r}".format(position, wkt[position:position+10])
                        )
                break
            position = token_match.end()
            kind = token_match.lastindex
            tokens.append((kind, token_match.group(kind)))
        self.tokens = tokens
        self.idx = 0
        self.depth = 0

    def peek(self):
        if self.idx < len(self.tokens):
            return self.tokens[self.idx]
        return (None, None)

    def peek_kind(self):
        return self.peek()[0]

    def peek_word(self):
        kind, text = self.peek()
        if kind == _WORD:
            return text.upper()
        return None

    def next(self):
        token = self.peek()
        if token[0] is None:
            raise TypeError("wkt ended unexpectedly")
        self.idx += 1
        return token

    def expect(self, kind):
        found_kind, text = self.next()
        if found_kind != kind:
            raise TypeError(
                "wkt is malformed: {!r} found where {} was expected".format(
                    text, ("'('", "')'", "','", "a number", "a word")[kind-1]
                    )
                )
        return text

    def skip_comma(self):
        if self.peek_kind() == _COMMA:
            self.idx += 1
            return True
        return False

    def read_empty(self):
        if self.peek_word() == "EMPTY":
            self.idx += 1
            return True
        return False

    def read_dimension_flags(self):
        flags = _wkt_dimension_words.get(self.peek_word())
        if flags is not None:
            self.idx += 1
        return flags

    def read_row(self):
        row = []
        while self.peek_kind() == _NUMBER:
            row.append(float(self.next()[1]))
        if len(row) < 2:
            raise TypeError("wkt coordinates must have at least 2 values")
        return row

    def read_rows(self):
        """
        Read a parenthesized, comma-separated list of coordinates.
        """
        self.expect(_OPEN)
        rows = [self.read_row()]
        while self.skip_comma():
            rows.append(self.read_row())
        self.expect(_CLOSE)
        widths = {len(row) for row in rows}
        if len(widths) > 1:
            raise TypeError(
                "wkt coordinates have inconsistent numbers of values"
                )
        return rows

    def at_end(self):
        return self.idx >= len(self.tokens)


def _split_wkt_word(word):
    """
    Split a WKT geometry word into its type and any attached dimension suffix.
    """
    geom_type = _wkt_tag_to_geom_type.get(word)
    if geom_type is not None:
        return (geom_type, None)
    for suffix in ("ZM", "Z", "M"):
        if word.endswith(suffix):
            geom_type = _wkt_tag_to_geom_type.get(word[:-len(suffix)])
            if geom_type is not None:
                return (geom_type, _wkt_dimension_words[suffix])
    raise TypeError("wkt geometry type is not supported: {}".format(word))


def _resolve_wkt_dimension_flags(width, flags, hint):
    """
    Resolve (is_3D, is_measure) for coordinates read from wkt.

    flags are those explicitly tagged (or None). hint holds the flags of the
    enclosing geometry (or None), which are used if compatible with width.
    """
    if flags is not None:
        if width != 2 + flags[0] + flags[1]:
            raise TypeError(
                "wkt coordinates with {} values per vertex do not match the "
                "dimension tag".format(width)
                )
        return flags
    if hint is not None and width == 2 + hint[0] + hint[1]:
        return hint
    return _resolve_dimension_flags(width)


def _read_wkt_geometry(reader, hint=None, expected_types=None):
    _check_decode_depth(reader, "wkt")
    word = reader.peek_word()
    if word is None:
        raise TypeError("wkt is malformed: a geometry type was expected")
    reader.idx += 1
    geom_type, flags = _split_wkt_word(word)
    explicit_flags = reader.read_dimension_flags()
    if explicit_flags is not None:
        if flags is not None:
            raise TypeError("wkt repeats the dimension tag: {}".format(word))
        flags = explicit_flags
    if expected_types is not None and not issubclass(geom_type,
                                                     expected_types):
        raise TypeError(
            "wkt contains a {} where a {} is required".format(
                geom_type.__name__, _comma_space_join(
                    [expected_type.__name__
                     for expected_type in expected_types]
                    )
                )
            )
    geom = geom_type._read_wkt_body(reader, flags, hint)
    reader.depth -= 1
    return geom


def from_wkt(wkt):
    """
    Create a new Geometry from the specified wkt.

    wkt is a string that specifies the well-known text representation of the
    returned Geometry. Geometry types and dimension tags are case-insensitive,
    and a dimension tag may be attached to the type (e.g., "LineStringZM") or
    separated from it (e.g., "LINESTRING ZM"). If no dimension tag is present,
    the spatial dimension is inferred from the number of values per vertex.

    Raises a TypeError if wkt cannot be decoded.
    """
    reader = _WktReader(wkt)
    geom = _read_wkt_geometry(reader)
    if not reader.at_end():
        raise TypeError(
            "wkt has trailing text: {!r}".format(reader.peek()[1])
            )
    return geom



###############################################################################
# GEOMETRY BASE CLASS                                                         #
###############################################################################

class Geometry(_util.Lazy):
    """
    Base class for all geometry types.

    Each geometry stores its coordinates in float64 numpy arrays whose columns
    are x, y, then z (if .is_3D) and m (if .is_measure).
    """
    # Note: wkt_tag is populated by _register_geometry_types().
    wkb_base_type = None
    wkt_tag = None
    topological_dimension = None
    is_3D = False
    is_measure = False
    __hash__ = None

    def __copy__(self):
        return self.clone()

    def __deepcopy__(self, memo):
        return self.clone()

    def __repr__(self):
        return "<{}{}: {} coords at {}>".format(
            type(self).__name__, self._fetch_wkt_dimension_suffix(),
            self.n_coordinates, hex(id(self))
            )

    @classmethod
    def from_wkb(cls, wkb):
        """
        Create a new instance from the specified wkb.

        wkb is a bytes (or hex string) that specifies the well-known binary
        representation for the returned instance. It must represent an
        instance of the current type (or one of its subtypes).
        """
        geom = from_wkb(wkb)
        if not isinstance(geom, cls):
            cls._raise_incompatible_wkx("wkb", geom)
        return geom

    @classmethod
    def from_wkt(cls, wkt):
        geom = from_wkt(wkt)
        if not isinstance(geom, cls):
            cls._raise_incompatible_wkx("wkt", geom)
        return geom
    # Note: from_wkt()'s documentation is nearly identical to that of
    # from_wkb().
    from_wkt.__func__.__doc__ = from_wkb.__func__.__doc__.replace(
        "binary", "text"
        ).replace("wkb", "wkt").replace("bytes (or hex string)", "string")

    @classmethod
    def _raise_incompatible_wkx(cls, wkx_str, geom):
        raise TypeError(
            "{} is not compatible with this type: {} (found {})".format(
                wkx_str, cls.__name__, type(geom).__name__
                )
            )

    @staticmethod
    def _process_array(seq, is_3D=None, is_measure=None, arg_name="coords"):
        """
        Convert a coordinates sequence to a 2-dimensional float64 array.

        Returns (coords_array, is_3D, is_measure). The array is always a copy.
        """
        try:
            coords_array = _numpy.array(seq, _numpy_float64)
        except (TypeError, ValueError):
            raise TypeError(
                "{} must be a sequence of coordinate sequences of equal "
                "length".format(arg_name)
                )
        if not coords_array.size:
            is_3D = bool(is_3D)
            is_measure = bool(is_measure)
            return (coords_array.reshape(0, 2 + is_3D + is_measure),
                    is_3D, is_measure)
        if coords_array.ndim != 2:
            raise TypeError(
                "{} must be a sequence of coordinate sequences".format(
                    arg_name
                    )
                )
        is_3D, is_measure = _resolve_dimension_flags(coords_array.shape[1],
                                                     is_3D, is_measure)
        return (coords_array, is_3D, is_measure)

    def _fetch_dimension_flags(self):
        return (self.is_3D, self.is_measure)

    def _fetch_wkt_dimension_suffix(self):
        is_3D, is_measure = self._fetch_dimension_flags()
        if is_3D and is_measure:
            return " ZM"
        if is_3D:
            return " Z"
        if is_measure:
            return " M"
        return ""

    @property
    def wkb_type(self):
        "ISO well-known binary type code (e.g., 1002 for LineString Z)."
        is_3D, is_measure = self._fetch_dimension_flags()
        return self.wkb_base_type + 1000*is_3D + 2000*is_measure

    @property
    def geometry_type(self):
        "Name of the geometry type (e.g., 'LineString')."
        return type(self).__name__

    @property
    def is_empty(self):
        return self.n_coordinates == 0

    @property
    def dimension(self):
        "Topological dimension (0 for points, 1 for curves, 2 for surfaces)."
        return self.topological_dimension

    @property
    def part_count(self):
        return 0 if self.is_empty else 1

    def ring_count(self):
        return 0 if self.is_empty else 1

    def _fetch_width(self):
        return 2 + self.is_3D + self.is_measure

    ## Lazy attributes. ##

    @staticmethod
    def _get_area(self):
        return 0.

    @staticmethod
    def _get_perimeter(self):
        return 0.

    @staticmethod
    def _get_length(self):
        return 0.

    @staticmethod
    def _get_envelope_coords(self):
        """
        Bounding envelope of the geometry.

        The envelope is a tuple of the form
            (min_x, min_y, max_x, max_y)
        or None if the geometry is empty. Circular arcs are segmentized before
        the envelope is found.
        """
        if self.is_empty:
            return None
        if self.has_curved_segments():
            coords_array = self.segmentize()._fetch_all_coords()
        else:
            coords_array = self._fetch_all_coords()
        xy = coords_array[:,:2]
        if len(xy) >= _OPTIMIZE_EXTREME_CUTOFF:
            return tuple(xy.min(0).tolist() + xy.max(0).tolist())
        x = xy[:,0].tolist()
        y = xy[:,1].tolist()
        return (min(x), min(y), max(x), max(y))

    ## Spatial dimension. ##

    def add_z_value(self, z=0.):
        """
        Add z-coordinates to every vertex.

        z is a float that specifies the z-coordinate assigned to each vertex.
        Returns False (and does nothing) if the geometry is already 3D.
        """
        if self.is_3D:
            return False
        self._insert_column(2, z)
        self.is_3D = True
        self._Lazy__clear_lazy()
        return True

    def add_m_value(self, m=0.):
        """
        Add m-coordinates to every vertex.

        m is a float that specifies the m-coordinate assigned to each vertex.
        Returns False (and does nothing) if the geometry already has m.
        """
        if self.is_measure:
            return False
        self._insert_column(2 + self.is_3D, m)
        self.is_measure = True
        self._Lazy__clear_lazy()
        return True

    def drop_z_value(self):
        """
        Remove the z-coordinate from every vertex.

        Returns False (and does nothing) if the geometry is not 3D.
        """
        if not self.is_3D:
            return False
        self._delete_column(2)
        self.is_3D = False
        self._Lazy__clear_lazy()
        return True

    def drop_m_value(self):
        """
        Remove the m-coordinate from every vertex.

        Returns False (and does nothing) if the geometry has no m-coordinates.
        """
        if not self.is_measure:
            return False
        self._delete_column(2 + self.is_3D)
        self.is_measure = False
        self._Lazy__clear_lazy()
        return True

    ## Transformation. ##

    def transform(self, transformer, direction="FORWARD", transform_z=False):
        """
        Transform the geometry's coordinates in place.

        transformer is a numcoll.transform.Transformer that specifies the
        transformation (e.g., a ProjTransformer between two coordinate
        reference systems).

        direction is a string that specifies whether the forward or reverse
        transformation is applied. It may be either "FORWARD" or "REVERSE".

        transform_z is a boolean that specifies whether z-coordinates are
        passed to (and updated by) transformer.

        Returns True on success. If transformer raises a TransformError, False
        is returned and the coordinates may have been partially transformed.
        """
        direction = _util.validate_string_option(
            direction, "direction", _transform.DIRECTIONS
            )
        try:
            self._transform(transformer, direction, transform_z)
        except _TransformError:
            return False
        return True

    def affine_transform(self, affine, z_translate=0., z_scale=1.,
                         m_translate=0., m_scale=1.):
        """
        Apply an affine transformation in place.

        affine is a numcoll.transform.Affine2D (or a 3x3 matrix) that
        specifies the transformation of x- and y-coordinates. z-coordinates
        become z*z_scale + z_translate and m-coordinates become
        m*m_scale + m_translate.
        """
        self._affine_transform(_fetch_affine_matrix(affine), z_translate,
                               z_scale, m_translate, m_scale)

    ## Encoding. ##

    def _fetch_wkb_code(self, ewkb=False):
        is_3D, is_measure = self._fetch_dimension_flags()
        if ewkb:
            return (self.wkb_base_type | (0x80000000 if is_3D else 0)
                    | (0x40000000 if is_measure else 0))
        return self.wkb_base_type + 1000*is_3D + 2000*is_measure

    def as_wkb(self):
        "Return the little-endian ISO well-known binary representation."
        chunks = []
        self._write_wkb(chunks, False)
        return b"".join(chunks)

    def as_ewkb(self):
        """
        Return the little-endian extended well-known binary representation.

        Unlike .as_wkb(), z and m are flagged by the high bits of the type
        code, as is done by PostGIS.
        """
        chunks = []
        self._write_wkb(chunks, True)
        return b"".join(chunks)

    def as_wkt(self, precision=_DEFAULT_PRECISION):
        """
        Return the well-known text representation.

        precision is an integer that specifies the maximum number of digits
        after the decimal point. If precision is None, the shortest text that
        round-trips exactly is written.
        """
        return self._fetch_wkt(precision, True)

    def _fetch_wkt(self, precision, tagged):
        body = self._fetch_wkt_body(precision)
        if not tagged:
            return "EMPTY" if body is None else body
        label = self.wkt_tag + self._fetch_wkt_dimension_suffix()
        if body is None:
            return label + " EMPTY"
        return label + " " + body

    def as_gml2(self, precision=_DEFAULT_PRECISION):
        "Return a GML2 fragment (see numcoll.export.as_gml2())."
        # Note: Imported here to avoid a circular import.
        from numcoll import export as _export
        return _export.as_gml2(self, precision)

    def as_gml3(self, precision=_DEFAULT_PRECISION):
        "Return a GML3 fragment (see numcoll.export.as_gml3())."
        from numcoll import export as _export
        return _export.as_gml3(self, precision)

    def as_json(self, precision=_DEFAULT_PRECISION):
        "Return a GeoJSON geometry object (see numcoll.export.as_json())."
        from numcoll import export as _export
        return _export.as_json(self, precision)

    def as_kml(self, precision=_DEFAULT_PRECISION):
        "Return a KML fragment (see numcoll.export.as_kml())."
        from numcoll import export as _export
        return _export.as_kml(self, precision)

    ## Curvature. ##

    def has_curved_segments(self):
        return False

    def segmentize(self, tolerance=_DEFAULT_SEGMENTIZE_TOLERANCE):
        """
        Return a copy in which every circular arc is replaced by line segments.

        tolerance is a float that specifies the maximum angle (in radians)
        spanned by each segment.
        """
        return self.clone()

    def to_curve_type(self):
        "Return a copy promoted to the curved counterpart of the current type."
        return self.clone()



###############################################################################
# POINT                                                                       #
###############################################################################

class Point(Geometry):
    """
    Point geometry.

    An empty point has NaN x- and y-coordinates.
    """
    wkb_base_type = 1
    topological_dimension = 0

    def __init__(self, x=_nan, y=_nan, z=None, m=None):
        """
        Make a Point.

        x, y, z, and m are floats that specify the point's coordinates. If z
        is None, the point is not 3D. If m is None, the point has no
        m-coordinate. Point() is an empty 2D point.
        """
        row = [x, y]
        if z is not None:
            row.append(z)
        if m is not None:
            row.append(m)
        try:
            self.coords_array = _numpy.array(row, _numpy_float64)
        except (TypeError, ValueError):
            raise TypeError("point coordinates must be numbers")
        self.is_3D = z is not None
        self.is_measure = m is not None

    def __eq__(self, other):
        if type(other) is not type(self):
            return False
        return (self._fetch_dimension_flags() == other._fetch_dimension_flags()
                and _numpy_array_equal(self.coords_array, other.coords_array,
                                       equal_nan=True))

    def __repr__(self):
        return "<{}: {} at {}>".format(
            type(self).__name__, self.tuple, hex(id(self))
            )

    @classmethod
    def _make_fast(cls, coords_array, is_3D, is_measure):
        """
        Create a Point instance very quickly.

        coords_array must be a flat float64 numpy array whose length agrees
        with is_3D and is_measure.

        Warning: coords_array is not validated (nor copied)!
        """
        self = cls.__new__(cls)
        self.coords_array = coords_array
        self.is_3D = is_3D
        self.is_measure = is_measure
        return self

    @property
    def x(self):
        return float(self.coords_array[0])

    @property
    def y(self):
        return float(self.coords_array[1])

    @property
    def z(self):
        "z-coordinate (NaN if the point is not 3D)."
        if not self.is_3D:
            return _nan
        return float(self.coords_array[2])

    @property
    def m(self):
        "m-coordinate (NaN if the point has no m-coordinate)."
        if not self.is_measure:
            return _nan
        return float(self.coords_array[2 + self.is_3D])

    @staticmethod
    def _get_tuple(self):
        return tuple(self.coords_array.tolist())

    @property
    def is_empty(self):
        return bool(_numpy_isnan(self.coords_array[:2]).all())

    @property
    def n_coordinates(self):
        return 0 if self.is_empty else 1

    def vertex_count(self, ring=0):
        return 1 if ring == 0 and not self.is_empty else 0

    def clone(self):
        return self._make_fast(self.coords_array.copy(), self.is_3D,
                               self.is_measure)

    def _set_coords_array(self, coords_array):
        self.coords_array = coords_array
        self._Lazy__clear_lazy()

    def _fetch_all_coords(self):
        if self.is_empty:
            return self.coords_array[:0].reshape(0, len(self.coords_array))
        return self.coords_array.reshape(1, -1)

    def _insert_column(self, idx, value):
        self._set_coords_array(_numpy.insert(self.coords_array, idx, value))

    def _delete_column(self, idx):
        self._set_coords_array(_numpy.delete(self.coords_array, idx))

    def _fetch_coordinate_sequence(self):
        if self.is_empty:
            return []
        return [[self.clone()]]

    ## Vertex addressing. ##

    def _is_vertex(self, ring, vertex):
        return ring == 0 and vertex == 0 and not self.is_empty

    def _vertex_number(self, ring, vertex):
        return 0 if self._is_vertex(ring, vertex) else -1

    def _vertex_at(self, ring, vertex):
        if self._is_vertex(ring, vertex):
            return self.clone()
        return None

    def _next_vertex(self, ring, vertex):
        if ring > 0 or self.is_empty:
            return None
        if vertex < 0:
            return (0, 0)
        return None

    def _adjacent_vertices(self, ring, vertex):
        if not self._is_vertex(ring, vertex):
            return None
        return (None, None)

    def _vertex_angle(self, ring, vertex):
        if not self._is_vertex(ring, vertex):
            return None
        return 0.

    def _closest_segment(self, px, py, epsilon):
        # Note: A point has no segments.
        return None

    ## Editing. ##

    def _insert_vertex(self, ring, vertex, point):
        return False

    def _move_vertex(self, ring, vertex, point):
        if ring != 0 or vertex != 0:
            return False
        self._set_coords_array(_numpy.array(
            _point_to_row(point, self.is_3D, self.is_measure), _numpy_float64
            ))
        return True

    def _delete_vertex(self, ring, vertex):
        if not self._is_vertex(ring, vertex):
            return False
        self._set_coords_array(_numpy.full_like(self.coords_array, _nan))
        return True

    def swap_xy(self):
        coords_array = self.coords_array.copy()
        coords_array[[0, 1]] = coords_array[[1, 0]]
        self._set_coords_array(coords_array)

    def filter_vertices(self, predicate):
        """
        Empty the point if predicate(point) is false.
        """
        if not self.is_empty and not predicate(self.clone()):
            self._set_coords_array(_numpy.full_like(self.coords_array, _nan))

    def transform_vertices(self, func):
        """
        Replace the point with func(point), which must return a Point.
        """
        if self.is_empty:
            return
        self._set_coords_array(_numpy.array(
            _point_to_row(func(self.clone()), self.is_3D, self.is_measure),
            _numpy_float64
            ))

    def remove_duplicate_nodes(self, epsilon=_DEFAULT_EPSILON,
                               use_z_values=False):
        return False

    def _transform(self, transformer, direction, transform_z):
        if self.is_empty:
            return
        self._set_coords_array(_transform_coords(
            self.coords_array.reshape(1, -1), self.is_3D, transformer,
            direction, transform_z
            )[0])

    def _affine_transform(self, matrix, z_translate, z_scale, m_translate,
                          m_scale):
        self._set_coords_array(_affine_transform_coords(
            self.coords_array.reshape(1, -1), self.is_3D, self.is_measure,
            matrix, z_translate, z_scale, m_translate, m_scale
            )[0])

    ## Encoding. ##

    def wkb_size(self):
        return 5 + 8*len(self.coords_array)

    def _write_wkb(self, chunks, ewkb):
        chunks.append(_struct_wkb_prefix.pack(1, self._fetch_wkb_code(ewkb)))
        chunks.append(self.coords_array.astype(_numpy_float64).tobytes())

    @classmethod
    def _read_wkb_body(cls, reader, is_3D, is_measure):
        coords_array = reader.read_coords(1, 2 + is_3D + is_measure)[0]
        return cls._make_fast(coords_array, is_3D, is_measure)

    def _fetch_wkt_body(self, precision):
        if self.is_empty:
            return None
        return "({})".format(_format_coords_text(self.coords_array.reshape(1, -1),
                                                 precision))

    @classmethod
    def _read_wkt_body(cls, reader, flags, hint):
        if reader.read_empty():
            is_3D, is_measure = flags or hint or (False, False)
            return cls._make_fast(
                _numpy.full((2 + is_3D + is_measure,), _nan), is_3D,
                is_measure
                )
        reader.expect(_OPEN)
        row = reader.read_row()
        reader.expect(_CLOSE)
        return cls._read_wkt_row(row, flags, hint)

    @classmethod
    def _read_wkt_row(cls, row, flags, hint):
        is_3D, is_measure = _resolve_wkt_dimension_flags(len(row), flags,
                                                         hint)
        return cls._make_fast(_numpy.array(row, _numpy_float64), is_3D,
                              is_measure)



###############################################################################
# CURVES                                                                      #
###############################################################################

class Curve(Geometry):
    """
    Base class for one-dimensional geometries.

    Every curve has exactly one ring (ring 0) once it has any vertices.
    """
    topological_dimension = 1
    _min_vertex_count = MIN_LINESTRING_VERTEX_COUNT

    def __eq__(self, other):
        if type(other) is not type(self):
            return False
        return (self._fetch_dimension_flags() == other._fetch_dimension_flags()
                and _numpy_array_equal(self.coords_array, other.coords_array,
                                       equal_nan=True))

    @property
    def n_coordinates(self):
        return len(self.coords_array)

    def vertex_count(self, ring=0):
        return len(self.coords_array) if ring == 0 else 0

    def is_closed(self):
        "Whether the first and last vertices coincide (in x and y)."
        coords_array = self.coords_array
        if len(coords_array) < 2:
            return False
        return _numpy_array_equal(coords_array[0,:2], coords_array[-1,:2])

    def _fetch_all_coords(self):
        return self.coords_array

    def _fetch_coordinate_sequence(self):
        if self.is_empty:
            return []
        return [list(self._iter_points())]

    def _iter_points(self):
        is_3D = self.is_3D
        is_measure = self.is_measure
        make_fast = Point._make_fast
        for row in self.coords_array:
            yield make_fast(row.copy(), is_3D, is_measure)

    ## Vertex addressing. ##

    def _is_vertex(self, ring, vertex):
        return ring == 0 and 0 <= vertex < len(self.coords_array)

    def _vertex_number(self, ring, vertex):
        return vertex if self._is_vertex(ring, vertex) else -1

    def _vertex_at(self, ring, vertex):
        if not self._is_vertex(ring, vertex):
            return None
        return Point._make_fast(self.coords_array[vertex].copy(), self.is_3D,
                                self.is_measure)

    def _next_vertex(self, ring, vertex):
        if ring > 0 or (ring < 0 and vertex >= 0):
            return None
        if vertex < 0:
            return (0, 0) if len(self.coords_array) else None
        if vertex + 1 < len(self.coords_array):
            return (0, vertex + 1)
        return None

    def _adjacent_vertices(self, ring, vertex):
        """
        Return (previous, next), each a (ring, vertex) tuple or None.

        Closed curves wrap around their closing vertex. None is returned
        (instead of a tuple) if (ring, vertex) is not a vertex.
        """
        if not self._is_vertex(ring, vertex):
            return None
        n = len(self.coords_array)
        if n < 2:
            return (None, None)
        if self.is_closed():
            if vertex == 0:
                return ((0, n - 2), (0, 1))
            if vertex == n - 1:
                return ((0, n - 2), (0, 1))
        previous = (0, vertex - 1) if vertex > 0 else None
        next_ = (0, vertex + 1) if vertex < n - 1 else None
        return (previous, next_)

    ## Editing. ##

    def _set_coords_array(self, coords_array):
        self.coords_array = coords_array
        self._Lazy__clear_lazy()

    def _insert_column(self, idx, value):
        self._set_coords_array(_numpy.insert(self.coords_array, idx, value,
                                             axis=1))

    def _delete_column(self, idx):
        self._set_coords_array(_numpy.delete(self.coords_array, idx, axis=1))

    def _insert_vertex(self, ring, vertex, point):
        if ring != 0 or not 0 <= vertex <= len(self.coords_array):
            return False
        self._set_coords_array(_numpy.insert(
            self.coords_array, vertex,
            _point_to_row(point, self.is_3D, self.is_measure), axis=0
            ))
        return True

    def _move_vertex(self, ring, vertex, point):
        if not self._is_vertex(ring, vertex):
            return False
        coords_array = self.coords_array.copy()
        coords_array[vertex] = _point_to_row(point, self.is_3D,
                                             self.is_measure)
        self._set_coords_array(coords_array)
        return True

    def _delete_vertex(self, ring, vertex):
        """
        Delete a vertex, clearing the curve if too few vertices remain.
        """
        if not self._is_vertex(ring, vertex):
            return False
        coords_array = _numpy.delete(self.coords_array, vertex, axis=0)
        if len(coords_array) < self._min_vertex_count:
            coords_array = coords_array[:0]
        self._set_coords_array(coords_array)
        return True

    def swap_xy(self):
        coords_array = self.coords_array.copy()
        coords_array[:,[0, 1]] = coords_array[:,[1, 0]]
        self._set_coords_array(coords_array)

    def filter_vertices(self, predicate):
        """
        Keep only those vertices for which predicate(point) is true.

        predicate is a function that takes a Point and returns a boolean. The
        curve is cleared if too few vertices remain.
        """
        keep = [bool(predicate(point)) for point in self._iter_points()]
        if all(keep):
            return
        coords_array = self.coords_array[_numpy.array(keep, bool)]
        if len(coords_array) < self._min_vertex_count:
            coords_array = coords_array[:0]
        self._set_coords_array(coords_array)

    def transform_vertices(self, func):
        """
        Replace each vertex by func(point), which must return a Point.

        Missing z- or m-coordinates in the returned points are set to 0.
        """
        if self.is_empty:
            return
        is_3D = self.is_3D
        is_measure = self.is_measure
        self._set_coords_array(_numpy.array(
            [_point_to_row(func(point), is_3D, is_measure)
             for point in self._iter_points()],
            _numpy_float64
            ))

    def _transform(self, transformer, direction, transform_z):
        self._set_coords_array(_transform_coords(
            self.coords_array, self.is_3D, transformer, direction, transform_z
            ))

    def _affine_transform(self, matrix, z_translate, z_scale, m_translate,
                          m_scale):
        self._set_coords_array(_affine_transform_coords(
            self.coords_array, self.is_3D, self.is_measure, matrix,
            z_translate, z_scale, m_translate, m_scale
            ))

    ## Encoding. ##

    def wkb_size(self):
        return 9 + self.coords_array.size*8

    def _write_wkb(self, chunks, ewkb):
        coords_array = self.coords_array
        chunks.append(_struct_wkb_prefix_count.pack(
            1, self._fetch_wkb_code(ewkb), len(coords_array)
            ))
        chunks.append(coords_array.astype(_numpy_float64).tobytes())

    @classmethod
    def _read_wkb_body(cls, reader, is_3D, is_measure):
        count = reader.read_uint()
        return cls(reader.read_coords(count, 2 + is_3D + is_measure), is_3D,
                   is_measure)

    def _fetch_wkt_body(self, precision):
        if self.is_empty:
            return None
        return "({})".format(_format_coords_text(self.coords_array, precision))

    @classmethod
    def _read_wkt_body(cls, reader, flags, hint):
        if reader.read_empty():
            is_3D, is_measure = flags or hint or (False, False)
            return cls((), is_3D, is_measure)
        rows = reader.read_rows()
        is_3D, is_measure = _resolve_wkt_dimension_flags(len(rows[0]), flags,
                                                         hint)
        return cls(rows, is_3D, is_measure)


class _SimpleCurve(Curve):
    "Base class for curves whose vertices are stored in a single array."

    def __init__(self, coords=(), is_3D=None, is_measure=None):
        """
        coords is a sequence of coordinate sequences (or a 2-dimensional numpy
        array) that specifies the curve's vertices. Each vertex is of the form
        (x, y), (x, y, z), (x, y, m), or (x, y, z, m).

        is_3D and is_measure are booleans that specify whether the vertices
        include z- and m-coordinates. If either is None, it is inferred from
        the number of values per vertex, with 3 values interpreted as
        (x, y, z) unless is_3D is False.
        """
        (self.coords_array, self.is_3D,
         self.is_measure) = self._process_array(coords, is_3D, is_measure)

    @classmethod
    def _make_fast(cls, coords_array, is_3D, is_measure):
        self = cls.__new__(cls)
        self.coords_array = coords_array
        self.is_3D = is_3D
        self.is_measure = is_measure
        return self

    def clone(self):
        return self._make_fast(self.coords_array.copy(), self.is_3D,
                               self.is_measure)


class LineString(_SimpleCurve):
    """
    Curve composed of straight segments.
    """
    wkb_base_type = 2

    @staticmethod
    def _get_length(self):
        return _planar_length(self.coords_array)

    def _vertex_angle(self, ring, vertex):
        """
        Return the azimuth that bisects the segments meeting at a vertex.

        At the ends of a closed line, the segments that meet at the closing
        vertex are used. None is returned if (ring, vertex) is not a vertex.
        """
        if not self._is_vertex(ring, vertex):
            return None
        coords_array = self.coords_array
        n = len(coords_array)
        if n < 2:
            return 0.
        xy = coords_array[:,:2].tolist()
        if vertex == 0 or vertex == n - 1:
            if n > 2 and self.is_closed():
                (previous_x, previous_y), (x, y), (next_x, next_y) = (
                    xy[-2], xy[0], xy[1]
                    )
                return _average_angle(
                    _line_angle(previous_x, previous_y, x, y),
                    _line_angle(x, y, next_x, next_y)
                    )
            if vertex == 0:
                return _line_angle(xy[0][0], xy[0][1], xy[1][0], xy[1][1])
            return _line_angle(xy[-2][0], xy[-2][1], xy[-1][0], xy[-1][1])
        (previous_x, previous_y), (x, y), (next_x, next_y) = (
            xy[vertex-1], xy[vertex], xy[vertex+1]
            )
        return _average_angle(_line_angle(previous_x, previous_y, x, y),
                              _line_angle(x, y, next_x, next_y))

    def _closest_segment(self, px, py, epsilon):
        """
        Find the segment closest to (px, py).

        Returns (squared distance, x, y, ring, vertex_after, left_of), where
        (x, y) is the closest point on the segment and vertex_after is the
        index of the segment's end vertex, or None if there are no segments.
        If two segments are equally close and (px, py) is left of one but
        right of the other, left_of is resolved by the turn between them.
        """
        xy = self.coords_array[:,:2].tolist()
        if len(xy) < 2:
            return None
        sqr_dist = _inf
        left_of_dist = _inf
        left_of = 0
        previous_left_of = 0
        previous_left_of_x = previous_left_of_y = 0.
        result = None
        for vertex in range(1, len(xy)):
            previous_x, previous_y = xy[vertex-1]
            x, y = xy[vertex]
            test_dist, nearest_x, nearest_y = _sqr_dist_to_line(
                px, py, previous_x, previous_y, x, y, epsilon
                )
            if test_dist < sqr_dist:
                sqr_dist = test_dist
                result = (nearest_x, nearest_y, vertex)
            if _is_near(test_dist, sqr_dist):
                left = _left_of_line(px, py, previous_x, previous_y, x, y)
                if left:
                    if (_is_near(test_dist, left_of_dist) and
                            left != previous_left_of and previous_left_of):
                        # Note: The closest point is a vertex shared by
                        # segments with opposite sides.
                        left_of = -_left_of_line(
                            x, y, previous_left_of_x, previous_left_of_y,
                            previous_x, previous_y
                            )
                    else:
                        left_of = left
                    previous_left_of = left_of
                    left_of_dist = test_dist
                    previous_left_of_x = previous_x
                    previous_left_of_y = previous_y
                elif test_dist < left_of_dist:
                    left_of = left
                    left_of_dist = test_dist
                    previous_left_of = 0
        nearest_x, nearest_y, vertex_after = result
        return (sqr_dist, nearest_x, nearest_y, 0, vertex_after, left_of)

    def remove_duplicate_nodes(self, epsilon=_DEFAULT_EPSILON,
                               use_z_values=False,
                               _min_count=MIN_LINESTRING_VERTEX_COUNT):
        """
        Remove consecutive vertices that duplicate the preceding vertex.

        epsilon is a float that specifies the maximum difference in each
        coordinate for two vertices to be considered duplicates.

        use_z_values is a boolean that specifies whether z-coordinates must
        also agree (if the curve is 3D).

        Vertices are never removed if doing so would leave fewer than the
        minimum number of vertices. If the closing vertex of a closed curve is
        removed, the last remaining vertex is reset to the first vertex.
        Returns True if any vertex was removed.
        """
        coords_array = self.coords_array
        n = len(coords_array)
        if n <= _min_count:
            return False
        ncols = 3 if use_z_values and self.is_3D else 2
        rows = coords_array[:,:ncols].tolist()
        closed = self.is_closed()
        keep = [0]
        previous_row = rows[0]
        remaining = n
        for idx in range(1, n):
            row = rows[idx]
            if (remaining > _min_count and
                    all([abs(value - previous_value) <= epsilon
                         for value, previous_value in zip(row, previous_row)])):
                remaining -= 1
                continue
            keep.append(idx)
            previous_row = row
        if len(keep) == n:
            return False
        new_coords_array = coords_array[keep]
        if closed and keep[-1] != n - 1:
            new_coords_array[-1] = coords_array[0]
        self._set_coords_array(new_coords_array)
        return True

    def to_curve_type(self):
        return CompoundCurve([self.clone()])


class CircularString(_SimpleCurve):
    """
    Curve composed of circular arcs.

    Each arc is defined by three consecutive vertices (start, intermediate,
    end), and each arc's end is the next arc's start, so that a valid circular
    string has an odd number of vertices (at least 3).
    """
    wkb_base_type = 8
    _min_vertex_count = MIN_CIRCULARSTRING_VERTEX_COUNT

    def _iter_arcs(self):
        xy = self.coords_array[:,:2].tolist()
        for start in range(0, len(xy) - 2, 2):
            yield (start, xy[start] + xy[start+1] + xy[start+2])

    @staticmethod
    def _get_length(self):
        return sum([_arc_length(*arc_xy) for _, arc_xy in self._iter_arcs()])

    def has_curved_segments(self):
        return True

    def segmentize(self, tolerance=_DEFAULT_SEGMENTIZE_TOLERANCE):
        coords_array = self.coords_array
        is_3D = self.is_3D
        is_measure = self.is_measure
        if len(coords_array) < 3:
            return LineString(coords_array.copy(), is_3D, is_measure)
        arrays = []
        for start in range(0, len(coords_array) - 2, 2):
            arc_coords_array = _segmentize_arc(
                coords_array[start], coords_array[start+1],
                coords_array[start+2], tolerance, is_3D, is_measure
                )
            arrays.append(arc_coords_array[1:] if arrays else arc_coords_array)
        return LineString._make_fast(_numpy_concatenate(arrays), is_3D,
                                     is_measure)

    def to_curve_type(self):
        return CompoundCurve([self.clone()])

    def _vertex_angle(self, ring, vertex):
        """
        Return the azimuth of the arc tangent at a vertex.

        Where two arcs meet, the tangents of both arcs are averaged.
        """
        if not self._is_vertex(ring, vertex):
            return None
        xy = self.coords_array[:,:2].tolist()
        n = len(xy)
        if n < 3:
            return 0.
        if vertex == 0 or vertex == n - 1:
            if self.is_closed():
                return _average_angle(self._arc_tangent(xy, n - 3, 2),
                                      self._arc_tangent(xy, 0, 0))
            if vertex == 0:
                return self._arc_tangent(xy, 0, 0)
            return self._arc_tangent(xy, n - 3, 2)
        if vertex % 2:
            return self._arc_tangent(xy, vertex - 1, 1)
        return _average_angle(self._arc_tangent(xy, vertex - 2, 2),
                              self._arc_tangent(xy, vertex, 0))

    @staticmethod
    def _arc_tangent(xy, start, offset):
        """
        Return the azimuth of the tangent at xy[start+offset] along the arc
        that starts at xy[start].
        """
        (x1, y1), (x2, y2), (x3, y3) = xy[start:start+3]
        center_x, center_y, radius = _circle_center_radius(x1, y1, x2, y2,
                                                           x3, y3)
        if radius < 0.:
            return _line_angle(x1, y1, x3, y3)
        x, y = xy[start+offset]
        # Note: The tangent is perpendicular to the radius and points in the
        # direction of travel.
        clockwise = _sweep_angle(center_x, center_y, x1, y1, x2, y2,
                                 x3, y3) < 0.
        radial_angle = _line_angle(center_x, center_y, x, y)
        if clockwise:
            return _normalized_angle(radial_angle + _half_pi)
        return _normalized_angle(radial_angle - _half_pi)

    def _closest_segment(self, px, py, epsilon):
        """
        Find the arc closest to (px, py).

        Returns (squared distance, x, y, ring, vertex_after, left_of) or None
        if there are no arcs. left_of is -1 if (px, py) is inside a
        counter-clockwise arc's circle or outside a clockwise arc's circle.
        """
        best = None
        for start, (x1, y1, x2, y2, x3, y3) in self._iter_arcs():
            result = _closest_point_on_arc(px, py, x1, y1, x2, y2, x3, y3,
                                           epsilon)
            if result is None:
                # Note: A degenerate arc is treated as two straight segments.
                candidates = []
                for offset, (ax, ay, bx, by) in enumerate(
                        ((x1, y1, x2, y2), (x2, y2, x3, y3)), 1):
                    dist, nearest_x, nearest_y = _sqr_dist_to_line(
                        px, py, ax, ay, bx, by, epsilon
                        )
                    candidates.append((dist, nearest_x, nearest_y, offset,
                                       _left_of_line(px, py, ax, ay, bx, by)))
                result = min(candidates, key=lambda candidate: candidate[0])
            dist, nearest_x, nearest_y, offset, left_of = result
            if best is None or dist < best[0]:
                best = (dist, nearest_x, nearest_y, 0, start + offset, left_of)
        return best

    def remove_duplicate_nodes(self, epsilon=_DEFAULT_EPSILON,
                               use_z_values=False):
        """
        Remove arcs whose three vertices are duplicates of one another.

        At least one arc is always retained. Returns True if any arc was
        removed.
        """
        coords_array = self.coords_array
        n = len(coords_array)
        if n <= MIN_CIRCULARSTRING_VERTEX_COUNT:
            return False
        ncols = 3 if use_z_values and self.is_3D else 2
        rows = coords_array[:,:ncols].tolist()
        near = lambda row1, row2: all([abs(value1 - value2) <= epsilon
                                       for value1, value2 in zip(row1, row2)])
        keep = [0]
        remaining = n
        for start in range(0, n - 2, 2):
            if (remaining > MIN_CIRCULARSTRING_VERTEX_COUNT and
                    near(rows[start], rows[start+1]) and
                    near(rows[start+1], rows[start+2])):
                remaining -= 2
                continue
            keep.extend((start + 1, start + 2))
        if len(keep) == n:
            return False
        self._set_coords_array(coords_array[keep])
        return True


class CompoundCurve(Curve):
    """
    Curve composed of a sequence of LineString's and/or CircularString's.

    Each component curve starts where the previous one ends. The joining
    vertex is counted only once when vertices are addressed.
    """
    wkb_base_type = 9

    def __init__(self, curves=(), is_3D=None, is_measure=None):
        """
        curves is a sequence of LineString's and/or CircularString's that
        specifies the components, in order.

        is_3D and is_measure are booleans that specify the spatial dimension.
        If either is None, it is inferred from the first component (or False
        if there are no components). All components must agree.
        """
        curves = list(curves)
        for curve in curves:
            if not isinstance(curve, (LineString, CircularString)):
                raise TypeError(
                    "curves must be LineString's or CircularString's (not "
                    "{})".format(type(curve).__name__)
                    )
        if is_3D is None:
            is_3D = curves[0].is_3D if curves else False
        if is_measure is None:
            is_measure = curves[0].is_measure if curves else False
        for curve in curves:
            if (curve.is_3D, curve.is_measure) != (is_3D, is_measure):
                raise TypeError(
                    "curves must all have the same spatial dimension"
                    )
        self.curves = curves
        self.is_3D = is_3D
        self.is_measure = is_measure

    def __eq__(self, other):
        if type(other) is not type(self):
            return False
        return (self._fetch_dimension_flags() == other._fetch_dimension_flags()
                and len(self.curves) == len(other.curves)
                and all([curve == other_curve for curve, other_curve
                         in zip(self.curves, other.curves)]))

    def clone(self):
        return type(self)([curve.clone() for curve in self.curves],
                          self.is_3D, self.is_measure)

    @staticmethod
    def _get_coords_array(self):
        curves = self.curves
        if not curves:
            return _numpy.empty((0, self._fetch_width()), _numpy_float64)
        return _numpy_concatenate(
            [curves[0].coords_array]
            + [curve.coords_array[1:] for curve in curves[1:]]
            )

    @staticmethod
    def _get_length(self):
        return sum([curve.length for curve in self.curves])

    def _fetch_curve_starts(self):
        "Return the (compound) index of each component's first vertex."
        starts = []
        start = 0
        for curve in self.curves:
            starts.append(start)
            start += len(curve.coords_array) - 1
        return starts

    def _locate_vertex(self, ring, vertex):
        """
        Return a list of (component index, local vertex) for a vertex.

        A joining vertex belongs to two components. An empty list is returned
        if (ring, vertex) is not a vertex.
        """
        if not self._is_vertex(ring, vertex):
            return []
        located = []
        for idx, (curve, start) in enumerate(zip(self.curves,
                                                 self._fetch_curve_starts())):
            if start <= vertex <= start + len(curve.coords_array) - 1:
                located.append((idx, vertex - start))
        return located

    def _purge_curves(self):
        """
        Remove degenerate components and reconnect the remaining ones.
        """
        curves = [curve for curve in self.curves
                  if len(curve.coords_array) >= curve._min_vertex_count]
        for previous_curve, curve in _util.slide_pairwise(curves):
            end = previous_curve.coords_array[-1]
            if not _numpy_array_equal(end, curve.coords_array[0]):
                coords_array = curve.coords_array.copy()
                coords_array[0] = end
                curve._set_coords_array(coords_array)
        self.curves = curves
        self._Lazy__clear_lazy()

    def _split_coords(self, coords_array):
        "Assign a compound coordinates array back to the components."
        for curve, start in zip(self.curves, self._fetch_curve_starts()):
            curve._set_coords_array(
                coords_array[start:start+len(curve.coords_array)].copy()
                )
        self._Lazy__clear_lazy()

    ## Curvature. ##

    def has_curved_segments(self):
        return any([isinstance(curve, CircularString)
                    for curve in self.curves])

    def segmentize(self, tolerance=_DEFAULT_SEGMENTIZE_TOLERANCE):
        arrays = []
        for curve in self.curves:
            coords_array = curve.segmentize(tolerance).coords_array
            arrays.append(coords_array[1:] if arrays else coords_array)
        if not arrays:
            return LineString((), self.is_3D, self.is_measure)
        return LineString._make_fast(_numpy_concatenate(arrays), self.is_3D,
                                     self.is_measure)

    ## Vertex addressing. ##

    def _vertex_angle(self, ring, vertex):
        located = self._locate_vertex(ring, vertex)
        if not located:
            return None
        curves = self.curves
        if len(located) == 1:
            idx, local_vertex = located[0]
            return curves[idx]._vertex_angle(0, local_vertex)
        (idx1, local_vertex1), (idx2, local_vertex2) = located
        return _average_angle(curves[idx1]._vertex_angle(0, local_vertex1),
                              curves[idx2]._vertex_angle(0, local_vertex2))

    def _closest_segment(self, px, py, epsilon):
        best = None
        for curve, start in zip(self.curves, self._fetch_curve_starts()):
            result = curve._closest_segment(px, py, epsilon)
            if result is not None and (best is None or result[0] < best[0]):
                dist, nearest_x, nearest_y, _, vertex, left_of = result
                best = (dist, nearest_x, nearest_y, 0, start + vertex,
                        left_of)
        return best

    ## Editing. ##

    def add_z_value(self, z=0.):
        if self.is_3D:
            return False
        for curve in self.curves:
            curve.add_z_value(z)
        self.is_3D = True
        self._Lazy__clear_lazy()
        return True

    def add_m_value(self, m=0.):
        if self.is_measure:
            return False
        for curve in self.curves:
            curve.add_m_value(m)
        self.is_measure = True
        self._Lazy__clear_lazy()
        return True

    def drop_z_value(self):
        if not self.is_3D:
            return False
        for curve in self.curves:
            curve.drop_z_value()
        self.is_3D = False
        self._Lazy__clear_lazy()
        return True

    def drop_m_value(self):
        if not self.is_measure:
            return False
        for curve in self.curves:
            curve.drop_m_value()
        self.is_measure = False
        self._Lazy__clear_lazy()
        return True

    def _insert_vertex(self, ring, vertex, point):
        """
        Insert a vertex into the component that spans the insertion position.

        Insertion at a joining vertex inserts into the earlier component, just
        before its last vertex.
        """
        curves = self.curves
        if ring != 0 or not curves or not 0 <= vertex <= self.n_coordinates:
            return False
        starts = self._fetch_curve_starts()
        idx = 0
        for curve_idx, start in enumerate(starts):
            if start < vertex:
                idx = curve_idx
        curves[idx]._insert_vertex(0, vertex - starts[idx], point)
        self._Lazy__clear_lazy()
        return True

    def _move_vertex(self, ring, vertex, point):
        located = self._locate_vertex(ring, vertex)
        if not located:
            return False
        for idx, local_vertex in located:
            self.curves[idx]._move_vertex(0, local_vertex, point)
        self._Lazy__clear_lazy()
        return True

    def _delete_vertex(self, ring, vertex):
        located = self._locate_vertex(ring, vertex)
        if not located:
            return False
        curves = self.curves
        if len(located) == 2:
            # Note: The vertex before the join becomes the new join.
            (previous_idx, previous_local_vertex), (idx, _) = located
            previous_curve = curves[previous_idx]
            new_join = previous_curve._vertex_at(0, previous_local_vertex - 1)
            previous_curve._delete_vertex(0, previous_local_vertex)
            curves[idx]._move_vertex(0, 0, new_join)
        else:
            idx, local_vertex = located[0]
            curves[idx]._delete_vertex(0, local_vertex)
        self._purge_curves()
        if self.n_coordinates < MIN_LINESTRING_VERTEX_COUNT:
            self.curves = []
            self._Lazy__clear_lazy()
        return True

    def swap_xy(self):
        for curve in self.curves:
            curve.swap_xy()
        self._Lazy__clear_lazy()

    def filter_vertices(self, predicate):
        keep = [bool(predicate(point)) for point in self._iter_points()]
        if all(keep):
            return
        for curve, start in zip(self.curves, self._fetch_curve_starts()):
            mask = keep[start:start+len(curve.coords_array)]
            curve._set_coords_array(curve.coords_array[_numpy.array(mask,
                                                                    bool)])
        self._purge_curves()

    def transform_vertices(self, func):
        if self.is_empty:
            return
        is_3D = self.is_3D
        is_measure = self.is_measure
        self._split_coords(_numpy.array(
            [_point_to_row(func(point), is_3D, is_measure)
             for point in self._iter_points()],
            _numpy_float64
            ))

    def remove_duplicate_nodes(self, epsilon=_DEFAULT_EPSILON,
                               use_z_values=False):
        removed = [curve.remove_duplicate_nodes(epsilon, use_z_values)
                   for curve in self.curves]
        if not any(removed):
            return False
        self._purge_curves()
        return True

    def _transform(self, transformer, direction, transform_z):
        self._split_coords(_transform_coords(
            self.coords_array, self.is_3D, transformer, direction, transform_z
            ))

    def _affine_transform(self, matrix, z_translate, z_scale, m_translate,
                          m_scale):
        self._split_coords(_affine_transform_coords(
            self.coords_array, self.is_3D, self.is_measure, matrix,
            z_translate, z_scale, m_translate, m_scale
            ))

    ## Encoding. ##

    def wkb_size(self):
        return 9 + sum([curve.wkb_size() for curve in self.curves])

    def _write_wkb(self, chunks, ewkb):
        chunks.append(_struct_wkb_prefix_count.pack(
            1, self._fetch_wkb_code(ewkb), len(self.curves)
            ))
        for curve in self.curves:
            curve._write_wkb(chunks, ewkb)

    @classmethod
    def _read_wkb_body(cls, reader, is_3D, is_measure):
        count = reader.read_uint()
        return cls([_read_wkb_geometry(reader, (LineString, CircularString))
                    for _ in range(count)],
                   is_3D, is_measure)

    def _fetch_wkt_body(self, precision):
        if not self.curves:
            return None
        flags = self._fetch_dimension_flags()
        return "({})".format(_comma_space_join([
            curve._fetch_wkt(precision, not (type(curve) is LineString and
                                             curve._fetch_dimension_flags()
                                             == flags))
            for curve in self.curves
            ]))

    @classmethod
    def _read_wkt_body(cls, reader, flags, hint):
        if reader.read_empty():
            is_3D, is_measure = flags or hint or (False, False)
            return cls((), is_3D, is_measure)
        member_hint = flags or hint
        reader.expect(_OPEN)
        curves = []
        while True:
            if reader.peek_kind() == _WORD:
                curves.append(_read_wkt_geometry(
                    reader, member_hint, (LineString, CircularString)
                    ))
            else:
                curves.append(LineString._read_wkt_body(reader, None,
                                                        member_hint))
            if not reader.skip_comma():
                break
        reader.expect(_CLOSE)
        is_3D, is_measure = flags or curves[0]._fetch_dimension_flags()
        return cls(curves, is_3D, is_measure)



###############################################################################
# SURFACES                                                                    #
###############################################################################

class CurvePolygon(Geometry):
    """
    Surface bounded by closed curves.

    Ring 0 is the exterior ring and rings 1, 2, ... are interior rings
    (holes).
    """
    wkb_base_type = 10
    topological_dimension = 2
    _ring_types = (Curve,)

    def __init__(self, boundary=(), is_3D=None, is_measure=None):
        """
        boundary is a sequence that specifies the exterior ring followed by
        any interior rings. Each ring is either a Curve or a coordinates
        sequence, which is converted to a LineString.

        is_3D and is_measure are booleans that specify the spatial dimension.
        If either is None, it is inferred from the first ring (or False if
        there are no rings). All rings must agree.
        """
        rings = []
        for ring in boundary:
            if not isinstance(ring, Geometry):
                ring = LineString(ring, is_3D, is_measure)
            elif not isinstance(ring, self._ring_types):
                raise TypeError(
                    "{} rings must be {} (not {})".format(
                        type(self).__name__, _comma_space_join(
                            [ring_type.__name__
                             for ring_type in self._ring_types]
                            ),
                        type(ring).__name__
                        )
                    )
            rings.append(ring)
        if is_3D is None:
            is_3D = rings[0].is_3D if rings else False
        if is_measure is None:
            is_measure = rings[0].is_measure if rings else False
        for ring in rings:
            if (ring.is_3D, ring.is_measure) != (is_3D, is_measure):
                raise TypeError(
                    "boundary rings must all have the same spatial dimension"
                    )
        self.boundary = rings
        self.is_3D = is_3D
        self.is_measure = is_measure

    def __eq__(self, other):
        if type(other) is not type(self):
            return False
        return (self._fetch_dimension_flags() == other._fetch_dimension_flags()
                and len(self.boundary) == len(other.boundary)
                and all([ring == other_ring for ring, other_ring
                         in zip(self.boundary, other.boundary)]))

    def clone(self):
        return type(self)([ring.clone() for ring in self.boundary],
                          self.is_3D, self.is_measure)

    @property
    def exterior(self):
        "Exterior ring (or None if the polygon is empty)."
        return self.boundary[0] if self.boundary else None

    @property
    def interiors(self):
        return self.boundary[1:]

    @property
    def is_empty(self):
        return not self.boundary

    @property
    def n_coordinates(self):
        return sum([ring.n_coordinates for ring in self.boundary])

    def ring_count(self):
        return len(self.boundary)

    def vertex_count(self, ring=0):
        if 0 <= ring < len(self.boundary):
            return self.boundary[ring].n_coordinates
        return 0

    def _fetch_ring(self, ring):
        if 0 <= ring < len(self.boundary):
            return self.boundary[ring]
        return None

    def _fetch_all_coords(self):
        if not self.boundary:
            return _numpy.empty((0, self._fetch_width()), _numpy_float64)
        return _numpy_concatenate([ring.coords_array
                                   for ring in self.boundary])

    def _fetch_coordinate_sequence(self):
        return [list(ring._iter_points()) for ring in self.boundary]

    ## Measurement. ##

    @staticmethod
    def _get_area(self):
        if not self.boundary:
            return 0.
        areas = [
            abs(_signed_ring_area(ring.segmentize().coords_array
                                  if ring.has_curved_segments()
                                  else ring.coords_array))
            for ring in self.boundary
            ]
        return areas[0] - sum(areas[1:])

    @staticmethod
    def _get_perimeter(self):
        return sum([ring.length for ring in self.boundary])

    ## Curvature. ##

    def has_curved_segments(self):
        return any([ring.has_curved_segments() for ring in self.boundary])

    def segmentize(self, tolerance=_DEFAULT_SEGMENTIZE_TOLERANCE):
        return Polygon([ring.segmentize(tolerance) for ring in self.boundary],
                       self.is_3D, self.is_measure)

    ## Vertex addressing. ##

    def _vertex_number(self, ring, vertex):
        curve = self._fetch_ring(ring)
        if curve is None or not 0 <= vertex < curve.n_coordinates:
            return -1
        return sum([previous_ring.n_coordinates
                     for previous_ring in self.boundary[:ring]]) + vertex

    def _vertex_at(self, ring, vertex):
        curve = self._fetch_ring(ring)
        if curve is None:
            return None
        return curve._vertex_at(0, vertex)

    def _next_vertex(self, ring, vertex):
        boundary = self.boundary
        if ring < 0:
            if vertex >= 0:
                return None
            ring = 0
            vertex = -1
        while ring < len(boundary):
            result = boundary[ring]._next_vertex(0, vertex)
            if result is not None:
                return (ring, result[1])
            ring += 1
            vertex = -1
        return None

    def _adjacent_vertices(self, ring, vertex):
        curve = self._fetch_ring(ring)
        if curve is None:
            return None
        adjacent = curve._adjacent_vertices(0, vertex)
        if adjacent is None:
            return None
        return tuple([None if local is None else (ring, local[1])
                      for local in adjacent])

    def _vertex_angle(self, ring, vertex):
        curve = self._fetch_ring(ring)
        if curve is None:
            return None
        return curve._vertex_angle(0, vertex)

    def _closest_segment(self, px, py, epsilon):
        best = None
        for ring, curve in enumerate(self.boundary):
            result = curve._closest_segment(px, py, epsilon)
            if result is not None and (best is None or result[0] < best[0]):
                dist, nearest_x, nearest_y, _, vertex, left_of = result
                best = (dist, nearest_x, nearest_y, ring, vertex, left_of)
        return best

    ## Editing. ##

    def add_z_value(self, z=0.):
        if self.is_3D:
            return False
        for ring in self.boundary:
            ring.add_z_value(z)
        self.is_3D = True
        self._Lazy__clear_lazy()
        return True

    def add_m_value(self, m=0.):
        if self.is_measure:
            return False
        for ring in self.boundary:
            ring.add_m_value(m)
        self.is_measure = True
        self._Lazy__clear_lazy()
        return True

    def drop_z_value(self):
        if not self.is_3D:
            return False
        for ring in self.boundary:
            ring.drop_z_value()
        self.is_3D = False
        self._Lazy__clear_lazy()
        return True

    def drop_m_value(self):
        if not self.is_measure:
            return False
        for ring in self.boundary:
            ring.drop_m_value()
        self.is_measure = False
        self._Lazy__clear_lazy()
        return True

    def _insert_vertex(self, ring, vertex, point):
        """
        Insert a vertex into a ring, keeping the ring closed.

        Inserting at the first (or after the last) position also moves the
        closing (or first) vertex to the inserted point.
        """
        curve = self._fetch_ring(ring)
        if curve is None:
            return False
        n = curve.n_coordinates
        if not curve._insert_vertex(0, vertex, point):
            return False
        if vertex == 0:
            curve._move_vertex(0, n, point)
        elif vertex == n:
            curve._move_vertex(0, 0, point)
        self._Lazy__clear_lazy()
        return True

    def _move_vertex(self, ring, vertex, point):
        curve = self._fetch_ring(ring)
        if curve is None:
            return False
        n = curve.n_coordinates
        if not curve._move_vertex(0, vertex, point):
            return False
        if vertex == 0:
            curve._move_vertex(0, n - 1, point)
        elif vertex == n - 1:
            curve._move_vertex(0, 0, point)
        self._Lazy__clear_lazy()
        return True

    def _delete_vertex(self, ring, vertex):
        """
        Delete a vertex from a ring, removing the ring if it degenerates.

        If the exterior ring is removed, the first interior ring (if any)
        becomes the exterior ring.
        """
        curve = self._fetch_ring(ring)
        if curve is None:
            return False
        n = curve.n_coordinates
        if not 0 <= vertex < n:
            return False
        if n <= MIN_RING_VERTEX_COUNT:
            del self.boundary[ring]
            self._Lazy__clear_lazy()
            return True
        curve._delete_vertex(0, vertex)
        if vertex == 0:
            curve._move_vertex(0, curve.n_coordinates - 1,
                               curve._vertex_at(0, 0))
        elif vertex == n - 1:
            curve._move_vertex(0, 0,
                               curve._vertex_at(0, curve.n_coordinates - 1))
        self._Lazy__clear_lazy()
        return True

    def swap_xy(self):
        for ring in self.boundary:
            ring.swap_xy()
        self._Lazy__clear_lazy()

    def filter_vertices(self, predicate):
        for ring in self.boundary:
            ring.filter_vertices(predicate)
        self.boundary = [ring for ring in self.boundary
                         if ring.n_coordinates >= MIN_RING_VERTEX_COUNT]
        self._Lazy__clear_lazy()

    def transform_vertices(self, func):
        for ring in self.boundary:
            ring.transform_vertices(func)
        self._Lazy__clear_lazy()

    def remove_duplicate_nodes(self, epsilon=_DEFAULT_EPSILON,
                               use_z_values=False):
        removed = []
        for ring in self.boundary:
            if type(ring) is LineString:
                removed.append(ring.remove_duplicate_nodes(
                    epsilon, use_z_values, MIN_RING_VERTEX_COUNT
                    ))
            else:
                removed.append(ring.remove_duplicate_nodes(epsilon,
                                                           use_z_values))
        self._Lazy__clear_lazy()
        return any(removed)

    def _transform(self, transformer, direction, transform_z):
        for ring in self.boundary:
            ring._transform(transformer, direction, transform_z)
        self._Lazy__clear_lazy()

    def _affine_transform(self, matrix, z_translate, z_scale, m_translate,
                          m_scale):
        for ring in self.boundary:
            ring._affine_transform(matrix, z_translate, z_scale, m_translate,
                                   m_scale)
        self._Lazy__clear_lazy()

    ## Encoding. ##

    def wkb_size(self):
        return 9 + sum([ring.wkb_size() for ring in self.boundary])

    def _write_wkb(self, chunks, ewkb):
        chunks.append(_struct_wkb_prefix_count.pack(
            1, self._fetch_wkb_code(ewkb), len(self.boundary)
            ))
        for ring in self.boundary:
            ring._write_wkb(chunks, ewkb)

    @classmethod
    def _read_wkb_body(cls, reader, is_3D, is_measure):
        count = reader.read_uint()
        return cls([_read_wkb_geometry(reader, cls._ring_types)
                    for _ in range(count)],
                   is_3D, is_measure)

    def _fetch_wkt_body(self, precision):
        if not self.boundary:
            return None
        flags = self._fetch_dimension_flags()
        return "({})".format(_comma_space_join([
            ring._fetch_wkt(precision, not (type(ring) is LineString and
                                            ring._fetch_dimension_flags()
                                            == flags))
            for ring in self.boundary
            ]))

    @classmethod
    def _read_wkt_body(cls, reader, flags, hint):
        if reader.read_empty():
            is_3D, is_measure = flags or hint or (False, False)
            return cls((), is_3D, is_measure)
        member_hint = flags or hint
        reader.expect(_OPEN)
        rings = []
        while True:
            if reader.peek_kind() == _WORD:
                if cls._ring_types == (LineString,):
                    raise TypeError(
                        "wkt is malformed: {} rings cannot be tagged".format(
                            cls.__name__
                            )
                        )
                rings.append(_read_wkt_geometry(reader, member_hint,
                                                cls._ring_types))
            else:
                rings.append(LineString._read_wkt_body(reader, None,
                                                       member_hint))
            if not reader.skip_comma():
                break
        reader.expect(_CLOSE)
        is_3D, is_measure = flags or rings[0]._fetch_dimension_flags()
        return cls(rings, is_3D, is_measure)


class Polygon(CurvePolygon):
    """
    Surface bounded by closed LineString's.
    """
    wkb_base_type = 3
    _ring_types = (LineString,)

    def segmentize(self, tolerance=_DEFAULT_SEGMENTIZE_TOLERANCE):
        return self.clone()

    def to_curve_type(self):
        return CurvePolygon([CompoundCurve([ring.clone()])
                             for ring in self.boundary],
                            self.is_3D, self.is_measure)

    def wkb_size(self):
        return 9 + sum([4 + ring.coords_array.size*8
                        for ring in self.boundary])

    def _write_wkb(self, chunks, ewkb):
        chunks.append(_struct_wkb_prefix_count.pack(
            1, self._fetch_wkb_code(ewkb), len(self.boundary)
            ))
        uint_pack = _struct_uint_little.pack
        for ring in self.boundary:
            coords_array = ring.coords_array
            chunks.append(uint_pack(len(coords_array)))
            chunks.append(coords_array.astype(_numpy_float64).tobytes())

    @classmethod
    def _read_wkb_body(cls, reader, is_3D, is_measure):
        count = reader.read_uint()
        width = 2 + is_3D + is_measure
        rings = []
        for _ in range(count):
            rings.append(LineString(
                reader.read_coords(reader.read_uint(), width), is_3D,
                is_measure
                ))
        return cls(rings, is_3D, is_measure)



###############################################################################
# REGISTRATION                                                                #
###############################################################################

_register_geometry_types(Point, LineString, Polygon, CircularString,
                         CompoundCurve, CurvePolygon)
