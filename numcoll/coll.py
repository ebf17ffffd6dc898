"""
Heterogeneous and homogeneous collections of geometries.
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
# IMPORT                                                                      #
###############################################################################

# Import internal (intra-package).
from numcoll import geom as _geom
from numcoll import opt as _opt

# Import external.
import numpy as _numpy



###############################################################################
# LOCALIZATION                                                                #
###############################################################################

# Derived from internal.
_CLOSE = _geom._CLOSE
_NUMBER = _geom._NUMBER
_OPEN = _geom._OPEN
_WORD = _geom._WORD
_DEFAULT_EPSILON = _opt.DEFAULT_EPSILON
_DEFAULT_PRECISION = _opt.DEFAULT_PRECISION
_DEFAULT_SEGMENTIZE_TOLERANCE = _opt.DEFAULT_SEGMENTIZE_TOLERANCE
_Geometry = _geom.Geometry
_Point = _geom.Point
_VertexId = _geom.VertexId
_comma_space_join = _geom._comma_space_join
_struct_wkb_prefix_count = _geom._struct_wkb_prefix_count

# Derived from built-ins.
_null_closest_segment = (-1., None, _VertexId(), 0)



###############################################################################
# GEOMETRY COLLECTION                                                         #
###############################################################################

class GeometryCollection(_Geometry):
    """
    Ordered collection of geometries ("parts") of any type.

    The collection owns its parts, which are stored (in order) in .geoms.
    Each vertex of the collection is addressed by a VertexId whose part is an
    index into .geoms.

    The collection's declared type (.wkb_type) is fixed at initialization,
    except that .drop_z_value() and .drop_m_value() remove the respective
    flag. In contrast, .is_3D and .is_measure report whether any part has z-
    or m-coordinates.
    """
    wkb_base_type = 7
    # Note: Types that may be added to the collection, and the type written
    # without a tag in wkt when its spatial dimension matches the collection.
    _member_types = (_Geometry,)
    _bare_member_type = None

    def __init__(self, geoms=(), is_3D=False, is_measure=False):
        """
        geoms is an iterable of Geometry's that specifies the parts. The parts
        are not copied.

        is_3D and is_measure are booleans that specify whether the declared
        type of the collection includes z- and m-coordinates.
        """
        self.geoms = []
        self.declared_is_3D = bool(is_3D)
        self.declared_is_measure = bool(is_measure)
        for geom in geoms:
            if not self._accepts(geom):
                raise TypeError(
                    "{} cannot contain a {}".format(type(self).__name__,
                                                    type(geom).__name__)
                    )
            self.geoms.append(geom)

    def __eq__(self, other):
        if type(other) is not type(self):
            return False
        if self.wkb_type != other.wkb_type:
            return False
        geoms = self.geoms
        other_geoms = other.geoms
        return (len(geoms) == len(other_geoms) and
                all([geom == other_geom
                     for geom, other_geom in zip(geoms, other_geoms)]))

    def __iter__(self):
        return iter(self.geoms)

    def __len__(self):
        return len(self.geoms)

    def __repr__(self):
        return "<{}{}: {} parts at {}>".format(
            type(self).__name__, self._fetch_wkt_dimension_suffix(),
            len(self.geoms), hex(id(self))
            )

    @staticmethod
    def cast(geom):
        """
        Return geom if it is a GeometryCollection (or subtype), otherwise None.
        """
        if isinstance(geom, GeometryCollection):
            return geom
        return None

    def _accepts(self, geom):
        if not isinstance(geom, _Geometry):
            raise TypeError(
                "geom must be a Geometry (not {})".format(type(geom).__name__)
                )
        return isinstance(geom, self._member_types)

    def _fetch_dimension_flags(self):
        return (self.declared_is_3D, self.declared_is_measure)

    def clone(self):
        """
        Return a deep copy of the collection (including its declared type).
        """
        clone = type(self)((), self.declared_is_3D, self.declared_is_measure)
        clone.geoms = [geom.clone() for geom in self.geoms]
        return clone

    ## Part management. ##

    @property
    def num_geometries(self):
        return len(self.geoms)

    def geometry_n(self, index):
        """
        Return the part at the specified index, or None if there is none.

        Unlike list indexing, negative indices are not supported.
        """
        if 0 <= index < len(self.geoms):
            return self.geoms[index]
        return None

    def add_geometry(self, geom):
        """
        Append a part.

        geom is a Geometry that specifies the part to be appended. The
        collection takes ownership of geom (it is not copied). If geom is None
        or of a type that the collection cannot contain, nothing is done.

        Returns True if geom was appended.
        """
        if geom is None or not self._accepts(geom):
            return False
        self.geoms.append(geom)
        return True

    def insert_geometry(self, geom, index):
        """
        Insert a part before the specified index.

        index must be in [0, .num_geometries], where .num_geometries appends.
        Otherwise, or if geom is None or of a type that the collection cannot
        contain, nothing is done. Returns True if geom was inserted.
        """
        if geom is None or not 0 <= index <= len(self.geoms):
            return False
        if not self._accepts(geom):
            return False
        self.geoms.insert(index, geom)
        return True

    def remove_geometry(self, index):
        """
        Remove the part at the specified index.

        Returns False (and does nothing) if index is negative or out of range.
        """
        if not 0 <= index < len(self.geoms):
            return False
        del self.geoms[index]
        return True

    def clear(self):
        "Remove all parts. The declared type is retained."
        self.geoms = []

    def _remove_empty_parts(self):
        self.geoms = [geom for geom in self.geoms if not geom.is_empty]

    ## Aggregates. ##

    @property
    def is_3D(self):
        "Whether any part has z-coordinates."
        return any([geom.is_3D for geom in self.geoms])

    @property
    def is_measure(self):
        "Whether any part has m-coordinates."
        return any([geom.is_measure for geom in self.geoms])

    @property
    def is_empty(self):
        return not self.geoms

    @property
    def n_coordinates(self):
        return sum([geom.n_coordinates for geom in self.geoms])

    @property
    def part_count(self):
        return sum([geom.part_count for geom in self.geoms])

    def ring_count(self, part=None):
        """
        Return the number of rings.

        part is an integer that specifies the part whose rings are counted. If
        part is None, the rings of all parts are counted. An invalid part has
        no rings.
        """
        if part is None:
            return sum([geom.ring_count() for geom in self.geoms])
        geom = self.geometry_n(part)
        if geom is None:
            return 0
        return geom.ring_count()

    def vertex_count(self, part=0, ring=0):
        """
        Return the number of vertices in a ring of a part (0 if invalid).
        """
        geom = self.geometry_n(part)
        if geom is None:
            return 0
        if isinstance(geom, GeometryCollection):
            return geom._ring_vertex_count(ring)
        return geom.vertex_count(ring)

    def _ring_vertex_count(self, ring):
        located = self._locate_ring(ring)
        if located is None:
            return 0
        idx, local_ring = located
        geom = self.geoms[idx]
        if isinstance(geom, GeometryCollection):
            return geom._ring_vertex_count(local_ring)
        return geom.vertex_count(local_ring)

    @property
    def dimension(self):
        "Maximum topological dimension of the parts (0 if empty)."
        if not self.geoms:
            return 0
        return max([geom.dimension for geom in self.geoms])

    @property
    def area(self):
        return sum([geom.area for geom in self.geoms])

    @property
    def perimeter(self):
        return sum([geom.perimeter for geom in self.geoms])

    @property
    def length(self):
        return sum([geom.length for geom in self.geoms])

    @property
    def envelope_coords(self):
        """
        Bounding envelope of all parts.

        The envelope is a tuple of the form
            (min_x, min_y, max_x, max_y)
        or None if the collection has no vertices. Each part caches its own
        envelope, which is released whenever that part is edited.
        """
        envelopes = [geom.envelope_coords for geom in self.geoms
                     if not geom.is_empty]
        if not envelopes:
            return None
        envelopes_array = _numpy.array(envelopes)
        return tuple(envelopes_array[:,:2].min(0).tolist()
                     + envelopes_array[:,2:].max(0).tolist())

    def _fetch_all_coords(self):
        arrays = [geom._fetch_all_coords()[:,:2] for geom in self.geoms]
        if not arrays:
            return _numpy.empty((0, 2), _geom._numpy_float64)
        return _numpy.concatenate(arrays)

    def coordinate_sequence(self):
        """
        Return the vertices as nested lists.

        The returned list is indexed by [part][ring][vertex], and each item is
        a Point. For a nested collection, the rings of all of its parts are
        listed consecutively.
        """
        return [geom._fetch_coordinate_sequence() for geom in self.geoms]

    def _fetch_coordinate_sequence(self):
        rings = []
        for geom in self.geoms:
            rings.extend(geom._fetch_coordinate_sequence())
        return rings

    ## Vertex addressing (public). ##

    def _fetch_part(self, vertex_id):
        part = vertex_id[0]
        if 0 <= part < len(self.geoms):
            return self.geoms[part]
        return None

    def vertex_number_from_vertex_id(self, vertex_id):
        """
        Return the position of a vertex in the flattened vertex sequence.

        vertex_id is a VertexId (or equivalent tuple) that specifies the
        vertex. Returns -1 if vertex_id does not address a vertex.
        """
        part, ring, vertex = vertex_id
        geom = self._fetch_part(vertex_id)
        if geom is None:
            return -1
        number = geom._vertex_number(ring, vertex)
        if number < 0:
            return -1
        return sum([previous_geom.n_coordinates
                    for previous_geom in self.geoms[:part]]) + number

    def vertex_at(self, vertex_id):
        """
        Return (a copy of) the vertex at vertex_id as a Point, or None.
        """
        part, ring, vertex = vertex_id
        geom = self._fetch_part(vertex_id)
        if geom is None:
            return None
        return geom._vertex_at(ring, vertex)

    def next_vertex(self, vertex_id):
        """
        Advance a traversal cursor to the next vertex.

        vertex_id is a VertexId that specifies the current position. To start
        a traversal, use VertexId() (or any VertexId whose vertex is negative,
        to start at the first vertex of that part and ring).

        Returns a tuple of the form
            (next_vertex_id, point)
        or None if the traversal is exhausted. Traversal proceeds through the
        vertices of each ring, the rings of each part, and the parts in order.
        """
        part, ring, vertex = vertex_id
        if part < 0:
            part, ring, vertex = 0, -1, -1
        geoms = self.geoms
        while part < len(geoms):
            geom = geoms[part]
            result = geom._next_vertex(ring, vertex)
            if result is not None:
                ring, vertex = result
                return (_VertexId(part, ring, vertex),
                        geom._vertex_at(ring, vertex))
            part += 1
            ring = vertex = -1
        return None

    def iter_vertices(self):
        """
        Iterate over the vertices.

        Each item is a tuple of the form
            (vertex_id, point)
        """
        result = self.next_vertex(_VertexId())
        while result is not None:
            yield result
            result = self.next_vertex(result[0])

    def adjacent_vertices(self, vertex_id):
        """
        Return the vertices before and after vertex_id.

        Returns a tuple of the form
            (previous_vertex_id, next_vertex_id)
        where either VertexId is the null VertexId() if there is no such
        neighbor (e.g., at the ends of an open curve). Closed rings wrap
        around their closing vertex. If vertex_id does not address a vertex,
        both are null.
        """
        part, ring, vertex = vertex_id
        geom = self._fetch_part(vertex_id)
        if geom is None:
            return (_VertexId(), _VertexId())
        adjacent = geom._adjacent_vertices(ring, vertex)
        if adjacent is None:
            return (_VertexId(), _VertexId())
        return tuple([_VertexId() if local is None
                      else _VertexId(part, local[0], local[1])
                      for local in adjacent])

    def vertex_angle(self, vertex_id):
        """
        Return the azimuth (in radians) that bisects the angle at a vertex.

        The azimuth is measured clockwise from north (the positive y-axis)
        and lies in [0, 2*pi). Returns 0. if vertex_id does not address a
        vertex.
        """
        part, ring, vertex = vertex_id
        geom = self._fetch_part(vertex_id)
        if geom is None:
            return 0.
        angle = geom._vertex_angle(ring, vertex)
        if angle is None:
            return 0.
        return angle

    ## Editing (public). ##

    def insert_vertex(self, vertex_id, point):
        """
        Insert a vertex before vertex_id.

        point is a Point that specifies the inserted vertex. Any z- or
        m-coordinate that the addressed part has but point lacks is set to 0.

        vertex_id.vertex may equal the ring's vertex count, in which case
        point is appended. For a polygon ring, the closing vertex is kept
        equal to the first vertex. Returns False (and does nothing) if
        vertex_id is invalid.
        """
        part, ring, vertex = vertex_id
        geom = self._fetch_part(vertex_id)
        if geom is None:
            return False
        return geom._insert_vertex(ring, vertex, point)

    def move_vertex(self, vertex_id, point):
        """
        Move the vertex at vertex_id to point.

        Returns False (and does nothing) if vertex_id does not address a
        vertex.
        """
        part, ring, vertex = vertex_id
        geom = self._fetch_part(vertex_id)
        if geom is None:
            return False
        return geom._move_vertex(ring, vertex, point)

    def delete_vertex(self, vertex_id):
        """
        Delete the vertex at vertex_id.

        If the deletion leaves the part degenerate (e.g., a line with fewer
        than 2 vertices or a polygon without rings), the part is removed and
        later parts shift down by one. Returns False (and does nothing) if
        vertex_id does not address a vertex.
        """
        part, ring, vertex = vertex_id
        geom = self._fetch_part(vertex_id)
        if geom is None:
            return False
        if not geom._delete_vertex(ring, vertex):
            return False
        if geom.is_empty:
            del self.geoms[part]
        return True

    def swap_xy(self):
        "Swap the x- and y-coordinates of every vertex."
        for geom in self.geoms:
            geom.swap_xy()

    def add_z_value(self, z=0.):
        """
        Add z-coordinates to every part that lacks them.

        The declared type of the collection also becomes 3D. Returns False if
        the collection was already 3D.
        """
        changed = [geom.add_z_value(z) for geom in self.geoms]
        was_declared = self.declared_is_3D
        self.declared_is_3D = True
        return any(changed) or not was_declared

    def add_m_value(self, m=0.):
        changed = [geom.add_m_value(m) for geom in self.geoms]
        was_declared = self.declared_is_measure
        self.declared_is_measure = True
        return any(changed) or not was_declared

    def drop_z_value(self):
        """
        Remove z-coordinates from every part and from the declared type.

        Returns False if nothing had z-coordinates.
        """
        changed = [geom.drop_z_value() for geom in self.geoms]
        was_declared = self.declared_is_3D
        self.declared_is_3D = False
        return any(changed) or was_declared

    def drop_m_value(self):
        changed = [geom.drop_m_value() for geom in self.geoms]
        was_declared = self.declared_is_measure
        self.declared_is_measure = False
        return any(changed) or was_declared

    def filter_vertices(self, predicate):
        """
        Keep only those vertices for which predicate(point) is true.

        predicate is a function that takes a Point and returns a boolean.
        Parts left without vertices are removed.
        """
        for geom in self.geoms:
            geom.filter_vertices(predicate)
        self._remove_empty_parts()

    def transform_vertices(self, func):
        """
        Replace each vertex by func(point).

        func is a function that takes a Point and returns a Point. Parts are
        never removed.
        """
        for geom in self.geoms:
            geom.transform_vertices(func)

    def remove_duplicate_nodes(self, epsilon=_DEFAULT_EPSILON,
                               use_z_values=False):
        """
        Remove consecutive duplicate vertices from every part.

        epsilon is a float that specifies the maximum difference in each
        coordinate for two consecutive vertices to be considered duplicates.

        use_z_values is a boolean that specifies whether z-coordinates must
        also agree.

        Returns True if any part changed.
        """
        # Note: Every part is processed, even after a change is found.
        changed = [geom.remove_duplicate_nodes(epsilon, use_z_values)
                   for geom in self.geoms]
        return any(changed)

    def _transform(self, transformer, direction, transform_z):
        for geom in self.geoms:
            geom._transform(transformer, direction, transform_z)

    def _affine_transform(self, matrix, z_translate, z_scale, m_translate,
                          m_scale):
        for geom in self.geoms:
            geom._affine_transform(matrix, z_translate, z_scale, m_translate,
                                   m_scale)

    ## Queries. ##

    def closest_segment(self, point, epsilon=_DEFAULT_EPSILON):
        """
        Find the segment closest to a point.

        point is a Point (or (x, y) sequence) that specifies the query point.

        epsilon is a float that specifies the squared distance within which
        point is considered to lie on a segment.

        Returns a tuple of the form
            (sqr_distance, segment_point, vertex_after, left_of)
        where segment_point is the closest Point on the closest segment,
        vertex_after is the VertexId of that segment's end vertex, and
        left_of is -1 if point is left of the segment, 1 if it is right of
        the segment, or 0 if it is on the segment's line. Where several
        segments are equally close, the first is reported. If the collection
        has no segments,
            (-1., None, VertexId(), 0)
        is returned.
        """
        if isinstance(point, _Point):
            px, py = point.x, point.y
        else:
            px, py = point[:2]
        best = None
        for part, geom in enumerate(self.geoms):
            result = geom._closest_segment(px, py, epsilon)
            if result is not None and (best is None or result[0] < best[1][0]):
                best = (part, result)
        if best is None:
            return _null_closest_segment
        part, (sqr_dist, x, y, ring, vertex, left_of) = best
        return (sqr_dist, _Point(x, y), _VertexId(part, ring, vertex),
                left_of)

    def has_curved_segments(self):
        return any([geom.has_curved_segments() for geom in self.geoms])

    def boundary(self):
        "Return None. (The boundary of a collection is not defined.)"
        return None

    # Note: Collection type returned by .segmentize() and .to_curve_type().
    # None means the current type.
    _segmentized_type = None
    _curved_type = None

    def segmentize(self, tolerance=_DEFAULT_SEGMENTIZE_TOLERANCE):
        """
        Return a copy in which every part is segmentized.

        tolerance is a float that specifies the maximum angle (in radians)
        spanned by each segment that replaces a circular arc.
        """
        return (self._segmentized_type or type(self))(
            [geom.segmentize(tolerance) for geom in self.geoms],
            self.declared_is_3D, self.declared_is_measure
            )

    def to_curve_type(self):
        "Return a copy in which every part is promoted to its curved type."
        return (self._curved_type or type(self))(
            [geom.to_curve_type() for geom in self.geoms],
            self.declared_is_3D, self.declared_is_measure
            )

    ## Nested addressing. ##

    def _locate_ring(self, ring):
        """
        Return (index, local ring) for a ring of a nested collection, or None.
        """
        if ring < 0:
            return None
        for idx, geom in enumerate(self.geoms):
            count = geom.ring_count()
            if ring < count:
                return (idx, ring)
            ring -= count
        return None

    def _fetch_ring_offset(self, idx):
        return sum([geom.ring_count() for geom in self.geoms[:idx]])

    def _vertex_number(self, ring, vertex):
        located = self._locate_ring(ring)
        if located is None:
            return -1
        idx, local_ring = located
        number = self.geoms[idx]._vertex_number(local_ring, vertex)
        if number < 0:
            return -1
        return sum([geom.n_coordinates for geom in self.geoms[:idx]]) + number

    def _vertex_at(self, ring, vertex):
        located = self._locate_ring(ring)
        if located is None:
            return None
        idx, local_ring = located
        return self.geoms[idx]._vertex_at(local_ring, vertex)

    def _next_vertex(self, ring, vertex):
        if ring < 0:
            if vertex >= 0:
                return None
            idx, local_ring, vertex = 0, -1, -1
        else:
            located = self._locate_ring(ring)
            if located is None:
                return None
            idx, local_ring = located
        geoms = self.geoms
        while idx < len(geoms):
            result = geoms[idx]._next_vertex(local_ring, vertex)
            if result is not None:
                return (self._fetch_ring_offset(idx) + result[0], result[1])
            idx += 1
            local_ring = vertex = -1
        return None

    def _adjacent_vertices(self, ring, vertex):
        located = self._locate_ring(ring)
        if located is None:
            return None
        idx, local_ring = located
        adjacent = self.geoms[idx]._adjacent_vertices(local_ring, vertex)
        if adjacent is None:
            return None
        offset = ring - local_ring
        return tuple([None if local is None else (local[0] + offset, local[1])
                      for local in adjacent])

    def _vertex_angle(self, ring, vertex):
        located = self._locate_ring(ring)
        if located is None:
            return None
        idx, local_ring = located
        return self.geoms[idx]._vertex_angle(local_ring, vertex)

    def _closest_segment(self, px, py, epsilon):
        best = None
        offset = 0
        for geom in self.geoms:
            result = geom._closest_segment(px, py, epsilon)
            if result is not None and (best is None or result[0] < best[0]):
                sqr_dist, x, y, ring, vertex, left_of = result
                best = (sqr_dist, x, y, ring + offset, vertex, left_of)
            offset += geom.ring_count()
        return best

    def _insert_vertex(self, ring, vertex, point):
        located = self._locate_ring(ring)
        if located is None:
            return False
        idx, local_ring = located
        return self.geoms[idx]._insert_vertex(local_ring, vertex, point)

    def _move_vertex(self, ring, vertex, point):
        located = self._locate_ring(ring)
        if located is None:
            return False
        idx, local_ring = located
        return self.geoms[idx]._move_vertex(local_ring, vertex, point)

    def _delete_vertex(self, ring, vertex):
        located = self._locate_ring(ring)
        if located is None:
            return False
        idx, local_ring = located
        geom = self.geoms[idx]
        if not geom._delete_vertex(local_ring, vertex):
            return False
        if geom.is_empty:
            del self.geoms[idx]
        return True

    ## Encoding. ##

    def wkb_size(self):
        return 9 + sum([geom.wkb_size() for geom in self.geoms])

    def _write_wkb(self, chunks, ewkb):
        chunks.append(_struct_wkb_prefix_count.pack(
            1, self._fetch_wkb_code(ewkb), len(self.geoms)
            ))
        for geom in self.geoms:
            geom._write_wkb(chunks, ewkb)

    @classmethod
    def _read_wkb_body(cls, reader, is_3D, is_measure):
        count = reader.read_uint()
        self = cls((), is_3D, is_measure)
        for _ in range(count):
            geom = _geom._read_wkb_geometry(reader)
            if not self._accepts(geom):
                raise TypeError(
                    "{} cannot contain a {}".format(cls.__name__,
                                                    type(geom).__name__)
                    )
            self.geoms.append(geom)
        return self

    def load_wkb(self, wkb):
        """
        Replace the contents of the collection with those decoded from wkb.

        wkb must represent a geometry of exactly the current type. If it cannot
        be decoded, the collection is cleared (keeping its declared type) and
        False is returned.
        """
        try:
            geom = type(self).from_wkb(wkb)
            if type(geom) is not type(self):
                type(self)._raise_incompatible_wkx("wkb", geom)
        except TypeError:
            self.clear()
            return False
        self.geoms = geom.geoms
        self.declared_is_3D = geom.declared_is_3D
        self.declared_is_measure = geom.declared_is_measure
        return True

    def load_wkt(self, wkt):
        """
        Replace the contents of the collection with those decoded from wkt.

        wkt must represent a geometry of exactly the current type. If it cannot
        be decoded, the collection is cleared (keeping its declared type) and
        False is returned.
        """
        try:
            geom = type(self).from_wkt(wkt)
            if type(geom) is not type(self):
                type(self)._raise_incompatible_wkx("wkt", geom)
        except TypeError:
            self.clear()
            return False
        self.geoms = geom.geoms
        self.declared_is_3D = geom.declared_is_3D
        self.declared_is_measure = geom.declared_is_measure
        return True

    def _fetch_wkt_body(self, precision):
        if not self.geoms:
            return None
        bare_member_type = self._bare_member_type
        flags = self._fetch_dimension_flags()
        return "({})".format(_comma_space_join([
            geom._fetch_wkt(precision, not (type(geom) is bare_member_type
                                            and geom._fetch_dimension_flags()
                                            == flags))
            for geom in self.geoms
            ]))

    @classmethod
    def _read_wkt_body(cls, reader, flags, hint):
        # Note: The declared type derives only from the collection's own tag.
        is_3D, is_measure = flags or (False, False)
        self = cls((), is_3D, is_measure)
        if reader.read_empty():
            return self
        member_hint = flags or hint
        bare_member_type = cls._bare_member_type
        reader.expect(_OPEN)
        while True:
            kind = reader.peek_kind()
            if kind == _WORD and reader.peek_word() != "EMPTY":
                geom = _geom._read_wkt_geometry(reader, member_hint)
            elif bare_member_type is None:
                raise TypeError(
                    "wkt is malformed: {} members must be tagged".format(
                        cls.__name__
                        )
                    )
            elif bare_member_type is _Point and kind == _NUMBER:
                # Note: e.g., "MULTIPOINT (1 2, 3 4)".
                geom = _Point._read_wkt_row(reader.read_row(), None,
                                            member_hint)
            else:
                geom = bare_member_type._read_wkt_body(reader, None,
                                                       member_hint)
            if not self._accepts(geom):
                raise TypeError(
                    "{} cannot contain a {}".format(cls.__name__,
                                                    type(geom).__name__)
                    )
            self.geoms.append(geom)
            if not reader.skip_comma():
                break
        reader.expect(_CLOSE)
        return self



###############################################################################
# HOMOGENEOUS COLLECTIONS                                                     #
###############################################################################

class MultiPoint(GeometryCollection):
    "Collection of Point's."
    wkb_base_type = 4
    _member_types = (_geom.Point,)
    _bare_member_type = _geom.Point


class MultiCurve(GeometryCollection):
    "Collection of Curve's."
    wkb_base_type = 11
    _member_types = (_geom.Curve,)
    _bare_member_type = _geom.LineString


class MultiLineString(MultiCurve):
    "Collection of LineString's."
    wkb_base_type = 5
    _member_types = (_geom.LineString,)
    _curved_type = MultiCurve


class MultiSurface(GeometryCollection):
    "Collection of CurvePolygon's (including Polygon's)."
    wkb_base_type = 12
    _member_types = (_geom.CurvePolygon,)
    _bare_member_type = _geom.Polygon


class MultiPolygon(MultiSurface):
    "Collection of Polygon's."
    wkb_base_type = 6
    _member_types = (_geom.Polygon,)
    _curved_type = MultiSurface


MultiCurve._segmentized_type = MultiLineString
MultiSurface._segmentized_type = MultiPolygon



###############################################################################
# REGISTRATION                                                                #
###############################################################################

_geom._register_geometry_types(GeometryCollection, MultiPoint, MultiCurve,
                               MultiLineString, MultiSurface, MultiPolygon)


def from_wkb(wkb):
    """
    Create a new Geometry (of any type, including collections) from wkb.

    See numcoll.geom.from_wkb().
    """
    return _geom.from_wkb(wkb)


def from_wkt(wkt):
    """
    Create a new Geometry (of any type, including collections) from wkt.

    See numcoll.geom.from_wkt().
    """
    return _geom.from_wkt(wkt)
