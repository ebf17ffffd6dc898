"""Tests for numcoll.geom primitives and the WKB/WKT codecs."""

import math
import struct

import pytest

from numcoll import coll
from numcoll.coll import (
    GeometryCollection,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
)
from numcoll.geom import (
    CircularString,
    CompoundCurve,
    CurvePolygon,
    LineString,
    Point,
    Polygon,
    VertexId,
    format_number,
    from_wkb,
    from_wkt,
)


DIMENSIONS = [(False, False), (True, False), (False, True), (True, True)]


def _make_collection(is_3D, is_measure):
    """Build a collection containing every geometry type."""

    def row(x, y):
        return ([x, y] + ([x + y] if is_3D else [])
                + ([x * y] if is_measure else []))

    def point(x, y):
        return Point(x, y, x + y if is_3D else None,
                     x * y if is_measure else None)

    def line(*xys):
        return LineString([row(x, y) for x, y in xys], is_3D, is_measure)

    def arc(*xys):
        return CircularString([row(x, y) for x, y in xys], is_3D, is_measure)

    square = [(0., 0.), (4., 0.), (4., 4.), (0., 0.)]
    return GeometryCollection([
        point(1., 2.),
        line((0., 0.), (1., 1.), (2., 0.)),
        Polygon([[row(x, y) for x, y in square]], is_3D, is_measure),
        arc((0., 0.), (1., 1.), (2., 0.)),
        CompoundCurve([line((-1., 0.), (0., 0.)),
                       arc((0., 0.), (1., 1.), (2., 0.))],
                      is_3D, is_measure),
        CurvePolygon([arc((0., 0.), (2., 2.), (0., 0.))], is_3D, is_measure),
        MultiPoint([point(5., 5.), point(6., 7.)], is_3D, is_measure),
        MultiLineString([line((0., 0.), (1., 1.))], is_3D, is_measure),
        MultiPolygon([Polygon([[row(x, y) for x, y in square]], is_3D,
                              is_measure)], is_3D, is_measure),
        GeometryCollection([point(8., 9.)], is_3D, is_measure),
        ], is_3D, is_measure)


# Number formatting.

def test_format_number():
    assert format_number(10.) == "10"
    assert format_number(0.1) == "0.1"
    assert format_number(-0.) == "0"
    assert format_number(1. / 3., 3) == "0.333"
    assert format_number(2. / 3., 3) == "0.667"
    assert format_number(2.5, 3) == "2.5"
    assert format_number(float("nan")) == "nan"
    assert format_number(float("-inf")) == "-inf"


# Primitives.

def test_point():
    point = Point(1., 2.)
    assert (point.x, point.y) == (1., 2.)
    assert math.isnan(point.z)
    assert math.isnan(point.m)
    assert point.wkb_type == 1
    assert Point(1., 2., 3.).wkb_type == 1001
    assert Point(1., 2., m=4.).wkb_type == 2001
    assert Point(1., 2., 3., 4.).tuple == (1., 2., 3., 4.)
    assert Point().is_empty
    assert Point() == Point()
    assert Point(1., 2.) != Point(1., 2., 0.)


def test_linestring_dimension_inference():
    assert LineString([(0., 0., 1.), (1., 1., 2.)]).is_3D
    measured = LineString([(0., 0., 1.), (1., 1., 2.)], is_measure=True)
    assert measured.is_measure
    assert not measured.is_3D
    assert LineString([(0., 0., 1., 2.)]).wkb_type == 3002
    with pytest.raises(TypeError):
        LineString([(0., 0., 1.)], is_3D=False, is_measure=False)
    with pytest.raises(TypeError):
        LineString([(0., 0.), (1., 1., 1.)])


def test_polygon_area_and_perimeter(holed_polygon):
    assert holed_polygon.area == pytest.approx(96.)
    assert holed_polygon.perimeter == pytest.approx(48.)
    assert holed_polygon.ring_count() == 2
    with pytest.raises(TypeError):
        Polygon([CircularString([(0., 0.), (1., 1.), (0., 0.)])])


def test_envelope_is_cleared_on_edit():
    line = LineString([(0., 0.), (1., 1.)])
    assert line.envelope_coords == (0., 0., 1., 1.)
    gc = GeometryCollection([line])
    gc.move_vertex(VertexId(0, 0, 1), Point(5., -5.))
    assert line.envelope_coords == (0., -5., 5., 0.)


def test_circularstring_measures():
    arc = CircularString([(0., 0.), (1., 1.), (2., 0.)])
    assert arc.has_curved_segments()
    assert arc.length == pytest.approx(math.pi)
    assert arc.envelope_coords == pytest.approx((0., 0., 2., 1.), abs=1e-3)
    segmentized = arc.segmentize(math.pi / 8.)
    assert segmentized.n_coordinates == 9
    circle = CurvePolygon([CircularString([(0., 0.), (2., 0.), (0., 0.)])])
    assert circle.area == pytest.approx(math.pi, rel=1e-3)


def test_circularstring_closest_segment():
    gc = GeometryCollection([CircularString([(0., 0.), (1., 1.), (2., 0.)])])
    sqr_dist, point, vertex_id, left_of = gc.closest_segment(Point(1., 3.))
    assert sqr_dist == pytest.approx(4.)
    assert (point.x, point.y) == pytest.approx((1., 1.))
    assert vertex_id == VertexId(0, 0, 1)
    assert left_of == -1
    sqr_dist, point, vertex_id, left_of = gc.closest_segment(Point(1., 0.5))
    assert sqr_dist == pytest.approx(0.25)
    assert left_of == 1


def test_compoundcurve_addressing():
    curve = CompoundCurve([
        LineString([(-1., 0.), (0., 0.)]),
        CircularString([(0., 0.), (1., 1.), (2., 0.)]),
        ])
    gc = GeometryCollection([curve])
    assert gc.n_coordinates == 4
    assert [point.tuple for _, point in gc.iter_vertices()] == [
        (-1., 0.), (0., 0.), (1., 1.), (2., 0.)
        ]
    assert gc.has_curved_segments()
    assert gc.length == pytest.approx(1. + math.pi)


def test_compoundcurve_editing_at_join():
    curve = CompoundCurve([
        LineString([(-1., 0.), (0., 0.)]),
        CircularString([(0., 0.), (1., 1.), (2., 0.)]),
        ])
    gc = GeometryCollection([curve])
    assert gc.insert_vertex(VertexId(0, 0, 1), Point(-0.5, 0.))
    assert curve.curves[0].n_coordinates == 3
    assert curve.n_coordinates == 5
    assert gc.move_vertex(VertexId(0, 0, 2), Point(0., -1.))
    assert curve.curves[0].coords_array[2].tolist() == [0., -1.]
    assert curve.curves[1].coords_array[0].tolist() == [0., -1.]
    assert gc.delete_vertex(VertexId(0, 0, 1))
    assert gc.delete_vertex(VertexId(0, 0, 1))
    assert len(curve.curves) == 1
    assert curve.coords_array.tolist() == [[-1., 0.], [1., 1.], [2., 0.]]


def test_segmentize_interpolates_z():
    arc = CircularString([(0., 0., 0.), (1., 1., 5.), (2., 0., 10.)])
    segmentized = arc.segmentize()
    z = segmentized.coords_array[:, 2]
    assert z[0] == 0.
    assert z[-1] == 10.
    assert (z[1:] >= z[:-1]).all()


# WKB.

@pytest.mark.parametrize("is_3D,is_measure", DIMENSIONS)
def test_wkb_round_trip(is_3D, is_measure):
    gc = _make_collection(is_3D, is_measure)
    wkb = gc.as_wkb()
    assert len(wkb) == gc.wkb_size()
    assert from_wkb(wkb) == gc
    assert from_wkb(gc.as_ewkb()) == gc
    assert from_wkb(wkb.hex()) == gc
    assert from_wkb(wkb.hex().upper()) == gc


def test_wkb_type_codes():
    gc = GeometryCollection([Point(1., 2., 3.)], is_3D=True)
    assert struct.unpack("<I", gc.as_wkb()[1:5])[0] == 1007
    assert struct.unpack("<I", gc.as_ewkb()[1:5])[0] == 0x80000007


def test_wkb_big_endian():
    wkb = (struct.pack(">BII", 0, 7, 2)
           + struct.pack(">BIdd", 0, 1, 1., 2.)
           + struct.pack("<BII", 1, 2, 2) + struct.pack("<4d", 0., 0., 1., 1.))
    gc = from_wkb(wkb)
    assert gc == GeometryCollection([Point(1., 2.),
                                     LineString([(0., 0.), (1., 1.)])])


def test_wkb_with_srid():
    wkb = struct.pack("<BIIdd", 1, 0x20000001, 4326, 1., 2.)
    assert from_wkb(wkb) == Point(1., 2.)


def test_wkb_truncated():
    wkb = _make_collection(True, True).as_wkb()
    for size in range(len(wkb)):
        with pytest.raises(TypeError):
            from_wkb(wkb[:size])


def test_wkb_malformed():
    with pytest.raises(TypeError):
        from_wkb(struct.pack("<BI", 1, 99))
    with pytest.raises(TypeError):
        from_wkb(struct.pack("<BI", 5, 1))
    with pytest.raises(TypeError):
        from_wkb("not hex")
    with pytest.raises(TypeError):
        LineString.from_wkb(Point(1., 2.).as_wkb())


# WKT.

@pytest.mark.parametrize("is_3D,is_measure", DIMENSIONS)
def test_wkt_round_trip(is_3D, is_measure):
    gc = _make_collection(is_3D, is_measure)
    assert from_wkt(gc.as_wkt()) == gc


def test_wkt_output():
    gc = GeometryCollection(
        [Point(1., 2., m=3.),
         Polygon([[(0., 0.), (1., 0.), (1., 1.), (0., 0.)]])],
        is_measure=True
        )
    assert gc.as_wkt() == ("GEOMETRYCOLLECTION M (POINT M (1 2 3), "
                           "POLYGON ((0 0, 1 0, 1 1, 0 0)))")
    multi_point = MultiPoint([Point(1., 2.), Point(3., 4.)])
    assert multi_point.as_wkt() == "MULTIPOINT ((1 2), (3 4))"
    assert Point(1. / 3., 2. / 3.).as_wkt(3) == "POINT (0.333 0.667)"
    assert Point().as_wkt() == "POINT EMPTY"


def test_wkt_exact_round_trip():
    point = Point(0.1, 1. / 3.)
    assert from_wkt(point.as_wkt()) == point


def test_wkt_parsing_variants():
    expected = LineString([(0., 0., 1., 2.), (1., 1., 3., 4.)])
    assert from_wkt("LineStringZM (0 0 1 2, 1 1 3 4)") == expected
    assert from_wkt("linestring zm(0 0 1 2,1 1 3 4)") == expected
    assert from_wkt("LINESTRING (0 0 1, 1 1 2)").is_3D
    measured = from_wkt("LINESTRING M (0 0 1, 1 1 2)")
    assert measured.is_measure
    assert not measured.is_3D
    assert from_wkt("MULTIPOINT (1 2, 3 4)") == MultiPoint([Point(1., 2.),
                                                            Point(3., 4.)])
    assert from_wkt("GEOMETRYCOLLECTION EMPTY") == GeometryCollection()
    assert from_wkt("POINT Z EMPTY").is_3D


@pytest.mark.parametrize("wkt", [
    "",
    "POINT (1 2) POINT (3 4)",
    "POINT Z (1 2)",
    "POINT (1)",
    "LINESTRING (0 0, 1 1 1)",
    "LINESTRING (0 0, 1 1",
    "TRIANGLE ((0 0, 1 0, 0 1, 0 0))",
    "POLYGON (LINESTRING (0 0, 1 0, 1 1, 0 0))",
    "GEOMETRYCOLLECTION ((0 0, 1 1))",
    "MULTIPOINT (LINESTRING (0 0, 1 1))",
    "POINT ZZ (1 2)",
    "POINT (1 2) ;",
])
def test_wkt_malformed(wkt):
    with pytest.raises(TypeError):
        from_wkt(wkt)


def test_from_wkt_checks_type():
    with pytest.raises(TypeError):
        LineString.from_wkt("POINT (1 2)")
    assert coll.MultiCurve.from_wkt("MULTILINESTRING ((0 0, 1 1))") == (
        MultiLineString([LineString([(0., 0.), (1., 1.)])])
        )
