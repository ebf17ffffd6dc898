"""Tests for numcoll.export (GML2, GML3, GeoJSON, and KML)."""

import json
import xml.etree.ElementTree as ElementTree

import pytest

from numcoll import export
from numcoll.coll import GeometryCollection, MultiCurve, MultiPoint
from numcoll.geom import CircularString, LineString, Point


GML = "{http://www.opengis.net/gml}"


def test_json_square(square_collection):
    assert square_collection.as_json() == (
        '{"geometries":[{"coordinates":[[0.0,0.0],[0.0,10.0],[10.0,10.0],'
        '[10.0,0.0],[0.0,0.0]],"type":"LineString"}],'
        '"type":"GeometryCollection"}'
        )


def test_json_precision():
    text = GeometryCollection([Point(1.11111, 2. / 3.)]).as_json(3)
    assert json.loads(text)["geometries"][0]["coordinates"] == [1.111, 0.667]


def test_json_drops_m_and_segmentizes():
    gc = GeometryCollection([
        Point(1., 2., 3., 4.),
        CircularString([(0., 0.), (1., 1.), (2., 0.)]),
        ])
    geometries = json.loads(gc.as_json())["geometries"]
    assert geometries[0]["coordinates"] == [1., 2., 3.]
    assert geometries[1]["type"] == "LineString"
    assert len(geometries[1]["coordinates"]) > 3


def test_json_multi_types(holed_polygon):
    multi_point = MultiPoint([Point(1., 2.), Point(3., 4.)])
    assert json.loads(multi_point.as_json()) == {
        "type": "MultiPoint", "coordinates": [[1., 2.], [3., 4.]]
        }
    polygon = json.loads(holed_polygon.as_json())
    assert polygon["type"] == "Polygon"
    assert len(polygon["coordinates"]) == 2
    assert json.loads(GeometryCollection().as_json()) == {
        "type": "GeometryCollection", "geometries": []
        }


def test_kml_square(square_collection):
    assert square_collection.as_kml() == (
        "<MultiGeometry><LinearRing><altitudeMode>clampToGround</altitudeMode>"
        "<coordinates>0,0,0 0,10,0 10,10,0 10,0,0 0,0,0</coordinates>"
        "</LinearRing></MultiGeometry>"
        )


def test_kml_3D_and_open_curves():
    gc = GeometryCollection([LineString([(0., 0., 5.), (1., 1., 6.)])],
                            is_3D=True)
    assert gc.as_kml() == (
        "<MultiGeometry><LineString><altitudeMode>absolute</altitudeMode>"
        "<coordinates>0,0,5 1,1,6</coordinates></LineString></MultiGeometry>"
        )


def test_kml_polygon(holed_polygon):
    element = ElementTree.fromstring(holed_polygon.as_kml())
    assert element.tag == "Polygon"
    assert element.find("outerBoundaryIs/LinearRing/coordinates") is not None
    assert len(element.findall("innerBoundaryIs")) == 1


def test_gml2_empty():
    assert GeometryCollection().as_gml2() == (
        '<gml:MultiGeometry xmlns:gml="http://www.opengis.net/gml" />'
        )


def test_gml2_square(square_collection):
    assert square_collection.as_gml2() == (
        '<gml:MultiGeometry xmlns:gml="http://www.opengis.net/gml">'
        '<gml:geometryMember><gml:LineString>'
        '<gml:coordinates cs="," ts=" ">0,0 0,10 10,10 10,0 0,0'
        '</gml:coordinates></gml:LineString></gml:geometryMember>'
        '</gml:MultiGeometry>'
        )


def test_gml2_polygon_and_curves(holed_polygon):
    element = ElementTree.fromstring(holed_polygon.as_gml2())
    assert element.tag == GML + "Polygon"
    assert len(element.findall(GML + "innerBoundaryIs")) == 1
    multi_curve = MultiCurve([CircularString([(0., 0.), (1., 1.), (2., 0.)])])
    element = ElementTree.fromstring(multi_curve.as_gml2())
    assert element.tag == GML + "MultiLineString"
    line = element.find(GML + "lineStringMember/" + GML + "LineString")
    assert len(line.find(GML + "coordinates").text.split(" ")) > 3


def test_gml3_square(square_collection):
    element = ElementTree.fromstring(square_collection.as_gml3())
    assert element.tag == GML + "MultiGeometry"
    pos_list = element.find(
        GML + "geometryMember/" + GML + "LineString/" + GML + "posList"
        )
    assert pos_list.get("srsDimension") == "2"
    assert pos_list.text == "0 0 0 10 10 10 10 0 0 0"


def test_gml3_curves():
    gc = GeometryCollection([
        Point(1., 2., 3.),
        CircularString([(0., 0.), (1., 1.), (2., 0.)]),
        ], is_3D=True)
    element = ElementTree.fromstring(gc.as_gml3(1))
    members = element.findall(GML + "geometryMember")
    pos = members[0].find(GML + "Point/" + GML + "pos")
    assert pos.get("srsDimension") == "3"
    assert pos.text == "1 2 3"
    arc = members[1].find(GML + "Curve/" + GML + "segments/" + GML
                          + "ArcString/" + GML + "posList")
    assert arc.text == "0 0 1 1 2 0"


def test_gml3_polygon_rings(holed_polygon):
    element = ElementTree.fromstring(holed_polygon.to_curve_type().as_gml3())
    assert element.tag == GML + "Polygon"
    ring = element.find(GML + "exterior/" + GML + "Ring")
    assert ring is not None
    assert ring.find(GML + "curveMember/" + GML + "CompositeCurve") is not None
    element = ElementTree.fromstring(holed_polygon.as_gml3())
    assert element.find(GML + "interior/" + GML + "LinearRing") is not None


def test_unsupported_type():
    with pytest.raises(TypeError):
        export.as_json(object())
