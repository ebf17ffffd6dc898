"""
Export geometries to GML2, GML3, GeoJSON, and KML.

Each as_*() function takes a Geometry (including collections) and a precision,
the maximum number of digits written after the decimal point (None for the
shortest text that round-trips exactly). GML and KML are built with
xml.etree.ElementTree and returned as text fragments. Circular arcs are
segmentized where the format cannot represent them.
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

GML_NAMESPACE = "http://www.opengis.net/gml"
GML_PREFIX = "gml"



###############################################################################
# IMPORT                                                                      #
###############################################################################

# Import internal (intra-package).
from numcoll import coll as _coll
from numcoll import geom as _geom
from numcoll import opt as _opt

# Import external.
import json as _json
import xml.etree.ElementTree as _ElementTree



###############################################################################
# LOCALIZATION                                                                #
###############################################################################

_DEFAULT_PRECISION = _opt.DEFAULT_PRECISION
_DEFAULT_KML_ALTITUDE_MODE = _opt.DEFAULT_KML_ALTITUDE_MODE
_format_coords_text = _geom._format_coords_text
_format_number = _geom.format_number
_ElementTree.register_namespace(GML_PREFIX, GML_NAMESPACE)
_Element = _ElementTree.Element
_SubElement = _ElementTree.SubElement



###############################################################################
# GENERAL SUPPORT                                                             #
###############################################################################

def _lookup(dispatch, geom, format_name):
    """
    Find the writer registered for the type of geom (or its nearest base).
    """
    for geom_type in type(geom).__mro__:
        writer = dispatch.get(geom_type)
        if writer is not None:
            return writer
    raise TypeError(
        "{} cannot be exported to {}".format(type(geom).__name__, format_name)
        )


def _fetch_xyz(coords_array, is_3D):
    "Return the x, y, and (if is_3D) z columns, dropping any m column."
    return coords_array[:,:3] if is_3D else coords_array[:,:2]


def _element_to_string(element):
    return _ElementTree.tostring(element, encoding="unicode")



###############################################################################
# GML                                                                         #
###############################################################################

def _gml(tag):
    return "{{{}}}{}".format(GML_NAMESPACE, tag)


def _gml_sub(parent, tag, **attrib):
    return _SubElement(parent, _gml(tag), attrib)


## GML2. ##

def _gml2_coordinates(parent, geom, coords_array, precision):
    coordinates = _gml_sub(parent, "coordinates", cs=",", ts=" ")
    coordinates.text = _format_coords_text(
        _fetch_xyz(coords_array, geom.is_3D), precision, ",", " "
        )
    return coordinates


def _gml2_point(geom, precision):
    element = _Element(_gml("Point"))
    _gml2_coordinates(element, geom, geom._fetch_all_coords(), precision)
    return element


def _gml2_curve(geom, precision):
    if geom.has_curved_segments():
        geom = geom.segmentize()
    element = _Element(_gml("LineString"))
    _gml2_coordinates(element, geom, geom.coords_array, precision)
    return element


def _gml2_polygon(geom, precision):
    if geom.has_curved_segments():
        geom = geom.segmentize()
    element = _Element(_gml("Polygon"))
    for idx, ring in enumerate(geom.boundary):
        boundary = _gml_sub(element,
                            "outerBoundaryIs" if idx == 0 else "innerBoundaryIs")
        linear_ring = _gml_sub(boundary, "LinearRing")
        _gml2_coordinates(linear_ring, ring, ring.coords_array, precision)
    return element


def _make_gml_collection_writer(dispatch, tag, member_tag, segmentize=False):
    def write_collection(geom, precision):
        if segmentize:
            geom = geom.segmentize()
        element = _Element(_gml(tag))
        for part in geom.geoms:
            member = _gml_sub(element, member_tag)
            member.append(to_gml_element(part, precision, dispatch))
        return element
    return write_collection


_gml2_dispatch = {}
_gml2_dispatch.update({
    _geom.Point: _gml2_point,
    _geom.Curve: _gml2_curve,
    _geom.CurvePolygon: _gml2_polygon,
    _coll.GeometryCollection: _make_gml_collection_writer(
        _gml2_dispatch, "MultiGeometry", "geometryMember"
        ),
    _coll.MultiPoint: _make_gml_collection_writer(
        _gml2_dispatch, "MultiPoint", "pointMember"
        ),
    _coll.MultiCurve: _make_gml_collection_writer(
        _gml2_dispatch, "MultiLineString", "lineStringMember", True
        ),
    _coll.MultiSurface: _make_gml_collection_writer(
        _gml2_dispatch, "MultiPolygon", "polygonMember", True
        ),
    })


## GML3. ##

def _gml3_pos_list(parent, geom, coords_array, precision, tag="posList"):
    pos_list = _gml_sub(parent, tag,
                        srsDimension="3" if geom.is_3D else "2")
    pos_list.text = _format_coords_text(
        _fetch_xyz(coords_array, geom.is_3D), precision, " ", " "
        )
    return pos_list


def _gml3_point(geom, precision):
    element = _Element(_gml("Point"))
    _gml3_pos_list(element, geom, geom._fetch_all_coords(), precision, "pos")
    return element


def _gml3_linestring(geom, precision):
    element = _Element(_gml("LineString"))
    _gml3_pos_list(element, geom, geom.coords_array, precision)
    return element


def _gml3_circularstring(geom, precision):
    element = _Element(_gml("Curve"))
    segments = _gml_sub(element, "segments")
    arc_string = _gml_sub(segments, "ArcString")
    _gml3_pos_list(arc_string, geom, geom.coords_array, precision)
    return element


def _gml3_compoundcurve(geom, precision):
    element = _Element(_gml("CompositeCurve"))
    for curve in geom.curves:
        member = _gml_sub(element, "curveMember")
        member.append(to_gml_element(curve, precision, _gml3_dispatch))
    return element


def _gml3_polygon(geom, precision):
    element = _Element(_gml("Polygon"))
    for idx, ring in enumerate(geom.boundary):
        boundary = _gml_sub(element, "exterior" if idx == 0 else "interior")
        if type(ring) is _geom.LineString:
            linear_ring = _gml_sub(boundary, "LinearRing")
            _gml3_pos_list(linear_ring, ring, ring.coords_array, precision)
        else:
            curve_ring = _gml_sub(boundary, "Ring")
            member = _gml_sub(curve_ring, "curveMember")
            member.append(to_gml_element(ring, precision, _gml3_dispatch))
    return element


_gml3_dispatch = {}
_gml3_dispatch.update({
    _geom.Point: _gml3_point,
    _geom.LineString: _gml3_linestring,
    _geom.CircularString: _gml3_circularstring,
    _geom.CompoundCurve: _gml3_compoundcurve,
    _geom.CurvePolygon: _gml3_polygon,
    _coll.GeometryCollection: _make_gml_collection_writer(
        _gml3_dispatch, "MultiGeometry", "geometryMember"
        ),
    _coll.MultiPoint: _make_gml_collection_writer(
        _gml3_dispatch, "MultiPoint", "pointMember"
        ),
    _coll.MultiCurve: _make_gml_collection_writer(
        _gml3_dispatch, "MultiCurve", "curveMember"
        ),
    _coll.MultiSurface: _make_gml_collection_writer(
        _gml3_dispatch, "MultiSurface", "surfaceMember"
        ),
    })


def to_gml_element(geom, precision=_DEFAULT_PRECISION, dispatch=None):
    """
    Return an ElementTree Element that represents geom in GML.

    dispatch is a dict that maps geometry types to writers (GML2 by default).
    """
    if dispatch is None:
        dispatch = _gml2_dispatch
    return _lookup(dispatch, geom, "GML")(geom, precision)


def as_gml2(geom, precision=_DEFAULT_PRECISION):
    """
    Return a GML2 fragment that represents geom.

    Coordinates are written in <gml:coordinates> elements (cs=",", ts=" ").
    Curves are segmentized. An empty collection is written as a self-closed
    <gml:MultiGeometry />.
    """
    return _element_to_string(to_gml_element(geom, precision, _gml2_dispatch))


def as_gml3(geom, precision=_DEFAULT_PRECISION):
    """
    Return a GML3 fragment that represents geom.

    Coordinates are written in <gml:posList> (or <gml:pos>) elements with an
    srsDimension of 2 or 3. Circular strings are written as
    <gml:ArcString> segments.
    """
    return _element_to_string(to_gml_element(geom, precision, _gml3_dispatch))



###############################################################################
# GEOJSON                                                                     #
###############################################################################

def _json_coords(geom, coords_array, precision):
    rows = _fetch_xyz(coords_array, geom.is_3D).tolist()
    if precision is None:
        return rows
    return [[round(value, precision) for value in row] for row in rows]


def _json_point(geom, precision):
    if geom.is_empty:
        return {"type": "Point", "coordinates": []}
    return {"type": "Point",
            "coordinates": _json_coords(geom, geom._fetch_all_coords(),
                                        precision)[0]}


def _json_curve(geom, precision):
    if geom.has_curved_segments():
        geom = geom.segmentize()
    return {"type": "LineString",
            "coordinates": _json_coords(geom, geom.coords_array, precision)}


def _json_polygon(geom, precision):
    if geom.has_curved_segments():
        geom = geom.segmentize()
    return {"type": "Polygon",
            "coordinates": [_json_coords(ring, ring.coords_array, precision)
                            for ring in geom.boundary]}


def _make_json_multi_writer(type_name):
    def write_multi(geom, precision):
        geom = geom.segmentize()
        return {"type": type_name,
                "coordinates": [to_geojson_dict(part, precision)["coordinates"]
                                for part in geom.geoms]}
    return write_multi


def _json_collection(geom, precision):
    return {"type": "GeometryCollection",
            "geometries": [to_geojson_dict(part, precision)
                           for part in geom.geoms]}


_json_dispatch = {
    _geom.Point: _json_point,
    _geom.Curve: _json_curve,
    _geom.CurvePolygon: _json_polygon,
    _coll.GeometryCollection: _json_collection,
    _coll.MultiPoint: _make_json_multi_writer("MultiPoint"),
    _coll.MultiCurve: _make_json_multi_writer("MultiLineString"),
    _coll.MultiSurface: _make_json_multi_writer("MultiPolygon"),
    }


def to_geojson_dict(geom, precision=_DEFAULT_PRECISION):
    """
    Return a dict that represents geom as a GeoJSON geometry object.

    m-coordinates are dropped and curves are segmentized.
    """
    return _lookup(_json_dispatch, geom, "GeoJSON")(geom, precision)


def as_json(geom, precision=_DEFAULT_PRECISION):
    """
    Return GeoJSON text that represents geom.

    The text is compact and its keys are sorted, e.g.,
        {"geometries":[...],"type":"GeometryCollection"}
    precision is applied by rounding every coordinate.
    """
    return _json.dumps(to_geojson_dict(geom, precision), sort_keys=True,
                       separators=(",", ":"))



###############################################################################
# KML                                                                         #
###############################################################################

def _kml_coordinates(parent, geom, coords_array, precision):
    """
    Add <altitudeMode> and <coordinates> (x,y,z triples) to parent.

    The z-coordinate is written as 0 if geom is not 3D.
    """
    _SubElement(parent, "altitudeMode").text = (
        "absolute" if geom.is_3D else _DEFAULT_KML_ALTITUDE_MODE
        )
    if geom.is_3D:
        rows = coords_array[:,:3].tolist()
    else:
        rows = [row + [0.] for row in coords_array[:,:2].tolist()]
    _SubElement(parent, "coordinates").text = " ".join([
        ",".join([_format_number(value, precision) for value in row])
        for row in rows
        ])


def _kml_point(geom, precision):
    element = _Element("Point")
    _kml_coordinates(element, geom, geom._fetch_all_coords(), precision)
    return element


def _kml_curve(geom, precision):
    if geom.has_curved_segments():
        geom = geom.segmentize()
    coords_array = geom.coords_array
    tag = ("LinearRing"
           if len(coords_array) >= _geom.MIN_RING_VERTEX_COUNT
           and geom.is_closed() else "LineString")
    element = _Element(tag)
    _kml_coordinates(element, geom, coords_array, precision)
    return element


def _kml_polygon(geom, precision):
    if geom.has_curved_segments():
        geom = geom.segmentize()
    element = _Element("Polygon")
    for idx, ring in enumerate(geom.boundary):
        boundary = _SubElement(
            element, "outerBoundaryIs" if idx == 0 else "innerBoundaryIs"
            )
        linear_ring = _SubElement(boundary, "LinearRing")
        _kml_coordinates(linear_ring, ring, ring.coords_array, precision)
    return element


def _kml_collection(geom, precision):
    element = _Element("MultiGeometry")
    for part in geom.geoms:
        element.append(to_kml_element(part, precision))
    return element


_kml_dispatch = {
    _geom.Point: _kml_point,
    _geom.Curve: _kml_curve,
    _geom.CurvePolygon: _kml_polygon,
    _coll.GeometryCollection: _kml_collection,
    }


def to_kml_element(geom, precision=_DEFAULT_PRECISION):
    "Return an ElementTree Element that represents geom in KML."
    return _lookup(_kml_dispatch, geom, "KML")(geom, precision)


def as_kml(geom, precision=_DEFAULT_PRECISION):
    """
    Return a KML fragment that represents geom.

    Closed curves with at least 4 vertices are written as <LinearRing>, and
    collections as <MultiGeometry>. 2D geometries are clamped to the ground
    (with a z-coordinate of 0), whereas 3D geometries use absolute altitudes.
    """
    return _element_to_string(to_kml_element(geom, precision))
