"""Tests for the ConvertScript conversion workflow."""

import json

import pytest

from numcoll.coll import GeometryCollection
from numcoll.geom import LineString, Point, from_wkt
from numcoll.scripts.convert import ConvertScript


@pytest.fixture
def in_path(tmp_path):
    """Input file mixing WKT, hex WKB, comments, and blank lines."""
    path = tmp_path / "shapes.txt"
    path.write_text(
        "# Shapes to convert.\n"
        "POINT (1 2)\n"
        "\n"
        + LineString([(0., 0.), (0., 0.), (3., 4.)]).as_wkb().hex() + "\n"
        )
    return path


def test_default_paths(in_path, tmp_path):
    collection = ConvertScript.process(str(in_path), print_log=False)
    assert collection == GeometryCollection([
        Point(1., 2.), LineString([(0., 0.), (0., 0.), (3., 4.)])
        ])
    out_text = (tmp_path / "shapes_converted.wkt").read_text()
    assert out_text == ("GEOMETRYCOLLECTION (POINT (1 2), "
                        "LINESTRING (0 0, 0 0, 3 4))\n")
    log_text = (tmp_path / "shapes_log.txt").read_text()
    assert 'out_format = r"WKT"' in log_text
    assert "started reading" in log_text
    assert "ended overall processing" in log_text


@pytest.mark.parametrize("out_format,ext", [
    ("WKB", ".wkb.txt"),
    ("gml2", ".gml"),
    ("GML3", ".gml"),
    ("json", ".geojson"),
    ("KML", ".kml"),
])
def test_output_formats(in_path, tmp_path, out_format, ext):
    ConvertScript.process(str(in_path), out_format=out_format,
                          output_log=False, print_log=False)
    out_path = tmp_path / ("shapes_converted" + ext)
    assert out_path.exists()
    assert not (tmp_path / "shapes_log.txt").exists()
    text = out_path.read_text().strip()
    if out_format == "WKB":
        assert GeometryCollection.from_wkb(text).num_geometries == 2
    elif out_format == "json":
        assert json.loads(text)["type"] == "GeometryCollection"
    elif out_format == "KML":
        assert text.startswith("<MultiGeometry>")
    else:
        assert text.startswith("<gml:MultiGeometry")


def test_remove_duplicate_nodes(in_path, tmp_path):
    out_path = tmp_path / "clean.wkt"
    collection = ConvertScript.process(
        str(in_path), str(out_path), duplicate_tolerance=1e-8, precision=1,
        output_log=False, print_log=False
        )
    assert collection.geoms[1].n_coordinates == 2
    assert from_wkt(out_path.read_text()) == collection


def test_reprojection(in_path, tmp_path):
    collection = ConvertScript.process(
        str(in_path), str(tmp_path / "out.wkt"), src_crs="EPSG:4326",
        dst_crs="EPSG:3857", output_log=False, print_log=False
        )
    assert collection.geoms[0].x == pytest.approx(111319.491, abs=1e-3)


def test_bad_options(in_path):
    with pytest.raises(TypeError):
        ConvertScript.process(str(in_path), out_format="SHP",
                              print_log=False)
    with pytest.raises(TypeError):
        ConvertScript.process(str(in_path), src_crs="EPSG:4326",
                              print_log=False)


def test_undecodable_line_is_skipped(tmp_path):
    path = tmp_path / "bad.txt"
    path.write_text("POINT (1 2)\nPOINT (oops)\n")
    with pytest.warns(UserWarning, match="line 2"):
        collection = ConvertScript.process(str(path), output_log=False,
                                           print_log=False)
    assert collection == GeometryCollection([Point(1., 2.)])


def test_deeply_nested_line_is_skipped(tmp_path):
    path = tmp_path / "nested.txt"
    path.write_text("GEOMETRYCOLLECTION (" * 5000 + ")" * 5000
                    + "\nPOINT (1 2)\n")
    with pytest.warns(UserWarning, match="line 1"):
        collection = ConvertScript.process(str(path), output_log=False,
                                           print_log=False)
    assert collection == GeometryCollection([Point(1., 2.)])


def test_external_settings(in_path, tmp_path):
    ConvertScript.process(str(in_path), out_format="JSON", precision=2,
                          print_log=False)
    log_path = tmp_path / "shapes_log.txt"
    out_path = tmp_path / "shapes_converted.geojson"
    first_text = out_path.read_text()
    out_path.unlink()
    ConvertScript.process.external(str(log_path), output_log=False)
    assert out_path.read_text() == first_text
