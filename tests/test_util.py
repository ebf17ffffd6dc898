"""Tests for numcoll.util."""

import io

import pytest

from numcoll import util
from numcoll.coll import GeometryCollection
from numcoll.geom import LineString, Point


class Cached(util.Lazy):
    """Lazy subclass that counts how often its attribute is derived."""

    calls = 0

    @staticmethod
    def _get_answer(self):
        type(self).calls += 1
        return 42


def test_validate_string_option():
    options = ("WKT", "WKB", "JSON")
    assert util.validate_string_option("WKB", "fmt", options) == "WKB"
    assert util.validate_string_option("json", "fmt", options) == "JSON"
    with pytest.raises(TypeError, match="fmt"):
        util.validate_string_option("csv", "fmt", options)
    with pytest.raises(TypeError):
        util.validate_string_option(None, "fmt", options)


def test_slide_pairwise():
    assert list(util.slide_pairwise(range(4))) == [(0, 1), (1, 2), (2, 3)]
    assert list(util.slide_pairwise([])) == []


def test_read_settings(tmp_path):
    path = tmp_path / "settings.txt"
    path.write_text(
        "# Comment.\n"
        'in_path = r"C:\\data\\in.txt"\n'
        "precision = 3\n"
        "src_crs = None  # [no keyword match]\n"
        '"""\n'
        "Log...\n"
        "started reading\n"
        '"""\n'
        "output_log = False\n"
        )
    assert util.read_settings(str(path)) == {
        "in_path": "C:\\data\\in.txt",
        "precision": 3,
        "src_crs": None,
        "output_log": False,
        }


def test_read_settings_malformed(tmp_path):
    path = tmp_path / "settings.txt"
    path.write_text("precision = open('x')\n")
    with pytest.raises(TypeError):
        util.read_settings(str(path))


def test_lazy_attributes():
    Cached.calls = 0
    cached = Cached()
    assert cached.answer == 42
    assert cached.answer == 42
    assert Cached.calls == 1
    assert "answer" in dir(cached)
    cached._Lazy__clear_lazy()
    assert cached.answer == 42
    assert Cached.calls == 2
    with pytest.raises(AttributeError):
        cached.question


def test_log_print_timing(capsys):
    log = io.StringIO()
    logger = util.LogPrintTiming(log, stdout=False)
    logger.start("reading", time=0.)
    logger.end("reading", GeometryCollection([Point(1., 2.)]), time=120.)
    lines = log.getvalue().splitlines()
    assert lines[0].endswith(": started reading")
    assert lines[1].startswith(" ")
    assert lines[1].endswith(
        ": ended reading, for GeometryCollection (geometry_type="
        "'GeometryCollection') (took 2.0 minutes)"
        )
    assert capsys.readouterr().out == ""


def test_log_print_timing_kwargs(capsys):
    def convert(in_path, precision=None, out_format="WKT"):
        pass

    log = io.StringIO()
    logger = util.LogPrintTiming(log)
    unmatched = logger.write_kwargs({"in_path": "in.txt", "extra": 1},
                                    convert)
    assert unmatched == ["extra"]
    text = log.getvalue()
    assert 'in_path = r"in.txt"\n' in text
    assert "precision = None\n" in text
    assert 'out_format = r"WKT"\n' in text
    assert "extra = 1  # [no keyword match]\n" in text
    assert capsys.readouterr().out == text


def test_log_print_timing_geom_text():
    logger = util.LogPrintTiming(None, stdout=False, desc=".n_coordinates")
    line = LineString([(0., 0.), (1., 1.)])
    assert logger.generate_geom_text(line) == "LineString (n_coordinates=2)"
    assert logger.generate_geom_text(line, lambda geom: "custom") == "custom"
    with pytest.raises(TypeError):
        logger.generate_geom_text(line, "n_coordinates")
