"""Tests for numcoll.transform and the transform adapter of geometries."""

import math

import numpy as np
import pytest

from numcoll.coll import GeometryCollection
from numcoll.geom import LineString, Point
from numcoll.transform import (
    Affine2D,
    AffineTransformer,
    ProjTransformer,
    TransformError,
    Transformer,
)


class FailingTransformer(Transformer):
    """Transformer that always fails."""

    def forward(self, x, y, z=None):
        raise TransformError("always fails")

    reverse = forward


class ShiftZTransformer(Transformer):
    """Transformer that shifts z by 100 and leaves x and y unchanged."""

    def forward(self, x, y, z=None):
        return (x, y, None if z is None else z + 100.)

    def reverse(self, x, y, z=None):
        return (x, y, None if z is None else z - 100.)


def test_affine_translation():
    affine = Affine2D.from_translation(5., -2.)
    assert affine.apply(1., 1.) == (6., -1.)
    assert Affine2D().apply(3., 4.) == (3., 4.)


def test_affine_compose_order():
    translate = Affine2D.from_translation(1., 0.)
    scale = Affine2D.from_scale(2.)
    # Note: translate @ scale scales first.
    assert (translate @ scale).apply(1., 1.) == (3., 2.)
    assert (scale @ translate).apply(1., 1.) == (4., 2.)


def test_affine_inverse():
    affine = (Affine2D.from_rotation(math.pi / 6.)
              @ Affine2D.from_translation(3., 4.))
    x, y = affine.inverse().apply(*affine.apply(7., -1.))
    assert (x, y) == pytest.approx((7., -1.))
    with pytest.raises(TransformError):
        Affine2D.from_scale(0.).inverse()


def test_affine_bad_matrix():
    with pytest.raises(TypeError):
        Affine2D([[1., 0.], [0., 1.]])
    with pytest.raises(TypeError):
        Affine2D("not a matrix")


def test_affine_transformer_round_trip():
    transformer = AffineTransformer(Affine2D.from_scale(2., 3.))
    gc = GeometryCollection([LineString([(1., 1.), (2., 2.)])])
    assert gc.transform(transformer)
    assert gc.geoms[0].coords_array.tolist() == [[2., 3.], [4., 6.]]
    assert gc.transform(transformer, "reverse")
    assert gc.geoms[0].coords_array.ravel().tolist() == pytest.approx(
        [1., 1., 2., 2.]
        )


def test_transform_direction_is_validated():
    gc = GeometryCollection([Point(1., 2.)])
    with pytest.raises(TypeError):
        gc.transform(ShiftZTransformer(), "SIDEWAYS")


def test_transform_z_is_optional():
    gc = GeometryCollection([Point(1., 2., 3.)], is_3D=True)
    assert gc.transform(ShiftZTransformer())
    assert gc.geoms[0].z == 3.
    assert gc.transform(ShiftZTransformer(), transform_z=True)
    assert gc.geoms[0].z == 103.


def test_failed_transform_returns_false():
    gc = GeometryCollection([Point(1., 2.)])
    assert not gc.transform(FailingTransformer())


def test_proj_transformer():
    transformer = ProjTransformer("EPSG:4326", "EPSG:3857")
    x, y, z = transformer.forward(np.array([10.]), np.array([0.]))
    assert z is None
    assert x[0] == pytest.approx(1113194.908, abs=1e-3)
    assert y[0] == pytest.approx(0., abs=1e-6)
    x, y, _ = transformer.reverse(x, y)
    assert (x[0], y[0]) == pytest.approx((10., 0.))


def test_proj_transform_collection():
    gc = GeometryCollection([Point(10., 0.),
                             LineString([(0., 0.), (10., 0.)])])
    assert gc.transform(ProjTransformer("EPSG:4326", "EPSG:3857"))
    assert gc.geoms[0].x == pytest.approx(1113194.908, abs=1e-3)
    assert gc.geoms[1].coords_array[1, 0] == pytest.approx(1113194.908,
                                                           abs=1e-3)


def test_proj_transformer_invalid_crs():
    with pytest.raises(TransformError):
        ProjTransformer("EPSG:4326", "not a crs")
