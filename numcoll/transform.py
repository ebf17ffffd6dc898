"""
Coordinate transformations applied to geometries.

A Transformer maps x-, y-, and (optionally) z-coordinate arrays forward or in
reverse. ProjTransformer delegates to pyproj for transformations between
coordinate reference systems, and Affine2D represents planar affine
transformations.
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
from numcoll import util as _util

# Import external.
import math as _math
import numpy as _numpy
import pyproj as _pyproj
from pyproj.enums import TransformDirection as _TransformDirection
from pyproj.exceptions import ProjError as _ProjError



###############################################################################
# LOCALIZATION                                                                #
###############################################################################

DIRECTIONS = ("FORWARD", "REVERSE")
_numpy_float64 = _numpy.dtype("<f8")
_pyproj_directions = {"FORWARD": _TransformDirection.FORWARD,
                      "REVERSE": _TransformDirection.INVERSE}



###############################################################################
# TRANSFORMERS                                                                #
###############################################################################

class TransformError(RuntimeError):
    "Raised when coordinates cannot be transformed."


class Transformer(object):
    """
    Base class for coordinate transformers.

    Subclasses implement .forward() and .reverse(), each of which takes flat
    numpy arrays x, y, and z (or None) and returns a tuple of the form
        (x, y, z)
    where z is None if it was None on input. Failures must raise a
    TransformError.
    """

    def forward(self, x, y, z=None):
        raise NotImplementedError

    def reverse(self, x, y, z=None):
        raise NotImplementedError

    def transform(self, x, y, z=None, direction="FORWARD"):
        """
        Transform coordinate arrays.

        direction is a string that specifies whether the forward or reverse
        transformation is applied. It may be either "FORWARD" or "REVERSE".
        """
        direction = _util.validate_string_option(direction, "direction",
                                                 DIRECTIONS)
        if direction == "FORWARD":
            return self.forward(x, y, z)
        return self.reverse(x, y, z)


class ProjTransformer(Transformer):
    """
    Transformer between coordinate reference systems, backed by pyproj.
    """

    def __init__(self, src_crs, dst_crs):
        """
        src_crs and dst_crs are anything accepted by pyproj.CRS.from_user_input
        (e.g., "EPSG:4326") that specify the source and destination coordinate
        reference systems. Coordinates are always in (x, y) order, that is,
        (longitude, latitude) for geographic systems.

        Raises a TransformError if no transformation can be constructed.
        """
        try:
            self.proj_transformer = _pyproj.Transformer.from_crs(
                src_crs, dst_crs, always_xy=True
                )
        except _ProjError as e:
            raise TransformError(
                "cannot transform from {!r} to {!r}: {}".format(src_crs,
                                                                dst_crs, e)
                )
        self.src_crs = src_crs
        self.dst_crs = dst_crs

    def __repr__(self):
        return "<{}: {!r} -> {!r}>".format(type(self).__name__, self.src_crs,
                                          self.dst_crs)

    def _transform_arrays(self, x, y, z, direction):
        try:
            if z is None:
                x, y = self.proj_transformer.transform(
                    x, y, errcheck=True, direction=_pyproj_directions[direction]
                    )
            else:
                x, y, z = self.proj_transformer.transform(
                    x, y, z, errcheck=True,
                    direction=_pyproj_directions[direction]
                    )
        except _ProjError as e:
            raise TransformError(str(e))
        x = _numpy.asarray(x, _numpy_float64)
        y = _numpy.asarray(y, _numpy_float64)
        if not (_numpy.isfinite(x).all() and _numpy.isfinite(y).all()):
            raise TransformError("transformation produced non-finite "
                                 "coordinates")
        if z is not None:
            z = _numpy.asarray(z, _numpy_float64)
        return (x, y, z)

    def forward(self, x, y, z=None):
        return self._transform_arrays(x, y, z, "FORWARD")

    def reverse(self, x, y, z=None):
        return self._transform_arrays(x, y, z, "REVERSE")



###############################################################################
# AFFINE TRANSFORMATIONS                                                      #
###############################################################################

class Affine2D(object):
    """
    Planar affine transformation represented by a 3x3 matrix.

    A point (x, y) is transformed to
        (a*x + b*y + c, d*x + e*y + f)
    where
        .matrix = [[a, b, c],
                   [d, e, f],
                   [0, 0, 1]]
    """

    def __init__(self, matrix=None):
        """
        matrix is a 3x3 sequence (or numpy array) that specifies the
        transformation. If matrix is None, the identity is used.
        """
        if matrix is None:
            self.matrix = _numpy.identity(3)
            return
        try:
            self.matrix = _numpy.array(matrix, _numpy_float64)
        except (TypeError, ValueError):
            raise TypeError("matrix must be a 3x3 sequence of numbers")
        if self.matrix.shape != (3, 3):
            raise TypeError("matrix must be a 3x3 sequence of numbers")

    def __repr__(self):
        return "<{}: {}>".format(type(self).__name__,
                                 self.matrix[:2].tolist())

    def __eq__(self, other):
        if not isinstance(other, Affine2D):
            return False
        return _numpy.array_equal(self.matrix, other.matrix)

    __hash__ = None

    def __matmul__(self, other):
        return self.compose(other)

    @classmethod
    def from_translation(cls, dx, dy):
        return cls([[1., 0., dx], [0., 1., dy], [0., 0., 1.]])

    @classmethod
    def from_scale(cls, sx, sy=None):
        "Scale about the origin. If sy is None, sx is used for both axes."
        if sy is None:
            sy = sx
        return cls([[sx, 0., 0.], [0., sy, 0.], [0., 0., 1.]])

    @classmethod
    def from_rotation(cls, angle):
        """
        Rotate counter-clockwise about the origin.

        angle is a float that specifies the rotation in radians.
        """
        cos = _math.cos(angle)
        sin = _math.sin(angle)
        return cls([[cos, -sin, 0.], [sin, cos, 0.], [0., 0., 1.]])

    def compose(self, other):
        """
        Return the transformation that applies other and then self.
        """
        return type(self)(_numpy.dot(self.matrix, other.matrix))

    def inverse(self):
        "Return the inverse transformation. Raises TransformError if singular."
        try:
            return type(self)(_numpy.linalg.inv(self.matrix))
        except _numpy.linalg.LinAlgError:
            raise TransformError("affine transformation is not invertible")

    def apply(self, x, y):
        """
        Transform coordinates.

        x and y are numbers or numpy arrays that specify the coordinates.
        Returns a tuple of the form
            (x, y)
        """
        matrix = self.matrix
        return (matrix[0,0]*x + matrix[0,1]*y + matrix[0,2],
                matrix[1,0]*x + matrix[1,1]*y + matrix[1,2])


class AffineTransformer(Transformer):
    """
    Transformer that applies an Affine2D forward and its inverse in reverse.

    z-coordinates are passed through unchanged.
    """

    def __init__(self, affine):
        self.affine = affine

    def forward(self, x, y, z=None):
        x, y = self.affine.apply(x, y)
        return (x, y, z)

    def reverse(self, x, y, z=None):
        x, y = self.affine.inverse().apply(x, y)
        return (x, y, z)
