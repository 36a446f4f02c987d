from typing import Any, Optional

import numpy as np

from geometry.Bounds2 import Bounds2
from geometry.Emitter import Emitter
from geometry.Errors import IllDefinedTransformError
from geometry.GeoUtil import GeoUtil
from geometry.Matrix3 import Matrix3
from geometry.Ray2 import Ray2
from geometry.Vector2 import Vector2


class AffineTransform:
    """Forward and inverse transforms with a 3x3 homogeneous matrix.

    Methods starting with ``transform`` apply the primary matrix, methods starting with
    ``inverse`` apply its inverse, so generally
    ``t.inverse_thing(t.transform_thing(thing)) == thing``.

    The inverse, transpose and inverse-transpose are computed on first read after a
    change and kept until the primary matrix changes again.
    """

    def __init__(self, m: Optional[np.ndarray] = None):
        self._matrix = Matrix3.identity()
        self._inverse: Optional[np.ndarray] = None
        self._transposed: Optional[np.ndarray] = None
        self._inverse_transposed: Optional[np.ndarray] = None
        self.change_emitter = Emitter()
        if m is not None:
            self.set_matrix(m)

    # -----------------------------
    # Mutators
    # -----------------------------

    def set_matrix(self, m: np.ndarray) -> None:
        """Replace the primary matrix by value (the caller's array is never kept)."""
        Matrix3.validate(m)
        self._matrix = np.array(m, dtype=float)
        self._invalidate()

    def prepend(self, m: np.ndarray) -> None:
        """self.matrix = m @ self.matrix"""
        Matrix3.validate(m)
        product = m @ self._matrix
        Matrix3.validate(product)
        self._matrix = product
        self._invalidate()

    def append(self, m: np.ndarray) -> None:
        """self.matrix = self.matrix @ m"""
        Matrix3.validate(m)
        product = self._matrix @ m
        Matrix3.validate(product)
        self._matrix = product
        self._invalidate()

    def prepend_translation(self, x: float, y: float) -> None:
        """self.matrix = translation(x, y) @ self.matrix, without a full multiply."""
        x = GeoUtil.require_finite(x, "prepended translation x")
        y = GeoUtil.require_finite(y, "prepended translation y")
        m = self._matrix.copy()
        # for an affine matrix the bottom row is (0, 0, 1)
        m[0, :] += x * m[2, :]
        m[1, :] += y * m[2, :]
        Matrix3.validate(m)
        self._matrix = m
        self._invalidate()

    def prepend_transform(self, transform: "AffineTransform") -> None:
        self.prepend(transform._matrix)

    def append_transform(self, transform: "AffineTransform") -> None:
        self.append(transform._matrix)

    def _invalidate(self) -> None:
        self._inverse = None
        self._transposed = None
        self._inverse_transposed = None
        self.change_emitter.emit()

    def apply_to_context(self, context: Any) -> None:
        """Set a canvas-like context's transform to this matrix."""
        m = self._matrix
        context.set_transform(m[0, 0], m[1, 0], m[0, 1], m[1, 1], m[0, 2], m[1, 2])

    # -----------------------------
    # Getters
    # -----------------------------

    def copy(self) -> "AffineTransform":
        # independent copy: derived matrices are recomputed on demand
        return AffineTransform(self._matrix)

    def get_matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    def get_inverse(self) -> np.ndarray:
        # np.linalg.LinAlgError propagates for singular matrices
        if self._inverse is None:
            self._inverse = np.linalg.inv(self._matrix)
        return self._inverse

    def get_matrix_transposed(self) -> np.ndarray:
        if self._transposed is None:
            self._transposed = self._matrix.T.copy()
        return self._transposed

    def get_inverse_transposed(self) -> np.ndarray:
        if self._inverse_transposed is None:
            self._inverse_transposed = self.get_inverse().T.copy()
        return self._inverse_transposed

    def is_identity(self) -> bool:
        """True only when the matrix is exactly the identity. False does not prove otherwise."""
        return Matrix3.is_fast_identity(self._matrix)

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self._matrix)))

    # -----------------------------
    # Forward transforms
    # -----------------------------

    def transform_position2(self, v: Vector2) -> Vector2:
        """Transform v as a position (translation applied)."""
        return Matrix3.times_vector2(self._matrix, v)

    def transform_delta2(self, v: Vector2) -> Vector2:
        """Transform v as a direction (translation ignored)."""
        return Matrix3.times_relative_vector2(self._matrix, v)

    def transform_normal2(self, v: Vector2) -> Vector2:
        """Transform v as a normal to a curve: inverse-transpose, then normalized."""
        return Matrix3.times_transpose_vector2(self.get_inverse(), v).normalized()

    def transform_x(self, x: float) -> float:
        m = self._matrix
        if m[0, 1]:
            raise IllDefinedTransformError("Transforming an X value with a rotation/shear is ill-defined")
        return float(m[0, 0] * x + m[0, 2])

    def transform_y(self, y: float) -> float:
        m = self._matrix
        if m[1, 0]:
            raise IllDefinedTransformError("Transforming a Y value with a rotation/shear is ill-defined")
        return float(m[1, 1] * y + m[1, 2])

    def transform_delta_x(self, x: float) -> float:
        m = self._matrix
        if m[0, 1]:
            raise IllDefinedTransformError("Transforming an X delta with a rotation/shear is ill-defined")
        return float(m[0, 0] * x)

    def transform_delta_y(self, y: float) -> float:
        m = self._matrix
        if m[1, 0]:
            raise IllDefinedTransformError("Transforming a Y delta with a rotation/shear is ill-defined")
        return float(m[1, 1] * y)

    def transform_bounds2(self, bounds: Bounds2) -> Bounds2:
        """Axis-aligned bounds containing the transformed box.

        inverse_bounds2(transform_bounds2(b)) may be larger than b under rotations that
        are not multiples of pi/2.
        """
        return bounds.transformed(self._matrix)

    def transform_ray2(self, ray: Ray2) -> Ray2:
        return Ray2(self.transform_position2(ray.position), self.transform_delta2(ray.direction).normalized())

    # -----------------------------
    # Inverse transforms
    # -----------------------------

    def inverse_position2(self, v: Vector2) -> Vector2:
        return Matrix3.times_vector2(self.get_inverse(), v)

    def inverse_delta2(self, v: Vector2) -> Vector2:
        return Matrix3.times_relative_vector2(self.get_inverse(), v)

    def inverse_normal2(self, v: Vector2) -> Vector2:
        # the inverse of the inverse-transpose is the transpose
        return Matrix3.times_transpose_vector2(self._matrix, v).normalized()

    def inverse_x(self, x: float) -> float:
        m = self.get_inverse()
        if m[0, 1]:
            raise IllDefinedTransformError("Inverting an X value with a rotation/shear is ill-defined")
        return float(m[0, 0] * x + m[0, 2])

    def inverse_y(self, y: float) -> float:
        m = self.get_inverse()
        if m[1, 0]:
            raise IllDefinedTransformError("Inverting a Y value with a rotation/shear is ill-defined")
        return float(m[1, 1] * y + m[1, 2])

    def inverse_delta_x(self, x: float) -> float:
        m = self.get_inverse()
        if m[0, 1]:
            raise IllDefinedTransformError("Inverting an X delta with a rotation/shear is ill-defined")
        return float(m[0, 0] * x)

    def inverse_delta_y(self, y: float) -> float:
        m = self.get_inverse()
        if m[1, 0]:
            raise IllDefinedTransformError("Inverting a Y delta with a rotation/shear is ill-defined")
        return float(m[1, 1] * y)

    def inverse_bounds2(self, bounds: Bounds2) -> Bounds2:
        return bounds.transformed(self.get_inverse())

    def inverse_ray2(self, ray: Ray2) -> Ray2:
        return Ray2(self.inverse_position2(ray.position), self.inverse_delta2(ray.direction).normalized())

    def __repr__(self) -> str:
        return f"AffineTransform({self._matrix.tolist()!r})"
