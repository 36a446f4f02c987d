import math
from typing import Any, Optional

import numpy as np

from geometry.Errors import InvalidGeometryError
from geometry.Vector2 import Vector2


class Matrix3:
    """Helpers for 3x3 homogeneous matrices stored as numpy arrays of shape (3,3).

    Points are column vectors [x,y,1]^T.
    """

    @staticmethod
    def identity() -> np.ndarray:
        return np.eye(3, dtype=float)

    @staticmethod
    def row_major(m00: float, m01: float, m02: float,
                  m10: float, m11: float, m12: float,
                  m20: float = 0.0, m21: float = 0.0, m22: float = 1.0) -> np.ndarray:
        return np.array([[m00, m01, m02], [m10, m11, m12], [m20, m21, m22]], dtype=float)

    @staticmethod
    def translation(tx: float, ty: float) -> np.ndarray:
        m = np.eye(3)
        m[0, 2] = tx
        m[1, 2] = ty
        return m

    @staticmethod
    def translation_from_vector(v: Vector2) -> np.ndarray:
        return Matrix3.translation(v.x, v.y)

    @staticmethod
    def scaling(sx: float, sy: Optional[float] = None) -> np.ndarray:
        if sy is None:
            sy = sx
        m = np.eye(3)
        m[0, 0] = sx
        m[1, 1] = sy
        return m

    @staticmethod
    def rotation2(angle: float) -> np.ndarray:
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        return np.array(
            [[cos_a, -sin_a, 0.0], [sin_a, cos_a, 0.0], [0, 0, 1]], dtype=float)

    @staticmethod
    def rotation_deg(angle_deg: float, cx: float = 0.0, cy: float = 0.0) -> np.ndarray:
        R = Matrix3.rotation2(math.radians(angle_deg))
        return Matrix3.translation(cx, cy) @ R @ Matrix3.translation(-cx, -cy)

    @staticmethod
    def affine(a: float, b: float, c: float, d: float, e: float, f: float) -> np.ndarray:
        # SVG's (a b c d e f)
        return np.array([[a, c, e], [b, d, f], [0, 0, 1]], dtype=float)

    @staticmethod
    def validate(m: Any) -> None:
        if not isinstance(m, np.ndarray) or m.shape != (3, 3):
            raise InvalidGeometryError(f"matrix was incorrect type: {m!r}")
        if not np.issubdtype(m.dtype, np.number) or np.issubdtype(m.dtype, np.complexfloating):
            raise InvalidGeometryError(f"matrix must be real-valued, got dtype {m.dtype}")
        if not np.all(np.isfinite(m)):
            raise InvalidGeometryError("matrix must be finite")

    @staticmethod
    def is_fast_identity(m: np.ndarray) -> bool:
        """Exact structural identity; numerically-close matrices report False."""
        return bool(np.array_equal(m, np.eye(3)))

    @staticmethod
    def determinant(m: np.ndarray) -> float:
        return float(m[0, 0] * m[1, 1] * m[2, 2] + m[0, 1] * m[1, 2] * m[2, 0]
                     + m[0, 2] * m[1, 0] * m[2, 1] - m[0, 2] * m[1, 1] * m[2, 0]
                     - m[0, 1] * m[1, 0] * m[2, 2] - m[0, 0] * m[1, 2] * m[2, 1])

    @staticmethod
    def times_vector2(m: np.ndarray, v: Vector2) -> Vector2:
        return Vector2(float(m[0, 0] * v.x + m[0, 1] * v.y + m[0, 2]),
                       float(m[1, 0] * v.x + m[1, 1] * v.y + m[1, 2]))

    @staticmethod
    def times_relative_vector2(m: np.ndarray, v: Vector2) -> Vector2:
        # linear part only
        return Vector2(float(m[0, 0] * v.x + m[0, 1] * v.y),
                       float(m[1, 0] * v.x + m[1, 1] * v.y))

    @staticmethod
    def times_transpose_vector2(m: np.ndarray, v: Vector2) -> Vector2:
        return Vector2(float(m[0, 0] * v.x + m[1, 0] * v.y),
                       float(m[0, 1] * v.x + m[1, 1] * v.y))
