import math
import re

import numpy as np

from geometry.Errors import InvalidGeometryError
from geometry.Matrix3 import Matrix3


class SvgTransform:
    """SVG transform attribute strings -> 3x3 numpy matrices (column vectors on the right)."""

    _TOKEN_RE = re.compile(r"(matrix|translate|scale|rotate|skewX|skewY)\s*\(([^)]*)\)")

    @staticmethod
    def skew_x(angle_deg: float) -> np.ndarray:
        return Matrix3.row_major(1, math.tan(math.radians(angle_deg)), 0,
                                 0, 1, 0)

    @staticmethod
    def skew_y(angle_deg: float) -> np.ndarray:
        return Matrix3.row_major(1, 0, 0,
                                 math.tan(math.radians(angle_deg)), 1, 0)

    @staticmethod
    def parse(transform_str: str) -> np.ndarray:
        """Compose the listed transforms left to right, as SVG applies them.

        Unknown functions or wrong argument counts raise InvalidGeometryError.
        """
        if not transform_str or not transform_str.strip():
            return Matrix3.identity()

        transform = Matrix3.identity()
        consumed = 0
        for match in SvgTransform._TOKEN_RE.finditer(transform_str):
            gap = transform_str[consumed:match.start()]
            if gap.strip(" ,\t\r\n"):
                raise InvalidGeometryError(f"Unrecognized SVG transform text: {gap.strip()!r}")
            consumed = match.end()

            name, args = match.group(1), match.group(2)
            try:
                parts = [float(p) for p in re.split(r"[\s,]+", args.strip()) if p]
            except ValueError as e:
                raise InvalidGeometryError(f"Bad arguments for {name}: {args!r}") from e

            if name == "matrix" and len(parts) == 6:
                t = Matrix3.affine(*parts)
            elif name == "translate" and len(parts) in (1, 2):
                tx = parts[0]
                ty = parts[1] if len(parts) == 2 else 0.0
                t = Matrix3.translation(tx, ty)
            elif name == "scale" and len(parts) in (1, 2):
                sx = parts[0]
                sy = parts[1] if len(parts) == 2 else None
                t = Matrix3.scaling(sx, sy)
            elif name == "rotate" and len(parts) in (1, 3):
                if len(parts) == 3:
                    t = Matrix3.rotation_deg(parts[0], parts[1], parts[2])
                else:
                    t = Matrix3.rotation_deg(parts[0])
            elif name == "skewX" and len(parts) == 1:
                t = SvgTransform.skew_x(parts[0])
            elif name == "skewY" and len(parts) == 1:
                t = SvgTransform.skew_y(parts[0])
            else:
                raise InvalidGeometryError(f"Wrong number of arguments for {name}: {len(parts)}")
            transform = transform @ t

        if transform_str[consumed:].strip(" ,\t\r\n"):
            raise InvalidGeometryError(f"Unrecognized SVG transform text: {transform_str[consumed:].strip()!r}")
        Matrix3.validate(transform)
        return transform
