import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Callable, List

from geometry.Errors import InvalidGeometryError
from geometry.Vector2 import Vector2
from geometry.geometry_constants import FLATTEN_MAX_DEPTH, SVG_NUMBER_PRECISION


@dataclass(frozen=True)
class GeoUtil:
    @staticmethod
    def modulo_between_down(value: float, lo: float, hi: float) -> float:
        """Map value into [lo, hi), preferring lo when value sits on a boundary."""
        if not hi > lo:
            raise InvalidGeometryError("hi > lo required for modulo_between_down")
        divisor = hi - lo
        partial = math.fmod(value - lo, divisor)
        if partial < 0:
            # fmod keeps the sign of the dividend
            partial += divisor
        return partial + lo

    @staticmethod
    def modulo_between_up(value: float, lo: float, hi: float) -> float:
        """Map value into (lo, hi], preferring hi when value sits on a boundary."""
        return -GeoUtil.modulo_between_down(-value, -hi, -lo)

    @staticmethod
    def clamp(value: float, lo: float, hi: float) -> float:
        return max(lo, min(hi, value))

    @staticmethod
    def linear(a1: float, a2: float, b1: float, b2: float, a3: float) -> float:
        """Linear map of a3 from the [a1, a2] range onto [b1, b2]."""
        return (b2 - b1) / (a2 - a1) * (a3 - a1) + b1

    @staticmethod
    def svg_number(value: float) -> str:
        """Fixed-point number for SVG path data, trailing zeros trimmed."""
        text = f"{value:.{SVG_NUMBER_PRECISION}f}".rstrip("0").rstrip(".")
        return "0" if text in ("", "-0") else text

    @staticmethod
    def is_number(value: Any) -> bool:
        return isinstance(value, Real) and not isinstance(value, bool)

    @staticmethod
    def require_finite(value: Any, what: str) -> float:
        """Return value as a float, or raise if it is not a finite real number."""
        if not GeoUtil.is_number(value):
            raise InvalidGeometryError(f"{what} should be a number: {value!r}")
        if not math.isfinite(value):
            raise InvalidGeometryError(f"{what} should be a finite number: {value!r}")
        return float(value)

    @staticmethod
    def require_finite_vector(value: Any, what: str) -> Vector2:
        if not isinstance(value, Vector2):
            raise InvalidGeometryError(f"{what} should be a Vector2: {value!r}")
        if not value.is_finite():
            raise InvalidGeometryError(f"{what} should be finite: {value!r}")
        return value

    @staticmethod
    def require_t(t: float, what: str) -> None:
        if not 0 <= t <= 1:
            raise InvalidGeometryError(f"{what} t should be in [0, 1]: {t}")

    @staticmethod
    def point_line_dist(p: Vector2, a: Vector2, b: Vector2) -> float:
        """Distance from point p to line segment ab."""
        abx, aby = b.x - a.x, b.y - a.y
        ab2 = abx * abx + aby * aby
        if ab2 == 0.0:
            return math.hypot(p.x - a.x, p.y - a.y)
        t = max(0.0, min(1.0, ((p.x - a.x) * abx + (p.y - a.y) * aby) / ab2))
        cx, cy = a.x + t * abx, a.y + t * aby
        return math.hypot(p.x - cx, p.y - cy)

    @staticmethod
    def flatten_segment(segment, tol: float, t0: float = 0.0, t1: float = 1.0, depth: int = 0,
                        max_depth: int = FLATTEN_MAX_DEPTH) -> List[Vector2]:
        """Recursively approximate any segment with a polyline within tolerance.
        Returns a list of points from t0..t1 (including endpoints).
        """
        p0 = segment.position_at(t0)
        p2 = segment.position_at(t1)
        tm = 0.5 * (t0 + t1)
        pm = segment.position_at(tm)

        # Error as distance of midpoint to chord. Depth 0 always splits so closed curves
        # (start == end) are not collapsed to a point.
        err = GeoUtil.point_line_dist(pm, p0, p2)
        if depth > 0 and (err <= tol or depth >= max_depth):
            return [p0, p2]
        left = GeoUtil.flatten_segment(segment, tol, t0, tm, depth + 1, max_depth)
        right = GeoUtil.flatten_segment(segment, tol, tm, t1, depth + 1, max_depth)
        # Avoid duplicating the midpoint
        return left[:-1] + right

    @staticmethod
    def adaptive_simpson(f: Callable[[float], float], a: float, b: float, tol: float = 1e-10,
                         max_depth: int = 30) -> float:
        """Integral of f over [a, b] by adaptive Simpson's rule."""
        def simpson(fa, fm, fb, lo, hi):
            return (hi - lo) / 6.0 * (fa + 4.0 * fm + fb)

        def recurse(lo, hi, fa, fm, fb, whole, eps, depth):
            mid = 0.5 * (lo + hi)
            lm = 0.5 * (lo + mid)
            rm = 0.5 * (mid + hi)
            flm = f(lm)
            frm = f(rm)
            left = simpson(fa, flm, fm, lo, mid)
            right = simpson(fm, frm, fb, mid, hi)
            if depth >= max_depth or abs(left + right - whole) <= 15 * eps:
                return left + right + (left + right - whole) / 15.0
            return (recurse(lo, mid, fa, flm, fm, left, eps / 2, depth + 1)
                    + recurse(mid, hi, fm, frm, fb, right, eps / 2, depth + 1))

        if a == b:
            return 0.0
        fa, fm, fb = f(a), f(0.5 * (a + b)), f(b)
        return recurse(a, b, fa, fm, fb, simpson(fa, fm, fb, a, b), tol, 0)
