from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from geometry.Bounds2 import Bounds2
from geometry.Errors import InvalidGeometryError
from geometry.GeoUtil import GeoUtil
from geometry.Matrix3 import Matrix3
from geometry.Ray2 import Ray2
from geometry.RayIntersection import RayIntersection
from geometry.Segment import Segment
from geometry.SegmentIntersection import SegmentIntersection
from geometry.Vector2 import Vector2
from geometry.geometry_constants import LINE_RAY_MIN_DISTANCE


class Line(Segment):
    """Straight segment from start to end."""

    def __init__(self, start: Vector2, end: Vector2):
        super().__init__()
        self._start = GeoUtil.require_finite_vector(start, "Line start")
        self._end = GeoUtil.require_finite_vector(end, "Line end")
        self._bounds: Optional[Bounds2] = None
        self._svg_path_fragment: Optional[str] = None

    def _invalidate(self) -> None:
        self._bounds = None
        self._svg_path_fragment = None
        self.invalidation_emitter.emit()

    @property
    def start(self) -> Vector2:
        return self._start

    @start.setter
    def start(self, value: Vector2) -> None:
        value = GeoUtil.require_finite_vector(value, "Line start")
        if value != self._start:
            self._start = value
            self._invalidate()

    @property
    def end(self) -> Vector2:
        return self._end

    @end.setter
    def end(self, value: Vector2) -> None:
        value = GeoUtil.require_finite_vector(value, "Line end")
        if value != self._end:
            self._end = value
            self._invalidate()

    @property
    def start_tangent(self) -> Vector2:
        return (self._end - self._start).normalized()

    @property
    def end_tangent(self) -> Vector2:
        return self.start_tangent

    @property
    def bounds(self) -> Bounds2:
        if self._bounds is None:
            self._bounds = Bounds2.point(self._start).with_point(self._end)
        return self._bounds

    def position_at(self, t: float) -> Vector2:
        GeoUtil.require_t(t, "position_at")
        return self._start + (self._end - self._start) * t

    def tangent_at(self, t: float) -> Vector2:
        GeoUtil.require_t(t, "tangent_at")
        # non-normalized, like the other segments' parametric derivative
        return self._end - self._start

    def curvature_at(self, t: float) -> float:
        GeoUtil.require_t(t, "curvature_at")
        return 0.0

    def subdivided(self, t: float) -> List[Segment]:
        GeoUtil.require_t(t, "subdivided")
        if t == 0 or t == 1:
            return [self]
        point = self.position_at(t)
        return [Line(self._start, point), Line(point, self._end)]

    def get_svg_path_fragment(self) -> str:
        if self._svg_path_fragment is None:
            self._svg_path_fragment = f"L {GeoUtil.svg_number(self._end.x)} {GeoUtil.svg_number(self._end.y)}"
        return self._svg_path_fragment

    def get_nondegenerate_segments(self) -> List[Segment]:
        if self._start == self._end:
            return []
        return [self]

    def get_interior_extrema_ts(self) -> List[float]:
        return []

    def stroke_left(self, line_width: float) -> List[Segment]:
        offset = self.end_tangent.perpendicular * (-line_width / 2)
        return [Line(self._start + offset, self._end + offset)]

    def stroke_right(self, line_width: float) -> List[Segment]:
        offset = self.start_tangent.perpendicular * (line_width / 2)
        return [Line(self._end + offset, self._start + offset)]

    def intersection(self, ray: Ray2) -> List[RayIntersection]:
        # Parametric line-line solve, then check the parameters lie on the segment and
        # in front of the ray.
        start, end = self._start, self._end
        diff = end - start
        if diff.magnitude_squared == 0:
            return []

        denom = ray.direction.y * diff.x - ray.direction.x * diff.y
        if denom == 0:
            # parallel or coincident
            return []

        t = (ray.direction.x * (start.y - ray.position.y) - ray.direction.y * (start.x - ray.position.x)) / denom
        if t < 0 or t >= 1:
            return []

        s = (diff.x * (start.y - ray.position.y) - diff.y * (start.x - ray.position.x)) / denom
        if s < LINE_RAY_MIN_DISTANCE:
            return []

        perp = diff.perpendicular
        point = start + diff * t
        normal = (-perp if perp.dot(ray.direction) > 0 else perp).normalized()
        wind = 1 if ray.direction.perpendicular.dot(diff) < 0 else -1
        return [RayIntersection(s, point, normal, wind, t)]

    def winding_intersection(self, ray: Ray2) -> int:
        hits = self.intersection(ray)
        return hits[0].wind if hits else 0

    def write_to_context(self, context: Any) -> None:
        context.line_to(self._end.x, self._end.y)

    def transformed(self, matrix: np.ndarray) -> "Line":
        return Line(Matrix3.times_vector2(matrix, self._start), Matrix3.times_vector2(matrix, self._end))

    def get_signed_area_fragment(self) -> float:
        return 0.5 * (self._start.x * self._end.y - self._start.y * self._end.x)

    def reversed(self) -> "Line":
        return Line(self._end, self._start)

    def serialize(self) -> Dict[str, Any]:
        return {
            "type": "Line",
            "startX": self._start.x,
            "startY": self._start.y,
            "endX": self._end.x,
            "endY": self._end.y,
        }

    @staticmethod
    def deserialize(obj: Mapping[str, Any]) -> "Line":
        if obj.get("type") != "Line":
            raise InvalidGeometryError(f"Cannot deserialize {obj.get('type')!r} as a Line")
        return Line(Vector2(obj["startX"], obj["startY"]), Vector2(obj["endX"], obj["endY"]))

    @staticmethod
    def intersect(a: "Line", b: "Line") -> List[SegmentIntersection]:
        """Crossing point of two lines, if it lies on both (parallel lines give none)."""
        da = a.end - a.start
        db = b.end - b.start
        denom = da.cross(db)
        if denom == 0:
            return []
        offset = b.start - a.start
        at = offset.cross(db) / denom
        bt = offset.cross(da) / denom
        if not (0 <= at <= 1 and 0 <= bt <= 1):
            return []
        return [SegmentIntersection(a.position_at(at), at, bt)]

    @staticmethod
    def intersect_other(line: "Line", other: Segment) -> List[SegmentIntersection]:
        """Intersections of a line with any segment, found by casting the line as a ray."""
        length = (line.end - line.start).magnitude
        if length == 0:
            return []
        ray = Ray2(line.start, (line.end - line.start) / length)
        results = []
        for hit in other.intersection(ray):
            line_t = hit.distance / length
            # exclude hits outside the line (or right on its boundary)
            if 1e-8 < line_t < 1 - 1e-8:
                results.append(SegmentIntersection(hit.point, line_t, hit.t))
        return results

    def __repr__(self) -> str:
        return f"Line({self._start!r}, {self._end!r})"
