import logging
import math
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from geometry.Bounds2 import Bounds2
from geometry.Errors import InvalidGeometryError, UnsupportedGeometryError
from geometry.GeoUtil import GeoUtil
from geometry.Matrix3 import Matrix3
from geometry.Overlap import Overlap
from geometry.Ray2 import Ray2
from geometry.RayIntersection import RayIntersection
from geometry.Segment import Segment
from geometry.SegmentIntersection import SegmentIntersection
from geometry.Vector2 import Vector2
from geometry.geometry_constants import (
    ANGLE_SNAP_EPSILON,
    ARC_INTERSECT_EPSILON,
    EXTREMA_T_EPSILON,
    OVERLAP_EPSILON,
    OVERLAP_MIN_SPAN,
    SVG_FULL_ELLIPSE_EPSILON,
    TWO_PI,
)

logger = logging.getLogger(__name__)


class Arc(Segment):
    """Circular arc around center, from start_angle to end_angle.

    Angles are in radians and unbounded; anticlockwise picks the winding direction
    (decreasing angles in a y-down frame). The span in the winding direction must be
    greater than -2pi and no more than 2pi.
    """

    def __init__(self, center: Vector2, radius: float, start_angle: float, end_angle: float,
                 anticlockwise: bool = False):
        super().__init__()
        self._center = Vector2.ZERO
        self._radius = 0.0
        self._start_angle = 0.0
        self._end_angle = 0.0
        self._anticlockwise = False
        self._reset_caches()
        self._update(center, radius, start_angle, end_angle, anticlockwise)

    # -----------------------------
    # Normalization
    # -----------------------------

    @staticmethod
    def check_span(start_angle: float, end_angle: float, anticlockwise: bool) -> None:
        """Reject spans that renderers disagree on (<= -2pi or > 2pi in the winding direction)."""
        span = start_angle - end_angle if anticlockwise else end_angle - start_angle
        if span <= -TWO_PI or span > TWO_PI:
            raise UnsupportedGeometryError(
                f"Unsupported angular span from {start_angle} to {end_angle} "
                f"({'anticlockwise' if anticlockwise else 'clockwise'})")

    def _update(self, center, radius, start_angle, end_angle, anticlockwise) -> None:
        center = GeoUtil.require_finite_vector(center, "Arc center")
        radius = GeoUtil.require_finite(radius, "Arc radius")
        start_angle = GeoUtil.require_finite(start_angle, "Arc start_angle")
        end_angle = GeoUtil.require_finite(end_angle, "Arc end_angle")
        if not isinstance(anticlockwise, bool):
            raise InvalidGeometryError(f"Arc anticlockwise should be a bool: {anticlockwise!r}")

        if radius < 0:
            logger.debug("Folding negative arc radius %s into the angles", radius)
            radius = -radius
            start_angle += math.pi
            end_angle += math.pi
        Arc.check_span(start_angle, end_angle, anticlockwise)

        self._center = center
        self._radius = radius
        self._start_angle = start_angle
        self._end_angle = end_angle
        self._anticlockwise = anticlockwise
        self._invalidate()

    def _reset_caches(self) -> None:
        self._start: Optional[Vector2] = None
        self._end: Optional[Vector2] = None
        self._start_tangent: Optional[Vector2] = None
        self._end_tangent: Optional[Vector2] = None
        self._actual_end_angle: Optional[float] = None
        self._is_full_perimeter: Optional[bool] = None
        self._angle_difference: Optional[float] = None
        self._bounds: Optional[Bounds2] = None
        self._svg_path_fragment: Optional[str] = None

    def _invalidate(self) -> None:
        self._reset_caches()
        self.invalidation_emitter.emit()

    # -----------------------------
    # Defining parameters
    # -----------------------------

    @property
    def center(self) -> Vector2:
        return self._center

    @center.setter
    def center(self, value: Vector2) -> None:
        if value != self._center:
            self._update(value, self._radius, self._start_angle, self._end_angle, self._anticlockwise)

    @property
    def radius(self) -> float:
        return self._radius

    @radius.setter
    def radius(self, value: float) -> None:
        if value != self._radius:
            self._update(self._center, value, self._start_angle, self._end_angle, self._anticlockwise)

    @property
    def start_angle(self) -> float:
        return self._start_angle

    @start_angle.setter
    def start_angle(self, value: float) -> None:
        if value != self._start_angle:
            self._update(self._center, self._radius, value, self._end_angle, self._anticlockwise)

    @property
    def end_angle(self) -> float:
        return self._end_angle

    @end_angle.setter
    def end_angle(self, value: float) -> None:
        if value != self._end_angle:
            self._update(self._center, self._radius, self._start_angle, value, self._anticlockwise)

    @property
    def anticlockwise(self) -> bool:
        return self._anticlockwise

    @anticlockwise.setter
    def anticlockwise(self, value: bool) -> None:
        if value != self._anticlockwise:
            self._update(self._center, self._radius, self._start_angle, self._end_angle, value)

    # -----------------------------
    # Derived quantities
    # -----------------------------

    @property
    def start(self) -> Vector2:
        if self._start is None:
            self._start = self.position_at_angle(self._start_angle)
        return self._start

    @property
    def end(self) -> Vector2:
        if self._end is None:
            self._end = self.position_at_angle(self._end_angle)
        return self._end

    @property
    def start_tangent(self) -> Vector2:
        if self._start_tangent is None:
            self._start_tangent = self.tangent_at_angle(self._start_angle)
        return self._start_tangent

    @property
    def end_tangent(self) -> Vector2:
        if self._end_tangent is None:
            self._end_tangent = self.tangent_at_angle(self._end_angle)
        return self._end_tangent

    @property
    def actual_end_angle(self) -> float:
        if self._actual_end_angle is None:
            self._actual_end_angle = Arc.compute_actual_end_angle(
                self._start_angle, self._end_angle, self._anticlockwise)
        return self._actual_end_angle

    @property
    def is_full_perimeter(self) -> bool:
        if self._is_full_perimeter is None:
            self._is_full_perimeter = Arc.compute_is_full_perimeter(
                self._start_angle, self._end_angle, self._anticlockwise)
        return self._is_full_perimeter

    @property
    def angle_difference(self) -> float:
        if self._angle_difference is None:
            self._angle_difference = Arc.compute_angle_difference(
                self._start_angle, self._end_angle, self._anticlockwise)
        return self._angle_difference

    @property
    def bounds(self) -> Bounds2:
        if self._bounds is None:
            bounds = Bounds2.point(self.start).with_point(self.end)
            if self._start_angle != self._end_angle:
                for angle in (0, math.pi / 2, math.pi, 3 * math.pi / 2):
                    if self.contains_angle(angle):
                        bounds = bounds.with_point(self.position_at_angle(angle))
            self._bounds = bounds
        return self._bounds

    @staticmethod
    def compute_actual_end_angle(start_angle: float, end_angle: float, anticlockwise: bool) -> float:
        """End angle moved by 2pi where needed so it lies in the winding direction from start."""
        if anticlockwise:
            if start_angle > end_angle:
                return end_angle
            if start_angle < end_angle:
                return end_angle - TWO_PI
            return start_angle
        if start_angle < end_angle:
            return end_angle
        if start_angle > end_angle:
            return end_angle + TWO_PI
        return start_angle

    @staticmethod
    def compute_is_full_perimeter(start_angle: float, end_angle: float, anticlockwise: bool) -> bool:
        span = start_angle - end_angle if anticlockwise else end_angle - start_angle
        return span >= TWO_PI

    @staticmethod
    def compute_angle_difference(start_angle: float, end_angle: float, anticlockwise: bool) -> float:
        difference = start_angle - end_angle if anticlockwise else end_angle - start_angle
        if difference < 0:
            difference += TWO_PI
        return difference

    # -----------------------------
    # Angles and parameters
    # -----------------------------

    def contains_angle(self, angle: float) -> bool:
        """Whether the (modular) angle lies on the swept part of the circle."""
        normalized = angle - self._end_angle if self._anticlockwise else angle - self._start_angle
        positive_min_angle = GeoUtil.modulo_between_down(normalized, 0, TWO_PI)
        return positive_min_angle <= self.angle_difference

    def map_angle(self, angle: float) -> float:
        """Equivalent angle (mod 2pi) within the range from start_angle to actual_end_angle."""
        start = self._start_angle
        actual_end = self.actual_end_angle
        if abs(GeoUtil.modulo_between_down(angle - start, -math.pi, math.pi)) < ANGLE_SNAP_EPSILON:
            return start
        if abs(GeoUtil.modulo_between_down(angle - actual_end, -math.pi, math.pi)) < ANGLE_SNAP_EPSILON:
            return actual_end
        if start > actual_end:
            return GeoUtil.modulo_between_up(angle, start - TWO_PI, start)
        return GeoUtil.modulo_between_down(angle, start, start + TWO_PI)

    def t_at_angle(self, angle: float) -> float:
        span = self.actual_end_angle - self._start_angle
        if span == 0:
            return 0.0
        return (self.map_angle(angle) - self._start_angle) / span

    def angle_at(self, t: float) -> float:
        return self._start_angle + (self.actual_end_angle - self._start_angle) * t

    def position_at_angle(self, angle: float) -> Vector2:
        return self._center + Vector2.create_polar(self._radius, angle)

    def tangent_at_angle(self, angle: float) -> Vector2:
        normal = Vector2.create_polar(1, angle)
        return normal.perpendicular if self._anticlockwise else -normal.perpendicular

    # -----------------------------
    # Segment contract
    # -----------------------------

    def position_at(self, t: float) -> Vector2:
        GeoUtil.require_t(t, "position_at")
        return self.position_at_angle(self.angle_at(t))

    def tangent_at(self, t: float) -> Vector2:
        GeoUtil.require_t(t, "tangent_at")
        return self.tangent_at_angle(self.angle_at(t))

    def curvature_at(self, t: float) -> float:
        GeoUtil.require_t(t, "curvature_at")
        return (-1 if self._anticlockwise else 1) / self._radius

    def subdivided(self, t: float) -> List[Segment]:
        GeoUtil.require_t(t, "subdivided")
        if t == 0 or t == 1:
            return [self]
        angle0 = self.angle_at(0)
        angle_t = self.angle_at(t)
        angle1 = self.angle_at(1)
        return [
            Arc(self._center, self._radius, angle0, angle_t, self._anticlockwise),
            Arc(self._center, self._radius, angle_t, angle1, self._anticlockwise),
        ]

    def get_nondegenerate_segments(self) -> List[Segment]:
        if self._radius <= 0 or self._start_angle == self._end_angle:
            return []
        return [self]

    def get_interior_extrema_ts(self) -> List[float]:
        result = []
        for angle in (0, math.pi / 2, math.pi, 3 * math.pi / 2):
            if self.contains_angle(angle):
                t = self.t_at_angle(angle)
                if EXTREMA_T_EPSILON < t < 1 - EXTREMA_T_EPSILON:
                    result.append(t)
        return sorted(result)

    def get_svg_path_fragment(self) -> str:
        if self._svg_path_fragment is None:
            radius = GeoUtil.svg_number(self._radius)
            sweep_flag = "0" if self._anticlockwise else "1"
            if self.angle_difference < TWO_PI - SVG_FULL_ELLIPSE_EPSILON:
                large_arc_flag = "1" if self.angle_difference > math.pi else "0"
                self._svg_path_fragment = (
                    f"A {radius} {radius} 0 {large_arc_flag} {sweep_flag} "
                    f"{GeoUtil.svg_number(self.end.x)} {GeoUtil.svg_number(self.end.y)}")
            else:
                # (almost) full circle: an SVG arc command cannot end where it starts
                split_point = self.position_at_angle(self.angle_at(0.5))
                first = (f"A {radius} {radius} 0 0 {sweep_flag} "
                         f"{GeoUtil.svg_number(split_point.x)} {GeoUtil.svg_number(split_point.y)}")
                second = (f"A {radius} {radius} 0 0 {sweep_flag} "
                          f"{GeoUtil.svg_number(self.end.x)} {GeoUtil.svg_number(self.end.y)}")
                self._svg_path_fragment = f"{first} {second}"
        return self._svg_path_fragment

    def stroke_left(self, line_width: float) -> List[Segment]:
        radius = self._radius + (1 if self._anticlockwise else -1) * line_width / 2
        return [Arc(self._center, radius, self._start_angle, self._end_angle, self._anticlockwise)]

    def stroke_right(self, line_width: float) -> List[Segment]:
        radius = self._radius + (-1 if self._anticlockwise else 1) * line_width / 2
        return [Arc(self._center, radius, self._end_angle, self._start_angle, not self._anticlockwise)]

    def intersection(self, ray: Ray2) -> List[RayIntersection]:
        """Hits of the ray with the arc, nearest first."""
        result: List[RayIntersection] = []

        center_to_ray = ray.position - self._center
        tmp = ray.direction.dot(center_to_ray)
        center_to_ray_dist_sq = center_to_ray.magnitude_squared
        discriminant = 4 * tmp * tmp - 4 * (center_to_ray_dist_sq - self._radius * self._radius)
        if discriminant < 0:
            # ray misses the circle
            return result

        base = ray.direction.dot(self._center) - ray.direction.dot(ray.position)
        sqt = math.sqrt(discriminant) / 2
        ta = base - sqt
        tb = base + sqt
        if tb < 0:
            # circle is behind the ray
            return result

        point_b = ray.point_at_distance(tb)
        normal_b = (point_b - self._center).normalized()
        normal_b_angle = normal_b.angle

        if ta < 0:
            # ray starts inside the circle, only the exit can hit
            if self.contains_angle(normal_b_angle):
                result.append(RayIntersection(tb, point_b, -normal_b, -1 if self._anticlockwise else 1,
                                              self.t_at_angle(normal_b_angle)))
        else:
            point_a = ray.point_at_distance(ta)
            normal_a = (point_a - self._center).normalized()
            normal_a_angle = normal_a.angle
            if self.contains_angle(normal_a_angle):
                result.append(RayIntersection(ta, point_a, normal_a, 1 if self._anticlockwise else -1,
                                              self.t_at_angle(normal_a_angle)))
            if self.contains_angle(normal_b_angle):
                result.append(RayIntersection(tb, point_b, -normal_b, -1 if self._anticlockwise else 1,
                                              self.t_at_angle(normal_b_angle)))
        return result

    def winding_intersection(self, ray: Ray2) -> int:
        return sum(hit.wind for hit in self.intersection(ray))

    def write_to_context(self, context: Any) -> None:
        context.arc(self._center.x, self._center.y, self._radius,
                    self._start_angle, self._end_angle, self._anticlockwise)

    def transformed(self, matrix: np.ndarray) -> Segment:
        """Image under an affine matrix; an EllipticalArc unless the matrix keeps circles round."""
        from geometry.EllipticalArc import EllipticalArc

        ellipse = EllipticalArc(self._center, self._radius, self._radius, 0.0,
                                self._start_angle, self._end_angle, self._anticlockwise).transformed(matrix)
        if not math.isclose(ellipse.radius_x, ellipse.radius_y, rel_tol=1e-12, abs_tol=0.0):
            return ellipse
        return ellipse.as_circular_arc()

    def get_signed_area_fragment(self) -> float:
        t0 = self._start_angle
        t1 = self.actual_end_angle
        return 0.5 * self._radius * (self._radius * (t1 - t0)
                                     + self._center.x * (math.sin(t1) - math.sin(t0))
                                     - self._center.y * (math.cos(t1) - math.cos(t0)))

    def get_arc_length(self) -> float:
        return self.angle_difference * self._radius

    def reversed(self) -> "Arc":
        return Arc(self._center, self._radius, self._end_angle, self._start_angle, not self._anticlockwise)

    def serialize(self) -> Dict[str, Any]:
        return {
            "type": "Arc",
            "centerX": self._center.x,
            "centerY": self._center.y,
            "radius": self._radius,
            "startAngle": self._start_angle,
            "endAngle": self._end_angle,
            "anticlockwise": self._anticlockwise,
        }

    @staticmethod
    def deserialize(obj: Mapping[str, Any]) -> "Arc":
        if obj.get("type") != "Arc":
            raise InvalidGeometryError(f"Cannot deserialize {obj.get('type')!r} as an Arc")
        return Arc(Vector2(obj["centerX"], obj["centerY"]), obj["radius"],
                   obj["startAngle"], obj["endAngle"], obj["anticlockwise"])

    def get_conic_matrix(self) -> np.ndarray:
        """Symmetric matrix Q with [x y 1] Q [x y 1]^T == 0 exactly on the circle."""
        a, b = self._center.x, self._center.y
        d = -2 * a
        e = -2 * b
        f = a * a + b * b - self._radius * self._radius
        return Matrix3.row_major(1, 0, d / 2,
                                 0, 1, e / 2,
                                 d / 2, e / 2, f)

    # -----------------------------
    # Overlaps and intersections
    # -----------------------------

    def get_overlaps(self, segment: Segment, epsilon: float = 1e-6) -> Optional[List[Overlap]]:
        if isinstance(segment, Arc):
            return Arc.get_circular_overlaps(self, segment)
        return None

    @staticmethod
    def get_partial_overlap(end1: float, start2: float, end2: float, t_start2: float,
                            t_end2: float) -> List[Overlap]:
        """Overlap of [0, end1] with the (possibly reversed) range [start2, end2].

        All angles are already shifted so the first arc starts at 0 and runs upwards;
        t_start2/t_end2 are the second arc's parameters at start2/end2.
        """
        reversed2 = end2 < start2
        min2 = end2 if reversed2 else start2
        max2 = start2 if reversed2 else end2

        overlap_min = min2
        overlap_max = min(end1, max2)
        if overlap_max < overlap_min + OVERLAP_MIN_SPAN:
            return []
        return [Overlap.create_linear(
            GeoUtil.clamp(GeoUtil.linear(0, end1, 0, 1, overlap_min), 0, 1),
            GeoUtil.clamp(GeoUtil.linear(start2, end2, t_start2, t_end2, overlap_min), 0, 1),
            GeoUtil.clamp(GeoUtil.linear(0, end1, 0, 1, overlap_max), 0, 1),
            GeoUtil.clamp(GeoUtil.linear(start2, end2, t_start2, t_end2, overlap_max), 0, 1),
        )]

    @staticmethod
    def get_angular_overlaps(start_angle1: float, end_angle1: float, start_angle2: float,
                             end_angle2: float) -> List[Overlap]:
        """Overlaps between two angular ranges of the same circle (actual end angles expected)."""
        for value in (start_angle1, end_angle1, start_angle2, end_angle2):
            GeoUtil.require_finite(value, "overlap angle")

        # shift and flip so the first range is [0, end1] with end1 > 0
        end1 = end_angle1 - start_angle1
        sign1 = -1 if end1 < 0 else 1
        end1 *= sign1

        start2 = GeoUtil.modulo_between_down(sign1 * (start_angle2 - start_angle1), 0, TWO_PI)
        end2 = sign1 * (end_angle2 - start_angle2) + start2

        if end2 < -1e-10:
            # second range wraps below zero
            wrap_t = -start2 / (end2 - start2)
            return (Arc.get_partial_overlap(end1, start2, 0, 0, wrap_t)
                    + Arc.get_partial_overlap(end1, TWO_PI, end2 + TWO_PI, wrap_t, 1))
        if end2 > TWO_PI + 1e-10:
            # second range wraps above 2pi
            wrap_t = (TWO_PI - start2) / (end2 - start2)
            return (Arc.get_partial_overlap(end1, start2, TWO_PI, 0, wrap_t)
                    + Arc.get_partial_overlap(end1, 0, end2 - TWO_PI, wrap_t, 1))
        return Arc.get_partial_overlap(end1, start2, end2, 0, 1)

    @staticmethod
    def get_circular_overlaps(arc1: "Arc", arc2: "Arc") -> List[Overlap]:
        if (arc1.center.distance(arc2.center) > OVERLAP_EPSILON
                or abs(arc1.radius - arc2.radius) > OVERLAP_EPSILON):
            return []
        return Arc.get_angular_overlaps(arc1.start_angle, arc1.actual_end_angle,
                                        arc2.start_angle, arc2.actual_end_angle)

    @staticmethod
    def get_circle_intersection_point(center1: Vector2, radius1: float, center2: Vector2,
                                      radius2: float) -> List[Vector2]:
        """Points where two full circles cross (tangent circles give one point)."""
        delta = center2 - center1
        d = delta.magnitude
        if d < 1e-10 or d > radius1 + radius2 + 1e-10:
            return []
        if d > radius1 + radius2 - 1e-10:
            return [center1.blend(center2, radius1 / d)]

        x_prime = 0.5 * (d * d - radius2 * radius2 + radius1 * radius1) / d
        bit = d * d - radius2 * radius2 + radius1 * radius1
        discriminant = 4 * d * d * radius1 * radius1 - bit * bit
        base = center1.blend(center2, x_prime / d)
        if discriminant >= 1e-10:
            y_prime = math.sqrt(discriminant) / d / 2
            perpendicular = delta.perpendicular.normalized() * y_prime
            return [base + perpendicular, base - perpendicular]
        if discriminant > -1e-10:
            return [base]
        return []

    @staticmethod
    def intersect(a: "Arc", b: "Arc") -> List[SegmentIntersection]:
        epsilon = ARC_INTERSECT_EPSILON
        results = []

        if a.center.equals_epsilon(b.center, epsilon) and abs(a.radius - b.radius) < epsilon:
            # same circle: only shared endpoints count
            a_start, a_end = a.position_at(0), a.position_at(1)
            b_start, b_end = b.position_at(0), b.position_at(1)
            if a_start.equals_epsilon(b_start, epsilon):
                results.append(SegmentIntersection(a_start.average(b_start), 0, 0))
            if a_start.equals_epsilon(b_end, epsilon):
                results.append(SegmentIntersection(a_start.average(b_end), 0, 1))
            if a_end.equals_epsilon(b_start, epsilon):
                results.append(SegmentIntersection(a_end.average(b_start), 1, 0))
            if a_end.equals_epsilon(b_end, epsilon):
                results.append(SegmentIntersection(a_end.average(b_end), 1, 1))
            return results

        for point in Arc.get_circle_intersection_point(a.center, a.radius, b.center, b.radius):
            angle_a = (point - a.center).angle
            angle_b = (point - b.center).angle
            if a.contains_angle(angle_a) and b.contains_angle(angle_b):
                results.append(SegmentIntersection(point, a.t_at_angle(angle_a), b.t_at_angle(angle_b)))
        return results

    def __repr__(self) -> str:
        return (f"Arc({self._center!r}, {self._radius!r}, {self._start_angle!r}, "
                f"{self._end_angle!r}, {self._anticlockwise!r})")
