import logging
import math
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from geometry.AffineTransform import AffineTransform
from geometry.Arc import Arc
from geometry.Bounds2 import Bounds2
from geometry.BoundsIntersection import BoundsIntersection
from geometry.EllipticalArcOverlapType import EllipticalArcOverlapType
from geometry.Errors import InvalidGeometryError, UnsupportedGeometryError
from geometry.GeoUtil import GeoUtil
from geometry.Line import Line
from geometry.Matrix3 import Matrix3
from geometry.Overlap import Overlap
from geometry.Ray2 import Ray2
from geometry.RayIntersection import RayIntersection
from geometry.Segment import Segment
from geometry.SegmentIntersection import SegmentIntersection
from geometry.Vector2 import Vector2
from geometry.geometry_constants import (
    ELLIPSE_INTERSECT_EPSILON,
    EXTREMA_T_EPSILON,
    OFFSET_POLYLINE_QUANTITY,
    OVERLAP_EPSILON,
    SVG_FULL_ELLIPSE_EPSILON,
    TWO_PI,
)

logger = logging.getLogger(__name__)

# conic matrix of the unit circle x^2 + y^2 - 1 = 0
UNIT_CIRCLE_CONIC_MATRIX = np.diag([1.0, 1.0, -1.0])


class EllipticalArc(Segment):
    """Elliptical arc: the unit circle arc from start_angle to end_angle mapped by the unit transform
    translate(center) . rotate(rotation) . scale(radius_x, radius_y).

    Angles are parametric angles on the unit circle, not the polar angles of points on
    the ellipse. After every change the arc is normalized so radius_x >= radius_y >= 0:
    negative radii are folded into the angles and the winding, and a taller-than-wide
    ellipse is rotated by pi/2 with its radii swapped. Spans of more than 2pi (or of
    -2pi and below) in the winding direction are rejected.
    """

    def __init__(self, center: Vector2, radius_x: float, radius_y: float, rotation: float,
                 start_angle: float, end_angle: float, anticlockwise: bool = False):
        super().__init__()
        self._center = Vector2.ZERO
        self._radius_x = 0.0
        self._radius_y = 0.0
        self._rotation = 0.0
        self._start_angle = 0.0
        self._end_angle = 0.0
        self._anticlockwise = False
        self._reset_caches()
        self._update(center, radius_x, radius_y, rotation, start_angle, end_angle, anticlockwise)

    # -----------------------------
    # Normalization
    # -----------------------------

    def _update(self, center, radius_x, radius_y, rotation, start_angle, end_angle, anticlockwise) -> None:
        """Validate and normalize a full set of parameters, then commit them.

        Nothing is stored until every check has passed, so a failed change leaves the
        arc as it was.
        """
        center = GeoUtil.require_finite_vector(center, "EllipticalArc center")
        radius_x = GeoUtil.require_finite(radius_x, "EllipticalArc radius_x")
        radius_y = GeoUtil.require_finite(radius_y, "EllipticalArc radius_y")
        rotation = GeoUtil.require_finite(rotation, "EllipticalArc rotation")
        start_angle = GeoUtil.require_finite(start_angle, "EllipticalArc start_angle")
        end_angle = GeoUtil.require_finite(end_angle, "EllipticalArc end_angle")
        if not isinstance(anticlockwise, bool):
            raise InvalidGeometryError(f"EllipticalArc anticlockwise should be a bool: {anticlockwise!r}")

        if radius_x < 0:
            # mirror through the y axis of the unit frame
            logger.debug("Folding negative radius_x %s into the angles", radius_x)
            radius_x = -radius_x
            start_angle = math.pi - start_angle
            end_angle = math.pi - end_angle
            anticlockwise = not anticlockwise
        if radius_y < 0:
            # mirror through the x axis of the unit frame
            logger.debug("Folding negative radius_y %s into the angles", radius_y)
            radius_y = -radius_y
            start_angle = -start_angle
            end_angle = -end_angle
            anticlockwise = not anticlockwise
        if radius_x < radius_y:
            logger.debug("Swapping axes of ellipse with radii %s, %s", radius_x, radius_y)
            rotation += math.pi / 2
            start_angle -= math.pi / 2
            end_angle -= math.pi / 2
            radius_x, radius_y = radius_y, radius_x
        if radius_x < radius_y:
            raise UnsupportedGeometryError(f"radius_x < radius_y after normalization: {radius_x}, {radius_y}")
        Arc.check_span(start_angle, end_angle, anticlockwise)

        self._center = center
        self._radius_x = radius_x
        self._radius_y = radius_y
        self._rotation = rotation
        self._start_angle = start_angle
        self._end_angle = end_angle
        self._anticlockwise = anticlockwise
        self._invalidate()

    def _reset_caches(self) -> None:
        self._unit_transform: Optional[AffineTransform] = None
        self._start: Optional[Vector2] = None
        self._end: Optional[Vector2] = None
        self._start_tangent: Optional[Vector2] = None
        self._end_tangent: Optional[Vector2] = None
        self._actual_end_angle: Optional[float] = None
        self._is_full_perimeter: Optional[bool] = None
        self._angle_difference: Optional[float] = None
        self._unit_arc_segment: Optional[Arc] = None
        self._bounds: Optional[Bounds2] = None
        self._svg_path_fragment: Optional[str] = None
        self._possible_extrema_angles: Optional[List[float]] = None

    def _invalidate(self) -> None:
        self._reset_caches()
        self.invalidation_emitter.emit()

    def _params(self) -> Dict[str, Any]:
        return dict(center=self._center, radius_x=self._radius_x, radius_y=self._radius_y,
                    rotation=self._rotation, start_angle=self._start_angle,
                    end_angle=self._end_angle, anticlockwise=self._anticlockwise)

    def _set(self, name: str, value: Any) -> None:
        params = self._params()
        if value != params[name]:
            params[name] = value
            self._update(**params)

    # -----------------------------
    # Defining parameters
    # -----------------------------

    @property
    def center(self) -> Vector2:
        return self._center

    @center.setter
    def center(self, value: Vector2) -> None:
        self._set("center", value)

    @property
    def radius_x(self) -> float:
        return self._radius_x

    @radius_x.setter
    def radius_x(self, value: float) -> None:
        self._set("radius_x", value)

    @property
    def radius_y(self) -> float:
        return self._radius_y

    @radius_y.setter
    def radius_y(self, value: float) -> None:
        self._set("radius_y", value)

    @property
    def rotation(self) -> float:
        return self._rotation

    @rotation.setter
    def rotation(self, value: float) -> None:
        self._set("rotation", value)

    @property
    def start_angle(self) -> float:
        return self._start_angle

    @start_angle.setter
    def start_angle(self, value: float) -> None:
        self._set("start_angle", value)

    @property
    def end_angle(self) -> float:
        return self._end_angle

    @end_angle.setter
    def end_angle(self, value: float) -> None:
        self._set("end_angle", value)

    @property
    def anticlockwise(self) -> bool:
        return self._anticlockwise

    @anticlockwise.setter
    def anticlockwise(self, value: bool) -> None:
        self._set("anticlockwise", value)

    # -----------------------------
    # Derived quantities
    # -----------------------------

    @staticmethod
    def compute_unit_matrix(center: Vector2, radius_x: float, radius_y: float, rotation: float) -> np.ndarray:
        """Matrix taking the unit circle onto the ellipse."""
        return (Matrix3.translation_from_vector(center)
                @ Matrix3.rotation2(rotation)
                @ Matrix3.scaling(radius_x, radius_y))

    @staticmethod
    def compute_unit_transform(center: Vector2, radius_x: float, radius_y: float,
                               rotation: float) -> AffineTransform:
        return AffineTransform(EllipticalArc.compute_unit_matrix(center, radius_x, radius_y, rotation))

    @property
    def unit_transform(self) -> AffineTransform:
        if self._unit_transform is None:
            self._unit_transform = EllipticalArc.compute_unit_transform(
                self._center, self._radius_x, self._radius_y, self._rotation)
        return self._unit_transform

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
    def unit_arc_segment(self) -> Arc:
        """The same angular range on the unit circle at the origin."""
        if self._unit_arc_segment is None:
            self._unit_arc_segment = Arc(Vector2.ZERO, 1, self._start_angle, self._end_angle, self._anticlockwise)
        return self._unit_arc_segment

    @property
    def possible_extrema_angles(self) -> List[float]:
        """Parametric angles where the full ellipse has horizontal or vertical tangents."""
        if self._possible_extrema_angles is None:
            ratio = self._radius_y / self._radius_x if self._radius_x > 0 else 0.0
            x_angle = math.atan(-ratio * math.tan(self._rotation))
            # atan2 form of atan(ratio / tan(rotation)), defined when tan(rotation) == 0
            y_angle = math.atan2(ratio, math.tan(self._rotation))
            self._possible_extrema_angles = [x_angle, x_angle + math.pi, y_angle, y_angle + math.pi]
        return self._possible_extrema_angles

    @property
    def bounds(self) -> Bounds2:
        if self._bounds is None:
            bounds = Bounds2.point(self.start).with_point(self.end)
            if self._start_angle != self._end_angle:
                for angle in self.possible_extrema_angles:
                    if self.unit_arc_segment.contains_angle(angle):
                        bounds = bounds.with_point(self.position_at_angle(angle))
            self._bounds = bounds
        return self._bounds

    # -----------------------------
    # Angles and parameters
    # -----------------------------

    def map_angle(self, angle: float) -> float:
        return self.unit_arc_segment.map_angle(angle)

    def t_at_angle(self, angle: float) -> float:
        return self.unit_arc_segment.t_at_angle(angle)

    def angle_at(self, t: float) -> float:
        return self._start_angle + (self.actual_end_angle - self._start_angle) * t

    def position_at_angle(self, angle: float) -> Vector2:
        return self.unit_transform.transform_position2(Vector2.create_polar(1, angle))

    def tangent_at_angle(self, angle: float) -> Vector2:
        normal = self.unit_transform.transform_normal2(Vector2.create_polar(1, angle))
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
        """Signed curvature; negative when anticlockwise."""
        GeoUtil.require_t(t, "curvature_at")
        angle = self.angle_at(t)
        a = self._radius_x
        b = self._radius_y
        g = (b * math.cos(angle)) ** 2 + (a * math.sin(angle)) ** 2
        return (-1 if self._anticlockwise else 1) * a * b / g ** 1.5

    def subdivided(self, t: float) -> List[Segment]:
        GeoUtil.require_t(t, "subdivided")
        if t == 0 or t == 1:
            return [self]
        angle0 = self.angle_at(0)
        angle_t = self.angle_at(t)
        angle1 = self.angle_at(1)
        return [
            EllipticalArc(self._center, self._radius_x, self._radius_y, self._rotation,
                          angle0, angle_t, self._anticlockwise),
            EllipticalArc(self._center, self._radius_x, self._radius_y, self._rotation,
                          angle_t, angle1, self._anticlockwise),
        ]

    def as_circular_arc(self) -> Arc:
        """This arc as an Arc, for equal radii. Exact full circles stay exact."""
        start_angle = self._start_angle + self._rotation
        end_angle = self._end_angle + self._rotation
        if abs(self._end_angle - self._start_angle) == TWO_PI:
            end_angle = start_angle - TWO_PI if self._anticlockwise else start_angle + TWO_PI
        return Arc(self._center, self._radius_x, start_angle, end_angle, self._anticlockwise)

    def get_nondegenerate_segments(self) -> List[Segment]:
        if self._radius_x <= 0 or self._radius_y <= 0 or self._start_angle == self._end_angle:
            return []
        if self._radius_x == self._radius_y:
            return [self.as_circular_arc()]
        return [self]

    def get_interior_extrema_ts(self) -> List[float]:
        result = []
        for angle in self.possible_extrema_angles:
            if self.unit_arc_segment.contains_angle(angle):
                t = self.t_at_angle(angle)
                if EXTREMA_T_EPSILON < t < 1 - EXTREMA_T_EPSILON:
                    result.append(t)
        return sorted(result)

    def get_svg_path_fragment(self) -> str:
        if self._svg_path_fragment is None:
            radii = f"{GeoUtil.svg_number(self._radius_x)} {GeoUtil.svg_number(self._radius_y)}"
            degrees_rotation = GeoUtil.svg_number(math.degrees(self._rotation))
            sweep_flag = "0" if self._anticlockwise else "1"
            end = self.end
            if self.angle_difference < TWO_PI - SVG_FULL_ELLIPSE_EPSILON:
                large_arc_flag = "1" if self.angle_difference > math.pi else "0"
                self._svg_path_fragment = (
                    f"A {radii} {degrees_rotation} {large_arc_flag} {sweep_flag} "
                    f"{GeoUtil.svg_number(end.x)} {GeoUtil.svg_number(end.y)}")
            else:
                # (almost) full ellipse, written as two halves; each half is the small arc
                split_point = self.position_at_angle(self.angle_at(0.5))
                first = (f"A {radii} {degrees_rotation} 0 {sweep_flag} "
                         f"{GeoUtil.svg_number(split_point.x)} {GeoUtil.svg_number(split_point.y)}")
                second = (f"A {radii} {degrees_rotation} 0 {sweep_flag} "
                          f"{GeoUtil.svg_number(end.x)} {GeoUtil.svg_number(end.y)}")
                self._svg_path_fragment = f"{first} {second}"
        return self._svg_path_fragment

    def offset_to(self, r: float, reverse: bool) -> List[Line]:
        """Polyline offset by r along the normal (the offset curve of an ellipse is not an ellipse)."""
        quantity = OFFSET_POLYLINE_QUANTITY
        points: List[Vector2] = []
        result: List[Line] = []
        for i in range(quantity):
            ratio = i / (quantity - 1)
            if reverse:
                ratio = 1 - ratio
            angle = self.angle_at(ratio)
            points.append(self.position_at_angle(angle)
                          + self.tangent_at_angle(angle).perpendicular.normalized() * r)
            if i > 0:
                result.append(Line(points[i - 1], points[i]))
        return result

    def stroke_left(self, line_width: float) -> List[Segment]:
        return self.offset_to(-line_width / 2, False)

    def stroke_right(self, line_width: float) -> List[Segment]:
        return self.offset_to(line_width / 2, True)

    def intersection(self, ray: Ray2) -> List[RayIntersection]:
        """Ray hits, solved on the unit circle and mapped back to the ellipse."""
        unit_transform = self.unit_transform
        ray_in_unit_circle_space = unit_transform.inverse_ray2(ray)
        hits = self.unit_arc_segment.intersection(ray_in_unit_circle_space)

        result = []
        for hit in hits:
            transformed_point = unit_transform.transform_position2(hit.point)
            distance = ray.position.distance(transformed_point)
            normal = unit_transform.transform_normal2(hit.normal)
            result.append(RayIntersection(distance, transformed_point, normal, hit.wind, hit.t))
        return result

    def winding_intersection(self, ray: Ray2) -> int:
        ray_in_unit_circle_space = self.unit_transform.inverse_ray2(ray)
        return self.unit_arc_segment.winding_intersection(ray_in_unit_circle_space)

    def write_to_context(self, context: Any) -> None:
        if callable(getattr(context, "ellipse", None)):
            context.ellipse(self._center.x, self._center.y, self._radius_x, self._radius_y,
                            self._rotation, self._start_angle, self._end_angle, self._anticlockwise)
            return
        m = self.unit_transform.get_matrix()
        inv = self.unit_transform.get_inverse()
        context.transform(m[0, 0], m[1, 0], m[0, 1], m[1, 1], m[0, 2], m[1, 2])
        context.arc(0, 0, 1, self._start_angle, self._end_angle, self._anticlockwise)
        context.transform(inv[0, 0], inv[1, 0], inv[0, 1], inv[1, 1], inv[0, 2], inv[1, 2])

    def transformed(self, matrix: np.ndarray) -> "EllipticalArc":
        Matrix3.validate(matrix)
        origin = Matrix3.times_vector2(matrix, Vector2.ZERO)
        semi_major_axis = Matrix3.times_vector2(matrix, Vector2.create_polar(self._radius_x, self._rotation)) - origin
        semi_minor_axis = Matrix3.times_vector2(
            matrix, Vector2.create_polar(self._radius_y, self._rotation + math.pi / 2)) - origin
        rotation = semi_major_axis.angle
        radius_x = semi_major_axis.magnitude
        radius_y = semi_minor_axis.magnitude

        reflected = Matrix3.determinant(matrix) < 0
        anticlockwise = not self._anticlockwise if reflected else self._anticlockwise
        start_angle = -self._start_angle if reflected else self._start_angle
        end_angle = -self._end_angle if reflected else self._end_angle

        if abs(self._end_angle - self._start_angle) == TWO_PI:
            end_angle = start_angle - TWO_PI if anticlockwise else start_angle + TWO_PI

        return EllipticalArc(Matrix3.times_vector2(matrix, self._center), radius_x, radius_y, rotation,
                             start_angle, end_angle, anticlockwise)

    def get_signed_area_fragment(self) -> float:
        """Contribution of this arc to the signed area of a closed path (Green's theorem)."""
        t0 = self._start_angle
        t1 = self.actual_end_angle
        sin0, sin1 = math.sin(t0), math.sin(t1)
        cos0, cos1 = math.cos(t0), math.cos(t1)
        rx, ry = self._radius_x, self._radius_y
        cx, cy = self._center.x, self._center.y
        return 0.5 * (rx * ry * (t1 - t0)
                      + math.cos(self._rotation) * (rx * cy * (cos0 - cos1) + ry * cx * (sin1 - sin0))
                      + math.sin(self._rotation) * (rx * cx * (cos1 - cos0) + ry * cy * (sin1 - sin0)))

    def get_arc_length(self) -> float:
        rx, ry = self._radius_x, self._radius_y

        def speed(angle: float) -> float:
            return math.hypot(rx * math.sin(angle), ry * math.cos(angle))

        return abs(GeoUtil.adaptive_simpson(speed, self._start_angle, self.actual_end_angle))

    def reversed(self) -> "EllipticalArc":
        return EllipticalArc(self._center, self._radius_x, self._radius_y, self._rotation,
                             self._end_angle, self._start_angle, not self._anticlockwise)

    def serialize(self) -> Dict[str, Any]:
        return {
            "type": "EllipticalArc",
            "centerX": self._center.x,
            "centerY": self._center.y,
            "radiusX": self._radius_x,
            "radiusY": self._radius_y,
            "rotation": self._rotation,
            "startAngle": self._start_angle,
            "endAngle": self._end_angle,
            "anticlockwise": self._anticlockwise,
        }

    @staticmethod
    def deserialize(obj: Mapping[str, Any]) -> "EllipticalArc":
        if obj.get("type") != "EllipticalArc":
            raise InvalidGeometryError(f"Cannot deserialize {obj.get('type')!r} as an EllipticalArc")
        return EllipticalArc(Vector2(obj["centerX"], obj["centerY"]), obj["radiusX"], obj["radiusY"],
                             obj["rotation"], obj["startAngle"], obj["endAngle"], obj["anticlockwise"])

    def get_conic_matrix(self) -> np.ndarray:
        """Symmetric matrix Q with [x y 1] Q [x y 1]^T == 0 exactly on the ellipse."""
        inverted_unit_matrix = np.linalg.inv(self.unit_transform.get_matrix())
        return inverted_unit_matrix.T @ UNIT_CIRCLE_CONIC_MATRIX @ inverted_unit_matrix

    # -----------------------------
    # Overlaps and intersections
    # -----------------------------

    @staticmethod
    def get_overlap_type(a: "EllipticalArc", b: "EllipticalArc",
                         epsilon: float = OVERLAP_EPSILON) -> EllipticalArcOverlapType:
        """Whether two arcs lie on the same underlying ellipse, and how their axes line up."""
        if a.center.distance(b.center) < epsilon:
            matching_radii = abs(a.radius_x - b.radius_x) < epsilon and abs(a.radius_y - b.radius_y) < epsilon
            opposite_radii = abs(a.radius_x - b.radius_y) < epsilon and abs(a.radius_y - b.radius_x) < epsilon

            if matching_radii:
                # rotations equal modulo pi
                if abs(GeoUtil.modulo_between_down(a.rotation - b.rotation + math.pi / 2, 0, math.pi)
                       - math.pi / 2) < epsilon:
                    return EllipticalArcOverlapType.MATCHING_OVERLAP
            if opposite_radii:
                # rotations a quarter turn apart modulo pi
                if abs(GeoUtil.modulo_between_down(a.rotation - b.rotation, 0, math.pi)
                       - math.pi / 2) < epsilon:
                    return EllipticalArcOverlapType.OPPOSITE_OVERLAP
        return EllipticalArcOverlapType.NONE

    @staticmethod
    def get_elliptical_overlaps(a: "EllipticalArc", b: "EllipticalArc") -> List[Overlap]:
        if EllipticalArc.get_overlap_type(a, b) == EllipticalArcOverlapType.NONE:
            return []
        return Arc.get_angular_overlaps(a.start_angle + a.rotation, a.actual_end_angle + a.rotation,
                                        b.start_angle + b.rotation, b.actual_end_angle + b.rotation)

    def get_overlaps(self, segment: Segment, epsilon: float = 1e-6) -> Optional[List[Overlap]]:
        if isinstance(segment, EllipticalArc):
            return EllipticalArc.get_elliptical_overlaps(self, segment)
        return None

    @staticmethod
    def intersect(a: "EllipticalArc", b: "EllipticalArc",
                  epsilon: float = ELLIPSE_INTERSECT_EPSILON) -> List[SegmentIntersection]:
        """Crossings of two elliptical arcs.

        Arcs on the same ellipse (within OVERLAP_EPSILON) only report endpoints shared within epsilon;
        coincident stretches are reported by get_overlaps instead.
        """
        if EllipticalArc.get_overlap_type(a, b) == EllipticalArcOverlapType.NONE:
            return BoundsIntersection.intersect(a, b)

        # same ellipse: only shared endpoints count
        results = []
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

    # -----------------------------
    # SVG endpoint parameterization
    # -----------------------------

    @classmethod
    def from_svg_endpoints(cls, start: Vector2, radius_x: float, radius_y: float, rotation: float,
                           large_arc: bool, sweep: bool, end: Vector2) -> "EllipticalArc":
        """Arc from SVG 'A' command parameters (rotation in radians).

        Follows the endpoint to center conversion of the SVG implementation notes
        (F.6.5), scaling up radii that are too small to reach the end point (F.6.6).
        Coincident endpoints or a zero radius have no arc and raise InvalidGeometryError;
        SVG renders those as nothing or as a straight line.
        """
        start = GeoUtil.require_finite_vector(start, "SVG arc start")
        end = GeoUtil.require_finite_vector(end, "SVG arc end")
        radius_x = abs(GeoUtil.require_finite(radius_x, "SVG arc radius_x"))
        radius_y = abs(GeoUtil.require_finite(radius_y, "SVG arc radius_y"))
        rotation = GeoUtil.require_finite(rotation, "SVG arc rotation")
        if start == end:
            raise InvalidGeometryError("SVG arc endpoints coincide")
        if radius_x == 0 or radius_y == 0:
            raise InvalidGeometryError("SVG arc has a zero radius")

        rxs = radius_x * radius_x
        rys = radius_y * radius_y
        prime = ((start - end) / 2).rotated(-rotation)
        pxs = prime.x * prime.x
        pys = prime.y * prime.y

        size = pxs / rxs + pys / rys
        if size > 1:
            logger.debug("Scaling SVG arc radii by %s to reach the end point", math.sqrt(size))
            radius_x *= math.sqrt(size)
            radius_y *= math.sqrt(size)
            rxs = radius_x * radius_x
            rys = radius_y * radius_y

        center_prime = Vector2(radius_x * prime.y / radius_y, -radius_y * prime.x / radius_x)
        center_prime = center_prime * math.sqrt(max(0.0, (rxs * rys - rxs * pys - rys * pxs) / (rxs * pys + rys * pxs)))
        if large_arc == sweep:
            center_prime = -center_prime
        center = start.average(end) + center_prime.rotated(rotation)

        def signed_angle(u: Vector2, v: Vector2) -> float:
            return (1 if u.cross(v) > 0 else -1) * u.angle_between(v)

        to_start = Vector2((prime.x - center_prime.x) / radius_x, (prime.y - center_prime.y) / radius_y)
        to_end = Vector2((-prime.x - center_prime.x) / radius_x, (-prime.y - center_prime.y) / radius_y)
        start_angle = signed_angle(Vector2.X_UNIT, to_start)
        delta_angle = math.fmod(signed_angle(to_start, to_end), TWO_PI)
        if not sweep and delta_angle > 0:
            delta_angle -= TWO_PI
        if sweep and delta_angle < 0:
            delta_angle += TWO_PI

        return cls(center, radius_x, radius_y, rotation, start_angle, start_angle + delta_angle, not sweep)

    def __repr__(self) -> str:
        return (f"EllipticalArc({self._center!r}, {self._radius_x!r}, {self._radius_y!r}, "
                f"{self._rotation!r}, {self._start_angle!r}, {self._end_angle!r}, {self._anticlockwise!r})")
