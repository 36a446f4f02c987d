import math
import os
import sys

import numpy as np
import pytest
from svgelements import Path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from geometry.Arc import Arc
from geometry.Bounds2 import Bounds2
from geometry.BoundsIntersection import BoundsIntersection
from geometry.EllipticalArc import EllipticalArc
from geometry.EllipticalArcOverlapType import EllipticalArcOverlapType
from geometry.Errors import InvalidGeometryError, UnsupportedGeometryError
from geometry.Line import Line
from geometry.Matrix3 import Matrix3
from geometry.Ray2 import Ray2
from geometry.Segment import Segment
from geometry.Vector2 import Vector2

PI = math.pi


def close(a: Vector2, b: Vector2, tol: float = 1e-9) -> bool:
    return a.equals_epsilon(b, tol)


@pytest.fixture
def arcs():
    return [
        EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, PI / 2, False),
        EllipticalArc(Vector2(1, -2), 5, 3, 0.4, -1, 2.5, False),
        EllipticalArc(Vector2(-3, 7), 6, 1, -1.2, 2, -1, True),
        EllipticalArc(Vector2(2, 2), 3, 2, 0.7, 1, 1 + 2 * PI, False),
    ]


# -----------------------------
# Normalization
# -----------------------------

def test_negative_radius_x_is_folded_into_angles():
    arc = EllipticalArc(Vector2(0, 0), -5, 3, 0, 0, PI, False)
    assert arc.radius_x == 5
    assert arc.radius_y == 3
    assert arc.start_angle == pytest.approx(PI)
    assert arc.end_angle == pytest.approx(0)
    assert arc.anticlockwise is True


def test_negative_radius_y_is_folded_into_angles():
    arc = EllipticalArc(Vector2(0, 0), 5, -3, 0, 0.5, 1.5, False)
    assert arc.radius_y == 3
    assert arc.start_angle == -0.5
    assert arc.end_angle == -1.5
    assert arc.anticlockwise is True


def test_negative_radius_keeps_the_traced_points():
    folded = EllipticalArc(Vector2(1, 1), -5, 3, 0.3, 0.2, 1.7, False)
    plain = EllipticalArc(Vector2(1, 1), 5, 3, 0.3, PI - 0.2, PI - 1.7, True)
    for t in (0, 0.3, 1):
        assert close(folded.position_at(t), plain.position_at(t))


def test_tall_ellipse_is_rotated_and_swapped():
    tall = EllipticalArc(Vector2(0, 0), 2, 4, 0, 0, PI / 2, False)
    assert tall.radius_x == 4
    assert tall.radius_y == 2
    assert tall.rotation == pytest.approx(PI / 2)
    assert tall.start_angle == pytest.approx(-PI / 2)
    # same points as the unswapped parametrization
    assert close(tall.start, Vector2(2, 0))
    assert close(tall.end, Vector2(0, 4))


def test_span_limits():
    # exactly 2pi in the winding direction is allowed
    EllipticalArc(Vector2(0, 0), 2, 1, 0, 0, 2 * PI, False)
    EllipticalArc(Vector2(0, 0), 2, 1, 0, 0, -2 * PI, True)
    with pytest.raises(UnsupportedGeometryError):
        EllipticalArc(Vector2(0, 0), 2, 1, 0, 0, 2 * PI + 0.1, False)
    with pytest.raises(UnsupportedGeometryError):
        EllipticalArc(Vector2(0, 0), 2, 1, 0, 2 * PI, 0, False)


def test_invalid_input_is_rejected():
    with pytest.raises(InvalidGeometryError):
        EllipticalArc(Vector2(math.nan, 0), 2, 1, 0, 0, 1, False)
    with pytest.raises(InvalidGeometryError):
        EllipticalArc(Vector2(0, 0), math.inf, 1, 0, 0, 1, False)
    with pytest.raises(InvalidGeometryError):
        EllipticalArc((0, 0), 2, 1, 0, 0, 1, False)
    with pytest.raises(InvalidGeometryError):
        EllipticalArc(Vector2(0, 0), 2, 1, 0, 0, 1, "yes")


def test_setters_renormalize_and_invalidate():
    arc = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, PI / 2, False)
    calls = []
    arc.invalidation_emitter.add_listener(lambda: calls.append(1))
    assert close(arc.end, Vector2(0, 2))

    arc.radius_y = 3
    assert close(arc.end, Vector2(0, 3))
    arc.center = Vector2(1, 1)
    assert close(arc.start, Vector2(5, 1))
    arc.radius_x = -4
    assert arc.radius_x == 4
    assert arc.anticlockwise is True
    assert len(calls) == 3

    # unchanged value: no notification
    arc.center = Vector2(1, 1)
    assert len(calls) == 3


def test_failed_setter_leaves_arc_unchanged():
    arc = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, PI / 2, False)
    before = arc.serialize()
    calls = []
    arc.invalidation_emitter.add_listener(lambda: calls.append(1))
    with pytest.raises(UnsupportedGeometryError):
        arc.end_angle = 3 * PI
    with pytest.raises(InvalidGeometryError):
        arc.rotation = math.nan
    assert arc.serialize() == before
    assert calls == []


# -----------------------------
# Angles and parameters
# -----------------------------

def test_actual_end_angle_and_angle_difference():
    arc = EllipticalArc(Vector2(0, 0), 2, 1, 0, 1, 0.5, False)
    assert arc.actual_end_angle == pytest.approx(0.5 + 2 * PI)
    assert arc.angle_difference == pytest.approx(2 * PI - 0.5)
    assert not arc.is_full_perimeter

    arc = EllipticalArc(Vector2(0, 0), 2, 1, 0, 0.5, 1, True)
    assert arc.actual_end_angle == pytest.approx(1 - 2 * PI)

    full = EllipticalArc(Vector2(0, 0), 2, 1, 0, 0, 2 * PI, False)
    assert full.is_full_perimeter


def test_t_at_angle_inverts_angle_at(arcs):
    for arc in arcs:
        for t in (0, 0.25, 0.5, 0.9):
            assert arc.t_at_angle(arc.angle_at(t)) == pytest.approx(t, abs=1e-9)


def test_map_angle_folds_into_range():
    arc = EllipticalArc(Vector2(0, 0), 2, 1, 0, 0, PI, False)
    assert arc.map_angle(PI / 2 + 4 * PI) == pytest.approx(PI / 2)
    assert arc.map_angle(-2 * PI) == 0
    assert arc.map_angle(3 * PI + 1e-10) == arc.actual_end_angle


# -----------------------------
# Segment contract
# -----------------------------

def test_endpoints_match_positions(arcs):
    for arc in arcs:
        assert close(arc.position_at(0), arc.start)
        assert close(arc.position_at(1), arc.end)


def test_position_lies_on_the_ellipse(arcs):
    for arc in arcs:
        conic = arc.get_conic_matrix()
        for t in (0, 0.1, 0.5, 0.77, 1):
            p = arc.position_at(t)
            v = np.array([p.x, p.y, 1.0])
            assert v @ conic @ v == pytest.approx(0, abs=1e-9)


def test_tangent_matches_finite_difference(arcs):
    for arc in arcs:
        for t in (0.2, 0.5, 0.8):
            h = 1e-6
            diff = (arc.position_at(t + h) - arc.position_at(t - h)).normalized()
            tangent = arc.tangent_at(t)
            assert tangent.magnitude == pytest.approx(1)
            assert close(tangent, diff, 1e-5)


def test_parameter_out_of_range_is_rejected():
    arc = EllipticalArc(Vector2(0, 0), 2, 1, 0, 0, 1, False)
    with pytest.raises(InvalidGeometryError):
        arc.position_at(1.5)
    with pytest.raises(InvalidGeometryError):
        arc.curvature_at(-0.1)


def test_curvature_at_vertices():
    arc = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, PI, False)
    # at the end of the major axis: a / b^2
    assert arc.curvature_at(0) == pytest.approx(4 / 2 ** 2)
    # at the end of the minor axis: b / a^2
    assert arc.curvature_at(0.5) == pytest.approx(2 / 4 ** 2)
    assert arc.reversed().curvature_at(1) == pytest.approx(-4 / 2 ** 2)


def test_subdivision_continuity(arcs):
    for arc in arcs:
        split = 0.3
        left, right = arc.subdivided(split)
        assert close(left.end, right.start)
        for t in (0, 0.5, 1):
            assert close(left.position_at(t), arc.position_at(t * split))
            assert close(right.position_at(t), arc.position_at(split + t * (1 - split)))


def test_subdivided_at_ends_returns_self():
    arc = EllipticalArc(Vector2(0, 0), 2, 1, 0, 0, 1, False)
    assert arc.subdivided(0) == [arc]
    assert arc.subdivided(1) == [arc]


def test_subdivisions_and_monotone_pieces(arcs):
    arc = arcs[3]
    pieces = arc.subdivided_into_monotone()
    assert len(pieces) == len(arc.get_interior_extrema_ts()) + 1
    assert close(pieces[0].start, arc.start)
    assert close(pieces[-1].end, arc.end)
    for a, b in zip(pieces, pieces[1:]):
        assert close(a.end, b.start)
    for piece in pieces:
        assert piece.get_interior_extrema_ts() == []


def test_reversal_symmetry(arcs):
    for arc in arcs:
        rev = arc.reversed()
        for t in (0, 0.3, 0.6, 1):
            assert close(rev.position_at(t), arc.position_at(1 - t))


def test_quarter_circle_bounds():
    arc = EllipticalArc(Vector2(0, 0), 1, 1, 0, 0, PI / 2, False)
    b = arc.bounds
    assert b.min_x == pytest.approx(0, abs=1e-12)
    assert b.min_y == pytest.approx(0, abs=1e-12)
    assert b.max_x == pytest.approx(1)
    assert b.max_y == pytest.approx(1)


def test_rotated_bounds_contain_samples(arcs):
    for arc in arcs:
        b = arc.bounds.dilated(1e-9)
        samples = [arc.position_at(i / 200) for i in range(201)]
        for p in samples:
            assert b.contains_point(p)
        # and are tight
        assert min(p.x for p in samples) == pytest.approx(arc.bounds.min_x, abs=1e-2)
        assert max(p.y for p in samples) == pytest.approx(arc.bounds.max_y, abs=1e-2)


def test_full_ellipse_bounds():
    arc = EllipticalArc(Vector2(1, 2), 4, 2, 0, 0, 2 * PI, False)
    assert arc.bounds.equals_epsilon(Bounds2(-3, 0, 5, 4), 1e-12)


def test_interior_extrema_ts_are_sorted_and_interior(arcs):
    for arc in arcs:
        ts = arc.get_interior_extrema_ts()
        assert ts == sorted(ts)
        assert all(0 < t < 1 for t in ts)


def test_nondegenerate_segments():
    assert EllipticalArc(Vector2(0, 0), 0, 0, 0, 0, 1, False).get_nondegenerate_segments() == []
    assert EllipticalArc(Vector2(0, 0), 2, 0, 0, 0, 1, False).get_nondegenerate_segments() == []
    assert EllipticalArc(Vector2(0, 0), 2, 1, 0, 1, 1, False).get_nondegenerate_segments() == []

    ellipse = EllipticalArc(Vector2(0, 0), 2, 1, 0, 0, 1, False)
    assert ellipse.get_nondegenerate_segments() == [ellipse]

    circle = EllipticalArc(Vector2(1, 1), 2, 2, 0.5, 0, 1, True)
    (arc,) = circle.get_nondegenerate_segments()
    assert isinstance(arc, Arc)
    assert arc.start_angle == pytest.approx(0.5)
    assert close(arc.start, circle.start)
    assert close(arc.end, circle.end)


def test_nondegenerate_full_circle_stays_full():
    circle = EllipticalArc(Vector2(0, 0), 2, 2, 0, 0, -2 * PI, True)
    (arc,) = circle.get_nondegenerate_segments()
    assert arc.end_angle - arc.start_angle == -2 * PI
    assert arc.is_full_perimeter

    rotated = EllipticalArc(Vector2(0, 0), 2, 2, 0.3, 0, -2 * PI, True)
    (arc,) = rotated.get_nondegenerate_segments()
    assert arc.start_angle == pytest.approx(0.3)
    assert arc.angle_difference == pytest.approx(2 * PI)
    assert arc.get_arc_length() == pytest.approx(4 * PI)


# -----------------------------
# SVG
# -----------------------------

def test_svg_fragment_single_command():
    arc = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, PI / 2, False)
    assert arc.get_svg_path_fragment() == "A 4 2 0 0 1 0 2"


def test_svg_fragment_flags_and_rotation():
    arc = EllipticalArc(Vector2(0, 0), 4, 2, PI / 2, 0, 1.5 * PI, True)
    rx, ry, rot, large, sweep, x, y = arc.get_svg_path_fragment().split()[1:]
    assert (rx, ry, rot) == ("4", "2", "90")
    # anticlockwise from 0 to 1.5pi sweeps only pi/2
    assert large == "0"
    assert sweep == "0"
    assert float(x) == pytest.approx(arc.end.x)
    assert float(y) == pytest.approx(arc.end.y)

    big = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, 1.5 * PI, False)
    assert big.get_svg_path_fragment().split()[4:6] == ["1", "1"]


def test_svg_fragment_splits_near_full_ellipse():
    arc = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, 2 * PI - 1e-9, False)
    fragment = arc.get_svg_path_fragment()
    assert fragment.count("A") == 2
    first, second = fragment.split(" A ")
    assert first.split()[4] == "0"
    assert second.split()[3] == "0"
    mid = arc.position_at_angle(PI - 0.5e-9)
    assert float(first.split()[6]) == pytest.approx(mid.x)


@pytest.mark.parametrize("end_angle, anticlockwise", [(-0.005, False), (0.005, True)])
def test_svg_fragment_near_full_ellipse_renders_the_whole_sweep(end_angle, anticlockwise):
    arc = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, end_angle, anticlockwise)
    assert arc.angle_difference == pytest.approx(2 * PI - 0.005)
    path = Path(f"M {arc.start.x} {arc.start.y} {arc.get_svg_path_fragment()}")
    assert path.length() == pytest.approx(arc.get_arc_length(), rel=1e-4)
    mid = arc.position_at(0.5)
    samples = [path.point(i / 1000) for i in range(1001)]
    assert min(math.hypot(p.x - mid.x, p.y - mid.y) for p in samples) < 0.05


def test_svg_fragment_is_recomputed_after_change():
    arc = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, PI / 2, False)
    assert arc.get_svg_path_fragment() == "A 4 2 0 0 1 0 2"
    arc.center = Vector2(1, 0)
    assert arc.get_svg_path_fragment() == "A 4 2 0 0 1 1 2"


# -----------------------------
# Strokes, rays, drawing
# -----------------------------

def test_offset_polyline(arcs):
    arc = arcs[0]
    left = arc.stroke_left(2)
    right = arc.stroke_right(2)
    assert len(left) == 31
    assert all(isinstance(s, Line) for s in left)
    for a, b in zip(left, left[1:]):
        assert a.end == b.start
    # left starts one unit off the start, right runs backwards and ends there
    assert left[0].start.distance(arc.start) == pytest.approx(1)
    assert right[-1].end.distance(arc.start) == pytest.approx(1)
    assert left[0].start.distance(right[-1].end) == pytest.approx(2)


def test_ray_intersection_through_axis_aligned_ellipse():
    arc = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, 2 * PI, False)
    hits = arc.intersection(Ray2(Vector2(-10, 0), Vector2(1, 0)))
    assert [h.distance for h in hits] == pytest.approx([6, 14])
    assert close(hits[0].point, Vector2(-4, 0))
    assert close(hits[1].point, Vector2(4, 0))
    # normals face against the ray
    assert close(hits[0].normal, Vector2(-1, 0))
    assert close(hits[1].normal, Vector2(-1, 0))
    assert hits[0].wind + hits[1].wind == 0
    assert arc.winding_intersection(Ray2(Vector2(-10, 0), Vector2(1, 0))) == 0


def test_ray_intersection_normals_are_perpendicular_to_the_curve():
    arc = EllipticalArc(Vector2(1, 2), 5, 2, 0.6, 0, 2 * PI, False)
    ray = Ray2(Vector2(-20, 1), Vector2(1, 0.1).normalized())
    hits = arc.intersection(ray)
    assert len(hits) == 2
    for hit in hits:
        assert hit.normal.magnitude == pytest.approx(1)
        assert hit.normal.dot(arc.tangent_at(hit.t)) == pytest.approx(0, abs=1e-9)
        assert close(arc.position_at(hit.t), hit.point, 1e-9)
        assert ray.position.distance(hit.point) == pytest.approx(hit.distance)


def test_winding_from_inside():
    arc = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, 2 * PI, False)
    assert arc.winding_intersection(Ray2(Vector2(0, 0), Vector2(1, 0))) == 1
    assert arc.reversed().winding_intersection(Ray2(Vector2(0, 0), Vector2(1, 0))) == -1


def test_ray_missing_the_arc_part():
    arc = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, PI / 2, False)
    # only the crossing at positive y is on the arc
    (hit,) = arc.intersection(Ray2(Vector2(1, -10), Vector2(0, 1)))
    assert hit.point.y > 0


class _ArcOnlyContext:
    def __init__(self):
        self.calls = []

    def transform(self, *args):
        self.calls.append(("transform", args))

    def arc(self, *args):
        self.calls.append(("arc", args))


class _EllipseContext(_ArcOnlyContext):
    def ellipse(self, *args):
        self.calls.append(("ellipse", args))


def test_write_to_context_prefers_ellipse():
    arc = EllipticalArc(Vector2(1, 2), 4, 2, 0.5, 0, 1, True)
    ctx = _EllipseContext()
    arc.write_to_context(ctx)
    assert ctx.calls == [("ellipse", (1, 2, 4, 2, 0.5, 0, 1, True))]


def test_write_to_context_falls_back_to_unit_arc():
    arc = EllipticalArc(Vector2(1, 2), 4, 2, 0.5, 0, 1, True)
    ctx = _ArcOnlyContext()
    arc.write_to_context(ctx)
    names = [name for name, _ in ctx.calls]
    assert names == ["transform", "arc", "transform"]
    assert ctx.calls[1][1] == (0, 0, 1, 0, 1, True)
    m = arc.unit_transform.get_matrix()
    a, b, c, d, e, f = ctx.calls[0][1]
    assert (a, b, c, d, e, f) == pytest.approx((m[0, 0], m[1, 0], m[0, 1], m[1, 1], m[0, 2], m[1, 2]))


# -----------------------------
# Transformation
# -----------------------------

def test_transformed_matches_transformed_points(arcs):
    matrices = [
        Matrix3.translation(3, -1) @ Matrix3.rotation2(0.8),
        Matrix3.rotation2(-0.4) @ Matrix3.scaling(1.5),
        Matrix3.scaling(-1, 1),  # reflection
    ]
    for arc in arcs:
        for m in matrices:
            mapped = arc.transformed(m)
            for t in (0, 0.4, 1):
                expected = Matrix3.times_vector2(m, arc.position_at(t))
                assert close(mapped.position_at(t), expected, 1e-9)


def test_transformed_scales_axis_aligned_ellipse():
    arc = EllipticalArc(Vector2(1, 1), 4, 2, 0, 0, PI / 2, False)
    mapped = arc.transformed(Matrix3.scaling(0.5, 3))
    assert mapped.radius_x == pytest.approx(6)
    assert mapped.radius_y == pytest.approx(2)
    assert close(mapped.start, Vector2(2.5, 3))
    assert close(mapped.end, Vector2(0.5, 9))


def test_transformed_reflection_flips_winding():
    arc = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, 1, False)
    mirrored = arc.transformed(Matrix3.scaling(1, -1))
    assert mirrored.anticlockwise is True
    assert mirrored.start_angle == 0
    assert mirrored.end_angle == -1


def test_transformed_full_ellipse_stays_full():
    arc = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0.5, 0.5 + 2 * PI, False)
    mirrored = arc.transformed(Matrix3.scaling(-1, 1))
    assert mirrored.is_full_perimeter
    assert mirrored.angle_difference == pytest.approx(2 * PI)


# -----------------------------
# Area, length, serialization
# -----------------------------

def test_signed_area_of_full_ellipse():
    arc = EllipticalArc(Vector2(3, -1), 4, 2, 0.3, 0, 2 * PI, False)
    assert arc.get_signed_area_fragment() == pytest.approx(PI * 4 * 2)
    assert arc.reversed().get_signed_area_fragment() == pytest.approx(-PI * 4 * 2)


def test_signed_area_of_closed_half_ellipse():
    arc = EllipticalArc(Vector2(2, 5), 4, 2, 0.7, 0, PI, False)
    chord = Line(arc.end, arc.start)
    assert arc.get_signed_area_fragment() + chord.get_signed_area_fragment() == pytest.approx(PI * 4 * 2 / 2)


def test_arc_length():
    circle = EllipticalArc(Vector2(0, 0), 3, 3, 0, 0, PI, False)
    assert circle.get_arc_length() == pytest.approx(3 * PI)
    # Ramanujan's approximation is accurate to ~1e-5 relative for this eccentricity
    a, b = 4, 2
    h = ((a - b) / (a + b)) ** 2
    perimeter = PI * (a + b) * (1 + 3 * h / (10 + math.sqrt(4 - 3 * h)))
    full = EllipticalArc(Vector2(0, 0), a, b, 1, 0, 2 * PI, False)
    assert full.get_arc_length() == pytest.approx(perimeter, rel=1e-5)


def test_serialization_round_trip(arcs):
    for arc in arcs:
        data = arc.serialize()
        assert data["type"] == "EllipticalArc"
        copy = EllipticalArc.deserialize(data)
        assert copy.serialize() == data
        assert Segment.deserialize(data).serialize() == data


def test_deserialize_rejects_other_types():
    with pytest.raises(InvalidGeometryError):
        EllipticalArc.deserialize({"type": "Arc", "centerX": 0, "centerY": 0, "radius": 1,
                                   "startAngle": 0, "endAngle": 1, "anticlockwise": False})


def test_conic_matrix_of_axis_aligned_ellipse():
    arc = EllipticalArc(Vector2(0, 0), 2, 1, 0, 0, 1, False)
    expected = np.diag([1 / 4, 1, -1])
    assert np.allclose(arc.get_conic_matrix(), expected)


# -----------------------------
# Overlaps and intersections
# -----------------------------

def test_matching_overlap_with_rotation_differing_by_pi():
    a = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, 1, False)
    b = EllipticalArc(Vector2(0, 0), 4, 2, PI, 0, 1, False)
    assert EllipticalArc.get_overlap_type(a, b) == EllipticalArcOverlapType.MATCHING_OVERLAP
    assert EllipticalArc.get_overlap_type(b, a) == EllipticalArcOverlapType.MATCHING_OVERLAP


def test_opposite_overlap():
    # radii within the overlap tolerance of each other, axes a quarter turn apart
    a = EllipticalArc(Vector2(0, 0), 4, 3.99995, 0, 0, 1, False)
    b = EllipticalArc(Vector2(0, 0), 4, 3.99995, PI / 2, 0, 1, False)
    assert EllipticalArc.get_overlap_type(a, b) == EllipticalArcOverlapType.OPPOSITE_OVERLAP
    assert EllipticalArc.get_overlap_type(b, a) == EllipticalArcOverlapType.OPPOSITE_OVERLAP

    c = EllipticalArc(Vector2(0, 0), 4, 2, PI / 2, 0, 1, False)
    d = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, 1, False)
    assert EllipticalArc.get_overlap_type(c, d) == EllipticalArcOverlapType.NONE


def test_overlap_type_symmetry(arcs):
    others = arcs + [EllipticalArc(Vector2(0, 0), 4, 2, PI, 1, 2, True)]
    for a in others:
        for b in others:
            assert EllipticalArc.get_overlap_type(a, b) == EllipticalArc.get_overlap_type(b, a)


def test_no_overlap_for_different_ellipses(arcs):
    assert EllipticalArc.get_overlap_type(arcs[0], arcs[1]) == EllipticalArcOverlapType.NONE
    assert arcs[0].get_overlaps(arcs[1]) == []
    assert arcs[0].get_overlaps(Line(Vector2(0, 0), Vector2(1, 1))) is None


def test_overlaps_on_same_ellipse():
    a = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, PI, False)
    b = EllipticalArc(Vector2(0, 0), 4, 2, 0, PI / 2, 3 * PI / 2, False)
    (overlap,) = a.get_overlaps(b)
    assert overlap.t0 == pytest.approx(0.5)
    assert overlap.t1 == pytest.approx(1)
    assert overlap.qt0 == pytest.approx(0)
    assert overlap.qt1 == pytest.approx(0.5)
    assert close(a.position_at(0.75), b.position_at(overlap.apply(0.75)))


def test_intersect_same_ellipse_only_shares_endpoints():
    a = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, PI / 2, False)
    b = EllipticalArc(Vector2(0, 0), 4, 2, 0, PI / 2, PI, False)
    (hit,) = EllipticalArc.intersect(a, b)
    assert (hit.a_t, hit.b_t) == (1, 0)
    assert close(hit.point, Vector2(0, 2))


def test_intersect_nearly_identical_ellipses():
    a = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, 1, False)
    b = EllipticalArc(Vector2(0, 0), 4 + 1e-9, 2, 0, 0.5, 1.5, False)
    # treated as the same ellipse, and the ends are too far apart to touch
    assert EllipticalArc.intersect(a, b) == []
    assert BoundsIntersection.intersect(a, b) == []

    c = EllipticalArc(Vector2(0, 0), 4 + 1e-12, 2, 0, 1, 2, False)
    (hit,) = EllipticalArc.intersect(a, c)
    assert (hit.a_t, hit.b_t) == (1, 0)
    assert close(hit.point, a.end)


def test_intersect_crossing_ellipses():
    a = EllipticalArc(Vector2(0, 0), 4, 2, 0, 0, 2 * PI - 0.001, False)
    b = EllipticalArc(Vector2(0, 0), 4, 2, PI / 2, 0.001, 2 * PI, False)
    hits = EllipticalArc.intersect(a, b)
    assert len(hits) == 4
    for hit in hits:
        assert close(a.position_at(hit.a_t), hit.point, 1e-7)
        assert close(b.position_at(hit.b_t), hit.point, 1e-7)
        # |x| == |y| where the two ellipses cross
        assert abs(hit.point.x) == pytest.approx(abs(hit.point.y), abs=1e-7)


# -----------------------------
# SVG endpoint parametrization
# -----------------------------

def test_from_svg_endpoints_half_circle():
    arc = EllipticalArc.from_svg_endpoints(Vector2(0, 0), 1, 1, 0, False, True, Vector2(2, 0))
    assert close(arc.center, Vector2(1, 0))
    assert close(arc.start, Vector2(0, 0))
    assert close(arc.end, Vector2(2, 0))
    assert arc.anticlockwise is False
    assert arc.position_at(0.5).y == pytest.approx(-1)


def test_from_svg_endpoints_scales_small_radii():
    arc = EllipticalArc.from_svg_endpoints(Vector2(0, 0), 1, 0.5, 0, False, True, Vector2(10, 0))
    assert arc.radius_x == pytest.approx(5)
    assert arc.radius_y == pytest.approx(2.5)
    assert close(arc.end, Vector2(10, 0), 1e-9)


def test_from_svg_endpoints_large_arc_flag():
    small = EllipticalArc.from_svg_endpoints(Vector2(0, 0), 5, 3, 0.3, False, True, Vector2(4, 1))
    large = EllipticalArc.from_svg_endpoints(Vector2(0, 0), 5, 3, 0.3, True, True, Vector2(4, 1))
    assert small.angle_difference < PI < large.angle_difference
    for arc in (small, large):
        assert close(arc.start, Vector2(0, 0), 1e-9)
        assert close(arc.end, Vector2(4, 1), 1e-9)


def test_from_svg_endpoints_rejects_degenerate_input():
    with pytest.raises(InvalidGeometryError):
        EllipticalArc.from_svg_endpoints(Vector2(1, 1), 2, 2, 0, False, True, Vector2(1, 1))
    with pytest.raises(InvalidGeometryError):
        EllipticalArc.from_svg_endpoints(Vector2(0, 0), 0, 2, 0, False, True, Vector2(1, 1))
