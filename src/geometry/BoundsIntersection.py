import logging
from dataclasses import dataclass
from typing import List

from geometry.SegmentIntersection import SegmentIntersection
from geometry.Vector2 import Vector2
from geometry.geometry_constants import (
    BOUNDS_INTERSECTION_GROUP_DISTANCE,
    BOUNDS_INTERSECTION_ITERATIONS,
    BOUNDS_INTERSECTION_MAX_RANGES,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BoundsIntersection:
    """A pair of parametric ranges, one on each segment, whose endpoint boxes overlap.

    Both ranges are monotone pieces (no interior extrema), so the box spanned by a
    range's endpoints bounds the curve over that range.
    """
    a: "object"
    b: "object"
    at_min: float
    at_max: float
    bt_min: float
    bt_max: float
    a_min: Vector2
    a_max: Vector2
    b_min: Vector2
    b_max: Vector2

    def push_subdivisions(self, intersections: List["BoundsIntersection"]) -> None:
        """Split both ranges in half and keep the quarter pairs whose boxes still overlap."""
        at_mid = (self.at_max + self.at_min) / 2
        bt_mid = (self.bt_max + self.bt_min) / 2

        # no more precision available
        if at_mid in (self.at_min, self.at_max) or bt_mid in (self.bt_min, self.bt_max):
            intersections.append(self)
            return

        a_mid = self.a.position_at(at_mid)
        b_mid = self.b.position_at(bt_mid)

        halves_a = ((self.at_min, at_mid, self.a_min, a_mid), (at_mid, self.at_max, a_mid, self.a_max))
        halves_b = ((self.bt_min, bt_mid, self.b_min, b_mid), (bt_mid, self.bt_max, b_mid, self.b_max))
        for bt0, bt1, b0, b1 in halves_b:
            for at0, at1, a0, a1 in halves_a:
                if BoundsIntersection.box_intersects(a0, a1, b0, b1):
                    intersections.append(BoundsIntersection(self.a, self.b, at0, at1, bt0, bt1, a0, a1, b0, b1))

    def distance(self, other: "BoundsIntersection") -> float:
        """Squared distance between the two pairs of parametric ranges."""
        da_min = self.at_min - other.at_min
        da_max = self.at_max - other.at_max
        db_min = self.bt_min - other.bt_min
        db_max = self.bt_max - other.bt_max
        return da_min * da_min + da_max * da_max + db_min * db_min + db_max * db_max

    @staticmethod
    def box_intersects(a_min: Vector2, a_max: Vector2, b_min: Vector2, b_max: Vector2) -> bool:
        """Whether the boxes spanned by two point pairs overlap (touching counts)."""
        min_x = max(min(a_min.x, a_max.x), min(b_min.x, b_max.x))
        min_y = max(min(a_min.y, a_max.y), min(b_min.y, b_max.y))
        max_x = min(max(a_min.x, a_max.x), max(b_min.x, b_max.x))
        max_y = min(max(a_min.y, a_max.y), max(b_min.y, b_max.y))
        return max_x - min_x >= 0 and max_y - min_y >= 0

    @staticmethod
    def get_intersection_ranges(a, b) -> List["BoundsIntersection"]:
        a_extrema = a.get_interior_extrema_ts()
        b_extrema = b.get_interior_extrema_ts()
        a_internals = list(zip([0.0] + a_extrema, a_extrema + [1.0]))
        b_internals = list(zip([0.0] + b_extrema, b_extrema + [1.0]))

        intersections: List[BoundsIntersection] = []
        for at_min, at_max in a_internals:
            for bt_min, bt_max in b_internals:
                a_min = a.position_at(at_min)
                a_max = a.position_at(at_max)
                b_min = b.position_at(bt_min)
                b_max = b.position_at(bt_max)
                if BoundsIntersection.box_intersects(a_min, a_max, b_min, b_max):
                    intersections.append(
                        BoundsIntersection(a, b, at_min, at_max, bt_min, bt_max, a_min, a_max, b_min, b_max))

        for _ in range(BOUNDS_INTERSECTION_ITERATIONS):
            refined: List[BoundsIntersection] = []
            for intersection in reversed(intersections):
                intersection.push_subdivisions(refined)
            if len(refined) > BOUNDS_INTERSECTION_MAX_RANGES:
                # coincident stretches keep every sub-box touching; they have no isolated crossings
                logger.debug("Stopping subdivision at %d candidate ranges", len(refined))
                return []
            intersections = refined
        return intersections

    @staticmethod
    def intersect(a, b) -> List[SegmentIntersection]:
        """Intersections of any two segments by repeated subdivision of their monotone pieces.

        Each result's a_t/b_t are the averaged parameters of a group of converged ranges.
        """
        if not a.bounds.intersects_bounds(b.bounds):
            return []

        groups: List[List[BoundsIntersection]] = []
        for intersection in BoundsIntersection.get_intersection_ranges(a, b):
            for group in groups:
                if any(intersection.distance(other) < BOUNDS_INTERSECTION_GROUP_DISTANCE for other in group):
                    group.append(intersection)
                    break
            else:
                groups.append([intersection])

        results = []
        for group in groups:
            a_t = sum(item.at_min + item.at_max for item in group) / (2 * len(group))
            b_t = sum(item.bt_min + item.bt_max for item in group) / (2 * len(group))
            position_a = a.position_at(a_t)
            position_b = b.position_at(b_t)
            results.append(SegmentIntersection(position_a.average(position_b), a_t, b_t))
        return results
