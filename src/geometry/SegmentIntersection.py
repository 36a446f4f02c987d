from dataclasses import dataclass

from geometry.Vector2 import Vector2


@dataclass(frozen=True)
class SegmentIntersection:
    point: Vector2
    a_t: float
    b_t: float

    def swapped(self) -> "SegmentIntersection":
        return SegmentIntersection(self.point, self.b_t, self.a_t)
