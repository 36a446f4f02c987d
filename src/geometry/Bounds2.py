import math
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from geometry.Vector2 import Vector2


@dataclass(frozen=True)
class Bounds2:
    """Axis-aligned bounding box. NOTHING (inverted infinite box) is the empty bounds."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @staticmethod
    def point(p: Vector2) -> "Bounds2":
        return Bounds2(p.x, p.y, p.x, p.y)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """(minx, miny, maxx, maxy)"""
        return (self.min_x, self.min_y, self.max_x, self.max_y)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def is_empty(self) -> bool:
        return self.width < 0 or self.height < 0

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in self.as_tuple())

    def with_point(self, p: Vector2) -> "Bounds2":
        return Bounds2(min(self.min_x, p.x), min(self.min_y, p.y),
                       max(self.max_x, p.x), max(self.max_y, p.y))

    def union(self, other: "Bounds2") -> "Bounds2":
        return Bounds2(min(self.min_x, other.min_x), min(self.min_y, other.min_y),
                       max(self.max_x, other.max_x), max(self.max_y, other.max_y))

    def intersects_bounds(self, other: "Bounds2") -> bool:
        # touching boxes count as intersecting
        return (max(self.min_x, other.min_x) <= min(self.max_x, other.max_x)
                and max(self.min_y, other.min_y) <= min(self.max_y, other.max_y))

    def contains_point(self, p: Vector2) -> bool:
        return self.min_x <= p.x <= self.max_x and self.min_y <= p.y <= self.max_y

    def dilated(self, d: float) -> "Bounds2":
        return Bounds2(self.min_x - d, self.min_y - d, self.max_x + d, self.max_y + d)

    def equals_epsilon(self, other: "Bounds2", epsilon: float) -> bool:
        return all(abs(a - b) <= epsilon for a, b in zip(self.as_tuple(), other.as_tuple()))

    def transformed(self, m: np.ndarray) -> "Bounds2":
        """Bounds containing all four transformed corners. Empty bounds stay empty."""
        if self.is_empty():
            return self
        result = Bounds2.NOTHING
        for x, y in ((self.min_x, self.min_y), (self.max_x, self.min_y),
                     (self.min_x, self.max_y), (self.max_x, self.max_y)):
            result = result.with_point(Vector2(m[0, 0] * x + m[0, 1] * y + m[0, 2],
                                               m[1, 0] * x + m[1, 1] * y + m[1, 2]))
        return result


Bounds2.NOTHING = Bounds2(math.inf, math.inf, -math.inf, -math.inf)
