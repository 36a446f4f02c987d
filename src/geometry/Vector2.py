from dataclasses import dataclass
import math
from typing import Tuple


@dataclass(frozen=True, slots=True)
class Vector2:
    """Immutable 2D vector, used both for positions and for directions."""
    x: float
    y: float

    @staticmethod
    def create_polar(magnitude: float, angle: float) -> "Vector2":
        return Vector2(magnitude * math.cos(angle), magnitude * math.sin(angle))

    def as_tuple(self) -> Tuple[float, float]: return (self.x, self.y)
    def __add__(self, o: "Vector2") -> "Vector2": return Vector2(self.x + o.x, self.y + o.y)
    def __sub__(self, o: "Vector2") -> "Vector2": return Vector2(self.x - o.x, self.y - o.y)
    def __mul__(self, k: float) -> "Vector2": return Vector2(self.x * k, self.y * k)
    __rmul__ = __mul__
    def __truediv__(self, k: float) -> "Vector2": return Vector2(self.x / k, self.y / k)
    def __neg__(self) -> "Vector2": return Vector2(-self.x, -self.y)
    def __abs__(self) -> float: return math.hypot(self.x, self.y)
    def dot(self, o: "Vector2") -> float: return self.x * o.x + self.y * o.y
    def cross(self, o: "Vector2") -> float: return self.x * o.y - self.y * o.x

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def magnitude_squared(self) -> float:
        return self.x * self.x + self.y * self.y

    @property
    def angle(self) -> float:
        """Angle in radians from the +x axis, in (-pi, pi]."""
        return math.atan2(self.y, self.x)

    @property
    def perpendicular(self) -> "Vector2":
        # rotated by -pi/2
        return Vector2(self.y, -self.x)

    def normalized(self) -> "Vector2":
        mag = self.magnitude
        if mag == 0:
            raise ZeroDivisionError("Cannot normalize a zero-magnitude vector")
        return Vector2(self.x / mag, self.y / mag)

    def rotated(self, angle: float) -> "Vector2":
        return Vector2.create_polar(self.magnitude, self.angle + angle)

    def distance(self, o: "Vector2") -> float:
        return math.hypot(self.x - o.x, self.y - o.y)

    def angle_between(self, o: "Vector2") -> float:
        cos_angle = self.dot(o) / (self.magnitude * o.magnitude)
        return math.acos(max(-1.0, min(1.0, cos_angle)))

    def blend(self, o: "Vector2", ratio: float) -> "Vector2":
        return Vector2(self.x + (o.x - self.x) * ratio, self.y + (o.y - self.y) * ratio)

    def average(self, o: "Vector2") -> "Vector2":
        return self.blend(o, 0.5)

    def equals_epsilon(self, o: "Vector2", epsilon: float = 0.0) -> bool:
        return max(abs(self.x - o.x), abs(self.y - o.y)) <= epsilon

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)


Vector2.ZERO = Vector2(0.0, 0.0)
Vector2.X_UNIT = Vector2(1.0, 0.0)
Vector2.Y_UNIT = Vector2(0.0, 1.0)
