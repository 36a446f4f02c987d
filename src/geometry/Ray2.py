from dataclasses import dataclass

from geometry.Vector2 import Vector2


@dataclass(frozen=True)
class Ray2:
    """Half-line from position along direction. direction is expected to be a unit vector."""
    position: Vector2
    direction: Vector2

    def point_at_distance(self, distance: float) -> Vector2:
        return self.position + self.direction * distance
