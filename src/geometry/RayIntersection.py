from dataclasses import dataclass

from geometry.Vector2 import Vector2


@dataclass(frozen=True)
class RayIntersection:
    distance: float  # along the ray
    point: Vector2
    normal: Vector2  # unit normal at the hit, facing the ray origin
    wind: int  # +1 or -1, contribution to the winding number
    t: float  # parametric value on the segment
