from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Type

import numpy as np

from geometry.Bounds2 import Bounds2
from geometry.Emitter import Emitter
from geometry.Errors import InvalidGeometryError
from geometry.GeoUtil import GeoUtil
from geometry.Overlap import Overlap
from geometry.Ray2 import Ray2
from geometry.RayIntersection import RayIntersection
from geometry.SegmentIntersection import SegmentIntersection
from geometry.Vector2 import Vector2


class Segment(ABC):
    """A parametric curve piece p(t), 0 <= t <= 1, that can be part of a path.

    Concrete segments register themselves by class name so that
    ``Segment.deserialize`` can rebuild them from their ``serialize()`` form.
    """

    _registry: Dict[str, Type["Segment"]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        Segment._registry[cls.__name__] = cls

    def __init__(self) -> None:
        # fires after every change of the defining parameters
        self.invalidation_emitter = Emitter()

    # -----------------------------
    # Contract
    # -----------------------------

    @property
    @abstractmethod
    def start(self) -> Vector2: ...

    @property
    @abstractmethod
    def end(self) -> Vector2: ...

    @property
    @abstractmethod
    def start_tangent(self) -> Vector2: ...

    @property
    @abstractmethod
    def end_tangent(self) -> Vector2: ...

    @property
    @abstractmethod
    def bounds(self) -> Bounds2: ...

    @abstractmethod
    def position_at(self, t: float) -> Vector2: ...

    @abstractmethod
    def tangent_at(self, t: float) -> Vector2: ...

    @abstractmethod
    def curvature_at(self, t: float) -> float: ...

    @abstractmethod
    def subdivided(self, t: float) -> List["Segment"]: ...

    @abstractmethod
    def get_svg_path_fragment(self) -> str: ...

    @abstractmethod
    def get_nondegenerate_segments(self) -> List["Segment"]: ...

    @abstractmethod
    def get_interior_extrema_ts(self) -> List[float]: ...

    @abstractmethod
    def intersection(self, ray: Ray2) -> List[RayIntersection]: ...

    @abstractmethod
    def winding_intersection(self, ray: Ray2) -> int: ...

    @abstractmethod
    def write_to_context(self, context: Any) -> None: ...

    @abstractmethod
    def transformed(self, matrix: np.ndarray) -> "Segment": ...

    @abstractmethod
    def reversed(self) -> "Segment": ...

    @abstractmethod
    def stroke_left(self, line_width: float) -> List["Segment"]: ...

    @abstractmethod
    def stroke_right(self, line_width: float) -> List["Segment"]: ...

    @abstractmethod
    def get_signed_area_fragment(self) -> float: ...

    @abstractmethod
    def serialize(self) -> Dict[str, Any]: ...

    def get_overlaps(self, segment: "Segment", epsilon: float = 1e-6) -> Optional[List[Overlap]]:
        """Continuous overlaps with another segment, or None if not computable for that pairing."""
        return None

    # -----------------------------
    # Shared behaviour
    # -----------------------------

    def slice(self, t0: float, t1: float) -> "Segment":
        """The part of this segment between t0 and t1."""
        GeoUtil.require_t(t0, "slice")
        GeoUtil.require_t(t1, "slice")
        if t0 >= t1:
            raise InvalidGeometryError(f"slice needs t0 < t1, got {t0} and {t1}")
        segment = self
        if t1 < 1:
            segment = segment.subdivided(t1)[0]
        if t0 > 0:
            segment = segment.subdivided(GeoUtil.linear(0, t1, 0, 1, t0))[-1]
        return segment

    def subdivisions(self, t_list: List[float]) -> List["Segment"]:
        """Split at each of the sorted t values (0 < t < 1)."""
        result: List[Segment] = []
        right: Segment = self
        remaining = list(t_list)
        for i, t in enumerate(remaining):
            left, right = right.subdivided(t)
            result.append(left)
            # rescale the remaining t values into the right piece
            for j in range(i + 1, len(remaining)):
                remaining[j] = GeoUtil.linear(t, 1, 0, 1, remaining[j])
        result.append(right)
        return result

    def subdivided_into_monotone(self) -> List["Segment"]:
        return self.subdivisions(self.get_interior_extrema_ts())

    def to_polyline(self, tol: float) -> List[Vector2]:
        """Points approximating this segment to within tol."""
        return GeoUtil.flatten_segment(self, tol)

    @staticmethod
    def deserialize(obj: Mapping[str, Any]) -> "Segment":
        kind = obj.get("type") if isinstance(obj, Mapping) else None
        cls = Segment._registry.get(kind) if isinstance(kind, str) else None
        if cls is None:
            raise InvalidGeometryError(f"Unknown serialized segment type: {kind!r}")
        return cls.deserialize(obj)

    @staticmethod
    def intersect(a: "Segment", b: "Segment") -> List[SegmentIntersection]:
        """Finite intersections between two segments, using the best routine for the pair."""
        from geometry.Arc import Arc
        from geometry.BoundsIntersection import BoundsIntersection
        from geometry.EllipticalArc import EllipticalArc
        from geometry.Line import Line

        if isinstance(a, Line) and isinstance(b, Line):
            return Line.intersect(a, b)
        if isinstance(a, Line):
            return Line.intersect_other(a, b)
        if isinstance(b, Line):
            return [hit.swapped() for hit in Line.intersect_other(b, a)]
        if isinstance(a, Arc) and isinstance(b, Arc):
            return Arc.intersect(a, b)
        if isinstance(a, EllipticalArc) and isinstance(b, EllipticalArc):
            return EllipticalArc.intersect(a, b)
        return BoundsIntersection.intersect(a, b)
