import logging
import math
from typing import Any, Iterable, List, Optional, cast
from xml.etree.ElementTree import ParseError

import numpy as np
from svgelements import (SVG, Arc, Circle, Close, Ellipse, Line, Matrix, Move, Path, Polygon, Polyline, Rect,
                         SimpleLine)

from geometry.EllipticalArc import EllipticalArc
from geometry.Errors import InvalidGeometryError
from geometry.GeoUtil import GeoUtil
from geometry.Line import Line as LineSegment
from geometry.Matrix3 import Matrix3
from geometry.Segment import Segment
from geometry.Vector2 import Vector2
from geometry.geometry_constants import TWO_PI

logger = logging.getLogger(__name__)


class SvgConverter:
    """SVG path data / documents <-> kernel segments (Line, EllipticalArc)."""

    @staticmethod
    def _walk(node: Any):
        """Yield the drawable leaves of a parsed document."""
        if isinstance(node, (Path, SimpleLine, Rect, Circle, Ellipse, Polyline, Polygon)):
            yield node
            return

        if hasattr(node, "__iter__"):
            for ch in node:
                yield from SvgConverter._walk(ch)

    @staticmethod
    def _to_float(value: Any) -> Optional[float]:
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def _to_vector(point: Any) -> Vector2:
        return Vector2(float(point.x), float(point.y))

    @staticmethod
    def _get_attr(o, *names):
        for n in names:
            v = getattr(o, n, None)
            if v is not None:
                return v
        return None

    @staticmethod
    def _svg_matrix_to_array(m: Any) -> np.ndarray:
        # SVG matrix: [a c e; b d f; 0 0 1]
        return Matrix3.affine(getattr(m, "a", 1.0), getattr(m, "b", 0.0), getattr(m, "c", 0.0),
                              getattr(m, "d", 1.0), getattr(m, "e", 0.0), getattr(m, "f", 0.0))

    @staticmethod
    def _flatten(seg: Any, chord_tol: float) -> List[Segment]:
        """Curves the kernel has no segment type for become short lines."""
        length = max(seg.length(error=1e-4), 0.0)
        n = max(2, int(math.ceil(length / max(chord_tol, 1e-9))))
        pts = [SvgConverter._to_vector(seg.point(i / (n - 1))) for i in range(n)]
        return [LineSegment(p0, p1) for p0, p1 in zip(pts, pts[1:]) if p0 != p1]

    @staticmethod
    def _arc_to_segments(seg: Arc) -> List[Segment]:
        start = SvgConverter._to_vector(seg.start)
        end = SvgConverter._to_vector(seg.end)
        if start == end:
            logger.debug("Skipping arc with coincident endpoints at %s", start)
            return []

        center = SvgConverter._to_vector(seg.center)
        prx = SvgConverter._to_vector(seg.prx) - center
        pry = SvgConverter._to_vector(seg.pry) - center
        radius_x, radius_y = prx.magnitude, pry.magnitude
        if radius_x == 0 or radius_y == 0:
            logger.debug("Arc with a zero radius becomes a line to %s", end)
            return [LineSegment(start, end)]

        sweep = float(seg.sweep)
        arc = EllipticalArc.from_svg_endpoints(start, radius_x, radius_y, prx.angle,
                                               abs(sweep) > math.pi, sweep > 0, end)
        return arc.get_nondegenerate_segments()

    @staticmethod
    def path_to_segments(path: Path, chord_tol: float = 0.25) -> List[Segment]:
        segments: List[Segment] = []
        for seg in path:
            if isinstance(seg, Move):
                continue
            if seg.start is None or seg.end is None:
                continue
            if isinstance(seg, (Line, Close)):
                start = SvgConverter._to_vector(seg.start)
                end = SvgConverter._to_vector(seg.end)
                if start != end:
                    segments.append(LineSegment(start, end))
            elif isinstance(seg, Arc):
                segments.extend(SvgConverter._arc_to_segments(seg))
            else:
                logger.debug("Flattening %s into lines", type(seg).__name__)
                segments.extend(SvgConverter._flatten(seg, chord_tol))
        return segments

    @staticmethod
    def path_data_to_segments(d: str, chord_tol: float = 0.25) -> List[Segment]:
        """Segments for the 'd' attribute of an SVG path."""
        return SvgConverter.path_to_segments(Path(d), chord_tol)

    @staticmethod
    def _polyline(points: List[Vector2], closed: bool) -> List[Segment]:
        if closed and len(points) >= 2 and points[0] != points[-1]:
            points = points + [points[0]]
        return [LineSegment(p0, p1) for p0, p1 in zip(points, points[1:]) if p0 != p1]

    @staticmethod
    def _rounded_rect(x: float, y: float, w: float, h: float, rx: float, ry: float) -> List[Segment]:
        rx = min(rx, w / 2.0)
        ry = min(ry, h / 2.0)

        def corner(cx, cy, a0):
            return EllipticalArc(Vector2(cx, cy), rx, ry, 0.0, a0, a0 + math.pi / 2, False)

        pieces: List[Segment] = [
            LineSegment(Vector2(x + rx, y), Vector2(x + w - rx, y)),
            corner(x + w - rx, y + ry, -math.pi / 2),
            LineSegment(Vector2(x + w, y + ry), Vector2(x + w, y + h - ry)),
            corner(x + w - rx, y + h - ry, 0.0),
            LineSegment(Vector2(x + w - rx, y + h), Vector2(x + rx, y + h)),
            corner(x + rx, y + h - ry, math.pi / 2),
            LineSegment(Vector2(x, y + h - ry), Vector2(x, y + ry)),
            corner(x + rx, y + ry, math.pi),
        ]
        return [s for piece in pieces for s in piece.get_nondegenerate_segments()]

    @staticmethod
    def element_to_segments(elem: Any, chord_tol: float = 0.25) -> List[Segment]:
        """Segments of one document leaf, in its local coordinates."""
        if isinstance(elem, Path):
            return SvgConverter.path_to_segments(elem, chord_tol)

        if isinstance(elem, SimpleLine):
            x1 = SvgConverter._to_float(getattr(elem, "x1", None))
            y1 = SvgConverter._to_float(getattr(elem, "y1", None))
            x2 = SvgConverter._to_float(getattr(elem, "x2", None))
            y2 = SvgConverter._to_float(getattr(elem, "y2", None))
            if None in (x1, y1, x2, y2):
                return []
            return SvgConverter._polyline([Vector2(x1, y1), Vector2(x2, y2)], closed=False)

        if isinstance(elem, Rect):
            x = SvgConverter._to_float(getattr(elem, "x", None))
            y = SvgConverter._to_float(getattr(elem, "y", None))
            w = SvgConverter._to_float(getattr(elem, "width", None))
            h = SvgConverter._to_float(getattr(elem, "height", None))
            rx = SvgConverter._to_float(getattr(elem, "rx", None)) or 0.0
            ry = SvgConverter._to_float(getattr(elem, "ry", None)) or 0.0
            if None in (x, y, w, h) or w <= 0 or h <= 0:
                return []
            if rx > 0 and ry > 0:
                return SvgConverter._rounded_rect(x, y, w, h, rx, ry)
            corners = [Vector2(x, y), Vector2(x + w, y), Vector2(x + w, y + h), Vector2(x, y + h)]
            return SvgConverter._polyline(corners, closed=True)

        if isinstance(elem, (Circle, Ellipse)):
            cx = SvgConverter._to_float(SvgConverter._get_attr(elem, "cx", "center_x"))
            cy = SvgConverter._to_float(SvgConverter._get_attr(elem, "cy", "center_y"))
            rx = SvgConverter._to_float(SvgConverter._get_attr(elem, "rx", "radius_x", "r", "radius"))
            ry = SvgConverter._to_float(SvgConverter._get_attr(elem, "ry", "radius_y", "r", "radius"))
            if None in (cx, cy, rx, ry) or rx <= 0 or ry <= 0:
                return []
            return EllipticalArc(Vector2(cx, cy), rx, ry, 0.0, 0.0, TWO_PI, False).get_nondegenerate_segments()

        if isinstance(elem, (Polygon, Polyline)):
            raw = cast(Iterable[Any], getattr(elem, "points", ()))
            points = [SvgConverter._to_vector(p) for p in raw if p is not None]
            return SvgConverter._polyline(points, closed=isinstance(elem, Polygon))

        return []

    @staticmethod
    def svg_to_segments(svg_path: str, chord_tol: float = 0.25) -> List[Segment]:
        """All drawable elements of an SVG file as segments in document coordinates."""
        try:
            doc = SVG.parse(svg_path, reify=False)
        except ParseError as e:
            raise InvalidGeometryError(f"Malformed SVG file {svg_path}: {e}") from e

        segments: List[Segment] = []
        for elem in SvgConverter._walk(doc):
            local = SvgConverter.element_to_segments(elem, chord_tol)
            m = getattr(elem, "transform", None)
            if isinstance(m, Matrix) and m != Matrix():
                matrix = SvgConverter._svg_matrix_to_array(m)
                local = [s for seg in local for s in seg.transformed(matrix).get_nondegenerate_segments()]
            segments.extend(local)
        logger.debug("Read %d segments from %s", len(segments), svg_path)
        return segments

    @staticmethod
    def segments_to_path_data(segments: List[Segment], epsilon: float = 1e-9) -> str:
        """SVG path data for a list of segments, with a move wherever the path jumps."""
        if not segments:
            raise InvalidGeometryError("No segments to write")

        parts: List[str] = []
        last_end: Optional[Vector2] = None
        for segment in segments:
            start = segment.start
            if last_end is None or not last_end.equals_epsilon(start, epsilon):
                parts.append(f"M {GeoUtil.svg_number(start.x)} {GeoUtil.svg_number(start.y)}")
            parts.append(segment.get_svg_path_fragment())
            last_end = segment.end
        return " ".join(parts)
