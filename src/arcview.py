import argparse
import logging
import os
from typing import List, Optional, Sequence

import matplotlib.pyplot as plt

from export.JsonExporter import JsonExporter
from geometry.AffineTransform import AffineTransform
from geometry.Bounds2 import Bounds2
from geometry.Errors import GeometryError
from geometry.Segment import Segment
from svg.SvgConverter import SvgConverter
from svg.SvgTransform import SvgTransform

logger = logging.getLogger("arcview")


def visualize_segments(segments: List[Segment], tol: float, show_axes: bool = True):
    """Plot the flattened segments in a 2D view (y down, like SVG)."""
    fig, ax = plt.subplots(figsize=(8, 6))

    for segment in segments:
        pts = segment.to_polyline(tol)
        ax.plot([p.x for p in pts], [p.y for p in pts], linewidth=1.0)

    if show_axes:
        ax.axhline(0, linewidth=0.5, color="gray")
        ax.axvline(0, linewidth=0.5, color="gray")

    ax.set_xlabel("X (SVG units)")
    ax.set_ylabel("Y (SVG units)")
    ax.set_aspect("equal", adjustable="datalim")
    ax.invert_yaxis()
    ax.grid(True)
    grid_on = [True]

    def on_key(event):
        if event.key == 'g':
            grid_on[0] = not grid_on[0]
            ax.grid(grid_on[0])
            fig.canvas.draw_idle()

    fig.canvas.mpl_connect('key_press_event', on_key)
    plt.tight_layout()
    plt.show()


def load_segments(input_path: Optional[str], svg_path_data: Optional[str], tol: float) -> List[Segment]:
    if svg_path_data is not None:
        return SvgConverter.path_data_to_segments(svg_path_data, chord_tol=tol)
    if os.path.splitext(input_path)[1].lower() == ".json":
        return JsonExporter.load(input_path)
    return SvgConverter.svg_to_segments(input_path, chord_tol=tol)


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        description="Elliptical arc paths: SVG/JSON -> segments, bounds, SVG path data + 2D viewer")
    source = ap.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", help="Input SVG or JSON segment file")
    source.add_argument("--svg-path", metavar="D", help="SVG path data to read instead of a file")
    ap.add_argument("--transform", metavar="T", help="SVG transform to apply, e.g. 'rotate(30) scale(2,1)'")
    ap.add_argument("--tol", type=float, default=0.1, help="Flattening tolerance (default: 0.1)")
    ap.add_argument("--no-view", action="store_true", help="Do not open the viewer")
    ap.add_argument("--export-json", metavar="PATH", help="Write segments to JSON (use '-' for stdout)")
    ap.add_argument("--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        segments = load_segments(args.input, args.svg_path, args.tol)
        if args.transform:
            transform = AffineTransform(SvgTransform.parse(args.transform))
            logger.debug("Applying %r", transform)
            segments = [s for seg in segments
                        for s in seg.transformed(transform.get_matrix()).get_nondegenerate_segments()]
    except (GeometryError, OSError) as e:
        logger.error("%s", e)
        return 1

    if not segments:
        logger.error("No segments found")
        return 1

    bounds = Bounds2.NOTHING
    for segment in segments:
        bounds = bounds.union(segment.bounds)
    counts = {}
    for segment in segments:
        counts[type(segment).__name__] = counts.get(type(segment).__name__, 0) + 1

    print(f"Loaded segments: {len(segments)} ({', '.join(f'{k}: {v}' for k, v in sorted(counts.items()))})")
    print(f"Bounds: min=({bounds.min_x:.6g},{bounds.min_y:.6g}) max=({bounds.max_x:.6g},{bounds.max_y:.6g})")
    print(f"Signed area (closed subpaths): {sum(s.get_signed_area_fragment() for s in segments):.6g}")
    print(f"Path: {SvgConverter.segments_to_path_data(segments)}")

    if args.export_json:
        JsonExporter.export(segments, args.export_json)

    if not args.no_view:
        visualize_segments(segments, args.tol)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
