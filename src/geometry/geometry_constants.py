import math

TWO_PI = 2 * math.pi

# Tolerances
OVERLAP_EPSILON = 1e-4            # full-ellipse overlap classification
ELLIPSE_INTERSECT_EPSILON = 1e-10  # endpoint coincidence for the same underlying ellipse
ARC_INTERSECT_EPSILON = 1e-7      # same for circular arcs
ANGLE_SNAP_EPSILON = 1e-8         # map_angle snaps to start/end within this
EXTREMA_T_EPSILON = 1e-10         # interior extrema must be this far from t=0 and t=1
OVERLAP_MIN_SPAN = 1e-8           # shorter angular overlaps are ignored
LINE_RAY_MIN_DISTANCE = 1e-8      # ray hits closer than this to the origin are ignored

# SVG output
SVG_FULL_ELLIPSE_EPSILON = 0.01   # sweeps within this of 2pi are written as two commands
SVG_NUMBER_PRECISION = 12         # digits after the decimal point

# Fixed counts
OFFSET_POLYLINE_QUANTITY = 32
BOUNDS_INTERSECTION_ITERATIONS = 50
BOUNDS_INTERSECTION_GROUP_DISTANCE = 1e-13
BOUNDS_INTERSECTION_MAX_RANGES = 1024  # more candidates than this means the curves coincide
FLATTEN_MAX_DEPTH = 18
