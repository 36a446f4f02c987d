from enum import Enum, auto


class EllipticalArcOverlapType(Enum):
    """How two full ellipses coincide, ignoring start/end angles and winding."""

    MATCHING_OVERLAP = auto()  # radius_x matches radius_x, rotations differ by a multiple of pi
    OPPOSITE_OVERLAP = auto()  # radius_x matches radius_y, rotations differ by a multiple of pi plus pi/2
    NONE = auto()
