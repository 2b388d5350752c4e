"""
Geometry Utilities
===================
Distances, unit vectors and angular sweep containment.
"""

import math
from typing import Tuple

TAU = 2 * math.pi

# Below this length a vector has no usable direction
EPSILON = 1e-9


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


def normalize(dx: float, dy: float) -> Tuple[float, float]:
    """Unit vector in the direction of (dx, dy), or (0, 0) if degenerate."""
    length = math.hypot(dx, dy)
    if length <= EPSILON:
        return 0.0, 0.0
    return dx / length, dy / length


def normalize_angle(angle: float) -> float:
    """Map any angle in radians into [0, 2*pi)."""
    wrapped = angle % TAU
    # -1e-17 % TAU rounds to TAU itself
    if wrapped >= TAU:
        wrapped = 0.0
    return wrapped


def angle_in_sweep(angle: float, start: float, end: float) -> bool:
    """
    Check whether an angle lies on the arc swept from start to end.

    All three angles are normalized first. When the normalized start is
    past the normalized end the arc crosses 0, and anything at or after
    start OR at or before end is inside.
    """
    angle = normalize_angle(angle)
    start = normalize_angle(start)
    end = normalize_angle(end)
    if start <= end:
        return start <= angle <= end
    return angle >= start or angle <= end


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
