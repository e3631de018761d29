"""
Angle Primitives
Unsigned, degree-valued angles shared by every joint and alignment measurement.
"""

import math

from .keypoints import Point2D

# Straight down in image coordinates (y grows downward)
VERTICAL = Point2D(0.0, 1.0)


def angle_between(v1: Point2D, v2: Point2D) -> float:
    """
    Unsigned angle between two vectors in degrees, range [0, 180].
    Returns 0 when either vector has zero length or the result is not finite.
    """
    if v1.length() == 0 or v2.length() == 0:
        return 0.0

    dot = v1.x * v2.x + v1.y * v2.y
    cross = v1.x * v2.y - v1.y * v2.x

    degrees = abs(math.degrees(math.atan2(cross, dot)))
    return degrees if math.isfinite(degrees) else 0.0


def angle(vertex: Point2D, a: Point2D, b: Point2D) -> float:
    """Angle at `vertex` between the rays to `a` and `b`, in degrees [0, 180]"""
    return angle_between(a - vertex, b - vertex)


def distance(p1: Point2D, p2: Point2D) -> float:
    """Euclidean distance between two points"""
    return (p1 - p2).length()
