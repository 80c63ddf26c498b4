"""Geometry and physics primitives shared by the engines."""

import math

from core.models import Point3


def distance(a: Point3, b: Point3) -> float:
    """Euclidean distance between two points (m)."""
    return math.sqrt((a.x - b.x) ** 2 + (a.y - b.y) ** 2 + (a.z - b.z) ** 2)


def magnitude(v: Point3) -> float:
    return math.sqrt(v.x * v.x + v.y * v.y + v.z * v.z)


def angle_between(u: Point3, v: Point3) -> float:
    """Angle between two vectors in degrees, in [0, 180].

    A zero-length vector has no direction; it is treated as aligned (0°).
    """
    mag_u = magnitude(u)
    mag_v = magnitude(v)
    if mag_u == 0 or mag_v == 0:
        return 0.0
    cos_angle = (u.x * v.x + u.y * v.y + u.z * v.z) / (mag_u * mag_v)
    # Rounding can push |cos| just past 1
    cos_angle = max(-1.0, min(1.0, cos_angle))
    return math.degrees(math.acos(cos_angle))


def speed_of_sound(temperature_c: float = 20.0) -> float:
    """Speed of sound in air (m/s): c = 331.3 + 0.606 * T.

    Linear approximation, valid near room temperature. T is not range-checked.
    """
    return 331.3 + 0.606 * temperature_c
