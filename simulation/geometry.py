"""Scalar 2D helpers shared by the ring world."""

import math
from collections import namedtuple

TAU = 2 * math.pi

Point2 = namedtuple("Point2", "x y")


def distance(dx, dy):
    return math.sqrt(dx * dx + dy * dy)


def normalize_angle(angle):
    """Wrap an angle into [0, 2pi)."""
    wrapped = angle % TAU
    # -tiny % TAU rounds up to exactly TAU
    return 0.0 if wrapped >= TAU else wrapped


def angle_of(dx, dy):
    """Angle of (dx, dy) in [0, 2pi), measured on a y-down canvas."""
    return normalize_angle(math.atan2(dy, dx))


def angle_in_interval(theta, start, end):
    """Half-open membership start <= theta < end; end < start spans the 0/2pi seam."""
    if end >= start:
        return start <= theta < end
    return theta >= start or theta < end


def reflect(vx, vy, nx, ny, coefficient):
    """v' = v - k * (v . n) * n for a unit normal n."""
    dot = vx * nx + vy * ny
    return vx - coefficient * dot * nx, vy - coefficient * dot * ny


def clamp(value, low, high):
    return max(low, min(high, value))
