"""Logical drawing-surface dimensions, as reported by the canvas that renders frames."""

import math

from internal.errors import SurfaceUnavailableError
from internal.logging import get_logger
from simulation.geometry import Point2


def _check_size(width, height):
    if width is None or height is None:
        raise SurfaceUnavailableError("surface has no drawable area", width=width, height=height)
    if not math.isfinite(width) or not math.isfinite(height) or width <= 0 or height <= 0:
        raise SurfaceUnavailableError("surface has no drawable area", width=width, height=height)


class Surface:
    """Logical width/height in CSS pixels plus the device pixel ratio of the backing canvas."""

    def __init__(self, width, height, device_pixel_ratio=1.0):
        _check_size(width, height)
        self.width = width
        self.height = height
        self.device_pixel_ratio = device_pixel_ratio
        self._listeners = []
        self._log = get_logger("surface")

    @property
    def available(self):
        return math.isfinite(self.width) and math.isfinite(self.height) and self.width > 0 and self.height > 0

    @property
    def center(self):
        return Point2(self.width / 2, self.height / 2)

    @property
    def pixel_size(self):
        return round(self.width * self.device_pixel_ratio), round(self.height * self.device_pixel_ratio)

    def resize(self, width, height, device_pixel_ratio=None):
        """Apply a resize notification. Returns True when anything changed."""
        _check_size(width, height)
        dpr = self.device_pixel_ratio if device_pixel_ratio is None else device_pixel_ratio
        if (width, height, dpr) == (self.width, self.height, self.device_pixel_ratio):
            return False
        self.width, self.height, self.device_pixel_ratio = width, height, dpr
        self._log.debug("surface resized", width=width, height=height, dpr=dpr)
        for listener in list(self._listeners):
            listener(self)
        return True

    def on_resize(self, callback):
        """Register a resize listener. The returned callable revokes it; calling it twice is harmless."""
        self._listeners.append(callback)

        def remove():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return remove

    @property
    def listener_count(self):
        return len(self._listeners)


def require_surface(surface):
    """Precondition for running a world: a surface with a drawable area."""
    if surface is None:
        raise SurfaceUnavailableError("no drawing surface attached")
    _check_size(surface.width, surface.height)
    return surface
