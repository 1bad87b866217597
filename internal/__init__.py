from utils.clock import now_micros, format_timestamp
from internal.errors import BaseSimError, BusError, SurfaceUnavailableError

__all__ = [
    "now_micros",
    "format_timestamp",
    "BaseSimError",
    "BusError",
    "SurfaceUnavailableError",
]
