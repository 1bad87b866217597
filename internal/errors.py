"""Custom errors with tracking IDs."""

import uuid

from utils.clock import format_timestamp


class BaseSimError(Exception):
    """Base error with unique ID and timestamp for tracking."""

    def __init__(self, message, context=None, cause=None):
        super().__init__(message)
        self.error_id = uuid.uuid4().hex[:12]
        self.timestamp = format_timestamp()
        self.context = context or {}
        self.cause = cause

    def __str__(self):
        return f"[{self.error_id}] {super().__str__()}"

    def to_dict(self):
        return {"error_id": self.error_id, "timestamp": self.timestamp,
                "error": type(self).__name__, "msg": super().__str__(), "context": self.context}


class BusError(BaseSimError):
    """Event bus errors (subscribe/publish failures)."""

    def __init__(self, message, subscriber_name=None, **kwargs):
        context = kwargs.pop("context", {})
        if subscriber_name:
            context["subscriber_name"] = subscriber_name
        super().__init__(message, context=context, **kwargs)


class SurfaceUnavailableError(BaseSimError):
    """The drawing surface is missing or has no usable area. Fatal for the world."""

    def __init__(self, message, width=None, height=None, **kwargs):
        context = kwargs.pop("context", {})
        if width is not None:
            context["width"] = width
        if height is not None:
            context["height"] = height
        super().__init__(message, context=context, **kwargs)
