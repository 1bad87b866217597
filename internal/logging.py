import json
import sys
import threading
from enum import IntEnum

from utils.clock import format_timestamp


class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40


_logger = None
_logger_lock = threading.Lock()


class StructuredLogger:
    """One JSON object per line on stderr. Bound fields are merged into every record.

    A logger built without an explicit level or stream follows the process-wide
    logger, so component loggers created before configure() still pick it up.
    """

    def __init__(self, level=None, fields=None, stream=None):
        self._level = level
        self.fields = fields or {}
        self.stream = stream

    @property
    def level(self):
        if self._level is not None:
            return self._level
        if _logger is not None and _logger is not self and _logger._level is not None:
            return _logger._level
        return LogLevel.INFO

    def bind(self, **fields):
        return StructuredLogger(self._level, {**self.fields, **fields}, self.stream)

    def _emit(self, level, message, error=None, **kwargs):
        if level < self.level:
            return
        stream = self.stream or (_logger.stream if _logger is not None else None) or sys.stderr
        try:
            record = {"timestamp": format_timestamp(), "level": level.name, "msg": message,
                      **self.fields, **kwargs}
            if error:
                record["err"] = str(error)
            print(json.dumps(record, default=str), file=stream, flush=True)
        except Exception:
            pass

    def debug(self, message, **kwargs):
        self._emit(LogLevel.DEBUG, message, **kwargs)

    def info(self, message, **kwargs):
        self._emit(LogLevel.INFO, message, **kwargs)

    def warn(self, message, error=None, **kwargs):
        self._emit(LogLevel.WARN, message, error, **kwargs)

    def error(self, message, error=None, **kwargs):
        self._emit(LogLevel.ERROR, message, error, **kwargs)

    @classmethod
    def configure(cls, min_level=LogLevel.INFO, stream=None):
        global _logger
        with _logger_lock:
            _logger = cls(min_level, stream=stream)


def get_logger(component=None):
    """Component logger that follows whatever configure() last installed."""
    global _logger
    if _logger is None:
        with _logger_lock:
            if _logger is None:
                _logger = StructuredLogger(LogLevel.INFO)
    if component:
        return StructuredLogger(fields={"component": component})
    return _logger


def parse_level(name):
    """Map a config level name to LogLevel. WARNING is accepted for WARN."""
    name = (name or "INFO").upper()
    if name == "WARNING":
        name = "WARN"
    return LogLevel[name]
