"""Crash handling: last-resort records for uncaught exceptions."""

import json
import os
import sys
import traceback
import uuid

from utils.clock import format_timestamp

# Default crash log path, can be overridden by configure()
_crash_log = "logs/crash.log"


def configure(crash_file):
    """Set crash log file path from config."""
    global _crash_log
    _crash_log = crash_file


def crash_record(exc_type, exc_value, exc_tb, context=None):
    """Build the JSON-serializable record for one crash."""
    record = {
        "id": uuid.uuid4().hex[:12],
        "timestamp": format_timestamp(),
        "type": exc_type.__name__ if exc_type else "Unknown",
        "msg": str(exc_value) if exc_value else "",
        "traceback": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)) if exc_type else None,
    }
    if context:
        record["context"] = context
    return record


def _write_crash(record):
    """Append record to the crash file. Never raises."""
    try:
        log_dir = os.path.dirname(_crash_log)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        with open(_crash_log, "a") as f:
            f.write(json.dumps(record, default=str) + "\n")
    except OSError:
        pass


def log_crash(exc_type, exc_value, exc_tb):
    """sys.excepthook: report to stderr and the crash file."""
    record = crash_record(exc_type, exc_value, exc_tb)
    bar = "=" * 60
    sys.stderr.write(f"\n{bar}\nCRASH [{record['id']}] {record['timestamp']}\n{bar}\n")
    sys.stderr.write(f"{record['type']}: {record['msg']}\n{'-' * 60}\n{record['traceback'] or ''}{bar}\n\n")
    _write_crash(record)
    return record


def log_async_crash(exc, context_dict, logger=None):
    """Report an exception the event loop could not deliver to anyone."""
    if exc is not None:
        record = crash_record(type(exc), exc, exc.__traceback__, str(context_dict))
    else:
        record = crash_record(None, context_dict.get("message", "Unknown"), None, str(context_dict))
        record["type"] = "AsyncError"
    if logger:
        logger.error("async exception", error=record["msg"], crash_id=record["id"],
                     task=str(context_dict.get("future", "unknown")))
    _write_crash(record)
    return record


def create_async_handler(logger=None):
    """Create async exception handler for event loop."""
    def handler(loop, context):
        log_async_crash(context.get("exception"), context, logger)
    return handler


def install_crash_handler():
    """Install global sync exception handler."""
    sys.excepthook = log_crash
