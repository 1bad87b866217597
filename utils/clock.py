"""Wall-clock timestamps and frame pacing."""

import time
from datetime import datetime, timezone


def now_micros():
    """Current time in microseconds since Unix epoch."""
    return int(time.time() * 1_000_000)


def format_timestamp(epoch_us=None):
    """Format timestamp as ISO 8601 with microseconds."""
    if epoch_us is None:
        epoch_us = now_micros()

    dt = datetime.fromtimestamp(epoch_us / 1_000_000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%f") + "Z"


class FrameDeadline:
    """Monotonic deadline for a fixed frame cadence.

    Frames are never replayed to catch up: if the loop falls more than one
    interval behind, the next deadline is rebased on the current time.
    """

    __slots__ = ("interval", "next_at", "skipped", "_clock")

    def __init__(self, interval, clock=time.perf_counter):
        self.interval = interval
        self._clock = clock
        self.next_at = clock()
        self.skipped = 0

    def remaining(self):
        return self.next_at - self._clock()

    def advance(self):
        now = self._clock()
        self.next_at += self.interval
        if now - self.next_at > self.interval:
            self.skipped += int((now - self.next_at) // self.interval)
            self.next_at = now + self.interval
