"""Match clock - tracks time left against an absolute finish timestamp, pure logic, no UI."""

import math
import time
from dataclasses import dataclass
from tt.common.logger import log

# Fractions within this many decimal places of 1.0 count as finished, so float drift in the last tick can't leave a
# match hanging at 99.9999%.
FINISH_PRECISION = 6


@dataclass(frozen=True)
class ClockSample:
    elapsed_seconds: float
    elapsed_fraction: float
    minutes_display: str
    seconds_display: str
    total_seconds: float
    has_finished: bool
    running: bool


# Splits remaining seconds into zero padded "MM", "SS" strings, both floored.
def format_remaining(remaining_seconds):
    remaining = max(0, math.floor(remaining_seconds))
    minutes, seconds = divmod(remaining, 60)
    return f"{minutes:02d}", f"{seconds:02d}"


class Clock:
    """Counts a match down towards ``finish_timestamp``.

    Elapsed time is always derived from the absolute finish timestamp rather than accumulated tick by tick, so
    late, bursty or skipped ticks never drift the clock. While paused, the remaining time is held in ``_remaining``
    and ``start()`` re-anchors the finish timestamp from it.

    All timestamps are seconds on the ``time_source`` scale (``time.time`` by default). Every method that needs the
    current time takes an optional ``now`` so callers can drive the clock deterministically.
    """

    def __init__(self, total_seconds, time_source=time.time):
        self.total_seconds = max(0.0, float(total_seconds))
        self.time_source = time_source
        self.finish_timestamp = None
        self.running = False
        self._remaining = self.total_seconds
        self._last_elapsed = 0.0

    def _now(self, now):
        return self.time_source() if now is None else now

    @property
    def is_ready(self):
        return self.finish_timestamp is not None

    # Start and pause methods for the clock.
    def start(self, now=None):
        if self.running or self.finish_timestamp is None:
            return
        now = self._now(now)
        self.finish_timestamp = now + self._remaining
        self.running = True
        log.debug(f"Started clock at {now} with {self._remaining:.3f}s remaining")
    def pause(self, now=None):
        if not self.running:
            return
        now = self._now(now)
        self._remaining = self.total_seconds - self._elapsed_at(now)
        self.running = False
        log.debug(f"Paused clock at {now} with {self._remaining:.3f}s remaining")

    # Replaces the target finish instant. Running state is untouched; a stopped clock takes its remaining time from
    # the new target as of `now`.
    def set_finish_timestamp(self, instant, now=None):
        self.finish_timestamp = instant
        self._last_elapsed = 0.0
        if not self.running and instant is not None:
            self._remaining = min(self.total_seconds, max(0.0, instant - self._now(now)))
        log.debug(f"Set clock finish timestamp to {instant}")

    # Puts the clock back to a full, stopped match ending `total_seconds` from now.
    def restart(self, now=None, total_seconds=None):
        if total_seconds is not None:
            self.total_seconds = max(0.0, float(total_seconds))
        now = self._now(now)
        self.running = False
        self.set_finish_timestamp(now + self.total_seconds, now)

    # Elapsed seconds as of `now`, clamped to [0, total] and never behind an earlier sample of the same run.
    def _elapsed_at(self, now):
        if not self.running:
            return self.total_seconds - self._remaining
        remaining = max(0.0, self.finish_timestamp - now)
        elapsed = min(self.total_seconds, max(0.0, self.total_seconds - remaining))
        if elapsed < self._last_elapsed:
            log.debug(f"Clock sampled at {now}, earlier than a previous tick - holding elapsed at {self._last_elapsed}")
            elapsed = self._last_elapsed
        return elapsed

    # Returns a ClockSample for `now`, or None while there's no finish timestamp yet ("not ready").
    def sample(self, now=None):
        if self.finish_timestamp is None:
            return None
        elapsed = self._elapsed_at(self._now(now))
        self._last_elapsed = elapsed
        fraction = elapsed / self.total_seconds if self.total_seconds > 0 else 0.0
        minutes, seconds = format_remaining(self.total_seconds - elapsed)
        return ClockSample(
            elapsed_seconds=elapsed,
            elapsed_fraction=fraction,
            minutes_display=minutes,
            seconds_display=seconds,
            total_seconds=self.total_seconds,
            has_finished=self.total_seconds > 0 and round(fraction, FINISH_PRECISION) >= 1,
            running=self.running,
        )
