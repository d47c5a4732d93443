"""
Timing and Scoring - Elapsed-time based point computation.

Used by:
- Quick draw: points for a correct guess decay with the round clock
- Sliding puzzle race: per-racer solve time

All timestamps are integer milliseconds since the epoch. There are no
timers here; time is read from an injected Clock when an operation runs.
"""

from __future__ import annotations
from datetime import datetime, timezone
import math
import time

BASE_GUESS_POINTS = 100
SPEED_BONUS_POINTS = 50


class Clock:
    """Wall clock in epoch milliseconds."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


class ManualClock(Clock):
    """Clock that only moves when told to (for tests and replays)."""

    def __init__(self, start_ms: int = 1_700_000_000_000):
        self._now = start_ms

    def now_ms(self) -> int:
        return self._now

    def advance(self, seconds: float) -> int:
        self._now += int(seconds * 1000)
        return self._now

    def set(self, now_ms: int) -> None:
        self._now = now_ms


def elapsed_seconds(start_ms: int, end_ms: int) -> float:
    """Seconds between two millisecond timestamps."""
    return (end_ms - start_ms) / 1000


def utc_day(now_ms: int) -> str:
    """ISO date (YYYY-MM-DD) of a timestamp in UTC."""
    return datetime.fromtimestamp(now_ms / 1000, tz=timezone.utc).date().isoformat()


def round_expired(round_start_ms: int | None, now_ms: int, round_duration: int) -> bool:
    """True once `round_duration` seconds have passed since the round began."""
    if round_start_ms is None:
        return False
    return elapsed_seconds(round_start_ms, now_ms) >= round_duration


def guess_points(round_start_ms: int, guess_ms: int, round_duration: int) -> int:
    """
    Points for a correct guess.

    100 base points plus up to 50 for speed, decaying linearly to 0 as the
    round clock runs out. Rounded half up; capped to [100, 150].
    """
    elapsed = elapsed_seconds(round_start_ms, guess_ms)
    remaining = max(0.0, (round_duration - elapsed) / round_duration)
    remaining = min(1.0, remaining)
    return int(math.floor(BASE_GUESS_POINTS + SPEED_BONUS_POINTS * remaining + 0.5))
