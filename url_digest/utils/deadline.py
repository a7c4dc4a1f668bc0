"""Wall-clock budget for one request."""

from __future__ import annotations

import time
from typing import Callable


class Deadline:
    """Tracks how much of a request's time budget is left.

    Attributes:
        seconds: Total budget
        clock: Monotonic clock returning seconds; injectable for tests
    """

    def __init__(self, seconds: float, clock: Callable[[], float] = time.monotonic):
        self.seconds = seconds
        self.clock = clock
        self._expires_at = clock() + seconds

    def remaining(self) -> float:
        return max(0.0, self._expires_at - self.clock())

    def expired(self) -> bool:
        return self.remaining() <= 0.0

    def allows(self, seconds: float) -> bool:
        """Whether waiting `seconds` still leaves time before the deadline."""
        return seconds < self.remaining()

    def bound(self, timeout: float) -> float:
        """Clamp a per-call timeout so it never runs past the deadline."""
        return min(timeout, self.remaining())


def bound_timeout(timeout: float, deadline: Deadline | None) -> float:
    if deadline is None:
        return timeout
    return deadline.bound(timeout)
