"""Politeness pacing between successive remote calls of one request."""

from __future__ import annotations

import time
from typing import Callable

from ..utils.deadline import Deadline


class RemoteCallPacer:
    """Inserts a fixed pause before every remote call except the first.

    The pause is skipped when it would not leave time before the deadline.
    One pacer is shared by all stages of a request.
    """

    def __init__(
        self,
        delay_seconds: float,
        sleep: Callable[[float], None] = time.sleep,
        deadline: Deadline | None = None,
    ):
        self.delay_seconds = delay_seconds
        self.sleep = sleep
        self.deadline = deadline
        self.calls = 0

    def wait(self) -> None:
        if self.calls and self.delay_seconds > 0:
            if self.deadline is None or self.deadline.allows(self.delay_seconds):
                self.sleep(self.delay_seconds)
        self.calls += 1
