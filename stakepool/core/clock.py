"""Time sources used for lock checks."""
import time
from typing import Callable

Clock = Callable[[], int]


class SystemClock:
    """Wall-clock time in whole seconds."""

    def __call__(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: int = 0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise ValueError("Cannot move a clock backwards")
        self.now += seconds
        return self.now

    def set(self, instant: int) -> None:
        self.now = instant
