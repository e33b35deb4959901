"""Real clock backed by the time module."""

import time

from devops.clock.abc import Clock


class RealClock(Clock):
    """Production implementation using time.sleep() and time.monotonic()."""

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    def monotonic(self) -> float:
        return time.monotonic()
