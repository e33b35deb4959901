"""Fake Clock implementation for testing.

FakeClock never blocks. Each sleep() is recorded and advances the value
returned by monotonic(), so durations computed from it are deterministic.
"""

from devops.clock.abc import Clock


class FakeClock(Clock):
    """In-memory clock that tracks sleeps without sleeping.

    This class has NO public setup methods. All state is provided via constructor
    or captured during execution.
    """

    def __init__(self, *, start: float = 0.0) -> None:
        """Create FakeClock.

        Args:
            start: Initial value returned by monotonic()
        """
        self._now = start
        self._sleep_calls: list[float] = []

    @property
    def sleep_calls(self) -> list[float]:
        """Seconds values passed to sleep(), in call order.

        This property is for test assertions only.
        """
        return self._sleep_calls

    def sleep(self, seconds: float) -> None:
        self._sleep_calls.append(seconds)
        self._now += seconds

    def monotonic(self) -> float:
        return self._now
