"""Clock abstraction for the command engine.

The exit supervisor sleeps between polls and the CLI measures run
durations. Both go through this ABC so tests can drive them without
real waiting.
"""

from abc import ABC, abstractmethod


class Clock(ABC):
    """Abstract clock operations for dependency injection."""

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Block the calling thread for the given number of seconds.

        Args:
            seconds: Number of seconds to sleep
        """
        ...

    @abstractmethod
    def monotonic(self) -> float:
        """Return a monotonic timestamp in seconds.

        Only differences between two values are meaningful.
        """
        ...
