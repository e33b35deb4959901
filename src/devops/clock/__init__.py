from devops.clock.abc import Clock
from devops.clock.fake import FakeClock
from devops.clock.real import RealClock

__all__ = [
    "Clock",
    "FakeClock",
    "RealClock",
]
