"""Tests for FakeClock."""

import pytest

from devops.clock.fake import FakeClock


def test_sleep_is_recorded_and_advances_monotonic() -> None:
    clock = FakeClock(start=10.0)

    clock.sleep(0.2)
    clock.sleep(1.5)

    assert clock.sleep_calls == [0.2, 1.5]
    assert clock.monotonic() == pytest.approx(11.7)
