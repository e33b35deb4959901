"""Exit supervision for a running child process."""

import logging
from collections.abc import Callable, Sequence
from typing import Protocol

from devops.clock.abc import Clock
from devops.command.streams import StreamChannel, StreamTee

logger = logging.getLogger(__name__)

# Seconds between checks of the child's exit status
EXIT_POLL_INTERVAL = 0.2


class Pollable(Protocol):
    def poll(self) -> int | None: ...


def wait_for_exit(
    process: Pollable, clock: Clock, on_exit: Callable[[int], None], *, interval: float
) -> int:
    """Poll `process` until it has an exit code, then call `on_exit` once.

    Args:
        process: Anything with a Popen-style poll()
        clock: Clock used to sleep between polls
        on_exit: Called with the exit code exactly once
        interval: Seconds to sleep before each poll

    Returns:
        The exit code
    """
    while True:
        clock.sleep(interval)
        returncode = process.poll()
        if returncode is not None:
            break
    logger.debug("Child exited with code %d", returncode)
    on_exit(returncode)
    return returncode


def close_streams(tees: Sequence[StreamTee], channels: Sequence[StreamChannel]) -> None:
    """Wait for the tees to reach end-of-file, then close every hook channel."""
    for tee in tees:
        tee.join()
    for channel in channels:
        channel.close()
