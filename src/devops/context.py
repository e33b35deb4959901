"""Application context with dependency injection."""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from devops.clock.abc import Clock
from devops.clock.real import RealClock
from devops.command.abc import Command
from devops.command.real import new_command
from devops.command.types import CommandOptions

CommandFactory = Callable[[CommandOptions], Command]


@dataclass(frozen=True)
class DevopsContext:
    """Immutable context holding all dependencies for CLI operations.

    Created at CLI entry point and threaded through the commands via ctx.obj.
    Tests build their own with a fake clock and command factory.
    """

    cwd: Path
    environ: Mapping[str, str]
    clock: Clock
    command_factory: CommandFactory

    @property
    def search_path(self) -> str | None:
        return self.environ.get("PATH")


def create_context() -> DevopsContext:
    """Create the production context from the current process state."""
    cwd = Path.cwd()
    environ = dict(os.environ)
    clock = RealClock()

    def factory(options: CommandOptions) -> Command:
        return new_command(options, cwd=cwd, environ=environ, clock=clock)

    return DevopsContext(cwd=cwd, environ=environ, clock=clock, command_factory=factory)
