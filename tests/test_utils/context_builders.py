"""Builders for DevopsContext instances used in CLI tests."""

from collections.abc import Mapping
from pathlib import Path

from devops.clock.abc import Clock
from devops.clock.fake import FakeClock
from devops.command.abc import Command
from devops.command.fake import FakeCommand
from devops.command.real import new_command
from devops.command.types import CommandOptions
from devops.context import DevopsContext


class RecordingFactory:
    """Command factory returning FakeCommands and remembering what it built."""

    def __init__(
        self,
        *,
        stdout: bytes = b"",
        stderr: bytes = b"",
        exit_code: int = 0,
        path: str = "/usr/bin/fake",
    ) -> None:
        self._stdout = stdout
        self._stderr = stderr
        self._exit_code = exit_code
        self._path = path
        self.built: list[FakeCommand] = []

    def __call__(self, options: CommandOptions) -> Command:
        command = FakeCommand(
            options,
            path=self._path,
            stdout=self._stdout,
            stderr=self._stderr,
            exit_code=self._exit_code,
        )
        self.built.append(command)
        return command

    @property
    def last_options(self) -> CommandOptions:
        return self.built[-1].options


def build_fake_context(
    cwd: Path,
    factory: RecordingFactory,
    *,
    environ: Mapping[str, str] | None = None,
    clock: Clock | None = None,
) -> DevopsContext:
    return DevopsContext(
        cwd=cwd,
        environ=dict(environ or {}),
        clock=clock if clock is not None else FakeClock(),
        command_factory=factory,
    )


def build_real_context(cwd: Path, environ: Mapping[str, str]) -> DevopsContext:
    """Context that resolves and runs real commands relative to `cwd`."""
    clock = FakeClock()
    env = dict(environ)

    def factory(options: CommandOptions) -> Command:
        return new_command(options, cwd=cwd, environ=env)

    return DevopsContext(cwd=cwd, environ=env, clock=clock, command_factory=factory)
