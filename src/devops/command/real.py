"""Production command implementation backed by subprocess.Popen."""

import logging
import os
import subprocess
import sys
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import BinaryIO, TextIO

from devops.clock.abc import Clock
from devops.clock.real import RealClock
from devops.command.abc import Command
from devops.command.errors import (
    CommandConfigError,
    CommandExitError,
    CommandResolutionError,
    CommandStartError,
    CommandStateError,
)
from devops.command.hooks import scan_hooks
from devops.command.lifecycle import EXIT_POLL_INTERVAL, close_streams, wait_for_exit
from devops.command.render import render_invocation
from devops.command.resolver import resolve
from devops.command.streams import CaptureBuffer, InputWriter, StreamChannel, StreamTee
from devops.command.types import CommandOptions, CommandState, ResolvedProcess

logger = logging.getLogger(__name__)


def _terminal_binary(stream: TextIO) -> BinaryIO | None:
    return getattr(stream, "buffer", None)


class RealCommand(Command):
    """Runs a resolved invocation with live echo, capture and input hooks.

    Use new_command() to build one from CommandOptions.
    """

    def __init__(
        self,
        options: CommandOptions,
        resolved: ResolvedProcess,
        *,
        clock: Clock,
        stdout_echo: BinaryIO | None = None,
        stderr_echo: BinaryIO | None = None,
        poll_interval: float = EXIT_POLL_INTERVAL,
    ) -> None:
        """Create a command in the RESOLVED state.

        Args:
            options: Validated options the invocation was resolved from
            resolved: Result of resolve()
            clock: Clock used by the exit supervisor
            stdout_echo: Live echo target for stdout; None means the host's stdout
            stderr_echo: Live echo target for stderr; None means the host's stderr
            poll_interval: Seconds between exit checks
        """
        self._options = options
        self._resolved = resolved
        self._clock = clock
        self._stdout_echo = stdout_echo
        self._stderr_echo = stderr_echo
        self._poll_interval = poll_interval
        self._stdout = CaptureBuffer()
        self._stderr = CaptureBuffer()
        self._state = CommandState.RESOLVED
        self._exit_code: int | None = None

    @property
    def options(self) -> CommandOptions:
        return self._options

    @property
    def resolved(self) -> ResolvedProcess:
        return self._resolved

    @property
    def state(self) -> CommandState:
        return self._state

    @property
    def exit_code(self) -> int | None:
        return self._exit_code

    def __str__(self) -> str:
        return render_invocation(self._resolved.path, self._resolved.arguments[1:])

    def __repr__(self) -> str:
        return f"RealCommand({str(self)!r}, state={self._state.value})"

    def get_environment(self) -> dict[str, str]:
        return self._resolved.environment_mapping()

    def get_stdout(self) -> bytes:
        return self._stdout.getvalue()

    def get_stderr(self) -> bytes:
        return self._stderr.getvalue()

    def run(self) -> None:
        if self._state is not CommandState.RESOLVED:
            raise CommandStateError(
                f"cannot run command in state '{self._state.value}': {self}"
            )
        self._state = CommandState.RUNNING

        process = self._spawn()
        writer = InputWriter(process.stdin) if process.stdin is not None else None
        try:
            returncode = self._supervise(process, writer)
        except BaseException:
            self._state = CommandState.FAILED
            raise
        finally:
            if writer is not None:
                writer.close()

        self._exit_code = returncode
        if returncode != 0:
            self._state = CommandState.FAILED
            raise CommandExitError(returncode, str(self), self.get_stdout(), self.get_stderr())
        self._state = CommandState.COMPLETED

    def _stdin_target(self) -> int | None:
        flag = self._options.flag
        if not flag.use_tty:
            return subprocess.DEVNULL
        if self._options.has_hooks:
            return subprocess.PIPE
        # Interactive use: the child reads the terminal directly
        return None

    def _spawn(self) -> subprocess.Popen[bytes]:
        resolved = self._resolved
        logger.debug("Starting %s in %s", self, resolved.working_dir)
        try:
            process = subprocess.Popen(
                list(resolved.arguments),
                executable=resolved.path,
                cwd=resolved.working_dir,
                env=resolved.environment_mapping(),
                stdin=self._stdin_target(),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                bufsize=0,
            )
        except OSError as e:
            self._state = CommandState.FAILED
            raise CommandStartError(f"failed to start {self}: {e}") from e
        logger.debug("Started pid=%d", process.pid)
        return process

    def _echo_target(
        self, hidden: bool, explicit: BinaryIO | None, host: TextIO
    ) -> BinaryIO | None:
        if hidden:
            return None
        if explicit is not None:
            return explicit
        return _terminal_binary(host)

    def _supervise(self, process: subprocess.Popen[bytes], writer: InputWriter | None) -> int:
        options = self._options
        assert process.stdout is not None
        assert process.stderr is not None

        stdout_channel: StreamChannel | None = None
        stderr_channel: StreamChannel | None = None
        if writer is not None:
            if options.stdout_hooks or options.stdany_hooks:
                stdout_channel = StreamChannel("stdout")
            if options.stderr_hooks or options.stdany_hooks:
                stderr_channel = StreamChannel("stderr")
        channels = [c for c in (stdout_channel, stderr_channel) if c is not None]

        tees = [
            StreamTee(
                "stdout",
                process.stdout,
                self._stdout,
                self._echo_target(options.flag.hide_stdout, self._stdout_echo, sys.stdout),
                stdout_channel,
            ),
            StreamTee(
                "stderr",
                process.stderr,
                self._stderr,
                self._echo_target(options.flag.hide_stderr, self._stderr_echo, sys.stderr),
                stderr_channel,
            ),
        ]

        scanners: list[threading.Thread] = []
        for channel, stream_hooks in (
            (stdout_channel, options.stdout_hooks),
            (stderr_channel, options.stderr_hooks),
        ):
            if channel is None:
                continue
            scanners.append(
                threading.Thread(
                    target=scan_hooks,
                    args=(channel, stream_hooks, options.stdany_hooks, writer),
                    kwargs={"stream_name": channel.name},
                    name=f"hooks-{channel.name}",
                    daemon=True,
                )
            )

        def on_exit(returncode: int) -> None:
            close_streams(tees, channels)

        # poll() stays None while process.wait() below holds the waitpid lock
        supervisor = threading.Thread(
            target=wait_for_exit,
            args=(process, self._clock, on_exit),
            kwargs={"interval": self._poll_interval},
            name="exit-supervisor",
            daemon=True,
        )

        for scanner in scanners:
            scanner.start()
        for tee in tees:
            tee.start()
        supervisor.start()

        returncode = process.wait()
        supervisor.join()
        for scanner in scanners:
            scanner.join()
        logger.debug("%s exited with code %d", self, returncode)
        return returncode


def new_command(
    options: CommandOptions,
    *,
    cwd: Path | None = None,
    environ: Mapping[str, str] | None = None,
    clock: Clock | None = None,
    stdout_echo: BinaryIO | None = None,
    stderr_echo: BinaryIO | None = None,
) -> RealCommand:
    """Validate and resolve options into a runnable command.

    Args:
        options: Command description
        cwd: Directory relative paths resolve against (default: current directory)
        environ: Parent environment (default: os.environ)
        clock: Clock for the exit supervisor (default: RealClock)
        stdout_echo: Live echo target for stdout (default: host stdout)
        stderr_echo: Live echo target for stderr (default: host stderr)

    Returns:
        RealCommand in the RESOLVED state

    Raises:
        CommandConfigError: With every validation problem found
        CommandResolutionError: If the executable or working directory is invalid

    Example:
        >>> command = new_command(CommandOptions(command="ls", arguments=("-a", "-l")))
        >>> command.run()
        >>> listing = command.get_stdout()
    """
    problems = options.validate()
    if problems:
        raise CommandConfigError(problems)

    if cwd is None:
        try:
            cwd = Path.cwd()
        except FileNotFoundError as e:
            raise CommandResolutionError(f"failed to get working directory: {e}", ".") from e
    if environ is None:
        environ = os.environ

    resolved = resolve(options, cwd=cwd, environ=environ)
    return RealCommand(
        options,
        resolved,
        clock=clock if clock is not None else RealClock(),
        stdout_echo=stdout_echo,
        stderr_echo=stderr_echo,
    )
