"""Fake command for testing callers without spawning processes."""

from devops.command.abc import Command
from devops.command.errors import CommandExitError, CommandStateError
from devops.command.render import render_invocation
from devops.command.types import CommandOptions, CommandState


class FakeCommand(Command):
    """In-memory command with predetermined output and exit code.

    Constructor Injection:
    - All results are provided via constructor parameters
    - run() only flips state and records that it was called

    Examples:
        >>> command = FakeCommand(
        ...     CommandOptions(command="ls"), path="/bin/ls", stdout=b"file.txt\\n"
        ... )
        >>> command.run()
        >>> assert command.get_stdout() == b"file.txt\\n"
    """

    def __init__(
        self,
        options: CommandOptions,
        *,
        path: str | None = None,
        stdout: bytes = b"",
        stderr: bytes = b"",
        exit_code: int = 0,
        environment: dict[str, str] | None = None,
    ) -> None:
        """Initialize fake with the results run() will produce.

        Args:
            options: Options the command was built from
            path: Resolved executable path used for rendering (default: options.command)
            stdout: Bytes reported as captured stdout after run()
            stderr: Bytes reported as captured stderr after run()
            exit_code: Exit code run() simulates
            environment: Mapping returned by get_environment() (default: options.environment)
        """
        self._options = options
        self._path = path if path is not None else options.command
        self._stdout = stdout
        self._stderr = stderr
        self._configured_exit_code = exit_code
        self._environment = environment if environment is not None else dict(options.environment)
        self._state = CommandState.RESOLVED
        self._exit_code: int | None = None
        self._run_count = 0

    @property
    def options(self) -> CommandOptions:
        return self._options

    @property
    def run_count(self) -> int:
        """Number of times run() was called. For test assertions only."""
        return self._run_count

    @property
    def state(self) -> CommandState:
        return self._state

    @property
    def exit_code(self) -> int | None:
        return self._exit_code

    def __str__(self) -> str:
        return render_invocation(self._path, self._options.arguments)

    def get_environment(self) -> dict[str, str]:
        return dict(self._environment)

    def get_stdout(self) -> bytes:
        if self._exit_code is None:
            return b""
        return self._stdout

    def get_stderr(self) -> bytes:
        if self._exit_code is None:
            return b""
        return self._stderr

    def run(self) -> None:
        self._run_count += 1
        if self._state is not CommandState.RESOLVED:
            raise CommandStateError(f"cannot run command in state '{self._state.value}': {self}")

        self._exit_code = self._configured_exit_code
        if self._exit_code != 0:
            self._state = CommandState.FAILED
            raise CommandExitError(self._exit_code, str(self), self._stdout, self._stderr)
        self._state = CommandState.COMPLETED
