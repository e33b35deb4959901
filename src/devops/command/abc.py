"""Abstract command handle.

This abstraction lets callers (the CLI included) be tested with FakeCommand
instead of spawning real processes.
"""

from abc import ABC, abstractmethod

from devops.command.types import CommandState


class Command(ABC):
    """A single resolved invocation that can be run once."""

    @property
    @abstractmethod
    def state(self) -> CommandState:
        """Current lifecycle state."""
        ...

    @property
    @abstractmethod
    def exit_code(self) -> int | None:
        """Exit code of the child, or None if it has not exited."""
        ...

    @abstractmethod
    def __str__(self) -> str:
        """Full invocation, e.g. `/bin/ls "-a" "-l"`."""
        ...

    def __bytes__(self) -> bytes:
        return str(self).encode("utf-8")

    @abstractmethod
    def get_environment(self) -> dict[str, str]:
        """Environment the child receives, as a mapping (last entry for a key wins)."""
        ...

    @abstractmethod
    def get_stdout(self) -> bytes:
        """Everything the child wrote to stdout.

        Only meaningful after run() has returned or raised. Calling it
        repeatedly returns the same bytes.
        """
        ...

    @abstractmethod
    def get_stderr(self) -> bytes:
        """Everything the child wrote to stderr.

        Only meaningful after run() has returned or raised. Calling it
        repeatedly returns the same bytes.
        """
        ...

    @abstractmethod
    def run(self) -> None:
        """Run the invocation and block until the child exits.

        Raises:
            CommandStateError: If the command was already run
            CommandStartError: If the child could not be started
            CommandExitError: If the child exited with a non-zero code
        """
        ...
