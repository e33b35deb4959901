"""Exceptions raised by the command engine.

Every error derives from CommandError so callers can catch the whole family.
Failed hook writes are not represented here: they are logged and scanning
continues.
"""

from collections.abc import Sequence


class CommandError(RuntimeError):
    """Base class for command engine failures."""


class CommandConfigError(CommandError):
    """Options are invalid. Raised before anything is resolved or spawned.

    Attributes:
        problems: Every violation found, in detection order
    """

    def __init__(self, problems: Sequence[str]) -> None:
        self.problems = list(problems)
        joined = "', '".join(self.problems)
        super().__init__(f"failed to create command: invalid options: ['{joined}']")


class CommandResolutionError(CommandError):
    """A path in the options could not be resolved.

    Attributes:
        path: The offending path or command name
    """

    def __init__(self, message: str, path: str) -> None:
        self.path = path
        super().__init__(message)


class ExecutableNotFoundError(CommandResolutionError):
    """The executable is not on the search path or is not an executable file."""

    def __init__(self, command: str, search_path: str | None, reason: str) -> None:
        self.search_path = search_path
        super().__init__(
            f"failed to find binary '{command}' in $PATH ({search_path or '<unset>'}): {reason}",
            command,
        )


class WorkingDirectoryNotFoundError(CommandResolutionError):
    """The working directory does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"failed to get information about path '{path}'", path)


class NotADirectoryWorkingDirError(CommandResolutionError):
    """The working directory exists but is not a directory."""

    def __init__(self, path: str) -> None:
        super().__init__(f"failed to find a directory at path '{path}'", path)


class ApplicationsNotFoundError(CommandError):
    """One or more required applications are missing from the search path.

    Attributes:
        missing: Names that could not be found, in the order they were checked
    """

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = list(missing)
        joined = "', '".join(f"{name} was not found" for name in self.missing)
        super().__init__(f"failed to validate following applications: ['{joined}']")


class CommandStartError(CommandError):
    """The child process could not be started."""


class CommandStateError(CommandError):
    """The command is not in a state that allows the requested operation."""


class CommandExitError(CommandError):
    """The child process exited with a non-zero code.

    Attributes:
        returncode: Exit code; negative when the child was killed by a signal
        invocation: Rendered invocation of the command
        stdout: Captured stdout
        stderr: Captured stderr
    """

    def __init__(self, returncode: int, invocation: str, stdout: bytes, stderr: bytes) -> None:
        self.returncode = returncode
        self.invocation = invocation
        self.stdout = stdout
        self.stderr = stderr

        message = f"Command failed: {invocation}"
        message += f"\nExit code: {returncode}"
        stderr_stripped = stderr.decode("utf-8", errors="replace").strip()
        if stderr_stripped:
            message += f"\nstderr: {stderr_stripped}"
        super().__init__(message)
