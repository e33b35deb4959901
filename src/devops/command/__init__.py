from devops.command.abc import Command
from devops.command.errors import (
    ApplicationsNotFoundError,
    CommandConfigError,
    CommandError,
    CommandExitError,
    CommandResolutionError,
    CommandStartError,
    CommandStateError,
    ExecutableNotFoundError,
    NotADirectoryWorkingDirError,
    WorkingDirectoryNotFoundError,
)
from devops.command.fake import FakeCommand
from devops.command.real import RealCommand, new_command
from devops.command.render import render_invocation, split_invocation
from devops.command.resolver import validate_applications
from devops.command.types import (
    CommandFlagset,
    CommandOptions,
    CommandState,
    InputHook,
    ResolvedProcess,
)

__all__ = [
    "ApplicationsNotFoundError",
    "Command",
    "CommandConfigError",
    "CommandError",
    "CommandExitError",
    "CommandFlagset",
    "CommandOptions",
    "CommandResolutionError",
    "CommandStartError",
    "CommandState",
    "CommandStateError",
    "ExecutableNotFoundError",
    "FakeCommand",
    "InputHook",
    "NotADirectoryWorkingDirError",
    "RealCommand",
    "ResolvedProcess",
    "WorkingDirectoryNotFoundError",
    "new_command",
    "render_invocation",
    "split_invocation",
    "validate_applications",
]
