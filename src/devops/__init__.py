"""Run commands with live echo, output capture and stdin hooks."""

from devops.command import (
    Command,
    CommandError,
    CommandExitError,
    CommandFlagset,
    CommandOptions,
    InputHook,
    new_command,
)

__all__ = [
    "Command",
    "CommandError",
    "CommandExitError",
    "CommandFlagset",
    "CommandOptions",
    "InputHook",
    "new_command",
]
