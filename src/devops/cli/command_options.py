"""Options shared by `devops run` and `devops show` and their assembly into CommandOptions."""

from collections.abc import Callable, Sequence
from dataclasses import replace
from pathlib import Path
from typing import Any, TypeVar

import click

from devops.command.types import CommandFlagset, CommandOptions, InputHook
from devops.config import load_command_options

F = TypeVar("F", bound=Callable[..., Any])

# Lets `devops run ls -la` pass -la through to the child
PASSTHROUGH_CONTEXT_SETTINGS = dict(ignore_unknown_options=True, allow_interspersed_args=False)


def decode_escapes(value: str) -> bytes:
    r"""Turn a command-line string into bytes, honouring escapes like `\n` and `\x1b`.

    `\xNN` gives the raw byte; `\uNNNN` escapes above U+00FF give their UTF-8 bytes.

    Raises:
        click.BadParameter: If an escape is malformed (e.g. a trailing backslash)
    """
    try:
        decoded = value.encode("utf-8").decode("unicode_escape")
    except UnicodeDecodeError as e:
        raise click.BadParameter(
            f"invalid escape in '{value}': {e.reason}",
            param_hint="--on-stdout/--on-stderr/--on-any",
        ) from e
    return b"".join(
        bytes([ord(char)]) if ord(char) < 256 else char.encode("utf-8") for char in decoded
    )


def parse_env_assignment(assignment: str) -> tuple[str, str]:
    key, sep, value = assignment.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected KEY=VALUE, got '{assignment}'", param_hint="--env")
    return key, value


def command_options(func: F) -> F:
    """Attach the options describing a command invocation."""
    decorators = [
        click.argument("command_args", nargs=-1, type=click.UNPROCESSED),
        click.option(
            "--on-any",
            "on_any",
            nargs=2,
            multiple=True,
            metavar="PATTERN RESPONSE",
            help="Send RESPONSE to stdin when PATTERN appears on stdout or stderr.",
        ),
        click.option(
            "--on-stderr",
            "on_stderr",
            nargs=2,
            multiple=True,
            metavar="PATTERN RESPONSE",
            help="Send RESPONSE to stdin when PATTERN appears on stderr.",
        ),
        click.option(
            "--on-stdout",
            "on_stdout",
            nargs=2,
            multiple=True,
            metavar="PATTERN RESPONSE",
            help="Send RESPONSE to stdin when PATTERN appears on stdout.",
        ),
        click.option("--tty", is_flag=True, help="Enable the child's input channel."),
        click.option(
            "--global-env/--no-global-env",
            "global_env",
            default=None,
            help="Pass this process's environment to the child.",
        ),
        click.option("--hide-stderr", is_flag=True, help="Do not echo the child's stderr."),
        click.option("--hide-stdout", is_flag=True, help="Do not echo the child's stdout."),
        click.option(
            "--cwd",
            "working_dir",
            type=str,
            default=None,
            help="Working directory of the child (relative to the current directory).",
        ),
        click.option(
            "--env",
            "env_assignments",
            multiple=True,
            metavar="KEY=VALUE",
            help="Set an environment variable for the child. Repeatable.",
        ),
        click.option(
            "--config",
            "config_path",
            type=click.Path(path_type=Path, dir_okay=False),
            default=None,
            help="TOML file describing the command.",
        ),
    ]
    for decorator in decorators:
        func = decorator(func)
    return func


def _hooks(pairs: Sequence[tuple[str, str]]) -> tuple[InputHook, ...]:
    return tuple(
        InputHook(on=decode_escapes(on), send=decode_escapes(send)) for on, send in pairs
    )


def build_command_options(
    *,
    command_args: Sequence[str],
    config_path: Path | None,
    env_assignments: Sequence[str],
    working_dir: str | None,
    hide_stdout: bool,
    hide_stderr: bool,
    global_env: bool | None,
    tty: bool,
    on_stdout: Sequence[tuple[str, str]],
    on_stderr: Sequence[tuple[str, str]],
    on_any: Sequence[tuple[str, str]],
) -> CommandOptions:
    """Merge a config file (if any) with command-line values.

    Command-line values win: a command given on the command line replaces the
    configured one and its arguments, environment entries override configured
    keys, flags switch on, and hooks are appended after configured hooks.
    `--global-env` defaults to on when no config file is given.

    Raises:
        click.UsageError: If no command is given anywhere
        click.BadParameter: If an --env value is malformed
    """
    if config_path is not None:
        try:
            base = load_command_options(config_path)
        except (FileNotFoundError, ValueError) as e:
            raise click.BadParameter(str(e), param_hint="--config") from e
    else:
        base = None

    if command_args:
        command, arguments = command_args[0], tuple(command_args[1:])
    elif base is not None:
        command, arguments = base.command, base.arguments
    else:
        raise click.UsageError("Missing COMMAND (or --config).")

    environment = dict(base.environment) if base is not None else {}
    environment.update(parse_env_assignment(assignment) for assignment in env_assignments)

    base_flag = base.flag if base is not None else CommandFlagset()
    if global_env is None:
        use_global_environment = base_flag.use_global_environment if base is not None else True
    else:
        use_global_environment = global_env
    flag = replace(
        base_flag,
        hide_stdout=base_flag.hide_stdout or hide_stdout,
        hide_stderr=base_flag.hide_stderr or hide_stderr,
        use_global_environment=use_global_environment,
        use_tty=base_flag.use_tty or tty,
    )

    if working_dir is None and base is not None:
        working_dir = base.working_dir

    return CommandOptions(
        command=command,
        arguments=arguments,
        environment=environment,
        working_dir=working_dir,
        flag=flag,
        stdout_hooks=(base.stdout_hooks if base else ()) + _hooks(on_stdout),
        stderr_hooks=(base.stderr_hooks if base else ()) + _hooks(on_stderr),
        stdany_hooks=(base.stdany_hooks if base else ()) + _hooks(on_any),
    )
