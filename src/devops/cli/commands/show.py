from typing import Any

import click

from devops.cli.command_options import (
    PASSTHROUGH_CONTEXT_SETTINGS,
    build_command_options,
    command_options,
)
from devops.cli.output import error_output, machine_output
from devops.command.errors import CommandError
from devops.context import DevopsContext


@click.command("show", context_settings=PASSTHROUGH_CONTEXT_SETTINGS)
@command_options
@click.option("--env-only", is_flag=True, help="Print only the environment.")
@click.pass_obj
def show_cmd(ctx: DevopsContext, env_only: bool, **option_values: Any) -> None:
    """Resolve COMMAND and print the invocation and environment without running it."""
    options = build_command_options(**option_values)

    try:
        command = ctx.command_factory(options)
    except CommandError as e:
        error_output(str(e))
        raise SystemExit(1) from e

    if not env_only:
        machine_output(str(command))
    for key, value in sorted(command.get_environment().items()):
        machine_output(f"{key}={value}")
