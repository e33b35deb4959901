import logging
from typing import Any

import click
from rich.console import Console

from devops.cli.command_options import (
    PASSTHROUGH_CONTEXT_SETTINGS,
    build_command_options,
    command_options,
)
from devops.cli.output import error_output, format_run_summary
from devops.command.errors import CommandError, CommandExitError
from devops.context import DevopsContext

logger = logging.getLogger(__name__)


def _exit_status(returncode: int) -> int:
    """Map a child's return code to this process's exit status.

    Children killed by a signal report -N; shells report those as 128+N.
    """
    if returncode < 0:
        return 128 + abs(returncode)
    return returncode


@click.command("run", context_settings=PASSTHROUGH_CONTEXT_SETTINGS)
@command_options
@click.option("--confirm", is_flag=True, help="Ask before running the command.")
@click.option("--summary", is_flag=True, help="Print a summary box when the command finishes.")
@click.pass_obj
def run_cmd(
    ctx: DevopsContext,
    confirm: bool,
    summary: bool,
    **option_values: Any,
) -> None:
    """Run COMMAND, echoing its output and answering prompts with hooks.

    \b
    Examples:
      devops run ls -a -l
      devops run --tty --on-stdout 'Continue?' 'yes\\n' ./deploy.sh
      devops run --config deploy.toml
    """
    options = build_command_options(**option_values)

    try:
        command = ctx.command_factory(options)
    except CommandError as e:
        error_output(str(e))
        raise SystemExit(1) from e

    if confirm:
        click.confirm(f"Run {command}?", abort=True, err=True)

    started = ctx.clock.monotonic()
    returncode = 0
    try:
        command.run()
    except CommandExitError as e:
        returncode = e.returncode
        logger.debug("Command failed: %s", e)
    except CommandError as e:
        error_output(str(e))
        raise SystemExit(1) from e
    finally:
        if summary:
            duration = ctx.clock.monotonic() - started
            panel = format_run_summary(str(command), command.exit_code, duration)
            Console(stderr=True).print(panel)

    if returncode != 0:
        if returncode < 0:
            error_output(f"{command} was killed by signal {-returncode}")
        else:
            error_output(f"{command} exited with code {returncode}")
        raise SystemExit(_exit_status(returncode))
