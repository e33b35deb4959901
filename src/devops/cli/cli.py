import logging
import os

import click

from devops.cli.commands.check import check_cmd
from devops.cli.commands.run import run_cmd
from devops.cli.commands.show import show_cmd
from devops.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

DEBUG_FORMAT = "[DEBUG %(name)s:%(lineno)d] %(message)s"


def _enable_debug_logging() -> None:
    logging.basicConfig(level=logging.DEBUG, format=DEBUG_FORMAT)


# Enable debug logging if DEVOPS_DEBUG environment variable is set
if os.getenv("DEVOPS_DEBUG"):
    _enable_debug_logging()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="devops-command")
@click.option("--debug", is_flag=True, help="Log engine internals to stderr.")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Run commands with live output, capture and automatic prompt answers."""
    if debug:
        _enable_debug_logging()
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context()


cli.add_command(run_cmd)
cli.add_command(show_cmd)
cli.add_command(check_cmd)


def main() -> None:
    """CLI entry point used by the `devops` console script."""
    cli()
