import click

from devops.cli.output import error_output, user_output
from devops.command.errors import ApplicationsNotFoundError
from devops.command.resolver import validate_applications
from devops.context import DevopsContext


@click.command("check")
@click.argument("applications", nargs=-1, required=True)
@click.pass_obj
def check_cmd(ctx: DevopsContext, applications: tuple[str, ...]) -> None:
    """Verify that every APPLICATION can be found on the PATH."""
    try:
        validate_applications(applications, cwd=ctx.cwd, search_path=ctx.search_path)
    except ApplicationsNotFoundError as e:
        error_output(str(e))
        raise SystemExit(1) from e

    user_output(f"✓ All {len(applications)} application(s) found")
