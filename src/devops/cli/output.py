"""Output utilities for CLI commands with clear intent.

user_output() is for messages meant for a person and goes to stderr.
machine_output() is for results meant to be piped and goes to stdout.
"""

import click
from rich.panel import Panel
from rich.text import Text


def user_output(message: str) -> None:
    click.echo(message, err=True)


def machine_output(message: str) -> None:
    click.echo(message)


def error_output(message: str) -> None:
    """Print a red "Error: " prefixed message to stderr."""
    user_output(click.style("Error: ", fg="red") + message)


def format_duration(seconds: float) -> str:
    """Format a duration as e.g. `850ms`, `12.3s` or `2m 05s`."""
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, remainder = divmod(int(seconds), 60)
    return f"{minutes}m {remainder:02d}s"


def format_run_summary(invocation: str, exit_code: int | None, duration: float) -> Panel:
    """Format the summary box shown after `devops run --summary`.

    Args:
        invocation: Rendered invocation of the command
        exit_code: Child exit code, None if it never started
        duration: Wall time in seconds

    Returns:
        Rich Panel with status, invocation, exit code and duration
    """
    success = exit_code == 0

    lines: list[Text] = []
    if success:
        lines.append(Text("✅ Status: Success", style="green"))
    else:
        lines.append(Text("❌ Status: Failed", style="red"))
    lines.append(Text(f"$ {invocation}", style="bold"))
    exit_text = "not started" if exit_code is None else str(exit_code)
    lines.append(Text(f"↩  Exit code: {exit_text}"))
    lines.append(Text(f"⏱  Duration: {format_duration(duration)}"))

    title = "Command Complete" if success else "Command Failed"
    return Panel(
        Text("\n").join(lines),
        title=title,
        border_style="green" if success else "red",
        padding=(1, 2),
    )
