"""Human-readable rendering of an invocation.

Format: the executable path (shell-quoted only when it needs to be), then
each argument in double quotes with backslashes and double quotes escaped:

    /usr/bin/echo "hello world" "say \\"hi\\""

shlex.split() on the rendered text gives back the path and the arguments.
"""

import shlex
from collections.abc import Sequence


def _quote_argument(argument: str) -> str:
    escaped = argument.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_invocation(path: str, arguments: Sequence[str]) -> str:
    """Render an executable path and its arguments (argv[0] excluded)."""
    parts = [shlex.quote(path)]
    parts.extend(_quote_argument(argument) for argument in arguments)
    return " ".join(parts)


def split_invocation(rendered: str) -> list[str]:
    """Tokenize a rendered invocation back into [path, *arguments]."""
    return shlex.split(rendered)
