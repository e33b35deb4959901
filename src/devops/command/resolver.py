"""Resolution of command options into a concrete invocation.

Resolution never touches the parent's environment: the search path used for
executable lookup is passed explicitly, so concurrent resolutions cannot
interfere with each other.
"""

import logging
import os
import shutil
from collections.abc import Iterable, Mapping
from pathlib import Path

from devops.command.errors import (
    ApplicationsNotFoundError,
    ExecutableNotFoundError,
    NotADirectoryWorkingDirError,
    WorkingDirectoryNotFoundError,
)
from devops.command.types import CommandOptions, ResolvedProcess

logger = logging.getLogger(__name__)


def _has_separator(command: str) -> bool:
    if os.sep in command:
        return True
    return os.altsep is not None and os.altsep in command


def find_executable(command: str, *, cwd: Path, search_path: str | None) -> str:
    """Locate an executable the way a shell would.

    Commands containing a path separator are taken as paths and resolved
    against `cwd` when relative. Anything else is looked up in `search_path`.

    Args:
        command: Command name or path
        cwd: Directory relative paths are resolved against
        search_path: PATH-style list of directories to search

    Returns:
        Absolute path of the executable

    Raises:
        ExecutableNotFoundError: If no executable file could be found
    """
    if _has_separator(command):
        candidate = Path(command)
        if not candidate.is_absolute():
            candidate = cwd / candidate
        if not candidate.is_file():
            raise ExecutableNotFoundError(command, search_path, f"no such file: {candidate}")
        if not os.access(candidate, os.X_OK):
            raise ExecutableNotFoundError(command, search_path, f"not executable: {candidate}")
        return os.path.normpath(str(candidate))

    found = shutil.which(command, path=search_path)
    if found is None:
        raise ExecutableNotFoundError(command, search_path, "executable file not found")
    if not os.path.isabs(found):
        # Relative entries in PATH produce relative results
        found = os.path.normpath(str(cwd / found))
    return found


def resolve_working_dir(working_dir: str | None, *, cwd: Path) -> str:
    """Resolve the child's working directory.

    Raises:
        WorkingDirectoryNotFoundError: If the directory does not exist
        NotADirectoryWorkingDirError: If the path exists but is not a directory
    """
    if not working_dir:
        return str(cwd)

    resolved = Path(working_dir)
    if not resolved.is_absolute():
        resolved = cwd / resolved
    resolved_str = os.path.normpath(str(resolved))

    if not os.path.exists(resolved_str):
        raise WorkingDirectoryNotFoundError(resolved_str)
    if not os.path.isdir(resolved_str):
        raise NotADirectoryWorkingDirError(resolved_str)
    return resolved_str


def build_environment(
    options: CommandOptions, *, environ: Mapping[str, str]
) -> tuple[str, ...]:
    """Assemble the child's KEY=VALUE entries.

    Inherited entries come first so that explicit ones win under last-entry-wins.
    """
    entries: list[str] = []
    if options.flag.use_global_environment:
        entries.extend(f"{key}={value}" for key, value in environ.items())
    entries.extend(f"{key}={value}" for key, value in options.environment.items())
    return tuple(entries)


def search_path_for(options: CommandOptions, *, environ: Mapping[str, str]) -> str | None:
    """PATH used for lookup: the explicit one if given, else the parent's."""
    if "PATH" in options.environment:
        return options.environment["PATH"]
    return environ.get("PATH")


def resolve(
    options: CommandOptions, *, cwd: Path, environ: Mapping[str, str]
) -> ResolvedProcess:
    """Turn validated options into a ResolvedProcess.

    Args:
        options: Validated command options
        cwd: Current directory relative paths are resolved against
        environ: Parent environment (inherited and used for the default PATH)

    Returns:
        ResolvedProcess ready to be spawned

    Raises:
        CommandResolutionError: If the executable or working directory is invalid
    """
    path = find_executable(
        options.command, cwd=cwd, search_path=search_path_for(options, environ=environ)
    )
    working_dir = resolve_working_dir(options.working_dir, cwd=cwd)
    environment = build_environment(options, environ=environ)

    logger.debug("Resolved %r to %s (cwd=%s)", options.command, path, working_dir)
    return ResolvedProcess(
        path=path,
        arguments=(options.command, *options.arguments),
        working_dir=working_dir,
        environment=environment,
    )


def validate_applications(names: Iterable[str], *, cwd: Path, search_path: str | None) -> None:
    """Check that every application can be found.

    Raises:
        ApplicationsNotFoundError: Listing every name that could not be found
    """
    missing: list[str] = []
    for name in names:
        try:
            find_executable(name, cwd=cwd, search_path=search_path)
        except ExecutableNotFoundError:
            missing.append(name)

    if missing:
        raise ApplicationsNotFoundError(missing)
