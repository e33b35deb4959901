"""Data types describing a command invocation."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class InputHook:
    """Rule that writes `send` to the child's stdin when `on` is seen in its output.

    Attributes:
        on: Byte sequence matched by substring containment against each chunk read
        send: Byte sequence written to stdin on every match
    """

    on: bytes
    send: bytes


@dataclass(frozen=True)
class CommandFlagset:
    """Boolean configuration flags for a command.

    Attributes:
        hide_stdout: Do not echo the child's stdout to the terminal (still captured)
        hide_stderr: Do not echo the child's stderr to the terminal (still captured)
        use_global_environment: Pass the parent's environment to the child
        use_tty: Enable the input channel. Required for any hooks to fire. Without
            hooks, the child reads the terminal's stdin directly.
    """

    hide_stdout: bool = False
    hide_stderr: bool = False
    use_global_environment: bool = False
    use_tty: bool = False


@dataclass(frozen=True)
class CommandOptions:
    """Description of a command before resolution.

    Attributes:
        command: Name looked up in the search path, or a path to the binary
            (relative paths are resolved against the current directory)
        arguments: Parameters passed to the command
        environment: Variables injected into the child's environment
        working_dir: Directory the child runs in; defaults to the current directory
        flag: Boolean configuration flags
        stdout_hooks: Hooks matched against stdout only
        stderr_hooks: Hooks matched against stderr only
        stdany_hooks: Hooks matched against both streams. For a given chunk these
            fire before the stream-specific ones.
    """

    command: str
    arguments: tuple[str, ...] = ()
    environment: dict[str, str] = field(default_factory=dict)
    working_dir: str | None = None
    flag: CommandFlagset = field(default_factory=CommandFlagset)
    stdout_hooks: tuple[InputHook, ...] = ()
    stderr_hooks: tuple[InputHook, ...] = ()
    stdany_hooks: tuple[InputHook, ...] = ()

    @property
    def has_hooks(self) -> bool:
        return bool(self.stdout_hooks or self.stderr_hooks or self.stdany_hooks)

    def validate(self) -> list[str]:
        """Collect every problem with this combination of options.

        Returns:
            Problem descriptions, empty when the options are valid
        """
        problems: list[str] = []

        if not self.command:
            problems.append("missing command")

        hook_tables = (
            ("stdout_hooks", self.stdout_hooks),
            ("stderr_hooks", self.stderr_hooks),
            ("stdany_hooks", self.stdany_hooks),
        )
        for table_name, hooks in hook_tables:
            if hooks and not self.flag.use_tty:
                problems.append(
                    f"flag.use_tty should be true if {table_name} is defined "
                    "(hooks need the input channel to write into)"
                )

        return problems


@dataclass(frozen=True)
class ResolvedProcess:
    """Concrete, validated invocation produced by the resolver.

    Attributes:
        path: Absolute path of the executable
        arguments: Full argv; the first element is the command as it was given
        working_dir: Absolute working directory
        environment: KEY=VALUE entries in the order they were assembled
    """

    path: str
    arguments: tuple[str, ...]
    working_dir: str
    environment: tuple[str, ...]

    def environment_mapping(self) -> dict[str, str]:
        """Fold the environment entries into a mapping, last entry for a key wins."""
        mapping: dict[str, str] = {}
        for entry in self.environment:
            key, sep, value = entry.partition("=")
            if sep:
                mapping[key] = value
        return mapping


class CommandState(Enum):
    """Lifecycle of a single invocation. Terminal states are final."""

    CREATED = "created"
    RESOLVED = "resolved"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
