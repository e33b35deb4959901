"""TOML files describing a command.

Example file:

    [command]
    name = "./deploy.sh"
    arguments = ["--env", "staging"]
    working_dir = "scripts"

    [flags]
    use_global_environment = true
    use_tty = true

    [env]
    REGION = "eu-west-1"

    [[hooks.stdout]]
    on = "Continue?"
    send = "yes\\n"

Hook patterns and responses are UTF-8 strings; they become bytes on load. Options whose
hooks hold non-UTF-8 bytes cannot be saved.
"""

import tomllib
from pathlib import Path
from typing import Any

import tomlkit

from devops.command.types import CommandFlagset, CommandOptions, InputHook

_HOOK_SCOPES = ("stdout", "stderr", "stdany")
_FLAG_NAMES = ("hide_stdout", "hide_stderr", "use_global_environment", "use_tty")


def _parse_hooks(raw: Any, scope: str, cfg_path: Path) -> tuple[InputHook, ...]:
    if not isinstance(raw, list):
        raise ValueError(f"'hooks.{scope}' must be an array of tables in {cfg_path}")
    hooks: list[InputHook] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict) or "on" not in entry or "send" not in entry:
            raise ValueError(f"'hooks.{scope}[{index}]' needs 'on' and 'send' in {cfg_path}")
        hooks.append(
            InputHook(on=str(entry["on"]).encode("utf-8"), send=str(entry["send"]).encode("utf-8"))
        )
    return tuple(hooks)


def _hook_text(value: bytes, scope: str, cfg_path: Path) -> str:
    try:
        return value.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(
            f"hook {value!r} in 'hooks.{scope}' is not UTF-8 and cannot be saved to {cfg_path}"
        ) from e


def parse_command_options(data: dict[str, Any], cfg_path: Path) -> CommandOptions:
    """Build CommandOptions from already-parsed TOML data.

    Raises:
        ValueError: If a section is missing or has the wrong shape
    """
    command_section = data.get("command")
    if not isinstance(command_section, dict):
        raise ValueError(f"Missing [command] section in {cfg_path}")
    name = command_section.get("name")
    if not name:
        raise ValueError(f"Missing 'command.name' in {cfg_path}")

    raw_arguments = command_section.get("arguments", [])
    if not isinstance(raw_arguments, list):
        raise ValueError(f"'command.arguments' must be an array in {cfg_path}")
    arguments = tuple(str(x) for x in raw_arguments)
    working_dir = command_section.get("working_dir")
    if working_dir is not None:
        working_dir = str(working_dir)

    flags_section = data.get("flags", {})
    if not isinstance(flags_section, dict):
        raise ValueError(f"'flags' must be a table in {cfg_path}")
    unknown = sorted(set(flags_section) - set(_FLAG_NAMES))
    if unknown:
        raise ValueError(f"Unknown flag(s) {', '.join(unknown)} in {cfg_path}")
    flag = CommandFlagset(**{key: bool(value) for key, value in flags_section.items()})

    env_section = data.get("env", {})
    if not isinstance(env_section, dict):
        raise ValueError(f"'env' must be a table in {cfg_path}")
    env = {str(k): str(v) for k, v in env_section.items()}

    hooks_section = data.get("hooks", {})
    if not isinstance(hooks_section, dict):
        raise ValueError(f"'hooks' must be a table in {cfg_path}")
    hooks = {
        scope: _parse_hooks(hooks_section.get(scope, []), scope, cfg_path)
        for scope in _HOOK_SCOPES
    }

    return CommandOptions(
        command=str(name),
        arguments=arguments,
        environment=env,
        working_dir=working_dir,
        flag=flag,
        stdout_hooks=hooks["stdout"],
        stderr_hooks=hooks["stderr"],
        stdany_hooks=hooks["stdany"],
    )


def load_command_options(cfg_path: Path) -> CommandOptions:
    """Load CommandOptions from a TOML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is malformed or missing required fields
    """
    if not cfg_path.exists():
        raise FileNotFoundError(f"Command config not found at {cfg_path}")
    try:
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {cfg_path}: {e}") from e
    return parse_command_options(data, cfg_path)


def save_command_options(cfg_path: Path, options: CommandOptions) -> None:
    """Write CommandOptions to a TOML file, creating parent directories.

    Default-valued sections are omitted.

    Raises:
        ValueError: If a hook pattern or response is not valid UTF-8
    """
    cfg_path.parent.mkdir(parents=True, exist_ok=True)

    doc = tomlkit.document()

    command = tomlkit.table()
    command["name"] = options.command
    if options.arguments:
        command["arguments"] = list(options.arguments)
    if options.working_dir:
        command["working_dir"] = options.working_dir
    doc["command"] = command

    flags = {name: getattr(options.flag, name) for name in _FLAG_NAMES}
    if any(flags.values()):
        doc["flags"] = {name: value for name, value in flags.items() if value}

    if options.environment:
        doc["env"] = dict(options.environment)

    hook_tables = {
        "stdout": options.stdout_hooks,
        "stderr": options.stderr_hooks,
        "stdany": options.stdany_hooks,
    }
    if any(hook_tables.values()):
        hooks = tomlkit.table()
        for scope, table in hook_tables.items():
            if not table:
                continue
            entries = tomlkit.aot()
            for hook in table:
                entry = tomlkit.table()
                entry["on"] = _hook_text(hook.on, scope, cfg_path)
                entry["send"] = _hook_text(hook.send, scope, cfg_path)
                entries.append(entry)
            hooks[scope] = entries
        doc["hooks"] = hooks

    cfg_path.write_text(tomlkit.dumps(doc), encoding="utf-8")
