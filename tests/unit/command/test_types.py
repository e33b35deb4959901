"""Tests for command option validation and resolved environments."""

from devops.command.types import (
    CommandFlagset,
    CommandOptions,
    InputHook,
    ResolvedProcess,
)


def test_valid_options_have_no_problems() -> None:
    options = CommandOptions(command="ls", arguments=("-a",))

    assert options.validate() == []


def test_missing_command_is_reported() -> None:
    problems = CommandOptions(command="").validate()

    assert problems == ["missing command"]


def test_every_hook_table_without_tty_is_reported() -> None:
    hook = InputHook(on=b"?", send=b"y\n")
    options = CommandOptions(
        command="",
        stdout_hooks=(hook,),
        stderr_hooks=(hook,),
        stdany_hooks=(hook,),
    )

    problems = options.validate()

    assert len(problems) == 4
    assert problems[0] == "missing command"
    assert "stdout_hooks" in problems[1]
    assert "stderr_hooks" in problems[2]
    assert "stdany_hooks" in problems[3]
    assert all("use_tty" in problem for problem in problems[1:])


def test_hooks_with_tty_are_valid() -> None:
    options = CommandOptions(
        command="ls",
        flag=CommandFlagset(use_tty=True),
        stdany_hooks=(InputHook(on=b"?", send=b"y\n"),),
    )

    assert options.validate() == []
    assert options.has_hooks


def test_environment_mapping_last_entry_wins() -> None:
    resolved = ResolvedProcess(
        path="/bin/ls",
        arguments=("ls",),
        working_dir="/",
        environment=("HOME=/root", "GREETING=hi", "GREETING=hello", "EMPTY=", "BROKEN"),
    )

    assert resolved.environment_mapping() == {
        "HOME": "/root",
        "GREETING": "hello",
        "EMPTY": "",
    }


def test_environment_value_may_contain_equals() -> None:
    resolved = ResolvedProcess(
        path="/bin/ls", arguments=("ls",), working_dir="/", environment=("OPTS=a=b=c",)
    )

    assert resolved.environment_mapping() == {"OPTS": "a=b=c"}
