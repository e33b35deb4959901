"""Tests for invocation rendering."""

from devops.command.render import render_invocation, split_invocation


def test_arguments_are_double_quoted() -> None:
    rendered = render_invocation("/usr/bin/ls", ["-a", "-l"])

    assert rendered == '/usr/bin/ls "-a" "-l"'


def test_no_arguments() -> None:
    assert render_invocation("/usr/bin/true", []) == "/usr/bin/true"


def test_round_trip_with_awkward_arguments() -> None:
    arguments = ["hello world", 'say "hi"', "back\\slash", "$HOME", "", "it's"]

    rendered = render_invocation("/opt/my tools/run", arguments)

    assert split_invocation(rendered) == ["/opt/my tools/run", *arguments]


def test_round_trip_plain() -> None:
    arguments = ["1", "2", "3"]

    rendered = render_invocation("/bin/echo", arguments)

    assert split_invocation(rendered) == ["/bin/echo", "1", "2", "3"]
