"""Tests for `devops show`."""

from pathlib import Path

from click.testing import CliRunner

from devops.cli.cli import cli
from tests.test_utils.context_builders import build_real_context
from tests.test_utils.scripts import write_script


def test_show_prints_invocation_and_environment(tmp_path: Path) -> None:
    script = write_script(tmp_path, "deploy.sh", "exit 1\n")
    ctx = build_real_context(tmp_path, {"HOME": "/home/tester"})

    result = CliRunner().invoke(
        cli, ["show", "--env", "REGION=eu-west-1", "./deploy.sh", "a b"], obj=ctx
    )

    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == f'{script} "a b"'
    assert lines[1:] == ["HOME=/home/tester", "REGION=eu-west-1"]


def test_show_env_only(tmp_path: Path) -> None:
    write_script(tmp_path, "deploy.sh", "exit 1\n")
    ctx = build_real_context(tmp_path, {"HOME": "/home/tester"})

    result = CliRunner().invoke(
        cli, ["show", "--env-only", "--no-global-env", "--env", "A=1", "./deploy.sh"], obj=ctx
    )

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["A=1"]


def test_show_reports_bad_working_dir(tmp_path: Path) -> None:
    write_script(tmp_path, "deploy.sh", "exit 0\n")
    ctx = build_real_context(tmp_path, {})

    result = CliRunner().invoke(cli, ["show", "--cwd", "missing", "./deploy.sh"], obj=ctx)

    assert result.exit_code == 1
    assert "failed to get information about path" in result.output
