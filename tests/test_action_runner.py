import sys

import pytest

from core.action_runner import run_commands, run_shell_command

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX shell commands")


@posix_only
def test_failing_command_does_not_stop_the_rest():
    result = run_commands(["false", "echo hello"], label="test")

    assert len(result) == 2
    assert not result.ok
    assert result.failures == [result.results[0]]
    assert result.results[1].ok
    assert result.results[1].stdout.strip() == "hello"


@posix_only
def test_commands_run_in_order(tmp_path):
    out = tmp_path / "out.txt"

    result = run_commands([f"echo one >> {out}", f"echo two >> {out}", f"echo three >> {out}"])

    assert result.ok
    assert out.read_text().split() == ["one", "two", "three"]


@posix_only
def test_shell_features_are_available():
    result = run_shell_command("echo abc | tr a-z A-Z && echo done")

    assert result.ok
    assert result.stdout.split() == ["ABC", "done"]


@posix_only
def test_nonzero_exit_and_stderr_are_captured():
    result = run_shell_command("echo oops >&2; exit 3")

    assert not result.ok
    assert result.returncode == 3
    assert result.stderr.strip() == "oops"


@posix_only
def test_unknown_program_is_a_failure():
    result = run_shell_command("definitely-not-a-real-program-gamemon")

    assert not result.ok
    assert result.returncode != 0


@posix_only
def test_timeout_is_reported_as_failure():
    result = run_shell_command("sleep 5", timeout=0.2)

    assert not result.ok
    assert "timed out" in result.error


@pytest.mark.parametrize("command", ["", "   "])
def test_blank_command_is_not_executed(command):
    result = run_shell_command(command)

    assert not result.ok
    assert result.returncode is None
    assert result.error == "empty command"


def test_empty_list_is_ok():
    result = run_commands([])

    assert result.ok
    assert len(result) == 0


def test_command_with_null_byte_is_a_failure():
    result = run_shell_command("echo a\x00b")

    assert not result.ok
    assert result.returncode is None
    assert "null" in result.error


@posix_only
def test_unrunnable_command_does_not_stop_the_rest(tmp_path):
    marker = tmp_path / "marker"

    result = run_commands(["echo a\x00b", f"touch {marker}"])

    assert len(result) == 2
    assert result.failures == [result.results[0]]
    assert marker.exists()
