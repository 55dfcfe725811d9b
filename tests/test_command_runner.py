# tests/test_command_runner.py

import logging
import subprocess
from unittest.mock import call, patch

import pytest

from dipse import command_runner
from dipse.command_runner import CommandParams
from dipse.errors import AliasNotFoundError, CommandError, InvocationError

PATH = "/home/user/project"
ENTRY = {"build": "make build", "run": "make run", "greet": "echo hi"}


def _completed(returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode)


# --- Tests for parse_invocation ---

parse_invocation_test_cases = [
    (["run"], [("run", [])]),
    (["build", "run"], [("build", []), ("run", [])]),
    (["run", "--", "--release"], [("run", ["--release"])]),
    (["build", "run", "--", "--release"], [("build", []), ("run", ["--release"])]),
    (["run", "--"], [("run", [])]),
    (["run", "--", "a", "--", "b"], [("run", ["a", "--", "b"])]),
]

@pytest.mark.parametrize("tokens, expected", parse_invocation_test_cases)
def test_parse_invocation(tokens, expected):
    assert command_runner.parse_invocation(tokens) == expected


def test_parse_invocation_separator_without_alias():
    with pytest.raises(InvocationError):
        command_runner.parse_invocation(["--", "--release"])


def test_command_params_str():
    assert str(CommandParams("run", "make run")) == "make run"
    assert str(CommandParams("run", "make run", ["--release", "-j4"])) == "make run --release -j4"


# --- Tests for execute ---

@patch("dipse.command_runner.subprocess.run")
def test_execute_runs_in_order_with_trailing_args(mock_run):
    mock_run.return_value = _completed(0)

    code = command_runner.execute(["build", "run", "--", "--release"], ENTRY, PATH)

    assert code == 0
    assert mock_run.call_args_list == [
        call(["sh", "-c", "make build"], check=False),
        call(["sh", "-c", "make run --release"], check=False),
    ]


@patch("dipse.command_runner.subprocess.run")
def test_execute_unknown_alias_runs_nothing(mock_run):
    with pytest.raises(AliasNotFoundError) as excinfo:
        command_runner.execute(["build", "deploy"], ENTRY, PATH)
    assert excinfo.value.name == "deploy"
    mock_run.assert_not_called()


@patch("dipse.command_runner.subprocess.run")
def test_execute_dry_run_spawns_nothing(mock_run, capsys):
    code = command_runner.execute(["greet"], ENTRY, PATH, dry_run=True)
    assert code == 0
    mock_run.assert_not_called()
    assert capsys.readouterr().out == ""


@patch("dipse.command_runner.subprocess.run")
def test_execute_debug_prints_commands(mock_run, capsys):
    command_runner.execute(["run", "--", "--release"], ENTRY, PATH, debug=True, dry_run=True)
    assert capsys.readouterr().out == "`make run --release`\n"


@patch("dipse.command_runner.subprocess.run")
def test_execute_stops_at_first_failure(mock_run, caplog):
    caplog.set_level(logging.WARNING)
    mock_run.return_value = _completed(3)

    code = command_runner.execute(["build", "run"], ENTRY, PATH)

    assert code == 3
    mock_run.assert_called_once_with(["sh", "-c", "make build"], check=False)
    assert "Alias 'build' failed with exit code 3" in caplog.text


@patch("dipse.command_runner.subprocess.run")
def test_execute_signal_exit_code(mock_run):
    mock_run.return_value = _completed(-2)
    assert command_runner.execute(["run"], ENTRY, PATH) == 130


@patch("dipse.command_runner.subprocess.run", side_effect=FileNotFoundError("sh not found"))
def test_execute_spawn_failure(mock_run):
    with pytest.raises(CommandError) as excinfo:
        command_runner.execute(["build", "run"], ENTRY, PATH)
    assert "make build" in str(excinfo.value)
    mock_run.assert_called_once()


def test_run_shell_command_real_process():
    assert command_runner.run_shell_command("exit 0") == 0
    assert command_runner.run_shell_command("exit 7") == 7


# --- Tests for open_editor ---

@patch("dipse.command_runner.run_shell_command", return_value=0)
def test_open_editor_uses_editor_env(mock_shell, monkeypatch):
    monkeypatch.delenv("VISUAL", raising=False)
    monkeypatch.setenv("EDITOR", "nano")
    assert command_runner.open_editor("/home/user/my project/.d.toml") == 0
    mock_shell.assert_called_once_with("nano '/home/user/my project/.d.toml'")


@patch("dipse.command_runner.run_shell_command", return_value=0)
def test_open_editor_prefers_visual_then_defaults(mock_shell, monkeypatch):
    monkeypatch.setenv("VISUAL", "code -w")
    monkeypatch.setenv("EDITOR", "nano")
    command_runner.open_editor("/tmp/d.toml")
    monkeypatch.delenv("VISUAL")
    monkeypatch.delenv("EDITOR")
    command_runner.open_editor("/tmp/d.toml")

    assert mock_shell.call_args_list == [call("code -w /tmp/d.toml"), call("vi /tmp/d.toml")]
