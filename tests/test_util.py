"""
Tests for CommandRunner and path helpers.
"""

import logging
import sys
from pathlib import Path

import pytest

from snap_osquery.errors import ExecutionError, ExtensionError
from snap_osquery.util import CommandRunner, expand_path, is_executable, sh_join, xdg_config_home


@pytest.fixture
def runner():
    return CommandRunner(logger=logging.getLogger("snap-osquery-test"))


class TestCommandRunner:
    """Tests for CommandRunner.run."""

    def test_captures_stdout(self, runner):
        res = runner.run([sys.executable, "-c", "print('hello')"])

        assert res.returncode == 0
        assert res.stdout == "hello\n"
        assert res.args == [sys.executable, "-c", "print('hello')"]

    def test_nonzero_without_check_returns_result(self, runner):
        res = runner.run([sys.executable, "-c", "import sys; sys.exit(3)"])

        assert res.returncode == 3

    def test_nonzero_with_check_raises(self, runner):
        with pytest.raises(ExecutionError) as exc_info:
            runner.run(
                [sys.executable, "-c", "import sys; sys.stderr.write('nope'); sys.exit(4)"],
                check=True,
            )

        assert exc_info.value.returncode == 4
        assert exc_info.value.stderr == "nope"
        assert "Command failed (4)" in str(exc_info.value)

    def test_missing_binary_raises(self, runner, tmp_path):
        with pytest.raises(ExecutionError) as exc_info:
            runner.run([str(tmp_path / "does-not-exist")])

        assert exc_info.value.returncode is None
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_invalid_utf8_raises_decode_error(self, runner):
        with pytest.raises(UnicodeDecodeError):
            runner.run([sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'\\xff\\xfe')"])

    def test_env_is_merged(self, runner):
        res = runner.run(
            [sys.executable, "-c", "import os; print(os.environ['SNAP_OSQUERY_TEST'])"],
            env={"SNAP_OSQUERY_TEST": "yes"},
        )

        assert res.stdout.strip() == "yes"

    def test_logs_command_at_debug(self, runner, caplog):
        with caplog.at_level(logging.DEBUG, logger="snap-osquery-test"):
            runner.run([sys.executable, "-c", "pass"])

        assert any(r.getMessage().startswith("RUN ") for r in caplog.records)

    def test_execution_error_is_extension_error(self):
        assert issubclass(ExecutionError, ExtensionError)
        assert issubclass(ExecutionError, RuntimeError)


def test_sh_join_quotes():
    assert sh_join(["snap", "list", "a b"]) == "snap list 'a b'"


def test_expand_path(monkeypatch):
    monkeypatch.setenv("SNAP_DIR", "/opt/snapd")

    assert expand_path("$SNAP_DIR/bin/snap") == Path("/opt/snapd/bin/snap")


def test_xdg_config_home(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

    assert xdg_config_home() == tmp_path


def test_is_executable(tmp_path):
    script = tmp_path / "tool"
    script.write_text("#!/bin/sh\n")

    assert is_executable(script) is False
    script.chmod(0o755)
    assert is_executable(script) is True
    assert is_executable(tmp_path) is False


def test_run_takes_only_check_and_env(runner):
    with pytest.raises(TypeError):
        runner.run([sys.executable, "-c", "pass"], cwd="/")
