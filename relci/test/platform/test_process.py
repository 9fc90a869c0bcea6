"""Tests for relci.platform.process and relci.platform.ci."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from relci.core.result import Err, Ok
from relci.platform.ci import CircleCiAgent, HaltFailed
from relci.platform.process import ProcessError, run


class TestProcessError:
    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("docker", "run", "--rm", "-v", "x:/data"),
            returncode=1,
            stdout="",
            stderr="error",
        )
        assert str(error) == "docker run --rm ... failed (exit 1)"

    def test_output_combines_streams(self) -> None:
        error = ProcessError(("x",), 1, "out\n", "err\n")
        assert error.output == "out\nerr"


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "import sys; sys.exit(42)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 42

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert len(result.error.stderr) > 0

    def test_timeout(self, tmp_path: Path) -> None:
        result = run(
            [sys.executable, "-c", "import time; time.sleep(10)"],
            cwd=tmp_path,
            timeout=0.1,
        )

        assert isinstance(result, Err)
        assert "timed out" in result.error.stderr.lower()


class TestCircleCiAgent:
    def test_halt_runs_step_halt(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import relci.platform.ci as ci_mod

        calls: list[list[str]] = []

        def fake_run(cmd: list[str], cwd: Path, env: object = None, *, timeout: float | None = None):
            calls.append(cmd)
            return Ok("")

        monkeypatch.setattr(ci_mod, "run_process", fake_run)

        assert CircleCiAgent(cwd=tmp_path).halt() == Ok(None)
        assert calls == [["circleci-agent", "step", "halt"]]

    def test_missing_agent(self, tmp_path: Path) -> None:
        result = CircleCiAgent(cwd=tmp_path, executable="nonexistent_agent_12345").halt()

        assert isinstance(result, Err)
        assert isinstance(result.error, HaltFailed)
        assert result.error.hint
