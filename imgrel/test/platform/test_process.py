"""Tests for imgrel.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from imgrel.core.result import Err, Ok
from imgrel.platform.process import DefaultProcessRunner, ProcessError, run, run_silent


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(("docker", "push"), 1, "", "denied")
        assert str(error) == "docker push failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(("docker", "buildx", "build", "--load", "."), 1, "", "")
        assert str(error) == "docker buildx build ... failed (exit 1)"

    def test_detail_is_last_stderr_line(self) -> None:
        error = ProcessError(("docker",), 1, "", "step 1\nERROR: no space left\n\n")
        assert error.detail == "ERROR: no space left"

    def test_detail_empty(self) -> None:
        assert ProcessError(("docker",), 1, "", "  \n").detail is None


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([sys.executable, "-c", "print('hello')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = run(
            [sys.executable, "-c", "import sys; sys.stderr.write('bad'); sys.exit(3)"],
            cwd=tmp_path,
        )

        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert "bad" in result.error.stderr

    def test_input_goes_to_stdin(self, tmp_path: Path) -> None:
        result = run(
            [sys.executable, "-c", "import sys; print(sys.stdin.read().upper())"],
            cwd=tmp_path,
            input="token",
        )

        assert isinstance(result, Ok)
        assert "TOKEN" in result.value

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert result.error.stderr


class TestRunSilent:
    def test_success(self, tmp_path: Path) -> None:
        assert run_silent([sys.executable, "-c", "pass"], cwd=tmp_path) == Ok(None)

    def test_failure(self, tmp_path: Path) -> None:
        result = run_silent([sys.executable, "-c", "import sys; sys.exit(2)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 2


def test_default_runner_delegates(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    import imgrel.platform.process as process_mod

    seen: list[tuple[str, list[str], str | None]] = []

    def fake_run(cmd: list[str], cwd: Path, env: object = None, *, input: str | None = None):
        seen.append(("run", cmd, input))
        return Ok("out")

    def fake_run_silent(cmd: list[str], cwd: Path, env: object = None):
        seen.append(("silent", cmd, None))
        return Ok(None)

    monkeypatch.setattr(process_mod, "run", fake_run)
    monkeypatch.setattr(process_mod, "run_silent", fake_run_silent)

    runner = DefaultProcessRunner()
    assert runner.capture(["docker", "tag"], cwd=tmp_path, input="x") == Ok("out")
    assert runner.stream(["docker", "push"], cwd=tmp_path) == Ok(None)
    assert seen == [("run", ["docker", "tag"], "x"), ("silent", ["docker", "push"], None)]
