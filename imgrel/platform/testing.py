"""In-memory ProcessRunner for tests.

``RecordingRunner`` records every command and succeeds unless a failure was
registered for it with ``fail``. The registry password command answers with
``REGISTRY_TOKEN``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from imgrel.core.result import Err, Ok, Result
from imgrel.platform.process import ProcessError

__all__ = ["REGISTRY_TOKEN", "RecordedCall", "RecordingRunner", "all_tools", "no_tools"]

REGISTRY_TOKEN = "secret-token"


@dataclass(frozen=True, slots=True)
class RecordedCall:
    cmd: tuple[str, ...]
    cwd: Path
    input: str | None = None


@dataclass(frozen=True, slots=True)
class _Failure:
    prefix: tuple[str, ...]
    cwd: Path | None
    returncode: int
    stderr: str


class RecordingRunner:
    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self._failures: list[_Failure] = []

    def fail(
        self,
        *prefix: str,
        cwd: Path | None = None,
        returncode: int = 1,
        stderr: str = "boom",
    ) -> None:
        """Make commands starting with ``prefix`` (optionally in ``cwd``) fail."""
        self._failures.append(_Failure(tuple(prefix), cwd, returncode, stderr))

    def capture(
        self, cmd: list[str], *, cwd: Path, input: str | None = None
    ) -> Result[str, ProcessError]:
        self.calls.append(RecordedCall(tuple(cmd), cwd, input))
        failure = self._match(cmd, cwd)
        if failure is not None:
            return Err(ProcessError(tuple(cmd), failure.returncode, "", failure.stderr))
        if cmd[:3] == ["aws", "ecr", "get-login-password"]:
            return Ok(REGISTRY_TOKEN + "\n")
        return Ok("")

    def stream(self, cmd: list[str], *, cwd: Path) -> Result[None, ProcessError]:
        self.calls.append(RecordedCall(tuple(cmd), cwd))
        failure = self._match(cmd, cwd)
        if failure is not None:
            return Err(ProcessError(tuple(cmd), failure.returncode, "", failure.stderr))
        return Ok(None)

    def commands(self, *prefix: str) -> list[tuple[str, ...]]:
        """Recorded commands starting with ``prefix``."""
        n = len(prefix)
        return [c.cmd for c in self.calls if c.cmd[:n] == prefix]

    def _match(self, cmd: list[str], cwd: Path) -> _Failure | None:
        for f in self._failures:
            if tuple(cmd[: len(f.prefix)]) != f.prefix:
                continue
            if f.cwd is not None and f.cwd != cwd:
                continue
            return f
        return None


def all_tools(name: str) -> str | None:
    return f"/usr/bin/{name}"


def no_tools(name: str) -> str | None:
    return None
