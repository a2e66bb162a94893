"""Subprocess execution with Result-based error handling.

Every external tool (docker, aws, pnpm/npm) goes through this module, so
services only ever see an exit status plus captured output.

Usage:
    result = run(["docker", "image", "ls"], cwd=Path("."))
    match result:
        case Ok(stdout):
            print(stdout)
        case Err(error):
            print(f"Failed: {error.stderr}")
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from imgrel.core.result import Err, Ok, Result

__all__ = ["ProcessError", "ProcessRunner", "DefaultProcessRunner", "run", "run_silent"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: The exit code of the process (-1 if it never started).
        stdout: Standard output (may be empty).
        stderr: Standard error (contains error details).
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"

    @property
    def detail(self) -> str | None:
        """Last non-empty stderr line, for hints."""
        lines = [line.strip() for line in self.stderr.splitlines() if line.strip()]
        return lines[-1] if lines else None


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    input: str | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        input: Text written to the process's stdin.

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            input=input,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_silent(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
) -> Result[None, ProcessError]:
    """Execute a command with output streamed to the terminal.

    Use this for long-running commands (builds, pushes) whose progress the
    operator should see.
    """
    try:
        proc = subprocess.run(cmd, cwd=str(cwd), env=env, check=False)
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=proc.returncode, stdout="", stderr="")
        )

    return Ok(None)


class ProcessRunner(Protocol):
    """Seam for running external commands.

    Services depend on this protocol so tests can record calls and script
    failures without spawning processes.
    """

    def capture(
        self, cmd: list[str], *, cwd: Path, input: str | None = None
    ) -> Result[str, ProcessError]:
        """Run a command, capturing its output."""
        ...

    def stream(self, cmd: list[str], *, cwd: Path) -> Result[None, ProcessError]:
        """Run a command with output streamed to the terminal."""
        ...


class DefaultProcessRunner:
    """ProcessRunner backed by subprocess."""

    def capture(
        self, cmd: list[str], *, cwd: Path, input: str | None = None
    ) -> Result[str, ProcessError]:
        return run(cmd, cwd=cwd, input=input)

    def stream(self, cmd: list[str], *, cwd: Path) -> Result[None, ProcessError]:
        return run_silent(cmd, cwd=cwd)
