"""Scoped snapshot of a local configuration file.

A build may rewrite a component's env file (e.g. ``frontend/.env.local``).
``EnvSnapshotGuard`` records the file's state on entry and puts it back on
exit, whether the guarded block returns or raises:

    with EnvSnapshotGuard(path, console=console):
        path.write_text("VITE_API_URL=...")
        build()
    # path holds its original bytes again, or is gone if it never existed
"""

from __future__ import annotations

import stat
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from imgrel.output.console import ConsoleProtocol
from imgrel.platform.files import atomic_write_bytes

__all__ = ["Present", "Absent", "EnvSnapshot", "EnvSnapshotGuard", "capture", "restore", "with_snapshot"]

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Present:
    content: bytes
    mode: int


@dataclass(frozen=True, slots=True)
class Absent:
    pass


EnvSnapshot = Present | Absent


def capture(path: Path) -> EnvSnapshot:
    """Record the bytes and permission bits of ``path``.

    Raises OSError when ``path`` exists but cannot be read as a file.
    """
    try:
        content = path.read_bytes()
    except FileNotFoundError:
        return Absent()
    return Present(content, stat.S_IMODE(path.stat().st_mode))


def restore(path: Path, snapshot: EnvSnapshot) -> None:
    """Put ``path`` back into the captured state."""
    match snapshot:
        case Present(content=content, mode=mode):
            atomic_write_bytes(path, content, mode=mode)
        case Absent():
            path.unlink(missing_ok=True)


class EnvSnapshotGuard:
    """Context manager restoring a file to its state at entry.

    The snapshot is owned by the guard and consumed exactly once on exit;
    a guard cannot be re-entered.
    """

    def __init__(self, path: Path, *, console: ConsoleProtocol | None = None) -> None:
        self._path = path
        self._console = console
        self._snapshot: EnvSnapshot | None = None

    @property
    def path(self) -> Path:
        return self._path

    def __enter__(self) -> EnvSnapshotGuard:
        if self._snapshot is not None:
            raise RuntimeError(f"snapshot already held for {self._path}")
        self._snapshot = capture(self._path)
        if self._console is not None and isinstance(self._snapshot, Present):
            self._console.info(f"Backed up {self._path.name}")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: object | None,
    ) -> None:
        snapshot, self._snapshot = self._snapshot, None
        if snapshot is None:
            return
        restore(self._path, snapshot)
        if self._console is not None and isinstance(snapshot, Present):
            self._console.info(f"Restored {self._path.name}")

    def run(self, body: Callable[[], T]) -> T:
        """Run ``body`` inside the guard and return its value."""
        with self:
            return body()


def with_snapshot(
    path: Path, body: Callable[[], T], *, console: ConsoleProtocol | None = None
) -> T:
    return EnvSnapshotGuard(path, console=console).run(body)
