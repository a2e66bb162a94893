"""Console output abstraction.

Services report progress through ``ConsoleProtocol`` rather than printing
directly. Production uses Rich; tests use ``MockConsole`` to assert on what
would have been shown to the operator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    """Text styles for console output."""

    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()


class ConsoleProtocol(Protocol):
    """Status-line output used by every release stage."""

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        """Print a message with optional styling."""
        ...

    def info(self, message: str) -> None:
        """Print an ``[INFO]`` status line."""
        ...

    def success(self, message: str) -> None:
        """Print a ``[SUCCESS]`` status line."""
        ...

    def warning(self, message: str) -> None:
        """Print a ``[WARNING]`` status line."""
        ...

    def error(self, message: str) -> None:
        """Print an ``[ERROR]`` status line."""
        ...


class RichConsole:
    """Console implementation using Rich."""

    def __init__(self, *, stderr: bool = False) -> None:
        # Import Rich lazily to keep import time low for --help.
        from rich.console import Console

        self._console = Console(stderr=stderr, highlight=False)
        self._style_map = {
            Style.DEFAULT: "",
            Style.SUCCESS: "green",
            Style.ERROR: "red bold",
            Style.WARNING: "yellow",
            Style.INFO: "blue",
            Style.DIM: "dim",
        }

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = self._style_map.get(style, "")
        if rich_style:
            self._console.print(message, style=rich_style, markup=False)
        else:
            self._console.print(message, markup=False)

    def info(self, message: str) -> None:
        self._status("blue", "INFO", message)

    def success(self, message: str) -> None:
        self._status("green", "SUCCESS", message)

    def warning(self, message: str) -> None:
        self._status("yellow", "WARNING", message)

    def error(self, message: str) -> None:
        self._status("red", "ERROR", message)

    def _status(self, color: str, label: str, message: str) -> None:
        from rich.text import Text

        line = Text()
        line.append(f"[{label}]", style=color)
        line.append(f" {message}")
        self._console.print(line)


@dataclass
class OutputRecord:
    """A single output record for MockConsole."""

    message: str
    style: Style


def _empty_outputs() -> list[OutputRecord]:
    return []


@dataclass
class MockConsole:
    """Console implementation that captures output for testing."""

    outputs: list[OutputRecord] = field(default_factory=_empty_outputs)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def info(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"[INFO] {message}", Style.INFO))

    def success(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"[SUCCESS] {message}", Style.SUCCESS))

    def warning(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"[WARNING] {message}", Style.WARNING))

    def error(self, message: str) -> None:
        self.outputs.append(OutputRecord(f"[ERROR] {message}", Style.ERROR))

    # Test helpers

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    @property
    def text(self) -> str:
        """All output as a single newline-separated string."""
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(o.style == Style.ERROR for o in self.outputs)

    def has_warning(self) -> bool:
        return any(o.style == Style.WARNING for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        """Find all outputs containing a substring."""
        return [o for o in self.outputs if substring in o.message]

    def count(self, style: Style) -> int:
        return sum(1 for o in self.outputs if o.style == style)
