"""Prerequisite checks.

Validates that the external tools a release needs are on PATH before any
side-effecting step runs:
- docker (required): builds, tags, pushes and removes images
- aws (required): fetches the registry login password
- pnpm (optional): application builds fall back to npm without it
"""

from __future__ import annotations

import shutil
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto

from imgrel.core.result import Err, Ok, Result
from imgrel.output.console import ConsoleProtocol, Style
from imgrel.services.errors import MissingToolError

ToolFinder = Callable[[str], str | None]


class CheckStatus(Enum):
    """Status of a single tool check."""

    OK = auto()
    WARNING = auto()
    """Optional tool missing; a degraded path is used."""
    ERROR = auto()
    """Required tool missing."""


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Result of a single check.

    Attributes:
        name: Tool name (e.g., "docker")
        status: Whether the check passed, warned, or failed
        message: Human-readable result message
        hint: Optional installation hint
    """

    name: str
    status: CheckStatus
    message: str
    hint: str | None = None

    @property
    def is_error(self) -> bool:
        return self.status == CheckStatus.ERROR

    @property
    def is_warning(self) -> bool:
        return self.status == CheckStatus.WARNING


@dataclass(frozen=True, slots=True)
class ToolRequirement:
    name: str
    label: str
    required: bool = True
    missing_note: str | None = None
    hint: str | None = None


DEFAULT_REQUIREMENTS: tuple[ToolRequirement, ...] = (
    ToolRequirement(
        "docker",
        "Docker",
        hint="https://docs.docker.com/engine/install/",
    ),
    ToolRequirement(
        "aws",
        "AWS CLI",
        hint="https://docs.aws.amazon.com/cli/latest/userguide/getting-started-install.html",
    ),
    ToolRequirement(
        "pnpm",
        "pnpm",
        required=False,
        missing_note="will use npm for frontend build",
    ),
)


class PrerequisiteChecker:
    def __init__(
        self,
        *,
        console: ConsoleProtocol,
        requirements: tuple[ToolRequirement, ...] = DEFAULT_REQUIREMENTS,
        which: ToolFinder = shutil.which,
    ) -> None:
        self._console = console
        self._requirements = requirements
        self._which = which

    def check(self) -> Result[None, MissingToolError]:
        """Check every tool; fail if any required one is missing."""
        self._console.info("Checking prerequisites...")
        results = self.check_all()

        for r in results:
            if r.is_error:
                self._console.error(r.message)
                if r.hint:
                    self._console.print(f"hint: {r.hint}", Style.DIM)
            elif r.is_warning:
                self._console.warning(r.message)

        missing = tuple(r.name for r in results if r.is_error)
        if missing:
            return Err(
                MissingToolError(
                    tools=missing,
                    message=f"Missing required tools: {', '.join(missing)}",
                    hint="Install the missing tools and make sure they are on PATH",
                )
            )

        self._console.success("Prerequisites check passed")
        return Ok(None)

    def check_all(self) -> list[CheckResult]:
        return [self._check_one(req) for req in self._requirements]

    def _check_one(self, req: ToolRequirement) -> CheckResult:
        path = self._which(req.name)
        if path:
            return CheckResult(req.name, CheckStatus.OK, path)
        if req.required:
            return CheckResult(
                req.name,
                CheckStatus.ERROR,
                f"{req.label} is not installed or not in PATH",
                hint=req.hint,
            )
        note = f", {req.missing_note}" if req.missing_note else ""
        return CheckResult(req.name, CheckStatus.WARNING, f"{req.label} not found{note}")
