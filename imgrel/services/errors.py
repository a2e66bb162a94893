from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Stage = Literal["prerequisites", "env_snapshot", "app_build", "build", "authenticate", "push"]


@dataclass(frozen=True, slots=True)
class MissingToolError:
    tools: tuple[str, ...]
    message: str
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class BuildError:
    component: str
    message: str
    hint: str | None = None
    stage: Stage = "build"


@dataclass(frozen=True, slots=True)
class AuthError:
    registry: str
    message: str
    hint: str | None = None
    stage: Stage = "authenticate"


@dataclass(frozen=True, slots=True)
class PushError:
    reference: str
    message: str
    hint: str | None = None
    stage: Stage = "push"


@dataclass(frozen=True, slots=True)
class CleanupWarning:
    reference: str
    message: str


StageError = BuildError | AuthError | PushError
