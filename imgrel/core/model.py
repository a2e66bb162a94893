"""Release domain types.

All values here are immutable and derived from configuration only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

__all__ = [
    "FRONTEND",
    "BACKEND",
    "COMPONENT_NAMES",
    "AppBuild",
    "Component",
    "ImageReference",
    "LocalImage",
]

FRONTEND = "frontend"
BACKEND = "backend"

# Release order in "all" mode.
COMPONENT_NAMES: tuple[str, ...] = (FRONTEND, BACKEND)


@dataclass(frozen=True, slots=True)
class AppBuild:
    """Optional application build run before the container build.

    Attributes:
        enabled: Whether the step runs at all.
        env: Content written to the component's env file for the build.
        clean: Directories (relative to the build context) removed first.
    """

    enabled: bool = False
    env: str | None = None
    clean: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Component:
    """A release unit: one image built from one build context."""

    name: str
    image_name: str
    build_context: Path
    env_file: str | None = None
    app_build: AppBuild = field(default_factory=AppBuild)

    @property
    def env_path(self) -> Path | None:
        """Local configuration file guarded during the build, if declared."""
        if self.env_file is None:
            return None
        return self.build_context / self.env_file


@dataclass(frozen=True, slots=True)
class LocalImage:
    """A locally built image, ``repository:tag``."""

    repository: str
    tag: str

    def __str__(self) -> str:
        return f"{self.repository}:{self.tag}"


@dataclass(frozen=True, slots=True)
class ImageReference:
    """A fully-qualified remote reference, ``registry/repository:tag``."""

    registry: str
    repository: str
    tag: str

    def __str__(self) -> str:
        return f"{self.registry}/{self.repository}:{self.tag}"
