"""Release services.

Services implement the release stages, coordinating between the domain
layer (core/) and external tools (platform/process.py).
"""

from imgrel.services.builder import ImageBuilder
from imgrel.services.cleanup import CleanupStage
from imgrel.services.env_guard import EnvSnapshotGuard, with_snapshot
from imgrel.services.errors import (
    AuthError,
    BuildError,
    CleanupWarning,
    MissingToolError,
    PushError,
)
from imgrel.services.orchestrator import ReleaseOrchestrator, parse_mode
from imgrel.services.prereqs import PrerequisiteChecker
from imgrel.services.registry import RegistryClient
from imgrel.services.workflow import ComponentReleaseWorkflow, WorkflowResult

__all__ = [
    # Errors
    "AuthError",
    "BuildError",
    "CleanupWarning",
    "MissingToolError",
    "PushError",
    # Stages
    "PrerequisiteChecker",
    "EnvSnapshotGuard",
    "with_snapshot",
    "ImageBuilder",
    "RegistryClient",
    "CleanupStage",
    "ComponentReleaseWorkflow",
    "WorkflowResult",
    # Driver
    "ReleaseOrchestrator",
    "parse_mode",
]
