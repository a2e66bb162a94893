"""Top-level release driver.

The invocation mode is parsed once from the raw arguments, then
``ReleaseOrchestrator.run`` matches on it:

    All          -> prerequisites, frontend, backend, cleanup
    FrontendOnly -> prerequisites, frontend, cleanup
    BackendOnly  -> prerequisites, backend, cleanup
    Help         -> usage, exit 0
    Unknown(arg) -> diagnostic, exit 1

Components are released one after the other. A failed component does not
stop the next one, but any failure makes the run exit non-zero.
"""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from imgrel.core.config import ReleaseConfig
from imgrel.core.errors import ErrorCode
from imgrel.core.model import BACKEND, COMPONENT_NAMES, FRONTEND, ImageReference, LocalImage
from imgrel.core.result import Err
from imgrel.output.console import ConsoleProtocol, Style
from imgrel.platform.process import ProcessRunner
from imgrel.services.builder import ImageBuilder
from imgrel.services.cleanup import CleanupStage
from imgrel.services.errors import CleanupWarning
from imgrel.services.prereqs import PrerequisiteChecker, ToolFinder
from imgrel.services.registry import RegistryClient
from imgrel.services.workflow import ComponentReleaseWorkflow, WorkflowResult


@dataclass(frozen=True, slots=True)
class All:
    pass


@dataclass(frozen=True, slots=True)
class FrontendOnly:
    pass


@dataclass(frozen=True, slots=True)
class BackendOnly:
    pass


@dataclass(frozen=True, slots=True)
class Help:
    pass


@dataclass(frozen=True, slots=True)
class Unknown:
    arg: str


InvocationMode = All | FrontendOnly | BackendOnly | Help | Unknown

_FLAGS: dict[str, InvocationMode] = {
    "--frontend-only": FrontendOnly(),
    "--backend-only": BackendOnly(),
    "--help": Help(),
    "-h": Help(),
}

USAGE = """\
Usage: imgrel [OPTION]

Options:
  --frontend-only    Build and upload only the frontend image
  --backend-only     Build and upload only the backend image
  --config PATH      Read configuration from PATH (default: ./imgrel.toml)
  --help, -h         Show this help message

Default behavior: Build and upload both frontend and backend images"""


def parse_mode(args: Sequence[str]) -> InvocationMode:
    """Map raw CLI arguments to an invocation mode.

    Only one mode argument is accepted; anything after it is reported as
    unknown. An empty first argument selects the default mode.
    """
    if not args:
        return All()
    mode = All() if args[0] == "" else _FLAGS.get(args[0], Unknown(args[0]))
    if isinstance(mode, (Help, Unknown)):
        return mode
    if len(args) > 1:
        return Unknown(args[1])
    return mode


def print_usage(console: ConsoleProtocol) -> ErrorCode:
    console.print(USAGE)
    return ErrorCode.OK


def report_unknown(console: ConsoleProtocol, arg: str) -> ErrorCode:
    console.error(f"Unknown option: {arg}")
    console.print("Use --help for usage information")
    return ErrorCode.RELEASE_FAILED


@dataclass(frozen=True, slots=True)
class ReleaseReport:
    results: tuple[WorkflowResult, ...]
    cleanup_warnings: tuple[CleanupWarning, ...] = ()

    @property
    def succeeded(self) -> bool:
        return bool(self.results) and all(r.succeeded for r in self.results)

    @property
    def failed(self) -> tuple[WorkflowResult, ...]:
        return tuple(r for r in self.results if not r.succeeded)


class ReleaseOrchestrator:
    def __init__(
        self,
        *,
        config: ReleaseConfig,
        console: ConsoleProtocol,
        prereqs: PrerequisiteChecker,
        workflow: ComponentReleaseWorkflow,
        cleanup: CleanupStage,
    ) -> None:
        self._config = config
        self._console = console
        self._prereqs = prereqs
        self._workflow = workflow
        self._cleanup = cleanup

    @classmethod
    def create(
        cls,
        *,
        config: ReleaseConfig,
        console: ConsoleProtocol,
        cwd: Path,
        runner: ProcessRunner | None = None,
        which: ToolFinder = shutil.which,
    ) -> ReleaseOrchestrator:
        """Wire the default services around one shared process runner."""
        builder = ImageBuilder(console=console, runner=runner, which=which)
        registry = RegistryClient(console=console, cwd=cwd, runner=runner)
        return cls(
            config=config,
            console=console,
            prereqs=PrerequisiteChecker(console=console, which=which),
            workflow=ComponentReleaseWorkflow(
                builder=builder, registry=registry, console=console
            ),
            cleanup=CleanupStage(console=console, cwd=cwd, runner=runner),
        )

    def run(self, mode: InvocationMode) -> ErrorCode:
        match mode:
            case Help():
                return print_usage(self._console)
            case Unknown(arg=arg):
                return report_unknown(self._console, arg)
            case All():
                self._console.info("Starting image upload process...")
                return self._finish(
                    self.release(COMPONENT_NAMES, show_info=True),
                    "All images uploaded successfully!",
                )
            case FrontendOnly():
                self._console.info("Building and uploading frontend only...")
                return self._finish(
                    self.release((FRONTEND,)), "Frontend image uploaded successfully!"
                )
            case BackendOnly():
                self._console.info("Building and uploading backend only...")
                return self._finish(
                    self.release((BACKEND,)), "Backend image uploaded successfully!"
                )

    def release(
        self, names: Sequence[str], *, show_info: bool = False
    ) -> ReleaseReport | ErrorCode:
        """Release the named components in order, then clean up.

        Returns ``ErrorCode.ENV_ERROR`` without touching any component when a
        required tool is missing.
        """
        check = self._prereqs.check()
        if isinstance(check, Err):
            self._console.error(check.error.message)
            if check.error.hint:
                self._console.print(f"hint: {check.error.hint}", Style.DIM)
            return ErrorCode.ENV_ERROR

        components = [self._config.component(name) for name in names]
        if show_info:
            self._display_image_info()

        results: list[WorkflowResult] = []
        refs: list[ImageReference | LocalImage] = []
        for component in components:
            results.append(self._workflow.release(component, self._config))
            refs.append(LocalImage(component.image_name, self._config.image_tag))
            refs.append(self._config.remote_ref(component))

        warnings = self._cleanup.cleanup(refs)
        return ReleaseReport(results=tuple(results), cleanup_warnings=tuple(warnings))

    def _display_image_info(self) -> None:
        self._console.info("Image information:")
        for component in self._config.components:
            ref = self._config.remote_ref(component)
            self._console.print(f"{component.name.capitalize()}: {ref}")
        self._console.print(f"Region: {self._config.region}")

    def _finish(self, outcome: ReleaseReport | ErrorCode, success_message: str) -> ErrorCode:
        if isinstance(outcome, ErrorCode):
            return outcome

        if outcome.succeeded:
            self._console.success(success_message)
            if len(outcome.results) > 1:
                self._console.info("You can now use these images in your deployment.")
            return ErrorCode.OK

        failed = ", ".join(f"{r.component} ({r.failed_stage})" for r in outcome.failed)
        self._console.error(f"Release failed: {failed}")
        return ErrorCode.RELEASE_FAILED
