"""Per-component release sequence.

    [env guard: app build -> image build] -> authenticate -> tag + push

The first failing stage ends the component's workflow; the orchestrator
then moves on to the next component.
"""

from __future__ import annotations

from dataclasses import dataclass

from imgrel.core.config import ReleaseConfig
from imgrel.core.model import Component, ImageReference, LocalImage
from imgrel.core.result import Err, Ok, Result
from imgrel.output.console import ConsoleProtocol, Style
from imgrel.services.builder import ImageBuilder
from imgrel.services.env_guard import EnvSnapshotGuard
from imgrel.services.errors import BuildError, Stage, StageError
from imgrel.services.registry import RegistryClient


@dataclass(frozen=True, slots=True)
class WorkflowResult:
    component: str
    succeeded: bool
    message: str
    failed_stage: Stage | None = None
    pushed: ImageReference | None = None

    @classmethod
    def success(cls, component: str, pushed: ImageReference) -> WorkflowResult:
        return cls(
            component=component,
            succeeded=True,
            message=f"pushed {pushed}",
            pushed=pushed,
        )

    @classmethod
    def failure(cls, component: str, error: StageError) -> WorkflowResult:
        return cls(
            component=component,
            succeeded=False,
            message=error.message,
            failed_stage=error.stage,
        )


class ComponentReleaseWorkflow:
    def __init__(
        self,
        *,
        builder: ImageBuilder,
        registry: RegistryClient,
        console: ConsoleProtocol,
    ) -> None:
        self._builder = builder
        self._registry = registry
        self._console = console

    def release(self, component: Component, config: ReleaseConfig) -> WorkflowResult:
        """Build, authenticate and push one component.

        Prerequisites are checked once per run by the orchestrator, not here.
        """
        title = component.name.capitalize()
        self._console.info(f"Building and uploading {component.name} image...")

        built = self._build(component, config)
        if isinstance(built, Err):
            return self._fail(component, built.error)

        auth = self._registry.authenticate(config.registry_url, config.region)
        if isinstance(auth, Err):
            return self._fail(component, auth.error)

        remote = config.remote_ref(component)
        pushed = self._registry.tag_and_push(built.value, remote)
        if isinstance(pushed, Err):
            return self._fail(component, pushed.error)

        self._console.success(f"{title} image uploaded successfully")
        return WorkflowResult.success(component.name, remote)

    def _build(
        self, component: Component, config: ReleaseConfig
    ) -> Result[LocalImage, BuildError]:
        env_path = component.env_path
        if env_path is None:
            return self._build_steps(component, config)
        try:
            with EnvSnapshotGuard(env_path, console=self._console):
                return self._build_steps(component, config)
        except OSError as e:
            return Err(
                BuildError(
                    component=component.name,
                    message=f"could not back up or restore {env_path.name}",
                    hint=str(e),
                    stage="env_snapshot",
                )
            )

    def _build_steps(
        self, component: Component, config: ReleaseConfig
    ) -> Result[LocalImage, BuildError]:
        app = self._builder.build_app(component)
        if isinstance(app, Err):
            return app
        built = self._builder.build(component, platform=config.platform, tag=config.image_tag)
        if isinstance(built, Ok):
            self._console.print(f"built {built.value}", Style.DIM)
        return built

    def _fail(self, component: Component, error: StageError) -> WorkflowResult:
        self._console.error(f"{component.name}: {error.stage} failed: {error.message}")
        if error.hint:
            self._console.print(f"hint: {error.hint}", Style.DIM)
        return WorkflowResult.failure(component.name, error)
