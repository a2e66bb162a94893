"""Image builds.

``ImageBuilder.build`` wraps ``docker buildx build``; ``build_app`` runs the
optional package-manager build that some components need before their
container build.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from imgrel.core.model import Component, LocalImage
from imgrel.core.result import Err, Ok, Result
from imgrel.output.console import ConsoleProtocol, Style
from imgrel.platform.files import atomic_write_bytes
from imgrel.platform.process import DefaultProcessRunner, ProcessRunner
from imgrel.services.errors import BuildError
from imgrel.services.prereqs import ToolFinder


def buildx_command(image: LocalImage, platform: str) -> list[str]:
    return [
        "docker",
        "buildx",
        "build",
        "--platform",
        platform,
        "--load",
        "-t",
        str(image),
        ".",
    ]


class ImageBuilder:
    def __init__(
        self,
        *,
        console: ConsoleProtocol,
        runner: ProcessRunner | None = None,
        which: ToolFinder = shutil.which,
    ) -> None:
        self._console = console
        self._runner = runner or DefaultProcessRunner()
        self._which = which

    def build(
        self, component: Component, *, platform: str, tag: str
    ) -> Result[LocalImage, BuildError]:
        """Build ``component.image_name:tag`` for the given platform.

        No retry: a failed build is reported to the operator as-is.
        """
        context = component.build_context
        if not context.is_dir():
            return Err(
                BuildError(
                    component=component.name,
                    message=f"build context not found: {context}",
                )
            )

        image = LocalImage(repository=component.image_name, tag=tag)
        cmd = buildx_command(image, platform)

        self._console.info(f"Building {component.name} Docker image...")
        self._console.print(" ".join(cmd), Style.DIM)
        result = self._runner.stream(cmd, cwd=context)
        if isinstance(result, Err):
            e = result.error
            return Err(
                BuildError(
                    component=component.name,
                    message=f"docker build failed (exit {e.returncode})",
                    hint=e.detail,
                )
            )
        return Ok(image)

    def build_app(self, component: Component) -> Result[None, BuildError]:
        """Run the component's application build, if enabled.

        Writes the configured env content into the component's env file, so
        callers are expected to hold an ``EnvSnapshotGuard`` on it.
        """
        app = component.app_build
        if not app.enabled:
            return Ok(None)

        context = component.build_context
        if not context.is_dir():
            return Err(
                BuildError(
                    component=component.name,
                    message=f"build context not found: {context}",
                    stage="app_build",
                )
            )

        env_path = component.env_path
        try:
            for rel in app.clean:
                _remove_tree(context / rel)
            if app.env is not None and env_path is not None:
                atomic_write_bytes(env_path, (app.env.rstrip("\n") + "\n").encode("utf-8"))
                self._console.info(f"Wrote {env_path.name}")
        except OSError as e:
            return Err(
                BuildError(
                    component=component.name,
                    message="could not prepare build directory",
                    hint=str(e),
                    stage="app_build",
                )
            )

        cmd = self._package_manager_build()
        self._console.info(f"Building {component.name}...")
        self._console.print(" ".join(cmd), Style.DIM)
        result = self._runner.stream(cmd, cwd=context)
        if isinstance(result, Err):
            e = result.error
            return Err(
                BuildError(
                    component=component.name,
                    message=f"{cmd[0]} build failed (exit {e.returncode})",
                    hint=e.detail,
                    stage="app_build",
                )
            )
        return Ok(None)

    def _package_manager_build(self) -> list[str]:
        if self._which("pnpm"):
            return ["pnpm", "build"]
        return ["npm", "run", "build"]


def _remove_tree(path: Path) -> None:
    if path.is_dir():
        shutil.rmtree(path)
    elif path.exists():
        path.unlink()
