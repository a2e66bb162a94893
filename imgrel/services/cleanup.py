from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from imgrel.core.model import ImageReference, LocalImage
from imgrel.core.result import Err
from imgrel.output.console import ConsoleProtocol, Style
from imgrel.platform.process import DefaultProcessRunner, ProcessRunner
from imgrel.services.errors import CleanupWarning


class CleanupStage:
    """Best-effort removal of local image tags after a release.

    Each reference is removed independently. Failures (typically an image
    that was never built) are reported and otherwise ignored.
    """

    def __init__(
        self,
        *,
        console: ConsoleProtocol,
        cwd: Path,
        runner: ProcessRunner | None = None,
    ) -> None:
        self._console = console
        self._cwd = cwd
        self._runner = runner or DefaultProcessRunner()

    def cleanup(self, refs: Sequence[ImageReference | LocalImage]) -> list[CleanupWarning]:
        self._console.info("Cleaning up local images...")

        warnings: list[CleanupWarning] = []
        seen: set[str] = set()
        for ref in refs:
            name = str(ref)
            if name in seen:
                continue
            seen.add(name)

            result = self._runner.capture(["docker", "rmi", name], cwd=self._cwd)
            if isinstance(result, Err):
                warning = CleanupWarning(
                    reference=name,
                    message=result.error.detail or str(result.error),
                )
                warnings.append(warning)
                self._console.print(f"skipped {name}: {warning.message}", Style.DIM)

        if warnings:
            self._console.warning(f"Cleanup skipped {len(warnings)} image(s)")
        else:
            self._console.success("Local images cleaned up")
        return warnings
