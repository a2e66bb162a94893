from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from imgrel.core.config import ReleaseConfig, resolve_config
from imgrel.core.errors import ErrorCode
from imgrel.core.result import Err
from imgrel.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    cwd: Path
    config: ReleaseConfig
    console: ConsoleProtocol


def build_context(config_path: Path | None, console: ConsoleProtocol | None = None) -> CLIContext:
    console = console or RichConsole()
    cwd = Path.cwd()

    config_result = resolve_config(config_path, cwd)
    if isinstance(config_result, Err):
        console.error(config_result.error.message)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(cwd=cwd, config=config_result.value, console=console)
