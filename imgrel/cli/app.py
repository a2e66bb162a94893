from __future__ import annotations

from pathlib import Path

import typer

from imgrel.cli.context import build_context
from imgrel.output.console import RichConsole
from imgrel.services.orchestrator import (
    Help,
    ReleaseOrchestrator,
    Unknown,
    parse_mode,
    print_usage,
    report_unknown,
)


app = typer.Typer(add_completion=False, no_args_is_help=False)


@app.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_extra_args": True,
        "help_option_names": [],
    }
)
def release(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None,
        "--config",
        help="Release configuration file (default: ./imgrel.toml)",
    ),
) -> None:
    """Build and push the frontend and backend images."""
    mode = parse_mode(ctx.args)

    # Help and bad arguments never load config or touch docker.
    if isinstance(mode, Help):
        raise typer.Exit(code=int(print_usage(RichConsole())))
    if isinstance(mode, Unknown):
        raise typer.Exit(code=int(report_unknown(RichConsole(), mode.arg)))

    cli = build_context(config)
    orchestrator = ReleaseOrchestrator.create(config=cli.config, console=cli.console, cwd=cli.cwd)
    raise typer.Exit(code=int(orchestrator.run(mode)))


def main() -> None:
    app()
