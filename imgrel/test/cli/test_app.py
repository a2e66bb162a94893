from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

import imgrel.cli.app as app_mod
from imgrel.core.config import ReleaseConfig
from imgrel.output.console import ConsoleProtocol
from imgrel.platform.testing import RecordingRunner, all_tools
from imgrel.services.orchestrator import ReleaseOrchestrator

cli = CliRunner()


@pytest.fixture
def recorded(monkeypatch: pytest.MonkeyPatch, workspace: Path) -> RecordingRunner:
    """Run the CLI in ``workspace`` with docker/aws replaced by a recorder."""
    monkeypatch.chdir(workspace)
    runner = RecordingRunner()

    class RecordingOrchestrator(ReleaseOrchestrator):
        @classmethod
        def create(  # type: ignore[override]
            cls, *, config: ReleaseConfig, console: ConsoleProtocol, cwd: Path, **_: object
        ) -> ReleaseOrchestrator:
            return ReleaseOrchestrator.create(
                config=config, console=console, cwd=cwd, runner=runner, which=all_tools
            )

    monkeypatch.setattr(app_mod, "ReleaseOrchestrator", RecordingOrchestrator)
    return runner


@pytest.mark.parametrize("flag", ["--help", "-h"])
def test_help(recorded: RecordingRunner, flag: str) -> None:
    result = cli.invoke(app_mod.app, [flag])

    assert result.exit_code == 0
    assert "Usage: imgrel" in result.output
    assert "--backend-only" in result.output
    assert recorded.calls == []


def test_unknown_option(recorded: RecordingRunner) -> None:
    result = cli.invoke(app_mod.app, ["--bogus"])

    assert result.exit_code == 1
    assert "Unknown option: --bogus" in result.output
    assert recorded.calls == []


def test_help_ignores_broken_config(recorded: RecordingRunner, workspace: Path) -> None:
    (workspace / "imgrel.toml").write_text("[registry\n", encoding="utf-8")

    result = cli.invoke(app_mod.app, ["--help"])

    assert result.exit_code == 0


def test_invalid_config_is_env_error(recorded: RecordingRunner, workspace: Path) -> None:
    (workspace / "imgrel.toml").write_text("[registry\n", encoding="utf-8")

    result = cli.invoke(app_mod.app, [])

    assert result.exit_code == 2
    assert "Invalid TOML" in result.output
    assert recorded.calls == []


def test_release_all(recorded: RecordingRunner, workspace: Path) -> None:
    (workspace / "imgrel.toml").write_text(
        '[registry]\nurl = "registry.example.com"\n[image]\ntag = "v9"\n',
        encoding="utf-8",
    )

    result = cli.invoke(app_mod.app, [])

    assert result.exit_code == 0, result.output
    assert recorded.commands("docker", "tag") == [
        ("docker", "tag", "agents/frontend:v9", "registry.example.com/agents/frontend:v9"),
        ("docker", "tag", "agents/backend:v9", "registry.example.com/agents/backend:v9"),
    ]


def test_frontend_only_build_failure(recorded: RecordingRunner) -> None:
    recorded.fail("docker", "buildx")

    result = cli.invoke(app_mod.app, ["--frontend-only"])

    assert result.exit_code == 1
    builds = [c for c in recorded.calls if c.cmd[:2] == ("docker", "buildx")]
    assert [c.cwd.name for c in builds] == ["frontend"]


def test_explicit_config_option(recorded: RecordingRunner, tmp_path: Path) -> None:
    other = tmp_path / "elsewhere"
    (other / "web").mkdir(parents=True)
    config = other / "release.toml"
    config.write_text('[components.backend]\ncontext = "web"\n', encoding="utf-8")

    result = cli.invoke(app_mod.app, ["--config", str(config), "--backend-only"])

    assert result.exit_code == 0, result.output
    builds = [c for c in recorded.calls if c.cmd[:2] == ("docker", "buildx")]
    assert [c.cwd for c in builds] == [other / "web"]
