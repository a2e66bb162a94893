"""Tests for RegistryClient."""

from __future__ import annotations

from pathlib import Path

from imgrel.core.model import ImageReference, LocalImage
from imgrel.core.result import Err, Ok
from imgrel.output.console import MockConsole
from imgrel.platform.testing import REGISTRY_TOKEN, RecordingRunner
from imgrel.services.registry import RegistryClient

REGISTRY = "123.dkr.ecr.eu-central-1.amazonaws.com"
REGION = "eu-central-1"


def _client(tmp_path: Path, console: MockConsole, runner: RecordingRunner) -> RegistryClient:
    return RegistryClient(console=console, cwd=tmp_path, runner=runner)


class TestAuthenticate:
    def test_pipes_password_into_docker_login(
        self, tmp_path: Path, console: MockConsole, runner: RecordingRunner
    ) -> None:
        result = _client(tmp_path, console, runner).authenticate(REGISTRY, REGION)

        assert result == Ok(None)
        assert [c.cmd for c in runner.calls] == [
            ("aws", "ecr", "get-login-password", "--region", REGION),
            ("docker", "login", "--username", "AWS", "--password-stdin", REGISTRY),
        ]
        assert runner.calls[1].input == REGISTRY_TOKEN
        assert REGISTRY_TOKEN not in console.text

    def test_success_is_cached(
        self, tmp_path: Path, console: MockConsole, runner: RecordingRunner
    ) -> None:
        client = _client(tmp_path, console, runner)

        assert client.authenticate(REGISTRY, REGION) == Ok(None)
        assert client.authenticate(REGISTRY, REGION) == Ok(None)

        assert len(runner.commands("docker", "login")) == 1
        assert client.is_authenticated(REGISTRY, REGION)

    def test_other_region_logs_in_again(
        self, tmp_path: Path, console: MockConsole, runner: RecordingRunner
    ) -> None:
        client = _client(tmp_path, console, runner)
        client.authenticate(REGISTRY, REGION)
        client.authenticate(REGISTRY, "us-east-1")

        assert len(runner.commands("docker", "login")) == 2

    def test_password_fetch_failure(
        self, tmp_path: Path, console: MockConsole, runner: RecordingRunner
    ) -> None:
        runner.fail("aws", stderr="Unable to locate credentials")
        client = _client(tmp_path, console, runner)

        result = client.authenticate(REGISTRY, REGION)

        assert isinstance(result, Err)
        assert result.error.stage == "authenticate"
        assert result.error.hint == "Unable to locate credentials"
        assert runner.commands("docker") == []
        assert not client.is_authenticated(REGISTRY, REGION)

    def test_login_failure_is_not_cached(
        self, tmp_path: Path, console: MockConsole, runner: RecordingRunner
    ) -> None:
        runner.fail("docker", "login")
        client = _client(tmp_path, console, runner)

        assert isinstance(client.authenticate(REGISTRY, REGION), Err)
        assert isinstance(client.authenticate(REGISTRY, REGION), Err)
        assert len(runner.commands("docker", "login")) == 2


class TestTagAndPush:
    def test_tags_then_pushes(
        self, tmp_path: Path, console: MockConsole, runner: RecordingRunner
    ) -> None:
        local = LocalImage("agents/frontend", "latest")
        remote = ImageReference(REGISTRY, "agents/frontend", "latest")

        result = _client(tmp_path, console, runner).tag_and_push(local, remote)

        assert result == Ok(None)
        assert runner.commands() == [
            ("docker", "tag", "agents/frontend:latest", f"{REGISTRY}/agents/frontend:latest"),
            ("docker", "push", f"{REGISTRY}/agents/frontend:latest"),
        ]

    def test_tag_failure_skips_push(
        self, tmp_path: Path, console: MockConsole, runner: RecordingRunner
    ) -> None:
        runner.fail("docker", "tag", stderr="No such image")

        result = _client(tmp_path, console, runner).tag_and_push(
            LocalImage("agents/frontend", "latest"),
            ImageReference(REGISTRY, "agents/frontend", "latest"),
        )

        assert isinstance(result, Err)
        assert result.error.stage == "push"
        assert runner.commands("docker", "push") == []

    def test_push_failure(
        self, tmp_path: Path, console: MockConsole, runner: RecordingRunner
    ) -> None:
        runner.fail("docker", "push", returncode=1)
        remote = ImageReference(REGISTRY, "agents/backend", "v2")

        result = _client(tmp_path, console, runner).tag_and_push(
            LocalImage("agents/backend", "v2"), remote
        )

        assert isinstance(result, Err)
        assert result.error.reference == str(remote)
        assert "docker push" in result.error.message
