"""Registry login and push.

Login exchanges a region-scoped AWS credential for a docker session:

    aws ecr get-login-password --region <region> \\
        | docker login --username AWS --password-stdin <registry>

The password is handed over on stdin and never printed.
"""

from __future__ import annotations

from pathlib import Path

from imgrel.core.model import ImageReference, LocalImage
from imgrel.core.result import Err, Ok, Result
from imgrel.output.console import ConsoleProtocol, Style
from imgrel.platform.process import DefaultProcessRunner, ProcessRunner
from imgrel.services.errors import AuthError, PushError

REGISTRY_USERNAME = "AWS"


class RegistryClient:
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
        self._sessions: set[tuple[str, str]] = set()

    def is_authenticated(self, registry_url: str, region: str) -> bool:
        return (registry_url, region) in self._sessions

    def authenticate(self, registry_url: str, region: str) -> Result[None, AuthError]:
        """Log docker in to the registry.

        A successful login is remembered for the lifetime of this client;
        later calls for the same registry and region return Ok immediately.
        """
        if self.is_authenticated(registry_url, region):
            self._console.print(f"Already logged in to {registry_url}", Style.DIM)
            return Ok(None)

        self._console.info("Logging in to ECR...")
        token = self._runner.capture(
            ["aws", "ecr", "get-login-password", "--region", region],
            cwd=self._cwd,
        )
        if isinstance(token, Err):
            return Err(
                AuthError(
                    registry=registry_url,
                    message=f"could not fetch registry password for region {region}",
                    hint=token.error.detail,
                )
            )

        password = token.value.strip()
        if not password:
            return Err(
                AuthError(registry=registry_url, message="registry password is empty")
            )

        login = self._runner.capture(
            ["docker", "login", "--username", REGISTRY_USERNAME, "--password-stdin", registry_url],
            cwd=self._cwd,
            input=password,
        )
        if isinstance(login, Err):
            return Err(
                AuthError(
                    registry=registry_url,
                    message=f"docker login to {registry_url} failed",
                    hint=login.error.detail,
                )
            )

        self._sessions.add((registry_url, region))
        return Ok(None)

    def tag_and_push(self, local: LocalImage, remote: ImageReference) -> Result[None, PushError]:
        """Tag the local image with the remote reference, then push it."""
        ref = str(remote)
        self._console.info("Tagging and pushing image...")

        tagged = self._runner.capture(["docker", "tag", str(local), ref], cwd=self._cwd)
        if isinstance(tagged, Err):
            return Err(
                PushError(
                    reference=ref,
                    message=f"docker tag {local} failed",
                    hint=tagged.error.detail,
                )
            )

        pushed = self._runner.stream(["docker", "push", ref], cwd=self._cwd)
        if isinstance(pushed, Err):
            return Err(
                PushError(
                    reference=ref,
                    message=f"docker push {ref} failed (exit {pushed.error.returncode})",
                    hint=pushed.error.detail,
                )
            )
        return Ok(None)
