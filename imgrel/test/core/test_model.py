from __future__ import annotations

from pathlib import Path

import pytest

from imgrel.core.errors import ErrorCode
from imgrel.core.model import Component, ImageReference, LocalImage


def test_image_reference_str() -> None:
    ref = ImageReference(registry="r.example.com", repository="agents/frontend", tag="latest")
    assert str(ref) == "r.example.com/agents/frontend:latest"


def test_image_reference_frozen() -> None:
    ref = ImageReference("r", "repo", "t")
    with pytest.raises(AttributeError):
        ref.tag = "other"  # type: ignore[misc]


def test_local_image_str() -> None:
    assert str(LocalImage("agents/backend", "v1")) == "agents/backend:v1"


def test_env_path_is_relative_to_build_context(tmp_path: Path) -> None:
    component = Component("frontend", "agents/frontend", tmp_path, env_file=".env.local")
    assert component.env_path == tmp_path / ".env.local"


def test_env_path_absent() -> None:
    assert Component("backend", "agents/backend", Path("backend")).env_path is None


def test_error_codes_are_stable() -> None:
    assert int(ErrorCode.OK) == 0
    assert int(ErrorCode.RELEASE_FAILED) == 1
    assert int(ErrorCode.ENV_ERROR) == 2
