from __future__ import annotations

from pathlib import Path

import pytest

from imgrel.core.config import ReleaseConfig
from imgrel.output.console import MockConsole
from imgrel.platform.testing import RecordingRunner


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "frontend").mkdir()
    (tmp_path / "backend").mkdir()
    return tmp_path


@pytest.fixture
def config(workspace: Path) -> ReleaseConfig:
    return ReleaseConfig.default(workspace)
