"""Shared pytest fixtures for dispatchkit tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from dispatchkit.config.settings import DispatchSettings


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolated working directory with no config file and no config env vars."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DISPATCHKIT_CONFIG", raising=False)
    return tmp_path


@pytest.fixture
def settings(workdir: Path) -> DispatchSettings:
    """Default settings rooted at the isolated working directory."""
    return DispatchSettings.from_cli(root=workdir)
