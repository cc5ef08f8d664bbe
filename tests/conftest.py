"""Test fixtures and configuration."""

import tempfile
from pathlib import Path

import pytest

from .helpers import init_repo


@pytest.fixture
def temp_dir():
    """Temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def mock_git_repo(temp_dir):
    """Create a git repository with an origin remote on branch main."""
    return init_repo(temp_dir / "repo", remote="git@github.com:test/repo.git")


@pytest.fixture(autouse=True)
def isolated_config(temp_dir, monkeypatch):
    """Point LSRV_CONFIG at a file that does not exist."""
    monkeypatch.setenv("LSRV_CONFIG", str(temp_dir / "missing-config.yaml"))


@pytest.fixture(autouse=True)
def no_debug(monkeypatch):
    """Keep debug output off unless a test turns it on."""
    monkeypatch.setattr("lsrv.console.DEBUG", False)
