"""Shared fixtures."""

import io
import shutil
import subprocess
from pathlib import Path

import pytest
from rich.console import Console

from branchguard.config import Settings


@pytest.fixture(autouse=True)
def temp_config_dir(tmp_path, monkeypatch):
    """Point the user config directory at a temporary location."""
    config_dir = tmp_path / "user-config"
    config_dir.mkdir()
    monkeypatch.setattr("branchguard.config.get_config_dir", lambda: config_dir)
    monkeypatch.delenv("BRANCHGUARD_DIVERTING", raising=False)
    return config_dir


@pytest.fixture
def settings():
    """Default settings."""
    return Settings()


@pytest.fixture
def console():
    """A console recording its output."""
    return Console(file=io.StringIO(), record=True, width=200)


def run_git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-C", str(repo), *args],
        check=True,
        capture_output=True,
        text=True,
    )
    return result.stdout.strip()


@pytest.fixture
def git_repo(tmp_path):
    """A real repository on branch main with one commit."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    repo = tmp_path / "repo"
    repo.mkdir()
    run_git(repo, "init", "-q")
    run_git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    run_git(repo, "config", "user.name", "Test User")
    run_git(repo, "config", "user.email", "test@example.com")
    run_git(repo, "config", "commit.gpgsign", "false")
    (repo / "README.md").write_text("hello\n")
    run_git(repo, "add", "README.md")
    run_git(repo, "commit", "-q", "-m", "Initial commit")
    return repo


@pytest.fixture
def git():
    """Run git in a repository and return its stdout."""
    return run_git
