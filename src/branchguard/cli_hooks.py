"""
Hidden `branchguard hook <name>` commands run by the installed shims.

git runs hooks from the top of the working tree, so the repository is
taken from the current directory.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer

from . import config, git
from .adapters.local_git_client import LocalGitClient
from .cli_common import console, handle_errors
from .config import Settings
from .errors import ConfigError
from .hooks import pre_commit, pre_merge_commit, pre_push, restore

logger = logging.getLogger(__name__)

hook_app = typer.Typer(
    name="hook",
    help="Entry points for the installed git hooks.",
    no_args_is_help=True,
)


def _repo_root() -> Path:
    cwd = Path.cwd()
    return git.get_toplevel(cwd) or cwd


def _load_settings(root: Path) -> Settings:
    """Load settings, falling back to the defaults when a value is invalid."""
    try:
        return config.load_settings(root)
    except ConfigError as e:
        # The defaults still protect the usual branches
        logger.warning("%s; using default settings", e.user_message)
        return Settings()


def _hook_context() -> tuple[LocalGitClient, Settings]:
    root = _repo_root()
    return LocalGitClient(root), _load_settings(root)


@hook_app.command(name="pre-commit")
@handle_errors
def pre_commit_cmd() -> None:
    """Warn when committing on a protected branch."""
    client, settings = _hook_context()
    raise typer.Exit(pre_commit.run(client, settings, console))


@hook_app.command(name="pre-merge-commit")
@handle_errors
def pre_merge_commit_cmd() -> None:
    """Block merge commits from forbidden branches."""
    client, settings = _hook_context()
    raise typer.Exit(pre_merge_commit.run(client, settings, console))


@hook_app.command(name="pre-push")
@handle_errors
def pre_push_cmd(
    remote: Optional[str] = typer.Argument(None, help="Remote name passed by git"),
    url: Optional[str] = typer.Argument(None, help="Remote URL passed by git"),
) -> None:
    """Refuse or divert pushes to protected branches."""
    client, settings = _hook_context()
    raise typer.Exit(pre_push.run(client, settings, console, remote=remote))


@hook_app.command(name="post-checkout")
@handle_errors
def post_checkout_cmd(
    args: Optional[List[str]] = typer.Argument(None, help="Arguments passed by git"),
) -> None:
    """Re-assert core.hooksPath after a checkout."""
    root = _repo_root()
    raise typer.Exit(restore.run(root, _load_settings(root)))


@hook_app.command(name="post-merge")
@handle_errors
def post_merge_cmd(
    args: Optional[List[str]] = typer.Argument(None, help="Arguments passed by git"),
) -> None:
    """Re-assert core.hooksPath after a merge or pull."""
    root = _repo_root()
    raise typer.Exit(restore.run(root, _load_settings(root)))
