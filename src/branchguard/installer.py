"""
Hook installation into an existing repository.

Layout after `install_hooks`:

    <root>/.githooks/            core.hooksPath, git-ignored
        pre-commit               warn on protected branches
        pre-merge-commit         block merges from forbidden branches
        pre-push                 refuse / divert pushes to protected branches
        post-checkout            re-assert core.hooksPath
        post-merge               re-assert core.hooksPath
    <git dir>/hooks/
        post-checkout            fallback when core.hooksPath was reset
        post-merge

Every file is a /bin/sh shim running `<python> -m branchguard hook <name>`.
The marker line identifies files this module owns; nothing without it is
ever overwritten silently or removed.
"""

from __future__ import annotations

import logging
import shlex
import stat
import sys
from dataclasses import dataclass, field
from pathlib import Path

from . import config, git
from .config import Settings
from .errors import HooksInstallError, NotAGitRepoError
from .hooks import POLICY_HOOKS, RESTORE_HOOKS

logger = logging.getLogger(__name__)

HOOK_MARKER = "# Managed by branchguard"
GITIGNORE_COMMENT = "# Git hooks (local configuration, not committed)"
EXECUTABLE_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


# ═══════════════════════════════════════════════════════════════════════════════
# Data Classes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class HookPaths:
    """Where hooks live for one repository."""

    repo_root: Path
    custom_dir: Path
    git_hooks_dir: Path


@dataclass
class InstallResult:
    """Outcome of install_hooks."""

    paths: HookPaths
    written: list[Path] = field(default_factory=list)
    backed_up: list[Path] = field(default_factory=list)
    gitignore_updated: bool = False
    hooks_path_verified: bool = False


@dataclass
class UninstallResult:
    """Outcome of uninstall_hooks."""

    paths: HookPaths
    removed: list[Path] = field(default_factory=list)
    hooks_path_unset: bool = False


# ═══════════════════════════════════════════════════════════════════════════════
# Pure Functions (No I/O)
# ═══════════════════════════════════════════════════════════════════════════════


def render_hook_script(hook_name: str, python: str | None = None) -> str:
    """
    Render the shell shim for one hook.

    Restore hooks must never fail a checkout or merge, so their exit
    status is discarded; policy hooks exec the handler and pass its status
    through to git.
    """
    interpreter = shlex.quote(Path(python or sys.executable).as_posix())
    command = f'{interpreter} -m branchguard hook {hook_name} "$@"'
    if hook_name in RESTORE_HOOKS:
        body = f"{command} || true\nexit 0\n"
    else:
        body = f"exec {command}\n"
    return f"#!/bin/sh\n{HOOK_MARKER} - regenerate with: branchguard install\n{body}"


def gitignore_entry(hooks_dir: str) -> str:
    """The .gitignore line covering the custom hooks directory."""
    return hooks_dir.strip("/") + "/"


def gitignore_covers(content: str, hooks_dir: str) -> bool:
    """Check for an exact line ignoring the hooks directory."""
    entry = gitignore_entry(hooks_dir)
    return any(line.strip() == entry for line in content.splitlines())


# ═══════════════════════════════════════════════════════════════════════════════
# Filesystem Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def resolve_paths(path: Path, settings: Settings | None = None) -> tuple[HookPaths, Settings]:
    """
    Locate the repository root, custom hooks dir and git hooks dir.

    Raises:
        GitNotFoundError: git is not installed
        NotAGitRepoError: path is not inside a repository
    """
    git.check_git_available()
    if not git.is_git_repo(path):
        raise NotAGitRepoError(path=str(path))

    root = git.get_toplevel(path)
    if root is None:
        raise NotAGitRepoError(
            path=str(path),
            user_message=f"Not inside a working tree: {path}",
            suggested_action="Bare repositories are not supported",
        )

    settings = settings or config.load_settings(root)
    git_hooks_dir = git.get_hooks_dir(root) or root / ".git" / "hooks"
    paths = HookPaths(
        repo_root=root,
        custom_dir=root / settings.hooks_dir,
        git_hooks_dir=git_hooks_dir,
    )
    return paths, settings


def is_managed_hook(file_path: Path) -> bool:
    """Check if file_path is a hook written by this module."""
    try:
        return HOOK_MARKER in file_path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return False


def is_executable(file_path: Path) -> bool:
    """Check if the owner executable bit is set."""
    try:
        return bool(file_path.stat().st_mode & stat.S_IXUSR)
    except OSError:
        return False


def make_executable(directory: Path) -> None:
    """Set the executable bits on every hook file in directory."""
    if not directory.is_dir():
        return
    for entry in directory.iterdir():
        if entry.is_file() and entry.suffix != ".json":
            try:
                entry.chmod(entry.stat().st_mode | EXECUTABLE_BITS)
            except OSError as e:
                logger.warning("Could not make %s executable: %s", entry, e)


def ensure_gitignore(repo_root: Path, hooks_dir: str) -> bool:
    """Append the hooks directory to .gitignore; return True if the file changed."""
    gitignore = repo_root / ".gitignore"
    content = gitignore.read_text(encoding="utf-8", errors="replace") if gitignore.exists() else ""
    if gitignore_covers(content, hooks_dir):
        return False

    with open(gitignore, "a", encoding="utf-8") as f:
        f.write(f"\n{GITIGNORE_COMMENT}\n{gitignore_entry(hooks_dir)}\n")
    return True


def _backup_path(target: Path) -> Path:
    """Return the first free backup name: <hook>.backup, then <hook>.backup.1, ..."""
    backup = target.with_name(target.name + ".backup")
    index = 1
    while backup.exists():
        backup = target.with_name(f"{target.name}.backup.{index}")
        index += 1
    return backup


def _latest_backup(target: Path) -> Path | None:
    """Return the most recent backup of target, if any."""
    latest = target.with_name(target.name + ".backup")
    if not latest.exists():
        return None
    index = 1
    while True:
        candidate = target.with_name(f"{target.name}.backup.{index}")
        if not candidate.exists():
            return latest
        latest = candidate
        index += 1


def _write_hook(target: Path, hook_name: str, python: str | None, result: InstallResult) -> None:
    """Write one shim, keeping a backup of any foreign hook it replaces."""
    if target.exists() and not is_managed_hook(target):
        backup = _backup_path(target)
        target.rename(backup)
        result.backed_up.append(backup)
        logger.info("Backed up existing hook %s to %s", target, backup)

    target.write_text(render_hook_script(hook_name, python), encoding="utf-8")
    target.chmod(target.stat().st_mode | EXECUTABLE_BITS)
    result.written.append(target)


# ═══════════════════════════════════════════════════════════════════════════════
# Install / Uninstall / Restore
# ═══════════════════════════════════════════════════════════════════════════════


def install_hooks(
    path: Path,
    settings: Settings | None = None,
    python: str | None = None,
) -> InstallResult:
    """
    Install the branch protection hooks into the repository containing path.

    Raises:
        GitNotFoundError: git is not installed
        NotAGitRepoError: path is not inside a repository
        HooksInstallError: hooks could not be written or configured
    """
    paths, settings = resolve_paths(path, settings)
    result = InstallResult(paths=paths)

    try:
        paths.custom_dir.mkdir(parents=True, exist_ok=True)
        paths.git_hooks_dir.mkdir(parents=True, exist_ok=True)
        result.gitignore_updated = ensure_gitignore(paths.repo_root, settings.hooks_dir)

        for hook_name in RESTORE_HOOKS:
            _write_hook(paths.git_hooks_dir / hook_name, hook_name, python, result)
        for hook_name in POLICY_HOOKS + RESTORE_HOOKS:
            _write_hook(paths.custom_dir / hook_name, hook_name, python, result)

        make_executable(paths.custom_dir)
    except OSError as e:
        raise HooksInstallError(
            target=str(paths.custom_dir),
            debug_context=str(e),
        ) from e

    if not git.set_config("core.hooksPath", str(paths.custom_dir), path=paths.repo_root):
        raise HooksInstallError(
            user_message="Could not set core.hooksPath",
            suggested_action=f"git config core.hooksPath {paths.custom_dir}",
        )

    result.hooks_path_verified = hooks_path_is_set(paths)
    logger.debug("Installed %d hook files into %s", len(result.written), paths.custom_dir)
    return result


def hooks_path_is_set(paths: HookPaths) -> bool:
    """Check that core.hooksPath points at the custom hooks directory."""
    current = git.get_config("core.hooksPath", path=paths.repo_root)
    if not current:
        return False
    configured = Path(current)
    if not configured.is_absolute():
        configured = paths.repo_root / configured
    try:
        return configured.resolve() == paths.custom_dir.resolve()
    except OSError:
        return False


def uninstall_hooks(path: Path, settings: Settings | None = None) -> UninstallResult:
    """Remove managed hooks and unset core.hooksPath if it points at them."""
    paths, settings = resolve_paths(path, settings)
    result = UninstallResult(paths=paths)

    if hooks_path_is_set(paths):
        result.hooks_path_unset = git.unset_config("core.hooksPath", path=paths.repo_root)

    for directory in (paths.custom_dir, paths.git_hooks_dir):
        for hook_name in POLICY_HOOKS + RESTORE_HOOKS:
            target = directory / hook_name
            if target.is_file() and is_managed_hook(target):
                try:
                    target.unlink()
                except OSError as e:
                    raise HooksInstallError(
                        user_message=f"Could not remove {target}",
                        debug_context=str(e),
                    ) from e
                result.removed.append(target)
                backup = _latest_backup(target)
                if backup is not None:
                    backup.rename(target)

    return result


def reassert_hooks_path(path: Path, settings: Settings | None = None) -> bool:
    """
    Point core.hooksPath back at the custom hooks directory.

    Called after every checkout and merge. Does nothing when the custom
    directory is gone, since pointing git at a missing directory would
    silently disable every hook.
    """
    root = git.get_toplevel(path)
    if root is None:
        return False
    settings = settings or config.load_settings(root)
    custom_dir = root / settings.hooks_dir
    if not custom_dir.is_dir():
        logger.debug("Hooks directory %s missing, not restoring", custom_dir)
        return False

    ok = git.set_config("core.hooksPath", str(custom_dir), path=root)
    make_executable(custom_dir)
    return ok
