"""
Git operations used by the installer and the hooks.

Every query shells out to the git CLI with `git -C <path>`, captures its
output and applies a timeout. Queries return None or an empty value when
git fails, so the hooks can fall back to their next heuristic instead of
crashing inside a git operation.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from .errors import GitNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
PUSH_TIMEOUT = 300


# ═══════════════════════════════════════════════════════════════════════════════
# Internal helpers
# ═══════════════════════════════════════════════════════════════════════════════


def _run_git(
    args: List[str],
    path: Optional[Path] = None,
    timeout: int = DEFAULT_TIMEOUT,
) -> Optional[subprocess.CompletedProcess]:
    """Run a git command and return the completed process, or None on failure to launch."""
    cmd = ["git"]
    if path is not None:
        cmd += ["-C", str(path)]
    cmd += args
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.debug("git command failed to run: %s (%s)", " ".join(cmd), e)
        return None
    if result.returncode != 0:
        logger.debug(
            "git command exited %d: %s: %s",
            result.returncode,
            " ".join(cmd),
            result.stderr.strip(),
        )
    return result


def _stdout(args: List[str], path: Optional[Path] = None) -> Optional[str]:
    """Return stripped stdout of a successful git command, else None."""
    result = _run_git(args, path)
    if result is None or result.returncode != 0:
        return None
    return result.stdout.strip()


def _lines(args: List[str], path: Optional[Path] = None) -> List[str]:
    """Return the non-empty stdout lines of a successful git command."""
    output = _stdout(args, path)
    if not output:
        return []
    return [line for line in output.splitlines() if line.strip()]


def _range_args(rev_range: Optional[str], limit: Optional[int]) -> List[str]:
    args = []
    if limit is not None:
        args.append(f"-{limit}")
    if rev_range:
        args.append(rev_range)
    return args


# ═══════════════════════════════════════════════════════════════════════════════
# Git Detection & Basic Operations
# ═══════════════════════════════════════════════════════════════════════════════


def check_git_available() -> None:
    """
    Check if Git is installed and available.

    Raises:
        GitNotFoundError: Git is not installed or not in PATH
    """
    if shutil.which("git") is None:
        raise GitNotFoundError()


def check_git_installed() -> bool:
    """Check if Git is installed (boolean for doctor command)."""
    return shutil.which("git") is not None


def get_git_version() -> Optional[str]:
    """Get Git version string for display."""
    # Returns something like "git version 2.40.0"
    return _stdout(["--version"])


def is_git_repo(path: Path) -> bool:
    """Check if path is inside a git repository."""
    result = _run_git(["rev-parse", "--git-dir"], path)
    return result is not None and result.returncode == 0


def get_toplevel(path: Path) -> Optional[Path]:
    """Get the root of the working tree containing path."""
    output = _stdout(["rev-parse", "--show-toplevel"], path)
    return Path(output) if output else None


def get_git_path(path: Path, name: str) -> Optional[Path]:
    """
    Resolve a path inside the git directory (MERGE_HEAD, MERGE_MSG, ...).

    Uses `rev-parse --git-path` so linked worktrees and a relocated
    GIT_DIR resolve correctly. Relative results are anchored at path.
    """
    output = _stdout(["rev-parse", "--git-path", name], path)
    if not output:
        return None
    resolved = Path(output)
    if not resolved.is_absolute():
        resolved = path / resolved
    return resolved


def get_hooks_dir(path: Path) -> Optional[Path]:
    """
    Get the hooks directory inside the git directory.

    `--git-path hooks` follows core.hooksPath, so the common dir is used
    to find <git dir>/hooks regardless of that setting.
    """
    output = _stdout(["rev-parse", "--git-common-dir"], path)
    if not output:
        return None
    common = Path(output)
    if not common.is_absolute():
        common = path / common
    return common / "hooks"


def get_current_branch(path: Path) -> Optional[str]:
    """Get the current branch name ("HEAD" when detached)."""
    return _stdout(["rev-parse", "--abbrev-ref", "HEAD"], path)


def has_upstream(path: Path) -> bool:
    """Check if the current branch has an upstream (@{u})."""
    result = _run_git(["rev-parse", "@{u}"], path)
    return result is not None and result.returncode == 0


# ═══════════════════════════════════════════════════════════════════════════════
# History Queries
# ═══════════════════════════════════════════════════════════════════════════════


def count_commits(path: Path, rev_range: str) -> int:
    """Count commits reachable in rev_range; 0 when git fails."""
    output = _stdout(["rev-list", "--count", rev_range], path)
    try:
        return int(output) if output else 0
    except ValueError:
        return 0


def list_merge_commits(path: Path, rev_range: str) -> List[str]:
    """List the merge commits in rev_range, newest first."""
    return _lines(["rev-list", "--merges", rev_range], path)


def get_reflog_subjects(path: Path, limit: int) -> List[str]:
    """Get the subjects of the most recent reflog entries, newest first."""
    return _lines(["reflog", f"-{limit}", "--pretty=format:%gs"], path)


def get_commit_subjects(
    path: Path,
    rev_range: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[str]:
    """Get commit subjects for rev_range (or HEAD), optionally limited."""
    return _lines(["log", *_range_args(rev_range, limit), "--pretty=format:%s"], path)


def get_commit_subject(path: Path, commit: str) -> Optional[str]:
    """Get the subject of a single commit."""
    return _stdout(["log", "-1", "--pretty=format:%s", commit], path)


def get_oneline_log(
    path: Path,
    rev_range: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[str]:
    """Get `git log --oneline` lines for rev_range (or HEAD)."""
    return _lines(["log", *_range_args(rev_range, limit), "--oneline"], path)


def get_changed_files(path: Path, rev_range: str) -> List[str]:
    """Get the names of files changed across rev_range."""
    return _lines(["diff", "--name-only", rev_range], path)


def get_merged_branches(path: Path) -> List[str]:
    """Get local branches merged into HEAD, without the current-branch marker."""
    return [line.lstrip("* ").strip() for line in _lines(["branch", "--merged"], path)]


def get_remote_branches_containing(path: Path, commit: str) -> List[str]:
    """Get remote-tracking branches containing commit, skipping HEAD pointers."""
    return [
        line.strip()
        for line in _lines(["branch", "-r", "--contains", commit], path)
        if "HEAD" not in line
    ]


# ═══════════════════════════════════════════════════════════════════════════════
# Configuration
# ═══════════════════════════════════════════════════════════════════════════════


def _scope_args(scope: Optional[str]) -> List[str]:
    return [f"--{scope}"] if scope else []


def get_config(key: str, path: Optional[Path] = None, scope: Optional[str] = None) -> Optional[str]:
    """Read a git config value; scope is None (repository) or "global"."""
    return _stdout(["config", *_scope_args(scope), "--get", key], path)


def set_config(key: str, value: str, path: Optional[Path] = None, scope: Optional[str] = None) -> bool:
    """Write a git config value."""
    result = _run_git(["config", *_scope_args(scope), key, value], path)
    return result is not None and result.returncode == 0


def unset_config(key: str, path: Optional[Path] = None, scope: Optional[str] = None) -> bool:
    """Remove a git config value."""
    result = _run_git(["config", *_scope_args(scope), "--unset", key], path)
    return result is not None and result.returncode == 0


# ═══════════════════════════════════════════════════════════════════════════════
# Branch Operations
# ═══════════════════════════════════════════════════════════════════════════════


def checkout(path: Path, branch: str, create: bool = False) -> bool:
    """Check out branch, creating it from HEAD when create is True."""
    args = ["checkout", "-b", branch] if create else ["checkout", branch]
    result = _run_git(args, path)
    return result is not None and result.returncode == 0


def delete_branch(path: Path, branch: str) -> bool:
    """Force-delete a local branch."""
    result = _run_git(["branch", "-D", branch], path)
    return result is not None and result.returncode == 0


def push_with_upstream(path: Path, remote: str, branch: str, env: Optional[dict] = None) -> bool:
    """
    Push branch to remote and set it as upstream.

    Output is not captured so the user sees git's progress and any
    authentication prompts.
    """
    try:
        result = subprocess.run(
            ["git", "-C", str(path), "push", "-u", remote, branch],
            timeout=PUSH_TIMEOUT,
            env={**os.environ, **(env or {})},
        )
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.debug("git push failed to run: %s", e)
        return False
    return result.returncode == 0
