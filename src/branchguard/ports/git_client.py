"""Git client port definition."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class GitClient(Protocol):
    """Git queries and actions the hooks run against one repository."""

    def get_current_branch(self) -> str | None:
        """Return the current branch name."""

    def has_upstream(self) -> bool:
        """Return True if the current branch tracks an upstream."""

    def count_commits(self, rev_range: str) -> int:
        """Return the number of commits in rev_range."""

    def list_merge_commits(self, rev_range: str) -> list[str]:
        """Return the merge commits in rev_range."""

    def get_commit_subject(self, commit: str) -> str | None:
        """Return the subject line of one commit."""

    def get_reflog_subjects(self, limit: int) -> list[str]:
        """Return the most recent reflog subjects, newest first."""

    def get_commit_subjects(self, rev_range: str | None = None, limit: int | None = None) -> list[str]:
        """Return commit subjects for rev_range (or HEAD)."""

    def get_oneline_log(self, rev_range: str | None = None, limit: int | None = None) -> list[str]:
        """Return `git log --oneline` lines."""

    def get_changed_files(self, rev_range: str) -> list[str]:
        """Return the files changed across rev_range."""

    def get_merged_branches(self) -> list[str]:
        """Return local branches merged into HEAD."""

    def get_remote_branches_containing(self, commit: str) -> list[str]:
        """Return remote-tracking branches containing commit."""

    def read_git_file(self, name: str) -> str | None:
        """Return the contents of a file in the git directory, or None."""

    def get_config(self, key: str) -> str | None:
        """Return a repository config value."""

    def checkout(self, branch: str, create: bool = False) -> bool:
        """Check out (optionally create) branch."""

    def delete_branch(self, branch: str) -> bool:
        """Force-delete a local branch."""

    def push_with_upstream(self, remote: str, branch: str, env: dict[str, str] | None = None) -> bool:
        """Push branch to remote and set upstream."""

    @property
    def path(self) -> Path:
        """Repository working directory."""
