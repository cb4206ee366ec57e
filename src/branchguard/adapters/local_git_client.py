"""Local git adapter for GitClient port."""

from __future__ import annotations

from pathlib import Path

from branchguard import git
from branchguard.ports.git_client import GitClient


class LocalGitClient(GitClient):
    """Git client adapter backed by the local git CLI."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def get_current_branch(self) -> str | None:
        return git.get_current_branch(self._path)

    def has_upstream(self) -> bool:
        return git.has_upstream(self._path)

    def count_commits(self, rev_range: str) -> int:
        return git.count_commits(self._path, rev_range)

    def list_merge_commits(self, rev_range: str) -> list[str]:
        return git.list_merge_commits(self._path, rev_range)

    def get_commit_subject(self, commit: str) -> str | None:
        return git.get_commit_subject(self._path, commit)

    def get_reflog_subjects(self, limit: int) -> list[str]:
        return git.get_reflog_subjects(self._path, limit)

    def get_commit_subjects(self, rev_range: str | None = None, limit: int | None = None) -> list[str]:
        return git.get_commit_subjects(self._path, rev_range, limit)

    def get_oneline_log(self, rev_range: str | None = None, limit: int | None = None) -> list[str]:
        return git.get_oneline_log(self._path, rev_range, limit)

    def get_changed_files(self, rev_range: str) -> list[str]:
        return git.get_changed_files(self._path, rev_range)

    def get_merged_branches(self) -> list[str]:
        return git.get_merged_branches(self._path)

    def get_remote_branches_containing(self, commit: str) -> list[str]:
        return git.get_remote_branches_containing(self._path, commit)

    def read_git_file(self, name: str) -> str | None:
        file_path = git.get_git_path(self._path, name)
        if file_path is None or not file_path.is_file():
            return None
        try:
            return file_path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            return None

    def get_config(self, key: str) -> str | None:
        return git.get_config(key, path=self._path)

    def checkout(self, branch: str, create: bool = False) -> bool:
        return git.checkout(self._path, branch, create=create)

    def delete_branch(self, branch: str) -> bool:
        return git.delete_branch(self._path, branch)

    def push_with_upstream(self, remote: str, branch: str, env: dict[str, str] | None = None) -> bool:
        return git.push_with_upstream(self._path, remote, branch, env=env)
