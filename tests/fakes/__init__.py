"""Test fakes for branchguard ports."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from branchguard.detection import UPSTREAM_RANGE


@dataclass
class FakeGitClient:
    """In-memory GitClient.

    history holds the subjects reachable from HEAD, newest first; unpushed
    holds the subjects in @{u}..HEAD. merge_commits maps every merge commit
    on HEAD to its subject, unpushed_merges lists those not yet pushed.
    """

    branch: str | None = "main"
    upstream: bool = True
    history: list[str] = field(default_factory=list)
    unpushed: list[str] = field(default_factory=list)
    merge_commits: dict[str, str] = field(default_factory=dict)
    unpushed_merges: list[str] = field(default_factory=list)
    reflog: list[str] = field(default_factory=list)
    changed_files: dict[str, list[str]] = field(default_factory=dict)
    merged_branches: list[str] = field(default_factory=list)
    remote_contains: dict[str, list[str]] = field(default_factory=dict)
    git_files: dict[str, str] = field(default_factory=dict)
    config: dict[str, str] = field(default_factory=dict)
    failing_checkouts: set[str] = field(default_factory=set)
    push_succeeds: bool = True
    calls: list[tuple] = field(default_factory=list)
    path: Path = Path(".")

    def get_current_branch(self) -> str | None:
        return self.branch

    def has_upstream(self) -> bool:
        return self.upstream

    def count_commits(self, rev_range: str) -> int:
        if rev_range == UPSTREAM_RANGE:
            return len(self.unpushed)
        return len(self.history)

    def list_merge_commits(self, rev_range: str) -> list[str]:
        if rev_range == UPSTREAM_RANGE:
            return list(self.unpushed_merges)
        return list(self.merge_commits)

    def get_commit_subject(self, commit: str) -> str | None:
        return self.merge_commits.get(commit)

    def get_reflog_subjects(self, limit: int) -> list[str]:
        return self.reflog[:limit]

    def get_commit_subjects(self, rev_range: str | None = None, limit: int | None = None) -> list[str]:
        subjects = self.unpushed if rev_range == UPSTREAM_RANGE else self.history
        return list(subjects[:limit] if limit is not None else subjects)

    def get_oneline_log(self, rev_range: str | None = None, limit: int | None = None) -> list[str]:
        subjects = self.get_commit_subjects(rev_range, limit)
        return [f"{idx:07x} {subject}" for idx, subject in enumerate(subjects, 1)]

    def get_changed_files(self, rev_range: str) -> list[str]:
        return list(self.changed_files.get(rev_range, []))

    def get_merged_branches(self) -> list[str]:
        return list(self.merged_branches)

    def get_remote_branches_containing(self, commit: str) -> list[str]:
        return list(self.remote_contains.get(commit, []))

    def read_git_file(self, name: str) -> str | None:
        return self.git_files.get(name)

    def get_config(self, key: str) -> str | None:
        return self.config.get(key)

    def checkout(self, branch: str, create: bool = False) -> bool:
        self.calls.append(("checkout", branch, create))
        if branch in self.failing_checkouts:
            return False
        self.branch = branch
        return True

    def delete_branch(self, branch: str) -> bool:
        self.calls.append(("delete_branch", branch))
        return True

    def push_with_upstream(self, remote: str, branch: str, env: dict[str, str] | None = None) -> bool:
        self.calls.append(("push", remote, branch, dict(env or {})))
        return self.push_succeeds
