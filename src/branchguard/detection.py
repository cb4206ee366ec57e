"""
Merge detection heuristics.

Git does not record where a change came from once it has been merged, and
fast-forward and squash merges leave no merge commit at all. These checks
guess from what is left behind: the reflog, commit subjects, the shape of
the diff, and the MERGE_HEAD/MERGE_MSG state files while a merge is in
progress. They are best-effort; callers warn rather than block when the
answer is unknown.

All queries go through a GitClient so the heuristics can be exercised
against an in-memory repository.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from .config import Settings
from .ports.git_client import GitClient

logger = logging.getLogger(__name__)

UPSTREAM_RANGE = "@{u}..HEAD"

_MERGE_WORD = re.compile(r"merge")
_MERGE_OR_SQUASH = re.compile(r"merge|squash", re.IGNORECASE)
_MERGE_BRANCH_MSG = re.compile(r"Merge branch '([^']*)'")
_MERGE_REMOTE_MSG = re.compile(r"Merge remote-tracking branch '([^']*)'")
_REFLOG_MERGE_SOURCE = re.compile(r".*merge ([^:]*)")


# ═══════════════════════════════════════════════════════════════════════════════
# Data Classes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class MergeAssessment:
    """Which merge signals fired for the unpushed commits."""

    unpushed: int = 0
    has_merge_commit: bool = False
    recent_merge: bool = False
    squash_merge: bool = False
    merge_message: bool = False

    @property
    def is_merge(self) -> bool:
        return self.unpushed > 0 and (
            self.has_merge_commit or self.recent_merge or self.squash_merge or self.merge_message
        )

    @property
    def signals(self) -> list[str]:
        names = ["has_merge_commit", "recent_merge", "squash_merge", "merge_message"]
        return [name for name in names if getattr(self, name)]


@dataclass
class MergeSource:
    """The branch an in-progress merge is bringing in, and how it was found."""

    branch: str
    method: str  # "merge_msg", "reflog" or "remote_contains"


@dataclass
class _History:
    """Ranges to inspect depending on whether the branch has an upstream."""

    has_upstream: bool
    merges_range: str = field(init=False)
    diff_range: str = field(init=False)

    def __post_init__(self) -> None:
        self.merges_range = UPSTREAM_RANGE if self.has_upstream else "HEAD"
        self.diff_range = UPSTREAM_RANGE if self.has_upstream else "HEAD~1..HEAD"


# ═══════════════════════════════════════════════════════════════════════════════
# Pattern Matching
# ═══════════════════════════════════════════════════════════════════════════════


def matches_forbidden(name: str | None, settings: Settings, ignore_case: bool = False) -> bool:
    """Check if name contains any forbidden merge-source pattern."""
    if not name:
        return False
    haystack = name.lower() if ignore_case else name
    for pattern in settings.forbidden_merge_sources:
        needle = pattern.lower() if ignore_case else pattern
        if needle in haystack:
            return True
    return False


def _reflog_names_forbidden_merge(subject: str, settings: Settings) -> bool:
    """Check for `merge ... <pattern>` in one reflog subject."""
    return any(
        re.search("merge.*" + re.escape(pattern), subject)
        for pattern in settings.forbidden_merge_sources
    )


def _find_recent_merge_reflog(client: GitClient, settings: Settings) -> str | None:
    """Return the newest reflog subject mentioning a merge, within reflog_depth."""
    for subject in client.get_reflog_subjects(settings.reflog_depth)[: settings.reflog_depth]:
        if _MERGE_WORD.search(subject):
            return subject
    return None


def _count_parent_dirs(files: list[str]) -> int:
    """Count distinct parent directories; top-level files count as themselves."""
    return len({name.rsplit("/", 1)[0] for name in files})


# ═══════════════════════════════════════════════════════════════════════════════
# Merge Operation Detection
# ═══════════════════════════════════════════════════════════════════════════════


def assess_merge(client: GitClient, unpushed: int, settings: Settings) -> MergeAssessment:
    """
    Decide whether the unpushed commits came from a merge.

    Covers true merges, fast-forward merges (reflog only) and squash
    merges (reflog plus a wide diff, or a squash commit subject).
    """
    assessment = MergeAssessment(unpushed=unpushed)
    if unpushed <= 0:
        return assessment

    history = _History(client.has_upstream())

    assessment.has_merge_commit = len(client.list_merge_commits(history.merges_range)) > 0
    assessment.recent_merge = _find_recent_merge_reflog(client, settings) is not None

    if assessment.recent_merge and not assessment.has_merge_commit:
        changed = client.get_changed_files(history.diff_range)
        assessment.squash_merge = len(changed) > settings.squash_file_threshold

    if history.has_upstream:
        subjects = client.get_commit_subjects(UPSTREAM_RANGE)
    else:
        subjects = client.get_commit_subjects(limit=1)
    assessment.merge_message = any(_MERGE_OR_SQUASH.search(s) for s in subjects)

    logger.debug(
        "Merge assessment: unpushed=%d signals=%s", unpushed, assessment.signals or "none"
    )
    return assessment


def is_merge_operation(client: GitClient, unpushed: int, settings: Settings) -> bool:
    """Return True if the unpushed commits look like the result of a merge."""
    return assess_merge(client, unpushed, settings).is_merge


def is_merge_from_forbidden_source(client: GitClient, settings: Settings) -> bool:
    """
    Decide whether the recent merge brought in a forbidden branch.

    Checked in order, any hit wins:
    1. the newest merge entry in the reflog names a forbidden branch
    2. an unpushed merge commit subject names one
    3. an unpushed commit subject mentions one (squash merges)
    4. after a merge, a wide diff spanning many directories whose one-line
       log mentions one
    """
    if not settings.forbidden_merge_sources:
        return False

    history = _History(client.has_upstream())

    recent_merge = _find_recent_merge_reflog(client, settings)
    if recent_merge and _reflog_names_forbidden_merge(recent_merge, settings):
        logger.debug("Forbidden merge found in reflog: %s", recent_merge)
        return True

    for commit in client.list_merge_commits(history.merges_range):
        subject = client.get_commit_subject(commit)
        if matches_forbidden(subject, settings):
            logger.debug("Forbidden merge commit %s: %s", commit, subject)
            return True

    if history.has_upstream:
        subjects = client.get_commit_subjects(UPSTREAM_RANGE)
    else:
        subjects = client.get_commit_subjects(limit=3)
    for subject in subjects:
        if matches_forbidden(subject, settings, ignore_case=True):
            logger.debug("Forbidden source mentioned in commit subject: %s", subject)
            return True

    if recent_merge:
        changed = client.get_changed_files(history.diff_range)
        if (
            len(changed) > settings.forbidden_squash_file_threshold
            and _count_parent_dirs(changed) > settings.forbidden_squash_dir_threshold
        ):
            if history.has_upstream:
                log = client.get_oneline_log(UPSTREAM_RANGE)
            else:
                log = client.get_oneline_log(limit=5)
            if any(matches_forbidden(line, settings, ignore_case=True) for line in log):
                logger.debug("Wide squash diff with forbidden source in log")
                return True

    return False


# ═══════════════════════════════════════════════════════════════════════════════
# In-progress Merge Source
# ═══════════════════════════════════════════════════════════════════════════════


def is_merge_in_progress(client: GitClient) -> bool:
    """Check for MERGE_HEAD in the git directory."""
    return client.read_git_file("MERGE_HEAD") is not None


def infer_merge_source(client: GitClient, settings: Settings) -> MergeSource | None:
    """
    Work out which branch the in-progress merge comes from.

    Tries MERGE_MSG, then the newest reflog subject, then the remote
    branches containing MERGE_HEAD (only accepting forbidden-looking names,
    since any branch may contain the commit).
    """
    merge_msg = client.read_git_file("MERGE_MSG")
    if merge_msg:
        for pattern in (_MERGE_BRANCH_MSG, _MERGE_REMOTE_MSG):
            match = pattern.search(merge_msg)
            if match:
                return MergeSource(branch=match.group(1), method="merge_msg")

    reflog = client.get_reflog_subjects(1)
    if reflog:
        match = _REFLOG_MERGE_SOURCE.match(reflog[0])
        if match and match.group(1):
            return MergeSource(branch=match.group(1), method="reflog")

    merge_head = (client.read_git_file("MERGE_HEAD") or "").split()
    if merge_head:
        for remote_branch in client.get_remote_branches_containing(merge_head[0]):
            branch = remote_branch.replace("origin/", "", 1)
            if matches_forbidden(branch, settings):
                return MergeSource(branch=branch, method="remote_contains")

    return None
