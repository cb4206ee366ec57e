"""
Temporary branch naming for diverted pushes.

Names look like ``feat/premerge-<merged>-<user>-<YYYYmmdd_HHMMSS>`` where
<merged> summarises the local branches already merged into HEAD, so the
pull request shows at a glance what it carries.
"""

from __future__ import annotations

import getpass
import logging
import re
from datetime import datetime

from .config import Settings
from .ports.git_client import GitClient

logger = logging.getLogger(__name__)

USER_MAX_LENGTH = 8
MERGED_MAX_LENGTH = 30
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def sanitize_component(value: str) -> str:
    """Drop every character not allowed in a branch-name component."""
    return _INVALID_CHARS.sub("", value)


def get_user_slug(client: GitClient, fallback_user: str | None = None) -> str:
    """Short user identifier: git user.name, lowercased, no spaces, 8 chars max."""
    name = client.get_config("user.name") or ""
    slug = sanitize_component(name.lower().replace(" ", ""))[:USER_MAX_LENGTH]
    if slug:
        return slug

    if fallback_user is None:
        try:
            fallback_user = getpass.getuser()
        except (KeyError, OSError):
            fallback_user = "user"
    return sanitize_component(fallback_user)[:USER_MAX_LENGTH] or "user"


def summarize_merged_branches(client: GitClient, settings: Settings) -> str:
    """
    Join the names of local branches merged into HEAD.

    Skips earlier premerge branches and the protected branches, turns
    slashes into dashes and keeps the first 30 characters.
    """
    excluded = [b.lower() for b in settings.protected_branches] + ["premerge"]
    names = [
        name
        for name in client.get_merged_branches()
        if name and not any(word in name.lower() for word in excluded)
    ]
    summary = "-".join(names).replace("/", "-")[:MERGED_MAX_LENGTH]
    return sanitize_component(summary).strip("-")


def generate_branch_name(
    client: GitClient,
    settings: Settings,
    now: datetime | None = None,
    fallback_user: str | None = None,
) -> str:
    """Build the temporary branch name for a diverted push."""
    timestamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
    user = get_user_slug(client, fallback_user)
    merged = summarize_merged_branches(client, settings)

    parts = [settings.temp_branch_prefix]
    if merged:
        parts.append(merged)
    parts += [user, timestamp]

    name = "-".join(parts)
    logger.debug("Generated temporary branch name %s", name)
    return name
