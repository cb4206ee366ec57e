"""post-checkout / post-merge: keep core.hooksPath pointing at the hooks."""

from __future__ import annotations

import logging
from pathlib import Path

from ..config import Settings
from ..exit_codes import EXIT_SUCCESS
from ..installer import reassert_hooks_path

logger = logging.getLogger(__name__)


def run(repo_path: Path, settings: Settings) -> int:
    # Never fail: a non-zero status here would only confuse the user
    if not reassert_hooks_path(repo_path, settings):
        logger.debug("core.hooksPath not restored for %s", repo_path)
    return EXIT_SUCCESS
