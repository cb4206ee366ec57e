"""pre-merge-commit: refuse to create a merge commit from a forbidden branch."""

from __future__ import annotations

import logging

from rich.console import Console

from ..config import Settings
from ..detection import infer_merge_source, is_merge_in_progress, matches_forbidden
from ..exit_codes import EXIT_BLOCKED, EXIT_SUCCESS
from ..panels import create_error_panel, create_steps_panel, create_warning_panel
from ..ports.git_client import GitClient

logger = logging.getLogger(__name__)


def run(client: GitClient, settings: Settings, console: Console) -> int:
    if not is_merge_in_progress(client):
        return EXIT_SUCCESS

    current = client.get_current_branch() or "HEAD"
    source = infer_merge_source(client, settings)

    if source is None:
        console.print()
        console.print(
            create_warning_panel(
                "Merge Source Unknown",
                "Could not determine which branch is being merged.",
                "If you are merging a development branch, cancel with: git merge --abort",
            )
        )
        console.print()
        return EXIT_SUCCESS

    logger.debug("Merge source %s found via %s", source.branch, source.method)

    if not matches_forbidden(source.branch, settings):
        return EXIT_SUCCESS

    console.print()
    console.print(
        create_error_panel(
            "Merge Blocked",
            f"Merging '{source.branch}' into '{current}' is not allowed.\n"
            "Development branches must never be merged into other branches.",
            "git merge --abort",
        )
    )
    console.print(
        create_steps_panel(
            "Recommended workflow",
            [
                "Cancel the merge: git merge --abort",
                "Branch off the target: git checkout -b feature/<name>",
                "Commit your work on the feature branch",
                "Push it: git push origin feature/<name>",
                f"Open a pull request: feature/<name> → {current}",
            ],
        )
    )
    console.print()
    return EXIT_BLOCKED
