"""pre-commit: warn when committing on a protected branch, never block."""

from __future__ import annotations

from rich.console import Console

from ..config import Settings
from ..exit_codes import EXIT_SUCCESS
from ..panels import create_warning_panel
from ..ports.git_client import GitClient


def run(client: GitClient, settings: Settings, console: Console) -> int:
    branch = client.get_current_branch()

    if settings.is_protected(branch):
        console.print()
        console.print(
            create_warning_panel(
                f"Committing on {branch}",
                "The commit is allowed, but it cannot be pushed to this branch directly.\n"
                "Merged changes are diverted to a temporary branch on push.",
                "Prefer a feature branch: git checkout -b feature/<name>",
            )
        )
        console.print()

    return EXIT_SUCCESS
