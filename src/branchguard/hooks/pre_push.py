"""
pre-push: keep protected branches free of direct pushes.

On a protected branch:
- nothing unpushed: allow (plain sync after a pull)
- commits from a forbidden merge source: refuse
- other merged commits: divert them to a temporary branch, push that
  branch instead and refuse the original push
- locally authored commits: refuse, pointing at `git push --no-verify`

On any other branch only merges from a forbidden source are refused.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from rich.console import Console

from ..config import Settings
from ..detection import UPSTREAM_RANGE, assess_merge, is_merge_from_forbidden_source
from ..exit_codes import EXIT_BLOCKED, EXIT_SUCCESS
from ..naming import generate_branch_name
from ..panels import (
    create_error_panel,
    create_info_panel,
    create_steps_panel,
    create_success_panel,
)
from ..platform import check_windows_credentials, gh_install_hint
from ..ports.git_client import GitClient

logger = logging.getLogger(__name__)

# Set on the push of the temporary branch so the nested pre-push passes it
DIVERTING_ENV = "BRANCHGUARD_DIVERTING"


def run(
    client: GitClient,
    settings: Settings,
    console: Console,
    remote: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    environ = os.environ if environ is None else environ
    if environ.get(DIVERTING_ENV):
        logger.debug("Nested push of a diverted branch, skipping checks")
        return EXIT_SUCCESS

    if settings.fix_windows_credentials:
        check_windows_credentials(console)

    branch = client.get_current_branch()
    if settings.is_protected(branch):
        return _guard_protected_branch(client, settings, console, branch, remote or settings.remote)
    return _guard_other_branch(client, settings, console, branch or "HEAD")


# ═══════════════════════════════════════════════════════════════════════════════
# Protected branches
# ═══════════════════════════════════════════════════════════════════════════════


def _guard_protected_branch(
    client: GitClient,
    settings: Settings,
    console: Console,
    branch: str,
    remote: str,
) -> int:
    console.print()
    console.print(
        create_info_panel(
            f"Protected Branch: {branch}",
            "Branch protection checks are running for this push.",
        )
    )

    if client.has_upstream():
        unpushed = client.count_commits(UPSTREAM_RANGE)
        if unpushed == 0:
            console.print("  [green]✓[/green] Nothing new to push, allowing (sync after pull or merge)")
            return EXIT_SUCCESS
        console.print(f"  [cyan]•[/cyan] {unpushed} unpushed commit(s)")
    else:
        console.print("  [yellow]![/yellow] Branch has no remote tracking branch")
        unpushed = client.count_commits("HEAD")
        if unpushed == 0:
            console.print(create_error_panel("Nothing To Push", "This branch has no commits."))
            return EXIT_BLOCKED
        console.print(f"  [cyan]•[/cyan] {unpushed} local commit(s)")

    assessment = assess_merge(client, unpushed, settings)

    if not assessment.is_merge:
        _show_direct_push_refused(console, branch)
        return EXIT_BLOCKED

    console.print("  [cyan]•[/cyan] Merged changes detected (merge, fast-forward or squash)")

    if is_merge_from_forbidden_source(client, settings):
        _show_forbidden_merge(console, branch, settings)
        return EXIT_BLOCKED

    return divert_push(client, settings, console, branch, remote)


def _show_direct_push_refused(console: Console, branch: str) -> None:
    console.print()
    console.print(
        create_error_panel(
            "Direct Push Refused",
            f"Commits made directly on '{branch}' cannot be pushed to it.\n"
            "Create a feature branch and merge it through a pull request.",
            "If you are sure, bypass the hooks with: git push --no-verify",
        )
    )
    console.print("[dim]→ --no-verify skips branch protection; use it with care.[/dim]")
    console.print()


def divert_push(
    client: GitClient,
    settings: Settings,
    console: Console,
    protected: str,
    remote: str,
) -> int:
    """
    Move the unpushed commits to a temporary branch and push that instead.

    The protected branch is checked out again afterwards and keeps its
    commits locally. Always returns EXIT_BLOCKED so git cancels the
    original push.
    """
    new_branch = generate_branch_name(client, settings)
    console.print()
    console.print(f"  [cyan]•[/cyan] Diverting to temporary branch [bold]{new_branch}[/bold]")

    if not client.checkout(new_branch, create=True):
        console.print(
            create_error_panel(
                "Branch Creation Failed",
                f"Could not create branch '{new_branch}'",
                "Check for uncommitted changes or an existing branch with that name",
            )
        )
        return EXIT_BLOCKED

    console.print(f"  [cyan]•[/cyan] Pushing {new_branch} to {remote}...")
    console.print()

    if not client.push_with_upstream(remote, new_branch, env={DIVERTING_ENV: "1"}):
        client.checkout(protected)
        client.delete_branch(new_branch)
        console.print()
        console.print(
            create_error_panel(
                "Push Failed",
                f"Could not push '{new_branch}' to '{remote}'. "
                f"Restored '{protected}' and removed the temporary branch.",
                "Check your network connection and remote permissions",
            )
        )
        return EXIT_BLOCKED

    client.checkout(protected)
    logger.debug("Diverted push of %s to %s/%s", protected, remote, new_branch)

    console.print()
    console.print(
        create_success_panel(
            "Changes Diverted",
            {
                "Pushed": f"{remote}/{new_branch}",
                "Target": protected,
                "Current branch": f"{protected} (unchanged)",
            },
        )
    )
    console.print(
        create_steps_panel(
            "Next steps",
            [
                f"Open a pull request: {new_branch} → {protected}",
                f"With the GitHub CLI: git checkout {new_branch} && gh pr create --web --base {protected}",
                "Delete the temporary branch once the pull request is merged",
            ],
        )
    )
    console.print(f"[dim]GitHub CLI install: {gh_install_hint()}[/dim]")
    console.print()
    console.print("[dim]The original push was cancelled.[/dim]")
    return EXIT_BLOCKED


# ═══════════════════════════════════════════════════════════════════════════════
# Other branches
# ═══════════════════════════════════════════════════════════════════════════════


def _guard_other_branch(
    client: GitClient,
    settings: Settings,
    console: Console,
    branch: str,
) -> int:
    if client.has_upstream():
        unpushed = client.count_commits(UPSTREAM_RANGE)
    else:
        unpushed = client.count_commits("HEAD")

    if (
        unpushed > 0
        and assess_merge(client, unpushed, settings).is_merge
        and is_merge_from_forbidden_source(client, settings)
    ):
        _show_forbidden_merge(console, branch, settings)
        return EXIT_BLOCKED

    console.print(f"[green]✓[/green] Pushing [cyan]{branch}[/cyan]")
    console.print("[dim]→ Open a pull request when ready: gh pr create --web[/dim]")
    return EXIT_SUCCESS


def _show_forbidden_merge(console: Console, target: str, settings: Settings) -> None:
    base = settings.protected_branches[0] if settings.protected_branches else "main"
    console.print()
    console.print(
        create_error_panel(
            "Forbidden Merge Detected",
            f"The commits on '{target}' include a merge from a development branch.\n"
            "Development branches must never be merged into other branches.",
            "Undo the merge with: git reset --hard HEAD~1",
        )
    )
    console.print(
        create_steps_panel(
            "Recommended workflow",
            [
                f"Branch off the target: git checkout {base} && git checkout -b feature/<name>",
                "Commit your work on the feature branch",
                "Push it: git push origin feature/<name>",
                f"Open a pull request: feature/<name> → {base}",
            ],
        )
    )
    console.print()

