"""
Installation health checks.

Philosophy: "Fast feedback, clear guidance"
- Check the whole hook setup quickly
- Provide clear pass/fail indicators
- Offer actionable fix suggestions
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from . import git
from .config import Settings, load_settings
from .hooks import POLICY_HOOKS, RESTORE_HOOKS
from .installer import (
    HookPaths,
    gitignore_covers,
    hooks_path_is_set,
    is_executable,
    is_managed_hook,
)

INSTALL_HINT = "Run: branchguard install"


# ═══════════════════════════════════════════════════════════════════════════════
# Data Classes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass
class CheckResult:
    """Result of a single health check."""

    name: str
    passed: bool
    message: str
    version: Optional[str] = None
    fix_hint: Optional[str] = None
    severity: str = "error"  # "error", "warning", "info"


@dataclass
class DoctorResult:
    """Complete health check results."""

    repo_root: Optional[Path] = None
    checks: List[CheckResult] = field(default_factory=list)

    @property
    def all_ok(self) -> bool:
        """Check if every error-severity check passed."""
        return self.error_count == 0

    @property
    def error_count(self) -> int:
        """Count of failed critical checks."""
        return sum(1 for c in self.checks if not c.passed and c.severity == "error")

    @property
    def warning_count(self) -> int:
        """Count of warnings."""
        return sum(1 for c in self.checks if not c.passed and c.severity == "warning")


# ═══════════════════════════════════════════════════════════════════════════════
# Health Checks
# ═══════════════════════════════════════════════════════════════════════════════


def check_git() -> CheckResult:
    """Check if Git is installed and accessible."""
    if not git.check_git_installed():
        return CheckResult(
            name="Git",
            passed=False,
            message="Git is not installed or not in PATH",
            fix_hint="Install Git from https://git-scm.com/downloads",
        )

    return CheckResult(
        name="Git",
        passed=True,
        message="Git is installed and accessible",
        version=git.get_git_version(),
    )


def check_hooks_path(paths: HookPaths) -> CheckResult:
    """Check that core.hooksPath points at the custom hooks directory."""
    if hooks_path_is_set(paths):
        return CheckResult(
            name="core.hooksPath",
            passed=True,
            message=f"Points at {paths.custom_dir}",
        )
    current = git.get_config("core.hooksPath", path=paths.repo_root)
    return CheckResult(
        name="core.hooksPath",
        passed=False,
        message=f"Set to {current}" if current else "Not set",
        fix_hint=INSTALL_HINT,
    )


def check_hook_file(file_path: Path, severity: str = "error") -> CheckResult:
    """Check that one hook exists, is managed and is executable."""
    name = f"{file_path.parent.name}/{file_path.name}"
    if not file_path.is_file():
        return CheckResult(
            name=name, passed=False, message="Missing", fix_hint=INSTALL_HINT, severity=severity
        )
    if not is_managed_hook(file_path):
        return CheckResult(
            name=name,
            passed=False,
            message="Present but not managed by branchguard",
            fix_hint=INSTALL_HINT,
            severity="warning",
        )
    if not is_executable(file_path):
        return CheckResult(
            name=name,
            passed=False,
            message="Not executable",
            fix_hint=f"chmod +x {file_path}",
            severity=severity,
        )
    return CheckResult(name=name, passed=True, message="Installed")


def check_gitignore(paths: HookPaths, settings: Settings) -> CheckResult:
    """Check that the custom hooks directory is git-ignored."""
    gitignore = paths.repo_root / ".gitignore"
    content = gitignore.read_text(encoding="utf-8", errors="replace") if gitignore.exists() else ""
    if gitignore_covers(content, settings.hooks_dir):
        return CheckResult(name=".gitignore", passed=True, message=f"Ignores {settings.hooks_dir}/")
    return CheckResult(
        name=".gitignore",
        passed=False,
        message=f"{settings.hooks_dir}/ is not ignored",
        fix_hint=INSTALL_HINT,
        severity="warning",
    )


def run_doctor(path: Path) -> DoctorResult:
    """Run every check against the repository containing path."""
    result = DoctorResult()

    git_check = check_git()
    result.checks.append(git_check)
    if not git_check.passed:
        return result

    root = git.get_toplevel(path)
    if root is None:
        result.checks.append(
            CheckResult(
                name="Repository",
                passed=False,
                message=f"Not a git working tree: {path}",
                fix_hint="Run from inside a git repository",
            )
        )
        return result

    result.repo_root = root
    result.checks.append(CheckResult(name="Repository", passed=True, message=str(root)))

    settings = load_settings(root)
    paths = HookPaths(
        repo_root=root,
        custom_dir=root / settings.hooks_dir,
        git_hooks_dir=git.get_hooks_dir(root) or root / ".git" / "hooks",
    )

    result.checks.append(check_hooks_path(paths))
    for hook_name in POLICY_HOOKS + RESTORE_HOOKS:
        result.checks.append(check_hook_file(paths.custom_dir / hook_name))
    for hook_name in RESTORE_HOOKS:
        result.checks.append(check_hook_file(paths.git_hooks_dir / hook_name, severity="warning"))
    result.checks.append(check_gitignore(paths, settings))

    return result


# ═══════════════════════════════════════════════════════════════════════════════
# Rendering
# ═══════════════════════════════════════════════════════════════════════════════


def render_doctor_results(console: Console, result: DoctorResult) -> None:
    """Render the health checks as a table with a summary line."""
    table = Table(
        title="[bold cyan]branchguard health check[/bold cyan]",
        box=box.ROUNDED,
        header_style="bold cyan",
        expand=False,
        padding=(0, 1),
    )
    table.add_column("Status", width=6, justify="center")
    table.add_column("Check", style="white", no_wrap=True)
    table.add_column("Details", style="dim")
    table.add_column("Fix", style="yellow")

    for check in result.checks:
        if check.passed:
            status = Text("✓", style="green")
        elif check.severity == "warning":
            status = Text("!", style="yellow")
        else:
            status = Text("✖", style="red")
        details = check.message if not check.version else f"{check.message} ({check.version})"
        table.add_row(status, check.name, details, check.fix_hint or "")

    console.print()
    console.print(table)
    console.print()

    if result.all_ok:
        summary = "[green]All checks passed[/green]"
        if result.warning_count:
            summary += f" [yellow]({result.warning_count} warning(s))[/yellow]"
    else:
        summary = f"[red]{result.error_count} check(s) failed[/red]"
    console.print(summary)
    console.print()
