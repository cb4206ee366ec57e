#!/usr/bin/env python3
"""
branchguard - branch protection through local git hooks

Installs hooks that keep direct pushes off protected branches, divert
merged changes to a temporary branch, refuse merges from development
branches and keep core.hooksPath in place across checkouts and merges.

This module is the thin orchestrator; hook entry points live in
cli_hooks.py and the work happens in installer.py, doctor.py and hooks/.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.panel import Panel
from rich.table import Table

from . import __version__, config, doctor, git, installer
from .cli_common import configure_logging, console, debug_requested, handle_errors, state
from .cli_hooks import hook_app
from .config import Settings
from .exit_codes import EXIT_CONFIG
from .panels import create_info_panel, create_success_panel, create_warning_panel

# ─────────────────────────────────────────────────────────────────────────────
# App Configuration
# ─────────────────────────────────────────────────────────────────────────────

app = typer.Typer(
    name="branchguard",
    help="Protect main/master with local git hooks.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ─────────────────────────────────────────────────────────────────────────────
# Global Callback (--debug flag)
# ─────────────────────────────────────────────────────────────────────────────


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Show detailed error information for troubleshooting.",
        is_eager=True,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        is_eager=True,
    ),
) -> None:
    """
    [bold cyan]branchguard[/bold cyan] - branch protection through local git hooks
    """
    state.debug = debug or debug_requested()
    configure_logging(state.debug)

    if version:
        console.print(
            Panel(
                f"[cyan]branchguard[/cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Branch protection through local git hooks[/dim]",
                border_style="cyan",
            )
        )
        raise typer.Exit()

    # Flags alone (e.g. `branchguard --debug`) get the help text
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


# ─────────────────────────────────────────────────────────────────────────────
# Commands
# ─────────────────────────────────────────────────────────────────────────────


def _resolve(path: Optional[str]) -> Path:
    return Path(path).expanduser().resolve() if path else Path.cwd()


@app.command(name="install")
@handle_errors
def install_cmd(
    path: Optional[str] = typer.Argument(None, help="Repository path (default: current directory)"),
) -> None:
    """Install the branch protection hooks into a repository."""
    with console.status("[cyan]Installing hooks...[/cyan]", spinner="dots"):
        result = installer.install_hooks(_resolve(path))

    paths = result.paths
    console.print()
    console.print(
        create_info_panel(
            "Hooks Installed",
            f"Repository: {paths.repo_root}",
            f"Hooks directory: {paths.custom_dir}",
        )
    )
    for written in result.written:
        console.print(f"  [green]✓[/green] {written}")
    for backup in result.backed_up:
        console.print(f"  [yellow]![/yellow] Existing hook kept as {backup}")
    if result.gitignore_updated:
        console.print("  [green]✓[/green] Added hooks directory to .gitignore")
    console.print()

    settings = config.load_settings(paths.repo_root)
    if result.hooks_path_verified:
        console.print(
            create_success_panel(
                "Configuration Verified",
                {"core.hooksPath": str(paths.custom_dir)},
            )
        )
    else:
        console.print(
            create_warning_panel(
                "core.hooksPath Not Set",
                "git did not report the expected hooks directory.",
                f"git config core.hooksPath {paths.custom_dir}",
            )
        )

    _show_policy_summary(settings)


def _show_policy_summary(settings: Settings) -> None:
    """Print what is allowed and refused once the hooks are active."""
    protected = "/".join(settings.protected_branches) or "-"
    forbidden = ", ".join(settings.forbidden_merge_sources) or "-"

    table = Table.grid(padding=(0, 2))
    table.add_column(no_wrap=True)
    table.add_column(style="white")

    table.add_row("[green]allowed[/green]", f"git pull / merging pull requests into {protected}")
    table.add_row("[green]allowed[/green]", f"committing on {protected} (with a warning)")
    table.add_row("[green]allowed[/green]", "pushing feature branches")
    table.add_row("[green]allowed[/green]", "git push --no-verify (bypasses every check)")
    table.add_row("[red]refused[/red]", f"pushing commits made directly on {protected}")
    table.add_row("[red]refused[/red]", f"merging branches matching '{forbidden}' into any branch")
    table.add_row(
        "[cyan]diverted[/cyan]",
        f"merged changes on {protected} → {settings.temp_branch_prefix}-<merged>-<user>-<timestamp>",
    )

    console.print()
    console.print(
        Panel(table, title="[bold cyan]Active policy[/bold cyan]", border_style="cyan", padding=(0, 1))
    )
    console.print()


@app.command(name="uninstall")
@handle_errors
def uninstall_cmd(
    path: Optional[str] = typer.Argument(None, help="Repository path (default: current directory)"),
) -> None:
    """Remove the hooks installed by branchguard."""
    result = installer.uninstall_hooks(_resolve(path))

    if not result.removed and not result.hooks_path_unset:
        console.print(
            create_warning_panel(
                "Nothing To Remove",
                "No branchguard hooks found in this repository.",
            )
        )
        return

    console.print(
        create_success_panel(
            "Hooks Removed",
            {
                "Files removed": len(result.removed),
                "core.hooksPath": "unset" if result.hooks_path_unset else "unchanged",
            },
        )
    )


@app.command(name="doctor")
@handle_errors
def doctor_cmd(
    path: Optional[str] = typer.Argument(None, help="Repository path (default: current directory)"),
) -> None:
    """Check that the hooks are installed and active."""
    with console.status("[cyan]Running health checks...[/cyan]", spinner="dots"):
        result = doctor.run_doctor(_resolve(path))

    doctor.render_doctor_results(console, result)

    if not result.all_ok:
        raise typer.Exit(EXIT_CONFIG)


@app.command(name="config")
@handle_errors
def config_cmd(
    path: Optional[str] = typer.Argument(None, help="Repository path (default: current directory)"),
    show: bool = typer.Option(False, "--show", help="Show the merged configuration"),
    show_paths: bool = typer.Option(False, "--path", help="Show where the config files live"),
    edit: bool = typer.Option(False, "--edit", help="Open the user config in your editor"),
    edit_repo: bool = typer.Option(
        False, "--edit-repo", help="Open this repository's config in your editor"
    ),
) -> None:
    """View or edit configuration."""
    target = _resolve(path)
    repo_root = git.get_toplevel(target) if git.check_git_installed() else None
    repo_file = None
    if repo_root is not None:
        repo_file = config.get_repo_config_file(repo_root, config.load_config(repo_root)["hooks_dir"])

    if show:
        cfg = config.load_config(repo_root)
        # Validate so a broken value is reported here rather than in a hook
        config.Settings.from_dict(cfg)
        console.print_json(data=cfg)
    elif show_paths:
        console.print(f"user: {config.get_config_file()}", markup=False, highlight=False, soft_wrap=True)
        if repo_file is not None:
            console.print(f"repository: {repo_file}", markup=False, highlight=False, soft_wrap=True)
    elif edit:
        config.open_in_editor()
    elif edit_repo:
        if repo_file is None:
            console.print(f"[red]Error:[/red] Not a git repository: {target}")
            raise typer.Exit(EXIT_CONFIG)
        config.open_in_editor(repo_file)
    else:
        locations = f"User config: {config.get_config_file()}"
        if repo_file is not None:
            locations += f"\nRepository config: {repo_file}"
        console.print(
            create_info_panel(
                "Configuration Help",
                "Use --show to view the merged settings, --path to list the files\n"
                "Use --edit or --edit-repo to modify them in your editor",
                locations,
            )
        )


# Hook entry points (hidden; invoked by the installed shims)
app.add_typer(hook_app, name="hook", hidden=True)


# ─────────────────────────────────────────────────────────────────────────────
# Entry Point
# ─────────────────────────────────────────────────────────────────────────────


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
