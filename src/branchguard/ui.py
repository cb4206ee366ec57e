"""Rendering helpers for errors raised inside commands."""

from rich.console import Console

from .errors import BranchGuardError
from .panels import create_error_panel


def render_error(console: Console, error: BranchGuardError, debug: bool = False) -> None:
    """Render a BranchGuardError as a red panel, with debug context when asked."""
    console.print()
    console.print(
        create_error_panel(
            error.title,
            error.user_message,
            error.suggested_action,
        )
    )
    if debug and error.debug_context:
        console.print()
        console.print("[dim]Debug context:[/dim]")
        console.print(error.debug_context, style="dim", markup=False, highlight=False)
    console.print()
