"""
CLI Common Utilities.

Shared console, state, logging setup and the error boundary decorator
used by every CLI module.
"""

import logging
import os
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import ui
from .errors import BranchGuardError
from .exit_codes import EXIT_CANCELLED, EXIT_PREREQ
from .panels import create_warning_panel

F = TypeVar("F", bound=Callable[..., Any])

DEBUG_ENV = "BRANCHGUARD_DEBUG"

# ─────────────────────────────────────────────────────────────────────────────
# Shared Console and State
# ─────────────────────────────────────────────────────────────────────────────

console = Console()
err_console = Console(stderr=True)


class AppState:
    """Global application state for CLI flags."""

    debug: bool = False


state = AppState()


# ─────────────────────────────────────────────────────────────────────────────
# Logging
# ─────────────────────────────────────────────────────────────────────────────


def debug_requested() -> bool:
    """Hooks run without CLI flags, so debug can also come from the environment."""
    return os.environ.get(DEBUG_ENV) == "1"


def configure_logging(debug: bool) -> None:
    """Route the package loggers through rich on stderr."""
    logger = logging.getLogger("branchguard")
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=debug,
        markup=False,
        rich_tracebacks=debug,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)


# ─────────────────────────────────────────────────────────────────────────────
# Error Boundary Decorator
# ─────────────────────────────────────────────────────────────────────────────


def handle_errors(func: F) -> F:
    """Decorator to catch BranchGuardError and render beautifully."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except BranchGuardError as e:
            ui.render_error(console, e, debug=state.debug)
            raise typer.Exit(e.exit_code)
        except KeyboardInterrupt:
            console.print("\n[dim]Operation cancelled.[/dim]")
            raise typer.Exit(EXIT_CANCELLED)
        except (typer.Exit, SystemExit):
            # Let typer exits pass through
            raise
        except Exception as e:
            # Unexpected errors
            if state.debug:
                console.print_exception()
            else:
                console.print(
                    create_warning_panel(
                        "Unexpected Error",
                        str(e),
                        "Run with --debug (or BRANCHGUARD_DEBUG=1) for full traceback",
                    )
                )
            raise typer.Exit(EXIT_PREREQ)

    return cast(F, wrapper)
