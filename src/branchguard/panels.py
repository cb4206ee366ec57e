"""
Panel builders shared by every command and hook.

Consistent visual language with semantic colors:
errors > warnings > info > success.
"""

from rich.panel import Panel
from rich.table import Table
from rich.text import Text


def create_info_panel(title: str, content: str, subtitle: str = "") -> Panel:
    """Create an info panel with cyan styling."""
    body = Text()
    body.append(content)
    if subtitle:
        body.append("\n")
        body.append(subtitle, style="dim")
    return Panel(
        body,
        title=f"[bold cyan]{title}[/bold cyan]",
        border_style="cyan",
        padding=(0, 1),
    )


def create_warning_panel(title: str, message: str, hint: str = "") -> Panel:
    """Create a warning panel with yellow styling."""
    body = Text()
    body.append(message, style="bold")
    if hint:
        body.append("\n\n")
        body.append("→ ", style="dim")
        body.append(hint, style="yellow")
    return Panel(
        body,
        title=f"[bold yellow]⚠ {title}[/bold yellow]",
        border_style="yellow",
        padding=(0, 1),
    )


def create_success_panel(title: str, items: dict) -> Panel:
    """Create a success panel with key-value summary."""
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="dim", no_wrap=True)
    grid.add_column(style="white")

    for key, value in items.items():
        grid.add_row(f"{key}:", str(value))

    return Panel(
        grid,
        title=f"[bold green]✓ {title}[/bold green]",
        border_style="green",
        padding=(0, 1),
    )


def create_error_panel(title: str, message: str, hint: str = "") -> Panel:
    """Create an error panel with red styling."""
    body = Text()
    body.append(message, style="bold")
    if hint:
        body.append("\n\n")
        body.append("→ Fix: ", style="green")
        body.append(hint)
    return Panel(
        body,
        title=f"[bold red]✖ {title}[/bold red]",
        border_style="red",
        padding=(0, 1),
    )


def create_steps_panel(title: str, steps: list[str], border_style: str = "cyan") -> Panel:
    """Create a panel listing numbered steps, one per line."""
    body = Text()
    for idx, step in enumerate(steps, 1):
        if idx > 1:
            body.append("\n")
        body.append(f"{idx}. ", style="dim")
        body.append(step)
    return Panel(
        body,
        title=f"[bold {border_style}]{title}[/bold {border_style}]",
        border_style=border_style,
        padding=(0, 1),
    )
