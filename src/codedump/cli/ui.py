"""
UI components module for the codedump CLI.

Provides styled terminal output using the Rich library for results,
warnings, errors and the largest-files table.
"""

from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from codedump.core.emitter import format_size


def display_path(path: Path | str) -> str:
    """Printable form of a path; undecodable bytes show as U+FFFD."""
    return str(path).encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def render_error(message: str, console: Console) -> None:
    """
    Render an error message in a visually distinct red panel.

    Args:
        message: Error message to display.
        console: Rich Console instance for output.
    """
    error_text = Text()
    error_text.append("Error: ", style="bold red")
    error_text.append(message, style="red")

    console.print(
        Panel(
            error_text,
            border_style="red",
            title="[bold red]Error[/bold red]",
            expand=False,
        )
    )


def render_success(message: str, console: Console) -> None:
    """
    Render a success message in a green panel.

    Args:
        message: Success message to display.
        console: Rich Console instance for output.
    """
    success_text = Text(message, style="green")

    console.print(
        Panel(
            success_text,
            border_style="green",
            expand=False,
        )
    )


def render_warning(message: str, console: Console) -> None:
    """Render a warning message in yellow."""
    console.print(f"[yellow]Warning:[/yellow] {message}")


def render_largest_files(largest: list[tuple[int, Path]], console: Console) -> None:
    """
    Render the largest-files ranking as a table.

    Args:
        largest: (size, path) pairs, largest first.
        console: Rich Console instance for output.
    """
    if not largest:
        console.print("[dim]No files to rank.[/dim]")
        return

    table = Table(
        title=f"Top {len(largest)} Largest Files",
        title_style="bold cyan",
        border_style="blue",
        show_header=True,
        header_style="bold white",
    )

    table.add_column("#", style="dim", justify="right")
    table.add_column("Size", style="green", justify="right", no_wrap=True)
    table.add_column("Path", style="white")

    for rank, (size, path) in enumerate(largest, start=1):
        table.add_row(str(rank), format_size(size), display_path(path))

    console.print(table)
