from typing import Sequence

from rich.console import Console
from rich.table import Table
from rich.theme import Theme

custom_theme = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
})

console = Console(theme=custom_theme)


def print_success(message: str) -> None:
    console.print(f"[success]✔ {message}[/success]")


def print_error(message: str) -> None:
    console.print(f"[error]✘ {message}[/error]")


def render_rows(matrix: Sequence[Sequence[str]], title: str = "") -> None:
    """Prints a row matrix (header row first) as a table."""
    if not matrix:
        console.print("[warning]No rows returned.[/warning]")
        return
    table = Table(title=title or None, show_lines=False)
    for header in matrix[0]:
        table.add_column(header, overflow="fold")
    for row in matrix[1:]:
        table.add_row(*row)
    console.print(table)
