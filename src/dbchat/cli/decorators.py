from functools import wraps
import traceback

import typer

from dbchat.common.errors import DbChatError
from .console import console, print_error


def handle_cli_errors(func):
    """
    Decorator to wrap CLI commands with unified error handling.

    - DbChatError: Prints a clean red error message.
    - KeyboardInterrupt: Exits gracefully.
    - Unexpected Exception: Prints stack trace and error.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DbChatError as e:
            print_error(e.message)
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user.[/yellow]")
            raise typer.Exit(code=130)  # Standard SIGINT exit code
        except Exception as e:
            console.print(f"[bold red]Unexpected Error:[/bold red] {e}")
            console.print(traceback.format_exc())
            raise typer.Exit(code=1)

    return wrapper
