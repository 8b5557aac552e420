"""Decorators for nodefs CLI commands."""

import functools
import logging
from typing import Any, Callable

import typer
from rich.console import Console
from rich.markup import escape

from nodefs.vfs.errors import InvalidPathError, SelfContainmentError, UnsupportedOperationError

logger = logging.getLogger(__name__)
console = Console()


def handle_vfs_errors(func: Callable) -> Callable:
    """
    Decorator to handle common VFS operation errors.

    Centralizes error handling for:
    - InvalidPathError: Malformed paths
    - SelfContainmentError: Copy or move onto a nested location
    - UnsupportedOperationError: Backend lacks a capability
    - FileNotFoundError / OSError: Storage failures
    - General exceptions: Unexpected errors
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except InvalidPathError as e:
            console.print(f"[bold red]Error:[/bold red] Invalid path: {escape(str(e))}")
            raise typer.Exit(code=1)
        except SelfContainmentError as e:
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)
        except UnsupportedOperationError as e:
            console.print(f"[bold red]Error:[/bold red] Not supported: {escape(str(e))}")
            raise typer.Exit(code=1)
        except FileNotFoundError as e:
            console.print(f"[bold red]Error:[/bold red] Not found: {escape(str(e))}")
            raise typer.Exit(code=1)
        except PermissionError as e:
            console.print(f"[bold red]Error:[/bold red] Permission denied: {escape(str(e))}")
            raise typer.Exit(code=1)
        except OSError as e:
            console.print(f"[bold red]Error:[/bold red] I/O failure: {escape(str(e))}")
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(code=130)
        except typer.Exit:
            raise
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            console.print(f"[bold red]Unexpected error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

    return wrapper
