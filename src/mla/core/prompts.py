"""
Interactive CLI helpers.

Confirmation prompts, status messages, and the error exit used by every
command group.
"""

from __future__ import annotations

from typing import NoReturn

from rich.console import Console
from rich.prompt import Confirm

from mla.core.errors import ConfigurationError
from mla.core.store import DataStore, open_store

console = Console()


def confirm(
    message: str,
    default: bool = False,
    auto_yes: bool = False,
) -> bool:
    """Ask for yes/no confirmation.

    Args:
        message: Question to ask
        default: Default value if user presses Enter
        auto_yes: If True, automatically return True without prompting

    Returns:
        True if confirmed, False otherwise
    """
    if auto_yes:
        console.print(f"{message} [auto-yes]")
        return True

    return bool(Confirm.ask(message, default=default))


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]ERROR:[/red] {message}")
    raise SystemExit(1)


def warning_message(message: str) -> None:
    console.print(f"[yellow]WARNING:[/yellow] {message}")


def load_store() -> DataStore:
    """Open and load the store for the current data root, or exit."""
    try:
        store = open_store()
    except FileNotFoundError as e:
        fail(str(e))
    except ConfigurationError as e:
        fail(e.message)
    store.load()
    return store
