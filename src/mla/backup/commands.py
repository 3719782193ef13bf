"""
Backup management CLI commands.

Backups of the snapshot are created automatically on every write.
"""

from __future__ import annotations

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mla.core.backup import list_backups, rollback_snapshot
from mla.core.config import get_paths
from mla.core.prompts import confirm, fail

console = Console()


def _format_age(days: float) -> str:
    """Format age in human-readable form."""
    if days < 1:
        hours = days * 24
        if hours < 1:
            return f"{int(hours * 60)}m ago"
        return f"{int(hours)}h ago"
    elif days < 7:
        return f"{int(days)}d ago"
    elif days < 30:
        return f"{int(days / 7)}w ago"
    return f"{int(days / 30)}mo ago"


def _snapshot_paths():
    try:
        paths = get_paths()
    except FileNotFoundError as e:
        fail(str(e))
    return paths.db, paths.backups


@click.group()
def backup() -> None:
    """List and restore snapshot backups."""
    pass


@backup.command(name="list")
@click.option("-n", "--limit", type=int, default=10, help="Maximum number of backups to show")
def list_cmd(limit: int) -> None:
    """List available backups, newest first."""
    db_path, backup_dir = _snapshot_paths()
    backups = list_backups(backup_dir, db_path.stem)

    if not backups:
        console.print(f"[dim]No backups found for {db_path.stem}[/dim]")
        return

    table = Table(title=f"[bold]{db_path.stem}[/bold] ({len(backups)} backups)", header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Date", style="green")
    table.add_column("Age", style="yellow", justify="right")
    table.add_column("Size", style="blue", justify="right")
    table.add_column("Filename", style="dim")

    for i, info in enumerate(backups[:limit]):
        table.add_row(
            str(i),
            info.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
            _format_age(info.age_days),
            info.size_human,
            info.path.name,
        )

    console.print(table)
    hidden = len(backups) - limit
    if hidden > 0:
        console.print(f"  [dim]... and {hidden} older backups[/dim]")


@backup.command(name="rollback")
@click.option("-i", "--index", type=int, default=0, help="Backup to restore (0 = most recent)")
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation")
def rollback_cmd(index: int, yes: bool) -> None:
    """Restore the snapshot from a backup.

    The current snapshot is backed up first.
    """
    db_path, backup_dir = _snapshot_paths()
    backups = list_backups(backup_dir, db_path.stem)
    if not backups:
        fail(f"No backups found for {db_path.stem}")
    if index >= len(backups):
        fail(f"Backup index {index} out of range (only {len(backups)} backups)")

    chosen = backups[index]
    console.print(Panel(
        f"[bold]Restore from:[/bold] {chosen.path.name}\n"
        f"[bold]Backup date:[/bold] {chosen.timestamp.strftime('%Y-%m-%d %H:%M:%S')}\n"
        f"[bold]Backup age:[/bold] {_format_age(chosen.age_days)}",
        title="Rollback Preview",
    ))

    if not confirm("Proceed with rollback?", auto_yes=yes):
        console.print("[yellow]Cancelled[/yellow]")
        return

    restored = rollback_snapshot(db_path, backup_dir, index)
    console.print(f"[green]Restored[/green] {db_path.name} from {restored.name}")
