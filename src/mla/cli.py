"""
Main CLI dispatcher for mla.

Usage:
    mla init                              # Initialize .mla/ directory
    mla series|arc|mapping ...            # Edit the database
    mla health|search|recommend ...       # Inspect alignment
    mla data export|import                # Exchange JSON files
    mla publish push                      # Commit the snapshot to GitHub
"""

import logging

import click
from rich.console import Console

from mla import __version__

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="mla")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool) -> None:
    """Manga / light novel / anime arc linker.

    Track how chapters, volumes and episodes of each adaptation line up,
    and find arcs with incomplete alignment.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.option("--force", "-f", is_flag=True, help="Reinitialize an existing .mla/ directory")
@click.option("--empty", is_flag=True, help="Start with an empty database instead of the example data")
def init(force: bool, empty: bool) -> None:
    """Initialize .mla/ directory structure in the current directory."""
    from pathlib import Path

    from mla.core.config import MLA_DIRNAME, get_paths
    from mla.core.models import Root
    from mla.core.store import DataStore

    paths = get_paths(Path.cwd())

    if paths.mla_dir.exists() and not force:
        console.print(f"[yellow]{MLA_DIRNAME}/ directory already exists at {paths.mla_dir}[/yellow]")
        console.print("[dim]Use --force to reinitialize.[/dim]")
        return

    console.print(f"[cyan]Initializing {MLA_DIRNAME}/ directory at {paths.root}[/cyan]")
    paths.backups.mkdir(parents=True, exist_ok=True)

    store = DataStore(paths.db, paths.backups)
    if empty:
        store.replace(Root())
    else:
        store.load()
    console.print(f"  [green]Created[/green] {paths.db.relative_to(paths.root)}")

    console.print()
    console.print(f"[green]Done![/green] {MLA_DIRNAME}/ directory initialized.")


# Import and register command groups (imports after main definition intentional)
from mla.backup.commands import backup  # noqa: E402
from mla.catalog.commands import arc, mapping, series  # noqa: E402
from mla.config.commands import config  # noqa: E402
from mla.health.commands import health  # noqa: E402
from mla.publish.commands import publish  # noqa: E402
from mla.recommend.commands import recommend  # noqa: E402
from mla.search.commands import search  # noqa: E402
from mla.sync.commands import data  # noqa: E402

main.add_command(series)
main.add_command(arc)
main.add_command(mapping)
main.add_command(health)
main.add_command(search)
main.add_command(recommend)
main.add_command(data)
main.add_command(publish)
main.add_command(backup)
main.add_command(config)


if __name__ == "__main__":
    main()
