"""CLI commands for exporting and importing the database as JSON."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from rich.console import Console

from mla.core.errors import ValidationError
from mla.core.models import Root
from mla.core.prompts import fail, load_store, warning_message
from mla.core.store import EXPORT_FILENAME
from mla.sync.merge import merge_roots

logger = logging.getLogger(__name__)

console = Console()


@click.group(name="data")
def data() -> None:
    """Export or import the arc database as JSON."""
    pass


@data.command(name="export")
@click.argument("output", required=False, default=EXPORT_FILENAME)
def export_cmd(output: str) -> None:
    """Write the database to OUTPUT (default mla-data.json, '-' for stdout)."""
    store = load_store()
    text = store.export_json()

    if output == "-":
        click.echo(text)
        return

    path = Path(output)
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        fail(f"Cannot write {path}: {e}")
    stats = store.stats()
    console.print(
        f"[green]Exported[/green] {stats['series']} series / {stats['arcs']} arcs to {path}"
    )


def read_import_file(path: Path) -> Root:
    """Parse and shape-check an import file.

    Raises:
        ValidationError: If the file is not JSON or not an MLA database
    """
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValidationError(f"Failed to import data. Please check the JSON file. ({e})") from e
    return Root.from_dict(payload)


@data.command(name="import")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def import_cmd(input_file: Path) -> None:
    """Merge INPUT_FILE into the database.

    Series with a matching id are replaced wholesale by the imported copy
    (name and arcs); new series are appended; others are kept.
    """
    store = load_store()
    try:
        incoming = read_import_file(input_file)
    except ValidationError as e:
        logger.debug("Import of %s rejected", input_file, exc_info=True)
        fail(e.message)

    result = merge_roots(store.load(), incoming)
    store.replace(result.root)

    console.print(
        f"[green]Import complete.[/green] {len(result.added)} added, "
        f"{len(result.replaced)} replaced."
    )
    if result.has_data_loss:
        warning_message(f"{len(result.dropped_arcs)} local-only arc(s) were replaced:")
        for series_id, arc_id in result.dropped_arcs:
            console.print(f"  [dim]{series_id}:{arc_id}[/dim]")
    console.print("[yellow]Review changes before uploading.[/yellow]")
