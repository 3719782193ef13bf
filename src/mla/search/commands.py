"""CLI command for searching the database."""

from __future__ import annotations

import itertools
import json as json_module

import click
from rich.console import Console
from rich.table import Table

from mla.core.prompts import load_store
from mla.search.index import DEFAULT_RESULT_LIMIT, normalize_term
from mla.search.index import search as search_root

console = Console()


@click.command(name="search")
@click.argument("term")
@click.option("-n", "--limit", type=int, default=DEFAULT_RESULT_LIMIT, show_default=True,
              help="Maximum matches to show")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def search(term: str, limit: int, as_json: bool) -> None:
    """Find series, arcs and mapping rows containing TERM (case-insensitive)."""
    normalized = normalize_term(term)
    if not normalized:
        console.print("[yellow]Enter a search term.[/yellow]")
        return

    root = load_store().load()
    matches = list(itertools.islice(search_root(root, normalized), limit))

    if as_json:
        click.echo(json_module.dumps([m.to_dict() for m in matches], indent=2, ensure_ascii=False))
        return

    if not matches:
        console.print("[yellow]No results. Try another phrase or check spelling.[/yellow]")
        return

    table = Table(title=f"Matches for '{term.strip()}' ({len(matches)})")
    table.add_column("Type", style="magenta")
    table.add_column("Title", style="bold")
    table.add_column("Details", no_wrap=False)
    table.add_column("Open", style="dim")

    for match in matches:
        table.add_row(match.kind, match.title, match.description, match.locator)

    console.print(table)
