"""CLI commands for arc health."""

from __future__ import annotations

import json as json_module

import click
from rich.console import Console
from rich.table import Table

from mla.core.errors import MLAError
from mla.core.prompts import fail, load_store

console = Console()

STATUS_STYLES = {"OK": "green", "Gaps": "yellow", "Mismatched": "red"}


@click.group(name="health")
def health() -> None:
    """Alignment health: OK, Gaps, Mismatched."""
    pass


@health.command(name="list")
@click.option(
    "-s", "--status",
    type=click.Choice(["OK", "Gaps", "Mismatched"]),
    help="Only arcs with this status",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_cmd(status: str | None, as_json: bool) -> None:
    """Classify every arc in the database."""
    from mla.health.checks import compute_arc_health

    root = load_store().load()
    rows = []
    for series, arc in root.iter_arcs():
        result = compute_arc_health(arc)
        if status and result.status.value != status:
            continue
        rows.append((series, arc, result))

    if as_json:
        output = [
            {"seriesId": s.id, "arcId": a.id, "title": a.title, **h.to_dict()}
            for s, a, h in rows
        ]
        click.echo(json_module.dumps(output, indent=2, ensure_ascii=False))
        return

    if not rows:
        console.print("[green]No arcs to report.[/green]")
        return

    table = Table(title=f"Arc Health ({len(rows)})")
    table.add_column("Series", style="cyan")
    table.add_column("Arc", no_wrap=False)
    table.add_column("Rows", justify="right")
    table.add_column("Health")

    for series, arc, result in rows:
        style = STATUS_STYLES[result.status.value]
        table.add_row(series.name, arc.title, str(len(arc.mappings)), f"[{style}]{result.label}[/{style}]")

    console.print(table)


@health.command(name="arc")
@click.argument("series_id")
@click.argument("arc_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def arc_cmd(series_id: str, arc_id: str, as_json: bool) -> None:
    """Classify one arc and show its per-field coverage."""
    from mla.health.checks import compute_arc_health, field_coverage

    store = load_store()
    try:
        arc = store.get_arc(series_id, arc_id)
    except MLAError as e:
        fail(e.message)

    result = compute_arc_health(arc)
    coverage = field_coverage(arc)

    if as_json:
        click.echo(json_module.dumps({**result.to_dict(), "coverage": coverage}, indent=2))
        return

    style = STATUS_STYLES[result.status.value]
    console.print(f"[bold]{arc.title}[/bold]: [{style}]{result.label}[/{style}]")
    total = len(arc.mappings)
    for name, count in coverage.items():
        console.print(f"  {name:<6} {count}/{total}")


@health.command(name="summary")
def summary_cmd() -> None:
    """Count arcs per health status."""
    from mla.health.checks import summarize_health

    store = load_store()
    totals = summarize_health(store.load())
    stats = store.stats()

    console.print(
        f"[cyan]{stats['series']}[/cyan] series, [cyan]{stats['arcs']}[/cyan] arcs, "
        f"[cyan]{stats['mappings']}[/cyan] mapping rows"
    )
    for status, count in totals.items():
        style = STATUS_STYLES[status]
        console.print(f"  [{style}]{status:<10}[/{style}] {count}")
