"""CLI commands for editing series, arcs and mapping rows."""

from __future__ import annotations

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mla.core.errors import MLAError
from mla.core.models import MAPPING_FIELDS
from mla.core.prompts import confirm, fail, load_store

console = Console()

HEALTH_STYLES = {"OK": "green", "Gaps": "yellow", "Mismatched": "red"}


def _stars(rating: int) -> str:
    return "★" * rating + "☆" * (5 - rating)


def _cell(value: str) -> str:
    return value if value.strip() else "[dim]—[/dim]"


# ----------------------------------------------------------------------
# series
# ----------------------------------------------------------------------


@click.group(name="series")
def series() -> None:
    """Manage franchise titles."""
    pass


@series.command(name="list")
def list_series() -> None:
    """List all series with arc counts."""
    store = load_store()
    root = store.load()

    if not root.series:
        console.print("[yellow]No series yet. Add one with 'mla series add NAME'.[/yellow]")
        return

    table = Table(title=f"Series ({len(root.series)})")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Arcs", justify="right", style="green")

    for entry in root.series:
        table.add_row(entry.id, entry.name, str(len(entry.arcs)))

    console.print(table)


@series.command(name="add")
@click.argument("name")
def add_series(name: str) -> None:
    """Create a new series."""
    store = load_store()
    try:
        created = store.add_series(name)
    except MLAError as e:
        fail(e.message)
    console.print(f"[green]Added series[/green] {created.name} [dim]({created.id})[/dim]")


@series.command(name="remove")
@click.argument("series_id")
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation")
def remove_series(series_id: str, yes: bool) -> None:
    """Delete a series and all of its arcs."""
    store = load_store()
    target = store.find_series(series_id)
    if target is None:
        fail(f"Series not found: {series_id}")

    if not confirm(f"Remove '{target.name}' and its {len(target.arcs)} arc(s)?", auto_yes=yes):
        console.print("[yellow]Cancelled[/yellow]")
        return

    store.remove_series(series_id)
    console.print(f"[green]Removed series[/green] {target.name}")


# ----------------------------------------------------------------------
# arc
# ----------------------------------------------------------------------


@click.group(name="arc")
def arc() -> None:
    """Manage story arcs within a series."""
    pass


@arc.command(name="list")
@click.argument("series_id")
def list_arcs(series_id: str) -> None:
    """List the arcs of a series with their health."""
    from mla.health.checks import compute_arc_health

    store = load_store()
    target = store.find_series(series_id)
    if target is None:
        fail(f"Series not found: {series_id}")

    if not target.arcs:
        console.print(f"[yellow]No arcs yet in {target.name}.[/yellow]")
        return

    table = Table(title=target.name)
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Rating")
    table.add_column("Rows", justify="right")
    table.add_column("Health")

    for item in target.arcs:
        health = compute_arc_health(item)
        style = HEALTH_STYLES[health.status.value]
        table.add_row(
            item.id,
            item.title,
            _stars(item.effective_rating),
            str(len(item.mappings)),
            f"[{style}]{health.label}[/{style}]",
        )

    console.print(table)


@arc.command(name="show")
@click.argument("series_id")
@click.argument("arc_id")
def show_arc(series_id: str, arc_id: str) -> None:
    """Show an arc's metadata and mapping rows."""
    from mla.health.checks import compute_arc_health

    store = load_store()
    try:
        target = store.get_arc(series_id, arc_id)
    except MLAError as e:
        fail(e.message)

    health = compute_arc_health(target)
    style = HEALTH_STYLES[health.status.value]
    console.print(Panel(
        f"[bold]{target.title}[/bold]\n"
        f"{target.summary or '[dim]No summary yet.[/dim]'}\n\n"
        f"Rating: {_stars(target.effective_rating)}\n"
        f"Health: [{style}]{health.label}[/{style}]",
        title=f"{series_id}:{arc_id}",
    ))

    if not target.mappings:
        console.print("[dim]No mappings yet. Use 'mla mapping add' to begin aligning content.[/dim]")
        return

    table = Table(title="Mappings")
    table.add_column("ID", style="dim")
    for name in MAPPING_FIELDS:
        table.add_column(name.capitalize() if name != "ln" else "LN")

    for row in target.mappings:
        table.add_row(row.id, *(_cell(getattr(row, name)) for name in MAPPING_FIELDS))

    console.print(table)


@arc.command(name="add")
@click.argument("series_id")
@click.argument("title")
@click.option("-s", "--summary", default="", help="Short summary")
@click.option("-r", "--rating", default=None, help="Rating 1-5 (default 3)")
def add_arc(series_id: str, title: str, summary: str, rating: str | None) -> None:
    """Add an arc to a series."""
    store = load_store()
    try:
        created = store.add_arc(series_id, title, summary=summary, rating=rating)
    except MLAError as e:
        fail(e.message)
    console.print(
        f"[green]Added arc[/green] {created.title} [dim]({series_id}:{created.id})[/dim] "
        f"rated {created.effective_rating}/5"
    )


@arc.command(name="edit")
@click.argument("series_id")
@click.argument("arc_id")
@click.option("-t", "--title", default=None, help="New title")
@click.option("-s", "--summary", default=None, help="New summary")
@click.option("-r", "--rating", default=None, help="New rating 1-5")
def edit_arc(
    series_id: str,
    arc_id: str,
    title: str | None,
    summary: str | None,
    rating: str | None,
) -> None:
    """Edit an arc's title, summary or rating."""
    if title is None and summary is None and rating is None:
        fail("Nothing to change: pass --title, --summary or --rating")

    store = load_store()
    try:
        updated = store.update_arc(series_id, arc_id, title=title, summary=summary, rating=rating)
    except MLAError as e:
        fail(e.message)
    console.print(f"[green]Updated arc[/green] {updated.title} (rating {updated.effective_rating}/5)")


@arc.command(name="remove")
@click.argument("series_id")
@click.argument("arc_id")
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation")
def remove_arc(series_id: str, arc_id: str, yes: bool) -> None:
    """Delete an arc and its mapping rows."""
    store = load_store()
    target = store.find_arc(series_id, arc_id)
    if target is None:
        fail(f"Arc not found: {series_id}:{arc_id}")

    if not confirm(f"Remove arc '{target.title}'?", auto_yes=yes):
        console.print("[yellow]Cancelled[/yellow]")
        return

    store.remove_arc(series_id, arc_id)
    console.print(f"[green]Removed arc[/green] {target.title}")


# ----------------------------------------------------------------------
# mapping
# ----------------------------------------------------------------------


@click.group(name="mapping")
def mapping() -> None:
    """Manage alignment rows within an arc."""
    pass


@mapping.command(name="add")
@click.argument("series_id")
@click.argument("arc_id")
@click.option("--label", default="", help="Story beat label")
@click.option("--manga", default="", help="Manga chapter reference")
@click.option("--ln", default="", help="Light novel volume/chapter reference")
@click.option("--anime", default="", help="Anime episode reference")
@click.option("--notes", default="", help="Adaptation notes")
def add_mapping(
    series_id: str,
    arc_id: str,
    label: str,
    manga: str,
    ln: str,
    anime: str,
    notes: str,
) -> None:
    """Append a mapping row to an arc."""
    from mla.health.checks import compute_arc_health

    store = load_store()
    try:
        created = store.add_mapping(
            series_id, arc_id, label=label, manga=manga, ln=ln, anime=anime, notes=notes
        )
        health = compute_arc_health(store.get_arc(series_id, arc_id))
    except MLAError as e:
        fail(e.message)
    console.print(f"[green]Added mapping[/green] {created.id}")
    console.print(f"[dim]Arc health: {health.label}[/dim]")


@mapping.command(name="set")
@click.argument("series_id")
@click.argument("arc_id")
@click.argument("mapping_id")
@click.argument("field_name", metavar="FIELD", type=click.Choice(MAPPING_FIELDS))
@click.argument("value")
def set_mapping(series_id: str, arc_id: str, mapping_id: str, field_name: str, value: str) -> None:
    """Set one field of a mapping row.

    Pass an empty string as VALUE to mark the field as not yet mapped.
    """
    from mla.health.checks import compute_arc_health

    store = load_store()
    try:
        store.update_mapping(series_id, arc_id, mapping_id, field_name, value)
        health = compute_arc_health(store.get_arc(series_id, arc_id))
    except MLAError as e:
        fail(e.message)
    console.print(f"[green]Set[/green] {mapping_id}.{field_name} = {value!r}")
    console.print(f"[dim]Arc health: {health.label}[/dim]")


@mapping.command(name="remove")
@click.argument("series_id")
@click.argument("arc_id")
@click.argument("mapping_id")
def remove_mapping(series_id: str, arc_id: str, mapping_id: str) -> None:
    """Delete a mapping row."""
    store = load_store()
    try:
        removed = store.remove_mapping(series_id, arc_id, mapping_id)
    except MLAError as e:
        fail(e.message)
    console.print(f"[green]Removed mapping[/green] {removed.label or removed.id}")
