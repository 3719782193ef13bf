"""CLI command for arc triage recommendations."""

from __future__ import annotations

import json as json_module
from collections.abc import Callable

import click
from rich.console import Console

from mla.core.prompts import load_store
from mla.recommend.ranker import (
    DEFAULT_BUCKET_LIMIT,
    RankedArc,
    describe_gap,
    describe_mismatch,
    describe_top_rated,
    rank_arcs,
)

console = Console()


def _print_bucket(title: str, items: list[RankedArc], describe: Callable[[RankedArc], str]) -> None:
    console.print(f"\n[bold cyan]{title}[/bold cyan]")
    if not items:
        console.print("  [dim]No items yet. Keep building your mappings![/dim]")
        return
    for item in items:
        console.print(f"  [bold]{item.heading}[/bold]")
        console.print(f"    [dim]{describe(item)} · {item.series.id}:{item.arc.id}[/dim]")


@click.command(name="recommend")
@click.option("-n", "--limit", type=int, default=DEFAULT_BUCKET_LIMIT, show_default=True,
              help="Maximum arcs per bucket")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def recommend(limit: int, as_json: bool) -> None:
    """Show arcs needing fixes, inconsistent arcs, and top-rated arcs."""
    buckets = rank_arcs(load_store().load()).top(limit)

    if as_json:
        click.echo(json_module.dumps(buckets.to_dict(), indent=2, ensure_ascii=False))
        return

    _print_bucket("Priority fixes", buckets.gaps, describe_gap)
    _print_bucket("Inconsistencies", buckets.mismatches, describe_mismatch)
    _print_bucket("Top rated", buckets.top_rated, describe_top_rated)
