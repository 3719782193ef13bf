"""
Substring search across the arc database.

Three granularities are checked independently: series names, arc
title/summary, and every text field of a mapping row. Each hit yields its
own Match, so one arc can show up as an Arc match and again through its
mappings. Results come out in tree order, not ranked.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from mla.core.models import MAPPING_FIELDS, Root

# The CLI shows at most this many; search() itself is unbounded
DEFAULT_RESULT_LIMIT = 50

SUMMARY_PREVIEW_LENGTH = 140


@dataclass(frozen=True)
class Match:
    """A single search hit."""

    kind: str  # "Series", "Arc" or "Mapping"
    series_id: str
    arc_id: str | None
    mapping_id: str | None
    title: str
    description: str

    @property
    def locator(self) -> str:
        """``series:arc`` address used by the mapping commands."""
        return f"{self.series_id}:{self.arc_id or ''}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.kind,
            "seriesId": self.series_id,
            "arcId": self.arc_id,
            "mappingId": self.mapping_id,
            "title": self.title,
            "description": self.description,
        }


def normalize_term(raw: str | None) -> str:
    """Trim and case-fold a query."""
    return (raw or "").strip().casefold()


def _contains(value: str | None, term: str) -> bool:
    return bool(value) and term in value.casefold()


def truncate(text: str, length: int) -> str:
    if len(text) <= length:
        return text
    return f"{text[:length - 1]}…"


def search(root: Root, term: str) -> Iterator[Match]:
    """Yield matches for an already normalized term.

    An empty term yields nothing. Call again to restart.
    """
    if not term:
        return

    for series in root.series:
        if _contains(series.name, term):
            count = len(series.arcs)
            yield Match(
                kind="Series",
                series_id=series.id,
                arc_id=series.arcs[0].id if series.arcs else None,
                mapping_id=None,
                title=series.name,
                description=f"{count} arc{'' if count == 1 else 's'}",
            )

        for arc in series.arcs:
            if _contains(arc.title, term) or _contains(arc.summary, term):
                yield Match(
                    kind="Arc",
                    series_id=series.id,
                    arc_id=arc.id,
                    mapping_id=None,
                    title=f"{series.name} · {arc.title}",
                    description=(
                        truncate(arc.summary, SUMMARY_PREVIEW_LENGTH) if arc.summary else "No summary yet."
                    ),
                )

            for mapping in arc.mappings:
                if any(_contains(getattr(mapping, name), term) for name in MAPPING_FIELDS):
                    yield Match(
                        kind="Mapping",
                        series_id=series.id,
                        arc_id=arc.id,
                        mapping_id=mapping.id,
                        title=mapping.label or "Untitled Mapping",
                        description=f"{series.name} · {arc.title}",
                    )
