"""
Triage buckets for arcs that need attention.

Three independent passes over every (series, arc) pair:

- gaps: arcs classified Gaps, most incomplete rows first
- mismatches: arcs classified Mismatched, most rows first
- top rated: arcs rated 4 or 5, best first, then most rows

Sorts are stable, so ties keep tree order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mla.core.models import Arc, Root, Series
from mla.health.checks import ArcHealth, HealthStatus, compute_arc_health

TOP_RATED_THRESHOLD = 4
DEFAULT_BUCKET_LIMIT = 10


@dataclass
class RankedArc:
    """An arc with its series and health."""

    series: Series
    arc: Arc
    health: ArcHealth

    @property
    def mapping_count(self) -> int:
        return len(self.arc.mappings)

    @property
    def heading(self) -> str:
        return f"{self.series.name} · {self.arc.title}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "seriesId": self.series.id,
            "arcId": self.arc.id,
            "title": self.heading,
            "rating": self.arc.effective_rating,
            "mappings": self.mapping_count,
            "health": self.health.to_dict(),
        }


def describe_gap(item: RankedArc) -> str:
    missing = item.health.missing_count
    if missing:
        label = f"{missing} incomplete mapping{'' if missing == 1 else 's'}"
    else:
        label = "Needs initial mappings"
    return f"{label} · {item.mapping_count} rows total"


def describe_mismatch(item: RankedArc) -> str:
    return f"Uneven coverage · {item.mapping_count} rows"


def describe_top_rated(item: RankedArc) -> str:
    return f"Rating {item.arc.effective_rating}/5 · {item.mapping_count} mappings"


@dataclass
class Recommendations:
    """Fully sorted buckets."""

    gaps: list[RankedArc] = field(default_factory=list)
    mismatches: list[RankedArc] = field(default_factory=list)
    top_rated: list[RankedArc] = field(default_factory=list)

    def top(self, limit: int = DEFAULT_BUCKET_LIMIT) -> Recommendations:
        """Truncate every bucket to ``limit`` entries."""
        return Recommendations(
            gaps=self.gaps[:limit],
            mismatches=self.mismatches[:limit],
            top_rated=self.top_rated[:limit],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "gaps": [item.to_dict() for item in self.gaps],
            "mismatches": [item.to_dict() for item in self.mismatches],
            "topRated": [item.to_dict() for item in self.top_rated],
        }


def rank_arcs(root: Root) -> Recommendations:
    """Classify and sort every arc into triage buckets."""
    ranked = [
        RankedArc(series=series, arc=arc, health=compute_arc_health(arc))
        for series, arc in root.iter_arcs()
    ]

    gaps = [item for item in ranked if item.health.status is HealthStatus.GAPS]
    mismatches = [item for item in ranked if item.health.status is HealthStatus.MISMATCHED]
    top_rated = [item for item in ranked if item.arc.effective_rating >= TOP_RATED_THRESHOLD]

    gaps.sort(key=lambda item: item.health.missing_count, reverse=True)
    mismatches.sort(key=lambda item: item.mapping_count, reverse=True)
    top_rated.sort(key=lambda item: (item.arc.effective_rating, item.mapping_count), reverse=True)

    return Recommendations(gaps=gaps, mismatches=mismatches, top_rated=top_rated)
