"""Arc health classification.

An arc is OK when every mapping row names a manga chapter, a light-novel
passage and an anime episode. Rows with a blank reference are Gaps; an arc
with no rows at all is also Gaps.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any

from mla.core.models import REFERENCE_FIELDS, Arc, Root


class HealthStatus(str, Enum):
    """Alignment health of an arc."""

    OK = "OK"
    GAPS = "Gaps"
    MISMATCHED = "Mismatched"


@dataclass(frozen=True)
class ArcHealth:
    """Result of classifying one arc."""

    status: HealthStatus
    label: str
    missing_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "label": self.label,
            "missingCount": self.missing_count,
        }


def field_coverage(arc: Arc) -> dict[str, int]:
    """Count mappings with a non-blank value, per reference field."""
    counts = {name: 0 for name in REFERENCE_FIELDS}
    for mapping in arc.mappings:
        for name in REFERENCE_FIELDS:
            if getattr(mapping, name).strip():
                counts[name] += 1
    return counts


def compute_arc_health(arc: Arc) -> ArcHealth:
    """Classify an arc as OK, Gaps or Mismatched."""
    if not arc.mappings:
        return ArcHealth(HealthStatus.GAPS, "Gaps · No mappings yet", 0)

    missing = sum(1 for mapping in arc.mappings if not mapping.is_complete())
    counts = field_coverage(arc)

    if missing > 0:
        plural = "" if missing == 1 else "s"
        return ArcHealth(HealthStatus.GAPS, f"Gaps · {missing} incomplete row{plural}", missing)
    # Unreachable while any blank field marks its row incomplete; kept as is
    if len(set(counts.values())) > 1:
        return ArcHealth(HealthStatus.MISMATCHED, "Mismatched · Uneven chapter counts", 0)
    return ArcHealth(HealthStatus.OK, "OK · Fully aligned", 0)


def summarize_health(root: Root) -> dict[str, int]:
    """Count arcs per health status across the whole tree."""
    totals = Counter(compute_arc_health(arc).status for _series, arc in root.iter_arcs())
    return {status.value: totals.get(status, 0) for status in HealthStatus}
