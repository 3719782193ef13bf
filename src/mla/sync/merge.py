"""
Merge an imported database into the current one.

Series are matched by id and the imported copy wins at series granularity:
a matching series gets the imported name and the imported arc list
wholesale. Arcs that only existed locally in a replaced series are gone
afterwards; ``MergeResult.dropped_arcs`` lists them so the caller can tell
the user to review before uploading.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from mla.core.models import Root


@dataclass
class MergeResult:
    """Outcome of a merge."""

    root: Root
    added: list[str] = field(default_factory=list)
    replaced: list[str] = field(default_factory=list)
    dropped_arcs: list[tuple[str, str]] = field(default_factory=list)

    @property
    def has_data_loss(self) -> bool:
        return bool(self.dropped_arcs)


def merge_roots(current: Root, incoming: Root) -> MergeResult:
    """Merge ``incoming`` into a copy of ``current``.

    Neither input is modified.

    Args:
        current: The live database
        incoming: The imported database

    Returns:
        MergeResult with the merged root and a record of what changed
    """
    merged = current.copy()
    result = MergeResult(root=merged)
    index = {series.id: series for series in merged.series}

    for incoming_series in incoming.series:
        target = index.get(incoming_series.id)
        if target is None:
            added = copy.deepcopy(incoming_series)
            merged.series.append(added)
            index[added.id] = added
            result.added.append(added.id)
            continue

        incoming_arc_ids = {arc.id for arc in incoming_series.arcs}
        result.dropped_arcs.extend(
            (target.id, arc.id) for arc in target.arcs if arc.id not in incoming_arc_ids
        )
        target.name = incoming_series.name
        target.arcs = copy.deepcopy(incoming_series.arcs)
        result.replaced.append(target.id)

    return result


def merge(current: Root, incoming: Root) -> Root:
    """Merge and return only the resulting tree."""
    return merge_roots(current, incoming).root
