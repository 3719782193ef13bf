"""
Data model for the arc database.

The tree is Root -> Series -> Arc -> Mapping / Post. Every record converts
to and from the JSON shape stored in the snapshot file, so a document that
passes ``validate_root_payload`` round-trips unchanged.
"""

from __future__ import annotations

import copy
import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from mla.core.errors import ValidationError

# Mapping fields that hold a chapter / volume / episode reference
REFERENCE_FIELDS = ("manga", "ln", "anime")

# All editable mapping fields, in display order
MAPPING_FIELDS = ("label", "manga", "ln", "anime", "notes")

POST_KEYS = ("id", "parentId", "text", "ts")

MIN_RATING = 1
MAX_RATING = 5


def clamp_rating(value: Any, default: int) -> int:
    """Coerce a rating input into 1..5.

    Unparsable or NaN input yields ``default``; numbers are clamped and
    rounded half up (``2.5`` -> ``3``).
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    number = min(MAX_RATING, max(MIN_RATING, number))
    return int(math.floor(number + 0.5))


def _text(value: Any) -> str:
    # JSON null means "not filled in"
    return "" if value is None else str(value)


def _require_mapping(value: Any, what: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValidationError(f"Invalid MLA data: {what} must be an object")
    return value


def _require_list(data: dict[str, Any], key: str, what: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValidationError(f"Invalid MLA data: {what}.{key} must be a list")
    return value


@dataclass
class Mapping:
    """One alignment row: a story beat across manga, light novel and anime."""

    id: str
    label: str = ""
    manga: str = ""
    ln: str = ""
    anime: str = ""
    notes: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> Mapping:
        data = _require_mapping(data, "mapping")
        return cls(
            id=_text(data.get("id")),
            label=_text(data.get("label")),
            manga=_text(data.get("manga")),
            ln=_text(data.get("ln")),
            anime=_text(data.get("anime")),
            notes=_text(data.get("notes")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "manga": self.manga,
            "ln": self.ln,
            "anime": self.anime,
            "notes": self.notes,
        }

    def is_complete(self) -> bool:
        """True when manga, ln and anime are all filled in."""
        return all(getattr(self, name).strip() for name in REFERENCE_FIELDS)


@dataclass
class Post:
    """A discussion entry attached to an arc. Carried through untouched.

    Keys are written back exactly as read: ``parentId`` only when the source
    had it, and unknown keys are kept in ``extra``.
    """

    id: str
    text: Any = ""
    ts: Any = 0
    parent_id: str | None = None
    has_parent_key: bool = field(default=True, repr=False)
    extra: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_dict(cls, data: Any) -> Post:
        data = _require_mapping(data, "post")
        return cls(
            id=_text(data.get("id")),
            text=data.get("text", ""),
            ts=data.get("ts", 0),
            parent_id=data.get("parentId"),
            has_parent_key="parentId" in data,
            extra={k: copy.deepcopy(v) for k, v in data.items() if k not in POST_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"id": self.id}
        if self.has_parent_key or self.parent_id is not None:
            result["parentId"] = self.parent_id
        result["text"] = self.text
        result["ts"] = self.ts
        result.update(copy.deepcopy(self.extra))
        return result


@dataclass
class Arc:
    """A bounded story segment; the unit health is evaluated on."""

    id: str
    title: str
    summary: str = ""
    rating: Any = 3
    mappings: list[Mapping] = field(default_factory=list)
    chat: list[Post] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Arc:
        data = _require_mapping(data, "arc")
        return cls(
            id=_text(data.get("id")),
            title=_text(data.get("title")),
            summary=_text(data.get("summary")),
            rating=data.get("rating", 3),
            mappings=[Mapping.from_dict(m) for m in _require_list(data, "mappings", "arc")],
            chat=[Post.from_dict(p) for p in _require_list(data, "chat", "arc")],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "rating": self.rating,
            "mappings": [m.to_dict() for m in self.mappings],
            "chat": [p.to_dict() for p in self.chat],
        }

    @property
    def effective_rating(self) -> int:
        """Stored rating as shown and ranked: clamped to 1..5, 1 when unusable.

        The stored value is kept as read so the snapshot round-trips.
        """
        return clamp_rating(self.rating, MIN_RATING)

    def find_mapping(self, mapping_id: str) -> Mapping | None:
        return next((m for m in self.mappings if m.id == mapping_id), None)


@dataclass
class Series:
    """A franchise title and its ordered arcs."""

    id: str
    name: str
    arcs: list[Arc] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Series:
        data = _require_mapping(data, "series")
        return cls(
            id=_text(data.get("id")),
            name=_text(data.get("name")),
            arcs=[Arc.from_dict(a) for a in _require_list(data, "arcs", "series")],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "arcs": [a.to_dict() for a in self.arcs],
        }

    def find_arc(self, arc_id: str) -> Arc | None:
        return next((a for a in self.arcs if a.id == arc_id), None)


@dataclass
class Root:
    """The whole database."""

    series: list[Series] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> Root:
        data = validate_root_payload(data)
        return cls(series=[Series.from_dict(s) for s in data["series"]])

    def to_dict(self) -> dict[str, Any]:
        return {"series": [s.to_dict() for s in self.series]}

    def copy(self) -> Root:
        """Deep copy; the result shares no records with this tree."""
        return copy.deepcopy(self)

    def iter_arcs(self) -> Iterator[tuple[Series, Arc]]:
        """Iterate over (series, arc) pairs in tree order."""
        for series in self.series:
            for arc in series.arcs:
                yield series, arc


def validate_root_payload(data: Any) -> dict[str, Any]:
    """Check the top-level snapshot shape.

    Args:
        data: Parsed JSON document

    Returns:
        The same document, typed as a dict

    Raises:
        ValidationError: If ``series`` is missing or not a list
    """
    if not isinstance(data, dict) or not isinstance(data.get("series"), list):
        raise ValidationError("Invalid MLA data: expected an object with a 'series' list")
    return data
