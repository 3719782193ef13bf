"""
Data store for the arc database.

Owns the in-memory Root tree and its durable JSON snapshot. Every mutation
is applied in place and then persisted. The in-memory tree stays
authoritative when a write fails: the failure is logged and the next
successful persist catches the snapshot up.

Lookups are linear scans. A database holds tens of series and a few hundred
arcs, which does not justify an index.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from mla.core.backup import DEFAULT_KEEP_COUNT, DEFAULT_KEEP_DAYS, safe_write_json
from mla.core.config import get_config_value, get_paths
from mla.core.errors import ConfigurationError, NotFoundError, ValidationError
from mla.core.ids import create_id
from mla.core.models import MAPPING_FIELDS, Arc, Mapping, Root, Series, clamp_rating
from mla.core.sample import sample_root

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "mla-data.json"

DEFAULT_NEW_RATING = 3
DEFAULT_EDIT_RATING = 1


def _detach(items: list, record: Any) -> None:
    # By identity; two records may compare equal
    for i, item in enumerate(items):
        if item is record:
            del items[i]
            return


def _require_text(value: str | None, what: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{what} is required")
    return text


class DataStore:
    """Manages mla_db.json and the live Root tree."""

    def __init__(
        self,
        db_path: Path | None = None,
        backup_dir: Path | None = None,
        keep_backups: int = DEFAULT_KEEP_COUNT,
        keep_days: int | None = DEFAULT_KEEP_DAYS,
    ):
        """Initialize the store.

        Args:
            db_path: Snapshot path (uses .mla/mla_db.json if not provided)
            backup_dir: Backup directory (defaults to .mla/backups beside the snapshot)
            keep_backups: Number of newest backups to keep
            keep_days: Age limit for older backups
        """
        if db_path is None:
            paths = get_paths()
            db_path = paths.db
            backup_dir = backup_dir or paths.backups
        self.db_path = Path(db_path)
        self.backup_dir = Path(backup_dir) if backup_dir else self.db_path.parent / "backups"
        self.keep_backups = keep_backups
        self.keep_days = keep_days
        self._root: Root | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def loaded(self) -> bool:
        return self._root is not None

    def load(self) -> Root:
        """Return the live Root, reading the snapshot on first use.

        A missing, unreadable or malformed snapshot is replaced by the
        built-in example dataset, which is persisted right away. Never raises.
        """
        if self._root is not None:
            return self._root

        root = self._read_snapshot()
        if root is None:
            root = sample_root()
            self._root = root
            self.persist()
        else:
            self._root = root
        return root

    def _read_snapshot(self) -> Root | None:
        if not self.db_path.exists():
            logger.info("No snapshot at %s, starting from example data", self.db_path)
            return None
        try:
            with open(self.db_path, encoding="utf-8") as f:
                return Root.from_dict(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Failed to parse MLA snapshot %s, resetting: %s", self.db_path, e)
            return None

    def persist(self) -> bool:
        """Write the live Root to the snapshot.

        Returns:
            True on success, False if the write failed (logged, not raised)
        """
        if self._root is None:
            return False
        try:
            safe_write_json(
                self.db_path,
                self._root.to_dict(),
                backup_dir=self.backup_dir,
                keep_backups=self.keep_backups,
                keep_days=self.keep_days,
            )
        except (OSError, ValueError) as e:
            logger.error("Unable to persist MLA snapshot %s: %s", self.db_path, e)
            return False
        return True

    def replace(self, root: Root) -> bool:
        """Swap in a whole new tree (after import/merge) and persist it."""
        self._root = root
        return self.persist()

    def export_json(self) -> str:
        """Serialize the live Root as pretty-printed JSON."""
        return json.dumps(self.load().to_dict(), indent=2, ensure_ascii=False)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_series(self, series_id: str) -> Series | None:
        return next((s for s in self.load().series if s.id == series_id), None)

    def find_arc(self, series_id: str, arc_id: str) -> Arc | None:
        series = self.find_series(series_id)
        return series.find_arc(arc_id) if series else None

    def get_series(self, series_id: str) -> Series:
        """Like ``find_series`` but raises NotFoundError."""
        series = self.find_series(series_id)
        if series is None:
            raise NotFoundError(f"Series not found: {series_id}")
        return series

    def get_arc(self, series_id: str, arc_id: str) -> Arc:
        """Like ``find_arc`` but raises NotFoundError."""
        arc = self.get_series(series_id).find_arc(arc_id)
        if arc is None:
            raise NotFoundError(f"Arc not found: {series_id}:{arc_id}")
        return arc

    def get_mapping(self, series_id: str, arc_id: str, mapping_id: str) -> Mapping:
        mapping = self.get_arc(series_id, arc_id).find_mapping(mapping_id)
        if mapping is None:
            raise NotFoundError(f"Mapping not found: {mapping_id}")
        return mapping

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_series(self, name: str) -> Series:
        """Create an empty series."""
        series = Series(id=create_id("series"), name=_require_text(name, "Series name"))
        self.load().series.append(series)
        self.persist()
        return series

    def remove_series(self, series_id: str) -> Series:
        root = self.load()
        series = self.get_series(series_id)
        _detach(root.series, series)
        self.persist()
        return series

    def add_arc(
        self,
        series_id: str,
        title: str,
        summary: str = "",
        rating: Any = None,
    ) -> Arc:
        """Create an arc in a series.

        Args:
            series_id: Owning series
            title: Arc title (required, trimmed)
            summary: Free-text summary (trimmed)
            rating: Raw rating input; unparsable input means 3
        """
        series = self.get_series(series_id)
        arc = Arc(
            id=create_id("arc"),
            title=_require_text(title, "Arc title"),
            summary=(summary or "").strip(),
            rating=clamp_rating(rating, DEFAULT_NEW_RATING),
        )
        series.arcs.append(arc)
        self.persist()
        return arc

    def update_arc(
        self,
        series_id: str,
        arc_id: str,
        title: str | None = None,
        summary: str | None = None,
        rating: Any = None,
    ) -> Arc:
        """Edit arc metadata. Arguments left as None are not touched.

        An unparsable rating is stored as 1.
        """
        arc = self.get_arc(series_id, arc_id)
        if title is not None:
            arc.title = _require_text(title, "Arc title")
        if summary is not None:
            arc.summary = summary
        if rating is not None:
            arc.rating = clamp_rating(rating, DEFAULT_EDIT_RATING)
        self.persist()
        return arc

    def remove_arc(self, series_id: str, arc_id: str) -> Arc:
        series = self.get_series(series_id)
        arc = self.get_arc(series_id, arc_id)
        _detach(series.arcs, arc)
        self.persist()
        return arc

    def add_mapping(self, series_id: str, arc_id: str, **fields: str) -> Mapping:
        """Append a mapping row; fields not given start empty."""
        arc = self.get_arc(series_id, arc_id)
        unknown = set(fields) - set(MAPPING_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown mapping field(s): {', '.join(sorted(unknown))}")
        mapping = Mapping(id=create_id("mapping"), **{k: v or "" for k, v in fields.items()})
        arc.mappings.append(mapping)
        self.persist()
        return mapping

    def update_mapping(
        self,
        series_id: str,
        arc_id: str,
        mapping_id: str,
        field_name: str,
        value: str,
    ) -> Mapping:
        """Set one field of a mapping row (stored verbatim)."""
        if field_name not in MAPPING_FIELDS:
            raise ValidationError(
                f"Unknown mapping field: {field_name} (expected one of {', '.join(MAPPING_FIELDS)})"
            )
        mapping = self.get_mapping(series_id, arc_id, mapping_id)
        setattr(mapping, field_name, value)
        self.persist()
        return mapping

    def remove_mapping(self, series_id: str, arc_id: str, mapping_id: str) -> Mapping:
        arc = self.get_arc(series_id, arc_id)
        mapping = self.get_mapping(series_id, arc_id, mapping_id)
        _detach(arc.mappings, mapping)
        self.persist()
        return mapping

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def stats(self) -> dict[str, int]:
        """Count records in the tree."""
        root = self.load()
        arcs = [arc for _series, arc in root.iter_arcs()]
        return {
            "series": len(root.series),
            "arcs": len(arcs),
            "mappings": sum(len(arc.mappings) for arc in arcs),
            "posts": sum(len(arc.chat) for arc in arcs),
        }


def _int_setting(key: str, default: int | None, data_root: Path | None) -> int | None:
    value = get_config_value(key, default, data_root)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from e


def open_store(data_root: Path | None = None) -> DataStore:
    """Build a store for the resolved data root, honouring backup settings.

    Raises:
        FileNotFoundError: If no data root can be found
        ConfigurationError: If the project config is unreadable or a backup
            setting is not an integer
    """
    paths = get_paths(data_root)
    keep_count = _int_setting("backup.keep_count", DEFAULT_KEEP_COUNT, data_root)
    return DataStore(
        db_path=paths.db,
        backup_dir=paths.backups,
        keep_backups=DEFAULT_KEEP_COUNT if keep_count is None else keep_count,
        keep_days=_int_setting("backup.keep_days", DEFAULT_KEEP_DAYS, data_root),
    )
