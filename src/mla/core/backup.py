"""
Snapshot backups and safe JSON writing.

Every snapshot write goes through ``safe_write_json``: the previous file is
copied to a timestamped backup, the new content lands in a temp file and is
moved into place atomically.
"""

from __future__ import annotations

import contextlib
import json
import os
import re
import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any

DEFAULT_KEEP_COUNT = 10
DEFAULT_KEEP_DAYS = 30
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
TIMESTAMP_PATTERN = re.compile(r"_(\d{8}_\d{6})(?:_\d+)?\.json$")


@dataclass
class BackupInfo:
    """A backup file on disk."""

    path: Path
    timestamp: datetime
    size_bytes: int

    @property
    def age_days(self) -> float:
        return (datetime.now() - self.timestamp).total_seconds() / 86400

    @property
    def size_human(self) -> str:
        if self.size_bytes < 1024:
            return f"{self.size_bytes} B"
        elif self.size_bytes < 1024 * 1024:
            return f"{self.size_bytes / 1024:.1f} KB"
        return f"{self.size_bytes / (1024 * 1024):.1f} MB"


def parse_backup_timestamp(filename: str) -> datetime | None:
    """Extract the timestamp from a name like ``mla_db_20251212_144234.json``."""
    match = TIMESTAMP_PATTERN.search(filename)
    if not match:
        return None
    try:
        return datetime.strptime(match.group(1), TIMESTAMP_FORMAT)
    except ValueError:
        return None


def list_backups(backup_dir: Path, db_name: str) -> list[BackupInfo]:
    """List backups of one snapshot, newest first.

    Args:
        backup_dir: Directory containing backups
        db_name: Snapshot file stem (e.g. ``mla_db``)
    """
    backup_dir = Path(backup_dir)
    if not backup_dir.exists():
        return []

    backups = []
    for path in backup_dir.glob(f"{db_name}_*.json"):
        timestamp = parse_backup_timestamp(path.name)
        if timestamp:
            backups.append(BackupInfo(path=path, timestamp=timestamp, size_bytes=path.stat().st_size))

    # Name breaks ties within the same second (sequence suffix)
    return sorted(backups, key=lambda b: (b.timestamp, b.path.name), reverse=True)


def create_backup(file_path: Path, backup_dir: Path | None = None) -> Path:
    """Copy a file to a timestamped backup.

    Args:
        file_path: File to back up
        backup_dir: Target directory (defaults to file_path.parent / 'backups')

    Returns:
        Path to the backup

    Raises:
        FileNotFoundError: If file_path doesn't exist
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Cannot backup non-existent file: {file_path}")

    backup_dir = Path(backup_dir) if backup_dir is not None else file_path.parent / "backups"
    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime(TIMESTAMP_FORMAT)
    backup_path = backup_dir / f"{file_path.stem}_{timestamp}{file_path.suffix}"
    # Snapshots are rewritten after every edit, so several may land in one second
    sequence = 1
    while backup_path.exists():
        backup_path = backup_dir / f"{file_path.stem}_{timestamp}_{sequence}{file_path.suffix}"
        sequence += 1

    shutil.copy2(file_path, backup_path)
    return backup_path


def cleanup_old_backups(
    backup_dir: Path,
    db_name: str,
    keep_last: int = DEFAULT_KEEP_COUNT,
    keep_days: int | None = DEFAULT_KEEP_DAYS,
) -> list[Path]:
    """Remove old backups of one snapshot.

    A backup survives if it is among the ``keep_last`` newest OR younger than
    ``keep_days``. With ``keep_days=None`` only the count applies.

    Returns:
        List of removed paths
    """
    cutoff = datetime.now() - timedelta(days=keep_days) if keep_days is not None else None
    removed = []

    for i, backup in enumerate(list_backups(backup_dir, db_name)):
        if i < keep_last:
            continue
        if cutoff is not None and backup.timestamp >= cutoff:
            continue
        backup.path.unlink()
        removed.append(backup.path)

    return removed


def rollback_snapshot(db_path: Path, backup_dir: Path, backup_index: int = 0) -> Path:
    """Restore the snapshot from a backup.

    The current file is backed up first, so a rollback can itself be undone.

    Args:
        db_path: Snapshot file
        backup_dir: Directory containing backups
        backup_index: 0 = most recent, 1 = second most recent, ...

    Returns:
        Path of the backup that was restored

    Raises:
        FileNotFoundError: If no suitable backup exists
    """
    db_path = Path(db_path)
    backups = list_backups(backup_dir, db_path.stem)

    if not backups:
        raise FileNotFoundError(f"No backups found for {db_path.stem}")
    if backup_index >= len(backups):
        raise FileNotFoundError(
            f"Backup index {backup_index} out of range (only {len(backups)} backups)"
        )

    backup = backups[backup_index]
    if db_path.exists():
        create_backup(db_path, backup_dir)
    shutil.copy2(backup.path, db_path)
    return backup.path


def safe_write_json(
    file_path: Path,
    data: dict[str, Any],
    create_backup_first: bool = True,
    backup_dir: Path | None = None,
    indent: int = 2,
    keep_backups: int = DEFAULT_KEEP_COUNT,
    keep_days: int | None = DEFAULT_KEEP_DAYS,
) -> Path | None:
    """Write JSON atomically, backing up the previous version.

    Args:
        file_path: JSON file to write
        data: Data to write
        create_backup_first: Back up the existing file before writing
        backup_dir: Backup directory (defaults to file_path.parent / 'backups')
        indent: JSON indentation
        keep_backups: Number of newest backups always kept
        keep_days: Remove backups older than this (None = no age limit)

    Returns:
        Path to the backup if one was created

    Raises:
        ValueError: If data cannot be serialized to JSON
        OSError: If file operations fail
    """
    file_path = Path(file_path)
    backup_path = None

    try:
        json_str = json.dumps(data, indent=indent, ensure_ascii=False)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Cannot serialize data to JSON: {e}") from e

    file_path.parent.mkdir(parents=True, exist_ok=True)

    if create_backup_first and file_path.exists():
        backup_path = create_backup(file_path, backup_dir)
        cleanup_old_backups(
            backup_dir or (file_path.parent / "backups"),
            file_path.stem,
            keep_backups,
            keep_days,
        )

    temp_fd, temp_path = tempfile.mkstemp(
        suffix=".json",
        prefix=f".{file_path.name}.",
        dir=file_path.parent,
        text=True,
    )

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            f.write(json_str)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        Path(temp_path).replace(file_path)
    except Exception as e:
        with contextlib.suppress(OSError):
            Path(temp_path).unlink()
        raise OSError(f"Failed to write {file_path}: {e}") from e

    return backup_path
