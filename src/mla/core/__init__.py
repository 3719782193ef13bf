"""Core data model, storage and configuration for mla."""

from mla.core.backup import (
    DEFAULT_KEEP_COUNT,
    DEFAULT_KEEP_DAYS,
    BackupInfo,
    list_backups,
    rollback_snapshot,
    safe_write_json,
)
from mla.core.config import get_data_root, get_paths
from mla.core.errors import (
    ConfigurationError,
    MLAError,
    NotFoundError,
    PublishError,
    ValidationError,
)
from mla.core.ids import create_id
from mla.core.models import Arc, Mapping, Post, Root, Series
from mla.core.store import DataStore, clamp_rating, open_store

__all__ = [
    # Model
    "Root",
    "Series",
    "Arc",
    "Mapping",
    "Post",
    # Store
    "DataStore",
    "open_store",
    "clamp_rating",
    "create_id",
    # Backup
    "safe_write_json",
    "list_backups",
    "rollback_snapshot",
    "BackupInfo",
    "DEFAULT_KEEP_COUNT",
    "DEFAULT_KEEP_DAYS",
    # Config
    "get_data_root",
    "get_paths",
    # Errors
    "MLAError",
    "ValidationError",
    "NotFoundError",
    "ConfigurationError",
    "PublishError",
]
