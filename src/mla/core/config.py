"""
Configuration and path management.

Locates the data root that holds the .mla/ directory (snapshot, backups,
project config).

Resolution order for the data root:
  1. MLA_DATA_ROOT environment variable (highest priority)
  2. Walk up from cwd looking for .mla/ directory
  3. Global config file (~/.config/mla/config.yaml) data_root key
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from mla.core.errors import ConfigurationError

MLA_DIRNAME = ".mla"


@dataclass(frozen=True)
class MlaPaths:
    """Standard paths for mla data."""

    root: Path
    mla_dir: Path

    # Durable snapshot of the arc database
    db: Path

    # Timestamped copies of the snapshot
    backups: Path

    # Project configuration (YAML)
    config_file: Path


def get_global_config_path() -> Path:
    """Return the path to the global mla config file.

    Respects XDG_CONFIG_HOME if set, otherwise defaults to ~/.config/mla/config.yaml.
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        base = Path(xdg_config_home)
    else:
        base = Path.home() / ".config"
    return base / "mla" / "config.yaml"


def load_global_config() -> dict:
    """Load the global mla configuration.

    Returns:
        Configuration dict, or empty dict if file is missing or invalid.
    """
    config_path = get_global_config_path()
    if not config_path.is_file():
        return {}
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        if isinstance(data, dict):
            return data
        return {}
    except (OSError, yaml.YAMLError):
        return {}


def _walk_up_for_mla(start_path: Path) -> Path | None:
    current = start_path.resolve()
    while current != current.parent:
        if (current / MLA_DIRNAME).is_dir():
            return current
        current = current.parent
    return None


def find_data_root(start_path: Path | None = None) -> Path:
    """Find the data root using 3-tier resolution.

    Args:
        start_path: Starting path for the .mla/ walk (defaults to cwd)

    Returns:
        Path to the directory containing .mla/

    Raises:
        FileNotFoundError: If .mla/ directory not found by any method
    """
    env_root = os.environ.get("MLA_DATA_ROOT")
    if env_root:
        env_path = Path(env_root).resolve()
        if (env_path / MLA_DIRNAME).is_dir():
            return env_path
        raise FileNotFoundError(
            f"MLA_DATA_ROOT={env_root} does not contain an {MLA_DIRNAME}/ directory."
        )

    if start_path is None:
        start_path = Path.cwd()
    result = _walk_up_for_mla(Path(start_path))
    if result is not None:
        return result

    global_config = load_global_config()
    data_root_str = global_config.get("data_root")
    if data_root_str:
        global_path = Path(data_root_str).expanduser().resolve()
        if (global_path / MLA_DIRNAME).is_dir():
            return global_path
        raise FileNotFoundError(
            f"Global config data_root={data_root_str} does not contain an {MLA_DIRNAME}/ directory."
        )

    raise FileNotFoundError(
        f"Could not find {MLA_DIRNAME}/ directory starting from {start_path}. "
        f"Run 'mla init' to initialize, set MLA_DATA_ROOT, or configure "
        f"data_root in {get_global_config_path()}."
    )


@lru_cache(maxsize=1)
def get_data_root() -> Path:
    """Get the cached data root path."""
    return find_data_root()


def get_paths(data_root: Path | None = None) -> MlaPaths:
    """Get all standard paths.

    Args:
        data_root: Data root path (uses cached default if not provided)

    Returns:
        MlaPaths dataclass with all paths
    """
    if data_root is None:
        data_root = get_data_root()

    data_root = Path(data_root)
    mla_dir = data_root / MLA_DIRNAME

    return MlaPaths(
        root=data_root,
        mla_dir=mla_dir,
        db=mla_dir / "mla_db.json",
        backups=mla_dir / "backups",
        config_file=mla_dir / "config.yaml",
    )


def load_project_config(data_root: Path | None = None) -> dict[str, Any]:
    """Load .mla/config.yaml (JSON content is accepted too).

    Returns:
        Configuration dict, or empty dict if the file is missing or empty

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    config_path = get_paths(data_root).config_file
    if not config_path.exists():
        return {}

    try:
        content = config_path.read_text(encoding="utf-8")
        if not content.strip():
            return {}
        if content.strip().startswith("{"):
            loaded = json.loads(content)
        else:
            loaded = yaml.safe_load(content)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read {config_path}: {e}") from e

    if isinstance(loaded, dict):
        return loaded
    return {}


def save_project_config(config: dict[str, Any], data_root: Path | None = None) -> None:
    """Write .mla/config.yaml."""
    config_path = get_paths(data_root).config_file
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(yaml.dump(config, default_flow_style=False, sort_keys=False), encoding="utf-8")


def get_config_value(key: str, default: Any = None, data_root: Path | None = None) -> Any:
    """Get a project configuration value by dotted key (e.g. ``backup.keep_days``)."""
    current: Any = load_project_config(data_root)
    for part in key.split("."):
        if isinstance(current, dict) and part in current:
            current = current[part]
        else:
            return default
    return current


def set_config_value(key: str, value: Any, data_root: Path | None = None) -> None:
    """Set a project configuration value by dotted key."""
    config = load_project_config(data_root)
    parts = key.split(".")

    current = config
    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[parts[-1]] = value

    save_project_config(config, data_root)
