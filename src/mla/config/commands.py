"""
CLI commands for project configuration.

Settings live in .mla/config.yaml:

    backup:
      keep_count: 10
      keep_days: 30
    publish:
      repo_owner: my-org
      repo_name: mla-data
      branch: main
      path: data/mla-data.json
"""

from __future__ import annotations

from typing import Any

import click
from rich.console import Console
from rich.table import Table

from mla.core.backup import DEFAULT_KEEP_COUNT, DEFAULT_KEEP_DAYS
from mla.core.config import get_config_value, get_paths, load_project_config, set_config_value
from mla.core.errors import ConfigurationError
from mla.core.prompts import fail
from mla.publish.github import DEFAULT_PATH

console = Console()

CONFIG_SCHEMA: dict[str, dict[str, Any]] = {
    "backup.keep_count": {
        "default": DEFAULT_KEEP_COUNT,
        "type": int,
        "description": "Minimum number of backups to keep",
    },
    "backup.keep_days": {
        "default": DEFAULT_KEEP_DAYS,
        "type": int,
        "description": "Maximum age of backups in days",
    },
    "publish.repo_owner": {
        "default": None,
        "type": str,
        "description": "GitHub owner (overridden by REPO_OWNER)",
    },
    "publish.repo_name": {
        "default": None,
        "type": str,
        "description": "GitHub repository (overridden by REPO_NAME)",
    },
    "publish.branch": {
        "default": None,
        "type": str,
        "description": "Target branch (overridden by REPO_DEFAULT_BRANCH)",
    },
    "publish.path": {
        "default": DEFAULT_PATH,
        "type": str,
        "description": "Repository path of the published file",
    },
}


def _require_known(key: str) -> dict[str, Any]:
    if key not in CONFIG_SCHEMA:
        console.print("\nAvailable settings:")
        for k in CONFIG_SCHEMA:
            console.print(f"  - {k}")
        fail(f"Unknown setting: {key}")
    return CONFIG_SCHEMA[key]


def _require_initialized() -> None:
    try:
        load_project_config()
    except FileNotFoundError as e:
        fail(str(e))
    except ConfigurationError as e:
        fail(e.message)


@click.group()
def config() -> None:
    """Manage mla configuration.

    Settings are stored in .mla/config.yaml.
    """
    pass


@config.command(name="show")
def show_cmd() -> None:
    """Show all settings with their current values."""
    _require_initialized()

    table = Table(title="Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting")
    table.add_column("Value", style="green")
    table.add_column("Default", style="dim")
    table.add_column("Description", style="dim")

    for key, schema in CONFIG_SCHEMA.items():
        current = get_config_value(key)
        default = schema["default"]
        display_value = str(current) if current is not None else f"[dim]{default}[/dim]"
        table.add_row(key, display_value, str(default), schema["description"])

    console.print(table)
    console.print(f"\n[dim]Config file: {get_paths().config_file}[/dim]")


@config.command(name="get")
@click.argument("key")
def get_cmd(key: str) -> None:
    """Get a configuration value.

    Examples:
        mla config get backup.keep_days
        mla config get publish.repo_owner
    """
    schema = _require_known(key)
    _require_initialized()

    value = get_config_value(key)
    if value is None:
        console.print(f"{key} = {schema['default']} [dim](default)[/dim]")
    else:
        console.print(f"{key} = {value}")


@config.command(name="set")
@click.argument("key")
@click.argument("value")
def set_cmd(key: str, value: str) -> None:
    """Set a configuration value.

    Examples:
        mla config set backup.keep_count 5
        mla config set publish.branch main
    """
    schema = _require_known(key)
    _require_initialized()

    typed_value: int | str
    if schema["type"] is int:
        try:
            typed_value = int(value)
        except ValueError:
            fail(f"Invalid value type. Expected {schema['type'].__name__}")
    else:
        typed_value = value.strip()
        if not typed_value:
            fail(f"{key} cannot be empty")

    set_config_value(key, typed_value)
    console.print(f"[green]Set {key} = {typed_value}[/green]")
