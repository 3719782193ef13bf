"""CLI commands for publishing the database to GitHub."""

from __future__ import annotations

import click
from rich.console import Console

from mla.core.errors import ConfigurationError, PublishError
from mla.core.prompts import fail, load_store

console = Console()


@click.group(name="publish")
def publish() -> None:
    """Commit the database to the shared GitHub repository.

    Needs GITHUB_TOKEN plus REPO_OWNER, REPO_NAME and REPO_DEFAULT_BRANCH
    (the last three may also come from publish.* keys in .mla/config.yaml).
    """
    pass


@publish.command(name="push")
@click.option("--name", "author_name", help="Commit author name")
@click.option("--email", "author_email", help="Commit author email")
@click.option("-m", "--message", help="Commit message")
@click.option("--path", help="Repository path (default data/mla-data.json)")
def push_cmd(
    author_name: str | None,
    author_email: str | None,
    message: str | None,
    path: str | None,
) -> None:
    """Upload the current snapshot as a commit."""
    from mla.core.config import get_config_value, load_project_config
    from mla.publish.github import GitHubPublisher, PublishSettings, publish_in_background

    store = load_store()
    try:
        settings = PublishSettings.from_env(load_project_config())
    except ConfigurationError as e:
        fail(e.message)

    future = publish_in_background(
        GitHubPublisher(settings),
        store.load().to_dict(),
        path=path or get_config_value("publish.path"),
        message=(message or "").strip() or None,
        author_name=(author_name or "").strip() or None,
        author_email=(author_email or "").strip() or None,
    )

    with console.status("[cyan]Uploading…[/cyan]"):
        try:
            result = future.result()
        except PublishError as e:
            fail(e.message)

    console.print(f"[green]Upload complete.[/green] View commit: {result.commit_url}")
