"""
Publish snapshots to a GitHub repository through the contents API.

Each publish reads the current blob sha at the target path (if any) and
writes the new content as a commit tied to that sha, so concurrent writers
are rejected by GitHub rather than silently overwritten.

Usage:
    settings = PublishSettings.from_env()
    publisher = GitHubPublisher(settings)
    result = publisher.publish(PublishRequest(db=store.load().to_dict()))
    print(result.commit_url)
"""

from __future__ import annotations

import base64
import json
import logging
import os
import urllib.parse
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

import requests

from mla.core.errors import ConfigurationError, PublishError

logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
USER_AGENT = "mla-linker-bot"

DEFAULT_PATH = "data/mla-data.json"
DEFAULT_MESSAGE = "Update MLA data"
DEFAULT_AUTHOR_NAME = "MLA Contributor"
DEFAULT_AUTHOR_EMAIL = "mla@example.com"

REQUEST_TIMEOUT = 30


@dataclass(frozen=True)
class PublishSettings:
    """Repository coordinates and credentials."""

    token: str
    repo_owner: str
    repo_name: str
    branch: str

    @classmethod
    def from_env(cls, config: dict[str, Any] | None = None) -> PublishSettings:
        """Build settings from the environment.

        GITHUB_TOKEN, REPO_OWNER, REPO_NAME and REPO_DEFAULT_BRANCH are read
        first; the ``publish`` section of the project config fills in
        anything but the token.

        Raises:
            ConfigurationError: If any value is missing
        """
        publish_config = (config or {}).get("publish") or {}
        token = os.environ.get("GITHUB_TOKEN")
        owner = os.environ.get("REPO_OWNER") or publish_config.get("repo_owner")
        name = os.environ.get("REPO_NAME") or publish_config.get("repo_name")
        branch = os.environ.get("REPO_DEFAULT_BRANCH") or publish_config.get("branch")

        if not (token and owner and name and branch):
            raise ConfigurationError("Missing GitHub configuration.")
        return cls(token=token, repo_owner=str(owner), repo_name=str(name), branch=str(branch))


@dataclass
class PublishRequest:
    """What to upload and how to attribute it."""

    db: dict[str, Any]
    path: str | None = None
    message: str | None = None
    author_name: str | None = None
    author_email: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> PublishRequest:
        """Build from the JSON body accepted by the submit endpoint."""
        path = payload.get("path")
        return cls(
            db=payload["db"],
            path=path if isinstance(path, str) and path else None,
            message=payload.get("message") or None,
            author_name=payload.get("authorName") or None,
            author_email=payload.get("authorEmail") or None,
        )


@dataclass(frozen=True)
class PublishResult:
    """Locator of the commit that was created."""

    commit_url: str

    def to_dict(self) -> dict[str, str]:
        return {"commitUrl": self.commit_url}


def encode_snapshot(db: dict[str, Any]) -> str:
    """Base64 of the pretty-printed (2-space) JSON document."""
    text = json.dumps(db, indent=2, ensure_ascii=False)
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def _quote_path(path: str) -> str:
    return "/".join(urllib.parse.quote(segment, safe="") for segment in path.split("/"))


class GitHubPublisher:
    """Commits snapshots to one repository branch."""

    def __init__(self, settings: PublishSettings, session: requests.Session | None = None):
        self.settings = settings
        self._session = session or requests.Session()
        self._session.headers.update({
            "Authorization": f"Bearer {settings.token}",
            "User-Agent": USER_AGENT,
            "Accept": "application/vnd.github+json",
        })

    def _contents_url(self, path: str) -> str:
        s = self.settings
        return f"{GITHUB_API}/repos/{s.repo_owner}/{s.repo_name}/contents/{_quote_path(path)}"

    def get_existing_sha(self, path: str) -> str | None:
        """Return the blob sha at ``path`` on the branch, None if absent.

        Raises:
            PublishError: On any failure other than 404
        """
        try:
            response = self._session.get(
                self._contents_url(path),
                params={"ref": self.settings.branch},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise PublishError(f"Failed to read existing file: {e}") from e

        if response.status_code == 404:
            return None
        if not response.ok:
            raise PublishError(
                f"Failed to read existing file: {response.text}",
                status_code=response.status_code,
            )
        sha = response.json().get("sha")
        return str(sha) if sha else None

    def publish(self, request: PublishRequest) -> PublishResult:
        """Commit ``request.db`` and return the commit URL.

        Raises:
            PublishError: If GitHub rejects the read or the write
        """
        path = request.path or DEFAULT_PATH
        author = {
            "name": request.author_name or DEFAULT_AUTHOR_NAME,
            "email": request.author_email or DEFAULT_AUTHOR_EMAIL,
        }
        sha = self.get_existing_sha(path)

        body: dict[str, Any] = {
            "message": request.message or DEFAULT_MESSAGE,
            "content": encode_snapshot(request.db),
            "branch": self.settings.branch,
            "committer": author,
            "author": author,
        }
        if sha:
            body["sha"] = sha

        logger.debug("Committing %s to %s/%s@%s", path, self.settings.repo_owner,
                     self.settings.repo_name, self.settings.branch)
        try:
            response = self._session.put(self._contents_url(path), json=body, timeout=REQUEST_TIMEOUT)
        except requests.RequestException as e:
            raise PublishError(f"GitHub commit failed: {e}") from e

        if not response.ok:
            raise PublishError(
                f"GitHub commit failed: {response.text}",
                status_code=response.status_code,
            )

        try:
            commit_url = response.json()["commit"]["html_url"]
        except (ValueError, KeyError, TypeError) as e:
            raise PublishError("Unexpected response from GitHub.") from e
        return PublishResult(commit_url=str(commit_url))


_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="mla-publish")


def publish_in_background(
    publisher: GitHubPublisher,
    db: dict[str, Any],
    **options: Any,
) -> Future[PublishResult]:
    """Start a publish without waiting for it.

    ``db`` is deep-copied (via JSON) before returning, so later edits to the
    live tree are not part of this upload. There is no cancellation and no
    lock: two calls race to GitHub independently, and the sha check there
    decides which commit lands.
    """
    snapshot = json.loads(json.dumps(db))
    request = PublishRequest(db=snapshot, **options)
    return _executor.submit(publisher.publish, request)
