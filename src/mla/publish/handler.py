"""Submit endpoint: accepts a POSTed snapshot and commits it.

Framework-neutral: ``handle_submit`` takes the HTTP method and raw body and
returns a ``SubmitResponse`` that any server layer can render.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from mla.core.errors import ConfigurationError, PublishError
from mla.publish.github import GitHubPublisher, PublishRequest, PublishSettings

logger = logging.getLogger(__name__)


@dataclass
class SubmitResponse:
    status: int
    payload: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def body(self) -> bytes:
        return json.dumps(self.payload).encode("utf-8")


def _error(status: int, message: str, **headers: str) -> SubmitResponse:
    return SubmitResponse(status=status, payload={"error": message}, headers=dict(headers))


def handle_submit(
    method: str,
    body: bytes | str | None,
    settings: PublishSettings | None = None,
    publisher_factory: Callable[[PublishSettings], GitHubPublisher] = GitHubPublisher,
) -> SubmitResponse:
    """Handle one submit request.

    Args:
        method: HTTP verb
        body: Raw request body
        settings: Repository settings (read from the environment if omitted)
        publisher_factory: Builds the publisher from settings

    Returns:
        SubmitResponse; never raises for request or upload problems
    """
    if method.upper() != "POST":
        return _error(405, "Method not allowed", Allow="POST")

    if settings is None:
        try:
            settings = PublishSettings.from_env()
        except ConfigurationError as e:
            return _error(500, e.message)

    try:
        text = body.decode("utf-8") if isinstance(body, bytes) else (body or "")
    except UnicodeDecodeError:
        return _error(400, "Unable to read request body.")

    try:
        payload = json.loads(text or "{}")
    except json.JSONDecodeError:
        return _error(400, "Invalid JSON payload.")

    if not isinstance(payload, dict) or not isinstance(payload.get("db"), dict):
        return _error(400, 'Payload missing "db" object.')

    try:
        result = publisher_factory(settings).publish(PublishRequest.from_payload(payload))
    except PublishError as e:
        logger.error("Publish failed: %s", e.message)
        return _error(500, e.message)

    return SubmitResponse(status=200, payload=result.to_dict())
