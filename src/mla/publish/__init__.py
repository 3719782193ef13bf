"""Publishing snapshots to a GitHub repository."""

from mla.publish.github import (
    GitHubPublisher,
    PublishRequest,
    PublishResult,
    PublishSettings,
    publish_in_background,
)
from mla.publish.handler import SubmitResponse, handle_submit

__all__ = [
    "GitHubPublisher",
    "PublishRequest",
    "PublishResult",
    "PublishSettings",
    "publish_in_background",
    "SubmitResponse",
    "handle_submit",
]
