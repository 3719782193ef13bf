"""
Exception hierarchy for mla.

Library code raises these; CLI commands catch ``MLAError`` and report it.
"""

from __future__ import annotations


class MLAError(Exception):
    """Base exception for all mla errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationError(MLAError):
    """Input failed a shape or required-field check."""
    pass


class NotFoundError(MLAError):
    """A series, arc or mapping id does not exist."""
    pass


class ConfigurationError(MLAError):
    """Settings are missing or unreadable."""
    pass


class PublishError(MLAError):
    """Uploading a snapshot to the remote store failed."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
