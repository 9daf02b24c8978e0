"""Exception types shared across newshub."""

from typing import Any, Dict, Optional


class NewsHubError(Exception):
    """Base exception for newshub."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(NewsHubError):
    """Missing or invalid configuration, e.g. an absent provider API key."""


class StorageError(NewsHubError):
    """Database errors surfaced by the repositories."""
