"""Application services used by the CLI and any HTTP layer."""

from .articles import ArticleService
from .preferences import PreferenceService

__all__ = ["ArticleService", "PreferenceService"]
