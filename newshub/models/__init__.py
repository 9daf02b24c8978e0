"""Data models for newshub."""

from .article import Article
from .preference import Preferences, UserPreference
from .query import ArticleFilters, ArticlePage, QueryResult
from .source import Source

__all__ = [
    "Article",
    "ArticleFilters",
    "ArticlePage",
    "Preferences",
    "QueryResult",
    "Source",
    "UserPreference",
]
