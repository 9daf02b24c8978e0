"""Database management for newshub."""

from .articles import ArticleRepository
from .connection import close_connection_pool, get_connection, get_connection_pool
from .init import init_database, validate_connection
from .preferences import PreferenceRepository
from .sources import SourceRegistry

__all__ = [
    "ArticleRepository",
    "PreferenceRepository",
    "SourceRegistry",
    "close_connection_pool",
    "get_connection",
    "get_connection_pool",
    "init_database",
    "validate_connection",
]
