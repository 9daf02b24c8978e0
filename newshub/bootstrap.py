"""Wire repositories, fetchers and services from configuration."""

from typing import Optional

import httpx

from .config import Config
from .db import ArticleRepository, PreferenceRepository, SourceRegistry
from .ingestion import build_fetchers
from .pipeline import NewsAggregator
from .services import ArticleService, PreferenceService


def create_aggregator(
    config: Config,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> NewsAggregator:
    """Build the aggregator over every provider that has credentials."""
    db_config = config.get_db_config()
    return NewsAggregator(
        fetchers=build_fetchers(config, transport=transport),
        sources=SourceRegistry(db_config),
        articles=ArticleRepository(db_config),
        max_concurrent=config.config.fetch.max_concurrent,
    )


def create_article_service(
    config: Config,
    aggregator: Optional[NewsAggregator] = None,
) -> ArticleService:
    """Build the read-path service, sharing an aggregator if one is given."""
    db_config = config.get_db_config()
    return ArticleService(
        articles=ArticleRepository(db_config),
        aggregator=aggregator or create_aggregator(config),
        preferences=create_preference_service(config),
        max_per_page=config.config.query.max_per_page,
        page_size=config.config.fetch.page_size,
        language=config.config.fetch.language,
    )


def create_preference_service(config: Config) -> PreferenceService:
    return PreferenceService(PreferenceRepository(config.get_db_config()))
