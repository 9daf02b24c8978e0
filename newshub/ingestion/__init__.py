"""Provider fetchers and ingestion models."""

from .base import ProviderFetcher, parse_timestamp
from .guardian import GuardianFetcher
from .models import FetchParameters, FetchResult, NormalizedArticle
from .newsapi import NewsAPIFetcher
from .nytimes import NYTimesFetcher
from .registry import FETCHER_CLASSES, ProviderStatus, build_fetchers, provider_status

__all__ = [
    "FETCHER_CLASSES",
    "FetchParameters",
    "FetchResult",
    "GuardianFetcher",
    "NYTimesFetcher",
    "NewsAPIFetcher",
    "NormalizedArticle",
    "ProviderFetcher",
    "ProviderStatus",
    "build_fetchers",
    "parse_timestamp",
    "provider_status",
]
