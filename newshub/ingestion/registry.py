"""Startup binding of configured provider fetchers."""

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Type

import httpx
from pydantic import BaseModel, Field

from ..config import Config
from ..errors import ConfigurationError
from .base import ProviderFetcher
from .guardian import GuardianFetcher
from .newsapi import NewsAPIFetcher
from .nytimes import NYTimesFetcher

logger = logging.getLogger(__name__)

FETCHER_CLASSES: Dict[str, Type[ProviderFetcher]] = {
    NewsAPIFetcher.source_key: NewsAPIFetcher,
    GuardianFetcher.source_key: GuardianFetcher,
    NYTimesFetcher.source_key: NYTimesFetcher,
}


class ProviderStatus(BaseModel):
    """Whether a provider can be used with the current configuration."""

    source_key: str
    display_name: str
    enabled: bool
    configured: bool
    api_key_env: Optional[str] = None
    signup_url: str = Field("", description="Where to obtain an API key")


SIGNUP_URLS = {
    "newsapi": "https://newsapi.org/register",
    "guardian": "https://open-platform.theguardian.com/access/",
    "nytimes": "https://developer.nytimes.com/get-started",
}


def build_fetchers(
    config: Config,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Mapping[str, ProviderFetcher]:
    """
    Construct every provider that has credentials.

    Providers whose construction fails with a ConfigurationError are left out
    for the lifetime of the returned mapping.

    Returns:
        Read-only mapping of source key to fetcher
    """
    fetch_defaults = config.config.fetch
    fetchers: Dict[str, ProviderFetcher] = {}

    for source_key, fetcher_cls in FETCHER_CLASSES.items():
        provider = config.get_provider_config(source_key)
        if not provider.enabled:
            logger.info("%s disabled in configuration", fetcher_cls.display_name)
            continue

        try:
            fetchers[source_key] = fetcher_cls(
                api_key=provider.api_key,
                base_url=provider.base_url,
                timeout=fetch_defaults.timeout,
                user_agent=fetch_defaults.user_agent,
                transport=transport,
            )
        except ConfigurationError as e:
            logger.warning("Skipping %s: %s", fetcher_cls.display_name, e.message)

    if not fetchers:
        logger.warning("No news providers are configured")

    return MappingProxyType(fetchers)


def provider_status(config: Config) -> List[ProviderStatus]:
    """Report credential status for every known provider."""
    statuses = []
    for source_key, fetcher_cls in FETCHER_CLASSES.items():
        provider = config.get_provider_config(source_key)
        statuses.append(
            ProviderStatus(
                source_key=source_key,
                display_name=fetcher_cls.display_name,
                enabled=provider.enabled,
                configured=bool(provider.api_key and provider.api_key.strip()),
                api_key_env=provider.api_key_env or fetcher_cls.api_key_env,
                signup_url=SIGNUP_URLS.get(source_key, ""),
            )
        )
    return statuses
