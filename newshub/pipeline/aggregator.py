"""Multi-provider fetch, normalize and store pipeline."""

import asyncio
import logging
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

from ..db.articles import ArticleRepository
from ..db.sources import SourceRegistry
from ..ingestion import FetchParameters, FetchResult, ProviderFetcher
from .models import FetchStatistics, SourceStats

logger = logging.getLogger(__name__)


class NewsAggregator:
    """Drive provider fetchers and upsert what they return."""

    def __init__(
        self,
        fetchers: Mapping[str, ProviderFetcher],
        sources: SourceRegistry,
        articles: ArticleRepository,
        max_concurrent: int = 3,
    ) -> None:
        """
        Initialize the aggregator.

        Args:
            fetchers: Source key to fetcher, typically from build_fetchers()
            sources: Source registry used to resolve source ids
            articles: Article repository used for upserts
            max_concurrent: Providers fetched in parallel
        """
        self.fetchers = MappingProxyType(dict(fetchers))
        self.sources = sources
        self.articles = articles
        self.max_concurrent = max(1, max_concurrent)

    @property
    def source_keys(self) -> List[str]:
        return list(self.fetchers)

    def run(self, params: Optional[FetchParameters] = None) -> FetchStatistics:
        """Run the providers named in params.source_keys, or all of them."""
        params = params or FetchParameters()
        if params.source_keys:
            return self.run_selected(params.source_keys, params)
        return self.run_all(params)

    def run_all(self, params: Optional[FetchParameters] = None) -> FetchStatistics:
        """Fetch and store from every registered provider."""
        return asyncio.run(self.run_all_async(params))

    def run_selected(
        self,
        source_keys: Iterable[str],
        params: Optional[FetchParameters] = None,
    ) -> FetchStatistics:
        """Fetch and store from the given providers; unknown keys are skipped."""
        return asyncio.run(self.run_selected_async(source_keys, params))

    async def run_all_async(self, params: Optional[FetchParameters] = None) -> FetchStatistics:
        return await self._run_many(list(self.fetchers.values()), params or FetchParameters())

    async def run_selected_async(
        self,
        source_keys: Iterable[str],
        params: Optional[FetchParameters] = None,
    ) -> FetchStatistics:
        selected = []
        for key in dict.fromkeys(source_keys):
            fetcher = self.fetchers.get(key)
            if fetcher is None:
                logger.debug("Ignoring unknown or unconfigured source %s", key)
                continue
            selected.append(fetcher)
        return await self._run_many(selected, params or FetchParameters())

    def run_one(
        self,
        fetcher: ProviderFetcher,
        params: Optional[FetchParameters] = None,
    ) -> SourceStats:
        """
        Fetch from one provider and store its articles.

        Unlike run_all/run_selected, errors outside the per-article loop
        propagate to the caller.
        """
        result = asyncio.run(fetcher.fetch_articles(params or FetchParameters()))
        return self.store_results(fetcher, result)

    def store_results(self, fetcher: ProviderFetcher, result: FetchResult) -> SourceStats:
        """
        Upsert a provider's records.

        Records without a url or title are skipped. A record that fails to
        transform or store is logged and skipped; the rest of the batch
        continues.
        """
        source_key = fetcher.source_key
        source = self.sources.get_or_create(
            source_key,
            fetcher.display_name,
            fetcher.base_url,
            fetcher.meta,
        )

        fetched = len(result.items)
        stored = 0
        skipped = 0

        for raw in result.items:
            try:
                article = fetcher.transform_article(raw)
                if not article.is_storable:
                    skipped += 1
                    continue

                self.articles.upsert_by_url(article, source.id)
                stored += 1
            except Exception as e:
                logger.warning(
                    "Failed to store article from %s (%s): %s",
                    source_key,
                    raw.get("title") or raw.get("webTitle") or "unknown",
                    e,
                )

        if skipped:
            logger.info("Skipped %d %s articles without url or title", skipped, source_key)

        logger.info("%s: fetched %d, stored %d", source_key, fetched, stored)

        return SourceStats(
            fetched=fetched,
            stored=stored,
            error=None if result.success else result.error,
        )

    async def _run_many(
        self,
        fetchers: List[ProviderFetcher],
        params: FetchParameters,
    ) -> FetchStatistics:
        """Fetch concurrently, then store one source at a time off the event loop."""
        stats = FetchStatistics()
        if not fetchers:
            return stats

        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def fetch_with_semaphore(fetcher: ProviderFetcher) -> FetchResult:
            async with semaphore:
                return await fetcher.fetch_articles(params)

        results = await asyncio.gather(
            *(fetch_with_semaphore(fetcher) for fetcher in fetchers),
            return_exceptions=True,
        )

        for fetcher, result in zip(fetchers, results):
            source_key = fetcher.source_key

            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.error("Failed to fetch from %s: %s", source_key, result)
                stats.add(source_key, SourceStats(error=str(result)))
                continue

            try:
                source_stats = await asyncio.to_thread(self.store_results, fetcher, result)
            except Exception as e:
                logger.error("Failed to store articles from %s: %s", source_key, e)
                source_stats = SourceStats(fetched=len(result.items), stored=0, error=str(e))

            stats.add(source_key, source_stats)

        return stats
