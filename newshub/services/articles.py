"""Article read path, including fetch-on-empty-search."""

import asyncio
import logging
from typing import List, Optional

from ..db.articles import ArticleRepository
from ..ingestion import FetchParameters
from ..models import Article, ArticleFilters, ArticlePage, QueryResult
from ..models.query import MAX_PER_PAGE
from ..pipeline import NewsAggregator
from .preferences import PreferenceService

logger = logging.getLogger(__name__)


class ArticleService:
    """Serve stored articles, pulling from the providers when a search misses."""

    def __init__(
        self,
        articles: ArticleRepository,
        aggregator: NewsAggregator,
        preferences: Optional[PreferenceService] = None,
        max_per_page: int = MAX_PER_PAGE,
        page_size: int = 50,
        language: str = "en",
    ) -> None:
        """
        Initialize the service.

        Args:
            articles: Article repository for reads
            aggregator: Aggregator used when a search misses
            preferences: Preference service for personalized feeds
            max_per_page: Upper bound applied to every page size
            page_size: Articles requested per provider on auto-fetch
            language: Language filter sent on auto-fetch
        """
        self.articles = articles
        self.aggregator = aggregator
        self.preferences = preferences
        self.max_per_page = max(1, min(max_per_page, MAX_PER_PAGE))
        self.page_size = page_size
        self.language = language

    def _clamp(self, per_page: int) -> int:
        return min(max(per_page, 1), self.max_per_page)

    def query_with_auto_fetch(self, filters: ArticleFilters) -> QueryResult:
        """
        Blocking wrapper around query_with_auto_fetch_async.

        Callers already inside an event loop must await the async variant.
        """
        return asyncio.run(self.query_with_auto_fetch_async(filters))

    async def query_with_auto_fetch_async(self, filters: ArticleFilters) -> QueryResult:
        """
        Query stored articles; on a search with zero matches, fetch and retry once.

        A failed fetch is logged and the empty result is returned as-is.
        Repeated misses fetch again every time.
        """
        if filters.per_page > self.max_per_page:
            filters = filters.model_copy(update={"per_page": self.max_per_page})

        page = await asyncio.to_thread(self.articles.query, filters)

        if not filters.has_search or page.total > 0:
            return QueryResult(page=page, auto_fetch=False)

        search_term = filters.search_query.strip()
        logger.info(
            "No articles found for '%s', fetching from news sources", search_term
        )

        params = FetchParameters(
            search_query=search_term,
            from_date=filters.from_date,
            to_date=filters.to_date,
            page_size=self.page_size,
            language=self.language,
            source_keys=filters.sources or None,
        )

        try:
            if filters.sources:
                stats = await self.aggregator.run_selected_async(filters.sources, params)
            else:
                stats = await self.aggregator.run_all_async(params)
        except Exception as e:
            logger.error("Auto-fetch failed for '%s': %s", search_term, e)
            return QueryResult(page=page, auto_fetch=False)

        logger.info(
            "Auto-fetch completed for '%s': %d fetched, %d stored",
            search_term,
            stats.total_fetched,
            stats.total_stored,
        )

        page = await asyncio.to_thread(self.articles.query, filters)
        return QueryResult(page=page, auto_fetch=True)

    def get_article(self, article_id: int) -> Optional[Article]:
        return self.articles.find_by_id(article_id)

    def get_categories(self) -> List[str]:
        return self.articles.categories()

    def get_authors(self) -> List[str]:
        return self.articles.authors()

    def get_personalized_articles(
        self,
        user_id: int,
        per_page: int = 15,
        page: int = 1,
    ) -> ArticlePage:
        """Newest articles matching the user's saved preferences."""
        if self.preferences is None:
            raise RuntimeError("ArticleService was built without a PreferenceService")

        preferences = self.preferences.get_preferences(user_id)
        return self.articles.personalized(
            preferences, per_page=self._clamp(per_page), page=max(page, 1)
        )
