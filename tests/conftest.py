"""Shared fixtures: in-memory repositories and scripted fetchers."""

from typing import Any, Dict, List, Optional

import pytest

from newshub.ingestion import FetchParameters, FetchResult, NormalizedArticle, ProviderFetcher
from newshub.models import Article, ArticleFilters, ArticlePage, Preferences, Source, UserPreference


class InMemorySourceRegistry:
    """SourceRegistry stand-in keyed by source key."""

    def __init__(self) -> None:
        self.sources: Dict[str, Source] = {}
        self.calls = 0

    def find_by_key(self, key: str) -> Optional[Source]:
        return self.sources.get(key)

    def get_or_create(self, key, name, base_url=None, meta=None) -> Source:
        self.calls += 1
        if key not in self.sources:
            self.sources[key] = Source(
                id=len(self.sources) + 1,
                key=key,
                name=name,
                base_url=base_url,
                meta=meta or {},
            )
        return self.sources[key]

    def sync(self, key, name, base_url=None, meta=None) -> Source:
        source = self.get_or_create(key, name, base_url, meta)
        updated = source.model_copy(update={"name": name, "base_url": base_url, "meta": meta or {}})
        self.sources[key] = updated
        return updated


class InMemoryArticleRepository:
    """ArticleRepository stand-in with upsert-by-url semantics."""

    def __init__(self, sources: Optional[InMemorySourceRegistry] = None) -> None:
        self.rows: Dict[str, Article] = {}
        self.sources = sources
        self.fail_urls: set = set()
        self.query_calls = 0
        self._next_id = 1

    def upsert_by_url(self, article: NormalizedArticle, source_id: int) -> Article:
        if article.url in self.fail_urls:
            raise RuntimeError(f"constraint violation for {article.url}")

        existing = self.rows.get(article.url)
        row_id = existing.id if existing else self._next_id
        if existing is None:
            self._next_id += 1

        stored = Article(id=row_id, source_id=source_id, **article.model_dump())
        self.rows[article.url] = stored
        return stored

    def _source_key(self, source_id: int) -> Optional[str]:
        if self.sources is None:
            return None
        for source in self.sources.sources.values():
            if source.id == source_id:
                return source.key
        return None

    def _matches(self, article: Article, filters: ArticleFilters) -> bool:
        if filters.has_search:
            term = filters.search_query.strip().lower()
            haystack = " ".join(
                part or "" for part in (article.title, article.description, article.content)
            ).lower()
            if term not in haystack:
                return False
        if filters.category and article.category != filters.category:
            return False
        if filters.sources and self._source_key(article.source_id) not in filters.sources:
            return False
        return True

    def query(self, filters: ArticleFilters) -> ArticlePage:
        self.query_calls += 1
        matched = [a for a in self.rows.values() if self._matches(a, filters)]
        start = filters.offset
        return ArticlePage(
            items=matched[start:start + filters.per_page],
            total=len(matched),
            page=filters.page,
            per_page=filters.per_page,
        )

    def find_by_id(self, article_id: int) -> Optional[Article]:
        for article in self.rows.values():
            if article.id == article_id:
                return article
        return None

    def categories(self) -> List[str]:
        return sorted({a.category for a in self.rows.values() if a.category})

    def authors(self) -> List[str]:
        return sorted({a.author_name for a in self.rows.values() if a.author_name})

    def personalized(self, preferences: Preferences, per_page: int = 15, page: int = 1) -> ArticlePage:
        matched = [
            a for a in self.rows.values()
            if not preferences.categories or a.category in preferences.categories
        ]
        return ArticlePage(items=matched[:per_page], total=len(matched), page=page, per_page=per_page)


class InMemoryPreferenceRepository:
    def __init__(self) -> None:
        self.rows: Dict[int, UserPreference] = {}

    def get(self, user_id: int) -> Optional[UserPreference]:
        return self.rows.get(user_id)

    def upsert(self, user_id: int, preferences: Preferences) -> UserPreference:
        self.rows[user_id] = UserPreference(id=user_id, user_id=user_id, preferences=preferences)
        return self.rows[user_id]

    def delete(self, user_id: int) -> bool:
        return self.rows.pop(user_id, None) is not None


class ScriptedFetcher(ProviderFetcher):
    """Fetcher returning canned records; raw records are already canonical."""

    display_name = "Scripted"
    default_base_url = "https://example.test"
    api_key_env = "SCRIPTED_KEY"

    def __init__(self, source_key: str, records=None, error: Optional[str] = None, raises=None):
        self.source_key = source_key
        super().__init__(api_key="test-key")
        self.records: List[Dict[str, Any]] = list(records or [])
        self.error = error
        self.raises = raises
        self.calls: List[FetchParameters] = []

    def build_request(self, params):
        return self.base_url, {}

    def extract_items(self, payload):
        return payload

    async def fetch_articles(self, params: FetchParameters) -> FetchResult:
        self.calls.append(params)
        if self.raises is not None:
            raise self.raises
        if self.error:
            return FetchResult.failed(self.source_key, self.error)
        return FetchResult.ok(self.source_key, self.records)

    def transform_article(self, raw: Dict[str, Any]) -> NormalizedArticle:
        return NormalizedArticle(
            title=raw.get("title") or "",
            url=raw.get("url") or "",
            description=raw.get("description"),
            category=raw.get("category"),
            raw=raw,
        )


@pytest.fixture
def source_registry() -> InMemorySourceRegistry:
    return InMemorySourceRegistry()


@pytest.fixture
def article_repository(source_registry) -> InMemoryArticleRepository:
    return InMemoryArticleRepository(source_registry)


@pytest.fixture
def preference_repository() -> InMemoryPreferenceRepository:
    return InMemoryPreferenceRepository()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep real credentials and config files out of tests."""
    for name in ("NEWSAPI_KEY", "GUARDIAN_API_KEY", "NYT_API_KEY", "NEWSHUB_DB_PASSWORD"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NEWSHUB_CONFIG", str(tmp_path / "missing-config.yaml"))
