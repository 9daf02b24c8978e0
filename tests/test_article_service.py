import asyncio

import pytest

from newshub.models import ArticleFilters, Preferences
from newshub.pipeline import NewsAggregator
from newshub.services import ArticleService, PreferenceService

from .conftest import ScriptedFetcher


class CountingAggregator(NewsAggregator):
    """Aggregator that records which entry point ran."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.run_all_calls = []
        self.run_selected_calls = []

    async def run_all_async(self, params=None):
        self.run_all_calls.append(params)
        return await super().run_all_async(params)

    async def run_selected_async(self, source_keys, params=None):
        self.run_selected_calls.append((list(source_keys), params))
        return await super().run_selected_async(source_keys, params)


class ExplodingAggregator(CountingAggregator):
    async def run_all_async(self, params=None):
        self.run_all_calls.append(params)
        raise RuntimeError("database went away")


@pytest.fixture
def service_factory(source_registry, article_repository, preference_repository):
    def build(*fetchers, aggregator_cls=CountingAggregator, **options):
        aggregator = aggregator_cls(
            {f.source_key: f for f in fetchers}, source_registry, article_repository
        )
        service = ArticleService(
            article_repository, aggregator, PreferenceService(preference_repository), **options
        )
        return service, aggregator

    return build


def test_unmatched_search_triggers_exactly_one_run(service_factory):
    service, aggregator = service_factory(ScriptedFetcher("newsapi"))

    result = service.query_with_auto_fetch(ArticleFilters(search_query="zzzznonexistent"))

    assert len(aggregator.run_all_calls) == 1
    assert aggregator.run_all_calls[0].search_query == "zzzznonexistent"
    assert result.auto_fetch is True
    assert result.page.total == 0


def test_empty_search_never_triggers_a_run(service_factory):
    service, aggregator = service_factory(ScriptedFetcher("newsapi"))

    result = service.query_with_auto_fetch(ArticleFilters(search_query=""))

    assert aggregator.run_all_calls == []
    assert aggregator.run_selected_calls == []
    assert result.auto_fetch is False


def test_whitespace_search_never_triggers_a_run(service_factory):
    service, aggregator = service_factory(ScriptedFetcher("newsapi"))

    result = service.query_with_auto_fetch(ArticleFilters(search_query="   "))

    assert aggregator.run_all_calls == []
    assert result.auto_fetch is False


def test_matching_stored_rows_skip_the_fetch(service_factory, article_repository):
    fetcher = ScriptedFetcher(
        "guardian", records=[{"title": "Election night", "url": "https://g/election"}]
    )
    service, aggregator = service_factory(fetcher)
    aggregator.run_all()
    aggregator.run_all_calls.clear()

    result = service.query_with_auto_fetch(ArticleFilters(search_query="election"))

    assert aggregator.run_all_calls == []
    assert result.auto_fetch is False
    assert result.page.total == 1


def test_fetched_articles_are_returned_after_requery(service_factory, article_repository):
    fetcher = ScriptedFetcher(
        "nytimes", records=[{"title": "Quantum breakthrough", "url": "https://nyt/quantum"}]
    )
    service, aggregator = service_factory(fetcher)

    result = service.query_with_auto_fetch(ArticleFilters(search_query="quantum"))

    assert result.auto_fetch is True
    assert result.page.total == 1
    assert result.page.items[0].url == "https://nyt/quantum"
    assert article_repository.query_calls == 2


def test_repeated_misses_fetch_every_time(service_factory):
    service, aggregator = service_factory(ScriptedFetcher("newsapi"))

    service.query_with_auto_fetch(ArticleFilters(search_query="zzzznonexistent"))
    service.query_with_auto_fetch(ArticleFilters(search_query="zzzznonexistent"))

    assert len(aggregator.run_all_calls) == 2


def test_source_restriction_runs_only_those_sources(service_factory):
    newsapi = ScriptedFetcher("newsapi")
    guardian = ScriptedFetcher("guardian")
    service, aggregator = service_factory(newsapi, guardian)

    service.query_with_auto_fetch(
        ArticleFilters(search_query="zzzznonexistent", sources="guardian")
    )

    assert aggregator.run_all_calls == []
    assert aggregator.run_selected_calls[0][0] == ["guardian"]
    assert len(guardian.calls) == 1
    assert newsapi.calls == []


def test_failed_run_degrades_to_empty_result(service_factory):
    service, aggregator = service_factory(
        ScriptedFetcher("newsapi"), aggregator_cls=ExplodingAggregator
    )

    result = service.query_with_auto_fetch(ArticleFilters(search_query="zzzznonexistent"))

    assert len(aggregator.run_all_calls) == 1
    assert result.auto_fetch is False
    assert result.page.total == 0


def test_lookup_helpers(service_factory):
    fetcher = ScriptedFetcher(
        "guardian",
        records=[
            {"title": "One", "url": "https://g/1", "category": "World"},
            {"title": "Two", "url": "https://g/2", "category": "Sport"},
        ],
    )
    service, aggregator = service_factory(fetcher)
    aggregator.run_all()

    assert service.get_categories() == ["Sport", "World"]
    assert service.get_article(1).url == "https://g/1"
    assert service.get_article(999) is None


def test_personalized_feed_uses_saved_preferences(service_factory, preference_repository):
    fetcher = ScriptedFetcher(
        "guardian",
        records=[
            {"title": "One", "url": "https://g/1", "category": "World"},
            {"title": "Two", "url": "https://g/2", "category": "Sport"},
        ],
    )
    service, aggregator = service_factory(fetcher)
    aggregator.run_all()
    service.preferences.update_preferences(7, Preferences(categories=["Sport"]))

    page = service.get_personalized_articles(7, per_page=500)

    assert page.per_page == 100
    assert [a.title for a in page.items] == ["Two"]


def test_personalized_feed_needs_preference_service(article_repository, source_registry):
    service = ArticleService(article_repository, NewsAggregator({}, source_registry, article_repository))

    with pytest.raises(RuntimeError):
        service.get_personalized_articles(1)


def test_preference_service_round_trip(preference_repository):
    service = PreferenceService(preference_repository)

    assert service.get_preferences(3).is_empty

    service.update_preferences(3, Preferences(sources="The Guardian, NewsAPI", authors=["Doe"]))
    saved = service.get_preferences(3)

    assert saved.sources == ["The Guardian", "NewsAPI"]
    assert saved.authors == ["Doe"]
    assert service.delete_preferences(3) is True
    assert service.delete_preferences(3) is False
    assert service.get_preferences(3).is_empty


def test_auto_fetch_from_inside_running_loop(service_factory):
    fetcher = ScriptedFetcher(
        "guardian", records=[{"title": "Zzzz found", "url": "https://g/zzzz"}]
    )
    service, aggregator = service_factory(fetcher)

    async def handle_request():
        return await service.query_with_auto_fetch_async(ArticleFilters(search_query="zzzz"))

    result = asyncio.run(handle_request())

    assert result.auto_fetch is True
    assert result.page.total == 1
    assert len(aggregator.run_all_calls) == 1
    assert len(fetcher.calls) == 1


def test_auto_fetch_uses_configured_fetch_settings(service_factory):
    fetcher = ScriptedFetcher("newsapi")
    service, _ = service_factory(fetcher, page_size=20, language="de")

    service.query_with_auto_fetch(ArticleFilters(search_query="zzzznonexistent"))

    assert fetcher.calls[0].page_size == 20
    assert fetcher.calls[0].language == "de"


def test_configured_max_per_page_caps_every_read(service_factory):
    fetcher = ScriptedFetcher(
        "guardian",
        records=[{"title": f"Story {i}", "url": f"https://g/{i}"} for i in range(5)],
    )
    service, aggregator = service_factory(fetcher, max_per_page=2)
    aggregator.run_all()

    result = service.query_with_auto_fetch(ArticleFilters(search_query="story", per_page=50))
    feed = service.get_personalized_articles(1, per_page=50)

    assert result.page.per_page == 2
    assert len(result.page.items) == 2
    assert result.page.total == 5
    assert feed.per_page == 2
