import pytest
from typer.testing import CliRunner

from newshub.cli import fetch as fetch_cli
from newshub.cli import search as search_cli
from newshub.cli.app import app
from newshub.cli.init import seed_sources
from newshub.pipeline import NewsAggregator
from newshub.services import ArticleService

from .conftest import ScriptedFetcher

runner = CliRunner()


@pytest.fixture
def offline_database(monkeypatch):
    """Pretend Postgres is reachable without touching it."""
    for module in (fetch_cli, search_cli):
        monkeypatch.setattr(module, "require_database", lambda config: {})


def test_check_config_fails_without_keys():
    result = runner.invoke(app, ["check-config"])

    assert result.exit_code == 1
    assert "NEWSAPI_KEY" in result.output
    assert "NOT CONFIGURED" in result.output


def test_check_config_passes_with_all_keys(monkeypatch):
    monkeypatch.setenv("NEWSAPI_KEY", "n")
    monkeypatch.setenv("GUARDIAN_API_KEY", "g")
    monkeypatch.setenv("NYT_API_KEY", "t")

    result = runner.invoke(app, ["check-config"])

    assert result.exit_code == 0
    assert "All API keys are configured" in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["fetch", "--from", "yesterday"],
        ["fetch", "--from", "2025-10-25", "--to", "2025-10-01"],
        ["fetch", "--page-size", "500"],
    ],
)
def test_fetch_rejects_invalid_options(args, monkeypatch):
    def unreachable(config):
        raise AssertionError("database must not be touched")

    monkeypatch.setattr(fetch_cli, "require_database", unreachable)

    result = runner.invoke(app, args)

    assert result.exit_code == 1
    assert "Invalid fetch options" in result.output


def test_fetch_without_providers_exits(offline_database, monkeypatch, source_registry, article_repository):
    monkeypatch.setattr(
        fetch_cli,
        "create_aggregator",
        lambda config: NewsAggregator({}, source_registry, article_repository),
    )

    result = runner.invoke(app, ["fetch"])

    assert result.exit_code == 1
    assert "No news providers are configured" in result.output


def test_fetch_runs_selected_sources(offline_database, monkeypatch, source_registry, article_repository):
    guardian = ScriptedFetcher("guardian", records=[{"title": "Hello", "url": "https://g/hello"}])
    newsapi = ScriptedFetcher("newsapi", records=[{"title": "Other", "url": "https://n/other"}])
    monkeypatch.setattr(
        fetch_cli,
        "create_aggregator",
        lambda config: NewsAggregator(
            {"guardian": guardian, "newsapi": newsapi}, source_registry, article_repository
        ),
    )

    result = runner.invoke(app, ["fetch", "--sources", "guardian", "--q", "hello"])

    assert result.exit_code == 0
    assert "Fetch completed" in result.output
    assert guardian.calls[0].search_query == "hello"
    assert newsapi.calls == []
    assert list(article_repository.rows) == ["https://g/hello"]


def test_search_reports_auto_fetch(offline_database, monkeypatch, source_registry, article_repository):
    fetcher = ScriptedFetcher("nytimes", records=[{"title": "Quantum leap", "url": "https://nyt/q"}])
    aggregator = NewsAggregator({"nytimes": fetcher}, source_registry, article_repository)
    monkeypatch.setattr(
        search_cli,
        "create_article_service",
        lambda config: ArticleService(article_repository, aggregator),
    )

    result = runner.invoke(app, ["search", "--q", "quantum"])

    assert result.exit_code == 0
    assert len(fetcher.calls) == 1
    assert "fetched from news sources" in result.output
    assert "Quantum" in result.output


def test_search_rejects_bad_sort(offline_database):
    result = runner.invoke(app, ["search", "--sort", "sideways"])

    assert result.exit_code == 1
    assert "Invalid search options" in result.output


def test_seed_sources_registers_every_provider(source_registry):
    count = seed_sources(source_registry)

    assert count == 3
    assert sorted(source_registry.sources) == ["guardian", "newsapi", "nytimes"]
    assert source_registry.sources["guardian"].name == "The Guardian"
    assert source_registry.sources["nytimes"].meta["website"] == "https://www.nytimes.com"
