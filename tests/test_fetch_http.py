import asyncio

import httpx
import pytest

from newshub.errors import ConfigurationError
from newshub.ingestion import FetchParameters, GuardianFetcher, NewsAPIFetcher, NYTimesFetcher


def run(fetcher, params=None):
    return asyncio.run(fetcher.fetch_articles(params or FetchParameters(search_query="election")))


def transport_returning(status_code=200, **kwargs):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status_code, **kwargs)

    return httpx.MockTransport(handler), seen


def test_newsapi_success_returns_records():
    transport, seen = transport_returning(
        json={"status": "ok", "articles": [{"title": "A", "url": "https://a"}, {"title": "B", "url": "https://b"}]}
    )
    fetcher = NewsAPIFetcher(api_key="k", transport=transport)

    result = run(fetcher)

    assert result.success
    assert result.source_key == "newsapi"
    assert result.item_count == 2
    assert [item["title"] for item in result.items] == ["A", "B"]
    assert seen[0].url.params["q"] == "election"
    assert seen[0].url.path == "/v2/everything"
    assert seen[0].headers["User-Agent"].startswith("newshub")


def test_guardian_reads_nested_results():
    transport, _ = transport_returning(
        json={"response": {"status": "ok", "results": [{"webTitle": "G", "webUrl": "https://g"}]}}
    )

    result = run(GuardianFetcher(api_key="k", transport=transport))

    assert result.success
    assert result.items == [{"webTitle": "G", "webUrl": "https://g"}]


def test_nytimes_reads_docs():
    transport, seen = transport_returning(json={"response": {"docs": [{"_id": "1"}], "meta": {}}})

    result = run(NYTimesFetcher(api_key="k", transport=transport))

    assert result.success
    assert result.item_count == 1
    assert seen[0].url.path.endswith("/articlesearch.json")


def test_empty_result_list_is_success():
    transport, _ = transport_returning(json={"articles": []})

    result = run(NewsAPIFetcher(api_key="k", transport=transport))

    assert result.success
    assert result.items == []


@pytest.mark.parametrize(
    "status_code,message",
    [
        (401, "Authentication rejected (401)"),
        (429, "Rate limited (429)"),
        (500, "Server error (500)"),
        (404, "HTTP 404"),
    ],
)
def test_error_status_becomes_failed_result(status_code, message):
    transport, _ = transport_returning(status_code, json={"message": "nope"})

    result = run(GuardianFetcher(api_key="k", transport=transport))

    assert not result.success
    assert result.error == message
    assert result.items == []


def test_timeout_becomes_failed_result():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    result = run(NYTimesFetcher(api_key="k", transport=httpx.MockTransport(handler)))

    assert not result.success
    assert result.error == "Request timed out"


def test_connection_error_becomes_failed_result():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    result = run(NewsAPIFetcher(api_key="k", transport=httpx.MockTransport(handler)))

    assert not result.success
    assert result.error.startswith("HTTP error")


def test_invalid_json_becomes_failed_result():
    transport, _ = transport_returning(content=b"<html>not json</html>")

    result = run(NewsAPIFetcher(api_key="k", transport=transport))

    assert not result.success
    assert result.error.startswith("Malformed response")


def test_unexpected_shape_becomes_failed_result():
    transport, _ = transport_returning(json={"response": {"docs": "oops"}})

    result = run(NYTimesFetcher(api_key="k", transport=transport))

    assert not result.success
    assert result.error.startswith("Malformed response")


@pytest.mark.parametrize("fetcher_cls", [NewsAPIFetcher, GuardianFetcher, NYTimesFetcher])
@pytest.mark.parametrize("api_key", [None, "", "   "])
def test_missing_key_is_a_configuration_error(fetcher_cls, api_key):
    with pytest.raises(ConfigurationError) as exc_info:
        fetcher_cls(api_key=api_key)

    assert fetcher_cls.api_key_env in exc_info.value.message
