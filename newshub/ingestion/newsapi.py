"""NewsAPI.org fetcher."""

from typing import Any, Dict, List, Tuple

from .base import ProviderFetcher, clean_text, format_date, parse_timestamp
from .models import FetchParameters, NormalizedArticle

# /everything refuses requests without at least one filter
DEFAULT_QUERY = "news OR technology OR business OR sports"


class NewsAPIFetcher(ProviderFetcher):
    """Fetch from NewsAPI's /everything or /top-headlines endpoints."""

    source_key = "newsapi"
    display_name = "NewsAPI"
    default_base_url = "https://newsapi.org/v2"
    website = "https://newsapi.org"
    description = "NewsAPI aggregates headlines from over 80,000 worldwide sources"
    api_key_env = "NEWSAPI_KEY"

    def build_request(self, params: FetchParameters) -> Tuple[str, Dict[str, Any]]:
        query: Dict[str, Any] = {
            "apiKey": self.api_key,
            "pageSize": params.page_size,
            "language": params.language,
        }

        use_top_headlines = bool(params.category)

        if params.search_query:
            query["q"] = params.search_query
        elif not use_top_headlines:
            query["q"] = DEFAULT_QUERY

        if params.category:
            query["category"] = params.category

        from_date = format_date(params.from_date, "%Y-%m-%d")
        if from_date:
            query["from"] = from_date

        to_date = format_date(params.to_date, "%Y-%m-%d")
        if to_date:
            query["to"] = to_date

        endpoint = "/top-headlines" if use_top_headlines else "/everything"
        return self.base_url + endpoint, query

    def extract_items(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        return self._records(payload, "articles")

    def transform_article(self, raw: Dict[str, Any]) -> NormalizedArticle:
        url = raw.get("url") or ""
        return NormalizedArticle(
            # NewsAPI has no article ids; the URL is the only stable handle
            source_article_id=url or None,
            title=raw.get("title") or "",
            description=raw.get("description"),
            content=raw.get("content"),
            url=url,
            url_to_image=raw.get("urlToImage"),
            published_at=parse_timestamp(raw.get("publishedAt")),
            author_name=clean_text(raw.get("author")),
            category=None,
            raw=raw,
        )
