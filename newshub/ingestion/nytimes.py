"""New York Times Article Search fetcher."""

from typing import Any, Dict, List, Optional, Tuple

from .base import ProviderFetcher, clean_text, format_date, parse_timestamp
from .models import FetchParameters, NormalizedArticle

SEARCH_PATH = "/articlesearch.json"
IMAGE_HOST = "https://www.nytimes.com/"


def extract_author(raw: Dict[str, Any]) -> Optional[str]:
    """Use byline.original minus its 'By ' prefix, else the first person."""
    byline = raw.get("byline")
    if not isinstance(byline, dict):
        return None

    original = clean_text(byline.get("original"))
    if original:
        if original[:3].lower() == "by ":
            original = original[3:].strip()
        return original or None

    people = byline.get("person") or []
    if people and isinstance(people[0], dict):
        person = people[0]
        name = f"{person.get('firstname') or ''} {person.get('lastname') or ''}".strip()
        return name or None

    return None


def extract_image_url(raw: Dict[str, Any]) -> Optional[str]:
    """Join the first multimedia path onto the nytimes.com host."""
    multimedia = raw.get("multimedia")
    if isinstance(multimedia, list):
        first = multimedia[0] if multimedia else None
    elif isinstance(multimedia, dict):
        # Newer responses nest the image under "default"
        first = multimedia.get("default") or multimedia
    else:
        first = None

    if not isinstance(first, dict):
        return None

    path = clean_text(first.get("url"))
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    return IMAGE_HOST + path.lstrip("/")


def build_filter_query(category: str) -> str:
    """Turn a bare category into an fq section filter."""
    if ":" in category:
        return category
    escaped = category.replace('"', '\\"')
    return f'section_name:("{escaped}")'


class NYTimesFetcher(ProviderFetcher):
    """Fetch from the NYT Article Search API."""

    source_key = "nytimes"
    display_name = "The New York Times"
    default_base_url = "https://api.nytimes.com/svc/search/v2"
    website = "https://www.nytimes.com"
    description = "Breaking news, analysis, and opinion from The New York Times"
    api_key_env = "NYT_API_KEY"

    def build_request(self, params: FetchParameters) -> Tuple[str, Dict[str, Any]]:
        query: Dict[str, Any] = {"api-key": self.api_key}

        if params.search_query:
            query["q"] = params.search_query

        if params.category:
            query["fq"] = build_filter_query(params.category)

        begin_date = format_date(params.from_date, "%Y%m%d")
        if begin_date:
            query["begin_date"] = begin_date

        end_date = format_date(params.to_date, "%Y%m%d")
        if end_date:
            query["end_date"] = end_date

        query["page"] = params.page

        url = self.base_url
        if not url.endswith(SEARCH_PATH):
            url += SEARCH_PATH
        return url, query

    def extract_items(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        if not isinstance(payload, dict):
            raise ValueError("expected a JSON object")
        return self._records(payload.get("response"), "docs")

    def transform_article(self, raw: Dict[str, Any]) -> NormalizedArticle:
        headline = raw.get("headline") or {}
        article_id = raw.get("_id")

        return NormalizedArticle(
            source_article_id=str(article_id) if article_id else None,
            title=(headline.get("main") if isinstance(headline, dict) else None) or "",
            description=raw.get("abstract"),
            content=raw.get("lead_paragraph"),
            url=raw.get("web_url") or "",
            url_to_image=extract_image_url(raw),
            published_at=parse_timestamp(raw.get("pub_date")),
            author_name=extract_author(raw),
            category=clean_text(raw.get("section_name")) or clean_text(raw.get("news_desk")),
            raw=raw,
        )
