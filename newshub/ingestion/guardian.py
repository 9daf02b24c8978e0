"""The Guardian Open Platform fetcher."""

from typing import Any, Dict, List, Optional, Tuple

from .base import ProviderFetcher, clean_text, format_date, parse_timestamp
from .models import FetchParameters, NormalizedArticle

SHOW_FIELDS = "trailText,body,thumbnail,byline"


def extract_author(raw: Dict[str, Any]) -> Optional[str]:
    """First contributor tag wins; the byline field is the fallback."""
    for tag in raw.get("tags") or []:
        if isinstance(tag, dict) and tag.get("type") == "contributor":
            name = clean_text(tag.get("webTitle"))
            if name:
                return name
    fields = raw.get("fields") or {}
    return clean_text(fields.get("byline"))


class GuardianFetcher(ProviderFetcher):
    """Fetch from the Guardian content search endpoint."""

    source_key = "guardian"
    display_name = "The Guardian"
    default_base_url = "https://content.guardianapis.com"
    website = "https://www.theguardian.com"
    description = "News and opinions from The Guardian"
    api_key_env = "GUARDIAN_API_KEY"

    def build_request(self, params: FetchParameters) -> Tuple[str, Dict[str, Any]]:
        query: Dict[str, Any] = {
            "api-key": self.api_key,
            "page-size": params.page_size,
            "show-tags": "contributor",
            "show-fields": SHOW_FIELDS,
            "order-by": "newest",
        }

        if params.search_query:
            query["q"] = params.search_query

        if params.category:
            query["section"] = params.category

        from_date = format_date(params.from_date, "%Y-%m-%d")
        if from_date:
            query["from-date"] = from_date

        to_date = format_date(params.to_date, "%Y-%m-%d")
        if to_date:
            query["to-date"] = to_date

        return self.base_url + "/search", query

    def extract_items(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        if not isinstance(payload, dict):
            raise ValueError("expected a JSON object")
        return self._records(payload.get("response"), "results")

    def transform_article(self, raw: Dict[str, Any]) -> NormalizedArticle:
        fields = raw.get("fields") or {}
        article_id = raw.get("id")

        return NormalizedArticle(
            source_article_id=str(article_id) if article_id else None,
            title=raw.get("webTitle") or "",
            description=fields.get("trailText"),
            content=fields.get("body"),
            url=raw.get("webUrl") or "",
            url_to_image=fields.get("thumbnail"),
            published_at=parse_timestamp(raw.get("webPublicationDate")),
            author_name=extract_author(raw),
            category=raw.get("sectionName"),
            raw=raw,
        )
