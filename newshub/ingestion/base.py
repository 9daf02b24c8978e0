"""Provider fetcher interface and the shared HTTP fetch flow."""

import logging
from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pendulum

from ..errors import ConfigurationError
from .models import FetchParameters, FetchResult, NormalizedArticle

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "newshub/0.1 (news aggregator)"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Normalize a provider timestamp to an aware UTC datetime, or None."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = pendulum.parse(value, strict=False)
    except (ValueError, TypeError, OverflowError):
        return None

    if isinstance(parsed, pendulum.DateTime):
        return parsed.in_timezone("UTC")
    if isinstance(parsed, pendulum.Date):
        return pendulum.datetime(parsed.year, parsed.month, parsed.day, tz="UTC")
    return None


def format_date(value: Optional[date], fmt: str) -> Optional[str]:
    """Render a date filter in a provider's format."""
    if value is None:
        return None
    return value.strftime(fmt)


def clean_text(value: Any) -> Optional[str]:
    """Strip strings, turning blanks and non-strings into None."""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


class ProviderFetcher(ABC):
    """Fetch articles from one news provider and map them to canonical fields."""

    source_key: str = ""
    display_name: str = ""
    default_base_url: str = ""
    website: str = ""
    description: str = ""
    api_key_env: str = ""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the fetcher.

        Raises:
            ConfigurationError: if the API key is missing
        """
        if not api_key or not api_key.strip():
            raise ConfigurationError(
                f"{self.display_name} API key is not configured. "
                f"Please set {self.api_key_env} in your environment or .env file.",
                {"source_key": self.source_key, "env": self.api_key_env},
            )
        self.api_key = api_key.strip()
        self.base_url = (base_url or self.default_base_url).rstrip("/")
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

    @property
    def meta(self) -> Dict[str, str]:
        """Descriptive metadata stored on the Source record."""
        return {"description": self.description, "website": self.website}

    @abstractmethod
    def build_request(self, params: FetchParameters) -> Tuple[str, Dict[str, Any]]:
        """Return the endpoint URL and query parameters for a fetch."""

    @abstractmethod
    def extract_items(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Pull the list of raw article records out of a response body."""

    @abstractmethod
    def transform_article(self, raw: Dict[str, Any]) -> NormalizedArticle:
        """Map one raw provider record to canonical article fields."""

    async def fetch_articles(self, params: FetchParameters) -> FetchResult:
        """
        Fetch raw article records for the given parameters.

        Never raises for provider trouble: timeouts, transport errors, non-2xx
        responses and malformed bodies come back as a failed FetchResult.
        """
        url, query = self.build_request(params)
        headers = {"User-Agent": self.user_agent, "Accept": "application/json"}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self.transport,
            ) as client:
                response = await client.get(url, params=query)
                response.raise_for_status()
                payload = response.json()

            items = self.extract_items(payload)
            logger.info(
                "%s fetch successful: %d articles", self.display_name, len(items)
            )
            return FetchResult.ok(self.source_key, items)

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            error_msg = f"HTTP {status}"
            if status in (401, 403):
                error_msg = f"Authentication rejected ({status})"
            elif status == 429:
                error_msg = "Rate limited (429)"
            elif status >= 500:
                error_msg = f"Server error ({status})"
            logger.error(
                "%s fetch failed: %s - %s",
                self.display_name,
                error_msg,
                e.response.text[:500],
            )
            return FetchResult.failed(self.source_key, error_msg)
        except httpx.TimeoutException:
            logger.error("%s fetch timed out after %.0fs", self.display_name, self.timeout)
            return FetchResult.failed(self.source_key, "Request timed out")
        except httpx.HTTPError as e:
            logger.error("%s transport error: %s", self.display_name, e)
            return FetchResult.failed(self.source_key, f"HTTP error: {e}")
        except ValueError as e:
            logger.error("%s returned a malformed response: %s", self.display_name, e)
            return FetchResult.failed(self.source_key, f"Malformed response: {e}")
        except Exception as e:
            logger.exception("%s fetch raised unexpectedly", self.display_name)
            return FetchResult.failed(self.source_key, f"Unexpected error: {e}")

    @staticmethod
    def _records(container: Any, field: str) -> List[Dict[str, Any]]:
        """Return container[field] as a list of dict records."""
        if not isinstance(container, dict):
            raise ValueError(f"expected a JSON object around '{field}'")
        records = container.get(field) or []
        if not isinstance(records, list):
            raise ValueError(f"'{field}' is not a list")
        return [r for r in records if isinstance(r, dict)]
