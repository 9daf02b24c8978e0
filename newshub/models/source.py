"""Source model for news providers."""

from typing import Any, Dict, Optional

from pydantic import Field

from .base import DBModel


class Source(DBModel):
    """News provider source model."""

    key: str = Field(..., description="Stable provider slug, e.g. 'newsapi'")
    name: str = Field(..., description="Display name")
    base_url: Optional[str] = Field(None, description="Provider API base URL")
    meta: Dict[str, Any] = Field(default_factory=dict, description="Provider description and homepage")
    article_count: Optional[int] = Field(None, description="Number of stored articles, when counted")
