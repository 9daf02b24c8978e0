"""Article model for normalized, stored news items."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from .base import DBModel


class Article(DBModel):
    """Article model."""

    source_id: int = Field(..., description="Foreign key to sources table")
    source_article_id: Optional[str] = Field(None, description="Provider-native article id")
    title: str = Field(..., description="Article title")
    description: Optional[str] = Field(None, description="Short summary")
    content: Optional[str] = Field(None, description="Body or lead paragraph")
    url: str = Field(..., description="Article URL, unique across all providers")
    url_to_image: Optional[str] = Field(None, description="Lead image URL")
    published_at: Optional[datetime] = Field(None, description="Publication timestamp (UTC)")
    author_name: Optional[str] = Field(None, description="Author or byline")
    category: Optional[str] = Field(None, description="Provider section or category")
    raw: Optional[Dict[str, Any]] = Field(None, description="Untouched provider payload")
    is_active: bool = Field(True, description="Soft-enable flag")
    source_key: Optional[str] = Field(None, description="Owning source key, when joined")
    source_name: Optional[str] = Field(None, description="Owning source name, when joined")
