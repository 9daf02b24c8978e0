"""Data models for ingestion."""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class FetchParameters(BaseModel):
    """Canonical request for one aggregation run, mapped per provider."""

    search_query: Optional[str] = Field(None, description="Search term")
    category: Optional[str] = Field(None, description="Category or section filter")
    from_date: Optional[date] = Field(None, description="Earliest publication date")
    to_date: Optional[date] = Field(None, description="Latest publication date")
    page_size: int = Field(50, description="Articles requested per provider", ge=1, le=100)
    language: str = Field("en", description="Language filter (NewsAPI only)")
    page: int = Field(0, description="Result page (NYTimes only)", ge=0)
    source_keys: Optional[List[str]] = Field(None, description="Restrict the run to these providers")

    @field_validator("search_query", "category", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("source_keys", mode="before")
    @classmethod
    def split_source_keys(cls, v):
        """Accept 'newsapi,guardian' as well as a list."""
        if isinstance(v, str):
            keys = [part.strip() for part in v.split(",") if part.strip()]
            return keys or None
        return v

    @model_validator(mode="after")
    def check_date_range(self) -> "FetchParameters":
        if self.from_date and self.to_date and self.from_date > self.to_date:
            raise ValueError("from_date must be on or before to_date")
        return self


class FetchResult(BaseModel):
    """Result of one provider call: the raw records, or why there are none."""

    source_key: str = Field(..., description="Provider source key")
    success: bool = Field(..., description="Whether fetch was successful")
    items: List[Dict[str, Any]] = Field(default_factory=list, description="Raw provider records")
    error: Optional[str] = Field(None, description="Error message if failed")
    item_count: int = Field(0, description="Number of records fetched")

    @classmethod
    def ok(cls, source_key: str, items: List[Dict[str, Any]]) -> "FetchResult":
        return cls(source_key=source_key, success=True, items=items, item_count=len(items))

    @classmethod
    def failed(cls, source_key: str, error: str) -> "FetchResult":
        return cls(source_key=source_key, success=False, error=error)


class NormalizedArticle(BaseModel):
    """Provider record mapped onto the canonical article fields."""

    source_article_id: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    content: Optional[str] = None
    url: str = ""
    url_to_image: Optional[str] = None
    published_at: Optional[datetime] = None
    author_name: Optional[str] = None
    category: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("url", "title", mode="before")
    @classmethod
    def strip_key_text(cls, v):
        """Trim surrounding whitespace; url is the dedup key."""
        if v is None:
            return ""
        if isinstance(v, str):
            return v.strip()
        return v

    @property
    def is_storable(self) -> bool:
        """Articles without a url or title are unusable."""
        return bool(self.url) and bool(self.title)
