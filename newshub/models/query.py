"""Read-path filter and page models."""

import math
from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .article import Article

MAX_PER_PAGE = 100


class ArticleFilters(BaseModel):
    """Filters accepted by article queries."""

    search_query: Optional[str] = Field(None, description="Keyword matched against title, description and content")
    from_date: Optional[date] = Field(None, description="Earliest publication date")
    to_date: Optional[date] = Field(None, description="Latest publication date (inclusive)")
    category: Optional[str] = Field(None, description="Exact category")
    sources: List[str] = Field(default_factory=list, description="Source keys")
    author: Optional[str] = Field(None, description="Author partial match")
    sort_order: Literal["asc", "desc"] = Field("desc", description="Order by published_at")
    per_page: int = Field(15, ge=1, description="Items per page")
    page: int = Field(1, ge=1, description="1-based page number")

    @field_validator("sources", mode="before")
    @classmethod
    def split_sources(cls, v):
        """Accept 'newsapi,guardian' as well as a list."""
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @field_validator("per_page")
    @classmethod
    def clamp_per_page(cls, v: int) -> int:
        return min(v, MAX_PER_PAGE)

    @model_validator(mode="after")
    def check_date_range(self) -> "ArticleFilters":
        if self.from_date and self.to_date and self.from_date > self.to_date:
            raise ValueError("from_date must be on or before to_date")
        return self

    @property
    def has_search(self) -> bool:
        return bool(self.search_query and self.search_query.strip())

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page


class ArticlePage(BaseModel):
    """One page of query results."""

    items: List[Article] = Field(default_factory=list)
    total: int = Field(0, ge=0)
    page: int = Field(1, ge=1)
    per_page: int = Field(15, ge=1)

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))


class QueryResult(BaseModel):
    """Articles returned by the read path and whether an auto-fetch ran."""

    page: ArticlePage
    auto_fetch: bool = False
