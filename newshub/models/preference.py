"""Per-user personalization preferences."""

from typing import List

from pydantic import BaseModel, Field, field_validator

from .base import DBModel


class Preferences(BaseModel):
    """Preferred sources, categories and authors."""

    sources: List[str] = Field(default_factory=list, description="Preferred source names")
    categories: List[str] = Field(default_factory=list, description="Preferred categories")
    authors: List[str] = Field(default_factory=list, description="Preferred authors (partial match)")

    @field_validator("sources", "categories", "authors", mode="before")
    @classmethod
    def split_csv(cls, v):
        """Accept comma-separated strings as well as lists."""
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return v

    @property
    def is_empty(self) -> bool:
        return not (self.sources or self.categories or self.authors)


class UserPreference(DBModel):
    """Stored preferences for one user."""

    user_id: int = Field(..., description="External user identifier")
    preferences: Preferences = Field(default_factory=Preferences)
