"""Aggregation statistics models."""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class SourceStats(BaseModel):
    """Outcome of one provider's fetch-and-store."""

    fetched: int = Field(0, description="Raw records returned by the provider", ge=0)
    stored: int = Field(0, description="Articles upserted", ge=0)
    error: Optional[str] = Field(None, description="Why the provider failed, if it did")


class FetchStatistics(BaseModel):
    """Totals and per-source outcomes of an aggregation run."""

    total_fetched: int = Field(0, ge=0)
    total_stored: int = Field(0, ge=0)
    sources: Dict[str, SourceStats] = Field(default_factory=dict)

    def add(self, source_key: str, stats: SourceStats) -> None:
        """Record a source's outcome and fold it into the totals."""
        self.sources[source_key] = stats
        self.total_fetched += stats.fetched
        self.total_stored += stats.stored

    @property
    def failed_sources(self) -> List[str]:
        return [key for key, stats in self.sources.items() if stats.error]
