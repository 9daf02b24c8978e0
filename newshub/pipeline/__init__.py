"""Aggregation pipeline."""

from .aggregator import NewsAggregator
from .models import FetchStatistics, SourceStats

__all__ = ["FetchStatistics", "NewsAggregator", "SourceStats"]
