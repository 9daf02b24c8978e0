"""SQL fragments for article queries."""

from datetime import timedelta
from typing import Any, List, Tuple

from ..models import ArticleFilters, Preferences

ARTICLE_COLUMNS = """
    a.id, a.source_id, a.source_article_id, a.title, a.description,
    a.content, a.url, a.url_to_image, a.published_at, a.author_name,
    a.category, a.raw, a.is_active, a.created_at, a.updated_at,
    s.key AS source_key, s.name AS source_name
"""


def like_pattern(term: str) -> str:
    """Wrap a term for a substring ILIKE match, escaping wildcards."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def build_article_where(filters: ArticleFilters) -> Tuple[str, List[Any]]:
    """
    Build the WHERE clause and parameters for a filtered article query.

    The clause assumes articles aliased as ``a`` joined to sources as ``s``.
    """
    clauses = ["a.is_active"]
    params: List[Any] = []

    if filters.has_search:
        pattern = like_pattern(filters.search_query.strip())
        clauses.append(
            "(a.title ILIKE %s OR a.description ILIKE %s OR a.content ILIKE %s)"
        )
        params.extend([pattern, pattern, pattern])

    if filters.from_date:
        clauses.append("a.published_at >= %s")
        params.append(filters.from_date)

    if filters.to_date:
        # to_date is inclusive of the whole day
        clauses.append("a.published_at < %s")
        params.append(filters.to_date + timedelta(days=1))

    if filters.category:
        clauses.append("a.category = %s")
        params.append(filters.category)

    if filters.sources:
        clauses.append("s.key = ANY(%s)")
        params.append(list(filters.sources))

    if filters.author:
        clauses.append("a.author_name ILIKE %s")
        params.append(like_pattern(filters.author.strip()))

    return " AND ".join(clauses), params


def build_order_by(sort_order: str) -> str:
    """ORDER BY for published_at; undated articles always sort last."""
    direction = "ASC" if sort_order == "asc" else "DESC"
    return f"a.published_at {direction} NULLS LAST, a.id {direction}"


def build_preference_where(preferences: Preferences) -> Tuple[str, List[Any]]:
    """WHERE clause for a personalized feed."""
    clauses = ["a.is_active"]
    params: List[Any] = []

    if preferences.sources:
        clauses.append("s.name = ANY(%s)")
        params.append(list(preferences.sources))

    if preferences.categories:
        clauses.append("a.category = ANY(%s)")
        params.append(list(preferences.categories))

    if preferences.authors:
        clauses.append("a.author_name ILIKE ANY(%s)")
        params.append([like_pattern(author) for author in preferences.authors])

    return " AND ".join(clauses), params
