"""Article storage and queries."""

import logging
from typing import Any, Dict, List, Optional

from psycopg.types.json import Jsonb

from ..ingestion.models import NormalizedArticle
from ..models import Article, ArticleFilters, ArticlePage, Preferences
from .connection import get_connection
from .filters import (
    ARTICLE_COLUMNS,
    build_article_where,
    build_order_by,
    build_preference_where,
)

logger = logging.getLogger(__name__)


UPSERT_SQL = """
    INSERT INTO articles (
        source_id, source_article_id, title, description, content,
        url, url_to_image, published_at, author_name, category, raw
    ) VALUES (
        %(source_id)s, %(source_article_id)s, %(title)s, %(description)s,
        %(content)s, %(url)s, %(url_to_image)s, %(published_at)s,
        %(author_name)s, %(category)s, %(raw)s
    )
    ON CONFLICT (url) DO UPDATE SET
        source_id = EXCLUDED.source_id,
        source_article_id = EXCLUDED.source_article_id,
        title = EXCLUDED.title,
        description = EXCLUDED.description,
        content = EXCLUDED.content,
        url_to_image = EXCLUDED.url_to_image,
        published_at = EXCLUDED.published_at,
        author_name = EXCLUDED.author_name,
        category = EXCLUDED.category,
        raw = EXCLUDED.raw
    RETURNING *
"""


class ArticleRepository:
    """Handle article storage, deduplication and filtered reads."""

    def __init__(self, db_config: Dict[str, Any]) -> None:
        self.db_config = db_config

    def upsert_by_url(self, article: NormalizedArticle, source_id: int) -> Article:
        """
        Insert an article, or overwrite the existing row with the same url.

        The unique url constraint makes this safe against concurrent runs
        writing the same article. Each call is its own transaction.
        """
        values = article.model_dump()
        values["source_id"] = source_id
        values["raw"] = Jsonb(article.raw)

        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(UPSERT_SQL, values)
                row = cur.fetchone()
        return Article(**row)

    def query(self, filters: ArticleFilters) -> ArticlePage:
        """Get one page of articles matching the filters, plus the total."""
        where, params = build_article_where(filters)

        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT COUNT(*) AS total
                    FROM articles a
                    JOIN sources s ON a.source_id = s.id
                    WHERE {where}
                    """,
                    params,
                )
                total = cur.fetchone()["total"]

                cur.execute(
                    f"""
                    SELECT {ARTICLE_COLUMNS}
                    FROM articles a
                    JOIN sources s ON a.source_id = s.id
                    WHERE {where}
                    ORDER BY {build_order_by(filters.sort_order)}
                    LIMIT %s OFFSET %s
                    """,
                    [*params, filters.per_page, filters.offset],
                )
                rows = cur.fetchall()

        return ArticlePage(
            items=[Article(**row) for row in rows],
            total=total,
            page=filters.page,
            per_page=filters.per_page,
        )

    def find_by_id(self, article_id: int) -> Optional[Article]:
        """Get a single article with its source."""
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT {ARTICLE_COLUMNS}
                    FROM articles a
                    JOIN sources s ON a.source_id = s.id
                    WHERE a.id = %s
                    """,
                    (article_id,),
                )
                row = cur.fetchone()
        return Article(**row) if row else None

    def categories(self) -> List[str]:
        """Distinct non-empty categories."""
        return self._distinct("category")

    def authors(self) -> List[str]:
        """Distinct non-empty author names."""
        return self._distinct("author_name")

    def _distinct(self, column: str) -> List[str]:
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT DISTINCT {column} AS value
                    FROM articles
                    WHERE {column} IS NOT NULL AND {column} <> ''
                    ORDER BY value
                    """
                )
                return [row["value"] for row in cur.fetchall()]

    def personalized(
        self,
        preferences: Preferences,
        per_page: int = 15,
        page: int = 1,
    ) -> ArticlePage:
        """Newest articles matching a user's preferred sources, categories and authors."""
        where, params = build_preference_where(preferences)
        offset = (page - 1) * per_page

        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    SELECT COUNT(*) AS total
                    FROM articles a
                    JOIN sources s ON a.source_id = s.id
                    WHERE {where}
                    """,
                    params,
                )
                total = cur.fetchone()["total"]

                cur.execute(
                    f"""
                    SELECT {ARTICLE_COLUMNS}
                    FROM articles a
                    JOIN sources s ON a.source_id = s.id
                    WHERE {where}
                    ORDER BY {build_order_by("desc")}
                    LIMIT %s OFFSET %s
                    """,
                    [*params, per_page, offset],
                )
                rows = cur.fetchall()

        return ArticlePage(
            items=[Article(**row) for row in rows],
            total=total,
            page=page,
            per_page=per_page,
        )
