"""Source management in database."""

import logging
from typing import Any, Dict, List, Optional

from psycopg.types.json import Jsonb

from ..errors import StorageError
from ..models import Source
from .connection import get_connection

logger = logging.getLogger(__name__)


class SourceRegistry:
    """Map provider keys to persisted sources."""

    def __init__(self, db_config: Dict[str, Any]) -> None:
        self.db_config = db_config

    def find_by_key(self, key: str) -> Optional[Source]:
        """Get a source by key."""
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT * FROM sources WHERE key = %s", (key,))
                row = cur.fetchone()
        return Source(**row) if row else None

    def get_or_create(
        self,
        key: str,
        name: str,
        base_url: Optional[str] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> Source:
        """
        Return the source for ``key``, creating it on first use.

        Concurrent callers race on the unique key; the first insert wins and
        everyone else reads that row back.
        """
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO sources (key, name, base_url, meta)
                    VALUES (%s, %s, %s, %s)
                    ON CONFLICT (key) DO NOTHING
                    RETURNING *
                    """,
                    (key, name, base_url, Jsonb(meta or {})),
                )
                row = cur.fetchone()

                if row is None:
                    cur.execute("SELECT * FROM sources WHERE key = %s", (key,))
                    row = cur.fetchone()
                    if row is None:
                        raise StorageError(
                            f"Source {key} vanished during get-or-create", {"key": key}
                        )
                else:
                    logger.info("Registered new source %s", key)

        return Source(**row)

    def sync(
        self,
        key: str,
        name: str,
        base_url: Optional[str] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> Source:
        """Create a source or refresh its display metadata."""
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO sources (key, name, base_url, meta)
                    VALUES (%s, %s, %s, %s)
                    ON CONFLICT (key) DO UPDATE SET
                        name = EXCLUDED.name,
                        base_url = EXCLUDED.base_url,
                        meta = EXCLUDED.meta
                    RETURNING *
                    """,
                    (key, name, base_url, Jsonb(meta or {})),
                )
                row = cur.fetchone()
        return Source(**row)

    def list_with_counts(self) -> List[Source]:
        """Get all sources with their stored article counts."""
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT s.*, COUNT(a.id) AS article_count
                    FROM sources s
                    LEFT JOIN articles a ON a.source_id = s.id
                    GROUP BY s.id
                    ORDER BY s.name
                    """
                )
                rows = cur.fetchall()
        return [Source(**row) for row in rows]
