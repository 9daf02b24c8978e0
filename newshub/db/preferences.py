"""User preference storage."""

from typing import Any, Dict, Optional

from psycopg.types.json import Jsonb

from ..models import Preferences, UserPreference
from .connection import get_connection


class PreferenceRepository:
    """Persist per-user feed preferences."""

    def __init__(self, db_config: Dict[str, Any]) -> None:
        self.db_config = db_config

    def get(self, user_id: int) -> Optional[UserPreference]:
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT * FROM user_preferences WHERE user_id = %s",
                    (user_id,),
                )
                row = cur.fetchone()
        return UserPreference(**row) if row else None

    def upsert(self, user_id: int, preferences: Preferences) -> UserPreference:
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO user_preferences (user_id, preferences)
                    VALUES (%s, %s)
                    ON CONFLICT (user_id) DO UPDATE SET
                        preferences = EXCLUDED.preferences
                    RETURNING *
                    """,
                    (user_id, Jsonb(preferences.model_dump())),
                )
                row = cur.fetchone()
        return UserPreference(**row)

    def delete(self, user_id: int) -> bool:
        """Delete a user's preferences; False when there were none."""
        with get_connection(self.db_config) as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM user_preferences WHERE user_id = %s",
                    (user_id,),
                )
                return cur.rowcount > 0
