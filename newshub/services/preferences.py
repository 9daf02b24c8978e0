"""Per-user feed preferences."""

from ..db.preferences import PreferenceRepository
from ..models import Preferences, UserPreference


class PreferenceService:
    """Read and write a user's preferred sources, categories and authors."""

    def __init__(self, repository: PreferenceRepository) -> None:
        self.repository = repository

    def get_preferences(self, user_id: int) -> Preferences:
        """Saved preferences, or empty ones when the user has none."""
        stored = self.repository.get(user_id)
        if stored is None:
            return Preferences()
        return stored.preferences

    def update_preferences(self, user_id: int, preferences: Preferences) -> UserPreference:
        return self.repository.upsert(user_id, preferences)

    def delete_preferences(self, user_id: int) -> bool:
        return self.repository.delete(user_id)
