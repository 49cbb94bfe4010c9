"""
User preference and profile operations.
"""
import logging
from typing import Any, Dict, List, Optional

from newsfeed.core.store import DataStore, User
from newsfeed.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, store: DataStore, categories: List[str], languages: Optional[List[str]] = None,
                 max_preferences: int = 10):
        self.store = store
        self.categories = list(categories)
        self.languages = list(languages or ['en'])
        self.max_preferences = max_preferences

    def _require_user(self, user_id: str) -> User:
        user = self.store.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError('User not found', 'User not found in the system')
        return user

    def validate_preferences(self, preferences: Any) -> List[str]:
        """
        Check a preference list against the category vocabulary.

        Raises:
            ValidationError: Not a list, too long, duplicated, non-string
                or unknown entries
        """
        if not isinstance(preferences, (list, tuple)) or len(preferences) > self.max_preferences:
            raise ValidationError('Validation failed', [
                f'Preferences must be an array with maximum {self.max_preferences} items'
            ])
        if not all(isinstance(pref, str) for pref in preferences):
            raise ValidationError('Validation failed', ['All preferences must be strings'])
        if len(set(preferences)) != len(preferences):
            raise ValidationError('Validation failed', ['Duplicate preferences are not allowed'])

        invalid = [pref for pref in preferences if pref not in self.categories]
        if invalid:
            raise ValidationError('Invalid preferences', {
                'invalidPreferences': invalid,
                'availableCategories': self.categories,
            })
        return list(preferences)

    def get_preferences(self, user_id: str) -> Dict[str, Any]:
        user = self._require_user(user_id)
        return {
            'preferences': list(user.preferences),
            'availableCategories': self.categories,
            'availableLanguages': self.languages,
        }

    def update_preferences(self, user_id: str, preferences: Any) -> Dict[str, Any]:
        """
        Replace a user's preferences.

        Returns:
            Dict with the stored preferences and the update time

        Raises:
            ValidationError: See validate_preferences
            NotFoundError: Unknown user
        """
        preferences = self.validate_preferences(preferences)
        user = self._require_user(user_id)
        user.update_preferences(preferences)
        logger.info(f"Updated preferences for user {user_id}: {preferences}")
        return {
            'preferences': list(user.preferences),
            'updatedAt': user.to_dict()['updatedAt'],
        }

    def get_profile(self, user_id: str) -> Dict[str, Any]:
        user = self._require_user(user_id)
        profile = user.to_dict()
        profile['statistics'] = {
            'readArticles': len(self.store.get_user_read_articles(user_id)),
            'favoriteArticles': len(self.store.get_user_favorite_articles(user_id)),
            'preferencesCount': len(user.preferences),
        }
        return profile
