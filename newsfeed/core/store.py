"""
In-memory data store for users and articles.

A production deployment would put a database behind the same interface.
The store is constructed once and handed to the services that need it.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from newsfeed.core.article import Article, generate_id
from newsfeed.exceptions import DuplicateUserError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    """
    A registered reader with category preferences and read/favorite sets.
    """
    name: str
    email: str
    password: str  # already hashed by the auth layer
    preferences: List[str] = field(default_factory=list)
    read_articles: Set[str] = field(default_factory=set)
    favorite_articles: Set[str] = field(default_factory=set)
    id: str = field(default_factory=generate_id)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def touch(self):
        self.updated_at = _utcnow()

    def update_preferences(self, preferences: Iterable[str]):
        self.preferences = list(preferences)
        self.touch()

    def mark_as_read(self, article_id: str):
        self.read_articles.add(article_id)
        self.touch()

    def mark_as_favorite(self, article_id: str):
        self.favorite_articles.add(article_id)
        self.touch()

    def remove_favorite(self, article_id: str):
        self.favorite_articles.discard(article_id)
        self.touch()

    def is_article_read(self, article_id: str) -> bool:
        return article_id in self.read_articles

    def is_article_favorite(self, article_id: str) -> bool:
        return article_id in self.favorite_articles

    def to_dict(self) -> Dict[str, Any]:
        """Public representation; the password hash is never included."""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'preferences': list(self.preferences),
            'createdAt': self.created_at.isoformat().replace('+00:00', 'Z'),
            'updatedAt': self.updated_at.isoformat().replace('+00:00', 'Z'),
        }


class DataStore:
    """
    Users keyed by email and articles keyed by id.
    """
    def __init__(self):
        self.users: Dict[str, User] = {}
        self.articles: Dict[str, Article] = {}

    # User operations

    def create_user(self, name: str, email: str, password: str,
                    preferences: Optional[Iterable[str]] = None) -> User:
        """
        Register a user.

        Raises:
            DuplicateUserError: The email is already registered
        """
        if email in self.users:
            raise DuplicateUserError(f"User with email {email} already exists")
        user = User(name=name, email=email, password=password, preferences=list(preferences or []))
        self.users[email] = user
        logger.debug(f"Created user {user.id}")
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.users.get(email)

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        for user in self.users.values():
            if user.id == user_id:
                return user
        return None

    def update_user(self, email: str, **updates) -> Optional[User]:
        """
        Update user fields in place.

        Args:
            email: Email of the user to update
            **updates: Attribute names and new values

        Returns:
            The updated user, or None if no such user exists
        """
        user = self.users.get(email)
        if user is None:
            return None
        for name, value in updates.items():
            if name in ('id', 'email', 'created_at') or not hasattr(user, name):
                raise AttributeError(f"User field {name!r} cannot be updated")
            setattr(user, name, value)
        user.touch()
        return user

    def update_preferences(self, user_id: str, preferences: Iterable[str]) -> bool:
        user = self.get_user_by_id(user_id)
        if user is None:
            return False
        user.update_preferences(preferences)
        return True

    def user_exists(self, email: str) -> bool:
        return email in self.users

    # Article operations

    def store_article(self, article: Union[Article, Dict[str, Any]]) -> Article:
        """Store an article; an article with the same id is replaced."""
        if not isinstance(article, Article):
            article = Article.from_dict(article)
        self.articles[article.id] = article
        return article

    def store_articles(self, articles: Iterable[Union[Article, Dict[str, Any]]]) -> List[Article]:
        return [self.store_article(article) for article in articles]

    def get_article(self, article_id: str) -> Optional[Article]:
        return self.articles.get(article_id)

    def get_all_articles(self) -> List[Article]:
        return list(self.articles.values())

    def search_articles(self, query: str) -> List[Article]:
        """
        Case-insensitive substring search over title, description and content.
        """
        term = query.lower()
        return [
            article for article in self.articles.values()
            if term in (article.title or '').lower()
            or term in (article.description or '').lower()
            or term in (article.content or '').lower()
        ]

    def get_articles_by_category(self, categories: Union[str, Iterable[str]]) -> List[Article]:
        if isinstance(categories, str):
            categories = [categories]
        wanted = set(categories)
        return [article for article in self.articles.values() if article.category in wanted]

    # Read / favorite tracking

    def _resolve(self, article_ids: Iterable[str]) -> List[Article]:
        return [self.articles[article_id] for article_id in article_ids if article_id in self.articles]

    def get_user_read_articles(self, user_id: str) -> List[Article]:
        user = self.get_user_by_id(user_id)
        if user is None:
            return []
        return self._resolve(user.read_articles)

    def get_user_favorite_articles(self, user_id: str) -> List[Article]:
        user = self.get_user_by_id(user_id)
        if user is None:
            return []
        return self._resolve(user.favorite_articles)

    def mark_article_as_read(self, user_id: str, article_id: str) -> bool:
        user = self.get_user_by_id(user_id)
        if user is None:
            return False
        user.mark_as_read(article_id)
        return True

    def mark_article_as_favorite(self, user_id: str, article_id: str) -> bool:
        user = self.get_user_by_id(user_id)
        if user is None:
            return False
        user.mark_as_favorite(article_id)
        return True

    def remove_favorite_article(self, user_id: str, article_id: str) -> bool:
        user = self.get_user_by_id(user_id)
        if user is None:
            return False
        user.remove_favorite(article_id)
        return True

    def is_article_read(self, user_id: str, article_id: str) -> bool:
        user = self.get_user_by_id(user_id)
        return user is not None and user.is_article_read(article_id)

    def is_article_favorite(self, user_id: str, article_id: str) -> bool:
        user = self.get_user_by_id(user_id)
        return user is not None and user.is_article_favorite(article_id)

    # Statistics and cleanup

    def get_stats(self) -> Dict[str, int]:
        return {
            'totalUsers': len(self.users),
            'totalArticles': len(self.articles),
        }

    def clear_articles(self):
        self.articles.clear()

    def clear_users(self):
        self.users.clear()

    def reset(self):
        self.clear_articles()
        self.clear_users()
