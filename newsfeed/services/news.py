"""
News operations for request handlers.

Handlers resolve the caller's identity and pass the user id in; the
service talks to the aggregator and the store and returns JSON-ready
dicts.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from newsfeed.core.aggregator import NewsAggregator
from newsfeed.core.article import Article
from newsfeed.core.store import DataStore, User
from newsfeed.exceptions import NotFoundError, ValidationError
from newsfeed.utils.responses import pagination_meta

logger = logging.getLogger(__name__)

KEYWORD_PATTERN = re.compile(r'^[a-zA-Z0-9\s\-_]+$')
KEYWORD_MIN_LENGTH = 2
KEYWORD_MAX_LENGTH = 100


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


def paginate(items: List[Any], page: int, limit: int) -> List[Any]:
    start = (page - 1) * limit
    return items[start:start + limit]


def enrich(article: Article, user: Optional[User]) -> Dict[str, Any]:
    """Article dict plus the caller's isRead/isFavorite flags."""
    data = article.to_dict()
    data['isRead'] = user.is_article_read(article.id) if user else False
    data['isFavorite'] = user.is_article_favorite(article.id) if user else False
    return data


class NewsService:
    """
    Personalized feed, search, and read/favorite marking.
    """
    def __init__(self, aggregator: NewsAggregator, store: DataStore, language: str = 'en',
                 max_limit: int = 100, fetch_multiplier: int = 2,
                 categories: Optional[List[str]] = None):
        self.aggregator = aggregator
        self.store = store
        self.language = language
        self.max_limit = max_limit
        self.fetch_multiplier = fetch_multiplier
        self.categories = categories

    def _require_user(self, user_id: str) -> User:
        user = self.store.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError('User not found', 'User not found in the system')
        return user

    def _require_article(self, article_id: str) -> Article:
        if not article_id or len(article_id) > 50:
            raise ValidationError('Validation failed', ['Invalid article ID format'])
        article = self.store.get_article(article_id)
        if article is None:
            raise NotFoundError('Article not found', 'The requested article was not found')
        return article

    def _validate_page(self, page: int, limit: int):
        errors = []
        if not isinstance(page, int) or page < 1:
            errors.append('Page must be a positive integer')
        if not isinstance(limit, int) or not 1 <= limit <= self.max_limit:
            errors.append(f'Limit must be between 1 and {self.max_limit}')
        if errors:
            raise ValidationError('Validation failed', errors)

    def _page_of(self, articles: List[Article], user: Optional[User], page: int, limit: int) -> Dict[str, Any]:
        enriched = [enrich(article, user) for article in articles]
        return {
            'news': paginate(enriched, page, limit),
            'pagination': pagination_meta(page, limit, len(enriched)),
        }

    async def get_news(self, user_id: str, page: int = 1, limit: int = 20,
                       category: Optional[str] = None) -> Dict[str, Any]:
        """
        Personalized news for a user.

        Args:
            user_id: Id of the requesting user
            page: 1-based page number
            limit: Page size
            category: Single category overriding the user's preferences

        Returns:
            Dict with the page of enriched articles and pagination info

        Raises:
            NotFoundError: Unknown user
            ValidationError: Bad page, limit or category
        """
        self._validate_page(page, limit)
        user = self._require_user(user_id)

        if category is not None and self.categories and category not in self.categories:
            raise ValidationError('Validation failed', ['Invalid category'])

        preferences = [category] if category else (user.preferences or ['general'])

        articles = await self.aggregator.get_personalized_news(
            preferences, self.language, limit * self.fetch_multiplier
        )
        if articles:
            self.store.store_articles(articles)

        return self._page_of(articles, user, page, limit)

    async def search_news(self, user_id: str, keyword: str, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        """
        Keyword search.

        Raises:
            ValidationError: Bad keyword, page or limit
        """
        keyword = (keyword or '').strip()
        if not KEYWORD_MIN_LENGTH <= len(keyword) <= KEYWORD_MAX_LENGTH:
            raise ValidationError('Validation failed', [
                f'Keyword must be between {KEYWORD_MIN_LENGTH} and {KEYWORD_MAX_LENGTH} characters'
            ])
        if not KEYWORD_PATTERN.match(keyword):
            raise ValidationError('Validation failed', ['Keyword contains invalid characters'])
        self._validate_page(page, limit)

        articles = await self.aggregator.search_news(keyword, self.language, limit * self.fetch_multiplier)
        if articles:
            self.store.store_articles(articles)

        result = self._page_of(articles, self.store.get_user_by_id(user_id), page, limit)
        result['keyword'] = keyword
        return result

    def _mark(self, user_id: str, article_id: str, operation, stamp: str) -> Dict[str, Any]:
        article = self._require_article(article_id)
        if not operation(user_id, article_id):
            raise NotFoundError('User not found', 'User not found in the system')
        return {'articleId': article_id, 'title': article.title, stamp: _now_iso()}

    def mark_as_read(self, user_id: str, article_id: str) -> Dict[str, Any]:
        return self._mark(user_id, article_id, self.store.mark_article_as_read, 'markedAt')

    def mark_as_favorite(self, user_id: str, article_id: str) -> Dict[str, Any]:
        return self._mark(user_id, article_id, self.store.mark_article_as_favorite, 'markedAt')

    def remove_favorite(self, user_id: str, article_id: str) -> Dict[str, Any]:
        return self._mark(user_id, article_id, self.store.remove_favorite_article, 'removedAt')

    def get_read_articles(self, user_id: str, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        self._validate_page(page, limit)
        articles = self.store.get_user_read_articles(user_id)
        return {
            'articles': [article.to_dict() for article in paginate(articles, page, limit)],
            'pagination': pagination_meta(page, limit, len(articles)),
        }

    def get_favorite_articles(self, user_id: str, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        self._validate_page(page, limit)
        articles = self.store.get_user_favorite_articles(user_id)
        return {
            'articles': [article.to_dict() for article in paginate(articles, page, limit)],
            'pagination': pagination_meta(page, limit, len(articles)),
        }

    def get_article(self, user_id: str, article_id: str) -> Dict[str, Any]:
        article = self._require_article(article_id)
        return enrich(article, self.store.get_user_by_id(user_id))
