"""
GNews (gnews.io) adapter.
"""
from typing import Any, Dict

from newsfeed.core.article import Article, from_gnews
from newsfeed.fetchers.base import ProviderAdapter


class GNewsFetcher(ProviderAdapter):
    """
    Provider B. Uses ``token``/``lang``/``max`` where NewsAPI uses
    ``apiKey``/``language``/``pageSize``.
    """
    name = "gnews"
    headlines_path = "/top-headlines"
    search_path = "/search"

    def category_params(self, category: str, language: str, page_size: int) -> Dict[str, Any]:
        return {
            'token': self.api_key,
            'category': category,
            'lang': language,
            'max': page_size,
        }

    def search_params(self, keyword: str, language: str, page_size: int) -> Dict[str, Any]:
        return {
            'token': self.api_key,
            'q': keyword,
            'lang': language,
            'max': page_size,
            'sortby': 'publishdate',
        }

    def to_article(self, raw: Dict[str, Any], category: str, language: str) -> Article:
        return from_gnews(raw, category, language)
