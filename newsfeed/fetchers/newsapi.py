"""
NewsAPI (newsapi.org) adapter.
"""
from typing import Any, Dict

from newsfeed.core.article import Article, from_newsapi
from newsfeed.fetchers.base import ProviderAdapter


class NewsAPIFetcher(ProviderAdapter):
    """
    Provider A. Headlines come from ``/top-headlines``, searches from
    ``/everything`` sorted by publication date.
    """
    name = "newsapi"
    headlines_path = "/top-headlines"
    search_path = "/everything"

    def category_params(self, category: str, language: str, page_size: int) -> Dict[str, Any]:
        return {
            'apiKey': self.api_key,
            'category': category,
            'language': language,
            'pageSize': page_size,
        }

    def search_params(self, keyword: str, language: str, page_size: int) -> Dict[str, Any]:
        return {
            'apiKey': self.api_key,
            'q': keyword,
            'language': language,
            'pageSize': page_size,
            'sortBy': 'publishedAt',
        }

    def to_article(self, raw: Dict[str, Any], category: str, language: str) -> Article:
        return from_newsapi(raw, category, language)
