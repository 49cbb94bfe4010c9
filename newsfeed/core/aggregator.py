"""
News aggregation across providers for Newsfeed.
"""
import asyncio
import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence

from newsfeed.config import Config
from newsfeed.core.article import Article
from newsfeed.core.cache import CacheManager
from newsfeed.core.mock import get_mock_articles
from newsfeed.fetchers.base import ProviderAdapter
from newsfeed.fetchers.gnews import GNewsFetcher
from newsfeed.fetchers.newsapi import NewsAPIFetcher
from newsfeed.utils.http import RateLimiter

logger = logging.getLogger(__name__)


def remove_duplicates(articles: Iterable[Article]) -> List[Article]:
    """
    Drop articles whose URL was already seen, keeping the first one.

    Articles without a URL are always kept.
    """
    seen = set()
    unique = []
    for article in articles:
        if article.url:
            if article.url in seen:
                continue
            seen.add(article.url)
        unique.append(article)
    return unique


def _published_key(article: Article) -> float:
    if article.published_at is None:
        return float('-inf')
    return article.published_at.timestamp()


def sort_by_published(articles: Iterable[Article]) -> List[Article]:
    """Newest first. Equal timestamps keep their input order; undated articles go last."""
    return sorted(articles, key=_published_key, reverse=True)


class NewsAggregator:
    """
    Merges articles from every configured provider.

    Personalized fetches fan out to all providers concurrently; searches
    query providers in order until the requested count is reached.
    """
    def __init__(self, providers: Sequence[ProviderAdapter], cache: CacheManager):
        self.providers = list(providers)
        self.cache = cache

    @classmethod
    def from_config(cls, config: Config) -> 'NewsAggregator':
        """
        Build the aggregator with NewsAPI and GNews adapters sharing one cache.

        Args:
            config: Loaded configuration

        Returns:
            NewsAggregator
        """
        cache = CacheManager(
            ttl=config.get('cache.ttl', 3600),
            check_period=config.get('cache.check_period', 600),
        )
        timeout = config.get('http.timeout_seconds', 10)
        # Backoff never outgrows the request timeout the wait is charged against
        rate_limiter = RateLimiter(config.get('http.requests_per_second', 5), max_backoff=timeout / 2)
        common = {
            'cache': cache,
            'timeout': timeout,
            'max_tries': config.get('http.max_tries', 2),
            'rate_limiter': rate_limiter,
            'headers': {'User-Agent': config.get('http.user_agent', 'News-Aggregator-API/1.0')},
        }
        providers = []
        for fetcher_cls in (NewsAPIFetcher, GNewsFetcher):
            section = f"providers.{fetcher_cls.name}"
            providers.append(fetcher_cls(
                api_key=config.get(f"{section}.api_key"),
                base_url=config.get(f"{section}.base_url"),
                max_page_size=config.get(f"{section}.max_page_size", 100),
                **common,
            ))
        return cls(providers, cache)

    async def close(self):
        for provider in self.providers:
            await provider.close_session()

    async def __aenter__(self) -> 'NewsAggregator':
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    async def get_personalized_news(self, preferences: Optional[Sequence[str]] = None,
                                    language: str = 'en', limit: int = 50) -> List[Article]:
        """
        Get news for a set of preference categories.

        Each provider is asked for its share of ``limit`` for every
        category. When nothing comes back the sample articles are used.
        The merged list is deduplicated by URL, sorted newest first and
        truncated to ``limit``.

        Args:
            preferences: Category tags, defaults to ['general']
            language: Language code
            limit: Maximum number of articles to return

        Returns:
            List of articles; never raises
        """
        categories = list(preferences or []) or ['general']
        try:
            per_provider = math.ceil(limit / max(1, len(self.providers)))
            results = await asyncio.gather(*(
                provider.fetch_by_category(categories, language, per_provider)
                for provider in self.providers
            ))

            all_articles = [article for result in results for article in result]

            if not all_articles:
                logger.info("No external API articles found, returning mock data")
                all_articles = get_mock_articles(categories)

            unique_articles = remove_duplicates(all_articles)
            return sort_by_published(unique_articles)[:limit]
        except Exception as e:
            logger.exception(f"Get personalized news error: {e}")
            return get_mock_articles(categories)[:limit]

    async def search_news(self, keyword: str, language: str = 'en', limit: int = 20) -> List[Article]:
        """
        Search every configured provider for a keyword.

        Providers are queried in order and later ones only for the
        shortfall. The merged, deduplicated result is cached so an
        identical search within the TTL does not hit the network, unless
        a provider failed; that result is returned but not cached.

        Args:
            keyword: Free-text query
            language: Language code
            limit: Maximum number of articles to return

        Returns:
            List of articles in provider order
        """
        cache_key = f"search_{keyword}_{language}_{limit}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        articles = []
        failed = False
        for provider in self.providers:
            if not provider.configured:
                continue
            remaining = limit - len(articles)
            if remaining <= 0:
                break
            try:
                articles.extend(await provider.search_raw(keyword, language, remaining))
            except Exception as e:
                provider._log_failure(f"search '{keyword}'", e)
                failed = True

        results = remove_duplicates(articles)[:limit]
        # A partial answer caused by a provider error is not cached
        if not failed:
            self.cache.set(cache_key, results)
        return results

    def get_cache_stats(self) -> Dict[str, int]:
        return self.cache.stats()

    def clear_cache(self):
        self.cache.clear()
