"""
Shared plumbing for external news provider adapters.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional

import aiohttp
import async_timeout
import backoff

from newsfeed.core.article import Article, is_usable
from newsfeed.core.cache import CacheManager
from newsfeed.utils.http import DEFAULT_HEADERS, MAX_TRIES, REQUEST_TIMEOUT, RateLimiter

# Configure logging
logger = logging.getLogger(__name__)


def _is_client_error(exc: Exception) -> bool:
    """4xx answers will not improve on retry."""
    return isinstance(exc, aiohttp.ClientResponseError) and 400 <= exc.status < 500


def _is_transient(exc: Exception) -> bool:
    """Timeouts, connection errors and 5xx answers; only these slow a provider down."""
    if _is_client_error(exc):
        return False
    return isinstance(exc, (aiohttp.ClientError, asyncio.TimeoutError))


class ProviderAdapter:
    """
    Fetches articles from one external news API.

    Subclasses name the provider, its endpoints and request parameters,
    and map raw items onto ``Article``. Category fetches go through the
    shared cache one category at a time; failures are logged and count
    as zero results.
    """
    name = "provider"
    headlines_path = "/top-headlines"
    search_path = "/search"

    def __init__(
        self,
        api_key: Optional[str],
        cache: CacheManager,
        base_url: str,
        max_page_size: int = 100,
        timeout: float = REQUEST_TIMEOUT,
        max_tries: int = MAX_TRIES,
        rate_limiter: Optional[RateLimiter] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the adapter.

        Args:
            api_key: Provider credential; None disables the provider
            cache: Cache shared by all providers
            base_url: API root, e.g. https://newsapi.org/v2
            max_page_size: Largest page size the provider accepts
            timeout: Per-request timeout in seconds
            max_tries: Attempts per request for transient network errors
            rate_limiter: Limiter spacing outgoing requests
            headers: Extra HTTP headers
        """
        self.api_key = api_key
        self.cache = cache
        self.base_url = base_url.rstrip('/')
        self.max_page_size = max_page_size
        self.timeout = timeout
        self.max_tries = max(1, max_tries)
        self.rate_limiter = rate_limiter or RateLimiter(max_backoff=timeout / 2)
        self.headers = {**DEFAULT_HEADERS, **(headers or {})}
        self._session = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def session(self) -> aiohttp.ClientSession:
        """
        Lazy initialization of aiohttp session.

        Returns:
            aiohttp.ClientSession: The HTTP session
        """
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers=self.headers)
        return self._session

    async def close_session(self):
        """Close aiohttp session."""
        if self._session is not None:
            await self._session.close()
            self._session = None

    def cache_key(self, category: str, language: str, page_size: int) -> str:
        return f"{self.name}_{category}_{language}_{page_size}"

    def cap_page_size(self, page_size: int) -> int:
        return max(1, min(page_size, self.max_page_size))

    # Provider specifics

    def category_params(self, category: str, language: str, page_size: int) -> Dict[str, Any]:
        raise NotImplementedError

    def search_params(self, keyword: str, language: str, page_size: int) -> Dict[str, Any]:
        raise NotImplementedError

    def to_article(self, raw: Dict[str, Any], category: str, language: str) -> Article:
        raise NotImplementedError

    # HTTP

    async def _request(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            # The rate-limit wait counts against the request's timeout
            async with async_timeout.timeout(self.timeout):
                await self.rate_limiter.acquire(self.name)
                async with self.session.get(f"{self.base_url}{path}", params=params) as response:
                    response.raise_for_status()
                    payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            if _is_transient(e):
                self.rate_limiter.report_failure(self.name)
            raise

        self.rate_limiter.report_success(self.name)
        if not isinstance(payload, dict):
            raise ValueError(f"{self.name} returned a non-object body")
        return payload

    async def _get_json(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        GET a provider endpoint, retrying transient network errors.

        Raises:
            aiohttp.ClientError: Network failure or non-2xx status
            asyncio.TimeoutError: The provider did not answer in time
            ValueError: The body was not a JSON object
        """
        retrying = backoff.on_exception(
            backoff.expo,
            (aiohttp.ClientError, asyncio.TimeoutError),
            max_tries=self.max_tries,
            giveup=_is_client_error,
            logger=logger,
        )(self._request)
        return await retrying(path, params)

    def parse_articles(self, payload: Dict[str, Any], category: str, language: str) -> List[Article]:
        """
        Turn a provider body into articles, skipping items without a title or URL.

        Raises:
            ValueError: The body has no ``articles`` array
        """
        items = payload.get('articles')
        if not isinstance(items, list):
            raise ValueError(f"{self.name} response has no articles array")
        return [
            self.to_article(item, category, language)
            for item in items
            if isinstance(item, dict) and is_usable(item)
        ]

    def _log_failure(self, what: str, exc: Exception):
        logger.error(f"{self.name} fetch error for {what}: {exc!r}")
        if isinstance(exc, aiohttp.ClientResponseError) and exc.status == 401:
            logger.error(f"Authentication failed. Please check the {self.name} API key")

    # Public operations

    async def fetch_by_category(self, categories: List[str], language: str = 'en',
                                page_size: int = 20) -> List[Article]:
        """
        Fetch top headlines for each category.

        Cached categories are served without a network call; every fresh
        result is cached under (provider, category, language, page size).

        Args:
            categories: Category tags to fetch
            language: Language code
            page_size: Articles wanted per category

        Returns:
            Articles for all categories, in category order
        """
        if not self.configured:
            logger.warning(f"{self.name} API key not configured")
            return []

        articles = []
        for category in categories:
            key = self.cache_key(category, language, page_size)
            cached = self.cache.get(key)
            if cached is not None:
                articles.extend(cached)
                continue

            params = self.category_params(category, language, self.cap_page_size(page_size))
            try:
                payload = await self._get_json(self.headlines_path, params)
                formatted = self.parse_articles(payload, category, language)
            except Exception as e:
                self._log_failure(f"category '{category}'", e)
                continue

            self.cache.set(key, formatted)
            articles.extend(formatted)

        logger.info(f"{self.name}: {len(articles)} articles for {', '.join(categories)}")
        return articles

    async def search(self, keyword: str, language: str = 'en', page_size: int = 20) -> List[Article]:
        """
        Free-text search. Results are tagged with the ``search`` category.

        Returns:
            Matching articles, or an empty list if the provider is
            unconfigured or the request failed
        """
        if not self.configured:
            logger.warning(f"{self.name} API key not configured")
            return []

        try:
            return await self.search_raw(keyword, language, page_size)
        except Exception as e:
            self._log_failure(f"search '{keyword}'", e)
            return []

    async def search_raw(self, keyword: str, language: str = 'en', page_size: int = 20) -> List[Article]:
        """Like ``search`` but lets request and parse errors propagate."""
        params = self.search_params(keyword, language, self.cap_page_size(page_size))
        payload = await self._get_json(self.search_path, params)
        return self.parse_articles(payload, 'search', language)
