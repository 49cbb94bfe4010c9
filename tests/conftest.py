"""
Shared fixtures for the Newsfeed test suite.
"""
from unittest.mock import AsyncMock

import pytest

from newsfeed.core.aggregator import NewsAggregator
from newsfeed.core.cache import CacheManager
from newsfeed.core.store import DataStore
from newsfeed.fetchers.gnews import GNewsFetcher
from newsfeed.fetchers.newsapi import NewsAPIFetcher
from newsfeed.utils.http import RateLimiter


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def raw_article(url, title="Title", published="2024-05-01T10:00:00Z", **extra):
    """Minimal provider item."""
    item = {
        "title": title,
        "url": url,
        "description": f"About {title}",
        "publishedAt": published,
        "source": {"name": "Wire"},
    }
    item.update(extra)
    return item


def make_fetcher(cls, cache, api_key="test-key", payload=None, side_effect=None):
    """Build an adapter whose HTTP layer is an AsyncMock."""
    fetcher = cls(
        api_key=api_key,
        cache=cache,
        base_url="https://example.test/api",
        max_page_size=100,
        rate_limiter=RateLimiter(requests_per_second=0),
    )
    fetcher._get_json = AsyncMock(
        return_value=payload if payload is not None else {"articles": []},
        side_effect=side_effect,
    )
    return fetcher


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return CacheManager(ttl=3600, check_period=600, clock=clock)


@pytest.fixture
def store():
    return DataStore()


@pytest.fixture
def newsapi(cache):
    return make_fetcher(NewsAPIFetcher, cache)


@pytest.fixture
def gnews(cache):
    return make_fetcher(GNewsFetcher, cache)


@pytest.fixture
def unconfigured_aggregator(cache):
    """Both providers present but without credentials."""
    return NewsAggregator(
        [
            make_fetcher(NewsAPIFetcher, cache, api_key=None),
            make_fetcher(GNewsFetcher, cache, api_key=None),
        ],
        cache,
    )
