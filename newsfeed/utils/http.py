"""
HTTP utilities for Newsfeed.
"""
import asyncio
import time
import logging
from collections import defaultdict
from typing import Callable

# Configure logging
logger = logging.getLogger(__name__)

# Outgoing request configuration
REQUESTS_PER_SECOND = 5  # per provider
REQUEST_TIMEOUT = 10  # seconds
MAX_TRIES = 2
USER_AGENT = 'News-Aggregator-API/1.0'

DEFAULT_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'application/json',
}

class RateLimiter:
    """
    Spaces requests to each provider so per-key quotas are not exhausted.
    Backs off further for providers that keep failing.
    """
    def __init__(self, requests_per_second: float = REQUESTS_PER_SECOND, max_backoff: float = 60.0,
                 clock: Callable[[], float] = time.monotonic):
        self.min_interval = 1.0 / requests_per_second if requests_per_second > 0 else 0.0
        self.last_requests = defaultdict(lambda: 0.0)
        self.locks = defaultdict(asyncio.Lock)
        self.failure_counts = defaultdict(int)
        self.backoff_times = defaultdict(lambda: self.min_interval)
        self.max_backoff = max_backoff
        self.failure_threshold = 3  # Number of failures before increasing backoff
        self._clock = clock

    async def acquire(self, provider: str):
        """
        Wait until a request to the provider is allowed.

        Args:
            provider: Name of the provider being called
        """
        try:
            async with self.locks[provider]:
                now = self._clock()
                time_passed = now - self.last_requests[provider]

                wait_time = max(self.min_interval, self.backoff_times[provider]) - time_passed

                if wait_time > 0:
                    logger.debug(f"Rate limiting {provider}, waiting {wait_time:.2f}s")
                    await asyncio.sleep(wait_time)

                self.last_requests[provider] = self._clock()
        except asyncio.CancelledError:
            logger.warning(f"Rate limiter acquisition for {provider} was cancelled")
            raise

    def report_success(self, provider: str):
        """
        Report a successful request; gradually lowers the provider's backoff.

        Args:
            provider: The provider that answered
        """
        self.failure_counts[provider] = 0
        if self.backoff_times[provider] > self.min_interval:
            self.backoff_times[provider] = max(self.min_interval, self.backoff_times[provider] * 0.8)

    def report_failure(self, provider: str):
        """
        Report a failed request; doubles the backoff once failures pile up.

        Args:
            provider: The provider that failed
        """
        self.failure_counts[provider] += 1

        if self.failure_counts[provider] >= self.failure_threshold:
            self.backoff_times[provider] = min(
                self.max_backoff, max(self.backoff_times[provider], 0.5) * 2.0
            )
            logger.warning(
                f"Increased backoff for {provider} to {self.backoff_times[provider]:.2f}s "
                f"after {self.failure_counts[provider]} failures"
            )
