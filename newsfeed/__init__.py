"""
Newsfeed - Personalized News Aggregator

Fetches articles from external news providers, merges and deduplicates
them, caches provider responses, and tracks per-user preferences and
read/favorite state in an in-memory store.
"""

__version__ = "0.1.0"
__author__ = "Keith Teare"
__email__ = "keith@teare.com"
