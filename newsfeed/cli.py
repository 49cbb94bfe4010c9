"""
Command-line interface for Newsfeed.
"""
import os
import sys
import json
import argparse
import logging
import asyncio
from typing import Any, Dict, List, Optional
from dotenv import load_dotenv

from newsfeed.config import Config
from newsfeed.core.aggregator import NewsAggregator
from newsfeed.core.store import DataStore
from newsfeed.exceptions import NewsfeedError
from newsfeed.services.news import NewsService
from newsfeed.services.users import UserService
from newsfeed.utils.responses import create_error_response, create_response

logger = logging.getLogger(__name__)

LOCAL_USER_EMAIL = "local@newsfeed"

def parse_args(argv: Optional[List[str]] = None):
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(description="Newsfeed - Personalized News Aggregator")
    parser.add_argument("--config", help="Path to a YAML or JSON config file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    news = subparsers.add_parser("news", help="Get personalized news")
    news.add_argument("--categories", nargs="+", default=["general"], help="Preference categories")
    news.add_argument("--limit", type=int, default=20, help="Articles per page")
    news.add_argument("--page", type=int, default=1, help="Page number")

    search = subparsers.add_parser("search", help="Search news articles")
    search.add_argument("keyword", help="Search keyword")
    search.add_argument("--limit", type=int, default=20, help="Articles per page")
    search.add_argument("--page", type=int, default=1, help="Page number")

    subparsers.add_parser("categories", help="List available categories")
    subparsers.add_parser("cache-stats", help="Show cache statistics")

    return parser.parse_args(argv)

def configure_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

def _emit(payload: Dict[str, Any]):
    print(json.dumps(payload, indent=2))

async def run(args, config: Config) -> Dict[str, Any]:
    """
    Execute one CLI command against a fresh in-memory store.

    Returns:
        Response envelope to print
    """
    categories = config.get('preferences.categories', [])
    store = DataStore()
    users = UserService(
        store,
        categories,
        languages=config.get('preferences.languages'),
        max_preferences=config.get('preferences.max_preferences', 10),
    )

    if args.command == "categories":
        return create_response("Available categories", {'categories': categories})

    async with NewsAggregator.from_config(config) as aggregator:
        news = NewsService(
            aggregator,
            store,
            language=config.get('news.default_language', 'en'),
            max_limit=config.get('news.max_limit', 100),
            fetch_multiplier=config.get('news.fetch_multiplier', 2),
            categories=categories,
        )
        user = store.create_user("Local User", LOCAL_USER_EMAIL, password="")

        if args.command == "news":
            users.update_preferences(user.id, args.categories)
            result = await news.get_news(user.id, page=args.page, limit=args.limit)
            return create_response("News retrieved successfully", {'news': result['news']},
                                   {'pagination': result['pagination']})

        if args.command == "search":
            result = await news.search_news(user.id, args.keyword, page=args.page, limit=args.limit)
            return create_response(f'Search results for "{result["keyword"]}"',
                                   {'keyword': result['keyword'], 'news': result['news']},
                                   {'pagination': result['pagination']})

        return create_response("Cache statistics", aggregator.get_cache_stats())

async def async_main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the application.
    """
    load_dotenv(override=True)
    args = parse_args(argv)
    configure_logging(args.verbose)
    config = Config(args.config or os.getenv("NEWSFEED_CONFIG_PATH"))

    try:
        _emit(await run(args, config))
    except NewsfeedError as e:
        _emit(create_error_response(e.message, e.errors))
        return 1
    return 0

def main():
    """
    Entry point for the command-line script.
    """
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Process interrupted by user")
        return 1
    except Exception as e:
        logger.exception(f"An error occurred: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
