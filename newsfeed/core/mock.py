"""
Sample articles served when no provider returns anything.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

from newsfeed.core.article import Article, from_newsapi

# Fewer samples are returned for specific (non-general) categories
SPECIFIC_CATEGORY_COUNT = 3

SAMPLE_ARTICLES = [
    {
        'title': 'Breaking: Technology Advances in 2024',
        'description': 'Latest technological innovations are reshaping the industry with AI and machine learning',
        'url': 'https://example.com/tech-news-1',
        'urlToImage': 'https://via.placeholder.com/400x200/0066CC/FFFFFF?text=Tech+News',
        'source': {'name': 'Tech Daily'},
        'author': 'John Doe',
        'content': 'Artificial intelligence and machine learning continue to transform industries...',
    },
    {
        'title': 'Global Business Trends Show Positive Growth',
        'description': 'Economic indicators show positive growth across multiple sectors worldwide',
        'url': 'https://example.com/business-news-1',
        'urlToImage': 'https://via.placeholder.com/400x200/00AA00/FFFFFF?text=Business+News',
        'source': {'name': 'Business Weekly'},
        'author': 'Jane Smith',
        'content': 'Markets are showing resilience as global trade continues to expand...',
    },
    {
        'title': 'Sports Championship Finals Draw Record Viewers',
        'description': "This year's championship has broken all previous viewership records",
        'url': 'https://example.com/sports-news-1',
        'urlToImage': 'https://via.placeholder.com/400x200/FF6600/FFFFFF?text=Sports+News',
        'source': {'name': 'Sports Central'},
        'author': 'Mike Johnson',
        'content': 'The championship finals have captivated audiences worldwide...',
    },
    {
        'title': 'Health Research Breakthrough in Disease Treatment',
        'description': 'Scientists announce major breakthrough in treatment of chronic diseases',
        'url': 'https://example.com/health-news-1',
        'urlToImage': 'https://via.placeholder.com/400x200/CC0066/FFFFFF?text=Health+News',
        'source': {'name': 'Medical Journal'},
        'author': 'Dr. Sarah Wilson',
        'content': 'Researchers have made significant progress in understanding...',
    },
    {
        'title': 'Entertainment Industry Embraces New Digital Platforms',
        'description': 'Streaming services and digital content creation reach new heights',
        'url': 'https://example.com/entertainment-news-1',
        'urlToImage': 'https://via.placeholder.com/400x200/9933CC/FFFFFF?text=Entertainment',
        'source': {'name': 'Entertainment Today'},
        'author': 'Lisa Chen',
        'content': 'The entertainment landscape continues to evolve with digital innovation...',
    },
]


def get_mock_articles(categories: Sequence[str] = ('general',),
                      now: Optional[datetime] = None) -> List[Article]:
    """
    Build the fallback article set for the requested categories.

    All five samples are returned when ``general`` is requested, otherwise
    the first three. Every sample is tagged with the first requested
    category and published one hour apart, newest first.

    Args:
        categories: Requested category tags
        now: Reference time for the publication timestamps

    Returns:
        List of Article objects
    """
    categories = list(categories) or ['general']
    now = now or datetime.now(timezone.utc)
    category = categories[0]

    samples = SAMPLE_ARTICLES if 'general' in categories else SAMPLE_ARTICLES[:SPECIFIC_CATEGORY_COUNT]

    articles = []
    for hours, sample in enumerate(samples):
        raw = dict(sample, publishedAt=now - timedelta(hours=hours))
        articles.append(from_newsapi(raw, category))
    return articles
