"""
Article data model for Newsfeed.
"""
import logging
import secrets
import string
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_id() -> str:
    """Return an opaque article/user id such as '_k3j9x0a2b'."""
    return '_' + ''.join(secrets.choice(_ID_ALPHABET) for _ in range(9))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a provider timestamp into an aware UTC datetime.

    Accepts datetimes and ISO-8601 strings (with a trailing 'Z' or an
    explicit offset). Anything unparseable becomes None.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            logger.debug(f"Unparseable published timestamp: {value!r}")
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat().replace('+00:00', 'Z')


@dataclass(frozen=True)
class Article:
    """
    Canonical article, independent of which provider it came from.
    """
    title: str
    url: str
    description: str = ""
    url_to_image: Optional[str] = None
    published_at: Optional[datetime] = None
    source: str = "Unknown"
    category: str = "general"
    language: str = "en"
    content: str = ""
    author: str = ""
    id: str = field(default_factory=generate_id)
    created_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'url': self.url,
            'urlToImage': self.url_to_image,
            'publishedAt': _isoformat(self.published_at),
            'source': self.source,
            'category': self.category,
            'language': self.language,
            'content': self.content,
            'author': self.author,
            'createdAt': _isoformat(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Article':
        """
        Build an article from ``to_dict`` output or snake_case field names.

        Keys that are not article fields (e.g. ``isRead``) are ignored.
        A missing id or creation time gets a fresh one.
        """
        values = {}
        for name in cls.__dataclass_fields__:
            if name in data:
                values[name] = data[name]
        for camel, name in _CAMEL_FIELDS.items():
            if camel in data:
                values[name] = data[camel]

        if 'published_at' in values:
            values['published_at'] = parse_timestamp(values['published_at'])
        if 'created_at' in values:
            created_at = parse_timestamp(values.pop('created_at'))
            if created_at is not None:
                values['created_at'] = created_at
        if values.get('id') is None:
            values.pop('id', None)
        return cls(**values)


_CAMEL_FIELDS = {
    'urlToImage': 'url_to_image',
    'publishedAt': 'published_at',
    'createdAt': 'created_at',
}


def is_usable(raw: Dict[str, Any]) -> bool:
    """Raw provider items need both a title and a URL to become articles."""
    return bool(raw.get('title')) and bool(raw.get('url'))


def _source_name(raw: Dict[str, Any]) -> str:
    source = raw.get('source')
    if isinstance(source, dict):
        return source.get('name') or 'Unknown'
    return source or 'Unknown'


def from_newsapi(raw: Dict[str, Any], category: str = 'general', language: str = 'en') -> Article:
    """
    Map a NewsAPI article payload onto the canonical Article.

    Args:
        raw: One item of the provider's ``articles`` array
        category: Category tag the article was fetched for
        language: Language the request was made in

    Returns:
        Article
    """
    return Article(
        title=raw.get('title') or '',
        url=raw.get('url') or '',
        description=raw.get('description') or '',
        url_to_image=raw.get('urlToImage'),
        published_at=parse_timestamp(raw.get('publishedAt')),
        source=_source_name(raw),
        category=category,
        language=language,
        content=raw.get('content') or '',
        author=raw.get('author') or '',
    )


def from_gnews(raw: Dict[str, Any], category: str = 'general', language: str = 'en') -> Article:
    """
    Map a GNews article payload onto the canonical Article.

    GNews names the image field ``image``, reports its own ``language``
    and carries no author.
    """
    return Article(
        title=raw.get('title') or '',
        url=raw.get('url') or '',
        description=raw.get('description') or '',
        url_to_image=raw.get('image'),
        published_at=parse_timestamp(raw.get('publishedAt')),
        source=_source_name(raw),
        category=category,
        language=raw.get('language') or language,
        content=raw.get('content') or '',
        author='',
    )
