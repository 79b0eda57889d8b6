"""
Base mapper class for news sources
Turns one provider-specific item into a canonical Article
"""

import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Iterable, Optional

import structlog

from ...models.article import Article
from ..content_cleaner import ContentCleaner
from ....utils.url_utils import article_id

logger = structlog.get_logger(__name__)

# Common date formats to try after ISO-8601 and RFC 822
DATE_FORMATS = [
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%dT%H:%M:%SZ',
    '%Y-%m-%dT%H:%M:%S.%fZ',
    '%Y-%m-%d',
    '%d-%m-%Y',
    '%d/%m/%Y'
]


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def normalize_date(value: Any) -> datetime:
    """
    Parse a provider date into an aware UTC datetime

    Accepts datetimes, time.struct_time (feedparser's *_parsed fields),
    ISO-8601 and RFC 822 strings and a few common formats. Naive values
    are taken as UTC; anything unparseable becomes "now".
    """
    if isinstance(value, datetime):
        return _as_utc(value)

    if isinstance(value, time.struct_time):
        return datetime(*value[:6], tzinfo=timezone.utc)

    if isinstance(value, str) and value.strip():
        text = value.strip()

        try:
            return _as_utc(datetime.fromisoformat(text.replace('Z', '+00:00')))
        except ValueError:
            pass

        try:
            return _as_utc(parsedate_to_datetime(text))
        except (TypeError, ValueError, IndexError):
            pass

        for fmt in DATE_FORMATS:
            try:
                return _as_utc(datetime.strptime(text, fmt))
            except ValueError:
                continue

        logger.debug("date_unparseable", value=text)

    return datetime.now(timezone.utc)


class BaseMapper(ABC):
    """Base class for news source mappers"""

    def __init__(self, source_name: str):
        self.source_name = source_name

    @abstractmethod
    def map_article(self, raw_data: Dict[str, Any]) -> Optional[Article]:
        """
        Map raw article data to an Article

        Args:
            raw_data: Raw article data from source

        Returns:
            Article, or None when the item has no usable title or link
        """
        pass

    def build_article(
        self,
        title: Optional[str],
        link: Optional[str],
        text_variants: Iterable[Optional[str]],
        published: Any = None,
        author: Optional[str] = None,
        source: Optional[str] = None,
        categories: Iterable[Optional[str]] = (),
        original_item: Optional[Dict[str, Any]] = None,
        fallback_content: Optional[str] = None,
    ) -> Optional[Article]:
        """
        Shared normalization for every source

        Items without a title or link never become Articles. The body is
        the merged text variants (or the fallback when nothing survives
        merging), sanitized to the allow-list; the summary is its first
        three sentences.
        """
        title = (title or "").strip()
        link = (link or "").strip()
        if not title or not link:
            logger.debug("article_skipped_missing_fields", source=self.source_name, has_title=bool(title), has_link=bool(link))
            return None

        merged = ContentCleaner.merge_content(text_variants)
        content = ContentCleaner.sanitize_html(merged or fallback_content or "")
        summary = ContentCleaner.extract_summary(content, 3)

        return Article(
            id=article_id(link),
            title=ContentCleaner.html_to_text(title) or title,
            link=link,
            summary=summary,
            content=content,
            author=(author or "").strip() or "Unknown",
            source=(source or "").strip() or self.source_name,
            published_at=normalize_date(published),
            categories=frozenset(c.strip() for c in categories if c and c.strip()),
            original_item={k: v for k, v in (original_item or {}).items() if v is not None},
        )
