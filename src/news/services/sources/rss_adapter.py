"""
RSS feed adapters
One adapter per configured feed URL, grouped into a single aggregate source
"""

import math
from typing import Any, Dict, List, Optional

import feedparser
import structlog

from .base import NewsSourceAdapter
from ..bounded_executor import FetchTask, clamp_concurrency, run_bounded
from ..deduplicator import merge
from ..mappers.rss_mapper import RSSMapper
from ....config import FeedConfig, Settings
from ....exceptions import SourceFetchError
from ...models.article import Article

logger = structlog.get_logger(__name__)


class RSSFeedAdapter(NewsSourceAdapter):
    """Adapter for a single RSS/Atom feed"""

    def __init__(self, feed: FeedConfig, settings: Optional[Settings] = None):
        super().__init__(f"rss:{feed.source}", feed.source, feed.url, settings)
        self.feed = feed
        self.mapper = RSSMapper(feed.source, feed.category)

    async def _fetch(self, limit: int, query: str) -> List[Article]:
        # Feeds have no search endpoint; the query is ignored
        response = await self._get(self.feed.url)
        parsed = feedparser.parse(response.content)

        if parsed.bozo and not parsed.entries:
            raise SourceFetchError(f"Unparseable feed {self.feed.url}: {parsed.get('bozo_exception')}")
        if parsed.bozo:
            logger.debug("rss_feed_malformed", source=self.key, error=str(parsed.get('bozo_exception')))

        entries = parsed.entries[:self.settings.rss_items_per_feed]
        return self.map_items(self.mapper, entries, limit)

    def get_categories(self) -> List[str]:
        return [self.feed.category]


class RSSAggregateAdapter(NewsSourceAdapter):
    """
    All configured feeds as one source

    The aggregation limit is split per source, and every feed together
    counts as a single source next to each JSON API. Feeds are fetched
    through the bounded executor, then merged and cut to the share.
    """

    def __init__(self, feeds: List[FeedConfig], settings: Optional[Settings] = None):
        super().__init__("rss", "RSS Feeds", "", settings)
        self.feeds: Dict[str, RSSFeedAdapter] = {}
        for feed in feeds:
            adapter = RSSFeedAdapter(feed, self.settings)
            self.feeds[adapter.key] = adapter

    @property
    def concurrency(self) -> int:
        return clamp_concurrency(self.settings.rss_max_concurrency)

    def task_timeout(self) -> float:
        """Wall-clock guard covering every feed batch"""
        batches = max(1, math.ceil(len(self.feeds) / self.concurrency))
        return self.settings.source_task_timeout_seconds * batches

    def _feed_task(self, adapter: RSSFeedAdapter) -> FetchTask:
        async def fetch() -> List[Article]:
            return await adapter.fetch_news(self.settings.rss_items_per_feed)
        return FetchTask(adapter.key, fetch)

    async def _fetch(self, limit: int, query: str) -> List[Article]:
        if not self.feeds:
            return []

        results = await run_bounded(
            [self._feed_task(adapter) for adapter in self.feeds.values()],
            max_concurrency=self.concurrency,
            task_timeout=self.settings.source_task_timeout_seconds,
        )
        articles = merge(results, limit=limit)
        logger.info("rss_feeds_fetched", feeds=len(results), total=len(articles), limit=limit)
        return articles

    def get_categories(self) -> List[str]:
        return sorted({feed.feed.category for feed in self.feeds.values()})

    def describe(self) -> Dict[str, Any]:
        info = super().describe()
        info['feeds'] = {key: adapter.describe() for key, adapter in self.feeds.items()}
        return info
