"""
News Sources Manager - orchestrates all news sources
Fetches through the bounded executor, then dedupes, sorts and scores
"""

from typing import Any, Dict, List, Optional

import structlog

from .base import NewsSourceAdapter
from .gnews_adapter import GNewsAdapter
from .newsapi_adapter import NewsAPIAdapter
from .newsdata_adapter import NewsDataAdapter
from .rss_adapter import RSSAggregateAdapter
from ..bounded_executor import FetchTask, clamp_concurrency, run_bounded
from ..deduplicator import merge
from ..sentiment import analyze_sentiment
from ...models.article import Article
from ....config import Settings, get_settings, is_usable_credential
from ....core.performance_timer import time_stage

logger = structlog.get_logger(__name__)


class NewsSourceManager:
    """
    Manages every enabled news source.

    All RSS feeds form one source (unless disabled); JSON APIs join only
    when their key is a usable credential.
    """

    def __init__(self, settings: Optional[Settings] = None,
                 sources: Optional[Dict[str, NewsSourceAdapter]] = None):
        self.settings = settings or get_settings()
        self.sources = sources if sources is not None else self._initialize_sources()

    def _initialize_sources(self) -> Dict[str, NewsSourceAdapter]:
        """Initialize all available news sources"""
        sources: Dict[str, NewsSourceAdapter] = {}

        if self.settings.rss_enabled and self.settings.rss_feeds:
            adapter = RSSAggregateAdapter(self.settings.rss_feeds, self.settings)
            sources[adapter.key] = adapter

        api_sources = [
            (self.settings.newsapi_key, NewsAPIAdapter),
            (self.settings.gnews_api_key, GNewsAdapter),
            (self.settings.newsdata_api_key, NewsDataAdapter),
        ]
        for api_key, adapter_class in api_sources:
            if is_usable_credential(api_key):
                adapter = adapter_class(api_key.strip(), self.settings)
                sources[adapter.key] = adapter
            else:
                logger.debug("source_not_configured", source=adapter_class.__name__)

        logger.info("news_sources_loaded", count=len(sources), sources=list(sources.keys()))
        return sources

    def _make_task(self, key: str, adapter: NewsSourceAdapter, limit: int, query: str) -> FetchTask:
        async def fetch() -> List[Article]:
            return await adapter.fetch_news(limit, query)

        timeout = adapter.task_timeout() if isinstance(adapter, RSSAggregateAdapter) else None
        return FetchTask(key, fetch, timeout=timeout)

    def _leaf_sources(self) -> Dict[str, NewsSourceAdapter]:
        """Sources with the RSS aggregate expanded into its feeds"""
        leaves: Dict[str, NewsSourceAdapter] = {}
        for key, adapter in self.sources.items():
            if isinstance(adapter, RSSAggregateAdapter):
                leaves.update(adapter.feeds)
            else:
                leaves[key] = adapter
        return leaves

    async def fetch_all_news(
        self,
        query: str = "",
        total_limit: Optional[int] = None,
        max_concurrency: Optional[int] = None,
    ) -> List[Article]:
        """
        Fetch news from all sources, split evenly.

        Each source is asked for total_limit // number_of_sources items
        (at least one); every RSS feed together counts as one source. The merged, deduplicated list is sorted newest
        first, truncated to total_limit and annotated with headline
        sentiment. Never raises: every source failing gives [].
        """
        total = total_limit if total_limit is not None else self.settings.default_total_limit
        total = max(0, min(int(total), self.settings.max_total_limit))
        concurrency = clamp_concurrency(max_concurrency, self.settings.default_max_concurrency)
        query = (query or "").strip()

        if total == 0 or not self.sources:
            logger.info("news_fetch_skipped", total_limit=total, sources=len(self.sources))
            return []

        per_source = max(1, total // len(self.sources))
        tasks = [
            self._make_task(key, adapter, per_source, query)
            for key, adapter in self.sources.items()
        ]

        with time_stage("fetch_all_news") as timer:
            results = await run_bounded(
                tasks,
                max_concurrency=concurrency,
                task_timeout=self.settings.source_task_timeout_seconds,
            )
            articles = merge(results, limit=total)
            articles = [
                article.with_updates(sentiment=analyze_sentiment(article.title))
                for article in articles
            ]

        logger.info(
            "news_fetch_completed",
            query=query or None,
            total=len(articles),
            requested=total,
            per_source=per_source,
            sources=len(tasks),
            failed_sources=[r.source for r in results if not r.ok],
            empty_sources=sum(1 for r in results if r.ok and not r.articles),
            duration_seconds=round(timer.elapsed, 3),
        )
        return articles

    async def fetch_from_source(self, source_key: str, limit: int = 20, query: str = "") -> List[Article]:
        """Fetch from specific source by key"""
        adapter = self.sources.get(source_key) or self._leaf_sources().get(source_key)
        if adapter is None:
            logger.warning("unknown_news_source", source=source_key)
            return []

        articles = merge([await adapter.fetch_news(limit, query)], limit=limit)
        return [a.with_updates(sentiment=analyze_sentiment(a.title)) for a in articles]

    def get_available_sources(self) -> List[str]:
        """Get list of available source keys"""
        return list(self.sources.keys())

    def get_source_info(self) -> Dict[str, Any]:
        """Get detailed information about all sources"""
        return {key: adapter.describe() for key, adapter in self.sources.items()}

    async def health_check(self, max_concurrency: Optional[int] = None) -> Dict[str, bool]:
        """A source is healthy when it returns at least one article; feeds are checked one by one"""
        tasks = [self._make_task(key, adapter, 1, "") for key, adapter in self._leaf_sources().items()]
        results = await run_bounded(
            tasks,
            max_concurrency=clamp_concurrency(max_concurrency, self.settings.default_max_concurrency),
            task_timeout=self.settings.source_task_timeout_seconds,
        )

        health = {result.source: result.ok and len(result.articles) > 0 for result in results}
        logger.info("news_sources_health_checked", healthy=sum(health.values()), total=len(health))
        return health

    def add_source(self, source_key: str, adapter: NewsSourceAdapter) -> None:
        """
        Manually add a news source adapter.
        This allows runtime addition of sources without code changes.
        """
        self.sources[source_key] = adapter
        logger.info("news_source_added", source=source_key, name=adapter.name)
