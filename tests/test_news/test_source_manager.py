from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config import FeedConfig
from src.news.models.article import Sentiment
from src.news.services.sources import NewsSourceAdapter, NewsSourceManager, RSSAggregateAdapter


def _adapter(name, articles=None, error=None):
    adapter = MagicMock(spec=NewsSourceAdapter)
    adapter.name = name
    adapter.fetch_news = AsyncMock(return_value=articles or [], side_effect=error)
    adapter.describe = MagicMock(return_value={"name": name})
    return adapter


class TestSourceInitialization:
    def test_only_usable_api_keys_enable_sources(self, settings):
        settings.newsapi_key = "your_api_key_here"
        settings.gnews_api_key = "real-gnews-key"
        settings.newsdata_api_key = ""

        manager = NewsSourceManager(settings)

        assert manager.get_available_sources() == ["rss", "gnews"]

    def test_rss_can_be_disabled(self, settings):
        settings.rss_enabled = False

        assert NewsSourceManager(settings).get_available_sources() == []


class TestFetchAllNews:
    @pytest.mark.asyncio
    async def test_splits_limit_evenly(self, settings):
        a, b, c = _adapter("A"), _adapter("B"), _adapter("C")
        manager = NewsSourceManager(settings, sources={"a": a, "b": b, "c": c})

        await manager.fetch_all_news("space", total_limit=30)

        for adapter in (a, b, c):
            adapter.fetch_news.assert_awaited_once_with(10, "space")

    @pytest.mark.asyncio
    async def test_all_feeds_share_one_slot(self, settings, make_article):
        settings.rss_feeds = [
            FeedConfig(url=f"https://feeds.example.com/{i}.xml", source=f"Feed {i}", category="general")
            for i in range(12)
        ]
        settings.newsapi_key = "real-newsapi-key"
        manager = NewsSourceManager(settings)

        rss = manager.sources["rss"]
        for index, feed in enumerate(rss.feeds.values()):
            feed.fetch_news = AsyncMock(return_value=[
                make_article(link=f"https://feeds.example.com/{index}/{n}", title=f"Feed story {index}-{n}")
                for n in range(20)
            ])
        newsapi = manager.sources["newsapi"]
        newsapi.fetch_news = AsyncMock(return_value=[
            make_article(link=f"https://api.example.com/{n}", title=f"API story {n}") for n in range(100)
        ])

        articles = await manager.fetch_all_news(total_limit=200)

        assert manager.get_available_sources() == ["rss", "newsapi"]
        newsapi.fetch_news.assert_awaited_once_with(100, "")
        for feed in rss.feeds.values():
            feed.fetch_news.assert_awaited_once_with(settings.rss_items_per_feed)
        assert len(articles) == 200
        assert sum(1 for a in articles if a.link.startswith("https://api.example.com")) == 100

    @pytest.mark.asyncio
    async def test_rss_only_fills_the_whole_limit(self, settings, make_article):
        settings.rss_feeds = [
            FeedConfig(url=f"https://feeds.example.com/{i}.xml", source=f"Feed {i}", category="general")
            for i in range(12)
        ]
        manager = NewsSourceManager(settings)
        for index, feed in enumerate(manager.sources["rss"].feeds.values()):
            feed.fetch_news = AsyncMock(return_value=[
                make_article(link=f"https://feeds.example.com/{index}/{n}") for n in range(20)
            ])

        assert len(await manager.fetch_all_news(total_limit=200)) == 200

    @pytest.mark.asyncio
    async def test_merges_dedupes_scores_and_sorts(self, settings, make_article):
        older = make_article(link="https://x.com/war", title="War fears grow",
                             published=datetime(2024, 5, 1, tzinfo=timezone.utc))
        newer = make_article(link="https://x.com/win", title="Team wins historic victory",
                             published=datetime(2024, 5, 3, tzinfo=timezone.utc))
        duplicate = make_article(link="https://X.com/win?utm=feed", title="Duplicate",
                                 published=datetime(2024, 5, 3, tzinfo=timezone.utc))
        manager = NewsSourceManager(settings, sources={
            "a": _adapter("A", [older, newer]),
            "b": _adapter("B", [duplicate]),
        })

        articles = await manager.fetch_all_news(total_limit=10)

        assert [a.title for a in articles] == ["Team wins historic victory", "War fears grow"]
        assert [a.sentiment for a in articles] == [Sentiment.POSITIVE, Sentiment.NEGATIVE]

    @pytest.mark.asyncio
    async def test_failing_source_does_not_break_aggregation(self, settings, make_article):
        manager = NewsSourceManager(settings, sources={
            "good": _adapter("Good", [make_article()]),
            "bad": _adapter("Bad", error=RuntimeError("boom")),
        })

        articles = await manager.fetch_all_news(total_limit=10)

        assert len(articles) == 1

    @pytest.mark.asyncio
    async def test_all_sources_failing_gives_empty_list(self, settings):
        manager = NewsSourceManager(settings, sources={"bad": _adapter("Bad", error=RuntimeError("boom"))})

        assert await manager.fetch_all_news() == []

    @pytest.mark.asyncio
    async def test_total_limit_capped(self, settings):
        adapter = _adapter("A")
        manager = NewsSourceManager(settings, sources={"a": adapter})

        await manager.fetch_all_news(total_limit=5000)

        adapter.fetch_news.assert_awaited_once_with(settings.max_total_limit, "")

    @pytest.mark.asyncio
    async def test_no_sources(self, settings):
        assert await NewsSourceManager(settings, sources={}).fetch_all_news() == []


class TestIntrospection:
    @pytest.mark.asyncio
    async def test_health_check(self, settings, make_article):
        manager = NewsSourceManager(settings, sources={
            "up": _adapter("Up", [make_article()]),
            "empty": _adapter("Empty", []),
            "down": _adapter("Down", error=RuntimeError("boom")),
        })

        assert await manager.health_check() == {"up": True, "empty": False, "down": False}

    @pytest.mark.asyncio
    async def test_fetch_from_unknown_source(self, settings):
        assert await NewsSourceManager(settings, sources={}).fetch_from_source("nope") == []

    def test_add_source_and_info(self, settings):
        manager = NewsSourceManager(settings, sources={})
        manager.add_source("custom", _adapter("Custom"))

        assert manager.get_available_sources() == ["custom"]
        assert manager.get_source_info() == {"custom": {"name": "Custom"}}

    @pytest.mark.asyncio
    async def test_health_check_expands_feeds(self, settings, make_article):
        settings.rss_feeds = [
            FeedConfig(url="https://feeds.example.com/a.xml", source="A", category="general"),
            FeedConfig(url="https://feeds.example.com/b.xml", source="B", category="general"),
        ]
        manager = NewsSourceManager(settings)
        feeds = manager.sources["rss"].feeds
        feeds["rss:A"].fetch_news = AsyncMock(return_value=[make_article()])
        feeds["rss:B"].fetch_news = AsyncMock(return_value=[])

        assert await manager.health_check() == {"rss:A": True, "rss:B": False}


class TestRSSAggregateAdapter:
    def test_timeout_covers_every_batch(self, settings):
        settings.rss_max_concurrency = 5
        feeds = [FeedConfig(url=f"https://f.example.com/{i}", source=f"F{i}", category="general") for i in range(12)]

        adapter = RSSAggregateAdapter(feeds, settings)

        assert adapter.task_timeout() == settings.source_task_timeout_seconds * 3

    @pytest.mark.asyncio
    async def test_failing_feed_is_skipped(self, settings, make_article):
        feeds = [
            FeedConfig(url="https://feeds.example.com/a.xml", source="A", category="general"),
            FeedConfig(url="https://feeds.example.com/b.xml", source="B", category="general"),
        ]
        adapter = RSSAggregateAdapter(feeds, settings)
        adapter.feeds["rss:A"].fetch_news = AsyncMock(side_effect=RuntimeError("boom"))
        adapter.feeds["rss:B"].fetch_news = AsyncMock(return_value=[make_article()])

        assert len(await adapter.fetch_news(10)) == 1
