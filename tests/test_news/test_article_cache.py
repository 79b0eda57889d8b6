import json
import time

import pytest

from src.news.models.article import Sentiment
from src.news.services.article_cache import ArticleCache


class TestArticleCache:
    @pytest.fixture(autouse=True)
    def setup_cache(self, tmp_path):
        self.cache = ArticleCache(tmp_path / "cache", ttl_seconds=3600)

    def test_round_trip(self, make_article):
        article = make_article(title="Cached story").with_updates(sentiment=Sentiment.POSITIVE)

        assert self.cache.save_articles([article], {"query": "space"})
        loaded = self.cache.load_articles()

        assert loaded.from_cache
        assert not loaded.expired
        assert loaded.articles == [article]
        assert loaded.metadata == {"query": "space"}

    def test_missing_cache(self):
        loaded = self.cache.load_articles()

        assert not loaded.from_cache
        assert loaded.articles == []

    def test_expired_cache_still_returns_articles(self, make_article):
        self.cache.save_articles([make_article()])
        self._age_cache(7200)

        loaded = self.cache.load_articles()

        assert loaded.from_cache
        assert loaded.expired
        assert len(loaded.articles) == 1

    def test_find_article_by_id(self, make_article):
        article = make_article(link="https://x.com/find-me")
        self.cache.save_articles([make_article(), article])

        assert self.cache.find_article_by_id(article.id) == article
        assert self.cache.find_article_by_id("missing") is None

    def test_find_ignores_stale_cache(self, make_article):
        article = make_article()
        self.cache.save_articles([article])
        self._age_cache(100)

        assert self.cache.find_article_by_id(article.id, max_age_seconds=50) is None
        assert self.cache.find_article_by_id(article.id, max_age_seconds=500) == article

    def test_corrupt_file_is_a_miss(self):
        self.cache.cache_dir.mkdir(parents=True)
        self.cache.cache_file.write_text("{not json", encoding="utf-8")

        assert not self.cache.load_articles().from_cache

    def test_write_leaves_no_temp_files(self, make_article):
        self.cache.save_articles([make_article()])

        assert [p.name for p in self.cache.cache_dir.iterdir()] == ["articles.json"]

    def test_stats_clear_and_purge(self, make_article):
        self.cache.save_articles([make_article()])

        stats = self.cache.get_stats()
        assert stats["exists"]
        assert stats["article_count"] == 1
        assert not stats["expired"]

        assert not self.cache.purge_expired()
        self._age_cache(7200)
        assert self.cache.purge_expired()
        assert not self.cache.cache_file.exists()
        assert not self.cache.clear()

    def _age_cache(self, seconds):
        payload = json.loads(self.cache.cache_file.read_text(encoding="utf-8"))
        payload["timestamp"] = time.time() - seconds
        self.cache.cache_file.write_text(json.dumps(payload), encoding="utf-8")
