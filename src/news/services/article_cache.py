"""
Article Cache for aggregated news.

Keeps the most recent aggregation in a single JSON file so listings can be
served without refetching and single articles can be looked up by id.
"""

import asyncio
import json
import os
import tempfile
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog

from ..models.article import Article, to_utc_iso
from ...exceptions import CacheError

logger = structlog.get_logger(__name__)

CACHE_FILE_NAME = "articles.json"


@dataclass
class CachedArticles:
    articles: List[Article] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    timestamp: Optional[float] = None
    from_cache: bool = False
    expired: bool = False

    @property
    def age_seconds(self) -> Optional[float]:
        if self.timestamp is None:
            return None
        return max(0.0, time.time() - self.timestamp)


class ArticleCache:
    """
    File-backed cache for the latest aggregated article list.

    Features:
    - Atomic writes (temp file + os.replace)
    - TTL-based freshness reporting
    - Lookup by article id with its own maximum age
    - Cache statistics and purge of expired data
    - Async variants that keep file I/O off the event loop
    """

    def __init__(self, cache_dir: Path, ttl_seconds: int = 3600):
        """
        Args:
            cache_dir: Directory holding the cache file
            ttl_seconds: Age after which a cached aggregation counts as expired
        """
        self.cache_dir = Path(cache_dir)
        self.ttl_seconds = ttl_seconds
        self.cache_file = self.cache_dir / CACHE_FILE_NAME
        self.cache_stats = {
            "cache_hits": 0,
            "cache_misses": 0,
            "writes": 0,
            "write_errors": 0
        }

    def _write_atomic(self, payload: Dict[str, Any]) -> None:
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(dir=self.cache_dir, prefix=".articles-", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(payload, handle, ensure_ascii=False)
                os.replace(temp_path, self.cache_file)
            except BaseException:
                if os.path.exists(temp_path):
                    os.unlink(temp_path)
                raise
        except OSError as e:
            raise CacheError(f"Failed to write article cache: {e}") from e

    def _read(self) -> Optional[Dict[str, Any]]:
        if not self.cache_file.exists():
            return None
        try:
            with self.cache_file.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except (OSError, ValueError) as e:
            raise CacheError(f"Failed to read article cache: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("articles"), list):
            raise CacheError("Article cache file has an unexpected shape")
        return payload

    def save_articles(self, articles: List[Article], metadata: Optional[Dict[str, Any]] = None) -> bool:
        """Replace the cached aggregation. Returns False when the write failed."""
        now = time.time()
        payload = {
            "timestamp": now,
            "savedAt": to_utc_iso(datetime.fromtimestamp(now, tz=timezone.utc)),
            "metadata": dict(metadata or {}),
            "articles": [article.to_dict() for article in articles],
        }

        try:
            self._write_atomic(payload)
        except CacheError as e:
            self.cache_stats["write_errors"] += 1
            logger.warning("article_cache_save_failed", error=str(e))
            return False

        self.cache_stats["writes"] += 1
        logger.info("article_cache_saved", count=len(articles), cache_file=str(self.cache_file))
        return True

    def load_articles(self, max_age_seconds: Optional[int] = None) -> CachedArticles:
        """
        Load the cached aggregation.

        Returns an empty result (from_cache False) when there is no usable
        cache. When the data is older than max_age_seconds (default: the
        TTL) the articles are still returned with expired=True.
        """
        try:
            payload = self._read()
        except CacheError as e:
            logger.warning("article_cache_load_failed", error=str(e))
            payload = None

        if payload is None:
            self.cache_stats["cache_misses"] += 1
            return CachedArticles()

        articles = []
        for item in payload["articles"]:
            try:
                articles.append(Article.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug("article_cache_entry_skipped", error=str(e))

        timestamp = payload.get("timestamp")
        max_age = self.ttl_seconds if max_age_seconds is None else max_age_seconds
        expired = timestamp is None or (time.time() - float(timestamp)) > max_age

        self.cache_stats["cache_hits"] += 1
        return CachedArticles(
            articles=articles,
            metadata=payload.get("metadata") or {},
            timestamp=float(timestamp) if timestamp is not None else None,
            from_cache=True,
            expired=expired,
        )

    def find_article_by_id(self, article_id: str, max_age_seconds: Optional[int] = None) -> Optional[Article]:
        """Look an article up in the cache; stale caches never answer."""
        cached = self.load_articles(max_age_seconds)
        if not cached.from_cache or cached.expired:
            return None

        for article in cached.articles:
            if article.id == article_id:
                return article
        return None

    async def save_articles_async(self, articles: List[Article], metadata: Optional[Dict[str, Any]] = None) -> bool:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self.save_articles, articles, metadata)

    async def find_article_by_id_async(self, article_id: str, max_age_seconds: Optional[int] = None) -> Optional[Article]:
        """Run the file lookup in the default executor"""
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self.find_article_by_id, article_id, max_age_seconds)

    def get_stats(self) -> Dict[str, Any]:
        stats = dict(self.cache_stats)
        stats.update({
            "cache_file": str(self.cache_file),
            "exists": self.cache_file.exists(),
            "ttl_seconds": self.ttl_seconds,
        })

        if self.cache_file.exists():
            stats["size_bytes"] = self.cache_file.stat().st_size
            try:
                payload = self._read()
            except CacheError:
                payload = None
            if payload is not None:
                timestamp = payload.get("timestamp")
                stats["article_count"] = len(payload["articles"])
                stats["age_seconds"] = round(time.time() - float(timestamp), 1) if timestamp is not None else None
                stats["expired"] = timestamp is None or (time.time() - float(timestamp)) > self.ttl_seconds

        return stats

    def clear(self) -> bool:
        """Remove the cache file. Returns True if something was removed."""
        try:
            self.cache_file.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("article_cache_clear_failed", error=str(e))
            return False

        logger.info("article_cache_cleared", cache_file=str(self.cache_file))
        return True

    def purge_expired(self) -> bool:
        """Remove the cache file if it is past its TTL (or unreadable)."""
        if not self.cache_file.exists():
            return False

        try:
            payload = self._read()
        except CacheError:
            return self.clear()

        timestamp = payload.get("timestamp")
        if timestamp is None or (time.time() - float(timestamp)) > self.ttl_seconds:
            return self.clear()
        return False
