"""
Base class for news source adapters
Clean, simple interface that all sources must implement
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
import structlog

from ....config import Settings, get_settings
from ....exceptions import SourceFetchError
from ...models.article import Article

logger = structlog.get_logger(__name__)


class NewsSourceAdapter(ABC):
    """
    Base adapter for news sources

    fetch_news() is total: transport, status and parse failures are logged
    as SourceFetchError and turn into an empty list.
    """

    def __init__(self, key: str, name: str, base_url: str, settings: Optional[Settings] = None):
        self.key = key
        self.name = name
        self.base_url = base_url
        self.settings = settings or get_settings()

    @abstractmethod
    async def _fetch(self, limit: int, query: str) -> List[Article]:
        """Fetch and map items; may raise SourceFetchError"""
        pass

    @abstractmethod
    def get_categories(self) -> List[str]:
        """Get available categories from this source"""
        pass

    async def fetch_news(self, limit: int = 20, query: str = "") -> List[Article]:
        """Fetch news from source and return canonical Articles"""
        if limit <= 0:
            return []

        try:
            articles = await self._fetch(limit, query.strip())
        except SourceFetchError as e:
            logger.warning("source_fetch_failed", source=self.key, error=str(e))
            return []
        except Exception as e:
            logger.warning("source_fetch_failed", source=self.key, error=str(e), error_type=type(e).__name__)
            return []

        logger.debug("source_fetch_completed", source=self.key, count=len(articles))
        return articles[:limit]

    async def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        """GET with the fixed source deadline; any failure becomes SourceFetchError"""
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.source_fetch_timeout_seconds,
                headers={'User-Agent': self.settings.user_agent},
                follow_redirects=True,
            ) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                return response
        except httpx.TimeoutException as e:
            raise SourceFetchError(f"{self.name} timed out after {self.settings.source_fetch_timeout_seconds}s") from e
        except httpx.HTTPStatusError as e:
            raise SourceFetchError(f"{self.name} returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SourceFetchError(f"{self.name} request failed: {e}") from e

    def map_items(self, mapper, items: List[Dict[str, Any]], limit: int) -> List[Article]:
        """Run a mapper over raw items, skipping rejects and bad items"""
        articles = []
        for item in items:
            if len(articles) >= limit:
                break
            try:
                article = mapper.map_article(item)
            except Exception as e:
                logger.debug("source_item_skipped", source=self.key, error=str(e))
                continue
            if article is not None:
                articles.append(article)
        return articles

    def describe(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'base_url': self.base_url,
            'categories': self.get_categories(),
            'class': self.__class__.__name__,
        }
