"""
Shared adapter for JSON news APIs returning an items array
"""

from abc import abstractmethod
from typing import Any, Dict, List, Optional

from .base import NewsSourceAdapter
from ..mappers.base_mapper import BaseMapper
from ....config import Settings
from ....exceptions import SourceFetchError
from ...models.article import Article

DEFAULT_CATEGORIES = ['general', 'business', 'technology', 'science', 'sports', 'entertainment', 'health']


class JSONNewsAPIAdapter(NewsSourceAdapter):
    """Base for NewsAPI-style endpoints"""

    items_key = 'articles'
    max_page_size = 50

    def __init__(self, key: str, name: str, base_url: str, api_key: str,
                 mapper: BaseMapper, settings: Optional[Settings] = None):
        super().__init__(key, name, base_url, settings)
        self.api_key = api_key
        self.mapper = mapper

    @abstractmethod
    def build_request(self, limit: int, query: str) -> tuple:
        """Return (url, params) for one request"""
        pass

    async def _fetch(self, limit: int, query: str) -> List[Article]:
        page_size = min(limit, self.max_page_size)
        url, params = self.build_request(page_size, query)
        response = await self._get(url, params=params)

        try:
            payload = response.json()
        except ValueError as e:
            raise SourceFetchError(f"{self.name} returned invalid JSON") from e

        items = self.extract_items(payload)
        return self.map_items(self.mapper, items, limit)

    def extract_items(self, payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, dict):
            raise SourceFetchError(f"{self.name} returned an unexpected payload")
        if payload.get('status') in ('error', 'failed'):
            raise SourceFetchError(f"{self.name} error: {payload.get('message') or payload.get('results')}")

        items = payload.get(self.items_key)
        if not isinstance(items, list):
            raise SourceFetchError(f"{self.name} payload has no '{self.items_key}' array")
        return [item for item in items if isinstance(item, dict)]

    def get_categories(self) -> List[str]:
        return list(DEFAULT_CATEGORIES)
