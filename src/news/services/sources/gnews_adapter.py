"""
GNews adapter
"""

from typing import Optional

from .json_api_adapter import JSONNewsAPIAdapter
from ..mappers.gnews_mapper import GNewsMapper
from ....config import Settings


class GNewsAdapter(JSONNewsAPIAdapter):
    """Adapter for GNews /search and /top-headlines"""

    items_key = 'articles'
    max_page_size = 50

    def __init__(self, api_key: str, settings: Optional[Settings] = None):
        super().__init__('gnews', 'GNews', '', api_key, GNewsMapper(), settings)
        self.base_url = self.settings.gnews_base_url

    def build_request(self, limit: int, query: str) -> tuple:
        params = {'token': self.api_key, 'max': limit, 'lang': 'en', 'sortby': 'publishedAt'}
        if query:
            params['q'] = query
            return f"{self.base_url}/search", params
        return f"{self.base_url}/top-headlines", params
