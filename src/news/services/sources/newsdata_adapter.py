"""
NewsData.io adapter
"""

from typing import Optional

from .json_api_adapter import JSONNewsAPIAdapter
from ..mappers.newsdata_mapper import NewsDataMapper
from ....config import Settings


class NewsDataAdapter(JSONNewsAPIAdapter):
    """Adapter for NewsData.io /news"""

    items_key = 'results'
    max_page_size = 50

    def __init__(self, api_key: str, settings: Optional[Settings] = None):
        super().__init__('newsdata', 'NewsData', '', api_key, NewsDataMapper(), settings)
        self.base_url = self.settings.newsdata_base_url

    def build_request(self, limit: int, query: str) -> tuple:
        params = {'apikey': self.api_key, 'size': limit, 'language': 'en'}
        if query:
            params['q'] = query
        else:
            params['category'] = 'general'
        return f"{self.base_url}/news", params
