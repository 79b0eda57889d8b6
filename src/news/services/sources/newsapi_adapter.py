"""
NewsAPI.org adapter
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from .json_api_adapter import JSONNewsAPIAdapter
from ..mappers.newsapi_mapper import NewsAPIMapper
from ....config import Settings

TRENDING_QUERY = "technology OR politics OR business OR science OR sports"
QUALITY_DOMAINS = "bbc.com,cnn.com,reuters.com,techcrunch.com,bloomberg.com,nytimes.com"
SEARCH_WINDOW_DAYS = 30
BROWSE_WINDOW_DAYS = 7


class NewsAPIAdapter(JSONNewsAPIAdapter):
    """Adapter for NewsAPI /everything"""

    items_key = 'articles'
    max_page_size = 100

    def __init__(self, api_key: str, settings: Optional[Settings] = None):
        super().__init__('newsapi', 'NewsAPI', '', api_key, NewsAPIMapper(), settings)
        self.base_url = self.settings.newsapi_base_url

    def build_request(self, limit: int, query: str) -> tuple:
        now = datetime.now(timezone.utc)
        params = {'apiKey': self.api_key, 'pageSize': limit, 'language': 'en'}

        if query:
            params.update({
                'q': query,
                'from': (now - timedelta(days=SEARCH_WINDOW_DAYS)).strftime('%Y-%m-%d'),
                'sortBy': 'relevancy',
            })
        else:
            params.update({
                'q': TRENDING_QUERY,
                'domains': QUALITY_DOMAINS,
                'from': (now - timedelta(days=BROWSE_WINDOW_DAYS)).strftime('%Y-%m-%d'),
                'sortBy': 'publishedAt',
            })

        return f"{self.base_url}/everything", params
