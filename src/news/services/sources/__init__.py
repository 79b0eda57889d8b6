"""
News source adapters
"""

from .base import NewsSourceAdapter
from .gnews_adapter import GNewsAdapter
from .json_api_adapter import JSONNewsAPIAdapter
from .manager import NewsSourceManager
from .newsapi_adapter import NewsAPIAdapter
from .newsdata_adapter import NewsDataAdapter
from .rss_adapter import RSSAggregateAdapter, RSSFeedAdapter

__all__ = [
    'NewsSourceAdapter',
    'JSONNewsAPIAdapter',
    'RSSFeedAdapter',
    'RSSAggregateAdapter',
    'NewsAPIAdapter',
    'GNewsAdapter',
    'NewsDataAdapter',
    'NewsSourceManager'
]
