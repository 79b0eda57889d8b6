"""
News source mappers
Each mapper turns one provider's raw item into a canonical Article
"""

from .base_mapper import BaseMapper, normalize_date
from .rss_mapper import RSSMapper
from .newsapi_mapper import NewsAPIMapper
from .gnews_mapper import GNewsMapper
from .newsdata_mapper import NewsDataMapper

__all__ = [
    'BaseMapper',
    'normalize_date',
    'RSSMapper',
    'NewsAPIMapper',
    'GNewsMapper',
    'NewsDataMapper'
]
