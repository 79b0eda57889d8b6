"""
NewsAPI.org mapper
"""

from typing import Any, Dict, Optional

from .base_mapper import BaseMapper
from ...models.article import Article

REMOVED_MARKER = "[Removed]"


class NewsAPIMapper(BaseMapper):
    """Mapper for NewsAPI /everything articles"""

    def __init__(self):
        super().__init__("NewsAPI")

    def map_article(self, raw_data: Dict[str, Any]) -> Optional[Article]:
        if raw_data.get('title') == REMOVED_MARKER:
            return None

        source = raw_data.get('source') or {}
        return self.build_article(
            title=raw_data.get('title'),
            link=raw_data.get('url'),
            text_variants=[raw_data.get('description'), raw_data.get('content')],
            published=raw_data.get('publishedAt'),
            author=raw_data.get('author'),
            source=source.get('name') if isinstance(source, dict) else None,
            categories=['general'],
            original_item={
                'image': raw_data.get('urlToImage'),
                'sourceId': source.get('id') if isinstance(source, dict) else None,
                'api': 'newsapi',
            },
        )
