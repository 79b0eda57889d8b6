"""
GNews mapper
"""

from typing import Any, Dict, Optional

from .base_mapper import BaseMapper
from ...models.article import Article


class GNewsMapper(BaseMapper):
    """Mapper for GNews search/top-headlines articles"""

    def __init__(self):
        super().__init__("GNews")

    def map_article(self, raw_data: Dict[str, Any]) -> Optional[Article]:
        source = raw_data.get('source') or {}
        return self.build_article(
            title=raw_data.get('title'),
            link=raw_data.get('url'),
            text_variants=[raw_data.get('description'), raw_data.get('content')],
            published=raw_data.get('publishedAt'),
            source=source.get('name') if isinstance(source, dict) else None,
            categories=['general'],
            original_item={
                'image': raw_data.get('image'),
                'sourceUrl': source.get('url') if isinstance(source, dict) else None,
                'api': 'gnews',
            },
        )
