"""
NewsData.io mapper
"""

from typing import Any, Dict, List, Optional

from .base_mapper import BaseMapper
from ...models.article import Article


def _as_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value if item]
    return [str(value)]


class NewsDataMapper(BaseMapper):
    """Mapper for NewsData.io /news results"""

    def __init__(self):
        super().__init__("NewsData")

    def map_article(self, raw_data: Dict[str, Any]) -> Optional[Article]:
        creators = _as_list(raw_data.get('creator'))
        return self.build_article(
            title=raw_data.get('title'),
            link=raw_data.get('link'),
            text_variants=[raw_data.get('description'), raw_data.get('content')],
            published=raw_data.get('pubDate'),
            author=', '.join(creators) if creators else None,
            source=raw_data.get('source_id'),
            categories=_as_list(raw_data.get('category')) or ['general'],
            original_item={
                'image': raw_data.get('image_url'),
                'country': _as_list(raw_data.get('country')) or None,
                'api': 'newsdata',
            },
        )
