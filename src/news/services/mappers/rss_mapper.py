"""
RSS/Atom mapper
Handles feedparser entries from any configured feed
"""

from typing import Any, Dict, List, Optional

from .base_mapper import BaseMapper
from ...models.article import Article


class RSSMapper(BaseMapper):
    """Mapper for feedparser entries"""

    def __init__(self, source_name: str, category: str = "general"):
        super().__init__(source_name)
        self.category = category

    def map_article(self, raw_data: Dict[str, Any]) -> Optional[Article]:
        """
        Map an RSS entry to an Article

        content:encoded arrives as entry.content[].value, description and
        summary both land in entry.summary; all of them are merged.
        """
        variants: List[Optional[str]] = [
            block.get('value') for block in raw_data.get('content') or []
        ]
        variants.append(raw_data.get('summary'))
        variants.append(raw_data.get('description'))

        published = raw_data.get('published_parsed') or raw_data.get('updated_parsed') \
            or raw_data.get('published') or raw_data.get('updated')

        categories = [tag.get('term') for tag in raw_data.get('tags') or []]
        categories.append(self.category)

        return self.build_article(
            title=raw_data.get('title'),
            link=raw_data.get('link'),
            text_variants=variants,
            published=published,
            author=raw_data.get('author'),
            source=self.source_name,
            categories=categories,
            original_item={
                'guid': raw_data.get('id'),
                'image': self._extract_image(raw_data),
                'feedCategory': self.category,
            },
        )

    @staticmethod
    def _extract_image(raw_data: Dict[str, Any]) -> Optional[str]:
        for media in raw_data.get('media_content') or []:
            if media.get('url'):
                return media['url']
        for thumb in raw_data.get('media_thumbnail') or []:
            if thumb.get('url'):
                return thumb['url']
        for enclosure in raw_data.get('enclosures') or []:
            if (enclosure.get('type') or '').startswith('image/') and enclosure.get('href'):
                return enclosure['href']
        return None
