"""
Content cleaning utilities for news articles
Handles HTML sanitizing, text extraction, content merging and summaries
"""

import re
import html
from typing import Iterable, List, Optional

import structlog
from bs4 import BeautifulSoup, Comment

from ...utils.string_utils import clean_text, normalize_for_comparison, split_sentences

logger = structlog.get_logger(__name__)

ALLOWED_TAGS = frozenset({'p', 'br', 'strong', 'em', 'u', 'i', 'a', 'ul', 'ol', 'li', 'blockquote'})
ALLOWED_ATTRIBUTES = frozenset({'href', 'target'})
# Removed together with everything inside them
DROPPED_TAGS = ['script', 'style', 'iframe', 'object', 'embed', 'noscript', 'template', 'form', 'svg', 'head']
UNSAFE_URL_SCHEMES = ('javascript:', 'vbscript:', 'data:')

MIN_VARIANT_LENGTH = 20


class ContentCleaner:
    """Utility class for cleaning and formatting news article content"""

    @staticmethod
    def sanitize_html(content: Optional[str]) -> str:
        """
        Reduce HTML to the inline/structural allow-list

        Disallowed tags are unwrapped (their text is kept), dangerous ones
        are removed with their contents, and only href/target attributes
        survive on allowed tags.
        """
        if not content or not isinstance(content, str):
            return ""

        try:
            soup = BeautifulSoup(content, 'html.parser')

            for comment in soup.find_all(string=lambda node: isinstance(node, Comment)):
                comment.extract()

            for tag in soup.find_all(DROPPED_TAGS):
                tag.decompose()

            for tag in soup.find_all(True):
                if tag.name not in ALLOWED_TAGS:
                    tag.unwrap()
                    continue

                tag.attrs = {
                    name: value for name, value in tag.attrs.items()
                    if name in ALLOWED_ATTRIBUTES
                }
                href = tag.attrs.get('href')
                if href and href.strip().lower().startswith(UNSAFE_URL_SCHEMES):
                    del tag.attrs['href']

            return str(soup).strip()

        except Exception as e:
            logger.warning("html_sanitize_failed", error=str(e))
            return html.escape(ContentCleaner._simple_html_removal(content))

    @staticmethod
    def html_to_text(content: Optional[str]) -> str:
        """Plain text of an HTML fragment with whitespace collapsed"""
        if not content:
            return ""

        try:
            soup = BeautifulSoup(content, 'html.parser')
            for tag in soup(DROPPED_TAGS):
                tag.decompose()
            text = soup.get_text(separator=' ')
        except Exception as e:
            logger.warning("html_to_text_failed", error=str(e))
            return ContentCleaner._simple_html_removal(content)

        return clean_text(html.unescape(text))

    @staticmethod
    def _simple_html_removal(content: str) -> str:
        """Simple fallback HTML tag removal"""
        text = re.sub(r'<[^>]+>', ' ', content)
        text = html.unescape(text)
        return clean_text(text)

    @staticmethod
    def merge_content(variants: Iterable[Optional[str]]) -> str:
        """
        Merge the text fields a provider sends for one article

        Providers often repeat the same (sometimes truncated) snippet across
        description/summary/content. Variants are compared on their
        normalized text; a variant already contained in a kept one is
        dropped, and a kept one contained in a longer variant is replaced
        by it. Survivors are joined with paragraph breaks in input order.
        """
        kept: List[str] = []
        kept_normalized: List[str] = []

        for variant in variants:
            if not variant or not isinstance(variant, str):
                continue
            text = variant.strip()
            if len(text) <= MIN_VARIANT_LENGTH:
                continue

            normalized = normalize_for_comparison(ContentCleaner.html_to_text(text))
            if len(normalized) <= MIN_VARIANT_LENGTH:
                continue

            if any(normalized in existing for existing in kept_normalized):
                continue

            superseded = [i for i, existing in enumerate(kept_normalized) if existing in normalized]
            if superseded:
                first = superseded[0]
                kept[first] = text
                kept_normalized[first] = normalized
                for index in reversed(superseded[1:]):
                    del kept[index]
                    del kept_normalized[index]
                continue

            kept.append(text)
            kept_normalized.append(normalized)

        return '\n\n'.join(kept)

    @staticmethod
    def extract_summary(content: str, max_sentences: int = 3) -> str:
        """
        First sentences of the content, split on .!? and longer than 10 chars

        Args:
            content: Article text (HTML is stripped first)
            max_sentences: Number of sentences to keep

        Returns:
            Sentences joined with ". " and terminated with a period
        """
        if not content:
            return ""

        sentences = split_sentences(ContentCleaner.html_to_text(content))[:max_sentences]
        if not sentences:
            return ""
        return '. '.join(sentences) + '.'
