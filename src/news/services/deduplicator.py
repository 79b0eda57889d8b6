"""
URL-based normalization and deduplication of aggregated articles
"""

from typing import Iterable, List, Optional, Sequence, Union

from ..models.article import Article
from .bounded_executor import FetchResult
from ...utils.url_utils import article_id, canonicalize_url


def dedupe_by_url(articles: Iterable[Article]) -> List[Article]:
    """Keep the first article per canonical URL, preserving input order"""
    seen = set()
    unique = []
    for article in articles:
        key = canonicalize_url(article.link)
        if key in seen:
            continue
        seen.add(key)
        unique.append(article)
    return unique


def merge(
    results: Sequence[Union[FetchResult, Sequence[Article]]],
    limit: Optional[int] = None,
) -> List[Article]:
    """
    Flatten, dedupe, re-key, sort newest-first and truncate

    Accepts executor results (failed ones contribute nothing) or plain
    article lists. Ids are recomputed from the canonical URL so the same
    story gets the same id whichever source returned it first. The sort
    is stable, so equal timestamps keep first-seen order.
    """
    flattened: List[Article] = []
    for result in results:
        if isinstance(result, FetchResult):
            if not result.ok:
                continue
            flattened.extend(result.articles)
        else:
            flattened.extend(result)

    unique = [
        article.with_updates(id=article_id(article.link))
        for article in dedupe_by_url(flattened)
    ]
    unique.sort(key=lambda article: article.published_at, reverse=True)

    if limit is not None:
        return unique[:max(0, limit)]
    return unique
