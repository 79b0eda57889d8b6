"""
News Service - the entry point routes and the CLI call
Aggregation with filtering and caching, article Q&A, translation and sentiment
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import structlog

from .article_cache import ArticleCache
from .content_cleaner import ContentCleaner
from .sentiment import analyze_sentiment
from .sources.manager import NewsSourceManager
from ..models.article import Article, Sentiment, sources_of
from ...config import Settings, get_settings
from ...exceptions import ArticleNotFoundError, ValidationError
from ...services.llm_service import AIResponse, LLMService, TranslationResult

logger = structlog.get_logger(__name__)


def _lowered(values: Optional[Iterable[str]]) -> set:
    return {value.strip().lower() for value in values or [] if value and value.strip()}


def filter_articles(
    articles: List[Article],
    sources: Optional[Iterable[str]] = None,
    exclude_sources: Optional[Iterable[str]] = None,
    category: Optional[str] = None,
) -> List[Article]:
    """Keep articles from the given sources, drop excluded ones, optionally by category; order is preserved"""
    include = _lowered(sources)
    exclude = _lowered(exclude_sources)
    category = (category or "").strip()

    filtered = []
    for article in articles:
        source = article.source.lower()
        if include and source not in include:
            continue
        if source in exclude:
            continue
        if category and category.lower() != "all" and not article.has_category(category):
            continue
        filtered.append(article)
    return filtered


def article_prompt_text(article: Article) -> str:
    content = ContentCleaner.html_to_text(article.content) or article.summary
    return f"Title: {article.title}\n\nContent: {content}"


class NewsService:
    """News aggregation and article intelligence"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        source_manager: Optional[NewsSourceManager] = None,
        llm_service: Optional[LLMService] = None,
        cache: Optional[ArticleCache] = None,
    ):
        self.settings = settings or get_settings()
        self.source_manager = source_manager or NewsSourceManager(self.settings)
        self.llm_service = llm_service or LLMService(self.settings)
        self.cache = cache or ArticleCache(Path(self.settings.cache_dir), self.settings.cache_ttl_seconds)

    async def fetch_all_news(
        self,
        query: str = "",
        total_limit: Optional[int] = None,
        max_concurrency: Optional[int] = None,
        sources: Optional[Iterable[str]] = None,
        exclude_sources: Optional[Iterable[str]] = None,
        category: Optional[str] = None,
    ) -> List[Article]:
        """
        Aggregate, cache and filter articles

        The unfiltered aggregation is written to the article cache so later
        lookups by id can find any of its articles. An empty aggregation
        never overwrites the cache.
        """
        articles = await self.source_manager.fetch_all_news(query, total_limit, max_concurrency)

        if articles:
            await self.cache.save_articles_async(articles, {
                "query": query or None,
                "totalLimit": total_limit,
                "sources": sources_of(articles),
            })

        filtered = filter_articles(articles, sources, exclude_sources, category)
        if len(filtered) != len(articles):
            logger.info("news_filtered", before=len(articles), after=len(filtered), category=category)
        return filtered

    def get_cached_news(self, max_age_seconds: Optional[int] = None):
        return self.cache.load_articles(max_age_seconds)

    async def get_article(self, article_id: str) -> Article:
        """Find an article by id in the cache, refetching once if it is not there"""
        article = await self.cache.find_article_by_id_async(article_id, self.settings.article_lookup_max_age_seconds)
        if article is not None:
            return article

        logger.info("article_cache_miss_refetching", article_id=article_id)
        for candidate in await self.fetch_all_news():
            if candidate.id == article_id:
                return candidate

        raise ArticleNotFoundError(f"Article {article_id} not found")

    async def get_ai_response(self, article_text: str, question: str) -> AIResponse:
        return await self.llm_service.get_ai_response(article_text, question)

    async def analyze_article(
        self,
        question: str,
        article_id: Optional[str] = None,
        text: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Answer a question about a cached article or about raw text

        Raises ValidationError when the question is empty or neither an
        article id nor text is given, and ArticleNotFoundError for an
        unknown id.
        """
        if not question or not question.strip():
            raise ValidationError("A question is required")
        if not article_id and not (text and text.strip()):
            raise ValidationError("Either an article id or article text is required")

        if article_id:
            article_text = article_prompt_text(await self.get_article(article_id))
        else:
            article_text = text.strip()

        response = await self.get_ai_response(article_text, question.strip())
        result = response.to_dict()
        result["sentiment"] = analyze_sentiment(article_text).value
        result["meta"]["articleId"] = article_id
        return result

    async def translate(self, text: str, target_language: str) -> TranslationResult:
        if not target_language or not target_language.strip():
            raise ValidationError("A target language is required")
        return await self.llm_service.translate(text, target_language.strip())

    async def translate_article(self, article_id: str, target_language: str) -> TranslationResult:
        article = await self.get_article(article_id)
        text = (
            f"Title: {article.title}\n\n"
            f"Summary: {article.summary}\n\n"
            f"Content: {article.content or article.summary}"
        )
        return await self.translate(text, target_language)

    def analyze_sentiment(self, text: str) -> Sentiment:
        return analyze_sentiment(text)

    async def get_sentiment_overview(self, limit: int = 20, category: Optional[str] = None) -> List[Dict[str, Any]]:
        """Sentiment of title plus summary for the latest articles"""
        articles = await self.fetch_all_news(total_limit=limit, category=category)
        return [
            {
                "id": article.id,
                "title": article.title,
                "link": article.link,
                "source": article.source,
                "sentiment": analyze_sentiment(f"{article.title} {article.summary}").value,
            }
            for article in articles
        ]

    async def get_source_health(self) -> Dict[str, bool]:
        return await self.source_manager.health_check()

    def get_source_info(self) -> Dict[str, Any]:
        return self.source_manager.get_source_info()
