"""Command-line entry points for news aggregation and article Q&A."""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import get_settings
from .core.logging_config import configure_logging
from .exceptions import NewsDeskError
from .news.services.news_service import NewsService
from .news.services.sentiment import score_text

app = typer.Typer(help="Aggregate news from RSS feeds and news APIs, and ask questions about articles.")
console = Console()


def _service() -> NewsService:
    return NewsService(get_settings())


def _run(coro):
    try:
        return asyncio.run(coro)
    except NewsDeskError as e:
        rprint(f"[red]{type(e).__name__}:[/red] {e}")
        raise typer.Exit(code=1)


def _print_json(payload) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


@app.callback()
def main():
    """Configure logging once for every command."""
    configure_logging(get_settings())


@app.command()
def fetch(
    query: str = typer.Option("", "--query", "-q", help="Search query; RSS feeds ignore it."),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Total number of articles (max 200)."),
    concurrency: Optional[int] = typer.Option(None, "--concurrency", "-c", help="Sources fetched at once (1-10)."),
    source: Optional[List[str]] = typer.Option(None, "--source", help="Only keep these sources."),
    exclude: Optional[List[str]] = typer.Option(None, "--exclude", help="Drop these sources."),
    category: Optional[str] = typer.Option(None, "--category", help="Only keep this category."),
    as_json: bool = typer.Option(False, "--json", help="Print articles as JSON."),
    cached: bool = typer.Option(False, "--cached", help="Show the last cached aggregation instead of fetching."),
):
    """Fetch, deduplicate and score the latest articles."""
    service = _service()
    if cached:
        result = service.get_cached_news()
        if not result.from_cache:
            rprint("[yellow]No cached articles.[/yellow]")
            raise typer.Exit(code=1)
        if result.expired:
            rprint("[yellow]Cached articles are older than the cache TTL.[/yellow]")
        articles = result.articles
    else:
        articles = _run(service.fetch_all_news(query, limit, concurrency, source, exclude, category))

    if as_json:
        _print_json([article.to_dict() for article in articles])
        return

    table = Table(title=f"{len(articles)} articles")
    table.add_column("Published")
    table.add_column("Source")
    table.add_column("Sentiment")
    table.add_column("Title")
    colors = {"positive": "green", "negative": "red", "neutral": "white"}
    for article in articles:
        sentiment = article.sentiment.value
        table.add_row(
            article.published_at_iso,
            escape(article.source),
            f"[{colors[sentiment]}]{sentiment}[/{colors[sentiment]}]",
            escape(article.title),
        )
    console.print(table)


@app.command()
def ask(
    question: str = typer.Argument(..., help="Question about the article."),
    article_id: Optional[str] = typer.Option(None, "--article-id", help="Id of a cached article."),
    text: Optional[str] = typer.Option(None, "--text", help="Article text."),
    file: Optional[Path] = typer.Option(None, "--file", exists=True, dir_okay=False, help="File with article text."),
):
    """Ask a question about an article."""
    if file is not None:
        text = file.read_text(encoding="utf-8")
    result = _run(_service().analyze_article(question, article_id=article_id, text=text))
    _print_json(result)


@app.command()
def translate(
    target_language: str = typer.Option(..., "--to", help="Target language, e.g. Spanish."),
    article_id: Optional[str] = typer.Option(None, "--article-id", help="Id of a cached article."),
    text: Optional[str] = typer.Option(None, "--text", help="Text to translate."),
):
    """Translate an article into another language."""
    service = _service()
    if article_id:
        result = _run(service.translate_article(article_id, target_language))
    elif text:
        result = _run(service.translate(text, target_language))
    else:
        raise typer.BadParameter("Provide --article-id or --text.")
    _print_json(result.to_dict())


@app.command()
def sentiment(text: str = typer.Argument(..., help="Headline or text to score.")):
    """Classify text as positive, negative or neutral."""
    label = _service().analyze_sentiment(text)
    rprint(f"{label.value} [dim](score {score_text(text):.1f})[/dim]")


@app.command()
def overview(
    limit: int = typer.Option(20, "--limit", "-n", help="Number of articles."),
    category: Optional[str] = typer.Option(None, "--category", help="Only this category."),
):
    """Sentiment of the latest headlines."""
    _print_json(_run(_service().get_sentiment_overview(limit, category)))


@app.command()
def sources(health: bool = typer.Option(False, "--health", help="Fetch one item per source.")):
    """List configured sources."""
    service = _service()
    if health:
        _print_json(_run(service.get_source_health()))
    else:
        _print_json(service.get_source_info())


@app.command()
def cache(action: str = typer.Argument("stats", help="stats, clear or purge.")):
    """Inspect or clear the article cache."""
    article_cache = _service().cache
    if action == "stats":
        _print_json(article_cache.get_stats())
    elif action == "clear":
        rprint("cleared" if article_cache.clear() else "nothing to clear")
    elif action == "purge":
        rprint("purged" if article_cache.purge_expired() else "cache is fresh or missing")
    else:
        raise typer.BadParameter("Action must be stats, clear or purge.")


if __name__ == "__main__":
    app()
