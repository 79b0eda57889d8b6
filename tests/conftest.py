import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock

import httpx

from src.config import FeedConfig, Settings
from src.news.models.article import Article, Sentiment
from src.utils.url_utils import article_id

VALID_GEMINI_KEY = "AIzaSy" + "x" * 33


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        newsapi_key=None,
        gnews_api_key=None,
        newsdata_api_key=None,
        rss_enabled=True,
        rss_feeds=[FeedConfig(url="https://feeds.example.com/world.xml", source="Example World", category="general")],
        google_api_key=None,
        groq_api_key=None,
        openai_api_key=None,
        anthropic_api_key=None,
        ai_provider_order="gemini,groq,openai,anthropic",
        cache_dir=str(tmp_path / "cache"),
        log_level="INFO",
    )


@pytest.fixture
def make_article():
    def _make(link="https://example.com/story", title="Example story", published=None,
              source="Example", categories=("general",), content="", summary=""):
        return Article(
            id=article_id(link),
            title=title,
            link=link,
            source=source,
            published_at=published or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
            summary=summary,
            content=content,
            categories=frozenset(categories),
            sentiment=Sentiment.NEUTRAL,
        )
    return _make


@pytest.fixture
def solar_article_text():
    return (
        "Scientists at a leading research university have announced a breakthrough in solar panel technology. "
        "The new solar panel design is 50% more efficient than conventional panels currently on the market. "
        "The research team spent five years developing the new photovoltaic material. "
        "Manufacturing costs are expected to remain similar to existing panels. "
        "Industry experts believe the technology could reach consumers within three years. "
        "The university has already filed several patents covering the new design."
    )


@pytest.fixture
def sample_rss_feed():
    return b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
  <channel>
    <title>Example World</title>
    <link>https://news.example.com</link>
    <description>World news</description>
    <item>
      <title>Historic peace agreement signed after long talks</title>
      <link>https://news.example.com/peace?utm_source=rss</link>
      <description>Leaders signed a historic peace agreement on Monday. The deal ends a decade of conflict.</description>
      <content:encoded><![CDATA[<p>Leaders signed a historic peace agreement on Monday. The deal ends a decade of conflict.</p><p>Observers expect the agreement to boost regional trade significantly.</p><script>alert(1)</script>]]></content:encoded>
      <category>politics</category>
      <pubDate>Mon, 06 May 2024 10:00:00 GMT</pubDate>
    </item>
    <item>
      <title></title>
      <link>https://news.example.com/untitled</link>
      <description>An item without a title must be dropped.</description>
    </item>
    <item>
      <title>Markets slump amid recession fears</title>
      <link>https://news.example.com/markets</link>
      <description>Stocks fell sharply on Tuesday as investors worried about a looming recession.</description>
      <pubDate>Tue, 07 May 2024 09:30:00 GMT</pubDate>
    </item>
  </channel>
</rss>"""


@pytest.fixture
def mock_httpx_response():
    def _make(content=b"", json_data=None, status_code=200):
        response = MagicMock(spec=httpx.Response)
        response.content = content
        response.status_code = status_code
        response.json = MagicMock(return_value=json_data)
        response.raise_for_status = MagicMock()
        return response
    return _make
