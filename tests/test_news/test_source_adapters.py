import httpx
import pytest
from unittest.mock import AsyncMock, patch

from src.config import FeedConfig
from src.news.services.sources import GNewsAdapter, NewsAPIAdapter, NewsDataAdapter, RSSFeedAdapter


class TestRSSFeedAdapter:
    @pytest.fixture(autouse=True)
    def setup_adapter(self, settings):
        self.adapter = RSSFeedAdapter(
            FeedConfig(url="https://feeds.example.com/world.xml", source="Example World", category="world"),
            settings,
        )

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_fetch_news(self, mock_client, sample_rss_feed, mock_httpx_response):
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(
            return_value=mock_httpx_response(content=sample_rss_feed)
        )

        articles = await self.adapter.fetch_news(10)

        assert [a.title for a in articles] == [
            "Historic peace agreement signed after long talks",
            "Markets slump amid recession fears",
        ]

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_respects_limit(self, mock_client, sample_rss_feed, mock_httpx_response):
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(
            return_value=mock_httpx_response(content=sample_rss_feed)
        )

        assert len(await self.adapter.fetch_news(1)) == 1

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_timeout_returns_empty(self, mock_client):
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(
            side_effect=httpx.TimeoutException("Request timeout")
        )

        assert await self.adapter.fetch_news(10) == []

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_http_error_returns_empty(self, mock_client, mock_httpx_response):
        response = mock_httpx_response(status_code=503)
        response.raise_for_status.side_effect = httpx.HTTPStatusError(
            "Service unavailable", request=None, response=response
        )
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(return_value=response)

        assert await self.adapter.fetch_news(10) == []

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_garbage_returns_empty(self, mock_client, mock_httpx_response):
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(
            return_value=mock_httpx_response(content=b"<<<not xml at all")
        )

        assert await self.adapter.fetch_news(10) == []

    def test_categories(self):
        assert self.adapter.get_categories() == ["world"]


class TestJSONAdapters:
    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_newsapi_browse_request(self, mock_client, settings, mock_httpx_response):
        get = AsyncMock(return_value=mock_httpx_response(json_data={
            "status": "ok",
            "articles": [
                {"title": "Solid earnings lift shares", "url": "https://reuters.com/a",
                 "description": "Quarterly earnings beat expectations across the sector.",
                 "publishedAt": "2024-05-06T10:00:00Z", "source": {"name": "Reuters"}},
                {"title": "[Removed]", "url": "https://removed.com", "source": {"name": "[Removed]"}},
            ],
        }))
        mock_client.return_value.__aenter__.return_value.get = get

        articles = await NewsAPIAdapter("real-newsapi-key", settings).fetch_news(500)

        assert [a.source for a in articles] == ["Reuters"]
        url = get.call_args.args[0]
        params = get.call_args.kwargs["params"]
        assert url.endswith("/everything")
        assert params["pageSize"] == 100
        assert params["sortBy"] == "publishedAt"
        assert "domains" in params

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_newsapi_search_request(self, mock_client, settings, mock_httpx_response):
        get = AsyncMock(return_value=mock_httpx_response(json_data={"status": "ok", "articles": []}))
        mock_client.return_value.__aenter__.return_value.get = get

        await NewsAPIAdapter("real-newsapi-key", settings).fetch_news(10, "climate")

        params = get.call_args.kwargs["params"]
        assert params["q"] == "climate"
        assert params["sortBy"] == "relevancy"
        assert "domains" not in params

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_gnews_endpoints(self, mock_client, settings, mock_httpx_response):
        get = AsyncMock(return_value=mock_httpx_response(json_data={"articles": []}))
        mock_client.return_value.__aenter__.return_value.get = get
        adapter = GNewsAdapter("real-gnews-key", settings)

        await adapter.fetch_news(80)
        assert get.call_args.args[0].endswith("/top-headlines")
        assert get.call_args.kwargs["params"]["max"] == 50

        await adapter.fetch_news(5, "election")
        assert get.call_args.args[0].endswith("/search")

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_newsdata_uses_results_key(self, mock_client, settings, mock_httpx_response):
        get = AsyncMock(return_value=mock_httpx_response(json_data={
            "status": "success",
            "results": [{"title": "Pledge to boost investment", "link": "https://nd.example.com/1",
                         "source_id": "nd", "pubDate": "2024-05-06 10:00:00"}],
        }))
        mock_client.return_value.__aenter__.return_value.get = get

        articles = await NewsDataAdapter("real-newsdata-key", settings).fetch_news(10)

        assert len(articles) == 1
        assert get.call_args.kwargs["params"]["category"] == "general"

    @patch('httpx.AsyncClient')
    @pytest.mark.asyncio
    async def test_api_error_payload_returns_empty(self, mock_client, settings, mock_httpx_response):
        mock_client.return_value.__aenter__.return_value.get = AsyncMock(
            return_value=mock_httpx_response(json_data={"status": "error", "message": "apiKeyInvalid"})
        )

        assert await NewsAPIAdapter("bad-key", settings).fetch_news(10) == []
