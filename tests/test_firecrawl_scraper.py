from __future__ import annotations

import json

import httpx
import pytest

from scrapechat.tools import firecrawl_scraper
from scrapechat.tools.firecrawl_scraper import ScrapeError, extract_text, scrape


@pytest.fixture
def firecrawl_settings(monkeypatch):
    monkeypatch.setattr(firecrawl_scraper.settings, "firecrawl_api_key", "fc-test")
    monkeypatch.setattr(firecrawl_scraper.settings, "firecrawl_base_url", "https://firecrawl.test/")
    monkeypatch.setattr(firecrawl_scraper.settings, "scrape_only_main_content", True)


@pytest.mark.asyncio
async def test_scrape_posts_firecrawl_contract(firecrawl_settings):
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "data": {"content": "Hello"}})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        data = await scrape("https://example.com", client=client)

    assert data == {"success": True, "data": {"content": "Hello"}}
    assert seen["url"] == "https://firecrawl.test/v0/scrape"
    assert seen["auth"] == "Bearer fc-test"
    assert seen["body"] == {"url": "https://example.com", "pageOptions": {"onlyMainContent": True}}


@pytest.mark.asyncio
async def test_scrape_raises_on_non_ok_status(firecrawl_settings):
    transport = httpx.MockTransport(lambda request: httpx.Response(402, json={"error": "Payment"}))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(ScrapeError, match="402"):
            await scrape("https://example.com", client=client)


@pytest.mark.asyncio
async def test_scrape_wraps_transport_errors(firecrawl_settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ScrapeError):
            await scrape("https://example.com", client=client)


@pytest.mark.asyncio
async def test_scrape_rejects_non_json_body(firecrawl_settings):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>oops</html>"))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(ScrapeError):
            await scrape("https://example.com", client=client)


def test_extract_text_prefers_content_then_markdown():
    assert extract_text({"data": {"content": "plain", "markdown": "# md"}}) == "plain"
    assert extract_text({"data": {"content": "", "markdown": "# md"}}) == "# md"
    assert extract_text({"data": {"markdown": "# md"}}, prefer=("markdown", "content")) == "# md"


def test_extract_text_handles_missing_data():
    assert extract_text({}) == ""
    assert extract_text({"data": None}) == ""
    assert extract_text({"data": {"metadata": {"title": "x"}}}) == ""


@pytest.mark.asyncio
async def test_scrape_wraps_invalid_url_errors(firecrawl_settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.InvalidURL("Invalid port")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(ScrapeError):
            await scrape("https://example.com", client=client)


@pytest.mark.asyncio
async def test_scrape_wraps_malformed_base_url(monkeypatch):
    monkeypatch.setattr(firecrawl_scraper.settings, "firecrawl_base_url", "http://firecrawl.test:notaport")
    with pytest.raises(ScrapeError):
        await scrape("https://example.com")
