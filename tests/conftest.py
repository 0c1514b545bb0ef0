from __future__ import annotations

import os

# Keep test runs from writing log files into the working tree.
os.environ.setdefault("LOG_DIR", "")

import pytest

from scrapechat.llm_client import CompletionReply
from scrapechat.tools.firecrawl_scraper import ScrapeError


class FakeCompleter:
    """Replays canned replies (or raises canned exceptions) in order."""

    def __init__(self, replies):
        self._replies = list(replies)
        self.calls: list[dict] = []

    async def create(self, *, model, messages, temperature, caller="chat"):
        self.calls.append(
            {"model": model, "messages": list(messages), "temperature": temperature, "caller": caller}
        )
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if reply is None or isinstance(reply, CompletionReply):
            return reply
        return CompletionReply(role="assistant", content=reply)


class FakeScraper:
    """Maps URL -> Firecrawl payload; a ScrapeError value is raised instead."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.calls: list[str] = []

    async def __call__(self, url: str):
        self.calls.append(url)
        page = self.pages.get(url, ScrapeError("Firecrawl API error: 500"))
        if isinstance(page, Exception):
            raise page
        return page


@pytest.fixture
def completer_factory():
    return FakeCompleter


@pytest.fixture
def scraper_factory():
    return FakeScraper
