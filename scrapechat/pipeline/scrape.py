from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from scrapechat.services import logger as log_service
from scrapechat.tools import firecrawl_scraper
from scrapechat.tools.firecrawl_scraper import ScrapeError

Scraper = Callable[[str], Awaitable[dict[str, Any]]]


@dataclass(frozen=True)
class ScrapeOutcome:
    url: str
    text: str
    payload: dict[str, Any]


async def scrape_page_text(url: str, *, scraper: Scraper | None = None) -> ScrapeOutcome | None:
    """Scrape a URL and normalize the result to plain text.

    Returns None when the collaborator fails or the page has no extractable
    text; callers treat that as "no new context" and carry on with the turn.
    """
    scrape_fn = scraper or firecrawl_scraper.scrape
    t0 = time.monotonic()
    try:
        response = await scrape_fn(url)
    except ScrapeError as exc:
        log_service.log_scrape(
            url=url,
            status="error",
            duration_ms=int((time.monotonic() - t0) * 1000),
            error=str(exc),
        )
        return None
    elapsed_ms = int((time.monotonic() - t0) * 1000)

    text = firecrawl_scraper.extract_text(response)
    if not text:
        log_service.log_scrape(url=url, status="empty", duration_ms=elapsed_ms)
        return None

    log_service.log_scrape(
        url=url,
        status="success",
        content_chars=len(text),
        duration_ms=elapsed_ms,
    )
    return ScrapeOutcome(url=url, text=text, payload=response["data"])
