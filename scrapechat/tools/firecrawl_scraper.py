from __future__ import annotations

from typing import Any

import httpx

from scrapechat.config import settings

SCRAPE_PATH = "/v0/scrape"


class ScrapeError(RuntimeError):
    """The scraping collaborator failed or answered with a non-OK status."""


async def scrape(url: str, *, client: httpx.AsyncClient | None = None) -> dict[str, Any]:
    """Scrape a URL through Firecrawl and return its JSON response verbatim.

    API: POST <base>/v0/scrape
    Body: {"url": ..., "pageOptions": {"onlyMainContent": true}}
    Headers:
        - Authorization: Bearer <api_key>

    Credentials are read from settings on every call; a missing key is sent
    as-is and surfaces as an upstream authentication failure.
    """
    endpoint = settings.firecrawl_base_url.rstrip("/") + SCRAPE_PATH
    headers = {
        "Authorization": f"Bearer {settings.firecrawl_api_key}",
        "Content-Type": "application/json",
    }
    payload = {
        "url": url,
        "pageOptions": {"onlyMainContent": settings.scrape_only_main_content},
    }

    try:
        if client is not None:
            response = await client.post(endpoint, json=payload, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=settings.scrape_timeout_seconds) as owned:
                response = await owned.post(endpoint, json=payload, headers=headers)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise ScrapeError(f"Firecrawl request failed for {url}: {exc}") from exc

    if not response.is_success:
        raise ScrapeError(f"Firecrawl API error: {response.status_code}")

    try:
        data = response.json()
    except ValueError as exc:
        raise ScrapeError("Firecrawl returned a non-JSON body") from exc
    if not isinstance(data, dict):
        raise ScrapeError("Firecrawl returned an unexpected payload")
    return data


def extract_text(payload: dict[str, Any], *, prefer: tuple[str, ...] = ("content", "markdown")) -> str:
    """Pull plain text out of a Firecrawl response, first non-empty field wins."""
    body = payload.get("data")
    if not isinstance(body, dict):
        return ""
    for key in prefer:
        value = body.get(key)
        if isinstance(value, str) and value:
            return value
    return ""
