from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from loguru import logger

from scrapechat.models.schemas import ErrorResponse, ScrapeRequest
from scrapechat.tools import firecrawl_scraper
from scrapechat.tools.firecrawl_scraper import ScrapeError

router = APIRouter(prefix="/api/scrape", tags=["scrape"])


@router.post("", responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def scrape(request: ScrapeRequest):
    """Proxy a scrape to Firecrawl and return its JSON response verbatim."""
    if not request.url:
        return JSONResponse(status_code=400, content={"error": "URL is required"})

    try:
        data = await firecrawl_scraper.scrape(request.url)
    except ScrapeError as exc:
        logger.error(f"Scraping error: {exc}")
        return JSONResponse(status_code=500, content={"error": "Failed to scrape content"})
    return data
