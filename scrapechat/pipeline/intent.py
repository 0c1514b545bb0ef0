"""Turn classification: URL detection, full-content intent, scrape markers."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence, Union

from scrapechat.config import settings
from scrapechat.models.schemas import ChatMessage

URL_PATTERN = re.compile(r"https?://[^\s]+")
SCRAPE_MARKER_PATTERN = re.compile(r"SCRAPE_URL: (https?://[^\s]+)")


@dataclass(frozen=True)
class DirectScrape:
    """Latest user message carries a URL; scrape it before the completion call."""

    url: str
    full_content: bool = False


@dataclass(frozen=True)
class FullContentRequest:
    """User asks for the complete scraped text rather than an analysis."""


@dataclass(frozen=True)
class AnalysisRequest:
    text: str


@dataclass(frozen=True)
class NoUserTurn:
    """Latest message is not from the user; it passes through untouched."""


TurnIntent = Union[DirectScrape, FullContentRequest, AnalysisRequest, NoUserTurn]


def find_first_url(text: str) -> str | None:
    """Return the first URL-like token in text, ignoring any later ones."""
    match = URL_PATTERN.search(text or "")
    return match.group(0) if match else None


def find_scrape_marker(text: str) -> str | None:
    """Return the URL of the first `SCRAPE_URL: <url>` marker, if any."""
    match = SCRAPE_MARKER_PATTERN.search(text or "")
    return match.group(1) if match else None


def is_full_content_request(text: str, phrase: str | None = None) -> bool:
    phrase = (phrase or settings.full_content_phrase).lower()
    return phrase in (text or "").lower()


def classify_turn(messages: Sequence[ChatMessage], *, full_content_phrase: str | None = None) -> TurnIntent:
    if not messages:
        raise ValueError("Conversation must contain at least one message")

    latest = messages[-1]
    if latest.role != "user":
        return NoUserTurn()

    full_content = is_full_content_request(latest.content, full_content_phrase)
    url = find_first_url(latest.content)
    if url:
        return DirectScrape(url=url, full_content=full_content)
    if full_content:
        return FullContentRequest()
    return AnalysisRequest(text=latest.content)
