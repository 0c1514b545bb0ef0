from __future__ import annotations

from scrapechat.pipeline.intent import SCRAPE_MARKER_PATTERN

CHARS_PER_TOKEN = 4
TRUNCATION_NOTICE = "\n\n[Content truncated due to length...]"
DEFAULT_MAX_TOKENS = 12000


def truncate_text(text: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
    """Bound text to roughly `max_tokens` tokens (1 token ~ 4 characters).

    Over-long text keeps its prefix and gains TRUNCATION_NOTICE. Truncating an
    already-truncated result yields the same string.
    """
    max_length = max_tokens * CHARS_PER_TOKEN
    if len(text) <= max_length:
        return text
    return text[:max_length] + TRUNCATION_NOTICE


def sanitize_reply(text: str) -> str:
    """Drop the first scrape marker from a reply and trim the result."""
    return SCRAPE_MARKER_PATTERN.sub("", text, count=1).strip()
