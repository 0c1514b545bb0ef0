from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from scrapechat.config import settings
from scrapechat.models.schemas import ChatMessage
from scrapechat.pipeline.completion import Completer, CompletionInvoker
from scrapechat.pipeline.intent import DirectScrape, TurnIntent, classify_turn
from scrapechat.pipeline.prompts import build_chat_messages
from scrapechat.pipeline.scrape import Scraper, scrape_page_text
from scrapechat.pipeline.text import sanitize_reply, truncate_text
from scrapechat.services import logger as log_service


@dataclass
class TurnResult:
    reply: ChatMessage
    scrape_payload: dict[str, Any] | None
    scraped_context: str | None
    intent: TurnIntent


class ChatOrchestrator:
    """Handles one chat turn end to end.

    Stateless across turns: the caller passes the conversation and the prior
    scraped context in, and carries `TurnResult.scraped_context` forward.
    """

    def __init__(
        self,
        *,
        completer: Completer | None = None,
        scraper: Scraper | None = None,
        history_window: int | None = None,
        scraped_context_max_tokens: int | None = None,
        injection_max_tokens: int | None = None,
        full_content_phrase: str | None = None,
    ):
        self.scraper = scraper
        self.history_window = history_window or settings.history_window_messages
        self.scraped_context_max_tokens = (
            scraped_context_max_tokens or settings.scraped_context_max_tokens
        )
        self.injection_max_tokens = injection_max_tokens or settings.context_injection_max_tokens
        self.full_content_phrase = full_content_phrase or settings.full_content_phrase
        self.invoker = CompletionInvoker(
            completer=completer,
            scraper=scraper,
            scraped_context_max_tokens=self.scraped_context_max_tokens,
            injection_max_tokens=self.injection_max_tokens,
        )

    async def handle_turn(
        self,
        messages: Sequence[ChatMessage],
        scraped_context: str | None = None,
    ) -> TurnResult:
        intent = classify_turn(messages, full_content_phrase=self.full_content_phrase)
        scrape_payload: dict[str, Any] | None = None

        if isinstance(intent, DirectScrape):
            outcome = await scrape_page_text(intent.url, scraper=self.scraper)
            if outcome is not None:
                scraped_context = truncate_text(outcome.text, self.scraped_context_max_tokens)
                scrape_payload = outcome.payload

        prompt = build_chat_messages(
            messages,
            intent,
            scraped_context,
            history_window=self.history_window,
            injection_max_tokens=self.injection_max_tokens,
        )
        run = await self.invoker.run(
            prompt,
            scraped_context=scraped_context,
            allow_followup_scrape=not isinstance(intent, DirectScrape),
        )

        log_service.log_event(
            event_type="chat_turn_completed",
            message="Chat turn completed",
            intent=type(intent).__name__,
            states=[s.value for s in run.states],
            context_chars=len(run.scraped_context or ""),
        )

        return TurnResult(
            reply=ChatMessage(role=run.reply_role, content=sanitize_reply(run.reply)),
            scrape_payload=run.scrape_payload or scrape_payload,
            scraped_context=run.scraped_context,
            intent=intent,
        )
