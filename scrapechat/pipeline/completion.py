"""Two-phase exchange with the completion collaborator.

INITIAL_CALL -> DONE when the reply carries no scrape marker, otherwise
INITIAL_CALL -> FOLLOWUP_SCRAPE -> ANALYSIS_CALL -> DONE. A failed follow-up
scrape goes straight to DONE with the initial reply.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, Sequence

from loguru import logger

from scrapechat import llm_client
from scrapechat.config import settings
from scrapechat.llm_client import CompletionReply
from scrapechat.models.schemas import ChatMessage
from scrapechat.pipeline.intent import find_scrape_marker
from scrapechat.pipeline.prompts import build_analysis_messages
from scrapechat.pipeline.scrape import Scraper, scrape_page_text
from scrapechat.pipeline.text import truncate_text


class CompletionError(RuntimeError):
    """The completion collaborator returned no usable reply."""


class Completer(Protocol):
    async def create(
        self,
        *,
        model: str,
        messages: Sequence[ChatMessage],
        temperature: float,
        caller: str = ...,
    ) -> CompletionReply | None: ...


class CompletionState(str, Enum):
    INITIAL_CALL = "initial_call"
    FOLLOWUP_SCRAPE = "followup_scrape"
    ANALYSIS_CALL = "analysis_call"
    DONE = "done"


@dataclass
class CompletionRun:
    reply_role: str
    reply: str
    scraped_context: str | None
    scrape_payload: dict[str, Any] | None = None
    marker_url: str | None = None
    states: list[CompletionState] = field(default_factory=list)


class CompletionInvoker:
    def __init__(
        self,
        *,
        completer: Completer | None = None,
        scraper: Scraper | None = None,
        chat_model: str | None = None,
        analysis_model: str | None = None,
        temperature: float | None = None,
        scraped_context_max_tokens: int | None = None,
        injection_max_tokens: int | None = None,
    ):
        self.completer = completer
        self.scraper = scraper
        self.chat_model = chat_model or llm_client.get_model()
        self.analysis_model = analysis_model or settings.analysis_model
        self.temperature = settings.completion_temperature if temperature is None else temperature
        self.scraped_context_max_tokens = (
            scraped_context_max_tokens or settings.scraped_context_max_tokens
        )
        self.injection_max_tokens = injection_max_tokens or settings.context_injection_max_tokens

    def _completer(self) -> Completer:
        return self.completer or llm_client.client()

    async def run(
        self,
        messages: Sequence[ChatMessage],
        *,
        scraped_context: str | None,
        allow_followup_scrape: bool,
    ) -> CompletionRun:
        """Drive the state machine to DONE.

        `allow_followup_scrape` is False when the user's own message already
        carried a URL, so a marker in the reply never triggers a second scrape.
        """
        run = CompletionRun(reply_role="assistant", reply="", scraped_context=scraped_context)
        state = CompletionState.INITIAL_CALL

        while state is not CompletionState.DONE:
            run.states.append(state)

            if state is CompletionState.INITIAL_CALL:
                reply = await self._completer().create(
                    model=self.chat_model,
                    messages=messages,
                    temperature=self.temperature,
                    caller="chat",
                )
                if reply is None or not reply.content:
                    raise CompletionError("Invalid response from completion service")
                run.reply_role = reply.role
                run.reply = reply.content
                run.marker_url = find_scrape_marker(reply.content) if allow_followup_scrape else None
                state = (
                    CompletionState.FOLLOWUP_SCRAPE if run.marker_url else CompletionState.DONE
                )

            elif state is CompletionState.FOLLOWUP_SCRAPE:
                outcome = await scrape_page_text(run.marker_url, scraper=self.scraper)
                if outcome is None:
                    state = CompletionState.DONE
                    continue
                run.scrape_payload = outcome.payload
                run.scraped_context = truncate_text(outcome.text, self.scraped_context_max_tokens)
                state = CompletionState.ANALYSIS_CALL

            elif state is CompletionState.ANALYSIS_CALL:
                analysis = await self._analyze(run.scraped_context or "")
                if analysis is not None:
                    run.reply = analysis
                state = CompletionState.DONE

        run.states.append(CompletionState.DONE)
        return run

    async def _analyze(self, scraped_context: str) -> str | None:
        """Summarize fresh content; None keeps the initial reply, errors propagate."""
        reply = await self._completer().create(
            model=self.analysis_model,
            messages=build_analysis_messages(
                scraped_context, injection_max_tokens=self.injection_max_tokens
            ),
            temperature=self.temperature,
            caller="analysis",
        )
        if reply is None or not reply.content:
            logger.warning("Analysis call returned no content, keeping initial reply")
            return None
        return reply.content
