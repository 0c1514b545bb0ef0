"""Prompt assembly for the completion collaborator."""
from __future__ import annotations

from typing import Sequence

from scrapechat.models.schemas import ChatMessage
from scrapechat.pipeline.intent import (
    AnalysisRequest,
    DirectScrape,
    FullContentRequest,
    NoUserTurn,
    TurnIntent,
)
from scrapechat.pipeline.text import truncate_text
from scrapechat.services.prompt_store import render_prompt


def wants_full_content(intent: TurnIntent) -> bool:
    if isinstance(intent, FullContentRequest):
        return True
    if isinstance(intent, DirectScrape):
        return intent.full_content
    return False


def rewrite_latest(latest: ChatMessage, intent: TurnIntent) -> ChatMessage:
    """Give the latest user message an explicit instruction.

    URL-bearing messages and non-user turns are returned as they are.
    """
    if isinstance(intent, FullContentRequest):
        return ChatMessage(role=latest.role, content=render_prompt("chat.full_content_request"))
    if isinstance(intent, AnalysisRequest):
        return ChatMessage(
            role=latest.role,
            content=render_prompt("chat.analysis_wrapper", request=intent.text),
        )
    if isinstance(intent, (DirectScrape, NoUserTurn)):
        return latest
    raise TypeError(f"Unhandled turn intent: {intent!r}")


def build_chat_messages(
    messages: Sequence[ChatMessage],
    intent: TurnIntent,
    scraped_context: str | None,
    *,
    history_window: int,
    injection_max_tokens: int,
) -> list[ChatMessage]:
    """Ordered message list for the initial completion call.

    System prompt, then the scraped context (bounded unless the user asked
    for the full content), then the trailing window of the conversation with
    the latest message rewritten per its intent.
    """
    prompt = [ChatMessage(role="system", content=render_prompt("chat.system_prompt"))]

    if scraped_context:
        context = scraped_context if wants_full_content(intent) else truncate_text(
            scraped_context, injection_max_tokens
        )
        prompt.append(
            ChatMessage(role="system", content=render_prompt("chat.reference_context", content=context))
        )

    window = list(messages[-max(history_window, 1):])
    window[-1] = rewrite_latest(window[-1], intent)
    prompt.extend(window)
    return prompt


def build_analysis_messages(scraped_context: str, *, injection_max_tokens: int) -> list[ChatMessage]:
    """Standalone prompt asking for a summary of freshly scraped content."""
    return [
        ChatMessage(role="system", content=render_prompt("chat.system_prompt")),
        ChatMessage(
            role="system",
            content=render_prompt(
                "chat.recent_context",
                content=truncate_text(scraped_context, injection_max_tokens),
            ),
        ),
        ChatMessage(role="user", content=render_prompt("chat.analysis_request")),
    ]
