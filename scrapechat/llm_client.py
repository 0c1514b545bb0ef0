"""OpenAI-compatible chat completion client used by the chat pipeline."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Sequence

from scrapechat.config import settings
from scrapechat.models.schemas import ChatMessage
from scrapechat.services import logger as log_service


@dataclass
class Usage:
    input_tokens: int = 0
    output_tokens: int = 0


@dataclass
class CompletionReply:
    role: str
    content: str | None
    usage: Usage = field(default_factory=Usage)


class ChatCompletionsAdapter:
    """Single-shot (non-streaming) wrapper over `chat.completions.create`."""

    def __init__(self, openai_client: Any):
        self._client = openai_client

    @staticmethod
    def _to_openai_messages(messages: Sequence[ChatMessage]) -> list[dict[str, str]]:
        return [{"role": m.role, "content": m.content} for m in messages]

    @staticmethod
    def _from_openai_response(response: Any) -> CompletionReply | None:
        choices = getattr(response, "choices", None) or []
        if not choices:
            return None
        message = getattr(choices[0], "message", None)
        if message is None:
            return None

        usage = getattr(response, "usage", None)
        return CompletionReply(
            role=getattr(message, "role", None) or "assistant",
            content=getattr(message, "content", None),
            usage=Usage(
                input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
                output_tokens=getattr(usage, "completion_tokens", 0) or 0,
            ),
        )

    async def create(
        self,
        *,
        model: str,
        messages: Sequence[ChatMessage],
        temperature: float,
        caller: str = "chat",
    ) -> CompletionReply | None:
        t0 = time.monotonic()
        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=self._to_openai_messages(messages),
                temperature=temperature,
            )
        except Exception as exc:
            log_service.log_llm_call(
                model=model,
                caller=caller,
                duration_ms=int((time.monotonic() - t0) * 1000),
                status="error",
                error=str(exc),
            )
            raise

        reply = self._from_openai_response(response)
        usage = reply.usage if reply else Usage()
        log_service.log_llm_call(
            model=model,
            caller=caller,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
            duration_ms=int((time.monotonic() - t0) * 1000),
            status="success" if reply and reply.content else "empty",
        )
        return reply


def get_client() -> ChatCompletionsAdapter:
    """Build a client via the OpenAI SDK from the current settings."""
    from openai import AsyncOpenAI

    base_url = settings.openai_base_url.strip() or "https://api.openai.com/v1"
    openai_client = AsyncOpenAI(
        api_key=settings.openai_api_key,
        base_url=base_url,
    )
    return ChatCompletionsAdapter(openai_client)


def get_model() -> str:
    """Model used for the initial chat call."""
    return settings.chat_model


_client: ChatCompletionsAdapter | None = None


def client() -> ChatCompletionsAdapter:
    """Get or create the LLM client."""
    global _client
    if _client is None:
        _client = get_client()
    return _client
