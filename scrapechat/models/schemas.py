from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant", "system"]


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Role
    content: str


# --- Requests ---


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = Field(min_length=1)
    scrapedContent: str | None = None


class ScrapeRequest(BaseModel):
    url: str | None = None


# --- Responses ---


class ChatResponse(BaseModel):
    message: ChatMessage
    scrapeResult: dict[str, Any] | None = None
    scrapedContent: str | None = None


class ErrorResponse(BaseModel):
    error: str
