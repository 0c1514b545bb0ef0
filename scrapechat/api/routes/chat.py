from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from loguru import logger

from scrapechat.models.schemas import ChatRequest, ChatResponse, ErrorResponse
from scrapechat.pipeline.orchestrator import ChatOrchestrator

router = APIRouter(prefix="/api/chat", tags=["chat"])


def get_orchestrator() -> ChatOrchestrator:
    return ChatOrchestrator()


@router.post(
    "",
    response_model=ChatResponse,
    response_model_exclude_unset=True,
    responses={500: {"model": ErrorResponse}},
)
async def chat(request: ChatRequest):
    """Handle one chat turn; the caller carries `scrapedContent` into the next request."""
    try:
        result = await get_orchestrator().handle_turn(
            request.messages,
            scraped_context=request.scrapedContent,
        )
    except Exception:
        logger.exception("Chat error")
        return JSONResponse(status_code=500, content={"error": "Failed to process chat"})

    # Absent fields are left unset so they are omitted from the body.
    fields: dict[str, Any] = {"message": result.reply}
    if result.scrape_payload is not None:
        fields["scrapeResult"] = result.scrape_payload
    if result.scraped_context is not None:
        fields["scrapedContent"] = result.scraped_context
    return ChatResponse(**fields)
