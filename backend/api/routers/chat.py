"""
Chat router - Handles conversation endpoints.
"""

import logging
from contextlib import aclosing

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from pydantic import BaseModel

from api.dependencies import get_chat_service
from observability import capture_exception
from rag.chat import ChatService
from rag.exceptions import F1RAGError
from rag.schemas import SourceReference

router = APIRouter()
logger = logging.getLogger(__name__)

NO_USER_MESSAGE = "No user message provided"
PROCESSING_FAILED = {"error": "Failed to process message"}


class ChatMessage(BaseModel):
    """A single conversation turn."""

    role: str
    content: str


class ChatRequest(BaseModel):
    """Conversation so far; the last message is the question."""

    messages: list[ChatMessage]


class ChatResponse(BaseModel):
    """Complete answer with citations."""

    answer: str
    sources: list[SourceReference] = []


def _split_conversation(request: ChatRequest) -> tuple[str, list[ChatMessage]] | None:
    """Return (question, history), or None if the last turn isn't from the user."""
    if not request.messages or request.messages[-1].role != "user":
        return None
    return request.messages[-1].content, request.messages[:-1]


@router.post("")
async def chat(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
):
    """
    Answer the latest user message, streamed as plain text.

    Retrieval failures fall back to a general-knowledge answer; a
    generation failure before any text is produced returns 500.
    """
    conversation = _split_conversation(request)
    if conversation is None:
        return PlainTextResponse(NO_USER_MESSAGE, status_code=400)
    question, history = conversation

    fragments = chat_service.stream(question, history)
    try:
        first = await anext(fragments, "")
    except Exception as e:
        logger.error(f"Chat error: {e}", exc_info=True)
        capture_exception(e, tags={"endpoint": "chat"})
        await fragments.aclose()
        return JSONResponse(PROCESSING_FAILED, status_code=500)

    async def body():
        async with aclosing(fragments):
            if first:
                yield first
            try:
                async for fragment in fragments:
                    yield fragment
            except F1RAGError as e:
                # Headers are already sent; end the stream
                logger.error(f"Chat stream interrupted: {e}")
                capture_exception(e, tags={"endpoint": "chat"})

    return StreamingResponse(body(), media_type="text/plain; charset=utf-8")


@router.post("/complete", response_model=ChatResponse)
async def chat_complete(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
):
    """Answer the latest user message in one response, with sources."""
    conversation = _split_conversation(request)
    if conversation is None:
        return PlainTextResponse(NO_USER_MESSAGE, status_code=400)
    question, history = conversation

    try:
        result = await chat_service.answer(question, history)
    except Exception as e:
        logger.error(f"Chat error: {e}", exc_info=True)
        capture_exception(e, tags={"endpoint": "chat_complete"})
        return JSONResponse(PROCESSING_FAILED, status_code=500)

    return ChatResponse(answer=result.answer, sources=result.sources)
