"""
Chat Endpoints
Plain chat streaming and conversation titles
"""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from typing import AsyncGenerator

from vibecoding.api.dependencies import get_llm_client
from vibecoding.api.v1.endpoints.vibecoding import SSE_DONE, SSE_HEADERS, sse_event
from vibecoding.core.config import settings
from vibecoding.core.exceptions import ValidationError
from vibecoding.core.logging_config import logger, set_conversation_id
from vibecoding.schemas.vibecoding import ChatStreamRequest, TitleRequest, TitleResponse
from vibecoding.services.title_generator import generate_conversation_title
from vibecoding.utils.deepseek_client import DeepSeekClient


router = APIRouter(prefix="/chat", tags=["Chat"])


@router.post("/stream")
async def stream_chat(
    request: ChatStreamRequest,
    client: DeepSeekClient = Depends(get_llm_client)
):
    """Stream a chat reply as Server-Sent Events of {content} deltas"""
    set_conversation_id(request.conversation_id)
    if not request.messages:
        raise ValidationError("At least one message is required", field="messages")
    messages = [m.model_dump() for m in request.messages]

    async def event_generator() -> AsyncGenerator[str, None]:
        try:
            async for delta in client.chat_stream(messages, max_tokens=settings.LLM_CHAT_MAX_TOKENS):
                yield sse_event({"content": delta})
        except Exception as e:
            logger.log_error_with_context(e, "stream_chat", conversation_id=request.conversation_id)
            yield sse_event({"error": str(e)})

        yield SSE_DONE

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS
    )


@router.post("/title", response_model=TitleResponse)
async def create_title(
    request: TitleRequest,
    client: DeepSeekClient = Depends(get_llm_client)
):
    """Short title for a new conversation"""
    title = await generate_conversation_title(request.message, client=client)
    return TitleResponse(title=title)
