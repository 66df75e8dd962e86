"""Chat relay endpoints.

Forwards conversation context to the upstream model and returns either the
complete reply or a server-sent event stream of ``delta`` / ``done`` /
``error`` frames.
"""

import logging
from collections.abc import AsyncGenerator, AsyncIterator

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import StreamingResponse

from relaychat.agent.upstream import get_upstream_service
from relaychat.models.schemas import (
    ChatMessage,
    ChatRequest,
    ChatResponse,
    DeltaFrame,
    DoneFrame,
    ErrorFrame,
    encode_frame,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def _require_messages(request: ChatRequest) -> list[ChatMessage]:
    """Reject empty context before any upstream work.

    Raises:
        HTTPException: 400 if the message list is empty.
    """
    if not request.messages:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Messages array is required",
        )
    return request.messages


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest) -> ChatResponse:
    """Forward a conversation and return the complete reply.

    Raises:
        400: Empty message list.
        500: Missing credentials or upstream failure.
    """
    messages = _require_messages(request)
    service = get_upstream_service()

    content = await service.complete(messages)
    logger.info(f"Relayed chat request with {len(messages)} messages")
    return ChatResponse(content=content)


async def _event_stream(
    first: str | None,
    fragments: AsyncIterator[str],
) -> AsyncGenerator[str]:
    """Re-emit upstream fragments as SSE frames.

    Headers are already sent when this runs, so failures become an error
    frame instead of a status code.
    """
    try:
        if first is not None:
            yield encode_frame(DeltaFrame(content=first))
            async for fragment in fragments:
                yield encode_frame(DeltaFrame(content=fragment))
        yield encode_frame(DoneFrame())
    except Exception as e:
        logger.exception("Upstream stream failed after response start")
        yield encode_frame(ErrorFrame(message=str(e) or "An error occurred"))


@router.post("/chat/stream")
async def chat_stream(request: ChatRequest) -> StreamingResponse:
    """Forward a conversation and stream the reply as server-sent events.

    The first upstream fragment is awaited before the response starts, so a
    failure to open the upstream stream still yields an error status.

    Raises:
        400: Empty message list.
        500: Missing credentials or upstream failure before streaming.
    """
    messages = _require_messages(request)
    service = get_upstream_service()

    fragments = service.stream(messages)
    try:
        first: str | None = await anext(fragments)
    except StopAsyncIteration:
        first = None

    logger.info(f"Streaming chat reply for {len(messages)} messages")
    return StreamingResponse(
        _event_stream(first, fragments),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
