"""
Route handlers for streaming chat operations.
Handles the /chat/stream endpoint with real-time status updates.
"""
from typing import AsyncIterator
from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from models.api_models import ChatRequest
from services.chat_service import StreamingChatOrchestrator
from services.stream_service import StreamService

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no"
}


@router.post("/chat/stream")
async def chat_stream(request: ChatRequest):
    """
    Streaming chat endpoint. Emits token events as fragments arrive.
    """

    async def event_generator() -> AsyncIterator[str]:
        yield StreamService.send_sse_event("status", {"stage": "initializing"})

        turn = StreamingChatOrchestrator.start_turn(request.messages, request.vision_context)

        async for event in StreamService.stream_chat_events(turn):
            yield event

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS
    )
