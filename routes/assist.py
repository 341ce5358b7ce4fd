"""
Route handler for the full assistant flow.
Capture -> vision resolution -> streaming chat, strictly in that order.
"""
from typing import AsyncIterator
from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from mss.exception import ScreenShotError
from models.api_models import AssistRequest
from services.chat_service import StreamingChatOrchestrator
from services.screen_capture import ScreenCapturer
from services.stream_service import StreamService
from services.vision_pipeline import VisionResolutionPipeline
from routes.chat_stream import SSE_HEADERS
from utils.logger import app_logger

router = APIRouter()


@router.post("/assist/stream")
async def assist_stream(request: AssistRequest):
    """
    Capture the screen (when asked), resolve it to text and stream the reply.
    The vision context is used for this request only.
    """

    async def event_generator() -> AsyncIterator[str]:
        yield StreamService.send_sse_event("status", {"stage": "initializing"})

        vision_context = None
        if request.capture_screen:
            yield StreamService.send_sse_event("status", {"stage": "capturing"})
            try:
                image = await ScreenCapturer.capture()
            except ScreenShotError as e:
                app_logger.error(f"Screen capture failed, continuing without screen context: {e}")
                image = None

            if image is not None:
                yield StreamService.send_sse_event("status", {"stage": "analyzing"})
                vision_context = await VisionResolutionPipeline().resolve(image)

        turn = StreamingChatOrchestrator.start_turn(request.messages, vision_context)
        metadata = {"vision_source": vision_context.source if vision_context else None}

        async for event in StreamService.stream_chat_events(turn, metadata):
            yield event

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=SSE_HEADERS
    )
