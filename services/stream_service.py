"""
Streaming service for HTTP callers.
Re-emits orchestrator fragments as Server-Sent Events.
"""
import json
from contextlib import aclosing
from typing import AsyncIterator, Optional

from models.chat_models import ChatTurn
from services.chat_service import StreamingChatOrchestrator
from utils.constants import CHAT_FAILURE_MESSAGE
from utils.exceptions import ChatProviderError, ChatStreamInterrupted
from utils.logger import app_logger


class StreamService:
    """Service for handling streaming chat operations."""

    @staticmethod
    def send_sse_event(event_type: str, data: dict) -> str:
        """Format data as Server-Sent Events (SSE) format."""
        return f"event: {event_type}\ndata: {json.dumps(data, separators=(',', ':'))}\n\n"

    @staticmethod
    def build_error_payload(error: ChatProviderError) -> dict:
        """Error body shared by the JSON and SSE chat endpoints."""
        partial_text = error.partial_text if isinstance(error, ChatStreamInterrupted) else ""
        return {
            "type": error.error_type,
            "message": str(error),
            "display_message": CHAT_FAILURE_MESSAGE,
            "partial": bool(partial_text),
            "partial_response": partial_text,
        }

    @staticmethod
    async def stream_chat_events(turn: ChatTurn, metadata: Optional[dict] = None) -> AsyncIterator[str]:
        """Stream a chat turn as SSE events.

        Args:
            turn: Prepared chat turn
            metadata: Extra fields merged into the final done event

        Yields:
            `status`, `token`, then `done` or `error` events
        """
        yield StreamService.send_sse_event("status", {"stage": "generating", "category": turn.category})

        try:
            async with aclosing(StreamingChatOrchestrator.stream(turn)) as fragments:
                async for fragment in fragments:
                    yield StreamService.send_sse_event("token", {"content": fragment})
        except ChatProviderError as e:
            app_logger.error(f"Streaming chat error ({e.error_type}): {e}")
            yield StreamService.send_sse_event("error", StreamService.build_error_payload(e))
            return

        done = {
            "full_response": turn.text,
            "category": turn.category,
            "demo": turn.demo,
        }
        if metadata:
            done.update(metadata)
        yield StreamService.send_sse_event("done", done)
