"""
Route handlers for standard chat operations.
Handles the /chat endpoint (non-streaming).
"""
from fastapi import APIRouter
from models.api_models import ChatRequest
from services.chat_service import StreamingChatOrchestrator
from services.stream_service import StreamService
from utils.exceptions import ChatProviderError
from utils.logger import app_logger

router = APIRouter()


@router.post("/chat")
async def chat(request: ChatRequest):
    """
    Chat endpoint returning the complete assistant reply.
    """
    turn = StreamingChatOrchestrator.start_turn(request.messages, request.vision_context, stream=False)

    try:
        response = await StreamingChatOrchestrator.complete(turn)
    except ChatProviderError as e:
        app_logger.error(f"Chat error ({e.error_type}): {e}")
        payload = StreamService.build_error_payload(e)
        return {"error": payload["type"], "message": payload["message"], "display_message": payload["display_message"]}

    return {
        "response": response,
        "category": turn.category,
        "demo": turn.demo,
    }
