"""
Route handlers for provider status.
"""
from fastapi import APIRouter
from config import Config

router = APIRouter()

@router.get("/status")
async def provider_status():
    """Report which providers are configured."""
    return {
        "chat": {"configured": Config.has_chat_credentials(), "model": Config.CHAT_MODEL},
        "vision": {"configured": Config.has_vision_credentials(), "model": Config.VISION_MODEL},
        "demo_mode": not Config.has_chat_credentials(),
    }
