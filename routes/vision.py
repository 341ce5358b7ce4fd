"""
Route handlers for screen analysis.
Handles /vision/resolve (caller-supplied image) and /vision/capture.
"""
from fastapi import APIRouter, HTTPException, status
from mss.exception import ScreenShotError
from models.api_models import VisionRequest
from models.chat_models import CapturedImage
from services.screen_capture import ScreenCapturer
from services.vision_pipeline import VisionResolutionPipeline
from utils.logger import app_logger

router = APIRouter()


@router.post("/vision/resolve")
async def resolve_image(request: VisionRequest):
    """Describe a caller-supplied screenshot."""
    try:
        image = CapturedImage.from_data_url(request.image)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))

    context = await VisionResolutionPipeline().resolve(image)
    return {"context": context.text, "source": context.source}


@router.post("/vision/capture")
async def capture_and_resolve():
    """Capture the primary display and describe it."""
    try:
        image = await ScreenCapturer.capture()
    except ScreenShotError as e:
        app_logger.error(f"Screen capture failed: {e}")
        return {"error": "capture_failed", "message": str(e)}

    context = await VisionResolutionPipeline().resolve(image)
    return {"context": context.text, "source": context.source}
