"""
Screen capture service.
Grabs a still image of the primary display.
"""
import asyncio
import io

import mss
from PIL import Image

from config import Config
from models.chat_models import CapturedImage
from utils.logger import app_logger


class ScreenCapturer:
    """Captures the primary monitor as a PNG."""

    @staticmethod
    def _grab() -> bytes:
        with mss.mss() as sct:
            monitor = sct.monitors[1]  # primary
            shot = sct.grab(monitor)

        img = Image.frombytes("RGB", shot.size, shot.bgra, "raw", "BGRX")
        img.thumbnail(Config.CAPTURE_MAX_SIZE)

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()

    @staticmethod
    async def capture() -> CapturedImage:
        """
        Capture the primary display.

        Raises:
            mss.exception.ScreenShotError: no display or capture permission
        """
        payload = await asyncio.to_thread(ScreenCapturer._grab)
        app_logger.info(f"Captured screenshot ({len(payload)} bytes)")
        return CapturedImage(payload=payload, mime_type="image/png")
