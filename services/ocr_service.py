"""
Local OCR service backed by Tesseract.
Each call decodes the image, recognizes text and releases the image again.
"""
import asyncio
import io

import pytesseract
from PIL import Image, UnidentifiedImageError

from config import Config
from models.chat_models import CapturedImage
from utils.exceptions import OcrEngineError
from utils.logger import app_logger


class OcrFallback:
    """Extracts raw screen text with local optical character recognition."""

    @staticmethod
    def _recognize(payload: bytes) -> str:
        if Config.TESSERACT_CMD:
            pytesseract.pytesseract.tesseract_cmd = Config.TESSERACT_CMD

        try:
            with Image.open(io.BytesIO(payload)) as img:
                img.load()
                return pytesseract.image_to_string(img, lang=Config.OCR_LANGUAGE)
        except UnidentifiedImageError as e:
            raise OcrEngineError(f"Image could not be decoded: {e}") from e
        except pytesseract.TesseractNotFoundError as e:
            raise OcrEngineError("Tesseract is not installed or not on PATH") from e
        except (pytesseract.TesseractError, OSError) as e:
            raise OcrEngineError(f"Tesseract failed: {e}") from e

    @staticmethod
    async def extract_text(image: CapturedImage) -> str:
        """
        Run OCR against a screenshot without blocking the event loop.

        Returns:
            Extracted text, stripped (possibly empty)

        Raises:
            OcrEngineError: the engine could not process the image
        """
        app_logger.info("Running local OCR on screenshot")
        text = await asyncio.to_thread(OcrFallback._recognize, image.payload)
        text = (text or "").strip()
        app_logger.info(f"OCR extracted {len(text)} characters")
        return text
