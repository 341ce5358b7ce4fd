"""
Vision resolution pipeline.
Turns a screenshot into a VisionContext by trying each stage in order:
remote vision model first, then local OCR. Never raises.
"""
from typing import Awaitable, Callable, Optional

from models.chat_models import CapturedImage, VisionContext
from services.ocr_service import OcrFallback
from services.vision_service import VisionDescriber
from utils.constants import Sentinels, VisionSource
from utils.exceptions import OcrEngineError, VisionProviderError, VisionRateLimitError, VisionTimeoutError
from utils.logger import app_logger

Stage = Callable[[CapturedImage], Awaitable[Optional[VisionContext]]]


class VisionResolutionPipeline:
    """Ordered, non-racing fallback chain with one attempt per stage."""

    def __init__(self, describer=VisionDescriber, ocr=OcrFallback):
        self.describer = describer
        self.ocr = ocr

    @property
    def stages(self) -> list[tuple[str, Stage]]:
        return [
            ("remote_vision", self._describe_stage),
            ("local_ocr", self._ocr_stage),
        ]

    async def _describe_stage(self, image: CapturedImage) -> Optional[VisionContext]:
        if not self.describer.is_configured():
            app_logger.info("No vision API key configured, skipping remote vision")
            return None

        try:
            description = await self.describer.describe(image)
        except VisionRateLimitError:
            app_logger.warning("Vision provider rate-limited (429), falling back to OCR")
            return None
        except VisionTimeoutError as e:
            app_logger.warning(f"{e}, falling back to OCR")
            return None
        except VisionProviderError as e:
            app_logger.error(f"Vision provider failed: {e}, falling back to OCR")
            return None

        if not description:
            return None
        return VisionContext(text=description, source=VisionSource.MODEL)

    async def _ocr_stage(self, image: CapturedImage) -> Optional[VisionContext]:
        try:
            text = await self.ocr.extract_text(image)
        except OcrEngineError as e:
            app_logger.error(f"OCR failed: {e}")
            return VisionContext(text=Sentinels.ANALYSIS_FAILED, source=VisionSource.FAILED)

        if not text:
            app_logger.warning("OCR found no text")
            return VisionContext(text=Sentinels.NO_TEXT_FOUND, source=VisionSource.NONE)

        return VisionContext(text=f"{Sentinels.OCR_PREFIX}{text}", source=VisionSource.OCR)

    async def resolve(self, image: CapturedImage) -> VisionContext:
        """
        Resolve a screenshot into a textual context.

        Args:
            image: Screenshot to analyze

        Returns:
            VisionContext tagged model, ocr, none or failed
        """
        for name, stage in self.stages:
            try:
                context = await stage(image)
            except Exception as e:
                app_logger.error(f"Vision stage '{name}' raised unexpectedly: {e}")
                continue

            if context is not None:
                app_logger.info(f"Vision resolved by stage '{name}' (source={context.source})")
                return context

        return VisionContext(text=Sentinels.ANALYSIS_FAILED, source=VisionSource.FAILED)
