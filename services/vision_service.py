"""
Remote vision service.
Asks a multimodal chat-completion endpoint to describe a screenshot.
"""
import asyncio
import json
from typing import Optional

import httpx

from config import Config
from models.chat_models import CapturedImage
from utils.constants import VISION_ANALYSIS_PROMPT
from utils.exceptions import VisionProviderError, VisionRateLimitError, VisionTimeoutError
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


class VisionDescriber:
    """Describes screenshots with a remote vision model."""

    @staticmethod
    def is_configured() -> bool:
        return Config.has_vision_credentials()

    @staticmethod
    def build_payload(image: CapturedImage) -> dict:
        """Single user message combining the analysis instruction and the image."""
        return {
            "model": Config.VISION_MODEL,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": VISION_ANALYSIS_PROMPT},
                        {"type": "image_url", "image_url": {"url": image.data_url}}
                    ]
                }
            ],
            "max_tokens": Config.VISION_MAX_TOKENS,
            "temperature": Config.VISION_TEMPERATURE,
        }

    @staticmethod
    async def describe(image: CapturedImage) -> Optional[str]:
        """
        Describe a screenshot.

        Returns:
            The description, or None when the provider answered without one

        Raises:
            VisionRateLimitError: provider returned 429
            VisionTimeoutError: no answer within Config.VISION_TIMEOUT
            VisionProviderError: any other failure
        """
        client = HTTPClientManager.get_vision_client()
        headers = {
            "Authorization": f"Bearer {Config.VISION_API_KEY}",
            "Content-Type": "application/json",
            "HTTP-Referer": Config.APP_REFERER,
            "X-Title": Config.APP_TITLE,
        }

        app_logger.info(f"Requesting screen description from {Config.VISION_MODEL}")
        try:
            response = await asyncio.wait_for(
                client.post(
                    Config.VISION_API_URL,
                    json=VisionDescriber.build_payload(image),
                    headers=headers,
                    timeout=Config.VISION_TIMEOUT
                ),
                timeout=Config.VISION_TIMEOUT
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise VisionTimeoutError(f"Vision request timed out after {Config.VISION_TIMEOUT}s") from e
        except httpx.HTTPError as e:
            raise VisionProviderError(f"Vision network error: {e}") from e

        if response.status_code == 429:
            raise VisionRateLimitError("Vision provider rate-limited the request", status_code=429)

        if response.status_code != 200:
            raise VisionProviderError(
                f"Vision provider returned {response.status_code}: {response.text[:200]}",
                status_code=response.status_code
            )

        try:
            data = response.json()
            description = data["choices"][0]["message"]["content"]
        except (json.JSONDecodeError, KeyError, IndexError, TypeError) as e:
            raise VisionProviderError(f"Malformed vision response: {e}") from e

        if not isinstance(description, str) or not description.strip():
            app_logger.info("Vision provider returned no description")
            return None

        app_logger.info(f"Vision description received ({len(description)} characters)")
        return description.strip()
