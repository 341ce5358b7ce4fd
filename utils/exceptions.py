"""
Typed errors raised by the vision and chat providers.
Vision errors never leave the resolution pipeline; chat errors reach the routes.
"""
from typing import Optional


class VisionProviderError(RuntimeError):
    """Remote vision call failed (network error, bad status, malformed body)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class VisionRateLimitError(VisionProviderError):
    """Remote vision provider signalled quota exhaustion (HTTP 429)."""


class VisionTimeoutError(VisionProviderError):
    """Remote vision call exceeded its hard timeout."""


class OcrEngineError(RuntimeError):
    """Local OCR engine could not process the image."""


class ChatProviderError(RuntimeError):
    """Chat completion failed before or during delivery. Always recoverable by the caller."""

    error_type = "provider_error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ChatRateLimitError(ChatProviderError):
    """Chat provider returned HTTP 429."""

    error_type = "rate_limited"


class ChatStreamInterrupted(ChatProviderError):
    """
    Stream failed after some fragments were already delivered.
    The partial text has been observed by the caller and is not retracted.
    """

    error_type = "stream_interrupted"

    def __init__(self, message: str, partial_text: str):
        super().__init__(message)
        self.partial_text = partial_text
