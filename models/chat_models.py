"""
Data models for chat processing.
Contains captured images, vision contexts, outgoing requests and per-call stream state.
"""
import base64
import binascii
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from utils.constants import Sentinels, VisionSource

_DATA_URL_PATTERN = re.compile(r'^data:(?P<mime>[\w/+.-]+);base64,(?P<data>.*)$', re.DOTALL)


@dataclass(frozen=True)
class CapturedImage:
    """
    Raw screenshot bytes plus their encoding tag.
    Produced once per capture and never cached.
    """
    payload: bytes
    mime_type: str = "image/png"

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.payload).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"

    @classmethod
    def from_data_url(cls, value: str) -> "CapturedImage":
        """Parse a `data:<mime>;base64,` URL or bare base64 string."""
        value = value.strip()
        mime_type = "image/png"
        match = _DATA_URL_PATTERN.match(value)
        if match:
            mime_type = match.group("mime")
            value = match.group("data")
        try:
            payload = base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Image is not valid base64: {e}") from e
        if not payload:
            raise ValueError("Image payload is empty")
        return cls(payload=payload, mime_type=mime_type)


@dataclass(frozen=True)
class VisionContext:
    """Text description of the screen tagged with where it came from."""
    text: str
    source: str

    @property
    def is_usable(self) -> bool:
        """True when the context carries real screen content rather than a sentinel."""
        return self.source in (VisionSource.MODEL, VisionSource.OCR) and bool(self.text.strip())

    @classmethod
    def from_text(cls, text: Optional[str]) -> "VisionContext":
        """Rebuild a context from a caller-supplied string, recognising the sentinels."""
        if not text or not text.strip():
            return cls(text="", source=VisionSource.NONE)
        stripped = text.strip()
        if stripped == Sentinels.NO_TEXT_FOUND:
            return cls(text=stripped, source=VisionSource.NONE)
        if stripped in (Sentinels.ANALYSIS_FAILED, Sentinels.OCR_FAILED):
            return cls(text=stripped, source=VisionSource.FAILED)
        if stripped.startswith(Sentinels.OCR_PREFIX.strip()):
            return cls(text=stripped, source=VisionSource.OCR)
        return cls(text=stripped, source=VisionSource.MODEL)


@dataclass(frozen=True)
class ChatCompletionRequest:
    """
    Outgoing chat-completion request. Built fresh per call, never mutated.
    The system prompt is synthesized here and is never part of `messages`.
    """
    model: str
    system_prompt: str
    messages: tuple
    category: str
    stream: bool = True
    temperature: float = 1.0
    top_p: float = 0.95
    max_tokens: int = 2048
    has_vision_context: bool = False

    def to_payload(self) -> dict:
        """JSON body for the chat-completion endpoint, system prompt first."""
        return {
            "model": self.model,
            "messages": [{"role": "system", "content": self.system_prompt}, *self.messages],
            "stream": self.stream,
            "temperature": self.temperature,
            "top_p": self.top_p,
            "max_completion_tokens": self.max_tokens,
        }


class StreamState(Enum):
    """Lifecycle of one chat call."""
    IDLE = "idle"
    REQUESTING = "requesting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ChatTurn:
    """
    Per-call state: owns its accumulator, shared with nothing else.
    """
    request: ChatCompletionRequest
    state: StreamState = StreamState.IDLE
    text: str = ""
    fragment_count: int = 0
    demo: bool = False
    user_text: str = ""
    error: Optional[str] = field(default=None)

    @property
    def category(self) -> str:
        return self.request.category

    def append(self, fragment: str) -> None:
        self.text += fragment
        self.fragment_count += 1
