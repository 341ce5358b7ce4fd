"""
Pydantic data models for API requests and responses.
"""
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator

from utils.constants import DEFAULT_SCREEN_REQUEST_TEXT


class ImageReference(BaseModel):
    """Image attached to a message, usually a data URL."""
    model_config = ConfigDict(frozen=True)

    url: str


class ContentPart(BaseModel):
    """One segment of a structured message: text or an image reference."""
    model_config = ConfigDict(frozen=True)

    type: Literal["text", "image_url"]
    text: Optional[str] = None
    image_url: Optional[ImageReference] = None


class ConversationMessage(BaseModel):
    """Chat message model. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant", "system"]
    content: Union[str, List[ContentPart]]

    @property
    def text(self) -> str:
        """Plain text of the message; the first text segment for structured content."""
        if isinstance(self.content, str):
            return self.content
        for part in self.content:
            if part.type == "text" and part.text:
                return part.text
        return ""

    def as_dict(self) -> dict:
        """Convert to the wire shape expected by chat-completion endpoints."""
        return self.model_dump(exclude_none=True)


def build_user_message(text: str, screenshot: Optional[str] = None) -> ConversationMessage:
    """Build a user message, attaching the screenshot data URL as an image part when given."""
    if screenshot:
        return ConversationMessage(
            role="user",
            content=[
                ContentPart(type="text", text=text or DEFAULT_SCREEN_REQUEST_TEXT),
                ContentPart(type="image_url", image_url=ImageReference(url=screenshot)),
            ]
        )
    return ConversationMessage(role="user", content=text)


class ConversationRequest(BaseModel):
    """Base for requests carrying a conversation. A system message may only lead it."""
    messages: List[ConversationMessage] = Field(..., min_length=1)

    @model_validator(mode="after")
    def system_message_first(self) -> "ConversationRequest":
        for index, message in enumerate(self.messages):
            if message.role == "system" and index != 0:
                raise ValueError("a system message may only appear as the first message")
        return self


class ChatRequest(ConversationRequest):
    """Chat request model with conversation history and optional screen context."""
    vision_context: Optional[str] = Field(None, max_length=20000, description="Screen description from /vision/resolve")


class AssistRequest(ConversationRequest):
    """Full capture -> analyze -> chat request."""
    capture_screen: bool = True


class VisionRequest(BaseModel):
    """Screenshot supplied by the caller, as a data URL or bare base64."""
    image: str = Field(..., min_length=1)
