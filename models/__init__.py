"""
Models package exports.
"""
from models.api_models import (
    ConversationMessage,
    ContentPart,
    ImageReference,
    ConversationRequest,
    ChatRequest,
    AssistRequest,
    VisionRequest,
    build_user_message
)
from models.chat_models import CapturedImage, VisionContext, ChatCompletionRequest, ChatTurn, StreamState

__all__ = [
    'ConversationMessage',
    'ContentPart',
    'ImageReference',
    'ConversationRequest',
    'ChatRequest',
    'AssistRequest',
    'VisionRequest',
    'build_user_message',
    'CapturedImage',
    'VisionContext',
    'ChatCompletionRequest',
    'ChatTurn',
    'StreamState'
]
