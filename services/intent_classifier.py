"""
Intent classification for chat requests.
Pure keyword matching, no I/O.
"""
from typing import Sequence

from models.api_models import ConversationMessage
from utils.constants import Keywords, TaskCategory


class IntentClassifier:
    """Maps the latest user message to a task category."""

    @staticmethod
    def last_user_text(conversation: Sequence[ConversationMessage]) -> str:
        """Text of the most recent user message, or an empty string."""
        for message in reversed(conversation):
            if message.role == "user":
                return message.text
        return ""

    @staticmethod
    def classify_text(text: str, has_vision_context: bool) -> str:
        """
        Classify a message.

        Precedence is coding > email > writing > general. Any usable screen
        context forces coding.
        """
        text_lower = text.lower()

        if has_vision_context or any(kw in text_lower for kw in Keywords.CODING):
            return TaskCategory.CODING

        if any(kw in text_lower for kw in Keywords.EMAIL):
            return TaskCategory.EMAIL

        if any(kw in text_lower for kw in Keywords.WRITING):
            return TaskCategory.WRITING

        return TaskCategory.GENERAL

    @staticmethod
    def classify(conversation: Sequence[ConversationMessage], has_vision_context: bool) -> str:
        """Classify the conversation by its last user message."""
        return IntentClassifier.classify_text(
            IntentClassifier.last_user_text(conversation),
            has_vision_context
        )
