"""
System prompt composition.
Builds the category-specific system prompt, embedding screen context when present.
"""
from typing import Optional

from models.chat_models import VisionContext
from utils.constants import (
    ADDITIONAL_INSTRUCTIONS_SECTION,
    BASE_PROMPT,
    CODING_PROMPT,
    CODING_SCREEN_HINT,
    EMAIL_PROMPT,
    FORMATTING_RULES,
    GENERAL_PROMPT,
    NO_SCREEN_CONTEXT_SECTION,
    SCREEN_CONTEXT_SECTION,
    WRITING_PROMPT,
    TaskCategory,
    VisionSource
)


class PromptComposer:
    """Composes system prompts. Identical inputs give identical prompts."""

    CATEGORY_PROMPTS = {
        TaskCategory.EMAIL: EMAIL_PROMPT,
        TaskCategory.WRITING: WRITING_PROMPT,
        TaskCategory.GENERAL: GENERAL_PROMPT,
    }

    SOURCE_LABELS = {
        VisionSource.MODEL: "vision analysis",
        VisionSource.OCR: "on-screen text recognition",
    }

    @staticmethod
    def _screen_section(vision_context: Optional[VisionContext]) -> str:
        if vision_context is not None and vision_context.is_usable:
            return SCREEN_CONTEXT_SECTION.format(
                source=PromptComposer.SOURCE_LABELS[vision_context.source],
                vision_context=vision_context.text
            )
        return NO_SCREEN_CONTEXT_SECTION

    @staticmethod
    def _category_section(category: str, has_screen: bool) -> str:
        if category == TaskCategory.CODING:
            return CODING_PROMPT.format(screen_hint=CODING_SCREEN_HINT if has_screen else "")
        return PromptComposer.CATEGORY_PROMPTS.get(category, GENERAL_PROMPT)

    @staticmethod
    def compose(
        category: str,
        vision_context: Optional[VisionContext] = None,
        additional_instructions: Optional[str] = None
    ) -> str:
        """
        Compose the system prompt.

        Args:
            category: TaskCategory value
            vision_context: Screen context; sentinels count as absent
            additional_instructions: Caller-supplied system message to fold in

        Returns:
            System prompt text
        """
        has_screen = vision_context is not None and vision_context.is_usable

        prompt = BASE_PROMPT
        prompt += PromptComposer._screen_section(vision_context)
        prompt += PromptComposer._category_section(category, has_screen)
        prompt += FORMATTING_RULES

        if additional_instructions and additional_instructions.strip():
            prompt += ADDITIONAL_INSTRUCTIONS_SECTION.format(instructions=additional_instructions.strip())

        return prompt
