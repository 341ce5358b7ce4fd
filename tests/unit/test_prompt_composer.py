import pytest

from models.chat_models import VisionContext
from services.prompt_composer import PromptComposer
from utils.constants import (
    BASE_PROMPT,
    FORMATTING_RULES,
    NO_SCREEN_CONTEXT_SECTION,
    Sentinels,
    TaskCategory,
    VisionSource
)
from tests.fixtures.responses import SCREEN_DESCRIPTION

SCREENSHOT_REQUEST_PHRASE = "upload or paste a screenshot"
CANNOT_SEE_GUARD = "Never say that you cannot see the screen"


def test_coding_prompt_embeds_vision_context_verbatim():
    """Given a model-derived description, the coding prompt should contain it verbatim and use the context-present branch."""
    context = VisionContext(text=SCREEN_DESCRIPTION, source=VisionSource.MODEL)

    prompt = PromptComposer.compose(TaskCategory.CODING, context)

    assert SCREEN_DESCRIPTION in prompt
    assert CANNOT_SEE_GUARD in prompt
    assert SCREENSHOT_REQUEST_PHRASE not in prompt
    assert NO_SCREEN_CONTEXT_SECTION not in prompt
    assert "Reference specific code/errors visible in the screen context" in prompt


def test_prompt_without_context_asks_clarifying_question():
    """Given no vision context, the prompt should use the context-absent branch."""
    prompt = PromptComposer.compose(TaskCategory.CODING, None)

    assert NO_SCREEN_CONTEXT_SECTION in prompt
    assert "clarifying question" in prompt
    assert CANNOT_SEE_GUARD not in prompt
    assert "Reference specific code/errors" not in prompt


@pytest.mark.parametrize("sentinel, source", [
    (Sentinels.NO_TEXT_FOUND, VisionSource.NONE),
    (Sentinels.ANALYSIS_FAILED, VisionSource.FAILED),
])
def test_sentinel_contexts_are_treated_as_absent(sentinel, source):
    """Given a sentinel context, the prompt should not embed it and should use the absent branch."""
    prompt = PromptComposer.compose(TaskCategory.GENERAL, VisionContext(text=sentinel, source=source))

    assert sentinel not in prompt
    assert NO_SCREEN_CONTEXT_SECTION in prompt


def test_ocr_context_is_labeled_as_text_recognition():
    context = VisionContext(text=f"{Sentinels.OCR_PREFIX}hello", source=VisionSource.OCR)
    prompt = PromptComposer.compose(TaskCategory.CODING, context)
    assert "on-screen text recognition" in prompt
    assert "hello" in prompt


@pytest.mark.parametrize("category, marker", [
    (TaskCategory.CODING, "User needs coding assistance"),
    (TaskCategory.EMAIL, "email composition or replies"),
    (TaskCategory.WRITING, "writing assistance"),
    (TaskCategory.GENERAL, "Your capabilities"),
])
def test_every_category_has_persona_role_and_formatting_rules(category, marker):
    prompt = PromptComposer.compose(category)
    assert prompt.startswith(BASE_PROMPT)
    assert marker in prompt
    assert FORMATTING_RULES in prompt
    assert "language tag" in prompt


def test_additional_instructions_are_folded_in():
    prompt = PromptComposer.compose(TaskCategory.GENERAL, None, "Answer in French.")
    assert "Answer in French." in prompt


def test_vision_context_with_braces_is_embedded_unchanged():
    """Given code with braces in the context, formatting should not alter it."""
    text = "function f() { return {a: 1}; }"
    prompt = PromptComposer.compose(TaskCategory.CODING, VisionContext(text=text, source=VisionSource.MODEL))
    assert text in prompt


def test_compose_is_deterministic():
    context = VisionContext(text="screen", source=VisionSource.MODEL)
    assert PromptComposer.compose(TaskCategory.CODING, context) == PromptComposer.compose(TaskCategory.CODING, context)
