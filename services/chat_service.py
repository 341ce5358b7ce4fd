"""
Chat service containing the streaming chat orchestrator.
Handles intent classification, prompt assembly, the chat-completion request
and incremental decoding of the provider's event stream.
"""
import asyncio
import json
from contextlib import aclosing
from typing import AsyncIterator, Callable, Optional, Sequence, Union

import httpx

from config import Config
from models.api_models import ConversationMessage
from models.chat_models import ChatCompletionRequest, ChatTurn, StreamState, VisionContext
from services.intent_classifier import IntentClassifier
from services.prompt_composer import PromptComposer
from utils.constants import (
    DEMO_CODE_RESPONSE,
    DEMO_GENERAL_RESPONSE,
    DEMO_LABEL,
    DEMO_SCREEN_RESPONSE,
    DEMO_WRITING_RESPONSE,
    NO_RESPONSE_TEXT
)
from utils.exceptions import ChatProviderError, ChatRateLimitError, ChatStreamInterrupted
from utils.http_client import HTTPClientManager
from utils.logger import app_logger
from utils.sse_decoder import SSEFrameDecoder

VisionInput = Union[VisionContext, str, None]


class StreamingChatOrchestrator:
    """Orchestrates one chat turn per call. Holds no state between calls."""

    @staticmethod
    def _coerce_vision_context(vision_context: VisionInput) -> Optional[VisionContext]:
        if isinstance(vision_context, str):
            return VisionContext.from_text(vision_context)
        return vision_context

    @staticmethod
    def _split_system_message(conversation: Sequence[ConversationMessage]) -> tuple[Optional[str], list]:
        """Separate a leading caller system message from the history it precedes.

        Raises:
            ValueError: a system message appears anywhere but first
        """
        if any(message.role == "system" for message in conversation[1:]):
            raise ValueError("a system message may only appear as the first message")
        if conversation and conversation[0].role == "system":
            return conversation[0].text, list(conversation[1:])
        return None, list(conversation)

    @staticmethod
    def prepare(
        conversation: Sequence[ConversationMessage],
        vision_context: VisionInput = None,
        stream: bool = True
    ) -> ChatCompletionRequest:
        """Classify intent, compose the system prompt and build the outgoing request.

        Raises:
            ValueError: a system message appears anywhere but first
        """
        vision_context = StreamingChatOrchestrator._coerce_vision_context(vision_context)
        has_vision_context = vision_context is not None and vision_context.is_usable

        category = IntentClassifier.classify(conversation, has_vision_context)
        instructions, history = StreamingChatOrchestrator._split_system_message(conversation)
        system_prompt = PromptComposer.compose(category, vision_context, instructions)

        app_logger.info(f"Chat request prepared: category={category}, vision_context={has_vision_context}, messages={len(history)}")

        return ChatCompletionRequest(
            model=Config.CHAT_MODEL,
            system_prompt=system_prompt,
            messages=tuple(message.as_dict() for message in history),
            category=category,
            stream=stream,
            temperature=Config.CHAT_TEMPERATURE,
            top_p=Config.CHAT_TOP_P,
            max_tokens=Config.CHAT_MAX_TOKENS,
            has_vision_context=has_vision_context
        )

    @staticmethod
    def start_turn(
        conversation: Sequence[ConversationMessage],
        vision_context: VisionInput = None,
        stream: bool = True
    ) -> ChatTurn:
        """Create the per-call state for one chat turn."""
        request = StreamingChatOrchestrator.prepare(conversation, vision_context, stream)
        return ChatTurn(
            request=request,
            demo=not Config.has_chat_credentials(),
            user_text=IntentClassifier.last_user_text(conversation)
        )

    @staticmethod
    def simulate_response(user_text: str, has_screenshot: bool = False) -> str:
        """Labeled demo response used when no chat API key is configured."""
        lower = user_text.lower()

        if any(kw in lower for kw in ("code", "error", "bug")):
            body = DEMO_CODE_RESPONSE
        elif any(kw in lower for kw in ("write", "email", "document")):
            body = DEMO_WRITING_RESPONSE
        elif "screenshot" in lower or has_screenshot:
            body = DEMO_SCREEN_RESPONSE
        else:
            body = DEMO_GENERAL_RESPONSE

        return DEMO_LABEL + body

    @staticmethod
    async def _demo_text(turn: ChatTurn) -> str:
        app_logger.info("No chat API key configured, returning simulated response")
        await asyncio.sleep(Config.DEMO_RESPONSE_DELAY)
        return StreamingChatOrchestrator.simulate_response(turn.user_text, turn.request.has_vision_context)

    @staticmethod
    def _headers() -> dict:
        return {
            "Authorization": f"Bearer {Config.CHAT_API_KEY}",
            "Content-Type": "application/json",
            "User-Agent": Config.USER_AGENT,
        }

    @staticmethod
    def _failure(turn: ChatTurn, message: str, status_code: Optional[int] = None) -> ChatProviderError:
        """Build the error for a failed turn and mark the turn FAILED."""
        turn.state = StreamState.FAILED
        turn.error = message
        if turn.fragment_count:
            app_logger.error(f"Chat stream failed after {turn.fragment_count} fragments: {message}")
            return ChatStreamInterrupted(message, partial_text=turn.text)
        app_logger.error(f"Chat request failed: {message}")
        if status_code == 429:
            return ChatRateLimitError(message, status_code=status_code)
        return ChatProviderError(message, status_code=status_code)

    @staticmethod
    async def stream(turn: ChatTurn) -> AsyncIterator[str]:
        """Stream content fragments for a turn in arrival order.

        Closing the generator releases the connection and marks the turn FAILED.

        Yields:
            Content fragments as they arrive

        Raises:
            ChatRateLimitError: 429 before any fragment
            ChatProviderError: network error or non-success status before any fragment
            ChatStreamInterrupted: failure after fragments were delivered
        """
        if turn.demo:
            turn.state = StreamState.REQUESTING
            text = await StreamingChatOrchestrator._demo_text(turn)
            turn.state = StreamState.STREAMING
            turn.append(text)
            yield text
            turn.state = StreamState.COMPLETED
            return

        client = HTTPClientManager.get_chat_client()
        decoder = SSEFrameDecoder()
        done = False
        finished = False

        turn.state = StreamState.REQUESTING
        app_logger.info(f"Calling {Config.CHAT_MODEL} (streaming, category={turn.category})")

        try:
            async with client.stream(
                "POST",
                Config.CHAT_API_URL,
                json=turn.request.to_payload(),
                headers=StreamingChatOrchestrator._headers()
            ) as response:
                if response.status_code != 200:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise StreamingChatOrchestrator._failure(
                        turn,
                        f"Chat API error: {response.status_code} {body[:200]}",
                        status_code=response.status_code
                    )

                turn.state = StreamState.STREAMING
                async for chunk in response.aiter_text():
                    for frame in decoder.feed(chunk):
                        if frame.done:
                            done = True
                            break
                        if frame.content:
                            turn.append(frame.content)
                            yield frame.content
                        if frame.finish_reason:
                            finished = True
                    if done:
                        break

                if not done:
                    for frame in decoder.flush():
                        if frame.done:
                            done = True
                            continue
                        if frame.content:
                            turn.append(frame.content)
                            yield frame.content
                        if frame.finish_reason:
                            finished = True

        except httpx.HTTPError as e:
            raise StreamingChatOrchestrator._failure(turn, f"Chat network error: {e}") from e
        except (GeneratorExit, asyncio.CancelledError):
            turn.state = StreamState.FAILED
            turn.error = "cancelled"
            app_logger.info(f"Chat stream cancelled by caller after {turn.fragment_count} fragments")
            raise

        if decoder.skipped:
            app_logger.warning(f"Skipped {decoder.skipped} malformed stream frames")

        if not (done or finished):
            raise StreamingChatOrchestrator._failure(turn, "Connection closed before the stream completed")

        turn.state = StreamState.COMPLETED
        app_logger.info(f"Chat stream completed: {turn.fragment_count} fragments, {len(turn.text)} characters")

    @staticmethod
    async def complete(turn: ChatTurn) -> str:
        """Run a turn without streaming and return the full body's content."""
        if turn.demo:
            turn.state = StreamState.REQUESTING
            turn.text = await StreamingChatOrchestrator._demo_text(turn)
            turn.state = StreamState.COMPLETED
            return turn.text

        client = HTTPClientManager.get_chat_client()
        turn.state = StreamState.REQUESTING
        app_logger.info(f"Calling {Config.CHAT_MODEL} (non-streaming, category={turn.category})")

        try:
            response = await client.post(
                Config.CHAT_API_URL,
                json=turn.request.to_payload(),
                headers=StreamingChatOrchestrator._headers()
            )
        except httpx.HTTPError as e:
            raise StreamingChatOrchestrator._failure(turn, f"Chat network error: {e}") from e

        if response.status_code != 200:
            raise StreamingChatOrchestrator._failure(
                turn,
                f"Chat API error: {response.status_code} {response.text[:200]}",
                status_code=response.status_code
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"].get("content")
        except (json.JSONDecodeError, KeyError, IndexError, TypeError, AttributeError) as e:
            raise StreamingChatOrchestrator._failure(turn, f"Malformed chat response: {e}") from e

        turn.text = content or NO_RESPONSE_TEXT
        turn.state = StreamState.COMPLETED
        return turn.text

    @staticmethod
    async def send(
        conversation: Sequence[ConversationMessage],
        on_delta: Optional[Callable[[str], None]] = None,
        vision_context: VisionInput = None
    ) -> str:
        """
        Send a conversation and return the assistant's full reply.

        Args:
            conversation: Caller-visible history, newest user message last
            on_delta: Called synchronously with each fragment; streaming is used only when given
            vision_context: Screen context for this request only

        Returns:
            Concatenation of every delivered fragment (or the non-streaming body)
        """
        turn = StreamingChatOrchestrator.start_turn(conversation, vision_context, stream=on_delta is not None)

        if on_delta is None:
            return await StreamingChatOrchestrator.complete(turn)

        async with aclosing(StreamingChatOrchestrator.stream(turn)) as fragments:
            async for fragment in fragments:
                on_delta(fragment)

        return turn.text
