import json

import httpx
import pytest

from config import Config
from services.vision_service import VisionDescriber
from utils.constants import VISION_ANALYSIS_PROMPT
from utils.exceptions import VisionProviderError, VisionRateLimitError, VisionTimeoutError
from tests.fixtures.responses import EMPTY_VISION_RESPONSE, MALFORMED_VISION_RESPONSE, SCREEN_DESCRIPTION


@pytest.mark.anyio
async def test_describe_returns_description(vision_client_builder, install_vision_client, captured_image):
    """Given a successful response, describe should return the description."""
    builder = install_vision_client(vision_client_builder.with_description(SCREEN_DESCRIPTION))

    description = await VisionDescriber.describe(captured_image)

    assert description == SCREEN_DESCRIPTION
    assert len(builder.requests) == 1


@pytest.mark.anyio
async def test_describe_sends_single_multimodal_message(vision_client_builder, install_vision_client, captured_image):
    """The request should carry the instruction, the image, a capped length and a low temperature."""
    builder = install_vision_client(vision_client_builder)

    await VisionDescriber.describe(captured_image)

    request = builder.requests[0]
    body = json.loads(request.content)
    assert request.headers["Authorization"] == "Bearer test-vision-key"
    assert body["model"] == Config.VISION_MODEL
    assert body["max_tokens"] == Config.VISION_MAX_TOKENS
    assert body["temperature"] == Config.VISION_TEMPERATURE
    assert len(body["messages"]) == 1
    text_part, image_part = body["messages"][0]["content"]
    assert text_part == {"type": "text", "text": VISION_ANALYSIS_PROMPT}
    assert image_part["image_url"]["url"] == captured_image.data_url


@pytest.mark.anyio
async def test_describe_raises_rate_limit_on_429(vision_client_builder, install_vision_client, captured_image):
    install_vision_client(vision_client_builder.with_status(429))
    with pytest.raises(VisionRateLimitError) as exc_info:
        await VisionDescriber.describe(captured_image)
    assert exc_info.value.status_code == 429


@pytest.mark.parametrize("status_code", [400, 401, 500, 503])
@pytest.mark.anyio
async def test_describe_raises_provider_error_on_bad_status(status_code, vision_client_builder, install_vision_client, captured_image):
    install_vision_client(vision_client_builder.with_status(status_code))
    with pytest.raises(VisionProviderError) as exc_info:
        await VisionDescriber.describe(captured_image)
    assert not isinstance(exc_info.value, VisionRateLimitError)
    assert exc_info.value.status_code == status_code


@pytest.mark.anyio
async def test_describe_times_out(vision_client_builder, install_vision_client, captured_image, monkeypatch):
    """Given a provider slower than the ceiling, describe should raise VisionTimeoutError."""
    monkeypatch.setattr(Config, "VISION_TIMEOUT", 0.05)
    install_vision_client(vision_client_builder.with_delay(1.0))

    with pytest.raises(VisionTimeoutError):
        await VisionDescriber.describe(captured_image)


@pytest.mark.anyio
async def test_describe_wraps_network_errors(vision_client_builder, install_vision_client, captured_image):
    install_vision_client(vision_client_builder.with_network_error(httpx.ConnectError("refused")))
    with pytest.raises(VisionProviderError):
        await VisionDescriber.describe(captured_image)


@pytest.mark.anyio
async def test_describe_rejects_malformed_body(vision_client_builder, install_vision_client, captured_image):
    install_vision_client(vision_client_builder.with_raw_json(MALFORMED_VISION_RESPONSE))
    with pytest.raises(VisionProviderError):
        await VisionDescriber.describe(captured_image)


@pytest.mark.anyio
async def test_describe_returns_none_for_empty_description(vision_client_builder, install_vision_client, captured_image):
    """Given an empty description, describe should signal 'no description' rather than failure."""
    install_vision_client(vision_client_builder.with_raw_json(EMPTY_VISION_RESPONSE))
    assert await VisionDescriber.describe(captured_image) is None


def test_is_configured_follows_credentials(no_vision_key):
    assert VisionDescriber.is_configured() is False
