import io

import pytest
from PIL import Image

from config import Config


@pytest.fixture
def anyio_backend():
    """The services are built on asyncio; run anyio-marked tests on it only."""
    return "asyncio"

@pytest.fixture(autouse=True)
def provider_config(monkeypatch):
    """Configured providers with no demo delay; tests opt out of keys explicitly."""
    monkeypatch.setattr(Config, "CHAT_API_KEY", "test-chat-key")
    monkeypatch.setattr(Config, "VISION_API_KEY", "test-vision-key")
    monkeypatch.setattr(Config, "DEMO_RESPONSE_DELAY", 0)
    monkeypatch.setattr(Config, "VISION_TIMEOUT", 2.0)

@pytest.fixture
def no_chat_key(monkeypatch):
    monkeypatch.setattr(Config, "CHAT_API_KEY", "")

@pytest.fixture
def no_vision_key(monkeypatch):
    monkeypatch.setattr(Config, "VISION_API_KEY", "")

@pytest.fixture
def png_bytes():
    """A small real PNG."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(255, 255, 255)).save(buffer, format="PNG")
    return buffer.getvalue()

@pytest.fixture
def captured_image(png_bytes):
    from models.chat_models import CapturedImage
    return CapturedImage(payload=png_bytes, mime_type="image/png")

@pytest.fixture
def conversation():
    """Standard conversation ending in a coding question."""
    from models.api_models import ConversationMessage
    return [
        ConversationMessage(role="user", content="hi"),
        ConversationMessage(role="assistant", content="Hello! How can I help?"),
        ConversationMessage(role="user", content="Can you fix this bug in my loop?"),
    ]

@pytest.fixture
def chat_stream_builder():
    from tests.fixtures.mock_clients import ChatStreamBuilder
    return ChatStreamBuilder()

@pytest.fixture
def vision_client_builder():
    from tests.fixtures.mock_clients import VisionClientBuilder
    return VisionClientBuilder()

@pytest.fixture
def install_chat_client(monkeypatch):
    """Route chat requests through a builder's fake transport."""
    def _install(builder):
        client = builder.build()
        monkeypatch.setattr("utils.http_client.HTTPClientManager.get_chat_client", lambda: client)
        return builder
    return _install

@pytest.fixture
def install_vision_client(monkeypatch):
    """Route vision requests through a builder's fake transport."""
    def _install(builder):
        client = builder.build()
        monkeypatch.setattr("utils.http_client.HTTPClientManager.get_vision_client", lambda: client)
        return builder
    return _install

@pytest.fixture
def auth_headers():
    """Authentication headers for API requests."""
    return {"X-API-Key": "test-key"}

@pytest.fixture
def configured_app(monkeypatch):
    """Pre-configured app with the access guard and every router."""
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from auth import APIKeyMiddleware
    from routes import assist, chat, chat_stream, status_route, vision

    monkeypatch.setattr(APIKeyMiddleware, "API_KEY", "test-key")

    app = FastAPI()
    app.add_middleware(APIKeyMiddleware)
    app.include_router(status_route.router)
    app.include_router(vision.router)
    app.include_router(chat.router)
    app.include_router(chat_stream.router)
    app.include_router(assist.router)

    with TestClient(app) as client:
        yield client
