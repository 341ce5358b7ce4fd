"""
HTTP client utilities with connection pooling.
Provides reusable httpx clients for the vision and chat providers.
"""
import httpx
from config import Config


class HTTPClientManager:
    """Manages shared httpx clients with connection pooling.

    Clients hold only pooled connections; every request owns its own response
    stream, so concurrent flows never share mutable stream state.
    """

    _vision_client: httpx.AsyncClient | None = None
    _chat_client: httpx.AsyncClient | None = None

    @classmethod
    def get_vision_client(cls) -> httpx.AsyncClient:
        """
        Get or create a shared httpx client for vision requests.

        Features:
        - Connection pooling (reuses TCP connections)
        - Per-operation timeout equal to the vision ceiling

        Returns:
            Configured httpx.AsyncClient for vision requests
        """
        if cls._vision_client is None:
            limits = httpx.Limits(
                max_connections=Config.MAX_CONCURRENT_REQUESTS,
                max_keepalive_connections=5,
                keepalive_expiry=30.0
            )

            cls._vision_client = httpx.AsyncClient(
                timeout=Config.VISION_TIMEOUT,
                follow_redirects=True,
                max_redirects=Config.MAX_REDIRECTS,
                limits=limits,
                http2=True
            )

        return cls._vision_client

    @classmethod
    def get_chat_client(cls) -> httpx.AsyncClient:
        """
        Get or create a shared httpx client for chat completions.

        Streams have no read timeout; cancellation is driven by the caller
        closing the stream.

        Returns:
            Configured httpx.AsyncClient for chat completions
        """
        if cls._chat_client is None:
            limits = httpx.Limits(
                max_connections=Config.MAX_CONCURRENT_REQUESTS * 2,
                max_keepalive_connections=10,
                keepalive_expiry=60.0
            )

            cls._chat_client = httpx.AsyncClient(
                timeout=httpx.Timeout(None, connect=Config.CHAT_CONNECT_TIMEOUT),
                follow_redirects=True,
                max_redirects=Config.MAX_REDIRECTS,
                limits=limits,
                http2=True
            )

        return cls._chat_client

    @classmethod
    async def close_all(cls) -> None:
        """
        Close all managed clients and clean up connections.
        """
        if cls._vision_client is not None:
            await cls._vision_client.aclose()
            cls._vision_client = None

        if cls._chat_client is not None:
            await cls._chat_client.aclose()
            cls._chat_client = None
