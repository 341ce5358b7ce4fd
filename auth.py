"""
Access guard for the local bridge.
The bridge can read the screen, so it only answers trusted callers.
"""
import os
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from config import Config
from utils.logger import app_logger


class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Checks X-API-Key header against configured API_KEY.
    Without a configured key, only loopback clients are accepted, and a
    browser page on the same machine must come from Config.ALLOWED_ORIGINS.
    """

    EXCLUDED_PATHS = {"/", "/docs", "/openapi.json", "/redoc"}
    LOOPBACK_HOSTS = {"127.0.0.1", "::1", "localhost"}
    API_KEY: str = os.getenv("API_KEY", "")

    async def dispatch(self, request: Request, call_next):
        """
        Process each request and verify the caller.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response from next handler or error response
        """
        if request.url.path in self.EXCLUDED_PATHS:
            return await call_next(request)

        host = request.client.host if request.client else "unknown"

        if not self.API_KEY:
            origin = request.headers.get("Origin")
            if origin and origin not in Config.ALLOWED_ORIGINS:
                app_logger.warning(f"Rejected request from origin {origin} - not in ALLOWED_ORIGINS")
                return JSONResponse(
                    status_code=status.HTTP_403_FORBIDDEN,
                    content={
                        "detail": "Origin not allowed. Add it to ALLOWED_ORIGINS or configure API_KEY.",
                        "error": "forbidden"
                    },
                )

            if host in self.LOOPBACK_HOSTS:
                return await call_next(request)

            app_logger.warning(f"Rejected non-local request from {host} - API_KEY not set")
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={
                    "detail": "Remote access requires API_KEY to be configured on the bridge.",
                    "error": "forbidden"
                },
            )

        api_key = request.headers.get("X-API-Key")

        if not api_key:
            app_logger.warning(f"Unauthorized request from {host} - Missing API key")
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={
                    "detail": "Missing API key. Include 'X-API-Key' header in your request.",
                    "error": "unauthorized"
                },
                headers={"WWW-Authenticate": "ApiKey"},
            )

        if api_key != self.API_KEY:
            app_logger.warning(f"Forbidden request from {host} - Invalid API key")
            return JSONResponse(
                status_code=status.HTTP_403_FORBIDDEN,
                content={
                    "detail": "Invalid API key",
                    "error": "forbidden"
                },
            )

        return await call_next(request)
