"""
Configuration module for the Flick Bridge application.
Handles environment variables and application settings.
"""
import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration class."""

    # API Keys
    CHAT_API_KEY: str = os.getenv("CEREBRAS_API_KEY", "")
    VISION_API_KEY: str = os.getenv("OPENROUTER_API_KEY", "")

    # API Configuration
    CHAT_API_URL: str = os.getenv("CHAT_API_URL", "https://api.cerebras.ai/v1/chat/completions")
    VISION_API_URL: str = os.getenv("VISION_API_URL", "https://openrouter.ai/api/v1/chat/completions")
    CHAT_MODEL: str = os.getenv("CHAT_MODEL", "zai-glm-4.7")
    VISION_MODEL: str = os.getenv("VISION_MODEL", "meta-llama/llama-3.2-11b-vision-instruct:free")

    # Application Settings
    APP_TITLE: str = "Flick Bridge"
    APP_REFERER: str = "https://flickai.app"
    USER_AGENT: str = "FlickAI-Desktop/1.0"
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Browser origins allowed to call the bridge (comma separated, none by default)
    ALLOWED_ORIGINS: list[str] = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "").split(",") if origin.strip()]

    # Timeouts (in seconds)
    VISION_TIMEOUT: float = float(os.getenv("VISION_TIMEOUT", "15"))
    CHAT_CONNECT_TIMEOUT: float = 10.0
    DEMO_RESPONSE_DELAY: float = 0.8

    # Connection pooling
    MAX_CONCURRENT_REQUESTS: int = 10
    MAX_REDIRECTS: int = 3

    # Sampling
    VISION_MAX_TOKENS: int = 500
    VISION_TEMPERATURE: float = 0.3
    CHAT_TEMPERATURE: float = 1.0
    CHAT_TOP_P: float = 0.95
    CHAT_MAX_TOKENS: int = 2048

    # Local OCR / capture
    OCR_LANGUAGE: str = os.getenv("OCR_LANGUAGE", "eng")
    TESSERACT_CMD: str = os.getenv("TESSERACT_CMD", "")
    CAPTURE_MAX_SIZE: tuple[int, int] = (1920, 1080)

    @classmethod
    def has_chat_credentials(cls) -> bool:
        """Chat falls back to demo responses without a key."""
        return bool(cls.CHAT_API_KEY)

    @classmethod
    def has_vision_credentials(cls) -> bool:
        """Vision skips straight to OCR without a key."""
        return bool(cls.VISION_API_KEY)

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and print warnings for missing API keys."""
        if not cls.CHAT_API_KEY:
            print("   WARNING: CEREBRAS_API_KEY not found in .env file")
            print("   Chat will return simulated demo responses. Get a key from: https://cloud.cerebras.ai/")

        if not cls.VISION_API_KEY:
            print("   WARNING: OPENROUTER_API_KEY not found in .env file")
            print("   Screen analysis will use local OCR only. Get a key from: https://openrouter.ai/keys")

Config.validate()
