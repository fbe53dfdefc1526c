"""
Configuration module for Pastebox.
Loads environment variables and provides config objects.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings:
    """Application settings loaded from environment variables."""

    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    DEBUG: bool = _flag("DEBUG", "False")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    # Empty means the base URL is derived from the incoming request
    APP_DOMAIN: str = os.getenv("APP_DOMAIN", "")
    TEST_MODE: bool = _flag("TEST_MODE", "0")
    PASTE_ID_BYTES: int = int(os.getenv("PASTE_ID_BYTES", "12"))


settings = Settings()
