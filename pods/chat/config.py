"""Chat pod configuration."""

import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Configuration for the chat assistant proxy."""

    # Service
    SERVICE_NAME = "chat"
    SERVICE_VERSION = "0.1.0"
    SERVICE_PORT = int(os.getenv("CHAT_PORT", 8011))

    # Upstream model
    MODEL = os.getenv("CHAT_MODEL", "claude-haiku-4-5-20251001")
    MAX_TOKENS = int(os.getenv("CHAT_MAX_TOKENS", 600))

    # Limits
    MAX_BODY_BYTES = int(os.getenv("CHAT_MAX_BODY_BYTES", 10_240))
    MAX_MESSAGES = int(os.getenv("CHAT_MAX_MESSAGES", 20))
    RATE_LIMIT_MAX = int(os.getenv("CHAT_RATE_LIMIT_MAX", 20))
    RATE_LIMIT_WINDOW = float(os.getenv("CHAT_RATE_LIMIT_WINDOW", 60.0))  # seconds


def api_key():
    """Upstream credential, read per request so rotation needs no restart."""
    return os.getenv("ANTHROPIC_API_KEY") or None


__all__ = ["Config", "api_key"]
