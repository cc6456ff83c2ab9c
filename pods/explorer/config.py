"""Explorer pod configuration."""

import os

from dotenv import load_dotenv

from fxcore.config import get_settings

load_dotenv()


class Config:
    """Configuration for the explorer pod."""

    # Service
    SERVICE_NAME = "explorer"
    SERVICE_VERSION = "0.1.0"
    SERVICE_PORT = int(os.getenv("EXPLORER_PORT", 8010))

    # Synthesis
    SAMPLE_RATE = get_settings().FX_SAMPLE_RATE
    NOTE_DURATION = float(os.getenv("EXPLORER_NOTE_DURATION", 3.0))
    MAX_NOTE_DURATION = float(os.getenv("EXPLORER_MAX_NOTE_DURATION", 6.0))
    STRUM_SECONDS = float(os.getenv("EXPLORER_STRUM_SECONDS", 0.03))


__all__ = ["Config"]
