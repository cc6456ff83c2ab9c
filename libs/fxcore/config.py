"""Configuration loading for the chord explorer services.

Reads environment variables into a typed settings object using Pydantic v2.

Env variables (see .env.example):
- FX_LOG_LEVEL (default: INFO)
- FX_ENV (default: development)
- FX_OTEL_ENDPOINT (optional)
- FX_SAMPLE_RATE (default: 44100)
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, Field


class Settings(BaseModel):
    FX_LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    FX_ENV: str = Field(default="development", description="Environment name")
    FX_OTEL_ENDPOINT: Optional[str] = Field(
        default=None, description="OTLP HTTP endpoint (e.g., http://localhost:4318)"
    )
    FX_SAMPLE_RATE: int = Field(default=44_100, gt=0, description="Synthesis sample rate in Hz")

    class Config:
        extra = "ignore"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment and memoize.

    Raises:
        pydantic.ValidationError: if a variable cannot be coerced.
    """

    env = {
        "FX_LOG_LEVEL": os.getenv("FX_LOG_LEVEL", "INFO"),
        "FX_ENV": os.getenv("FX_ENV", "development"),
        "FX_OTEL_ENDPOINT": os.getenv("FX_OTEL_ENDPOINT") or None,
        "FX_SAMPLE_RATE": os.getenv("FX_SAMPLE_RATE", "44100"),
    }
    return Settings.model_validate(env)


__all__ = ["Settings", "get_settings"]
