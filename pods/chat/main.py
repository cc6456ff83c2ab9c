"""Chat Assistant Pod: FastAPI proxy to a hosted language model.

Validates and rate-limits browser requests before forwarding them upstream
with the server-side credential. Errors are returned as ``{"error": msg}``.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from opentelemetry import trace
from pydantic import BaseModel, Field, field_validator
from starlette.exceptions import HTTPException as StarletteHTTPException

from fxcore.config import get_settings
from fxcore.logging import setup_logging, setup_tracing
from fxtheory.tuning import Fretting

from .client import AnthropicChatClient
from .config import Config, api_key
from .context import build_system_prompt
from .rate_limit import SlidingWindowRateLimiter

logger = logging.getLogger(__name__)
tracer = trace.get_tracer("fx.chat")

SERVICE_NAME = Config.SERVICE_NAME
SERVICE_VERSION = Config.SERVICE_VERSION
ROLES = ("user", "assistant")


class ContextRequest(BaseModel):
    frets: List[Union[int, str, None]] = Field(..., min_length=6, max_length=6)

    @field_validator("frets")
    @classmethod
    def validate_frets(cls, value):
        return Fretting.of(value).to_list()


def get_chat_client() -> Optional[AnthropicChatClient]:
    """Upstream client, or None when no credential is configured."""
    key = api_key()
    if not key:
        return None
    return AnthropicChatClient(api_key=key)


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def validate_payload(payload) -> tuple:
    """Return (messages, system_prompt) or raise HTTPException(400)."""
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")

    messages = payload.get("messages")
    if not isinstance(messages, list) or not messages:
        raise HTTPException(status_code=400, detail="messages must be a non-empty array")
    if len(messages) > Config.MAX_MESSAGES:
        raise HTTPException(status_code=400, detail=f"Too many messages (max {Config.MAX_MESSAGES})")
    for m in messages:
        if not isinstance(m, dict) or m.get("role") not in ROLES or not isinstance(m.get("content"), str):
            raise HTTPException(
                status_code=400,
                detail="each message needs a role of user or assistant and string content",
            )

    system_prompt = payload.get("systemPrompt")
    if not isinstance(system_prompt, str) or not system_prompt:
        raise HTTPException(status_code=400, detail="systemPrompt must be a non-empty string")
    return messages, system_prompt


router = APIRouter()


@router.get("/")
async def root():
    """API info endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "description": "Chat assistant proxy for the chord explorer",
        "endpoints": {
            "GET /": "This info",
            "POST /health": "Health check",
            "POST /api/chat": "Forward a conversation to the assistant",
            "POST /api/chat/context": "Build a system prompt for a fretting",
        },
    }


@router.post("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok", "service": SERVICE_NAME, "version": SERVICE_VERSION}


@router.post("/api/chat")
async def chat(request: Request, client: Optional[AnthropicChatClient] = Depends(get_chat_client)):
    """Forward ``{messages, systemPrompt}`` upstream and return ``{content}``."""
    content_type = request.headers.get("content-type", "")
    if "application/json" not in content_type:
        raise HTTPException(status_code=400, detail="Content-Type must be application/json")

    body = await request.body()
    if len(body) > Config.MAX_BODY_BYTES:
        raise HTTPException(status_code=413, detail="Request body too large")

    ip = client_ip(request)
    limiter: SlidingWindowRateLimiter = request.app.state.rate_limiter
    if limiter.is_limited(ip):
        logger.warning(f"Rate limited {ip}")
        raise HTTPException(status_code=429, detail="Too many requests. Please wait a minute.")

    if client is None:
        logger.error("ANTHROPIC_API_KEY is not set")
        raise HTTPException(status_code=500, detail="API key not configured")

    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError) as exc:
        raise HTTPException(status_code=400, detail="Request body must be valid JSON") from exc
    messages, system_prompt = validate_payload(payload)

    with tracer.start_as_current_span("chat.complete") as span:
        span.set_attribute("chat.messages", len(messages))
        try:
            text = await client.complete(system_prompt, messages)
        except Exception as exc:
            logger.error(f"Upstream error: {exc}")
            raise HTTPException(status_code=502, detail=str(exc) or "Unknown error") from exc

    return {"content": text}


@router.post("/api/chat/context")
async def chat_context(request: ContextRequest):
    """System prompt describing the given fretting."""
    return {"systemPrompt": build_system_prompt(Fretting.of(request.frets))}


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown hooks for logging/tracing."""
    try:
        setup_logging()
    except Exception as exc:  # pragma: no cover - logging fallback
        logging.basicConfig(level=logging.INFO)
        logger.warning(f"Logging fallback (bad env?): {exc}")

    try:
        setup_tracing(service_name=f"{SERVICE_NAME}-pod")
    except Exception as exc:  # pragma: no cover - optional tracing
        logger.info(f"Tracing not configured: {exc}")
    logger.info(f"{SERVICE_NAME} pod starting (v{SERVICE_VERSION}, env={get_settings().FX_ENV})...")
    yield
    logger.info(f"{SERVICE_NAME} pod shutting down...")


def create_app(rate_limiter: Optional[SlidingWindowRateLimiter] = None) -> FastAPI:
    """Build the chat app with its own rate limiter."""
    app = FastAPI(
        title="Chat Assistant Pod",
        description="Rate-limited proxy to the chord explorer assistant",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )
    if rate_limiter is None:
        rate_limiter = SlidingWindowRateLimiter(
            limit=Config.RATE_LIMIT_MAX,
            window=Config.RATE_LIMIT_WINDOW,
        )
    app.state.rate_limiter = rate_limiter
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(
        "pods.chat.main:app",
        host="0.0.0.0",
        port=Config.SERVICE_PORT,
        log_level="info",
    )
