"""Language-model client used by the chat proxy."""

import logging
from typing import Dict, List

from anthropic import AsyncAnthropic

from .config import Config

logger = logging.getLogger(__name__)


class AnthropicChatClient:
    """Thin wrapper over the Messages API returning the first text block."""

    def __init__(self, api_key: str, model: str = Config.MODEL, max_tokens: int = Config.MAX_TOKENS):
        self.model = model
        self.max_tokens = max_tokens
        self._client = AsyncAnthropic(api_key=api_key)

    async def complete(self, system_prompt: str, messages: List[Dict[str, str]]) -> str:
        response = await self._client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system_prompt,
            messages=[{"role": m["role"], "content": m["content"]} for m in messages],
        )
        if not response.content:
            return ""
        block = response.content[0]
        if block.type != "text":
            logger.info(f"First content block is {block.type}, returning empty text")
            return ""
        return block.text


__all__ = ["AnthropicChatClient"]
