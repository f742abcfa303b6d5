from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from openai import AsyncOpenAI, OpenAIError

from ..config import OpenAIConfig, TimeoutConfig
from ..contracts import StructuredContract
from ..errors import UpstreamError
from .base import ChatTransport, FunctionCall

log = logging.getLogger(__name__)


class OpenAITransport(ChatTransport):
    def __init__(self, config: OpenAIConfig, timeouts: TimeoutConfig, client: Any = None):
        if not config.api_key:
            raise ValueError("OpenAI transport requires api_key")
        self.model = config.model
        if client is None:
            client = AsyncOpenAI(
                api_key=config.api_key,
                base_url=config.base_url,
                timeout=httpx.Timeout(timeouts.read_s, connect=timeouts.connect_s),
                # Failures surface to the caller immediately
                max_retries=0,
            )
        self._client = client

    async def call_function(
        self,
        *,
        system_prompt: str,
        user_content: str,
        contract: StructuredContract,
    ) -> Optional[FunctionCall]:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_content},
        ]
        log.debug("Calling %s with forced function %s", self.model, contract.name)
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=messages,
                tools=[contract.tool()],
                tool_choice={"type": "function", "function": {"name": contract.name}},
                temperature=0,
            )
        except OpenAIError as exc:
            raise UpstreamError(f"failed to call OpenAI API: {exc}") from exc

        if not response.choices:
            return None
        tool_calls = response.choices[0].message.tool_calls
        if not tool_calls:
            return None
        first = tool_calls[0]
        return FunctionCall(name=first.function.name, arguments=first.function.arguments or "")

    async def close(self) -> None:
        await self._client.close()


__all__ = ["OpenAITransport"]
