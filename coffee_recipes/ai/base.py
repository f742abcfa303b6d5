from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..contracts import StructuredContract


@dataclass(slots=True, frozen=True)
class FunctionCall:
    name: str
    arguments: str


class ChatTransport:
    """Abstract base class for chat-completion providers.

    Implementations issue a single deterministic completion that is forced
    to call ``contract.name``. They raise ``UpstreamError`` when the call
    fails and return ``None`` when the answer carries no function call."""

    async def call_function(
        self,
        *,
        system_prompt: str,
        user_content: str,
        contract: StructuredContract,
    ) -> Optional[FunctionCall]:
        raise NotImplementedError

    async def close(self) -> None:
        return None


__all__ = ["ChatTransport", "FunctionCall"]
