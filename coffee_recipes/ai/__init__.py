from __future__ import annotations

from ..config import OpenAIConfig, TimeoutConfig
from .base import ChatTransport, FunctionCall
from .openai import OpenAITransport


def create_transport(config: OpenAIConfig, timeouts: TimeoutConfig) -> ChatTransport:
    return OpenAITransport(config, timeouts)


__all__ = ["ChatTransport", "FunctionCall", "OpenAITransport", "create_transport"]
