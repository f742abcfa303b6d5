import json
from typing import Any, List, Optional

import pytest

from coffee_recipes.ai.base import ChatTransport, FunctionCall
from coffee_recipes.config import OpenAIConfig, ServerConfig, Settings


class FakeTransport(ChatTransport):
    """Returns queued answers instead of calling a model."""

    def __init__(self) -> None:
        self._answers: List[Any] = []
        self.calls: List[dict] = []
        self.closed = False

    def answer(self, name: str, payload: Any) -> "FakeTransport":
        arguments = payload if isinstance(payload, str) else json.dumps(payload)
        self._answers.append(FunctionCall(name=name, arguments=arguments))
        return self

    def answer_nothing(self) -> "FakeTransport":
        self._answers.append(None)
        return self

    def fail(self, exc: BaseException) -> "FakeTransport":
        self._answers.append(exc)
        return self

    async def call_function(self, *, system_prompt, user_content, contract) -> Optional[FunctionCall]:
        self.calls.append(
            {"system_prompt": system_prompt, "user_content": user_content, "contract": contract}
        )
        if not self._answers:
            raise AssertionError("FakeTransport has no queued answer")
        item = self._answers.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        server=ServerConfig(port=8080),
        openai=OpenAIConfig(api_key="sk-test-key-0000"),
        mode="release",
    )
