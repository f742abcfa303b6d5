"""Runtime wiring for the service."""
from __future__ import annotations

import logging
from typing import Optional

from .ai import ChatTransport, create_transport
from .config import Settings
from .gateway import ModelGateway
from .log import mask_api_key
from .repository import RecipeRepository, create_repository

log = logging.getLogger(__name__)


class RecipeRuntime:
    """Holds the collaborators built once from the startup settings."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[ChatTransport] = None,
        repository: Optional[RecipeRepository] = None,
    ):
        self.settings = settings
        if transport is None:
            log.info(
                "Initializing OpenAI client (model %s, key %s)",
                settings.openai.model,
                mask_api_key(settings.openai.api_key),
            )
            transport = create_transport(settings.openai, settings.timeouts)
        self._transport = transport
        self._gateway = ModelGateway(transport)
        self._repository = repository if repository is not None else create_repository(
            settings.storage.backend, settings.storage.max_entries
        )
        log.info("Recipe storage backend: %s", settings.storage.backend)

    def gateway(self) -> ModelGateway:
        return self._gateway

    def repository(self) -> RecipeRepository:
        return self._repository

    async def shutdown(self) -> None:
        log.info("Closing model transport")
        await self._transport.close()


__all__ = ["RecipeRuntime"]
