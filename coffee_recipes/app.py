"""ASGI application factory."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from .ai import ChatTransport
from .api import recipes as recipes_router
from .config import Settings
from .middleware.access import AccessLogMiddleware
from .repository import RecipeRepository
from .responses import error_response
from .runtime import RecipeRuntime

log = logging.getLogger(__name__)


def create_app(
    settings: Settings,
    transport: Optional[ChatTransport] = None,
    repository: Optional[RecipeRepository] = None,
) -> FastAPI:
    log.info("Running in %s mode", "release" if settings.is_release else "debug")
    runtime = RecipeRuntime(settings, transport=transport, repository=repository)

    app = FastAPI(
        title="coffee-recipes",
        version="0.1.0",
        debug=not settings.is_release,
        docs_url=None,
        redoc_url=None,
        openapi_url="/openapi.json",
    )

    app.add_middleware(AccessLogMiddleware)
    app.include_router(recipes_router.router)

    app.state.runtime = runtime

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await runtime.shutdown()

    return app


__all__ = ["create_app"]
