from __future__ import annotations

import logging
from time import perf_counter
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..log import ACCESS_LOGGER

log = logging.getLogger(__name__)
# Switched on and off by configure_logging through logging.access_log
access_log = logging.getLogger(ACCESS_LOGGER)


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable[[Request], Response]) -> Response:
        start = perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.exception("%s %s failed", request.method, request.url.path)
            raise
        latency_ms = int((perf_counter() - start) * 1000)
        client = request.client.host if request.client else "-"
        access_log.info(
            "%s %s %s -> %d (%d ms)",
            client,
            request.method,
            request.url.path,
            response.status_code,
            latency_ms,
        )
        return response


__all__ = ["AccessLogMiddleware"]
