"""Uniform JSON response bodies."""
from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse


def json_response(status_code: int, payload: Any) -> JSONResponse:
    return JSONResponse(payload, status_code=status_code)


def success_response(data: Any) -> JSONResponse:
    return json_response(200, data)


def error_response(status_code: int, message: str) -> JSONResponse:
    return json_response(status_code, {"error": message})


__all__ = ["error_response", "json_response", "success_response"]
