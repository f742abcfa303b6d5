"""Recipe endpoints."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Type, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel, ValidationError

from ..errors import InvalidRequest, RecipeServiceError
from ..models import PossibleCoffeeRequest, RecipeRequest
from ..responses import error_response, success_response
from ..runtime import RecipeRuntime

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# Seconds between client disconnect checks while a model call is pending
DISCONNECT_POLL_S = 0.25
# nginx convention for "client closed request"
CLIENT_CLOSED_REQUEST = 499

BodyT = TypeVar("BodyT", bound=BaseModel)
ResultT = TypeVar("ResultT")


class ClientDisconnected(Exception):
    pass


async def get_runtime(request: Request) -> RecipeRuntime:
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return runtime


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "body"
        parts.append(f"{location}: {error.get('msg')}")
    return "; ".join(parts)


async def _decode_body(request: Request, model: Type[BodyT]) -> BodyT:
    raw = await request.body()
    try:
        return model.model_validate_json(raw)
    except ValidationError as exc:
        raise InvalidRequest(_describe_validation_error(exc)) from exc


async def _run_until_disconnect(request: Request, call: Awaitable[ResultT]) -> ResultT:
    """Await ``call`` and cancel it if the client goes away first."""

    task = asyncio.ensure_future(call)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=DISCONNECT_POLL_S)
            if done:
                return task.result()
            if await request.is_disconnected():
                log.info("Client disconnected; cancelling model call for %s", request.url.path)
                task.cancel()
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()


@router.post("/getPossibleCoffee")
async def get_possible_coffee(request: Request, runtime: RecipeRuntime = Depends(get_runtime)):
    try:
        body = await _decode_body(request, PossibleCoffeeRequest)
    except InvalidRequest as exc:
        return error_response(400, str(exc))

    try:
        coffees = await _run_until_disconnect(request, runtime.gateway().suggest_coffees(body.ingredients))
    except ClientDisconnected:
        return Response(status_code=CLIENT_CLOSED_REQUEST)
    except RecipeServiceError as exc:
        log.warning("Coffee suggestion failed: %s", exc)
        return error_response(500, str(exc))

    return success_response({"possible_coffees": coffees})


@router.post("/getRecipe")
async def get_recipe(request: Request, runtime: RecipeRuntime = Depends(get_runtime)):
    try:
        body = await _decode_body(request, RecipeRequest)
    except InvalidRequest as exc:
        return error_response(400, str(exc))

    try:
        recipe = await _run_until_disconnect(request, runtime.gateway().get_recipe(body.coffee_type))
    except ClientDisconnected:
        return Response(status_code=CLIENT_CLOSED_REQUEST)
    except RecipeServiceError as exc:
        log.warning("Recipe generation for %r failed: %s", body.coffee_type, exc)
        return error_response(500, str(exc))

    runtime.repository().create(recipe)
    # id and price are generated but not part of this response
    return success_response(
        {
            "recipe": {
                "ingredients": list(recipe.ingredients),
                "instructions": recipe.instructions,
            }
        }
    )


@router.get("/health")
async def health_check():
    return success_response("Ready")


__all__ = ["router"]
