"""Model gateway: prompt construction and answer validation."""
from __future__ import annotations

import json
import logging
import math
from typing import List, Sequence, TypeVar

from pydantic import BaseModel, ValidationError

from .ai import ChatTransport
from .contracts import (
    COFFEE_RECIPE_CONTRACT,
    COFFEE_RECIPE_PROMPT,
    COFFEE_STYLES_CONTRACT,
    COFFEE_STYLES_PROMPT,
    StructuredContract,
)
from .errors import (
    IncompleteResult,
    MalformedUpstreamResponse,
    ModelDeclinedTask,
    NoValidResult,
)
from .models import CoffeeRecipe

log = logging.getLogger(__name__)

ArgsT = TypeVar("ArgsT", bound=BaseModel)


def filter_ingredient_echoes(coffees: Sequence[str], ingredients: Sequence[str]) -> List[str]:
    """Drop styles that are just one of the ingredients (case-insensitive)."""
    lowered = {ingredient.casefold() for ingredient in ingredients}
    return [coffee for coffee in coffees if coffee.casefold() not in lowered]


class ModelGateway:
    """Owns every interaction with the remote model."""

    def __init__(self, transport: ChatTransport):
        self._transport = transport

    async def _invoke(self, contract: StructuredContract[ArgsT], prompt: str, user_content: str) -> ArgsT:
        call = await self._transport.call_function(
            system_prompt=prompt,
            user_content=user_content,
            contract=contract,
        )
        if call is None:
            raise MalformedUpstreamResponse("no tool calls found in response")
        if call.name != contract.name:
            raise MalformedUpstreamResponse(f"unexpected function called: {call.name}")
        try:
            return contract.parse(call.arguments)
        except ValidationError as exc:
            raise MalformedUpstreamResponse(f"failed to parse tool call arguments: {exc}") from exc

    async def suggest_coffees(self, ingredients: Sequence[str]) -> List[str]:
        answer = await self._invoke(
            COFFEE_STYLES_CONTRACT,
            COFFEE_STYLES_PROMPT,
            json.dumps(list(ingredients)),
        )
        if answer.failed:
            raise ModelDeclinedTask("unable to generate coffee styles with the provided ingredients")

        coffees = filter_ingredient_echoes(answer.coffees, ingredients)
        if not coffees:
            raise NoValidResult("AI returned only ingredients or invalid results")
        if len(coffees) != len(answer.coffees):
            log.debug("Dropped %d ingredient echoes from model answer", len(answer.coffees) - len(coffees))
        return coffees

    async def get_recipe(self, coffee_style: str) -> CoffeeRecipe:
        answer = await self._invoke(
            COFFEE_RECIPE_CONTRACT,
            COFFEE_RECIPE_PROMPT,
            json.dumps(coffee_style),
        )
        if answer.failed:
            raise ModelDeclinedTask("unable to generate recipe for the provided coffee style")
        price_ok = math.isfinite(answer.price) and answer.price > 0
        if not answer.ingredients or not answer.instructions or not price_ok:
            raise IncompleteResult("AI returned incomplete or invalid recipe data")

        return CoffeeRecipe(
            id=answer.id,
            name=answer.name,
            ingredients=tuple(answer.ingredients),
            instructions=answer.instructions,
            price=answer.price,
        )


__all__ = ["ModelGateway", "filter_ingredient_echoes"]
