"""Domain values and request bodies."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from pydantic import BaseModel, Field


@dataclass(slots=True, frozen=True)
class CoffeeRecipe:
    """A generated recipe for one coffee style.

    Only the model gateway creates these; they live for a single request."""

    id: str
    name: str
    ingredients: Tuple[str, ...]
    instructions: str
    price: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "ingredients": list(self.ingredients),
            "instructions": self.instructions,
            "price": self.price,
        }


class PossibleCoffeeRequest(BaseModel):
    ingredients: List[str] = Field(..., min_length=1, description="Available ingredients")


class RecipeRequest(BaseModel):
    coffee_type: str = Field(..., min_length=1, description="Coffee style to build a recipe for")


__all__ = ["CoffeeRecipe", "PossibleCoffeeRequest", "RecipeRequest"]
