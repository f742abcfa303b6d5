"""Structured output contracts imposed on the remote model.

Each contract names the single function the model has to call and describes
its arguments with a pydantic model. The transport only sees the rendered
JSON schema; the gateway uses :meth:`StructuredContract.parse` to turn the
raw argument string back into typed values.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Type, TypeVar

from pydantic import BaseModel, Field

ArgsT = TypeVar("ArgsT", bound=BaseModel)


class CoffeeStylesAnswer(BaseModel):
    coffees: List[str] = Field(
        default_factory=list,
        description="A list of coffee styles that can be prepared based on the given ingredients.",
    )
    failed: bool = Field(
        default=False,
        description="Indicates if the task could not be completed successfully.",
    )


class CoffeeRecipeAnswer(BaseModel):
    id: str = Field(default="", description="A unique identifier for the recipe.")
    name: str = Field(default="", description="The name of the coffee style.")
    ingredients: List[str] = Field(
        default_factory=list,
        description="A list of ingredients required to make the coffee.",
    )
    instructions: str = Field(
        default="",
        description="Step-by-step instructions for preparing the coffee.",
    )
    price: float = Field(default=0.0, description="The suggested price for the coffee.")
    failed: bool = Field(
        default=False,
        description="Indicates if the task could not be completed successfully.",
    )


@dataclass(frozen=True)
class StructuredContract(Generic[ArgsT]):
    name: str
    description: str
    arguments: Type[ArgsT]

    def parameters(self) -> Dict[str, Any]:
        """JSON schema of the function arguments; every field is required."""

        schema = self.arguments.model_json_schema()
        properties: Dict[str, Any] = {}
        for field_name, definition in schema.get("properties", {}).items():
            cleaned = {k: v for k, v in definition.items() if k not in {"title", "default"}}
            properties[field_name] = cleaned
        return {
            "type": "object",
            "properties": properties,
            "required": list(properties),
        }

    def tool(self) -> Dict[str, Any]:
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters(),
            },
        }

    def parse(self, arguments: str) -> ArgsT:
        """Validate raw JSON arguments; raises ``pydantic.ValidationError``."""
        return self.arguments.model_validate_json(arguments)


COFFEE_STYLES_CONTRACT: StructuredContract[CoffeeStylesAnswer] = StructuredContract(
    name="get_possible_coffee_styles",
    description="Analyze the ingredients and generate a list of possible coffee styles.",
    arguments=CoffeeStylesAnswer,
)

COFFEE_RECIPE_CONTRACT: StructuredContract[CoffeeRecipeAnswer] = StructuredContract(
    name="get_coffee_recipe",
    description="Generate a recipe for a specified coffee style.",
    arguments=CoffeeRecipeAnswer,
)


COFFEE_STYLES_PROMPT = """You are tasked with analyzing the provided ingredients and determining which coffee styles can be made.
Here are the instructions:
1. Identify coffee styles (e.g., Espresso, Latte, Mocha) that can be prepared using the ingredients provided.
2. Do not include the raw ingredient names as coffee styles.
3. Respond only by calling the provided function, for example:
{
  "coffees": ["Espresso", "Latte", "Cappuccino"],
  "failed": false
}"""

COFFEE_RECIPE_PROMPT = """You are tasked with creating a complete recipe for the specified coffee style.
Here are the instructions:
1. Assign a unique identifier to the recipe.
2. List all necessary ingredients with clear names.
3. Provide a detailed step-by-step guide for preparation.
4. Suggest a reasonable price for the coffee.
Respond only by calling the provided function, for example:
{
  "id": "unique-id",
  "name": "Latte",
  "ingredients": ["Milk", "Espresso"],
  "instructions": "Step 1: Heat the milk. Step 2: Brew espresso. Step 3: Combine and serve.",
  "price": 4.50,
  "failed": false
}"""


__all__ = [
    "COFFEE_RECIPE_CONTRACT",
    "COFFEE_RECIPE_PROMPT",
    "COFFEE_STYLES_CONTRACT",
    "COFFEE_STYLES_PROMPT",
    "CoffeeRecipeAnswer",
    "CoffeeStylesAnswer",
    "StructuredContract",
]
