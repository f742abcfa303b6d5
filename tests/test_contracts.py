import pytest
from pydantic import ValidationError

from coffee_recipes.contracts import COFFEE_RECIPE_CONTRACT, COFFEE_STYLES_CONTRACT


def test_styles_parameters_require_every_field():
    params = COFFEE_STYLES_CONTRACT.parameters()
    assert params["type"] == "object"
    assert params["required"] == ["coffees", "failed"]
    assert params["properties"]["coffees"]["type"] == "array"
    assert params["properties"]["coffees"]["items"] == {"type": "string"}
    assert params["properties"]["failed"]["type"] == "boolean"
    assert "title" not in params["properties"]["coffees"]
    assert "default" not in params["properties"]["failed"]


def test_recipe_parameters():
    params = COFFEE_RECIPE_CONTRACT.parameters()
    assert set(params["required"]) == {"id", "name", "ingredients", "instructions", "price", "failed"}
    assert params["properties"]["price"]["type"] == "number"
    assert params["properties"]["instructions"]["description"]


def test_tool_definition_names_the_function():
    tool = COFFEE_RECIPE_CONTRACT.tool()
    assert tool["type"] == "function"
    assert tool["function"]["name"] == "get_coffee_recipe"
    assert tool["function"]["parameters"] == COFFEE_RECIPE_CONTRACT.parameters()


def test_parse_defaults_missing_fields():
    answer = COFFEE_RECIPE_CONTRACT.parse('{"name": "Latte"}')
    assert answer.name == "Latte"
    assert answer.ingredients == []
    assert answer.price == 0.0
    assert answer.failed is False


def test_parse_rejects_wrong_types():
    with pytest.raises(ValidationError):
        COFFEE_STYLES_CONTRACT.parse('{"coffees": [1, 2], "failed": "maybe"}')
