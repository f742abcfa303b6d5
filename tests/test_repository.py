import pytest

from coffee_recipes.models import CoffeeRecipe
from coffee_recipes.repository import (
    InMemoryRecipeRepository,
    NullRecipeRepository,
    RecipeNotFound,
    create_repository,
)


def make_recipe(recipe_id="r1", price=3.0):
    return CoffeeRecipe(
        id=recipe_id,
        name="Americano",
        ingredients=("Espresso", "Water"),
        instructions="Pull a shot, add hot water.",
        price=price,
    )


def test_memory_repository_crud():
    repo = InMemoryRecipeRepository()
    repo.create(make_recipe())
    assert repo.fetch_by_id("r1").price == 3.0

    repo.update(make_recipe(price=3.5))
    assert repo.fetch_by_id("r1").price == 3.5
    assert len(repo.fetch_all()) == 1

    repo.delete("r1")
    assert repo.fetch_all() == []
    with pytest.raises(RecipeNotFound):
        repo.fetch_by_id("r1")


def test_memory_repository_update_unknown():
    with pytest.raises(RecipeNotFound):
        InMemoryRecipeRepository().update(make_recipe("missing"))


def test_null_repository_keeps_nothing():
    repo = NullRecipeRepository()
    repo.create(make_recipe())
    assert repo.fetch_all() == []
    with pytest.raises(RecipeNotFound):
        repo.fetch_by_id("r1")


def test_create_repository():
    assert isinstance(create_repository("memory"), InMemoryRecipeRepository)
    assert isinstance(create_repository("none"), NullRecipeRepository)
    with pytest.raises(ValueError):
        create_repository("sqlite")


def test_recipe_to_dict():
    assert make_recipe().to_dict() == {
        "id": "r1",
        "name": "Americano",
        "ingredients": ["Espresso", "Water"],
        "instructions": "Pull a shot, add hot water.",
        "price": 3.0,
    }


def test_memory_repository_evicts_oldest():
    repo = InMemoryRecipeRepository(max_entries=2)
    for recipe_id in ("r1", "r2", "r3"):
        repo.create(make_recipe(recipe_id))
    assert [recipe.id for recipe in repo.fetch_all()] == ["r2", "r3"]
    with pytest.raises(RecipeNotFound):
        repo.fetch_by_id("r1")


def test_memory_repository_skips_recipe_without_id():
    repo = InMemoryRecipeRepository()
    repo.create(make_recipe(""))
    repo.create(make_recipe(""))
    assert repo.fetch_all() == []


def test_create_repository_passes_capacity():
    repo = create_repository("memory", max_entries=7)
    assert repo.max_entries == 7
