"""Recipe storage.

Only an in-memory variant and a no-op variant exist; there is no real
backing store."""
from __future__ import annotations

import logging
from threading import RLock
from typing import Dict, List

from .models import CoffeeRecipe

log = logging.getLogger(__name__)


class RecipeNotFound(KeyError):
    pass


class RecipeRepository:
    """Abstract storage interface for recipes."""

    def fetch_all(self) -> List[CoffeeRecipe]:
        raise NotImplementedError

    def fetch_by_id(self, recipe_id: str) -> CoffeeRecipe:
        raise NotImplementedError

    def create(self, recipe: CoffeeRecipe) -> None:
        raise NotImplementedError

    def update(self, recipe: CoffeeRecipe) -> None:
        raise NotImplementedError

    def delete(self, recipe_id: str) -> None:
        raise NotImplementedError


class NullRecipeRepository(RecipeRepository):
    """Accepts writes and keeps nothing."""

    def fetch_all(self) -> List[CoffeeRecipe]:
        return []

    def fetch_by_id(self, recipe_id: str) -> CoffeeRecipe:
        raise RecipeNotFound(recipe_id)

    def create(self, recipe: CoffeeRecipe) -> None:
        return None

    def update(self, recipe: CoffeeRecipe) -> None:
        return None

    def delete(self, recipe_id: str) -> None:
        return None


class InMemoryRecipeRepository(RecipeRepository):
    """Bounded store; the oldest recipe is evicted once ``max_entries`` is reached."""

    def __init__(self, max_entries: int = 1000) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self._recipes: Dict[str, CoffeeRecipe] = {}
        self._lock = RLock()

    def fetch_all(self) -> List[CoffeeRecipe]:
        with self._lock:
            return list(self._recipes.values())

    def fetch_by_id(self, recipe_id: str) -> CoffeeRecipe:
        with self._lock:
            try:
                return self._recipes[recipe_id]
            except KeyError as exc:
                raise RecipeNotFound(recipe_id) from exc

    def create(self, recipe: CoffeeRecipe) -> None:
        if not recipe.id:
            log.warning("Not storing recipe %r without an id", recipe.name)
            return
        with self._lock:
            if recipe.id in self._recipes:
                log.debug("Replacing stored recipe %s", recipe.id)
                del self._recipes[recipe.id]
            while len(self._recipes) >= self.max_entries:
                oldest = next(iter(self._recipes))
                log.debug("Evicting stored recipe %s", oldest)
                del self._recipes[oldest]
            self._recipes[recipe.id] = recipe

    def update(self, recipe: CoffeeRecipe) -> None:
        with self._lock:
            if recipe.id not in self._recipes:
                raise RecipeNotFound(recipe.id)
            self._recipes[recipe.id] = recipe

    def delete(self, recipe_id: str) -> None:
        with self._lock:
            try:
                del self._recipes[recipe_id]
            except KeyError as exc:
                raise RecipeNotFound(recipe_id) from exc


def create_repository(kind: str, max_entries: int = 1000) -> RecipeRepository:
    backend = kind.lower()
    if backend == "none":
        return NullRecipeRepository()
    if backend == "memory":
        return InMemoryRecipeRepository(max_entries)
    raise ValueError(f"Unknown storage backend: {kind}")


__all__ = [
    "InMemoryRecipeRepository",
    "NullRecipeRepository",
    "RecipeNotFound",
    "RecipeRepository",
    "create_repository",
]
