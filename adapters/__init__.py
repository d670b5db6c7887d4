"""
Adapters package - External service connections.
Recipe provider client, its cache, and identity token verification.
"""

from adapters import identity_adapter
from adapters.recipe_cache import RecipeCache
from adapters.spoonacular_adapter import SpoonacularAdapter

__all__ = [
    "identity_adapter",
    "RecipeCache",
    "SpoonacularAdapter",
]
