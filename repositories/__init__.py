"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.user_repository import (
    UserRepository,
    UserProfileRepository,
    PreferencesRepository,
)
from repositories.meal_plan_repository import MealPlanRepository
from repositories.saved_recipe_repository import SavedRecipeRepository
from repositories.shopping_repository import (
    ShoppingListRepository,
    ShoppingListItemRepository,
)

__all__ = [
    "BaseRepository",
    "UserRepository",
    "UserProfileRepository",
    "PreferencesRepository",
    "MealPlanRepository",
    "SavedRecipeRepository",
    "ShoppingListRepository",
    "ShoppingListItemRepository",
]
