"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    init_database,
    get_db_session,
)
from domain.models.user import AppUser, UserProfile, UserPreferences
from domain.models.meal_plan import MealPlan
from domain.models.recipe import SavedRecipe
from domain.models.shopping import ShoppingList, ShoppingListItem

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "init_database",
    "get_db_session",
    # User models
    "AppUser",
    "UserProfile",
    "UserPreferences",
    # Meal plan models
    "MealPlan",
    # Recipe models
    "SavedRecipe",
    # Shopping models
    "ShoppingList",
    "ShoppingListItem",
]
