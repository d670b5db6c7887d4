from typing import Any, Dict, List
from uuid import UUID
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from adapters.spoonacular_adapter import summarize
from domain.models import SavedRecipe
from domain.schemas.recipe_schemas import RecipeSearchParams
from repositories import SavedRecipeRepository
from app.exceptions import NotFoundError

logger = logging.getLogger("plateplan.recipe")


def search_recipes(provider, params: RecipeSearchParams) -> Dict[str, Any]:
    """Search the recipe provider; each hit is reduced to its list summary."""
    data = provider.search_recipes(params)
    recipes = [summarize(r) for r in data.get("results") or []]
    return {"recipes": recipes, "total": data.get("totalResults", len(recipes))}


def get_recipe(provider, recipe_id: int, refresh: bool = False) -> Dict[str, Any]:
    """Get full recipe details; ``refresh`` bypasses the recipe cache."""
    return provider.get_recipe_information(recipe_id, use_cache=not refresh)


def list_saved_recipes(db: Session, provider, user_id: UUID) -> List[Dict[str, Any]]:
    """Saved recipes with details, most recently saved first.

    Recipes the provider no longer knows about are left out.
    """
    saved = SavedRecipeRepository(db).get_by_user_id(user_id)
    if not saved:
        return []

    details = provider.get_recipe_information_bulk([s.recipe_id for s in saved])
    by_id = {int(r["id"]): r for r in details if r.get("id") is not None}

    recipes = []
    for entry in saved:
        recipe = by_id.get(entry.recipe_id)
        if recipe is None:
            logger.warning("Saved recipe %s not returned by provider", entry.recipe_id)
            continue
        recipes.append(
            dict(recipe, savedAt=entry.saved_at.isoformat() if entry.saved_at else None)
        )
    return recipes


def is_recipe_saved(db: Session, user_id: UUID, recipe_id: int) -> bool:
    return SavedRecipeRepository(db).exists(user_id, recipe_id)


def save_recipe(db: Session, provider, user_id: UUID, recipe_id: int) -> bool:
    """Bookmark a recipe.

    Returns:
        True if the recipe was already saved (nothing changed)

    Raises:
        NotFoundError: the provider does not know the recipe
    """
    repo = SavedRecipeRepository(db)
    if repo.exists(user_id, recipe_id):
        return True

    # Raises NotFoundError for unknown ids
    provider.get_recipe_information(recipe_id)

    try:
        repo.create(SavedRecipe(user_id=user_id, recipe_id=recipe_id))
    except IntegrityError:
        db.rollback()
        logger.info("Recipe %s saved concurrently for user %s", recipe_id, user_id)
        return True

    logger.info("Recipe %s saved for user %s", recipe_id, user_id)
    return False


def unsave_recipe(db: Session, user_id: UUID, recipe_id: int) -> None:
    if not SavedRecipeRepository(db).delete(user_id, recipe_id):
        raise NotFoundError(f"Recipe {recipe_id} is not in your saved recipes")
    logger.info("Recipe %s unsaved for user %s", recipe_id, user_id)


def toggle_saved(db: Session, provider, user_id: UUID, recipe_id: int) -> bool:
    """Flip the saved state; returns the new state."""
    if is_recipe_saved(db, user_id, recipe_id):
        unsave_recipe(db, user_id, recipe_id)
        return False
    save_recipe(db, provider, user_id, recipe_id)
    return True
