"""
Recipe routes - search, details and saved recipes.
"""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from api.dependencies import get_current_user, get_db, get_recipe_provider
from domain.models import AppUser
from domain.schemas.recipe_schemas import (
    RecipeDetailResponse,
    RecipeSearchParams,
    RecipeSearchResponse,
    SaveRecipeRequest,
    SaveRecipeResponse,
    SavedStatusResponse,
)
from services import recipe_service

router = APIRouter(prefix="/recipes", tags=["Recipes"])
logger = logging.getLogger("plateplan.api.recipes")


def _split(value: Optional[str]) -> List[str]:
    return [v.strip() for v in (value or "").split(",") if v.strip()]


@router.get("/search", response_model=RecipeSearchResponse)
def search_recipes(
    query: Optional[str] = Query(default=None, description="Free-text search"),
    diet: Optional[str] = Query(default=None),
    cuisine: Optional[str] = Query(default=None, description="Comma-separated cuisines"),
    exclude: Optional[str] = Query(
        default=None, description="Comma-separated ingredients to exclude"
    ),
    max_ready_time: Optional[int] = Query(default=None, gt=0),
    min_calories: Optional[int] = Query(default=None, ge=0),
    max_calories: Optional[int] = Query(default=None, ge=0),
    min_protein: Optional[int] = Query(default=None, ge=0),
    max_protein: Optional[int] = Query(default=None, ge=0),
    min_carbs: Optional[int] = Query(default=None, ge=0),
    max_carbs: Optional[int] = Query(default=None, ge=0),
    min_fat: Optional[int] = Query(default=None, ge=0),
    max_fat: Optional[int] = Query(default=None, ge=0),
    number: int = Query(default=20, ge=1, le=100, description="Maximum results"),
    user: AppUser = Depends(get_current_user),
    provider=Depends(get_recipe_provider),
):
    """
    Search recipes at the recipe provider.

    - **query**: free text
    - **diet**, **cuisine**, **exclude**: provider filters
    - **min_/max_** calories, protein, carbs, fat: macro ranges per serving
    """
    params = RecipeSearchParams(
        query=query,
        diet=diet,
        cuisines=_split(cuisine),
        exclude_ingredients=_split(exclude),
        max_ready_time=max_ready_time,
        min_calories=min_calories,
        max_calories=max_calories,
        min_protein=min_protein,
        max_protein=max_protein,
        min_carbs=min_carbs,
        max_carbs=max_carbs,
        min_fat=min_fat,
        max_fat=max_fat,
        number=number,
    )
    return recipe_service.search_recipes(provider, params)


@router.get("/saved")
def list_saved_recipes(
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider=Depends(get_recipe_provider),
):
    """Saved recipes with details, most recently saved first."""
    recipes = recipe_service.list_saved_recipes(db, provider, user.user_id)
    return {"recipes": recipes, "total": len(recipes)}


@router.post("/save", response_model=SaveRecipeResponse)
def save_recipe(
    body: SaveRecipeRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider=Depends(get_recipe_provider),
):
    """Save a recipe; saving an already saved recipe changes nothing."""
    already = recipe_service.save_recipe(db, provider, user.user_id, body.recipe_id)
    message = "Recipe already saved" if already else "Recipe saved successfully"
    return SaveRecipeResponse(message=message, already_saved=already)


@router.post("/unsave", response_model=SaveRecipeResponse)
def unsave_recipe(
    body: SaveRecipeRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Remove a saved recipe."""
    recipe_service.unsave_recipe(db, user.user_id, body.recipe_id)
    return SaveRecipeResponse(message="Recipe removed from saved recipes")


@router.post("/{recipe_id}/toggle-save", response_model=SavedStatusResponse)
def toggle_saved_recipe(
    recipe_id: int = Path(..., gt=0),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider=Depends(get_recipe_provider),
):
    """Save the recipe if it is not saved, otherwise remove it."""
    saved = recipe_service.toggle_saved(db, provider, user.user_id, recipe_id)
    return SavedStatusResponse(recipe_id=recipe_id, is_saved=saved)


@router.get("/{recipe_id}/saved", response_model=SavedStatusResponse)
def is_recipe_saved(
    recipe_id: int = Path(..., gt=0),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    saved = recipe_service.is_recipe_saved(db, user.user_id, recipe_id)
    return SavedStatusResponse(recipe_id=recipe_id, is_saved=saved)


@router.get("/{recipe_id}", response_model=RecipeDetailResponse)
def get_recipe(
    recipe_id: int = Path(..., gt=0),
    refresh: bool = Query(default=False, description="Bypass the recipe cache"),
    user: AppUser = Depends(get_current_user),
    provider=Depends(get_recipe_provider),
):
    """Get full recipe details including ingredients and nutrition."""
    return RecipeDetailResponse(
        recipe=recipe_service.get_recipe(provider, recipe_id, refresh=refresh)
    )
