"""Schemas for recipe search and saved recipes"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class RecipeSearchParams(BaseModel):
    """Filters forwarded to the recipe provider's search endpoint"""

    query: Optional[str] = None
    diet: Optional[str] = None
    cuisines: List[str] = Field(default_factory=list)
    exclude_ingredients: List[str] = Field(default_factory=list)
    max_ready_time: Optional[int] = Field(None, gt=0)
    min_calories: Optional[int] = Field(None, ge=0)
    max_calories: Optional[int] = Field(None, ge=0)
    min_protein: Optional[int] = Field(None, ge=0)
    max_protein: Optional[int] = Field(None, ge=0)
    min_carbs: Optional[int] = Field(None, ge=0)
    max_carbs: Optional[int] = Field(None, ge=0)
    min_fat: Optional[int] = Field(None, ge=0)
    max_fat: Optional[int] = Field(None, ge=0)
    number: int = Field(20, ge=1, le=1000)


class RecipeSearchResponse(BaseModel):
    recipes: List[Dict[str, Any]]
    total: int


class RecipeDetailResponse(BaseModel):
    recipe: Dict[str, Any]


class SaveRecipeRequest(BaseModel):
    recipe_id: int = Field(..., gt=0)


class SaveRecipeResponse(BaseModel):
    message: str
    already_saved: bool = False


class SavedStatusResponse(BaseModel):
    recipe_id: int
    is_saved: bool
