from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from uuid import UUID


def _clean_terms(values: Optional[List[str]]) -> Optional[List[str]]:
    if values is None:
        return None
    seen = []
    for value in values:
        term = value.strip().lower()
        if term and term not in seen:
            seen.append(term)
    return seen


class NutritionGoals(BaseModel):
    target_calories: Optional[float] = Field(None, gt=0)
    target_protein: Optional[float] = Field(None, gt=0)
    target_carbs: Optional[float] = Field(None, gt=0)
    target_fat: Optional[float] = Field(None, gt=0)
    goal_type: Optional[str] = Field(None, max_length=50)


class PreferencesUpdate(BaseModel):
    """Partial preference update; only provided fields are written"""

    diet: Optional[str] = Field(None, max_length=50)
    allergies: Optional[List[str]] = None
    dislikes: Optional[List[str]] = None
    cuisine_preferences: Optional[List[str]] = None
    goals: Optional[NutritionGoals] = None
    max_prep_time: Optional[int] = Field(None, gt=0, le=24 * 60)
    meal_count: Optional[int] = Field(None, ge=1, le=6)
    budget_per_meal: Optional[Decimal] = Field(None, ge=0, max_digits=8, decimal_places=2)

    @field_validator("allergies", "dislikes", "cuisine_preferences")
    @classmethod
    def normalize_terms(cls, v):
        return _clean_terms(v)

    @field_validator("diet")
    @classmethod
    def normalize_diet(cls, v):
        return v.strip().lower() if v else v


class PreferencesResponse(BaseModel):
    diet: Optional[str]
    allergies: List[str]
    dislikes: List[str]
    cuisine_preferences: List[str]
    goals: Optional[NutritionGoals]
    max_prep_time: Optional[int]
    meal_count: int
    budget_per_meal: Optional[float]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)


class ProfileResponse(BaseModel):
    name: Optional[str]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class UserProfileResponse(BaseModel):
    user_id: UUID
    email: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    profile: Optional[ProfileResponse]
    preferences: Optional[PreferencesResponse]

    model_config = {"from_attributes": True}
