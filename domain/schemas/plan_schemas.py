from datetime import date as Date, datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from domain.enums import MealType, TimeFrame


class PlanPreferences(BaseModel):
    cuisines: Optional[List[str]] = None
    meal_count: Optional[int] = Field(default=None, ge=1, le=6)
    ready_time: Optional[int] = Field(default=None, gt=0)


class GeneratePlanRequest(BaseModel):
    time_frame: TimeFrame
    target_calories: Optional[float] = Field(default=None, gt=0)
    diet: Optional[str] = None
    exclude: List[str] = Field(default_factory=list)
    preferences: Optional[PlanPreferences] = None
    use_user_preferences: bool = True
    date: Optional[Date] = None


class AddMealRequest(BaseModel):
    recipe_id: int = Field(..., gt=0)
    meal_type: MealType
    date: Optional[Date] = None

    @field_validator("meal_type", mode="before")
    @classmethod
    def lower_meal_type(cls, v):
        return v.lower() if isinstance(v, str) else v


class PlanUpdateRequest(BaseModel):
    is_active: Optional[bool] = None
    is_favorite: Optional[bool] = None


class Meal(BaseModel):
    id: str
    recipe_id: int
    meal_type: MealType
    title: str
    image_url: Optional[str] = None
    ready_in_minutes: Optional[int] = None
    servings: Optional[int] = None
    date: Optional[str] = None


class NutritionSummary(BaseModel):
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0


class PlanSummaryResponse(BaseModel):
    plan_id: UUID
    start_date: Date
    end_date: Date
    time_frame: Optional[TimeFrame]
    is_active: bool
    is_favorite: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    model_config = {"from_attributes": True}


class PlanResponse(PlanSummaryResponse):
    meals: List[Meal]
    nutrition_summary: Optional[NutritionSummary] = None


class PlanForDateResponse(PlanResponse):
    total_meals: int


class PlansForDateResponse(BaseModel):
    date: Date
    meal_plans: List[PlanForDateResponse]


class CalendarResponse(BaseModel):
    plan_id: UUID
    start_date: str
    end_date: str
    days: Dict[str, List[Meal]]


class MealRemovedResponse(BaseModel):
    message: str
    updated_plan_id: UUID
