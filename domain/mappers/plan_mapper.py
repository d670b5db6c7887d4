"""
Meal plan domain mappers.
Meals live inside the plan's JSON document, so responses are built from it.
"""

from datetime import date
from typing import List

from domain.models import MealPlan
from domain.schemas.plan_schemas import (
    Meal,
    NutritionSummary,
    PlanSummaryResponse,
    PlanResponse,
    PlanForDateResponse,
)


class PlanMapper:
    """Mapper for meal plan transformations."""

    @staticmethod
    def to_summary(plan: MealPlan) -> PlanSummaryResponse:
        return PlanSummaryResponse(
            plan_id=plan.plan_id,
            start_date=plan.start_date,
            end_date=plan.end_date,
            time_frame=plan.time_frame,
            is_active=bool(plan.is_active),
            is_favorite=bool(plan.is_favorite),
            created_at=plan.created_at,
            updated_at=plan.updated_at,
        )

    @staticmethod
    def to_response(plan: MealPlan) -> PlanResponse:
        summary = plan.nutrition_summary
        return PlanResponse(
            **PlanMapper.to_summary(plan).model_dump(),
            meals=[Meal(**m) for m in plan.meals],
            nutrition_summary=NutritionSummary(**summary) if summary else None,
        )

    @staticmethod
    def to_date_response(plan: MealPlan, on: date) -> PlanForDateResponse:
        """Plan response restricted to the meals scheduled on one date."""
        day = on.isoformat()
        meals: List[Meal] = [
            Meal(**m)
            for m in plan.meals
            if (m.get("date") or plan.start_date.isoformat()) == day
        ]
        summary = plan.nutrition_summary
        return PlanForDateResponse(
            **PlanMapper.to_summary(plan).model_dump(),
            meals=meals,
            nutrition_summary=NutritionSummary(**summary) if summary else None,
            total_meals=len(meals),
        )
