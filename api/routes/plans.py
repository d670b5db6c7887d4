import logging
from datetime import date
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from api.dependencies import get_current_user, get_db, get_recipe_provider
from domain.mappers import PlanMapper
from domain.models import AppUser
from domain.schemas.plan_schemas import (
    AddMealRequest,
    CalendarResponse,
    GeneratePlanRequest,
    Meal,
    MealRemovedResponse,
    PlanResponse,
    PlansForDateResponse,
    PlanSummaryResponse,
    PlanUpdateRequest,
)
from services.planner_service import PlannerService

router = APIRouter(prefix="/mealplans", tags=["Meal Planning"])
logger = logging.getLogger("plateplan.api.plans")


@router.post("/generate", response_model=PlanResponse, status_code=status.HTTP_201_CREATED)
def generate_plan(
    body: GeneratePlanRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider=Depends(get_recipe_provider),
):
    """
    Generate a day or week meal plan.

    Parameters missing from the request fall back to the caller's stored
    preferences (unless ``use_user_preferences`` is false) and then to the
    configured defaults. Allergies and dislikes are always excluded when
    preferences are used.
    """
    plan = PlannerService(db, provider).generate_plan(user, body)
    return PlanMapper.to_response(plan)


@router.get("", response_model=List[PlanSummaryResponse])
def list_plans(user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """List the caller's meal plans, newest first."""
    plans = PlannerService(db).list_plans(user.user_id)
    logger.info("Found %d plans for user %s", len(plans), user.user_id)
    return [PlanMapper.to_summary(p) for p in plans]


@router.get("/date/{on}", response_model=PlansForDateResponse)
def get_plans_for_date(
    on: date, user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Plans whose range covers the date, each restricted to that day's meals."""
    plans = PlannerService(db).plans_for_date(user.user_id, on)
    return PlansForDateResponse(
        date=on, meal_plans=[PlanMapper.to_date_response(p, on) for p in plans]
    )


@router.delete("/meals/{meal_id}", response_model=MealRemovedResponse)
def remove_meal(
    meal_id: str, user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Remove a single meal from whichever of the caller's plans contains it."""
    plan = PlannerService(db).remove_meal(user.user_id, meal_id)
    return MealRemovedResponse(
        message="Meal removed successfully", updated_plan_id=plan.plan_id
    )


@router.get("/{plan_id}", response_model=PlanResponse)
def get_plan(
    plan_id: UUID, user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    plan = PlannerService(db).get_plan(user.user_id, plan_id)
    return PlanMapper.to_response(plan)


@router.get("/{plan_id}/calendar", response_model=CalendarResponse)
def get_plan_calendar(
    plan_id: UUID, user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Meals grouped per day, keyed by ISO date in ascending order."""
    calendar = PlannerService(db).get_calendar(user.user_id, plan_id)
    return CalendarResponse(
        plan_id=plan_id,
        start_date=calendar.start_date,
        end_date=calendar.end_date,
        days={day: [Meal(**m) for m in meals] for day, meals in calendar.days.items()},
    )


@router.patch("/{plan_id}", response_model=PlanResponse)
def update_plan(
    plan_id: UUID,
    body: PlanUpdateRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Mark a plan active/inactive or favorite."""
    plan = PlannerService(db).update_plan(user.user_id, plan_id, body)
    return PlanMapper.to_response(plan)


@router.delete("/{plan_id}")
def delete_plan(
    plan_id: UUID, user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    PlannerService(db).delete_plan(user.user_id, plan_id)
    return {"status": "ok", "deleted": str(plan_id)}


@router.post("/{plan_id}/meals", response_model=Meal, status_code=status.HTTP_201_CREATED)
def add_recipe_to_plan(
    plan_id: UUID,
    body: AddMealRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider=Depends(get_recipe_provider),
):
    """
    Add a recipe to a plan slot.

    The date defaults to the plan's start date; an existing meal of the
    same type on that date is replaced.
    """
    meal = PlannerService(db, provider).add_recipe(user.user_id, plan_id, body)
    return Meal(**meal)
