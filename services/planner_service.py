from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import MealType, TimeFrame
from domain.models import AppUser, MealPlan
from domain.schemas.plan_schemas import (
    AddMealRequest,
    GeneratePlanRequest,
    PlanUpdateRequest,
)
from domain.schemas.recipe_schemas import RecipeSearchParams
from adapters.spoonacular_adapter import nutrient_amount
from repositories import MealPlanRepository
from services.calendar_service import MealCalendar, group_meals_by_date


logger = logging.getLogger("plateplan.planner")

Recipe = Dict[str, Any]

# Meal slots per day for each supported meal count
MEAL_LAYOUTS: Dict[int, Tuple[MealType, ...]] = {
    1: (MealType.BREAKFAST,),
    2: (MealType.BREAKFAST, MealType.LUNCH),
    3: (MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER),
    4: (MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER, MealType.SNACK),
    5: (MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER, MealType.SNACK, MealType.SNACK),
    6: (
        MealType.BREAKFAST,
        MealType.LUNCH,
        MealType.DINNER,
        MealType.SNACK,
        MealType.SNACK,
        MealType.SNACK,
    ),
}

# User-facing diet names -> provider spelling
DIET_ALIASES = {
    "gluten-free": "gluten free",
    "pescetarian": "pescatarian",
    "whole30": "whole 30",
}

# Calorie guesses used when a recipe carries no nutrition data
_DISH_TYPE_CALORIES = (
    ("breakfast", 400.0),
    ("lunch", 600.0),
    ("dinner", 700.0),
    ("snack", 200.0),
)

_BREAKFAST_TYPES = ("breakfast", "morning meal", "brunch")
_MAIN_TYPES = ("main course", "main dish")
_SNACK_TYPES = ("snack", "appetizer", "side dish", "dessert", "fingerfood")


@dataclass
class PlanParameters:
    time_frame: TimeFrame
    start_date: date
    meal_count: int
    target_calories: float
    max_ready_time: int
    diet: Optional[str] = None
    exclude: List[str] = field(default_factory=list)
    cuisines: List[str] = field(default_factory=list)

    @property
    def days(self) -> int:
        return 1 if self.time_frame == TimeFrame.DAY else 7

    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(days=self.days - 1)

    @property
    def candidate_count(self) -> int:
        if self.time_frame == TimeFrame.DAY:
            return self.meal_count * 20
        return self.meal_count * 7 * 10


@dataclass
class SelectedMeal:
    recipe: Recipe
    meal_type: MealType
    day: date


# ---------------------------------------------------------------------------
# Selection helpers
# ---------------------------------------------------------------------------


def _dedupe(values: Sequence[str]) -> List[str]:
    out: List[str] = []
    for value in values:
        term = (value or "").strip().lower()
        if term and term not in out:
            out.append(term)
    return out


def normalize_diet(diet: Optional[str]) -> Optional[str]:
    if not diet:
        return None
    diet = diet.strip().lower()
    if diet in ("", "none", "any"):
        return None
    return DIET_ALIASES.get(diet, diet)


def matches_diet(recipe: Recipe, diet: Optional[str]) -> bool:
    """True when the recipe's declared diets satisfy ``diet``.

    Recipes that declare no diets are not excluded.
    """
    diet = normalize_diet(diet)
    diets = [d.lower() for d in recipe.get("diets") or []]
    if not diet or not diets:
        return True

    if diet == "vegetarian":
        return any("vegetarian" in d or d == "vegan" for d in diets)
    if diet == "vegan":
        return "vegan" in diets
    if diet == "gluten free":
        return any("gluten free" in d or "gluten-free" in d for d in diets)

    wanted = diet.replace("-", "").replace(" ", "")
    for d in diets:
        have = d.replace("-", "").replace(" ", "")
        if wanted in have or have in wanted:
            return True
    return False


def _ready_time(recipe: Recipe) -> int:
    return int(recipe.get("readyInMinutes") or 0)


def filter_candidates(
    recipes: Sequence[Recipe], diet: Optional[str], max_ready_time: Optional[int]
) -> List[Recipe]:
    return [
        r
        for r in recipes
        if matches_diet(r, diet)
        and (not max_ready_time or _ready_time(r) <= max_ready_time)
    ]


def select_pool(recipes: Sequence[Recipe], params: PlanParameters) -> List[Recipe]:
    """
    Narrow candidates to those matching the plan constraints.

    When fewer than ``meal_count`` recipes survive, the diet is dropped and
    the ready-time limit is relaxed by half; if that is still too few, all
    candidates are used.
    """
    strict = filter_candidates(recipes, params.diet, params.max_ready_time)
    if len(strict) >= params.meal_count:
        return strict

    relaxed_time = int(params.max_ready_time * 1.5) if params.max_ready_time else None
    lenient = filter_candidates(recipes, None, relaxed_time)
    if len(lenient) >= params.meal_count:
        logger.info("Using lenient filtering: %d candidates", len(lenient))
        return lenient

    logger.warning("Too few recipes match constraints, using all %d", len(recipes))
    return list(recipes)


def bucket_by_dish_type(recipes: Sequence[Recipe]) -> Dict[MealType, List[Recipe]]:
    """Sort recipes into meal-type buckets by dish type, then by ready time."""
    buckets: Dict[MealType, List[Recipe]] = {t: [] for t in MealType}

    for recipe in recipes:
        dish_types = [t.lower() for t in recipe.get("dishTypes") or []]

        if any(t in dt for dt in dish_types for t in _BREAKFAST_TYPES):
            buckets[MealType.BREAKFAST].append(recipe)
        elif any("lunch" in dt for dt in dish_types):
            buckets[MealType.LUNCH].append(recipe)
        elif any("dinner" in dt for dt in dish_types):
            buckets[MealType.DINNER].append(recipe)
        elif any(t in dt for dt in dish_types for t in _MAIN_TYPES):
            # Main courses fill whichever of lunch/dinner is smaller
            if len(buckets[MealType.LUNCH]) <= len(buckets[MealType.DINNER]):
                buckets[MealType.LUNCH].append(recipe)
            else:
                buckets[MealType.DINNER].append(recipe)
        elif any(t in dt for dt in dish_types for t in _SNACK_TYPES):
            buckets[MealType.SNACK].append(recipe)
        else:
            minutes = _ready_time(recipe)
            if minutes <= 15:
                if len(buckets[MealType.BREAKFAST]) <= len(buckets[MealType.SNACK]):
                    buckets[MealType.BREAKFAST].append(recipe)
                else:
                    buckets[MealType.SNACK].append(recipe)
            elif minutes <= 30:
                buckets[MealType.LUNCH].append(recipe)
            else:
                buckets[MealType.DINNER].append(recipe)

    return buckets


def recipe_calories(recipe: Recipe) -> float:
    calories = nutrient_amount(recipe, "calories", "energy")
    if calories is not None:
        return calories

    dish_types = " ".join(recipe.get("dishTypes") or []).lower()
    for dish_type, guess in _DISH_TYPE_CALORIES:
        if dish_type in dish_types:
            return guess
    return _ready_time(recipe) * 10.0


def pick_closest(
    candidates: Sequence[Recipe], target_calories: float, used_ids: set
) -> Optional[Recipe]:
    """Unused recipe with calories nearest the target; ties keep input order."""
    available = [r for r in candidates if r.get("id") not in used_ids]
    if not available:
        return None
    return min(available, key=lambda r: abs(recipe_calories(r) - target_calories))


def select_meals(recipes: Sequence[Recipe], params: PlanParameters) -> List[SelectedMeal]:
    """
    Assign recipes to every slot of every day.

    Each slot takes the unused recipe from its meal-type bucket whose
    calories are closest to the slot target (daily target split evenly
    across meals, half for snacks). An exhausted bucket falls back to the
    whole pool. A recipe is used at most once per plan; slots are left
    empty once every recipe is used.
    """
    pool = select_pool(recipes, params)
    buckets = bucket_by_dish_type(pool)
    layout = MEAL_LAYOUTS[params.meal_count]
    per_meal = params.target_calories / params.meal_count

    used: set = set()
    selected: List[SelectedMeal] = []

    for day_index in range(params.days):
        day = params.start_date + timedelta(days=day_index)
        for meal_type in layout:
            target = per_meal / 2 if meal_type == MealType.SNACK else per_meal
            recipe = pick_closest(buckets[meal_type], target, used)
            if recipe is None:
                recipe = pick_closest(pool, target, used)
            if recipe is None:
                logger.warning("No recipe left for %s on %s", meal_type.value, day)
                continue
            used.add(recipe.get("id"))
            selected.append(SelectedMeal(recipe=recipe, meal_type=meal_type, day=day))

    return selected


def nutrition_summary(recipes: Sequence[Recipe]) -> Dict[str, float]:
    totals = {"calories": 0.0, "protein": 0.0, "carbs": 0.0, "fat": 0.0}
    for recipe in recipes:
        totals["calories"] += nutrient_amount(recipe, "calories", "energy") or 0
        totals["protein"] += nutrient_amount(recipe, "protein") or 0
        totals["carbs"] += nutrient_amount(recipe, "carbohydrates", "carbs") or 0
        totals["fat"] += nutrient_amount(recipe, "fat") or 0
    return {k: round(v, 1) for k, v in totals.items()}


def to_meal(recipe: Recipe, meal_id: str, meal_type: MealType, day: date) -> Dict[str, Any]:
    return {
        "id": meal_id,
        "recipe_id": int(recipe["id"]),
        "meal_type": meal_type.value,
        "title": recipe.get("title") or f"Recipe {recipe['id']}",
        "image_url": recipe.get("image"),
        "ready_in_minutes": recipe.get("readyInMinutes"),
        "servings": recipe.get("servings"),
        "date": day.isoformat(),
    }


def _next_meal_index(meals: Sequence[Dict[str, Any]]) -> int:
    highest = -1
    for meal in meals:
        suffix = str(meal.get("id", "")).rsplit("_", 1)[-1]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest + 1


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class PlannerService:
    """
    Meal plan generation and editing.

    - resolves plan parameters from the request, stored preferences and defaults
    - fetches candidates from the recipe provider
    - filters, buckets by meal type and picks by calorie target
    - stores the plan with its meals in a JSON document
    """

    def __init__(self, db: Session, provider=None):
        self.db: Session = db
        self.provider = provider
        self.plans = MealPlanRepository(db)

    def resolve_parameters(
        self, user: AppUser, request: GeneratePlanRequest
    ) -> PlanParameters:
        """Request values win, then stored preferences, then defaults."""
        prefs = user.preferences if request.use_user_preferences else None
        overrides = request.preferences
        goals = (prefs.goals or {}) if prefs else {}

        exclude = list(request.exclude)
        if prefs:
            exclude += list(prefs.allergies or []) + list(prefs.dislikes or [])

        cuisines = (overrides.cuisines if overrides else None) or (
            list(prefs.cuisine_preferences or []) if prefs else []
        )

        return PlanParameters(
            time_frame=request.time_frame,
            start_date=request.date or date.today(),
            meal_count=(overrides.meal_count if overrides else None)
            or (prefs.meal_count if prefs else None)
            or settings.default_meal_count,
            target_calories=request.target_calories
            or goals.get("target_calories")
            or settings.default_target_calories,
            max_ready_time=(overrides.ready_time if overrides else None)
            or (prefs.max_prep_time if prefs else None)
            or settings.default_max_ready_time,
            diet=normalize_diet(request.diet or (prefs.diet if prefs else None)),
            exclude=_dedupe(exclude),
            cuisines=_dedupe(cuisines),
        )

    def generate_plan(self, user: AppUser, request: GeneratePlanRequest) -> MealPlan:
        params = self.resolve_parameters(user, request)
        logger.info(
            "Generating %s plan for user %s: meals=%d calories=%s diet=%s",
            params.time_frame.value,
            user.user_id,
            params.meal_count,
            params.target_calories,
            params.diet,
        )

        result = self.provider.search_recipes(
            RecipeSearchParams(
                diet=params.diet,
                cuisines=params.cuisines,
                exclude_ingredients=params.exclude,
                max_ready_time=params.max_ready_time,
                number=params.candidate_count,
            )
        )
        candidates = [r for r in result.get("results") or [] if r.get("id") is not None]
        if not candidates:
            raise NotFoundError(
                "No recipes found matching your criteria. Try relaxing some constraints."
            )
        logger.info("Found %d candidate recipes", len(candidates))

        selected = select_meals(candidates, params)
        meals = [
            to_meal(s.recipe, f"{s.recipe['id']}_{index}", s.meal_type, s.day)
            for index, s in enumerate(selected)
        ]

        plan = MealPlan(
            user_id=user.user_id,
            start_date=params.start_date,
            end_date=params.end_date,
            plan_data={
                "time_frame": params.time_frame.value,
                "meals": meals,
                "nutrition_summary": nutrition_summary([s.recipe for s in selected]),
            },
            is_active=True,
        )
        plan = self.plans.create(plan)
        logger.info("Meal plan %s created with %d meals", plan.plan_id, len(meals))
        return plan

    def list_plans(self, user_id: uuid.UUID) -> List[MealPlan]:
        return self.plans.get_by_user_id(user_id)

    def get_plan(self, user_id: uuid.UUID, plan_id: uuid.UUID) -> MealPlan:
        plan = self.plans.get_by_id_and_user(plan_id, user_id)
        if plan is None:
            raise NotFoundError(f"Meal plan {plan_id} not found")
        return plan

    def plans_for_date(self, user_id: uuid.UUID, on: date) -> List[MealPlan]:
        return self.plans.get_covering_date(user_id, on)

    def get_calendar(self, user_id: uuid.UUID, plan_id: uuid.UUID) -> MealCalendar:
        plan = self.get_plan(user_id, plan_id)
        return group_meals_by_date(plan.meals, plan.start_date)

    def add_recipe(
        self, user_id: uuid.UUID, plan_id: uuid.UUID, request: AddMealRequest
    ) -> Dict[str, Any]:
        """
        Put a recipe into a plan slot.

        A meal with the same type on the same date is replaced.
        Returns the new meal.
        """
        plan = self.get_plan(user_id, plan_id)
        day = request.date or plan.start_date
        if not (plan.start_date <= day <= plan.end_date):
            raise ServiceValidationError(
                f"Date {day} is outside the plan range "
                f"{plan.start_date} to {plan.end_date}"
            )

        recipe = self.provider.get_recipe_information(request.recipe_id)
        meals = plan.meals
        meal = to_meal(
            recipe,
            f"{request.recipe_id}_{_next_meal_index(meals)}",
            request.meal_type,
            day,
        )

        day_iso = day.isoformat()
        kept = [
            m
            for m in meals
            if not (
                m.get("meal_type") == meal["meal_type"]
                and (m.get("date") or plan.start_date.isoformat()) == day_iso
            )
        ]
        kept.append(meal)

        plan.plan_data = dict(plan.plan_data or {}, meals=kept)
        self.plans.update(plan)
        logger.info("Recipe %s added to plan %s", request.recipe_id, plan_id)
        return meal

    def remove_meal(self, user_id: uuid.UUID, meal_id: str) -> MealPlan:
        """Remove a meal by id from whichever of the user's plans holds it."""
        for plan in self.plans.get_by_user_id(user_id):
            meals = plan.meals
            kept = [m for m in meals if str(m.get("id")) != meal_id]
            if len(kept) != len(meals):
                plan.plan_data = dict(plan.plan_data or {}, meals=kept)
                self.plans.update(plan)
                logger.info("Meal %s removed from plan %s", meal_id, plan.plan_id)
                return plan

        raise NotFoundError("Meal not found in any meal plan")

    def update_plan(
        self, user_id: uuid.UUID, plan_id: uuid.UUID, request: PlanUpdateRequest
    ) -> MealPlan:
        plan = self.get_plan(user_id, plan_id)
        for key, value in request.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(plan, key, value)
        return self.plans.update(plan)

    def delete_plan(self, user_id: uuid.UUID, plan_id: uuid.UUID) -> None:
        if not self.plans.delete_by_id_and_user(plan_id, user_id):
            raise NotFoundError(f"Meal plan {plan_id} not found")
        logger.info("Meal plan %s deleted", plan_id)
