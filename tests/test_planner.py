"""
Tests for meal plan generation and editing.

Selection rules:
- candidates are filtered by diet and ready time, relaxed when too few remain
- recipes are bucketed by dish type into breakfast/lunch/dinner/snack
- each slot takes the unused recipe closest to its calorie target
- a recipe appears at most once per plan
"""

from datetime import date

import pytest

from domain.enums import MealType, TimeFrame
from services.planner_service import (
    PlanParameters,
    bucket_by_dish_type,
    matches_diet,
    normalize_diet,
    pick_closest,
    recipe_calories,
    select_meals,
    select_pool,
)
from test_fixtures import (
    API,
    CHICKPEA_SALAD,
    GARLIC_PASTA,
    HUMMUS,
    OATMEAL,
    DEFAULT_RECIPES,
    auth_headers,
    client,
    create_plan,
    make_recipe,
    provider,
    unique_subject,
)


def _params(**overrides) -> PlanParameters:
    values = dict(
        time_frame=TimeFrame.DAY,
        start_date=date(2026, 3, 2),
        meal_count=3,
        target_calories=2000,
        max_ready_time=60,
    )
    values.update(overrides)
    return PlanParameters(**values)


# =============================================================================
# PARAMETERS AND FILTERING
# =============================================================================


def test_plan_parameters_day_and_week():
    day = _params()
    week = _params(time_frame=TimeFrame.WEEK)

    assert day.days == 1 and day.end_date == date(2026, 3, 2)
    assert week.days == 7 and week.end_date == date(2026, 3, 8)
    assert day.candidate_count == 60
    assert week.candidate_count == 210


def test_normalize_diet_aliases():
    assert normalize_diet("Gluten-Free") == "gluten free"
    assert normalize_diet("none") is None
    assert normalize_diet(None) is None
    assert normalize_diet("Vegan") == "vegan"


def test_matches_diet():
    assert matches_diet(CHICKPEA_SALAD, "vegetarian")
    assert matches_diet(OATMEAL, "vegetarian")
    assert not matches_diet(OATMEAL, "vegan")
    assert matches_diet(CHICKPEA_SALAD, "gluten-free")
    # Recipes without declared diets are not excluded
    assert matches_diet(GARLIC_PASTA, "vegan")


def test_select_pool_strict_when_enough_match():
    pool = select_pool(DEFAULT_RECIPES, _params(diet="vegan"))
    assert OATMEAL not in pool
    assert len(pool) == 3


def test_select_pool_relaxes_diet_and_ready_time():
    recipes = [
        make_recipe(1, diets=["vegetarian"], ready_in_minutes=20),
        make_recipe(2, diets=["paleo"], ready_in_minutes=80),
        make_recipe(3, diets=["vegan"], ready_in_minutes=85),
    ]

    pool = select_pool(recipes, _params(diet="vegan", meal_count=2))

    # Strict: nothing vegan within 60 minutes; lenient: any diet within 90
    assert [r["id"] for r in pool] == [1, 2, 3]


def test_select_pool_falls_back_to_all_candidates():
    recipes = [make_recipe(i, ready_in_minutes=200) for i in (1, 2, 3)]
    pool = select_pool(recipes, _params())
    assert len(pool) == 3


# =============================================================================
# BUCKETING AND PICKING
# =============================================================================


def test_bucket_by_dish_type():
    buckets = bucket_by_dish_type(DEFAULT_RECIPES)

    assert buckets[MealType.BREAKFAST] == [OATMEAL]
    assert buckets[MealType.LUNCH] == [CHICKPEA_SALAD]
    assert buckets[MealType.DINNER] == [GARLIC_PASTA]
    assert buckets[MealType.SNACK] == [HUMMUS]


def test_main_courses_balance_lunch_and_dinner():
    mains = [make_recipe(i, dish_types=["main course"]) for i in (1, 2, 3)]

    buckets = bucket_by_dish_type(mains)

    assert [r["id"] for r in buckets[MealType.LUNCH]] == [1, 3]
    assert [r["id"] for r in buckets[MealType.DINNER]] == [2]


def test_untyped_recipes_bucket_by_ready_time():
    quick = make_recipe(1, ready_in_minutes=10)
    medium = make_recipe(2, ready_in_minutes=25)
    slow = make_recipe(3, ready_in_minutes=50)

    buckets = bucket_by_dish_type([quick, medium, slow])

    assert buckets[MealType.BREAKFAST] == [quick]
    assert buckets[MealType.LUNCH] == [medium]
    assert buckets[MealType.DINNER] == [slow]


def test_recipe_calories_guesses_without_nutrition():
    assert recipe_calories(OATMEAL) == 410
    assert recipe_calories(make_recipe(1, dish_types=["lunch"])) == 600
    assert recipe_calories(make_recipe(2, ready_in_minutes=20)) == 200


def test_pick_closest_skips_used_and_keeps_order_on_ties():
    a = make_recipe(1, calories=500)
    b = make_recipe(2, calories=700)
    c = make_recipe(3, calories=700)

    assert pick_closest([a, b, c], 650, set())["id"] == 2
    assert pick_closest([a, b, c], 650, {2})["id"] == 3
    assert pick_closest([a], 650, {1}) is None


def test_select_meals_day_plan():
    selected = select_meals(DEFAULT_RECIPES, _params())

    assert [(s.meal_type, s.recipe["id"]) for s in selected] == [
        (MealType.BREAKFAST, OATMEAL["id"]),
        (MealType.LUNCH, CHICKPEA_SALAD["id"]),
        (MealType.DINNER, GARLIC_PASTA["id"]),
    ]
    assert all(s.day == date(2026, 3, 2) for s in selected)


def test_select_meals_snack_slot_uses_half_target():
    snack_light = make_recipe(10, calories=250, dish_types=["snack"])
    snack_heavy = make_recipe(11, calories=500, dish_types=["snack"])
    recipes = DEFAULT_RECIPES[:3] + [snack_heavy, snack_light]

    selected = select_meals(recipes, _params(meal_count=4, target_calories=2000))

    snack = [s for s in selected if s.meal_type == MealType.SNACK][0]
    assert snack.recipe["id"] == 10


def test_select_meals_never_repeats_a_recipe():
    selected = select_meals(DEFAULT_RECIPES, _params(time_frame=TimeFrame.WEEK))

    ids = [s.recipe["id"] for s in selected]
    assert len(ids) == len(set(ids)) == 4
    assert {s.day for s in selected} == {date(2026, 3, 2), date(2026, 3, 3)}


def test_select_meals_empty_bucket_falls_back_to_pool():
    selected = select_meals(DEFAULT_RECIPES, _params(diet="vegan"))

    ids = [s.recipe["id"] for s in selected]
    assert OATMEAL["id"] not in ids
    assert selected[0].meal_type == MealType.BREAKFAST
    assert selected[0].recipe["id"] == GARLIC_PASTA["id"]


# =============================================================================
# API: GENERATION
# =============================================================================


def test_generate_day_plan(client, provider):
    headers = auth_headers(unique_subject())

    plan = create_plan(client, headers)

    assert plan["time_frame"] == "day"
    assert plan["start_date"] == plan["end_date"] == "2026-03-02"
    assert [m["id"] for m in plan["meals"]] == ["638343_0", "794349_1", "716429_2"]
    assert [m["meal_type"] for m in plan["meals"]] == ["breakfast", "lunch", "dinner"]
    assert plan["nutrition_summary"]["calories"] == 1570
    assert plan["nutrition_summary"]["protein"] == 42

    params = provider.search_calls[-1]
    assert params.number == 60
    assert params.max_ready_time == 60


def test_generate_week_plan(client, provider):
    plan = create_plan(client, auth_headers(unique_subject()), time_frame="week")

    assert plan["time_frame"] == "week"
    assert plan["end_date"] == "2026-03-08"
    assert provider.search_calls[-1].number == 210


def test_generate_uses_stored_preferences(client, provider):
    headers = auth_headers(unique_subject())
    response = client.put(
        f"{API}/users/me/preferences",
        json={
            "allergies": ["Peanuts"],
            "dislikes": ["olives"],
            "meal_count": 2,
            "goals": {"target_calories": 1800},
        },
        headers=headers,
    )
    assert response.status_code == 200

    plan = create_plan(client, headers, exclude=["mushrooms"])

    params = provider.search_calls[-1]
    assert params.exclude_ingredients == ["mushrooms", "peanuts", "olives"]
    assert params.number == 40
    assert len(plan["meals"]) == 2


def test_generate_can_ignore_stored_preferences(client, provider):
    headers = auth_headers(unique_subject())
    client.put(
        f"{API}/users/me/preferences",
        json={"allergies": ["peanuts"], "meal_count": 2},
        headers=headers,
    )

    plan = create_plan(client, headers, use_user_preferences=False)

    assert provider.search_calls[-1].exclude_ingredients == []
    assert len(plan["meals"]) == 3


def test_generate_request_overrides(client, provider):
    plan = create_plan(
        client,
        auth_headers(unique_subject()),
        preferences={"meal_count": 1, "ready_time": 45, "cuisines": ["Italian"]},
    )

    params = provider.search_calls[-1]
    assert params.max_ready_time == 45
    assert params.cuisines == ["italian"]
    assert len(plan["meals"]) == 1


def test_generate_without_candidates_returns_404(client, provider):
    provider.recipes.clear()

    response = client.post(
        f"{API}/mealplans/generate",
        json={"time_frame": "day"},
        headers=auth_headers(unique_subject()),
    )

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_generate_rejects_invalid_time_frame(client):
    response = client.post(
        f"{API}/mealplans/generate",
        json={"time_frame": "month"},
        headers=auth_headers(unique_subject()),
    )
    assert response.status_code == 400


# =============================================================================
# API: READING
# =============================================================================


def test_list_and_get_plans(client):
    headers = auth_headers(unique_subject())
    first = create_plan(client, headers)
    second = create_plan(client, headers, date="2026-03-09")

    listed = client.get(f"{API}/mealplans", headers=headers).json()
    assert {p["plan_id"] for p in listed} == {first["plan_id"], second["plan_id"]}

    fetched = client.get(f"{API}/mealplans/{first['plan_id']}", headers=headers)
    assert fetched.status_code == 200
    assert fetched.json()["meals"] == first["meals"]


def test_plans_are_private(client):
    plan = create_plan(client, auth_headers(unique_subject("owner")))

    response = client.get(
        f"{API}/mealplans/{plan['plan_id']}",
        headers=auth_headers(unique_subject("other")),
    )
    assert response.status_code == 404


def test_plans_for_date(client):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers)

    covered = client.get(f"{API}/mealplans/date/2026-03-02", headers=headers).json()
    assert covered["date"] == "2026-03-02"
    assert [p["plan_id"] for p in covered["meal_plans"]] == [plan["plan_id"]]
    assert covered["meal_plans"][0]["total_meals"] == 3

    empty = client.get(f"{API}/mealplans/date/2026-03-05", headers=headers).json()
    assert empty["meal_plans"] == []


def test_calendar_groups_meals_by_day(client):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers, time_frame="week")

    response = client.get(f"{API}/mealplans/{plan['plan_id']}/calendar", headers=headers)

    assert response.status_code == 200
    calendar = response.json()
    assert list(calendar["days"]) == ["2026-03-02", "2026-03-03"]
    assert len(calendar["days"]["2026-03-02"]) == 3
    assert calendar["start_date"] == "2026-03-02"
    assert calendar["end_date"] == "2026-03-03"


# =============================================================================
# API: EDITING
# =============================================================================


def test_add_recipe_replaces_same_slot(client):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers)

    response = client.post(
        f"{API}/mealplans/{plan['plan_id']}/meals",
        json={"recipe_id": HUMMUS["id"], "meal_type": "Lunch"},
        headers=headers,
    )

    assert response.status_code == 201
    meal = response.json()
    assert meal["id"] == f"{HUMMUS['id']}_3"
    assert meal["meal_type"] == "lunch"
    assert meal["date"] == "2026-03-02"

    updated = client.get(f"{API}/mealplans/{plan['plan_id']}", headers=headers).json()
    lunches = [m for m in updated["meals"] if m["meal_type"] == "lunch"]
    assert [m["recipe_id"] for m in lunches] == [HUMMUS["id"]]
    assert len(updated["meals"]) == 3


def test_add_recipe_outside_plan_range(client):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers)

    response = client.post(
        f"{API}/mealplans/{plan['plan_id']}/meals",
        json={"recipe_id": HUMMUS["id"], "meal_type": "snack", "date": "2026-03-04"},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "SERVICE_VALIDATION_ERROR"


def test_add_unknown_recipe(client):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers)

    response = client.post(
        f"{API}/mealplans/{plan['plan_id']}/meals",
        json={"recipe_id": 999999, "meal_type": "snack"},
        headers=headers,
    )
    assert response.status_code == 404


def test_remove_meal(client):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers)

    response = client.delete(f"{API}/mealplans/meals/638343_0", headers=headers)
    assert response.status_code == 200
    assert response.json()["updated_plan_id"] == plan["plan_id"]

    updated = client.get(f"{API}/mealplans/{plan['plan_id']}", headers=headers).json()
    assert [m["id"] for m in updated["meals"]] == ["794349_1", "716429_2"]

    again = client.delete(f"{API}/mealplans/meals/638343_0", headers=headers)
    assert again.status_code == 404


def test_update_plan_flags(client):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers)

    response = client.patch(
        f"{API}/mealplans/{plan['plan_id']}",
        json={"is_favorite": True, "is_active": False},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()["is_favorite"] is True
    assert response.json()["is_active"] is False


def test_delete_plan(client):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers)

    response = client.delete(f"{API}/mealplans/{plan['plan_id']}", headers=headers)
    assert response.json() == {"status": "ok", "deleted": plan["plan_id"]}

    assert client.get(f"{API}/mealplans/{plan['plan_id']}", headers=headers).status_code == 404
    assert client.delete(f"{API}/mealplans/{plan['plan_id']}", headers=headers).status_code == 404
