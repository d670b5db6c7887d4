"""
Tests for shopping list generation and management.

Meal Plan to Shopping List Flow:
================================
1. User generates a meal plan (oatmeal, chickpea salad, garlic pasta)
2. System fetches each planned recipe's ingredients from the provider
3. Ingredients with the same name and unit are merged:
   - garlic: 3 cloves (salad) + 2 cloves (pasta) = 5 cloves
   - olive oil: 0.25 cup and 1 tbsp stay separate lines
4. Items are grouped by aisle; purchased items move to ``completed``
5. Regenerating replaces generated items and keeps items added by hand
"""

import uuid
from datetime import date

import httpx
import pytest

from adapters import SpoonacularAdapter
from app.exceptions import NotFoundError
from domain.enums import ItemSource
from domain.models import MealPlan, ShoppingListItem
from services.profile_service import ProfileService
from services.shopping_service import ShoppingService
from test_fixtures import (
    API,
    CHICKPEA_SALAD,
    GARLIC_PASTA,
    OATMEAL,
    auth_headers,
    client,
    create_plan,
    db_session,
    make_recipe,
    provider,
    unique_subject,
)


LISTS_URL = f"{API}/shopping-lists"


def _generate(client, headers, plan_id, **extra):
    response = client.post(
        f"{LISTS_URL}/generate", json={"meal_plan_id": plan_id, **extra}, headers=headers
    )
    assert response.status_code == 200, response.text
    return response.json()


def _lines(shopping_list):
    return {(i["name"], i["unit"]): i for i in shopping_list["items"]}


# =============================================================================
# GENERATION
# =============================================================================


def test_generate_merges_ingredients_by_name_and_unit(client):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers)

    shopping_list = _generate(client, headers, plan["plan_id"])

    lines = _lines(shopping_list)
    garlic = lines[("garlic", "cloves")]
    assert garlic["amount"] == 5
    assert garlic["recipe_ids"] == [CHICKPEA_SALAD["id"], GARLIC_PASTA["id"]]
    assert lines[("olive oil", "cup")]["amount"] == 0.25
    assert lines[("olive oil", "tbsp")]["amount"] == 1
    assert lines[("coconut milk", "ml")]["recipe_ids"] == [OATMEAL["id"]]
    assert len(shopping_list["items"]) == 7
    assert all(i["added_by"] == "system" for i in shopping_list["items"])

    assert shopping_list["plan_id"] == plan["plan_id"]
    assert shopping_list["start_date"] == plan["start_date"]
    assert shopping_list["warnings"] == []


def test_generate_groups_active_items_by_aisle(client):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers)

    shopping_list = _generate(client, headers, plan["plan_id"])

    by_aisle = shopping_list["active_by_aisle"]
    # Provider aisle first, keyword guess otherwise
    assert [i["name"] for i in by_aisle["Dairy & Eggs"]] == ["coconut milk"]
    assert {i["name"] for i in by_aisle["Produce"]} == {"garlic", "broccoli"}
    assert "Pasta and Rice" in by_aisle
    assert shopping_list["completed"] == []


def test_failed_recipe_becomes_warning(client, provider):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers)
    provider.failing.add(OATMEAL["id"])

    shopping_list = _generate(client, headers, plan["plan_id"])

    names = {i["name"] for i in shopping_list["items"]}
    assert names == {"garlic", "olive oil", "broccoli", "pasta"}
    assert len(shopping_list["items"]) == 5
    assert shopping_list["warnings"] == [
        {
            "recipe_id": OATMEAL["id"],
            "title": OATMEAL["title"],
            "message": "Ingredients unavailable: Error communicating with recipe service",
        }
    ]


def test_each_recipe_is_fetched_once(client, provider):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers)

    _generate(client, headers, plan["plan_id"])

    assert sorted(provider.detail_calls) == sorted(
        [OATMEAL["id"], CHICKPEA_SALAD["id"], GARLIC_PASTA["id"]]
    )


def test_regeneration_keeps_user_items(client):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers)
    first = _generate(client, headers, plan["plan_id"], name="Week 10")

    added = client.post(
        f"{LISTS_URL}/{first['list_id']}/items",
        json={"name": "Paper Towels", "amount": 2, "unit": "rolls"},
        headers=headers,
    )
    assert added.status_code == 201

    second = _generate(client, headers, plan["plan_id"])
    third = _generate(client, headers, plan["plan_id"])

    assert second["list_id"] == third["list_id"] == first["list_id"]
    assert second["name"] == "Week 10"
    assert len(second["items"]) == len(third["items"]) == 8
    user_items = [i for i in third["items"] if i["added_by"] == "user"]
    assert [i["name"] for i in user_items] == ["Paper Towels"]
    assert _lines(second)[("garlic", "cloves")]["amount"] == 5
    assert _lines(third)[("garlic", "cloves")]["amount"] == 5


def test_regeneration_reflects_plan_changes(client):
    headers = auth_headers(unique_subject())
    plan = create_plan(client, headers)
    _generate(client, headers, plan["plan_id"])

    client.delete(f"{API}/mealplans/meals/716429_2", headers=headers)
    shopping_list = _generate(client, headers, plan["plan_id"])

    lines = _lines(shopping_list)
    assert lines[("garlic", "cloves")]["amount"] == 3
    assert ("pasta", "g") not in lines
    assert ("olive oil", "tbsp") not in lines


def test_generate_for_unknown_plan(client):
    response = client.post(
        f"{LISTS_URL}/generate",
        json={"meal_plan_id": str(uuid.uuid4())},
        headers=auth_headers(unique_subject()),
    )
    assert response.status_code == 404


def test_generate_for_someone_elses_plan(client):
    plan = create_plan(client, auth_headers(unique_subject("owner")))

    response = client.post(
        f"{LISTS_URL}/generate",
        json={"meal_plan_id": plan["plan_id"]},
        headers=auth_headers(unique_subject("intruder")),
    )
    assert response.status_code == 404


# =============================================================================
# LIST CRUD
# =============================================================================


def test_create_manual_list(client):
    headers = auth_headers(unique_subject())

    response = client.post(LISTS_URL, json={"name": "Party supplies"}, headers=headers)

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Party supplies"
    assert body["plan_id"] is None
    assert body["items"] == []
    assert body["item_count"] == 0


def test_archived_lists_are_hidden_by_default(client):
    headers = auth_headers(unique_subject())
    kept = client.post(LISTS_URL, json={"name": "Groceries"}, headers=headers).json()
    old = client.post(LISTS_URL, json={"name": "Old"}, headers=headers).json()

    archived = client.patch(
        f"{LISTS_URL}/{old['list_id']}", json={"is_archived": True}, headers=headers
    )
    assert archived.json()["is_archived"] is True

    visible = client.get(LISTS_URL, headers=headers).json()
    assert [sl["list_id"] for sl in visible] == [kept["list_id"]]

    everything = client.get(
        LISTS_URL, params={"include_archived": True}, headers=headers
    ).json()
    assert {sl["list_id"] for sl in everything} == {kept["list_id"], old["list_id"]}


def test_rename_and_delete_list(client):
    headers = auth_headers(unique_subject())
    created = client.post(LISTS_URL, json={"name": "Groceries"}, headers=headers).json()
    url = f"{LISTS_URL}/{created['list_id']}"

    renamed = client.patch(url, json={"name": "Saturday market"}, headers=headers)
    assert renamed.json()["name"] == "Saturday market"

    assert client.delete(url, headers=headers).json()["deleted"] == created["list_id"]
    assert client.get(url, headers=headers).status_code == 404
    assert client.delete(url, headers=headers).status_code == 404


def test_lists_are_private(client):
    created = client.post(
        LISTS_URL, json={"name": "Mine"}, headers=auth_headers(unique_subject("owner"))
    ).json()
    other = auth_headers(unique_subject("other"))

    assert client.get(f"{LISTS_URL}/{created['list_id']}", headers=other).status_code == 404
    response = client.post(
        f"{LISTS_URL}/{created['list_id']}/items", json={"name": "milk"}, headers=other
    )
    assert response.status_code == 404


# =============================================================================
# ITEMS
# =============================================================================


def test_add_item_guesses_aisle(client):
    headers = auth_headers(unique_subject())
    created = client.post(LISTS_URL, json={"name": "Groceries"}, headers=headers).json()

    response = client.post(
        f"{LISTS_URL}/{created['list_id']}/items",
        json={"name": "  Whole Milk ", "amount": 1, "unit": "gallon"},
        headers=headers,
    )

    body = response.json()
    item = body["items"][0]
    assert item["name"] == "Whole Milk"
    assert item["aisle"] == "Dairy & Eggs"
    assert item["added_by"] == "user"
    assert item["recipe_ids"] == []
    assert list(body["active_by_aisle"]) == ["Dairy & Eggs"]


def test_add_item_keeps_given_aisle(client):
    headers = auth_headers(unique_subject())
    created = client.post(LISTS_URL, json={"name": "Groceries"}, headers=headers).json()

    body = client.post(
        f"{LISTS_URL}/{created['list_id']}/items",
        json={"name": "milk", "aisle": "Refrigerated"},
        headers=headers,
    ).json()

    assert body["items"][0]["aisle"] == "Refrigerated"
    assert body["items"][0]["amount"] == 1


def test_toggle_update_and_clear_completed(client):
    headers = auth_headers(unique_subject())
    created = client.post(LISTS_URL, json={"name": "Groceries"}, headers=headers).json()
    url = f"{LISTS_URL}/{created['list_id']}"
    client.post(f"{url}/items", json={"name": "eggs", "amount": 12}, headers=headers)
    body = client.post(f"{url}/items", json={"name": "bread"}, headers=headers).json()
    eggs, bread = body["items"]

    toggled = client.post(f"{url}/items/{eggs['item_id']}/toggle", headers=headers)
    assert toggled.json()["purchased"] is True

    updated = client.patch(
        f"{url}/items/{bread['item_id']}",
        json={"amount": 2, "unit": "loaves", "notes": "sourdough"},
        headers=headers,
    ).json()
    assert (updated["amount"], updated["unit"], updated["notes"]) == (2, "loaves", "sourdough")

    current = client.get(url, headers=headers).json()
    assert [i["name"] for i in current["completed"]] == ["eggs"]
    assert [i["name"] for i in current["active_by_aisle"]["Grains"]] == ["bread"]

    cleared = client.post(f"{url}/clear-completed", headers=headers).json()
    assert [i["name"] for i in cleared["items"]] == ["bread"]
    assert cleared["completed"] == []


def test_null_clears_notes_but_keeps_other_fields(client):
    headers = auth_headers(unique_subject())
    created = client.post(LISTS_URL, json={"name": "Groceries"}, headers=headers).json()
    url = f"{LISTS_URL}/{created['list_id']}"
    item = client.post(
        f"{url}/items",
        json={"name": "flour", "amount": 2, "notes": "whole wheat"},
        headers=headers,
    ).json()["items"][0]

    updated = client.patch(
        f"{url}/items/{item['item_id']}",
        json={"notes": None, "amount": None},
        headers=headers,
    ).json()

    assert updated["notes"] is None
    assert updated["amount"] == 2


def test_toggle_twice_restores_item(client):
    headers = auth_headers(unique_subject())
    created = client.post(LISTS_URL, json={"name": "Groceries"}, headers=headers).json()
    url = f"{LISTS_URL}/{created['list_id']}"
    item = client.post(f"{url}/items", json={"name": "rice"}, headers=headers).json()["items"][0]

    client.post(f"{url}/items/{item['item_id']}/toggle", headers=headers)
    again = client.post(f"{url}/items/{item['item_id']}/toggle", headers=headers)

    assert again.json()["purchased"] is False


def test_delete_item(client):
    headers = auth_headers(unique_subject())
    created = client.post(LISTS_URL, json={"name": "Groceries"}, headers=headers).json()
    url = f"{LISTS_URL}/{created['list_id']}"
    item = client.post(f"{url}/items", json={"name": "rice"}, headers=headers).json()["items"][0]

    response = client.delete(f"{url}/items/{item['item_id']}", headers=headers)
    assert response.json() == {"status": "ok", "deleted": item["item_id"]}

    assert client.get(url, headers=headers).json()["items"] == []
    assert client.delete(f"{url}/items/{item['item_id']}", headers=headers).status_code == 404


def test_item_must_belong_to_list(client):
    headers = auth_headers(unique_subject())
    first = client.post(LISTS_URL, json={"name": "A"}, headers=headers).json()
    second = client.post(LISTS_URL, json={"name": "B"}, headers=headers).json()
    item = client.post(
        f"{LISTS_URL}/{first['list_id']}/items", json={"name": "rice"}, headers=headers
    ).json()["items"][0]

    response = client.post(
        f"{LISTS_URL}/{second['list_id']}/items/{item['item_id']}/toggle", headers=headers
    )
    assert response.status_code == 404


# =============================================================================
# SERVICE
# =============================================================================


def test_service_generation_replaces_only_system_items(db_session, provider):
    user = ProfileService.get_or_create_user(db_session, unique_subject())
    plan = MealPlan(
        user_id=user.user_id,
        start_date=date(2026, 3, 2),
        end_date=date(2026, 3, 2),
        plan_data={
            "time_frame": "day",
            "meals": [
                {"id": "716429_0", "recipe_id": GARLIC_PASTA["id"], "meal_type": "dinner"},
                {"id": "716429_1", "recipe_id": GARLIC_PASTA["id"], "meal_type": "lunch"},
            ],
        },
    )
    db_session.add(plan)
    db_session.commit()

    shopping_list, warnings = ShoppingService.generate_for_plan(
        db_session, provider, user, plan.plan_id
    )
    assert warnings == []
    assert shopping_list.name == "Shopping list 2026-03-02"

    # Pasta is planned twice, so its ingredients count twice
    pasta = [i for i in shopping_list.items if i.name == "pasta"][0]
    assert pasta.amount == 400
    assert pasta.recipe_ids == [GARLIC_PASTA["id"]]
    assert provider.detail_calls == [GARLIC_PASTA["id"]]

    db_session.add(
        ShoppingListItem(
            list_id=shopping_list.list_id,
            name="napkins",
            amount=1,
            unit="pack",
            aisle="Household",
            added_by=ItemSource.USER,
            position=99,
        )
    )
    db_session.commit()

    shopping_list, _ = ShoppingService.generate_for_plan(
        db_session, provider, user, plan.plan_id
    )
    sources = [i.added_by for i in shopping_list.items]
    assert sources.count(ItemSource.USER) == 1
    assert sources.count(ItemSource.SYSTEM) == 3


def test_service_get_list_not_found(db_session):
    user = ProfileService.get_or_create_user(db_session, unique_subject())

    with pytest.raises(NotFoundError):
        ShoppingService.get_list(db_session, user.user_id, uuid.uuid4())


def _plan_with(db_session, user, *recipes):
    plan = MealPlan(
        user_id=user.user_id,
        start_date=date(2026, 3, 2),
        end_date=date(2026, 3, 2),
        plan_data={
            "time_frame": "day",
            "meals": [
                {"id": f"{r['id']}_{i}", "recipe_id": r["id"], "title": r["title"]}
                for i, r in enumerate(recipes)
            ],
        },
    )
    db_session.add(plan)
    db_session.commit()
    return plan


def test_recipe_without_ingredients_becomes_warning(db_session, provider):
    toast = make_recipe(111, "Plain Toast", calories=150, ingredients=[])
    provider.add(toast)
    user = ProfileService.get_or_create_user(db_session, unique_subject())
    plan = _plan_with(db_session, user, toast, GARLIC_PASTA)

    shopping_list, warnings = ShoppingService.generate_for_plan(
        db_session, provider, user, plan.plan_id
    )

    assert [(w.recipe_id, w.title, w.message) for w in warnings] == [
        (111, "Plain Toast", "No ingredients available")
    ]
    assert {i.name for i in shopping_list.items} == {"garlic", "olive oil", "pasta"}


def test_malformed_provider_responses_become_warnings(db_session):
    catalogue = {r["id"]: r for r in (OATMEAL, CHICKPEA_SALAD, GARLIC_PASTA)}

    def respond(request):
        recipe_id = int(request.url.path.split("/")[2])
        if recipe_id == OATMEAL["id"]:
            return httpx.Response(200, text="<html>upstream gateway page</html>")
        if recipe_id == CHICKPEA_SALAD["id"]:
            return httpx.Response(200, json=["not", "a", "recipe"])
        return httpx.Response(200, json=catalogue[recipe_id])

    adapter = SpoonacularAdapter(
        api_key="test-api-key",
        base_url="https://api.spoonacular.test",
        transport=httpx.MockTransport(respond),
    )
    user = ProfileService.get_or_create_user(db_session, unique_subject())
    plan = _plan_with(db_session, user, OATMEAL, CHICKPEA_SALAD, GARLIC_PASTA)

    shopping_list, warnings = ShoppingService.generate_for_plan(
        db_session, adapter, user, plan.plan_id
    )

    assert [w.recipe_id for w in warnings] == [OATMEAL["id"], CHICKPEA_SALAD["id"]]
    assert warnings[0].message == (
        "Ingredients unavailable: Recipe service returned an unreadable response"
    )
    assert warnings[1].message == (
        "Ingredients unavailable: Recipe service returned an unexpected response"
    )
    assert {(i.name, i.unit) for i in shopping_list.items} == {
        ("garlic", "cloves"),
        ("olive oil", "tbsp"),
        ("pasta", "g"),
    }
    assert OATMEAL["id"] not in adapter.cache
