"""API routes for shopping list management."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from api.dependencies import get_current_user, get_db, get_recipe_provider
from domain.mappers import ShoppingMapper
from domain.models import AppUser
from domain.schemas.shopping_schemas import (
    GenerateShoppingListRequest,
    ShoppingListCreate,
    ShoppingListItemCreate,
    ShoppingListItemResponse,
    ShoppingListItemUpdate,
    ShoppingListResponse,
    ShoppingListSummaryResponse,
    ShoppingListUpdate,
)
from services.shopping_service import ShoppingService

router = APIRouter(prefix="/shopping-lists", tags=["Shopping Lists"])
logger = logging.getLogger("plateplan.api.shopping")


@router.get("", response_model=List[ShoppingListSummaryResponse])
def list_shopping_lists(
    include_archived: bool = Query(default=False),
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    lists = ShoppingService.list_for_user(db, user.user_id, include_archived)
    return [ShoppingMapper.to_summary(sl) for sl in lists]


@router.post("", response_model=ShoppingListResponse, status_code=status.HTTP_201_CREATED)
def create_shopping_list(
    body: ShoppingListCreate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create an empty list for manually added items."""
    shopping_list = ShoppingService.create_list(db, user.user_id, body)
    return ShoppingMapper.to_response(shopping_list)


@router.post("/generate", response_model=ShoppingListResponse)
def generate_shopping_list(
    body: GenerateShoppingListRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    provider=Depends(get_recipe_provider),
):
    """
    Build the shopping list of a meal plan.

    Ingredients of all planned meals are merged by name and unit and
    grouped by aisle. Running it again replaces the generated items and
    keeps items added by hand. Recipes whose ingredients could not be
    fetched are listed in ``warnings``.

    Example request:
    ```json
    {
        "meal_plan_id": "123e4567-e89b-12d3-a456-426614174000"
    }
    ```
    """
    shopping_list, warnings = ShoppingService.generate_for_plan(
        db, provider, user, body.meal_plan_id, name=body.name
    )
    return ShoppingMapper.to_response(shopping_list, warnings)


@router.get("/{list_id}", response_model=ShoppingListResponse)
def get_shopping_list(
    list_id: UUID, user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    shopping_list = ShoppingService.get_list(db, user.user_id, list_id)
    return ShoppingMapper.to_response(shopping_list)


@router.patch("/{list_id}", response_model=ShoppingListResponse)
def update_shopping_list(
    list_id: UUID,
    body: ShoppingListUpdate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Rename or archive a list."""
    shopping_list = ShoppingService.update_list(db, user.user_id, list_id, body)
    return ShoppingMapper.to_response(shopping_list)


@router.delete("/{list_id}")
def delete_shopping_list(
    list_id: UUID, user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    ShoppingService.delete_list(db, user.user_id, list_id)
    return {"status": "ok", "deleted": str(list_id)}


@router.post(
    "/{list_id}/items",
    response_model=ShoppingListResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_item(
    list_id: UUID,
    body: ShoppingListItemCreate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add an item by hand; the aisle is guessed from the name when omitted."""
    shopping_list = ShoppingService.add_item(db, user.user_id, list_id, body)
    return ShoppingMapper.to_response(shopping_list)


@router.patch("/{list_id}/items/{item_id}", response_model=ShoppingListItemResponse)
def update_item(
    list_id: UUID,
    item_id: UUID,
    body: ShoppingListItemUpdate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = ShoppingService.update_item(db, user.user_id, list_id, item_id, body)
    return ShoppingListItemResponse.model_validate(item)


@router.post("/{list_id}/items/{item_id}/toggle", response_model=ShoppingListItemResponse)
def toggle_item(
    list_id: UUID,
    item_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Flip an item's purchased flag."""
    item = ShoppingService.toggle_item(db, user.user_id, list_id, item_id)
    return ShoppingListItemResponse.model_validate(item)


@router.delete("/{list_id}/items/{item_id}")
def delete_item(
    list_id: UUID,
    item_id: UUID,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    ShoppingService.delete_item(db, user.user_id, list_id, item_id)
    return {"status": "ok", "deleted": str(item_id)}


@router.post("/{list_id}/clear-completed", response_model=ShoppingListResponse)
def clear_completed(
    list_id: UUID, user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Delete every purchased item of the list."""
    shopping_list = ShoppingService.clear_completed(db, user.user_id, list_id)
    return ShoppingMapper.to_response(shopping_list)
