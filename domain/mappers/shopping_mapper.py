"""
Shopping list domain mappers.
Handles transformation between ORM models and DTOs for shopping-related entities.
"""

from typing import List, Optional

from domain.models import ShoppingList
from domain.schemas.shopping_schemas import (
    ShoppingListResponse,
    ShoppingListSummaryResponse,
    ShoppingListItemResponse,
    GenerationWarning,
)
from services.ingredient_aggregator import partition_items, group_by_aisle


class ShoppingMapper:
    """Mapper for shopping list transformations."""

    @staticmethod
    def to_summary(shopping_list: ShoppingList) -> ShoppingListSummaryResponse:
        return ShoppingListSummaryResponse(
            list_id=shopping_list.list_id,
            name=shopping_list.name,
            plan_id=shopping_list.plan_id,
            start_date=shopping_list.start_date,
            end_date=shopping_list.end_date,
            is_archived=bool(shopping_list.is_archived),
            item_count=len(shopping_list.items),
            created_at=shopping_list.created_at,
            updated_at=shopping_list.updated_at,
        )

    @staticmethod
    def to_response(
        shopping_list: ShoppingList,
        warnings: Optional[List[GenerationWarning]] = None,
    ) -> ShoppingListResponse:
        """
        Convert ORM ShoppingList to ShoppingListResponse DTO.

        Active items are grouped by aisle in first-seen order; purchased
        items are listed separately.

        Args:
            shopping_list: ShoppingList ORM instance with items loaded
            warnings: per-recipe problems collected during generation

        Returns:
            ShoppingListResponse DTO with all list data
        """
        items = [
            ShoppingListItemResponse.model_validate(item)
            for item in shopping_list.items
        ]
        active, completed = partition_items(items)

        return ShoppingListResponse(
            **ShoppingMapper.to_summary(shopping_list).model_dump(),
            items=items,
            active_by_aisle=group_by_aisle(active),
            completed=completed,
            warnings=warnings or [],
        )
