"""
Shopping List Repository - Data access layer for shopping list operations
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.enums import ItemSource
from domain.models import ShoppingList, ShoppingListItem


class ShoppingListRepository(BaseRepository[ShoppingList]):
    """Repository for shopping list data access"""

    def __init__(self, db: Session):
        super().__init__(db, ShoppingList)

    def get_by_id(self, list_id: UUID) -> Optional[ShoppingList]:
        """Get shopping list by ID"""
        return (
            self.db.query(ShoppingList).filter(ShoppingList.list_id == list_id).first()
        )

    def get_by_user_id(
        self, user_id: UUID, include_archived: bool = False
    ) -> List[ShoppingList]:
        """Get all shopping lists for a user"""
        query = self.db.query(ShoppingList).filter(ShoppingList.user_id == user_id)
        if not include_archived:
            query = query.filter(ShoppingList.is_archived.is_(False))
        return query.order_by(ShoppingList.created_at.desc()).all()

    def get_by_id_and_user(
        self, list_id: UUID, user_id: UUID
    ) -> Optional[ShoppingList]:
        """Get shopping list by ID for specific user (authorization check)"""
        return (
            self.db.query(ShoppingList)
            .filter(ShoppingList.list_id == list_id, ShoppingList.user_id == user_id)
            .first()
        )

    def get_for_plan(self, plan_id: UUID, user_id: UUID) -> Optional[ShoppingList]:
        """Get the list generated from a meal plan, if any"""
        return (
            self.db.query(ShoppingList)
            .filter(ShoppingList.plan_id == plan_id, ShoppingList.user_id == user_id)
            .order_by(ShoppingList.created_at.asc())
            .first()
        )

    def delete_by_id_and_user(self, list_id: UUID, user_id: UUID) -> bool:
        """Delete shopping list (with authorization check)"""
        shopping_list = self.get_by_id_and_user(list_id, user_id)
        if shopping_list is None:
            return False
        self.remove(shopping_list)
        return True


class ShoppingListItemRepository(BaseRepository[ShoppingListItem]):
    """Repository for shopping list item data access"""

    def __init__(self, db: Session):
        super().__init__(db, ShoppingListItem)

    def get_by_id(self, item_id: UUID) -> Optional[ShoppingListItem]:
        """Get shopping list item by ID"""
        return (
            self.db.query(ShoppingListItem)
            .filter(ShoppingListItem.item_id == item_id)
            .first()
        )

    def get_in_list(self, list_id: UUID, item_id: UUID) -> Optional[ShoppingListItem]:
        """Get an item only if it belongs to the given list"""
        return (
            self.db.query(ShoppingListItem)
            .filter(
                ShoppingListItem.item_id == item_id,
                ShoppingListItem.list_id == list_id,
            )
            .first()
        )

    def next_position(self, list_id: UUID) -> int:
        current = (
            self.db.query(func.max(ShoppingListItem.position))
            .filter(ShoppingListItem.list_id == list_id)
            .scalar()
        )
        return 0 if current is None else current + 1

    def delete_system_items(self, list_id: UUID) -> int:
        """Delete generated items of a list (caller commits)"""
        return (
            self.db.query(ShoppingListItem)
            .filter(
                ShoppingListItem.list_id == list_id,
                ShoppingListItem.added_by == ItemSource.SYSTEM,
            )
            .delete(synchronize_session="fetch")
        )

    def delete_purchased(self, list_id: UUID) -> int:
        """Delete purchased items of a list"""
        removed = (
            self.db.query(ShoppingListItem)
            .filter(
                ShoppingListItem.list_id == list_id,
                ShoppingListItem.purchased.is_(True),
            )
            .delete(synchronize_session="fetch")
        )
        self.db.commit()
        return removed

    def bulk_create(self, items: List[ShoppingListItem]) -> List[ShoppingListItem]:
        """Create multiple shopping list items (caller commits)"""
        self.db.add_all(items)
        return items
