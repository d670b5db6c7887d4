"""
Saved Recipe Repository - Data access layer for recipe bookmarks
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import SavedRecipe


class SavedRecipeRepository(BaseRepository[SavedRecipe]):
    """Repository for saved recipe data access"""

    def __init__(self, db: Session):
        super().__init__(db, SavedRecipe)

    def get(self, user_id: UUID, recipe_id: int) -> Optional[SavedRecipe]:
        """Get a bookmark by its composite key"""
        return (
            self.db.query(SavedRecipe)
            .filter(SavedRecipe.user_id == user_id, SavedRecipe.recipe_id == recipe_id)
            .first()
        )

    def get_by_user_id(self, user_id: UUID) -> List[SavedRecipe]:
        """Get a user's bookmarks, most recently saved first"""
        return (
            self.db.query(SavedRecipe)
            .filter(SavedRecipe.user_id == user_id)
            .order_by(SavedRecipe.saved_at.desc())
            .all()
        )

    def exists(self, user_id: UUID, recipe_id: int) -> bool:
        return self.get(user_id, recipe_id) is not None

    def delete(self, user_id: UUID, recipe_id: int) -> bool:
        """Remove a bookmark; returns False when it did not exist"""
        result = (
            self.db.query(SavedRecipe)
            .filter(SavedRecipe.user_id == user_id, SavedRecipe.recipe_id == recipe_id)
            .delete()
        )
        self.db.commit()
        return result > 0
