"""
Meal Plan Repository - Data access layer for meal plan operations
"""

from datetime import date
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import MealPlan


class MealPlanRepository(BaseRepository[MealPlan]):
    """Repository for meal plan data access"""

    def __init__(self, db: Session):
        super().__init__(db, MealPlan)

    def get_by_id(self, plan_id: UUID) -> Optional[MealPlan]:
        """Get meal plan by ID"""
        return self.db.query(MealPlan).filter(MealPlan.plan_id == plan_id).first()

    def get_by_id_and_user(self, plan_id: UUID, user_id: UUID) -> Optional[MealPlan]:
        """Get meal plan by ID for specific user"""
        return (
            self.db.query(MealPlan)
            .filter(MealPlan.plan_id == plan_id, MealPlan.user_id == user_id)
            .first()
        )

    def get_by_user_id(self, user_id: UUID) -> List[MealPlan]:
        """Get all plans for a user, newest first"""
        return (
            self.db.query(MealPlan)
            .filter(MealPlan.user_id == user_id)
            .order_by(MealPlan.created_at.desc(), MealPlan.start_date.desc())
            .all()
        )

    def get_covering_date(self, user_id: UUID, on: date) -> List[MealPlan]:
        """Get a user's plans whose date range includes ``on``"""
        return (
            self.db.query(MealPlan)
            .filter(
                MealPlan.user_id == user_id,
                MealPlan.start_date <= on,
                MealPlan.end_date >= on,
            )
            .order_by(MealPlan.created_at.desc())
            .all()
        )

    def delete_by_id_and_user(self, plan_id: UUID, user_id: UUID) -> bool:
        """Delete meal plan (with authorization check)"""
        plan = self.get_by_id_and_user(plan_id, user_id)
        if plan is None:
            return False
        self.remove(plan)
        return True
