"""
Meal planning models.
"""

from sqlalchemy import Column, TIMESTAMP, ForeignKey, Date, Boolean, JSON, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class MealPlan(Base):
    """Date-ranged collection of planned meals.

    ``plan_data`` holds ``time_frame``, the ``meals`` list and a
    ``nutrition_summary``. Replace the whole dict when mutating it so the
    change is detected on flush.
    """

    __tablename__ = "meal_plan"

    plan_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    plan_data = Column(JSON, nullable=False)
    is_active = Column(Boolean, default=True)
    is_favorite = Column(Boolean, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("AppUser", back_populates="meal_plans")
    shopping_lists = relationship("ShoppingList", back_populates="meal_plan")

    @property
    def meals(self) -> list:
        return list((self.plan_data or {}).get("meals") or [])

    @property
    def time_frame(self):
        return (self.plan_data or {}).get("time_frame")

    @property
    def nutrition_summary(self):
        return (self.plan_data or {}).get("nutrition_summary")
