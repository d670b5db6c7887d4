"""
Shopping list models.
"""

from sqlalchemy import (
    Column,
    Text,
    TIMESTAMP,
    ForeignKey,
    Boolean,
    Date,
    Float,
    Integer,
    JSON,
    Uuid,
    Enum as SQLEnum,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base
from domain.enums import ItemSource


class ShoppingList(Base):
    """Shopping list, optionally generated from a meal plan"""

    __tablename__ = "shopping_list"

    list_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid,
        ForeignKey("app_user.user_id", ondelete="CASCADE"),
        nullable=False,
    )
    plan_id = Column(
        Uuid, ForeignKey("meal_plan.plan_id", ondelete="SET NULL"), nullable=True
    )
    name = Column(Text, nullable=False)
    start_date = Column(Date)
    end_date = Column(Date)
    is_archived = Column(Boolean, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("AppUser", back_populates="shopping_lists")
    meal_plan = relationship("MealPlan", back_populates="shopping_lists")
    items = relationship(
        "ShoppingListItem",
        back_populates="shopping_list",
        cascade="all, delete-orphan",
        order_by="ShoppingListItem.position",
    )


class ShoppingListItem(Base):
    """Line item; quantities are copies taken at generation time"""

    __tablename__ = "shopping_list_item"

    item_id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    list_id = Column(
        Uuid,
        ForeignKey("shopping_list.list_id", ondelete="CASCADE"),
        nullable=False,
    )
    name = Column(Text, nullable=False)
    amount = Column(Float, nullable=False, default=0.0)
    unit = Column(Text, nullable=False, default="")
    aisle = Column(Text, nullable=False, default="Other")
    recipe_ids = Column(JSON, default=list)
    purchased = Column(Boolean, nullable=False, default=False)
    notes = Column(Text)
    added_by = Column(SQLEnum(ItemSource), nullable=False, default=ItemSource.USER)
    position = Column(Integer, nullable=False, default=0)

    shopping_list = relationship("ShoppingList", back_populates="items")
