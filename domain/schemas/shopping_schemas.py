"""Schemas for shopping lists and their items"""

from datetime import date, datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from domain.enums import ItemSource


class ShoppingListCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class ShoppingListUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    is_archived: Optional[bool] = None


class GenerateShoppingListRequest(BaseModel):
    meal_plan_id: UUID
    name: Optional[str] = Field(None, min_length=1, max_length=200)


class ShoppingListItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    amount: float = Field(1, ge=0)
    unit: str = Field("", max_length=50)
    aisle: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator("name", "unit")
    @classmethod
    def strip_text(cls, v):
        return v.strip()


class ShoppingListItemUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    amount: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = Field(None, max_length=50)
    aisle: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)
    purchased: Optional[bool] = None


class ShoppingListItemResponse(BaseModel):
    item_id: UUID
    name: str
    amount: float
    unit: str
    aisle: str
    recipe_ids: List[int]
    purchased: bool
    notes: Optional[str]
    added_by: ItemSource

    model_config = {"from_attributes": True}


class GenerationWarning(BaseModel):
    recipe_id: int
    title: Optional[str] = None
    message: str


class ShoppingListSummaryResponse(BaseModel):
    list_id: UUID
    name: str
    plan_id: Optional[UUID]
    start_date: Optional[date]
    end_date: Optional[date]
    is_archived: bool
    item_count: int
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class ShoppingListResponse(ShoppingListSummaryResponse):
    items: List[ShoppingListItemResponse]
    active_by_aisle: Dict[str, List[ShoppingListItemResponse]]
    completed: List[ShoppingListItemResponse]
    warnings: List[GenerationWarning] = Field(default_factory=list)
