"""Services package - Business logic layer"""

from services.profile_service import ProfileService
from services.shopping_service import ShoppingService
from services.planner_service import PlannerService

# Note: recipe_service, calendar_service and ingredient_aggregator hold plain functions

__all__ = [
    "ProfileService",
    "ShoppingService",
    "PlannerService",
]
