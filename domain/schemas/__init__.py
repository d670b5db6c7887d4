"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.profile_schemas import (
    NutritionGoals,
    PreferencesUpdate,
    PreferencesResponse,
    ProfileUpdateRequest,
    ProfileResponse,
    UserProfileResponse,
)
from domain.schemas.plan_schemas import (
    GeneratePlanRequest,
    PlanPreferences,
    AddMealRequest,
    PlanUpdateRequest,
    Meal,
    NutritionSummary,
    PlanSummaryResponse,
    PlanResponse,
    PlanForDateResponse,
    PlansForDateResponse,
    CalendarResponse,
    MealRemovedResponse,
)
from domain.schemas.recipe_schemas import (
    RecipeSearchParams,
    RecipeSearchResponse,
    RecipeDetailResponse,
    SaveRecipeRequest,
    SaveRecipeResponse,
    SavedStatusResponse,
)
from domain.schemas.shopping_schemas import (
    ShoppingListCreate,
    ShoppingListUpdate,
    GenerateShoppingListRequest,
    ShoppingListItemCreate,
    ShoppingListItemUpdate,
    ShoppingListItemResponse,
    GenerationWarning,
    ShoppingListSummaryResponse,
    ShoppingListResponse,
)

__all__ = [
    # Profile schemas
    "NutritionGoals",
    "PreferencesUpdate",
    "PreferencesResponse",
    "ProfileUpdateRequest",
    "ProfileResponse",
    "UserProfileResponse",
    # Plan schemas
    "GeneratePlanRequest",
    "PlanPreferences",
    "AddMealRequest",
    "PlanUpdateRequest",
    "Meal",
    "NutritionSummary",
    "PlanSummaryResponse",
    "PlanResponse",
    "PlanForDateResponse",
    "PlansForDateResponse",
    "CalendarResponse",
    "MealRemovedResponse",
    # Recipe schemas
    "RecipeSearchParams",
    "RecipeSearchResponse",
    "RecipeDetailResponse",
    "SaveRecipeRequest",
    "SaveRecipeResponse",
    "SavedStatusResponse",
    # Shopping schemas
    "ShoppingListCreate",
    "ShoppingListUpdate",
    "GenerateShoppingListRequest",
    "ShoppingListItemCreate",
    "ShoppingListItemUpdate",
    "ShoppingListItemResponse",
    "GenerationWarning",
    "ShoppingListSummaryResponse",
    "ShoppingListResponse",
]
