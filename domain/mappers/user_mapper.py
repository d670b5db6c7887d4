"""
User domain mappers.
Handles transformation between ORM models and DTOs for user-related entities.
"""

from typing import Optional

from domain.models import AppUser, UserPreferences
from domain.schemas.profile_schemas import (
    UserProfileResponse,
    ProfileResponse,
    PreferencesResponse,
    NutritionGoals,
)


class UserMapper:
    """Mapper for user-related transformations."""

    @staticmethod
    def to_response(user: AppUser) -> UserProfileResponse:
        """
        Convert ORM AppUser to UserProfileResponse DTO.

        Args:
            user: AppUser ORM instance with profile and preferences loaded

        Returns:
            UserProfileResponse DTO with profile and preferences
        """
        profile = None
        if user.profile:
            profile = ProfileResponse(
                name=user.profile.name, updated_at=user.profile.updated_at
            )

        return UserProfileResponse(
            user_id=user.user_id,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
            profile=profile,
            preferences=UserMapper.preferences_to_response(user.preferences),
        )

    @staticmethod
    def preferences_to_response(
        prefs: Optional[UserPreferences],
    ) -> Optional[PreferencesResponse]:
        """Convert ORM UserPreferences to PreferencesResponse DTO."""
        if prefs is None:
            return None

        return PreferencesResponse(
            diet=prefs.diet,
            allergies=list(prefs.allergies or []),
            dislikes=list(prefs.dislikes or []),
            cuisine_preferences=list(prefs.cuisine_preferences or []),
            goals=NutritionGoals(**prefs.goals) if prefs.goals else None,
            max_prep_time=prefs.max_prep_time,
            meal_count=prefs.meal_count or 3,
            budget_per_meal=(
                float(prefs.budget_per_meal)
                if prefs.budget_per_meal is not None
                else None
            ),
            updated_at=prefs.updated_at,
        )
