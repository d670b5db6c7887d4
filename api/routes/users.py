"""Current-user profile and preference routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_current_user, get_db
from domain.models import AppUser
from domain.schemas.profile_schemas import (
    PreferencesUpdate,
    ProfileUpdateRequest,
    UserProfileResponse,
)
from services.profile_service import ProfileService
from domain.mappers import UserMapper

router = APIRouter(prefix="/users", tags=["Users"])
logger = logging.getLogger("plateplan.api.users")


@router.get("/me/profile", response_model=UserProfileResponse)
def get_my_profile(
    user: AppUser = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Get the caller's account, display profile and dietary preferences."""
    user = ProfileService.get_user_profile(db, user.user_id)
    return UserMapper.to_response(user)


@router.put("/me/profile", response_model=UserProfileResponse)
def update_my_profile(
    body: ProfileUpdateRequest,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update the caller's display profile."""
    user = ProfileService.update_profile(db, user.user_id, body)
    return UserMapper.to_response(user)


@router.put("/me/preferences", response_model=UserProfileResponse)
def update_my_preferences(
    body: PreferencesUpdate,
    user: AppUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Create or update dietary preferences.

    Only the fields present in the body are changed.
    """
    user = ProfileService.update_preferences(db, user.user_id, body)
    return UserMapper.to_response(user)
