from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from domain.models import AppUser
from domain.schemas.profile_schemas import PreferencesUpdate, ProfileUpdateRequest
from repositories import (
    UserRepository,
    UserProfileRepository,
    PreferencesRepository,
)
from app.exceptions import ConflictError, NotFoundError

logger = logging.getLogger("plateplan.profile")


class ProfileService:
    """Business logic for users, profiles and dietary preferences"""

    @staticmethod
    def get_or_create_user(
        db: Session, auth_subject: str, email: Optional[str] = None
    ) -> AppUser:
        """
        Resolve the local user for an identity-provider subject.

        The user is created on first sight. A changed ``email`` claim is
        copied onto the stored user; nothing else is ever updated here.
        """
        user_repo = UserRepository(db)
        user = user_repo.get_by_subject(auth_subject)

        if user is None:
            try:
                user = user_repo.create_user(auth_subject, email)
            except ConflictError:
                # Another request may have provisioned the same subject
                user = user_repo.get_by_subject(auth_subject)
                if user is None:
                    raise
            logger.info(f"user_provisioned user_id={user.user_id}")
            return user

        if email and user.email != email:
            user.email = email
            user = user_repo.update_user(user)
            logger.info(f"user_email_synced user_id={user.user_id}")

        return user

    @staticmethod
    def get_user_profile(db: Session, user_id: UUID) -> AppUser:
        """Retrieve user together with profile and preferences"""
        user = UserRepository(db).get_by_id(user_id)
        if not user:
            logger.warning(f"profile_not_found user_id={user_id}")
            raise NotFoundError(f"User {user_id} not found")

        logger.info(f"profile_fetched user_id={user_id}")
        return user

    @staticmethod
    def update_profile(
        db: Session, user_id: UUID, data: ProfileUpdateRequest
    ) -> AppUser:
        """Update the display profile, creating it when missing"""
        user = ProfileService.get_user_profile(db, user_id)
        UserProfileRepository(db).upsert(user_id, **data.model_dump(exclude_unset=True))

        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.error(f"profile_update_failed user_id={user_id} error={e}")
            raise ConflictError("Could not update profile")

        db.refresh(user)
        logger.info(f"profile_updated user_id={user_id}")
        return user

    @staticmethod
    def update_preferences(
        db: Session, user_id: UUID, data: PreferencesUpdate
    ) -> AppUser:
        """
        Upsert dietary preferences.

        Only fields present in the request body are written; omitted fields
        keep their stored value.
        """
        user = ProfileService.get_user_profile(db, user_id)
        changes = data.model_dump(exclude_unset=True)

        if "goals" in changes and changes["goals"] is not None:
            changes["goals"] = data.goals.model_dump(exclude_none=True)
        # Nullable list columns are stored as empty lists
        for key in ("allergies", "dislikes", "cuisine_preferences"):
            if key in changes and changes[key] is None:
                changes[key] = []
        if "meal_count" in changes and changes["meal_count"] is None:
            changes.pop("meal_count")

        PreferencesRepository(db).upsert(user_id, **changes)

        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.error(f"preferences_update_failed user_id={user_id} error={e}")
            raise ConflictError("Could not update preferences")

        db.refresh(user)
        logger.info(
            f"preferences_updated user_id={user_id} fields={sorted(changes)}"
        )
        return user
