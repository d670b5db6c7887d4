"""
User Repository - Data access layer for user-related operations
"""

from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from repositories.base import BaseRepository
from domain.models import AppUser, UserProfile, UserPreferences
from app.exceptions import ConflictError


class UserRepository(BaseRepository[AppUser]):
    """Repository for user data access"""

    def __init__(self, db: Session):
        super().__init__(db, AppUser)

    def get_by_id(self, user_id: UUID) -> Optional[AppUser]:
        """Get user by ID"""
        return self.db.query(AppUser).filter(AppUser.user_id == user_id).first()

    def get_by_subject(self, auth_subject: str) -> Optional[AppUser]:
        """Get user by identity-provider subject"""
        return (
            self.db.query(AppUser).filter(AppUser.auth_subject == auth_subject).first()
        )

    def create_user(self, auth_subject: str, email: Optional[str] = None) -> AppUser:
        """Create a new user"""
        user = AppUser(auth_subject=auth_subject, email=email)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"User with email {email} already exists")

    def update_user(self, user: AppUser) -> AppUser:
        """Update user information"""
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(f"Email {user.email} is already in use")
        self.db.refresh(user)
        return user


class UserProfileRepository(BaseRepository[UserProfile]):
    """Repository for display profile data access"""

    def __init__(self, db: Session):
        super().__init__(db, UserProfile)

    def get_by_id(self, user_id: UUID) -> Optional[UserProfile]:
        return self.get_by_user_id(user_id)

    def get_by_user_id(self, user_id: UUID) -> Optional[UserProfile]:
        """Get profile for a user"""
        return self.db.query(UserProfile).filter(UserProfile.user_id == user_id).first()

    def upsert(self, user_id: UUID, **kwargs) -> UserProfile:
        """Create or update profile (caller commits)"""
        profile = self.get_by_user_id(user_id)
        if profile:
            for key, value in kwargs.items():
                if hasattr(profile, key):
                    setattr(profile, key, value)
        else:
            profile = UserProfile(user_id=user_id, **kwargs)
            self.db.add(profile)
        return profile


class PreferencesRepository(BaseRepository[UserPreferences]):
    """Repository for dietary preference data access"""

    def __init__(self, db: Session):
        super().__init__(db, UserPreferences)

    def get_by_id(self, user_id: UUID) -> Optional[UserPreferences]:
        return self.get_by_user_id(user_id)

    def get_by_user_id(self, user_id: UUID) -> Optional[UserPreferences]:
        """Get preferences for a user"""
        return (
            self.db.query(UserPreferences)
            .filter(UserPreferences.user_id == user_id)
            .first()
        )

    def upsert(self, user_id: UUID, **kwargs) -> UserPreferences:
        """Create or update preferences (caller commits)"""
        prefs = self.get_by_user_id(user_id)
        if prefs:
            for key, value in kwargs.items():
                if hasattr(prefs, key):
                    setattr(prefs, key, value)
        else:
            prefs = UserPreferences(user_id=user_id, **kwargs)
            self.db.add(prefs)
        return prefs
