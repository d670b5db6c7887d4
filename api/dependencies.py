"""
API dependencies for dependency injection
"""

from typing import Generator, Optional
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from adapters import identity_adapter
from app.exceptions import RecipeProviderError, UnauthorizedError
from domain.models import AppUser, get_db_session
from services.profile_service import ProfileService

logger = logging.getLogger("plateplan.auth")

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_recipe_provider(request: Request):
    """Recipe provider client created at startup and kept on app state."""
    provider = getattr(request.app.state, "recipe_provider", None)
    if provider is None:
        raise RecipeProviderError("Recipe provider is not available", http_status=503)
    return provider


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> AppUser:
    """
    Resolve the caller from the bearer token.

    The local user is provisioned on the first authenticated request and
    its email follows the token's ``email`` claim.
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise UnauthorizedError("Missing bearer token")

    claims = identity_adapter.decode_token(credentials.credentials)
    user = ProfileService.get_or_create_user(db, claims["sub"], claims.get("email"))
    logger.debug(f"authenticated user_id={user.user_id}")
    return user
