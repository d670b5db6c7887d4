"""Verification of bearer tokens issued by the external identity provider.
"""

from typing import Any, Dict
import logging

from jose import JWTError, jwt

from app.config import settings
from app.exceptions import UnauthorizedError

logger = logging.getLogger("plateplan.identity")


def decode_token(token: str) -> Dict[str, Any]:
    """Verify a token and return its claims.

    Signature, expiry and (when configured) issuer and audience are checked.
    A token without a ``sub`` claim is rejected.

    Raises:
        UnauthorizedError: token is malformed, unverifiable or has no subject
    """
    if not settings.auth_jwt_key:
        logger.error("Token verification key is not configured")
        raise UnauthorizedError("Authentication is not configured")

    options = {"verify_aud": settings.auth_audience is not None}
    try:
        claims = jwt.decode(
            token,
            settings.auth_jwt_key,
            algorithms=settings.auth_jwt_algorithms,
            audience=settings.auth_audience,
            issuer=settings.auth_issuer,
            options=options,
        )
    except JWTError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise UnauthorizedError("Invalid authentication token") from exc

    if not claims.get("sub"):
        logger.info("Rejected bearer token without subject")
        raise UnauthorizedError("Token has no subject")

    return claims
