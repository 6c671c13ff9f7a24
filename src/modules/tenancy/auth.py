"""JWT authentication dependency for FastAPI.

Validates Bearer tokens from the Authorization header and extracts the
caller's identity. Brand ownership is compared against ``AuthenticatedUser.id``.
"""

import logging
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from src.config import settings
from src.exceptions import UnauthorizedException
from src.modules.tenancy.constants import AUTHENTICATION_REQUIRED

logger = logging.getLogger(__name__)

# FastAPI security scheme — extracts Bearer token from Authorization header
_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class AuthenticatedUser:
    """Represents the authenticated user extracted from a JWT token."""

    id: str
    email: str | None = None


def _decode_token(token: str) -> dict:
    """Decode and validate a JWT token. Raises UnauthorizedException on failure."""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_aud": False},
        )
    except JWTError as exc:
        logger.warning("JWT validation failed: %s", exc)
        raise UnauthorizedException("Invalid or expired token", reason="invalid_token") from exc


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
) -> AuthenticatedUser:
    """FastAPI dependency that extracts and validates the current user from JWT."""
    if credentials is None:
        raise UnauthorizedException(AUTHENTICATION_REQUIRED, reason="anonymous")

    payload = _decode_token(credentials.credentials)

    subject = payload.get("sub")
    if not subject:
        raise UnauthorizedException("Token is missing required claims", reason="invalid_token")

    user = AuthenticatedUser(id=str(subject), email=payload.get("email"))
    request.state.user = user
    return user

