"""
Authentication Dependency for FastAPI.

The dashboards call this service with a short-lived HS256 service token
minted by the auth system. Required claims:

- sub:  user id (directory id of the caller)
- name: display name
- role: "admin" | "teacher" | "student"
- iss / aud / exp / iat (checked against Config)

Admins are returned as their own user; the shared admin inbox identity is
derived later by messaging_identity_for().
"""

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from kvision_messaging.config.settings import Config
from kvision_messaging.domain.entities.user import User
from kvision_messaging.domain.exceptions import DomainValidationError

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> User:
    """
    Extract and validate user from JWT token.

    Raises:
        HTTPException 401 if token is invalid, expired, or missing required claims
    """
    try:
        claims = jwt.decode(
            credentials.credentials,
            Config.SERVICE_AUTH_SECRET,
            algorithms=["HS256"],
            audience=Config.SERVICE_AUTH_AUDIENCE,
            issuer=Config.SERVICE_AUTH_ISSUER,
            options={"require": ["exp", "iat", "aud", "iss", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
        )

    user_id = claims.get("sub")
    role = claims.get("role")
    if not user_id or not role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing required claims in token",
        )

    try:
        return User(id=user_id, name=claims.get("name") or user_id, role=role)
    except DomainValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin role required",
        )
    return current_user
