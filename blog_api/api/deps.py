"""FastAPI dependency injection functions for authentication and database access."""

import logging
from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from blog_api.core.exceptions import ForbiddenException, UnauthorizedException
from blog_api.core.security import get_token_subject
from blog_api.crud import crud_user
from blog_api.database import get_db
from blog_api.models.user import User, UserStatus

logger = logging.getLogger(__name__)

# Bearer token scheme; missing headers are reported by get_current_user
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency to get current authenticated user from JWT token.

    Args:
        token: JWT token from Authorization header
        db: Database session

    Returns:
        User: Authenticated user model with roles loaded

    Raises:
        UnauthorizedException: 401 if header is missing, token is invalid,
            or the user no longer exists
    """
    if not token:
        raise UnauthorizedException("Authorization header missing")

    user_id = get_token_subject(token)
    if user_id is None:
        logger.warning("[AUTH] Rejected token: decode failed or subject missing")
        raise UnauthorizedException("Invalid token")

    user = crud_user.get_with_roles(db, user_id)
    if user is None:
        logger.warning(f"[AUTH] Rejected token: user {user_id} not found")
        raise UnauthorizedException("Invalid token")

    return user


def get_current_active_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Dependency to verify the current user's account is active.

    Status is read from the database on every request, so a ban or
    deactivation applies to tokens issued before it.

    Raises:
        ForbiddenException: 403 if the account is inactive or banned
    """
    if current_user.status != UserStatus.ACTIVE:
        logger.info(f"[AUTH] User {current_user.id} rejected: account is {current_user.status.value}")
        raise ForbiddenException("Account is not active")
    return current_user


def require_role(*allowed_roles: str) -> Callable:
    """
    Factory function to create role-based access control dependency.

    Role names are compared case-insensitively against the user's current
    grants. With no roles given any authenticated user passes.

    Example:
        @router.post("/categories")
        def create_category(current_user: User = Depends(require_role("manager"))):
            ...
    """
    normalized_allowed = {role.lower() for role in allowed_roles}

    def role_checker(current_user: User = Depends(get_current_active_user)) -> User:
        if not normalized_allowed:
            return current_user
        held = {name.lower() for name in current_user.role_names}
        if not held & normalized_allowed:
            logger.info(
                f"[AUTH] User {current_user.id} denied; needs one of {sorted(normalized_allowed)}"
            )
            raise ForbiddenException("Insufficient permissions")
        return current_user

    return role_checker


__all__ = [
    "oauth2_scheme",
    "get_db",
    "get_current_user",
    "get_current_active_user",
    "require_role",
]
