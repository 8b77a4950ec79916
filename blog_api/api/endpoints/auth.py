"""Authentication endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from blog_api.api.deps import get_current_active_user, get_db
from blog_api.config import settings
from blog_api.core.exceptions import (
    ConflictException,
    ForbiddenException,
    UnauthorizedException,
)
from blog_api.core.security import create_access_token
from blog_api.crud import crud_role, crud_user
from blog_api.crud.errors import RoleNotFoundError
from blog_api.models.user import User, UserStatus
from blog_api.schemas.auth import (
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    TokenResponse,
)
from blog_api.schemas.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
)

INVALID_CREDENTIALS = "Invalid credentials"


def _issue_token(user: User) -> TokenResponse:
    return TokenResponse(
        token=create_access_token(user.id, user.username, user.role_names),
        user=UserResponse.from_user(user),
    )


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
)
def register(
    user_in: RegisterRequest,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """
    Register a new user and sign them in.

    The configured default role is attached when it exists.

    Raises:
        ConflictException: 409 if username or email is already registered
    """
    if crud_user.find_conflict(db, username=user_in.username, email=user_in.email):
        raise ConflictException("Username or email already registered")

    db_user = crud_user.create_user(db, user_in=user_in.model_dump())

    try:
        crud_role.assign(db, user=db_user, role_name=settings.DEFAULT_USER_ROLE)
    except RoleNotFoundError:
        logger.warning(
            f"Default role '{settings.DEFAULT_USER_ROLE}' does not exist; "
            f"user {db_user.id} registered without roles"
        )

    user = crud_user.get_with_roles(db, db_user.id)
    logger.info(f"User registered: id={user.id}, username={user.username}")
    return _issue_token(user)


@router.post(
    "/login",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Login user",
)
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
) -> TokenResponse:
    """
    Login with username or email and password.

    Unknown identities and wrong passwords get the same 401 response.
    """
    user = crud_user.authenticate(db, identifier=credentials.identifier, password=credentials.password)
    if not user:
        logger.warning("Failed login attempt")
        raise UnauthorizedException(INVALID_CREDENTIALS)

    if user.status != UserStatus.ACTIVE:
        raise ForbiddenException("Account is not active")

    logger.info(f"User logged in: id={user.id}")
    return _issue_token(user)


@router.get(
    "/me",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current user profile",
)
def get_profile(
    current_user: User = Depends(get_current_active_user),
) -> ProfileResponse:
    """Return the authenticated user with current roles."""
    return ProfileResponse(user=UserResponse.from_user(current_user))
