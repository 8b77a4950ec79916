"""User management endpoints (manager only)."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from blog_api.api.deps import get_db, require_role
from blog_api.core.exceptions import ConflictException, NotFoundException
from blog_api.crud import crud_role, crud_user
from blog_api.crud.errors import (
    RoleAlreadyAssignedError,
    RoleNotAssignedError,
    RoleNotFoundError,
)
from blog_api.models.user import User
from blog_api.schemas.user import (
    RoleAssign,
    UserCreate,
    UserDetailResponse,
    UserResponse,
    UserUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_role("manager"))],
)


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = crud_user.get_with_roles(db, user_id)
    if not user:
        raise NotFoundException("User not found")
    return user


def _role_not_found(e: RoleNotFoundError) -> NotFoundException:
    return NotFoundException("Role not found", details={"roles": e.names})


@router.get(
    "",
    response_model=List[UserResponse],
    status_code=status.HTTP_200_OK,
    summary="List all users",
)
def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
) -> List[UserResponse]:
    users = crud_user.list_with_roles(db, skip=skip, limit=limit)
    return [UserResponse.from_user(user) for user in users]


@router.get(
    "/{user_id}",
    response_model=UserDetailResponse,
    status_code=status.HTTP_200_OK,
    summary="Get user by ID",
)
def get_user(
    user_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> UserDetailResponse:
    user = _get_user_or_404(db, user_id)
    return UserDetailResponse(
        **UserResponse.from_user(user).model_dump(),
        post_count=crud_user.count_posts(db, user.id),
    )


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
def create_user(
    user_in: UserCreate,
    db: Session = Depends(get_db),
) -> UserResponse:
    """
    Create a user, optionally with an initial set of roles.

    Raises:
        ConflictException: 409 if username or email is taken
        NotFoundException: 404 if any named role does not exist
    """
    if crud_user.find_conflict(db, username=user_in.username, email=user_in.email):
        raise ConflictException("Username or email already registered")

    if user_in.roles:
        try:
            crud_role.get_by_names(db, user_in.roles)
        except RoleNotFoundError as e:
            raise _role_not_found(e)

    user = crud_user.create_user(db, user_in=user_in)
    if user_in.roles:
        crud_role.replace(db, user=user, role_names=user_in.roles)

    logger.info(f"User created: id={user.id}, username={user.username}")
    return UserResponse.from_user(_get_user_or_404(db, user.id))


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Update user",
)
def update_user(
    user_update: UserUpdate,
    user_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> UserResponse:
    """
    Partially update a user.

    When ``roles`` is present the user's grants are replaced by exactly that
    set; all names are checked before anything is changed.
    """
    user = _get_user_or_404(db, user_id)

    if user_update.username or user_update.email:
        conflict = crud_user.find_conflict(
            db,
            username=user_update.username,
            email=user_update.email,
            exclude_id=user.id,
        )
        if conflict:
            raise ConflictException("Username or email already in use")

    if user_update.roles is not None:
        try:
            crud_role.get_by_names(db, user_update.roles)
        except RoleNotFoundError as e:
            raise _role_not_found(e)

    user = crud_user.update_user(db, db_obj=user, user_in=user_update)

    if user_update.roles is not None:
        crud_role.replace(db, user=user, role_names=user_update.roles)
        logger.info(f"Roles of user {user.id} replaced with {user_update.roles}")

    return UserResponse.from_user(_get_user_or_404(db, user_id))


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete user",
)
def delete_user(
    user_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> Response:
    """Soft delete a user."""
    _get_user_or_404(db, user_id)
    crud_user.delete(db, id=user_id)
    logger.info(f"User soft-deleted: id={user_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{user_id}/roles",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign role to user",
)
def assign_role(
    role_in: RoleAssign,
    user_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> UserResponse:
    user = _get_user_or_404(db, user_id)
    try:
        crud_role.assign(db, user=user, role_name=role_in.role)
    except RoleAlreadyAssignedError:
        raise ConflictException("User already has this role")
    except RoleNotFoundError as e:
        raise _role_not_found(e)

    logger.info(f"Role '{role_in.role}' granted to user {user_id}")
    return UserResponse.from_user(_get_user_or_404(db, user_id))


@router.delete(
    "/{user_id}/roles/{role_name}",
    response_model=UserResponse,
    status_code=status.HTTP_200_OK,
    summary="Remove role from user",
)
def remove_role(
    role_name: str,
    user_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> UserResponse:
    user = _get_user_or_404(db, user_id)
    try:
        crud_role.revoke(db, user=user, role_name=role_name)
    except RoleNotAssignedError:
        raise NotFoundException("User does not have this role")

    logger.info(f"Role '{role_name}' revoked from user {user_id}")
    return UserResponse.from_user(_get_user_or_404(db, user_id))
