"""CRUD operations for `User` model."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from blog_api.core.security import get_password_hash, verify_password
from blog_api.crud.base import CRUDBase
from blog_api.models.post import Post
from blog_api.models.role import UserRole
from blog_api.models.user import User
from blog_api.schemas.user import UserCreate, UserUpdate


class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    def _with_roles(self, stmt):
        return stmt.options(selectinload(User.user_roles).selectinload(UserRole.role))

    def get_by_username(self, db: Session, username: str, *, include_deleted: bool = False) -> Optional[User]:
        return self.get_by_field(db, "username", username, include_deleted=include_deleted)

    def get_by_email(self, db: Session, email: Optional[str], *, include_deleted: bool = False) -> Optional[User]:
        if not email:
            return None
        return self.get_by_field(db, "email", email, include_deleted=include_deleted)

    def get_by_identifier(self, db: Session, identifier: str) -> Optional[User]:
        """Find an active-record user by username or email."""
        stmt = self._with_roles(
            self._select().where(or_(User.username == identifier, User.email == identifier)).limit(1)
        )
        return db.scalars(stmt).first()

    def find_conflict(
        self,
        db: Session,
        *,
        username: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> Optional[User]:
        """Return any user (soft-deleted included) holding the username or email."""
        clauses = []
        if username:
            clauses.append(User.username == username)
        if email:
            clauses.append(User.email == email)
        if not clauses:
            return None
        stmt = select(User).where(or_(*clauses))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return db.scalars(stmt.limit(1)).first()

    def get_with_roles(self, db: Session, user_id: int) -> Optional[User]:
        stmt = self._with_roles(self._select().where(User.id == user_id))
        return db.scalars(stmt).first()

    def list_with_roles(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[User]:
        stmt = self._with_roles(
            self._select().order_by(User.created_at.desc(), User.id.desc()).offset(skip).limit(limit)
        )
        return list(db.scalars(stmt).all())

    def count_posts(self, db: Session, user_id: int) -> int:
        stmt = select(func.count(Post.id)).where(Post.author_id == user_id, Post.deleted_at.is_(None))
        return db.scalar(stmt) or 0

    def create_user(self, db: Session, *, user_in: Union[UserCreate, Dict[str, Any]]) -> User:
        """Create a user, hashing the plain password. Roles are handled separately."""
        user_data = user_in.model_dump(exclude_unset=True) if isinstance(user_in, UserCreate) else dict(user_in)
        user_data.pop("roles", None)
        raw_password = user_data.pop("password")
        user_data["password_hash"] = get_password_hash(raw_password)
        if user_data.get("status") is None:
            user_data.pop("status", None)

        db_obj = User(**user_data)
        try:
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
        except Exception:
            db.rollback()
            raise
        return db_obj

    def update_user(self, db: Session, *, db_obj: User, user_in: UserUpdate) -> User:
        update_data = user_in.model_dump(exclude_unset=True)
        update_data.pop("roles", None)
        password = update_data.pop("password", None)
        if password:
            update_data["password_hash"] = get_password_hash(password)
        for field in ("username", "email", "status"):
            if field in update_data and update_data[field] is None:
                update_data.pop(field)
        return self.update(db, db_obj=db_obj, obj_in=update_data)

    def authenticate(self, db: Session, *, identifier: str, password: str) -> Optional[User]:
        user = self.get_by_identifier(db, identifier)
        if not user:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user


# Singleton instance
crud_user = CRUDUser(User)
