"""CRUD operations for Role and UserRole."""

import logging
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from blog_api.crud.base import CRUDBase
from blog_api.crud.errors import (
    RoleAlreadyAssignedError,
    RoleNotAssignedError,
    RoleNotFoundError,
)
from blog_api.models.role import Role, UserRole
from blog_api.models.user import User

logger = logging.getLogger(__name__)


def normalize_role_names(names: Iterable[str]) -> List[str]:
    """Lower-case, strip and de-duplicate role names, keeping first-seen order."""
    seen = []
    for name in names or []:
        if not isinstance(name, str):
            continue
        key = name.strip().lower()
        if key and key not in seen:
            seen.append(key)
    return seen


class CRUDRole(CRUDBase[Role, Role, Role]):
    def get_by_name(self, db: Session, name: str) -> Optional[Role]:
        """Case-insensitive lookup by role name."""
        stmt = select(Role).where(func.lower(Role.name) == name.strip().lower()).limit(1)
        return db.scalars(stmt).first()

    def get_by_names(self, db: Session, names: List[str]) -> List[Role]:
        """Resolve every name or raise RoleNotFoundError listing the missing ones."""
        wanted = normalize_role_names(names)
        if not wanted:
            return []
        stmt = select(Role).where(func.lower(Role.name).in_(wanted))
        roles = list(db.scalars(stmt).all())
        found = {role.name.lower() for role in roles}
        missing = set(wanted) - found
        if missing:
            raise RoleNotFoundError(missing)
        by_name = {role.name.lower(): role for role in roles}
        return [by_name[name] for name in wanted]

    def ensure_roles(self, db: Session, roles: List[Tuple[str, str]]) -> List[Role]:
        """Create the given (name, display_name) roles when absent."""
        created = []
        for name, display_name in roles:
            if self.get_by_name(db, name) is None:
                role = Role(name=name, display_name=display_name)
                db.add(role)
                created.append(role)
        if created:
            try:
                db.commit()
            except Exception:
                db.rollback()
                raise
            logger.info(f"Seeded roles: {', '.join(r.name for r in created)}")
        return created

    # ----- Grants -----
    def _find_grant(self, user: User, name: str) -> Optional[UserRole]:
        key = name.strip().lower()
        for grant in user.user_roles:
            if grant.role is not None and grant.role.name.lower() == key:
                return grant
        return None

    def assign(self, db: Session, *, user: User, role_name: str) -> UserRole:
        """Grant a role by name.

        Raises:
            RoleAlreadyAssignedError: user already holds a role with that name
            RoleNotFoundError: no such role
        """
        if self._find_grant(user, role_name) is not None:
            raise RoleAlreadyAssignedError(role_name)
        role = self.get_by_name(db, role_name)
        if role is None:
            raise RoleNotFoundError([role_name])

        grant = UserRole(user_id=user.id, role_id=role.id)
        try:
            db.add(grant)
            db.commit()
            db.refresh(user)
        except Exception:
            db.rollback()
            raise
        return grant

    def revoke(self, db: Session, *, user: User, role_name: str) -> None:
        """Remove the single grant matching ``role_name``.

        Raises:
            RoleNotAssignedError: the user does not hold that role
        """
        grant = self._find_grant(user, role_name)
        if grant is None:
            raise RoleNotAssignedError(role_name)
        try:
            db.execute(
                delete(UserRole).where(
                    UserRole.user_id == grant.user_id,
                    UserRole.role_id == grant.role_id,
                )
            )
            db.commit()
            db.expire(user, ["user_roles"])
        except Exception:
            db.rollback()
            raise

    def replace(self, db: Session, *, user: User, role_names: List[str]) -> List[Role]:
        """Replace all grants of a user.

        Every name is resolved before anything is mutated; the delete and the
        insert are two separate statements.
        """
        roles = self.get_by_names(db, role_names)
        try:
            db.execute(delete(UserRole).where(UserRole.user_id == user.id))
            db.commit()
            for role in roles:
                db.add(UserRole(user_id=user.id, role_id=role.id))
            db.commit()
            db.expire(user, ["user_roles"])
        except Exception:
            db.rollback()
            raise
        return roles


# Singleton instance
crud_role = CRUDRole(Role)
