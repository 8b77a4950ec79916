"""Generic CRUD base class for SQLAlchemy models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from blog_api.database import Base


ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """Reusable CRUD helper for SQLAlchemy models.

    All methods operate on model instances and return database objects, not schemas.
    Models with a ``deleted_at`` column are soft-deleted and hidden from reads
    unless ``include_deleted`` is passed.
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    @property
    def soft_deletes(self) -> bool:
        return hasattr(self.model, "deleted_at")

    def _select(self, include_deleted: bool = False):
        stmt = select(self.model)
        if self.soft_deletes and not include_deleted:
            stmt = stmt.where(self.model.deleted_at.is_(None))
        return stmt

    # ----- Read -----
    def get(self, db: Session, id: Any, *, include_deleted: bool = False) -> Optional[ModelType]:
        """Get one record by primary key."""
        db_obj = db.get(self.model, id)
        if db_obj is None:
            return None
        if self.soft_deletes and not include_deleted and db_obj.deleted_at is not None:
            return None
        return db_obj

    def get_multi(
        self,
        db: Session,
        *,
        skip: int = 0,
        limit: Optional[int] = 100,
        order_by: Any = None,
        include_deleted: bool = False,
    ) -> List[ModelType]:
        """Get records with pagination."""
        stmt = self._select(include_deleted)
        if order_by is not None:
            stmt = stmt.order_by(*order_by) if isinstance(order_by, (list, tuple)) else stmt.order_by(order_by)
        stmt = stmt.offset(skip)
        if limit is not None:
            stmt = stmt.limit(limit)
        return list(db.scalars(stmt).all())

    def count(self, db: Session, *, include_deleted: bool = False) -> int:
        stmt = select(func.count()).select_from(self.model)
        if self.soft_deletes and not include_deleted:
            stmt = stmt.where(self.model.deleted_at.is_(None))
        return db.scalar(stmt) or 0

    def get_by_field(
        self, db: Session, field_name: str, value: Any, *, include_deleted: bool = False
    ) -> Optional[ModelType]:
        """Get first record where given field equals value."""
        if not hasattr(self.model, field_name):
            raise AttributeError(f"Model '{self.model.__name__}' has no field '{field_name}'")
        stmt = self._select(include_deleted).where(getattr(self.model, field_name) == value).limit(1)
        return db.scalars(stmt).first()

    def get_many_by_ids(self, db: Session, ids: List[int]) -> List[ModelType]:
        """Fetch the records whose primary key is in ``ids`` (any order)."""
        if not ids:
            return []
        stmt = self._select().where(self.model.id.in_(ids))
        return list(db.scalars(stmt).all())

    # ----- Create -----
    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """Create a new record from a Pydantic schema or dict."""
        obj_in_data: Dict[str, Any] = obj_in.model_dump(exclude_unset=True) if isinstance(obj_in, BaseModel) else dict(obj_in)
        db_obj = self.model(**obj_in_data)  # type: ignore[arg-type]
        try:
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
        except Exception:
            db.rollback()
            raise
        return db_obj

    # ----- Update -----
    def update(
        self,
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]],
    ) -> ModelType:
        """Merge fields from a Pydantic schema or dict into a record and save it."""
        update_data = obj_in.model_dump(exclude_unset=True) if isinstance(obj_in, BaseModel) else dict(obj_in)
        update_data.pop("id", None)

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        try:
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
        except Exception:
            db.rollback()
            raise
        return db_obj

    # ----- Delete -----
    def delete(self, db: Session, *, id: Any) -> Optional[ModelType]:
        """Delete a record.

        Soft-deletes when the model has a ``deleted_at`` column; otherwise hard delete.
        Returns the affected object (or None if not found).
        """
        db_obj = self.get(db, id)
        if not db_obj:
            return None

        try:
            if self.soft_deletes:
                db_obj.deleted_at = datetime.utcnow()
                db.add(db_obj)
            else:
                db.delete(db_obj)
            db.commit()
            if self.soft_deletes:
                db.refresh(db_obj)
        except Exception:
            db.rollback()
            raise
        return db_obj

    def remove(self, db: Session, *, db_obj: ModelType) -> ModelType:
        """Hard delete a record regardless of soft-delete support."""
        try:
            db.delete(db_obj)
            db.commit()
        except Exception:
            db.rollback()
            raise
        return db_obj
