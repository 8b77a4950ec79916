"""CRUD operations for Post and its category/tag associations."""

import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, selectinload

from blog_api.crud.base import CRUDBase
from blog_api.crud.errors import MissingRelationError
from blog_api.models.category import Category
from blog_api.models.post import Post, PostCategory, PostStatus, PostTag
from blog_api.models.tag import Tag
from blog_api.schemas.post import PostCreate, PostUpdate

logger = logging.getLogger(__name__)

RELATION_FIELDS = ("category_ids", "tag_ids")
NULLABLE_FIELDS = ("excerpt", "thumbnail_url", "published_at")


def _coerce_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        number = value
    elif isinstance(value, (float, str)):
        try:
            as_float = float(value.strip() if isinstance(value, str) else value)
        except ValueError:
            return None
        if not math.isfinite(as_float) or not as_float.is_integer():
            return None
        number = int(as_float)
    else:
        return None
    return number if number > 0 else None


def normalize_ids(values: Optional[Iterable[Any]]) -> List[int]:
    """Coerce raw ids (numbers or numeric strings) to positive ints, dropping the rest."""
    ids = []
    for value in values or []:
        coerced = _coerce_id(value)
        if coerced is not None:
            ids.append(coerced)
    return ids


def _sync(
    db: Session,
    *,
    post_id: int,
    raw_ids: Optional[Iterable[Any]],
    junction: Any,
    target: Any,
    fk_name: str,
    entity: str,
    mark_primary: bool = False,
) -> List[Any]:
    """Make the junction rows of ``post_id`` match ``raw_ids`` exactly.

    Existing rows are deleted and committed first. When an id does not exist
    the call fails with MissingRelationError and the post is left with no
    associations of this kind.
    """
    ids = normalize_ids(raw_ids)

    try:
        db.execute(delete(junction).where(junction.post_id == post_id))
        db.commit()
    except Exception:
        db.rollback()
        raise

    if not ids:
        return []

    distinct_ids = list(dict.fromkeys(ids))
    stmt = select(target).where(target.id.in_(distinct_ids))
    if hasattr(target, "deleted_at"):
        stmt = stmt.where(target.deleted_at.is_(None))
    found = {obj.id: obj for obj in db.scalars(stmt).all()}

    if len(found) != len(distinct_ids):
        missing = set(distinct_ids) - set(found)
        logger.warning(f"Post {post_id}: {entity} not found: {sorted(missing)}")
        raise MissingRelationError(entity, missing)

    rows = []
    for position, target_id in enumerate(distinct_ids):
        row = junction(post_id=post_id, **{fk_name: target_id})
        if mark_primary:
            row.is_primary = position == 0
        rows.append(row)

    try:
        db.add_all(rows)
        db.commit()
    except Exception:
        db.rollback()
        raise
    return [found[target_id] for target_id in distinct_ids]


def sync_post_categories(db: Session, *, post_id: int, category_ids: Optional[Iterable[Any]]) -> List[Category]:
    """Replace a post's categories; the first one becomes primary."""
    return _sync(
        db,
        post_id=post_id,
        raw_ids=category_ids,
        junction=PostCategory,
        target=Category,
        fk_name="category_id",
        entity="categories",
        mark_primary=True,
    )


def sync_post_tags(db: Session, *, post_id: int, tag_ids: Optional[Iterable[Any]]) -> List[Tag]:
    """Replace a post's tags."""
    return _sync(
        db,
        post_id=post_id,
        raw_ids=tag_ids,
        junction=PostTag,
        target=Tag,
        fk_name="tag_id",
        entity="tags",
    )


class CRUDPost(CRUDBase[Post, PostCreate, PostUpdate]):
    """CRUD operations for Post."""

    def _with_relations(self, stmt):
        return stmt.options(
            selectinload(Post.author),
            selectinload(Post.category_links).selectinload(PostCategory.category),
            selectinload(Post.tag_links).selectinload(PostTag.tag),
        )

    def _filtered(
        self,
        stmt,
        *,
        status: Optional[PostStatus] = None,
        author_id: Optional[int] = None,
        category_id: Optional[int] = None,
        tag_id: Optional[int] = None,
    ):
        stmt = stmt.where(Post.deleted_at.is_(None))
        if status is not None:
            stmt = stmt.where(Post.status == status)
        if author_id is not None:
            stmt = stmt.where(Post.author_id == author_id)
        if category_id is not None:
            stmt = stmt.where(
                Post.id.in_(select(PostCategory.post_id).where(PostCategory.category_id == category_id))
            )
        if tag_id is not None:
            stmt = stmt.where(Post.id.in_(select(PostTag.post_id).where(PostTag.tag_id == tag_id)))
        return stmt

    def get_all(
        self,
        db: Session,
        *,
        skip: int = 0,
        limit: int = 50,
        **filters: Any,
    ) -> Tuple[List[Post], int]:
        """Newest posts first, with the total matching count."""
        stmt = self._filtered(select(Post), **filters)
        stmt = self._with_relations(stmt.order_by(Post.created_at.desc(), Post.id.desc()))
        posts = list(db.scalars(stmt.offset(skip).limit(limit)).all())
        total = db.scalar(self._filtered(select(func.count(Post.id)), **filters)) or 0
        return posts, total

    def get_by_id(self, db: Session, *, post_id: int) -> Optional[Post]:
        stmt = self._with_relations(select(Post).where(Post.id == post_id, Post.deleted_at.is_(None)))
        return db.scalars(stmt).first()

    def get_by_slug(self, db: Session, slug: str) -> Optional[Post]:
        return self.get_by_field(db, "slug", slug, include_deleted=True)

    def create_post(self, db: Session, *, post_in: PostCreate, author_id: int) -> Post:
        data: Dict[str, Any] = post_in.model_dump(exclude=set(RELATION_FIELDS) | {"author_id"})
        data["author_id"] = author_id
        return self.create(db, obj_in=data)

    def update_post(self, db: Session, *, post: Post, post_in: PostUpdate) -> Post:
        data = post_in.model_dump(exclude_unset=True, exclude=set(RELATION_FIELDS))
        data = {k: v for k, v in data.items() if v is not None or k in NULLABLE_FIELDS}
        return self.update(db, db_obj=post, obj_in=data)

    def refresh_relations(self, db: Session, post: Post) -> Post:
        """Reload a post with author, categories and tags after a sync."""
        db.expire(post)
        return self.get_by_id(db, post_id=post.id)


# Singleton instance
crud_post = CRUDPost(Post)
