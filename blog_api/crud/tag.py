"""CRUD operations for Tag."""

from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from blog_api.crud.base import CRUDBase
from blog_api.models.post import PostTag
from blog_api.models.tag import Tag
from blog_api.schemas.tag import TagCreate, TagUpdate


class CRUDTag(CRUDBase[Tag, TagCreate, TagUpdate]):
    def get_all_ordered(self, db: Session) -> List[Tag]:
        return self.get_multi(db, limit=None, order_by=[Tag.name.asc(), Tag.id.asc()])

    def get_by_slug(self, db: Session, slug: str) -> Optional[Tag]:
        return self.get_by_field(db, "slug", slug)

    def post_counts(self, db: Session) -> Dict[int, int]:
        stmt = select(PostTag.tag_id, func.count(PostTag.post_id)).group_by(PostTag.tag_id)
        return {tag_id: count for tag_id, count in db.execute(stmt).all()}

    def count_posts(self, db: Session, tag_id: int) -> int:
        stmt = select(func.count(PostTag.post_id)).where(PostTag.tag_id == tag_id)
        return db.scalar(stmt) or 0


# Singleton instance
crud_tag = CRUDTag(Tag)
