"""CRUD operations for Category."""

from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from blog_api.crud.base import CRUDBase
from blog_api.crud.errors import CategoryCycleError
from blog_api.models.category import Category
from blog_api.models.post import PostCategory
from blog_api.schemas.category import CategoryCreate, CategoryUpdate


class CRUDCategory(CRUDBase[Category, CategoryCreate, CategoryUpdate]):
    """CRUD operations for Category."""

    def get_all_ordered(self, db: Session) -> List[Category]:
        """All categories by display_order, newest first within the same order."""
        return self.get_multi(
            db,
            limit=None,
            order_by=[Category.display_order.asc(), Category.created_at.desc(), Category.id.desc()],
        )

    def get_by_slug(self, db: Session, slug: str) -> Optional[Category]:
        return self.get_by_field(db, "slug", slug, include_deleted=True)

    def post_counts(self, db: Session) -> Dict[int, int]:
        """Map of category id -> number of linked posts."""
        stmt = (
            select(PostCategory.category_id, func.count(PostCategory.post_id))
            .group_by(PostCategory.category_id)
        )
        return {category_id: count for category_id, count in db.execute(stmt).all()}

    def count_posts(self, db: Session, category_id: int) -> int:
        stmt = select(func.count(PostCategory.post_id)).where(PostCategory.category_id == category_id)
        return db.scalar(stmt) or 0

    def has_children(self, db: Session, category_id: int) -> bool:
        stmt = select(func.count(Category.id)).where(
            Category.parent_id == category_id,
            Category.deleted_at.is_(None),
        )
        return (db.scalar(stmt) or 0) > 0

    def check_reparent(self, db: Session, *, category: Category, new_parent: Category) -> None:
        """Reject a parent that is the category itself or one of its descendants.

        Walks up from ``new_parent``; seeing ``category`` on the way means a cycle.
        """
        seen = set()
        node: Optional[Category] = new_parent
        while node is not None and node.id not in seen:
            if node.id == category.id:
                raise CategoryCycleError("Category cannot be its own ancestor")
            seen.add(node.id)
            node = node.parent

    def create_category(
        self, db: Session, *, category_in: CategoryCreate, parent: Optional[Category]
    ) -> Category:
        data = category_in.model_dump(exclude={"parent_id"})
        return self.create(db, obj_in={**data, "parent_id": parent.id if parent else None})

    def delete_category(self, db: Session, *, category: Category) -> Category:
        """Hard delete; junction rows go with it."""
        return self.remove(db, db_obj=category)


# Singleton instance
crud_category = CRUDCategory(Category)
