"""Category endpoints."""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from blog_api.api.deps import get_db, require_role
from blog_api.core.exceptions import BadRequestException, ConflictException, NotFoundException
from blog_api.crud import crud_category
from blog_api.crud.errors import CategoryCycleError
from blog_api.models.category import Category
from blog_api.schemas.category import (
    CategoryCreate,
    CategoryResponse,
    CategorySummary,
    CategoryUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/categories",
    tags=["Categories"],
)

manager_only = require_role("manager")


def _category_response(category: Category, post_count: int) -> CategoryResponse:
    parent = category.parent if category.parent and category.parent.deleted_at is None else None
    return CategoryResponse(
        id=category.id,
        name=category.name,
        slug=category.slug,
        description=category.description,
        display_order=category.display_order,
        parent_id=category.parent_id,
        parent=CategorySummary.model_validate(parent) if parent else None,
        children=[
            CategorySummary.model_validate(child)
            for child in category.children
            if child.deleted_at is None
        ],
        post_count=post_count,
        created_at=category.created_at,
        updated_at=category.updated_at,
    )


def _get_parent_or_404(db: Session, parent_id: int) -> Category:
    parent = crud_category.get(db, parent_id)
    if not parent:
        raise NotFoundException("Parent category not found")
    return parent


@router.get(
    "",
    response_model=List[CategoryResponse],
    status_code=status.HTTP_200_OK,
    summary="List categories",
)
def list_categories(db: Session = Depends(get_db)) -> List[CategoryResponse]:
    """All categories with their post counts, ordered by display_order."""
    categories = crud_category.get_all_ordered(db)
    counts: Dict[int, int] = crud_category.post_counts(db)
    return [_category_response(category, counts.get(category.id, 0)) for category in categories]


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    status_code=status.HTTP_200_OK,
    summary="Get category",
)
def get_category(
    category_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> CategoryResponse:
    category = crud_category.get(db, category_id)
    if not category:
        raise NotFoundException("Category not found")
    return _category_response(category, crud_category.count_posts(db, category.id))


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
    dependencies=[Depends(manager_only)],
)
def create_category(
    category_in: CategoryCreate,
    db: Session = Depends(get_db),
) -> CategoryResponse:
    parent: Optional[Category] = None
    if category_in.parent_id is not None:
        parent = _get_parent_or_404(db, category_in.parent_id)

    if crud_category.get_by_slug(db, category_in.slug):
        raise ConflictException("Category slug already exists")

    category = crud_category.create_category(db, category_in=category_in, parent=parent)
    logger.info(f"Category created: id={category.id}, slug={category.slug}")
    return _category_response(category, 0)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    status_code=status.HTTP_200_OK,
    summary="Update category",
    dependencies=[Depends(manager_only)],
)
def update_category(
    category_update: CategoryUpdate,
    category_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> CategoryResponse:
    """
    Partially update a category.

    ``parent_id``: omitted keeps the parent, null detaches, an id reparents.
    Reparenting under itself or one of its descendants is rejected.
    """
    category = crud_category.get(db, category_id)
    if not category:
        raise NotFoundException("Category not found")

    update_data = category_update.model_dump(exclude_unset=True)
    for field in ("name", "slug", "display_order"):
        if field in update_data and update_data[field] is None:
            update_data.pop(field)

    if "parent_id" in update_data:
        parent_id = update_data["parent_id"]
        if parent_id is not None:
            if parent_id == category.id:
                raise BadRequestException("Category cannot be its own parent")
            parent = _get_parent_or_404(db, parent_id)
            try:
                crud_category.check_reparent(db, category=category, new_parent=parent)
            except CategoryCycleError as e:
                raise BadRequestException(str(e))

    new_slug = update_data.get("slug")
    if new_slug and new_slug != category.slug and crud_category.get_by_slug(db, new_slug):
        raise ConflictException("Category slug already exists")

    category = crud_category.update(db, db_obj=category, obj_in=update_data)
    return _category_response(category, crud_category.count_posts(db, category.id))


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete category",
    dependencies=[Depends(manager_only)],
)
def delete_category(
    category_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> Response:
    """Delete a leaf category. Categories with children are kept."""
    category = crud_category.get(db, category_id)
    if not category:
        raise NotFoundException("Category not found")

    if crud_category.has_children(db, category.id):
        raise BadRequestException("Cannot delete category that still has child categories")

    crud_category.delete_category(db, category=category)
    logger.info(f"Category deleted: id={category_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
