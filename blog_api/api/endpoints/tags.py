"""Tag endpoints."""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Response, status
from sqlalchemy.orm import Session

from blog_api.api.deps import get_db, require_role
from blog_api.core.exceptions import ConflictException, NotFoundException
from blog_api.crud import crud_tag
from blog_api.models.tag import Tag
from blog_api.schemas.tag import TagCreate, TagResponse, TagUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/tags",
    tags=["Tags"],
)

can_write_tags = require_role("editor", "manager")


def _tag_response(tag: Tag, post_count: int) -> TagResponse:
    return TagResponse(id=tag.id, name=tag.name, slug=tag.slug, post_count=post_count)


def _get_tag_or_404(db: Session, tag_id: int) -> Tag:
    tag = crud_tag.get(db, tag_id)
    if not tag:
        raise NotFoundException("Tag not found")
    return tag


@router.get("", response_model=List[TagResponse], summary="List tags")
def list_tags(db: Session = Depends(get_db)) -> List[TagResponse]:
    counts = crud_tag.post_counts(db)
    return [_tag_response(tag, counts.get(tag.id, 0)) for tag in crud_tag.get_all_ordered(db)]


@router.get("/{tag_id}", response_model=TagResponse, summary="Get tag")
def get_tag(
    tag_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> TagResponse:
    tag = _get_tag_or_404(db, tag_id)
    return _tag_response(tag, crud_tag.count_posts(db, tag.id))


@router.post(
    "",
    response_model=TagResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create tag",
    dependencies=[Depends(can_write_tags)],
)
def create_tag(
    tag_in: TagCreate,
    db: Session = Depends(get_db),
) -> TagResponse:
    if crud_tag.get_by_slug(db, tag_in.slug):
        raise ConflictException("Tag slug already exists")
    tag = crud_tag.create(db, obj_in=tag_in)
    return _tag_response(tag, 0)


@router.put(
    "/{tag_id}",
    response_model=TagResponse,
    summary="Update tag",
    dependencies=[Depends(can_write_tags)],
)
def update_tag(
    tag_update: TagUpdate,
    tag_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> TagResponse:
    tag = _get_tag_or_404(db, tag_id)
    update_data = {k: v for k, v in tag_update.model_dump(exclude_unset=True).items() if v is not None}

    new_slug = update_data.get("slug")
    if new_slug and new_slug != tag.slug and crud_tag.get_by_slug(db, new_slug):
        raise ConflictException("Tag slug already exists")

    tag = crud_tag.update(db, db_obj=tag, obj_in=update_data)
    return _tag_response(tag, crud_tag.count_posts(db, tag.id))


@router.delete(
    "/{tag_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete tag",
    dependencies=[Depends(can_write_tags)],
)
def delete_tag(
    tag_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> Response:
    tag = _get_tag_or_404(db, tag_id)
    crud_tag.remove(db, db_obj=tag)
    logger.info(f"Tag deleted: id={tag_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
