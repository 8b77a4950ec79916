"""Post endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.orm import Session

from blog_api.api.deps import get_db, require_role
from blog_api.core.exceptions import ConflictException, NotFoundException
from blog_api.crud import crud_post, crud_user, sync_post_categories, sync_post_tags
from blog_api.crud.errors import MissingRelationError
from blog_api.models.post import Post, PostStatus
from blog_api.models.user import User
from blog_api.schemas.post import (
    PostCategoryItem,
    PostCreate,
    PostListResponse,
    PostResponse,
    PostUpdate,
)
from blog_api.schemas.tag import TagSummary
from blog_api.schemas.user import UserSummary

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/posts",
    tags=["Posts"],
)

can_write_posts = require_role("editor", "manager")


def _post_response(post: Post) -> PostResponse:
    """Serialize a post with author, categories (primary first) and tags."""
    return PostResponse(
        id=post.id,
        title=post.title,
        slug=post.slug,
        excerpt=post.excerpt,
        content=post.content,
        thumbnail_url=post.thumbnail_url,
        status=post.status,
        view_count=post.view_count,
        author_id=post.author_id,
        author=UserSummary.model_validate(post.author) if post.author else None,
        categories=[
            PostCategoryItem(
                id=link.category.id,
                name=link.category.name,
                slug=link.category.slug,
                is_primary=link.is_primary,
            )
            for link in post.category_links
            if link.category is not None
        ],
        tags=[TagSummary.model_validate(link.tag) for link in post.tag_links if link.tag is not None],
        created_at=post.created_at,
        updated_at=post.updated_at,
        published_at=post.published_at,
    )


def _missing_relation(e: MissingRelationError) -> NotFoundException:
    return NotFoundException(str(e), details={e.entity: e.missing_ids})


def _resolve_author(db: Session, author_id: int) -> User:
    author = crud_user.get(db, author_id)
    if not author:
        raise NotFoundException("Author not found")
    return author


@router.get(
    "",
    response_model=PostListResponse,
    status_code=status.HTTP_200_OK,
    summary="List posts",
)
def list_posts(
    skip: int = Query(0, ge=0, description="Number of posts to skip"),
    limit: int = Query(50, ge=1, le=100, description="Maximum number of posts to return"),
    status_filter: Optional[PostStatus] = Query(None, alias="status"),
    author_id: Optional[int] = Query(None, gt=0),
    category_id: Optional[int] = Query(None, gt=0),
    tag_id: Optional[int] = Query(None, gt=0),
    db: Session = Depends(get_db),
) -> PostListResponse:
    """List non-deleted posts, newest first."""
    posts, total = crud_post.get_all(
        db,
        skip=skip,
        limit=limit,
        status=status_filter,
        author_id=author_id,
        category_id=category_id,
        tag_id=tag_id,
    )
    return PostListResponse(
        posts=[_post_response(post) for post in posts],
        total=total,
        has_more=(skip + len(posts) < total),
    )


@router.get(
    "/{post_id}",
    response_model=PostResponse,
    status_code=status.HTTP_200_OK,
    summary="Get post detail",
)
def get_post(
    post_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> PostResponse:
    post = crud_post.get_by_id(db, post_id=post_id)
    if not post:
        raise NotFoundException("Post not found")
    return _post_response(post)


@router.post(
    "",
    response_model=PostResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create post",
)
def create_post(
    post_in: PostCreate,
    current_user: User = Depends(can_write_posts),
    db: Session = Depends(get_db),
) -> PostResponse:
    """
    Create a post and attach its categories and tags.

    If a referenced category or tag does not exist, the freshly created post
    is deleted again and 404 is returned.
    """
    author_id = post_in.author_id or current_user.id
    _resolve_author(db, author_id)

    if crud_post.get_by_slug(db, post_in.slug):
        raise ConflictException("Post slug already exists")

    post = crud_post.create_post(db, post_in=post_in, author_id=author_id)

    try:
        if post_in.category_ids is not None:
            sync_post_categories(db, post_id=post.id, category_ids=post_in.category_ids)
        if post_in.tag_ids is not None:
            sync_post_tags(db, post_id=post.id, tag_ids=post_in.tag_ids)
    except MissingRelationError as e:
        logger.info(f"Rolling back post {post.id}: {e}")
        crud_post.remove(db, db_obj=post)
        raise _missing_relation(e)

    logger.info(f"Post created: id={post.id}, author={author_id}")
    return _post_response(crud_post.refresh_relations(db, post))


@router.put(
    "/{post_id}",
    response_model=PostResponse,
    status_code=status.HTTP_200_OK,
    summary="Update post",
)
def update_post(
    post_update: PostUpdate,
    post_id: int = Path(..., gt=0),
    current_user: User = Depends(can_write_posts),
    db: Session = Depends(get_db),
) -> PostResponse:
    """
    Partially update a post.

    ``category_ids`` / ``tag_ids`` replace the associations when present.
    A failing sync leaves the already saved post fields in place.
    """
    post = crud_post.get_by_id(db, post_id=post_id)
    if not post:
        raise NotFoundException("Post not found")

    if post_update.author_id is not None:
        _resolve_author(db, post_update.author_id)

    if post_update.slug and post_update.slug != post.slug:
        if crud_post.get_by_slug(db, post_update.slug):
            raise ConflictException("Post slug already exists")

    post = crud_post.update_post(db, post=post, post_in=post_update)

    fields = post_update.model_fields_set
    try:
        if "category_ids" in fields:
            sync_post_categories(db, post_id=post.id, category_ids=post_update.category_ids)
        if "tag_ids" in fields:
            sync_post_tags(db, post_id=post.id, tag_ids=post_update.tag_ids)
    except MissingRelationError as e:
        raise _missing_relation(e)

    return _post_response(crud_post.refresh_relations(db, post))


@router.delete(
    "/{post_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete post",
)
def delete_post(
    post_id: int = Path(..., gt=0),
    current_user: User = Depends(can_write_posts),
    db: Session = Depends(get_db),
) -> Response:
    """Soft delete a post."""
    if not crud_post.delete(db, id=post_id):
        raise NotFoundException("Post not found")
    logger.info(f"Post soft-deleted: id={post_id} by user {current_user.id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
