"""Post model and its category/tag junction tables."""

from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    TIMESTAMP,
    Enum as SQLEnum,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class PostStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    PUBLISHED = "published"
    REJECTED = "rejected"


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)

    # Foreign Keys
    author_id = Column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )

    # Post Content
    title = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    thumbnail_url = Column(String(255), nullable=True)
    status = Column(
        SQLEnum(PostStatus, name="post_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=PostStatus.DRAFT,
        index=True,
    )

    # Metadata
    view_count = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)
    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
    published_at = Column(TIMESTAMP, nullable=True)

    # Soft delete
    deleted_at = Column(TIMESTAMP, nullable=True, index=True)

    __table_args__ = (
        Index("idx_post_author_created", "author_id", "created_at"),
    )

    # Relationships
    author = relationship("User", back_populates="posts")
    category_links = relationship(
        "PostCategory",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by=lambda: [PostCategory.is_primary.desc(), PostCategory.category_id],
    )
    tag_links = relationship(
        "PostTag",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="PostTag.tag_id",
    )


class PostCategory(Base):
    """Post <-> Category association. One row per post may be primary."""

    __tablename__ = "post_categories"

    post_id = Column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )
    is_primary = Column(Boolean, nullable=False, default=False)

    post = relationship("Post", back_populates="category_links")
    category = relationship("Category", back_populates="post_links")


class PostTag(Base):
    """Post <-> Tag association."""

    __tablename__ = "post_tags"

    post_id = Column(
        Integer,
        ForeignKey("posts.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_id = Column(
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    post = relationship("Post", back_populates="tag_links")
    tag = relationship("Tag", back_populates="post_links")
