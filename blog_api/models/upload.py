"""Upload model: a record of a media asset stored on Cloudinary."""

from sqlalchemy import Column, Integer, String, TIMESTAMP, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from ..database import Base


class Upload(Base):
    __tablename__ = "uploads"

    id = Column(Integer, primary_key=True, index=True)

    # Remote asset
    public_id = Column(String(255), nullable=False)
    url = Column(String(1024), nullable=False)
    resource_type = Column(String(50), nullable=False)

    # Metadata reported by the media host
    bytes = Column(Integer, nullable=True)
    width = Column(Integer, nullable=True)
    height = Column(Integer, nullable=True)
    format = Column(String(50), nullable=True)
    folder = Column(String(255), nullable=True)
    original_filename = Column(String(255), nullable=True)

    uploaded_by_user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_at = Column(TIMESTAMP, server_default=func.now(), index=True)

    uploaded_by = relationship("User")
