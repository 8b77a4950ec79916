"""CRUD operations for Upload."""

from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from blog_api.crud.base import CRUDBase
from blog_api.models.upload import Upload


class CRUDUpload(CRUDBase[Upload, Upload, Upload]):
    def get_all(self, db: Session) -> List[Upload]:
        stmt = (
            select(Upload)
            .options(selectinload(Upload.uploaded_by))
            .order_by(Upload.created_at.desc(), Upload.id.desc())
        )
        return list(db.scalars(stmt).all())

    def create_from_asset(
        self, db: Session, *, asset: Dict[str, Any], uploaded_by_user_id: Optional[int]
    ) -> Upload:
        """Record an asset returned by the media host."""
        return self.create(
            db,
            obj_in={
                "public_id": asset["public_id"],
                "url": asset.get("secure_url") or asset["url"],
                "resource_type": asset.get("resource_type") or "auto",
                "bytes": asset.get("bytes"),
                "width": asset.get("width"),
                "height": asset.get("height"),
                "format": asset.get("format"),
                "folder": asset.get("folder") or None,
                "original_filename": asset.get("original_filename"),
                "uploaded_by_user_id": uploaded_by_user_id,
            },
        )


# Singleton instance
crud_upload = CRUDUpload(Upload)
