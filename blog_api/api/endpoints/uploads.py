"""Media upload endpoints backed by Cloudinary."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Response, UploadFile, status
from sqlalchemy.orm import Session

from blog_api.api.deps import get_db, require_role
from blog_api.config import settings
from blog_api.core.exceptions import BadRequestException, NotFoundException, UpstreamServiceException
from blog_api.crud import crud_upload
from blog_api.models.user import User
from blog_api.schemas.upload import UploadResponse
from blog_api.services.media_storage import (
    RESOURCE_TYPES,
    CloudinaryStorage,
    MediaStorageError,
    get_media_storage,
)
from blog_api.utils.file_handler import read_upload_file

logger = logging.getLogger(__name__)

can_upload = require_role("editor", "manager")

router = APIRouter(
    prefix="/uploads",
    tags=["Uploads"],
    dependencies=[Depends(can_upload)],
)


@router.post(
    "",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a media file",
)
def upload_file(
    file: Optional[UploadFile] = File(None),
    folder: Optional[str] = Form(None),
    resource_type: str = Form("auto"),
    current_user: User = Depends(can_upload),
    storage: CloudinaryStorage = Depends(get_media_storage),
    db: Session = Depends(get_db),
) -> UploadResponse:
    """
    Store a file on the media host and record its metadata.

    - **file**: the file to upload (max MAX_UPLOAD_SIZE bytes)
    - **folder**: target folder, defaults to CLOUDINARY_FOLDER
    - **resource_type**: image, video, raw or auto
    """
    if resource_type not in RESOURCE_TYPES:
        raise BadRequestException(
            f"resource_type must be one of: {', '.join(RESOURCE_TYPES)}"
        )

    content, filename = read_upload_file(file)
    target_folder = folder if folder else (settings.CLOUDINARY_FOLDER or None)

    try:
        asset = storage.upload(
            content,
            folder=target_folder,
            resource_type=resource_type,
            filename=filename,
        )
    except MediaStorageError as e:
        raise UpstreamServiceException("Failed to upload to Cloudinary", details=str(e))

    upload = crud_upload.create_from_asset(db, asset=asset, uploaded_by_user_id=current_user.id)
    logger.info(f"Upload recorded: id={upload.id}, public_id={upload.public_id}, by user {current_user.id}")
    return UploadResponse.model_validate(upload)


@router.get("", response_model=List[UploadResponse], summary="List uploads")
def list_uploads(db: Session = Depends(get_db)) -> List[UploadResponse]:
    return [UploadResponse.model_validate(upload) for upload in crud_upload.get_all(db)]


@router.get("/{upload_id}", response_model=UploadResponse, summary="Get upload")
def get_upload(
    upload_id: int = Path(..., gt=0),
    db: Session = Depends(get_db),
) -> UploadResponse:
    upload = crud_upload.get(db, upload_id)
    if not upload:
        raise NotFoundException("Upload not found")
    return UploadResponse.model_validate(upload)


@router.delete(
    "/{upload_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete upload",
)
def delete_upload(
    upload_id: int = Path(..., gt=0),
    storage: CloudinaryStorage = Depends(get_media_storage),
    db: Session = Depends(get_db),
) -> Response:
    """Remove the remote asset, then the row. The row stays if the remote delete fails."""
    upload = crud_upload.get(db, upload_id)
    if not upload:
        raise NotFoundException("Upload not found")

    resource_type = upload.resource_type if upload.resource_type in ("image", "video", "raw") else "image"
    try:
        storage.destroy(upload.public_id, resource_type=resource_type)
    except MediaStorageError as e:
        raise UpstreamServiceException("Failed to delete from Cloudinary", details=str(e))

    crud_upload.remove(db, db_obj=upload)
    logger.info(f"Upload deleted: id={upload_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
