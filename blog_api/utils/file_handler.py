"""Validation helpers for files received through multipart uploads."""
import logging
from pathlib import Path
from typing import Optional, Tuple

from fastapi import UploadFile

from blog_api.config import settings
from blog_api.core.exceptions import BadRequestException

logger = logging.getLogger(__name__)

SAFE_FILENAME_CHARS = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_.")


def sanitize_filename(filename: Optional[str]) -> str:
    """
    Sanitize filename to prevent path traversal and other attacks.

    Args:
        filename: Original filename from upload

    Returns:
        Sanitized filename (only alphanumeric, dash, underscore, and dot)
    """
    if not filename:
        return "unnamed"

    basename = Path(filename).name
    sanitized = "".join(c if c in SAFE_FILENAME_CHARS else "_" for c in basename)

    # No hidden files
    while sanitized.startswith("."):
        sanitized = sanitized[1:]

    return sanitized if sanitized else "unnamed"


def read_upload_file(
    upload_file: Optional[UploadFile],
    max_size_bytes: Optional[int] = None,
) -> Tuple[bytes, str]:
    """
    Read an uploaded file into memory, enforcing the size limit.

    Args:
        upload_file: FastAPI UploadFile object
        max_size_bytes: Optional custom max size, defaults to MAX_UPLOAD_SIZE

    Returns:
        Tuple of (file_content, sanitized_filename)

    Raises:
        BadRequestException: missing, empty or oversized file
    """
    if upload_file is None:
        raise BadRequestException("file is required")

    max_size = max_size_bytes or settings.MAX_UPLOAD_SIZE

    upload_file.file.seek(0)
    file_content = upload_file.file.read(max_size + 1)
    upload_file.file.seek(0)

    if len(file_content) > max_size:
        size_mb = max_size / (1024 * 1024)
        raise BadRequestException(f"File too large. Maximum size is {size_mb:.1f}MB")

    if len(file_content) == 0:
        raise BadRequestException("Empty files are not allowed")

    filename = sanitize_filename(upload_file.filename)
    logger.info(f"File accepted: {filename}, size={len(file_content)} bytes")
    return file_content, filename
