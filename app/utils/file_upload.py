"""
File Upload Utility - Validate image uploads and build object keys.

Supported formats:
- PNG, JPEG, GIF, WebP

Max file size: MAX_UPLOAD_MB (5MB by default)
"""

import os
import re
import time
from typing import Tuple

from fastapi import UploadFile, HTTPException

from app.core.config import get_settings

settings = get_settings()

ALLOWED_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.gif', '.webp'}

CONTENT_TYPES = {
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.webp': 'image/webp',
}

_UNSAFE_CHARS = re.compile(r'[^A-Za-z0-9._-]+')


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def safe_filename(filename: str) -> str:
    """Strip directories and characters that do not belong in an object key."""
    name = os.path.basename(filename.replace('\\', '/'))
    name = _UNSAFE_CHARS.sub('-', name).strip('-.')
    return name or 'upload'


async def read_image_upload(file: UploadFile) -> Tuple[bytes, str, str]:
    """
    Read and validate an uploaded image.

    Args:
        file: FastAPI UploadFile

    Returns:
        Tuple of (content, extension, content_type)

    Raises:
        HTTPException on validation errors
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: PNG, JPG, GIF, WEBP"
        )

    content = await file.read()

    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Image must be less than {settings.max_upload_mb}MB"
        )

    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    return content, ext, CONTENT_TYPES[ext]


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def project_image_key(user_id: int, project_id: int, filename: str) -> str:
    return f"{user_id}/{project_id}/{_timestamp_ms()}-{safe_filename(filename)}"


def certificate_key(user_id: int, filename: str) -> str:
    return f"{user_id}/certificates/{_timestamp_ms()}-{safe_filename(filename)}"


def avatar_key(user_id: int, ext: str) -> str:
    return f"{user_id}/avatar-{_timestamp_ms()}{ext}"


def get_supported_formats() -> dict:
    """Get info about supported image formats."""
    return {
        "supported_formats": sorted(ALLOWED_EXTENSIONS),
        "max_size_mb": settings.max_upload_mb
    }
