"""
Media Storage Service - object storage for uploaded images.

Objects live in a MongoDB GridFS bucket, addressed by object keys under a
per-user prefix:
    <user_id>/avatar-<ts>.<ext>
    <user_id>/certificates/<ts>-<name>
    <user_id>/<project_id>/<ts>-<name>

The public URL is returned synchronously after upload and is served back
by GET /api/media/<key>.
"""

import io
from datetime import datetime, timezone
from typing import Optional, Tuple

import structlog
from gridfs import GridFSBucket

from app.core.config import get_settings
from app.db.mongodb import get_media_bucket

settings = get_settings()
logger = structlog.get_logger(__name__)


def public_url(key: str) -> str:
    return f"{settings.public_base_url.rstrip('/')}/api/media/{key}"


def key_from_url(url: Optional[str]) -> Optional[str]:
    """Object key behind a public media URL, or None for foreign URLs."""
    prefix = public_url("")
    if not url or not url.startswith(prefix):
        return None
    return url[len(prefix):] or None


class MediaStorage:
    """
    Handles binary object storage.
    Keys are GridFS filenames; content type and owner go in metadata.
    """

    def __init__(self, bucket: GridFSBucket = None):
        self.bucket = bucket or get_media_bucket()

    def upload(self, key: str, content: bytes, content_type: str, owner_id: int) -> str:
        """
        Store an object.

        Returns:
            Public URL for the object
        """
        self.bucket.upload_from_stream(
            key,
            io.BytesIO(content),
            metadata={
                "content_type": content_type,
                "owner_id": owner_id,
                "uploaded_at": datetime.now(timezone.utc)
            }
        )
        logger.info("media_uploaded", key=key, size=len(content), owner_id=owner_id)
        return public_url(key)

    def download(self, key: str) -> Optional[Tuple[bytes, str]]:
        """Fetch latest revision of an object as (content, content_type)."""
        grid_out = next(iter(self.bucket.find({"filename": key}).sort("uploadDate", -1).limit(1)), None)
        if grid_out is None:
            return None
        metadata = grid_out.metadata or {}
        return grid_out.read(), metadata.get("content_type", "application/octet-stream")

    def delete(self, key: str) -> bool:
        """Delete every revision stored under a key."""
        deleted = False
        for grid_out in self.bucket.find({"filename": key}):
            self.bucket.delete(grid_out._id)
            deleted = True
        if deleted:
            logger.info("media_deleted", key=key)
        return deleted


def get_media_storage() -> MediaStorage:
    """FastAPI dependency - media storage instance."""
    return MediaStorage()
