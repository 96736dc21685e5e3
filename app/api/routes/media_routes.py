"""
Media Routes

GET /media/{key} - Serve an uploaded object (the public URL returned at upload)
"""

from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import Response

from app.services.storage_service import MediaStorage, get_media_storage

router = APIRouter(prefix="/media", tags=["Media"])


@router.get("/{key:path}")
def get_media(key: str, storage: MediaStorage = Depends(get_media_storage)):
    """Stream a stored object by key."""
    found = storage.download(key)
    if found is None:
        raise HTTPException(status_code=404, detail="File not found")

    content, content_type = found
    return Response(
        content=content,
        media_type=content_type,
        headers={"Cache-Control": "public, max-age=86400"}
    )
