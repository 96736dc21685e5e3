"""
Profile Routes

GET /profile - Get own profile with credits and tier
PUT /profile - Update profile fields (partial)
POST /profile/avatar - Upload avatar image
GET /profile/upload-formats - Get supported image formats
"""

from fastapi import APIRouter, HTTPException, Depends, UploadFile, File
from sqlalchemy import text

from app.db.postgres import get_db_session
from app.core.auth import USER_COLUMNS, get_current_user
from app.utils.file_upload import read_image_upload, avatar_key, get_supported_formats
from app.services.storage_service import MediaStorage, get_media_storage, key_from_url
from app.services.serializers import user_response
from app.schemas.schemas import ProfileUpdate, UserResponse

router = APIRouter(prefix="/profile", tags=["Profile"])

EDITABLE_FIELDS = [
    "full_name", "phone", "university", "company", "bio",
    "github_url", "linkedin_url", "leetcode_url", "gfg_url"
]


@router.get("", response_model=UserResponse)
async def get_profile(user: dict = Depends(get_current_user)):
    """Get current user's profile."""
    return user_response(user)


@router.put("", response_model=UserResponse)
async def update_profile(data: ProfileUpdate, user: dict = Depends(get_current_user)):
    """
    Update profile. Only provided fields are updated.

    Empty strings clear optional fields. Credits are not editable here.
    """
    updates = []
    params = {"id": user["user_id"]}

    for field in data.model_fields_set & set(EDITABLE_FIELDS):
        value = getattr(data, field)
        if field == "full_name" and value is None:
            continue
        if isinstance(value, str) and field != "full_name":
            value = value.strip() or None
        updates.append(f"{field} = :{field}")
        params[field] = value

    if not updates:
        raise HTTPException(status_code=400, detail="No fields to update")

    if "phone" in params and not params["phone"] and not user["email"]:
        raise HTTPException(status_code=400, detail="Phone number is the only login for this account")

    with get_db_session() as db:
        if params.get("phone"):
            result = db.execute(
                text("SELECT user_id FROM users WHERE phone = :phone AND user_id != :id"),
                {"phone": params["phone"], "id": user["user_id"]}
            )
            if result.fetchone():
                raise HTTPException(status_code=409, detail="Phone number already in use")

        result = db.execute(
            text(f"""
                UPDATE users SET {', '.join(sorted(updates))}, updated_at = CURRENT_TIMESTAMP
                WHERE user_id = :id
                RETURNING {USER_COLUMNS}
            """),
            params
        )
        row = dict(result.fetchone()._mapping)

    return user_response(row)


@router.post("/avatar", response_model=UserResponse)
async def upload_avatar(
    file: UploadFile = File(..., description="Avatar image (PNG, JPG, GIF, WEBP)"),
    user: dict = Depends(get_current_user),
    storage: MediaStorage = Depends(get_media_storage)
):
    """
    Upload a new avatar. The public URL is stored on the profile and the
    previous avatar object is removed once the profile points at the new one.
    """
    content, ext, content_type = await read_image_upload(file)

    url = storage.upload(avatar_key(user["user_id"], ext), content, content_type, user["user_id"])

    with get_db_session() as db:
        result = db.execute(
            text(f"""
                UPDATE users SET avatar_url = :url, updated_at = CURRENT_TIMESTAMP
                WHERE user_id = :id
                RETURNING {USER_COLUMNS}
            """),
            {"url": url, "id": user["user_id"]}
        )
        row = dict(result.fetchone()._mapping)

    old_key = key_from_url(user["avatar_url"])
    if old_key and old_key != key_from_url(url):
        storage.delete(old_key)

    return user_response(row)


@router.get("/upload-formats")
async def get_upload_formats():
    """Get supported image formats."""
    return get_supported_formats()
