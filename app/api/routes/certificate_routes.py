"""
Certificate Vault Routes

GET /certificates - Own certificates, newest first
POST /certificates - Upload a certificate image (multipart)
DELETE /certificates/{certificate_id} - Delete a certificate
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Depends, UploadFile, File, Form
from sqlalchemy import text

from app.db.postgres import get_db_session, execute_raw_sql
from app.core.auth import get_current_student
from app.services.serializers import certificate_response
from app.services.storage_service import MediaStorage, get_media_storage
from app.utils.file_upload import read_image_upload, certificate_key
from app.utils.json_columns import to_db_date
from app.schemas.schemas import CertificateResponse, MessageResponse

router = APIRouter(prefix="/certificates", tags=["Certificate Vault"])

CERTIFICATE_COLUMNS = "certificate_id, title, issuer, issue_date, image_url, verified, created_at"


def load_certificates(student_id: int) -> List[CertificateResponse]:
    rows = execute_raw_sql(f"""
        SELECT {CERTIFICATE_COLUMNS} FROM certificates
        WHERE student_id = :id
        ORDER BY created_at DESC, certificate_id DESC
    """, {"id": student_id})
    return [certificate_response(r) for r in rows]


@router.get("", response_model=List[CertificateResponse])
async def list_certificates(student: dict = Depends(get_current_student)):
    """Get own certificates."""
    return load_certificates(student["user_id"])


@router.post("", response_model=CertificateResponse, status_code=201)
async def create_certificate(
    title: str = Form(..., min_length=1, max_length=200),
    issuer: str = Form(..., min_length=1, max_length=200),
    issue_date: Optional[date] = Form(None),
    file: UploadFile = File(..., description="Certificate image"),
    student: dict = Depends(get_current_student),
    storage: MediaStorage = Depends(get_media_storage)
):
    """Upload a certificate. New certificates start unverified."""
    content, _, content_type = await read_image_upload(file)

    key = certificate_key(student["user_id"], file.filename)
    url = storage.upload(key, content, content_type, student["user_id"])

    try:
        with get_db_session() as db:
            result = db.execute(
                text(f"""
                    INSERT INTO certificates (student_id, title, issuer, issue_date, image_url, object_key, verified)
                    VALUES (:sid, :title, :issuer, :issue_date, :url, :key, FALSE)
                    RETURNING {CERTIFICATE_COLUMNS}
                """),
                {
                    "sid": student["user_id"],
                    "title": title.strip(),
                    "issuer": issuer.strip(),
                    "issue_date": to_db_date(issue_date),
                    "url": url,
                    "key": key
                }
            )
            row = dict(result.fetchone()._mapping)
    except Exception:
        storage.delete(key)
        raise

    return certificate_response(row)


@router.delete("/{certificate_id}", response_model=MessageResponse)
async def delete_certificate(
    certificate_id: int,
    student: dict = Depends(get_current_student),
    storage: MediaStorage = Depends(get_media_storage)
):
    """Delete a certificate and its stored image."""
    with get_db_session() as db:
        result = db.execute(
            text("""
                DELETE FROM certificates
                WHERE certificate_id = :cid AND student_id = :sid
                RETURNING object_key
            """),
            {"cid": certificate_id, "sid": student["user_id"]}
        )
        row = result.fetchone()

    if not row:
        raise HTTPException(status_code=404, detail="Certificate not found")

    storage.delete(row[0])
    return MessageResponse(message="Certificate deleted")
