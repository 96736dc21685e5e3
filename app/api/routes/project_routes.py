"""
Proof Gallery Routes

GET /projects - Own projects with images, newest first
POST /projects - Submit a project (multipart, optional images) and earn credits
DELETE /projects/{project_id} - Delete a project and its images
"""

from typing import List, Optional

import structlog
from fastapi import APIRouter, HTTPException, Depends, UploadFile, File, Form
from sqlalchemy import text

from app.db.postgres import get_db_session, execute_raw_sql
from app.core.auth import get_current_student
from app.services.credit_service import PROJECT_CREDITS, award_credits, get_total_credits
from app.services.ranking_service import classify_credits
from app.services.serializers import project_response
from app.services.storage_service import MediaStorage, get_media_storage
from app.utils.file_upload import read_image_upload, project_image_key
from app.utils.json_columns import encode_json
from app.schemas.schemas import (
    CreditSource, ProjectType, ProjectResponse, ProjectCreatedResponse, MessageResponse
)

router = APIRouter(prefix="/projects", tags=["Proof Gallery"])
logger = structlog.get_logger(__name__)

PROJECT_COLUMNS = """
    project_id, student_id, title, description, contribution_summary, project_type,
    tech_stack, github_link, live_link, credits_earned, created_at
"""


def parse_tech_stack(raw: Optional[str]) -> List[str]:
    """'React, Node.js,,SQL ' -> ['React', 'Node.js', 'SQL']"""
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


def load_projects(student_id: int) -> List[ProjectResponse]:
    """Projects for a student with their images, newest first."""
    projects = execute_raw_sql(f"""
        SELECT {PROJECT_COLUMNS} FROM projects
        WHERE student_id = :id
        ORDER BY created_at DESC, project_id DESC
    """, {"id": student_id})

    images = execute_raw_sql("""
        SELECT pi.image_id, pi.project_id, pi.image_url, pi.caption
        FROM project_images pi
        JOIN projects p ON pi.project_id = p.project_id
        WHERE p.student_id = :id
        ORDER BY pi.image_id
    """, {"id": student_id})

    by_project = {}
    for image in images:
        by_project.setdefault(image["project_id"], []).append(image)

    return [project_response(p, by_project.get(p["project_id"], [])) for p in projects]


@router.get("", response_model=List[ProjectResponse])
async def list_projects(student: dict = Depends(get_current_student)):
    """Get own projects."""
    return load_projects(student["user_id"])


@router.post("", response_model=ProjectCreatedResponse, status_code=201)
async def create_project(
    title: str = Form(..., min_length=1, max_length=200),
    project_type: ProjectType = Form(...),
    description: Optional[str] = Form(None),
    contribution_summary: Optional[str] = Form(None),
    tech_stack: Optional[str] = Form(None, description="Comma-separated"),
    github_link: Optional[str] = Form(None),
    live_link: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None, description="Project screenshots"),
    student: dict = Depends(get_current_student),
    storage: MediaStorage = Depends(get_media_storage)
):
    """
    Submit a proof-of-work project.

    Process:
    1. Validate every image (type, size) before anything is written
    2. Insert the project
    3. Upload images under <user_id>/<project_id>/
    4. Award the flat project credits
    """
    uploads = []
    for image in images or []:
        content, _, content_type = await read_image_upload(image)
        uploads.append((image.filename, content, content_type))

    student_id = student["user_id"]
    stored_keys = []

    try:
        with get_db_session() as db:
            result = db.execute(
                text(f"""
                    INSERT INTO projects (student_id, title, description, contribution_summary,
                                          project_type, tech_stack, github_link, live_link, credits_earned)
                    VALUES (:sid, :title, :description, :contribution_summary,
                            :project_type, :tech_stack, :github_link, :live_link, :credits)
                    RETURNING {PROJECT_COLUMNS}
                """),
                {
                    "sid": student_id,
                    "title": title.strip(),
                    "description": description,
                    "contribution_summary": contribution_summary,
                    "project_type": project_type.value,
                    "tech_stack": encode_json(parse_tech_stack(tech_stack)),
                    "github_link": github_link or None,
                    "live_link": live_link or None,
                    "credits": PROJECT_CREDITS
                }
            )
            project = dict(result.fetchone()._mapping)

            image_rows = []
            for filename, content, content_type in uploads:
                key = project_image_key(student_id, project["project_id"], filename)
                url = storage.upload(key, content, content_type, student_id)
                stored_keys.append(key)
                result = db.execute(
                    text("""
                        INSERT INTO project_images (project_id, image_url, object_key)
                        VALUES (:pid, :url, :key)
                        RETURNING image_id, image_url, caption
                    """),
                    {"pid": project["project_id"], "url": url, "key": key}
                )
                image_rows.append(dict(result.fetchone()._mapping))

            award_credits(db, student_id, CreditSource.project, project["project_id"], PROJECT_CREDITS)
            total = get_total_credits(db, student_id)
    except Exception:
        # The rows are rolled back; do not leave orphaned objects behind
        for key in stored_keys:
            storage.delete(key)
        raise

    logger.info("project_created", student_id=student_id, project_id=project["project_id"], images=len(image_rows))

    return ProjectCreatedResponse(
        project=project_response(project, image_rows),
        credits_awarded=PROJECT_CREDITS,
        total_credits=total,
        tier=classify_credits(total)
    )


@router.delete("/{project_id}", response_model=MessageResponse)
async def delete_project(
    project_id: int,
    student: dict = Depends(get_current_student),
    storage: MediaStorage = Depends(get_media_storage)
):
    """
    Delete a project and its stored images.

    Credits already earned for the project are kept.
    """
    with get_db_session() as db:
        result = db.execute(
            text("SELECT project_id FROM projects WHERE project_id = :pid AND student_id = :sid"),
            {"pid": project_id, "sid": student["user_id"]}
        )
        if not result.fetchone():
            raise HTTPException(status_code=404, detail="Project not found")

        result = db.execute(
            text("SELECT object_key FROM project_images WHERE project_id = :pid"),
            {"pid": project_id}
        )
        keys = [r[0] for r in result.fetchall()]

        db.execute(text("DELETE FROM project_images WHERE project_id = :pid"), {"pid": project_id})
        db.execute(text("DELETE FROM projects WHERE project_id = :pid"), {"pid": project_id})

    for key in keys:
        storage.delete(key)

    return MessageResponse(message="Project deleted")
