"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.auth_routes import router as auth_router
from app.api.routes.profile_routes import router as profile_router
from app.api.routes.course_routes import router as course_router
from app.api.routes.project_routes import router as project_router
from app.api.routes.certificate_routes import router as certificate_router
from app.api.routes.application_routes import router as application_router
from app.api.routes.calendar_routes import router as calendar_router
from app.api.routes.mentor_routes import router as mentor_router
from app.api.routes.candidate_routes import router as candidate_router
from app.api.routes.credit_routes import router as credit_router
from app.api.routes.student_routes import router as student_router
from app.api.routes.media_routes import router as media_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(profile_router)
api_router.include_router(course_router)
api_router.include_router(project_router)
api_router.include_router(certificate_router)
api_router.include_router(application_router)
api_router.include_router(calendar_router)
api_router.include_router(mentor_router)
api_router.include_router(candidate_router)
api_router.include_router(credit_router)
api_router.include_router(student_router)
api_router.include_router(media_router)
