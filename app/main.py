"""
BridgeUp - Main Application

FastAPI backend with:
- PostgreSQL for structured data (users, courses, applications, credit ledger)
- MongoDB GridFS for uploaded media (avatars, certificates, project images)
- DeepSeek AI for interview-prep schedules (with local fallback)
- JWT authentication

Run: uvicorn app.main:app --reload
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import __version__
from app.api.routes import api_router
from app.core.config import get_settings
from app.core.errors import setup_error_handlers
from app.core.logging import setup_logging
from app.db.mongodb import init_mongo_indexes, test_mongo_connection
from app.db.postgres import init_postgres_schema, test_postgres_connection

settings = get_settings()
setup_logging(settings)
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and media indexes on startup."""
    try:
        init_postgres_schema()
    except Exception as e:
        logger.warning("database_schema_init_failed", error=str(e))

    try:
        init_mongo_indexes()
    except Exception as e:
        logger.warning("mongodb_index_init_failed", error=str(e))

    logger.info("app_started", version=__version__)
    yield
    logger.info("app_stopped")


# Create FastAPI app
app = FastAPI(
    title="BridgeUp",
    description="""
    Career platform connecting students with recruiters.

    ## Features
    - **Authentication**: JWT-based auth for students and recruiters
    - **Internship Tracker**: Kanban board with AI interview-prep schedules
    - **Skill Library**: Courses that award credits and skills
    - **Proof Gallery / Certificate Vault**: Projects and certificates with images
    - **Calendar / Mentor Connect**: Events and mentor bookings
    - **Recruiter Search**: Candidates ranked by credits, filtered by skills

    ## Credit tiers
    Beginner 0-49, Intermediate 50-99, Advanced 100-199, Expert 200+
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_error_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/", tags=["Health"])
async def root():
    """Basic status."""
    return {"status": "healthy", "app": "BridgeUp", "version": __version__}


@app.get("/health", tags=["Health"])
def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "postgres": "connected" if test_postgres_connection() else "disconnected",
        "mongodb": "connected" if test_mongo_connection() else "disconnected"
    }
